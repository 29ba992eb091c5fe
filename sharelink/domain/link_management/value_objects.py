"""
Link Management Value Objects

Immutable value objects for short codes and link creation options.
"""

import math
import secrets
import string
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from random import Random
from typing import Optional

from ..errors import ValidationError


def _latest_representable_expiry() -> timedelta:
    """Longest lifetime whose expiry time still fits in a datetime."""
    return datetime.max.replace(tzinfo=timezone.utc) - datetime.now(timezone.utc)


@dataclass(frozen=True)
class ShortCode:
    """
    Value object representing a short, human-typable link code.

    Code length scales with the requested lifetime: short-lived links get
    shorter codes, long-lived links get longer ones.
    """
    value: str

    ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits

    # (max lifetime in days, code length), checked in order
    LENGTH_POLICY = ((1, 4), (7, 5), (30, 6))
    MAX_LENGTH = 8

    def __post_init__(self):
        if not self.value or not all(c in self.ALPHABET for c in self.value):
            raise ValidationError(f"Invalid short code: {self.value!r}")

    @classmethod
    def length_for_lifetime(cls, lifetime: timedelta) -> int:
        """
        Get the code length for a link lifetime.

        Args:
            lifetime: Requested link lifetime

        Returns:
            4 for up to 1 day, 5 up to 7 days, 6 up to 30 days, otherwise 8
        """
        days = lifetime / timedelta(days=1)
        for max_days, length in cls.LENGTH_POLICY:
            if days <= max_days:
                return length
        return cls.MAX_LENGTH

    @classmethod
    def generate(cls, lifetime: timedelta, rng: Optional[Random] = None) -> "ShortCode":
        """
        Generate a random code sized for the given lifetime.

        Each position is drawn uniformly from the 62-symbol alphabet.

        Args:
            lifetime: Requested link lifetime
            rng: Random source (defaults to the OS CSPRNG)

        Returns:
            New ShortCode instance
        """
        rng = rng or secrets.SystemRandom()
        length = cls.length_for_lifetime(lifetime)
        return cls("".join(rng.choice(cls.ALPHABET) for _ in range(length)))

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class LinkOptions:
    """
    Value object for link creation options.

    An empty password is treated as no password.
    """
    expiry: timedelta
    password: Optional[str] = None
    download_limit: Optional[int] = None

    def __post_init__(self):
        if self.password == "":
            object.__setattr__(self, "password", None)

        if not isinstance(self.expiry, timedelta) or self.expiry <= timedelta(0):
            raise ValidationError(f"Expiry must be a positive duration, got {self.expiry!r}")
        if self.expiry >= _latest_representable_expiry():
            raise ValidationError(f"Expiry is too far in the future: {self.expiry!r}")

        if self.download_limit is not None:
            if isinstance(self.download_limit, bool) or not isinstance(self.download_limit, int):
                raise ValidationError(
                    f"Download limit must be an integer, got {self.download_limit!r}"
                )
            if self.download_limit <= 0:
                raise ValidationError(
                    f"Download limit must be positive, got {self.download_limit}"
                )

    @classmethod
    def from_days(
        cls,
        expiry_days: float,
        password: Optional[str] = None,
        download_limit: Optional[int] = None,
    ) -> "LinkOptions":
        """
        Create options from an expiry expressed in days.

        Raises:
            ValidationError: If expiry_days is not a positive finite number or the limit is invalid
        """
        if isinstance(expiry_days, bool) or not isinstance(expiry_days, (int, float)):
            raise ValidationError(f"Expiry days must be a number, got {expiry_days!r}")
        if isinstance(expiry_days, float) and not math.isfinite(expiry_days):
            raise ValidationError(f"Expiry days must be finite, got {expiry_days}")
        if expiry_days <= 0:
            raise ValidationError(f"Expiry days must be positive, got {expiry_days}")
        try:
            expiry = timedelta(days=expiry_days)
        except OverflowError as e:
            raise ValidationError(f"Expiry days out of range: {expiry_days}", e)
        return cls(
            expiry=expiry,
            password=password,
            download_limit=download_limit,
        )

    @property
    def expiry_days(self) -> float:
        return self.expiry / timedelta(days=1)
