"""
Access Grant Service

Issues short-lived HMAC-signed grants proving that the password of a link
was verified. The component that releases file bytes checks the grant,
so a caller cannot skip the password challenge by consuming directly.
"""

import hashlib
import hmac
import secrets
from datetime import datetime, timedelta
from typing import Optional

DEFAULT_GRANT_TTL_SECONDS = 300


class AccessGrantSigner:
    """
    Signs and validates access grants.

    Grant format: `<link_id>.<expires epoch seconds>.<hex signature>`.
    """

    def __init__(
        self,
        secret_key: Optional[str] = None,
        ttl_seconds: int = DEFAULT_GRANT_TTL_SECONDS,
    ):
        """
        Initialize AccessGrantSigner.

        Args:
            secret_key: Secret key for HMAC signing (generated per process if not provided)
            ttl_seconds: Grant lifetime in seconds
        """
        self.secret_key = secret_key or self._generate_secret_key()
        self.ttl = timedelta(seconds=ttl_seconds)

    @staticmethod
    def _generate_secret_key(length: int = 32) -> str:
        """Generate a cryptographically secure secret key."""
        return secrets.token_hex(length)

    def issue(self, link_id: str, now: datetime) -> str:
        """
        Issue a grant for a link.

        Args:
            link_id: Link the grant applies to
            now: Current UTC time

        Returns:
            Encoded grant string
        """
        expires = int((now + self.ttl).timestamp())
        return f"{link_id}.{expires}.{self._sign(link_id, expires)}"

    def validate(self, grant: Optional[str], link_id: str, now: datetime) -> bool:
        """
        Validate a grant for a link at a given instant.

        Returns:
            True if the grant was issued for link_id, is unexpired and untampered
        """
        if not grant:
            return False
        try:
            grant_link_id, expires, signature = grant.rsplit(".", 2)
            expires = int(expires)
        except ValueError:
            return False

        if grant_link_id != link_id or now.timestamp() > expires:
            return False

        # Use constant-time comparison to prevent timing attacks
        return hmac.compare_digest(signature, self._sign(link_id, expires))

    def _sign(self, link_id: str, expires: int) -> str:
        message = f"{link_id}:{expires}"
        return hmac.new(
            self.secret_key.encode("utf-8"), message.encode("utf-8"), hashlib.sha256
        ).hexdigest()
