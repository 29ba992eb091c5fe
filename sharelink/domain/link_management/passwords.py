"""
Password Hashing

Salted PBKDF2 digests for link passwords, produced and checked by
werkzeug.security. Plaintext passwords are never persisted.
"""

from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

DEFAULT_ITERATIONS = 200_000
HASH_ALGORITHM = "sha256"


class PasswordHasher:
    """Creates and verifies `pbkdf2:sha256:<iterations>$<salt>$<hash>` digests."""

    def __init__(self, iterations: int = DEFAULT_ITERATIONS, salt_length: int = 16):
        self.iterations = iterations
        self.salt_length = salt_length

    @property
    def method(self) -> str:
        return f"pbkdf2:{HASH_ALGORITHM}:{self.iterations}"

    def hash(self, password: str) -> str:
        """
        Hash a plaintext password with a fresh random salt.

        Args:
            password: Plaintext password

        Returns:
            Encoded digest string
        """
        return generate_password_hash(password, method=self.method, salt_length=self.salt_length)

    def verify(self, password: Optional[str], encoded: Optional[str]) -> bool:
        """
        Check a candidate password against an encoded digest.

        Iterations are read from the digest itself. Malformed digests
        never verify.
        """
        if password is None or not encoded:
            return False
        try:
            return check_password_hash(encoded, password)
        except (TypeError, ValueError):
            return False
