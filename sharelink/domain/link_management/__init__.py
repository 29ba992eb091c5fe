"""
Link Management Domain

Issues short-code links, evaluates their validity and tracks downloads.
"""

from .access_grants import AccessGrantSigner
from .entities import LinkRecord
from .passwords import PasswordHasher
from .repositories import LinkRepository
from .services import LinkRegistry
from .value_objects import LinkOptions, ShortCode

__all__ = [
    "AccessGrantSigner",
    "LinkOptions",
    "LinkRecord",
    "LinkRegistry",
    "LinkRepository",
    "PasswordHasher",
    "ShortCode",
]
