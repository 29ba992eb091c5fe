"""
Error Handling Module

Defines domain exceptions and error categories for the lifecycle core.
Domain exceptions are pure and have no external dependencies.
Expected outcomes (not found, expired, wrong password, gone) are reported
as tagged results by the application layer; the categories below give
each of them a distinct user-facing message.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCategory(Enum):
    """Error category enumeration for structured error handling."""

    NOT_FOUND = "not_found"
    EXPIRED = "expired"
    DOWNLOAD_LIMIT_REACHED = "download_limit_reached"
    PASSWORD_REQUIRED = "password_required"
    WRONG_PASSWORD = "wrong_password"
    GONE = "gone"
    VALIDATION_ERROR = "validation_error"
    STORAGE_FULL = "storage_full"
    STORAGE_ERROR = "storage_error"
    SYSTEM_ERROR = "system_error"


# User-friendly error messages with actionable guidance
ERROR_MESSAGES: Dict[ErrorCategory, Dict[str, str]] = {
    ErrorCategory.NOT_FOUND: {
        "title": "Link Not Found",
        "message": "No file is shared under this code.",
        "action": "Check the code for typos and ask the sender for a new link.",
    },
    ErrorCategory.EXPIRED: {
        "title": "Link Expired",
        "message": "This link has passed its expiry date.",
        "action": "Ask the sender to upload the file again.",
    },
    ErrorCategory.DOWNLOAD_LIMIT_REACHED: {
        "title": "Download Limit Reached",
        "message": "This link has been downloaded the maximum number of times.",
        "action": "Ask the sender to upload the file again.",
    },
    ErrorCategory.PASSWORD_REQUIRED: {
        "title": "Password Required",
        "message": "This file is protected by a password.",
        "action": "Enter the password you received from the sender.",
    },
    ErrorCategory.WRONG_PASSWORD: {
        "title": "Incorrect Password",
        "message": "The password you entered does not match.",
        "action": "Check the password and try again.",
    },
    ErrorCategory.GONE: {
        "title": "Link No Longer Available",
        "message": "This link expired or ran out of downloads while you were on the page.",
        "action": "Ask the sender for a new link.",
    },
    ErrorCategory.VALIDATION_ERROR: {
        "title": "Invalid Options",
        "message": "The link options are not valid.",
        "action": "Use a positive download limit and expiry period.",
    },
    ErrorCategory.STORAGE_FULL: {
        "title": "Storage Full",
        "message": "There is no room left to store this file.",
        "action": "Try again later or upload a smaller file.",
    },
    ErrorCategory.STORAGE_ERROR: {
        "title": "Storage Error",
        "message": "The file could not be read from or written to storage.",
        "action": "Please try again. If the problem persists, contact support.",
    },
    ErrorCategory.SYSTEM_ERROR: {
        "title": "System Error",
        "message": "An unexpected error occurred while processing your request.",
        "action": "Please try again later. If the problem persists, contact support.",
    },
}


# ============================================================================
# Domain Exceptions (Pure - No External Dependencies)
# ============================================================================

class DomainError(Exception):
    """
    Base exception for all domain errors.

    They can optionally wrap original errors for context.
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        """
        Initialize domain error.

        Args:
            message: Error message
            original_error: Optional original exception that caused this error
        """
        super().__init__(message)
        self.original_error = original_error


class ValidationError(DomainError):
    """Raised when link creation options are malformed."""
    pass


class BlobStorageError(DomainError):
    """
    Raised when the blob storage medium fails a read or write.

    Storage failures are surfaced unchanged to the caller.
    """
    pass


class StorageFullError(BlobStorageError):
    """Raised when the storage medium has no space or quota left."""
    pass


class CodeGenerationError(DomainError):
    """Raised when no unused short code was found within the allowed attempts."""
    pass


# ============================================================================
# Application Layer Exceptions
# ============================================================================

class ApplicationError(Exception):
    """
    Base application error with category and user-friendly messaging.

    Bridges domain errors with user-facing messages for the collaborator UI.
    """

    def __init__(
        self,
        category: ErrorCategory,
        technical_message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize application error.

        Args:
            category: Error category
            technical_message: Technical error details for logging
            context: Additional context information
        """
        self.category = category
        self.technical_message = technical_message or ""
        self.context = context or {}

        error_info = describe(category)
        self.title = error_info["title"]
        self.message = error_info["message"]
        self.action = error_info["action"]

        super().__init__(self.message)

    @classmethod
    def from_domain_error(cls, error: DomainError) -> "ApplicationError":
        """Map a domain exception onto its user-facing category."""
        if isinstance(error, ValidationError):
            category = ErrorCategory.VALIDATION_ERROR
        elif isinstance(error, StorageFullError):
            category = ErrorCategory.STORAGE_FULL
        elif isinstance(error, BlobStorageError):
            category = ErrorCategory.STORAGE_ERROR
        else:
            category = ErrorCategory.SYSTEM_ERROR
        return cls(category, technical_message=str(error))

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert error to dictionary for the presentation layer.

        Returns:
            Dictionary with error information
        """
        return {
            "error": self.category.value,
            "title": self.title,
            "message": self.message,
            "action": self.action,
        }


def describe(category: ErrorCategory) -> Dict[str, str]:
    """Return the title/message/action triple for a category."""
    return ERROR_MESSAGES.get(category, ERROR_MESSAGES[ErrorCategory.SYSTEM_ERROR])
