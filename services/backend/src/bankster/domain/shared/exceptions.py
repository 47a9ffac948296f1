"""Shared domain exceptions and error codes.

This module defines the base exception hierarchy and error codes for the
entire domain layer. All domain exceptions should inherit from DomainException
so that callers (import job, setup interface) can handle them uniformly.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Stable error codes for callers.

    These codes are part of the public contract. Should not be changed.
    """

    # Not Found Errors
    ACCOUNT_NOT_FOUND = "ACCOUNT_NOT_FOUND"

    # Banking Errors
    BANK_NOT_CONFIGURED = "BANK_NOT_CONFIGURED"
    AUTHENTICATION_EXPIRED = "AUTHENTICATION_EXPIRED"
    CHALLENGE_REQUIRED = "CHALLENGE_REQUIRED"
    REMOTE_OPERATION_FAILED = "REMOTE_OPERATION_FAILED"
    SETUP_SESSION_EXPIRED = "SETUP_SESSION_EXPIRED"

    # Security Errors
    ENCRYPTION_FAILED = "ENCRYPTION_FAILED"
    DECRYPTION_FAILED = "DECRYPTION_FAILED"

    # General Errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


class DomainException(Exception):  # NOQA: N818
    """Base exception for all domain-related errors.

    Attributes
    ----------
    message
        Human-readable error message (safe for end users)
    code
        Stable error code for programmatic handling
    details
        Optional additional context (logged but not exposed to users)
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code.value!r}, "
            f"details={self.details!r})"
        )
