"""Banking domain exceptions.

This module defines the error taxonomy of the FinTS session lifecycle.
Expired and challenge conditions carry actionable guidance (where to
complete the setup) instead of raw remote error text.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from bankster.domain.shared.exceptions import DomainException, ErrorCode

if TYPE_CHECKING:
    from bankster.domain.banking.value_objects.tan_challenge import TANChallenge

# =============================================================================
# Base Banking Exception
# =============================================================================


class BankingDomainError(DomainException):
    """Base exception for banking domain errors."""


# =============================================================================
# Authentication Lifecycle Exceptions
# =============================================================================


class AuthenticationExpiredError(BankingDomainError):
    """Raised when the authentication passed its validity window.

    Unattended renewal was impossible or failed, so the user has to
    complete the TAN setup again.
    """

    def __init__(self, account: str, days_expired: int = 0) -> None:
        message = f"FinTS authentication for account '{account}' has expired"
        if days_expired > 0:
            message += f" ({days_expired} days ago)"
        message += ". Please re-authenticate via the FinTS setup."
        super().__init__(
            message=message,
            code=ErrorCode.AUTHENTICATION_EXPIRED,
            details={"account": account, "days_expired": days_expired},
        )
        self.account = account
        self.days_expired = days_expired


class ChallengeRequiredError(BankingDomainError):
    """Raised when an operation demands a TAN from a human.

    Surfaced to the caller instead of being retried.
    """

    def __init__(self, account: str, challenge: TANChallenge | None = None) -> None:
        super().__init__(
            message=(
                f"FinTS operation for account '{account}' requires TAN input. "
                "Please complete authentication via the FinTS setup."
            ),
            code=ErrorCode.CHALLENGE_REQUIRED,
            details={"account": account},
        )
        self.account = account
        self.challenge = challenge


class BankingNotConfiguredError(AuthenticationExpiredError):
    """Raised when an account has no TAN mode configured yet.

    Same remedy as an expired authentication: run the FinTS setup.
    """

    def __init__(self, account: str) -> None:
        BankingDomainError.__init__(
            self,
            message=(
                f"FinTS account '{account}' not yet configured. Please complete "
                "the TAN mode setup first."
            ),
            code=ErrorCode.BANK_NOT_CONFIGURED,
            details={"account": account},
        )
        self.account = account
        self.days_expired = 0


# =============================================================================
# Remote Exceptions
# =============================================================================


class RemoteOperationFailedError(BankingDomainError):
    """Raised when the protocol client reports any other failure.

    The message keeps the remote text since it is the only signal the
    error classifier has.
    """

    def __init__(self, detail: str, operation: str | None = None) -> None:
        details: dict[str, Any] = {"detail": detail}
        if operation:
            details["operation"] = operation
        super().__init__(
            message=detail,
            code=ErrorCode.REMOTE_OPERATION_FAILED,
            details=details,
        )
        self.detail = detail


class BankAccountNotFoundError(BankingDomainError):
    """Raised when the bank reports no usable SEPA account."""

    def __init__(self, account: str) -> None:
        super().__init__(
            message=f"No SEPA account available for '{account}'",
            code=ErrorCode.ACCOUNT_NOT_FOUND,
            details={"account": account},
        )


# =============================================================================
# Setup Exceptions
# =============================================================================


class SetupSessionExpiredError(BankingDomainError):
    """Raised when in-flight setup state is missing or unreadable."""

    def __init__(self, account: str) -> None:
        super().__init__(
            message="Session expired. Please start over.",
            code=ErrorCode.SETUP_SESSION_EXPIRED,
            details={"account": account},
        )
        self.account = account
