"""DTOs for authentication status and expiry warnings."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class AuthStatus:
    """Authentication status of one account for overview pages."""

    account: str
    exists: bool
    is_configured: bool
    is_expired: bool
    needs_warning: bool
    days_until_expiry: int
    tan_mode: Optional[str] = None
    tan_medium: Optional[str] = None
    last_auth: Optional[datetime] = None
    auth_expires: Optional[datetime] = None

    @property
    def needs_setup(self) -> bool:
        return not self.is_configured or self.is_expired

    def to_dict(self) -> dict:
        return {
            "account": self.account,
            "exists": self.exists,
            "is_configured": self.is_configured,
            "is_expired": self.is_expired,
            "needs_warning": self.needs_warning,
            "days_until_expiry": self.days_until_expiry,
            "tan_mode": self.tan_mode,
            "tan_medium": self.tan_medium,
            "last_auth": self.last_auth.isoformat() if self.last_auth else None,
            "auth_expires": self.auth_expires.isoformat() if self.auth_expires else None,
        }


@dataclass(frozen=True)
class ExpiryWarning:
    """A warning raised for an account approaching or past expiry."""

    account: str
    level: int
    days_until_expiry: int
    is_expired: bool
    auth_expires: Optional[datetime] = None
