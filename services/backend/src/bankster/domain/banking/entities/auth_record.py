"""Authentication record entity."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional

from bankster.domain.banking.value_objects.tan_method import is_unattended_mode
from bankster.domain.shared.time import utc_now


@dataclass
class AuthRecord:
    """
    Persisted FinTS authentication state of one account.

    ``persisted_state`` is owned by the protocol client: it is stored and
    forwarded, never inspected, and always replaced as a whole.

    Invariants:
    - ``auth_expires == last_auth + validity`` whenever set through
      mark_authenticated(); migrated rows may differ, expiry checks only
      read ``auth_expires``
    - Only mark_authenticated() moves ``last_auth``/``auth_expires``
      forward and resets the warning bookkeeping
    """

    account: str
    tan_mode: Optional[str] = None
    tan_medium: Optional[str] = None
    persisted_state: Optional[bytes] = None
    last_auth: Optional[datetime] = None
    auth_expires: Optional[datetime] = None
    warning_level: int = 0
    last_warning_sent: Optional[datetime] = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    @classmethod
    def empty(cls, account: str) -> AuthRecord:
        """Create the unconfigured record used before the first setup."""
        return cls(account=account)

    def is_configured(self) -> bool:
        return bool(self.tan_mode and str(self.tan_mode).strip())

    @property
    def uses_unattended_mode(self) -> bool:
        return is_unattended_mode(self.tan_mode)

    def mark_authenticated(
        self,
        tan_mode: Optional[str],
        tan_medium: Optional[str],
        persisted_state: Optional[bytes],
        now: datetime,
        validity_days: int,
    ) -> None:
        """Record a successful full authentication."""
        self.tan_mode = tan_mode
        self.tan_medium = tan_medium
        self.persisted_state = persisted_state
        self.last_auth = now
        self.auth_expires = now + timedelta(days=validity_days)
        self.warning_level = 0
        self.last_warning_sent = None
        self.updated_at = now

    def mark_expired(self, now: datetime) -> None:
        """Force the next expiry check to fail."""
        self.auth_expires = now
        self.updated_at = now

    def replace_persisted_state(self, persisted_state: bytes, now: datetime) -> None:
        self.persisted_state = persisted_state
        self.updated_at = now

    def record_warning(self, level: int, now: datetime) -> None:
        self.warning_level = level
        self.last_warning_sent = now
        self.updated_at = now

    def __repr__(self) -> str:
        return (
            f"AuthRecord(account={self.account}, tan_mode={self.tan_mode}, "
            f"tan_medium={self.tan_medium}, auth_expires={self.auth_expires}, "
            f"warning_level={self.warning_level})"
        )
