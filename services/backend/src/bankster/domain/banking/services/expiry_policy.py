"""Expiry rules for FinTS authentication records."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Optional

from bankster.domain.shared.time import ensure_tz_aware

if TYPE_CHECKING:
    from bankster.domain.banking.entities import AuthRecord
    from bankster_config.settings import Settings

DEFAULT_VALIDITY_DAYS = 90
DEFAULT_WARNING_DAYS = 7

# Returned by days_until_expiry() when no expiry is known; check
# is_expired() first to tell it apart from "expired yesterday".
NO_EXPIRY_DAYS = -1


@dataclass(frozen=True)
class ExpiryPolicy:
    """Pure expiry checks over an AuthRecord and a point in time.

    A missing record or a missing ``auth_expires`` always counts as
    expired. Day counts use floor division of the remaining time, so they
    turn negative as soon as ``now`` passes ``auth_expires``.
    """

    validity_days: int = DEFAULT_VALIDITY_DAYS
    warning_days: int = DEFAULT_WARNING_DAYS

    @classmethod
    def from_settings(cls, settings: Settings) -> ExpiryPolicy:
        return cls(
            validity_days=settings.fints_auth_validity_days,
            warning_days=settings.fints_auth_warning_days,
        )

    def expires_at(self, now: datetime) -> datetime:
        return ensure_tz_aware(now) + timedelta(days=self.validity_days)

    def is_expired(self, record: Optional[AuthRecord], now: datetime) -> bool:
        expires = _expires(record)
        if expires is None:
            return True
        return ensure_tz_aware(now) >= expires

    def needs_warning(
        self,
        record: Optional[AuthRecord],
        now: datetime,
        threshold_days: Optional[int] = None,
    ) -> bool:
        expires = _expires(record)
        if expires is None:
            return True
        if threshold_days is None:
            threshold_days = self.warning_days
        return ensure_tz_aware(now) + timedelta(days=threshold_days) >= expires

    def days_until_expiry(self, record: Optional[AuthRecord], now: datetime) -> int:
        expires = _expires(record)
        if expires is None:
            return NO_EXPIRY_DAYS
        return (expires - ensure_tz_aware(now)).days

    def days_expired(self, record: Optional[AuthRecord], now: datetime) -> int:
        """Whole days since expiry, 0 if unknown or not yet expired."""
        if _expires(record) is None:
            return 0
        return max(0, -self.days_until_expiry(record, now))


def _expires(record: Optional[AuthRecord]) -> Optional[datetime]:
    if record is None or record.auth_expires is None:
        return None
    return ensure_tz_aware(record.auth_expires)
