"""Escalate warnings for FinTS authentications that run out."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING

from bankster.application.dtos.banking import ExpiryWarning
from bankster.domain.shared.time import Clock, utc_now

if TYPE_CHECKING:
    from bankster.application.factories import BankingServiceFactory
    from bankster.domain.banking.entities import AuthRecord
    from bankster.domain.banking.repositories import AuthRecordRepository
    from bankster.domain.banking.services import ExpiryPolicy

logger = logging.getLogger(__name__)

WARNING_LEVEL_NONE = 0
WARNING_LEVEL_EXPIRING = 1
WARNING_LEVEL_EXPIRED = 2


class ExpiryWarningCommand:
    """Scan all records and report the ones whose warning level rose.

    Each level is reported once per authentication: ``warning_level`` and
    ``last_warning_sent`` are only written when the level increases, and
    a fresh authentication resets both.
    """

    def __init__(
        self,
        repository: AuthRecordRepository,
        policy: ExpiryPolicy,
        clock: Clock = utc_now,
    ):
        self._repository = repository
        self._policy = policy
        self._clock = clock

    @classmethod
    def from_factory(cls, factory: BankingServiceFactory) -> ExpiryWarningCommand:
        return cls(
            repository=factory.auth_record_repository(),
            policy=factory.expiry_policy(),
            clock=factory.clock,
        )

    async def execute(self) -> list[ExpiryWarning]:
        now = self._clock()
        warnings: list[ExpiryWarning] = []

        for record in await self._repository.find_all():
            if not record.is_configured():
                continue

            level = self._level(record, now)
            if level <= record.warning_level:
                continue

            record.record_warning(level, now)
            await self._repository.save(record)

            warning = ExpiryWarning(
                account=record.account,
                level=level,
                days_until_expiry=self._policy.days_until_expiry(record, now),
                is_expired=level == WARNING_LEVEL_EXPIRED,
                auth_expires=record.auth_expires,
            )
            logger.warning(
                "FinTS authentication for account %s %s (expires %s)",
                record.account,
                "has expired" if warning.is_expired else "expires soon",
                record.auth_expires,
            )
            warnings.append(warning)

        return warnings

    def _level(self, record: AuthRecord, now: datetime) -> int:
        if self._policy.is_expired(record, now):
            return WARNING_LEVEL_EXPIRED
        if self._policy.needs_warning(record, now):
            return WARNING_LEVEL_EXPIRING
        return WARNING_LEVEL_NONE
