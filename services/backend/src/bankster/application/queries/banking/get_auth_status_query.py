"""Query the FinTS authentication status of accounts."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from bankster.application.dtos.banking import AuthStatus
from bankster.domain.shared.time import Clock, utc_now

if TYPE_CHECKING:
    from datetime import datetime

    from bankster.application.factories import BankingServiceFactory
    from bankster.domain.banking.entities import AuthRecord
    from bankster.domain.banking.repositories import AuthRecordRepository
    from bankster.domain.banking.services import ExpiryPolicy


class GetAuthStatusQuery:
    """Read-only view on the stored auth records."""

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
    def from_factory(cls, factory: BankingServiceFactory) -> GetAuthStatusQuery:
        return cls(
            repository=factory.auth_record_repository(),
            policy=factory.expiry_policy(),
            clock=factory.clock,
        )

    async def execute(self, account: str) -> AuthStatus:
        record = await self._repository.find_by_account(account)
        return self._to_status(account, record, self._clock())

    async def execute_all(self) -> list[AuthStatus]:
        now = self._clock()
        records = await self._repository.find_all()
        return [self._to_status(r.account, r, now) for r in records]

    def _to_status(
        self,
        account: str,
        record: Optional[AuthRecord],
        now: datetime,
    ) -> AuthStatus:
        if record is None:
            return AuthStatus(
                account=account,
                exists=False,
                is_configured=False,
                is_expired=True,
                needs_warning=True,
                days_until_expiry=self._policy.days_until_expiry(None, now),
            )

        return AuthStatus(
            account=account,
            exists=True,
            is_configured=record.is_configured(),
            is_expired=self._policy.is_expired(record, now),
            needs_warning=self._policy.needs_warning(record, now),
            days_until_expiry=self._policy.days_until_expiry(record, now),
            tan_mode=record.tan_mode,
            tan_medium=record.tan_medium,
            last_auth=record.last_auth,
            auth_expires=record.auth_expires,
        )
