"""Open FinTS sessions for accounts, renewing expired ones up front."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from bankster.application.services.auto_renewal_engine import AutoRenewalEngine
from bankster.application.services.bank_session import BankSession, build_handle
from bankster.domain.banking.exceptions import (
    AuthenticationExpiredError,
    BankingNotConfiguredError,
)
from bankster.domain.shared.time import Clock, utc_now

if TYPE_CHECKING:
    from bankster.application.factories import BankingServiceFactory
    from bankster.domain.banking.ports import BankingProtocolClientPort
    from bankster.domain.banking.repositories import AuthRecordRepository
    from bankster.domain.banking.services import ExpiryPolicy
    from bankster.domain.banking.value_objects import BankAccountConfig

logger = logging.getLogger(__name__)


class SessionFactory:
    """Build ready-to-use sessions from the stored auth record."""

    def __init__(
        self,
        client: BankingProtocolClientPort,
        repository: AuthRecordRepository,
        renewal_engine: AutoRenewalEngine,
        policy: ExpiryPolicy,
        clock: Clock = utc_now,
    ):
        self._client = client
        self._repository = repository
        self._renewal_engine = renewal_engine
        self._policy = policy
        self._clock = clock

    @classmethod
    def from_factory(cls, factory: BankingServiceFactory) -> SessionFactory:
        return cls(
            client=factory.protocol_client(),
            repository=factory.auth_record_repository(),
            renewal_engine=AutoRenewalEngine.from_factory(factory),
            policy=factory.expiry_policy(),
            clock=factory.clock,
        )

    async def open_session(self, config: BankAccountConfig) -> BankSession:
        """
        Open a session for an account.

        An expired session of an unattended account is renewed before any
        business call, since it would otherwise fail later with a less
        telling error.

        Raises
        ------
        BankingNotConfiguredError
            If the account never completed the TAN setup
        AuthenticationExpiredError
            If the authentication expired and could not be renewed
        """
        account = config.account
        record = await self._repository.find_by_account(account)

        if record is None or not record.is_configured():
            raise BankingNotConfiguredError(account)

        session = BankSession(
            config=config,
            handle=build_handle(self._client, config, record),
            record=record,
        )

        now = self._clock()
        if not self._policy.is_expired(record, now):
            return session

        days_expired = self._policy.days_expired(record, now)
        if not self._renewal_engine.can_auto_renew(session):
            logger.warning(
                "Authentication for account %s expired %d days ago and cannot "
                "be renewed automatically",
                account,
                days_expired,
            )
            raise AuthenticationExpiredError(account, days_expired)

        logger.info(
            "Expired authentication detected for account %s, attempting auto-renewal",
            account,
        )
        if not await self._renewal_engine.attempt_auto_renewal(session):
            raise AuthenticationExpiredError(account, days_expired)

        return session
