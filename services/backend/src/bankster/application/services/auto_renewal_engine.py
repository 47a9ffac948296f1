"""Unattended re-authentication of expired FinTS sessions."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING

from bankster.application.services.bank_session import build_handle
from bankster.domain.shared.time import Clock, utc_now

if TYPE_CHECKING:
    from bankster.application.factories import BankingServiceFactory
    from bankster.application.services.bank_session import BankSession
    from bankster.domain.banking.ports import BankingProtocolClientPort
    from bankster.domain.banking.repositories import AuthRecordRepository
    from bankster.domain.banking.services import ExpiryPolicy

logger = logging.getLogger(__name__)


class AutoRenewalEngine:
    """Renew the authentication of accounts in the unattended TAN mode.

    A renewal always starts from a clean anonymous dialog built from the
    account configuration; the persisted session is not reused.
    """

    def __init__(
        self,
        client: BankingProtocolClientPort,
        repository: AuthRecordRepository,
        policy: ExpiryPolicy,
        clock: Clock = utc_now,
    ):
        self._client = client
        self._repository = repository
        self._policy = policy
        self._clock = clock

    @classmethod
    def from_factory(cls, factory: BankingServiceFactory) -> AutoRenewalEngine:
        return cls(
            client=factory.protocol_client(),
            repository=factory.auth_record_repository(),
            policy=factory.expiry_policy(),
            clock=factory.clock,
        )

    def can_auto_renew(self, session: BankSession) -> bool:
        record = session.record
        if record is None:
            return False
        if not record.uses_unattended_mode:
            return False
        return not session.renewal_attempted

    async def attempt_auto_renewal(self, session: BankSession) -> bool:
        """Try to re-authenticate without human interaction.

        Returns
        -------
        True if the record now holds a fresh authentication. Failures are
        logged and reported as False, never raised.
        """
        # Set before any remote call so a failing renewal cannot recurse
        session.renewal_attempted = True
        account = session.account

        logger.info("Attempting auto-renewal for account %s", account)

        record = session.record
        if record is None:
            logger.warning("Auto-renewal failed: no FinTS state for account %s", account)
            return False

        try:
            fresh_handle = self._client.create(session.config.credentials)
            self._client.select_unattended_mode(fresh_handle)

            login = self._client.login(fresh_handle)
            if login.needs_challenge:
                logger.warning(
                    "Auto-renewal failed: TAN required for account %s",
                    account,
                )
                return False

            # The session keeps its old state until the renewal is stored
            renewed = replace(record)
            renewed.mark_authenticated(
                tan_mode=record.tan_mode,
                tan_medium=record.tan_medium,
                persisted_state=self._client.persist(fresh_handle),
                now=self._clock(),
                validity_days=self._policy.validity_days,
            )
            handle = build_handle(self._client, session.config, renewed)
            await self._repository.save(renewed)

        except Exception as e:  # NOQA: BLE001
            logger.error("Auto-renewal failed for account %s: %s", account, e)
            return False

        session.record = renewed
        session.handle = handle
        # A later, independent renewal need in this process is still allowed
        session.renewal_attempted = False

        logger.info(
            "Auto-renewal successful for account %s, valid until %s",
            account,
            renewed.auth_expires,
        )
        return True
