"""Run remote operations with one transparent renewal-and-retry."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Awaitable, Callable, TypeVar

from bankster.application.services.auto_renewal_engine import AutoRenewalEngine
from bankster.domain.shared.time import Clock, utc_now

if TYPE_CHECKING:
    from bankster.application.factories import BankingServiceFactory
    from bankster.application.services.bank_session import BankSession
    from bankster.domain.banking.ports import BankingProtocolClientPort
    from bankster.domain.banking.repositories import AuthRecordRepository
    from bankster.domain.banking.services import ErrorClassifier

logger = logging.getLogger(__name__)

T = TypeVar("T")

Operation = Callable[[], Awaitable[T]]


class RetryingOperationRunner:
    """Execute an operation, renewing the session once on auth errors.

    On an authentication error the record is marked expired first, so the
    account fails closed even if the renewal (or the classifier) is wrong.
    At most one retry happens per call.
    """

    def __init__(
        self,
        client: BankingProtocolClientPort,
        repository: AuthRecordRepository,
        classifier: ErrorClassifier,
        renewal_engine: AutoRenewalEngine,
        clock: Clock = utc_now,
    ):
        self._client = client
        self._repository = repository
        self._classifier = classifier
        self._renewal_engine = renewal_engine
        self._clock = clock

    @classmethod
    def from_factory(cls, factory: BankingServiceFactory) -> RetryingOperationRunner:
        return cls(
            client=factory.protocol_client(),
            repository=factory.auth_record_repository(),
            classifier=factory.error_classifier(),
            renewal_engine=AutoRenewalEngine.from_factory(factory),
            clock=factory.clock,
        )

    async def run(self, session: BankSession, operation: Operation[T]) -> T:
        """
        Run ``operation`` for ``session``.

        Parameters
        ----------
        session
            Session whose handle the operation uses; the handle is replaced
            by a renewal, so operations must read it at call time
        operation
            Zero-argument coroutine function talking to the bank

        Returns
        -------
        The operation result, unchanged

        Raises
        ------
        Exception
            Non-authentication errors unchanged; authentication errors
            unchanged when renewal is impossible or fails; whatever the
            retry raises
        """
        account = session.account

        try:
            result = await operation()
        except Exception as error:
            if not self._classifier.is_authentication_error(error):
                raise

            logger.warning(
                "Authentication error detected for account %s: %s",
                account,
                error,
            )
            await self._mark_expired(session)

            if not await self._renew(session):
                raise

            logger.info(
                "Retrying operation after successful auto-renewal for account %s",
                account,
            )
            result = await operation()

        await self._persist_state(session)
        return result

    async def _renew(self, session: BankSession) -> bool:
        account = session.account

        if not self._renewal_engine.can_auto_renew(session):
            logger.info("Auto-renewal not possible for account %s", account)
            return False

        logger.info(
            "Attempting auto-renewal after authentication error for account %s",
            account,
        )
        renewed = await self._renewal_engine.attempt_auto_renewal(session)
        if not renewed:
            logger.error(
                "Auto-renewal failed, cannot retry operation for account %s",
                account,
            )
        return renewed

    async def _mark_expired(self, session: BankSession) -> None:
        record = session.record
        if record is None:
            return

        record.mark_expired(self._clock())
        await self._repository.save(record)

        logger.warning("Marked authentication as expired for account %s", session.account)

    async def _persist_state(self, session: BankSession) -> None:
        """Store the session state if the operation advanced it."""
        record = session.record
        if record is None:
            return

        persisted_state = self._client.persist(session.handle)
        if persisted_state == record.persisted_state:
            return

        record.replace_persisted_state(persisted_state, self._clock())
        await self._repository.save(record)
