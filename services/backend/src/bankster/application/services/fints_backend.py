"""FinTS import backend built on the session lifecycle services."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from bankster.application.services.retrying_operation_runner import (
    RetryingOperationRunner,
)
from bankster.application.services.session_factory import SessionFactory
from bankster.domain.banking.exceptions import (
    AuthenticationExpiredError,
    BankAccountNotFoundError,
    BankingNotConfiguredError,
    ChallengeRequiredError,
)
from bankster.domain.banking.ports import BankingBackend
from bankster.domain.shared.time import Clock, ensure_tz_aware, utc_now

if TYPE_CHECKING:
    from bankster.application.factories import BankingServiceFactory
    from bankster.application.services.bank_session import BankSession
    from bankster.application.services.retrying_operation_runner import Operation
    from bankster.domain.banking.ports import BankingProtocolClientPort
    from bankster.domain.banking.services import ErrorClassifier, ExpiryPolicy
    from bankster.domain.banking.value_objects import (
        BankAccountConfig,
        BankTransaction,
        OperationResult,
        SepaAccount,
    )

logger = logging.getLogger(__name__)


class FinTSBackend(BankingBackend):
    """Import backend of one FinTS account.

    Every remote call goes through the RetryingOperationRunner. An
    authentication error that survives the runner reaches the caller as
    AuthenticationExpiredError, never as the raw remote text.
    """

    def __init__(  # NOQA: PLR0913
        self,
        session: BankSession,
        client: BankingProtocolClientPort,
        runner: RetryingOperationRunner,
        classifier: ErrorClassifier,
        policy: ExpiryPolicy,
        clock: Clock = utc_now,
    ):
        self._session = session
        self._client = client
        self._runner = runner
        self._classifier = classifier
        self._policy = policy
        self._clock = clock
        self._sepa_account: Optional[SepaAccount] = None

    @classmethod
    async def open(  # NOQA: PLR0913
        cls,
        config: BankAccountConfig,
        session_factory: SessionFactory,
        client: BankingProtocolClientPort,
        runner: RetryingOperationRunner,
        classifier: ErrorClassifier,
        policy: ExpiryPolicy,
        clock: Clock = utc_now,
    ) -> FinTSBackend:
        """Open the session (renewing it if needed) and wrap it."""
        session = await session_factory.open_session(config)
        return cls(
            session=session,
            client=client,
            runner=runner,
            classifier=classifier,
            policy=policy,
            clock=clock,
        )

    @classmethod
    async def from_factory(
        cls,
        config: BankAccountConfig,
        factory: BankingServiceFactory,
    ) -> FinTSBackend:
        return await cls.open(
            config=config,
            session_factory=SessionFactory.from_factory(factory),
            client=factory.protocol_client(),
            runner=RetryingOperationRunner.from_factory(factory),
            classifier=factory.error_classifier(),
            policy=factory.expiry_policy(),
            clock=factory.clock,
        )

    @property
    def session(self) -> BankSession:
        return self._session

    @property
    def account(self) -> str:
        return self._session.account

    async def check_setup(self) -> str:
        record = self._session.record
        if record is None or not record.is_configured():
            raise BankingNotConfiguredError(self.account)

        sepa_account = await self.identity()
        return f"Connected successfully to account {sepa_account.account_number}"

    async def identity(self) -> SepaAccount:
        """
        Resolve the SEPA account this backend imports from.

        Returns
        -------
        The account whose number or IBAN contains the configured ident, or
        the first account the login sees if no ident is configured

        Raises
        ------
        ChallengeRequiredError
            If listing the accounts requires a TAN
        BankAccountNotFoundError
            If the bank reports no (matching) account
        """
        if self._sepa_account is not None:
            return self._sepa_account

        async def list_accounts() -> OperationResult:
            return self._client.list_accounts(self._session.handle)

        result = await self._run(list_accounts)
        if result.needs_challenge:
            raise ChallengeRequiredError(self.account, result.challenge)

        accounts: list[SepaAccount] = list(result.data or [])
        if not accounts:
            raise BankAccountNotFoundError(self.account)

        ident = self._session.config.ident
        if ident:
            matching = [a for a in accounts if a.matches(ident)]
            if not matching:
                raise BankAccountNotFoundError(self.account)
            self._sepa_account = matching[0]
        else:
            self._sepa_account = accounts[0]

        return self._sepa_account

    async def import_since(self, since: datetime) -> list[BankTransaction]:
        """
        Fetch the statement from ``since`` until today.

        Raises
        ------
        AuthenticationExpiredError
            If the session expired since it was opened
        ChallengeRequiredError
            If the bank demands a TAN for the statement
        """
        now = self._clock()
        record = self._session.record
        if self._policy.is_expired(record, now):
            raise AuthenticationExpiredError(
                self.account,
                self._policy.days_expired(record, now),
            )

        sepa_account = await self.identity()
        start_date = ensure_tz_aware(since).date()
        end_date = now.date()

        logger.info(
            "Fetching transactions for account %s from %s to %s",
            self.account,
            start_date,
            end_date,
        )

        async def fetch_transactions() -> OperationResult:
            return self._client.fetch_transactions(
                self._session.handle,
                sepa_account,
                start_date,
                end_date,
            )

        result = await self._run(fetch_transactions)
        if result.needs_challenge:
            raise ChallengeRequiredError(self.account, result.challenge)

        transactions: list[BankTransaction] = []
        for transaction in result.data or []:
            if transaction.booking_date > end_date:
                logger.warning(
                    "Skipping future transaction for account %s booked on %s",
                    self.account,
                    transaction.booking_date,
                )
                continue
            if transaction.booking_date < start_date:
                logger.warning(
                    "Skipping transaction for account %s booked on %s before %s",
                    self.account,
                    transaction.booking_date,
                    start_date,
                )
                continue
            transactions.append(transaction)

        logger.info(
            "Fetched %d transaction(s) for account %s",
            len(transactions),
            self.account,
        )
        return transactions

    async def _run(self, operation: Operation[OperationResult]) -> OperationResult:
        try:
            return await self._runner.run(self._session, operation)
        except AuthenticationExpiredError:
            raise
        except Exception as e:
            if not self._classifier.is_authentication_error(e):
                raise
            now = self._clock()
            raise AuthenticationExpiredError(
                self.account,
                self._policy.days_expired(self._session.record, now),
            ) from e
