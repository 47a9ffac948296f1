"""Import transactions for several FinTS accounts in one run."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Awaitable, Callable, Iterable, Optional

from bankster.application.dtos.integration import (
    AccountImportOutcome,
    BatchImportResult,
    ImportOutcomeStatus,
)
from bankster.application.services.fints_backend import FinTSBackend
from bankster.domain.banking.exceptions import (
    AuthenticationExpiredError,
    ChallengeRequiredError,
)
from bankster.domain.shared.time import Clock, utc_now

if TYPE_CHECKING:
    from bankster.application.factories import BankingServiceFactory
    from bankster.domain.banking.ports import BankingBackend
    from bankster.domain.banking.value_objects import BankAccountConfig

logger = logging.getLogger(__name__)

BackendOpener = Callable[["BankAccountConfig"], Awaitable["BankingBackend"]]
LastImportLookup = Callable[[str], Awaitable[Optional[datetime]]]

SETUP_GUIDANCE = "Please complete the FinTS setup for this account to resume imports."


class BatchImportCommand:
    """Run the import for every configured account and aggregate results.

    A failing account never aborts the batch. Accounts whose
    authentication expired or that need a TAN are skipped with a message
    telling the user to complete the setup.
    """

    def __init__(
        self,
        open_backend: BackendOpener,
        last_import_lookup: Optional[LastImportLookup] = None,
        clock: Clock = utc_now,
    ):
        self._open_backend = open_backend
        self._last_import_lookup = last_import_lookup
        self._clock = clock

    @classmethod
    def from_factory(
        cls,
        factory: BankingServiceFactory,
        last_import_lookup: Optional[LastImportLookup] = None,
    ) -> BatchImportCommand:
        async def open_backend(config: BankAccountConfig) -> BankingBackend:
            return await FinTSBackend.from_factory(config, factory)

        return cls(
            open_backend=open_backend,
            last_import_lookup=last_import_lookup,
            clock=factory.clock,
        )

    async def execute(
        self,
        accounts: Iterable[BankAccountConfig],
        since: Optional[datetime] = None,
    ) -> BatchImportResult:
        result = BatchImportResult(started_at=self._clock())

        for config in accounts:
            outcome = await self._import_account(config, since)
            result.add(outcome)

        logger.info(
            "Batch import finished: %d imported, %d skipped, %d failed, "
            "%d transaction(s)",
            result.imported,
            result.skipped,
            result.failed,
            result.total_transactions,
        )
        return result

    async def _import_account(
        self,
        config: BankAccountConfig,
        since: Optional[datetime],
    ) -> AccountImportOutcome:
        account = config.account
        start = since

        try:
            if start is None:
                start = await self._default_start(account)
            backend = await self._open_backend(config)
            transactions = await backend.import_since(start)
        except AuthenticationExpiredError as e:
            logger.warning("Skipping account %s: %s", account, e)
            return AccountImportOutcome(
                account=account,
                status=ImportOutcomeStatus.SKIPPED_EXPIRED,
                since=start,
                message=SETUP_GUIDANCE,
                error=str(e),
            )
        except ChallengeRequiredError as e:
            logger.warning("Skipping account %s: %s", account, e)
            return AccountImportOutcome(
                account=account,
                status=ImportOutcomeStatus.SKIPPED_CHALLENGE_REQUIRED,
                since=start,
                message=SETUP_GUIDANCE,
                error=str(e),
            )
        except Exception as e:
            logger.exception("Import failed for account %s", account)
            return AccountImportOutcome(
                account=account,
                status=ImportOutcomeStatus.FAILED,
                since=start,
                error=str(e),
            )

        logger.info(
            "Imported %d transaction(s) for account %s",
            len(transactions),
            account,
        )
        return AccountImportOutcome(
            account=account,
            status=ImportOutcomeStatus.IMPORTED,
            since=start,
            transactions=tuple(transactions),
        )

    async def _default_start(self, account: str) -> datetime:
        if self._last_import_lookup is not None:
            last_import = await self._last_import_lookup(account)
            if last_import is not None:
                return last_import

        # Fall back to the beginning of the current year
        now = self._clock()
        return now.replace(month=1, day=1, hour=0, minute=0, second=0, microsecond=0)
