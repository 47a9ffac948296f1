"""Unit tests for BatchImportCommand."""

from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from bankster.application.commands import BatchImportCommand
from bankster.application.dtos.integration import ImportOutcomeStatus
from bankster.domain.banking.exceptions import (
    AuthenticationExpiredError,
    BankingNotConfiguredError,
    ChallengeRequiredError,
    RemoteOperationFailedError,
)
from bankster.domain.banking.value_objects import BankTransaction
from tests.shared.fixtures import NOW, fixed_clock, make_config


def _backend(transactions=None, error=None):
    backend = AsyncMock()
    if error is not None:
        backend.import_since.side_effect = error
    else:
        backend.import_since.return_value = transactions or []
    return backend


def _opener(backends):
    """Open the scripted backend (or raise the scripted error) per account."""

    async def open_backend(config):
        backend = backends[config.account]
        if isinstance(backend, Exception):
            raise backend
        return backend

    return open_backend


@pytest.fixture
def transaction():
    return BankTransaction(
        booking_date=NOW.date(),
        amount=Decimal("-9.99"),
        purpose="Kaffee",
    )


class TestBatchImportCommand:
    @pytest.mark.asyncio
    async def test_imports_every_account(self, transaction):
        command = BatchImportCommand(
            _opener(
                {
                    "giro-1": _backend([transaction]),
                    "giro-2": _backend([transaction, transaction]),
                },
            ),
            clock=fixed_clock(),
        )

        result = await command.execute(
            [make_config("giro-1"), make_config("giro-2")],
            since=NOW,
        )

        assert result.imported == 2
        assert result.total_transactions == 3
        assert result.success is True
        assert result.started_at == NOW

    @pytest.mark.asyncio
    async def test_failures_never_abort_the_batch(self, transaction):
        """Test that every outcome is recorded and later accounts still run."""
        # Arrange
        last = _backend([transaction])
        command = BatchImportCommand(
            _opener(
                {
                    "expired": AuthenticationExpiredError("expired", days_expired=3),
                    "new": BankingNotConfiguredError("new"),
                    "tan": _backend(error=ChallengeRequiredError("tan")),
                    "broken": _backend(error=RemoteOperationFailedError("timeout")),
                    "ok": last,
                },
            ),
            clock=fixed_clock(),
        )

        # Act
        result = await command.execute(
            [make_config(a) for a in ("expired", "new", "tan", "broken", "ok")],
            since=NOW,
        )

        # Assert
        statuses = {o.account: o.status for o in result.outcomes}
        assert statuses == {
            "expired": ImportOutcomeStatus.SKIPPED_EXPIRED,
            "new": ImportOutcomeStatus.SKIPPED_EXPIRED,
            "tan": ImportOutcomeStatus.SKIPPED_CHALLENGE_REQUIRED,
            "broken": ImportOutcomeStatus.FAILED,
            "ok": ImportOutcomeStatus.IMPORTED,
        }
        assert result.skipped == 3
        assert result.failed == 1
        assert result.success is False
        last.import_since.assert_awaited_once_with(NOW)

    @pytest.mark.asyncio
    async def test_skipped_accounts_carry_setup_guidance(self):
        command = BatchImportCommand(
            _opener({"giro-1": AuthenticationExpiredError("giro-1", days_expired=2)}),
            clock=fixed_clock(),
        )

        result = await command.execute([make_config()], since=NOW)

        outcome = result.outcomes[0]
        assert "FinTS setup" in outcome.message
        assert "2 days ago" in outcome.error

    @pytest.mark.asyncio
    async def test_default_start_is_beginning_of_year(self):
        backend = _backend([])
        command = BatchImportCommand(_opener({"giro-1": backend}), clock=fixed_clock())

        await command.execute([make_config()])

        backend.import_since.assert_awaited_once_with(
            datetime(2025, 1, 1, tzinfo=timezone.utc),
        )

    @pytest.mark.asyncio
    async def test_default_start_uses_last_import(self):
        backend = _backend([])
        last_import = datetime(2025, 3, 1, tzinfo=timezone.utc)
        lookup = AsyncMock(return_value=last_import)
        command = BatchImportCommand(
            _opener({"giro-1": backend}),
            last_import_lookup=lookup,
            clock=fixed_clock(),
        )

        result = await command.execute([make_config()])

        lookup.assert_awaited_once_with("giro-1")
        backend.import_since.assert_awaited_once_with(last_import)
        assert result.outcomes[0].since == last_import

    @pytest.mark.asyncio
    async def test_lookup_without_history_falls_back(self):
        backend = _backend([])
        command = BatchImportCommand(
            _opener({"giro-1": backend}),
            last_import_lookup=AsyncMock(return_value=None),
            clock=fixed_clock(),
        )

        await command.execute([make_config()])

        backend.import_since.assert_awaited_once_with(
            datetime(2025, 1, 1, tzinfo=timezone.utc),
        )

    @pytest.mark.asyncio
    async def test_failing_lookup_fails_only_that_account(self, transaction):
        """Test that an error while resolving the start date stays per account."""
        # Arrange
        last_import = datetime(2025, 3, 1, tzinfo=timezone.utc)

        async def lookup(account):
            if account == "giro-1":
                msg = "db down"
                raise RuntimeError(msg)
            return last_import

        first = _backend([transaction])
        second = _backend([transaction])
        command = BatchImportCommand(
            _opener({"giro-1": first, "giro-2": second}),
            last_import_lookup=lookup,
            clock=fixed_clock(),
        )

        # Act
        result = await command.execute([make_config("giro-1"), make_config("giro-2")])

        # Assert
        failed, imported = result.outcomes
        assert failed.status == ImportOutcomeStatus.FAILED
        assert failed.since is None
        assert failed.error == "db down"
        first.import_since.assert_not_awaited()
        assert imported.status == ImportOutcomeStatus.IMPORTED
        second.import_since.assert_awaited_once_with(last_import)

    @pytest.mark.asyncio
    async def test_result_serializes(self, transaction):
        command = BatchImportCommand(
            _opener({"giro-1": _backend([transaction])}),
            clock=fixed_clock(),
        )

        data = (await command.execute([make_config()], since=NOW)).to_dict()

        assert data["imported"] == 1
        assert data["outcomes"][0]["status"] == "imported"
        assert data["outcomes"][0]["transactions_imported"] == 1
