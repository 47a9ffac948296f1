"""Unit tests for RetryingOperationRunner."""

import pytest

from bankster.application.services import (
    AutoRenewalEngine,
    BankSession,
    RetryingOperationRunner,
)
from bankster.domain.banking.exceptions import RemoteOperationFailedError
from bankster.domain.banking.services import ErrorClassifier, ExpiryPolicy
from tests.shared.fixtures import (
    NOW,
    FakeHandle,
    FakeProtocolClient,
    InMemoryAuthRecordRepository,
    auth_error,
    fixed_clock,
    make_config,
    make_record,
)


class ScriptedOperation:
    """Zero-argument operation raising the scripted errors in order."""

    def __init__(self, *errors, result="ok"):
        self._errors = list(errors)
        self._result = result
        self.calls = 0
        self.handles = []

    def bind(self, session):
        async def operation():
            self.calls += 1
            self.handles.append(session.handle.serial)
            if self._errors:
                error = self._errors.pop(0)
                if error is not None:
                    raise error
            return self._result

        return operation


@pytest.fixture
def client():
    return FakeProtocolClient()


def _runner(client, repository):
    engine = AutoRenewalEngine(client, repository, ExpiryPolicy(), clock=fixed_clock())
    return RetryingOperationRunner(
        client,
        repository,
        ErrorClassifier(),
        engine,
        clock=fixed_clock(),
    )


def _session(record):
    return BankSession(
        config=make_config(),
        handle=FakeHandle(serial=0, persisted_state=record.persisted_state),
        record=record,
    )


class TestRunnerWithoutErrors:
    @pytest.mark.asyncio
    async def test_returns_result_unchanged(self, client):
        record = make_record()
        repository = InMemoryAuthRecordRepository(record)
        session = _session(record)
        operation = ScriptedOperation(result={"balance": 42})

        result = await _runner(client, repository).run(session, operation.bind(session))

        assert result == {"balance": 42}
        assert operation.calls == 1

    @pytest.mark.asyncio
    async def test_advanced_state_is_persisted(self, client):
        """Test that a changed session blob is written back."""
        record = make_record(persisted_state=b"old")
        repository = InMemoryAuthRecordRepository(record)
        session = _session(record)

        await _runner(client, repository).run(session, ScriptedOperation().bind(session))

        assert repository.get("giro-1").persisted_state == b"state-0-0"
        assert repository.get("giro-1").auth_expires == record.auth_expires

    @pytest.mark.asyncio
    async def test_unchanged_state_is_not_saved(self, client):
        record = make_record(persisted_state=b"state-0-0")
        repository = InMemoryAuthRecordRepository(record)
        session = _session(record)

        await _runner(client, repository).run(session, ScriptedOperation().bind(session))

        assert repository.saved == []


class TestRunnerNonAuthenticationErrors:
    @pytest.mark.asyncio
    async def test_other_errors_propagate_after_one_call(self, client):
        """Test that a non-auth error runs the operation exactly once."""
        record = make_record(tan_mode="-1")
        repository = InMemoryAuthRecordRepository(record)
        session = _session(record)
        error = RemoteOperationFailedError("Connection reset by peer")
        operation = ScriptedOperation(error)

        with pytest.raises(RemoteOperationFailedError) as exc_info:
            await _runner(client, repository).run(session, operation.bind(session))

        assert exc_info.value is error
        assert operation.calls == 1
        assert repository.saved == []
        assert "login" not in client.call_names()


class TestRunnerAuthenticationErrors:
    @pytest.mark.asyncio
    async def test_renewal_then_exactly_one_retry(self, client):
        """Test that an auth error on an unattended account runs twice."""
        # Arrange
        record = make_record(tan_mode="-1")
        repository = InMemoryAuthRecordRepository(record)
        session = _session(record)
        operation = ScriptedOperation(auth_error("9800"), result="retried")

        # Act
        result = await _runner(client, repository).run(session, operation.bind(session))

        # Assert
        assert result == "retried"
        assert operation.calls == 2
        # The retry reads the renewed handle
        assert operation.handles == [0, 2]
        assert repository.get("giro-1").last_auth == NOW
        assert client.call_names().count("login") == 1

    @pytest.mark.asyncio
    async def test_record_marked_expired_before_renewal(self, client):
        """Test that the account fails closed before renewal is attempted."""
        record = make_record(tan_mode="-1", expires_in_days=40)
        repository = InMemoryAuthRecordRepository(record)
        session = _session(record)

        await _runner(client, repository).run(
            session,
            ScriptedOperation(auth_error()).bind(session),
        )

        assert repository.saved[0].auth_expires == NOW
        assert repository.saved[1].last_auth == NOW

    @pytest.mark.asyncio
    async def test_regular_mode_propagates_original_error(self, client):
        """Test that accounts needing a TAN are marked expired and not retried."""
        record = make_record(tan_mode="946", expires_in_days=40)
        repository = InMemoryAuthRecordRepository(record)
        session = _session(record)
        error = auth_error("9010")
        operation = ScriptedOperation(error)

        with pytest.raises(RemoteOperationFailedError) as exc_info:
            await _runner(client, repository).run(session, operation.bind(session))

        assert exc_info.value is error
        assert operation.calls == 1
        assert repository.get("giro-1").auth_expires == NOW
        assert "login" not in client.call_names()

    @pytest.mark.asyncio
    async def test_failed_renewal_propagates_original_error(self):
        """Test that a renewal needing a TAN keeps the original error."""
        client = FakeProtocolClient(login_needs_challenge=True)
        record = make_record(tan_mode="-1")
        repository = InMemoryAuthRecordRepository(record)
        session = _session(record)
        error = auth_error("9120")
        operation = ScriptedOperation(error)

        with pytest.raises(RemoteOperationFailedError) as exc_info:
            await _runner(client, repository).run(session, operation.bind(session))

        assert exc_info.value is error
        assert operation.calls == 1

    @pytest.mark.asyncio
    async def test_retry_failure_is_not_retried_again(self, client):
        """Test that at most one retry happens per call."""
        record = make_record(tan_mode="-1")
        repository = InMemoryAuthRecordRepository(record)
        session = _session(record)
        second = auth_error("9800")
        operation = ScriptedOperation(auth_error("9800"), second)

        with pytest.raises(RemoteOperationFailedError) as exc_info:
            await _runner(client, repository).run(session, operation.bind(session))

        assert exc_info.value is second
        assert operation.calls == 2
        assert client.call_names().count("login") == 1

    @pytest.mark.asyncio
    async def test_guard_on_session_prevents_renewal(self, client):
        """Test that a session that already tried renewing does not retry."""
        record = make_record(tan_mode="-1")
        repository = InMemoryAuthRecordRepository(record)
        session = _session(record)
        session.renewal_attempted = True
        operation = ScriptedOperation(auth_error())

        with pytest.raises(RemoteOperationFailedError):
            await _runner(client, repository).run(session, operation.bind(session))

        assert operation.calls == 1
        assert "login" not in client.call_names()
