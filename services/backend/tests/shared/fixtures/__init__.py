"""Shared fixtures for the lifecycle tests."""

from tests.shared.fixtures.factories import (
    NOW,
    TEST_ACCOUNT,
    fixed_clock,
    make_config,
    make_record,
)
from tests.shared.fixtures.fakes import (
    DictInteractionStore,
    FakeHandle,
    FakeProtocolClient,
    InMemoryAuthRecordRepository,
    auth_error,
)

__all__ = [
    "NOW",
    "TEST_ACCOUNT",
    "DictInteractionStore",
    "FakeHandle",
    "FakeProtocolClient",
    "InMemoryAuthRecordRepository",
    "auth_error",
    "fixed_clock",
    "make_config",
    "make_record",
]
