"""Service factory protocol for the application layer."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from bankster.domain.banking.ports import (
        BankingProtocolClientPort,
        InteractionStore,
    )
    from bankster.domain.banking.repositories import AuthRecordRepository
    from bankster.domain.banking.services import ErrorClassifier, ExpiryPolicy
    from bankster.domain.shared.time import Clock
    from bankster_config.settings import Settings


class BankingServiceFactory(Protocol):
    """Protocol for everything the FinTS lifecycle services depend on."""

    @property
    def settings(self) -> Settings:
        """Get the settings the services were configured from."""
        ...

    @property
    def session(self) -> Any:
        """Get the database session for transaction management.

        Use this for commit/rollback at the outermost layer.
        """
        ...

    @property
    def clock(self) -> Clock:
        """Get the time source shared by all services."""
        ...

    def auth_record_repository(self) -> AuthRecordRepository:
        """Get auth record repository."""
        ...

    def protocol_client(self) -> BankingProtocolClientPort:
        """Get the FinTS protocol client."""
        ...

    def interaction_store(self) -> InteractionStore:
        """Get the store for in-flight setup state."""
        ...

    def expiry_policy(self) -> ExpiryPolicy:
        """Get the expiry policy."""
        ...

    def error_classifier(self) -> ErrorClassifier:
        """Get the error classifier."""
        ...
