"""Application factories for wiring the lifecycle services."""

from bankster.application.factories.banking_service_factory import (
    BankingServiceFactory,
)

__all__ = ["BankingServiceFactory"]
