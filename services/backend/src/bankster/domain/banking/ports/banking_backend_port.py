"""Capability set every import backend offers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from bankster.domain.banking.value_objects.bank_transaction import BankTransaction


class BankingBackend(ABC):
    """
    Interface for one account's import backend.

    FinTS is one implementation; its session lifecycle (expiry, renewal,
    setup) stays behind this interface.
    """

    @abstractmethod
    async def check_setup(self) -> str:
        """Verify the account can be reached; returns a status message."""

    @abstractmethod
    async def import_since(self, since: datetime) -> list[BankTransaction]:
        """Fetch transactions booked since ``since``."""

    @abstractmethod
    async def identity(self) -> Any:
        """Identify the remote account this backend imports from."""
