"""Auth record repository interface - Banking domain."""

from abc import ABC, abstractmethod
from typing import Optional

from bankster.domain.banking.entities import AuthRecord


class AuthRecordRepository(ABC):
    """State store for authentication records, keyed by account."""

    @abstractmethod
    async def find_by_account(self, account: str) -> Optional[AuthRecord]:
        """Retrieve the record of an account.

        Returns
        -------
        AuthRecord, or None if no record exists. An existing but
        unconfigured record is returned with ``is_configured() == False``.
        """

    @abstractmethod
    async def save(self, record: AuthRecord) -> None:
        """Insert or update a record (last writer wins)."""

    @abstractmethod
    async def find_all(self) -> list[AuthRecord]:
        """Return all records ordered by account."""
