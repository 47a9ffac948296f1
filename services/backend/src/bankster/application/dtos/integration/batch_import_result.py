"""DTOs for batch import results."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from bankster.domain.banking.value_objects import BankTransaction


class ImportOutcomeStatus(str, Enum):
    IMPORTED = "imported"
    SKIPPED_EXPIRED = "skipped_expired"
    SKIPPED_CHALLENGE_REQUIRED = "skipped_challenge_required"
    FAILED = "failed"


@dataclass(frozen=True)
class AccountImportOutcome:
    """Outcome of importing one account."""

    account: str
    status: ImportOutcomeStatus
    since: Optional[datetime] = None
    transactions: tuple[BankTransaction, ...] = ()
    message: Optional[str] = None
    error: Optional[str] = None

    @property
    def transactions_imported(self) -> int:
        return len(self.transactions)

    def to_dict(self) -> dict:
        return {
            "account": self.account,
            "status": self.status.value,
            "since": self.since.isoformat() if self.since else None,
            "transactions_imported": self.transactions_imported,
            "message": self.message,
            "error": self.error,
        }


@dataclass
class BatchImportResult:
    """Aggregated result of a batch import run."""

    started_at: datetime
    outcomes: list[AccountImportOutcome] = field(default_factory=list)

    def add(self, outcome: AccountImportOutcome) -> None:
        self.outcomes.append(outcome)

    def _count(self, status: ImportOutcomeStatus) -> int:
        return sum(1 for o in self.outcomes if o.status == status)

    @property
    def imported(self) -> int:
        return self._count(ImportOutcomeStatus.IMPORTED)

    @property
    def skipped(self) -> int:
        return self._count(ImportOutcomeStatus.SKIPPED_EXPIRED) + self._count(
            ImportOutcomeStatus.SKIPPED_CHALLENGE_REQUIRED,
        )

    @property
    def failed(self) -> int:
        return self._count(ImportOutcomeStatus.FAILED)

    @property
    def total_transactions(self) -> int:
        return sum(o.transactions_imported for o in self.outcomes)

    @property
    def success(self) -> bool:
        return self.failed == 0

    def to_dict(self) -> dict:
        return {
            "started_at": self.started_at.isoformat(),
            "imported": self.imported,
            "skipped": self.skipped,
            "failed": self.failed,
            "total_transactions": self.total_transactions,
            "outcomes": [o.to_dict() for o in self.outcomes],
        }
