"""DTOs for the import use cases."""

from bankster.application.dtos.integration.batch_import_result import (
    AccountImportOutcome,
    BatchImportResult,
    ImportOutcomeStatus,
)

__all__ = ["AccountImportOutcome", "BatchImportResult", "ImportOutcomeStatus"]
