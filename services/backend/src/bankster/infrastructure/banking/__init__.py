"""FinTS protocol client infrastructure."""

from bankster.infrastructure.banking.fints_client_adapter import (
    FinTSClientAdapter,
    PendingDialog,
)

__all__ = ["FinTSClientAdapter", "PendingDialog"]
