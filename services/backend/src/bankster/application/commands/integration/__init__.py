"""Integration commands - imports from the bank."""

from bankster.application.commands.integration.batch_import_command import (
    BatchImportCommand,
)

__all__ = ["BatchImportCommand"]
