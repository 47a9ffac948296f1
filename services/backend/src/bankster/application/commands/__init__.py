"""Command layer - write operations that mutate state.

Commands are organized by domain:
- banking: FinTS authentication maintenance
- integration: Imports from the bank
"""

from bankster.application.commands.banking import ExpiryWarningCommand
from bankster.application.commands.integration import BatchImportCommand

__all__ = ["BatchImportCommand", "ExpiryWarningCommand"]
