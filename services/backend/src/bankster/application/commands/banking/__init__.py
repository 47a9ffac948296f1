"""Banking commands - FinTS authentication maintenance."""

from bankster.application.commands.banking.expiry_warning_command import (
    ExpiryWarningCommand,
)

__all__ = ["ExpiryWarningCommand"]
