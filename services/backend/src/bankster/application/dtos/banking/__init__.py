"""DTOs for the banking use cases."""

from bankster.application.dtos.banking.auth_status import AuthStatus, ExpiryWarning
from bankster.application.dtos.banking.setup_wizard_step import (
    WizardState,
    WizardStep,
)

__all__ = ["AuthStatus", "ExpiryWarning", "WizardState", "WizardStep"]
