"""Application services for the FinTS session lifecycle."""

from bankster.application.services.auto_renewal_engine import AutoRenewalEngine
from bankster.application.services.bank_session import BankSession, build_handle
from bankster.application.services.fints_backend import FinTSBackend
from bankster.application.services.retrying_operation_runner import (
    RetryingOperationRunner,
)
from bankster.application.services.session_factory import SessionFactory
from bankster.application.services.setup_wizard import SetupInteraction, SetupWizard

__all__ = [
    "AutoRenewalEngine",
    "BankSession",
    "FinTSBackend",
    "RetryingOperationRunner",
    "SessionFactory",
    "SetupInteraction",
    "SetupWizard",
    "build_handle",
]
