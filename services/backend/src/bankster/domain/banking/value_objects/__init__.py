"""Value objects for banking domain."""

from bankster.domain.banking.value_objects.bank_account_config import (
    BankAccountConfig,
)
from bankster.domain.banking.value_objects.bank_credentials import BankCredentials
from bankster.domain.banking.value_objects.bank_transaction import BankTransaction
from bankster.domain.banking.value_objects.protocol_results import (
    LoginResult,
    OperationResult,
)
from bankster.domain.banking.value_objects.sepa_account import SepaAccount
from bankster.domain.banking.value_objects.tan_challenge import TANChallenge
from bankster.domain.banking.value_objects.tan_method import (
    UNATTENDED_TAN_MODE,
    TANMedium,
    TANMethod,
    TANMethodType,
    is_unattended_mode,
)

__all__ = [
    "UNATTENDED_TAN_MODE",
    "BankAccountConfig",
    "BankCredentials",
    "BankTransaction",
    "LoginResult",
    "OperationResult",
    "SepaAccount",
    "TANChallenge",
    "TANMedium",
    "TANMethod",
    "TANMethodType",
    "is_unattended_mode",
]
