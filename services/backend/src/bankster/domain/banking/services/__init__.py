"""Domain services for the banking domain."""

from bankster.domain.banking.services.error_classifier import (
    ClassificationRule,
    ErrorCategory,
    ErrorClassifier,
)
from bankster.domain.banking.services.expiry_policy import (
    DEFAULT_VALIDITY_DAYS,
    DEFAULT_WARNING_DAYS,
    NO_EXPIRY_DAYS,
    ExpiryPolicy,
)

__all__ = [
    "DEFAULT_VALIDITY_DAYS",
    "DEFAULT_WARNING_DAYS",
    "NO_EXPIRY_DAYS",
    "ClassificationRule",
    "ErrorCategory",
    "ErrorClassifier",
    "ExpiryPolicy",
]
