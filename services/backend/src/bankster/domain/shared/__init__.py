"""Shared domain components.

This module exports shared exceptions and time helpers used across domain
boundaries.
"""

from bankster.domain.shared.exceptions import DomainException, ErrorCode
from bankster.domain.shared.time import ensure_tz_aware, utc_now

__all__ = [
    # Error codes
    "ErrorCode",
    # Base exception
    "DomainException",
    # Utilities
    "ensure_tz_aware",
    "utc_now",
]
