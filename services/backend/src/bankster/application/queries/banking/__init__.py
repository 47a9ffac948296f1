"""Banking queries - FinTS authentication state."""

from bankster.application.queries.banking.get_auth_status_query import (
    GetAuthStatusQuery,
)

__all__ = ["GetAuthStatusQuery"]
