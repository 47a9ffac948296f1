"""Repository interfaces for banking domain."""

from bankster.domain.banking.repositories.auth_record_repository import (
    AuthRecordRepository,
)

__all__ = ["AuthRecordRepository"]
