"""Entities for banking domain."""

from bankster.domain.banking.entities.auth_record import AuthRecord

__all__ = ["AuthRecord"]
