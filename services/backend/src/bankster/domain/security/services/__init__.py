"""Security domain services."""

from bankster.domain.security.services.encryption_service import EncryptionService

__all__ = ["EncryptionService"]
