"""SQLAlchemy models for persistence layer."""

from bankster.infrastructure.persistence.sqlalchemy.models.auth_record_model import (
    AuthRecordModel,
)
from bankster.infrastructure.persistence.sqlalchemy.models.base import (
    Base,
    TimestampMixin,
)

__all__ = ["AuthRecordModel", "Base", "TimestampMixin"]
