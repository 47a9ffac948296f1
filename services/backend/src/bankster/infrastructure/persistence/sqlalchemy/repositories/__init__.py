"""SQLAlchemy repository implementations."""

from bankster.infrastructure.persistence.sqlalchemy.repositories.auth_record_repository_sqlalchemy import (  # NOQA: E501
    AuthRecordRepositorySQLAlchemy,
)
from bankster.infrastructure.persistence.sqlalchemy.repositories.factory import (
    SQLAlchemyServiceFactory,
)

__all__ = ["AuthRecordRepositorySQLAlchemy", "SQLAlchemyServiceFactory"]
