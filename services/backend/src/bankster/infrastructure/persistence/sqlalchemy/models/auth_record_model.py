"""SQLAlchemy model for FinTS authentication records."""

from datetime import datetime

from sqlalchemy import DateTime, Integer, LargeBinary, String
from sqlalchemy.orm import Mapped, mapped_column

from bankster.infrastructure.persistence.sqlalchemy.models.base import (
    Base,
    TimestampMixin,
)


class AuthRecordModel(Base, TimestampMixin):
    """One row per account holding its FinTS session state."""

    __tablename__ = "fints_state"

    account: Mapped[str] = mapped_column(String(255), primary_key=True)

    # TAN settings (plaintext - not sensitive)
    tan_mode: Mapped[str | None] = mapped_column(String(10), nullable=True)
    tan_medium: Mapped[str | None] = mapped_column(String(100), nullable=True)

    # Opaque protocol client blob, Fernet encrypted
    persisted_state_encrypted: Mapped[bytes | None] = mapped_column(
        LargeBinary,
        nullable=True,
    )

    last_auth: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    auth_expires: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        index=True,
    )

    warning_level: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_warning_sent: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    def __repr__(self) -> str:
        return (
            f"AuthRecordModel(account={self.account}, tan_mode={self.tan_mode}, "
            f"auth_expires={self.auth_expires})"
        )
