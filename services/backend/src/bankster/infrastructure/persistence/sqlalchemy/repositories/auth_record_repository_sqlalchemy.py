"""SQLAlchemy implementation of AuthRecordRepository."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from bankster.domain.banking.entities import AuthRecord
from bankster.domain.banking.repositories import AuthRecordRepository
from bankster.domain.security.services import EncryptionService
from bankster.domain.shared.time import ensure_tz_aware
from bankster.infrastructure.persistence.sqlalchemy.models import AuthRecordModel


class AuthRecordRepositorySQLAlchemy(AuthRecordRepository):
    """Stores auth records with the session blob encrypted at rest."""

    def __init__(
        self,
        session: AsyncSession,
        encryption_service: EncryptionService,
    ):
        self._session = session
        self._encryption = encryption_service

    async def find_by_account(self, account: str) -> Optional[AuthRecord]:
        model = await self._find_model(account)

        if not model:
            return None

        return self._model_to_entity(model)

    async def save(self, record: AuthRecord) -> None:
        model = await self._find_model(record.account)

        if model is None:
            model = AuthRecordModel(account=record.account)
            model.created_at = record.created_at
            self._session.add(model)

        model.tan_mode = record.tan_mode
        model.tan_medium = record.tan_medium
        model.persisted_state_encrypted = self._encrypt(record.persisted_state)
        model.last_auth = record.last_auth
        model.auth_expires = record.auth_expires
        model.warning_level = record.warning_level
        model.last_warning_sent = record.last_warning_sent
        model.updated_at = record.updated_at

        await self._session.flush()

    async def find_all(self) -> list[AuthRecord]:
        stmt = select(AuthRecordModel).order_by(AuthRecordModel.account)

        result = await self._session.execute(stmt)
        models = result.scalars().all()

        return [self._model_to_entity(model) for model in models]

    # Private helpers

    async def _find_model(self, account: str) -> Optional[AuthRecordModel]:
        stmt = select(AuthRecordModel).where(AuthRecordModel.account == account)

        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    def _encrypt(self, blob: Optional[bytes]) -> Optional[bytes]:
        if blob is None:
            return None
        return self._encryption.encrypt(blob)

    def _decrypt(self, blob: Optional[bytes]) -> Optional[bytes]:
        if blob is None:
            return None
        return self._encryption.decrypt(blob)

    def _model_to_entity(self, model: AuthRecordModel) -> AuthRecord:
        return AuthRecord(
            account=model.account,
            tan_mode=model.tan_mode,
            tan_medium=model.tan_medium,
            persisted_state=self._decrypt(model.persisted_state_encrypted),
            last_auth=_aware(model.last_auth),
            auth_expires=_aware(model.auth_expires),
            warning_level=model.warning_level,
            last_warning_sent=_aware(model.last_warning_sent),
            created_at=ensure_tz_aware(model.created_at),
            updated_at=ensure_tz_aware(model.updated_at),
        )


def _aware(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite drops the offset of timezone-aware columns
    return ensure_tz_aware(value) if value is not None else None
