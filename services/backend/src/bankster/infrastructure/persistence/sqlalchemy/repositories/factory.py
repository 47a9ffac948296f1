"""SQLAlchemy service factory wiring the FinTS lifecycle dependencies."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from bankster.domain.banking.services import ErrorClassifier, ExpiryPolicy
from bankster.domain.shared.time import Clock, utc_now
from bankster.infrastructure.banking import FinTSClientAdapter
from bankster.infrastructure.interaction import MemoryInteractionStore
from bankster.infrastructure.persistence.sqlalchemy.repositories.auth_record_repository_sqlalchemy import (  # NOQA: E501
    AuthRecordRepositorySQLAlchemy,
)
from bankster.infrastructure.security.encryption_service_fernet import (
    FernetEncryptionService,
)
from bankster_config.settings import get_settings

if TYPE_CHECKING:
    from bankster.domain.banking.ports import (
        BankingProtocolClientPort,
        InteractionStore,
    )
    from bankster_config.settings import Settings

logger = logging.getLogger(__name__)


class SQLAlchemyServiceFactory:
    """SQLAlchemy implementation of the BankingServiceFactory Protocol.

    The interaction store must outlive a single request for the setup
    wizard to work; pass a shared instance in multi-request setups.
    """

    def __init__(  # NOQA: PLR0913
        self,
        session: AsyncSession,
        settings: Optional[Settings] = None,
        protocol_client: Optional[BankingProtocolClientPort] = None,
        interaction_store: Optional[InteractionStore] = None,
        clock: Clock = utc_now,
    ):
        self._session = session
        self._settings = settings or get_settings()
        self._clock = clock

        # Cached instances (created on demand)
        self._protocol_client = protocol_client
        self._interaction_store = interaction_store
        self._auth_record_repo: AuthRecordRepositorySQLAlchemy | None = None
        self._policy: ExpiryPolicy | None = None
        self._classifier: ErrorClassifier | None = None

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def session(self) -> AsyncSession:
        return self._session

    @property
    def clock(self) -> Clock:
        return self._clock

    def auth_record_repository(self) -> AuthRecordRepositorySQLAlchemy:
        if self._auth_record_repo is None:
            encryption_service = FernetEncryptionService(
                encryption_key=self._settings.encryption_key.get_secret_value(),
            )
            self._auth_record_repo = AuthRecordRepositorySQLAlchemy(
                self._session,
                encryption_service,
            )
        return self._auth_record_repo

    def protocol_client(self) -> BankingProtocolClientPort:
        if self._protocol_client is None:
            self._protocol_client = FinTSClientAdapter.from_settings(self._settings)
        return self._protocol_client

    def interaction_store(self) -> InteractionStore:
        if self._interaction_store is None:
            logger.debug("No interaction store given, using a process local one")
            self._interaction_store = MemoryInteractionStore()
        return self._interaction_store

    def expiry_policy(self) -> ExpiryPolicy:
        if self._policy is None:
            self._policy = ExpiryPolicy.from_settings(self._settings)
        return self._policy

    def error_classifier(self) -> ErrorClassifier:
        if self._classifier is None:
            self._classifier = ErrorClassifier.from_settings(self._settings)
        return self._classifier
