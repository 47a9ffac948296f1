"""Interactive FinTS setup: TAN mode, TAN medium, login and TAN entry.

Each entry point is one step of the wizard and may run in a different
request than the previous one. Everything needed between steps (mode,
medium, the pending login and the session blob) lives in the injected
InteractionStore under a key scoped to the actor and the account.

    SELECT_TAN_MODE -> [SELECT_TAN_MEDIUM] -> AUTHENTICATING
        -> [AWAITING_CHALLENGE_RESPONSE] -> SUCCESS | ERROR
"""

from __future__ import annotations

import base64
import binascii
import logging
from typing import TYPE_CHECKING, Iterable, Optional

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from bankster.application.dtos.banking import WizardState, WizardStep
from bankster.domain.banking.entities import AuthRecord
from bankster.domain.banking.exceptions import (
    BankingDomainError,
    RemoteOperationFailedError,
    SetupSessionExpiredError,
)
from bankster.domain.banking.value_objects import (
    UNATTENDED_TAN_MODE,
    TANMethod,
    is_unattended_mode,
)
from bankster.domain.shared.time import Clock, utc_now

if TYPE_CHECKING:
    from bankster.application.factories import BankingServiceFactory
    from bankster.domain.banking.ports import (
        BankingProtocolClientPort,
        ClientHandle,
        InteractionStore,
    )
    from bankster.domain.banking.repositories import AuthRecordRepository
    from bankster.domain.banking.services import ExpiryPolicy
    from bankster.domain.banking.value_objects import BankAccountConfig

logger = logging.getLogger(__name__)

DEFAULT_INTERACTION_TTL_SECONDS = 900


class SetupInteraction(BaseModel):
    """Wizard state kept between two requests."""

    tan_mode: str
    tan_medium: Optional[str] = None
    pending: Optional[str] = None  # base64 of the serialized pending login
    session: Optional[str] = None  # base64 of the protocol client blob

    model_config = ConfigDict(frozen=True)

    @property
    def awaits_challenge(self) -> bool:
        return bool(self.pending and self.session)


class SetupWizard:
    """Drive the interactive TAN setup of one account."""

    def __init__(  # NOQA: PLR0913
        self,
        client: BankingProtocolClientPort,
        repository: AuthRecordRepository,
        interaction_store: InteractionStore,
        policy: ExpiryPolicy,
        no_anonymous_dialog_blz: Iterable[str] = (),
        anonymous_dialog_error_markers: Iterable[str] = (),
        interaction_ttl_seconds: int = DEFAULT_INTERACTION_TTL_SECONDS,
        clock: Clock = utc_now,
    ):
        self._client = client
        self._repository = repository
        self._store = interaction_store
        self._policy = policy
        self._no_anonymous_dialog_blz = {b.strip() for b in no_anonymous_dialog_blz}
        self._anonymous_dialog_error_markers = tuple(anonymous_dialog_error_markers)
        self._ttl = interaction_ttl_seconds
        self._clock = clock

    @classmethod
    def from_factory(cls, factory: BankingServiceFactory) -> SetupWizard:
        settings = factory.settings
        return cls(
            client=factory.protocol_client(),
            repository=factory.auth_record_repository(),
            interaction_store=factory.interaction_store(),
            policy=factory.expiry_policy(),
            no_anonymous_dialog_blz=settings.fints_no_anonymous_dialog_blz,
            anonymous_dialog_error_markers=settings.fints_anonymous_dialog_error_markers,
            interaction_ttl_seconds=settings.fints_setup_ttl_seconds,
            clock=factory.clock,
        )

    # ------------------------------------------------------------------
    # Step 1: TAN modes
    # ------------------------------------------------------------------

    async def show_tan_modes(self, actor: str, config: BankAccountConfig) -> WizardStep:
        """Entry state: list the TAN modes the user can choose from."""
        account = config.account
        try:
            tan_modes = self._discover_tan_modes(config)
        except BankingDomainError as e:
            logger.warning("Failed to query TAN modes for account %s: %s", account, e)
            return WizardStep(
                state=WizardState.SELECT_TAN_MODE,
                account=account,
                error=f"Failed to connect to bank: {e}",
            )

        logger.info("Offering %d TAN mode(s) for account %s", len(tan_modes), account)
        return WizardStep(
            state=WizardState.SELECT_TAN_MODE,
            account=account,
            tan_modes=tan_modes,
        )

    def _discover_tan_modes(self, config: BankAccountConfig) -> list[TANMethod]:
        # Some institutes reject the anonymous dialog and only allow access
        # without PSD2 TANs
        if config.blz.strip() in self._no_anonymous_dialog_blz:
            logger.info(
                "BLZ %s does not support the anonymous dialog, offering unattended mode",
                config.blz,
            )
            return [TANMethod.unattended()]

        handle = self._client.create(config.credentials)
        try:
            return self._client.list_modes(handle)
        except RemoteOperationFailedError as e:
            message = str(e)
            if any(marker in message for marker in self._anonymous_dialog_error_markers):
                logger.info(
                    "Anonymous dialog rejected for BLZ %s, offering unattended mode",
                    config.blz,
                )
                return [TANMethod.unattended()]
            raise

    async def select_tan_mode(
        self,
        actor: str,
        config: BankAccountConfig,
        tan_mode: Optional[str],
    ) -> WizardStep:
        """User picked a TAN mode; ask for a medium if the mode needs one."""
        account = config.account
        if not tan_mode:
            return await self.show_tan_modes(actor, config)

        key = self._key(actor, account)

        if is_unattended_mode(tan_mode):
            await self._save_interaction(key, SetupInteraction(tan_mode=UNATTENDED_TAN_MODE))
            return await self.authenticate(actor, config)

        await self._save_interaction(key, SetupInteraction(tan_mode=str(tan_mode)))

        try:
            handle = self._client.create(config.credentials)
            selected = next(
                (m for m in self._client.list_modes(handle) if m.code == str(tan_mode)),
                None,
            )
            if selected is None:
                return WizardStep(
                    state=WizardState.SELECT_TAN_MODE,
                    account=account,
                    error="Invalid TAN mode selected",
                )

            if selected.needs_tan_medium:
                return WizardStep(
                    state=WizardState.SELECT_TAN_MEDIUM,
                    account=account,
                    tan_mode=selected,
                    tan_media=self._client.list_media(handle, selected),
                )
        except BankingDomainError as e:
            logger.warning("TAN mode selection failed for account %s: %s", account, e)
            return WizardStep(
                state=WizardState.SELECT_TAN_MODE,
                account=account,
                error=str(e),
            )

        return await self.authenticate(actor, config)

    # ------------------------------------------------------------------
    # Step 2: TAN medium
    # ------------------------------------------------------------------

    async def select_tan_medium(
        self,
        actor: str,
        config: BankAccountConfig,
        tan_medium: Optional[str],
    ) -> WizardStep:
        if not tan_medium:
            return await self.show_tan_modes(actor, config)

        key = self._key(actor, config.account)
        interaction = await self._load_interaction(key, config.account)
        await self._save_interaction(
            key,
            SetupInteraction(tan_mode=interaction.tan_mode, tan_medium=tan_medium),
        )
        return await self.authenticate(actor, config)

    # ------------------------------------------------------------------
    # Step 3: login
    # ------------------------------------------------------------------

    async def authenticate(self, actor: str, config: BankAccountConfig) -> WizardStep:
        """Log in with the chosen mode; either done or waiting for a TAN.

        Raises
        ------
        SetupSessionExpiredError
            If no TAN mode was chosen in this setup session
        """
        account = config.account
        key = self._key(actor, account)
        interaction = await self._load_interaction(key, account)

        logger.info(
            "Setup of account %s: %s with TAN mode %s",
            account,
            WizardState.AUTHENTICATING.value,
            interaction.tan_mode,
        )

        try:
            handle = self._client.create(config.credentials)
            self._select_mode(handle, interaction)

            login = self._client.login(handle)
            if login.needs_challenge:
                await self._save_interaction(
                    key,
                    SetupInteraction(
                        tan_mode=interaction.tan_mode,
                        tan_medium=interaction.tan_medium,
                        pending=_encode(self._client.dump_pending(login.pending)),
                        session=_encode(self._client.persist(handle)),
                    ),
                )
                logger.info("Setup of account %s is waiting for a TAN", account)
                return WizardStep(
                    state=WizardState.AWAITING_CHALLENGE_RESPONSE,
                    account=account,
                    challenge=login.challenge,
                )

            await self._write_record(account, interaction, self._client.persist(handle))

        except BankingDomainError as e:
            logger.error("Setup of account %s failed: %s", account, e)
            return WizardStep(state=WizardState.ERROR, account=account, error=str(e))

        await self._store.delete(key)
        return WizardStep(state=WizardState.SUCCESS, account=account)

    # ------------------------------------------------------------------
    # Step 4: TAN entry
    # ------------------------------------------------------------------

    async def submit_challenge_response(
        self,
        actor: str,
        config: BankAccountConfig,
        response: Optional[str],
    ) -> WizardStep:
        """Submit the TAN; a failure keeps the pending state for another try.

        Raises
        ------
        SetupSessionExpiredError
            If the pending login is missing or unreadable
        """
        account = config.account
        if not response or not response.strip():
            return WizardStep(
                state=WizardState.ERROR,
                account=account,
                error="No TAN provided",
            )

        key = self._key(actor, account)
        interaction = await self._load_interaction(key, account)
        if not interaction.awaits_challenge:
            raise SetupSessionExpiredError(account)

        try:
            session_blob = _decode(interaction.session)
            pending_blob = _decode(interaction.pending)
        except (binascii.Error, ValueError) as e:
            raise SetupSessionExpiredError(account) from e

        try:
            handle = self._client.create(config.credentials, session_blob)
            self._select_mode(handle, interaction)
            pending = self._client.load_pending(pending_blob)
            self._client.submit_challenge_response(handle, pending, response.strip())

            await self._write_record(account, interaction, self._client.persist(handle))

        except BankingDomainError as e:
            logger.error("TAN submission failed for account %s: %s", account, e)
            return WizardStep(
                state=WizardState.ERROR,
                account=account,
                error=f"TAN submission failed: {e}",
            )

        await self._store.delete(key)
        return WizardStep(state=WizardState.SUCCESS, account=account)

    async def cancel(self, actor: str, account: str) -> None:
        """Drop any in-flight state so the next attempt starts clean."""
        await self._store.delete(self._key(actor, account))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _key(actor: str, account: str) -> str:
        return f"fints-setup:{actor}:{account}"

    async def _save_interaction(self, key: str, interaction: SetupInteraction) -> None:
        await self._store.set(key, interaction.model_dump(), self._ttl)

    async def _load_interaction(self, key: str, account: str) -> SetupInteraction:
        data = await self._store.get(key)
        if not data:
            raise SetupSessionExpiredError(account)
        try:
            return SetupInteraction.model_validate(data)
        except PydanticValidationError as e:
            raise SetupSessionExpiredError(account) from e

    def _select_mode(self, handle: ClientHandle, interaction: SetupInteraction) -> None:
        if is_unattended_mode(interaction.tan_mode):
            self._client.select_unattended_mode(handle)
        else:
            self._client.select_mode(handle, interaction.tan_mode, interaction.tan_medium)

    async def _write_record(
        self,
        account: str,
        interaction: SetupInteraction,
        persisted_state: bytes,
    ) -> None:
        record = await self._repository.find_by_account(account)
        if record is None:
            record = AuthRecord.empty(account)

        record.mark_authenticated(
            tan_mode=interaction.tan_mode,
            tan_medium=interaction.tan_medium,
            persisted_state=persisted_state,
            now=self._clock(),
            validity_days=self._policy.validity_days,
        )
        await self._repository.save(record)

        logger.info(
            "FinTS setup completed for account %s, valid until %s",
            account,
            record.auth_expires,
        )


def _encode(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def _decode(data: Optional[str]) -> bytes:
    if not data:
        msg = "empty payload"
        raise ValueError(msg)
    return base64.b64decode(data, validate=True)
