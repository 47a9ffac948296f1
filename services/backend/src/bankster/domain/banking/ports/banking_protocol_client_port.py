"""Banking protocol client port interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import TYPE_CHECKING, Any, Callable, Optional

if TYPE_CHECKING:
    from bankster.domain.banking.value_objects.bank_credentials import BankCredentials
    from bankster.domain.banking.value_objects.protocol_results import (
        LoginResult,
        OperationResult,
    )
    from bankster.domain.banking.value_objects.tan_method import TANMedium, TANMethod

# Opaque, client specific live session object
ClientHandle = Any


class BankingProtocolClientPort(ABC):
    """
    Interface to the FinTS protocol client.

    The client owns message framing, TAN cryptography and the format of the
    persisted session blob. All calls are synchronous and may block on the
    network for a long time; there is no timeout guarantee.

    Every method may raise RemoteOperationFailedError whose message carries
    the remote text, the only signal available for error classification.
    """

    @abstractmethod
    def create(
        self,
        credentials: BankCredentials,
        persisted_state: Optional[bytes] = None,
    ) -> ClientHandle:
        """
        Build a client handle.

        Parameters
        ----------
        credentials
            Bank credentials for authentication
        persisted_state
            Blob from a previous persist() to resume a session; None starts
            a fresh anonymous session
        """

    @abstractmethod
    def select_unattended_mode(self, handle: ClientHandle) -> None:
        """Select the mode without per-operation TAN."""

    @abstractmethod
    def select_mode(
        self,
        handle: ClientHandle,
        mode_id: str,
        medium: Optional[str] = None,
    ) -> None:
        """
        Select a regular TAN mode.

        Parameters
        ----------
        mode_id
            TAN method code (e.g., "946" for SecureGo plus)
        medium
            Device name for modes that need one
        """

    @abstractmethod
    def login(self, handle: ClientHandle) -> LoginResult:
        """
        Open an authenticated dialog.

        Returns
        -------
        LoginResult with ``needs_challenge`` set when the bank demands a TAN;
        ``pending`` then holds the operation to resume.
        """

    @abstractmethod
    def submit_challenge_response(
        self,
        handle: ClientHandle,
        pending: Any,
        response: str,
    ) -> None:
        """Answer the challenge of a pending operation."""

    @abstractmethod
    def execute(
        self,
        handle: ClientHandle,
        operation: Callable[[Any], Any],
    ) -> OperationResult:
        """
        Run a business operation inside a dialog.

        Parameters
        ----------
        operation
            Called with the raw client; its return value ends up in
            ``OperationResult.data`` unless the bank demands a TAN
        """

    @abstractmethod
    def persist(self, handle: ClientHandle) -> bytes:
        """Serialize the session state of the handle (opaque blob)."""

    @abstractmethod
    def list_modes(self, handle: ClientHandle) -> list[TANMethod]:
        """
        Get available TAN modes from the bank.

        Uses the anonymous sync dialog, which some institutes reject.
        """

    @abstractmethod
    def list_media(self, handle: ClientHandle, mode: TANMethod) -> list[TANMedium]:
        """Get the TAN media registered for a mode."""

    @abstractmethod
    def dump_pending(self, pending: Any) -> bytes:
        """Serialize a pending operation so it can cross a request boundary."""

    @abstractmethod
    def load_pending(self, data: bytes) -> Any:
        """Restore a pending operation serialized by dump_pending()."""

    @abstractmethod
    def list_accounts(self, handle: ClientHandle) -> OperationResult:
        """List SEPA accounts visible to the login (``data`` is a list)."""

    @abstractmethod
    def fetch_transactions(
        self,
        handle: ClientHandle,
        sepa_account: Any,
        start_date: date,
        end_date: date,
    ) -> OperationResult:
        """Fetch the statement of one SEPA account.

        ``data`` is a list of BankTransaction.
        """
