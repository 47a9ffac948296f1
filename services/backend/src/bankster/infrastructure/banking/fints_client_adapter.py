"""FinTS protocol client adapter backed by python-fints.

This adapter implements BankingProtocolClientPort and serves as an
anti-corruption layer: python-fints dialogs, segments and response
objects never leave this module. It is responsible for:

1. Building FinTS3PinTanClient instances, fresh or resumed from a blob
2. Pausing a dialog that waits for a TAN and resuming it later
3. Mapping python-fints models to domain value objects
4. Converting every library error to RemoteOperationFailedError
"""

from __future__ import annotations

import base64
import json
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Callable, Iterator, Optional

from fints.client import FinTS3PinTanClient, NeedRetryResponse, NeedTANResponse
from fints.formals import DescriptionRequired
from fints.models import SEPAAccount

from bankster.domain.banking.exceptions import (
    BankingDomainError,
    RemoteOperationFailedError,
)
from bankster.domain.banking.ports import BankingProtocolClientPort
from bankster.domain.banking.value_objects import (
    BankTransaction,
    LoginResult,
    OperationResult,
    SepaAccount,
    TANChallenge,
    TANMedium,
    TANMethod,
    TANMethodType,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from bankster.domain.banking.value_objects import BankCredentials
    from bankster_config.settings import Settings

logger = logging.getLogger(__name__)

# python-fints id of the single step security function (no TAN)
ONE_STEP_SECURITY_FUNCTION = "999"


@dataclass
class PendingDialog:
    """A dialog paused while the bank waits for a TAN."""

    response: NeedTANResponse
    dialog_data: bytes


class FinTSClientAdapter(BankingProtocolClientPort):
    """
    python-fints implementation of the banking protocol client.

    Handles are FinTS3PinTanClient instances. Only the TAN mode and medium
    selection is carried over between requests inside the persisted blob
    (``deconstruct(including_private=True)``).
    """

    def __init__(self, product_id: str, product_version: Optional[str] = None):
        self._product_id = product_id
        self._product_version = product_version

    @classmethod
    def from_settings(cls, settings: Settings) -> FinTSClientAdapter:
        return cls(
            product_id=settings.fints_product_id,
            product_version=settings.fints_product_version,
        )

    # ------------------------------------------------------------------
    # Session handling
    # ------------------------------------------------------------------

    def create(
        self,
        credentials: BankCredentials,
        persisted_state: Optional[bytes] = None,
    ) -> FinTS3PinTanClient:
        logger.debug(
            "Creating FinTS client for BLZ %s at %s (%s)",
            credentials.blz,
            credentials.endpoint,
            "resumed" if persisted_state else "fresh",
        )
        kwargs: dict[str, Any] = {"product_id": self._product_id}
        if self._product_version:
            kwargs["product_version"] = self._product_version
        if persisted_state:
            kwargs["from_data"] = persisted_state

        with _translate_errors("create"):
            return FinTS3PinTanClient(
                credentials.blz,
                credentials.username.get_value(),
                credentials.pin.get_value(),
                credentials.endpoint,
                **kwargs,
            )

    def select_unattended_mode(self, handle: FinTS3PinTanClient) -> None:
        with _translate_errors("select_unattended_mode"):
            handle.set_tan_mechanism(ONE_STEP_SECURITY_FUNCTION)

    def select_mode(
        self,
        handle: FinTS3PinTanClient,
        mode_id: str,
        medium: Optional[str] = None,
    ) -> None:
        with _translate_errors("select_mode"):
            handle.set_tan_mechanism(str(mode_id))
            if medium:
                handle.selected_tan_medium = medium

    def login(self, handle: FinTS3PinTanClient) -> LoginResult:
        with _translate_errors("login"), handle:
            if handle.init_tan_response:
                challenge = self._map_challenge(handle, handle.init_tan_response)
                pending = PendingDialog(
                    response=handle.init_tan_response,
                    dialog_data=handle.pause_dialog(),
                )
                logger.info("Login requires a TAN")
                return LoginResult(
                    needs_challenge=True,
                    challenge=challenge,
                    pending=pending,
                )

        return LoginResult(needs_challenge=False)

    def submit_challenge_response(
        self,
        handle: FinTS3PinTanClient,
        pending: PendingDialog,
        response: str,
    ) -> None:
        with _translate_errors("submit_challenge_response"):
            with handle.resume_dialog(pending.dialog_data):
                result = handle.send_tan(pending.response, response)
            if isinstance(result, NeedTANResponse):
                msg = "Bank requested another TAN"
                raise RemoteOperationFailedError(msg, "submit_challenge_response")

    def execute(
        self,
        handle: FinTS3PinTanClient,
        operation: Callable[[Any], Any],
    ) -> OperationResult:
        with _translate_errors("execute"), handle:
            if handle.init_tan_response:
                return self._challenge_result(handle, handle.init_tan_response)

            data = operation(handle)
            if isinstance(data, NeedTANResponse):
                return self._challenge_result(handle, data)

        return OperationResult(data=data)

    def persist(self, handle: FinTS3PinTanClient) -> bytes:
        with _translate_errors("persist"):
            return handle.deconstruct(including_private=True)

    # ------------------------------------------------------------------
    # TAN modes and media
    # ------------------------------------------------------------------

    def list_modes(self, handle: FinTS3PinTanClient) -> list[TANMethod]:
        with _translate_errors("list_modes"):
            # Runs the anonymous sync dialog to obtain the bank parameters
            handle.fetch_tan_mechanisms()
            mechanisms = handle.get_tan_mechanisms()

        methods = [
            self._map_tan_method(code, params)
            for code, params in mechanisms.items()
            if code != ONE_STEP_SECURITY_FUNCTION
        ]
        logger.info("Found %d TAN method(s)", len(methods))
        return methods

    def list_media(
        self,
        handle: FinTS3PinTanClient,
        mode: TANMethod,
    ) -> list[TANMedium]:
        with _translate_errors("list_media"):
            handle.set_tan_mechanism(mode.code)
            with handle:
                _, media = handle.get_tan_media()

        return [
            TANMedium(
                name=m.tan_medium_name,
                status=str(m.status) if getattr(m, "status", None) else None,
                mobile_number=getattr(m, "mobile_number", None),
            )
            for m in media
            if getattr(m, "tan_medium_name", None)
        ]

    # ------------------------------------------------------------------
    # Pending dialogs
    # ------------------------------------------------------------------

    def dump_pending(self, pending: PendingDialog) -> bytes:
        payload = {
            "response": _b64(pending.response.get_data()),
            "dialog": _b64(pending.dialog_data),
        }
        return json.dumps(payload).encode("utf-8")

    def load_pending(self, data: bytes) -> PendingDialog:
        try:
            payload = json.loads(data.decode("utf-8"))
            return PendingDialog(
                response=NeedRetryResponse.from_data(_unb64(payload["response"])),
                dialog_data=_unb64(payload["dialog"]),
            )
        except (ValueError, KeyError, TypeError) as e:
            msg = f"Unreadable pending dialog: {e}"
            raise RemoteOperationFailedError(msg, "load_pending") from e

    # ------------------------------------------------------------------
    # Business operations
    # ------------------------------------------------------------------

    def list_accounts(self, handle: FinTS3PinTanClient) -> OperationResult:
        result = self.execute(handle, lambda client: client.get_sepa_accounts())
        if result.needs_challenge:
            return result

        accounts = [self._map_sepa_account(a) for a in result.data or []]
        logger.info("Successfully fetched %d account(s)", len(accounts))
        return OperationResult(data=accounts)

    def fetch_transactions(
        self,
        handle: FinTS3PinTanClient,
        sepa_account: SepaAccount,
        start_date: date,
        end_date: date,
    ) -> OperationResult:
        raw_account = SEPAAccount(
            iban=sepa_account.iban,
            bic=sepa_account.bic,
            accountnumber=sepa_account.account_number,
            subaccount=sepa_account.subaccount,
            blz=sepa_account.blz,
        )
        result = self.execute(
            handle,
            lambda client: client.get_transactions(raw_account, start_date, end_date),
        )
        if result.needs_challenge:
            return result

        return OperationResult(data=self._map_transactions(result.data or []))

    # ------------------------------------------------------------------
    # Mapping
    # ------------------------------------------------------------------

    def _challenge_result(
        self,
        handle: FinTS3PinTanClient,
        response: NeedTANResponse,
    ) -> OperationResult:
        logger.info("Operation requires a TAN")
        return OperationResult(
            needs_challenge=True,
            challenge=self._map_challenge(handle, response),
            pending=response,
        )

    @staticmethod
    def _map_challenge(
        handle: FinTS3PinTanClient,
        response: NeedTANResponse,
    ) -> TANChallenge:
        matrix = getattr(response, "challenge_matrix", None)
        return TANChallenge(
            challenge_text=getattr(response, "challenge", None) or "",
            tan_medium_name=getattr(handle, "selected_tan_medium", None),
            is_decoupled=bool(getattr(response, "decoupled", False)),
            hhduc_code=getattr(response, "challenge_hhduc", None),
            matrix_code=tuple(matrix) if matrix else None,
        )

    @staticmethod
    def _map_tan_method(code: str, params: Any) -> TANMethod:
        is_decoupled = getattr(params, "decoupled_max_poll_number", None) is not None
        return TANMethod(
            code=str(code),
            name=getattr(params, "name", None) or str(code),
            method_type=(
                TANMethodType.DECOUPLED if is_decoupled else TANMethodType.UNKNOWN
            ),
            is_decoupled=is_decoupled,
            needs_tan_medium=(
                getattr(params, "description_required", None) == DescriptionRequired.MUST
            ),
            max_tan_length=getattr(params, "max_length_input", None),
        )

    @staticmethod
    def _map_sepa_account(account: SEPAAccount) -> SepaAccount:
        return SepaAccount(
            iban=account.iban,
            bic=account.bic,
            account_number=account.accountnumber or "",
            subaccount=account.subaccount,
            blz=account.blz or "",
        )

    def _map_transactions(self, entries: Sequence[Any]) -> list[BankTransaction]:
        transactions = []

        for entry in entries:
            try:
                transactions.append(self._map_transaction(entry.data))
            except Exception as e:  # NOQA: PERF203
                logger.warning("Failed to map transaction: %s. Skipping.", e)
                continue

        return transactions

    @staticmethod
    def _map_transaction(data: dict[str, Any]) -> BankTransaction:
        amount = data["amount"]
        value = getattr(amount, "amount", amount)
        currency = getattr(amount, "currency", None) or data.get("currency") or "EUR"
        booking_date = data.get("entry_date") or data["date"]

        return BankTransaction(
            booking_date=_as_date(booking_date),
            value_date=_as_date(data.get("date")),
            amount=Decimal(str(value)),
            currency=currency,
            purpose=data.get("purpose") or "",
            applicant_name=data.get("applicant_name"),
            applicant_iban=data.get("applicant_iban"),
            applicant_bic=data.get("applicant_bin"),
            bank_reference=data.get("bank_reference"),
            end_to_end_reference=data.get("end_to_end_reference"),
            posting_text=data.get("posting_text"),
        )


@contextmanager
def _translate_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except BankingDomainError:
        raise
    except Exception as e:
        logger.error("FinTS %s failed: %s", operation, e)
        raise RemoteOperationFailedError(str(e), operation) from e


def _as_date(value: Optional[date]) -> Optional[date]:
    # mt940 returns its own date subclass
    if value is None:
        return None
    return date(value.year, value.month, value.day)


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def _unb64(data: str) -> bytes:
    return base64.b64decode(data)
