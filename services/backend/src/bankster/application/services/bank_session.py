"""Live FinTS session of one account."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from bankster.domain.banking.entities import AuthRecord
    from bankster.domain.banking.ports import BankingProtocolClientPort, ClientHandle
    from bankster.domain.banking.value_objects import BankAccountConfig


@dataclass
class BankSession:
    """Protocol client handle plus the record it was built from.

    ``renewal_attempted`` guards against recursive renewal. It lives on
    the session instance only: a new process or request always gets a
    fresh chance to renew.
    """

    config: BankAccountConfig
    handle: ClientHandle
    record: Optional[AuthRecord]
    renewal_attempted: bool = False

    @property
    def account(self) -> str:
        return self.config.account


def build_handle(
    client: BankingProtocolClientPort,
    config: BankAccountConfig,
    record: Optional[AuthRecord],
) -> ClientHandle:
    """Create a client handle, resuming persisted state and selecting the mode."""
    persisted_state = record.persisted_state if record else None
    handle = client.create(config.credentials, persisted_state)

    if record is not None and record.is_configured():
        if record.uses_unattended_mode:
            client.select_unattended_mode(handle)
        else:
            client.select_mode(handle, str(record.tan_mode), record.tan_medium)

    return handle
