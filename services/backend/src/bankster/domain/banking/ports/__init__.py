"""Ports (interfaces) for the banking domain."""

from bankster.domain.banking.ports.banking_backend_port import BankingBackend
from bankster.domain.banking.ports.banking_protocol_client_port import (
    BankingProtocolClientPort,
    ClientHandle,
)
from bankster.domain.banking.ports.interaction_store_port import InteractionStore

__all__ = [
    "BankingBackend",
    "BankingProtocolClientPort",
    "ClientHandle",
    "InteractionStore",
]
