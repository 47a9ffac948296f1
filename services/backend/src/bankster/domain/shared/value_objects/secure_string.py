"""Secure string value object for sensitive data."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema


@dataclass(frozen=True)
class SecureString:
    """
    Value object that wraps a bank login or PIN.

    The value never shows up in ``str()``, ``repr()``, log lines or
    serialized models; it is only reachable via get_value().
    """

    _value: str

    def __post_init__(self):
        if not isinstance(self._value, str):
            msg = "SecureString value must be a string"
            raise TypeError(msg)

        if not self._value:
            msg = "SecureString cannot be empty"
            raise ValueError(msg)

    def get_value(self) -> str:
        return self._value

    def __str__(self) -> str:
        return "*****"

    def __repr__(self) -> str:
        return "SecureString(*****)"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SecureString):
            return False
        return self._value == other._value

    def __hash__(self) -> int:
        return hash(self._value)

    @classmethod
    def __get_pydantic_core_schema__(
        cls,
        source_type: Any,
        handler: GetCoreSchemaHandler,
    ) -> core_schema.CoreSchema:
        """Let pydantic models hold SecureString fields, serialized masked."""
        return core_schema.no_info_plain_validator_function(
            cls._pydantic_validate,
            serialization=core_schema.plain_serializer_function_ser_schema(
                lambda _: "*****",
                return_schema=core_schema.str_schema(),
            ),
        )

    @classmethod
    def _pydantic_validate(cls, value: Any) -> SecureString:
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            msg = "SecureString value must be a string"
            raise TypeError(msg)
        return cls(value)
