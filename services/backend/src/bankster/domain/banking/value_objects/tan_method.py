"""TAN Method value objects.

Represents the TAN modes and media a bank offers. The reserved
``UNATTENDED_TAN_MODE`` identifies the mode without per-operation TANs,
the only one that can be renewed without a human.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

UNATTENDED_TAN_MODE = "-1"


def is_unattended_mode(tan_mode: object) -> bool:
    """Check a stored or submitted mode id against the reserved sentinel.

    Older records store the id as integer.
    """
    if tan_mode is None:
        return False
    return str(tan_mode).strip() == UNATTENDED_TAN_MODE


class TANMethodType(str, Enum):
    """Type of TAN authentication method."""

    UNATTENDED = "unattended"
    DECOUPLED = "decoupled"
    SMS = "sms"
    CHIPTAN = "chiptan"
    PHOTO_TAN = "photo_tan"
    MANUAL = "manual"
    UNKNOWN = "unknown"


class TANMethod(BaseModel):
    """Represents a TAN authentication method supported by a bank."""

    code: str = Field(..., description="Tan ID code (e.g., '946', '972')")
    name: str = Field(..., description="e.g., 'SecureGo plus'")
    method_type: TANMethodType = Field(default=TANMethodType.UNKNOWN)
    is_decoupled: bool = Field(default=False, description="True if app-based approval")
    needs_tan_medium: bool = Field(
        default=False,
        description="True if a secondary device must be chosen",
    )
    max_tan_length: int | None = Field(default=None)

    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
    )

    def __str__(self) -> str:
        type_str = " (app-based)" if self.is_decoupled else ""
        return f"{self.code}: {self.name}{type_str}"

    @property
    def is_unattended(self) -> bool:
        return is_unattended_mode(self.code)

    @classmethod
    def unattended(cls) -> "TANMethod":
        return cls(
            code=UNATTENDED_TAN_MODE,
            name="No TAN (unattended access)",
            method_type=TANMethodType.UNATTENDED,
        )


class TANMedium(BaseModel):
    """A device registered for a TAN mode (phone, TAN generator)."""

    name: str = Field(..., min_length=1)
    status: str | None = Field(default=None)
    mobile_number: str | None = Field(default=None)

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    def __str__(self) -> str:
        return self.name
