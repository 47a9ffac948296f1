"""DTO describing where the FinTS setup wizard stands."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from bankster.domain.banking.value_objects import TANChallenge, TANMedium, TANMethod


class WizardState(str, Enum):
    """States of the interactive FinTS setup."""

    SELECT_TAN_MODE = "select_tan_mode"
    SELECT_TAN_MEDIUM = "select_tan_medium"
    AUTHENTICATING = "authenticating"
    AWAITING_CHALLENGE_RESPONSE = "awaiting_challenge_response"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class WizardStep:
    """Result of one wizard step, rendered by the setup interface.

    ``error`` on a SELECT_TAN_MODE step means the mode list could not be
    shown; on an ERROR step it carries the underlying message for diagnosis.
    """

    state: WizardState
    account: str
    tan_modes: list[TANMethod] = field(default_factory=list)
    tan_mode: Optional[TANMethod] = None
    tan_media: list[TANMedium] = field(default_factory=list)
    challenge: Optional[TANChallenge] = None
    error: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.state in (WizardState.SUCCESS, WizardState.ERROR)

    def to_dict(self) -> dict:
        return {
            "state": self.state.value,
            "account": self.account,
            "tan_modes": [m.model_dump(mode="json") for m in self.tan_modes],
            "tan_mode": self.tan_mode.model_dump(mode="json") if self.tan_mode else None,
            "tan_media": [m.model_dump(mode="json") for m in self.tan_media],
            "challenge": (
                {
                    "challenge_text": self.challenge.challenge_text,
                    "tan_medium_name": self.challenge.tan_medium_name,
                    "hhduc_code": self.challenge.hhduc_code,
                    "is_decoupled": self.challenge.is_decoupled,
                }
                if self.challenge
                else None
            ),
            "error": self.error,
        }
