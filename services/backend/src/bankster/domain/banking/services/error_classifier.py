"""Classification of protocol client errors.

The protocol client does not expose structured error codes, so errors are
classified by looking for the bank's return codes in the error text.
Precision limits: a bank that rewords its messages or drops the code
produces false negatives; false positives are unlikely because the codes
are four digit FinTS return codes. Rules come from configuration so a new
code can be added without touching the control flow.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Iterable, Sequence

if TYPE_CHECKING:
    from bankster_config.settings import Settings


class ErrorCategory(str, Enum):
    AUTHENTICATION_INVALIDATED = "authentication_invalidated"
    OTHER = "other"


@dataclass(frozen=True)
class ClassificationRule:
    """Maps a return code found in the error text to a category."""

    code: str
    category: ErrorCategory = ErrorCategory.AUTHENTICATION_INVALIDATED
    description: str = ""

    def matches(self, text: str) -> bool:
        return bool(self.code) and self.code in text


# FinTS return codes meaning the dialog is no longer valid
DEFAULT_RULES: tuple[ClassificationRule, ...] = (
    ClassificationRule("9010", description="Ungültige Dialogkennung"),
    ClassificationRule("9120", description="Dialog bereits beendet oder abgebrochen"),
    ClassificationRule("9800", description="Der Dialog wurde abgebrochen"),
)


class ErrorClassifier:
    """Ordered list of rules; the first match wins."""

    def __init__(self, rules: Sequence[ClassificationRule] = DEFAULT_RULES):
        self._rules = tuple(rules)

    @classmethod
    def from_codes(cls, codes: Iterable[str]) -> ErrorClassifier:
        return cls([ClassificationRule(code.strip()) for code in codes if code.strip()])

    @classmethod
    def from_settings(cls, settings: Settings) -> ErrorClassifier:
        return cls.from_codes(settings.fints_auth_error_codes)

    @property
    def rules(self) -> tuple[ClassificationRule, ...]:
        return self._rules

    def with_rule(self, rule: ClassificationRule) -> ErrorClassifier:
        return ErrorClassifier([*self._rules, rule])

    def classify(self, error: BaseException | str) -> ErrorCategory:
        text = error if isinstance(error, str) else str(error)
        for rule in self._rules:
            if rule.matches(text):
                return rule.category
        return ErrorCategory.OTHER

    def is_authentication_error(self, error: BaseException | str) -> bool:
        return self.classify(error) is ErrorCategory.AUTHENTICATION_INVALIDATED
