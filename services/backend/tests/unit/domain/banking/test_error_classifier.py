"""Unit tests for ErrorClassifier."""

import pytest

from bankster.domain.banking.exceptions import RemoteOperationFailedError
from bankster.domain.banking.services import (
    ClassificationRule,
    ErrorCategory,
    ErrorClassifier,
)


class TestErrorClassifier:
    """Classification of remote error text by FinTS return code."""

    @pytest.fixture
    def classifier(self):
        return ErrorClassifier()

    @pytest.mark.parametrize(
        "message",
        [
            "9010 - Ungültige Dialogkennung",
            "Dialog response: 9120 Dialog bereits beendet",
            "FinTSClientError: 9800 - Der Dialog wurde abgebrochen",
        ],
    )
    def test_known_codes_are_authentication_errors(self, classifier, message):
        error = RemoteOperationFailedError(message)

        assert classifier.classify(error) is ErrorCategory.AUTHENTICATION_INVALIDATED
        assert classifier.is_authentication_error(error) is True

    @pytest.mark.parametrize(
        "message",
        [
            "Connection refused",
            "9999 - Nachricht enthält Fehler",
            "3920 - Zugelassene Zwei-Schritt-Verfahren",
            "",
        ],
    )
    def test_other_errors_are_not_authentication_errors(self, classifier, message):
        assert classifier.classify(message) is ErrorCategory.OTHER
        assert classifier.is_authentication_error(RuntimeError(message)) is False

    def test_plain_exceptions_are_classified_by_text(self, classifier):
        assert classifier.is_authentication_error(ValueError("code 9010")) is True

    def test_rules_from_codes_replace_defaults(self):
        classifier = ErrorClassifier.from_codes(["9931", " ", "9942 "])

        assert [r.code for r in classifier.rules] == ["9931", "9942"]
        assert classifier.is_authentication_error("9942 PIN gesperrt") is True
        assert classifier.is_authentication_error("9800 abgebrochen") is False

    def test_with_rule_extends_without_mutating(self, classifier):
        extended = classifier.with_rule(ClassificationRule("9075"))

        assert extended.is_authentication_error("9075 starke Kundenauthentifizierung")
        assert not classifier.is_authentication_error("9075 starke Kundenauthentifizierung")

    def test_first_matching_rule_wins(self):
        classifier = ErrorClassifier(
            [
                ClassificationRule("9800", category=ErrorCategory.OTHER),
                ClassificationRule("9800"),
            ],
        )

        assert classifier.classify("9800") is ErrorCategory.OTHER

    def test_empty_rule_code_never_matches(self):
        assert ClassificationRule("").matches("anything") is False

    def test_from_settings_uses_configured_codes(self):
        from bankster_config.settings import Settings

        settings = Settings(encryption_key="irrelevant", fints_auth_error_codes="1111,2222")

        classifier = ErrorClassifier.from_settings(settings)

        assert classifier.is_authentication_error("2222 expired") is True
        assert classifier.is_authentication_error("9010") is False
