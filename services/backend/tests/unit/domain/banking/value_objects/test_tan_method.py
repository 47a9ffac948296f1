"""Unit tests for TAN method value objects."""

import pytest

from bankster.domain.banking.value_objects import (
    UNATTENDED_TAN_MODE,
    TANMedium,
    TANMethod,
    TANMethodType,
    is_unattended_mode,
)


class TestUnattendedMode:
    @pytest.mark.parametrize("value", ["-1", -1, " -1 "])
    def test_sentinel_variants_are_unattended(self, value):
        assert is_unattended_mode(value) is True

    @pytest.mark.parametrize("value", [None, "", "946", "1", 0])
    def test_other_values_are_not_unattended(self, value):
        assert is_unattended_mode(value) is False

    def test_unattended_method(self):
        method = TANMethod.unattended()

        assert method.code == UNATTENDED_TAN_MODE
        assert method.method_type == TANMethodType.UNATTENDED
        assert method.is_unattended is True
        assert method.needs_tan_medium is False


class TestTANMethod:
    def test_str_marks_app_based_methods(self):
        method = TANMethod(code="946", name="SecureGo plus", is_decoupled=True)

        assert str(method) == "946: SecureGo plus (app-based)"

    def test_is_frozen(self):
        method = TANMethod(code="946", name="SecureGo plus")

        with pytest.raises(Exception):  # NOQA: B017
            method.code = "972"

    def test_medium_requires_name(self):
        with pytest.raises(ValueError):
            TANMedium(name="")
