"""Unit tests for BankAccountConfig and SepaAccount."""

import pytest

from bankster.domain.banking.value_objects import BankAccountConfig, SepaAccount


class TestBankAccountConfig:
    def test_from_backend_config(self):
        config = BankAccountConfig.from_backend_config(
            "giro-1",
            {
                "url": "https://fints.example.com",
                "code": "50010517",
                "user": "alice",
                "pass": "secret",
                "ident": "1234567",
            },
        )

        assert config.account == "giro-1"
        assert config.blz == "50010517"
        assert config.ident == "1234567"
        assert config.credentials.pin.get_value() == "secret"

    def test_credentials_are_masked(self):
        config = BankAccountConfig.from_backend_config(
            "giro-1",
            {"url": "https://x", "code": "12345678", "user": "alice", "pass": "secret"},
        )

        assert "secret" not in repr(config)
        assert config.ident is None

    def test_non_numeric_blz_is_rejected(self):
        with pytest.raises(ValueError):
            BankAccountConfig.from_backend_config(
                "giro-1",
                {"url": "https://x", "code": "ABCDEFGH", "user": "a", "pass": "b"},
            )


class TestSepaAccount:
    @pytest.fixture
    def account(self):
        return SepaAccount(
            iban="DE89370400440532013000",
            bic="COBADEFFXXX",
            account_number="0532013000",
            blz="37040044",
        )

    def test_matches_account_number_fragment(self, account):
        assert account.matches("532013") is True

    def test_matches_iban_fragment(self, account):
        assert account.matches("DE8937") is True

    def test_does_not_match_other(self, account):
        assert account.matches("999999") is False
