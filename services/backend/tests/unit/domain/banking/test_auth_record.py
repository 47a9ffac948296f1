"""Unit tests for the AuthRecord entity."""

from datetime import timedelta

from bankster.domain.banking.entities import AuthRecord
from tests.shared.fixtures import NOW, make_record


class TestAuthRecordConfiguration:
    def test_empty_record_is_not_configured(self):
        record = AuthRecord.empty("giro-1")

        assert record.is_configured() is False
        assert record.persisted_state is None
        assert record.auth_expires is None

    def test_blank_tan_mode_is_not_configured(self):
        assert make_record(tan_mode="  ").is_configured() is False

    def test_regular_mode_is_configured(self):
        record = make_record(tan_mode="946")

        assert record.is_configured() is True
        assert record.uses_unattended_mode is False

    def test_unattended_mode_detected(self):
        assert make_record(tan_mode="-1").uses_unattended_mode is True


class TestAuthRecordLifecycle:
    def test_mark_authenticated_sets_window_and_resets_warnings(self):
        record = make_record(tan_mode="946", warning_level=2)
        record.last_warning_sent = NOW - timedelta(days=1)

        record.mark_authenticated(
            tan_mode="972",
            tan_medium="Mein Handy",
            persisted_state=b"fresh",
            now=NOW,
            validity_days=90,
        )

        assert record.tan_mode == "972"
        assert record.tan_medium == "Mein Handy"
        assert record.persisted_state == b"fresh"
        assert record.last_auth == NOW
        assert record.auth_expires == NOW + timedelta(days=90)
        assert record.warning_level == 0
        assert record.last_warning_sent is None
        assert record.updated_at == NOW

    def test_mark_expired_moves_expiry_to_now(self):
        record = make_record(expires_in_days=60)

        record.mark_expired(NOW)

        assert record.auth_expires == NOW
        # Only a fresh authentication moves last_auth
        assert record.last_auth == NOW + timedelta(days=60) - timedelta(days=90)

    def test_replace_persisted_state_keeps_expiry(self):
        record = make_record(expires_in_days=10)
        expires = record.auth_expires

        record.replace_persisted_state(b"advanced", NOW)

        assert record.persisted_state == b"advanced"
        assert record.auth_expires == expires

    def test_record_warning(self):
        record = make_record()

        record.record_warning(1, NOW)

        assert record.warning_level == 1
        assert record.last_warning_sent == NOW

    def test_repr_hides_persisted_state(self):
        assert "stored-state" not in repr(make_record())
