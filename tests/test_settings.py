"""
Tests for configuration and the audit logger.
"""

import pytest
from pydantic import ValidationError

from supportbank.audit import AuditLogger, InMemoryAuditStorage, create_correlation_id
from supportbank.config import get_settings, validate_all_settings
from supportbank.config.settings import ExportSettings, ImportSettings, LoggingSettings
from supportbank.models.audit import AuditEventBuilder, AuditEventType


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self, monkeypatch):
        """Test the values used when nothing is configured."""
        for name in (
            "SUPPORTBANK_LOG_FILE",
            "SUPPORTBANK_LOG_LEVEL",
            "SUPPORTBANK_IMPORT_WIPE_EXISTING",
            "SUPPORTBANK_EXPORT_JSON_INDENT",
        ):
            monkeypatch.delenv(name, raising=False)

        settings = get_settings()
        assert settings.logging.file == "debug.log"
        assert settings.logging.level == "DEBUG"
        assert settings.imports.wipe_existing is True
        assert settings.exports.json_indent == 2

    def test_environment_override(self, monkeypatch):
        """Test that each section reads its own prefix."""
        monkeypatch.setenv("SUPPORTBANK_LOG_LEVEL", "warning")
        monkeypatch.setenv("SUPPORTBANK_IMPORT_WIPE_EXISTING", "false")
        monkeypatch.setenv("SUPPORTBANK_EXPORT_XML_INDENT", "4")

        assert LoggingSettings().level == "WARNING"
        assert ImportSettings().wipe_existing is False
        assert ExportSettings().xml_indent == 4

    def test_invalid_level(self, monkeypatch):
        """Test that unknown level names are rejected."""
        monkeypatch.setenv("SUPPORTBANK_LOG_LEVEL", "LOUD")
        with pytest.raises(ValidationError):
            LoggingSettings()

    def test_indent_bounds(self, monkeypatch):
        """Test that indentation is limited."""
        monkeypatch.setenv("SUPPORTBANK_EXPORT_JSON_INDENT", "12")
        with pytest.raises(ValidationError):
            ExportSettings()

    def test_validate_all_reports_failures(self, monkeypatch):
        """Test the startup check."""
        monkeypatch.setenv("SUPPORTBANK_LOG_LEVEL", "LOUD")
        status = validate_all_settings()

        assert status["logging"] is False
        assert "LOUD" in status["logging_error"]
        assert status["imports"] is True
        assert status["exports"] is True


class BrokenStorage(InMemoryAuditStorage):
    def append_event(self, event):
        raise RuntimeError("disk full")


class TestAuditLogger:
    """Tests for AuditLogger."""

    def test_events_reach_storage(self):
        """Test that logged events are persisted."""
        storage = InMemoryAuditStorage()
        logger = AuditLogger(storage)
        correlation_id = create_correlation_id()

        logger.log_export_completed(
            path="out.csv",
            file_format="csv",
            transaction_count=3,
            correlation_id=correlation_id,
        )

        events = storage.get_events_by_correlation_id(correlation_id)
        assert [event.event_type for event in events] == [AuditEventType.EXPORT_COMPLETED]

    def test_storage_failure_is_not_raised(self):
        """Test that a broken audit trail never breaks a command."""
        logger = AuditLogger(BrokenStorage())
        event = AuditEventBuilder.session_started(create_correlation_id())
        assert logger.log(event) is False

    def test_without_storage(self):
        """Test that local-only logging succeeds."""
        event = AuditEventBuilder.session_ended(create_correlation_id())
        assert AuditLogger().log(event) is True

    def test_recent_events_newest_first(self):
        """Test the ordering of recent events."""
        storage = InMemoryAuditStorage()
        logger = AuditLogger(storage)
        logger.log_session_started(create_correlation_id())
        logger.log_session_ended(create_correlation_id())

        recent = storage.get_recent_events(limit=1)
        assert recent[0].event_type == AuditEventType.SESSION_ENDED


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
