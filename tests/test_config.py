"""
Tests for config loading, logging setup, errors and email notifications.
"""

import json
import logging
import os
from unittest import mock

import pytest

from config import EventConfig, LoggingConfig, load_config
from errors import BackendError, PortalError, backend_call, describe_error
from logging_config import JSONFormatter, configure_logging
from notifications import registration_confirmation, send_email, status_update_message


class TestLoadConfig:
    def test_defaults(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            cfg = load_config({"supabase": {"url": "https://derby.supabase.co", "anon_key": "anon"}})

        assert cfg.supabase.url == "https://derby.supabase.co"
        assert cfg.supabase.key == "anon"
        assert cfg.storage.registration_bucket == "team-files"
        assert cfg.storage.documents_bucket == "team-documents"
        assert cfg.event.name == "Castle Douglas Soapbox Derby"
        assert cfg.logging == LoggingConfig(level="INFO", json=False)
        assert cfg.email is None

    def test_env_fallback_for_supabase(self):
        env = {"SUPABASE_URL": "https://env.supabase.co", "SUPABASE_KEY": "env-key", "LOG_LEVEL": "debug"}
        with mock.patch.dict(os.environ, env, clear=True):
            cfg = load_config({})

        assert cfg.supabase.url == "https://env.supabase.co"
        assert cfg.supabase.key == "env-key"
        assert cfg.logging.level == "DEBUG"

    def test_email_section(self):
        cfg = load_config(
            {
                "email": {
                    "smtp_host": "smtp.example.com",
                    "smtp_port": "587",
                    "smtp_user": "derby",
                    "smtp_password": "pw",
                    "from_email": "derby@example.com",
                },
                "logging": {"level": "warning", "json": "true"},
            }
        )
        assert cfg.email.smtp_port == 587
        assert cfg.email.from_name == "Castle Douglas Soapbox Derby"
        assert cfg.logging == LoggingConfig(level="WARNING", json=True)


class TestLogging:
    def test_configure_is_idempotent(self):
        root = logging.getLogger()
        before, level = list(root.handlers), root.level
        try:
            configure_logging(LoggingConfig())
            handler = configure_logging(LoggingConfig(level="DEBUG", json=True))
            ours = [h for h in root.handlers if h.get_name() == "derby-portal"]
            assert ours == [handler]
            assert isinstance(handler.formatter, JSONFormatter)
            assert root.level == logging.DEBUG
        finally:
            root.handlers = before
            root.setLevel(level)

    def test_json_formatter(self):
        record = logging.LogRecord("registrations", logging.INFO, __file__, 10, "Team %s saved", ("7",), None)
        payload = json.loads(JSONFormatter().format(record))
        assert payload["message"] == "Team 7 saved"
        assert payload["level"] == "INFO"
        assert payload["logger"] == "registrations"


class TestErrors:
    def test_backend_call_wraps_and_logs(self, caplog):
        class APIError(Exception):
            details = "duplicate key value"

        with caplog.at_level(logging.ERROR):
            with pytest.raises(BackendError) as exc_info:
                with backend_call("save registration"):
                    raise APIError()

        assert exc_info.value.message == "Failed to save registration"
        assert exc_info.value.detail == "duplicate key value"
        assert "Failed to save registration: duplicate key value" in caplog.text

    def test_portal_errors_pass_through(self):
        with pytest.raises(PortalError, match="already handled"):
            with backend_call("anything"):
                raise PortalError("already handled")

    def test_describe_error_falls_back_to_class_name(self):
        assert describe_error(KeyError()) == "KeyError"
        assert describe_error(ValueError("bad")) == "bad"


class TestNotifications:
    registration = {
        "team_name": "Threave Thunder",
        "captain_name": "Rob Kerr",
        "category": "open",
        "soapbox_name": "Castle Crusher",
        "status": "approved",
        "race_number": "7",
        "heat_time": None,
    }

    def test_skipped_without_config(self):
        assert send_email(None, "rob@example.com", "Hi", "Body") == {"success": True, "error": None}

    def test_sends_via_smtp(self):
        cfg = load_config(
            {
                "email": {
                    "smtp_host": "smtp.example.com",
                    "smtp_port": 587,
                    "smtp_user": "derby",
                    "smtp_password": "pw",
                    "from_email": "derby@example.com",
                    "from_name": "Derby Team",
                }
            }
        ).email
        with mock.patch("notifications.smtplib.SMTP") as smtp:
            result = send_email(cfg, "rob@example.com", "Approved", "Body")

        assert result["success"] is True
        server = smtp.return_value.__enter__.return_value
        server.starttls.assert_called_once()
        server.login.assert_called_once_with("derby", "pw")
        sent = server.send_message.call_args[0][0]
        assert sent["To"] == "rob@example.com"
        assert sent["From"] == "Derby Team <derby@example.com>"

    def test_smtp_failure_reported_not_raised(self):
        cfg = load_config(
            {
                "email": {
                    "smtp_host": "smtp.example.com",
                    "smtp_port": 587,
                    "smtp_user": "derby",
                    "smtp_password": "pw",
                    "from_email": "derby@example.com",
                }
            }
        ).email
        with mock.patch("notifications.smtplib.SMTP", side_effect=OSError("connection refused")):
            result = send_email(cfg, "rob@example.com", "Approved", "Body")
        assert result == {"success": False, "error": "connection refused"}

    def test_messages(self):
        subject, body = registration_confirmation(self.registration, EventConfig())
        assert subject == "Castle Douglas Soapbox Derby: registration received for Threave Thunder"
        assert "(Open)" in body

        subject, body = status_update_message(self.registration, EventConfig())
        assert "approved" in subject
        assert "Race number: 7" in body
        assert "Heat time: TBD" in body
