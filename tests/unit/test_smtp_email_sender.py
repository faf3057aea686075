"""
Unit tests for SmtpEmailSender adapter.

smtplib.SMTP is patched; no network connection is made.
"""

import smtplib
from unittest.mock import MagicMock, patch

import pytest

from src.adapters.smtp.smtp import SmtpEmailSender


@pytest.fixture
def smtp_server():
    """Patch smtplib.SMTP and yield the server object used inside `with`."""
    with patch("src.adapters.smtp.smtp.smtplib.SMTP") as smtp_cls:
        server = MagicMock()
        smtp_cls.return_value.__enter__.return_value = server
        smtp_cls.server = server
        yield smtp_cls


def make_sender(**overrides) -> SmtpEmailSender:
    params = {"host": "smtp.test", "port": 587, "sender": "no-reply@gangku.kr"}
    params.update(overrides)
    return SmtpEmailSender(**params)


class TestSmtpEmailSender:
    """Tests for SMTP delivery."""

    def test_send_builds_message(self, smtp_server) -> None:
        result = make_sender().send("a@konkuk.ac.kr", "Verify", "link body")

        assert result is True
        smtp_server.assert_called_once_with("smtp.test", 587, timeout=10.0)
        msg = smtp_server.server.send_message.call_args[0][0]
        assert msg["To"] == "a@konkuk.ac.kr"
        assert msg["From"] == "no-reply@gangku.kr"
        assert msg["Subject"] == "Verify"
        assert "link body" in msg.get_content()

    def test_starttls_enabled_by_default(self, smtp_server) -> None:
        make_sender().send("a@konkuk.ac.kr", "S", "B")
        smtp_server.server.starttls.assert_called_once()

    def test_starttls_can_be_disabled(self, smtp_server) -> None:
        make_sender(starttls=False).send("a@konkuk.ac.kr", "S", "B")
        smtp_server.server.starttls.assert_not_called()

    def test_login_only_with_credentials(self, smtp_server) -> None:
        make_sender().send("a@konkuk.ac.kr", "S", "B")
        smtp_server.server.login.assert_not_called()

        make_sender(username="user", password="pw").send("a@konkuk.ac.kr", "S", "B")
        smtp_server.server.login.assert_called_once_with("user", "pw")

    def test_smtp_error_returns_false(self, smtp_server, caplog: pytest.LogCaptureFixture) -> None:
        smtp_server.server.send_message.side_effect = smtplib.SMTPRecipientsRefused({})

        assert make_sender().send("a@konkuk.ac.kr", "S", "B") is False
        assert "SMTP send to a@konkuk.ac.kr failed" in caplog.text

    def test_connection_error_returns_false(self, smtp_server) -> None:
        smtp_server.side_effect = ConnectionRefusedError()
        assert make_sender().send("a@konkuk.ac.kr", "S", "B") is False
