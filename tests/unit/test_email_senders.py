"""
Unit tests for the email sender adapters.

Tests verify both senders satisfy the EmailSender protocol, the console
sender logs the activation link, and the SMTP sender builds the message
and maps transport failures to EmailDeliveryError.
"""

import logging
import smtplib
from email import message_from_string
from unittest.mock import MagicMock, patch

import pytest

from hoaxify.adapters.smtp.console import ConsoleEmailSender
from hoaxify.adapters.smtp.sender import ActivationMessage, SmtpEmailSender
from hoaxify.domain.exceptions import EmailDeliveryError
from hoaxify.domain.ports import EmailSender


def accepts_email_sender(sender: EmailSender) -> EmailSender:
    return sender


def make_smtp_sender(**overrides) -> SmtpEmailSender:
    options = {
        "host": "smtp.test",
        "port": 2525,
        "use_tls": False,
        "from_email": "info@myapp.com",
        "from_name": "My App",
        "activation_url": "http://localhost:8080/#/login?token=",
    }
    options.update(overrides)
    return SmtpEmailSender(**options)


def sent_message(smtp_instance: MagicMock):
    """Parse the message handed to sendmail()."""
    from_addr, recipients, raw = smtp_instance.sendmail.call_args[0]
    return from_addr, recipients, message_from_string(raw)


def message_bodies(message) -> str:
    return "".join(part.get_payload(decode=True).decode() for part in message.walk() if not part.is_multipart())


class TestProtocolCompliance:
    """Both adapters use structural subtyping."""

    @pytest.mark.parametrize("sender_class", [ConsoleEmailSender, SmtpEmailSender])
    def test_no_explicit_inheritance(self, sender_class) -> None:
        assert sender_class.__bases__ == (object,)

    def test_accepted_as_email_sender(self) -> None:
        accepts_email_sender(ConsoleEmailSender())
        accepts_email_sender(make_smtp_sender())


class TestConsoleEmailSender:
    """Tests for ConsoleEmailSender."""

    @pytest.mark.asyncio
    async def test_logs_recipient_and_token(self, caplog: pytest.LogCaptureFixture) -> None:
        sender = ConsoleEmailSender(activation_url="http://app/#/login?token=")

        with caplog.at_level(logging.INFO):
            await sender.send_account_activation("user1@gmail.com", "abc123")

        assert len(caplog.records) == 1
        assert "[ACTIVATION]" in caplog.text
        assert "user1@gmail.com" in caplog.text
        assert "http://app/#/login?token=abc123" in caplog.text


class TestActivationMessage:
    """Tests for message rendering."""

    def test_render_embeds_link(self) -> None:
        message = ActivationMessage.render("user1@gmail.com", "abc123", "http://app/?token=")

        assert message.to == "user1@gmail.com"
        assert message.subject == "Account Activation"
        assert "http://app/?token=abc123" in message.text
        assert 'href="http://app/?token=abc123"' in message.html


class TestSmtpEmailSender:
    """Tests for SmtpEmailSender with smtplib patched out."""

    @pytest.mark.asyncio
    async def test_sends_to_recipient_with_token(self) -> None:
        with patch("hoaxify.adapters.smtp.sender.smtplib.SMTP") as smtp_class:
            server = smtp_class.return_value.__enter__.return_value
            await make_smtp_sender().send_account_activation("user1@gmail.com", "abc123")

        smtp_class.assert_called_once_with("smtp.test", 2525, timeout=10.0)
        from_addr, recipients, message = sent_message(server)
        assert from_addr == "info@myapp.com"
        assert recipients == ["user1@gmail.com"]
        assert message["To"] == "user1@gmail.com"
        assert message["Subject"] == "Account Activation"
        assert "abc123" in message_bodies(message)

    @pytest.mark.asyncio
    async def test_starttls_and_login_when_configured(self) -> None:
        with patch("hoaxify.adapters.smtp.sender.smtplib.SMTP") as smtp_class:
            server = smtp_class.return_value.__enter__.return_value
            sender = make_smtp_sender(use_tls=True, username="mailer", password="secret")
            await sender.send_account_activation("user1@gmail.com", "abc123")

        server.starttls.assert_called_once()
        server.login.assert_called_once_with("mailer", "secret")

    @pytest.mark.asyncio
    async def test_no_login_without_credentials(self) -> None:
        with patch("hoaxify.adapters.smtp.sender.smtplib.SMTP") as smtp_class:
            server = smtp_class.return_value.__enter__.return_value
            await make_smtp_sender().send_account_activation("user1@gmail.com", "abc123")

        server.starttls.assert_not_called()
        server.login.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [
            smtplib.SMTPRecipientsRefused({"user1@gmail.com": (553, b"invalid mailbox")}),
            smtplib.SMTPServerDisconnected("gone"),
            ConnectionRefusedError("refused"),
            TimeoutError("timed out"),
        ],
    )
    async def test_transport_errors_become_delivery_errors(self, error: Exception) -> None:
        with patch("hoaxify.adapters.smtp.sender.smtplib.SMTP") as smtp_class:
            smtp_class.return_value.__enter__.return_value.sendmail.side_effect = error

            with pytest.raises(EmailDeliveryError) as exc_info:
                await make_smtp_sender().send_account_activation("user1@gmail.com", "abc123")

        assert exc_info.value.__cause__ is error

    @pytest.mark.asyncio
    async def test_connection_failure_becomes_delivery_error(self) -> None:
        with patch("hoaxify.adapters.smtp.sender.smtplib.SMTP", side_effect=OSError("no route")):
            with pytest.raises(EmailDeliveryError):
                await make_smtp_sender().send_account_activation("user1@gmail.com", "abc123")
