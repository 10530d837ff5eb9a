"""
SMTP email sender adapter - Implements EmailSender protocol.

Builds the account activation message and delivers it with smtplib.
smtplib is blocking, so delivery runs in a worker thread. Any transport
or protocol error (connection refused, timeout, rejected mailbox) is
raised as EmailDeliveryError; the SMTP detail stays in the logs.
"""

from __future__ import annotations

import asyncio
import logging
import smtplib
import ssl
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from hoaxify.domain.exceptions import EmailDeliveryError

logger = logging.getLogger(__name__)

ACTIVATION_SUBJECT = "Account Activation"


@dataclass(frozen=True, slots=True)
class ActivationMessage:
    """Rendered activation email."""

    to: str
    subject: str
    text: str
    html: str

    @classmethod
    def render(cls, email: str, token: str, activation_url: str) -> ActivationMessage:
        link = f"{activation_url}{token}"
        text = f"Please open the link below to activate your account:\n{link}\n"
        html = (
            "<div><b>Please click link down below to activate your account</b></div>"
            f'<div><a href="{link}">Activate</a></div>'
        )
        return cls(to=email, subject=ACTIVATION_SUBJECT, text=text, html=html)


def _build_mime(message: ActivationMessage, from_email: str, from_name: str) -> MIMEMultipart:
    msg = MIMEMultipart("alternative")
    msg["Subject"] = message.subject
    msg["From"] = f"{from_name} <{from_email}>".strip()
    msg["To"] = message.to
    msg.attach(MIMEText(message.text, "plain", "utf-8"))
    msg.attach(MIMEText(message.html, "html", "utf-8"))
    return msg


class SmtpEmailSender:
    """
    Implements EmailSender protocol via SMTP.

    Uses structural subtyping - no explicit inheritance from Protocol.
    The timeout applies to every socket operation of one delivery.
    """

    def __init__(
        self,
        *,
        host: str,
        port: int = 587,
        username: str | None = None,
        password: str | None = None,
        use_tls: bool = True,
        timeout: float = 10.0,
        from_email: str,
        from_name: str = "",
        activation_url: str = "",
    ) -> None:
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout
        self.from_email = from_email
        self.from_name = from_name
        self.activation_url = activation_url

    async def send_account_activation(self, email: str, token: str) -> None:
        message = ActivationMessage.render(email, token, self.activation_url)
        mime = _build_mime(message, self.from_email, self.from_name)

        try:
            await asyncio.to_thread(self._send_sync, message.to, mime)
        except (smtplib.SMTPException, OSError) as e:
            logger.warning("SMTP delivery to %s via %s:%s failed: %s", email, self.host, self.port, e)
            raise EmailDeliveryError(f"Could not deliver activation email to {email}") from e

    def _send_sync(self, recipient: str, mime: MIMEMultipart) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
            server.ehlo()
            if self.use_tls:
                context = ssl.create_default_context()
                server.starttls(context=context)
                server.ehlo()
            if self.username and self.password:
                server.login(self.username, self.password)
            server.sendmail(self.from_email, [recipient], mime.as_string())
