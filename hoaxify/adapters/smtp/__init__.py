"""Email sender adapters - Mail transport implementations."""

from .console import ConsoleEmailSender
from .sender import ActivationMessage, SmtpEmailSender

__all__ = ["ActivationMessage", "ConsoleEmailSender", "SmtpEmailSender"]
