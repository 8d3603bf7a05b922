"""Delivery channels for operator alerts and customer email."""

from .base import EmailChannel, OperatorAction, OperatorChannel
from .email_sink import SmtpEmailSink
from .telegram_sink import TelegramOperatorSink

__all__ = [
    "EmailChannel",
    "OperatorAction",
    "OperatorChannel",
    "SmtpEmailSink",
    "TelegramOperatorSink",
]
