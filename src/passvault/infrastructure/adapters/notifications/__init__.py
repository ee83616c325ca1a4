"""Notification transport adapter implementations."""

from .base import BaseNotificationTransport
from .email import EmailConfig, EmailNotificationTransport
from .graph_email import GraphEmailConfig, GraphEmailNotificationTransport
from .resend import ResendConfig, ResendNotificationTransport

__all__ = [
    "BaseNotificationTransport",
    "EmailConfig",
    "EmailNotificationTransport",
    "GraphEmailConfig",
    "GraphEmailNotificationTransport",
    "ResendConfig",
    "ResendNotificationTransport",
]
