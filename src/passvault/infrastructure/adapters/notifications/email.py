"""Email notification transport using SMTP."""

from __future__ import annotations

import asyncio
import smtplib
from dataclasses import dataclass, field
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from ....application.exceptions import DispatchError
from .base import BaseNotificationTransport


@dataclass(frozen=True, slots=True)
class EmailConfig:
    """SMTP transport configuration."""

    enabled: bool = False
    server: str = ""
    port: int = 587
    username: str = ""
    password: str = field(default="", repr=False)
    from_address: str = ""
    use_tls: bool = True
    timeout: float = 30.0


class EmailNotificationTransport(BaseNotificationTransport):
    """Send messages via SMTP email."""

    def __init__(self, config: EmailConfig) -> None:
        """Initialize the email transport."""
        super().__init__()
        self._config = config

    def is_configured(self) -> bool:
        """Check if email is properly configured."""
        return (
            self._config.enabled
            and bool(self._config.server)
            and bool(self._config.from_address)
        )

    async def send(
        self,
        to_address: str,
        subject: str,
        body: str,
        *,
        html_body: str | None = None,
    ) -> None:
        """Send an email to one recipient."""
        self._ensure_ready(to_address)
        msg = self.build_message(to_address, subject, body, html_body)

        try:
            await asyncio.to_thread(self._deliver, to_address, msg)
        except (smtplib.SMTPException, OSError) as e:
            raise DispatchError(f"SMTP delivery to {to_address} failed: {e}") from e

        self._logger.info("Email sent to %s", to_address)

    def build_message(
        self, to_address: str, subject: str, body: str, html_body: str | None
    ) -> MIMEMultipart | MIMEText:
        """Build the email message."""
        if html_body is None:
            msg: MIMEMultipart | MIMEText = MIMEText(body, "plain")
        else:
            msg = MIMEMultipart("alternative")
            msg.attach(MIMEText(body, "plain"))
            msg.attach(MIMEText(html_body, "html"))

        msg["Subject"] = subject
        msg["From"] = self._config.from_address
        msg["To"] = to_address
        return msg

    def _deliver(self, to_address: str, msg: MIMEMultipart | MIMEText) -> None:
        with smtplib.SMTP(
            self._config.server, self._config.port, timeout=self._config.timeout
        ) as server:
            if self._config.use_tls:
                server.starttls()
            if self._config.username and self._config.password:
                server.login(self._config.username, self._config.password)
            server.sendmail(self._config.from_address, [to_address], msg.as_string())
