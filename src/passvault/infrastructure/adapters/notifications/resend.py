"""Email notification transport using the Resend HTTP API."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import httpx

from ....application.exceptions import DispatchError
from .base import BaseNotificationTransport


@dataclass(frozen=True, slots=True)
class ResendConfig:
    """Resend transport configuration."""

    enabled: bool = False
    api_key: str = field(default="", repr=False)
    from_address: str = ""
    timeout: float = 30.0


class ResendNotificationTransport(BaseNotificationTransport):
    """Send messages via the Resend email API."""

    API_URL = "https://api.resend.com/emails"

    def __init__(
        self,
        config: ResendConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the Resend transport."""
        super().__init__()
        self._config = config
        self._transport = transport

    def is_configured(self) -> bool:
        """Check if Resend is properly configured."""
        return self._config.enabled and bool(self._config.api_key) and bool(self._config.from_address)

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

        try:
            async with httpx.AsyncClient(
                timeout=self._config.timeout, transport=self._transport
            ) as client:
                response = await client.post(
                    self.API_URL,
                    json=self.build_payload(to_address, subject, body, html_body),
                    headers={"Authorization": f"Bearer {self._config.api_key}"},
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            raise DispatchError(f"Resend delivery to {to_address} failed: {e}") from e

        self._logger.info("Resend email sent to %s", to_address)

    def build_payload(
        self, to_address: str, subject: str, body: str, html_body: str | None
    ) -> dict[str, Any]:
        """Build the JSON payload for the Resend API."""
        payload: dict[str, Any] = {
            "from": self._config.from_address,
            "to": [to_address],
            "subject": subject,
            "text": body,
        }
        if html_body is not None:
            payload["html"] = html_body
        return payload
