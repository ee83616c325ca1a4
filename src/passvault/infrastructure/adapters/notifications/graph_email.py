"""Email notification transport using Microsoft Graph API."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any

import httpx
import msal

from ....application.exceptions import DispatchError
from .base import BaseNotificationTransport


@dataclass(frozen=True, slots=True)
class GraphEmailConfig:
    """Microsoft Graph email transport configuration."""

    enabled: bool = False
    tenant_id: str = ""
    client_id: str = ""
    client_secret: str = field(default="", repr=False)
    from_address: str = ""  # Sender mailbox (app needs Mail.Send permission)
    save_to_sent_items: bool = False
    timeout: float = 30.0


class GraphEmailNotificationTransport(BaseNotificationTransport):
    """Send messages via Microsoft Graph API email."""

    GRAPH_BASE_URL = "https://graph.microsoft.com/v1.0"
    AUTHORITY_BASE = "https://login.microsoftonline.com"
    SCOPE = ["https://graph.microsoft.com/.default"]

    def __init__(
        self,
        config: GraphEmailConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the Graph email transport."""
        super().__init__()
        self._config = config
        self._transport = transport
        self._access_token: str | None = None
        self._token_expiry: datetime | None = None
        self._msal_app: msal.ConfidentialClientApplication | None = None

    def is_configured(self) -> bool:
        """Check if Graph email is properly configured."""
        return (
            self._config.enabled
            and bool(self._config.tenant_id)
            and bool(self._config.client_id)
            and bool(self._config.client_secret)
            and bool(self._config.from_address)
        )

    def _get_msal_app(self) -> msal.ConfidentialClientApplication:
        """Get or create MSAL application instance."""
        if self._msal_app is None:
            authority = f"{self.AUTHORITY_BASE}/{self._config.tenant_id}"
            self._msal_app = msal.ConfidentialClientApplication(
                client_id=self._config.client_id,
                client_credential=self._config.client_secret,
                authority=authority,
            )
        return self._msal_app

    async def _acquire_token(self) -> str:
        """Acquire access token using client credentials flow."""
        if self._access_token and self._token_expiry and datetime.now(UTC) < self._token_expiry:
            return self._access_token

        app = self._get_msal_app()
        result = app.acquire_token_for_client(scopes=self.SCOPE)

        if "access_token" not in result:
            error = result.get("error_description", result.get("error", "Unknown error"))
            msg = f"Failed to acquire access token: {error}"
            raise DispatchError(msg)

        self._access_token = result["access_token"]
        expires_in = result.get("expires_in", 3600)
        # Refresh 5 minutes before expiry
        self._token_expiry = datetime.now(UTC) + timedelta(seconds=expires_in - 300)

        return self._access_token

    async def send(
        self,
        to_address: str,
        subject: str,
        body: str,
        *,
        html_body: str | None = None,
    ) -> None:
        """Send an email to one recipient via Graph API."""
        self._ensure_ready(to_address)
        token = await self._acquire_token()

        url = f"{self.GRAPH_BASE_URL}/users/{self._config.from_address}/sendMail"
        headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }

        try:
            async with httpx.AsyncClient(
                timeout=self._config.timeout, transport=self._transport
            ) as client:
                response = await client.post(
                    url, headers=headers, json=self.build_message(to_address, subject, body, html_body)
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            raise DispatchError(f"Graph sendMail to {to_address} failed: {e}") from e

        self._logger.info("Graph email sent to %s", to_address)

    def build_message(
        self, to_address: str, subject: str, body: str, html_body: str | None
    ) -> dict[str, Any]:
        """Build the Graph API email message payload."""
        return {
            "message": {
                "subject": subject,
                "body": {
                    "contentType": "HTML" if html_body is not None else "Text",
                    "content": html_body if html_body is not None else body,
                },
                "toRecipients": [{"emailAddress": {"address": to_address}}],
            },
            "saveToSentItems": self._config.save_to_sent_items,
        }
