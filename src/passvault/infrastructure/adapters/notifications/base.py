"""Base notification transport with common functionality."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from ....application.exceptions import DispatchError


class BaseNotificationTransport(ABC):
    """Abstract base class for notification transports."""

    def __init__(self) -> None:
        """Initialize the notification transport."""
        self._logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    async def send(
        self,
        to_address: str,
        subject: str,
        body: str,
        *,
        html_body: str | None = None,
    ) -> None:
        """Deliver one message to one recipient."""
        ...

    @abstractmethod
    def is_configured(self) -> bool:
        """Check if the transport is properly configured."""
        ...

    def _ensure_ready(self, to_address: str) -> None:
        """Refuse to send without configuration or a recipient."""
        if not self.is_configured():
            msg = f"{self.__class__.__name__} is not configured"
            raise DispatchError(msg)
        if not to_address:
            msg = "Recipient address is empty"
            raise DispatchError(msg)
