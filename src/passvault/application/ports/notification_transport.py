"""Port for notification delivery - driven/secondary port."""

from typing import Protocol


class NotificationTransport(Protocol):
    """
    Port for delivering a message to a single recipient.

    This is a driven (secondary) port that defines how the application
    hands composed messages to an external mail system.
    """

    async def send(
        self,
        to_address: str,
        subject: str,
        body: str,
        *,
        html_body: str | None = None,
    ) -> None:
        """
        Deliver one message to one recipient.

        Args:
            to_address: Recipient address.
            subject: Subject line.
            body: Plain text body.
            html_body: Optional HTML alternative of the body.

        Raises:
            DispatchError: If the message could not be delivered.
        """
        ...

    def is_configured(self) -> bool:
        """
        Check if this transport is properly configured.

        Returns:
            True if the transport is ready to send messages.
        """
        ...
