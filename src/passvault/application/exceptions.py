"""Application layer exceptions."""


class ApplicationError(Exception):
    """Base exception for application errors."""


class StoreError(ApplicationError):
    """Raised when the persistent store fails a read or write."""


class UniqueViolationError(StoreError):
    """Raised when a write hits a uniqueness constraint in the store."""


class DispatchError(ApplicationError):
    """Raised when a notification transport fails to deliver a message."""


class CheckInProgressError(ApplicationError):
    """Raised when an expiry check is requested while another one is running."""
