"""Password vault with secret history and expiry notifications."""

__version__ = "1.0.0"
