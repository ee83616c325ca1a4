"""Cron-driven scheduling of expiry checks."""

from .scheduler import ExpiryScheduler

__all__ = ["ExpiryScheduler"]
