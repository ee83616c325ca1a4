"""Application use cases - Entry points driven by schedulers and adapters."""

from .run_expiry_check import CheckResult, RunExpiryCheck

__all__ = ["CheckResult", "RunExpiryCheck"]
