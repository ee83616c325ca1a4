"""Domain services - Stateless operations on domain objects."""

from .expiry_analyzer import ExpiryAnalyzer

__all__ = ["ExpiryAnalyzer"]
