"""Structural interfaces for swappable collaborators."""

from .extraction import IExtractionInvoker, IRateLimiter, RateLimitDecision

__all__ = ["IExtractionInvoker", "IRateLimiter", "RateLimitDecision"]
