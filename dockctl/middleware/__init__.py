"""Middleware for the container lifecycle API."""

from .logging import RequestLoggingMiddleware

__all__ = ["RequestLoggingMiddleware"]
