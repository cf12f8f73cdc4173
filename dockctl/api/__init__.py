"""API endpoints for the container lifecycle API."""

from . import containers, execute, health

__all__ = ["containers", "execute", "health"]
