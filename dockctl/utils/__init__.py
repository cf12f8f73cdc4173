"""Utility modules for the container lifecycle API."""

from .id_generator import generate_nanoid, generate_request_id
from .logging import setup_logging

__all__ = [
    "generate_nanoid",
    "generate_request_id",
    "setup_logging",
]
