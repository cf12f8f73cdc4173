"""Container lifecycle HTTP API backed by the Docker engine."""

from ._version import __version__

__all__ = ["__version__"]
