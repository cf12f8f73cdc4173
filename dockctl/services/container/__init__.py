"""Container engine services.

This package provides Docker engine access split into:
- client.py: Docker client factory and initialization
- engine.py: async lifecycle operations over the shared client
"""

from .client import DockerClientFactory
from .engine import ContainerEngine, ExecOutput

__all__ = ["DockerClientFactory", "ContainerEngine", "ExecOutput"]
