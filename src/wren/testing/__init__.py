"""Testing utilities for wren applications.

Provides an async test client that drives the ASGI app in-process.
"""

from wren.testing.client import TestClient

__all__ = ["TestClient"]
