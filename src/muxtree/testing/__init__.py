"""Test utilities for muxtree routing tables.

    from muxtree.testing import TestClient
"""

from muxtree.testing.client import TestClient

__all__ = ["TestClient"]
