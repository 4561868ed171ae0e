"""Test utilities for perch applications.

``TestClient`` drives an application through its ASGI interface
in-process::

    from perch.testing import TestClient
"""

from perch.testing.client import TestClient

__all__ = ["TestClient"]
