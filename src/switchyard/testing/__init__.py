"""Test utilities for switchyard handlers.

Provides a request builder and a synchronous test client::

    from switchyard.testing import TestClient, mock_request
"""

from switchyard.testing.client import TestClient
from switchyard.testing.mock import mock_request

__all__ = [
    "TestClient",
    "mock_request",
]
