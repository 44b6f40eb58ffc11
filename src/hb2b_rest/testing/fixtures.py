"""Pytest fixtures for testing back-end integrations.

Fixtures (use with pytest):
    mock_backend: MockBackend answering 202 to every request.
    delivery_client: DeliveryClient sending to the mock_backend.
"""

import pytest

from hb2b_rest.testing.mocks import MockBackend
from hb2b_rest.transport.client import DeliveryClient

DEFAULT_TEST_BASE_URL = "http://backend.test/hb2b"


@pytest.fixture
def mock_backend() -> MockBackend:
    """Create a fresh MockBackend for the test."""
    return MockBackend()


@pytest.fixture
def delivery_client(mock_backend: MockBackend) -> DeliveryClient:
    """Provide a DeliveryClient whose requests are received by mock_backend."""
    return DeliveryClient(DEFAULT_TEST_BASE_URL, transport=mock_backend.transport)
