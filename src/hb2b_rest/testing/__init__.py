"""Testing utilities for back-end integrations.

Modules:
    mocks: MockBackend, an httpx transport double recording requests.
    fixtures: Pytest fixtures (mock_backend, delivery_client).

Example:
    >>> from hb2b_rest.testing import MockBackend
    >>> backend = MockBackend(status_code=500)
"""

from hb2b_rest.testing.mocks import MockBackend, RecordedRequest

__all__ = ["MockBackend", "RecordedRequest"]
