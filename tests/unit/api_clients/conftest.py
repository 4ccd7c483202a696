"""Shared fixtures for Diffy API client tests."""

import pytest

from diffy.api_clients import DiffyAPIClient

TEST_BASE_URL = "https://diffy.example.com/api/"
TEST_API_KEY = "test-api-key"
TEST_TOKEN = "abc"


@pytest.fixture
def base_url() -> str:
    return TEST_BASE_URL


@pytest.fixture
def api_client(httpx_mock):
    """Authenticated client whose token exchange returned TEST_TOKEN."""
    httpx_mock.add_response(
        method="POST",
        url=f"{TEST_BASE_URL}auth/key",
        json={"token": TEST_TOKEN},
    )
    client = DiffyAPIClient(api_key=TEST_API_KEY, base_url=TEST_BASE_URL)
    yield client
    client.close()


@pytest.fixture
def api_paths(httpx_mock):
    """Return a callable listing the paths of every request sent so far."""

    def _paths():
        return [request.url.path for request in httpx_mock.get_requests()]

    return _paths
