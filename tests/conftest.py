"""Pytest configuration and shared fixtures for github-client-core tests."""

import os

import pytest

from github_client_core.ratelimit import RateLimitTracker
from github_client_core.request import RequestBuilder
from github_client_core.testing import TEST_BASE_URL, TEST_UPLOAD_URL


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    """Auto-cleanup: clear configuration variables before each test.

    This prevents a developer's real GITHUB_TOKEN from leaking into tests.
    """
    test_prefixes = ("TEST_", "GITHUB_")

    for key in list(os.environ.keys()):
        if any(key.startswith(prefix) for prefix in test_prefixes):
            monkeypatch.delenv(key, raising=False)

    yield


@pytest.fixture
def builder():
    return RequestBuilder(base_url=TEST_BASE_URL, upload_url=TEST_UPLOAD_URL)


@pytest.fixture
def tracker():
    return RateLimitTracker()
