"""
Global fixtures for all unit tests.

This conftest provides autouse fixtures that prevent real external service calls:
- Environment variable isolation (prevents credential leakage)
- Shared rate limiter state reset between tests

These fixtures apply automatically to ALL tests in tests/unit/.
"""

import os

import pytest

# Set test environment BEFORE any imports so Config never sees real values
os.environ["OPENAI_API_KEY"] = "sk-test-mock-key"
os.environ["GOOGLE_API_KEY"] = "google-test-mock-key"
os.environ["GOOGLE_SEARCH_ENGINE_ID"] = "cse-test-engine"
os.environ["PROFILE_CACHE_PATH"] = ""

from src.common.rate_limiter import reset_global_registry  # noqa: E402
from src.extraction.types import SearchResultItem  # noqa: E402


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch):
    """
    Isolate test environment from real credentials and configurations.

    This prevents:
    - Real API keys being used if tests accidentally call the LLM or search API
    - Rate-limit overrides from the developer's shell
    """
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test-mock-key")
    monkeypatch.setenv("GOOGLE_API_KEY", "google-test-mock-key")
    monkeypatch.setenv("GOOGLE_SEARCH_ENGINE_ID", "cse-test-engine")
    for name in (
        "OPENAI_RATE_LIMIT_PER_MIN",
        "OPENAI_DAILY_LIMIT",
        "GOOGLE_CSE_RATE_LIMIT_PER_MIN",
        "GOOGLE_CSE_DAILY_LIMIT",
    ):
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture(autouse=True)
def reset_rate_limiters():
    """Give every test fresh shared rate limiters."""
    reset_global_registry()
    yield
    reset_global_registry()


@pytest.fixture
def klarna_item():
    """A well-formed LinkedIn search hit."""
    return SearchResultItem(
        title="Erik Svensson - Account Executive - Klarna | LinkedIn",
        snippet="Stockholm, Sweden · Account Executive · Klarna",
        link="https://se.linkedin.com/in/erik-svensson-4b1a2c3?trk=public_profile",
    )


@pytest.fixture
def title_only_item():
    """A hit whose title names a role and employer but no person."""
    return SearchResultItem(
        title="CTO at Spotify",
        snippet="",
        link="https://www.linkedin.com/in/anna-lindqvist/",
    )


@pytest.fixture
def location_company_item():
    """A hit whose third title segment is a city, not an employer."""
    return SearchResultItem(
        title="Maria Garcia - Marketing Director - Stockholm | LinkedIn",
        snippet="Marketing Director with 10 years in fashion retail.",
        link="https://www.linkedin.com/in/maria-garcia-1234",
    )
