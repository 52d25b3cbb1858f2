"""Pytest configuration and fixtures."""

import json

import pytest
import responses

GITHUB_API_URL = "https://api.github.test"
ORGANISATION = "course-org"
GITHUB_TOKEN = "ghp_secret_test_token"
EXPIRE_API_URL = "https://course.example.test/api/students"
EXPIRE_TOKEN = "private-test-token"


def sent_json(call):
    """The JSON body of a recorded call, or None if nothing was sent."""
    body = call.request.body
    if body is None:
        return None
    if isinstance(body, bytes):
        body = body.decode("utf-8")
    return json.loads(body)


@pytest.fixture
def course_env(monkeypatch):
    """All the settings dbw reads, pointing at test hosts."""
    monkeypatch.setenv("GITHUB_API_URL", GITHUB_API_URL)
    monkeypatch.setenv("GITHUB_ORGANISATION", ORGANISATION)
    monkeypatch.setenv("GITHUB_ACCESS_TOKEN", GITHUB_TOKEN)
    monkeypatch.setenv("BASE_URL", EXPIRE_API_URL)
    monkeypatch.setenv("ACCESS_TOKEN", EXPIRE_TOKEN)


@pytest.fixture
def empty_env(monkeypatch):
    for name in ("GITHUB_API_URL", "GITHUB_ORGANISATION", "GITHUB_ACCESS_TOKEN", "BASE_URL", "ACCESS_TOKEN"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def api():
    """Every request goes to registered responses only; anything else fails with a ConnectionError."""
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps
