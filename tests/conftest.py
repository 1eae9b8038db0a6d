"""Shared pytest fixtures and configuration."""

from unittest.mock import Mock

import pytest


@pytest.fixture
def test_env(monkeypatch):
    """
    Set up valid test environment variables.

    This fixture sets the personal access token and log level so config
    can be loaded during tests without requiring real credentials.
    """
    monkeypatch.setenv("LAZY_DEV_OPS_PAT", "test_pat_1234567890")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")

    return {
        "pat": "test_pat_1234567890",
        "log_level": "DEBUG",
    }


@pytest.fixture
def invalid_env(monkeypatch):
    """
    Set up a missing personal access token for testing validation.
    """
    monkeypatch.setenv("LAZY_DEV_OPS_PAT", "")
    monkeypatch.delenv("LOG_LEVEL", raising=False)


@pytest.fixture
def make_response():
    """Build a mock requests.Response with a status code and JSON body."""

    def _make(status_code=200, payload=None, reason="OK"):
        response = Mock()
        response.status_code = status_code
        response.reason = reason
        response.json.return_value = payload if payload is not None else {"value": [], "count": 0}
        return response

    return _make


@pytest.fixture
def pr_payload():
    """Raw pull request as returned by the list endpoint (known fields only)."""
    return {
        "pullRequestId": 42,
        "title": "Add retry to uploader",
        "status": "active",
        "creationDate": "2025-01-15T10:30:00Z",
        "repository": {"id": "repo-guid-1", "name": "api"},
        "createdBy": {"displayName": "Dana Lee", "uniqueName": "dana@example.com"},
        "sourceRefName": "refs/heads/feature/retry",
        "targetRefName": "refs/heads/main",
        "reviewers": [
            {"displayName": "Sam", "vote": 10},
            {"displayName": "Alex", "vote": 0},
        ],
        "_links": {"web": {"href": "https://dev.azure.com/myorg/myproject/_git/api/pullrequest/42"}},
    }
