"""Shared test fixtures for gitlab-auto-mr tests."""

import os
from collections.abc import Callable, Generator
from typing import Any
from unittest.mock import MagicMock, patch

import pytest

from gitlab_auto_mr.client import GitLabClient
from gitlab_auto_mr.config import Config


@pytest.fixture
def mock_httpx_client() -> Generator[MagicMock, None, None]:
    """Mock httpx.Client for unit tests."""
    with patch("gitlab_auto_mr.client.base.httpx.Client") as mock_client_class:
        mock_client = MagicMock()
        mock_client_class.return_value = mock_client
        yield mock_client


@pytest.fixture
def make_response() -> Callable[..., MagicMock]:
    """Factory for mocked httpx responses."""

    def _make(status_code: int = 200, json_data: Any = None, text: str = "", headers: dict | None = None) -> MagicMock:
        response = MagicMock()
        response.status_code = status_code
        response.json.return_value = json_data
        response.text = text
        response.headers = headers or {}
        return response

    return _make


@pytest.fixture
def gitlab_client(mock_httpx_client: MagicMock) -> GitLabClient:
    """GitLabClient wired to the mocked httpx client."""
    return GitLabClient(token="test-token-12345", base_url="https://gitlab.example.com")


@pytest.fixture
def sample_project() -> dict:
    """Sample GitLab project response."""
    return {
        "id": 123,
        "name": "test-project",
        "path_with_namespace": "group/test-project",
        "web_url": "https://gitlab.example.com/group/test-project",
        "default_branch": "main",
    }


@pytest.fixture
def sample_merge_request() -> dict:
    """Sample GitLab merge request response."""
    return {
        "id": 456,
        "iid": 1,
        "title": "Draft: feature/123-login-form",
        "description": "",
        "state": "opened",
        "source_branch": "feature/123-login-form",
        "target_branch": "main",
        "web_url": "https://gitlab.example.com/group/test-project/-/merge_requests/1",
    }


@pytest.fixture
def sample_pipeline() -> dict:
    """Sample GitLab pipeline response."""
    return {
        "id": 789,
        "iid": 10,
        "status": "success",
        "ref": "feature/123-login-form",
        "sha": "abc123def456",
        "web_url": "https://gitlab.example.com/group/test-project/-/pipelines/789",
    }


@pytest.fixture
def sample_issue() -> dict:
    """Sample GitLab issue response."""
    return {
        "id": 999,
        "iid": 123,
        "title": "Login form rejects valid emails",
        "state": "opened",
        "labels": ["bug", "frontend"],
        "milestone": {"id": 5, "title": "v2.1"},
        "web_url": "https://gitlab.example.com/group/test-project/-/issues/123",
    }


@pytest.fixture
def make_config() -> Callable[..., Config]:
    """Factory for Config objects with sensible test defaults."""

    def _make(**overrides: Any) -> Config:
        values: dict[str, Any] = {
            "private_token": "test-token-12345",
            "source_branch": "feature/123-login-form",
            "project_id": "123",
            "gitlab_url": "https://gitlab.example.com",
            "assignees": ("42",),
        }
        values.update(overrides)
        return Config(**values)

    return _make


@pytest.fixture
def mock_client(sample_project: dict) -> MagicMock:
    """GitLabClient double with an empty project: no open MRs, numeric user IDs."""
    client = MagicMock(spec=GitLabClient)
    client.get_project.return_value = sample_project
    client.get_merge_requests.return_value = []
    client.resolve_user_ids.side_effect = lambda identifiers: [int(i) for i in identifiers]
    client.create_merge_request.side_effect = lambda project_id, data: {"id": 500, "iid": 7, **data}
    client.update_merge_request.side_effect = lambda project_id, iid, data: {"iid": iid, **data}
    return client


# Integration test fixtures


@pytest.fixture
def gitlab_token() -> str | None:
    """Get GitLab token from environment for integration tests."""
    return os.getenv("GITLAB_PRIVATE_TOKEN")


@pytest.fixture
def gitlab_url() -> str:
    """Get GitLab URL from environment for integration tests."""
    return os.getenv("GITLAB_URL", "https://gitlab.com")


@pytest.fixture
def skip_without_token(gitlab_token: str | None) -> None:
    """Skip test if GITLAB_PRIVATE_TOKEN is not set."""
    if not gitlab_token:
        pytest.skip("GITLAB_PRIVATE_TOKEN not set - skipping integration test")
