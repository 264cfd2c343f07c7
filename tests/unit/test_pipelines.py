"""Unit tests for pipeline lookup and the pipeline gate."""

import logging
import time
from unittest.mock import MagicMock, patch

import pytest

from gitlab_auto_mr.client import GitLabClient
from gitlab_auto_mr.errors import NotFoundError, PipelineTimeoutError, TransportError
from gitlab_auto_mr.models import PipelineStatus


class TestPipelineStatus:
    """Tests for classifying pipeline statuses."""

    @pytest.mark.parametrize("status", ["pending", "running"])
    def test_non_terminal(self, status: str) -> None:
        result = PipelineStatus.from_status(status)
        assert not result.completed
        assert not result.success

    def test_success(self) -> None:
        result = PipelineStatus.from_status("success")
        assert result.completed
        assert result.success

    @pytest.mark.parametrize("status", ["failed", "canceled", "skipped", "manual", "created"])
    def test_other_statuses_are_terminal(self, status: str) -> None:
        result = PipelineStatus.from_status(status)
        assert result.completed
        assert not result.success


class TestGetPipelineID:
    """Tests for finding the pipeline of a commit."""

    def test_returns_most_recent(
        self, gitlab_client: GitLabClient, mock_httpx_client: MagicMock, make_response, sample_pipeline: dict
    ) -> None:
        mock_httpx_client.request.return_value = make_response(
            json_data=[sample_pipeline, {**sample_pipeline, "id": 700}]
        )

        assert gitlab_client.get_pipeline_id("123", "abc123def456") == 789
        params = mock_httpx_client.request.call_args.kwargs["params"]
        assert params["sha"] == "abc123def456"

    def test_no_pipeline(self, gitlab_client: GitLabClient, mock_httpx_client: MagicMock, make_response) -> None:
        mock_httpx_client.request.return_value = make_response(json_data=[])

        with pytest.raises(NotFoundError, match="abc123"):
            gitlab_client.get_pipeline_id("123", "abc123")

    def test_single_page_lookup_logs_no_warning(
        self, gitlab_client: GitLabClient, mock_httpx_client: MagicMock, make_response, caplog
    ) -> None:
        """Fetching only the newest page is not reported as truncated results."""
        mock_httpx_client.request.return_value = make_response(json_data=[{"id": 1}], headers={"x-next-page": ""})

        with caplog.at_level(logging.WARNING):
            assert gitlab_client.get_pipeline_id("123", "abc") == 1

        assert not [r for r in caplog.records if r.levelno >= logging.WARNING]


class TestWaitForPipeline:
    """Tests for polling a pipeline until it finishes."""

    def test_waits_until_success(self, gitlab_client: GitLabClient) -> None:
        with patch.object(
            GitLabClient, "get_pipeline", side_effect=[{"status": "running"}, {"status": "success"}]
        ) as get_pipeline:
            status = gitlab_client.wait_for_pipeline("123", 1, timeout_seconds=10)

        assert status == PipelineStatus(status="success", completed=True, success=True)
        assert get_pipeline.call_count == 2

    def test_returns_failed_pipeline(self, gitlab_client: GitLabClient) -> None:
        with patch.object(GitLabClient, "get_pipeline", return_value={"status": "failed"}):
            status = gitlab_client.wait_for_pipeline("123", 1, timeout_seconds=10)

        assert status.completed
        assert not status.success
        assert status.status == "failed"

    def test_timeout(self, gitlab_client: GitLabClient) -> None:
        with patch.object(GitLabClient, "get_pipeline", return_value={"status": "running"}):
            start = time.monotonic()
            with pytest.raises(PipelineTimeoutError) as exc_info:
                gitlab_client.wait_for_pipeline("123", 1, timeout_seconds=0.3, check_interval=0.05)
            elapsed = time.monotonic() - start

        assert exc_info.value.timeout_seconds == 0.3
        assert isinstance(exc_info.value, TimeoutError)
        assert 0.29 <= elapsed < 2.0

    def test_poll_error_propagates(self, gitlab_client: GitLabClient) -> None:
        with patch.object(
            GitLabClient, "get_pipeline", side_effect=TransportError("HTTP 502", status_code=502)
        ) as get_pipeline:
            with pytest.raises(TransportError):
                gitlab_client.wait_for_pipeline("123", 1, timeout_seconds=10)

        assert get_pipeline.call_count == 1

    def test_production_interval(self, gitlab_client: GitLabClient) -> None:
        with (
            patch.object(GitLabClient, "get_pipeline", side_effect=[{"status": "pending"}, {"status": "success"}]),
            patch("gitlab_auto_mr.client.pipelines.time.sleep") as mock_sleep,
        ):
            gitlab_client.wait_for_pipeline("123", 1, timeout_seconds=3600)

        mock_sleep.assert_called_once_with(10.0)

    def test_short_timeout_interval(self, gitlab_client: GitLabClient) -> None:
        with (
            patch.object(GitLabClient, "get_pipeline", side_effect=[{"status": "pending"}, {"status": "success"}]),
            patch("gitlab_auto_mr.client.pipelines.time.sleep") as mock_sleep,
        ):
            gitlab_client.wait_for_pipeline("123", 1, timeout_seconds=30)

        mock_sleep.assert_called_once_with(0.1)
