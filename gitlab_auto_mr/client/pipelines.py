"""Pipeline client mixin and pipeline gate."""

import logging
import time
from typing import Any

from gitlab_auto_mr.client.base import BaseClientMixin
from gitlab_auto_mr.errors import NotFoundError, PipelineTimeoutError
from gitlab_auto_mr.models import PipelineStatus

logger = logging.getLogger(__name__)

DEFAULT_CHECK_INTERVAL = 10.0
# Timeouts below this are treated as short runs and polled quickly
SHORT_TIMEOUT_THRESHOLD = 60
SHORT_CHECK_INTERVAL = 0.1


class PipelinesMixin(BaseClientMixin):
    """Mixin for pipeline operations."""

    def get_pipelines(self, project_id: str | int, sha: str | None = None, per_page: int = 20) -> list[dict[str, Any]]:
        """Get the most recent pipelines for a project, newest first.

        Args:
            project_id: Project ID or path
            sha: Optional commit SHA to filter by
            per_page: Number of pipelines to fetch (single page)
        """
        encoded_id = self._encode_project_id(project_id)
        params = {"sha": sha} if sha else {}
        return self.get_paginated(f"/projects/{encoded_id}/pipelines", params=params, per_page=per_page, max_pages=1)

    def get_pipeline(self, project_id: str | int, pipeline_id: int) -> dict[str, Any]:
        """Get a specific pipeline."""
        encoded_id = self._encode_project_id(project_id)
        return self.get(f"/projects/{encoded_id}/pipelines/{pipeline_id}")

    def get_pipeline_id(self, project_id: str | int, sha: str) -> int:
        """Get the ID of the most recent pipeline for commit ``sha``.

        Raises:
            NotFoundError: If the commit has no pipeline
        """
        pipelines = self.get_pipelines(project_id, sha=sha)
        if not pipelines:
            raise NotFoundError(f"no pipeline found for commit {sha}")
        return pipelines[0]["id"]

    def wait_for_pipeline(
        self,
        project_id: str | int,
        pipeline_id: int,
        timeout_seconds: float = 3600,
        check_interval: float | None = None,
    ) -> PipelineStatus:
        """Block until a pipeline reaches a terminal status.

        Args:
            project_id: Project ID or path
            pipeline_id: Pipeline ID to wait for
            timeout_seconds: Maximum time to wait in seconds (default: 3600/1 hour)
            check_interval: Seconds between polls; defaults to 10, or 0.1 for
                timeouts under a minute

        Returns:
            Status of the finished pipeline (it may have failed)

        Raises:
            PipelineTimeoutError: If the pipeline is still pending or running at the deadline
            GitLabError: If a status poll fails; polls are not retried
        """
        if check_interval is None:
            short = timeout_seconds < SHORT_TIMEOUT_THRESHOLD
            check_interval = SHORT_CHECK_INTERVAL if short else DEFAULT_CHECK_INTERVAL

        start_time = time.monotonic()
        deadline = start_time + timeout_seconds
        checks = 0

        logger.info(
            f"Waiting for pipeline {pipeline_id} in project {project_id} "
            f"(timeout: {timeout_seconds}s, interval: {check_interval}s)"
        )

        while True:
            now = time.monotonic()
            if now >= deadline:
                logger.warning(f"Pipeline {pipeline_id} timed out after {now - start_time:.1f}s ({checks} checks)")
                raise PipelineTimeoutError(pipeline_id, timeout_seconds)

            checks += 1
            pipeline = self.get_pipeline(project_id, pipeline_id)
            status = PipelineStatus.from_status(pipeline.get("status", ""))

            logger.debug(f"Check #{checks}: Pipeline {pipeline_id} status = {status.status}")

            if status.completed:
                logger.info(
                    f"Pipeline {pipeline_id} completed with status '{status.status}' "
                    f"after {time.monotonic() - start_time:.1f}s ({checks} checks)"
                )
                return status

            remaining = deadline - time.monotonic()
            if remaining > 0:
                time.sleep(min(check_interval, remaining))
