"""Merge request client mixin."""

import logging
from typing import Any

from gitlab_auto_mr.client.base import BaseClientMixin
from gitlab_auto_mr.models import MergeRequest

logger = logging.getLogger(__name__)


class MergeRequestsMixin(BaseClientMixin):
    """Mixin for merge request operations."""

    def get_merge_requests(
        self,
        project_id: str | int,
        state: str = "opened",
        source_branch: str | None = None,
        target_branch: str | None = None,
    ) -> list[MergeRequest]:
        """Get merge requests for a project, optionally filtered by branch."""
        encoded_id = self._encode_project_id(project_id)
        params: dict[str, Any] = {"state": state}

        if source_branch:
            params["source_branch"] = source_branch
        if target_branch:
            params["target_branch"] = target_branch

        return self.get_paginated(f"/projects/{encoded_id}/merge_requests", params=params)

    def create_merge_request(self, project_id: str | int, data: dict[str, Any]) -> MergeRequest:
        """Create a new merge request.

        Args:
            project_id: Project ID or path
            data: Request body, see ``MergeRequestCreate.to_payload``

        Returns:
            Created MR data

        Raises:
            TransportError: If GitLab does not answer 201 Created
        """
        encoded_id = self._encode_project_id(project_id)

        logger.info(
            f"Creating MR from {data.get('source_branch')} to {data.get('target_branch')} in project {project_id}"
        )
        mr = self.post(f"/projects/{encoded_id}/merge_requests", data)
        logger.info(f"Successfully created MR !{mr.get('iid')} in project {project_id}")
        return mr

    def update_merge_request(self, project_id: str | int, mr_iid: int, data: dict[str, Any]) -> MergeRequest:
        """Update a merge request.

        Args:
            project_id: Project ID or path
            mr_iid: Merge request IID
            data: Request body, see ``MergeRequestUpdate.to_payload``

        Returns:
            Updated MR data
        """
        encoded_id = self._encode_project_id(project_id)

        logger.info(f"Updating MR !{mr_iid} in project {project_id} with {len(data)} field(s)")
        mr = self.put(f"/projects/{encoded_id}/merge_requests/{mr_iid}", data)
        logger.info(f"Successfully updated MR !{mr_iid}")
        return mr

    def accept_merge_request(
        self,
        project_id: str | int,
        mr_iid: int,
        squash: bool = False,
        should_remove_source_branch: bool = False,
        merge_when_pipeline_succeeds: bool = True,
    ) -> dict[str, Any]:
        """Accept a merge request, by default once its pipeline succeeds.

        Args:
            project_id: Project ID or path
            mr_iid: Merge request IID
            squash: Squash commits on merge
            should_remove_source_branch: Remove source branch after merge
            merge_when_pipeline_succeeds: Defer the merge until the pipeline passes

        Returns:
            Merge request data as returned by GitLab
        """
        encoded_id = self._encode_project_id(project_id)

        data = {
            "squash": squash,
            "should_remove_source_branch": should_remove_source_branch,
            "merge_when_pipeline_succeeds": merge_when_pipeline_succeeds,
        }

        logger.info(f"Enabling auto-merge for MR !{mr_iid} in project {project_id}")
        return self.put(f"/projects/{encoded_id}/merge_requests/{mr_iid}/merge", data)
