"""Issue client mixin."""

import logging
from typing import Any

from gitlab_auto_mr.client.base import BaseClientMixin
from gitlab_auto_mr.errors import NotFoundError, TransportError
from gitlab_auto_mr.models import Issue

logger = logging.getLogger(__name__)


class IssuesMixin(BaseClientMixin):
    """Mixin for issue operations."""

    def get_issue(self, project_id: str | int, issue_iid: int) -> Issue:
        """Get a specific issue by IID.

        Args:
            project_id: Project ID or path
            issue_iid: Issue IID (the #number)

        Returns:
            Issue data dictionary

        Raises:
            NotFoundError: If the issue is missing or GitLab answers anything but 200
        """
        encoded_id = self._encode_project_id(project_id)
        try:
            return self.get(f"/projects/{encoded_id}/issues/{issue_iid}")
        except TransportError as e:
            raise NotFoundError(f"issue #{issue_iid} not found") from e

    def close_issue(self, project_id: str | int, issue_iid: int) -> dict[str, Any]:
        """Close an issue.

        Args:
            project_id: Project ID or path
            issue_iid: Issue IID

        Returns:
            Updated issue data
        """
        encoded_id = self._encode_project_id(project_id)

        logger.info(f"Closing issue #{issue_iid} in project {project_id}")
        issue = self.put(f"/projects/{encoded_id}/issues/{issue_iid}", {"state_event": "close"})
        logger.info(f"Successfully closed issue #{issue_iid}")
        return issue
