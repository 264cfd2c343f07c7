"""GitLab API client composed from mixins."""

from gitlab_auto_mr.client.issues import IssuesMixin
from gitlab_auto_mr.client.merge_requests import MergeRequestsMixin
from gitlab_auto_mr.client.pipelines import PipelinesMixin
from gitlab_auto_mr.client.users import UsersMixin


class GitLabClient(
    MergeRequestsMixin,
    PipelinesMixin,
    IssuesMixin,
    UsersMixin,
):
    """GitLab API client composed from mixins.

    This client covers the calls needed to reconcile a merge request:
    - Projects
    - Merge requests (list, create, update, accept)
    - Issues (get, close)
    - Users (username lookup)
    - Pipelines (lookup by commit, wait for completion)
    """


__all__ = ["GitLabClient"]
