"""Merge request reconciliation.

Given the configured branch pair and mode flags, look at what already
exists on GitLab and take exactly one action: report, skip, create or
update. Mode dispatch is done by :func:`decide_action`, which is pure;
:class:`Reconciler` gathers the remote state around it and performs the
chosen write.
"""

import dataclasses
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from gitlab_auto_mr.client import GitLabClient
from gitlab_auto_mr.config import Config
from gitlab_auto_mr.errors import ConflictError, GitLabError, PipelineFailedError, ValidationError
from gitlab_auto_mr.models import MergeRequestCreate, MergeRequestUpdate
from gitlab_auto_mr.utils import compose_description, compose_title, extract_issue_ref, parse_issue_ref_as_int

logger = logging.getLogger(__name__)


class Action(str, Enum):
    """What a reconciliation run decided to do."""

    REPORT = "report"  # --mr-exists: say whether the MR exists, write nothing
    SKIP = "skip"  # MR exists and --update-mr was not given
    CREATE = "create"
    UPDATE = "update"


@dataclass
class ReconcileResult:
    action: Action
    message: str
    merge_request: dict[str, Any] | None = None
    warnings: list[str] = field(default_factory=list)


def validate_branches(source_branch: str, target_branch: str) -> None:
    """Reject a merge request from a branch into itself."""
    if source_branch == target_branch:
        raise ValidationError(
            f"source branch and target branches must be different, source: {source_branch} and target: {target_branch}"
        )


def find_matching_mr(
    merge_requests: list[dict[str, Any]], source_branch: str, target_branch: str
) -> dict[str, Any] | None:
    """Return the first merge request with exactly this branch pair, in API order."""
    for mr in merge_requests:
        if mr.get("source_branch") == source_branch and mr.get("target_branch") == target_branch:
            return mr
    return None


def decide_action(config: Config, existing: dict[str, Any] | None) -> Action:
    """Pick the action for ``config`` given the existing open MR, if any.

    Rules are checked in order and the first match wins.

    Raises:
        ConflictError: When the mode flags contradict the remote state
    """
    if config.mr_exists:
        return Action.REPORT

    if config.create_only and existing is not None:
        raise ConflictError(
            f"merge request already exists for this branch {config.source_branch} to {config.target_branch}, "
            "cannot create new MR in create-only mode"
        )

    if config.update_mr and existing is None:
        raise ConflictError(
            f"merge request does not exist for this branch {config.source_branch} to {config.target_branch}, "
            "cannot update non-existent MR"
        )

    if existing is not None:
        return Action.UPDATE if config.update_mr else Action.SKIP

    return Action.CREATE


class Reconciler:
    """Runs one reconciliation of ``config`` against GitLab."""

    def __init__(self, config: Config, client: GitLabClient):
        self.config = config
        self.client = client

    def run(self) -> ReconcileResult:
        """Resolve, validate, look up, decide and act.

        Returns:
            The action taken and a one-line summary

        Raises:
            GitLabError: For every failure on the required path
        """
        project = self.client.get_project(self.config.project_id)

        if not self.config.target_branch:
            default_branch = project.get("default_branch")
            if not default_branch:
                raise ValidationError(
                    f"unable to resolve target branch, project {self.config.project_id} has no default branch"
                )
            logger.debug(f"Using default branch '{default_branch}' as target")
            self.config = dataclasses.replace(self.config, target_branch=default_branch)
        config = self.config

        validate_branches(config.source_branch, config.target_branch)

        if config.wait_pipeline:
            self.wait_for_pipeline()

        existing = self.find_existing_mr()
        action = decide_action(config, existing)
        logger.info(f"Decided action '{action.value}' for {config.source_branch} -> {config.target_branch}")

        if action is Action.REPORT:
            if existing is None:
                message = (
                    f"Merge request does not exist for this branch {config.source_branch} to "
                    f"{config.target_branch}, run without flag '--mr-exists' to open merge request."
                )
            else:
                message = f"Merge request exists: {existing['title']} (IID: {existing['iid']})"
            return ReconcileResult(action, message, existing)

        if action is Action.SKIP:
            assert existing is not None
            message = (
                f"Merge request already exists: {existing['title']} (IID: {existing['iid']}). "
                "Use --update-mr flag to update it."
            )
            return ReconcileResult(action, message, existing)

        if action is Action.UPDATE:
            assert existing is not None
            return self.update(existing)

        return self.create()

    def wait_for_pipeline(self) -> None:
        """Block until the pipeline for the configured commit succeeds."""
        pipeline_id = self.client.get_pipeline_id(self.config.project_id, self.config.commit_sha)
        status = self.client.wait_for_pipeline(self.config.project_id, pipeline_id, self.config.pipeline_timeout)
        if not status.success:
            raise PipelineFailedError(pipeline_id, status.status)

    def find_existing_mr(self) -> dict[str, Any] | None:
        merge_requests = self.client.get_merge_requests(
            self.config.project_id,
            state="opened",
            source_branch=self.config.source_branch,
            target_branch=self.config.target_branch,
        )
        existing = find_matching_mr(merge_requests, self.config.source_branch, self.config.target_branch)
        if existing is not None:
            logger.info(f"Found open MR !{existing.get('iid')} for {self.config.source_branch}")
        return existing

    @property
    def issue_iid(self) -> int:
        """IID of the issue named by the source branch, or 0."""
        return parse_issue_ref_as_int(extract_issue_ref(self.config.source_branch))

    def fetch_issue(self) -> dict[str, Any] | None:
        """Fetch the branch's issue for enrichment; any failure yields None."""
        if not self.config.use_issue_name:
            return None

        issue_iid = self.issue_iid
        if not issue_iid:
            logger.debug(f"No issue reference in branch {self.config.source_branch}")
            return None

        try:
            return self.client.get_issue(self.config.project_id, issue_iid)
        except GitLabError as e:
            logger.warning(f"Issue #{issue_iid} unavailable, continuing without it: {e}")
            return None

    def _common_fields(self) -> dict[str, Any]:
        """Payload fields shared by create and update."""
        config = self.config
        issue = self.fetch_issue()

        milestone_id = config.milestone_id
        labels: list[str] = []
        if issue is not None:
            milestone = issue.get("milestone") or {}
            milestone_id = milestone.get("id") or milestone_id
            labels = list(issue.get("labels") or [])

        return {
            "title": compose_title(
                config.commit_prefix,
                config.title,
                config.title_fallback,
                issue.get("title") if issue else None,
            ),
            "description": compose_description(config.description),
            "assignee_ids": self.client.resolve_user_ids(config.assignees),
            "reviewer_ids": self.client.resolve_user_ids(config.reviewers),
            "remove_source_branch": config.remove_branch,
            "squash": config.squash_commits,
            "allow_collaboration": config.allow_collaboration,
            "milestone_id": milestone_id,
            "labels": labels,
        }

    def update(self, existing: dict[str, Any]) -> ReconcileResult:
        request = MergeRequestUpdate(**self._common_fields())
        mr = self.client.update_merge_request(self.config.project_id, existing["iid"], request.to_payload())
        return ReconcileResult(
            Action.UPDATE,
            f"Updated existing MR {request.title} (IID: {existing['iid']})",
            mr,
        )

    def create(self) -> ReconcileResult:
        request = MergeRequestCreate(
            source_branch=self.config.source_branch,
            target_branch=self.config.target_branch,
            **self._common_fields(),
        )
        mr = self.client.create_merge_request(self.config.project_id, request.to_payload())
        warnings = self.run_post_create(mr)
        return ReconcileResult(
            Action.CREATE,
            f"Created a new MR {request.title}, assigned to you.",
            mr,
            warnings,
        )

    def post_create_steps(self, mr: dict[str, Any]) -> list[tuple[str, Callable[[], Any]]]:
        """Follow-up actions for a freshly created MR, in order."""
        project_id = self.config.project_id
        steps: list[tuple[str, Callable[[], Any]]] = []

        if self.config.auto_merge:
            steps.append(
                (
                    f"enable auto-merge for MR !{mr['iid']}",
                    lambda: self.client.accept_merge_request(
                        project_id,
                        mr["iid"],
                        squash=self.config.squash_commits,
                        should_remove_source_branch=self.config.remove_branch,
                    ),
                )
            )

        issue_iid = self.issue_iid
        if issue_iid:
            steps.append((f"close issue #{issue_iid}", lambda: self.client.close_issue(project_id, issue_iid)))

        return steps

    def run_post_create(self, mr: dict[str, Any]) -> list[str]:
        """Run each follow-up step; a failing step becomes a warning."""
        warnings = []
        for name, step in self.post_create_steps(mr):
            try:
                step()
            except GitLabError as e:
                warning = f"Failed to {name}: {e}"
                logger.warning(warning)
                warnings.append(warning)
        return warnings
