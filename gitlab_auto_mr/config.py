"""Run configuration for gitlab-auto-mr.

A ``Config`` is built once at startup from command-line flags (which fall
back to GitLab CI variables) and handed to the reconciler. Nothing reads
the environment after that.
"""

import re
from dataclasses import dataclass

from gitlab_auto_mr.errors import ConfigurationError

DEFAULT_PREFIX = "Draft"
DEFAULT_PIPELINE_TIMEOUT = 3600

_BASE_URL_RE = re.compile(r"^https?://[^/]+")


def parse_identifier_list(value: str | None) -> tuple[str, ...]:
    """Split a comma-separated list of user IDs or usernames, dropping blanks."""
    if not value:
        return ()
    return tuple(part.strip() for part in value.split(",") if part.strip())


def normalize_base_url(url: str) -> str:
    """Reduce a project URL such as ``CI_PROJECT_URL`` to ``scheme://host``."""
    match = _BASE_URL_RE.match(url.strip())
    return match.group(0) if match else url.strip().rstrip("/")


@dataclass(frozen=True)
class Config:
    """Everything one reconciliation run needs to know."""

    private_token: str
    source_branch: str
    project_id: str
    gitlab_url: str
    assignees: tuple[str, ...]
    reviewers: tuple[str, ...] = ()
    target_branch: str = ""
    commit_prefix: str = DEFAULT_PREFIX
    title: str = ""
    description: str = ""
    milestone_id: int | None = None
    commit_title: str = ""
    commit_sha: str = ""
    remove_branch: bool = False
    squash_commits: bool = False
    allow_collaboration: bool = False
    use_issue_name: bool = False
    mr_exists: bool = False
    update_mr: bool = False
    create_only: bool = False
    auto_merge: bool = False
    wait_pipeline: bool = False
    pipeline_timeout: int = DEFAULT_PIPELINE_TIMEOUT
    insecure: bool = False

    def validate(self) -> None:
        """Check required settings.

        Raises:
            ConfigurationError: Naming the first missing or invalid flag
        """
        required = {
            "--private-token": self.private_token,
            "--source-branch": self.source_branch,
            "--project-id": self.project_id,
            "--gitlab-url": self.gitlab_url,
        }
        for flag, value in required.items():
            if not value:
                raise ConfigurationError(f"{flag} is required")

        if not self.assignees:
            raise ConfigurationError("--user-id is required")
        if self.wait_pipeline and not self.commit_sha:
            raise ConfigurationError("--commit-sha is required with --wait-pipeline")
        if self.pipeline_timeout <= 0:
            raise ConfigurationError("--pipeline-timeout must be positive")

    @property
    def title_fallback(self) -> str:
        """Title text used when neither an explicit nor an issue title applies."""
        return self.commit_title or self.source_branch
