"""Type definitions for gitlab-auto-mr."""

from dataclasses import dataclass, field
from typing import Any, NotRequired

from typing_extensions import TypedDict

# Pipeline statuses that can still change on their own
PENDING_STATUSES = ("pending", "running")
SUCCESS_STATUS = "success"


class Project(TypedDict):
    """Subset of the GitLab project payload used here."""

    id: int
    name: str
    default_branch: str | None


class MergeRequest(TypedDict):
    """Subset of the GitLab merge request payload used here."""

    id: int
    iid: int
    title: str
    source_branch: str
    target_branch: str
    state: str
    web_url: NotRequired[str]


class Milestone(TypedDict):
    id: int
    title: NotRequired[str]


class Issue(TypedDict):
    """Subset of the GitLab issue payload used here."""

    id: int
    iid: int
    title: str
    labels: list[str]
    milestone: NotRequired[Milestone | None]


@dataclass(frozen=True)
class PipelineStatus:
    """Snapshot of a pipeline's state as seen by the gate."""

    status: str
    completed: bool
    success: bool

    @classmethod
    def from_status(cls, status: str) -> "PipelineStatus":
        return cls(
            status=status,
            completed=status not in PENDING_STATUSES,
            success=status == SUCCESS_STATUS,
        )


@dataclass
class MergeRequestCreate:
    """Body of ``POST /projects/:id/merge_requests``."""

    source_branch: str
    target_branch: str
    title: str
    description: str = ""
    assignee_ids: list[int] = field(default_factory=list)
    reviewer_ids: list[int] = field(default_factory=list)
    remove_source_branch: bool = False
    squash: bool = False
    allow_collaboration: bool = False
    milestone_id: int | None = None
    labels: list[str] = field(default_factory=list)

    def to_payload(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "source_branch": self.source_branch,
            "target_branch": self.target_branch,
            "title": self.title,
            "remove_source_branch": self.remove_source_branch,
            "squash": self.squash,
            "allow_collaboration": self.allow_collaboration,
        }

        if self.description:
            data["description"] = self.description
        if self.assignee_ids:
            data["assignee_ids"] = self.assignee_ids
        if self.reviewer_ids:
            data["reviewer_ids"] = self.reviewer_ids
        if self.milestone_id:
            data["milestone_id"] = self.milestone_id
        if self.labels:
            data["labels"] = ",".join(self.labels)

        return data


@dataclass
class MergeRequestUpdate:
    """Body of ``PUT /projects/:id/merge_requests/:iid``.

    Only populated fields are sent, so an update never resets a field
    on the existing merge request to an empty or false value.
    """

    title: str = ""
    description: str = ""
    assignee_ids: list[int] = field(default_factory=list)
    reviewer_ids: list[int] = field(default_factory=list)
    remove_source_branch: bool = False
    squash: bool = False
    allow_collaboration: bool = False
    milestone_id: int | None = None
    labels: list[str] = field(default_factory=list)

    def to_payload(self) -> dict[str, Any]:
        data: dict[str, Any] = {}

        if self.title:
            data["title"] = self.title
        if self.description:
            data["description"] = self.description
        if self.assignee_ids:
            data["assignee_ids"] = self.assignee_ids
        if self.reviewer_ids:
            data["reviewer_ids"] = self.reviewer_ids
        if self.remove_source_branch:
            data["remove_source_branch"] = True
        if self.squash:
            data["squash"] = True
        if self.allow_collaboration:
            data["allow_collaboration"] = True
        if self.milestone_id:
            data["milestone_id"] = self.milestone_id
        if self.labels:
            data["labels"] = ",".join(self.labels)

        return data
