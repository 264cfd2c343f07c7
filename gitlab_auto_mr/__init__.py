"""gitlab-auto-mr - open or update a GitLab merge request from CI.

This package provides:
- A GitLab API client for projects, merge requests, issues, users and pipelines
- The merge request reconciler that decides between report, create and update
- A command-line entry point driven by flags and GitLab CI variables
"""

__version__ = "1.0.0"

from gitlab_auto_mr.client import GitLabClient
from gitlab_auto_mr.config import Config
from gitlab_auto_mr.errors import (
    AuthenticationError,
    ConfigurationError,
    ConflictError,
    GitLabError,
    NotFoundError,
    PipelineFailedError,
    PipelineTimeoutError,
    TransportError,
    ValidationError,
)
from gitlab_auto_mr.models import MergeRequestCreate, MergeRequestUpdate, PipelineStatus
from gitlab_auto_mr.reconciler import Action, ReconcileResult, Reconciler, decide_action

__all__ = [
    "__version__",
    # Client
    "GitLabClient",
    # Configuration
    "Config",
    # Reconciliation
    "Reconciler",
    "ReconcileResult",
    "Action",
    "decide_action",
    # Models
    "MergeRequestCreate",
    "MergeRequestUpdate",
    "PipelineStatus",
    # Exceptions
    "GitLabError",
    "ConfigurationError",
    "ValidationError",
    "ConflictError",
    "AuthenticationError",
    "NotFoundError",
    "TransportError",
    "PipelineTimeoutError",
    "PipelineFailedError",
]
