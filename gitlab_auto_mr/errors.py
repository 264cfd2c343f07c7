"""Exception hierarchy for gitlab-auto-mr."""


class GitLabError(Exception):
    """Base class for every error raised by gitlab-auto-mr."""


class ConfigurationError(GitLabError):
    """A required setting is missing or malformed."""


class ValidationError(GitLabError):
    """The requested merge request can never be valid (e.g. source == target)."""


class ConflictError(GitLabError):
    """The requested mode does not match the remote state."""


class AuthenticationError(GitLabError):
    """The access token was rejected."""


class NotFoundError(GitLabError):
    """A referenced project, issue, user or pipeline does not exist."""


class TransportError(GitLabError):
    """GitLab answered with an unexpected status, or could not be reached."""

    def __init__(self, message: str, status_code: int | None = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class PipelineTimeoutError(GitLabError, TimeoutError):
    """A pipeline did not finish before its timeout expired."""

    def __init__(self, pipeline_id: int, timeout_seconds: float):
        super().__init__(f"pipeline {pipeline_id} check timed out after {timeout_seconds} seconds")
        self.pipeline_id = pipeline_id
        self.timeout_seconds = timeout_seconds


class PipelineFailedError(GitLabError):
    """A gated pipeline finished with a status other than success."""

    def __init__(self, pipeline_id: int, status: str):
        super().__init__(f"pipeline {pipeline_id} finished with status '{status}'")
        self.pipeline_id = pipeline_id
        self.status = status
