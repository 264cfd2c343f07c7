"""Issue reference helpers for branch names."""


def _is_clean_integer(token: str) -> bool:
    return token.isascii() and token.isdigit()


def extract_issue_ref(branch_name: str) -> str:
    """Find the issue number a branch name refers to.

    Branches are expected to look like ``category/123-slug`` or ``123-slug``.
    With a ``/`` the second segment is used, otherwise the whole name; the
    part before the first ``-`` must be a plain number.

    Returns:
        The issue number as a string, or "" when the branch names no issue
    """
    segments = branch_name.split("/")
    candidate = segments[1] if len(segments) >= 2 else branch_name
    token = candidate.split("-")[0]
    return token if _is_clean_integer(token) else ""


def parse_issue_ref_as_int(ref: str) -> int:
    """Convert an issue reference to an int, or 0 if it is not a clean integer."""
    if not _is_clean_integer(ref):
        return 0
    return int(ref)
