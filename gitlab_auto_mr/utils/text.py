"""Merge request title and description helpers."""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def compose_title(prefix: str, explicit_title: str, fallback: str, issue_title: str | None = None) -> str:
    """Build the merge request title.

    The text is the explicit title if set, else the issue title if given,
    else ``fallback`` (commit title or source branch). ``prefix`` is added
    as ``"<prefix>: <text>"`` unless the text already starts with it.

    Args:
        prefix: Title prefix such as "Draft"; empty for none
        explicit_title: Title configured by the user
        fallback: Commit title or source branch name
        issue_title: Title of the linked issue, when issue names are in use

    Returns:
        The final title
    """
    text = explicit_title or issue_title or fallback
    if not prefix or text.startswith(prefix):
        return text
    return f"{prefix}: {text}"


def compose_description(path: str) -> str:
    """Return the contents of the description file at ``path``.

    An empty path or an unreadable file yields an empty description.
    """
    if not path:
        return ""

    try:
        return Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Unable to read description file at {path}: {e}. No description will be set.")
        return ""
