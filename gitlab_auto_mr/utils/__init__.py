"""Utility functions for gitlab-auto-mr."""

from gitlab_auto_mr.utils.branches import extract_issue_ref, parse_issue_ref_as_int
from gitlab_auto_mr.utils.text import compose_description, compose_title

__all__ = [
    # branches
    "extract_issue_ref",
    "parse_issue_ref_as_int",
    # text
    "compose_title",
    "compose_description",
]
