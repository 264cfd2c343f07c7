"""User lookup client mixin."""

import logging

from gitlab_auto_mr.client.base import BaseClientMixin
from gitlab_auto_mr.errors import GitLabError, NotFoundError

logger = logging.getLogger(__name__)


class UsersMixin(BaseClientMixin):
    """Mixin for resolving usernames to user IDs."""

    def find_user_id(self, username: str) -> int:
        """Look up the numeric ID of ``username``.

        Raises:
            NotFoundError: If no user has that username
        """
        users = self.get("/users", params={"username": username})
        if not users:
            raise NotFoundError(f"user '{username}' not found")
        return users[0]["id"]

    def resolve_user_ids(self, identifiers: tuple[str, ...] | list[str]) -> list[int]:
        """Turn a mix of numeric IDs and usernames into user IDs.

        Usernames are looked up one at a time. A lookup that fails is
        logged and skipped; the others are still resolved.
        """
        user_ids: list[int] = []
        for identifier in identifiers:
            identifier = identifier.strip().lstrip("@")
            if not identifier:
                continue
            if identifier.isascii() and identifier.isdigit():
                user_ids.append(int(identifier))
                continue
            try:
                user_ids.append(self.find_user_id(identifier))
            except GitLabError as e:
                logger.warning(f"Skipping user '{identifier}': {e}")
        return user_ids
