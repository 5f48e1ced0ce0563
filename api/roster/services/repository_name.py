"""Normalize user-supplied repository identifiers to ``owner/repo``."""

from __future__ import annotations

import re
from dataclasses import dataclass

from roster.services.github_errors import InvalidInputError

INVALID_REPOSITORY_MESSAGE = "Repository must be in the form owner/repo or a GitHub repository URL."

_REPO_RE = re.compile(
    r"^(?:(?:https?://)?(?:www\.)?github\.com/)?"
    r"(?P<owner>[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?)"
    r"/(?P<name>[A-Za-z0-9._-]+?)"
    r"(?:\.git)?/?$",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class RepositoryName:
    owner: str
    name: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    def __str__(self) -> str:
        return self.full_name

    def matches(self, full_name: str) -> bool:
        """GitHub owner and repo names are case-insensitive."""
        return (full_name or "").strip().lower() == self.full_name.lower()


def parse_repository(raw: str) -> RepositoryName:
    """Accept ``owner/repo`` or a github.com URL (optional ``.git`` and trailing slash)."""
    m = _REPO_RE.match((raw or "").strip())
    if not m:
        raise InvalidInputError(INVALID_REPOSITORY_MESSAGE)
    name = m.group("name")
    if name in {".", ".."}:
        raise InvalidInputError(INVALID_REPOSITORY_MESSAGE)
    return RepositoryName(owner=m.group("owner"), name=name)

