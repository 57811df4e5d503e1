"""
Repository access for the browser.

The UI only talks to the ``Backend`` protocol; ``GitBackend`` is the local
GitPython implementation.
"""

from typing import List, Protocol, Tuple

from .git_backend import GitBackend
from .models import Commit, Reference, Repository, TreeEntry
from .readme import README_PATTERN, find_latest_file, matches_pattern
from .urls import clone_command, repo_url


class Backend(Protocol):
    """What panes and the repository view need from a repository source."""

    def head(self, repository: Repository) -> Reference: ...

    def references(self, repository: Repository) -> List[Reference]: ...

    def tree(self, repository: Repository, ref: Reference, path: str = "") -> List[TreeEntry]: ...

    def file_content(self, repository: Repository, ref: Reference, path: str) -> str: ...

    def readme(self, repository: Repository, ref: Reference) -> Tuple[str, str]: ...

    def commit_count(self, repository: Repository, ref: Reference) -> int: ...

    def commits(
        self, repository: Repository, ref: Reference, skip: int = 0, limit: int = 50
    ) -> List[Commit]: ...

    def diff(self, repository: Repository, commit: str) -> str: ...


__all__ = [
    "Backend",
    "GitBackend",
    "Commit",
    "Reference",
    "Repository",
    "TreeEntry",
    "README_PATTERN",
    "find_latest_file",
    "matches_pattern",
    "clone_command",
    "repo_url",
]
