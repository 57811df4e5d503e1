"""README lookup: the latest README-like file at the root of a tree."""

from fnmatch import fnmatchcase
from typing import Iterable, Optional

from .models import TreeEntry

README_PATTERN = "[rR][eE][aA][dD][mM][eE]*"


def matches_pattern(name: str, pattern: str = README_PATTERN) -> bool:
    """Shell-style match, case-sensitive so the pattern controls case."""
    return fnmatchcase(name, pattern)


def find_latest_file(
    entries: Iterable[TreeEntry], pattern: str = README_PATTERN
) -> Optional[TreeEntry]:
    """First file entry whose name matches ``pattern``, or None."""
    for entry in entries:
        if not entry.is_dir and matches_pattern(entry.name, pattern):
            return entry
    return None
