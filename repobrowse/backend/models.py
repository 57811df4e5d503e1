"""Repository data models shared by the backend and the UI."""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional

REF_PREFIXES = ("refs/heads/", "refs/tags/", "refs/remotes/", "refs/")


@dataclass(frozen=True)
class Repository:
    """A browsable repository. Read-only once created."""

    name: str
    path: Optional[Path] = None
    project_name: str = ""
    description: str = ""


@dataclass(frozen=True)
class Reference:
    """A symbolic reference such as ``refs/heads/main``.

    Replaced wholesale on change, never mutated.
    """

    name: str
    commit: str = ""

    @property
    def short(self) -> str:
        """Name without its ``refs/...`` namespace."""
        for prefix in REF_PREFIXES:
            if self.name.startswith(prefix):
                return self.name[len(prefix):]
        return self.name

    @property
    def id(self) -> str:
        return self.name

    def filter_value(self) -> str:
        return self.short


@dataclass(frozen=True)
class TreeEntry:
    """One entry of a git tree listing."""

    path: str
    name: str
    is_dir: bool = False
    size: int = 0
    mode: int = 0

    @property
    def id(self) -> str:
        return self.path

    def filter_value(self) -> str:
        return self.name


@dataclass(frozen=True)
class Commit:
    """Summary of one commit in a log listing."""

    hash: str
    author: str
    date: datetime
    summary: str
    message: str = ""
    parents: tuple = field(default_factory=tuple)

    @property
    def id(self) -> str:
        return self.hash

    @property
    def short_hash(self) -> str:
        return self.hash[:7]

    def filter_value(self) -> str:
        return self.summary
