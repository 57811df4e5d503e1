"""Fakes and helpers shared by the repobrowse tests."""

from datetime import datetime, timezone
from typing import List, Optional, Sequence

from rich.console import Console

from repobrowse.backend.models import Commit, Reference, Repository, TreeEntry
from repobrowse.exceptions import EmptyRepositoryError, PathNotFoundError
from repobrowse.ui.messages import ContentResult, MouseAction, MouseButton, MouseMsg, Msg
from repobrowse.ui.tasks import Task
from repobrowse.ui.zones import ZoneManager, zones_in

MAIN = Reference("refs/heads/main", "a" * 40)
FEATURE = Reference("refs/heads/feature", "b" * 40)
V1 = Reference("refs/tags/v1.0", "c" * 40)


def make_commit(n: int) -> Commit:
    return Commit(
        hash=f"{n:040x}",
        author="Ada",
        date=datetime(2024, 1, 1, tzinfo=timezone.utc),
        summary=f"commit {n}",
    )


class FakeBackend:
    """In-memory backend; records the calls it receives."""

    def __init__(self, empty: bool = False, commit_total: int = 3) -> None:
        self.empty = empty
        self.calls: List[str] = []
        self.readme_text = "# Demo\n\nHello from the readme."
        self.files = {
            "": [
                TreeEntry("docs", "docs", is_dir=True),
                TreeEntry("README.md", "README.md", size=32),
                TreeEntry("main.py", "main.py", size=12),
            ],
            "docs": [TreeEntry("docs/guide.md", "guide.md", size=5)],
        }
        self.contents = {
            "README.md": self.readme_text,
            "main.py": "print('hi')\n",
            "docs/guide.md": "guide",
        }
        self.history = [make_commit(n) for n in range(commit_total, 0, -1)]

    def head(self, repository: Repository) -> Reference:
        self.calls.append("head")
        if self.empty:
            raise EmptyRepositoryError(repository=repository.name)
        return MAIN

    def references(self, repository: Repository) -> List[Reference]:
        self.calls.append("references")
        return [FEATURE, MAIN, V1]

    def tree(self, repository: Repository, ref: Reference, path: str = "") -> List[TreeEntry]:
        self.calls.append(f"tree:{path}")
        if path not in self.files:
            raise PathNotFoundError(path=path)
        return list(self.files[path])

    def file_content(self, repository: Repository, ref: Reference, path: str) -> str:
        self.calls.append(f"content:{path}")
        return self.contents[path]

    def readme(self, repository: Repository, ref: Reference):
        self.calls.append("readme")
        return self.readme_text, "README.md"

    def commit_count(self, repository: Repository, ref: Reference) -> int:
        self.calls.append("count")
        return len(self.history)

    def commits(self, repository: Repository, ref: Reference, skip: int = 0, limit: int = 50):
        self.calls.append(f"commits:{skip}")
        return self.history[skip:skip + limit]

    def diff(self, repository: Repository, commit: str) -> str:
        self.calls.append(f"diff:{commit[:7]}")
        return f"commit {commit}\n\n diff --git a/main.py b/main.py"


class FakePane:
    """A pane that only records what it is sent."""

    def __init__(self, name: str, spinner: Optional[int] = None) -> None:
        self.name = name
        self.spinner = spinner
        self.received: List[Msg] = []
        self.items = 0
        self.width = 0
        self.height = 0

    @property
    def tab_name(self) -> str:
        return self.name

    def set_size(self, width: int, height: int) -> None:
        self.width = width
        self.height = height

    def init(self) -> List[Task]:
        return []

    def update(self, msg: Msg):
        self.received.append(msg)
        if isinstance(msg, ContentResult):
            self.items += 1
        return self, []

    def render(self) -> str:
        return f"{self.name} body"

    def short_help(self):
        return []

    def full_help(self):
        return []

    def status_bar_value(self) -> str:
        return f"{self.name} value"

    def status_bar_info(self) -> str:
        return f"{self.name} info"

    def spinner_id(self) -> Optional[int]:
        return self.spinner

    def count(self, kind: type) -> int:
        return sum(1 for m in self.received if isinstance(m, kind))


def run_tasks(tasks: Sequence[Task], skip_ticks: bool = True) -> List[Msg]:
    """Run tasks inline, dropping spinner ticks unless asked for."""
    out = []
    for task in tasks:
        if skip_ticks and task.name.startswith("spinner-"):
            continue
        msg = task.run()
        if msg is not None:
            out.append(msg)
    return out


def drain(model, tasks: Sequence[Task], rounds: int = 10) -> List[Msg]:
    """Feed task results back into ``model`` until nothing is left."""
    seen: List[Msg] = []
    for _ in range(rounds):
        msgs = run_tasks(tasks)
        if not msgs:
            break
        tasks = []
        for msg in msgs:
            seen.append(msg)
            model, more = model.update(msg)
            tasks += more
    return seen


def pointer_at(
    zones: ZoneManager,
    frame: str,
    x: int,
    y: int,
    button: MouseButton = MouseButton.LEFT,
    action: MouseAction = MouseAction.PRESS,
) -> MouseMsg:
    """A pointer message at ``(x, y)`` carrying the zones Rich reports there.

    ``x`` is a character offset, which matches the cell for the ASCII
    frames used in tests.
    """
    line = zones.render(frame).split("\n", allow_blank=True)[y]
    style = line.get_style_at_offset(Console(), x)
    return MouseMsg(x, y, button, action, zones=zones_in(style.meta))
