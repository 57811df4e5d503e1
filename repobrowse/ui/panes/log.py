"""
Log pane - commit history for the current reference.

History arrives a page at a time. The next page is requested when the
cursor gets close to the end of what is loaded, and confirming a commit
swaps the list for its diff until ``backspace`` goes back.
"""

from typing import Any, List, Optional

from rich.cells import cell_len

from ...backend.models import Commit
from ...config.constants import LOG_LOAD_MORE_THRESHOLD
from ..components.selector import Selector
from ..keybindings import KeyBinding
from ..layout import fit, truncate
from ..messages import (
    FilterMatches,
    ItemActive,
    ItemSelected,
    KeyMsg,
    LogCount,
    LogDiff,
    LogItems,
    MouseButton,
    MouseMsg,
    Msg,
)
from ..tasks import Task
from .base import PaneBase


def render_commit(item: Any, index: int, selected: bool, width: int) -> str:
    if not isinstance(item, Commit):
        return truncate(str(item), width)
    cursor = ">" if selected else " "
    when = item.date.strftime("%Y-%m-%d") if item.date else ""
    left = f"{cursor} {item.short_hash} {item.summary}"
    room = width - cell_len(when) - 1
    return fit(truncate(left, room), room) + " " + when


class LogPane(PaneBase):
    TAB_NAME = "Log"

    def __init__(self, ctx, tab_name: Optional[str] = None) -> None:
        super().__init__(ctx, tab_name)
        self.selector = Selector(ctx, render_item=render_commit)
        self.count = 0
        self.commits: List[Commit] = []
        self.fetching_more = False
        self.diff_commit: Optional[Commit] = None
        self.diff_lines: List[str] = []
        self.offset = 0

    def on_resize(self) -> None:
        self.selector.set_size(self.width, self.height)

    def _reset(self) -> List[Task]:
        self.count = 0
        self.commits = []
        self.fetching_more = False
        self.diff_commit = None
        self.diff_lines = []
        self.offset = 0
        return self.selector.set_items([])

    def on_repo(self) -> List[Task]:
        return self._reset()

    def on_empty(self) -> List[Task]:
        return self._reset()

    def on_ref(self) -> List[Task]:
        tasks = self._reset()
        repo, ref, target = self.repo, self.ref, self.tab_name
        backend = self.ctx.backend

        def _count() -> LogCount:
            return LogCount(target, backend.commit_count(repo, ref))

        tasks += self.start_loading()
        tasks.append(self.fetch("count", _count))
        tasks.append(self._page_task(0))
        return tasks

    def _page_task(self, skip: int) -> Task:
        repo, ref, target = self.repo, self.ref, self.tab_name
        backend, limit = self.ctx.backend, self.ctx.config.log_page_size

        def _page() -> LogItems:
            return LogItems(target, skip, tuple(backend.commits(repo, ref, skip, limit)))

        return self.fetch("page", _page)

    def _diff_task(self, commit: Commit) -> Task:
        repo, target = self.repo, self.tab_name
        backend = self.ctx.backend

        def _diff() -> LogDiff:
            return LogDiff(target, commit, backend.diff(repo, commit.hash))

        return self.fetch("diff", _diff)

    def _maybe_load_more(self) -> List[Task]:
        if self.fetching_more or len(self.commits) >= self.count:
            return []
        if self.selector.index() < len(self.commits) - LOG_LOAD_MORE_THRESHOLD:
            return []
        self.fetching_more = True
        return [self._page_task(len(self.commits))]

    def handle(self, msg: Msg) -> List[Task]:
        tasks: List[Task] = []
        if isinstance(msg, LogCount):
            if self.matches_target(msg):
                self.count = msg.count
        elif isinstance(msg, LogItems):
            if self.matches_target(msg):
                self.loading = False
                self.fetching_more = False
                if msg.skip == 0:
                    self.commits = list(msg.commits)
                elif msg.skip == len(self.commits):
                    self.commits += msg.commits
                else:
                    return tasks
                self.count = max(self.count, len(self.commits))
                tasks += self.selector.set_items(self.commits)
        elif isinstance(msg, LogDiff):
            if self.matches_target(msg):
                self.loading = False
                self.diff_commit = msg.commit
                self.diff_lines = msg.diff.split("\n")
                self.offset = 0
        elif isinstance(msg, ItemSelected):
            if msg.list_id == self.selector.list_id and isinstance(msg.item, Commit):
                tasks += self.start_loading()
                tasks.append(self._diff_task(msg.item))
        elif isinstance(msg, ItemActive):
            if msg.list_id == self.selector.list_id:
                tasks += self._maybe_load_more()
        elif isinstance(msg, FilterMatches):
            _, more = self.selector.update(msg)
            tasks += more
        elif isinstance(msg, (KeyMsg, MouseMsg)):
            if self.diff_commit is not None:
                self._update_diff_view(msg)
            elif self.wants_back(msg, self.selector):
                tasks.append(self.back_task())
            else:
                _, more = self.selector.update(msg)
                tasks += more
        return tasks

    def _update_diff_view(self, msg: Msg) -> None:
        keymap = self.ctx.keymap
        if isinstance(msg, MouseMsg):
            if msg.button == MouseButton.WHEEL_UP:
                self._scroll(-1)
            elif msg.button == MouseButton.WHEEL_DOWN:
                self._scroll(1)
        elif keymap.up_dir.matches(msg) or keymap.back.matches(msg):
            self.diff_commit = None
            self.diff_lines = []
        elif keymap.up.matches(msg):
            self._scroll(-1)
        elif keymap.down.matches(msg):
            self._scroll(1)
        elif keymap.prev_page.matches(msg):
            self._scroll(-self.height)
        elif keymap.next_page.matches(msg):
            self._scroll(self.height)
        elif keymap.top.matches(msg):
            self.offset = 0
        elif keymap.bottom.matches(msg):
            self._scroll(len(self.diff_lines))

    def _scroll(self, delta: int) -> None:
        max_offset = max(0, len(self.diff_lines) - self.height)
        self.offset = max(0, min(self.offset + delta, max_offset))

    def view(self) -> str:
        if self.diff_commit is not None:
            shown = self.diff_lines[self.offset:self.offset + self.height]
            return "\n".join(truncate(line.expandtabs(4), self.width) for line in shown)
        return self.selector.render()

    def short_help(self) -> List[KeyBinding]:
        keymap = self.ctx.keymap
        if self.diff_commit is not None:
            return [keymap.up, keymap.down, keymap.up_dir]
        return [keymap.up, keymap.down, keymap.select]

    def full_help(self) -> List[List[KeyBinding]]:
        keymap = self.ctx.keymap
        pages = [keymap.prev_page, keymap.next_page, keymap.top, keymap.bottom]
        if self.diff_commit is not None:
            return [self.short_help(), pages]
        return [self.short_help(), pages, [keymap.filter, keymap.clear_filter]]

    def status_bar_value(self) -> str:
        if self.diff_commit is not None:
            return self.diff_commit.short_hash
        selected = self.selector.selected_item()
        return selected.short_hash if isinstance(selected, Commit) else ""

    def status_bar_info(self) -> str:
        if not self.commits:
            return ""
        return f"{self.selector.index() + 1}/{self.count}"
