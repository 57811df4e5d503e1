"""Files pane - browse the tree at the current reference."""

import posixpath
from typing import Any, List, Optional

from rich.cells import cell_len

from ...backend.models import TreeEntry
from ..components.selector import Selector
from ..keybindings import KeyBinding
from ..layout import fit, truncate
from ..messages import (
    FileContent,
    FileItems,
    FilterMatches,
    ItemSelected,
    KeyMsg,
    MouseButton,
    MouseMsg,
    Msg,
)
from ..tasks import Task
from .base import PaneBase


def format_size(size: int) -> str:
    for unit in ("B", "K", "M", "G"):
        if size < 1024:
            return f"{size}{unit}"
        size //= 1024
    return f"{size}T"


def render_entry(item: Any, index: int, selected: bool, width: int) -> str:
    cursor = ">" if selected else " "
    if isinstance(item, TreeEntry):
        name = item.name + ("/" if item.is_dir else "")
        size = "" if item.is_dir else format_size(item.size)
    else:
        name, size = str(item), ""
    room = width - cell_len(size) - 3
    return fit(f"{cursor} {truncate(name, room)}", width - cell_len(size) - 1) + " " + size


class FilesPane(PaneBase):
    TAB_NAME = "Files"

    LIST = "list"
    FILE = "file"

    def __init__(self, ctx, tab_name: Optional[str] = None) -> None:
        super().__init__(ctx, tab_name)
        self.selector = Selector(ctx, render_item=render_entry)
        self.mode = self.LIST
        self.path = ""
        self.file_path = ""
        self.file_lines: List[str] = []
        self.offset = 0

    def on_resize(self) -> None:
        self.selector.set_size(self.width, self.height)

    def on_repo(self) -> List[Task]:
        self.mode = self.LIST
        self.path = ""
        self.file_path = ""
        self.file_lines = []
        return self.selector.set_items([])

    def on_ref(self) -> List[Task]:
        self.mode = self.LIST
        return self._list_tree("")

    def on_empty(self) -> List[Task]:
        return self.selector.set_items([])

    def _list_tree(self, path: str) -> List[Task]:
        repo, ref, target = self.repo, self.ref, self.tab_name
        backend = self.ctx.backend

        def _tree() -> FileItems:
            return FileItems(target, path, tuple(backend.tree(repo, ref, path)))

        return self.start_loading() + [self.fetch("tree", _tree)]

    def _open_file(self, path: str) -> List[Task]:
        repo, ref, target = self.repo, self.ref, self.tab_name
        backend = self.ctx.backend

        def _content() -> FileContent:
            return FileContent(target, path, backend.file_content(repo, ref, path))

        return self.start_loading() + [self.fetch("content", _content)]

    def handle(self, msg: Msg) -> List[Task]:
        tasks: List[Task] = []
        if isinstance(msg, FileItems):
            if self.matches_target(msg):
                self.loading = False
                self.mode = self.LIST
                self.path = msg.path
                tasks += self.selector.set_items(list(msg.items))
                self.selector.select(0)
        elif isinstance(msg, FileContent):
            if self.matches_target(msg):
                self.loading = False
                self.mode = self.FILE
                self.file_path = msg.path
                self.file_lines = msg.content.split("\n")
                self.offset = 0
        elif isinstance(msg, ItemSelected):
            if msg.list_id == self.selector.list_id and isinstance(msg.item, TreeEntry):
                if msg.item.is_dir:
                    tasks += self._list_tree(msg.item.path)
                else:
                    tasks += self._open_file(msg.item.path)
        elif isinstance(msg, FilterMatches):
            _, more = self.selector.update(msg)
            tasks += more
        elif isinstance(msg, (KeyMsg, MouseMsg)):
            if self.mode == self.FILE:
                self._update_file_view(msg)
            elif self.wants_back(msg, self.selector):
                tasks.append(self.back_task())
            elif (
                isinstance(msg, KeyMsg)
                and self.ctx.keymap.up_dir.matches(msg)
                and not self.selector.is_filtering()
            ):
                if self.path and self.ref is not None:
                    tasks += self._list_tree(posixpath.dirname(self.path))
            else:
                _, more = self.selector.update(msg)
                tasks += more
        return tasks

    def _update_file_view(self, msg: Msg) -> None:
        keymap = self.ctx.keymap
        if isinstance(msg, MouseMsg):
            if msg.button == MouseButton.WHEEL_UP:
                self._scroll(-1)
            elif msg.button == MouseButton.WHEEL_DOWN:
                self._scroll(1)
        elif keymap.up_dir.matches(msg) or keymap.back.matches(msg):
            self.mode = self.LIST
        elif keymap.up.matches(msg):
            self._scroll(-1)
        elif keymap.down.matches(msg):
            self._scroll(1)
        elif keymap.prev_page.matches(msg):
            self._scroll(-self.height)
        elif keymap.next_page.matches(msg):
            self._scroll(self.height)

    def _scroll(self, delta: int) -> None:
        max_offset = max(0, len(self.file_lines) - self.height)
        self.offset = max(0, min(self.offset + delta, max_offset))

    def view(self) -> str:
        if self.mode == self.FILE:
            gutter = len(str(len(self.file_lines)))
            shown = self.file_lines[self.offset:self.offset + self.height]
            return "\n".join(
                truncate(f"{n:>{gutter}} │ {line.expandtabs(4)}", self.width)
                for n, line in enumerate(shown, start=self.offset + 1)
            )
        return self.selector.render()

    def short_help(self) -> List[KeyBinding]:
        keymap = self.ctx.keymap
        if self.mode == self.FILE:
            return [keymap.up, keymap.down, keymap.up_dir]
        return [keymap.up, keymap.down, keymap.select, keymap.up_dir]

    def full_help(self) -> List[List[KeyBinding]]:
        keymap = self.ctx.keymap
        return [
            self.short_help(),
            [keymap.prev_page, keymap.next_page, keymap.top, keymap.bottom],
            [keymap.filter, keymap.clear_filter],
        ]

    def status_bar_value(self) -> str:
        if self.mode == self.FILE:
            return self.file_path
        return "/" + self.path

    def status_bar_info(self) -> str:
        if self.mode == self.FILE:
            return f"{len(self.file_lines)} lines"
        index, visible = self.selector.selection()
        if not visible:
            return ""
        return f"{index + 1}/{len(visible)}"
