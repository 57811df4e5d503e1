"""Refs pane - branches and tags; confirming one switches the reference."""

from typing import Any, List, Optional

from ...backend.models import Reference
from ..components.selector import Selector
from ..keybindings import KeyBinding
from ..layout import truncate
from ..messages import (
    FilterMatches,
    ItemSelected,
    KeyMsg,
    MouseMsg,
    Msg,
    RefItems,
    RefResolved,
    SwitchTab,
)
from ..tasks import Task, message_task
from .base import PaneBase

FILES_TAB = "Files"


class RefsPane(PaneBase):
    TAB_NAME = "Refs"

    def __init__(self, ctx, tab_name: Optional[str] = None, prefix: str = "refs/") -> None:
        super().__init__(ctx, tab_name)
        self.prefix = prefix
        self.selector = Selector(ctx, render_item=self._render_ref)
        self.refs: List[Reference] = []

    @classmethod
    def branches(cls, ctx) -> "RefsPane":
        return cls(ctx, "Branches", "refs/heads/")

    @classmethod
    def tags(cls, ctx) -> "RefsPane":
        return cls(ctx, "Tags", "refs/tags/")

    def _render_ref(self, item: Any, index: int, selected: bool, width: int) -> str:
        cursor = ">" if selected else " "
        if not isinstance(item, Reference):
            return truncate(f"{cursor}   {item}", width)
        current = "*" if self.ref is not None and item.name == self.ref.name else " "
        return truncate(f"{cursor} {current} {item.short}", width)

    def on_resize(self) -> None:
        self.selector.set_size(self.width, self.height)

    def on_repo(self) -> List[Task]:
        self.refs = []
        return self.selector.set_items([])

    def on_empty(self) -> List[Task]:
        return self.on_repo()

    def on_ref(self) -> List[Task]:
        # Already listed for this repository; only the "*" marker moves
        if self.refs:
            return []
        repo, prefix, target = self.repo, self.prefix, self.tab_name
        backend = self.ctx.backend

        def _refs() -> RefItems:
            refs = [r for r in backend.references(repo) if r.name.startswith(prefix)]
            return RefItems(target, prefix, tuple(refs))

        return self.start_loading() + [self.fetch("refs", _refs)]

    def handle(self, msg: Msg) -> List[Task]:
        tasks: List[Task] = []
        if isinstance(msg, RefItems):
            if self.matches_target(msg):
                self.loading = False
                self.refs = list(msg.refs)
                tasks += self.selector.set_items(self.refs)
                self._select_current()
        elif isinstance(msg, ItemSelected):
            if msg.list_id == self.selector.list_id and isinstance(msg.item, Reference):
                tasks.append(message_task(RefResolved(msg.item), "ref-selected"))
                tasks.append(message_task(SwitchTab(FILES_TAB), "switch-files"))
        elif self.wants_back(msg, self.selector):
            tasks.append(self.back_task())
        elif isinstance(msg, (FilterMatches, KeyMsg, MouseMsg)):
            _, more = self.selector.update(msg)
            tasks += more
        return tasks

    def _select_current(self) -> None:
        if self.ref is None:
            return
        for i, ref in enumerate(self.refs):
            if ref.name == self.ref.name:
                self.selector.select(i)
                return

    def view(self) -> str:
        return self.selector.render()

    def short_help(self) -> List[KeyBinding]:
        keymap = self.ctx.keymap
        return [keymap.up, keymap.down, keymap.select]

    def full_help(self) -> List[List[KeyBinding]]:
        keymap = self.ctx.keymap
        return [
            self.short_help(),
            [keymap.prev_page, keymap.next_page, keymap.top, keymap.bottom],
            [keymap.filter, keymap.clear_filter],
        ]

    def status_bar_value(self) -> str:
        selected = self.selector.selected_item()
        return selected.short if isinstance(selected, Reference) else ""

    def status_bar_info(self) -> str:
        index, visible = self.selector.selection()
        if not visible:
            return ""
        return f"{index + 1}/{len(visible)}"
