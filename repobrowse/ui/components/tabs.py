"""
Tab bar.

Owns the tab switching keys and tab clicks. Every change of the active tab
is announced with an ``ActiveTabChanged`` task; the owner keeps its own
index in sync from that message.
"""

import logging
from typing import List, Sequence, Tuple

from rich.cells import cell_len

from ..context import Context
from ..layout import truncate
from ..messages import ActiveTabChanged, KeyMsg, MouseAction, MouseButton, MouseMsg, Msg, SelectTab
from ..tasks import Task, message_task

logger = logging.getLogger(__name__)

TAB_SEPARATOR = " │ "


class TabBar:
    def __init__(self, ctx: Context, tabs: Sequence[str], zone_prefix: str = "tab") -> None:
        self.ctx = ctx
        self.tabs = list(tabs)
        self.active = 0
        self.zone_prefix = zone_prefix
        self.width = 0
        self.height = 0

    def zone_id(self, index: int) -> str:
        return f"{self.zone_prefix}-{index}"

    def set_size(self, width: int, height: int) -> None:
        self.width = width
        self.height = height

    def init(self) -> List[Task]:
        return [self._active_task()]

    def _active_task(self) -> Task:
        return message_task(ActiveTabChanged(self.active))

    def _activate(self, index: int) -> List[Task]:
        if not self.tabs:
            return []
        self.active = max(0, min(index, len(self.tabs) - 1))
        logger.debug(f"Active tab is now {self.tabs[self.active]!r}")
        return [self._active_task()]

    def update(self, msg: Msg) -> Tuple["TabBar", List[Task]]:
        tasks: List[Task] = []
        if not self.tabs:
            return self, tasks

        if isinstance(msg, KeyMsg):
            if self.ctx.keymap.section.matches(msg):
                step = -1 if msg.key == "shift+tab" else 1
                tasks += self._activate((self.active + step) % len(self.tabs))
        elif isinstance(msg, MouseMsg):
            if msg.button == MouseButton.LEFT and msg.action == MouseAction.PRESS:
                for i in range(len(self.tabs)):
                    if self.ctx.zones.get(self.zone_id(i)).in_bounds(msg):
                        tasks += self._activate(i)
                        break
        elif isinstance(msg, SelectTab):
            tasks += self._activate(msg.index)
        elif isinstance(msg, ActiveTabChanged):
            self.active = max(0, min(msg.index, len(self.tabs) - 1))
        return self, tasks

    def render(self) -> str:
        if not self.tabs:
            return ""
        labels = [
            f"[{name}]" if i == self.active else f" {name} "
            for i, name in enumerate(self.tabs)
        ]
        total = sum(cell_len(label) for label in labels)
        total += cell_len(TAB_SEPARATOR) * (len(labels) - 1)
        if self.width and total > self.width:
            # Too narrow for every label: show only the active one
            return self.ctx.zones.mark(
                self.zone_id(self.active), truncate(labels[self.active], self.width)
            )
        return TAB_SEPARATOR.join(
            self.ctx.zones.mark(self.zone_id(i), label) for i, label in enumerate(labels)
        )
