"""
Status bar - one line under the active pane.

Layout: ``key  value ........ info  extra``. The value takes whatever
width is left and is truncated first.
"""

from typing import List, Tuple

from rich.cells import cell_len

from ..context import Context
from ..layout import fit, truncate
from ..messages import Msg, ResizeMsg
from ..tasks import Task


class StatusBar:
    def __init__(self, ctx: Context) -> None:
        self.ctx = ctx
        self.width = 0
        self.height = 0
        self.key = ""
        self.value = ""
        self.info = ""
        self.extra = ""

    def set_size(self, width: int, height: int) -> None:
        self.width = width
        self.height = height

    def set_status(self, key: str, value: str, info: str, extra: str) -> None:
        self.key = key
        self.value = value
        self.info = info
        self.extra = extra

    def init(self) -> List[Task]:
        return []

    def update(self, msg: Msg) -> Tuple["StatusBar", List[Task]]:
        if isinstance(msg, ResizeMsg):
            self.width = msg.width
        return self, []

    def render(self) -> str:
        if self.width <= 0:
            return ""
        left = f" {self.key} " if self.key else ""
        right = "".join(f" {part} " for part in (self.info, self.extra) if part)
        room = self.width - cell_len(left) - cell_len(right)
        value = truncate(f" {self.value}", room) if room > 0 else ""
        line = left + value + " " * max(0, room - cell_len(value)) + right
        return fit(line, self.width)
