"""Readme pane - the repository README rendered as markdown."""

from typing import List, Optional

from ..keybindings import KeyBinding
from ..layout import render_markdown
from ..messages import KeyMsg, MouseButton, MouseMsg, Msg, ReadmeContent
from ..tasks import Task
from .base import PaneBase


class ReadmePane(PaneBase):
    TAB_NAME = "Readme"

    def __init__(self, ctx, tab_name: Optional[str] = None) -> None:
        super().__init__(ctx, tab_name)
        self.content = ""
        self.path = ""
        self.offset = 0
        self._lines: List[str] = []

    def on_resize(self) -> None:
        self._render_lines()

    def on_repo(self) -> List[Task]:
        self.content = ""
        self.path = ""
        self.offset = 0
        self._lines = []
        return []

    def on_ref(self) -> List[Task]:
        repo, ref, target = self.repo, self.ref, self.tab_name
        backend = self.ctx.backend

        def _readme() -> ReadmeContent:
            content, path = backend.readme(repo, ref)
            return ReadmeContent(target, content, path)

        return self.start_loading() + [self.fetch("readme", _readme)]

    def handle(self, msg: Msg) -> List[Task]:
        if isinstance(msg, ReadmeContent):
            if self.matches_target(msg):
                self.loading = False
                self.content = msg.content
                self.path = msg.path
                self.offset = 0
                self._render_lines()
        elif isinstance(msg, KeyMsg):
            keymap = self.ctx.keymap
            if self.wants_back(msg):
                return [self.back_task()]
            if keymap.up.matches(msg):
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
                self._scroll(len(self._lines))
        elif isinstance(msg, MouseMsg):
            if msg.button == MouseButton.WHEEL_UP:
                self._scroll(-1)
            elif msg.button == MouseButton.WHEEL_DOWN:
                self._scroll(1)
        return []

    def _render_lines(self) -> None:
        self._lines = render_markdown(self.content, self.width) if self.content else []
        self._scroll(0)

    def _scroll(self, delta: int) -> None:
        max_offset = max(0, len(self._lines) - self.height)
        self.offset = max(0, min(self.offset + delta, max_offset))

    def view(self) -> str:
        if not self._lines:
            return "No readme found."
        return "\n".join(self._lines[self.offset:self.offset + self.height])

    def short_help(self) -> List[KeyBinding]:
        keymap = self.ctx.keymap
        return [keymap.up, keymap.down]

    def full_help(self) -> List[List[KeyBinding]]:
        keymap = self.ctx.keymap
        return [[keymap.up, keymap.down], [keymap.prev_page, keymap.next_page, keymap.top, keymap.bottom]]

    def status_bar_value(self) -> str:
        return self.path

    def status_bar_info(self) -> str:
        max_offset = len(self._lines) - self.height
        if max_offset <= 0:
            return "100%"
        return f"{round(self.offset / max_offset * 100)}%"
