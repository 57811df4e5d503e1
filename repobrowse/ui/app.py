"""
Textual host for the repository view.

The app is a thin shell around ``RepoView``: it turns Textual events into
messages, runs the tasks an update returns in thread workers, and feeds
their results back through ``deliver()`` on the app's own thread, so the
view only ever handles one message at a time.

Everything on screen is one ``Static``: the view's frame followed by the
help footer, rendered to Rich text that carries the hit-test zones as style
meta. Pointer events pick the zones up again from ``event.style.meta``.
"""

import logging
from functools import partial
from typing import Iterable, List, Optional

from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Static

from ..backend.models import Repository
from .context import Context
from .keybindings import help_lines
from .layout import join_vertical, truncate
from .messages import (
    BackRequested,
    KeyMsg,
    MouseButton,
    MouseMsg,
    Msg,
    RepoSelected,
    ResizeMsg,
    ToggleFooter,
)
from .repo_view import HELP_ZONE, RepoView
from .tasks import Task
from .zones import zones_in

logger = logging.getLogger(__name__)

HELP_SEPARATOR = " • "

MOUSE_BUTTONS = {
    1: MouseButton.LEFT,
    2: MouseButton.MIDDLE,
    3: MouseButton.RIGHT,
}


class RepoBrowserApp(App):
    """Browse one repository."""

    CSS = """
    Screen {
        overflow: hidden;
    }

    #screen {
        width: 100%;
        height: 100%;
        padding: 0;
        margin: 0;
    }
    """

    # Priority so Textual's focus cycling never sees them
    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit", show=False, priority=True),
        Binding("tab", "send_key('tab')", show=False, priority=True),
        Binding("shift+tab", "send_key('shift+tab')", show=False, priority=True),
    ]

    ENABLE_COMMAND_PALETTE = False

    def __init__(self, ctx: Context, repo: Repository, view: RepoView, **kwargs):
        super().__init__(**kwargs)
        self.ctx = ctx
        self.repo = repo
        self.repo_view = view
        self.full_help = False
        self.last_frame = ""

    def compose(self) -> ComposeResult:
        yield Static(id="screen")

    def on_mount(self) -> None:
        logger.info(f"Browsing {self.repo.name} at {self.repo.path}")
        self._resize()
        self.deliver(RepoSelected(self.repo))

    # ==========================================================================
    # MESSAGE LOOP
    # ==========================================================================

    def deliver(self, msg: Msg) -> None:
        """Handle one message on the app thread and start its tasks."""
        if isinstance(msg, BackRequested):
            logger.info("Leaving repository view")
            self.exit()
            return
        if isinstance(msg, ToggleFooter):
            self.toggle_help()
            return
        self.repo_view, tasks = self.repo_view.update(msg)
        self.run_tasks(tasks)
        self.refresh_screen()

    def run_tasks(self, tasks: Iterable[Task]) -> None:
        for task in tasks:
            self.run_worker(
                partial(self._run_task, task),
                name=task.name,
                group="tasks",
                thread=True,
                exit_on_error=False,
            )

    def _run_task(self, task: Task) -> None:
        msg = task.run()
        if msg is not None and self.is_running:
            self.call_from_thread(self.deliver, msg)

    # ==========================================================================
    # RENDERING
    # ==========================================================================

    def footer_lines(self) -> List[str]:
        width = self.size.width
        if self.full_help:
            groups = self.repo_view.full_help()
        else:
            groups = [self.repo_view.short_help()]
        lines = [HELP_SEPARATOR.join(help_lines(group)) for group in groups]
        return [truncate(line, width) for line in lines if line]

    def footer_height(self) -> int:
        return len(self.footer_lines())

    def refresh_screen(self) -> None:
        footer = "\n".join(self.footer_lines())
        if footer:
            footer = self.ctx.zones.mark(HELP_ZONE, footer)
        frame = join_vertical(self.repo_view.render(), footer)
        text = self.ctx.zones.render(frame)
        self.last_frame = text.plain
        self.query_one("#screen", Static).update(text)

    def toggle_help(self) -> None:
        self.full_help = not self.full_help
        self._resize()
        self.refresh_screen()

    def _resize(self, width: Optional[int] = None, height: Optional[int] = None) -> None:
        width = self.size.width if width is None else width
        height = self.size.height if height is None else height
        frame_height = max(0, height - self.footer_height())
        self.repo_view, tasks = self.repo_view.update(ResizeMsg(width, frame_height))
        self.run_tasks(tasks)

    # ==========================================================================
    # EVENTS
    # ==========================================================================

    def on_resize(self, event: events.Resize) -> None:
        self._resize(event.size.width, event.size.height)
        self.refresh_screen()

    def on_key(self, event: events.Key) -> None:
        event.stop()
        event.prevent_default()
        msg = KeyMsg(event.key, event.character)
        # While a list filter is open, ? is part of the query
        if self.ctx.keymap.help.matches(msg) and not self.repo_view.filtering():
            self.toggle_help()
            return
        self.deliver(msg)

    def action_send_key(self, key: str) -> None:
        self.deliver(KeyMsg(key))

    def pointer(self, event: events.MouseEvent, button: MouseButton) -> MouseMsg:
        """A pointer message carrying the zones Textual found under the event."""
        zones = zones_in(event.style.meta)
        return MouseMsg(event.screen_x, event.screen_y, button, zones=zones)

    def on_mouse_down(self, event: events.MouseDown) -> None:
        button = MOUSE_BUTTONS.get(event.button)
        if button is None:
            return
        self.deliver(self.pointer(event, button))

    def on_mouse_scroll_up(self, event: events.MouseScrollUp) -> None:
        self.deliver(self.pointer(event, MouseButton.WHEEL_UP))

    def on_mouse_scroll_down(self, event: events.MouseScrollDown) -> None:
        self.deliver(self.pointer(event, MouseButton.WHEEL_DOWN))
