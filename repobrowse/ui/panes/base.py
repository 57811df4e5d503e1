"""
Pane base class - shared plumbing for the content panes.

Handles what every pane does the same way: remembering the repository
and reference, sizing, running an optional spinner while loading, and
wrapping backend calls in tasks that report failures as ``PaneError``
messages addressed back to the pane itself.

Subclasses set ``TAB_NAME`` and override the ``on_*`` hooks and
``handle()`` for their own messages.
"""

import logging
from typing import Any, Callable, List, Optional, Tuple

from ...backend.models import Reference, Repository
from ...exceptions import RepoBrowseError
from ..context import Context
from ..components.listmodel import FilterState
from ..components.spinner import Spinner
from ..keybindings import KeyBinding
from ..layout import pad_block
from ..messages import (
    BackRequested,
    EmptyRepo,
    ErrorMsg,
    KeyMsg,
    Msg,
    PaneError,
    RefResolved,
    RepoSelected,
    ResizeMsg,
    SpinnerTick,
)
from ..tasks import Task, message_task

logger = logging.getLogger(__name__)


class PaneBase:
    TAB_NAME: str = "Pane"

    def __init__(self, ctx: Context, tab_name: Optional[str] = None) -> None:
        self.ctx = ctx
        self._tab_name = tab_name or self.TAB_NAME
        self.width = 0
        self.height = 0
        self.repo: Optional[Repository] = None
        self.ref: Optional[Reference] = None
        self.empty = False
        self.spinner = Spinner(ctx.config.spinner)
        self.loading = False
        self.error = ""

    # ==========================================================================
    # CONTRACT
    # ==========================================================================

    @property
    def tab_name(self) -> str:
        return self._tab_name

    def set_size(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.on_resize()

    def init(self) -> List[Task]:
        return []

    def update(self, msg: Msg) -> Tuple["PaneBase", List[Task]]:
        tasks: List[Task] = []
        if isinstance(msg, RepoSelected):
            self.repo = msg.repo
            self.ref = None
            self.empty = False
            self.loading = False
            self.error = ""
            tasks += self.on_repo()
        elif isinstance(msg, RefResolved):
            self.ref = msg.ref
            self.empty = False
            self.error = ""
            tasks += self.on_ref()
        elif isinstance(msg, EmptyRepo):
            self.ref = None
            self.empty = True
            self.loading = False
            tasks += self.on_empty()
        elif isinstance(msg, ErrorMsg):
            self.loading = False
        elif isinstance(msg, PaneError):
            if self.matches_target(msg):
                self.loading = False
                self.error = str(msg.error)
        elif isinstance(msg, ResizeMsg):
            pass
        elif isinstance(msg, SpinnerTick):
            if self.loading:
                self.spinner, more = self.spinner.update(msg)
                tasks += more
        else:
            tasks += self.handle(msg)
        return self, tasks

    def render(self) -> str:
        if self.loading:
            return pad_block(f"{self.spinner.render()} loading…", self.width, self.height)
        if self.empty:
            return pad_block("Repository is empty.", self.width, self.height)
        if self.error:
            return pad_block(f"Error: {self.error}", self.width, self.height)
        return pad_block(self.view(), self.width, self.height)

    def short_help(self) -> List[KeyBinding]:
        return []

    def full_help(self) -> List[List[KeyBinding]]:
        short = self.short_help()
        return [short] if short else []

    def status_bar_value(self) -> str:
        return ""

    def status_bar_info(self) -> str:
        return ""

    def spinner_id(self) -> Optional[int]:
        return self.spinner.id if self.loading else None

    # ==========================================================================
    # HOOKS
    # ==========================================================================

    def on_resize(self) -> None:
        pass

    def on_repo(self) -> List[Task]:
        return []

    def on_ref(self) -> List[Task]:
        return []

    def on_empty(self) -> List[Task]:
        return []

    def handle(self, msg: Msg) -> List[Task]:
        return []

    def view(self) -> str:
        return ""

    # ==========================================================================
    # HELPERS
    # ==========================================================================

    def start_loading(self) -> List[Task]:
        """Show the spinner; returns its first tick unless already spinning."""
        if self.loading:
            return []
        self.loading = True
        return [self.spinner.tick()]

    def fetch(self, name: str, call: Callable[[], Msg]) -> Task:
        """Run ``call`` as a task; repository errors come back as ``PaneError``."""
        pane = self.tab_name

        def _fetch() -> Msg:
            try:
                return call()
            except RepoBrowseError as e:
                logger.warning(f"{pane}: {name} failed: {e}")
                return PaneError(pane, e)

        return Task(_fetch, f"{pane.lower()}-{name}")

    def matches_target(self, msg: Any) -> bool:
        return getattr(msg, "target", None) == self.tab_name

    def wants_back(self, msg: Msg, selector: Optional[Any] = None) -> bool:
        """Escape, unless a filter on ``selector`` would consume it."""
        if not isinstance(msg, KeyMsg) or not self.ctx.keymap.back.matches(msg):
            return False
        return selector is None or selector.filter_state() == FilterState.UNFILTERED

    def back_task(self) -> Task:
        """Escape with nothing left to undo leaves the repository."""
        return message_task(BackRequested(), f"{self.tab_name.lower()}-back")
