"""
Repository view - header, tab strip, active pane and status bar.

The view owns a fixed, ordered set of panes and routes every message to
the component(s) that should see it:

- lifecycle messages (repository selected, ref resolved, empty repository,
  resize) go to every pane
- content results go only to the pane whose tab name matches ``target``
- spinner ticks go to the one spinner whose identity matches
- key and mouse input goes to the tab bar and then the active pane

Any message a branch has not routed itself is then forwarded once to the
active pane and once to the status bar, so no component sees a message
twice in one update. Content results and ticks are never forwarded this way.
"""

import logging
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from rich.cells import cell_len

from ..backend.models import Reference, Repository
from ..backend.urls import clone_command
from ..config.constants import COPY_CONFIRMATION
from ..exceptions import EmptyRepositoryError, RepoBrowseError
from .components.spinner import Spinner
from .components.statusbar import StatusBar
from .components.tabs import TabBar
from .context import Context
from .keybindings import KeyBinding
from .layout import align_right, join_vertical, pad_block, truncate
from .messages import (
    ActiveTabChanged,
    BackRequested,
    ContentResult,
    CopyRequest,
    EmptyRepo,
    ErrorMsg,
    FilterMatches,
    ItemActive,
    ItemSelected,
    KeyMsg,
    MouseAction,
    MouseButton,
    MouseMsg,
    Msg,
    RefResolved,
    RepoSelected,
    ResizeMsg,
    SelectTab,
    SpinnerTick,
    SwitchTab,
    ToggleFooter,
    UpdateStatusBar,
)
from .panes.protocol import PaneProtocol
from .tasks import Task, message_task

logger = logging.getLogger(__name__)

MAIN_ZONE = "repo-main"
HELP_ZONE = "repo-help"


class ViewState(Enum):
    LOADING = "loading"
    READY = "ready"


def url_zone_id(repo: Repository) -> str:
    return f"{repo.name}-url"


class RepoView:
    """Composes the panes of one repository behind a tab bar."""

    def __init__(self, ctx: Context, panes: Sequence[PaneProtocol]) -> None:
        if not panes:
            raise ValueError("RepoView needs at least one pane")
        self.ctx = ctx
        self.panes: List[PaneProtocol] = list(panes)
        self.panes_ready: List[bool] = [False] * len(self.panes)
        self.tabs = TabBar(ctx, [p.tab_name for p in self.panes])
        self.statusbar = StatusBar(ctx)
        self.spinner = Spinner(ctx.config.spinner)
        self.state = ViewState.LOADING
        self.active_tab = 0
        self.repo: Optional[Repository] = None
        self.ref: Optional[Reference] = None
        self.width = 0
        self.height = 0

    @property
    def active_pane(self) -> PaneProtocol:
        return self.panes[self.active_tab]

    # ==========================================================================
    # SIZE & HELP
    # ==========================================================================

    @property
    def main_height(self) -> int:
        config = self.ctx.config
        return max(0, self.height - config.vertical_overhead - config.tabs_overhead)

    def set_size(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        body = max(0, height - self.ctx.config.vertical_overhead)
        self.tabs.set_size(width, body)
        self.statusbar.set_size(width, body)
        for pane in self.panes:
            pane.set_size(width, self.main_height)

    def _common_help(self) -> List[KeyBinding]:
        keymap = self.ctx.keymap
        return [
            keymap.back.with_help("esc", "back to menu"),
            keymap.section.with_help("tab", "switch tab"),
        ]

    def short_help(self) -> List[KeyBinding]:
        return self._common_help() + list(self.active_pane.short_help())

    def full_help(self) -> List[List[KeyBinding]]:
        return [self._common_help()] + [list(group) for group in self.active_pane.full_help()]

    def filtering(self) -> bool:
        """True while the active pane's list is taking filter input."""
        selector = getattr(self.active_pane, "selector", None)
        return selector is not None and selector.is_filtering()

    # ==========================================================================
    # UPDATE
    # ==========================================================================

    def init(self) -> List[Task]:
        """Back to the loading state on the first tab with a fresh spinner."""
        self.state = ViewState.LOADING
        self.active_tab = 0
        self.tabs.active = 0
        self.spinner = Spinner(self.ctx.config.spinner)
        return self.tabs.init() + self.statusbar.init() + [self.spinner.tick()]

    def update(self, msg: Msg) -> Tuple["RepoView", List[Task]]:
        tasks: List[Task] = []
        # Branches that routed msg to these themselves skip the forward at the end
        sent_active = False
        sent_status = False
        refresh_status = False

        if isinstance(msg, RepoSelected):
            self.repo = msg.repo
            self.ref = None
            self.panes_ready = [False] * len(self.panes)
            logger.info(f"Repository selected: {msg.repo.name}")
            tasks += self.init()
            tasks += self._update_panes(msg)
            tasks.append(self._resolve_ref_task(msg.repo))
            tasks += self._update_statusbar(msg)
            sent_active = sent_status = True
            self.set_status_bar_info()
        elif isinstance(msg, RefResolved):
            self.ref = msg.ref
            tasks += self._update_panes(msg)
            sent_active = True
            self.state = ViewState.READY
            self.set_status_bar_info()
        elif isinstance(msg, SelectTab):
            self.active_tab = self._clamp_tab(msg.index)
            tasks += self._update_tabs(msg)
        elif isinstance(msg, ActiveTabChanged):
            self.active_tab = self._clamp_tab(msg.index)
            tasks += self._update_tabs(msg)
            self.set_status_bar_info()
        elif isinstance(msg, (KeyMsg, MouseMsg)):
            tasks += self._update_tabs(msg)
            if isinstance(msg, MouseMsg):
                tasks += self._pointer_tasks(msg)
            refresh_status = True
        elif isinstance(msg, CopyRequest):
            self._copy(msg.text)
            self.statusbar.set_status("", msg.message, "", "")
        elif isinstance(msg, ContentResult):
            tasks += self._update_target(msg)
            sent_active = True
            refresh_status = msg.target == self.active_pane.tab_name
        elif isinstance(msg, SpinnerTick):
            tasks += self._route_tick(msg)
            sent_active = True
        elif isinstance(msg, ResizeMsg):
            self.set_size(msg.width, msg.height)
            tasks += self._update_panes(msg)
            sent_active = True
        elif isinstance(msg, EmptyRepo):
            self.ref = None
            self.state = ViewState.READY
            tasks += self._update_panes(msg)
            self.panes_ready = [True] * len(self.panes)
            sent_active = True
        elif isinstance(msg, ErrorMsg):
            logger.warning(f"Repository view error: {msg.error}")
            self.state = ViewState.READY
        elif isinstance(msg, SwitchTab):
            for i, pane in enumerate(self.panes):
                if pane.tab_name == msg.name:
                    tasks.append(message_task(SelectTab(i)))
                    break
            else:
                logger.debug(f"No pane named {msg.name!r}")
        elif isinstance(msg, UpdateStatusBar):
            self.set_status_bar_info()

        if not sent_active:
            tasks += self._update_pane(self.active_tab, msg)
            refresh_status = refresh_status or isinstance(
                msg, (FilterMatches, ItemActive, ItemSelected)
            )
        # Panes report their new value and info only after handling msg
        if refresh_status:
            self.set_status_bar_info()
        if not sent_status:
            tasks += self._update_statusbar(msg)
        return self, tasks

    def _clamp_tab(self, index: int) -> int:
        return max(0, min(index, len(self.panes) - 1))

    def _update_pane(self, index: int, msg: Msg) -> List[Task]:
        pane, tasks = self.panes[index].update(msg)
        self.panes[index] = pane
        return list(tasks)

    def _update_panes(self, msg: Msg) -> List[Task]:
        tasks: List[Task] = []
        for i in range(len(self.panes)):
            tasks += self._update_pane(i, msg)
        return tasks

    def _update_tabs(self, msg: Msg) -> List[Task]:
        self.tabs, tasks = self.tabs.update(msg)
        return tasks

    def _update_statusbar(self, msg: Msg) -> List[Task]:
        self.statusbar, tasks = self.statusbar.update(msg)
        return tasks

    def _update_target(self, msg: ContentResult) -> List[Task]:
        for i, pane in enumerate(self.panes):
            if pane.tab_name == msg.target:
                self.panes_ready[i] = True
                return self._update_pane(i, msg)
        logger.debug(f"No pane named {msg.target!r} for {type(msg).__name__}")
        return []

    def _route_tick(self, msg: SpinnerTick) -> List[Task]:
        if self.state == ViewState.LOADING and msg.id == self.spinner.id:
            self.spinner, tasks = self.spinner.update(msg)
            return tasks
        for i, pane in enumerate(self.panes):
            if pane.spinner_id() == msg.id:
                return self._update_pane(i, msg)
        return []

    def _pointer_tasks(self, msg: MouseMsg) -> List[Task]:
        tasks: List[Task] = []
        if msg.action != MouseAction.PRESS or msg.is_wheel:
            return tasks
        zones = self.ctx.zones
        if self.repo is not None and zones.get(url_zone_id(self.repo)).in_bounds(msg):
            command = clone_command(self.ctx.config.public_url, self.repo.name)
            tasks.append(message_task(CopyRequest(command, COPY_CONFIRMATION)))
        if msg.button == MouseButton.LEFT and zones.get(HELP_ZONE).in_bounds(msg):
            tasks.append(message_task(ToggleFooter()))
        elif msg.button == MouseButton.RIGHT and zones.get(MAIN_ZONE).in_bounds(msg):
            tasks.append(message_task(BackRequested()))
        return tasks

    def _copy(self, text: str) -> None:
        try:
            self.ctx.clipboard(text)
        except Exception as e:
            logger.warning(f"Clipboard copy failed: {e}")

    def _resolve_ref_task(self, repo: Repository) -> Task:
        backend = self.ctx.backend

        def _resolve() -> Msg:
            try:
                return RefResolved(backend.head(repo))
            except EmptyRepositoryError:
                return EmptyRepo()
            except RepoBrowseError as e:
                logger.warning(f"Could not resolve HEAD of {repo.name}: {e}")
                return ErrorMsg(e)

        return Task(_resolve, "resolve-ref")

    def set_status_bar_info(self) -> None:
        if self.repo is None:
            return
        pane = self.active_pane
        extra = "*"
        if self.ref is not None:
            extra += " " + self.ref.short
        self.statusbar.set_status(
            self.repo.name, pane.status_bar_value(), pane.status_bar_info(), extra
        )

    # ==========================================================================
    # RENDER
    # ==========================================================================

    def header_view(self) -> str:
        if self.repo is None:
            return ""
        name = self.repo.project_name or self.repo.name
        desc = self.repo.description
        if not desc:
            desc, name = name, ""
        desc = truncate(desc, self.width)
        room = self.width - cell_len(desc) - 1
        url = ""
        if room > 0:
            command = clone_command(self.ctx.config.public_url, self.repo.name)
            url = " " + self.ctx.zones.mark(
                url_zone_id(self.repo), align_right(truncate(command, room), room)
            )
        return truncate(name, self.width) + "\n" + desc + url

    def render(self) -> str:
        config = self.ctx.config
        if self.state == ViewState.LOADING:
            main = f"{self.spinner.render()} loading…"
            statusbar = ""
        else:
            main = self.active_pane.render()
            statusbar = self.statusbar.render()
        main = self.ctx.zones.mark(MAIN_ZONE, pad_block(main, self.width, self.main_height))

        header = ""
        if self.repo is not None:
            header = pad_block(
                self.header_view(), self.width, config.header_height + config.header_margin
            )
        tabs = pad_block(self.tabs.render(), self.width, config.tabs_overhead)
        frame = join_vertical(header, tabs, main, statusbar)
        return pad_block(frame, self.width, self.height)
