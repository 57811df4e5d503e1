"""
Messages - everything that flows through the repository view's update loop.

Messages are small immutable values. Input arrives from the host
application, results arrive from completed tasks, and components talk to
each other by returning tasks that yield messages. Nothing calls across
components directly.

Message Categories:
- Input: KeyMsg, MouseMsg, ResizeMsg
- Lifecycle: RepoSelected, RefResolved, EmptyRepo, ErrorMsg
- Tabs: SelectTab, ActiveTabChanged, SwitchTab
- Status: UpdateStatusBar, CopyRequest
- Host: BackRequested, ToggleFooter
- Loading: SpinnerTick
- Content results: ReadmeContent, FileItems, FileContent, LogItems,
  LogCount, LogDiff, RefItems, PaneError
- Selection: ItemSelected, ItemActive, FilterMatches
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, FrozenSet, Optional, Sequence, Tuple

from ..backend.models import Commit, Reference, Repository, TreeEntry


class Msg:
    """Base class for all messages."""

    __slots__ = ()


# =============================================================================
# INPUT
# =============================================================================


@dataclass(frozen=True)
class KeyMsg(Msg):
    """A key press, named the way Textual names keys ("tab", "shift+tab", "j")."""

    key: str
    character: Optional[str] = None


class MouseButton(Enum):
    NONE = auto()
    LEFT = auto()
    MIDDLE = auto()
    RIGHT = auto()
    WHEEL_UP = auto()
    WHEEL_DOWN = auto()


class MouseAction(Enum):
    PRESS = auto()
    RELEASE = auto()
    MOTION = auto()


@dataclass(frozen=True)
class MouseMsg(Msg):
    """A pointer event in screen cell coordinates, with the zones under it."""

    x: int
    y: int
    button: MouseButton = MouseButton.LEFT
    action: MouseAction = MouseAction.PRESS
    zones: FrozenSet[str] = frozenset()

    @property
    def is_wheel(self) -> bool:
        return self.button in (MouseButton.WHEEL_UP, MouseButton.WHEEL_DOWN)


@dataclass(frozen=True)
class ResizeMsg(Msg):
    width: int
    height: int


# =============================================================================
# LIFECYCLE
# =============================================================================


@dataclass(frozen=True)
class RepoSelected(Msg):
    """A repository was chosen for browsing."""

    repo: Repository


@dataclass(frozen=True)
class RefResolved(Msg):
    """The reference to display is known."""

    ref: Reference


@dataclass(frozen=True)
class EmptyRepo(Msg):
    """The repository has no commits."""


@dataclass(frozen=True)
class ErrorMsg(Msg):
    """An upstream operation failed. Presentation is up to the host."""

    error: BaseException


# =============================================================================
# TABS
# =============================================================================


@dataclass(frozen=True)
class SelectTab(Msg):
    """Make the tab at ``index`` active."""

    index: int


@dataclass(frozen=True)
class ActiveTabChanged(Msg):
    """The tab bar's active tab is now ``index``."""

    index: int


@dataclass(frozen=True)
class SwitchTab(Msg):
    """Activate the pane whose tab name is ``name``, if there is one."""

    name: str


# =============================================================================
# STATUS / HOST
# =============================================================================


@dataclass(frozen=True)
class UpdateStatusBar(Msg):
    """Recompute the status bar from the active pane."""


@dataclass(frozen=True)
class CopyRequest(Msg):
    """Copy ``text`` to the clipboard and show ``message``."""

    text: str
    message: str


@dataclass(frozen=True)
class BackRequested(Msg):
    """Leave the repository view."""


@dataclass(frozen=True)
class ToggleFooter(Msg):
    """Switch the help footer between short and full help."""


# =============================================================================
# LOADING
# =============================================================================


@dataclass(frozen=True)
class SpinnerTick(Msg):
    """Advance the spinner whose identity is ``id``."""

    id: int
    tag: int = 0


# =============================================================================
# CONTENT RESULTS - routed to the single pane named ``target``
# =============================================================================


@dataclass(frozen=True)
class ContentResult(Msg):
    target: str


@dataclass(frozen=True)
class ReadmeContent(ContentResult):
    content: str = ""
    path: str = ""


@dataclass(frozen=True)
class FileItems(ContentResult):
    path: str = ""
    items: Tuple[TreeEntry, ...] = ()


@dataclass(frozen=True)
class FileContent(ContentResult):
    path: str = ""
    content: str = ""


@dataclass(frozen=True)
class LogItems(ContentResult):
    skip: int = 0
    commits: Tuple[Commit, ...] = ()


@dataclass(frozen=True)
class LogCount(ContentResult):
    count: int = 0


@dataclass(frozen=True)
class LogDiff(ContentResult):
    commit: Optional[Commit] = None
    diff: str = ""


@dataclass(frozen=True)
class RefItems(ContentResult):
    prefix: str = ""
    refs: Tuple[Reference, ...] = ()


@dataclass(frozen=True)
class PaneError(ContentResult):
    """A pane's own fetch failed. Only that pane hears about it."""

    error: Optional[BaseException] = None


# =============================================================================
# SELECTION
# =============================================================================


@dataclass(frozen=True)
class ItemSelected(Msg):
    """The active item was confirmed. ``item`` is None without an identity."""

    list_id: int
    item: Optional[Any] = None


@dataclass(frozen=True)
class ItemActive(Msg):
    """The active item changed without being confirmed."""

    list_id: int
    item: Optional[Any] = None


@dataclass(frozen=True)
class FilterMatches(Msg):
    """Result of re-evaluating a list filter."""

    list_id: int
    generation: int
    indices: Sequence[int] = field(default_factory=tuple)
