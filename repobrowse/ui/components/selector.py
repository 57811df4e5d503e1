"""
Selector - a selectable, filterable, paginated list safe for concurrent reads.

All state lives in a ``ListModel`` guarded by one reader/writer lock.
Accessors take the read side, mutations the write side, so an index is
never observed together with a sequence it does not belong to. Tasks
(selection, filtering) read through the same accessors when they run on
worker threads.

Messages:
    ItemSelected: the active item was confirmed (enter, or clicking it)
    ItemActive: the active item changed (cursor moved, filter changed)
"""

import logging
from typing import Any, List, Optional, Protocol, Sequence, Tuple, runtime_checkable

from ...utils.locks import ReadWriteLock
from ..context import Context
from ..messages import (
    FilterMatches,
    ItemActive,
    ItemSelected,
    KeyMsg,
    MouseAction,
    MouseButton,
    MouseMsg,
    Msg,
)
from ..tasks import Task
from .listmodel import FilterState, ItemRenderer, ListModel

logger = logging.getLogger(__name__)


@runtime_checkable
class IdentifiableItem(Protocol):
    """An item with a stable identity string."""

    @property
    def id(self) -> str: ...

    def filter_value(self) -> str: ...


def identified(item: Any) -> Optional[Any]:
    """``item`` if it exposes a string identity, else None."""
    if isinstance(item, IdentifiableItem) and isinstance(item.id, str):
        return item
    return None


class Selector:
    def __init__(
        self,
        ctx: Context,
        items: Sequence[Any] = (),
        render_item: Optional[ItemRenderer] = None,
        item_height: int = 1,
    ) -> None:
        self.ctx = ctx
        self._lock = ReadWriteLock()
        self._model = ListModel(ctx.keymap, ctx.zones, items, render_item, item_height)
        self._model.snapshot = self._locked_snapshot
        self.list_id = self._model.list_id

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def index(self) -> int:
        with self._lock.read():
            return self._model.cursor

    def page(self) -> int:
        with self._lock.read():
            return self._model.page

    def total_pages(self) -> int:
        with self._lock.read():
            return self._model.total_pages

    def per_page(self) -> int:
        with self._lock.read():
            return self._model.per_page

    def filter_state(self) -> FilterState:
        with self._lock.read():
            return self._model.filter_state

    def is_filtering(self) -> bool:
        return self.filter_state() == FilterState.FILTERING

    def items(self) -> List[Any]:
        with self._lock.read():
            return self._model.items

    def visible_items(self) -> List[Any]:
        with self._lock.read():
            return self._model.visible_items

    def selected_item(self) -> Optional[Any]:
        with self._lock.read():
            return self._model.selected_item

    def selection(self) -> Tuple[int, List[Any]]:
        """The index together with the visible items it points into."""
        with self._lock.read():
            return self._model.cursor, self._model.visible_items

    def _locked_snapshot(self) -> Tuple[List[Any], str]:
        with self._lock.read():
            return self._model.items, self._model.filter_text

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def set_size(self, width: int, height: int) -> None:
        with self._lock.write():
            self._model.set_size(width, height)

    def set_items(self, items: Sequence[Any]) -> List[Task]:
        """Replace the items; a task comes back only if a filter must re-run."""
        with self._lock.write():
            return self._model.set_items(items)

    def select(self, index: int) -> None:
        with self._lock.write():
            self._model.select(index)

    def cursor_up(self) -> None:
        with self._lock.write():
            self._model.cursor_up()

    def cursor_down(self) -> None:
        with self._lock.write():
            self._model.cursor_down()

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    def select_task(self) -> Task:
        """Confirm whatever is active when the task runs."""

        def _select() -> ItemSelected:
            return ItemSelected(self.list_id, identified(self.selected_item()))

        return Task(_select, f"select-{self.list_id}")

    def _active_task(self) -> Task:
        def _active() -> ItemActive:
            return ItemActive(self.list_id, identified(self.selected_item()))

        return Task(_active, f"active-{self.list_id}")

    def _active_filter_task(self) -> Task:
        def _active_filter() -> ItemActive:
            visible = self.visible_items()
            first = visible[0] if visible else None
            return ItemActive(self.list_id, identified(first))

        return Task(_active_filter, f"active-{self.list_id}")

    # ------------------------------------------------------------------
    # Update / render
    # ------------------------------------------------------------------

    def init(self) -> List[Task]:
        return [self._active_task()]

    def update(self, msg: Msg) -> Tuple["Selector", List[Task]]:
        tasks: List[Task] = []
        index_before = self.index()
        filter_before = self.filter_state()

        if isinstance(msg, MouseMsg):
            if msg.button == MouseButton.WHEEL_UP:
                self.cursor_up()
            elif msg.button == MouseButton.WHEEL_DOWN:
                self.cursor_down()
            elif msg.button == MouseButton.LEFT and msg.action == MouseAction.PRESS:
                for i, item in enumerate(self.visible_items()):
                    zone_id = self._model.item_zone_id(item)
                    if zone_id and self.ctx.zones.get(zone_id).in_bounds(msg):
                        if i == index_before:
                            tasks.append(self.select_task())
                        else:
                            self.select(i)
                        break
        elif isinstance(msg, KeyMsg):
            if self.ctx.keymap.select.matches(msg) and filter_before != FilterState.FILTERING:
                tasks.append(self.select_task())

        with self._lock.write():
            tasks += self._model.update(msg)

        # New matches or a filter change move the active item even when the
        # index stays put
        matched = isinstance(msg, FilterMatches) and msg.list_id == self.list_id
        if matched or self.filter_state() != filter_before:
            tasks.append(self._active_filter_task())
        elif self.index() != index_before:
            tasks.append(self._active_task())
        return self, tasks

    def render(self) -> str:
        with self._lock.read():
            return self._model.render()
