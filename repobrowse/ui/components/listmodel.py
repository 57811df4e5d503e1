"""
List model - items, cursor, pages and filtering.

This is the plain, unlocked list behaviour. ``Selector`` wraps it with a
lock and the selection messages; panes use the selector, never this
directly.

Filtering has three states. ``/`` starts FILTERING: typed characters edit
the query and each edit schedules a task that re-evaluates the matches.
``enter`` accepts the query (FILTER_APPLIED), ``escape`` drops it
(UNFILTERED). Match results carry a generation number so results for an
outdated query are ignored.
"""

import itertools
import math
from enum import Enum
from typing import Any, Callable, List, Optional, Sequence, Tuple

from ..keybindings import KeyMap
from ..layout import truncate
from ..messages import FilterMatches, KeyMsg, Msg
from ..tasks import Task
from ..zones import ZoneManager

_list_ids = itertools.count(1)

ItemRenderer = Callable[[Any, int, bool, int], str]


class FilterState(Enum):
    UNFILTERED = "unfiltered"
    FILTERING = "filtering"
    FILTER_APPLIED = "filter applied"


def item_label(item: Any) -> str:
    if hasattr(item, "filter_value"):
        return str(item.filter_value())
    return str(item)


def default_render_item(item: Any, index: int, selected: bool, width: int) -> str:
    prefix = "> " if selected else "  "
    return truncate(prefix + item_label(item), width)


def fuzzy_matches(query: str, value: str) -> bool:
    """Case-insensitive: every query character appears in order in ``value``."""
    value = value.lower()
    pos = 0
    for ch in query.lower():
        pos = value.find(ch, pos)
        if pos < 0:
            return False
        pos += 1
    return True


def match_indices(items: Sequence[Any], query: str) -> Tuple[int, ...]:
    if not query:
        return tuple(range(len(items)))
    return tuple(i for i, item in enumerate(items) if fuzzy_matches(query, item_label(item)))


class ListModel:
    def __init__(
        self,
        keymap: KeyMap,
        zones: ZoneManager,
        items: Sequence[Any] = (),
        render_item: Optional[ItemRenderer] = None,
        item_height: int = 1,
    ) -> None:
        self.list_id = next(_list_ids)
        self.keymap = keymap
        self.zones = zones
        self.render_item = render_item or default_render_item
        self.item_height = max(1, item_height)
        self.width = 0
        self.height = 0
        self.cursor = 0
        self.filter_state = FilterState.UNFILTERED
        self.filter_text = ""
        self.filter_generation = 0
        self._items: List[Any] = list(items)
        self._visible: List[int] = list(range(len(self._items)))
        # Called by filter tasks when they run; Selector swaps in a locked read
        self.snapshot: Callable[[], Tuple[List[Any], str]] = self._snapshot

    # ------------------------------------------------------------------
    # Size and pages
    # ------------------------------------------------------------------

    def set_size(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self._clamp()

    @property
    def per_page(self) -> int:
        # One row for the filter line, one for the page indicator
        return max(1, (self.height - 2) // self.item_height)

    @property
    def page(self) -> int:
        return self.cursor // self.per_page

    @property
    def total_pages(self) -> int:
        return max(1, math.ceil(len(self._visible) / self.per_page))

    def set_page(self, page: int) -> None:
        page = max(0, min(page, self.total_pages - 1))
        self.cursor = page * self.per_page
        self._clamp()

    # ------------------------------------------------------------------
    # Items and selection
    # ------------------------------------------------------------------

    @property
    def items(self) -> List[Any]:
        return list(self._items)

    @property
    def visible_items(self) -> List[Any]:
        return [self._items[i] for i in self._visible]

    @property
    def selected_item(self) -> Optional[Any]:
        if 0 <= self.cursor < len(self._visible):
            return self._items[self._visible[self.cursor]]
        return None

    def set_items(self, items: Sequence[Any]) -> List[Task]:
        """Replace all items. Returns a filter task when a filter is active."""
        self._items = list(items)
        if self.filter_state == FilterState.UNFILTERED:
            self._visible = list(range(len(self._items)))
            self._clamp()
            return []
        # Old matches point into the old sequence
        self._visible = [i for i in self._visible if i < len(self._items)]
        self._clamp()
        return [self._new_filter_task()]

    def select(self, index: int) -> None:
        self.cursor = index
        self._clamp()

    def cursor_up(self) -> None:
        self.select(self.cursor - 1)

    def cursor_down(self) -> None:
        self.select(self.cursor + 1)

    def _clamp(self) -> None:
        if not self._visible:
            self.cursor = 0
            return
        self.cursor = max(0, min(self.cursor, len(self._visible) - 1))

    # ------------------------------------------------------------------
    # Filtering
    # ------------------------------------------------------------------

    def reset_filter(self) -> None:
        self.filter_state = FilterState.UNFILTERED
        self.filter_text = ""
        self.filter_generation += 1
        self._visible = list(range(len(self._items)))
        self._clamp()

    def _snapshot(self) -> Tuple[List[Any], str]:
        return list(self._items), self.filter_text

    def _new_filter_task(self) -> Task:
        self.filter_generation += 1
        list_id, generation, snapshot = self.list_id, self.filter_generation, self.snapshot

        def _filter() -> FilterMatches:
            items, query = snapshot()
            return FilterMatches(list_id, generation, match_indices(items, query))

        return Task(_filter, f"filter-{list_id}")

    def _apply_matches(self, msg: FilterMatches) -> None:
        if msg.list_id != self.list_id or msg.generation != self.filter_generation:
            return
        if self.filter_state == FilterState.UNFILTERED:
            return
        self._visible = [i for i in msg.indices if 0 <= i < len(self._items)]
        self.cursor = 0

    def _update_filtering(self, msg: KeyMsg) -> List[Task]:
        keymap = self.keymap
        if keymap.clear_filter.matches(msg):
            self.reset_filter()
        elif keymap.accept_filter.matches(msg):
            if self.filter_text:
                self.filter_state = FilterState.FILTER_APPLIED
            else:
                self.reset_filter()
        elif keymap.delete_char.matches(msg):
            if self.filter_text:
                self.filter_text = self.filter_text[:-1]
                return [self._new_filter_task()]
        elif msg.character and len(msg.character) == 1 and msg.character.isprintable():
            self.filter_text += msg.character
            return [self._new_filter_task()]
        return []

    # ------------------------------------------------------------------
    # Update / render
    # ------------------------------------------------------------------

    def update(self, msg: Msg) -> List[Task]:
        if isinstance(msg, FilterMatches):
            self._apply_matches(msg)
            return []
        if not isinstance(msg, KeyMsg):
            return []
        if self.filter_state == FilterState.FILTERING:
            return self._update_filtering(msg)

        keymap = self.keymap
        if keymap.up.matches(msg):
            self.cursor_up()
        elif keymap.down.matches(msg):
            self.cursor_down()
        elif keymap.prev_page.matches(msg):
            self.set_page(self.page - 1)
        elif keymap.next_page.matches(msg):
            self.set_page(self.page + 1)
        elif keymap.top.matches(msg):
            self.select(0)
        elif keymap.bottom.matches(msg):
            self.select(len(self._visible) - 1)
        elif keymap.filter.matches(msg):
            # A new query starts from every item
            self.reset_filter()
            self.cursor = 0
            self.filter_state = FilterState.FILTERING
        elif keymap.clear_filter.matches(msg) and self.filter_state == FilterState.FILTER_APPLIED:
            self.reset_filter()
        return []

    def item_zone_id(self, item: Any) -> str:
        item_id = getattr(item, "id", None)
        if not isinstance(item_id, str):
            return ""
        return f"list-{self.list_id}-{item_id}"

    def render(self) -> str:
        lines: List[str] = []
        if self.filter_state == FilterState.FILTERING:
            lines.append(truncate(f"Filter: {self.filter_text}_", self.width))
        elif self.filter_state == FilterState.FILTER_APPLIED:
            lines.append(truncate(
                f"“{self.filter_text}” {len(self._visible)} of {len(self._items)}",
                self.width,
            ))
        else:
            lines.append("")

        if not self._visible:
            lines.append("Nothing matched." if self.filter_text else "No items.")
        else:
            start = self.page * self.per_page
            for i in range(start, min(start + self.per_page, len(self._visible))):
                item = self._items[self._visible[i]]
                row = self.render_item(item, i, i == self.cursor, self.width)
                lines.append(self.zones.mark(self.item_zone_id(item), row))

        if self.total_pages > 1:
            lines.append(f"{self.page + 1}/{self.total_pages}")
        return "\n".join(lines)
