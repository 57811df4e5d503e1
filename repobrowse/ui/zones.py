"""
Hit-test zones.

Components wrap rendered text with ``ZoneManager.mark()``. The host turns
the composed frame into a Rich ``Text`` with ``ZoneManager.render()``: every
marked region carries ``Style(meta={"zone:<id>": True})``, so Textual reports
the zones under the pointer through ``event.style.meta``. The host copies
them onto the ``MouseMsg`` and handlers ask ``get(zone_id).in_bounds(msg)``.

Marks nest; a cell inside a list row inside the main region carries both ids.
"""

import re
import threading
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Mapping

from rich.cells import cell_len
from rich.style import Style
from rich.text import Text

from .messages import MouseMsg

ZONE_META_PREFIX = "zone:"

# Zero-width delimiters used while frames are still plain strings
MARKER_RE = re.compile(r"\x1b\[(\d+)z")


@dataclass(frozen=True)
class Zone:
    zone_id: str = ""

    def in_bounds(self, msg: MouseMsg) -> bool:
        return bool(self.zone_id) and self.zone_id in msg.zones


def strip_markers(text: str) -> str:
    return MARKER_RE.sub("", text)


def visible_len(text: str) -> int:
    """Cell width of ``text`` ignoring zone markers."""
    return cell_len(strip_markers(text))


def zone_style(zone_id: str) -> Style:
    return Style(meta={ZONE_META_PREFIX + zone_id: True})


def zones_in(meta: Mapping[str, Any]) -> FrozenSet[str]:
    """Zone ids recorded in a Rich style's meta."""
    return frozenset(
        key[len(ZONE_META_PREFIX):]
        for key in meta
        if isinstance(key, str) and key.startswith(ZONE_META_PREFIX)
    )


class ZoneManager:
    """Registry of named zones, safe to use from any thread."""

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled
        self._lock = threading.Lock()
        self._ids: Dict[str, int] = {}
        self._names: Dict[int, str] = {}

    def _marker(self, zone_id: str) -> str:
        with self._lock:
            number = self._ids.get(zone_id)
            if number is None:
                number = len(self._ids) + 1
                self._ids[zone_id] = number
                self._names[number] = zone_id
        return f"\x1b[{number}z"

    def _name(self, number: int) -> str:
        with self._lock:
            return self._names.get(number, "")

    def mark(self, zone_id: str, text: str) -> str:
        """Wrap ``text`` so ``render()`` tags it with ``zone_id``."""
        if not self.enabled or not zone_id:
            return text
        marker = self._marker(zone_id)
        return f"{marker}{text}{marker}"

    def render(self, frame: str) -> Text:
        """Strip the markers from ``frame`` and attach zone meta to the text."""
        text = Text(no_wrap=True, end="")
        if not self.enabled:
            text.append(frame)
            return text

        open_zones: Dict[int, int] = {}
        pos = 0
        for match in MARKER_RE.finditer(frame):
            text.append(frame[pos:match.start()])
            pos = match.end()
            number = int(match.group(1))
            if number not in open_zones:
                open_zones[number] = len(text)
                continue
            start = open_zones.pop(number)
            name = self._name(number)
            if name and start < len(text):
                text.stylize(zone_style(name), start, len(text))
        text.append(frame[pos:])
        return text

    def get(self, zone_id: str) -> Zone:
        return Zone(zone_id)
