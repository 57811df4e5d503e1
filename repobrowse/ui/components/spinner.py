"""
Loading spinner with an identity.

Several spinners can tick at once. Every tick carries the identity of the
spinner that scheduled it, so the owner of a tick can be found, and a tag
so duplicate or stale ticks are ignored.
"""

import itertools
import threading
import time
from typing import List, Tuple

from rich.spinner import Spinner as RichSpinner

from ..messages import Msg, SpinnerTick
from ..tasks import Task

_ids = itertools.count(1)
_ids_lock = threading.Lock()


def _next_id() -> int:
    with _ids_lock:
        return next(_ids)


class Spinner:
    """Frames come from rich's spinner table; ``interval`` is in seconds."""

    def __init__(self, name: str = "dots") -> None:
        source = RichSpinner(name)
        self.frames: List[str] = list(source.frames)
        self.interval: float = source.interval / 1000.0
        self.id = _next_id()
        self._tag = 0
        self._frame = 0

    def tick(self) -> Task:
        """Task that waits one interval and then asks for the next frame."""
        spinner_id, tag, interval = self.id, self._tag, self.interval

        def _tick() -> SpinnerTick:
            time.sleep(interval)
            return SpinnerTick(spinner_id, tag)

        return Task(_tick, f"spinner-{spinner_id}")

    def update(self, msg: Msg) -> Tuple["Spinner", List[Task]]:
        if not isinstance(msg, SpinnerTick):
            return self, []
        if msg.id != self.id or msg.tag != self._tag:
            return self, []
        self._frame = (self._frame + 1) % len(self.frames)
        self._tag += 1
        return self, [self.tick()]

    def render(self) -> str:
        return self.frames[self._frame]
