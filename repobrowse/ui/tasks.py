"""
Tasks - deferred work that yields one message back into the update loop.

A task is run outside the loop (the host uses thread workers), may finish
at any time and in any order, and its result is fed back as a message.
"""

import logging
from typing import Callable, Iterable, List, Optional, Union

from .messages import ErrorMsg, Msg

logger = logging.getLogger(__name__)


class Task:
    """A zero-argument callable producing one message, or None."""

    __slots__ = ("fn", "name")

    def __init__(self, fn: Callable[[], Optional[Msg]], name: str = "") -> None:
        self.fn = fn
        self.name = name or getattr(fn, "__name__", "task")

    def __call__(self) -> Optional[Msg]:
        return self.fn()

    def run(self) -> Optional[Msg]:
        """Execute, turning any unexpected exception into an ``ErrorMsg``."""
        try:
            return self.fn()
        except Exception as e:
            logger.exception(f"Task {self.name} failed")
            return ErrorMsg(e)

    def __repr__(self) -> str:
        return f"Task({self.name!r})"


TaskLike = Union[Task, Iterable[Task], None]


def message_task(msg: Msg, name: str = "") -> Task:
    """A task that immediately yields ``msg``."""
    return Task(lambda: msg, name or type(msg).__name__)


def batch(*tasks: TaskLike) -> List[Task]:
    """Flatten tasks, lists of tasks and Nones into one list."""
    out: List[Task] = []
    for item in tasks:
        if item is None:
            continue
        if isinstance(item, Task):
            out.append(item)
        else:
            out.extend(t for t in item if t is not None)
    return out
