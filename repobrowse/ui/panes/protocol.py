"""
Pane Protocol - the contract every content pane satisfies.

The repository view treats panes as opaque: it sizes them, hands them
messages, renders them, and asks them for their tab name, help, status
summary and spinner identity. It never looks inside.

Any class with these members IS a pane (structural subtyping); ``PaneBase``
supplies the common behaviour.
"""

from typing import List, Optional, Protocol, Tuple, runtime_checkable

from ..keybindings import KeyBinding
from ..messages import Msg
from ..tasks import Task


@runtime_checkable
class PaneProtocol(Protocol):
    @property
    def tab_name(self) -> str:
        """
        Display name, used for the tab label and for routing.

        Content results and switch-tab requests are matched against this
        name, so it must be unique within one repository view.
        """
        ...

    def set_size(self, width: int, height: int) -> None: ...

    def init(self) -> List[Task]: ...

    def update(self, msg: Msg) -> Tuple["PaneProtocol", List[Task]]:
        """Consume any message. Unknown kinds must be ignored."""
        ...

    def render(self) -> str:
        """Current content. Must not perform I/O."""
        ...

    def short_help(self) -> List[KeyBinding]: ...

    def full_help(self) -> List[List[KeyBinding]]: ...

    def status_bar_value(self) -> str: ...

    def status_bar_info(self) -> str: ...

    def spinner_id(self) -> Optional[int]:
        """Identity of the spinner this pane is running, None when idle."""
        ...


def is_pane(obj: object) -> bool:
    return isinstance(obj, PaneProtocol)
