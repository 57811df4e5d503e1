"""
Key bindings and help entries.

A ``KeyBinding`` is both what a component matches key presses against and
what help text is generated from. ``KeyMap`` holds the shared bindings
every component receives through the context.
"""

from dataclasses import dataclass, field, replace
from typing import List, Sequence, Tuple

from .messages import KeyMsg


@dataclass(frozen=True)
class KeyBinding:
    """
    Declaration of a keybinding.

    Attributes:
        keys: Textual key names that trigger the binding
        action: The action name (e.g., "cursor_down", "select")
        description: Human-readable description for help
        help_key: Key label shown in help (defaults to the first key)
        category: Category for grouping in help
        enabled: Disabled bindings neither match nor show in help
    """

    keys: Tuple[str, ...]
    action: str
    description: str
    help_key: str = ""
    category: str = "General"
    enabled: bool = True

    def __post_init__(self) -> None:
        if not self.help_key and self.keys:
            object.__setattr__(self, "help_key", self.keys[0])

    def matches(self, msg: KeyMsg) -> bool:
        return self.enabled and msg.key in self.keys

    def with_help(self, help_key: str, description: str) -> "KeyBinding":
        """Copy with a different help label, like relabelling 'back' per view."""
        return replace(self, help_key=help_key, description=description)

    def help_text(self) -> str:
        return f"{self.help_key} {self.description}"


def binding(*keys: str, action: str, description: str, help_key: str = "", category: str = "General") -> KeyBinding:
    return KeyBinding(tuple(keys), action, description, help_key=help_key, category=category)


@dataclass(frozen=True)
class KeyMap:
    """Bindings shared by all components."""

    back: KeyBinding = field(default_factory=lambda: binding("escape", action="back", description="back", help_key="esc"))
    section: KeyBinding = field(default_factory=lambda: binding("tab", "shift+tab", action="section", description="switch tab"))
    select: KeyBinding = field(default_factory=lambda: binding("enter", action="select", description="select"))
    help: KeyBinding = field(default_factory=lambda: binding("question_mark", action="help", description="toggle help", help_key="?"))
    up: KeyBinding = field(default_factory=lambda: binding("up", "k", action="cursor_up", description="up", help_key="↑/k", category="Navigation"))
    down: KeyBinding = field(default_factory=lambda: binding("down", "j", action="cursor_down", description="down", help_key="↓/j", category="Navigation"))
    prev_page: KeyBinding = field(default_factory=lambda: binding("left", "h", "pageup", action="prev_page", description="prev page", help_key="←/h", category="Navigation"))
    next_page: KeyBinding = field(default_factory=lambda: binding("right", "l", "pagedown", action="next_page", description="next page", help_key="→/l", category="Navigation"))
    top: KeyBinding = field(default_factory=lambda: binding("home", "g", action="cursor_top", description="go to start", help_key="g/home", category="Navigation"))
    bottom: KeyBinding = field(default_factory=lambda: binding("end", "G", action="cursor_bottom", description="go to end", help_key="G/end", category="Navigation"))
    filter: KeyBinding = field(default_factory=lambda: binding("slash", action="filter", description="filter", help_key="/", category="Filter"))
    clear_filter: KeyBinding = field(default_factory=lambda: binding("escape", action="clear_filter", description="clear filter", help_key="esc", category="Filter"))
    accept_filter: KeyBinding = field(default_factory=lambda: binding("enter", action="accept_filter", description="apply filter", category="Filter"))
    delete_char: KeyBinding = field(default_factory=lambda: binding("backspace", action="delete_char", description="delete", category="Filter"))
    up_dir: KeyBinding = field(default_factory=lambda: binding("backspace", action="up_dir", description="go back", help_key="bksp", category="Navigation"))


def help_lines(bindings: Sequence[KeyBinding]) -> List[str]:
    return [b.help_text() for b in bindings if b.enabled]
