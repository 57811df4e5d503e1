"""Shared context handed to every component's constructor."""

from dataclasses import dataclass, field
from typing import Callable

from ..backend import Backend
from ..config.ui_config import UIConfig
from .keybindings import KeyMap
from .zones import ZoneManager


def copy_to_clipboard(text: str) -> None:
    """Copy via the system clipboard; raises if no clipboard is available."""
    import pyperclip

    pyperclip.copy(text)


@dataclass
class Context:
    """
    Explicit configuration and collaborators for the UI.

    Attributes:
        backend: Repository source used by pane tasks
        config: Resolved UI configuration
        zones: Hit-test registry shared by everything that renders
        keymap: Shared key bindings
        clipboard: Text copy; failures are logged by the caller, never raised
    """

    backend: Backend
    config: UIConfig = field(default_factory=UIConfig)
    zones: ZoneManager = field(default_factory=ZoneManager)
    keymap: KeyMap = field(default_factory=KeyMap)
    clipboard: Callable[[str], None] = copy_to_clipboard
