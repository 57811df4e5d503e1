"""Reusable view components driven by messages."""

from .listmodel import FilterState, ListModel
from .selector import IdentifiableItem, Selector
from .spinner import Spinner
from .statusbar import StatusBar
from .tabs import TabBar

__all__ = [
    "FilterState",
    "IdentifiableItem",
    "ListModel",
    "Selector",
    "Spinner",
    "StatusBar",
    "TabBar",
]
