"""Content panes shown in the repository view's tabs."""

from .base import PaneBase
from .files import FilesPane
from .log import LogPane
from .protocol import PaneProtocol, is_pane
from .readme import ReadmePane
from .refs import RefsPane


def default_panes(ctx):
    """The standard tab set: Readme, Files, Log and Refs."""
    return [ReadmePane(ctx), FilesPane(ctx), LogPane(ctx), RefsPane(ctx)]


__all__ = [
    "FilesPane",
    "LogPane",
    "PaneBase",
    "PaneProtocol",
    "ReadmePane",
    "RefsPane",
    "default_panes",
    "is_pane",
]
