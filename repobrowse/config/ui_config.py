"""
repobrowse UI Configuration.

Handles persistence of UI preferences: clone URL, spinner and layout.
Config is stored in ~/.config/repobrowse/ui_config.json
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, TypedDict

from rich.spinner import Spinner as RichSpinner

from ..exceptions import ConfigurationError
from .constants import (
    BODY_FRAME,
    DEFAULT_LOG_PAGE_SIZE,
    DEFAULT_PUBLIC_URL,
    DEFAULT_SPINNER,
    HEADER_HEIGHT,
    HEADER_MARGIN,
    REPOBROWSE_CONFIG_DIR,
    STATUS_BAR_HEIGHT,
    TABS_HEIGHT,
    TABS_MARGIN,
)


class LayoutConfig(TypedDict):
    """Fixed row budget of the repository view."""

    header_height: int
    header_margin: int
    body_frame: int
    tabs_height: int
    tabs_margin: int
    status_bar_height: int


DEFAULT_LAYOUT: LayoutConfig = {
    "header_height": HEADER_HEIGHT,
    "header_margin": HEADER_MARGIN,
    "body_frame": BODY_FRAME,
    "tabs_height": TABS_HEIGHT,
    "tabs_margin": TABS_MARGIN,
    "status_bar_height": STATUS_BAR_HEIGHT,
}

DEFAULT_CONFIG: dict[str, Any] = {
    "public_url": DEFAULT_PUBLIC_URL,
    "spinner": DEFAULT_SPINNER,
    "log_page_size": DEFAULT_LOG_PAGE_SIZE,
    "layout": {**DEFAULT_LAYOUT},
}


def get_ui_config_path() -> Path:
    """
    Get path to UI config file.

    Returns:
        Path to ~/.config/repobrowse/ui_config.json
    """
    REPOBROWSE_CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    return REPOBROWSE_CONFIG_DIR / "ui_config.json"


def load_ui_config() -> dict[str, Any]:
    """
    Load UI configuration from file.

    Returns:
        Config dict, or defaults if file doesn't exist or is invalid
    """
    path = get_ui_config_path()
    if path.exists():
        try:
            config = json.loads(path.read_text())
            if not isinstance(config, dict):
                return DEFAULT_CONFIG.copy()
            # Merge with defaults to handle missing keys
            return {**DEFAULT_CONFIG, **config}
        except (json.JSONDecodeError, OSError):
            return DEFAULT_CONFIG.copy()
    return DEFAULT_CONFIG.copy()


def save_ui_config(config: dict[str, Any]) -> None:
    """
    Save UI configuration to file.

    Args:
        config: Configuration dict to save
    """
    path = get_ui_config_path()
    try:
        path.write_text(json.dumps(config, indent=2) + "\n")
    except OSError:
        # Config is non-critical
        pass


def set_public_url(url: str) -> None:
    """
    Set and persist the public URL used for clone commands.

    Args:
        url: Base URL, e.g. ssh://git.example.com
    """
    config = load_ui_config()
    config["public_url"] = url
    save_ui_config(config)


def _merge_layout(layout: Any) -> LayoutConfig:
    merged: dict[str, Any] = {**DEFAULT_LAYOUT}
    if isinstance(layout, dict):
        for key, value in layout.items():
            if key in DEFAULT_LAYOUT and isinstance(value, int) and value >= 0:
                merged[key] = value
    return merged  # type: ignore[return-value]


@dataclass(frozen=True)
class UIConfig:
    """Resolved configuration handed to every UI component."""

    public_url: str = DEFAULT_PUBLIC_URL
    spinner: str = DEFAULT_SPINNER
    log_page_size: int = DEFAULT_LOG_PAGE_SIZE
    header_height: int = HEADER_HEIGHT
    header_margin: int = HEADER_MARGIN
    body_frame: int = BODY_FRAME
    tabs_height: int = TABS_HEIGHT
    tabs_margin: int = TABS_MARGIN
    status_bar_height: int = STATUS_BAR_HEIGHT

    @property
    def vertical_overhead(self) -> int:
        """Rows taken by the header, body frame and status bar."""
        return (
            self.header_height
            + self.header_margin
            + self.body_frame
            + self.status_bar_height
        )

    @property
    def tabs_overhead(self) -> int:
        return self.tabs_height + self.tabs_margin

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> "UIConfig":
        """Build from a loaded config dict.

        Raises:
            ConfigurationError: If the spinner name is unknown or the page
                size is not a positive integer.
        """
        spinner = config.get("spinner", DEFAULT_SPINNER)
        try:
            RichSpinner(spinner)
        except KeyError as e:
            raise ConfigurationError("Unknown spinner", spinner=spinner) from e

        page_size = config.get("log_page_size", DEFAULT_LOG_PAGE_SIZE)
        if not isinstance(page_size, int) or page_size <= 0:
            raise ConfigurationError("Invalid log page size", log_page_size=page_size)

        layout = _merge_layout(config.get("layout"))

        return cls(
            public_url=config.get("public_url") or DEFAULT_PUBLIC_URL,
            spinner=spinner,
            log_page_size=page_size,
            **layout,
        )


def resolve_ui_config(public_url: Optional[str] = None) -> UIConfig:
    """Load the persisted config, letting an explicit URL win."""
    config = load_ui_config()
    if public_url:
        config["public_url"] = public_url
    return UIConfig.from_dict(config)
