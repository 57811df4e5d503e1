"""
Centralized constants for repobrowse.
"""

from pathlib import Path

# =============================================================================
# PATHS
# =============================================================================

REPOBROWSE_CONFIG_DIR = Path.home() / ".config" / "repobrowse"

# =============================================================================
# CLONE URL
# =============================================================================

DEFAULT_PUBLIC_URL = "ssh://localhost:23231"
PUBLIC_URL_ENV_VAR = "REPOBROWSE_PUBLIC_URL"

# =============================================================================
# LOADING & PAGING
# =============================================================================

DEFAULT_SPINNER = "dots"  # Any name from rich's spinner table
DEFAULT_LOG_PAGE_SIZE = 50  # Commits fetched per log request
LOG_LOAD_MORE_THRESHOLD = 10  # Fetch the next page when this close to the end

# =============================================================================
# LAYOUT (terminal rows)
# =============================================================================

HEADER_HEIGHT = 2  # Project name line + description/clone line
HEADER_MARGIN = 1  # Blank line under the header
BODY_FRAME = 0  # Border rows around the main region
TABS_HEIGHT = 1
TABS_MARGIN = 1  # Blank line under the tab strip
STATUS_BAR_HEIGHT = 1

COPY_CONFIRMATION = "Command copied to clipboard"
