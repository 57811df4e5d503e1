"""
Plain-text layout helpers.

Widths are terminal cells (via rich), and zone markers count as zero
width, so text can be marked before it is padded into a block.
"""

import io
from typing import List

from rich.cells import cell_len, set_cell_size
from rich.console import Console
from rich.markdown import Markdown
from rich.text import Text

from .zones import visible_len


def truncate(text: str, width: int, ellipsis: bool = True) -> str:
    """Shorten a single line to at most ``width`` cells."""
    if width <= 0:
        return ""
    if cell_len(text) <= width:
        return text
    line = Text(text, no_wrap=True)
    line.truncate(width, overflow="ellipsis" if ellipsis else "crop")
    return line.plain


def fit(text: str, width: int) -> str:
    """Crop or pad a single unmarked line to exactly ``width`` cells."""
    if width <= 0:
        return ""
    return set_cell_size(text, width)


def align_right(text: str, width: int) -> str:
    text = truncate(text, width)
    return " " * max(0, width - cell_len(text)) + text


def pad_block(text: str, width: int, height: int) -> str:
    """Pad a (possibly marked) block to ``height`` lines of ``width`` cells.

    Extra lines are dropped. Lines are padded but not cropped, so marked
    lines must already fit.
    """
    lines = text.split("\n") if text else []
    lines = lines[:max(0, height)]
    out = [line + " " * max(0, width - visible_len(line)) for line in lines]
    out += [" " * width] * (max(0, height) - len(out))
    return "\n".join(out)


def join_vertical(*blocks: str) -> str:
    """Stack blocks top to bottom, skipping empty ones."""
    return "\n".join(block for block in blocks if block)


def render_markdown(content: str, width: int) -> List[str]:
    """Render markdown to plain lines at ``width`` columns."""
    console = Console(
        width=max(width, 10),
        file=io.StringIO(),
        color_system=None,
        force_terminal=False,
        highlight=False,
    )
    with console.capture() as capture:
        console.print(Markdown(content))
    return capture.get().rstrip("\n").split("\n")
