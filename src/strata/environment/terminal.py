"""ANSI colors for error messages.

Colors are used only when stdout is a TTY. ``NO_COLOR`` turns them off and
``FORCE_COLOR`` turns them on regardless of the terminal.
"""

from __future__ import annotations

import os
import re
import sys
from typing import Literal

_CODES = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "cyan": "\033[36m",
    "bright_red": "\033[91m",
    "bright_green": "\033[92m",
}

Style = Literal["reset", "bold", "dim", "green", "yellow", "cyan", "bright_red", "bright_green"]

_ANSI_RE = re.compile(r"\x1B\[[0-?]*[ -/]*[@-~]")


def _detect_colors() -> bool:
    if os.environ.get("FORCE_COLOR"):
        return True
    if os.environ.get("NO_COLOR"):
        return False
    return sys.stdout.isatty()


_USE_COLORS = _detect_colors()


def supports_color() -> bool:
    """True if error messages are colorized in this process."""
    return _USE_COLORS


def colorize(text: str, *styles: Style) -> str:
    """Wrap ``text`` in the given ANSI styles, or return it unchanged.

    Example:
        >>> colorize("S-RUN", "bright_red", "bold")  # with colors enabled
        '\\033[91m\\033[1mS-RUN\\033[0m'
    """
    if not _USE_COLORS or not styles:
        return text
    prefix = "".join(_CODES[style] for style in styles)
    return f"{prefix}{text}{_CODES['reset']}"


def strip_colors(text: str) -> str:
    """Remove ANSI escape sequences from ``text``."""
    return _ANSI_RE.sub("", text)


def error_code(text: str) -> str:
    return colorize(text, "bright_red", "bold")


def location(text: str) -> str:
    return colorize(text, "cyan")


def line_number(text: str) -> str:
    return colorize(text, "yellow")


def hint(text: str) -> str:
    return colorize(text, "green")


def suggestion(text: str) -> str:
    return colorize(text, "bright_green", "bold")


def dim_text(text: str) -> str:
    return colorize(text, "dim")


def format_error_header(code: str | None, message: str) -> str:
    """Prefix ``message`` with a colored error code when one is given."""
    if code:
        return f"{error_code(code)}: {message}"
    return message
