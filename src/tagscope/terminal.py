"""Terminal color utilities for translation-time diagnostics.

ANSI colors with TTY detection and NO_COLOR/FORCE_COLOR support.
Used by the exception classes to render compact diagnostics.
"""

from __future__ import annotations

import os
import re
import sys
from typing import Literal

_COLORS = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    "red": "\033[31m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "blue": "\033[34m",
    "magenta": "\033[35m",
    "cyan": "\033[36m",
    "bright_red": "\033[91m",
    "bright_green": "\033[92m",
    "bright_blue": "\033[94m",
}

ColorName = Literal[
    "reset", "bold", "dim",
    "red", "green", "yellow", "blue", "magenta", "cyan",
    "bright_red", "bright_green", "bright_blue",
]

_ANSI_ESCAPE = re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")


def _should_use_colors() -> bool:
    """Decide whether diagnostics are colored.

    Respects:
        - FORCE_COLOR (wins over everything)
        - NO_COLOR (https://no-color.org/)
        - sys.stdout.isatty()
    """
    if os.environ.get("FORCE_COLOR"):
        return True
    if os.environ.get("NO_COLOR"):
        return False
    return sys.stdout.isatty()


_USE_COLORS = _should_use_colors()


def supports_color() -> bool:
    """Return True if diagnostics will carry ANSI codes."""
    return _USE_COLORS


def colorize(text: str, *colors: ColorName) -> str:
    """Wrap text in ANSI codes, or return it unchanged when colors are off.

    Example:
        >>> colorize("T-SCO-001", "bright_red", "bold")
        '\033[91m\033[1mT-SCO-001\033[0m'  # if colors supported
    """
    if not _USE_COLORS or not colors:
        return text
    prefix = "".join(_COLORS.get(color, "") for color in colors)
    if not prefix:
        return text
    return f"{prefix}{text}{_COLORS['reset']}"


def strip_colors(text: str) -> str:
    """Remove ANSI escape sequences from text."""
    return _ANSI_ESCAPE.sub("", text)


def error_code(text: str) -> str:
    """Error code (bright red + bold)."""
    return colorize(text, "bright_red", "bold")


def location(text: str) -> str:
    """Template location of a tag invocation (cyan)."""
    return colorize(text, "cyan")


def variable(text: str) -> str:
    """Scripting variable name (yellow + bold)."""
    return colorize(text, "yellow", "bold")


def scope(text: str) -> str:
    """Scope window name (magenta)."""
    return colorize(text, "magenta")


def hint(text: str) -> str:
    """Hint label (green)."""
    return colorize(text, "green")


def dim_text(text: str) -> str:
    return colorize(text, "dim")


def docs_url(text: str) -> str:
    return colorize(text, "bright_blue")


def format_error_header(code: str | None, message: str) -> str:
    """Format a diagnostic header with an optional error code prefix."""
    if code:
        return f"{error_code(code)}: {message}"
    return message
