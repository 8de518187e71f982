"""
Console output helpers.

ANSI color formatting for status and diagnostic lines printed by the
renderer and the preview shell.
"""

import os
import sys


class Colors:
    """ANSI escape sequences used for console output."""

    GREEN = "\033[92m"
    CYAN = "\033[96m"
    RED = "\033[91m"
    YELLOW = "\033[93m"
    GRAY = "\033[90m"

    BOLD = "\033[1m"
    RESET = "\033[0m"

    @staticmethod
    def disable():
        """Disable all colors (for piped output or when colors not supported)."""
        for name in ("GREEN", "CYAN", "RED", "YELLOW", "GRAY", "BOLD", "RESET"):
            setattr(Colors, name, "")


def supports_color(stream=None) -> bool:
    """True if the stream is an interactive terminal and NO_COLOR is unset."""
    stream = stream or sys.stdout
    if os.environ.get("NO_COLOR"):
        return False
    return hasattr(stream, "isatty") and stream.isatty()


def success(text: str) -> str:
    """Format text as success message (green)."""
    return f"{Colors.GREEN}{text}{Colors.RESET}"


def error(text: str) -> str:
    """Format text as error message (red)."""
    return f"{Colors.RED}{text}{Colors.RESET}"


def warning(text: str) -> str:
    """Format text as warning message (yellow)."""
    return f"{Colors.YELLOW}{text}{Colors.RESET}"


def info(text: str) -> str:
    """Format text as info message (cyan)."""
    return f"{Colors.CYAN}{text}{Colors.RESET}"


def dim(text: str) -> str:
    """Format text as dimmed/secondary (gray)."""
    return f"{Colors.GRAY}{text}{Colors.RESET}"


def title_bar(text: str) -> str:
    """Format a section title as '=== text ===' with colored markers."""
    marker = f"{Colors.CYAN}{Colors.BOLD}==={Colors.RESET}"
    return f"{marker} {text} {marker}"
