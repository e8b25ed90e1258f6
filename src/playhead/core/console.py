"""Rich consoles for CLI output.

Tables and informational messages go to stdout; warnings and errors go to a
separate stderr console so they stay visible when stdout is piped.
"""

from rich.console import Console

_console: Console | None = None
_error_console: Console | None = None

LEVEL_STYLES = {
    "warning": "yellow",
    "error": "bold red",
}


def get_console() -> Console:
    """Get or create the stdout Console."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def get_error_console() -> Console:
    """Get or create the stderr Console."""
    global _error_console
    if _error_console is None:
        _error_console = Console(stderr=True)
    return _error_console


def print_message(message: str, level: str = "info") -> None:
    """Print a plain user-facing message, styled by level.

    Args:
        message: Text to print; Rich markup in it is not interpreted
        level: info, warning or error
    """
    style = LEVEL_STYLES.get(level)
    console = get_error_console() if style else get_console()
    console.print(message, style=style, markup=False, highlight=False, soft_wrap=True)
