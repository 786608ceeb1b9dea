"""
kubepreflight Console Manager

Provides a singleton Rich Console for the command line output.

Usage:
    from kubepreflight.utils.console import get_console
    get_console().print("[success]All checks passed[/success]")
"""

import threading
from typing import Optional

from rich.console import Console
from rich.theme import Theme

_console: Optional[Console] = None
_err_console: Optional[Console] = None
_lock = threading.Lock()

PREFLIGHT_THEME = Theme({
    "info": "cyan",
    "success": "green",
    "warning": "yellow",
    "error": "red bold",
    "heading": "bold magenta",
    "dim": "dim white",
    "check": "bold cyan",
})


def get_console(force_terminal: bool = None,
                no_color: bool = None,
                width: int = None,
                stderr: bool = False) -> Console:
    """
    Get the singleton Console instance.

    There is one console for stdout and one for stderr; the options only
    apply when the requested console is first created.

    Args:
        force_terminal: Force terminal mode (for testing)
        no_color: Disable color output
        width: Override console width
        stderr: Return the console writing to stderr
    """
    global _console, _err_console

    if (_err_console if stderr else _console) is None:
        with _lock:
            if (_err_console if stderr else _console) is None:
                console = Console(
                    theme=PREFLIGHT_THEME,
                    force_terminal=force_terminal,
                    no_color=no_color,
                    width=width,
                    stderr=stderr,
                    highlight=False,
                    markup=True,
                )
                if stderr:
                    _err_console = console
                else:
                    _console = console

    return _err_console if stderr else _console


def reset_console():
    """Reset the console singletons (useful for testing)."""
    global _console, _err_console
    with _lock:
        _console = None
        _err_console = None
