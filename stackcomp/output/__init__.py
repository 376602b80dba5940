"""Output abstraction layer."""

from .console import ConsoleProtocol, MockConsole, RichConsole, Style
from .report import error_hint, print_resolution, print_resolve_error

__all__ = [
    "ConsoleProtocol",
    "MockConsole",
    "RichConsole",
    "Style",
    "error_hint",
    "print_resolution",
    "print_resolve_error",
]
