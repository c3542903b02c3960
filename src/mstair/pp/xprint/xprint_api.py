# File: src/mstair/pp/xprint/xprint_api.py
"""
Package-level default printer and the free functions that delegate to it.

    >>> from mstair.pp.xprint.xprint_api import pp
    >>> pp([1, 2, 3], "numbers")
    [numbers] list[1, 2, 3]

DEFAULT_PRINTER is configured from PP_* environment variables at import time;
use its setters (or `get_default_printer()`) to change it afterwards.
"""

from __future__ import annotations

from typing import IO, Any

from mstair.pp.xprint.printer import Printer
from mstair.pp.xprint.printer_config import PrinterConfig


__all__ = [
    "DEFAULT_PRINTER",
    "get_default_printer",
    "pformat",
    "pp",
    "pp_to",
]

DEFAULT_PRINTER: Printer = Printer(PrinterConfig.from_environment())


def get_default_printer() -> Printer:
    return DEFAULT_PRINTER


def pp(value: Any, *label: Any, file: IO[str] | None = None) -> None:
    """Print `value` with the default printer. See Printer.print()."""
    DEFAULT_PRINTER.print(value, *label, file=file)


def pp_to(sink: IO[str], value: Any, *label: Any) -> None:
    DEFAULT_PRINTER.print_to(sink, value, *label)


def pformat(value: Any, *label: Any) -> str:
    """Return the text the default printer would print, without the trailing newline."""
    return DEFAULT_PRINTER.render(value, *label)


# End of file: src/mstair/pp/xprint/xprint_api.py
