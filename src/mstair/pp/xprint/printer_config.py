# File: src/mstair/pp/xprint/printer_config.py
"""
Immutable printer configuration.

`PrinterConfig.from_environment()` reads PP_* variables (after loading `.env`):

    PP_MAX_INLINE_COLUMN=100
    PP_INDENT=4                 # a number means that many spaces
    PP_LINE_PREFIX="| "
    PP_PRINT_TYPES=never        # default | always | never
    PP_HIDE_PRIVATE_FIELDS=yes
    PP_THOUSANDS_SEPARATOR=,    # empty disables grouping
    PP_ESCAPE_UNICODE=1

Invalid values are logged as warnings and the default is kept.
"""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import IO, Any, Final, Self

from mstair.pp.base.fs_helpers import fs_load_dotenv
from mstair.pp.base.types import bool_from_string
from mstair.pp.xlogging.logger_factory import create_logger
from mstair.pp.xprint.hook_registry import FormatHook, FormatHookRegistry
from mstair.pp.xprint.model import PrintTypes


__all__ = ["PrinterConfig"]

LOG = create_logger(__name__)


@dataclass(frozen=True, kw_only=True)
class PrinterConfig:
    """Settings read by one render. Replace, never mutate: see Printer setters."""

    sink: IO[str] | None = None
    """Default output; None means the current sys.stdout."""

    format_hook: FormatHook | None = field(default_factory=FormatHookRegistry)
    max_inline_column: int = 80
    indent: str = "  "
    line_prefix: str = ""
    print_types: PrintTypes = PrintTypes.DEFAULT
    hide_private_fields: bool = False

    thousands_separator: str | None = "_"
    """Inserted every three integer digits. None or "" disables grouping."""

    escape_unicode: bool = False
    literals: tuple[str, str, str] = ("nil", "true", "false")
    """Spellings of (nil, true, false)."""

    max_hook_iterations: int = 32
    """Cap on chained hook replacements for one value."""

    def __post_init__(self) -> None:
        if isinstance(self.print_types, str) and not isinstance(self.print_types, PrintTypes):
            object.__setattr__(self, "print_types", PrintTypes(self.print_types.strip().lower()))
        if isinstance(self.max_inline_column, bool) or not isinstance(self.max_inline_column, int):
            raise TypeError(f"max_inline_column must be an int, got {type(self.max_inline_column).__name__}")
        if not isinstance(self.indent, str) or not isinstance(self.line_prefix, str):
            raise TypeError("indent and line_prefix must be strings")
        if self.max_hook_iterations < 1:
            raise ValueError(f"max_hook_iterations must be at least 1, got {self.max_hook_iterations}")
        if len(self.literals) != 3 or not all(isinstance(s, str) for s in self.literals):
            raise ValueError("literals must be three strings: (nil, true, false)")
        object.__setattr__(self, "literals", tuple(self.literals))

    def replace(self, **changes: Any) -> Self:
        """Return a copy with `changes` applied and validated."""
        return dataclasses.replace(self, **changes)

    @classmethod
    def from_environment(cls, environ: Mapping[str, str] | None = None, **overrides: Any) -> Self:
        """
        Build a configuration from PP_* environment variables.

        :param environ: Variables to read. Defaults to os.environ after loading `.env`.
        :param overrides: Field values that take precedence over the environment.
        """
        if environ is None:
            fs_load_dotenv()
            environ = os.environ

        values: dict[str, Any] = {}
        for name, (field_name, parse) in _ENV_FIELDS.items():
            text = environ.get(name)
            if text is None:
                continue
            parsed = parse(text)
            if parsed is None:
                LOG.warning("Ignoring invalid %s=%r, keeping the default", name, text)
                continue
            values[field_name] = parsed
        values.update(overrides)
        return cls(**values)


def _parse_column(text: str) -> int | None:
    try:
        column = int(text.strip())
    except ValueError:
        return None
    return column if column >= 0 else None


def _parse_indent(text: str) -> str | None:
    if text.strip().isdigit():
        return " " * int(text.strip())
    return text.replace("\\t", "\t")


def _parse_print_types(text: str) -> PrintTypes | None:
    try:
        return PrintTypes(text.strip().lower())
    except ValueError:
        return None


def _parse_flag(text: str) -> bool | None:
    return bool_from_string(text, default=None)


_ENV_FIELDS: Final[dict[str, tuple[str, Callable[[str], Any]]]] = {
    "PP_MAX_INLINE_COLUMN": ("max_inline_column", _parse_column),
    "PP_INDENT": ("indent", _parse_indent),
    "PP_LINE_PREFIX": ("line_prefix", str),
    "PP_PRINT_TYPES": ("print_types", _parse_print_types),
    "PP_HIDE_PRIVATE_FIELDS": ("hide_private_fields", _parse_flag),
    "PP_THOUSANDS_SEPARATOR": ("thousands_separator", str),
    "PP_ESCAPE_UNICODE": ("escape_unicode", _parse_flag),
}


# End of file: src/mstair/pp/xprint/printer_config.py
