# File: src/mstair/pp/xprint/printer.py
"""
Printer façade: configuration, labels and output.

Example:
    >>> from mstair.pp.xprint.printer import Printer
    >>> printer = Printer(max_inline_column=40)
    >>> printer.print({"b": 2, "a": 1}, "request {}", 7)
    [request 7] dict{"a": 1, "b": 2}

Each call renders under the printer's lock with the configuration snapshot
taken at the start of the call. The lock is reentrant, so a hook or a log
statement on the same thread can print again.
"""

from __future__ import annotations

import sys
import threading
from typing import IO, Any

from mstair.pp.xlogging.logger_factory import create_logger
from mstair.pp.xprint.hook_registry import FormatHook
from mstair.pp.xprint.model import PrintTypes
from mstair.pp.xprint.printer_config import PrinterConfig
from mstair.pp.xprint.renderer import Renderer


__all__ = [
    "LabelFormatError",
    "Printer",
    "format_label",
]

LOG = create_logger(__name__)


class LabelFormatError(ValueError):
    """The label template could not be formatted with the given arguments."""


def format_label(label: tuple[Any, ...]) -> str | None:
    """
    Format a label given as (template, *args) into `[text]`.

    :return: The bracketed label, or None when no label was given.
    :raises TypeError: If the template is not a str.
    :raises LabelFormatError: If the template is malformed or its arguments do not match.
    """
    if not label:
        return None
    template, *args = label
    if not isinstance(template, str):
        raise TypeError(f"label template must be a str, not {type(template).__name__}")
    try:
        text = template.format(*args)
    except (IndexError, KeyError, ValueError, AttributeError, TypeError) as e:
        raise LabelFormatError(f"cannot format label {template!r}: {e}") from e
    return f"[{text}]"


class Printer:
    """Deterministic pretty-printer for arbitrary Python values."""

    def __init__(self, config: PrinterConfig | None = None, **overrides: Any) -> None:
        """
        :param config: Starting configuration. Defaults to PrinterConfig().
        :param overrides: PrinterConfig field values applied on top of `config`.
        """
        base = config if config is not None else PrinterConfig()
        self._config = base.replace(**overrides) if overrides else base
        self._lock = threading.RLock()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self._config!r}>"

    @property
    def config(self) -> PrinterConfig:
        """The current configuration snapshot."""
        with self._lock:
            return self._config

    def _update(self, **changes: Any) -> None:
        with self._lock:
            self._config = self._config.replace(**changes)

    # ---------- Setters ----------

    def set_default_output(self, sink: IO[str] | None) -> None:
        self._update(sink=sink)

    def set_format_hook(self, hook: FormatHook | None) -> None:
        self._update(format_hook=hook)

    def set_max_inline_column(self, column: int) -> None:
        self._update(max_inline_column=column)

    def set_indent(self, indent: str) -> None:
        self._update(indent=indent)

    def set_line_prefix(self, prefix: str) -> None:
        self._update(line_prefix=prefix)

    def set_print_types(self, print_types: PrintTypes | str) -> None:
        self._update(print_types=print_types)

    def set_hide_private_fields(self, hide: bool) -> None:
        self._update(hide_private_fields=hide)

    def set_thousands_separator(self, separator: str | None) -> None:
        self._update(thousands_separator=separator)

    def set_escape_unicode(self, escape: bool) -> None:
        self._update(escape_unicode=escape)

    def set_literals(self, nil: str, true: str, false: str) -> None:
        self._update(literals=(nil, true, false))

    def set_max_hook_iterations(self, limit: int) -> None:
        self._update(max_hook_iterations=limit)

    # ---------- Output ----------

    def print(self, value: Any, *label: Any, file: IO[str] | None = None) -> None:
        """
        Print `value` followed by a newline.

        :param label: Optional `str.format` template followed by its positional arguments.
        :param file: Output stream. Defaults to the configured sink, then sys.stdout.
        """
        self.print_to(file, value, *label)

    def print_to(self, sink: IO[str] | None, value: Any, *label: Any) -> None:
        """
        Print `value` followed by a newline to `sink`.

        The text is fully rendered before the write; exceptions raised by
        `sink.write()` propagate unchanged.
        """
        with self._lock:
            config = self._config
            text = self._format(config, value, label)
            out = sink if sink is not None else config.sink if config.sink is not None else sys.stdout
            out.write(text + "\n")

    def render(self, value: Any, *label: Any) -> str:
        """Return what print() would write, without the trailing newline."""
        with self._lock:
            return self._format(self._config, value, label)

    @staticmethod
    def _format(config: PrinterConfig, value: Any, label: tuple[Any, ...]) -> str:
        header = format_label(label)
        with LOG.prefix_with(f"[render {type(value).__name__}]"):
            body = Renderer(config).render(value)
        if header is None:
            return config.line_prefix + body
        if "\n" in body:
            return f"{config.line_prefix}{header}\n{config.line_prefix}{body}"
        return f"{config.line_prefix}{header} {body}"


# End of file: src/mstair/pp/xprint/printer.py
