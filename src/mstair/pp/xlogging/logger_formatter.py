# File: src/mstair/pp/xlogging/logger_formatter.py

from __future__ import annotations

import logging
import os
import sys
import traceback
from datetime import datetime, tzinfo
from pathlib import Path
from typing import Any, Literal

import pytz
from colorama import Fore

import mstair.pp.base.config as cfg

from .logger_constants import K_COLOR, K_KLASS_NAME


__all__ = ["CoreFormatter", "get_color_code", "rgb_code"]


FormatStyle = Literal["%", "{", "$"]
"""Format string style accepted by `CoreFormatter` (and `logging.Formatter`)."""

DEFAULT_TIMEZONE = "US/Eastern"


def rgb_code(r: int, g: int, b: int) -> str:
    """
    Convert RGB values to ANSI escape code for terminal color output.

    :param r: Red component (0-255)
    :param g: Green component (0-255)
    :param b: Blue component (0-255)
    :return str: ANSI escape code for the specified RGB color.
    """
    return f"\033[38;2;{max(0, min(255, r))};{max(0, min(255, g))};{max(0, min(255, b))}m"


RGB_CALLER = rgb_code(3 << 4, 12 << 4, 10 << 4)
RGB_LOCATION = rgb_code(4 << 4, 8 << 4, 10 << 4)
COLOR_MAP: dict[str | None, str] = {
    "fileAndLine": RGB_LOCATION,
    "klassAndMethod": RGB_CALLER,
    "TRACE": rgb_code(96, 0, 64),
    "DEBUG": rgb_code(128, 128, 128),
    "INFO": rgb_code(184, 184, 216),
    "WARNING": rgb_code(192, 176, 0),
    "ERROR": rgb_code(224, 128, 0),
    "CRITICAL": rgb_code(255, 64, 64),
    None: Fore.RESET,
}


def get_color_code(key: Any = None) -> str:
    """
    Return the terminal color code for a color key, or "" outside desktop mode.

    Keys may be entries of COLOR_MAP, "#rrggbb" hex strings, or colorama Fore names
    ("red", "light_blue", ...).
    """
    if not cfg.in_desktop_mode():
        return ""
    if key in {"", "RESET"} or key is None:
        return Fore.RESET
    if key in COLOR_MAP:
        return COLOR_MAP[key]
    if isinstance(key, str) and key.startswith("#") and len(key) == 7:
        return rgb_code(*[int(key[i : i + 2], 16) for i in (1, 3, 5)])

    clean_key = str(key).upper().replace("BRIGHT", "LIGHT")
    if "LIGHT" in clean_key and not clean_key.endswith("_EX"):
        clean_key += "_EX"
    return getattr(Fore, clean_key, Fore.RESET)


def resolve_timezone(name: str | None = None) -> tzinfo:
    """
    Resolve the log timestamp timezone from `name` or LOG_TIMEZONE.

    Unknown zone names fall back to DEFAULT_TIMEZONE.
    """
    zone_name = name or os.environ.get("LOG_TIMEZONE") or DEFAULT_TIMEZONE
    try:
        return pytz.timezone(zone_name)
    except pytz.UnknownTimeZoneError:
        print(f"Unknown LOG_TIMEZONE {zone_name!r}, using {DEFAULT_TIMEZONE}", file=sys.stderr)
        return pytz.timezone(DEFAULT_TIMEZONE)


class CoreFormatter(logging.Formatter):
    """
    Formatter for CoreLogger records adding file and line information,
    class and method names, and color-coded log levels.
    """

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        style: FormatStyle = "%",
        validate: bool = True,
        *,
        defaults: dict[str, Any] | None = None,
        timezone: str | None = None,
    ) -> None:
        """
        :param fmt: The format string for log messages.
        :param datefmt: The date format string for log timestamps.
        :param style: The style for the format string (default is "%").
        :param validate: Whether to validate the format strings (default is True).
        :param defaults: Default values for format fields.
        :param timezone: pytz zone name for timestamps, defaults to LOG_TIMEZONE.
        """
        super().__init__(fmt=fmt, datefmt=datefmt, style=style, validate=validate, defaults=defaults)
        self.tz = resolve_timezone(timezone)

    def format(self, record: logging.LogRecord) -> str:
        record.fileAndLine = self.format_fileAndLine(record.pathname, record.lineno)
        record.klassAndMethod = self.format_klassAndMethod(record)
        record.levelName = get_color_code(record.levelname) + record.levelname + get_color_code()

        try:
            message = super().format(record)
        except Exception as exc:
            return format_logging_error(record, exc)
        color_key = getattr(record, K_COLOR, record.levelname)
        return get_color_code(color_key) + message + get_color_code()

    @staticmethod
    def format_file(file: str) -> str:
        """Format the file path relative to the working directory when possible."""
        if not file:
            return "<unknown file>"
        path = Path(file)
        try:
            return path.absolute().relative_to(Path.cwd()).as_posix()
        except ValueError:
            return path.as_posix()

    def format_fileAndLine(self, file: str, lineno: int) -> str:
        fileAndLine = f"{self.format_file(file)}:{lineno}"
        return get_color_code("fileAndLine") + fileAndLine + get_color_code()

    @staticmethod
    def format_klassAndMethod(record: logging.LogRecord) -> str:
        klass_name = getattr(record, K_KLASS_NAME, record.module)
        if not any(char.isupper() for char in klass_name):
            klassAndMethod = record.funcName if record.funcName == "<module>" else f"{record.funcName}()"
        elif record.funcName == "__init__":
            klassAndMethod = f"{klass_name}()"
        else:
            klassAndMethod = f"{klass_name}.{record.funcName}()"
        return get_color_code("klassAndMethod") + klassAndMethod + get_color_code()

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        moment = datetime.fromtimestamp(record.created, self.tz)
        result = ""
        if datefmt:
            try:
                result = moment.strftime(datefmt.replace("%-", "%"))
                result = result.replace("AM", "am").replace("PM", "pm").lstrip("0")
            except ValueError as e:
                print(f"{type(e).__name__}: {e}: {datefmt!r}", file=sys.stderr)
        result = result or moment.isoformat()
        return get_color_code(record.levelname) + result + get_color_code()


def format_logging_error(record: logging.LogRecord, exc: Exception) -> str:
    """
    Generate a formatted error message when log record formatting fails.

    :param record: The LogRecord that failed to format
    :param exc: The exception that occurred during formatting
    :return: Formatted error message string
    """
    posix_path = Path(getattr(record, "pathname", "<unknown>")).as_posix()
    line = getattr(record, "lineno", "?")
    message_lines = [
        "Internal error: Failed to format log record",
        f"{posix_path}:{line}",
        f"{type(exc).__name__}: {exc}",
        f"record.msg: {getattr(record, 'msg', None)!r}",
        f"record.args: {getattr(record, 'args', None)!r}",
        "",
        *traceback.format_exc().splitlines(),
    ]
    return "\n>> " + "\n>> ".join(message_lines) + "\n\n"


# End of file: src/mstair/pp/xlogging/logger_formatter.py
