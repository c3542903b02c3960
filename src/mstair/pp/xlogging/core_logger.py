# File: src/mstair/pp/xlogging/core_logger.py
"""
Structured logging with environment-driven configuration.

Example:
    >>> from mstair.pp.xlogging.logger_factory import create_logger
    >>> LOG = create_logger(__name__)
    >>> LOG.info("Application started")
    >>>
    >>> with LOG.prefix_with("[render]"):
    ...     LOG.debug("value=%s", {"b": 2, "a": 1})

Features:
- Custom level: TRACE (below DEBUG)
- Caller class resolution for the `klassAndMethod` format field
- Thread-safe prefix context manager
- Non-primitive args rendered with the pretty-printer

Design:
- Only the root logger owns handlers/formatters; CoreLogger instances propagate.
- Log levels are controlled per-logger (via environment and LogLevelConfig).
- initialize_root() is the only supported entry point for root setup.
"""

from __future__ import annotations

import contextvars
import logging
import os
import re
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, ClassVar, TextIO

from mstair.pp.base import config as cfg
from mstair.pp.base.types import PRIMITIVE_TYPES

from .logger_constants import K_KLASS_NAME, TRACE, initialize_logger_constants
from .logger_formatter import CoreFormatter
from .logger_util import LogLevelConfig


__all__: list[str] = [
    "CoreLogger",
    "initialize_root",
]

_LOG_KWARGS_FORBIDDEN: set[str] = {"filename", "lineno", "msg", "args", "levelname", "levelno"}
_LOG_KWARGS_STANDARD: set[str] = {"exc_info", "stack_info", "stacklevel", "extra"}
_LOG_ROOT_ATTR_NAME = "_mstair_pp_corelogger_initialized"

_log_prefix: contextvars.ContextVar[str] = contextvars.ContextVar("log_prefix", default="")


class CoreLogger(logging.Logger):
    """
    Application logger that extends logging.Logger with:

    - Custom level: TRACE.
    - Safe rendering of non-primitive args.
    - Prefix context manager for scoped message prefixes.

    Handlers are not attached directly; all CoreLogger instances propagate
    to root logger, which holds a single stderr handler per initialize_root().
    """

    # _emit() + the public wrapper (debug/info/log/...)
    _INTERNAL_FRAME_OFFSET: ClassVar[int] = 2

    def __init__(
        self,
        name: str,
        level: int | str | None = logging.NOTSET,
    ) -> None:
        """
        Initialize the CoreLogger with a name and log level.

        :param name: The name of the logger, typically the module name.
        :param level: The initial log level. NOTSET resolves it from the environment.
        """
        initialize_logger_constants()

        levels: set[int | str] = {logging.NOTSET, "NOTSET", ""}
        level = level if level in levels or isinstance(level, int) else logging.NOTSET
        if level in levels:
            level = LogLevelConfig.get_instance().get_effective_level(name)
        super().__init__(name, level)

    def __repr__(self) -> str:
        level = self.getEffectiveLevel()
        return f"<{type(self).__name__} '{self.name}' {logging.getLevelName(level)}={level}>"

    def log(self, level: int, *args: Any, **kwargs: Any) -> None:  # type: ignore[override]
        """Emit a log record, preserving all handler/filter logic of logging.Logger."""
        self._emit(level, args, kwargs)

    def trace(self, *args: Any, **kwargs: Any) -> None:
        """Log a message at TRACE level (below DEBUG)."""
        self._emit(TRACE, args, kwargs)

    def debug(self, *args: Any, **kwargs: Any) -> None:
        self._emit(logging.DEBUG, args, kwargs)

    def info(self, *args: Any, **kwargs: Any) -> None:
        self._emit(logging.INFO, args, kwargs)

    def warning(self, *args: Any, **kwargs: Any) -> None:
        self._emit(logging.WARNING, args, kwargs)

    def error(self, *args: Any, **kwargs: Any) -> None:
        self._emit(logging.ERROR, args, kwargs)

    def critical(self, *args: Any, **kwargs: Any) -> None:
        """Log a message at CRITICAL level with a stack trace."""
        kwargs.setdefault("stack_info", True)
        self._emit(logging.CRITICAL, args, kwargs)

    def exception(self, *args: Any, **kwargs: Any) -> None:
        """Log a message at ERROR level with exception info."""
        kwargs.setdefault("exc_info", True)
        self._emit(logging.ERROR, args, kwargs)

    def _emit(self, level: int, args: tuple[Any, ...], kwargs: dict[str, Any]) -> None:
        initialize_root()
        if cfg.in_analysis_mode() or not self.isEnabledFor(level):
            return

        _validate_and_move_kwargs_to_extra(kwargs)
        requested_stacklevel: int = kwargs.pop("stacklevel", 1)
        extra: dict[str, Any] = kwargs.setdefault("extra", {})
        klass_name = _caller_class_name(requested_stacklevel + 1)
        if klass_name:
            extra[K_KLASS_NAME] = klass_name

        msg: Any = args[0] if args else ""
        log_args = _normalize_unsupported_args(*args[1:])

        prefix = _log_prefix.get()
        if prefix:
            msg = f"{prefix}{msg}"

        super().log(
            level,
            msg,
            *log_args,
            exc_info=kwargs.get("exc_info"),
            stack_info=kwargs.get("stack_info", False),
            stacklevel=requested_stacklevel + self._INTERNAL_FRAME_OFFSET,
            extra=extra,
        )

    @contextmanager
    def prefix_with(self, prefix: str) -> Iterator[None]:
        """
        Context manager to prefix all log messages within the current context.

        Thread-safe and supports nesting. Uses contextvars to maintain
        per-context prefix state without modifying logger instances.

        :param prefix: The prefix string to prepend to all log messages.
        """
        formatted_prefix = (prefix + " > ") if not prefix.endswith("\n") else (prefix[:-1] + " >\n")
        current_prefix = _log_prefix.get()
        token = _log_prefix.set(current_prefix + formatted_prefix)
        try:
            yield
        finally:
            _log_prefix.reset(token)


def initialize_root(
    fmt: str | None = None,
    datefmt: str | None = None,
    level: int | str | None = None,
    force: bool = False,
) -> None:
    """
    Idempotently configure the root logger for CoreLogger.

    Tracks state on the root logger attribute, never in a module-global.

    - Ensures exactly one stderr StreamHandler with CoreFormatter exists.
    - If `force=True`, removes and recreates the stderr handler.
    - Sets root level to `level` if provided, otherwise uses WARNING if NOTSET.
    - Does not modify non-stderr handlers owned by the host application.

    :param fmt: Format string. Defaults to LOG_FORMAT or package default.
    :param datefmt: Date format. Defaults to LOG_DATEFMT or package default. If it contains
        no percent directives, timestamps are removed from the format.
    :param level: Root logger level (int or name).
    :param force: Reinitialize even if already initialized.
    """
    root: logging.Logger = logging.getLogger()
    if getattr(root, _LOG_ROOT_ATTR_NAME, False) and not force:
        return
    setattr(root, _LOG_ROOT_ATTR_NAME, True)

    initialize_logger_constants()

    if force:
        root.handlers = [
            h
            for h in root.handlers
            if not (isinstance(h, logging.StreamHandler) and h.stream is sys.stderr)
        ]

    _ensure_stderr_coreformatter(fmt=fmt, datefmt=datefmt)

    if level is not None:
        if isinstance(level, str):
            level = logging.getLevelNamesMapping().get(level.upper(), logging.WARNING)
        root.setLevel(level)
    elif root.getEffectiveLevel() == logging.NOTSET:
        root.setLevel(logging.WARNING)


def _ensure_stderr_coreformatter(*, fmt: str | None = None, datefmt: str | None = None) -> None:
    """
    Ensure the root logger has one stderr handler using CoreFormatter.

    LOG_FORMAT and LOG_DATEFMT supply the fallbacks; a LOG_DATEFMT without
    '%' tokens strips the timestamp from the format.
    """
    fmt = fmt or os.environ.get(
        "LOG_FORMAT",
        r"%(levelName)s %(asctime)s %(fileAndLine)s %(klassAndMethod)s %(message)s",
    )
    env_datefmt: str = os.environ.get("LOG_DATEFMT", "%-I:%M%p")
    datefmt = env_datefmt if datefmt is None else datefmt
    if "%" not in datefmt:
        fmt = re.sub(r"\s*%\(asctime\)s\s*", " ", fmt)
        datefmt = None

    root: logging.Logger = logging.getLogger()
    stderr_handlers: list[logging.StreamHandler[TextIO]] = [
        h for h in root.handlers if isinstance(h, logging.StreamHandler) and h.stream is sys.stderr
    ]
    if not stderr_handlers:
        h: logging.StreamHandler[TextIO] = logging.StreamHandler(sys.stderr)
        h.setFormatter(CoreFormatter(fmt, datefmt))
        root.addHandler(h)
        return

    if not any(isinstance(h.formatter, CoreFormatter) for h in stderr_handlers):
        stderr_handlers[0].setFormatter(CoreFormatter(fmt, datefmt))


def _caller_class_name(depth: int) -> str | None:
    """Return the class name of `self`/`cls` in the frame `depth` levels above _emit()."""
    try:
        frame = sys._getframe(depth + 1)
    except ValueError:
        return None
    owner = frame.f_locals.get("self", frame.f_locals.get("cls"))
    if owner is None:
        return None
    return owner.__name__ if isinstance(owner, type) else type(owner).__name__


def _validate_and_move_kwargs_to_extra(kwargs: dict[str, Any]) -> None:
    """
    Validates and mutates kwargs by moving non-standard keys into the extra dict.

    :param kwargs: The keyword arguments passed to the log() method.
    :raises ValueError: If any forbidden keys are found in kwargs.
    """
    for key, value in list(kwargs.items()):
        if key in _LOG_KWARGS_FORBIDDEN:
            raise ValueError(f"Invalid keyword argument '{key}={value!r}'")
        if key not in _LOG_KWARGS_STANDARD:
            kwargs.pop(key)
            kwargs.setdefault("extra", {})[key] = value


def _normalize_unsupported_args(*args: Any) -> tuple[Any, ...]:
    """
    Render non-primitive format arguments with the pretty-printer.

    :return tuple[Any, ...]: The arguments, with non-primitive types converted to strings.
    """
    arg_list: list[Any] = []
    for arg in args:
        if isinstance(arg, PRIMITIVE_TYPES):
            arg_list.append(arg)
            continue
        try:
            from mstair.pp.xprint.xprint_api import pformat

            arg_list.append(pformat(arg))
        except Exception as e:
            arg_list.append(f"<unserializable: {type(arg).__name__}: {e}>")
    return tuple(arg_list)


# End of file: src/mstair/pp/xlogging/core_logger.py
