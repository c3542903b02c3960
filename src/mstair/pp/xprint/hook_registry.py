# File: src/mstair/pp/xprint/hook_registry.py
"""
Custom-formatting hooks.

A format hook is a callable `hook(value) -> None | RawText | Any`:

- `None` defers to the next hook (or to the built-in rendering).
- `RawText` is printed verbatim, wrapped as `TypeName(text)` unless types are never printed.
- Any other value replaces the input; the hook is called again on the replacement
  until it returns `None` or `RawText`.

`FormatHookRegistry` keeps an ordered, mutable list of hooks and is itself a hook.
`HOOKS` holds factories for optional hooks such as `max_items()`.
"""

from __future__ import annotations

import datetime
import decimal
import enum
import fractions
import itertools
import json
import multiprocessing.sharedctypes
import pathlib
import re
import threading
from collections.abc import Callable, Mapping, Sequence, Set
from typing import Any, NoReturn, TypeAlias, final

from mstair.pp.xlogging.logger_factory import create_logger
from mstair.pp.xprint import introspection as intro
from mstair.pp.xprint.key_order import sort_keys
from mstair.pp.xprint.model import TRUNCATED, HookOutcome, RawText


__all__ = [
    "HOOKS",
    "FormatHook",
    "FormatHookRegistry",
    "format_duration",
    "format_value",
    "resolve_hook",
]

LOG = create_logger(__name__)

FormatHook: TypeAlias = Callable[[Any], Any]
"""
A callable that customizes the rendering of one value.

:param value: The value about to be rendered.
:return: None to defer, RawText for verbatim output, or a replacement value.
"""


def resolve_hook(hook: FormatHook | None, value: Any, *, max_iterations: int) -> HookOutcome:
    """
    Run the hook chain on `value` until it settles.

    RawText input and the TRUNCATED marker are never passed to the hook. A hook
    that raises is logged and treated as "no override". After `max_iterations`
    replacements a warning is logged and the last replacement is rendered with
    the built-in rules.

    :param hook: The configured hook, or None.
    :param value: The value about to be rendered.
    :param max_iterations: Cap on chained replacements.
    :return: The outcome; `outcome.value` is what should be rendered.
    """
    if isinstance(value, RawText) or value is TRUNCATED:
        return HookOutcome(value, raw_text=str(value), verbatim=True)
    if hook is None:
        return HookOutcome(value)

    current = value
    replaced = False
    for _ in range(max_iterations):
        try:
            result = hook(current)
        except Exception:
            LOG.exception(
                "Format hook %s raised for a %s value", _get_fn_location(hook), type(current).__name__
            )
            break
        if result is None or result is current:
            break
        if isinstance(result, RawText):
            type_name = intro.class_display_name(type(current))
            return HookOutcome(current, raw_text=str(result), type_name=type_name, replaced=replaced)
        current = result
        replaced = True
    else:
        LOG.warning(
            "Format hook chain for a %s value stopped after %d replacements",
            type(value).__name__,
            max_iterations,
        )
    return HookOutcome(current, replaced=replaced)


def _get_fn_location(func: Callable[..., Any]) -> str:
    code = getattr(func, "__code__", None)
    file_str: str = code.co_filename if code else "?"
    line_str: str = str(code.co_firstlineno) if code else "?"
    name = getattr(func, "__qualname__", None) or type(func).__name__
    return f"{file_str}:{line_str} {name}()"


class FormatHookRegistry:
    """
    Maintains an ordered, mutable registry of format hooks. The registry is itself a hook.

    A registry may be shared by several printers. The hook list is only changed
    under the registry lock; each call runs on a snapshot of it.
    """

    hooks: list[FormatHook]
    """The hooks to try, in order. The first non-None answer wins."""

    def __init__(self, *, hooks: list[FormatHook] | None = None) -> None:
        """
        Initialize the registry with the built-in hooks and optional extra hooks.

        :param hooks: Hooks to register ahead of the built-ins, highest priority first.
        """
        self._lock = threading.RLock()
        self.hooks = []
        self.reset()
        for idx, fn in enumerate(hooks or []):
            self.register(fn, idx=idx)

    def __call__(self, value: Any) -> Any:
        """
        Return the answer of the first hook that does not return None.

        A hook that raises is removed from the registry and the error is logged;
        the value then falls through to the next hook.
        """
        with self._lock:
            hooks = list(self.hooks)
        for hook in hooks:
            try:
                result = hook(value)
            except Exception as exc:
                self._remove(hook)
                LOG.error(
                    "%s removed for raising an exception given a %s value",
                    _get_fn_location(hook),
                    type(value).__name__,
                )
                LOG.exception("Exception details:", exc_info=exc)
                continue
            if result is not None:
                return result
        return None

    def __repr__(self) -> str:
        with self._lock:
            names = ", ".join(getattr(h, "__name__", type(h).__name__) for h in self.hooks)
        return f"{type(self).__name__}([{names}])"

    def reset(self) -> None:
        """
        Reset and (re)register the default set of built-in hooks.
        """
        with self._lock:
            self.hooks.clear()
            for hook in reversed(self.builtin_hooks()):
                self.register(hook)

    def register(self, func: FormatHook, idx: int = 0) -> FormatHook:
        """
        Register a hook with highest priority. Usable as a decorator.

        For example, to render user ids as `UserId(u:42)`:
        ```
        @registry.register
        def format_user_id(value: Any) -> RawText | None:
            return RawText(f"u:{value.n}") if isinstance(value, UserId) else None
        ```
        Registering a hook that is already present moves it to `idx`.
        """
        with self._lock:
            if func in self.hooks:
                del self.hooks[self.hooks.index(func)]
            self.hooks.insert(idx, func)
        return func

    def _remove(self, func: FormatHook) -> None:
        with self._lock:
            if func in self.hooks:
                self.hooks.remove(func)

    @classmethod
    def builtin_hooks(cls) -> tuple[FormatHook, ...]:
        """Return the built-in hooks in priority order."""
        return (
            cls._format_enum,
            cls._format_timestamp,
            cls._format_duration,
            cls._format_pattern,
            cls._format_decimal,
            cls._format_fraction,
            cls._format_synchronized,
            cls._format_path,
        )

    @staticmethod
    def _format_enum(value: Any) -> RawText | None:
        """Enum members render as their member name."""
        if isinstance(value, enum.Enum):
            return RawText(value.name)
        return None

    @staticmethod
    def _format_timestamp(value: Any) -> RawText | None:
        """Dates, times and datetimes render as ISO-8601, keeping sub-second precision."""
        if isinstance(value, (datetime.date, datetime.time)):
            return RawText(value.isoformat())
        return None

    @staticmethod
    def _format_duration(value: Any) -> RawText | None:
        if isinstance(value, datetime.timedelta):
            return RawText(format_duration(value))
        return None

    @staticmethod
    def _format_pattern(value: Any) -> RawText | None:
        """Compiled regular expressions render as `/source/`."""
        if isinstance(value, re.Pattern):
            source = value.pattern
            if isinstance(source, bytes):
                source = source.decode("latin-1")
            return RawText(f"/{source}/")
        return None

    @staticmethod
    def _format_decimal(value: Any) -> RawText | None:
        if isinstance(value, decimal.Decimal):
            return RawText(str(value))
        return None

    @staticmethod
    def _format_fraction(value: Any) -> RawText | None:
        if isinstance(value, fractions.Fraction):
            return RawText(f"{value.numerator}/{value.denominator}")
        return None

    @staticmethod
    def _format_synchronized(value: Any) -> Any:
        """Shared multiprocessing values render as their currently loaded payload."""
        if isinstance(value, multiprocessing.sharedctypes.SynchronizedString):
            return value.value
        if isinstance(value, multiprocessing.sharedctypes.SynchronizedArray):
            return list(value[:])
        if isinstance(value, multiprocessing.sharedctypes.Synchronized):
            return value.value
        return None

    @staticmethod
    def _format_path(value: Any) -> RawText | None:
        """Paths render as a quoted POSIX path on every platform."""
        if isinstance(value, pathlib.PurePath):
            return RawText(json.dumps(value.as_posix(), ensure_ascii=False))
        return None


def format_value(value: Any) -> Any:
    """
    Apply the built-in hooks to `value`.

    Custom hooks can delegate to this for everything they do not handle themselves.

    :return: None, RawText, or a replacement value.
    """
    for hook in FormatHookRegistry.builtin_hooks():
        result = hook(value)
        if result is not None:
            return result
    return None


def format_duration(value: datetime.timedelta) -> str:
    """
    Format a timedelta with short units: `3h15m42s`, `1.5s`, `250ms`, `3µs`, `0s`.

    Durations under one second use the largest unit that keeps the integer part non-zero.
    """
    micros = value // datetime.timedelta(microseconds=1)
    sign = "-" if micros < 0 else ""
    micros = abs(micros)
    if micros == 0:
        return "0s"
    if micros < 1_000:
        return f"{sign}{micros}µs"
    if micros < 1_000_000:
        return f"{sign}{_fixed_point(micros, 3)}ms"

    minutes, second_micros = divmod(micros, 60_000_000)
    hours, minutes = divmod(minutes, 60)
    seconds = _fixed_point(second_micros, 6)
    if hours:
        return f"{sign}{hours}h{minutes}m{seconds}s"
    if minutes:
        return f"{sign}{minutes}m{seconds}s"
    return f"{sign}{seconds}s"


def _fixed_point(n: int, digits: int) -> str:
    whole, frac = divmod(n, 10**digits)
    frac_text = str(frac).rjust(digits, "0").rstrip("0")
    return f"{whole}.{frac_text}" if frac_text else str(whole)


def _is_truncated(value: Any, limit: int) -> bool:
    if len(value) != limit + 1:
        return False
    return any(item is TRUNCATED for item in value)


@final
class HOOKS:
    """A namespace class for optional format hook factories."""

    def __new__(cls, *_a: object, **_k: object) -> NoReturn:
        raise TypeError(f"{cls.__name__} is a namespace, not instantiable")

    @staticmethod
    def max_items(n: int) -> FormatHook:
        """
        Create a hook that truncates sequences, sets and mappings to their first `n` items.

        A truncated container ends with the TRUNCATED marker, rendered as `...`. Set
        elements and mapping keys are taken in rendering order, so the retained items
        do not depend on hashing.

        :param n: Number of items to keep. Zero keeps only the marker.
        :raises ValueError: If `n` is negative.
        """
        if n < 0:
            raise ValueError(f"max_items() requires a non-negative limit, got {n}")

        def _max_items_hook(value: Any) -> Any:
            if isinstance(value, (str, bytes, bytearray)) or intro.is_namedtuple(value):
                return None
            if not isinstance(value, (Mapping, Sequence, Set)):
                return None
            if len(value) <= n or _is_truncated(value, n):
                return None

            if isinstance(value, Mapping):
                kept: dict[Any, Any] = {key: value[key] for key in sort_keys(list(value))[:n]}
                kept[TRUNCATED] = TRUNCATED
                return kept
            if isinstance(value, Set):
                items = [*sort_keys(list(value))[:n], TRUNCATED]
                return frozenset(items) if isinstance(value, frozenset) else set(items)
            items = [*itertools.islice(value, n), TRUNCATED]
            return tuple(items) if isinstance(value, tuple) else items

        return _max_items_hook

    @staticmethod
    def raw_str(*types: type) -> FormatHook:
        """
        Create a hook that renders instances of `types` verbatim through `str()`.

        :raises ValueError: If no types are given.
        """
        if not types:
            raise ValueError("raw_str() requires at least one type")

        def _raw_str_hook(value: Any) -> RawText | None:
            if isinstance(value, types):
                return RawText(str(value))
            return None

        return _raw_str_hook


# End of file: src/mstair/pp/xprint/hook_registry.py
