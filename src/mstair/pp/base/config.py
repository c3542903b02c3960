# File: src/mstair/pp/base/config.py
"""
Execution context flags read by the logging stack.

Exports:
- analysis_mode_context(): silence CoreLogger output on the current thread.
- in_analysis_mode(): check if analysis mode is active.
- in_desktop_mode(): check or override whether log output goes to an interactive terminal.

Overrides are thread-local. The log formatter uses in_desktop_mode() to decide
whether to emit color codes; NO_COLOR disables them, FORCE_COLOR enables them.
"""

from __future__ import annotations

import os
import sys
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass


_tls = threading.local()


@dataclass
class TLSAttrs:
    """Thread-local context flags."""

    in_code_analyzer: bool = False
    in_desktop_mode_override: bool | None = None


def _get_tls() -> TLSAttrs:
    try:
        return _tls.state
    except AttributeError:
        _tls.state = TLSAttrs()
        return _tls.state


@contextmanager
def analysis_mode_context() -> Iterator[None]:
    """
    Enable analysis mode for the duration of the block.

    Nested contexts restore the previous value on exit.
    """
    tls = _get_tls()
    previous_state = tls.in_code_analyzer
    tls.in_code_analyzer = True
    try:
        yield
    finally:
        tls.in_code_analyzer = previous_state


def in_analysis_mode() -> bool:
    """Return True if analysis mode is active on this thread."""
    return _get_tls().in_code_analyzer


def in_desktop_mode(
    *,
    unset_override: bool = False,
    override: bool | None = None,
) -> bool:
    """
    Determine whether log output should carry terminal color codes.

    Rules, first match wins:
      - An explicit override (thread-local).
      - NO_COLOR set to anything: False. FORCE_COLOR set to anything: True.
      - Analysis mode: False.
      - Otherwise whether stderr is a terminal.

    :param unset_override: Clear a previous override for this thread first.
    :param override: Set the override for this thread and return it.
    """
    tls = _get_tls()
    if unset_override:
        tls.in_desktop_mode_override = None
    if override is not None:
        tls.in_desktop_mode_override = override
        return override
    if tls.in_desktop_mode_override is not None:
        return tls.in_desktop_mode_override

    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("FORCE_COLOR"):
        return True
    if in_analysis_mode():
        return False
    stream = sys.stderr
    return bool(stream is not None and hasattr(stream, "isatty") and stream.isatty())


# End of file: src/mstair/pp/base/config.py
