# File: src/mstair/pp/xprint/references.py
"""
Shared and cyclic value detection.

Two passes over the same graph:

1. `scan()` walks every node reachable from the root and flags each identity
   key met more than once. A flagged key is not descended into again, so cycles
   terminate.
2. While rendering, `annotate()` numbers flagged keys in first-print order:
   `#N=` before the first expansion, `#N#` for every later occurrence.

`snapshot()` / `restore()` roll back numbering done by a discarded inline trial.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from mstair.pp.base.types import MISSING
from mstair.pp.xlogging.logger_factory import create_logger
from mstair.pp.xprint.model import IdentityKey, Resolved


__all__ = [
    "PointerRef",
    "ReferenceTracker",
]

LOG = create_logger(__name__)

ResolveFn = Callable[[Any, Any], Resolved]
ChildrenFn = Callable[[Resolved], Sequence[tuple[Any, Any]]]


@dataclass(slots=True)
class PointerRef:
    """Per-render bookkeeping for one shared identity key."""

    number: int = 0
    """1-based sequence number, assigned when the key is first printed. 0 until then."""

    printed: bool = False


class ReferenceTracker:
    """Identity bookkeeping for one top-level render."""

    def __init__(self) -> None:
        self._refs: dict[IdentityKey, PointerRef] = {}
        self._journal: list[IdentityKey] = []
        self._next_number = 1
        self.visited = 0

    def __repr__(self) -> str:
        return f"<{type(self).__name__} shared={len(self._refs)} printed={len(self._journal)}>"

    @property
    def shared_count(self) -> int:
        """Number of identity keys seen more than once by scan()."""
        return len(self._refs)

    def is_shared(self, key: IdentityKey) -> bool:
        return key in self._refs

    def scan(self, root: Any, resolve: ResolveFn, children: ChildrenFn) -> None:
        """
        Flag every identity key reachable from `root` more than once.

        The walk is iterative and visits exactly what the renderer will visit.

        :param root: The value about to be rendered.
        :param resolve: `resolve(value, declared) -> Resolved`, the renderer's own resolution.
        :param children: `children(resolved) -> [(value, declared), ...]`, the renderer's own expansion.
        """
        seen: set[IdentityKey] = set()
        stack: list[tuple[Any, Any]] = [(root, MISSING)]
        while stack:
            value, declared = stack.pop()
            self.visited += 1
            resolved = resolve(value, declared)
            key = resolved.identity
            if key is not None:
                if key in seen:
                    self._refs.setdefault(key, PointerRef())
                    continue
                seen.add(key)
            stack.extend(reversed(children(resolved)))
        LOG.trace("scan: %d nodes, %d shared", self.visited, len(self._refs))

    def annotate(self, key: IdentityKey | None) -> tuple[str, bool]:
        """
        Return the annotation for a node about to be printed.

        :return: (text, expand). `text` is "", "#N=" or "#N#"; `expand` is False
            when the node was already printed and only its back-reference is emitted.
        """
        if key is None:
            return "", True
        ref = self._refs.get(key)
        if ref is None:
            return "", True
        if ref.printed:
            return f"#{ref.number}#", False
        ref.printed = True
        ref.number = self._next_number
        self._next_number += 1
        self._journal.append(key)
        return f"#{ref.number}=", True

    def snapshot(self) -> tuple[int, int]:
        """Capture the numbering state before an inline trial."""
        return len(self._journal), self._next_number

    def restore(self, state: tuple[int, int]) -> None:
        """Undo every first print recorded since `state` was captured."""
        length, next_number = state
        while len(self._journal) > length:
            ref = self._refs[self._journal.pop()]
            ref.printed = False
            ref.number = 0
        self._next_number = next_number


# End of file: src/mstair/pp/xprint/references.py
