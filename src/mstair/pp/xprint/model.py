# File: src/mstair/pp/xprint/model.py
"""
Data model for the pretty-printer: value kinds, classified nodes and delimiters.
"""

from __future__ import annotations

from collections.abc import Set
from dataclasses import dataclass
from enum import StrEnum
from functools import total_ordering
from typing import Any, Final, Self, TypeAlias

from mstair.pp.base.types import MISSING, Sentinel


__all__ = [
    "Delimiters",
    "HookOutcome",
    "IdentityKey",
    "Kind",
    "KindT",
    "Node",
    "PrintTypes",
    "RawText",
    "Resolved",
    "TRUNCATED",
    "Truncated",
]

IdentityKey: TypeAlias = tuple[str, int]
"""(tag, address): ("obj", id(value)) for identity-bearing objects, ("ref", target) for references."""


class PrintTypes(StrEnum):
    """Type-annotation policy."""

    DEFAULT = "default"
    ALWAYS = "always"
    NEVER = "never"


class RawText(str):
    """A string emitted verbatim (unquoted) by the renderer."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({super().__repr__()})"


class Truncated(Sentinel):
    """
    Singleton standing in for the items a truncating hook dropped.

    Rendered as `...`. Equal only to itself, so it never collides with a `"..."`
    set element or mapping key.
    """

    __slots__ = ()

    _repr_name = "..."


TRUNCATED: Final[Truncated] = Truncated()


class Delimiters:
    """Punctuation for rendering composite values."""

    open: str
    close: str
    itemsep: str
    kvsep: str

    def __init__(
        self,
        open: str,
        close: str,
        itemsep: str = ", ",
        kvsep: str = ": ",
    ) -> None:
        self.open = open
        self.close = close
        self.itemsep = itemsep
        self.kvsep = kvsep

    def __repr__(self) -> str:
        tup: tuple[str, str, str, str] = (self.open, self.close, self.itemsep, self.kvsep)
        p = f"{tup=}"[4:]  # Skip the "tup=" prefix
        return p

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Delimiters):
            return NotImplemented
        return (self.open, self.close, self.itemsep, self.kvsep) == (
            other.open,
            other.close,
            other.itemsep,
            other.kvsep,
        )

    def __hash__(self) -> int:
        return hash((self.open, self.close, self.itemsep, self.kvsep))

    @classmethod
    def for_node(cls, node: Node) -> Self:
        """
        Return the delimiters for a composite node.

        Tuples use parentheses, sets and mappings and records use braces,
        every other sequence uses brackets.
        """
        if node.kind is Kind.SEQUENCE:
            if isinstance(node.value, tuple):
                return cls("(", ")")
            if isinstance(node.value, Set):
                return cls("{", "}")
            return cls("[", "]")
        if node.kind in (Kind.MAPPING, Kind.RECORD):
            return cls("{", "}")
        raise ValueError(f"No delimiters for {node.kind} node")


@total_ordering
class KindT:
    """A closed semantic family of runtime values, switched on exhaustively by the renderer."""

    _order: int
    """Unique identifier used for sorting and comparison."""

    name: str
    """Name of the kind, used for debugging and display."""

    is_scalar: bool
    """True for kinds rendered as a single token (eligible children of an inline composite)."""

    is_composite: bool
    """True for kinds with children rendered between delimiters."""

    def __init__(self, name: str, order: int, *, scalar: bool = False, composite: bool = False) -> None:
        """
        :param name: Name of the kind.
        :param order: Unique order number for sorting kinds.
        :param scalar: Whether values of this kind render as a single token.
        :param composite: Whether values of this kind have children.
        """
        if scalar and composite:
            raise ValueError(f"Kind {name} cannot be both scalar and composite")
        self.name = name
        self._order = order
        self.is_scalar = scalar
        self.is_composite = composite

    def __lt__(self, other: Self) -> bool:
        return self._order < other._order

    def __eq__(self, other: object) -> bool:
        return isinstance(other, KindT) and self._order == other._order

    def __hash__(self) -> int:
        return hash(self._order)

    def __format__(self, format_spec: str) -> str:
        return format(self.name, format_spec)

    def __repr__(self) -> str:
        return self.name

    def __str__(self) -> str:
        return self.name


class Kind:
    """Static namespace for all defined KindT value families."""

    BOOLEAN = KindT("BOOLEAN", 1, scalar=True)
    SIGNED_INTEGER = KindT("SIGNED_INTEGER", 2, scalar=True)
    UNSIGNED_INTEGER = KindT("UNSIGNED_INTEGER", 3, scalar=True)
    FLOAT = KindT("FLOAT", 4, scalar=True)
    COMPLEX = KindT("COMPLEX", 5, scalar=True)
    TEXT = KindT("TEXT", 6, scalar=True)
    SEQUENCE = KindT("SEQUENCE", 7, composite=True)
    MAPPING = KindT("MAPPING", 8, composite=True)
    RECORD = KindT("RECORD", 9, composite=True)
    FUNCTION_HANDLE = KindT("FUNCTION_HANDLE", 10, scalar=True)
    CHANNEL_HANDLE = KindT("CHANNEL_HANDLE", 11, scalar=True)
    RAW_ADDRESS = KindT("RAW_ADDRESS", 12, scalar=True)
    DYNAMIC_WRAPPER = KindT("DYNAMIC_WRAPPER", 13)
    REFERENCE = KindT("REFERENCE", 14)
    UNKNOWN = KindT("UNKNOWN", 15, scalar=True)

    @classmethod
    def all(cls) -> list[KindT]:
        """
        Return all KindT constants defined on the class, in declaration order.
        """
        return [
            v
            for k, v in vars(cls).items()
            if isinstance(v, KindT) and not k.startswith("_") and k.isupper()
        ]


@dataclass(slots=True)
class Node:
    """
    A runtime value together with its classified kind.

    `payload` is what the renderer reads: the loaded scalar for scalar kinds
    (e.g. the int inside a `c_int`), the target of a reference, the wrapped value
    of a dynamic wrapper, and the value itself for composites.
    """

    kind: KindT
    value: Any
    type_name: str
    payload: Any = None
    identity: IdentityKey | None = None
    nil: bool = False
    bits: int = 64
    declared: Any = MISSING

    @property
    def is_scalar(self) -> bool:
        return self.kind.is_scalar

    @property
    def is_composite(self) -> bool:
        return self.kind.is_composite


@dataclass(slots=True)
class HookOutcome:
    """
    Result of running the format hook chain on one value.

    `value` is the value to render: the original, or the last replacement.
    `raw_text` is set when a hook answered with RawText; `type_name` is then the
    name of the value the hook was answering for.
    """

    value: Any
    raw_text: str | None = None
    type_name: str | None = None
    replaced: bool = False
    verbatim: bool = False
    """True when the input itself was RawText: printed as-is, never annotated."""


@dataclass(slots=True)
class Resolved:
    """A node after hook resolution: what the renderer and the reference tracker walk."""

    node: Node
    outcome: HookOutcome

    @property
    def identity(self) -> IdentityKey | None:
        if self.outcome.raw_text is not None or self.node.nil:
            return None
        return self.node.identity


# End of file: src/mstair/pp/xprint/model.py
