# File: src/mstair/pp/xprint/key_order.py
"""
Deterministic ordering of mapping keys and set elements.

Keys fall into comparable families (booleans, integers, floats, text, bytes,
tuples, other value types, identity-bearing objects, None). Inside a family
the order is strict; across families `compare_keys()` reports equality and
`sort_keys()` places the groups in a fixed family rank.
"""

from __future__ import annotations

import decimal
import enum
import fractions
import functools
import math
from collections.abc import Iterable
from typing import Any

from mstair.pp.xprint.model import RawText, Truncated


__all__ = [
    "KeyFamily",
    "compare_keys",
    "key_family",
    "sort_keys",
]


class KeyFamily(enum.IntEnum):
    """Comparable key families, in the order sort_keys() places them."""

    BOOLEAN = 1
    INTEGER = 2
    FLOAT = 3
    TEXT = 4
    BYTES = 5
    TUPLE = 6
    VALUE = 7
    IDENTITY = 8
    NONE = 9
    MARKER = 10


def key_family(key: Any) -> KeyFamily:
    """Return the comparable family of a mapping key or set element."""
    if isinstance(key, (RawText, Truncated)):
        return KeyFamily.MARKER
    if key is None:
        return KeyFamily.NONE
    if isinstance(key, bool):
        return KeyFamily.BOOLEAN
    if isinstance(key, int):
        return KeyFamily.INTEGER
    if isinstance(key, (float, decimal.Decimal, fractions.Fraction)):
        return KeyFamily.FLOAT
    if isinstance(key, (str, enum.Enum)):
        return KeyFamily.TEXT
    if isinstance(key, (bytes, bytearray)):
        return KeyFamily.BYTES
    if isinstance(key, tuple):
        return KeyFamily.TUPLE
    if type(key).__hash__ is object.__hash__:
        return KeyFamily.IDENTITY
    return KeyFamily.VALUE


def compare_keys(a: Any, b: Any) -> int:
    """
    Three-way comparison of two keys of the same family.

    :return: Negative, zero or positive. Keys of different families compare equal.
    """
    family = key_family(a)
    if family is not key_family(b):
        return 0
    return _compare_within(family, a, b)


def sort_keys(keys: Iterable[Any]) -> list[Any]:
    """
    Return `keys` in rendering order.

    Groups follow the KeyFamily rank and each group is sorted stably, so
    truncation markers always come last.
    """
    groups: dict[KeyFamily, list[Any]] = {}
    for key in keys:
        groups.setdefault(key_family(key), []).append(key)

    ordered: list[Any] = []
    for family in sorted(groups):
        members = groups[family]
        if len(members) > 1:
            members.sort(key=functools.cmp_to_key(compare_keys))
        ordered.extend(members)
    return ordered


def _cmp(a: Any, b: Any) -> int:
    return (a > b) - (a < b)


def _is_nan(value: Any) -> bool:
    if isinstance(value, float):
        return math.isnan(value)
    if isinstance(value, decimal.Decimal):
        return value.is_nan()
    return False


def _compare_ranked(a: Any, b: Any) -> int:
    """Total order used inside tuples: family rank first, then the in-family order."""
    fa, fb = key_family(a), key_family(b)
    if fa is not fb:
        return _cmp(fa, fb)
    return _compare_within(fa, a, b)


def _compare_within(family: KeyFamily, a: Any, b: Any) -> int:
    if family in (KeyFamily.BOOLEAN, KeyFamily.INTEGER, KeyFamily.BYTES):
        return _cmp(a, b)
    if family is KeyFamily.FLOAT:
        nan_a, nan_b = _is_nan(a), _is_nan(b)
        if nan_a or nan_b:
            return _cmp(nan_a, nan_b)
        try:
            return _cmp(a, b)
        except TypeError:
            return 0
    if family is KeyFamily.TEXT:
        return _cmp(_text_of(a), _text_of(b))
    if family is KeyFamily.TUPLE:
        for x, y in zip(a, b, strict=False):
            if c := _compare_ranked(x, y):
                return c
        return _cmp(len(a), len(b))
    if family is KeyFamily.VALUE:
        return _cmp(f"{type(a).__qualname__}:{a!r}", f"{type(b).__qualname__}:{b!r}")
    if family is KeyFamily.IDENTITY:
        return _cmp(id(a), id(b))
    return 0


def _text_of(key: str | enum.Enum) -> str:
    return key if isinstance(key, str) else key.name


# End of file: src/mstair/pp/xprint/key_order.py
