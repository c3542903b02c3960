# File: src/mstair/pp/xprint/introspection.py
"""
Low-level reading of runtime values: record fields, declared slot types,
reference targets, addresses and ctypes type codes.

Only the classifier and the hook registry call into this module.
"""

from __future__ import annotations

import array
import ctypes
import dataclasses
import functools
import re
import typing
from collections.abc import Mapping, Sequence, Set
from dataclasses import dataclass
from types import NoneType, UnionType
from typing import Any, Final

from mstair.pp.base.types import MISSING
from mstair.pp.xlogging.logger_factory import create_logger
from mstair.pp.xprint.model import RawText


__all__ = [
    "FieldSlot",
    "class_display_name",
    "ctype_code",
    "declared_origin",
    "element_declarations",
    "handle_address",
    "mapping_declarations",
    "normalize_declared",
    "record_fields",
    "type_display_name",
]

LOG = create_logger(__name__)

SIGNED_CODES: Final[frozenset[str]] = frozenset("bhilq")
UNSIGNED_CODES: Final[frozenset[str]] = frozenset("BHILQ")
FLOAT_CODES: Final[frozenset[str]] = frozenset("fdg")
TEXT_CODES: Final[frozenset[str]] = frozenset("czuZ")

_MODULE_QUALIFIER_RX: Final[re.Pattern[str]] = re.compile(r"\b(?:[A-Za-z_]\w*\.)+(?=[A-Za-z_])")


@dataclass(frozen=True, slots=True)
class FieldSlot:
    """One named field of a record, with the type declared for it (MISSING when undeclared)."""

    name: str
    value: Any
    declared: Any = MISSING

    @property
    def is_private(self) -> bool:
        return self.name.startswith("_")


# ---------- Names ----------


def class_display_name(cls: type) -> str:
    """Return the qualified class name without any `<locals>` scope."""
    return cls.__qualname__.rsplit("<locals>.", 1)[-1]


def type_display_name(tp: Any) -> str:
    """
    Return a short display name for a type or a typing construct.

    Module qualifiers are dropped: `list[mod.Point]` becomes `list[Point]`.
    """
    if isinstance(tp, type) and typing.get_origin(tp) is None:
        return class_display_name(tp)
    text = repr(tp).replace("<locals>.", "")
    return _MODULE_QUALIFIER_RX.sub("", text)


# ---------- Declarations ----------


def normalize_declared(declared: Any) -> tuple[Any, bool]:
    """
    Reduce a declared slot type to the type that governs rendering.

    :return: (declared, dynamic). `dynamic` is True for `Any`, `object` and unions of
        more than one non-None member. `X | None` reduces to `X`. Unresolved string
        annotations reduce to MISSING.
    """
    if declared is MISSING or isinstance(declared, (str, typing.ForwardRef)):
        return MISSING, False
    if declared is Any or declared is object:
        return declared, True
    if isinstance(declared, typing.TypeAliasType):
        return normalize_declared(declared.__value__)

    origin = typing.get_origin(declared)
    if origin is typing.Annotated:
        return normalize_declared(typing.get_args(declared)[0])
    if origin is typing.Union or origin is UnionType:
        members = [arg for arg in typing.get_args(declared) if arg is not NoneType]
        if len(members) == 1:
            return normalize_declared(members[0])
        return declared, True
    return declared, False


def declared_origin(declared: Any) -> type | None:
    """Return the runtime class of a declaration (`list` for `list[str]`), or None."""
    if declared is MISSING:
        return None
    origin = typing.get_origin(declared) or declared
    return origin if isinstance(origin, type) else None


def element_declarations(declared: Any, count: int) -> list[Any]:
    """Return the declared type of each of `count` elements of a declared sequence."""
    args = typing.get_args(declared) if declared is not MISSING else ()
    origin = declared_origin(declared)
    if origin is not None and issubclass(origin, ctypes.Array):
        return [getattr(origin, "_type_", MISSING)] * count
    if not args:
        return [MISSING] * count
    if origin is tuple and not (len(args) == 2 and args[1] is Ellipsis):
        return [*args[:count], *([MISSING] * (count - len(args)))]
    return [args[0]] * count


def mapping_declarations(declared: Any) -> tuple[Any, Any]:
    """Return the declared (key, value) types of a declared mapping."""
    args = typing.get_args(declared) if declared is not MISSING else ()
    if len(args) == 2:
        return args[0], args[1]
    return MISSING, MISSING


@functools.lru_cache(maxsize=512)
def declared_hints(cls: type) -> Mapping[str, Any]:
    """
    Return the declared field types of a class.

    Falls back to the raw class annotations when forward references cannot be
    resolved; unresolved string entries are later ignored by normalize_declared().
    """
    try:
        return typing.get_type_hints(cls)
    except Exception as e:
        LOG.debug("get_type_hints(%s) failed, using raw annotations: %s", cls.__qualname__, e)
    hints: dict[str, Any] = {}
    for klass in reversed(cls.__mro__):
        hints.update(vars(klass).get("__annotations__", {}))
    return hints


# ---------- ctypes ----------


def ctype_code(tp: Any) -> str | None:
    """Return the ctypes type code ("i", "Q", "f", "P", ...) of a simple ctypes class, else None."""
    if isinstance(tp, type) and issubclass(tp, ctypes._SimpleCData):
        code = getattr(tp, "_type_", None)
        return code if isinstance(code, str) else None
    return None


def _ctypes_fields(value: ctypes.Structure | ctypes.Union) -> list[FieldSlot]:
    slots: list[FieldSlot] = []
    for klass in reversed(type(value).__mro__):
        for entry in vars(klass).get("_fields_", ()):
            name, ctype = entry[0], entry[1]
            slots.append(FieldSlot(name, getattr(value, name), ctype))
    return slots


# ---------- Records ----------


def is_namedtuple(value: Any) -> bool:
    return isinstance(value, tuple) and isinstance(getattr(type(value), "_fields", None), tuple)


def slot_names(cls: type) -> list[str]:
    """Return the instance slot names declared along the MRO, base classes first."""
    names: list[str] = []
    for klass in reversed(cls.__mro__):
        slots = vars(klass).get("__slots__", ())
        for name in [slots] if isinstance(slots, str) else slots:
            if name in ("__dict__", "__weakref__"):
                continue
            if name.startswith("__") and not name.endswith("__"):
                name = f"_{klass.__name__.lstrip('_')}{name}"
            if name not in names:
                names.append(name)
    return names


def has_slots(cls: type) -> bool:
    return any("__slots__" in vars(klass) for klass in cls.__mro__ if klass is not object)


def record_fields(value: Any) -> list[FieldSlot]:
    """
    Return the fields of a record value in declaration order.

    Handles dataclasses, named tuples, ctypes structures and unions, exceptions
    (``args`` first) and plain objects (``__slots__`` then ``__dict__``).
    Uninitialized fields are skipped with a warning. A field whose read raises
    anything else is kept, with an `<unrenderable ...>` RawText as its value.
    """
    if isinstance(value, (ctypes.Structure, ctypes.Union)):
        return _ctypes_fields(value)

    cls = type(value)
    hints = declared_hints(cls)

    if is_namedtuple(value):
        return [
            FieldSlot(name, item, hints.get(name, MISSING))
            for name, item in zip(cls._fields, value, strict=False)
        ]

    slots: list[FieldSlot] = []
    if dataclasses.is_dataclass(value):
        for field in dataclasses.fields(value):
            item = _read_field(value, field.name)
            if item is not MISSING:
                slots.append(FieldSlot(field.name, item, hints.get(field.name, MISSING)))
        return slots

    if isinstance(value, BaseException):
        slots.append(FieldSlot("args", value.args))

    seen: set[str] = set()
    for name in slot_names(cls):
        item = _read_field(value, name)
        if item is MISSING:
            continue
        seen.add(name)
        slots.append(FieldSlot(name, item, hints.get(name, MISSING)))

    try:
        instance_dict = getattr(value, "__dict__", None)
    except Exception as e:
        LOG.warning("Cannot read %s.__dict__: %s: %s", cls.__qualname__, type(e).__name__, e)
        instance_dict = None
    if isinstance(instance_dict, Mapping):
        for name, item in instance_dict.items():
            if isinstance(name, str) and name not in seen:
                slots.append(FieldSlot(name, item, hints.get(name, MISSING)))
    return slots


def _read_field(value: Any, name: str) -> Any:
    """Read one field; MISSING when it is unset, a placeholder RawText when the read fails."""
    owner = type(value).__qualname__
    try:
        return getattr(value, name)
    except AttributeError:
        LOG.warning("Skipping uninitialized field: %s.%s", owner, name)
        return MISSING
    except Exception as e:
        LOG.warning("Reading %s.%s raised %s: %s", owner, name, type(e).__name__, e)
        return RawText(f"<unrenderable {owner}.{name}: {type(e).__name__}: {e}>")


# ---------- Handles ----------


def handle_address(value: Any) -> int:
    """Return the address of a function or channel handle."""
    if isinstance(value, ctypes._CFuncPtr):
        return ctypes.cast(value, ctypes.c_void_p).value or 0
    return id(value)


def is_identity_sequence(value: Any) -> bool:
    """True for sequences whose backing storage can be shared (not tuples, frozensets or ctypes arrays)."""
    return isinstance(value, (Sequence, Set, array.array)) and not isinstance(
        value, (tuple, frozenset, ctypes.Array, str, bytes)
    )


# End of file: src/mstair/pp/xprint/introspection.py
