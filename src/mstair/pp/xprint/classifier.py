# File: src/mstair/pp/xprint/classifier.py
"""
Maps runtime values to the closed set of value kinds.

`classify()` is total: it never raises and falls back to Kind.UNKNOWN for
anything it does not recognize. It has no side effects beyond reading the value.
"""

from __future__ import annotations

import array
import asyncio
import ctypes
import dataclasses
import functools
import inspect
import multiprocessing.connection
import multiprocessing.queues
import queue
import weakref
from collections.abc import Mapping, Sequence, Set
from types import MappingProxyType, ModuleType, NoneType
from typing import Any, Final

from mstair.pp.base.types import MISSING
from mstair.pp.xlogging.logger_factory import create_logger
from mstair.pp.xprint import introspection as intro
from mstair.pp.xprint.model import Kind, KindT, Node


__all__ = ["classify"]

LOG = create_logger(__name__)

CHANNEL_TYPES: Final[tuple[type, ...]] = (
    queue.Queue,
    queue.SimpleQueue,
    asyncio.Queue,
    multiprocessing.queues.Queue,
    multiprocessing.queues.SimpleQueue,
    multiprocessing.connection.Connection,
)


def classify(value: Any, declared: Any = MISSING) -> Node:
    """
    Classify a value, optionally in the context of the type declared for its slot.

    :param value: Any runtime value.
    :param declared: The annotation of the field, element or key holding the value.
    :return: A Node. Unsupported values map to Kind.UNKNOWN.
    """
    try:
        return _classify(value, declared)
    except Exception as e:
        LOG.debug("classify(%s) failed: %s: %s", type(value).__name__, type(e).__name__, e)
        return Node(Kind.UNKNOWN, value, _runtime_type_name(value), payload=value)


def _runtime_type_name(value: Any) -> str:
    return intro.class_display_name(type(value))


def _classify(value: Any, declared: Any) -> Node:
    declared, dynamic = intro.normalize_declared(declared)

    if value is None:
        return _classify_nil(declared, dynamic)
    if dynamic:
        return Node(
            Kind.DYNAMIC_WRAPPER, value, intro.type_display_name(declared), payload=value, declared=declared
        )

    if (code := intro.ctype_code(declared)) is not None and isinstance(value, (int, float, bytes, str)):
        node = _classify_ctype(value, value, code, declared.__name__)
        if node is not None:
            node.declared = declared
            return node

    type_name = _runtime_type_name(value)
    origin = intro.declared_origin(declared)
    if origin is not None and type(value) is origin:
        type_name = intro.type_display_name(declared)

    node = _classify_runtime(value, type_name)
    node.declared = declared
    return node


def _classify_nil(declared: Any, dynamic: bool) -> Node:
    """Classify None: a nil wrapper unless the slot declares a concrete type."""
    if dynamic or declared is MISSING or declared is NoneType:
        name = intro.type_display_name(declared) if dynamic else "None"
        return Node(Kind.DYNAMIC_WRAPPER, None, name, nil=True, declared=declared)

    name = intro.type_display_name(declared)
    origin = intro.declared_origin(declared)
    kind: KindT = Kind.REFERENCE
    if origin is None or issubclass(origin, (str, bytes, bytearray)):
        pass
    elif issubclass(origin, Mapping):
        kind = Kind.MAPPING
    elif issubclass(origin, (Sequence, Set, ctypes.Array)) and not hasattr(origin, "_fields"):
        kind = Kind.SEQUENCE
    return Node(kind, None, name, nil=True, declared=declared)


def _classify_ctype(value: Any, payload: Any, code: str, type_name: str) -> Node | None:
    """Classify a ctypes simple value (or a Python value stored in a ctypes-declared field)."""
    if code == "?":
        return Node(Kind.BOOLEAN, value, type_name, payload=bool(payload))
    if code in intro.SIGNED_CODES:
        return Node(Kind.SIGNED_INTEGER, value, type_name, payload=payload)
    if code in intro.UNSIGNED_CODES:
        return Node(Kind.UNSIGNED_INTEGER, value, type_name, payload=payload)
    if code in intro.FLOAT_CODES:
        return Node(Kind.FLOAT, value, type_name, payload=payload, bits=32 if code == "f" else 64)
    if code == "P":
        address = payload or 0
        return Node(Kind.RAW_ADDRESS, value, type_name, payload=address, nil=address == 0)
    if code in intro.TEXT_CODES:
        return Node(Kind.TEXT, value, type_name, payload=payload, nil=payload is None)
    return None


def _classify_runtime(value: Any, type_name: str) -> Node:
    if isinstance(value, bool):
        return Node(Kind.BOOLEAN, value, type_name, payload=value)
    if isinstance(value, int):
        return Node(Kind.SIGNED_INTEGER, value, type_name, payload=value)
    if isinstance(value, float):
        return Node(Kind.FLOAT, value, type_name, payload=value)
    if isinstance(value, complex):
        return Node(Kind.COMPLEX, value, type_name, payload=value)
    if isinstance(value, (str, bytes, bytearray)):
        return Node(Kind.TEXT, value, type_name, payload=value)

    if isinstance(value, ctypes._SimpleCData):
        code = intro.ctype_code(type(value))
        node = _classify_ctype(value, value.value, code, type_name) if code else None
        return node or Node(Kind.UNKNOWN, value, type_name, payload=value)
    if isinstance(value, ctypes._Pointer):
        if not value:
            return Node(Kind.REFERENCE, value, type_name, nil=True)
        target = value.contents
        return Node(Kind.REFERENCE, value, type_name, payload=target, identity=("ref", ctypes.addressof(target)))
    if isinstance(value, weakref.ReferenceType):
        target = value()
        if target is None:
            return Node(Kind.REFERENCE, value, type_name, nil=True)
        return Node(Kind.REFERENCE, value, type_name, payload=target, identity=("ref", id(target)))

    if isinstance(value, ctypes._CFuncPtr) or inspect.isroutine(value) or isinstance(value, functools.partial):
        address = intro.handle_address(value)
        return Node(Kind.FUNCTION_HANDLE, value, type_name, payload=address, nil=address == 0)
    if isinstance(value, CHANNEL_TYPES):
        return Node(Kind.CHANNEL_HANDLE, value, type_name, payload=intro.handle_address(value))

    if isinstance(value, (type, ModuleType, range)):
        return Node(Kind.UNKNOWN, value, type_name, payload=value)

    if isinstance(value, Mapping):
        identity = None if isinstance(value, MappingProxyType) else ("obj", id(value))
        return Node(Kind.MAPPING, value, type_name, payload=value, identity=identity)
    if intro.is_namedtuple(value) or isinstance(value, (ctypes.Structure, ctypes.Union)):
        return Node(Kind.RECORD, value, type_name, payload=value)
    if isinstance(value, (Sequence, Set, ctypes.Array, array.array)):
        identity = ("obj", id(value)) if intro.is_identity_sequence(value) else None
        return Node(Kind.SEQUENCE, value, type_name, payload=value, identity=identity)

    if (
        dataclasses.is_dataclass(value)
        or isinstance(value, BaseException)
        or hasattr(value, "__dict__")
        or intro.has_slots(type(value))
    ):
        return Node(Kind.RECORD, value, type_name, payload=value, identity=("obj", id(value)))

    return Node(Kind.UNKNOWN, value, type_name, payload=value)


# End of file: src/mstair/pp/xprint/classifier.py
