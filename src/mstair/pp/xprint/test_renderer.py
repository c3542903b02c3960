# File: src/mstair/pp/xprint/test_renderer.py
"""
Unit tests for mstair.pp.xprint.renderer.

Covers:
- Scalar formatting: integers, floats, complex numbers, text, bytes, addresses
- Composite delimiters, key order and empty containers
- Type annotation policies and nil values in declared slots
- Shared and cyclic references
- Hook integration: replacements, RawText, truncation
- Records: dataclasses, named tuples, exceptions, ctypes structures and arrays
- Unknown values and records with failing fields
- Deterministic repeated output
"""

from __future__ import annotations

import ctypes
import datetime
import enum
import io
import re
import weakref
from dataclasses import dataclass
from typing import Any, NamedTuple

import pytest

from mstair.pp.xprint.hook_registry import HOOKS, FormatHookRegistry
from mstair.pp.xprint.model import Kind, Node, PrintTypes, RawText
from mstair.pp.xprint.printer import Printer
from mstair.pp.xprint.printer_config import PrinterConfig
from mstair.pp.xprint.renderer import ADDRESS_DIGITS, Renderer


# ---------- Fixtures ----------


@dataclass
class Point:
    X: int
    Y: int
    Z: int


@dataclass
class Tags:
    names: list[str] | None = None


@dataclass(eq=False)
class Node2:
    name: str
    next: Node2 | None = None


@dataclass
class Secret:
    name: str
    _token: str


class Pair(NamedTuple):
    x: int
    y: int


class Packet(ctypes.Structure):
    _fields_ = [("a", ctypes.c_uint8), ("b", ctypes.c_float)]


class Color(enum.Enum):
    RED = 1


class Celsius:
    def __init__(self, degrees: float) -> None:
        self.degrees = degrees


class UserId:
    def __init__(self, n: int) -> None:
        self.n = n


class BadStr:
    def __str__(self) -> str:
        raise ValueError("boom")


class Sensor:
    """Slotted record whose `value` slot raises on read."""

    __slots__ = ("name", "value")

    def __init__(self) -> None:
        self.name = "t1"
        self.value = 1

    def __getattribute__(self, name: str) -> Any:
        if name == "value":
            raise RuntimeError("guarded")
        return object.__getattribute__(self, name)


@dataclass
class Meter:
    reading: int


class FaultyMeter(Meter):
    @property
    def reading(self) -> int:  # type: ignore[override]
        raise RuntimeError("sensor offline")

    @reading.setter
    def reading(self, _value: int) -> None:
        pass


@pytest.fixture
def printer() -> Printer:
    return Printer()


# ---------- Scalars ----------


@pytest.mark.unit
@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (42, "42"),
        (1234567, "1_234_567"),
        (-1234, "-1_234"),
        (True, "true"),
        (False, "false"),
        (None, "nil"),
        (1.5, "1.5"),
        (2.0, "2.0"),
        (-0.0, "-0.0"),
        (1e-7, "0.0000001"),
        (1e16, "10_000_000_000_000_000.0"),
        (float("inf"), "inf"),
        (complex(1, -2), "1.0-2.0i"),
        (complex(0, 1), "0.0+1.0i"),
        ("a\n", '"a\\n"'),
        ("é", '"é"'),
        (b"ab", "b'ab'"),
    ],
)
def test_scalars(printer: Printer, value: Any, expected: str) -> None:
    assert printer.render(value) == expected


@pytest.mark.unit
def test_single_precision_floats_use_shortest_digits(printer: Printer) -> None:
    assert printer.render(ctypes.c_float(0.1)) == "0.1"


@pytest.mark.unit
def test_escape_unicode() -> None:
    assert Printer(escape_unicode=True).render("é") == '"\\u00e9"'


@pytest.mark.unit
def test_thousands_separator_options() -> None:
    assert Printer(thousands_separator=None).render(1234567) == "1234567"
    assert Printer(thousands_separator=",").render(1234567) == "1,234,567"


@pytest.mark.unit
def test_literals() -> None:
    assert Printer(literals=("None", "True", "False")).render([None, True, False]) == "list[None, True, False]"


@pytest.mark.unit
def test_addresses(printer: Printer) -> None:
    assert printer.render(ctypes.c_void_p(0)) == "nil"
    assert printer.render(ctypes.c_void_p(0x1234)) == "0x" + "1234".rjust(ADDRESS_DIGITS, "0")
    assert printer.render(len) == f"builtin_function_or_method(0x{id(len):0{ADDRESS_DIGITS}x})"


# ---------- Composites ----------


@pytest.mark.unit
def test_sequences(printer: Printer) -> None:
    assert printer.render([1, 2, 3]) == "list[1, 2, 3]"
    assert printer.render((1,)) == "tuple(1,)"
    assert printer.render([]) == "list[]"
    assert printer.render({3, 1, 2}) == "set{1, 2, 3}"
    assert printer.render({2, "a", 1}) == 'set{1, 2, "a"}'


@pytest.mark.unit
def test_mapping_keys_sorted(printer: Printer) -> None:
    assert printer.render({"b": 2, "a": 1, "c": 3}) == 'dict{"a": 1, "b": 2, "c": 3}'
    assert printer.render({"b": 2, "a": 1}) == printer.render({"a": 1, "b": 2})


@pytest.mark.unit
def test_block_form_with_label_and_prefix() -> None:
    text = Printer(line_prefix="| ", max_inline_column=23).render(Point(1, 2, 3), "p")
    assert text == "| [p]\n| Point{\n|   X: 1,\n|   Y: 2,\n|   Z: 3,\n| }"


@pytest.mark.unit
def test_records(printer: Printer) -> None:
    assert printer.render(Pair(1, 2)) == "Pair{x: 1, y: 2}"
    assert printer.render(Packet(1, 0.1)) == "Packet{a: 1, b: 0.1}"
    assert printer.render((ctypes.c_int * 3)(1, 2, 3)) == "c_int_Array_3[1, 2, 3]"
    assert printer.render(ValueError("x")) == 'ValueError{\n  args: tuple("x",),\n}'


@pytest.mark.unit
def test_hide_private_fields() -> None:
    assert Printer().render(Secret("n", "t")) == 'Secret{name: "n", _token: "t"}'
    assert Printer(hide_private_fields=True).render(Secret("n", "t")) == 'Secret{name: "n"}'


# ---------- Type annotations ----------


@pytest.mark.unit
def test_nil_in_declared_slot() -> None:
    assert Printer().render(Tags()) == "Tags{names: list[str](nil)}"
    assert Printer(print_types=PrintTypes.NEVER).render(Tags()) == "{names: nil}"


@pytest.mark.unit
def test_print_types_always() -> None:
    printer = Printer(print_types="always")
    assert printer.render(42) == "int(42)"
    assert printer.render([1]) == "list[int(1)]"


@pytest.mark.unit
def test_print_types_never() -> None:
    printer = Printer(print_types=PrintTypes.NEVER)
    assert printer.render([1, 2]) == "[1, 2]"
    assert printer.render({"a": 1}) == '{"a": 1}'
    assert printer.render(Point(1, 2, 3)) == "{X: 1, Y: 2, Z: 3}"


# ---------- References ----------


@pytest.mark.unit
def test_cycle(printer: Printer) -> None:
    a = Node2("A")
    b = Node2("B", a)
    a.next = b
    expected = '#1=Node2{\n  name: "A",\n  next: Node2{\n    name: "B",\n    next: #1#,\n  },\n}'
    assert printer.render(a) == expected


@pytest.mark.unit
def test_shared_value(printer: Printer) -> None:
    inner = [1, 2]
    text = printer.render({"x": inner, "y": inner})
    assert text == 'dict{\n  "x": #1=list[1, 2],\n  "y": #1#,\n}'


@pytest.mark.unit
def test_weak_reference(printer: Printer) -> None:
    target = Point(1, 2, 3)
    assert printer.render(weakref.ref(target)) == "&Point{X: 1, Y: 2, Z: 3}"


@pytest.mark.unit
def test_pointer_to_pointer_is_annotated(printer: Printer) -> None:
    cell = ctypes.c_int(5)
    inner = ctypes.pointer(cell)
    outer = ctypes.pointer(inner)
    assert printer.render(outer) == "LP_LP_c_int(&&5)"


# ---------- Hooks ----------


@pytest.mark.unit
def test_hook_replacement_is_annotated() -> None:
    hooks = FormatHookRegistry()
    hooks.register(lambda v: v.degrees if isinstance(v, Celsius) else None)
    assert Printer(format_hook=hooks).render(Celsius(21.5)) == "float(21.5)"


@pytest.mark.unit
def test_hook_raw_text() -> None:
    hooks = FormatHookRegistry()
    hooks.register(lambda v: RawText(f"u:{v.n}") if isinstance(v, UserId) else None)
    assert Printer(format_hook=hooks).render(UserId(42)) == "UserId(u:42)"
    assert Printer(format_hook=hooks, print_types="never").render(UserId(42)) == "u:42"


@pytest.mark.unit
def test_builtin_hook_output(printer: Printer) -> None:
    assert printer.render(Color.RED) == "Color(RED)"
    assert printer.render([Color.RED]) == "list[Color(RED)]"


@pytest.mark.unit
def test_raw_text_input_is_verbatim(printer: Printer) -> None:
    assert printer.render(RawText("abc")) == "abc"
    assert printer.render([RawText("x")]) == "list[x]"


@pytest.mark.unit
def test_no_format_hook() -> None:
    value = re.compile("a")
    assert Printer().render(value) == "Pattern(/a/)"
    assert Printer(format_hook=None).render(value) == "Pattern<re.compile('a')>"


@pytest.mark.unit
def test_duration_hook_output(printer: Printer) -> None:
    assert printer.render(datetime.timedelta(hours=1)) == "timedelta(1h0m0s)"


@pytest.mark.unit
def test_max_items_truncation() -> None:
    hooks = FormatHookRegistry()
    hooks.register(HOOKS.max_items(2))
    printer = Printer(format_hook=hooks)
    assert printer.render(list(range(5))) == "list[0, 1, ...]"
    assert printer.render({"c": 3, "a": 1, "b": 2}) == 'dict{"a": 1, "b": 2, ...: ...}'
    assert printer.render([1, 2]) == "list[1, 2]"


@pytest.mark.unit
def test_max_items_keeps_ellipsis_text_data() -> None:
    hooks = FormatHookRegistry()
    hooks.register(HOOKS.max_items(1))
    printer = Printer(format_hook=hooks)
    assert printer.render({"...", "a", "b"}) == 'set{"...", ...}'
    assert printer.render({"...": 1, "a": 2, "b": 3}) == 'dict{"...": 1, ...: ...}'


# ---------- Unknown values ----------


@pytest.mark.unit
def test_unknown_values(printer: Printer) -> None:
    assert printer.render(range(3)) == "range<range(0, 3)>"
    assert printer.render(int) == "<type:int>"


@pytest.mark.unit
def test_unrenderable_value() -> None:
    renderer = Renderer(PrinterConfig())
    node = Node(Kind.UNKNOWN, BadStr(), "BadStr")
    assert renderer.format_unknown(node) == "<unrenderable BadStr: ValueError: boom>"


@pytest.mark.unit
def test_raising_slot_renders_placeholder(printer: Printer) -> None:
    text = printer.render([Sensor()])
    assert "Sensor{" in text
    assert 'name: "t1"' in text
    assert "value: <unrenderable Sensor.value: RuntimeError: guarded>" in text
    printer.print(Sensor(), file=io.StringIO())


@pytest.mark.unit
def test_raising_dataclass_field_renders_placeholder(printer: Printer) -> None:
    text = printer.render({"m": FaultyMeter(5)})
    assert "FaultyMeter{" in text
    assert "reading: <unrenderable FaultyMeter.reading: RuntimeError: sensor offline>" in text


# ---------- Determinism ----------


@pytest.mark.unit
def test_repeated_renders_are_identical(printer: Printer) -> None:
    shared = {"z": 1.5}
    value = {"k": [Point(1, 2, 3), shared, shared], "s": {3, 1}, 7: (None, b"x")}
    assert printer.render(value) == printer.render(value)


@pytest.mark.unit
def test_huge_integer_falls_back_to_hex() -> None:
    renderer = Renderer(PrinterConfig())
    huge = 1 << 70000
    assert renderer.format_int(huge) == hex(huge)


# End of file: src/mstair/pp/xprint/test_renderer.py
