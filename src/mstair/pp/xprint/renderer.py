# File: src/mstair/pp/xprint/renderer.py
"""
Depth-first rendering of one value into text.

A Renderer lives for a single top-level render. It resolves every node
(classification, then the format hook), lets the ReferenceTracker pre-scan the
graph, and then emits text, asking the LayoutEngine whether each composite
fits on one line.

Rendering rules, by kind:

- booleans, integers (grouped by the thousands separator), floats in positional
  notation, complex numbers as `a+bi`, JSON-quoted text, `b'...'` bytes
- sequences, mappings and records between delimiters, one entry per line in
  block form, `, `-separated in inline form; mapping keys and set elements in
  KeyOrderer order
- handles and raw addresses as fixed-width hex, references as `&target`
- anything unrecognized as `TypeName<str(value)>`
"""

from __future__ import annotations

import ctypes
import decimal
import json
import math
import re
import struct
from collections.abc import Set
from typing import TYPE_CHECKING, Any, Final

from mstair.pp.base.types import MISSING
from mstair.pp.xlogging.logger_factory import create_logger
from mstair.pp.xprint import introspection as intro
from mstair.pp.xprint.classifier import classify
from mstair.pp.xprint.hook_registry import resolve_hook
from mstair.pp.xprint.key_order import sort_keys
from mstair.pp.xprint.layout import LayoutEngine
from mstair.pp.xprint.model import Delimiters, HookOutcome, Kind, Node, PrintTypes, Resolved
from mstair.pp.xprint.references import ReferenceTracker


if TYPE_CHECKING:
    from mstair.pp.xprint.printer_config import PrinterConfig


__all__ = [
    "RenderBuffer",
    "Renderer",
]

LOG = create_logger(__name__)

ADDRESS_DIGITS: Final[int] = ctypes.sizeof(ctypes.c_void_p) * 2

_DIGIT_GROUP_RX: Final[re.Pattern[str]] = re.compile(r"(?<=\d)(?=(?:\d{3})+$)")

# (key slot, field name, value slot); a slot is (value, declared)
Entry = tuple[tuple[Any, Any] | None, str | None, tuple[Any, Any]]


class RenderBuffer:
    """Append-only list of text chunks."""

    def __init__(self) -> None:
        self.chunks: list[str] = []

    def write(self, text: str) -> None:
        self.chunks.append(text)

    def extend(self, other: RenderBuffer) -> None:
        self.chunks.extend(other.chunks)

    def getvalue(self) -> str:
        return "".join(self.chunks)


class Renderer:
    """Renders one value with one configuration snapshot."""

    config: PrinterConfig
    tracker: ReferenceTracker
    layout: LayoutEngine

    inline: bool
    """True while a trial is rendering inline; nested nodes never start their own trial."""

    def __init__(self, config: PrinterConfig) -> None:
        self.config = config
        self.tracker = ReferenceTracker()
        self.layout = LayoutEngine(self)
        self.inline = False
        self.trials = 0
        self.trial_failures = 0
        # id(value) -> (value, outcome); holding the value keeps ids stable for the whole render
        self._hook_memo: dict[int, tuple[Any, HookOutcome]] = {}

    def render(self, value: Any) -> str:
        """Render `value` to text with no trailing newline."""
        self.tracker.scan(value, self.resolve, self.children)
        buf = RenderBuffer()
        self.render_value(buf, value, MISSING, 0)
        LOG.debug(
            "rendered %s: %d nodes, %d shared, %d inline trials (%d rejected)",
            type(value).__name__,
            self.tracker.visited,
            self.tracker.shared_count,
            self.trials,
            self.trial_failures,
        )
        return buf.getvalue()

    # ---------- Resolution ----------

    def resolve(self, value: Any, declared: Any = MISSING) -> Resolved:
        """
        Classify `value` and apply the format hook.

        Non-nil dynamic wrappers are unwrapped to their runtime value. Hooks are
        not run on references or nil values. A hook replacement is classified again.
        """
        node = classify(value, declared)
        if node.kind is Kind.DYNAMIC_WRAPPER and not node.nil:
            node = classify(node.payload)
        if node.nil or node.kind is Kind.REFERENCE:
            return Resolved(node, HookOutcome(node.value))

        outcome = self._run_hook(node.value)
        if outcome.replaced:
            node = classify(outcome.value)
        return Resolved(node, outcome)

    def _run_hook(self, value: Any) -> HookOutcome:
        entry = self._hook_memo.get(id(value))
        if entry is not None and entry[0] is value:
            return entry[1]
        outcome = resolve_hook(
            self.config.format_hook, value, max_iterations=self.config.max_hook_iterations
        )
        self._hook_memo[id(value)] = (value, outcome)
        return outcome

    def children(self, resolved: Resolved) -> list[tuple[Any, Any]]:
        """Return the (value, declared) slots the renderer visits below `resolved`, in order."""
        node = resolved.node
        if resolved.outcome.raw_text is not None or node.nil:
            return []
        if node.kind is Kind.REFERENCE:
            return [(node.payload, MISSING)]
        slots: list[tuple[Any, Any]] = []
        for key_slot, _name, value_slot in self.entries(node):
            if key_slot is not None:
                slots.append(key_slot)
            slots.append(value_slot)
        return slots

    def entries(self, node: Node) -> list[Entry]:
        """Return the entries of a composite node in rendering order."""
        value = node.value
        if node.kind is Kind.SEQUENCE:
            items = sort_keys(list(value)) if isinstance(value, Set) else list(value)
            source = type(value) if isinstance(value, ctypes.Array) else node.declared
            declarations = intro.element_declarations(source, len(items))
            return [(None, None, (item, decl)) for item, decl in zip(items, declarations, strict=True)]
        if node.kind is Kind.MAPPING:
            key_decl, value_decl = intro.mapping_declarations(node.declared)
            return [((key, key_decl), None, (value[key], value_decl)) for key in sort_keys(list(value))]
        if node.kind is Kind.RECORD:
            return [
                (None, field.name, (field.value, field.declared))
                for field in intro.record_fields(value)
                if not (self.config.hide_private_fields and field.is_private)
            ]
        return []

    # ---------- Emission ----------

    def render_value(self, buf: RenderBuffer, value: Any, declared: Any, depth: int) -> None:
        self.render_resolved(buf, self.resolve(value, declared), depth)

    def render_resolved(self, buf: RenderBuffer, resolved: Resolved, depth: int) -> None:
        if (
            not self.inline
            and not self.layout.is_scalar(resolved)
            and self.layout.is_inline_eligible(resolved)
        ):
            self.trials += 1
            if self.layout.try_inline(buf, resolved, depth):
                return
            self.trial_failures += 1
        self.emit(buf, resolved, depth)

    def emit(self, buf: RenderBuffer, resolved: Resolved, depth: int) -> None:
        """Emit one node in the current mode (inline or block), including its annotations."""
        node, outcome = resolved.node, resolved.outcome
        never = self.config.print_types is PrintTypes.NEVER

        if outcome.raw_text is not None:
            if outcome.verbatim or never:
                buf.write(outcome.raw_text)
            else:
                buf.write(f"{outcome.type_name}({outcome.raw_text})")
            return

        marker, expand = self.tracker.annotate(resolved.identity)
        buf.write(marker)
        if not expand:
            return

        if not self._should_annotate(resolved):
            self._emit_body(buf, node, depth)
        elif node.is_composite and not node.nil:
            buf.write(node.type_name)
            self._emit_body(buf, node, depth)
        else:
            buf.write(f"{node.type_name}(")
            self._emit_body(buf, node, depth)
            buf.write(")")

    def _should_annotate(self, resolved: Resolved) -> bool:
        policy = self.config.print_types
        node = resolved.node
        if policy is PrintTypes.NEVER or node.kind in (Kind.DYNAMIC_WRAPPER, Kind.UNKNOWN):
            return False
        if policy is PrintTypes.ALWAYS or resolved.outcome.replaced:
            return True
        if node.kind in (Kind.SEQUENCE, Kind.MAPPING, Kind.RECORD, Kind.FUNCTION_HANDLE, Kind.CHANNEL_HANDLE):
            return True
        if node.kind is Kind.REFERENCE and not node.nil:
            return classify(node.payload).kind is Kind.REFERENCE
        return False

    def _emit_body(self, buf: RenderBuffer, node: Node, depth: int) -> None:
        kind = node.kind
        nil_text = self.config.literals[0]
        if node.nil:
            buf.write(nil_text)
        elif kind is Kind.BOOLEAN:
            buf.write(self.config.literals[1] if node.payload else self.config.literals[2])
        elif kind in (Kind.SIGNED_INTEGER, Kind.UNSIGNED_INTEGER):
            buf.write(self.format_int(node.payload))
        elif kind is Kind.FLOAT:
            buf.write(self.format_float(node.payload, node.bits))
        elif kind is Kind.COMPLEX:
            buf.write(self.format_complex(node.payload))
        elif kind is Kind.TEXT:
            buf.write(self.format_text(node.payload))
        elif kind.is_composite:
            self._emit_composite(buf, node, depth)
        elif kind in (Kind.FUNCTION_HANDLE, Kind.CHANNEL_HANDLE, Kind.RAW_ADDRESS):
            buf.write(self.format_address(node.payload))
        elif kind is Kind.REFERENCE:
            buf.write("&")
            self.render_value(buf, node.payload, MISSING, depth)
        else:
            buf.write(self.format_unknown(node))

    def _emit_composite(self, buf: RenderBuffer, node: Node, depth: int) -> None:
        delimiters = Delimiters.for_node(node)
        entries = self.entries(node)
        if not entries:
            buf.write(delimiters.open + delimiters.close)
            return

        if self.inline:
            buf.write(delimiters.open)
            for i, entry in enumerate(entries):
                if i:
                    buf.write(delimiters.itemsep)
                self._emit_entry(buf, entry, delimiters, depth + 1)
            if len(entries) == 1 and delimiters.open == "(":
                buf.write(",")
            buf.write(delimiters.close)
            return

        line_start = self.config.line_prefix + self.config.indent * (depth + 1)
        buf.write(delimiters.open + "\n")
        for entry in entries:
            buf.write(line_start)
            self._emit_entry(buf, entry, delimiters, depth + 1)
            buf.write(",\n")
        buf.write(self.config.line_prefix + self.config.indent * depth + delimiters.close)

    def _emit_entry(self, buf: RenderBuffer, entry: Entry, delimiters: Delimiters, depth: int) -> None:
        key_slot, name, (value, declared) = entry
        if key_slot is not None:
            self.render_value(buf, key_slot[0], key_slot[1], depth)
            buf.write(delimiters.kvsep)
        elif name is not None:
            buf.write(name + delimiters.kvsep)
        self.render_value(buf, value, declared, depth)

    # ---------- Scalars ----------

    def group_digits(self, digits: str) -> str:
        """Insert the thousands separator into a run of decimal digits."""
        separator = self.config.thousands_separator
        if not separator:
            return digits
        return _DIGIT_GROUP_RX.sub(lambda _m: separator, digits)

    def format_int(self, value: int) -> str:
        """Decimal digits, grouped; the sign is never grouped. Hex past the int-to-str digit limit."""
        try:
            digits = str(abs(value))
        except ValueError:
            return hex(value)
        sign = "-" if value < 0 else ""
        return sign + self.group_digits(digits)

    def format_float(self, value: float, bits: int = 64, *, grouped: bool = True) -> str:
        """
        Shortest round-trip digits in positional notation, `.0` kept for integral values.

        :param bits: 32 for single-precision values: the digits then round-trip at 32 bits.
        """
        if math.isnan(value) or math.isinf(value):
            return repr(value)
        digits = _shortest_float32(value) if bits == 32 else repr(value)
        text = format(decimal.Decimal(digits), "f")
        int_part, _, frac_part = text.partition(".")
        sign = ""
        if int_part.startswith("-"):
            sign, int_part = "-", int_part[1:]
        if grouped:
            int_part = self.group_digits(int_part)
        return f"{sign}{int_part}.{frac_part or '0'}"

    def format_complex(self, value: complex) -> str:
        real = self.format_float(value.real, grouped=False)
        imag = self.format_float(value.imag, grouped=False)
        if not imag.startswith("-"):
            imag = "+" + imag
        return f"{real}{imag}i"

    def format_text(self, value: str | bytes | bytearray) -> str:
        if isinstance(value, (bytes, bytearray)):
            return repr(bytes(value))
        return json.dumps(str(value), ensure_ascii=self.config.escape_unicode)

    def format_address(self, address: int) -> str:
        if not address:
            return self.config.literals[0]
        return f"0x{address:0{ADDRESS_DIGITS}x}"

    def format_unknown(self, node: Node) -> str:
        value = node.value
        if isinstance(value, type):
            return f"<type:{intro.class_display_name(value)}>"
        try:
            text = str(value)
        except Exception as e:
            return f"<unrenderable {node.type_name}: {type(e).__name__}: {e}>"
        return f"{node.type_name}<{text}>"


def _shortest_float32(value: float) -> str:
    """Return the shortest decimal digits that read back as the same 32-bit float."""
    target = struct.unpack("<f", struct.pack("<f", value))[0]
    for precision in range(1, 10):
        text = f"{target:.{precision}g}"
        if struct.unpack("<f", struct.pack("<f", float(text)))[0] == target:
            return text
    return repr(target)


# End of file: src/mstair/pp/xprint/renderer.py
