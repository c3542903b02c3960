# File: src/mstair/pp/xprint/layout.py
"""
Inline-versus-block layout decision.

A node is tried inline when it is scalar, or a composite whose immediate
children are all scalar. The trial renders into a scratch buffer; the text is
kept when it fits the column budget of its depth and contains no newline,
otherwise the buffer is discarded, reference numbering is rolled back and the
caller renders the node in block form.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from mstair.pp.base.types import MISSING
from mstair.pp.xlogging.logger_factory import create_logger
from mstair.pp.xprint.model import IdentityKey, Kind, Resolved


if TYPE_CHECKING:
    from mstair.pp.xprint.renderer import RenderBuffer, Renderer


__all__ = ["LayoutEngine"]

LOG = create_logger(__name__)


class LayoutEngine:
    """Decides between inline and block form for the renderer that owns it."""

    def __init__(self, renderer: Renderer) -> None:
        self.renderer = renderer

    def budget(self, depth: int) -> int:
        """Columns available to a value rendered at `depth`."""
        config = self.renderer.config
        return config.max_inline_column - len(config.line_prefix) - depth * len(config.indent)

    def is_scalar(self, resolved: Resolved) -> bool:
        """
        True when the node renders as a single token.

        Hook RawText and nil values count as scalar; references are followed to their target.
        """
        seen: set[IdentityKey | None] = set()
        while True:
            if resolved.outcome.raw_text is not None or resolved.node.nil:
                return True
            node = resolved.node
            if node.kind is not Kind.REFERENCE:
                return node.is_scalar
            if resolved.identity in seen:
                return False
            seen.add(resolved.identity)
            resolved = self.renderer.resolve(node.payload, MISSING)

    def is_inline_eligible(self, resolved: Resolved) -> bool:
        if self.is_scalar(resolved):
            return True
        if not resolved.node.is_composite:
            return False
        return all(
            self.is_scalar(self.renderer.resolve(value, declared))
            for value, declared in self.renderer.children(resolved)
        )

    def try_inline(self, buf: RenderBuffer, resolved: Resolved, depth: int) -> bool:
        """
        Render `resolved` inline into a scratch buffer and commit it if it fits.

        :return: True when the inline text was appended to `buf`.
        """
        from mstair.pp.xprint.renderer import RenderBuffer

        renderer = self.renderer
        state = renderer.tracker.snapshot()
        scratch = RenderBuffer()
        renderer.inline = True
        try:
            renderer.emit(scratch, resolved, depth)
        finally:
            renderer.inline = False

        text = scratch.getvalue()
        budget = self.budget(depth)
        if len(text) <= budget and "\n" not in text:
            buf.extend(scratch)
            return True

        LOG.trace("inline rejected for %s: width %d, budget %d", resolved.node.type_name, len(text), budget)
        renderer.tracker.restore(state)
        return False


# End of file: src/mstair/pp/xprint/layout.py
