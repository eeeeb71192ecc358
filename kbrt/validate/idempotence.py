"""
Idempotence Validator — Checks that re-rendering output is stable.
"""

import re

from kbrt.core.context import RenderContext
from kbrt.core.contracts import Validator
from kbrt.ir.schema import Heading
from kbrt.render.html import get_renderer, strip_markup

HEADING_FRAGMENT = re.compile(r"^<h[1-3][ >]")
LEADING_MARKER = re.compile(r"^[ \t]*#+[ \t]*", re.MULTILINE)


class IdempotenceValidator(Validator):
    """
    Validates that rendered output survives a second pass.

    The markup is reduced to plain text with markers stripped and rendered
    again. The second rendering must succeed and must not produce more
    headings than the first one did.
    """

    @property
    def name(self) -> str:
        return "idempotence"

    def validate(self, ctx: RenderContext) -> list[str]:
        # Imported here: the passes package imports this module
        from kbrt.passes.p10_segment import split_segments
        from kbrt.passes.p20_classify import classify_segments
        from kbrt.passes.p30_inline import attach_inline_spans

        if not ctx.fragments:
            return []

        blocks = classify_segments(split_segments(plain_text(ctx.fragments)))
        attach_inline_spans(blocks)
        get_renderer(ctx.theme).render_blocks(blocks)

        before = sum(1 for b in ctx.blocks if isinstance(b, Heading))
        after = sum(1 for b in blocks if isinstance(b, Heading))
        if after > before:
            return [f"Re-rendering produced {after} headings, original had {before}"]
        return []


def plain_text(fragments: list[str]) -> str:
    """
    Reduce rendered fragments to plain text, one segment per fragment.

    Heading text is kept as is. Elsewhere a leading '#' run on a line is
    text the author wrote ("#hashtag"), not a marker, and is dropped.
    """
    parts: list[str] = []
    for fragment in fragments:
        text = strip_markup(fragment)
        if not HEADING_FRAGMENT.match(fragment):
            text = LEADING_MARKER.sub("", text)
        parts.append(text.strip())
    return "\n\n".join(parts)
