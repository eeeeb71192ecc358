"""
Pass 70 — Render

Renders typed blocks to HTML fragments with the request's style theme and
joins them, in source order, with single newlines.

Fragments that would be empty (blank paragraphs, empty headings, lists
without items) are dropped here rather than rendered as spurious blocks.
"""

from kbrt.core.context import RenderContext
from kbrt.core.logging import get_pass_logger
from kbrt.render.html import get_renderer

PASS_NAME = "p70_render"
log = get_pass_logger(PASS_NAME)


def render(ctx: RenderContext) -> RenderContext:
    """
    Render blocks to the final markup string.

    An empty document renders to "".
    """
    renderer = get_renderer(ctx.theme)

    ctx.fragments = renderer.render_blocks(ctx.blocks)
    ctx.html = "\n".join(ctx.fragments)

    dropped = len(ctx.blocks) - len(ctx.fragments)
    if dropped:
        log.verbose("empty_fragments_dropped", dropped=dropped)
        ctx.add_diagnostic(
            level="info",
            code="EMPTY_BLOCK_DROPPED",
            message=f"{dropped} empty block(s) left out of the output",
            source=PASS_NAME,
        )

    log.info(
        "rendered",
        theme=ctx.theme,
        blocks=len(ctx.blocks),
        fragments=len(ctx.fragments),
        output_chars=len(ctx.html),
    )
    ctx.add_trace(
        pass_name=PASS_NAME,
        action="rendered_html",
        before=f"{len(ctx.blocks)} blocks",
        after=f"{len(ctx.fragments)} fragments",
    )

    return ctx
