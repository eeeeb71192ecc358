"""
Pass 10 — Block Segmentation

Splits normalized text into blank-line-delimited segments.
A blank line is two line breaks with nothing but spaces or tabs between them.
"""

import re

from kbrt.core.context import RenderContext
from kbrt.core.logging import get_pass_logger
from kbrt.ir.schema import Segment

PASS_NAME = "p10_segment"
log = get_pass_logger(PASS_NAME)

BLANK_LINE_PATTERN = re.compile(r"\n[ \t]*\n")


def find_segments(text: str) -> list[tuple[str, int, int]]:
    """
    Locate trimmed, non-empty segments with their character offsets.

    Returns:
        (text, start_char, end_char) tuples in source order
    """
    bounds: list[tuple[int, int]] = []
    pos = 0
    for match in BLANK_LINE_PATTERN.finditer(text):
        bounds.append((pos, match.start()))
        pos = match.end()
    bounds.append((pos, len(text)))

    segments: list[tuple[str, int, int]] = []
    for start, end in bounds:
        chunk = text[start:end]
        stripped = chunk.strip()
        if not stripped:
            continue
        offset = start + (len(chunk) - len(chunk.lstrip()))
        segments.append((stripped, offset, offset + len(stripped)))

    return segments


def split_segments(text: str) -> list[str]:
    """
    Split a document into raw segment strings.

    Any string yields a list: no blank lines gives one segment,
    all-whitespace input gives none.
    """
    return [seg_text for seg_text, _, _ in find_segments(text)]


def segment(ctx: RenderContext) -> RenderContext:
    """
    Segment normalized text on blank lines.

    This pass:
    - Splits on blank lines
    - Trims every segment and drops empty ones
    - Creates Segment objects with character offsets
    """
    text = ctx.normalized_text
    if not text.strip():
        log.verbose("empty_input")
        ctx.add_diagnostic(
            level="info",
            code="EMPTY_INPUT",
            message="Normalized text is empty",
            source=PASS_NAME,
        )
        return ctx

    ctx.segments = [
        Segment(id=f"seg_{i:03d}", text=seg_text, start_char=start, end_char=end)
        for i, (seg_text, start, end) in enumerate(find_segments(text))
    ]

    log.verbose("segmented", segments=len(ctx.segments))
    ctx.add_trace(
        pass_name=PASS_NAME,
        action="segmented_text",
        after=f"{len(ctx.segments)} segments",
    )

    return ctx
