"""
Pass 30 — Inline Formatting

Parses emphasis markers and line breaks inside block text into span trees.

Precedence is fixed: bold spans (**x**, __x__) are matched over the whole
text first, then italic spans (*x*, _x_) over what is left and inside the
bold content, then line breaks. Matching bold first keeps **x** from being
read as two italic markers.

Markers never span a line. Underscore markers only count at word
boundaries, so snake_case names stay literal. Unmatched markers are text.
"""

import re
from typing import Iterator

from kbrt.core.context import RenderContext
from kbrt.core.logging import get_pass_logger
from kbrt.ir.enums import InlineKind
from kbrt.ir.schema import (
    Block,
    Heading,
    InlineSpan,
    OrderedListBlock,
    Paragraph,
    UnorderedListBlock,
)

PASS_NAME = "p30_inline"
log = get_pass_logger(PASS_NAME)

# "***x***" closes on the last two stars: strong around emphasis
BOLD_PATTERN = re.compile(
    r"\*\*(?=\S)(.+?)(?<=\S)\*\*(?!\*)"
    r"|(?<!\w)__(?=\S)(.+?)(?<=\S)__(?!\w)"
)
ITALIC_PATTERN = re.compile(
    r"\*(?=[^\s*])(.+?)(?<=[^\s*])\*"
    r"|(?<!\w)_(?=[^\s_])(.+?)(?<=[^\s_])_(?!\w)"
)
# Literal <br> tags from the generator count as breaks too
BREAK_PATTERN = re.compile(r"\n|<br\s*/?>", re.IGNORECASE)


def _split(pattern: re.Pattern, text: str) -> Iterator[tuple[str, bool]]:
    """Yield (piece, matched) pairs covering the whole text in order."""
    pos = 0
    for match in pattern.finditer(text):
        if match.start() > pos:
            yield text[pos:match.start()], False
        inner = match.group(1) if match.group(1) is not None else match.group(2)
        yield inner, True
        pos = match.end()
    if pos < len(text):
        yield text[pos:], False


def _parse_breaks(text: str) -> list[InlineSpan]:
    spans: list[InlineSpan] = []
    pos = 0
    for match in BREAK_PATTERN.finditer(text):
        if match.start() > pos:
            spans.append(InlineSpan(kind=InlineKind.TEXT, text=text[pos:match.start()]))
        spans.append(InlineSpan(kind=InlineKind.BREAK))
        pos = match.end()
    if pos < len(text):
        spans.append(InlineSpan(kind=InlineKind.TEXT, text=text[pos:]))
    return spans


def _parse_emphasis(text: str) -> list[InlineSpan]:
    spans: list[InlineSpan] = []
    for piece, is_italic in _split(ITALIC_PATTERN, text):
        if is_italic:
            spans.append(
                InlineSpan(kind=InlineKind.EMPHASIS, text=piece, children=_parse_breaks(piece))
            )
        else:
            spans.extend(_parse_breaks(piece))
    return spans


def parse_inline(text: str) -> list[InlineSpan]:
    """
    Parse block text into a list of inline spans.

    Example:
        "**a** *b*" -> [STRONG(a), TEXT(" "), EMPHASIS(b)]
    """
    spans: list[InlineSpan] = []
    for piece, is_bold in _split(BOLD_PATTERN, text):
        if is_bold:
            spans.append(
                InlineSpan(kind=InlineKind.STRONG, text=piece, children=_parse_emphasis(piece))
            )
        else:
            spans.extend(_parse_emphasis(piece))
    return spans


def attach_inline_spans(blocks: list[Block]) -> int:
    """
    Parse inline spans for every text a block holds.

    Headings and paragraphs are parsed as a whole; list items one by one.
    Returns the number of texts parsed.
    """
    parsed = 0
    for block in blocks:
        if isinstance(block, (Heading, Paragraph)):
            block.spans = parse_inline(block.text)
            parsed += 1
        elif isinstance(block, (OrderedListBlock, UnorderedListBlock)):
            for item in block.items:
                item.spans = parse_inline(item.text)
                parsed += 1
    return parsed


def format_inline(ctx: RenderContext) -> RenderContext:
    """
    Attach inline span trees to every block.

    Block markers are already stripped by p20_classify.
    """
    parsed = attach_inline_spans(ctx.blocks)

    log.verbose("inline_formatted", texts=parsed)
    ctx.add_trace(
        pass_name=PASS_NAME,
        action="parsed_inline_spans",
        after=f"{parsed} texts",
    )

    return ctx
