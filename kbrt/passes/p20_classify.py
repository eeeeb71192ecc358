"""
Pass 20 — Block Classification

Assigns each segment a block type by its leading token, first match wins:

1. Heading          first line starts with '#' not followed by a digit
                    ('###' before '##' before '#')
2. Ordered list     first line starts with '<digits>.'
3. Unordered list   first line starts with '-' or '•'
4. Paragraph        everything else

A heading owns only its first line. Remaining lines of the same segment are
classified again as if they formed their own segment, so a heading directly
followed by a list still produces a list.

Ordered lists fold unmarked lines into the current item. Unordered lists do
not: every marked line is an item and unmarked lines are dropped.
"""

import re
from typing import Optional

from kbrt.core.context import RenderContext
from kbrt.core.logging import get_pass_logger
from kbrt.ir.schema import (
    Block,
    Heading,
    ListItem,
    OrderedListBlock,
    Paragraph,
    UnorderedListBlock,
)

PASS_NAME = "p20_classify"
log = get_pass_logger(PASS_NAME)

MAX_HEADING_LEVEL = 3

# "#1 cause" is a rank, not a heading marker
HEADING_PATTERN = re.compile(r"^(#+)(?!\d)[ \t]*(.*)$")
# "1.5 liters" is a decimal, not an item marker
ORDERED_ITEM_PATTERN = re.compile(r"^\d+\.(?!\d)[ \t]*(.*)$")
UNORDERED_ITEM_PATTERN = re.compile(r"^[-•][ \t]*(.*)$")


class ClassifyNotes:
    """Non-fatal observations collected while classifying."""

    def __init__(self) -> None:
        self.dropped_lines: list[str] = []
        self.empty_items = 0


def classify_segment(
    text: str,
    start_index: int = 0,
    notes: Optional[ClassifyNotes] = None,
) -> list[Block]:
    """
    Classify one segment into blocks.

    Returns one block, or more when a heading line is followed by
    further lines in the same segment. Inline spans are left empty.
    """
    notes = notes or ClassifyNotes()
    lines = [line.strip() for line in text.split("\n")]
    lines = [line for line in lines if line]

    blocks: list[Block] = []
    while lines:
        index = start_index + len(blocks)
        first = lines[0]

        heading = HEADING_PATTERN.match(first)
        if heading:
            level = min(len(heading.group(1)), MAX_HEADING_LEVEL)
            blocks.append(
                Heading(index=index, level=level, text=heading.group(2).strip(), source=first)
            )
            lines = lines[1:]
            continue

        source = "\n".join(lines)
        if ORDERED_ITEM_PATTERN.match(first):
            blocks.append(
                OrderedListBlock(index=index, items=_ordered_items(lines, notes), source=source)
            )
        elif UNORDERED_ITEM_PATTERN.match(first):
            blocks.append(
                UnorderedListBlock(index=index, items=_unordered_items(lines, notes), source=source)
            )
        else:
            blocks.append(Paragraph(index=index, text=source, source=source))
        break

    return blocks


def _ordered_items(lines: list[str], notes: ClassifyNotes) -> list[ListItem]:
    """Group lines into logical items; unmarked lines continue the current item."""
    groups: list[list[str]] = []
    for line in lines:
        match = ORDERED_ITEM_PATTERN.match(line)
        if match:
            groups.append([match.group(1).strip()])
        else:
            groups[-1].append(line)

    items: list[ListItem] = []
    for group in groups:
        text = "\n".join(part for part in group if part)
        if text:
            items.append(ListItem(text=text))
        else:
            notes.empty_items += 1
    return items


def _unordered_items(lines: list[str], notes: ClassifyNotes) -> list[ListItem]:
    """Every marked line is its own item; unmarked lines are dropped."""
    items: list[ListItem] = []
    for line in lines:
        match = UNORDERED_ITEM_PATTERN.match(line)
        if not match:
            notes.dropped_lines.append(line)
            continue
        text = match.group(1).strip()
        if text:
            items.append(ListItem(text=text))
        else:
            notes.empty_items += 1
    return items


def classify_segments(
    segments: list[str],
    notes: Optional[ClassifyNotes] = None,
) -> list[Block]:
    """Classify segments in order, numbering blocks by document position."""
    notes = notes or ClassifyNotes()
    blocks: list[Block] = []
    for text in segments:
        blocks.extend(classify_segment(text, start_index=len(blocks), notes=notes))
    return blocks


def classify(ctx: RenderContext) -> RenderContext:
    """
    Classify segments into typed blocks.

    This pass:
    - Detects headings, ordered lists, unordered lists, paragraphs
    - Demotes headings deeper than level 3
    - Folds ordered-list continuation lines into their item
    - Reports unmarked lines dropped from unordered lists
    """
    notes = ClassifyNotes()
    ctx.blocks = classify_segments([seg.text for seg in ctx.segments], notes)

    for line in notes.dropped_lines:
        log.verbose("unmarked_list_line_dropped", line=line[:50])
        ctx.add_diagnostic(
            level="warning",
            code="UNMARKED_LIST_LINE",
            message=f"Line without bullet marker dropped from unordered list: {line[:50]}",
            source=PASS_NAME,
        )
    if notes.empty_items:
        ctx.add_diagnostic(
            level="info",
            code="EMPTY_LIST_ITEM",
            message=f"{notes.empty_items} empty list item(s) dropped",
            source=PASS_NAME,
        )

    counts: dict[str, int] = {}
    for block in ctx.blocks:
        counts[block.kind.value] = counts.get(block.kind.value, 0) + 1

    log.verbose("classified", blocks=len(ctx.blocks), **counts)
    ctx.add_trace(
        pass_name=PASS_NAME,
        action="classified_blocks",
        before=f"{len(ctx.segments)} segments",
        after=f"{len(ctx.blocks)} blocks",
    )

    return ctx
