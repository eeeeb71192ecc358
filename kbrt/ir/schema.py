"""
IR Schema — Pydantic models for documents, reports, and pipeline results.

A Document is an ordered list of typed blocks. Each block keeps its plain
text alongside the inline span tree parsed from it, so rendering never has
to re-scan markers.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from kbrt.ir.enums import (
    BlockKind,
    DiagnosticLevel,
    InlineKind,
    Recommendation,
    RenderStatus,
)

IR_VERSION = "0.1.0"

DEFAULT_SCORE = 5


# ============================================================================
# Segments
# ============================================================================

class Segment(BaseModel):
    """A blank-line-delimited chunk of input text, prior to classification."""

    id: str = Field(..., description="Unique segment identifier")
    text: str = Field(..., description="Trimmed segment text")
    start_char: int = Field(..., description="Character offset in normalized input")
    end_char: int = Field(..., description="Character offset end")


# ============================================================================
# Inline spans
# ============================================================================

class InlineSpan(BaseModel):
    """
    One node of a block's inline tree.

    TEXT and BREAK are leaves. STRONG and EMPHASIS hold their content in
    ``children``; ``text`` keeps the unformatted content for reference.
    """

    kind: InlineKind
    text: str = ""
    children: list[InlineSpan] = Field(default_factory=list)

    def plain_text(self) -> str:
        """Text content with markers removed and breaks as newlines."""
        if self.kind == InlineKind.BREAK:
            return "\n"
        if self.children:
            return "".join(child.plain_text() for child in self.children)
        return self.text


def spans_plain_text(spans: list[InlineSpan]) -> str:
    return "".join(span.plain_text() for span in spans)


def spans_are_blank(spans: list[InlineSpan]) -> bool:
    """True when spans carry nothing but whitespace and breaks."""
    return not spans_plain_text(spans).strip()


# ============================================================================
# Blocks
# ============================================================================

class ListItem(BaseModel):
    """A logical list item (may span several physical lines)."""

    text: str = Field(..., description="Item text, marker stripped, lines joined by newline")
    spans: list[InlineSpan] = Field(default_factory=list)


class _BlockBase(BaseModel):
    index: int = Field(..., ge=0, description="Position of the block in its document")
    source: str = Field(default="", description="Raw segment text the block came from")


class Heading(_BlockBase):
    """Heading of level 1 to 3. Deeper markers are demoted to 3."""

    kind: Literal[BlockKind.HEADING] = BlockKind.HEADING
    level: int = Field(..., ge=1, le=3)
    text: str
    spans: list[InlineSpan] = Field(default_factory=list)


class OrderedListBlock(_BlockBase):
    kind: Literal[BlockKind.ORDERED_LIST] = BlockKind.ORDERED_LIST
    items: list[ListItem] = Field(default_factory=list)


class UnorderedListBlock(_BlockBase):
    kind: Literal[BlockKind.UNORDERED_LIST] = BlockKind.UNORDERED_LIST
    items: list[ListItem] = Field(default_factory=list)


class Paragraph(_BlockBase):
    """Default block. Internal newlines are soft breaks."""

    kind: Literal[BlockKind.PARAGRAPH] = BlockKind.PARAGRAPH
    text: str
    spans: list[InlineSpan] = Field(default_factory=list)


Block = Annotated[
    Union[Heading, OrderedListBlock, UnorderedListBlock, Paragraph],
    Field(discriminator="kind"),
]


class Document(BaseModel):
    """Ordered sequence of blocks, in source order."""

    blocks: list[Block] = Field(default_factory=list)

    def headings(self) -> list[Heading]:
        return [b for b in self.blocks if isinstance(b, Heading)]


# ============================================================================
# Report
# ============================================================================

class Report(BaseModel):
    """Typed fields extracted from a free-form validation report."""

    model_config = ConfigDict(frozen=True)

    score: int = Field(default=DEFAULT_SCORE, description="Overall score, nominally 0-10, not clamped")
    recommendation: Recommendation = Field(default=Recommendation.REVIEW_NEEDED)
    flagged_items: list[str] = Field(default_factory=list, description="Potential hallucinations")
    scores: dict[str, int] = Field(
        default_factory=dict,
        description="Named sub-scores such as 'Content Clarity'",
    )
    raw_text: str = Field(default="", description="Original report text, unmodified")


# ============================================================================
# Pipeline artifacts
# ============================================================================

class TraceEntry(BaseModel):
    """A single pipeline trace entry."""

    id: str
    timestamp: datetime
    pass_name: str
    action: str
    before: Optional[str] = None
    after: Optional[str] = None
    affected_ids: list[str] = Field(default_factory=list)


class Diagnostic(BaseModel):
    """A diagnostic message."""

    id: str
    level: DiagnosticLevel
    code: str
    message: str
    source: str
    affected_ids: list[str] = Field(default_factory=list)


class RenderResult(BaseModel):
    """The complete output of one document rendering."""

    version: str = Field(default=IR_VERSION, description="IR schema version")
    request_id: str = Field(..., description="Unique request ID")
    timestamp: datetime = Field(..., description="When rendering started")
    processing_duration_ms: float = Field(default=0.0)
    theme: str = Field(default="default", description="Style theme used")

    segments: list[Segment] = Field(default_factory=list)
    document: Document = Field(default_factory=Document)
    html: str = Field(default="", description="Final markup string")

    status: RenderStatus = Field(default=RenderStatus.SUCCESS)
    trace: list[TraceEntry] = Field(default_factory=list)
    diagnostics: list[Diagnostic] = Field(default_factory=list)


class ProcessedResponse(BaseModel):
    """A full generator response: rendered article plus extracted report."""

    article: RenderResult
    report: Report
