"""
IR — Intermediate Representation

The IR is the source of truth for rendering.
HTML output is a rendering of the IR.
"""

from kbrt.ir.enums import (
    BlockKind,
    DiagnosticLevel,
    InlineKind,
    Recommendation,
    RenderStatus,
)
from kbrt.ir.schema import (
    Block,
    Diagnostic,
    Document,
    Heading,
    InlineSpan,
    ListItem,
    OrderedListBlock,
    Paragraph,
    ProcessedResponse,
    RenderResult,
    Report,
    Segment,
    TraceEntry,
    UnorderedListBlock,
)

__all__ = [
    # Enums
    "BlockKind",
    "InlineKind",
    "Recommendation",
    "DiagnosticLevel",
    "RenderStatus",
    # Models
    "Segment",
    "InlineSpan",
    "ListItem",
    "Heading",
    "OrderedListBlock",
    "UnorderedListBlock",
    "Paragraph",
    "Block",
    "Document",
    "Report",
    "TraceEntry",
    "Diagnostic",
    "RenderResult",
    "ProcessedResponse",
]
