"""
IR Enums — Block kinds, inline kinds, report categories, and status codes.

No stringly-typed constants scattered across passes.
"""

from enum import Enum


# ============================================================================
# Document structure
# ============================================================================

class BlockKind(str, Enum):
    """
    Structural type of a rendered block.

    Classification precedence is heading, ordered list, unordered list,
    then paragraph as the fallback.
    """

    HEADING = "heading"
    ORDERED_LIST = "ordered_list"
    UNORDERED_LIST = "unordered_list"
    PARAGRAPH = "paragraph"


class InlineKind(str, Enum):
    """Inline span types produced by the inline formatter."""

    TEXT = "text"
    STRONG = "strong"        # **x** or __x__
    EMPHASIS = "emphasis"    # *x* or _x_
    BREAK = "break"          # literal newline inside a block


# ============================================================================
# Report extraction
# ============================================================================

class Recommendation(str, Enum):
    """Reviewer verdict carried by a validation report."""

    APPROVE = "APPROVE"
    REVIEW_NEEDED = "REVIEW_NEEDED"
    REJECT = "REJECT"


# ============================================================================
# Pipeline status
# ============================================================================

class DiagnosticLevel(str, Enum):
    """Diagnostic severity levels."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class RenderStatus(str, Enum):
    """Overall pipeline status."""

    SUCCESS = "success"
    PARTIAL = "partial"
    ERROR = "error"
