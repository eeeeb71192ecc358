"""
Response Splitting — Separate a generator response into article and analysis.

The generator answers with the optimized article, a separator line, and an
analysis/validation report:

    <article text>

    ---ANALYSIS---
    <analysis text>

Both halves then go through their own pipeline.
"""

from typing import Optional

from kbrt.core.engine import render_document
from kbrt.core.logging import LogChannel, get_logger
from kbrt.ir.schema import ProcessedResponse
from kbrt.report.extractor import extract_report

log = get_logger(LogChannel.REPORT)

ANALYSIS_SEPARATOR = "---ANALYSIS---"
MISSING_ANALYSIS = "Analysis not available"


def split_model_response(text: str) -> tuple[str, str]:
    """
    Split on the analysis separator.

    The analysis runs up to a second separator, if any; text after it
    is dropped.

    Returns:
        (article, analysis), both trimmed. The analysis falls back to
        "Analysis not available" when the separator is missing or
        nothing follows it.
    """
    parts = (text or "").split(ANALYSIS_SEPARATOR)
    analysis = parts[1].strip() if len(parts) > 1 else ""
    if not analysis:
        log.verbose("analysis_missing", separator_found=len(parts) > 1)
        analysis = MISSING_ANALYSIS
    if len(parts) > 2:
        log.verbose("analysis_truncated", dropped_sections=len(parts) - 2)
    return parts[0].strip(), analysis


def process_response(text: str, theme: Optional[str] = None) -> ProcessedResponse:
    """Split a full response, render the article, and extract the report."""
    article, analysis = split_model_response(text)
    return ProcessedResponse(
        article=render_document(article, theme=theme),
        report=extract_report(analysis),
    )
