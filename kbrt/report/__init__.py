"""Report — Structured fields from model-written review reports."""

from kbrt.report.extractor import (
    extract_flagged_items,
    extract_named_scores,
    extract_recommendation,
    extract_report,
    extract_score,
)
from kbrt.report.response import process_response, split_model_response

__all__ = [
    "extract_report",
    "extract_score",
    "extract_recommendation",
    "extract_flagged_items",
    "extract_named_scores",
    "split_model_response",
    "process_response",
]
