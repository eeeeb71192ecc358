"""
Report Extractor — Typed fields from a free-form validation report.

The generator writes its review as loose prose with a few recognizable
labels. This module pulls out:

- score            number after "Score", optionally "/10"   (default 5)
- recommendation   APPROVE / REVIEW NEEDED / REJECT after
                   "RECOMMENDATION"                         (default REVIEW_NEEDED)
- flagged items    bullet lines under "POTENTIAL HALLUCINATIONS"
                   (empty when the section says "none detected")
- named scores     every "<Label> Score: N" line

Nothing here raises on odd input. Missing labels fall back to defaults.
Out-of-range scores are kept as written.
"""

import re
from typing import Optional

from kbrt.core.logging import LogChannel, get_logger
from kbrt.ir.enums import Recommendation
from kbrt.ir.schema import DEFAULT_SCORE, Report

log = get_logger(LogChannel.REPORT)

DEFAULT_RECOMMENDATION = Recommendation.REVIEW_NEEDED

# Separator between label and value: spaces, colons, markdown decoration,
# or a dash used as punctuation (a dash glued to a digit is a minus sign)
_SEP = r"(?:[\s:*#=_]|[-–—](?!\d))*"

SCORE_PATTERN = re.compile(
    rf"\bscore\b{_SEP}(-?\d+)(?:\.\d+)?(?:\s*/\s*10\b)?",
    re.IGNORECASE,
)
LEADING_SCORE_PATTERN = re.compile(
    rf"^[^\w\n]*score\b{_SEP}(-?\d+)(?:\.\d+)?(?:\s*/\s*10\b)?",
    re.IGNORECASE | re.MULTILINE,
)
NAMED_SCORE_PATTERN = re.compile(
    rf"^[^\w\n]*([A-Za-z][A-Za-z &/-]*?)\s+score\b{_SEP}(-?\d+)(?:\.\d+)?(?:\s*/\s*10\b)?",
    re.IGNORECASE | re.MULTILINE,
)

RECOMMENDATION_LABEL = re.compile(r"\brecommendation\b", re.IGNORECASE)
RECOMMENDATION_WINDOW = 6
WORD_PATTERN = re.compile(r"[A-Za-z]+")

# Section heading line: optional decoration, the phrase, then anything
FLAGGED_HEADING_PATTERN = re.compile(
    r"^[^\w\n]*(potential[ \t]+hallucinations)\b(.*)$",
    re.IGNORECASE | re.MULTILINE,
)
SENTINEL_PATTERN = re.compile(r"none\s+detected", re.IGNORECASE)
# "*" only as a bullet, never the start of "**bold**"
BULLET_PATTERN = re.compile(r"^\s*(?:[-•]|\*(?!\*))\s*(.*)$")
# Next section: a markdown heading, an all-caps label ending in a colon,
# or one of the other known labels at line start (never a bullet line)
SECTION_HEADING_PATTERN = re.compile(r"^\s*(?:#|[^\w\s\-•*]*\s*\**[A-Z][A-Z0-9 &/_-]*[A-Z0-9]\W*:)")
KNOWN_LABEL_PATTERN = re.compile(
    r"^\s*[^\w\s\-•*]*\s*\**(?:overall\s+)?(?:score|recommendation)\b",
    re.IGNORECASE,
)


def extract_score(text: str) -> int:
    """
    Extract the overall score.

    A line that starts with the "Score" label wins over a label found
    mid-line (such as "Content Clarity Score: 9"). Decimals are truncated.
    """
    match = LEADING_SCORE_PATTERN.search(text) or SCORE_PATTERN.search(text)
    if match is None:
        return DEFAULT_SCORE
    return int(match.group(1))


def extract_named_scores(text: str) -> dict[str, int]:
    """Collect "<Label> Score: N" lines into a label -> score mapping."""
    scores: dict[str, int] = {}
    for match in NAMED_SCORE_PATTERN.finditer(text):
        label = " ".join(match.group(1).split())
        scores.setdefault(label, int(match.group(2)))
    return scores


def _match_recommendation(words: list[str]) -> Optional[Recommendation]:
    upper = [w.upper() for w in words]
    for i, word in enumerate(upper[:RECOMMENDATION_WINDOW]):
        if word == "APPROVE":
            return Recommendation.APPROVE
        if word == "REJECT":
            return Recommendation.REJECT
        if word == "REVIEW" and i + 1 < len(upper) and upper[i + 1] == "NEEDED":
            return Recommendation.REVIEW_NEEDED
    return None


def extract_recommendation(text: str) -> Recommendation:
    """
    Extract the recommendation category.

    Looks at the few words right after each "RECOMMENDATION" label,
    first recognized value wins. "REVIEW NEEDED" and "REVIEW_NEEDED"
    are the same value.
    """
    for label in RECOMMENDATION_LABEL.finditer(text):
        following = text[label.end():label.end() + 200]
        words = WORD_PATTERN.findall(following)[:RECOMMENDATION_WINDOW + 1]
        found = _match_recommendation(words)
        if found is not None:
            return found
    return DEFAULT_RECOMMENDATION


def _is_strong_heading(match: re.Match) -> bool:
    """A '#' heading, an all-caps label, or the phrase alone on its line."""
    line = match.group(0)
    return (
        line.lstrip().startswith("#")
        or match.group(1).isupper()
        or not re.sub(r"\W", "", match.group(2))
    )


def find_flagged_section(text: str) -> Optional[str]:
    """
    Return the text of the POTENTIAL HALLUCINATIONS section, if any.

    Only lines that start with the phrase (after decoration) count as the
    section heading, and one that clearly reads as a heading wins over a
    sentence such as "Potential hallucinations: none in the intro." The
    section runs from just after the phrase (rest of the heading line
    included) to the next heading-like line.
    """
    candidates = list(FLAGGED_HEADING_PATTERN.finditer(text))
    if not candidates:
        return None
    match = next((m for m in candidates if _is_strong_heading(m)), candidates[0])

    rest = text[match.end(1):]
    first_line, _, remainder = rest.partition("\n")
    lines = [first_line]
    for line in remainder.split("\n"):
        if SECTION_HEADING_PATTERN.match(line) or KNOWN_LABEL_PATTERN.match(line):
            break
        lines.append(line)
    return "\n".join(lines)


def extract_flagged_items(text: str) -> list[str]:
    """
    Extract flagged items from the POTENTIAL HALLUCINATIONS section.

    A "none detected" sentinel anywhere in the section wins over any
    bullet lines also present there.
    """
    section = find_flagged_section(text)
    if section is None:
        return []
    if SENTINEL_PATTERN.search(section):
        return []

    items: list[str] = []
    for line in section.split("\n")[1:]:
        match = BULLET_PATTERN.match(line)
        if match:
            item = match.group(1).strip()
            if item.strip("-–— "):
                items.append(item)
    return items


def extract_report(raw_text: str) -> Report:
    """
    Parse a free-form report into a Report.

    Args:
        raw_text: The report text as produced by the generator

    Returns:
        Report with defaults for anything not found; raw_text kept verbatim
    """
    text = raw_text or ""

    report = Report(
        score=extract_score(text),
        recommendation=extract_recommendation(text),
        flagged_items=extract_flagged_items(text),
        scores=extract_named_scores(text),
        raw_text=raw_text or "",
    )

    if not 0 <= report.score <= 10:
        log.warning("score_out_of_range", score=report.score)

    log.info(
        "report_extracted",
        score=report.score,
        recommendation=report.recommendation.value,
        flagged_items=len(report.flagged_items),
        named_scores=len(report.scores),
    )
    return report
