"""
Pass 00 — Input Normalization

Normalizes raw input text:
- Line ending normalization (CRLF / CR to LF)
- Unicode normalization
- Byte-order mark and trailing whitespace removal

Line structure is kept intact: blank lines and line starts carry meaning.
"""

import re
import unicodedata

from kbrt.core.context import RenderContext
from kbrt.core.logging import get_pass_logger

PASS_NAME = "p00_normalize"
log = get_pass_logger(PASS_NAME)

TRAILING_WHITESPACE = re.compile(r"[ \t]+$", re.MULTILINE)


def normalize_text(raw: str) -> str:
    """Normalize line endings, Unicode form, and trailing whitespace."""
    text = raw.replace("\r\n", "\n").replace("\r", "\n")
    text = unicodedata.normalize("NFC", text)
    text = text.lstrip("\ufeff")
    return TRAILING_WHITESPACE.sub("", text)


def normalize(ctx: RenderContext) -> RenderContext:
    """
    Normalize raw input text.

    This pass:
    - Converts all line endings to LF
    - Normalizes Unicode (NFC)
    - Drops a leading byte-order mark
    - Strips trailing spaces and tabs on every line
    """
    raw = ctx.raw_text
    raw_len = len(raw)

    log.verbose("starting_normalization", input_chars=raw_len)

    text = normalize_text(raw)
    output_len = len(text)

    log.verbose(
        "normalized",
        input_chars=raw_len,
        output_chars=output_len,
        chars_removed=raw_len - output_len,
    )

    ctx.normalized_text = text
    ctx.add_trace(
        pass_name=PASS_NAME,
        action="normalized_input",
        before=f"{raw_len} chars",
        after=f"{output_len} chars",
    )

    return ctx
