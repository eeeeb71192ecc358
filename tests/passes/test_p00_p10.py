"""
Unit tests for early pipeline passes (p00, p10).
"""

from kbrt.core.context import RenderContext, RenderRequest
from kbrt.passes.p00_normalize import normalize, normalize_text
from kbrt.passes.p10_segment import find_segments, segment, split_segments


def _ctx(text: str) -> RenderContext:
    return RenderContext(request=RenderRequest(text=text), raw_text=text)


class TestP00Normalize:
    """Tests for p00_normalize pass."""

    def test_crlf_becomes_lf(self):
        """Verify Windows and old Mac line endings are unified."""
        assert normalize_text("a\r\nb\rc") == "a\nb\nc"

    def test_strips_trailing_whitespace_per_line(self):
        """Verify trailing spaces and tabs are removed from each line."""
        assert normalize_text("Title  \nBody\t\n") == "Title\nBody\n"

    def test_keeps_blank_lines(self):
        """Verify blank lines survive so segmentation still sees them."""
        assert normalize_text("First.\n\nSecond.") == "First.\n\nSecond."

    def test_unicode_normalization(self):
        """Verify Unicode is normalized to NFC form."""
        assert normalize_text("cafe\u0301") == "caf\u00e9"

    def test_strips_byte_order_mark(self):
        """Verify a leading BOM is dropped."""
        assert normalize_text("\ufeff# Title") == "# Title"

    def test_adds_trace(self):
        """Verify trace entry is added."""
        ctx = _ctx("Hello  \r\nworld")

        normalize(ctx)

        assert ctx.normalized_text == "Hello\nworld"
        assert len(ctx.trace) == 1
        assert ctx.trace[0].pass_name == "p00_normalize"


class TestP10Segment:
    """Tests for p10_segment pass."""

    def test_splits_on_blank_line(self):
        """Verify a blank line separates segments."""
        assert split_segments("First\n\nSecond") == ["First", "Second"]

    def test_whitespace_only_line_is_blank(self):
        """Verify a line holding only spaces still separates segments."""
        assert split_segments("First\n  \t \nSecond") == ["First", "Second"]

    def test_single_newline_keeps_segment(self):
        """Verify a single newline does not split."""
        assert split_segments("line one\nline two") == ["line one\nline two"]

    def test_runs_of_blank_lines_collapse(self):
        """Verify several blank lines never produce empty segments."""
        assert split_segments("\n\n\nA\n\n\n\nB\n") == ["A", "B"]

    def test_empty_and_whitespace_input(self):
        """Verify empty input yields no segments."""
        assert split_segments("") == []
        assert split_segments("   \n\n \t ") == []

    def test_segments_are_trimmed(self):
        """Verify surrounding whitespace is trimmed from each segment."""
        assert split_segments("  A  \n\n  B") == ["A", "B"]

    def test_offsets_point_into_source(self):
        """Verify reported offsets locate the segment in the text."""
        text = "Alpha\n\nBeta"
        found = find_segments(text)

        assert found == [("Alpha", 0, 5), ("Beta", 7, 11)]
        for seg_text, start, end in found:
            assert text[start:end] == seg_text

    def test_pass_assigns_ids(self):
        """Verify the pass creates ordered segment IDs."""
        ctx = _ctx("")
        ctx.normalized_text = "One\n\nTwo\n\nThree"

        segment(ctx)

        assert [s.id for s in ctx.segments] == ["seg_000", "seg_001", "seg_002"]
        assert [s.text for s in ctx.segments] == ["One", "Two", "Three"]

    def test_empty_input_diagnostic(self):
        """Verify empty input is reported as info, not an error."""
        ctx = _ctx("")
        ctx.normalized_text = "  \n\n  "

        segment(ctx)

        assert ctx.segments == []
        assert [d.code for d in ctx.diagnostics] == ["EMPTY_INPUT"]
        assert ctx.diagnostics[0].level.value == "info"
