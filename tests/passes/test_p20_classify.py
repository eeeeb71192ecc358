"""
Unit tests for p20_classify: block type detection.
"""

from kbrt.core.context import RenderContext, RenderRequest
from kbrt.ir.enums import BlockKind
from kbrt.ir.schema import Heading, OrderedListBlock, Paragraph, Segment, UnorderedListBlock
from kbrt.passes.p20_classify import ClassifyNotes, classify, classify_segment, classify_segments


def _item_texts(block) -> list[str]:
    return [item.text for item in block.items]


class TestHeadings:
    """Heading detection and level mapping."""

    def test_three_hashes_is_level_three(self):
        """### is checked before ## and #."""
        (block,) = classify_segment("### Sub")

        assert isinstance(block, Heading)
        assert block.level == 3
        assert block.text == "Sub"

    def test_levels_one_and_two(self):
        assert classify_segment("# Title")[0].level == 1
        assert classify_segment("## Section")[0].level == 2

    def test_deeper_headings_demoted(self):
        """Four or more hashes still render as a level-3 heading."""
        (block,) = classify_segment("#### Deep")

        assert block.level == 3
        assert block.text == "Deep"

    def test_space_after_hashes_optional(self):
        (block,) = classify_segment("##Setup")

        assert block.level == 2
        assert block.text == "Setup"

    def test_hash_digit_is_not_heading(self):
        """'#1' is a rank, so the line stays a paragraph."""
        (block,) = classify_segment("#1 cause is low batteries")

        assert isinstance(block, Paragraph)
        assert block.text == "#1 cause is low batteries"

    def test_heading_owns_only_first_line(self):
        """Lines after the heading are classified on their own."""
        blocks = classify_segment("## Quick Checks\n- Battery\n- Cable")

        assert [b.kind for b in blocks] == [BlockKind.HEADING, BlockKind.UNORDERED_LIST]
        assert _item_texts(blocks[1]) == ["Battery", "Cable"]

    def test_heading_followed_by_text(self):
        blocks = classify_segment("# Title\nIntro line")

        assert isinstance(blocks[0], Heading)
        assert isinstance(blocks[1], Paragraph)
        assert blocks[1].text == "Intro line"


class TestLists:
    """Ordered and unordered list handling."""

    def test_ordered_list(self):
        (block,) = classify_segment("1. Open the app\n2. Tap Settings")

        assert isinstance(block, OrderedListBlock)
        assert _item_texts(block) == ["Open the app", "Tap Settings"]

    def test_ordered_continuation_folds_into_item(self):
        """Unmarked lines continue the current ordered item."""
        (block,) = classify_segment("1. Open app\nverify enabled\n2. Restart")

        assert _item_texts(block) == ["Open app\nverify enabled", "Restart"]

    def test_decimal_is_not_ordered_marker(self):
        (block,) = classify_segment("1.5 liters is enough")

        assert isinstance(block, Paragraph)

    def test_unordered_list_with_both_markers(self):
        (block,) = classify_segment("- Battery\n• Cable")

        assert isinstance(block, UnorderedListBlock)
        assert _item_texts(block) == ["Battery", "Cable"]

    def test_unordered_drops_unmarked_lines(self):
        """Only marked lines become items; the rest is noted and dropped."""
        notes = ClassifyNotes()
        (block,) = classify_segment("- a\nb\n- c", notes=notes)

        assert _item_texts(block) == ["a", "c"]
        assert notes.dropped_lines == ["b"]

    def test_empty_items_dropped(self):
        notes = ClassifyNotes()
        (block,) = classify_segment("-\n- kept", notes=notes)

        assert _item_texts(block) == ["kept"]
        assert notes.empty_items == 1


class TestParagraphs:
    """Paragraph fallback."""

    def test_plain_text_is_paragraph(self):
        (block,) = classify_segment("Just some text\nover two lines")

        assert isinstance(block, Paragraph)
        assert block.text == "Just some text\nover two lines"

    def test_bold_start_is_paragraph(self):
        """A leading '*' is emphasis, not a bullet."""
        (block,) = classify_segment("**Note:** restart first")

        assert isinstance(block, Paragraph)


class TestClassifyPass:
    """Tests for the classify pass over a context."""

    def test_blocks_numbered_by_position(self):
        blocks = classify_segments(["# Title\nIntro", "1. one", "Outro"])

        assert [b.index for b in blocks] == [0, 1, 2, 3]

    def test_pass_reports_dropped_lines(self):
        ctx = RenderContext(request=RenderRequest(text=""), raw_text="")
        ctx.segments = [Segment(id="seg_000", text="- a\nb\n- c", start_char=0, end_char=9)]

        classify(ctx)

        assert len(ctx.blocks) == 1
        codes = [d.code for d in ctx.diagnostics]
        assert codes == ["UNMARKED_LIST_LINE"]
        assert ctx.diagnostics[0].level.value == "warning"
        assert ctx.trace[-1].pass_name == "p20_classify"
