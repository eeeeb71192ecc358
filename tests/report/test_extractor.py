"""
Tests for report field extraction.
"""

from kbrt.ir.enums import Recommendation
from kbrt.report.extractor import (
    extract_flagged_items,
    extract_named_scores,
    extract_recommendation,
    extract_report,
    extract_score,
    find_flagged_section,
)


class TestScore:
    """Overall score extraction."""

    def test_score_out_of_ten(self):
        assert extract_score("Score: 7/10") == 7

    def test_missing_score_defaults_to_five(self):
        assert extract_score("The article reads well.") == 5

    def test_out_of_range_kept(self):
        """Scores are not clamped."""
        assert extract_score("Score: 12/10") == 12
        assert extract_score("Score: -3") == -3

    def test_dash_separator_is_not_minus(self):
        assert extract_score("Score - 8") == 8

    def test_decimal_truncated(self):
        assert extract_score("Score: 7.5/10") == 7

    def test_markdown_decoration(self):
        assert extract_score("**Score:** 9/10") == 9
        assert extract_score("## SCORE\n8/10") == 8

    def test_leading_label_beats_named_score(self):
        text = "Content Clarity Score: 9/10\nScore: 6/10"

        assert extract_score(text) == 6

    def test_named_score_used_when_alone(self):
        assert extract_score("Content Clarity Score: 9/10") == 9


class TestNamedScores:
    """Per-criterion scores."""

    def test_collects_labels(self):
        text = (
            "Amazon Q scores (1-10):\n"
            "* Semantic Search Score: 8/10\n"
            "* Content Clarity Score: 9/10\n"
            "- Overall Compact Optimization Score: 7/10\n"
        )

        assert extract_named_scores(text) == {
            "Semantic Search": 8,
            "Content Clarity": 9,
            "Overall Compact Optimization": 7,
        }

    def test_plain_score_line_not_named(self):
        assert extract_named_scores("Score: 6/10") == {}


class TestRecommendation:
    """Recommendation extraction."""

    def test_each_value(self):
        assert extract_recommendation("RECOMMENDATION: APPROVE") == Recommendation.APPROVE
        assert extract_recommendation("RECOMMENDATION: REJECT") == Recommendation.REJECT
        assert extract_recommendation("RECOMMENDATION: REVIEW NEEDED") == Recommendation.REVIEW_NEEDED

    def test_space_and_underscore_forms_agree(self):
        assert extract_recommendation("Recommendation: review needed") == (
            extract_recommendation("RECOMMENDATION: REVIEW_NEEDED")
        )

    def test_decorated_label(self):
        text = "**RECOMMENDATION:** REJECT - too many unsupported claims"

        assert extract_recommendation(text) == Recommendation.REJECT

    def test_value_on_next_line(self):
        assert extract_recommendation("RECOMMENDATION:\nApprove") == Recommendation.APPROVE

    def test_unrecognized_value_defaults(self):
        assert extract_recommendation("RECOMMENDATION: maybe later") == Recommendation.REVIEW_NEEDED

    def test_value_too_far_from_label(self):
        text = "RECOMMENDATION: after careful reading of the entire draft we approve"

        assert extract_recommendation(text) == Recommendation.REVIEW_NEEDED

    def test_missing_label_defaults(self):
        assert extract_recommendation("APPROVE") == Recommendation.REVIEW_NEEDED


class TestFlaggedItems:
    """POTENTIAL HALLUCINATIONS section."""

    def test_bullets_collected(self):
        text = (
            "## ⚠️ POTENTIAL HALLUCINATIONS\n"
            "- The battery lasts 48 hours\n"
            "• Firmware 3.2 added Bluetooth\n"
            "* Ships with two remotes\n"
            "## SCORE\n"
            "8/10\n"
        )

        assert extract_flagged_items(text) == [
            "The battery lasts 48 hours",
            "Firmware 3.2 added Bluetooth",
            "Ships with two remotes",
        ]

    def test_none_detected(self):
        text = "POTENTIAL HALLUCINATIONS:\nNone detected\n"

        assert extract_flagged_items(text) == []

    def test_sentinel_wins_over_bullets(self):
        text = "POTENTIAL HALLUCINATIONS:\n- Claim A\nNone detected beyond formatting\n"

        assert extract_flagged_items(text) == []

    def test_section_ends_at_next_label(self):
        text = (
            "POTENTIAL HALLUCINATIONS:\n"
            "- Claim A\n"
            "\n"
            "KEY IMPROVEMENTS:\n"
            "- Not a hallucination\n"
        )

        assert extract_flagged_items(text) == ["Claim A"]

    def test_sentinel_outside_section_ignored(self):
        text = (
            "POTENTIAL HALLUCINATIONS:\n"
            "- Claim A\n"
            "RECOMMENDATION: APPROVE\n"
            "Formatting issues: none detected\n"
        )

        assert extract_flagged_items(text) == ["Claim A"]

    def test_prose_mention_before_heading(self):
        """A sentence mentioning the phrase is not the section heading."""
        text = (
            "I checked the draft for potential hallucinations.\n"
            "\n"
            "## POTENTIAL HALLUCINATIONS\n"
            "- Claims a 48-hour battery\n"
            "\n"
            "Score: 6/10\n"
        )

        assert extract_flagged_items(text) == ["Claims a 48-hour battery"]

    def test_labelled_sentence_before_heading(self):
        """A sentinel in an earlier sentence does not clear the real section."""
        text = (
            "Potential hallucinations: none detected in the intro.\n"
            "\n"
            "POTENTIAL HALLUCINATIONS:\n"
            "- Claims a 48-hour battery\n"
        )

        assert extract_flagged_items(text) == ["Claims a 48-hour battery"]

    def test_lowercase_heading_still_found(self):
        text = "Potential hallucinations:\n- Claims a 48-hour battery\n"

        assert extract_flagged_items(text) == ["Claims a 48-hour battery"]

    def test_no_section(self):
        assert find_flagged_section("Score: 7/10") is None
        assert extract_flagged_items("- Stray bullet") == []

    def test_bold_line_is_not_bullet(self):
        text = "POTENTIAL HALLUCINATIONS:\n**Checked every claim.**\n- Real item\n"

        assert extract_flagged_items(text) == ["Real item"]


class TestExtractReport:
    """Whole-report extraction."""

    def test_clean_report(self):
        text = (
            "POTENTIAL HALLUCINATIONS:\n"
            "None detected\n"
            "\n"
            "Score: 7/10\n"
            "RECOMMENDATION: APPROVE\n"
        )

        report = extract_report(text)

        assert report.score == 7
        assert report.recommendation == Recommendation.APPROVE
        assert report.flagged_items == []

    def test_unstructured_text_defaults(self):
        report = extract_report("Looks fine to me.")

        assert report.score == 5
        assert report.recommendation == Recommendation.REVIEW_NEEDED
        assert report.flagged_items == []
        assert report.scores == {}

    def test_empty_input(self):
        report = extract_report("")

        assert report.score == 5
        assert report.raw_text == ""

    def test_raw_text_kept_verbatim(self, sample_report):
        report = extract_report(sample_report)

        assert report.raw_text == sample_report

    def test_full_sample(self, sample_report):
        report = extract_report(sample_report)

        assert report.score == 6
        assert report.recommendation == Recommendation.REVIEW_NEEDED
        assert report.flagged_items == [
            "Claims the remote has a 2-year battery life",
            "Mentions a reset button that does not exist",
        ]
        assert report.scores == {"Semantic Search": 8, "Content Clarity": 9}
