"""
Schema Validator — Checks the rendered markup against the allowed shapes.
"""

import re

from kbrt.core.context import RenderContext
from kbrt.core.contracts import Validator

FRAGMENT_PATTERN = re.compile(r"^<(h[1-3]|p|ol|ul)[ >].*</\1>$", re.DOTALL)
ALLOWED_TAGS = frozenset({"h1", "h2", "h3", "p", "ol", "ul", "li", "strong", "em", "br"})
TAG_NAME_PATTERN = re.compile(r"</?([a-zA-Z0-9]+)")
EMPTY_PARAGRAPH_PATTERN = re.compile(r"<p[^>]*>(?:\s|<br>)*</p>")


class SchemaValidator(Validator):
    """Validates that output only uses the supported elements."""

    @property
    def name(self) -> str:
        return "schema"

    def validate(self, ctx: RenderContext) -> list[str]:
        """
        Validate rendered fragments.

        Checks:
        - Every fragment is a single heading, paragraph, or list element
        - Only supported tags appear
        - No empty paragraph survived
        - One fragment per line
        """
        errors: list[str] = []

        for i, fragment in enumerate(ctx.fragments):
            if not FRAGMENT_PATTERN.match(fragment):
                errors.append(f"Fragment {i} is not a supported block element")
            if "\n" in fragment:
                errors.append(f"Fragment {i} spans several lines")
            if EMPTY_PARAGRAPH_PATTERN.search(fragment):
                errors.append(f"Fragment {i} is an empty paragraph")
            unknown = {t.lower() for t in TAG_NAME_PATTERN.findall(fragment)} - ALLOWED_TAGS
            if unknown:
                errors.append(f"Fragment {i} uses unsupported tags: {sorted(unknown)}")

        return errors
