"""
HTML Renderer — Deterministic rendering from the document IR.

Turns blocks and their inline span trees into HTML fragments, one fragment
per block. Styling comes from the StyleTheme given at construction.
Same blocks and same theme always produce the same markup.
"""

import html
import re
from typing import Optional

from kbrt.ir.enums import InlineKind
from kbrt.ir.schema import (
    Block,
    Heading,
    InlineSpan,
    ListItem,
    OrderedListBlock,
    Paragraph,
    UnorderedListBlock,
    spans_are_blank,
)
from kbrt.render.theme import StyleTheme, get_theme

BREAK_TAG = "<br>"

TAG_PATTERN = re.compile(r"<[^>]+>")


class HtmlRenderer:
    """
    Block-to-HTML renderer.

    Produces one fragment per block. Blocks that carry no visible text
    (empty headings, blank paragraphs, lists without items) render to None.
    """

    def __init__(self, theme: StyleTheme) -> None:
        self.theme = theme

    def _open(self, tag: str) -> str:
        style = self.theme.style_for(tag)
        if not style:
            return f"<{tag}>"
        return f'<{tag} style="{html.escape(style, quote=True)}">'

    def render_spans(self, spans: list[InlineSpan]) -> str:
        """Render an inline span list to markup."""
        return "".join(self._render_span(span) for span in spans)

    def _render_span(self, span: InlineSpan) -> str:
        if span.kind == InlineKind.BREAK:
            return BREAK_TAG
        if span.kind == InlineKind.TEXT:
            return html.escape(span.text, quote=False)
        inner = self.render_spans(span.children)
        tag = "strong" if span.kind == InlineKind.STRONG else "em"
        return f"<{tag}>{inner}</{tag}>"

    def _render_items(self, items: list[ListItem]) -> str:
        return "".join(
            f"{self._open('li')}{self.render_spans(item.spans)}</li>"
            for item in items
            if not spans_are_blank(item.spans)
        )

    def render_block(self, block: Block) -> Optional[str]:
        """Render one block, or None when it would be empty."""
        if isinstance(block, Heading):
            if spans_are_blank(block.spans):
                return None
            tag = f"h{block.level}"
            return f"{self._open(tag)}{self.render_spans(block.spans)}</{tag}>"

        if isinstance(block, (OrderedListBlock, UnorderedListBlock)):
            items = self._render_items(block.items)
            if not items:
                return None
            tag = "ol" if isinstance(block, OrderedListBlock) else "ul"
            return f"{self._open(tag)}{items}</{tag}>"

        if isinstance(block, Paragraph):
            if spans_are_blank(block.spans):
                return None
            return f"{self._open('p')}{self.render_spans(block.spans)}</p>"

        return None

    def render_blocks(self, blocks: list[Block]) -> list[str]:
        """Render blocks in order, dropping empty fragments."""
        fragments: list[str] = []
        for block in blocks:
            fragment = self.render_block(block)
            if fragment is not None:
                fragments.append(fragment)
        return fragments


# One renderer per theme, built on first use
_renderers: dict[str, HtmlRenderer] = {}


def get_renderer(theme_name: str) -> HtmlRenderer:
    """Get the renderer for a theme, constructing it once."""
    renderer = _renderers.get(theme_name)
    if renderer is None:
        renderer = HtmlRenderer(get_theme(theme_name))
        _renderers[theme_name] = renderer
    return renderer


def strip_markup(markup: str) -> str:
    """
    Reduce rendered markup back to plain text.

    Breaks and fragment boundaries become newlines; other tags vanish.
    """
    text = markup.replace(BREAK_TAG, "\n")
    text = re.sub(r"</(h[1-3]|p|li|ol|ul)>", "\n", text)
    text = TAG_PATTERN.sub("", text)
    return html.unescape(text)
