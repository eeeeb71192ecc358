"""Render — HTML generation from the document IR."""

from kbrt.render.html import HtmlRenderer, get_renderer, strip_markup
from kbrt.render.theme import StyleTheme, get_theme, list_themes

__all__ = ["HtmlRenderer", "get_renderer", "strip_markup", "StyleTheme", "get_theme", "list_themes"]
