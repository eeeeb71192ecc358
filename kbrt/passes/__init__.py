"""Passes — Pipeline stages for KBRT document rendering."""

from kbrt.passes.p00_normalize import normalize
from kbrt.passes.p10_segment import segment
from kbrt.passes.p20_classify import classify
from kbrt.passes.p30_inline import format_inline
from kbrt.passes.p70_render import render
from kbrt.passes.p80_package import package

__all__ = [
    "normalize",
    "segment",
    "classify",
    "format_inline",
    "render",
    "package",
]
