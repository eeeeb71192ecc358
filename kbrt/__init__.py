"""
KBRT — Knowledge-Base Render & Report Toolkit

A deterministic pipeline that turns model-generated knowledge-base articles
into styled HTML and parses model-generated review reports into typed fields.

Models write the text. KBRT decides how it is structured.
"""

__version__ = "0.1.0"
__ir_version__ = "0.1.0"
