"""Markdown to HTML, delegated to Python-Markdown."""

from __future__ import annotations

import markdown

MARKDOWN_EXTENSIONS = ["fenced_code", "tables"]


def render_markdown(text: str) -> str:
    """Render Markdown `text` to an HTML fragment.

    Raw HTML, including embed directives, passes through untouched so the
    result can go through the embed pipeline.
    """
    return markdown.markdown(text, extensions=MARKDOWN_EXTENSIONS, output_format="html")
