# symptom_chat/services/markup.py
from __future__ import annotations

import markdown

_EXTENSIONS = ["sane_lists", "nl2br"]


def render_markup(text: str) -> str:
    """Render Markdown-ish model text to HTML that is safe to embed.

    Raw HTML in the input is not passed through; it comes out escaped.
    """
    md = markdown.Markdown(extensions=_EXTENSIONS, output_format="html")
    md.preprocessors.deregister("html_block")
    md.inlinePatterns.deregister("html")
    return md.convert(text or "")
