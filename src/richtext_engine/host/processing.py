"""Raw input cleanup and output collapsing applied at the host boundary."""

from __future__ import annotations

import re

from richtext_engine.document import Document

_HTML_TAG = re.compile(r"<[a-z][\s\S]*>", re.IGNORECASE)


def preprocess_input_html(html: str, *, newline_as_br: bool = False) -> str:
    """Reverse host-side quote escaping and resolve raw newlines.

    Hosts that pass HTML through string literals or JSON often deliver
    attributes as ``style=\\"...\\"``; the backslashes are removed so the
    markup parses as written. Quotes are never escaped here. ``\\r\\n`` and
    ``\\r`` become ``\\n`` first; newlines are then either converted to
    ``<br/>`` or dropped.
    """

    html = html.replace('\\"', '"').replace("\\'", "'")
    html = html.replace("\r\n", "\n").replace("\r", "\n")
    return html.replace("\n", "<br/>" if newline_as_br else "")


def postprocess_output_html(html: str, document: Document) -> str:
    if document.is_blank:
        return ""
    return html


def looks_like_html(text: str) -> bool:
    return _HTML_TAG.search(text) is not None


__all__ = ["looks_like_html", "postprocess_output_html", "preprocess_input_html"]
