"""Document -> HTML string conversion."""

from __future__ import annotations

from typing import List, Tuple

from richtext_engine.document import Alignment, Block, Document, Span

# Outer -> inner nesting order for inline formatting tags.
INLINE_TAG_ORDER: Tuple[Tuple[str, str], ...] = (
    ("bold", "b"),
    ("italic", "i"),
    ("underline", "u"),
    ("strikethrough", "s"),
    ("superscript", "sup"),
    ("subscript", "sub"),
)


def escape_text(text: str) -> str:
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def escape_attr(value: str) -> str:
    return (
        value.replace("&", "&amp;")
        .replace('"', "&quot;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
    )


class HtmlSerializer:
    """Deterministic serializer producing the minimal supported tag set.

    Links wrap outermost, followed by ``INLINE_TAG_ORDER``; alignment is only
    written when it differs from left.
    """

    def serialize(self, document: Document) -> str:
        parts: List[str] = []
        for block in document.blocks:
            self._write_block(block, parts)
        return "".join(parts)

    def _write_block(self, block: Block, parts: List[str]) -> None:
        tag = block.tag
        if block.alignment is Alignment.LEFT:
            parts.append(f"<{tag}>")
        else:
            parts.append(f'<{tag} style="text-align: {block.alignment.value}">')
        for span in block.spans:
            self._write_span(span, parts)
        parts.append(f"</{tag}>")

    def _write_span(self, span: Span, parts: List[str]) -> None:
        if not span.text:
            return

        opening: List[str] = []
        closing: List[str] = []
        if span.link_url:
            opening.append(f'<a href="{escape_attr(span.link_url)}">')
            closing.append("</a>")
        for flag, tag in INLINE_TAG_ORDER:
            if getattr(span, flag):
                opening.append(f"<{tag}>")
                closing.append(f"</{tag}>")

        parts.extend(opening)
        parts.append(escape_text(span.text))
        parts.extend(reversed(closing))


_DEFAULT_SERIALIZER = HtmlSerializer()


def serialize(document: Document) -> str:
    return _DEFAULT_SERIALIZER.serialize(document)


__all__ = [
    "HtmlSerializer",
    "INLINE_TAG_ORDER",
    "escape_attr",
    "escape_text",
    "serialize",
]
