"""HTML string -> Document conversion.

Recognised markup:

- block tags: ``p``, ``div`` (as paragraph), ``h1``-``h6``
- inline tags: ``b``/``strong``, ``i``/``em``, ``u``/``ins``,
  ``s``/``strike``/``del``, ``sup``, ``sub``, ``a[href]``
- ``br``: a newline inside running text, an empty paragraph on its own

Anything else is a transparent container. The parser never raises.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString

from richtext_engine.document import Alignment, Block, BlockType, Document, Span
from richtext_engine.runtime import telemetry

_BLOCK_TAGS = ["p", "div", "h1", "h2", "h3", "h4", "h5", "h6"]

_NOISE_TAGS = {"head", "title", "meta", "link", "script", "style", "noscript", "template"}

_INLINE_FLAGS: Dict[str, str] = {
    "b": "bold",
    "strong": "bold",
    "i": "italic",
    "em": "italic",
    "u": "underline",
    "ins": "underline",
    "s": "strikethrough",
    "strike": "strikethrough",
    "del": "strikethrough",
    "sup": "superscript",
    "sub": "subscript",
}


def _tag_name(node: Tag) -> str:
    return (node.name or "").lower()


def _contains_block(node: Tag) -> bool:
    return node.find(_BLOCK_TAGS) is not None


def parse_alignment(style: Optional[str]) -> Alignment:
    """Read ``text-align`` from an inline style; anything else is ignored."""

    alignment = Alignment.LEFT
    for declaration in (style or "").split(";"):
        prop, _, value = declaration.partition(":")
        if prop.strip().lower() != "text-align":
            continue
        try:
            alignment = Alignment(value.strip().lower())
        except ValueError:
            alignment = Alignment.LEFT
    return alignment


def collect_inline(node: object, spans: List[Span], fmt: Span) -> None:
    """Append spans for ``node`` and its subtree, inheriting ``fmt``."""

    if isinstance(node, PreformattedString):
        return
    if isinstance(node, NavigableString):
        text = str(node)
        if text:
            spans.append(fmt.copy(text=text))
        return
    if not isinstance(node, Tag):
        return

    name = _tag_name(node)
    if name in _NOISE_TAGS:
        return
    if name == "br":
        spans.append(fmt.copy(text="\n"))
        return

    child_fmt = inherit_format(node, fmt)
    for child in node.children:
        collect_inline(child, spans, child_fmt)


def inherit_format(node: Tag, fmt: Span) -> Span:
    """Format in effect inside ``node``; non-formatting tags pass ``fmt`` through."""

    name = _tag_name(node)
    flag = _INLINE_FLAGS.get(name)
    if flag is not None:
        return fmt.copy(**{flag: True})
    if name == "a":
        href = node.get("href")
        return fmt.copy(link_url=str(href) if href else None)
    return fmt


class _BlockBuilder:
    """Walks the parsed tree at block level, producing ``Block`` objects.

    Inline content met outside a block tag accumulates in ``_run`` and is
    flushed as one implicit paragraph. Whitespace-only text between blocks is
    held back until more inline content follows, so it never produces a block
    of its own. Formatting tags wrapping block tags (``<b><p>..</p></b>``)
    carry their format down into every block beneath them.
    """

    def __init__(self) -> None:
        self.blocks: List[Block] = []
        self._run: List[Span] = []
        self._held_whitespace: List[Span] = []

    def walk(self, parent: Tag, fmt: Optional[Span] = None) -> None:
        fmt = fmt or Span()
        for node in parent.children:
            if isinstance(node, PreformattedString):
                continue
            if isinstance(node, NavigableString):
                self._add_text(str(node), fmt)
                continue
            if not isinstance(node, Tag):
                continue

            name = _tag_name(node)
            if name in _NOISE_TAGS:
                continue
            if name == "br":
                self._add_break(fmt)
                continue
            if _contains_block(node):
                self._flush_run()
                self.walk(node, inherit_format(node, fmt))
                self._flush_run()
                continue

            block_type = BlockType.from_tag(name) if name in _BLOCK_TAGS else None
            if block_type is not None:
                self._flush_run()
                self.blocks.append(self._make_block(node, block_type, fmt))
                continue

            self._commit_whitespace()
            collect_inline(node, self._run, fmt)

    def finish(self) -> List[Block]:
        self._flush_run()
        return self.blocks or [Block.paragraph()]

    def _add_text(self, text: str, fmt: Span) -> None:
        if not text:
            return
        if not text.strip():
            if self._run:
                self._held_whitespace.append(fmt.copy(text=text))
            return
        self._commit_whitespace()
        self._run.append(fmt.copy(text=text))

    def _add_break(self, fmt: Span) -> None:
        if self._run:
            self._commit_whitespace()
            self._run.append(fmt.copy(text="\n"))
        else:
            self.blocks.append(Block.paragraph())

    def _commit_whitespace(self) -> None:
        self._run.extend(self._held_whitespace)
        self._held_whitespace = []

    def _flush_run(self) -> None:
        self._held_whitespace = []
        if not self._run:
            return
        self.blocks.append(Block.paragraph(self._run))
        self._run = []

    @staticmethod
    def _make_block(node: Tag, block_type: BlockType, fmt: Span) -> Block:
        spans: List[Span] = []
        for child in node.children:
            collect_inline(child, spans, fmt)
        style = node.get("style")
        return Block(block_type, spans, parse_alignment(str(style) if style else None))


class HtmlParser:
    """Permissive HTML parser backed by BeautifulSoup's ``html.parser``."""

    def __init__(self, *, logger_name: str | None = None) -> None:
        self._logger_name = logger_name

    def parse(self, html: Optional[str]) -> Document:
        if html is None or not html.strip():
            return Document()

        with telemetry.span(
            "parse",
            logger_name=self._logger_name,
            component=telemetry.Component.HTML,
            metadata={"length": len(html)},
        ) as handle:
            soup: Optional[BeautifulSoup] = None
            try:
                soup = BeautifulSoup(html, "html.parser")
                builder = _BlockBuilder()
                builder.walk(soup)
                blocks = builder.finish()
            except Exception as exc:
                handle.add_metadata("fallback", type(exc).__name__)
                telemetry.record_event(
                    "html.parse_fallback",
                    component=telemetry.Component.HTML,
                    level="warning",
                    data={"error": repr(exc)},
                    logger_name=self._logger_name,
                )
                blocks = [Block.paragraph([Span.plain(_fallback_text(soup, html))])]

        document = Document(blocks)
        document.normalize()
        return document


def _fallback_text(soup: Optional[BeautifulSoup], html: str) -> str:
    if soup is None:
        return html
    try:
        return soup.get_text()
    except RecursionError:
        return html


_DEFAULT_PARSER = HtmlParser()


def parse(html: Optional[str]) -> Document:
    return _DEFAULT_PARSER.parse(html)


__all__ = ["HtmlParser", "collect_inline", "inherit_format", "parse", "parse_alignment"]
