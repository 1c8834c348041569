"""Block-level nodes: paragraphs and headings."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, NamedTuple, Optional

from .spans import Span


class Alignment(str, Enum):
    """Horizontal alignment; values are the CSS ``text-align`` keywords."""

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"
    JUSTIFY = "justify"


class BlockType(str, Enum):
    """Closed set of block variants; values are the HTML tag names."""

    PARAGRAPH = "p"
    HEADING1 = "h1"
    HEADING2 = "h2"
    HEADING3 = "h3"
    HEADING4 = "h4"
    HEADING5 = "h5"
    HEADING6 = "h6"

    @property
    def tag(self) -> str:
        return self.value

    @property
    def level(self) -> int:
        if self is BlockType.PARAGRAPH:
            return 0
        return int(self.value[1:])

    @property
    def is_heading(self) -> bool:
        return self is not BlockType.PARAGRAPH

    @classmethod
    def heading(cls, level: int) -> "BlockType":
        if not 1 <= level <= 6:
            raise ValueError(f"Heading level must be 1-6, got {level}")
        return cls(f"h{level}")

    @classmethod
    def from_tag(cls, tag: str) -> Optional["BlockType"]:
        name = tag.strip().lower()
        if name == "div":
            return cls.PARAGRAPH
        try:
            return cls(name)
        except ValueError:
            return None


class SpanLocation(NamedTuple):
    span_index: int
    local_offset: int


def _default_spans() -> List[Span]:
    return [Span.plain("")]


@dataclass(slots=True)
class Block:
    """One structural unit of the document.

    A block always holds at least one span; an empty block carries a single
    empty-text span.
    """

    block_type: BlockType = BlockType.PARAGRAPH
    spans: List[Span] = field(default_factory=_default_spans)
    alignment: Alignment = Alignment.LEFT

    def __post_init__(self) -> None:
        if not self.spans:
            self.spans = _default_spans()

    @classmethod
    def paragraph(
        cls,
        spans: Optional[Iterable[Span]] = None,
        *,
        alignment: Alignment = Alignment.LEFT,
    ) -> "Block":
        return cls(BlockType.PARAGRAPH, list(spans or ()), alignment)

    @classmethod
    def heading(
        cls,
        level: int,
        spans: Optional[Iterable[Span]] = None,
        *,
        alignment: Alignment = Alignment.LEFT,
    ) -> "Block":
        return cls(BlockType.heading(level), list(spans or ()), alignment)

    @property
    def tag(self) -> str:
        return self.block_type.tag

    @property
    def level(self) -> int:
        return self.block_type.level

    @property
    def is_paragraph(self) -> bool:
        return self.block_type is BlockType.PARAGRAPH

    @property
    def text_length(self) -> int:
        return sum(len(span.text) for span in self.spans)

    @property
    def plain_text(self) -> str:
        return "".join(span.text for span in self.spans)

    def with_type(self, block_type: BlockType) -> "Block":
        """Rebuild this block as another variant with the same content."""

        return Block(block_type, self.spans, self.alignment)

    def copy(self) -> "Block":
        return Block(
            self.block_type,
            [span.copy() for span in self.spans],
            self.alignment,
        )

    def span_at(self, offset: int) -> SpanLocation:
        """Map a block offset to ``(span_index, local_offset)``.

        An offset on a span boundary resolves to the end of the left span.
        Out-of-range offsets clamp to the block's start or end.
        """

        offset = max(offset, 0)
        current = 0
        for index, span in enumerate(self.spans):
            span_len = len(span.text)
            if offset <= current + span_len:
                return SpanLocation(index, offset - current)
            current += span_len
        last = len(self.spans) - 1
        return SpanLocation(last, len(self.spans[last].text))

    def normalize(self) -> None:
        """Drop empty spans and merge adjacent format-equal ones."""

        merged: List[Span] = []
        for span in self.spans:
            if not span.text:
                continue
            if merged and merged[-1].same_format(span):
                merged[-1] = merged[-1].copy(text=merged[-1].text + span.text)
            else:
                merged.append(span)
        if not merged:
            merged.append(self.spans[0].copy(text="") if self.spans else Span())
        self.spans = merged


__all__ = ["Alignment", "Block", "BlockType", "SpanLocation"]
