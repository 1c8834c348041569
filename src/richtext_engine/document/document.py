"""Root document model."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from .blocks import Block


def _default_blocks() -> List[Block]:
    return [Block.paragraph()]


@dataclass(slots=True)
class Document:
    """Ordered, non-empty list of blocks; the single source of truth."""

    blocks: List[Block] = field(default_factory=_default_blocks)

    def __post_init__(self) -> None:
        if not self.blocks:
            self.blocks = _default_blocks()

    @classmethod
    def empty(cls) -> "Document":
        return cls()

    def copy(self) -> "Document":
        """Deep copy sharing no blocks or spans with ``self``."""

        return Document([block.copy() for block in self.blocks])

    def normalize(self) -> None:
        if not self.blocks:
            self.blocks = _default_blocks()
        for block in self.blocks:
            block.normalize()

    @property
    def block_count(self) -> int:
        return len(self.blocks)

    @property
    def total_length(self) -> int:
        return sum(block.text_length for block in self.blocks)

    @property
    def plain_text(self) -> str:
        return "\n".join(block.plain_text for block in self.blocks)

    @property
    def is_blank(self) -> bool:
        """A single empty paragraph, i.e. the freshly created state."""

        return (
            len(self.blocks) == 1
            and self.blocks[0].is_paragraph
            and self.blocks[0].text_length == 0
        )


__all__ = ["Document"]
