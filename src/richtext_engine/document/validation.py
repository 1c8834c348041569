"""Coordinate checks shared by the editing services."""

from __future__ import annotations

from .blocks import Block
from .document import Document


def is_valid_block_index(document: Document, index: int) -> bool:
    return 0 <= index < len(document.blocks)


def clamp_offset(block: Block, offset: int) -> int:
    return max(0, min(offset, block.text_length))
