"""Caret, selection, and pending-format state tracked for a host."""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple, Optional, Tuple

from .spans import Span


class Caret(NamedTuple):
    block_index: int
    offset: int


Selection = Tuple[int, int]  # (start, end) within the caret's block


@dataclass(slots=True)
class EditorState:
    """Mutable caret + selection info for the block that has focus.

    ``pending_format`` is the span template applied to the next inserted text
    when formatting was toggled at a collapsed caret.
    """

    caret: Caret = Caret(0, 0)
    selection: Optional[Selection] = None
    pending_format: Optional[Span] = None

    def set_caret(self, block_index: int, offset: int) -> None:
        self.caret = Caret(block_index, offset)
        self.selection = None
        self.pending_format = None

    def set_selection(self, block_index: int, start: int, end: int) -> None:
        if start > end:
            start, end = end, start
        self.caret = Caret(block_index, end)
        self.selection = (start, end)
        self.pending_format = None

    def clear_selection(self) -> None:
        self.selection = None

    @property
    def has_range_selection(self) -> bool:
        return self.selection is not None and self.selection[0] != self.selection[1]
