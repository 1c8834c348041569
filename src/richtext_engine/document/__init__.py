"""Document model, text diffing, and undo/redo data structures."""

from .blocks import Alignment, Block, BlockType, SpanLocation
from .diff import TextEdit, compute_text_edit
from .document import Document
from .spans import CARET_FLAGS, FORMAT_FLAGS, Span
from .state import Caret, EditorState, Selection
from .undo import DEFAULT_HISTORY_SIZE, UndoRedoManager
from .validation import clamp_offset, is_valid_block_index

__all__ = [
    "Alignment",
    "Block",
    "BlockType",
    "SpanLocation",
    "Document",
    "Span",
    "FORMAT_FLAGS",
    "CARET_FLAGS",
    "TextEdit",
    "compute_text_edit",
    "UndoRedoManager",
    "DEFAULT_HISTORY_SIZE",
    "Caret",
    "EditorState",
    "Selection",
    "clamp_offset",
    "is_valid_block_index",
]
