"""Document controller: every mutation of the live document goes through here."""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Any, ContextManager, Dict, List, Optional, Tuple

from richtext_engine.document import (
    CARET_FLAGS,
    FORMAT_FLAGS,
    Alignment,
    Block,
    BlockType,
    Document,
    Span,
    UndoRedoManager,
    clamp_offset,
    compute_text_edit,
    is_valid_block_index,
)
from richtext_engine.runtime import telemetry

from .events import ChangeListener, ChangeNotifier


class DocumentController:
    """Sole owner of the live ``Document``.

    Each public mutator validates its coordinates, snapshots the current
    document into ``history``, mutates in place, normalizes, and fires one
    change notification. Invalid input (unknown block, empty range, unknown
    format) is a silent no-op: nothing is recorded and no listener fires.
    """

    def __init__(
        self,
        document: Optional[Document] = None,
        history: Optional[UndoRedoManager] = None,
        *,
        on_change: Optional[ChangeListener] = None,
        logger_name: str | None = None,
    ) -> None:
        self._document = document if document is not None else Document()
        self.history = history if history is not None else UndoRedoManager()
        self.changes = ChangeNotifier()
        if on_change is not None:
            self.changes.add_listener(on_change)
        self._revision = 0
        self._logger_name = logger_name

    @property
    def document(self) -> Document:
        return self._document

    @property
    def revision(self) -> int:
        """Number of applied mutations, including undo and redo."""

        return self._revision

    @property
    def can_undo(self) -> bool:
        return self.history.can_undo

    @property
    def can_redo(self) -> bool:
        return self.history.can_redo

    # Text operations

    def insert_text(self, block_index: int, offset: int, text: str) -> None:
        """Insert ``text`` inheriting the format of the span covering ``offset``."""

        if not self._check_block("insert_text", block_index):
            return
        if not text:
            self._reject("insert_text", "empty_text", block_index)
            return
        with self._transaction("insert_text", block_index):
            block = self._document.blocks[block_index]
            _insert_inheriting(block, clamp_offset(block, offset), text)

    def insert_formatted_text(
        self,
        block_index: int,
        offset: int,
        text: str,
        *,
        bold: bool = False,
        italic: bool = False,
        underline: bool = False,
        strikethrough: bool = False,
        superscript: bool = False,
        subscript: bool = False,
    ) -> None:
        """Insert ``text`` as a new span carrying exactly the given flags."""

        if not self._check_block("insert_formatted_text", block_index):
            return
        if not text:
            self._reject("insert_formatted_text", "empty_text", block_index)
            return
        span = Span(
            text=text,
            bold=bold,
            italic=italic,
            underline=underline,
            strikethrough=strikethrough,
            superscript=superscript,
            subscript=subscript,
        )
        with self._transaction("insert_formatted_text", block_index):
            block = self._document.blocks[block_index]
            _insert_span(block, clamp_offset(block, offset), span)

    def delete_text(self, block_index: int, start: int, length: int) -> None:
        if not self._check_block("delete_text", block_index):
            return
        if length <= 0:
            self._reject("delete_text", "non_positive_length", block_index)
            return
        block = self._document.blocks[block_index]
        lo = max(start, 0)
        hi = min(start + length, block.text_length)
        if hi <= lo:
            self._reject("delete_text", "range_outside_block", block_index)
            return
        with self._transaction("delete_text", block_index):
            _delete_range(block, lo, hi - lo)

    def update_block_text(
        self,
        block_index: int,
        old_text: str,
        new_text: str,
        pending_format: Optional[Span] = None,
    ) -> None:
        """Sync a plain-text replacement into the block without losing spans.

        The change is reduced to one delete plus one insert at the first
        differing character. Inserted text takes ``pending_format`` when given,
        otherwise the format of the span at the edit point.
        """

        if not self._check_block("update_block_text", block_index):
            return
        edit = compute_text_edit(old_text, new_text)
        if edit.is_noop:
            self._reject("update_block_text", "unchanged", block_index)
            return
        with self._transaction("update_block_text", block_index):
            block = self._document.blocks[block_index]
            start = clamp_offset(block, edit.start)
            if edit.delete_length:
                _delete_range(block, start, edit.delete_length)
            if edit.inserted_text:
                start = clamp_offset(block, start)
                if pending_format is not None:
                    _insert_span(
                        block, start, pending_format.copy(text=edit.inserted_text)
                    )
                else:
                    _insert_inheriting(block, start, edit.inserted_text)

    # Formatting

    def toggle_format(
        self, block_index: int, start: int, end: int, format_name: str
    ) -> None:
        """Flip ``format_name`` across ``[start, end)``.

        If every non-empty span in the range already has the format it is
        removed everywhere, otherwise it is applied everywhere.
        """

        if not self._check_block("toggle_format", block_index):
            return
        if format_name not in FORMAT_FLAGS:
            self._reject("toggle_format", "unknown_format", block_index)
            return
        block = self._document.blocks[block_index]
        start = clamp_offset(block, start)
        end = clamp_offset(block, end)
        if start >= end:
            self._reject("toggle_format", "empty_range", block_index)
            return

        with self._transaction("toggle_format", block_index):
            _split_span_at(block, start)
            _split_span_at(block, end)
            inside = _spans_within(block, start, end)
            active = all(span.get_flag(format_name) for span in inside if span.text)
            for span in inside:
                span.set_flag(format_name, not active)

    def get_format_at(self, block_index: int, offset: int) -> Dict[str, bool]:
        if not is_valid_block_index(self._document, block_index):
            return {name: False for name in CARET_FLAGS}
        block = self._document.blocks[block_index]
        location = block.span_at(offset)
        span = block.spans[location.span_index]
        return {name: span.get_flag(name) for name in CARET_FLAGS}

    # Block operations

    def split_block(self, block_index: int, offset: int) -> int:
        """Split at ``offset``; the right half becomes a new paragraph.

        Returns the new block's index, or ``block_index`` when it is invalid.
        """

        if not self._check_block("split_block", block_index):
            return block_index
        with self._transaction("split_block", block_index):
            return self._split(block_index, offset)

    def merge_with_previous(self, block_index: int) -> int:
        """Append the block to its predecessor; return the caret offset there."""

        if block_index <= 0 or not is_valid_block_index(self._document, block_index):
            self._reject("merge_with_previous", "no_predecessor", block_index)
            return 0
        with self._transaction("merge_with_previous", block_index):
            blocks = self._document.blocks
            previous = blocks[block_index - 1]
            caret = previous.text_length
            previous.spans.extend(blocks[block_index].spans)
            previous.normalize()
            del blocks[block_index]
        return caret

    def change_block_type(self, block_index: int, new_type: BlockType | str) -> None:
        if not self._check_block("change_block_type", block_index):
            return
        try:
            block_type = BlockType(new_type)
        except ValueError:
            self._reject("change_block_type", "unknown_type", block_index)
            return
        with self._transaction("change_block_type", block_index):
            blocks = self._document.blocks
            blocks[block_index] = blocks[block_index].with_type(block_type)

    def set_alignment(self, block_index: int, alignment: Alignment | str) -> None:
        if not self._check_block("set_alignment", block_index):
            return
        try:
            value = Alignment(alignment)
        except ValueError:
            self._reject("set_alignment", "unknown_alignment", block_index)
            return
        with self._transaction("set_alignment", block_index):
            self._document.blocks[block_index].alignment = value

    def insert_parsed_document(
        self, block_index: int, offset: int, parsed: Document
    ) -> None:
        """Paste ``parsed`` at the caret.

        A lone paragraph is spliced inline. Anything else splits the target
        block: a leading paragraph joins the left half, a trailing paragraph
        joins the right half, and remaining blocks go in between.
        """

        if not self._check_block("insert_parsed_document", block_index):
            return
        fragment = parsed.copy()
        with self._transaction("insert_parsed_document", block_index):
            blocks = self._document.blocks
            target = blocks[block_index]
            offset = clamp_offset(target, offset)

            if len(fragment.blocks) == 1 and fragment.blocks[0].is_paragraph:
                left, right = _partition_spans(target, offset)
                target.spans = left + fragment.blocks[0].spans + right
                return

            self._split(block_index, offset)
            pasted = list(fragment.blocks)
            if pasted[0].is_paragraph:
                blocks[block_index].spans.extend(pasted.pop(0).spans)
            if pasted and pasted[-1].is_paragraph:
                blocks[block_index + 1].spans[0:0] = pasted.pop().spans
            blocks[block_index + 1 : block_index + 1] = pasted

    # History

    def undo(self) -> bool:
        previous = self.history.undo(self._document)
        if previous is None:
            self._reject("undo", "history_empty")
            return False
        self._restore(previous, "undo")
        return True

    def redo(self) -> bool:
        following = self.history.redo(self._document)
        if following is None:
            self._reject("redo", "history_empty")
            return False
        self._restore(following, "redo")
        return True

    # Whole-document operations

    def set_document(self, document: Document) -> None:
        with self._transaction("set_document"):
            self._document = document.copy()

    def clear(self) -> None:
        with self._transaction("clear"):
            self._document = Document()

    # Internals

    def _split(self, block_index: int, offset: int) -> int:
        blocks = self._document.blocks
        block = blocks[block_index]
        left, right = _partition_spans(block, clamp_offset(block, offset))
        block.spans = left or [Span()]
        blocks.insert(block_index + 1, Block.paragraph(right))
        return block_index + 1

    def _transaction(
        self, label: str, block_index: Optional[int] = None
    ) -> "EditTransaction":
        return EditTransaction(self, label, block_index=block_index)

    def _commit(self, snapshot: Document) -> None:
        self.history.push_state(snapshot)
        self._finish()

    def _rollback(self, snapshot: Document) -> None:
        self._document = snapshot

    def _restore(self, document: Document, label: str) -> None:
        with telemetry.span(
            label,
            logger_name=self._logger_name,
            component=telemetry.Component.DOCUMENT,
            metadata={"undo_depth": self.history.undo_depth},
        ):
            self._document = document
        self._finish()

    def _finish(self) -> None:
        self._document.normalize()
        self._revision += 1
        self.changes.notify()

    def _check_block(self, operation: str, block_index: int) -> bool:
        if is_valid_block_index(self._document, block_index):
            return True
        self._reject(operation, "block_out_of_range", block_index)
        return False

    def _reject(
        self, operation: str, reason: str, block_index: Optional[int] = None
    ) -> None:
        data: Dict[str, Any] = {"operation": operation, "reason": reason}
        if block_index is not None:
            data["block"] = block_index
        telemetry.record_event(
            "document.noop",
            component=telemetry.Component.DOCUMENT,
            level="debug",
            data=data,
            logger_name=self._logger_name,
        )


class EditTransaction(AbstractContextManager["EditTransaction"]):
    """Snapshot, profile, and commit (or roll back) one controller mutation."""

    def __init__(
        self,
        controller: DocumentController,
        label: str,
        *,
        block_index: Optional[int] = None,
    ) -> None:
        self.controller = controller
        self.label = label
        self.block_index = block_index
        self._snapshot: Optional[Document] = None
        self._span_cm: Optional[ContextManager[object]] = None

    def __enter__(self) -> "EditTransaction":
        self._snapshot = self.controller.document.copy()
        metadata: Dict[str, Any] = {"revision": self.controller.revision}
        if self.block_index is not None:
            metadata["block"] = self.block_index
        self._span_cm = telemetry.span(
            self.label,
            logger_name=self.controller._logger_name,
            component=telemetry.Component.DOCUMENT,
            metadata=metadata,
        )
        self._span_cm.__enter__()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        assert self._snapshot is not None
        if exc_type is not None:
            self.controller._rollback(self._snapshot)
        if self._span_cm is not None:
            self._span_cm.__exit__(exc_type, exc, tb)
        if exc_type is None:
            self.controller._commit(self._snapshot)
        return False


def _insert_inheriting(block: Block, offset: int, text: str) -> None:
    location = block.span_at(offset)
    span = block.spans[location.span_index]
    cut = location.local_offset
    span.text = span.text[:cut] + text + span.text[cut:]


def _split_span_at(block: Block, offset: int) -> None:
    """Cut the span containing ``offset`` in two; boundaries are left alone."""

    if offset <= 0 or offset >= block.text_length:
        return
    location = block.span_at(offset)
    span = block.spans[location.span_index]
    cut = location.local_offset
    if cut == 0 or cut == len(span.text):
        return
    block.spans[location.span_index : location.span_index + 1] = [
        span.copy(text=span.text[:cut]),
        span.copy(text=span.text[cut:]),
    ]


def _insertion_index(block: Block, offset: int) -> int:
    current = 0
    for index, span in enumerate(block.spans):
        if current >= offset:
            return index
        current += len(span.text)
    return len(block.spans)


def _insert_span(block: Block, offset: int, span: Span) -> None:
    _split_span_at(block, offset)
    block.spans.insert(_insertion_index(block, offset), span)


def _delete_range(block: Block, start: int, length: int) -> None:
    end = start + length
    kept: List[Span] = []
    current = 0
    for span in block.spans:
        span_start = current
        current += len(span.text)
        lo = max(span_start, start)
        hi = min(current, end)
        if lo < hi:
            span.text = span.text[: lo - span_start] + span.text[hi - span_start :]
            if not span.text:
                continue
        kept.append(span)
    block.spans = kept or [block.spans[0].copy(text="")]


def _spans_within(block: Block, start: int, end: int) -> List[Span]:
    inside: List[Span] = []
    current = 0
    for span in block.spans:
        span_start = current
        current += len(span.text)
        if span_start >= start and current <= end:
            inside.append(span)
    return inside


def _partition_spans(block: Block, offset: int) -> Tuple[List[Span], List[Span]]:
    left: List[Span] = []
    right: List[Span] = []
    current = 0
    for span in block.spans:
        span_start = current
        current += len(span.text)
        if current <= offset:
            left.append(span.copy())
        elif span_start >= offset:
            right.append(span.copy())
        else:
            cut = offset - span_start
            left.append(span.copy(text=span.text[:cut]))
            right.append(span.copy(text=span.text[cut:]))
    return left, right


__all__ = ["DocumentController", "EditTransaction"]
