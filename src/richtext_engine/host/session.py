"""Programmatic editor façade owning parser, serializer, history and caret."""

from __future__ import annotations

from typing import Callable, Dict, Optional

from richtext_engine.document import (
    CARET_FLAGS,
    FORMAT_FLAGS,
    Alignment,
    BlockType,
    Caret,
    Document,
    EditorState,
    Span,
    UndoRedoManager,
    clamp_offset,
    compute_text_edit,
    is_valid_block_index,
)
from richtext_engine.editing import ChangeListener, DocumentController
from richtext_engine.html import HtmlParser, HtmlSerializer
from richtext_engine.runtime import telemetry

from .processing import looks_like_html, postprocess_output_html, preprocess_input_html
from .settings import EditorSettings


class EditorSession:
    """One editable document as seen by a host widget or script.

    Coordinates come from the tracked caret/selection in ``state``; the
    session forwards edits to its ``DocumentController`` and applies the
    host-boundary processing configured in ``settings``. While disabled, only
    ``set_text`` and ``clear`` change the document.
    """

    def __init__(
        self,
        settings: Optional[EditorSettings] = None,
        *,
        parser: Optional[HtmlParser] = None,
        serializer: Optional[HtmlSerializer] = None,
        logger_name: str | None = None,
    ) -> None:
        self.settings = settings or EditorSettings()
        self._logger_name = logger_name
        self.parser = parser or HtmlParser(logger_name=self._logger_name)
        self.serializer = serializer or HtmlSerializer()
        self.history = UndoRedoManager(self.settings.history_size)
        self.controller = DocumentController(
            history=self.history, logger_name=self._logger_name
        )
        self.state = EditorState()
        self._disabled = self.settings.read_only

        if self.settings.initial_text:
            self.controller.set_document(self._parse_input(self.settings.initial_text))
            self.history.reset()

    @property
    def document(self) -> Document:
        return self.controller.document

    # Content

    def get_text(self) -> str:
        html = self.serializer.serialize(self.document)
        if self.settings.process_output_html:
            html = postprocess_output_html(html, self.document)
        return html

    def set_text(self, html: str) -> None:
        self.controller.set_document(self._parse_input(html))
        self.state.set_caret(0, 0)

    def insert_text(self, text: str) -> None:
        if not self._editable("insert_text"):
            return
        block_index, offset = self._caret()
        self.controller.insert_text(block_index, offset, text)
        self._move_caret(block_index, offset + len(text))

    def insert_html(self, html: str) -> None:
        if not self._editable("insert_html"):
            return
        self._insert_document(self._parse_input(html))

    def paste(self, text: str) -> None:
        """Insert clipboard text, treating it as HTML when it looks like markup."""

        if not self._editable("paste") or not text:
            return
        as_html = self.settings.process_input_html and looks_like_html(text)
        telemetry.record_event(
            "session.paste",
            component=telemetry.Component.SESSION,
            level="debug",
            data={"as_html": as_html, "length": len(text)},
            logger_name=self._logger_name,
        )
        if as_html:
            self.insert_html(text)
        else:
            self.insert_text(text)

    def clear(self) -> None:
        self.controller.clear()
        self.state.set_caret(0, 0)

    @property
    def plain_text(self) -> str:
        return self.document.plain_text

    @property
    def character_count(self) -> int:
        return self.document.total_length

    # Formatting

    def toggle_bold(self) -> None:
        self.toggle_format("bold")

    def toggle_italic(self) -> None:
        self.toggle_format("italic")

    def toggle_underline(self) -> None:
        self.toggle_format("underline")

    def toggle_strikethrough(self) -> None:
        self.toggle_format("strikethrough")

    def toggle_superscript(self) -> None:
        self.toggle_format("superscript")

    def toggle_subscript(self) -> None:
        self.toggle_format("subscript")

    def toggle_format(self, format_name: str) -> None:
        """Toggle over the selection, or flip the pending format at the caret."""

        if not self._editable("toggle_format") or format_name not in FORMAT_FLAGS:
            return
        block_index, _ = self._caret()
        if self.state.has_range_selection:
            assert self.state.selection is not None
            start, end = self.state.selection
            self.controller.toggle_format(block_index, start, end, format_name)
            return

        base = self.state.pending_format or self._span_at_caret()
        pending = base.copy(text="")
        pending.set_flag(format_name, not base.get_flag(format_name))
        self.state.pending_format = pending

    def selection_format(self) -> Dict[str, bool]:
        pending = self.state.pending_format
        if pending is not None:
            return {name: pending.get_flag(name) for name in CARET_FLAGS}
        block_index, offset = self._caret()
        return self.controller.get_format_at(block_index, offset)

    def set_block_type(self, block_type: BlockType | str) -> None:
        if not self._editable("set_block_type"):
            return
        self.controller.change_block_type(self._caret().block_index, block_type)

    def set_alignment(self, alignment: Alignment | str) -> None:
        if not self._editable("set_alignment"):
            return
        self.controller.set_alignment(self._caret().block_index, alignment)

    # Caret and host text-field events

    def set_caret(self, block_index: int, offset: int) -> None:
        self.state.set_caret(block_index, offset)

    def select(self, block_index: int, start: int, end: int) -> None:
        self.state.set_selection(block_index, start, end)

    def sync_block_text(self, block_index: int, new_text: str) -> None:
        """Apply the full new text of a block as edited by the host widget."""

        if not self._editable("sync_block_text"):
            return
        if not is_valid_block_index(self.document, block_index):
            return
        old_text = self.document.blocks[block_index].plain_text
        edit = compute_text_edit(old_text, new_text)
        pending = self.state.pending_format
        self.controller.update_block_text(block_index, old_text, new_text, pending)
        self.state.caret = Caret(block_index, edit.start + len(edit.inserted_text))
        self.state.selection = None
        if pending is not None and len(new_text) > len(old_text):
            self.state.pending_format = None

    def press_enter(
        self, block_index: Optional[int] = None, offset: Optional[int] = None
    ) -> int:
        if not self._editable("press_enter"):
            return self._caret().block_index
        caret = self._caret()
        block_index = caret.block_index if block_index is None else block_index
        offset = caret.offset if offset is None else offset
        new_index = self.controller.split_block(block_index, offset)
        if new_index != block_index:
            self.state.set_caret(new_index, 0)
        return new_index

    def backspace_at_start(self, block_index: Optional[int] = None) -> Optional[Caret]:
        if not self._editable("backspace_at_start"):
            return None
        block_index = self._caret().block_index if block_index is None else block_index
        if block_index <= 0 or not is_valid_block_index(self.document, block_index):
            return None
        offset = self.controller.merge_with_previous(block_index)
        self.state.set_caret(block_index - 1, offset)
        return self.state.caret

    def delete_at_end(self, block_index: Optional[int] = None) -> Optional[Caret]:
        if not self._editable("delete_at_end"):
            return None
        block_index = self._caret().block_index if block_index is None else block_index
        if not is_valid_block_index(self.document, block_index + 1) or block_index < 0:
            return None
        offset = self.controller.merge_with_previous(block_index + 1)
        self.state.set_caret(block_index, offset)
        return self.state.caret

    # History and availability

    def undo(self) -> bool:
        if not self._editable("undo"):
            return False
        applied = self.controller.undo()
        self._clamp_caret()
        return applied

    def redo(self) -> bool:
        if not self._editable("redo"):
            return False
        applied = self.controller.redo()
        self._clamp_caret()
        return applied

    @property
    def can_undo(self) -> bool:
        return self.controller.can_undo

    @property
    def can_redo(self) -> bool:
        return self.controller.can_redo

    def enable(self) -> None:
        self._set_disabled(False)

    def disable(self) -> None:
        self._set_disabled(True)

    @property
    def is_disabled(self) -> bool:
        return self._disabled

    def add_change_listener(self, listener: ChangeListener) -> Callable[[], None]:
        return self.controller.changes.add_listener(listener)

    # Internals

    def _parse_input(self, html: str) -> Document:
        if self.settings.process_input_html:
            html = preprocess_input_html(
                html, newline_as_br=self.settings.process_newline_as_br
            )
        return self.parser.parse(html)

    def _insert_document(self, fragment: Document) -> None:
        block_index, offset = self._caret()
        target = self.document.blocks[block_index]
        offset = clamp_offset(target, offset)
        tail_length = target.text_length - offset
        blocks_before = self.document.block_count

        self.controller.insert_parsed_document(block_index, offset, fragment)

        landing = block_index + self.document.block_count - blocks_before
        landing_block = self.document.blocks[landing]
        self._move_caret(landing, landing_block.text_length - tail_length)

    def _caret(self) -> Caret:
        self._clamp_caret()
        return self.state.caret

    def _clamp_caret(self) -> None:
        block_index, offset = self.state.caret
        block_index = max(0, min(block_index, self.document.block_count - 1))
        offset = clamp_offset(self.document.blocks[block_index], offset)
        if (block_index, offset) != tuple(self.state.caret):
            self.state.caret = Caret(block_index, offset)
            self.state.selection = None

    def _move_caret(self, block_index: int, offset: int) -> None:
        self.state.caret = Caret(block_index, offset)
        self.state.selection = None
        self._clamp_caret()

    def _span_at_caret(self) -> Span:
        block_index, offset = self._caret()
        block = self.document.blocks[block_index]
        return block.spans[block.span_at(offset).span_index]

    def _editable(self, operation: str) -> bool:
        if not self._disabled:
            return True
        telemetry.record_event(
            "session.read_only",
            component=telemetry.Component.SESSION,
            level="debug",
            data={"operation": operation},
            logger_name=self._logger_name,
        )
        return False

    def _set_disabled(self, disabled: bool) -> None:
        if self._disabled == disabled:
            return
        self._disabled = disabled
        telemetry.record_event(
            "session.disabled" if disabled else "session.enabled",
            component=telemetry.Component.SESSION,
            logger_name=self._logger_name,
        )


__all__ = ["EditorSession"]
