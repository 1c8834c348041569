"""Adapter that wires host widget events into an EditorSession."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional

from richtext_engine.document import Caret
from richtext_engine.host import EditorSession
from richtext_engine.runtime import telemetry


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class EditorHooks:
    """Callbacks invoked by the adapter to keep the host in sync."""

    on_change_content: Callable[[str], None]
    on_change_selection: Callable[[Dict[str, bool]], None] = _noop
    # Optional realtime log callback a host may use to surface debug lines
    log: Callable[[str], None] = _noop


class EditorHostAdapter:
    """Translates text-field events into session edits and pushes results back."""

    def __init__(self, session: EditorSession, hooks: EditorHooks) -> None:
        self.session = session
        self.hooks = hooks
        self._unsubscribe = session.add_change_listener(self._on_document_changed)
        self._publish_content()
        self._publish_selection()

    def handle_text_changed(self, block_index: int, new_text: str) -> None:
        self._log_state("text ->", block=block_index, length=len(new_text))
        self.session.sync_block_text(block_index, new_text)
        self._publish_selection()

    def handle_enter(self, block_index: int, offset: int) -> int:
        self._log_state("enter ->", block=block_index, offset=offset)
        new_index = self.session.press_enter(block_index, offset)
        self._publish_selection()
        return new_index

    def handle_backspace_at_start(self, block_index: int) -> Optional[Caret]:
        self._log_state("backspace ->", block=block_index)
        caret = self.session.backspace_at_start(block_index)
        if caret is not None:
            self._publish_selection()
        return caret

    def handle_delete_at_end(self, block_index: int) -> Optional[Caret]:
        self._log_state("delete ->", block=block_index)
        caret = self.session.delete_at_end(block_index)
        if caret is not None:
            self._publish_selection()
        return caret

    def handle_selection_changed(
        self, block_index: int, start: int, end: Optional[int] = None
    ) -> None:
        """Track a caret move (``end`` omitted or equal) or a range selection."""

        if end is None or end == start:
            self.session.set_caret(block_index, start)
        else:
            self.session.select(block_index, start, end)
        self._log_state("selection ->", block=block_index, start=start, end=end)
        self._publish_selection()

    def handle_paste(self, text: str) -> None:
        self._log_state("paste ->", length=len(text))
        self.session.paste(text)
        self._publish_selection()

    def close(self) -> None:
        self._unsubscribe()

    def _on_document_changed(self) -> None:
        self._log_state("change <-")
        self._publish_content()

    def _publish_content(self) -> None:
        self.hooks.on_change_content(self.session.get_text())

    def _publish_selection(self) -> None:
        self.hooks.on_change_selection(self.session.selection_format())

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot = self._state_metadata()
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix]
        for key, value in snapshot.items():
            parts.append(f"{key}={value!r}")
        line = " ".join(parts)
        try:
            self.hooks.log(line)
        except Exception as exc:
            telemetry.record_event(
                "adapter.log_failed",
                component=telemetry.Component.ADAPTER,
                level="warning",
                data={"error": repr(exc)},
            )

    def _state_metadata(self) -> Dict[str, object]:
        session = self.session
        state = session.state
        return {
            "caret": tuple(state.caret),
            "selection": state.selection,
            "pending": state.pending_format is not None,
            "blocks": session.document.block_count,
            "revision": session.controller.revision,
            "disabled": session.is_disabled,
        }


__all__ = ["EditorHooks", "EditorHostAdapter"]
