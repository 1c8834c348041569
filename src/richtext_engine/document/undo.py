"""Snapshot-based undo/redo history for documents."""

from __future__ import annotations

from collections import deque
from typing import Deque, Optional

from richtext_engine.runtime import telemetry

from .document import Document

DEFAULT_HISTORY_SIZE = 100


class UndoRedoManager:
    """Two bounded stacks of deep-copied document snapshots.

    History is linear: pushing a new state after an undo discards the redo
    line. When a stack is full the oldest snapshot is evicted.
    """

    def __init__(self, capacity: int = DEFAULT_HISTORY_SIZE) -> None:
        if capacity < 1:
            raise ValueError(f"History capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._undo: Deque[Document] = deque(maxlen=capacity)
        self._redo: Deque[Document] = deque(maxlen=capacity)

    def push_state(self, document: Document) -> None:
        self._append(self._undo, document, "undo")
        self._redo.clear()

    def undo(self, current: Document) -> Optional[Document]:
        if not self._undo:
            return None
        self._append(self._redo, current, "redo")
        return self._undo.pop()

    def redo(self, current: Document) -> Optional[Document]:
        if not self._redo:
            return None
        self._append(self._undo, current, "undo")
        return self._redo.pop()

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    @property
    def undo_depth(self) -> int:
        return len(self._undo)

    @property
    def redo_depth(self) -> int:
        return len(self._redo)

    def reset(self) -> None:
        self._undo.clear()
        self._redo.clear()

    def _append(self, stack: Deque[Document], document: Document, side: str) -> None:
        if len(stack) == self.capacity:
            telemetry.record_event(
                "history.evict",
                component=telemetry.Component.HISTORY,
                level="debug",
                data={"stack": side, "capacity": self.capacity},
            )
        stack.append(document.copy())


__all__ = ["DEFAULT_HISTORY_SIZE", "UndoRedoManager"]
