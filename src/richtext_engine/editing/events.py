"""Change notification for document mutations."""

from __future__ import annotations

from typing import Callable, List

ChangeListener = Callable[[], None]


class ChangeNotifier:
    """Registry of zero-argument listeners fired after each applied edit."""

    def __init__(self) -> None:
        self._listeners: List[ChangeListener] = []

    def add_listener(self, listener: ChangeListener) -> Callable[[], None]:
        """Register ``listener`` and return a callable that removes it."""

        self._listeners.append(listener)
        return lambda: self.remove_listener(listener)

    def remove_listener(self, listener: ChangeListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def notify(self) -> None:
        for listener in list(self._listeners):
            listener()


__all__ = ["ChangeListener", "ChangeNotifier"]
