"""Bridges between host widget events and an ``EditorSession``."""

from .hooks import EditorHooks, EditorHostAdapter

__all__ = ["EditorHooks", "EditorHostAdapter"]
