"""Mutation layer: document controller and change notification."""

from .controller import DocumentController, EditTransaction
from .events import ChangeListener, ChangeNotifier

__all__ = [
    "ChangeListener",
    "ChangeNotifier",
    "DocumentController",
    "EditTransaction",
]
