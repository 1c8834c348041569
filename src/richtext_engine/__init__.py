"""UI-agnostic rich text editing engine with an HTML codec."""

__all__ = [
    "adapters",
    "document",
    "editing",
    "host",
    "html",
    "runtime",
]

__version__ = "0.1.0"
