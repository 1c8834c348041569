"""Inline text spans and their formatting vector."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Optional

FORMAT_FLAGS: tuple[str, ...] = (
    "bold",
    "italic",
    "underline",
    "strikethrough",
    "superscript",
    "subscript",
)

# Flags reported to hosts for caret/selection state.
CARET_FLAGS: tuple[str, ...] = ("bold", "italic", "underline", "strikethrough")


@dataclass(slots=True)
class Span:
    """Atomic run of text sharing one formatting vector.

    Every field is an immutable value, so ``copy`` is a full deep copy.
    """

    text: str = ""
    bold: bool = False
    italic: bool = False
    underline: bool = False
    strikethrough: bool = False
    superscript: bool = False
    subscript: bool = False
    font_family: Optional[str] = None
    font_size: Optional[float] = None
    foreground_color: Optional[str] = None
    background_color: Optional[str] = None
    link_url: Optional[str] = None

    @classmethod
    def plain(cls, text: str) -> "Span":
        return cls(text=text)

    def copy(self, **changes: Any) -> "Span":
        return replace(self, **changes)

    def same_format(self, other: "Span") -> bool:
        """True when every attribute except ``text`` matches."""

        return all(
            getattr(self, item.name) == getattr(other, item.name)
            for item in fields(self)
            if item.name != "text"
        )

    def get_flag(self, name: str) -> bool:
        if name not in FORMAT_FLAGS:
            return False
        return bool(getattr(self, name))

    def set_flag(self, name: str, value: bool) -> None:
        if name not in FORMAT_FLAGS:
            raise KeyError(f"Unknown format flag '{name}'")
        setattr(self, name, bool(value))

    def format_flags(self) -> Dict[str, bool]:
        return {name: bool(getattr(self, name)) for name in FORMAT_FLAGS}


__all__ = ["CARET_FLAGS", "FORMAT_FLAGS", "Span"]
