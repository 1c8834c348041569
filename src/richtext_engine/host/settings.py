"""Host-boundary configuration for an editor session."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from richtext_engine.document import DEFAULT_HISTORY_SIZE
from richtext_engine.runtime import env_flag, env_int


@dataclass(frozen=True, slots=True)
class EditorSettings:
    """Options consumed at the session boundary, never by the engine core.

    ``process_input_html`` cleans raw input before parsing (quotes and
    newlines); ``process_newline_as_br`` turns newlines into ``<br/>`` instead
    of dropping them. ``process_output_html`` returns ``""`` for a blank
    document.
    """

    process_input_html: bool = True
    process_output_html: bool = True
    process_newline_as_br: bool = False
    read_only: bool = False
    history_size: int = DEFAULT_HISTORY_SIZE
    initial_text: Optional[str] = None

    def __post_init__(self) -> None:
        if self.history_size < 1:
            raise ValueError(
                f"history_size must be positive, got {self.history_size}"
            )

    @classmethod
    def from_env(cls, *, initial_text: Optional[str] = None) -> "EditorSettings":
        """Build settings from ``RICHTEXT_ENGINE_*`` environment variables."""

        defaults = cls()
        return cls(
            process_input_html=env_flag(
                "PROCESS_INPUT_HTML", defaults.process_input_html
            ),
            process_output_html=env_flag(
                "PROCESS_OUTPUT_HTML", defaults.process_output_html
            ),
            process_newline_as_br=env_flag(
                "NEWLINE_AS_BR", defaults.process_newline_as_br
            ),
            read_only=env_flag("READ_ONLY", defaults.read_only),
            history_size=max(1, env_int("HISTORY_SIZE", defaults.history_size)),
            initial_text=initial_text,
        )


__all__ = ["EditorSettings"]
