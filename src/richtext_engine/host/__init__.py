"""Host boundary: settings, input/output processing and the editor session."""

from .processing import looks_like_html, postprocess_output_html, preprocess_input_html
from .session import EditorSession
from .settings import EditorSettings

__all__ = [
    "EditorSession",
    "EditorSettings",
    "looks_like_html",
    "postprocess_output_html",
    "preprocess_input_html",
]
