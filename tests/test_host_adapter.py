from __future__ import annotations

from typing import Dict, List

from richtext_engine.adapters import EditorHooks, EditorHostAdapter
from richtext_engine.host import EditorSession, EditorSettings


def make_adapter(
    html: str = "<p>Hello</p>",
) -> tuple[EditorHostAdapter, List[str], List[Dict[str, bool]], List[str]]:
    contents: List[str] = []
    formats: List[Dict[str, bool]] = []
    logs: List[str] = []
    hooks = EditorHooks(
        on_change_content=contents.append,
        on_change_selection=formats.append,
        log=logs.append,
    )
    session = EditorSession(EditorSettings(initial_text=html))
    return EditorHostAdapter(session, hooks), contents, formats, logs


def test_adapter_publishes_initial_state() -> None:
    _, contents, formats, _ = make_adapter()

    assert contents == ["<p>Hello</p>"]
    assert formats and formats[-1]["bold"] is False


def test_text_change_updates_content_and_logs() -> None:
    adapter, contents, _, logs = make_adapter()

    adapter.handle_text_changed(0, "Hello!")

    assert contents[-1] == "<p>Hello!</p>"
    assert adapter.session.state.caret == (0, 6)
    assert any(line.startswith("text ->") for line in logs)
    assert any(line.startswith("change <-") for line in logs)


def test_selection_and_toggle_round_trip() -> None:
    adapter, contents, formats, _ = make_adapter("<p>Hello World</p>")

    adapter.handle_selection_changed(0, 6, 11)
    adapter.session.toggle_bold()
    adapter.handle_selection_changed(0, 8)

    assert contents[-1] == "<p>Hello <b>World</b></p>"
    assert formats[-1]["bold"] is True


def test_enter_and_merge_events() -> None:
    adapter, contents, _, _ = make_adapter("<p>Hello World</p>")

    assert adapter.handle_enter(0, 5) == 1
    assert contents[-1] == "<p>Hello</p><p> World</p>"

    caret = adapter.handle_backspace_at_start(1)
    assert caret == (0, 5)
    assert contents[-1] == "<p>Hello World</p>"

    assert adapter.handle_delete_at_end(0) is None
    assert adapter.handle_backspace_at_start(0) is None


def test_paste_event_inserts_html() -> None:
    adapter, contents, _, _ = make_adapter("<p>AB</p>")

    adapter.handle_selection_changed(0, 1)
    adapter.handle_paste("<i>x</i>")

    assert contents[-1] == "<p>A<i>x</i>B</p>"


def test_close_stops_content_updates() -> None:
    adapter, contents, _, _ = make_adapter()

    adapter.close()
    adapter.session.set_text("<p>other</p>")

    assert contents == ["<p>Hello</p>"]
    assert adapter.session.controller.changes.listener_count == 0


def test_failing_log_hook_does_not_break_events() -> None:
    contents: List[str] = []

    def broken_log(_line: str) -> None:
        raise RuntimeError("log sink down")

    session = EditorSession(EditorSettings(initial_text="<p>a</p>"))
    adapter = EditorHostAdapter(
        session, EditorHooks(on_change_content=contents.append, log=broken_log)
    )

    adapter.handle_text_changed(0, "ab")

    assert contents[-1] == "<p>ab</p>"
