"""Telemetry for the rich text engine, built on telelog.

Every log line belongs to one engine :class:`Component`. Edits are profiled
as ``<component>::<operation>`` spans tracked under that component, and
discrete occurrences (no-op edits, history eviction, parser fallback) are
emitted through :func:`record_event`.
"""

from __future__ import annotations

from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Iterator, List, MutableMapping, Optional, Tuple, cast

import telelog  # type: ignore[import]

from .env import env, env_flag, env_int

tl = cast(Any, telelog)

ROOT_LOGGER = env("LOGGER", "richtext_engine") or "richtext_engine"


class Component(str, Enum):
    """Engine areas that own their own logger and span namespace."""

    DOCUMENT = "document"
    HISTORY = "history"
    HTML = "html"
    SESSION = "session"
    ADAPTER = "adapter"

    @property
    def logger_name(self) -> str:
        return f"{ROOT_LOGGER}.{self.value}"


@dataclass(frozen=True, slots=True)
class TelemetrySettings:
    """Logging options; ``from_env`` reads the ``RICHTEXT_ENGINE_LOG_*`` family."""

    level: str = "WARNING"
    console: bool = True
    colored: bool = True
    json: bool = False
    log_file: str = ""
    buffer_size: Optional[int] = None

    @classmethod
    def from_env(cls) -> "TelemetrySettings":
        buffered = env_flag("LOG_BUFFERED", False)
        return cls(
            level=(env("LOG_LEVEL") or "WARNING").upper(),
            console=not env_flag("DISABLE_CONSOLE", False),
            colored=not env_flag("NO_COLOR", False),
            json=env_flag("LOG_JSON", False),
            log_file=env("LOG_FILE", "") or "",
            buffer_size=env_int("LOG_BUFFER_SIZE", 2048) if buffered else None,
        )

    def to_config(self) -> Any:
        config = tl.Config()
        config.with_min_level(self.level)
        config.with_console_output(self.console)
        if self.console:
            config.with_colored_output(self.colored)
        if self.json:
            config.with_json_format(True)
        if self.log_file:
            config.with_file_output(self.log_file)
        if self.buffer_size:
            config.with_buffering(True)
            config.with_buffer_size(self.buffer_size)
        # Spans rely on telelog's profiler.
        config.with_profiling(True)
        return config


PRESETS: Dict[str, TelemetrySettings] = {
    # Everything, to the console, for working on the engine itself.
    "development": TelemetrySettings(level="DEBUG"),
    # Errors only and no console; used by hosts embedding the engine in tests.
    "quiet": TelemetrySettings(level="ERROR", console=False),
}

_loggers: MutableMapping[str, Any] = {}
_config: Optional[Any] = None


def configure(
    *,
    config: Optional[Any] = None,
    preset: Optional[str] = None,
    settings: Optional[TelemetrySettings] = None,
) -> None:
    """Swap the active configuration and drop cached loggers.

    Accepts at most one of a ready ``telelog.Config``, a preset name from
    :data:`PRESETS`, or explicit ``settings``. With none, settings are read
    from the environment.
    """

    global _config
    chosen = [item for item in (config, preset, settings) if item is not None]
    if len(chosen) > 1:
        raise ValueError("Provide only one of `config`, `preset` or `settings`.")

    if preset is not None:
        if preset.lower() not in PRESETS:
            raise ValueError(
                f"Unknown preset '{preset}'; expected one of {sorted(PRESETS)}."
            )
        settings = PRESETS[preset.lower()]
    if config is None:
        config = (settings or TelemetrySettings.from_env()).to_config()

    _config = config
    _loggers.clear()


def get_logger(component: Component | str | None = None) -> Any:
    """Cached logger for a component, an explicit logger name, or the root."""

    if isinstance(component, Component):
        name = component.logger_name
    else:
        name = component or ROOT_LOGGER
    if name not in _loggers:
        if _config is None:
            configure()
        _loggers[name] = tl.Logger.with_config(name, _config)
    return _loggers[name]


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, Enum):
        return str(value.value)
    return repr(value) if isinstance(value, (dict, list, tuple, set)) else str(value)


def _log(logger: Any, level: str, message: str, payload: Dict[str, Any]) -> None:
    """Write ``payload`` as structured pairs when the logger supports it."""

    level = level.lower()
    structured = getattr(logger, f"{level}_with", None)
    pairs: List[Tuple[str, str]] = [
        (str(key), _stringify(value)) for key, value in payload.items()
    ]
    if structured is not None:
        structured(message, pairs)
        return
    plain = getattr(logger, level, None)
    if plain is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    plain(f"{message} {dict(pairs)}")


def record_event(
    name: str,
    *,
    component: Component | None = None,
    level: str = "info",
    data: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    """Emit ``event::<name>``; ``logger_name`` overrides the component logger."""

    logger = get_logger(logger_name or component)
    payload: Dict[str, Any] = {"event": name}
    if component is not None:
        payload["component"] = component
    payload.update(data or {})
    _log(logger, level, f"event::{name}", payload)


@dataclass
class SpanHandle:
    """Live view of an open span; metadata added here is logged on failure."""

    logger: Any
    label: str
    component: Optional[Component] = None
    metadata: Dict[str, str] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = _stringify(value)

    def fail(self, reason: str) -> None:
        payload: Dict[str, Any] = {"span": self.label, **self.metadata}
        if self.component is not None:
            payload["component"] = self.component
        payload["reason"] = reason
        _log(self.logger, "error", "span::fail", payload)


@contextmanager
def span(
    operation: str,
    *,
    component: Component | None = None,
    metadata: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> Iterator[SpanHandle]:
    """Profile ``operation`` as ``<component>::<operation>``.

    With a component the span is also tracked by telelog under the
    component's name. ``metadata`` is pushed as logger context while the
    block runs.
    """

    label = f"{component.value}::{operation}" if component else operation
    logger = get_logger(logger_name or component)
    handle = SpanHandle(logger=logger, label=label, component=component)
    for key, value in (metadata or {}).items():
        handle.add_metadata(key, value)

    with ExitStack() as stack:
        for key, value in handle.metadata.items():
            logger.add_context(key, value)
            stack.callback(logger.remove_context, key)
        if component is not None:
            stack.enter_context(logger.track_component(component.value))
        stack.enter_context(logger.profile(label))
        try:
            yield handle
        except Exception as exc:
            handle.fail(str(exc))
            raise


__all__ = [
    "Component",
    "PRESETS",
    "SpanHandle",
    "TelemetrySettings",
    "configure",
    "get_logger",
    "record_event",
    "span",
]
