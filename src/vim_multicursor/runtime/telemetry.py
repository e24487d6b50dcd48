"""Engine telemetry on top of telelog.

Replication passes, cursor-set searches and buffer transactions run inside
``span`` blocks, which telelog profiles and tracks per engine component.
Discrete happenings (skipped cursors, mode switches, removed cursors) go
through ``record_event``.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, MutableMapping, Optional, Tuple, cast

import telelog  # type: ignore[import]

from .settings import env, env_flag, env_int

tl = cast(Any, telelog)

ROOT_LOGGER = "vim_multicursor"

# preset -> (minimum level, console output)
_PRESETS: Dict[str, Tuple[str, bool]] = {
    "debug": ("DEBUG", True),
    "quiet": ("INFO", False),
}

_loggers: MutableMapping[str, Any] = {}
_config: Optional[Any] = None


def _config_from_env() -> Any:
    config = tl.Config()
    config.with_min_level((env("LOG_LEVEL") or "INFO").upper())
    console = not env_flag("DISABLE_CONSOLE", False)
    config.with_console_output(console)
    if console:
        config.with_colored_output(not env_flag("NO_COLOR", False))
    if env_flag("LOG_JSON", False):
        config.with_json_format(True)
    log_file = env("LOG_FILE")
    if log_file:
        config.with_file_output(log_file)
    if env_flag("LOG_BUFFERED", False):
        config.with_buffering(True)
        config.with_buffer_size(env_int("LOG_BUFFER_SIZE", 2048))
    return config


def configure(preset: Optional[str] = None) -> None:
    """Rebuild the telelog config from ``preset``, or from the environment."""

    global _config
    if preset is None:
        config = _config_from_env()
    else:
        try:
            level, console = _PRESETS[preset]
        except KeyError:
            raise ValueError(f"Unknown telemetry preset '{preset}'") from None
        config = tl.Config()
        config.with_min_level(level)
        config.with_console_output(console)
    config.with_profiling(True)
    _config = config
    _loggers.clear()


def _logger(name: Optional[str]) -> Any:
    key = name or ROOT_LOGGER
    if key not in _loggers:
        if _config is None:
            configure()
        _loggers[key] = tl.Logger.with_config(key, _config)
    return _loggers[key]


def _emit(log: Any, level: str, message: str, fields: Dict[str, Any]) -> None:
    pairs = [(key, str(value)) for key, value in fields.items()]
    structured = getattr(log, f"{level}_with", None)
    if structured is not None:
        structured(message, pairs)
    else:
        getattr(log, level)(f"{message} {dict(pairs)}")


def record_event(
    name: str,
    *,
    data: Optional[Dict[str, Any]] = None,
    level: str = "debug",
    logger_name: Optional[str] = None,
) -> None:
    _emit(_logger(logger_name), level, f"event::{name}", data or {})


@dataclass
class SpanRecord:
    """Fields reported when a span closes."""

    name: str
    fields: Dict[str, Any] = field(default_factory=dict)

    def set(self, key: str, value: Any) -> None:
        self.fields[key] = value


@contextmanager
def span(
    name: str,
    *,
    component: str,
    cursors: Optional[int] = None,
    command: Optional[str] = None,
    logger_name: Optional[str] = None,
    **fields: Any,
) -> Iterator[SpanRecord]:
    """Profile one engine operation under ``component``.

    ``cursors`` and ``command`` are reported by replication passes and
    searches; extra keyword fields and whatever the block sets on the yielded
    record are logged once the block ends. A failing block is logged at error
    level and re-raised.
    """

    log = _logger(logger_name)
    record = SpanRecord(name)
    if cursors is not None:
        record.set("cursors", cursors)
    if command is not None:
        record.set("command", command)
    record.fields.update(fields)

    with log.track_component(component), log.profile(name):
        try:
            yield record
        except Exception as exc:
            record.set("error", exc)
            _emit(log, "error", f"span::{name}", record.fields)
            raise
    _emit(log, "debug", f"span::{name}", record.fields)


__all__ = ["SpanRecord", "configure", "record_event", "span"]
