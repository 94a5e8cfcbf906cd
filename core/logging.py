# ============================================================================
# STRUCTURED LOGGING
# ============================================================================
# EPOCH: 1 - MONGODB WATCHER
# STATUS: Core - Structured logging with watcher context
# PURPOSE: Consistent, queryable logging across watchers and the executor
# CREATED: 19 OCT 2026
# ============================================================================
"""
Structured Logging

Every log line written while a check runs carries the watcher it belongs
to. The executor opens a context per check (watcher name, group, check id)
and everything logged underneath inherits it, including driver-side
messages from the watcher.

Context lives in a ContextVar, so checks running concurrently on one event
loop never see each other's fields.

Output:
- HumanFormatter: one line, context inline  (default)
- StructuredFormatter: one JSON object per line  (LOG_FORMAT=json)

Usage:
    from core.logging import get_logger, log_context, ComponentType

    logger = get_logger(__name__, ComponentType.WATCHER)

    with log_context(watcher_name="MongoDB Watcher", check_id="3f9c"):
        logger.info("Database found", extra={"database": "TestDb"})
"""

import contextvars
import json
import logging
import os
import sys
from contextlib import contextmanager
from dataclasses import dataclass, field, fields, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterator, Optional, Tuple, Union


class ComponentType(str, Enum):
    """Which part of the service emitted a record."""
    WATCHER = "watcher"
    EXECUTOR = "executor"
    REGISTRY = "registry"
    API = "api"


# ============================================================================
# CONTEXT
# ============================================================================

@dataclass(frozen=True)
class LogContext:
    """Fields attached to every record logged inside a log_context block."""
    watcher_name: Optional[str] = None
    watcher_group: Optional[str] = None
    check_id: Optional[str] = None
    component: Optional[str] = None
    operation: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def merged(self, **overrides) -> "LogContext":
        """Child context: overrides win, extra dicts are merged."""
        extra = {**self.extra, **overrides.pop("extra", {})}
        return replace(self, extra=extra, **overrides)

    def to_dict(self) -> Dict[str, Any]:
        """Set fields only, with extra flattened in."""
        result = {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name != "extra" and getattr(self, f.name) is not None
        }
        result.update(self.extra)
        return result


_EMPTY_CONTEXT = LogContext()

_contexts: contextvars.ContextVar[Tuple[LogContext, ...]] = contextvars.ContextVar(
    "watcher_log_contexts", default=()
)


def get_current_context() -> LogContext:
    """Innermost active context, or an empty one."""
    contexts = _contexts.get()
    return contexts[-1] if contexts else _EMPTY_CONTEXT


@contextmanager
def log_context(**kwargs) -> Iterator[LogContext]:
    """
    Open a nested logging context.

    Unspecified fields are inherited from the enclosing context.

    Example:
        with log_context(watcher_name="MongoDB Watcher", component="executor"):
            with log_context(check_id="3f9c"):
                logger.info("Running check")   # carries all three fields
    """
    context = get_current_context().merged(**kwargs)
    token = _contexts.set(_contexts.get() + (context,))
    try:
        yield context
    finally:
        _contexts.reset(token)


# ============================================================================
# FORMATTERS
# ============================================================================

def _record_time(record: logging.LogRecord) -> datetime:
    return datetime.fromtimestamp(record.created, tz=timezone.utc)


def _record_data(record: logging.LogRecord) -> Dict[str, Any]:
    # ContextLogger and log_checkpoint store their fields under record.extra
    return getattr(record, "extra", None) or {}


class StructuredFormatter(logging.Formatter):
    """
    One JSON object per record.

    Keys: timestamp, level, logger, message, context (active log_context),
    data (record extras), exception, source.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": _record_time(record).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        context = get_current_context().to_dict()
        if context:
            payload["context"] = context

        data = _record_data(record)
        if data:
            payload["data"] = data

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        payload["source"] = f"{record.filename}:{record.lineno}"

        return json.dumps(payload, default=str)


class HumanFormatter(logging.Formatter):
    """Single-line output for local runs: time, level, logger, [context], message."""

    _CONTEXT_LABELS = (
        ("watcher_name", "watcher"),
        ("watcher_group", "group"),
        ("check_id", "check"),
    )

    def format(self, record: logging.LogRecord) -> str:
        context = get_current_context()
        labels = [
            f"{label}={getattr(context, name)}"
            for name, label in self._CONTEXT_LABELS
            if getattr(context, name)
        ]
        prefix = (
            f"{_record_time(record):%Y-%m-%d %H:%M:%S} "
            f"{record.levelname:<8} {record.name}"
        )
        if labels:
            prefix += f" [{', '.join(labels)}]"

        line = f"{prefix}: {record.getMessage()}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


# ============================================================================
# LOGGERS
# ============================================================================

class ContextLogger(logging.LoggerAdapter):
    """
    Adapter stamping each record with the active log context.

    The adapter's component is added unless the context or the call
    already sets one.
    """

    def process(self, msg, kwargs):
        data = {key: value for key, value in (self.extra or {}).items() if value is not None}
        data.update(get_current_context().to_dict())
        data.update(kwargs.get("extra") or {})
        kwargs["extra"] = {"extra": data}
        return msg, kwargs


def get_logger(
    name: str,
    component: Optional[ComponentType] = None,
) -> ContextLogger:
    """
    Context-aware logger.

    Args:
        name: Logger name, usually __name__
        component: Component stamped on every record
    """
    bound = {"component": component.value} if component is not None else {}
    return ContextLogger(logging.getLogger(name), bound)


def configure_logging(
    level: Union[str, int] = "INFO",
    json_output: bool = False,
) -> None:
    """
    Install a single stdout handler on the root logger.

    Args:
        level: Log level name or number
        json_output: JSON lines instead of human-readable lines
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    use_json = json_output or os.getenv("LOG_FORMAT", "").lower() == "json"

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredFormatter() if use_json else HumanFormatter())

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)

    # pymongo logs heartbeats and pool events at DEBUG
    logging.getLogger("pymongo").setLevel(max(level, logging.INFO))


# ============================================================================
# CHECKPOINTS
# ============================================================================

def log_checkpoint(
    name: str,
    data: Optional[Dict[str, Any]] = None,
    logger: Optional[logging.Logger] = None,
) -> None:
    """
    Record that a check reached a named step ("database_resolved",
    "query_executed"). Logged at DEBUG on the "checkpoint" logger.
    """
    context = get_current_context()
    checkpoint: Dict[str, Any] = {"checkpoint": name}
    if context.watcher_name:
        checkpoint["watcher_name"] = context.watcher_name
    if context.check_id:
        checkpoint["check_id"] = context.check_id
    if data:
        checkpoint["data"] = data

    (logger or logging.getLogger("checkpoint")).debug(
        f"CHECKPOINT: {name}", extra={"extra": checkpoint}
    )


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "ComponentType",
    "LogContext",
    "StructuredFormatter",
    "HumanFormatter",
    "ContextLogger",
    "get_logger",
    "configure_logging",
    "log_context",
    "get_current_context",
    "log_checkpoint",
]
