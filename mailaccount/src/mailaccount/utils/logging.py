"""Structured JSON logging with credential redaction.

What:
  Give every component of the account library a logger that writes one JSON
  object per line, drops entries below the configured level, and masks
  credentials and message content.

Why:
  Account operations carry server passwords and message metadata. Logs must
  stay greppable while never echoing a password or a message body.

How:
  :class:`JsonLogger` compares the entry level with its own ``level`` (or
  ``logging.level`` from the runtime configuration when unset), then merges
  ``ts``/``lvl``/``msg``/``component`` with a redacted copy of the caller's
  keyword arguments and writes the line, flushing after each write.

Interfaces:
  :class:`JsonLogger`, :func:`get_logger`, :data:`LEVELS`.

Invariants & Safety:
  - Keys in :data:`SENSITIVE_KEYS` are replaced with ``[redacted]`` at any
    depth, including dictionaries nested in lists.
  - Values that are not JSON serialisable are rendered with ``str``.
"""
from __future__ import annotations

import json
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from ..config.loader import ConfigLoadError, get_runtime_config


REDACTED = "[redacted]"
SENSITIVE_KEYS = frozenset({"password", "body", "subject"})
LEVELS: Dict[str, int] = {"DEBUG": 10, "INFO": 20, "WARN": 30, "ERROR": 40}
_ALIASES = {"WARNING": "WARN", "CRITICAL": "ERROR"}
DEFAULT_LEVEL = "INFO"


def normalize_level(level: str) -> str:
    """Return the canonical name of ``level``.

    Raises:
      ValueError: If ``level`` is not a known level name.
    """

    name = _ALIASES.get(level.upper(), level.upper())
    if name not in LEVELS:
        raise ValueError(f"Unknown log level: {level!r}")
    return name


@dataclass
class JsonLogger:
    """Line-oriented JSON logger bound to one component.

    Attributes:
      stream: Destination, ``stdout`` by default.
      component: Value of the ``component`` field.
      level: Minimum level written; ``None`` defers to the runtime
        configuration, or ``INFO`` when that cannot be loaded.
    """

    stream: Any = field(default_factory=lambda: sys.stdout)
    component: str = "mailaccount"
    level: Optional[str] = None

    def __post_init__(self) -> None:
        if self.level is not None:
            self.level = normalize_level(self.level)

    def _threshold(self) -> str:
        if self.level is not None:
            return self.level
        try:
            return get_runtime_config().logging.level
        except ConfigLoadError:
            return DEFAULT_LEVEL

    def enabled_for(self, level: str) -> bool:
        return LEVELS.get(level.upper(), 0) >= LEVELS[self._threshold()]

    def log(self, level: str, message: str, *, extra: Optional[Dict[str, Any]] = None) -> None:
        """Write ``message`` with ``extra`` context if ``level`` is enabled."""

        if not self.enabled_for(level):
            return
        entry: Dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "lvl": level.upper(),
            "msg": message,
            "component": self.component,
        }
        if extra:
            entry.update(_redact(extra))
        self.stream.write(json.dumps(entry, separators=(",", ":"), default=str) + "\n")
        self.stream.flush()

    def debug(self, message: str, **kwargs: Any) -> None:
        self.log("DEBUG", message, extra=kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self.log("INFO", message, extra=kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self.log("WARN", message, extra=kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self.log("ERROR", message, extra=kwargs)


def _redact(value: Any) -> Any:
    if isinstance(value, dict):
        return {
            key: REDACTED if key in SENSITIVE_KEYS else _redact(item)
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [_redact(item) for item in value]
    return value


def get_logger(component: str, level: Optional[str] = None) -> JsonLogger:
    """Return a :class:`JsonLogger` for ``component`` writing to ``stdout``."""

    return JsonLogger(component=component, level=level)
