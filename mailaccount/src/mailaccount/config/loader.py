"""Strict loaders for runtime settings and persisted account documents.

What:
  Locate, parse, and validate ``mailaccount.yaml`` (runtime defaults such as
  connection timeouts and the default trash folder) and accounts files listing
  the servers and credentials of each account.

Why:
  Configuration lives outside the package and can be malformed. Centralising
  the parsing keeps validation consistent so :class:`~mailaccount.account.Account`
  can trust the models it receives.

How:
  Resolve candidate file locations from an explicit argument, the
  ``MAILACCOUNT_CONFIG_PATH`` environment variable, and well-known defaults.
  Parse YAML with ``yaml.safe_load`` and validate through the Pydantic models
  in :mod:`mailaccount.config.schema`.

Interfaces:
  - :func:`load_runtime_config` / :func:`get_runtime_config` /
    :func:`reset_runtime_config`: runtime settings discovery and caching.
  - :func:`load_accounts` / :func:`find_account`: accounts documents.

Invariants:
  - When no runtime file exists anywhere, the schema defaults apply.
  - A file that exists but fails to parse or validate is always an error; it is
    never silently replaced with defaults.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Tuple

import yaml
from pydantic import ValidationError as _PydanticValidationError

from .schema import AccountConfig, AccountsDocument, RuntimeConfig


class ConfigLoadError(Exception):
    """Base error for configuration parsing or validation failures."""


class RuntimeConfigError(ConfigLoadError):
    """Error raised when ``mailaccount.yaml`` cannot be loaded or validated."""


class AccountNotConfigured(ConfigLoadError):
    """Raised by :func:`find_account` when no entry matches the requested id."""


_CONFIG_ENV = "MAILACCOUNT_CONFIG_PATH"
_DEFAULT_LOCATIONS: Tuple[Path, ...] = (
    Path("mailaccount.yaml"),
    Path("/etc/mailaccount/mailaccount.yaml"),
)
_RUNTIME_CACHE: Optional[Tuple[Optional[Path], RuntimeConfig]] = None


def _candidate_paths(path: Optional[Path]) -> Iterable[Path]:
    """Yield runtime configuration locations in priority order.

    The explicit argument wins, then ``MAILACCOUNT_CONFIG_PATH``, then the
    default locations. Paths are expanded and deduplicated while preserving
    order.
    """

    seen: set[Path] = set()
    candidates = []
    if path is not None:
        candidates.append(path)
    env_path = os.environ.get(_CONFIG_ENV)
    if env_path:
        candidates.append(Path(env_path))
    candidates.extend(_DEFAULT_LOCATIONS)
    for candidate in candidates:
        candidate = candidate.expanduser()
        if candidate not in seen:
            seen.add(candidate)
            yield candidate


def _read_mapping(path: Path, error_cls: type[ConfigLoadError]) -> Dict[str, Any]:
    """Read ``path`` and return its top-level YAML mapping.

    Raises:
      error_cls: If the file cannot be read, is not valid YAML, or does not
        contain a mapping.
    """

    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise error_cls(f"Configuration file missing: {path}") from exc
    except OSError as exc:  # pragma: no cover - filesystem surface
        raise error_cls(f"Unable to read configuration file {path}: {exc}") from exc
    try:
        payload = yaml.safe_load(text) or {}
    except yaml.YAMLError as exc:
        raise error_cls(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise error_cls(f"{path.name} must contain a mapping at the top-level")
    return payload


def _load_runtime_from_path(path: Path) -> RuntimeConfig:
    payload = _read_mapping(path, RuntimeConfigError)
    try:
        return RuntimeConfig.model_validate(payload)
    except _PydanticValidationError as exc:
        raise RuntimeConfigError(f"Invalid {path.name}: {exc}") from exc


def load_runtime_config(
    path: Optional[Path | str] = None,
    *,
    reload: bool = False,
) -> RuntimeConfig:
    """Resolve, parse, and cache the runtime configuration.

    What:
      Load ``path`` when given; otherwise locate ``mailaccount.yaml`` using the
      precedence chain. Falls back to schema defaults when no candidate file
      exists.

    How:
      Consult the module cache unless ``reload`` is requested or a different
      explicit path is asked for, then walk :func:`_candidate_paths` until an
      existing file is found.

    Args:
      path: Optional explicit location of the runtime file.
      reload: When ``True`` forces a fresh load bypassing the cache.

    Returns:
      The validated runtime configuration.

    Raises:
      RuntimeConfigError: If ``path`` is missing, or a file fails to parse or
        validate.
    """

    global _RUNTIME_CACHE

    requested_path = Path(path).expanduser() if isinstance(path, (str, Path)) else None
    if not reload and _RUNTIME_CACHE is not None:
        cached_path, cached_config = _RUNTIME_CACHE
        if requested_path is None or cached_path == requested_path:
            return cached_config

    if requested_path is not None:
        config = _load_runtime_from_path(requested_path)
        _RUNTIME_CACHE = (requested_path, config)
        return config

    for candidate in _candidate_paths(None):
        if not candidate.exists():
            continue
        config = _load_runtime_from_path(candidate)
        _RUNTIME_CACHE = (candidate, config)
        return config

    config = RuntimeConfig()
    _RUNTIME_CACHE = (None, config)
    return config


def get_runtime_config() -> RuntimeConfig:
    """Return the cached runtime configuration, loading it on demand."""

    return load_runtime_config()


def reset_runtime_config() -> None:
    """Clear the runtime configuration cache."""

    global _RUNTIME_CACHE
    _RUNTIME_CACHE = None


def load_accounts(path: Path | str) -> AccountsDocument:
    """Parse and validate an accounts YAML file.

    Raises:
      ConfigLoadError: If the file is missing, malformed, or invalid.
    """

    source = Path(path).expanduser()
    payload = _read_mapping(source, ConfigLoadError)
    try:
        return AccountsDocument.model_validate(payload)
    except _PydanticValidationError as exc:
        raise ConfigLoadError(f"Invalid accounts file {source}: {exc}") from exc


def find_account(document: AccountsDocument, account_id: int) -> AccountConfig:
    """Return the account entry whose ``id`` equals ``account_id``."""

    for entry in document.accounts:
        if entry.id == account_id:
            return entry
    raise AccountNotConfigured(f"Account {account_id} is not configured")
