"""Configuration loading and validation.

What:
  Provide a cohesive import surface for the runtime settings loader, the
  accounts file loader, and the Pydantic models they produce.

How:
  Re-export the loader helpers and schema classes; ``__all__`` is explicit so
  low-level helpers stay private.

Interfaces:
  - get_runtime_config / load_runtime_config / reset_runtime_config
  - load_accounts / find_account
  - AccountConfig / AccountsDocument / RuntimeConfig / ServerSettings
  - ConfigLoadError / RuntimeConfigError / AccountNotConfigured
"""

from .loader import (
    AccountNotConfigured,
    ConfigLoadError,
    RuntimeConfigError,
    find_account,
    get_runtime_config,
    load_accounts,
    load_runtime_config,
    reset_runtime_config,
)
from .schema import AccountConfig, AccountsDocument, RuntimeConfig, ServerSettings

__all__ = [
    "get_runtime_config",
    "load_runtime_config",
    "reset_runtime_config",
    "load_accounts",
    "find_account",
    "AccountConfig",
    "AccountsDocument",
    "RuntimeConfig",
    "ServerSettings",
    "ConfigLoadError",
    "RuntimeConfigError",
    "AccountNotConfigured",
]
