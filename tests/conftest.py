"""Pytest configuration shared by every suite.

What:
  Establish project import paths and reset the runtime configuration around
  every test.

Why:
  Tests must import the ``mailaccount`` package from the source tree rather
  than an installed wheel, and the runtime configuration is cached globally.
  Without explicit resets a test that loads a custom file would leak its
  timeouts or trash folder into the next one.

How:
  Prepend ``mailaccount/src`` to ``sys.path`` when present and define the
  autouse :func:`runtime_config` fixture, which removes
  ``MAILACCOUNT_CONFIG_PATH`` from the environment and clears the cache before
  and after each test, so the schema defaults apply unless a test opts in.

Interfaces:
  :func:`runtime_config` (pytest fixture).
"""

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "mailaccount" / "src"
if SRC_DIR.exists():
    sys.path.insert(0, str(SRC_DIR))

import pytest

from mailaccount.config.loader import reset_runtime_config


@pytest.fixture(autouse=True)
def runtime_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """Run every test against the built-in runtime defaults.

    Args:
      monkeypatch: Pytest helper used to clear the environment variable.
      tmp_path: Working directory for the test, so a stray ``mailaccount.yaml``
        in the checkout is never picked up.
    """

    monkeypatch.delenv("MAILACCOUNT_CONFIG_PATH", raising=False)
    monkeypatch.chdir(tmp_path)
    reset_runtime_config()
    try:
        yield
    finally:
        reset_runtime_config()
