"""Pytest fixtures for unit tests requiring IMAP fakes.

What:
  Make ``tests/unit`` importable and expose fixtures that wire the production
  :class:`~mailaccount.imap.client.MailSession` to :class:`FakeImapBackend`.

How:
  ``mailaccount.imap.client.IMAPClient`` is monkeypatched to a factory that
  returns the shared backend and counts how often it was constructed, so tests
  can assert that an account opened exactly one session.

Interfaces:
  :func:`backend`, :func:`imap_factory`, :func:`imap_session`,
  :func:`account_config` (pytest fixtures).
"""

import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

from mailaccount.config.schema import AccountConfig, ServerSettings
from mailaccount.imap.client import ImapConfig, MailSession

UNIT_DIR = Path(__file__).resolve().parent
if str(UNIT_DIR) not in sys.path:
    sys.path.insert(0, str(UNIT_DIR))

from fakes import FakeImapBackend


@pytest.fixture
def backend() -> FakeImapBackend:
    return FakeImapBackend()


@pytest.fixture
def imap_factory(monkeypatch: pytest.MonkeyPatch, backend: FakeImapBackend):
    """Route ``IMAPClient(...)`` to ``backend`` and record constructor calls."""

    state = SimpleNamespace(connections=[])

    def _factory(host, port, ssl, timeout):
        state.connections.append({"host": host, "port": port, "ssl": ssl, "timeout": timeout})
        return backend

    monkeypatch.setattr("mailaccount.imap.client.IMAPClient", _factory)
    return state


@pytest.fixture
def imap_session(imap_factory, backend):
    """Yield a logged-in :class:`MailSession` and its backend."""

    config = ImapConfig(host="imap.example.org", username="user", password="pass")
    with MailSession(config) as session:
        yield session, backend


@pytest.fixture
def account_config() -> AccountConfig:
    return AccountConfig(
        id=7,
        name="Work",
        email="user@example.org",
        inbound=ServerSettings(host="imap.example.org", port=993, username="user", password="pass", security="ssl"),
        outbound=ServerSettings(host="smtp.example.org", port=587, username="user", password="pass", security="tls"),
    )
