"""Error taxonomy shared by the IMAP session, SMTP transport, and account.

What:
  Define the exception hierarchy raised when talking to the mail servers of an
  account.

Why:
  Callers (presentation layers, scripts) need to tell a failed login apart from
  a failed command on an established session, and both apart from a folder
  that does not exist on the server.

How:
  Adapters in :mod:`mailaccount.imap.client` and
  :mod:`mailaccount.smtp.transport` translate library exceptions into these
  types with ``raise ... from exc``. :class:`mailaccount.account.Account` never
  catches them.

Interfaces:
  :class:`MailAccountError`, :class:`ConnectionFailure`,
  :class:`ProtocolOperationFailure`, :class:`MailboxNotFound`.
"""
from __future__ import annotations


class MailAccountError(Exception):
    """Base class for every error surfaced by :mod:`mailaccount`."""


class ConnectionFailure(MailAccountError):
    """Session creation or login failed.

    Raised for unreachable hosts, TLS negotiation problems, rejected
    credentials, and protocol errors during the greeting/login exchange.
    """


class ProtocolOperationFailure(MailAccountError):
    """A command on an established session failed (LIST, STATUS, MOVE, ...)."""


class MailboxNotFound(ProtocolOperationFailure):
    """The server reported that a referenced folder does not exist."""
