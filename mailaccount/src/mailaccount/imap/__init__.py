"""Facade for the IMAP integration layer.

What:
  Surface the session wrapper around ``imapclient`` and the mailbox entity
  built from its ``LIST`` responses.

Interfaces:
  ``ImapConfig``, ``MailSession``, ``MoveResult``, ``RawMailboxEntry``,
  ``Mailbox``.

Invariants & Safety:
  - All IMAP commands go through :class:`MailSession` so failures surface as
    :mod:`mailaccount.errors` types.
"""

from .client import ImapConfig, MailSession, MoveResult, RawMailboxEntry
from .mailbox import Mailbox

__all__ = ["ImapConfig", "MailSession", "MoveResult", "RawMailboxEntry", "Mailbox"]
