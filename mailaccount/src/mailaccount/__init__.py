"""
Module: mailaccount.__init__

What:
  Aggregate package exports for the mail account library: the
  :class:`~mailaccount.account.Account` orchestrator and the namespace segments
  it is built from (configuration, role logic, IMAP handling, SMTP submission,
  and utilities).

Why:
  Callers that only need an account's mailbox view import ``Account`` from
  here; the subpackages stay reachable for callers that assemble their own
  pieces.

Interfaces:
  - Account: Mailbox hierarchy, special folders, trash handling, transports.
  - config: Configuration schema loaders and validators.
  - core: Special-role resolution, ordering, and localization.
  - imap: Session wrapper and mailbox entity.
  - smtp: Outbound transport.
  - utils: Logging and folder-id encoding helpers.
"""

from .account import Account
from .errors import ConnectionFailure, MailAccountError, MailboxNotFound, ProtocolOperationFailure

__all__ = [
    "Account",
    "ConnectionFailure",
    "MailAccountError",
    "MailboxNotFound",
    "ProtocolOperationFailure",
    "config",
    "core",
    "imap",
    "smtp",
    "utils",
]
