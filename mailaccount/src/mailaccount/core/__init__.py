"""Pure mailbox classification and ordering logic.

What:
  Expose the special-role enumeration, the best-candidate resolver, the display
  sorter, and the label localizer.

How:
  These modules operate on already-fetched mailbox objects (anything shaped
  like :class:`~mailaccount.core.resolver.MailboxLike`) and never talk to a
  server themselves.

Interfaces:
  ``SpecialRole``, ``ROLE_PRECEDENCE``, ``KNOWN_ROLES``, ``MailboxLike``,
  ``resolve_role``, ``best_candidates``, ``compare_mailboxes``,
  ``sort_mailboxes``, ``localize_mailboxes``.
"""

from .localize import localize_mailboxes
from .resolver import MailboxLike, best_candidates, resolve_role
from .roles import KNOWN_ROLES, ROLE_PRECEDENCE, SpecialRole, precedence
from .sorting import compare_mailboxes, sort_mailboxes

__all__ = [
    "SpecialRole",
    "ROLE_PRECEDENCE",
    "KNOWN_ROLES",
    "precedence",
    "MailboxLike",
    "resolve_role",
    "best_candidates",
    "compare_mailboxes",
    "sort_mailboxes",
    "localize_mailboxes",
]
