"""Special-use roles a mailbox can hold.

What:
  Define :class:`SpecialRole`, the fixed display precedence of the roles, and
  the canonical order used when building role → folder maps.

How:
  Roles are a ``str`` enum so members compare equal to their lowercase keys
  and serialise naturally. :meth:`SpecialRole.parse` turns anything a mailbox
  may report (member, string, ``None``) into a member, mapping unknown values
  to :attr:`SpecialRole.NONE`.

Interfaces:
  :class:`SpecialRole`, :data:`ROLE_PRECEDENCE`, :data:`KNOWN_ROLES`,
  :func:`precedence`.

Invariants:
  - ``NONE`` never appears in :data:`ROLE_PRECEDENCE`; it is unranked.
  - :func:`precedence` is total: every input yields an int or ``None``.
"""
from __future__ import annotations

from enum import Enum
from typing import Dict, Optional, Tuple, Union


class SpecialRole(str, Enum):
    ALL = "all"
    INBOX = "inbox"
    FLAGGED = "flagged"
    DRAFTS = "drafts"
    SENT = "sent"
    ARCHIVE = "archive"
    JUNK = "junk"
    TRASH = "trash"
    NONE = "none"

    @classmethod
    def parse(cls, value: Union["SpecialRole", str, None]) -> "SpecialRole":
        """Return the member matching ``value``, or :attr:`NONE`."""

        if isinstance(value, cls):
            return value
        if not value:
            return cls.NONE
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.NONE

    @property
    def key(self) -> Optional[str]:
        """Role key for payloads; ``None`` for :attr:`NONE`."""

        return None if self is SpecialRole.NONE else self.value


ROLE_PRECEDENCE: Dict[SpecialRole, int] = {
    SpecialRole.ALL: 0,
    SpecialRole.INBOX: 1,
    SpecialRole.FLAGGED: 2,
    SpecialRole.DRAFTS: 3,
    SpecialRole.SENT: 4,
    SpecialRole.ARCHIVE: 5,
    SpecialRole.JUNK: 6,
    SpecialRole.TRASH: 7,
}

KNOWN_ROLES: Tuple[SpecialRole, ...] = (
    SpecialRole.INBOX,
    SpecialRole.SENT,
    SpecialRole.DRAFTS,
    SpecialRole.TRASH,
    SpecialRole.ARCHIVE,
    SpecialRole.JUNK,
    SpecialRole.FLAGGED,
    SpecialRole.ALL,
)


def precedence(value: Union[SpecialRole, str, None]) -> Optional[int]:
    """Display rank of ``value``; ``None`` when the role is unranked."""

    return ROLE_PRECEDENCE.get(SpecialRole.parse(value))
