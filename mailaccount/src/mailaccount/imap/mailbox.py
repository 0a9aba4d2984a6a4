"""Mailbox entity built from an IMAP ``LIST`` entry.

What:
  Represent one server folder: its protocol-native id, a mutable display name,
  the attributes reported by the server, the special role derived from them,
  and lazily fetched message counters.

How:
  The role is taken from the first RFC 6154 special-use attribute, then from
  the ``INBOX`` name, then guessed from well-known folder names. Counters come
  from a single ``STATUS (MESSAGES UNSEEN)`` issued the first time either is
  read.

Interfaces:
  :class:`Mailbox`, :data:`SPECIAL_USE_ROLES`, :data:`NAME_ROLES`,
  :func:`guess_role`.
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, Optional, Protocol, Union

from ..core.roles import SpecialRole
from ..utils.encoding import encode_folder_id

SPECIAL_USE_ROLES: Dict[str, SpecialRole] = {
    "\\all": SpecialRole.ALL,
    "\\archive": SpecialRole.ARCHIVE,
    "\\drafts": SpecialRole.DRAFTS,
    "\\flagged": SpecialRole.FLAGGED,
    "\\junk": SpecialRole.JUNK,
    "\\spam": SpecialRole.JUNK,
    "\\sent": SpecialRole.SENT,
    "\\trash": SpecialRole.TRASH,
}

NAME_ROLES: Dict[str, SpecialRole] = {
    "inbox": SpecialRole.INBOX,
    "sent": SpecialRole.SENT,
    "sent items": SpecialRole.SENT,
    "sent mail": SpecialRole.SENT,
    "sent messages": SpecialRole.SENT,
    "drafts": SpecialRole.DRAFTS,
    "draft": SpecialRole.DRAFTS,
    "trash": SpecialRole.TRASH,
    "deleted items": SpecialRole.TRASH,
    "deleted messages": SpecialRole.TRASH,
    "junk": SpecialRole.JUNK,
    "spam": SpecialRole.JUNK,
    "bulk mail": SpecialRole.JUNK,
    "archive": SpecialRole.ARCHIVE,
    "archives": SpecialRole.ARCHIVE,
}

_UNSELECTABLE = frozenset({"\\noselect", "\\nonexistent"})


class StatusSource(Protocol):
    def status(self, folder_id: str) -> Dict[str, int]: ...


def guess_role(folder_id: str, display_name: str, attributes: Iterable[str]) -> SpecialRole:
    """Derive the special role of a folder from its attributes and name."""

    for attribute in attributes:
        role = SPECIAL_USE_ROLES.get(attribute)
        if role is not None:
            return role
    if folder_id.upper() == "INBOX":
        return SpecialRole.INBOX
    return NAME_ROLES.get(display_name.strip().lower(), SpecialRole.NONE)


class Mailbox:
    """One server folder of an account.

    Args:
      session: Object providing ``status(folder_id)``; normally the account's
        :class:`~mailaccount.imap.client.MailSession`.
      folder_id: Protocol-native folder name.
      attributes: ``LIST`` attributes (``str`` or ``bytes``).
      delimiter: Hierarchy delimiter reported by the server, if any.
    """

    def __init__(
        self,
        session: StatusSource,
        folder_id: str,
        attributes: Iterable[Union[str, bytes]] = (),
        delimiter: Optional[str] = None,
    ) -> None:
        self._session = session
        self.folder_id = folder_id
        self.delimiter = delimiter or None
        self.attributes = tuple(
            (a.decode("utf-8", errors="replace") if isinstance(a, bytes) else str(a)).lower()
            for a in attributes
        )
        self.display_name = self._leaf_name()
        self._special_role = guess_role(folder_id, self.display_name, self.attributes)
        self._status: Optional[Dict[str, int]] = None

    def __repr__(self) -> str:
        return f"Mailbox(folder_id={self.folder_id!r}, role={self._special_role.value!r})"

    def _leaf_name(self) -> str:
        if self.delimiter and self.delimiter in self.folder_id:
            return self.folder_id.rsplit(self.delimiter, 1)[1]
        return self.folder_id

    @property
    def special_role(self) -> SpecialRole:
        return self._special_role

    @property
    def parent_id(self) -> Optional[str]:
        if self.delimiter and self.delimiter in self.folder_id:
            return self.folder_id.rsplit(self.delimiter, 1)[0]
        return None

    @property
    def selectable(self) -> bool:
        return not _UNSELECTABLE.intersection(self.attributes)

    def _counters(self) -> Dict[str, int]:
        if self._status is None:
            if self.selectable:
                self._status = self._session.status(self.folder_id)
            else:
                self._status = {}
        return self._status

    @property
    def total_messages(self) -> int:
        return int(self._counters().get("MESSAGES", 0))

    @property
    def unseen_messages(self) -> int:
        return int(self._counters().get("UNSEEN", 0))

    def to_list_dict(self, account_id: Any) -> Dict[str, Any]:
        """Presentation payload for this mailbox, tagged with ``account_id``."""

        parent = self.parent_id
        total = self.total_messages
        return {
            "id": encode_folder_id(self.folder_id),
            "folderId": self.folder_id,
            "parent": encode_folder_id(parent) if parent is not None else None,
            "name": self.display_name,
            "specialRole": self._special_role.key,
            "delimiter": self.delimiter,
            "total": total,
            "unseen": self.unseen_messages,
            "isEmpty": total == 0,
            "accountId": account_id,
        }
