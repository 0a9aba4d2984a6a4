"""In-memory IMAP backend and mailbox doubles used by unit tests.

What:
  Provide a drop-in replacement for :class:`imapclient.IMAPClient` that keeps
  folders and message UIDs in Python data structures, plus a plain mailbox
  double for the pure ordering and resolution helpers.

Why:
  Unit tests must exercise listing, counters, and the trash flow without
  contacting real servers, and they need to assert on which commands were
  issued (how many ``LIST`` calls, whether ``CREATE`` ran).

How:
  :class:`FakeImapBackend` stores one :class:`FakeFolder` per name and records
  every call in :attr:`FakeImapBackend.calls`. Responses use ``bytes`` where the
  real library does so the decoding paths run too.

Interfaces:
  :class:`FakeFolder`, :class:`FakeImapBackend`, :class:`FakeMailbox`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from imapclient.exceptions import IMAPClientError, LoginError


@dataclass
class FakeFolder:
    """One server folder: name, ``LIST`` flags, and stored UIDs."""

    name: str
    flags: Tuple[bytes, ...] = ()
    uids: Set[int] = field(default_factory=set)
    unseen: int = 0


class FakeImapBackend:
    """Minimal IMAP server satisfying the subset the session relies upon.

    Args:
      capabilities: Capability names advertised to ``has_capability``.
      delimiter: Hierarchy delimiter returned in ``LIST`` responses.
      password: Password accepted by ``login``.
    """

    def __init__(
        self,
        capabilities: Iterable[str] = ("MOVE", "UIDPLUS", "SPECIAL-USE"),
        delimiter: str = "/",
        password: str = "pass",
    ) -> None:
        self.capabilities = {cap.upper() for cap in capabilities}
        self.delimiter = delimiter
        self.password = password
        self.folders: Dict[str, FakeFolder] = {}
        self.calls: List[Tuple[str, tuple]] = []
        self.selected: Optional[str] = None
        self.logged_in = False
        self.deleted: Set[int] = set()
        self.add_folder("INBOX")

    def add_folder(
        self,
        name: str,
        flags: Sequence[bytes] = (),
        uids: Iterable[int] = (),
        unseen: int = 0,
    ) -> FakeFolder:
        folder = FakeFolder(name=name, flags=tuple(flags), uids=set(uids), unseen=unseen)
        self.folders[name] = folder
        return folder

    def count(self, command: str) -> int:
        return sum(1 for name, _ in self.calls if name == command)

    def _record(self, name: str, *args) -> None:
        self.calls.append((name, args))

    def _folder(self, name: str) -> FakeFolder:
        try:
            return self.folders[name]
        except KeyError:
            raise IMAPClientError(f"[NONEXISTENT] Mailbox doesn't exist: {name}") from None

    # Session -------------------------------------------------------------
    def login(self, username: str, password: str):
        self._record("login", username)
        if password != self.password:
            raise LoginError("[AUTHENTICATIONFAILED] Invalid credentials")
        self.logged_in = True
        return b"LOGIN completed"

    def starttls(self, ssl_context=None):
        self._record("starttls")
        return b"Begin TLS negotiation now"

    def logout(self):
        self._record("logout")
        self.logged_in = False
        return b"Logging out"

    def has_capability(self, capability: str) -> bool:
        return capability.upper() in self.capabilities

    # Listing -------------------------------------------------------------
    def _listing(self):
        delimiter = self.delimiter.encode("utf-8")
        return [(folder.flags, delimiter, folder.name) for folder in self.folders.values()]

    def list_folders(self, directory: str = "", pattern: str = "*"):
        self._record("list_folders", directory, pattern)
        return self._listing()

    def list_special_folders(self, directory: str = "", pattern: str = "*"):
        self._record("list_special_folders", directory, pattern)
        return self._listing()

    def folder_status(self, folder: str, what=None):
        self._record("folder_status", folder, tuple(what or ()))
        record = self._folder(folder)
        return {b"MESSAGES": len(record.uids), b"UNSEEN": record.unseen}

    def folder_exists(self, folder: str) -> bool:
        return folder in self.folders

    def create_folder(self, folder: str):
        self._record("create_folder", folder)
        if folder in self.folders:
            raise IMAPClientError(f"[ALREADYEXISTS] Mailbox exists: {folder}")
        self.add_folder(folder)
        return b"CREATE completed"

    # Messages ------------------------------------------------------------
    def select_folder(self, folder: str, readonly: bool = False):
        self._record("select_folder", folder)
        record = self._folder(folder)
        self.selected = folder
        return {b"EXISTS": len(record.uids)}

    def _transfer(self, uids: Sequence[int], target: str, remove: bool) -> None:
        if self.selected is None:
            raise IMAPClientError("No mailbox selected")
        source = self.folders[self.selected]
        try:
            destination = self.folders[target]
        except KeyError:
            raise IMAPClientError(f"[TRYCREATE] Mailbox doesn't exist: {target}") from None
        for uid in uids:
            if uid in source.uids:
                destination.uids.add(uid)
                if remove:
                    source.uids.discard(uid)

    def move(self, messages: Sequence[int], folder: str):
        self._record("move", tuple(messages), folder)
        self._transfer(messages, folder, remove=True)
        return b"MOVE completed"

    def copy(self, messages: Sequence[int], folder: str):
        self._record("copy", tuple(messages), folder)
        self._transfer(messages, folder, remove=False)
        return b"COPY completed"

    def search(self, criteria="ALL", charset=None):
        self._record("search", tuple(criteria) if isinstance(criteria, list) else criteria)
        uids = self.folders[self.selected].uids
        if "DELETED" in criteria:
            uids = uids & self.deleted
        return sorted(uids)

    def add_flags(self, messages: Sequence[int], flags, silent: bool = False):
        self._record("add_flags", tuple(messages), tuple(flags))
        if b"\\Deleted" in flags:
            self.deleted.update(messages)
        return {}

    def remove_flags(self, messages: Sequence[int], flags, silent: bool = False):
        self._record("remove_flags", tuple(messages), tuple(flags))
        if b"\\Deleted" in flags:
            self.deleted.difference_update(messages)
        return {}

    def delete_messages(self, messages: Sequence[int], silent: bool = False):
        self._record("delete_messages", tuple(messages))
        self.deleted.update(messages)
        return {}

    def expunge(self, messages: Optional[Sequence[int]] = None):
        self._record("expunge", tuple(messages) if messages is not None else None)
        source = self.folders[self.selected]
        targets = set(messages) if messages is not None else set(self.deleted)
        source.uids.difference_update(targets & self.deleted)
        self.deleted.difference_update(targets)
        return (b"EXPUNGE completed", [])


class FakeMailbox:
    """Plain mailbox double exposing only what the core helpers read."""

    def __init__(self, folder_id: str, special_role=None, total_messages: int = 0, display_name: Optional[str] = None):
        self.folder_id = folder_id
        self.display_name = display_name if display_name is not None else folder_id
        self.special_role = special_role
        self.total_messages = total_messages

    def __repr__(self) -> str:
        return f"FakeMailbox({self.folder_id!r})"
