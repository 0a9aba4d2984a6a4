"""One mail account's view of its server-side mailbox hierarchy.

What:
  :class:`Account` ties a persisted :class:`~mailaccount.config.schema.AccountConfig`
  to a lazily opened IMAP session and a lazily fetched, sorted, localized
  mailbox collection. On top of those it answers which folder plays which
  special role, builds the listing payload for presentation layers, moves
  messages to the trash, and hands out SMTP transports.

Why:
  Listing mailboxes and reading their counters costs several round trips.
  Doing it once per account object and reusing the result keeps every later
  query (special folders, listings, the delete flow) free of protocol I/O.

How:
  - :meth:`Account.get_imap_connection` creates and logs in the session the
    first time it is needed and returns the same object afterwards.
  - :meth:`Account.get_mailboxes` lists, sorts
    (:func:`~mailaccount.core.sorting.sort_mailboxes`), and localizes
    (:func:`~mailaccount.core.localize.localize_mailboxes`) the mailboxes once,
    then serves the cached list.
  - Role queries go through :func:`~mailaccount.core.resolver.resolve_role`.
  - :meth:`Account.delete_message` picks the trash folder in three tiers:
    the best ``trash`` mailbox, else the first mailbox whose display name
    contains "trash", else a ``Trash`` folder created on demand.

Interfaces:
  :class:`Account`.

Invariants:
  - The session and the mailbox cache are each populated at most once per
    instance; there is no refresh. ``None`` means "not loaded yet", ``[]``
    means "loaded, no mailboxes".
  - Errors from the session propagate unchanged; the trash fallback is the only
    local recovery.
"""
from __future__ import annotations

import threading
from typing import Any, Callable, Dict, List, Optional, Union

from .config.loader import get_runtime_config
from .config.schema import AccountConfig, RuntimeConfig
from .core.localize import localize_mailboxes
from .core.resolver import resolve_role
from .core.roles import KNOWN_ROLES, SpecialRole
from .core.sorting import sort_mailboxes
from .errors import ConnectionFailure
from .i18n import GettextLabels, TranslationProvider
from .imap.client import ImapConfig, MailSession, MoveResult
from .imap.mailbox import Mailbox
from .smtp.transport import SmtpConfig, SmtpTransport
from .utils.encoding import encode_folder_id
from .utils.logging import get_logger

LOGGER = get_logger("mailaccount.account")

SessionFactory = Callable[[ImapConfig], MailSession]
TransportFactory = Callable[[SmtpConfig], SmtpTransport]


class Account:
    """Mailbox hierarchy, special folders, and trash handling for one account.

    Args:
      account: Persisted account description.
      session_factory: Builds the IMAP session from an :class:`ImapConfig`;
        defaults to :class:`MailSession`.
      transport_factory: Builds an SMTP transport from an :class:`SmtpConfig`;
        defaults to :class:`SmtpTransport`.
      labels: Label provider for special mailboxes; defaults to
        :class:`GettextLabels` configured from the runtime settings.
      runtime: Runtime settings; defaults to :func:`get_runtime_config`.
    """

    def __init__(
        self,
        account: AccountConfig,
        *,
        session_factory: Optional[SessionFactory] = None,
        transport_factory: Optional[TransportFactory] = None,
        labels: Optional[TranslationProvider] = None,
        runtime: Optional[RuntimeConfig] = None,
    ) -> None:
        self._account = account
        self._runtime = runtime or get_runtime_config()
        self._session_factory = session_factory or MailSession
        self._transport_factory = transport_factory or SmtpTransport
        self._labels = labels
        self._client: Optional[MailSession] = None
        self._closed = False
        self._mailboxes: Optional[List[Mailbox]] = None
        self._session_lock = threading.Lock()
        self._mailboxes_lock = threading.Lock()

    def __repr__(self) -> str:
        return f"Account(id={self.id!r}, email={self.email!r})"

    def __enter__(self) -> "Account":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def id(self) -> int:
        return self._account.id

    @property
    def name(self) -> str:
        return self._account.name

    @property
    def email(self) -> str:
        return self._account.email

    @property
    def labels(self) -> TranslationProvider:
        if self._labels is None:
            self._labels = GettextLabels.from_settings(self._runtime.i18n)
        return self._labels

    def get_imap_connection(self) -> MailSession:
        """Return the logged-in session, creating it on first use.

        Raises:
          ConnectionFailure: If the session cannot be opened or logged in, or
            the account was closed.
        """

        with self._session_lock:
            if self._closed:
                raise ConnectionFailure(f"Account {self.id} is closed")
            if self._client is None:
                inbound = self._account.inbound
                config = ImapConfig.from_settings(inbound, timeout=self._runtime.imap.timeout)
                session = self._session_factory(config)
                session.connect()
                self._client = session
                LOGGER.debug("account session ready", account_id=self.id, host=inbound.host)
            return self._client

    def close(self) -> None:
        """Log out of the session if one was opened.

        The account cannot be used afterwards; a new :class:`Account` is needed
        to talk to the server again.
        """

        with self._session_lock:
            self._closed = True
            if self._client is not None:
                self._client.logout()

    def list_mailboxes(self, pattern: Optional[str] = None) -> List[Mailbox]:
        """Fetch mailboxes matching ``pattern`` straight from the server.

        Requests the server's attributes including special-use ones. The
        result is neither sorted nor cached.
        """

        session = self.get_imap_connection()
        entries = session.list_mailboxes(pattern or self._runtime.imap.list_pattern)
        return [Mailbox(session, entry.name, entry.attributes, entry.delimiter) for entry in entries]

    def get_mailbox(self, folder_id: str) -> Mailbox:
        """Wrap ``folder_id`` without consulting the cached collection.

        The returned mailbox carries no server attributes, so its role is only
        guessed from its name.
        """

        return Mailbox(self.get_imap_connection(), folder_id, ())

    def get_mailboxes(self) -> List[Mailbox]:
        """Return the sorted, localized mailbox collection, loading it once."""

        with self._mailboxes_lock:
            if self._mailboxes is None:
                mailboxes = sort_mailboxes(self.list_mailboxes())
                special_ids = self._special_folder_ids(mailboxes, encode=False)
                localize_mailboxes(mailboxes, special_ids, self.labels)
                self._mailboxes = mailboxes
                LOGGER.info("mailboxes loaded", account_id=self.id, count=len(mailboxes))
            return self._mailboxes

    def get_special_folder(
        self, role: Union[SpecialRole, str], guess_best: bool = True
    ) -> Union[Mailbox, None, List[Mailbox]]:
        """Mailbox(es) holding ``role``; see :func:`resolve_role`."""

        return resolve_role(self.get_mailboxes(), SpecialRole.parse(role), guess_best)

    def get_sent_folder(self) -> Optional[Mailbox]:
        """Best candidate for the "sent mail" mailbox."""

        return self.get_special_folder(SpecialRole.SENT, True)

    @staticmethod
    def _special_folder_ids(mailboxes: List[Mailbox], encode: bool) -> Dict[str, Optional[str]]:
        ids: Dict[str, Optional[str]] = {}
        for role in KNOWN_ROLES:
            folder = resolve_role(mailboxes, role, True)
            if folder is None:
                ids[role.value] = None
            elif encode:
                ids[role.value] = encode_folder_id(folder.folder_id)
            else:
                ids[role.value] = folder.folder_id
        return ids

    def get_special_folder_ids(self, encode: bool = True) -> Dict[str, Optional[str]]:
        """Map each known role to the folder id of its best mailbox.

        Args:
          encode: Render ids with
            :func:`~mailaccount.utils.encoding.encode_folder_id`.

        Returns:
          ``{role: folder_id_or_None}`` for inbox, sent, drafts, trash,
          archive, junk, flagged, and all.
        """

        return self._special_folder_ids(self.get_mailboxes(), encode)

    def get_list_array(self) -> Dict[str, Any]:
        """Listing payload consumed by presentation layers."""

        folders = [mailbox.to_list_dict(self.id) for mailbox in self.get_mailboxes()]
        return {
            "id": self.id,
            "email": self.email,
            "folders": folders,
            "specialFolders": self.get_special_folder_ids(True),
        }

    def delete_message(self, source_folder_id: str, message_id: int) -> MoveResult:
        """Move ``message_id`` from ``source_folder_id`` to the trash.

        What:
          Choose the trash folder and issue a single move.

        How:
          1. The best ``trash`` mailbox, if any; no folder creation.
          2. Otherwise the first cached mailbox whose display name contains
             the trash hint ("trash", case-insensitive); no folder creation.
          3. Otherwise the default trash folder ("Trash"), created by the
             server-side move if missing.

        Returns:
          The :class:`MoveResult` reported by the session.

        Raises:
          ConnectionFailure: If the session cannot be opened.
          ProtocolOperationFailure: If the move fails; it is not retried.
        """

        settings = self._runtime.mailboxes
        trash_id = settings.default_trash_folder
        create_trash = True
        tier = "default"

        trash_folder = self.get_special_folder(SpecialRole.TRASH, True)
        if trash_folder is not None:
            trash_id = trash_folder.folder_id
            create_trash = False
            tier = "special-use"
        else:
            hint = settings.trash_hint.lower()
            trashes = [box for box in self.get_mailboxes() if hint in box.display_name.lower()]
            if trashes:
                trash_id = trashes[0].folder_id
                create_trash = False
                tier = "name"

        LOGGER.debug(
            "trash folder selected",
            account_id=self.id,
            target=trash_id,
            create=create_trash,
            tier=tier,
        )
        result = self.get_imap_connection().move(
            source_folder_id, trash_id, [message_id], create=create_trash
        )
        LOGGER.info(
            "message moved to trash",
            account_id=self.id,
            source=source_folder_id,
            target=trash_id,
            created=result.created,
            result=result.response,
        )
        return result

    def create_transport(self) -> SmtpTransport:
        """New SMTP transport configured from the outbound settings."""

        config = SmtpConfig.from_settings(self._account.outbound, timeout=self._runtime.smtp.timeout)
        return self._transport_factory(config)
