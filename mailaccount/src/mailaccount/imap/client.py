"""Blocking IMAP session for one account.

What:
  Wrap the third-party ``imapclient`` library with the handful of operations an
  account needs: connect and log in, list mailboxes with their special-use
  attributes, read message counts, and move messages between folders.

Why:
  ``imapclient`` exposes capability-dependent behaviour (``MOVE``,
  ``SPECIAL-USE``, ``UIDPLUS``) and raises ``imaplib`` errors. Callers need a
  stable surface that picks the right command for the server and reports
  failures with :mod:`mailaccount.errors` types.

How:
  :class:`MailSession` owns a single ``IMAPClient`` created by :meth:`connect`.
  Every command runs inside :meth:`_command`, which converts library and socket
  errors into :class:`~mailaccount.errors.ProtocolOperationFailure` (or
  :class:`~mailaccount.errors.MailboxNotFound` when the server says the folder
  does not exist).

Interfaces:
  :class:`ImapConfig`, :class:`RawMailboxEntry`, :class:`MoveResult`,
  :class:`MailSession`.

Invariants & Safety:
  - All message operations use UIDs; sequence numbers are never used.
  - No command is retried. One failure is one exception.
"""
from __future__ import annotations

import contextlib
import ssl as ssl_lib
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, NamedTuple, Optional, Sequence, Tuple, Union

from imapclient import DELETED, IMAPClient
from imapclient.exceptions import IMAPClientError, LoginError

from ..config.loader import get_runtime_config
from ..config.schema import SecurityMode, ServerSettings
from ..errors import ConnectionFailure, MailboxNotFound, ProtocolOperationFailure
from ..utils.logging import get_logger

LOGGER = get_logger("mailaccount.imap")

_NOT_FOUND_MARKERS = ("NONEXISTENT", "TRYCREATE")


def _text(value: Union[str, bytes, None]) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


@dataclass
class ImapConfig:
    """Connection parameters for an IMAP server.

    Attributes:
      host: IMAP hostname.
      username: Login credential.
      password: Password or app-specific token.
      port: IMAP port (defaults to 993).
      security: ``ssl`` (implicit TLS), ``tls`` (STARTTLS), or ``none``.
      timeout: Socket timeout in seconds; taken from the runtime configuration
        when omitted.
    """

    host: str
    username: str
    password: str
    port: int = 993
    security: SecurityMode = "ssl"
    timeout: Optional[float] = None

    def __post_init__(self) -> None:
        if self.timeout is None:
            self.timeout = get_runtime_config().imap.timeout

    @classmethod
    def from_settings(cls, settings: ServerSettings, timeout: Optional[float] = None) -> "ImapConfig":
        return cls(
            host=settings.host,
            username=settings.username,
            password=settings.password,
            port=settings.port,
            security=settings.security,
            timeout=timeout,
        )


class RawMailboxEntry(NamedTuple):
    """One ``LIST`` response line with attributes decoded to ``str``."""

    attributes: Tuple[str, ...]
    delimiter: Optional[str]
    name: str


@dataclass
class MoveResult:
    """Outcome of :meth:`MailSession.move`, kept for logging."""

    source: str
    target: str
    uids: List[int]
    created: bool = False
    used_move: bool = True
    response: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)


class MailSession:
    """Single logged-in IMAP connection.

    What:
      Owns one ``imapclient.IMAPClient`` and exposes the account-level commands
      built on top of it.

    How:
      :meth:`connect` opens the socket (implicit TLS or STARTTLS) and logs in.
      The instance can also be used as a context manager, which connects on
      entry and logs out on exit.
    """

    def __init__(self, config: ImapConfig):
        self._config = config
        self._client: Optional[IMAPClient] = None

    def __enter__(self) -> "MailSession":
        return self.connect()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.logout()

    @property
    def config(self) -> ImapConfig:
        return self._config

    @property
    def connected(self) -> bool:
        return self._client is not None

    @property
    def client(self) -> IMAPClient:
        """Expose the underlying ``IMAPClient`` connection.

        Raises:
          ConnectionFailure: If accessed before :meth:`connect`.
        """

        if self._client is None:
            raise ConnectionFailure("IMAP session not connected")
        return self._client

    def connect(self) -> "MailSession":
        """Open the connection and authenticate.

        Raises:
          ConnectionFailure: When the host is unreachable, TLS negotiation
            fails, or the server rejects the credentials.
        """

        config = self._config
        implicit_tls = config.security == "ssl"
        client = None
        try:
            client = IMAPClient(config.host, port=config.port, ssl=implicit_tls, timeout=config.timeout)
            if config.security == "tls":
                client.starttls(ssl_lib.create_default_context())
            client.login(config.username, config.password)
        except LoginError as exc:
            raise ConnectionFailure(f"IMAP login rejected for {config.username}@{config.host}: {exc}") from exc
        except (IMAPClientError, OSError) as exc:
            raise ConnectionFailure(f"IMAP connection to {config.host}:{config.port} failed: {exc}") from exc
        self._client = client
        LOGGER.info(
            "imap session opened",
            host=config.host,
            port=config.port,
            security=config.security,
            username=config.username,
        )
        return self

    def logout(self) -> None:
        """Log out and drop the connection; errors during logout are logged."""

        if self._client is None:
            return
        try:
            self._client.logout()
        except (IMAPClientError, OSError) as exc:
            LOGGER.warning("imap logout failed", host=self._config.host, error=str(exc))
        finally:
            self._client = None

    @contextlib.contextmanager
    def _command(self, name: str, folder: Optional[str] = None) -> Iterator[IMAPClient]:
        """Yield the client and translate failures of ``name`` into our errors."""

        client = self.client
        try:
            yield client
        except (IMAPClientError, OSError) as exc:
            message = str(exc)
            if any(marker in message.upper() for marker in _NOT_FOUND_MARKERS):
                raise MailboxNotFound(f"{name} failed, mailbox {folder!r} does not exist: {message}") from exc
            raise ProtocolOperationFailure(f"{name} failed on {folder or self._config.host}: {message}") from exc

    def has_capability(self, capability: str) -> bool:
        with self._command("CAPABILITY") as client:
            return bool(client.has_capability(capability))

    def list_mailboxes(self, pattern: str = "*", directory: str = "") -> List[RawMailboxEntry]:
        """List mailboxes matching ``pattern`` with their attributes.

        Uses ``LIST ... RETURN (SPECIAL-USE)`` when the server supports RFC 6154
        so attributes such as ``\\Sent`` or ``\\Trash`` are included; otherwise a
        plain ``LIST`` (where many servers still report them).
        """

        special_use = self.has_capability("SPECIAL-USE")
        with self._command("LIST", directory or None) as client:
            if special_use:
                listing = client.list_special_folders(directory, pattern)
            else:
                listing = client.list_folders(directory, pattern)
        return [self._entry(flags, delimiter, name) for flags, delimiter, name in listing]

    @staticmethod
    def _entry(flags: Iterable[Union[str, bytes]], delimiter: Union[str, bytes, None], name: Union[str, bytes]) -> RawMailboxEntry:
        attributes = tuple(_text(flag) for flag in flags or ())
        return RawMailboxEntry(attributes=attributes, delimiter=_text(delimiter) or None, name=_text(name) or "")

    def status(self, folder_id: str, items: Sequence[str] = ("MESSAGES", "UNSEEN")) -> Dict[str, int]:
        """Return ``STATUS`` counters for ``folder_id`` keyed by item name."""

        with self._command("STATUS", folder_id) as client:
            response = client.folder_status(folder_id, list(items))
        return {_text(key).upper(): int(value) for key, value in response.items()}

    def folder_exists(self, folder_id: str) -> bool:
        with self._command("LIST", folder_id) as client:
            return bool(client.folder_exists(folder_id))

    def move(
        self,
        source: str,
        target: str,
        message_ids: Iterable[int],
        *,
        create: bool = False,
    ) -> MoveResult:
        """Move messages from ``source`` to ``target``.

        What:
          Select ``source``, optionally create ``target`` when it is missing,
          and relocate the UIDs.

        How:
          Issue ``UID MOVE`` when the server advertises ``MOVE``. Otherwise copy
          the messages, flag the originals ``\\Deleted``, and expunge them
          (``UID EXPUNGE`` when ``UIDPLUS`` is available). Without ``UIDPLUS``
          a plain ``EXPUNGE`` would also purge other messages already flagged
          ``\\Deleted``, so their flag is lifted around the expunge and
          restored afterwards; their UIDs are reported in
          ``result.extra["preserved"]``.

        Args:
          source: Folder currently holding the messages.
          target: Destination folder.
          message_ids: UIDs to move.
          create: Create ``target`` first when it does not exist.

        Returns:
          A :class:`MoveResult` describing what was done.

        Raises:
          MailboxNotFound: If either folder does not exist on the server.
          ProtocolOperationFailure: For any other server-side failure.
        """

        uids = [int(uid) for uid in message_ids]
        result = MoveResult(source=source, target=target, uids=uids)
        if create and not self.folder_exists(target):
            with self._command("CREATE", target) as client:
                client.create_folder(target)
            result.created = True
        use_move = self.has_capability("MOVE")
        uidplus = self.has_capability("UIDPLUS")
        with self._command("SELECT", source) as client:
            client.select_folder(source)
        with self._command("MOVE" if use_move else "COPY", target) as client:
            if use_move:
                response = client.move(uids, target)
            else:
                response = client.copy(uids, target)
                if uidplus:
                    client.delete_messages(uids)
                    client.expunge(uids)
                else:
                    result.extra["preserved"] = self._expunge_only(client, uids)
        result.used_move = use_move
        result.response = _text(response)
        return result

    @staticmethod
    def _expunge_only(client: IMAPClient, uids: List[int]) -> List[int]:
        """Expunge ``uids`` from the selected folder and nothing else.

        Returns the UIDs of other messages that were already ``\\Deleted``;
        they keep the flag but survive the expunge.
        """

        wanted = set(uids)
        others = sorted(uid for uid in client.search(["DELETED"]) if uid not in wanted)
        client.delete_messages(uids)
        if others:
            client.remove_flags(others, [DELETED])
        try:
            client.expunge()
        finally:
            if others:
                client.add_flags(others, [DELETED])
        return others
