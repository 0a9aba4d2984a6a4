"""IMAP session tests against the in-memory backend.

What:
  Exercise :class:`mailaccount.imap.client.MailSession` connection handling,
  listing, counters, and both move strategies, and verify that library errors
  surface as :mod:`mailaccount.errors` types.
"""

import pytest
from fakes import FakeImapBackend
from imapclient.exceptions import IMAPClientError

from mailaccount.errors import ConnectionFailure, MailboxNotFound, ProtocolOperationFailure
from mailaccount.imap.client import ImapConfig, MailSession


def test_connect_uses_implicit_tls_and_runtime_timeout(imap_factory, backend):
    session = MailSession(ImapConfig(host="imap.example.org", username="user", password="pass"))

    session.connect()

    assert imap_factory.connections == [
        {"host": "imap.example.org", "port": 993, "ssl": True, "timeout": 20}
    ]
    assert backend.logged_in
    assert backend.count("starttls") == 0


def test_connect_with_starttls(imap_factory, backend):
    config = ImapConfig(host="imap.example.org", username="user", password="pass", port=143, security="tls", timeout=5)

    MailSession(config).connect()

    assert imap_factory.connections[0]["ssl"] is False
    assert imap_factory.connections[0]["timeout"] == 5
    assert backend.count("starttls") == 1


def test_rejected_login_is_connection_failure(imap_factory):
    session = MailSession(ImapConfig(host="imap.example.org", username="user", password="wrong"))

    with pytest.raises(ConnectionFailure):
        session.connect()
    assert not session.connected


def test_unreachable_host_is_connection_failure(monkeypatch):
    def _refuse(host, port, ssl, timeout):
        raise ConnectionRefusedError("connection refused")

    monkeypatch.setattr("mailaccount.imap.client.IMAPClient", _refuse)

    with pytest.raises(ConnectionFailure):
        MailSession(ImapConfig(host="nowhere.invalid", username="u", password="p")).connect()


def test_command_before_connect():
    session = MailSession(ImapConfig(host="imap.example.org", username="u", password="p"))

    with pytest.raises(ConnectionFailure):
        session.status("INBOX")


def test_list_uses_special_use_when_advertised(imap_session):
    session, backend = imap_session
    backend.add_folder("Sent", [b"\\HasNoChildren", b"\\Sent"])

    entries = session.list_mailboxes()

    assert backend.count("list_special_folders") == 1
    assert backend.count("list_folders") == 0
    sent = [entry for entry in entries if entry.name == "Sent"][0]
    assert sent.attributes == ("\\HasNoChildren", "\\Sent")
    assert sent.delimiter == "/"


def test_list_without_special_use(monkeypatch):
    backend = FakeImapBackend(capabilities=("IMAP4REV1",))
    monkeypatch.setattr("mailaccount.imap.client.IMAPClient", lambda host, port, ssl, timeout: backend)

    with MailSession(ImapConfig(host="h", username="u", password="pass")) as session:
        session.list_mailboxes("INBOX*")

    assert backend.calls[-2] == ("list_folders", ("", "INBOX*"))
    assert backend.calls[-1] == ("logout", ())


def test_status_decodes_keys(imap_session):
    session, backend = imap_session
    backend.add_folder("Foo", uids=[1, 2, 3], unseen=2)

    assert session.status("Foo") == {"MESSAGES": 3, "UNSEEN": 2}


def test_status_of_missing_folder(imap_session):
    session, _ = imap_session

    with pytest.raises(MailboxNotFound):
        session.status("Nope")


def test_move_with_move_capability(imap_session):
    session, backend = imap_session
    backend.folders["INBOX"].uids.update({41, 42})
    backend.add_folder("Trash")

    result = session.move("INBOX", "Trash", [42])

    assert result.used_move
    assert not result.created
    assert result.response == "MOVE completed"
    assert backend.folders["Trash"].uids == {42}
    assert backend.folders["INBOX"].uids == {41}


def test_move_falls_back_to_copy_and_expunge(monkeypatch):
    backend = FakeImapBackend(capabilities=("IMAP4REV1",))
    backend.folders["INBOX"].uids.update({5, 6})
    backend.add_folder("Trash")
    monkeypatch.setattr("mailaccount.imap.client.IMAPClient", lambda host, port, ssl, timeout: backend)

    with MailSession(ImapConfig(host="h", username="u", password="pass")) as session:
        result = session.move("INBOX", "Trash", [5])

    assert not result.used_move
    assert backend.count("copy") == 1
    assert backend.count("delete_messages") == 1
    assert ("expunge", (None,)) in backend.calls
    assert backend.folders["INBOX"].uids == {6}
    assert backend.folders["Trash"].uids == {5}


def test_copy_fallback_keeps_other_deleted_messages(monkeypatch):
    backend = FakeImapBackend(capabilities=("IMAP4REV1",))
    backend.folders["INBOX"].uids.update({5, 6, 7})
    backend.deleted.add(6)
    backend.add_folder("Trash")
    monkeypatch.setattr("mailaccount.imap.client.IMAPClient", lambda host, port, ssl, timeout: backend)

    with MailSession(ImapConfig(host="h", username="u", password="pass")) as session:
        result = session.move("INBOX", "Trash", [5])

    assert backend.folders["INBOX"].uids == {6, 7}
    assert backend.folders["Trash"].uids == {5}
    assert 6 in backend.deleted
    assert result.extra["preserved"] == [6]
    assert backend.calls.index(("remove_flags", ((6,), (b"\\Deleted",)))) < backend.calls.index(("expunge", (None,)))


def test_move_uses_uid_expunge_with_uidplus(monkeypatch):
    backend = FakeImapBackend(capabilities=("UIDPLUS",))
    backend.folders["INBOX"].uids.update({5, 6})
    backend.add_folder("Trash")
    monkeypatch.setattr("mailaccount.imap.client.IMAPClient", lambda host, port, ssl, timeout: backend)

    with MailSession(ImapConfig(host="h", username="u", password="pass")) as session:
        session.move("INBOX", "Trash", [5])

    assert ("expunge", ((5,),)) in backend.calls


def test_move_creates_missing_target(imap_session):
    session, backend = imap_session
    backend.folders["INBOX"].uids.add(42)

    result = session.move("INBOX", "Trash", [42], create=True)

    assert result.created
    assert backend.count("create_folder") == 1
    assert backend.folders["Trash"].uids == {42}


def test_move_to_missing_target_without_create(imap_session):
    session, backend = imap_session
    backend.folders["INBOX"].uids.add(42)

    with pytest.raises(MailboxNotFound):
        session.move("INBOX", "Trash", [42])
    assert backend.count("create_folder") == 0


def test_other_server_errors_are_protocol_failures(imap_session, monkeypatch):
    session, backend = imap_session
    backend.add_folder("Trash")

    def _busy(messages, folder):
        raise IMAPClientError("[UNAVAILABLE] Server busy")

    monkeypatch.setattr(backend, "move", _busy)

    with pytest.raises(ProtocolOperationFailure) as excinfo:
        session.move("INBOX", "Trash", [1])
    assert not isinstance(excinfo.value, MailboxNotFound)
