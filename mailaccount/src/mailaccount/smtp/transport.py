"""Outbound SMTP transport for an account.

What:
  Describe how to reach an account's submission server and send a message
  through it.

How:
  :class:`SmtpTransport` keeps the parameters only; :meth:`SmtpTransport.connect`
  opens ``smtplib.SMTP_SSL`` for implicit TLS, or ``smtplib.SMTP`` followed by
  ``STARTTLS`` for ``tls``, and logs in when a username is configured.
  :meth:`SmtpTransport.send` opens a connection, submits one message, and
  closes it again.

Interfaces:
  :class:`SmtpConfig`, :class:`SmtpTransport`.

Invariants & Safety:
  - A transport holds no open connection between calls.
  - Connection and authentication errors surface as
    :class:`~mailaccount.errors.ConnectionFailure`; rejected submissions as
    :class:`~mailaccount.errors.ProtocolOperationFailure`.
"""
from __future__ import annotations

import smtplib
import ssl
from dataclasses import dataclass
from email.message import EmailMessage
from typing import Dict, Optional, Sequence, Tuple, Union

from ..config.loader import get_runtime_config
from ..config.schema import SecurityMode, ServerSettings
from ..errors import ConnectionFailure, ProtocolOperationFailure
from ..utils.logging import get_logger

LOGGER = get_logger("mailaccount.smtp")


@dataclass
class SmtpConfig:
    """Submission server parameters; ``timeout`` defaults from runtime config."""

    host: str
    port: int = 587
    username: str = ""
    password: str = ""
    security: SecurityMode = "tls"
    timeout: Optional[float] = None

    def __post_init__(self) -> None:
        if self.timeout is None:
            self.timeout = get_runtime_config().smtp.timeout

    @classmethod
    def from_settings(cls, settings: ServerSettings, timeout: Optional[float] = None) -> "SmtpConfig":
        return cls(
            host=settings.host,
            port=settings.port,
            username=settings.username,
            password=settings.password,
            security=settings.security,
            timeout=timeout,
        )


class SmtpTransport:
    """Send messages through one submission server."""

    def __init__(self, config: SmtpConfig):
        self._config = config

    @property
    def config(self) -> SmtpConfig:
        return self._config

    def connect(self) -> Union[smtplib.SMTP, smtplib.SMTP_SSL]:
        """Open and authenticate a connection; the caller must ``quit`` it.

        Raises:
          ConnectionFailure: If the server is unreachable, TLS fails, or the
            credentials are rejected.
        """

        config = self._config
        server: Optional[smtplib.SMTP] = None
        try:
            if config.security == "ssl":
                server = smtplib.SMTP_SSL(
                    host=config.host,
                    port=config.port,
                    timeout=config.timeout,
                    context=ssl.create_default_context(),
                )
            else:
                server = smtplib.SMTP(host=config.host, port=config.port, timeout=config.timeout)
                if config.security == "tls":
                    server.starttls(context=ssl.create_default_context())
            if config.username:
                server.login(config.username, config.password)
        except smtplib.SMTPAuthenticationError as exc:
            self._close(server)
            raise ConnectionFailure(f"SMTP login rejected for {config.username}@{config.host}") from exc
        except (smtplib.SMTPException, OSError) as exc:
            self._close(server)
            raise ConnectionFailure(f"SMTP connection to {config.host}:{config.port} failed: {exc}") from exc
        return server

    @staticmethod
    def _close(server: Optional[smtplib.SMTP]) -> None:
        if server is None:
            return
        try:
            server.quit()
        except (smtplib.SMTPException, OSError):
            server.close()

    def send(
        self,
        message: EmailMessage,
        *,
        from_addr: Optional[str] = None,
        to_addrs: Optional[Sequence[str]] = None,
    ) -> Dict[str, Tuple[int, bytes]]:
        """Submit ``message`` and return the per-recipient refusals.

        Raises:
          ConnectionFailure: See :meth:`connect`.
          ProtocolOperationFailure: If the server refuses the message.
        """

        server = self.connect()
        try:
            refused = server.send_message(message, from_addr=from_addr, to_addrs=to_addrs)
        except (smtplib.SMTPException, OSError) as exc:
            raise ProtocolOperationFailure(f"SMTP submission to {self._config.host} failed: {exc}") from exc
        finally:
            self._close(server)
        LOGGER.info(
            "message submitted",
            host=self._config.host,
            recipients=len(to_addrs) if to_addrs is not None else None,
            refused=sorted(refused),
        )
        return refused
