"""Pydantic models describing account and runtime configuration documents."""
from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


SecurityMode = Literal["none", "ssl", "tls"]


class ServerSettings(BaseModel):
    """Connection parameters for one inbound or outbound server.

    ``security`` follows the usual mail-client vocabulary: ``ssl`` wraps the
    socket from the start, ``tls`` upgrades a plain connection with STARTTLS,
    ``none`` leaves the connection unencrypted.
    """

    model_config = ConfigDict(extra="forbid")

    host: str
    port: int = Field(ge=1, le=65535)
    username: str
    password: str = ""
    security: SecurityMode = "ssl"


class AccountConfig(BaseModel):
    """Persisted description of a single mail account."""

    model_config = ConfigDict(extra="forbid")

    id: int
    name: str = ""
    email: str
    inbound: ServerSettings
    outbound: ServerSettings


class AccountsDocument(BaseModel):
    """Top-level accounts file holding one or more accounts."""

    model_config = ConfigDict(extra="forbid")

    accounts: List[AccountConfig] = Field(default_factory=list)


class ImapRuntime(BaseModel):
    """Inbound session defaults."""

    model_config = ConfigDict(extra="forbid")

    timeout: float = Field(default=20, gt=0)
    list_pattern: str = "*"


class SmtpRuntime(BaseModel):
    """Outbound transport defaults."""

    model_config = ConfigDict(extra="forbid")

    timeout: float = Field(default=2, gt=0)


class MailboxRuntime(BaseModel):
    """Trash fallback parameters."""

    model_config = ConfigDict(extra="forbid")

    default_trash_folder: str = Field(default="Trash", min_length=1)
    trash_hint: str = Field(default="trash", min_length=1)


class LoggingSettings(BaseModel):
    """Minimum level written by the JSON loggers."""

    model_config = ConfigDict(extra="forbid")

    level: Literal["DEBUG", "INFO", "WARN", "ERROR"] = "INFO"


class I18nSettings(BaseModel):
    """Where mailbox labels are translated from."""

    model_config = ConfigDict(extra="forbid")

    domain: str = "mailaccount"
    localedir: Optional[str] = None
    languages: Optional[List[str]] = None


class RuntimeConfig(BaseModel):
    """Root runtime configuration loaded from ``mailaccount.yaml``."""

    model_config = ConfigDict(extra="forbid")

    version: int = 1
    imap: ImapRuntime = Field(default_factory=ImapRuntime)
    smtp: SmtpRuntime = Field(default_factory=SmtpRuntime)
    mailboxes: MailboxRuntime = Field(default_factory=MailboxRuntime)
    i18n: I18nSettings = Field(default_factory=I18nSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
