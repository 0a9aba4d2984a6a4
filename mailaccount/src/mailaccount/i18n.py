"""Translated labels for special-use mailboxes.

What:
  Provide the label table shown in place of server folder names for the best
  mailbox of each role, and a gettext-backed provider that translates it.

How:
  :data:`DEFAULT_LABELS` holds the English source strings keyed by role.
  :class:`GettextLabels` looks each one up in a ``gettext`` catalogue; with no
  catalogue installed the English strings are returned unchanged.

Interfaces:
  :class:`TranslationProvider`, :class:`GettextLabels`, :data:`DEFAULT_LABELS`.
"""
from __future__ import annotations

import gettext
from typing import Dict, Mapping, Optional, Protocol, Sequence

from .config.schema import I18nSettings

DEFAULT_LABELS: Dict[str, str] = {
    "inbox": "Inbox",
    "sent": "Sent",
    "drafts": "Drafts",
    "archive": "Archive",
    "trash": "Trash",
    "junk": "Junk",
    "all": "All",
    "flagged": "Starred",
}


class TranslationProvider(Protocol):
    """Anything able to render the label of a role key."""

    def label(self, role_key: str) -> str: ...

    def has_label(self, role_key: str) -> bool: ...


class GettextLabels:
    """Translate :data:`DEFAULT_LABELS` through a gettext catalogue.

    Args:
      domain: Catalogue name (``<localedir>/<lang>/LC_MESSAGES/<domain>.mo``).
      localedir: Directory holding the catalogues; ``None`` uses the system
        default.
      languages: Preferred languages; ``None`` lets gettext read ``LANGUAGE``,
        ``LC_ALL``, ``LC_MESSAGES`` and ``LANG``.
      labels: Source strings to translate, defaults to :data:`DEFAULT_LABELS`.
    """

    def __init__(
        self,
        domain: str = "mailaccount",
        localedir: Optional[str] = None,
        languages: Optional[Sequence[str]] = None,
        labels: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._labels = dict(DEFAULT_LABELS if labels is None else labels)
        self._translations = gettext.translation(
            domain,
            localedir=localedir,
            languages=list(languages) if languages else None,
            fallback=True,
        )

    @classmethod
    def from_settings(cls, settings: I18nSettings) -> "GettextLabels":
        return cls(settings.domain, settings.localedir, settings.languages)

    def has_label(self, role_key: str) -> bool:
        return role_key in self._labels

    def label(self, role_key: str) -> str:
        """Return the translated label for ``role_key``.

        Raises:
          KeyError: If no label is configured for ``role_key``.
        """

        return self._translations.gettext(self._labels[role_key])
