"""Rename the best special-use mailboxes with translated labels.

What:
  For each mailbox chosen as the best candidate of its role, replace the
  display name with the label of that role in the user's language.

How:
  :func:`localize_mailboxes` receives the role → folder id map (unencoded) and
  mutates ``display_name`` in place. A mailbox is renamed only when its folder
  id is one of the map's values and its own role has a label; a role with
  several candidates therefore renames only the winner.

Interfaces:
  :func:`localize_mailboxes`.
"""
from __future__ import annotations

from typing import Mapping, Optional, Sequence

from ..i18n import TranslationProvider
from .resolver import MailboxLike
from .roles import SpecialRole


def localize_mailboxes(
    mailboxes: Sequence[MailboxLike],
    special_folder_ids: Mapping[str, Optional[str]],
    labels: TranslationProvider,
) -> int:
    """Apply translated labels in place and return how many were renamed."""

    selected = {folder_id for folder_id in special_folder_ids.values() if folder_id is not None}
    renamed = 0
    for mailbox in mailboxes:
        if mailbox.folder_id not in selected:
            continue
        role_key = SpecialRole.parse(mailbox.special_role).key
        if role_key is None or not labels.has_label(role_key):
            continue
        mailbox.display_name = str(labels.label(role_key))
        renamed += 1
    return renamed
