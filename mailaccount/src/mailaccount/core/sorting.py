"""Display ordering for an account's mailboxes.

What:
  Order mailboxes so special-use folders come first, in the fixed sequence
  all, inbox, flagged, drafts, sent, archive, junk, trash, followed by every
  other folder alphabetically.

How:
  :func:`compare_mailboxes` implements the comparator; :func:`sort_mailboxes`
  feeds it to :func:`sorted` through :func:`functools.cmp_to_key`. A role the
  precedence table does not know is treated exactly like no role at all, so
  such a folder is sorted by name among the ordinary ones.

Interfaces:
  :func:`compare_mailboxes`, :func:`sort_mailboxes`.

Invariants:
  - The output is a new list containing every input mailbox once.
  - Names compare case-insensitively. The relative order of two mailboxes with
    the same rank and the same case-folded name is unspecified.
"""
from __future__ import annotations

from functools import cmp_to_key
from typing import List, Sequence, TypeVar

from .resolver import MailboxLike
from .roles import precedence

M = TypeVar("M", bound=MailboxLike)


def _compare_names(a: MailboxLike, b: MailboxLike) -> int:
    left = a.display_name.lower()
    right = b.display_name.lower()
    return (left > right) - (left < right)


def compare_mailboxes(a: MailboxLike, b: MailboxLike) -> int:
    """Three-way comparison of ``a`` and ``b`` for display ordering."""

    rank_a = precedence(a.special_role)
    rank_b = precedence(b.special_role)

    if rank_a is None and rank_b is not None:
        return 1
    if rank_a is not None and rank_b is None:
        return -1
    if rank_a is not None and rank_b is not None and rank_a != rank_b:
        return rank_a - rank_b
    return _compare_names(a, b)


def sort_mailboxes(mailboxes: Sequence[M]) -> List[M]:
    """Return ``mailboxes`` reordered for display."""

    return sorted(mailboxes, key=cmp_to_key(compare_mailboxes))
