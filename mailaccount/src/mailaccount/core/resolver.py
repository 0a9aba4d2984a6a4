"""Pick the mailbox(es) holding a given special role.

What:
  Filter an already-fetched mailbox collection by special role and, when a
  single folder is needed, choose the best candidate among several.

Why:
  Servers frequently expose more than one folder with the same role (for
  example a server-declared ``\\Sent`` plus a legacy ``Sent Items`` guessed
  from its name). Callers that need one folder id, such as the trash flow or
  the special-folder map, need a deterministic winner.

How:
  :func:`resolve_role` keeps the candidates in input order. In best-candidate
  mode it folds over them starting from the first candidate with a running
  maximum of zero, replacing the winner only when a count is strictly
  greater. Equal counts therefore keep the earliest candidate.

Interfaces:
  :class:`MailboxLike`, :func:`resolve_role`, :func:`best_candidates`.

Invariants:
  - No protocol I/O is issued beyond reading ``total_messages`` from the
    mailbox objects handed in.
  - An empty candidate list yields ``None`` in best mode, ``[]`` otherwise.
"""
from __future__ import annotations

from typing import Dict, List, Literal, Optional, Protocol, Sequence, TypeVar, Union, overload

from .roles import KNOWN_ROLES, SpecialRole


class MailboxLike(Protocol):
    """Attributes the core algorithms read from (and write to) a mailbox."""

    folder_id: str
    display_name: str

    @property
    def special_role(self) -> Union[SpecialRole, str, None]: ...

    @property
    def total_messages(self) -> int: ...


M = TypeVar("M", bound=MailboxLike)


@overload
def resolve_role(mailboxes: Sequence[M], role: SpecialRole, guess_best: Literal[True] = ...) -> Optional[M]: ...


@overload
def resolve_role(mailboxes: Sequence[M], role: SpecialRole, guess_best: Literal[False]) -> List[M]: ...


def resolve_role(mailboxes, role, guess_best=True):
    """Return the mailbox(es) whose special role equals ``role``.

    Args:
      mailboxes: Full mailbox collection, in the order it should be scanned.
      role: Requested role; strings are parsed through
        :meth:`SpecialRole.parse`.
      guess_best: ``True`` to return only the candidate with the most messages,
        ``False`` to return every candidate.

    Returns:
      A single mailbox or ``None`` in best mode, a list otherwise.
    """

    wanted = SpecialRole.parse(role)
    candidates = [
        mailbox for mailbox in mailboxes if SpecialRole.parse(mailbox.special_role) is wanted
    ]
    if not guess_best:
        return candidates
    if not candidates:
        return None

    best = candidates[0]
    max_messages = 0
    for candidate in candidates:
        count = candidate.total_messages
        if count > max_messages:
            max_messages = count
            best = candidate
    return best


def best_candidates(mailboxes: Sequence[M]) -> Dict[SpecialRole, Optional[M]]:
    """Map every known role to its best candidate (or ``None``)."""

    return {role: resolve_role(mailboxes, role, True) for role in KNOWN_ROLES}
