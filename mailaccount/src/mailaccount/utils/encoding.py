"""Reversible transport encoding for folder identifiers.

Folder ids are protocol-native names that may contain delimiters, quotes,
spaces, and non-ASCII characters. Presentation payloads carry them as
standard base64 of their UTF-8 bytes so they can travel in URLs and JSON keys
untouched; :func:`decode_folder_id` restores the exact original.
"""
from __future__ import annotations

import base64
import binascii
from typing import Union


def encode_folder_id(folder_id: Union[str, bytes]) -> str:
    """Return the base64 rendering of ``folder_id``."""

    raw = folder_id if isinstance(folder_id, bytes) else folder_id.encode("utf-8")
    return base64.b64encode(raw).decode("ascii")


def decode_folder_id(encoded: str) -> str:
    """Invert :func:`encode_folder_id`.

    Raises:
      ValueError: If ``encoded`` is not valid base64 or not UTF-8 once decoded.
    """

    try:
        raw = base64.b64decode(encoded.encode("ascii"), validate=True)
        return raw.decode("utf-8")
    except (binascii.Error, UnicodeError) as exc:
        raise ValueError(f"Invalid encoded folder id: {encoded!r}") from exc
