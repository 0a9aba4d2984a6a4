"""Expose the public utility surface.

What:
  Re-export logging and folder-id encoding helpers.

How:
  Imports the canonical functions/classes and populates ``__all__``.

Interfaces:
  ``get_logger``, ``JsonLogger``, ``encode_folder_id``, ``decode_folder_id``.
"""

from .encoding import decode_folder_id, encode_folder_id
from .logging import JsonLogger, get_logger

__all__ = [
    "get_logger",
    "JsonLogger",
    "encode_folder_id",
    "decode_folder_id",
]
