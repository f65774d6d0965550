"""Exceptions raised by textio.

Failures of the underlying byte stream are never wrapped: whatever the
stream raises (usually :class:`OSError`) reaches the caller unchanged.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from textio.encoding import Encoding


class TextIOError(Exception):
    """Base class for all textio errors."""


class DecodeError(TextIOError, ValueError):
    """Bytes could not be turned into text under the active encoding."""

    def __init__(self, msg: str, encoding: Encoding, data: bytes | str) -> None:
        super().__init__(msg)
        self.encoding = encoding
        self.data = data


class TruncatedSequenceError(DecodeError):
    """End of input was reached in the middle of an encoded character."""


class MalformedSequenceError(DecodeError):
    """Bytes (or text, when encoding) that the encoding cannot represent.

    Only raised when the encoding's error policy is ``"strict"``; the
    default ``"replace"`` policy substitutes instead.
    """
