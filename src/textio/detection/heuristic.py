"""Text-statistics heuristic used when a stream has no byte order mark."""

from __future__ import annotations

import logging

from textio._utils import HEURISTIC_SAMPLE_SIZE
from textio.detection.utf8 import has_high_bytes, is_valid_utf8
from textio.detection.utf16 import detect_utf16_patterns
from textio.encoding import LEGACY, Encoding

logger = logging.getLogger(__name__)

# If more than this fraction of bytes are binary indicators, it's not text
_BINARY_THRESHOLD = 0.01

# Control bytes 0x00-0x08 and 0x0E-0x1F (everything but \t \n \v \f \r).
_BINARY_DELETE = bytes(range(0x09)) + bytes(range(0x0E, 0x20))


def is_binary(data: bytes) -> bool:
    """Return True if *data* appears to be binary rather than text."""
    if not data:
        return False
    clean = data.translate(None, _BINARY_DELETE)
    return (len(data) - len(clean)) / len(data) > _BINARY_THRESHOLD


def detect_by_statistics(data: bytes) -> Encoding | None:
    """Guess between UTF-16 and the legacy encoding from byte statistics.

    The stages run in order:

    1. UTF-16 null-byte patterns -> UTF-16-LE or UTF-16-BE.
    2. Pure ASCII or structurally valid UTF-8 -> ``None`` (inconclusive;
       callers fall back to UTF-8).
    3. Binary-looking data -> ``None``.
    4. Anything else has high bytes that are not UTF-8 -> the legacy encoding.

    :param data: The first buffer of a stream, BOM already ruled out.
    :returns: The guessed :class:`~textio.encoding.Encoding`, or ``None``.
    """
    sample = data[:HEURISTIC_SAMPLE_SIZE]
    if not sample:
        return None

    utf16 = detect_utf16_patterns(sample)
    if utf16 is not None:
        logger.debug("null-byte pattern matches %s", utf16.name)
        return utf16

    if not has_high_bytes(sample) or is_valid_utf8(sample):
        return None

    if is_binary(sample):
        logger.debug("sample looks binary, no guess")
        return None

    logger.debug("high bytes are not valid UTF-8, guessing legacy encoding")
    return LEGACY
