"""UTF-16 detection for data without a byte order mark.

UTF-16 text has characteristic null bytes in alternating positions.
Single-byte and UTF-8 text never contains null bytes, so even a small
fraction of them in one parity is a strong signal.
"""

from __future__ import annotations

import unicodedata

from textio._utils import HEURISTIC_SAMPLE_SIZE
from textio.encoding import UTF16_BE, UTF16_LE, Encoding

# Minimum bytes needed for reliable pattern detection (5 code units)
_MIN_BYTES = 10

# Minimum fraction of null bytes in the expected position.
# Real UTF-16 text always has >=15% (even for CJK-heavy content).
_MIN_NULL_FRACTION = 0.10


def detect_utf16_patterns(data: bytes) -> Encoding | None:
    """Guess UTF-16-LE or UTF-16-BE from null-byte patterns.

    When both parities show nulls (Latin text where every other byte is
    null), both decodings are scored and the one that reads more like
    human text wins.

    :param data: The raw bytes to examine; only the first
        :data:`~textio._utils.HEURISTIC_SAMPLE_SIZE` are used.
    :returns: :data:`~textio.encoding.UTF16_LE`,
        :data:`~textio.encoding.UTF16_BE`, or ``None``.
    """
    sample_len = min(len(data), HEURISTIC_SAMPLE_SIZE)
    sample_len -= sample_len % 2
    if sample_len < _MIN_BYTES:
        return None
    sample = data[:sample_len]

    num_units = sample_len // 2
    # Even positions hold the high byte of BE units, odd ones of LE units.
    be_frac = sample[0::2].count(0) / num_units
    le_frac = sample[1::2].count(0) / num_units

    candidates: list[Encoding] = []
    if le_frac >= _MIN_NULL_FRACTION:
        candidates.append(UTF16_LE)
    if be_frac >= _MIN_NULL_FRACTION:
        candidates.append(UTF16_BE)

    if not candidates:
        return None

    if len(candidates) == 1:
        text = _strict_decode(sample, candidates[0])
        if text is not None and _looks_like_text(text):
            return candidates[0]
        return None

    best: Encoding | None = None
    best_quality = -1.0
    for encoding in candidates:
        text = _strict_decode(sample, encoding)
        if text is None:
            continue
        quality = _text_quality(text)
        if quality > best_quality:
            best_quality = quality
            best = encoding

    if best is not None and best_quality >= 0.5:
        return best
    return None


def _strict_decode(sample: bytes, encoding: Encoding) -> str | None:
    # A sample cut at an arbitrary offset may end inside a surrogate pair.
    try:
        return sample.decode(encoding.python_codec)
    except UnicodeDecodeError as e:
        if e.start < len(sample) - 4:
            return None
        return sample[: e.start].decode(encoding.python_codec)


def _looks_like_text(text: str) -> bool:
    """Quick check: is decoded text mostly printable characters?"""
    if not text:
        return False
    sample = text[:500]
    printable = sum(1 for c in sample if c.isprintable() or c in "\n\r\t")
    return printable / len(sample) > 0.7


def _text_quality(text: str) -> float:
    """Score a decoding of both-parity UTF-16 data; higher reads more like text.

    The right byte order turns Latin text into ASCII letters and the wrong
    one into CJK ideographs, so ASCII letters count one and a half times.
    Decodings with more than 10% control characters score -1.0.
    """
    sample = text[:500]
    if not sample:
        return -1.0
    letters = sum(1 for c in sample if c.isalpha())
    ascii_letters = sum(1 for c in sample if c.isascii() and c.isalpha())
    controls = sum(
        1 for c in sample if unicodedata.category(c)[0] == "C" and c not in "\n\r\t"
    )
    if controls / len(sample) > 0.1:
        return -1.0
    return (letters + ascii_letters * 0.5) / len(sample)
