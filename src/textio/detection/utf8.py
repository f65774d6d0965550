"""UTF-8 structural validation.

Used by the heuristic to tell UTF-8 text apart from text in a legacy
single- or double-byte encoding.
"""

from __future__ import annotations


def is_valid_utf8(data: bytes) -> bool:
    """Return True if *data* is structurally valid UTF-8.

    A multi-byte sequence cut short by the end of *data* is accepted, since
    the data is usually the first buffer of a longer stream.  Pure ASCII is
    valid.

    :param data: The raw byte data to examine.
    """
    i = 0
    length = len(data)

    while i < length:
        byte = data[i]

        if byte < 0x80:
            i += 1
            continue

        # 0xC0-0xC1 are overlong 2-byte encodings of ASCII, so we start at 0xC2.
        if 0xC2 <= byte <= 0xDF:
            seq_len = 2
        elif 0xE0 <= byte <= 0xEF:
            seq_len = 3
        elif 0xF0 <= byte <= 0xF4:
            seq_len = 4
        else:
            return False

        end = min(i + seq_len, length)
        for j in range(i + 1, end):
            if not (0x80 <= data[j] <= 0xBF):
                return False

        if end - i >= 2:
            second = data[i + 1]
            # Overlong 3- and 4-byte forms, UTF-16 surrogates, > U+10FFFF
            if byte == 0xE0 and second < 0xA0:
                return False
            if byte == 0xED and second > 0x9F:
                return False
            if byte == 0xF0 and second < 0x90:
                return False
            if byte == 0xF4 and second > 0x8F:
                return False

        i += seq_len

    return True


def has_high_bytes(data: bytes) -> bool:
    """Return True if *data* contains any byte above 0x7F."""
    return not data.isascii()
