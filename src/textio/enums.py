"""Enumerations for textio."""

import enum


class EncodingKind(enum.Enum):
    """The closed set of text encodings a reader or writer can use."""

    UTF8 = "utf-8"
    UTF16_LE = "utf-16-le"
    UTF16_BE = "utf-16-be"
    LEGACY = "legacy"


class ByteOrder(enum.Enum):
    """Order of the two bytes in a UTF-16 code unit."""

    LITTLE = "little"
    BIG = "big"


# Byte order implied by each multi-byte encoding kind.
BYTE_ORDERS: dict[EncodingKind, ByteOrder] = {
    EncodingKind.UTF16_LE: ByteOrder.LITTLE,
    EncodingKind.UTF16_BE: ByteOrder.BIG,
}
