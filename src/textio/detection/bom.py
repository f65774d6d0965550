"""Byte order mark detection."""

from __future__ import annotations

from textio.detection import BOM_CONFIDENCE, DetectionResult
from textio.encoding import BOMS, UTF8, UTF16_BE, UTF16_LE
from textio.enums import EncodingKind

# The first two bytes read as a little-endian 16-bit unit.
_UTF16_LE_UNIT = 0xFEFF
_UTF16_BE_UNIT = 0xFFFE


def detect_bom(data: bytes) -> DetectionResult | None:
    """Check for a byte order mark at the start of *data*.

    Only the first two bytes of the UTF-8 mark are compared; the third is
    assumed.  ``bom_length`` never exceeds ``len(data)``.

    :param data: The first bytes of a stream.
    :returns: A :class:`DetectionResult` with ``method="bom"``, or ``None``.
    """
    if len(data) < 2:
        return None

    if data[0] == 0xEF and data[1] == 0xBB:
        bom_length = min(len(BOMS[EncodingKind.UTF8]), len(data))
        return DetectionResult(UTF8, BOM_CONFIDENCE, bom_length, "bom")

    unit = int.from_bytes(data[:2], "little")
    if unit == _UTF16_LE_UNIT:
        return DetectionResult(UTF16_LE, BOM_CONFIDENCE, 2, "bom")
    if unit == _UTF16_BE_UNIT:
        return DetectionResult(UTF16_BE, BOM_CONFIDENCE, 2, "bom")
    return None
