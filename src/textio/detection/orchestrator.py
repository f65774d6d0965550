"""Runs the detection stages in sequence."""

from __future__ import annotations

from textio.detection import HEURISTIC_CONFIDENCE, DetectionResult, Heuristic
from textio.detection.bom import detect_bom
from textio.detection.heuristic import detect_by_statistics


def detect_encoding(
    data: bytes, heuristic: Heuristic | None = detect_by_statistics
) -> DetectionResult | None:
    """Detect the encoding of a stream from its first buffer.

    A byte order mark always wins.  Without one, *heuristic* is consulted;
    pass ``None`` to trust byte order marks only.

    :param data: The first buffer read from the stream.
    :param heuristic: Guessing strategy for data without a byte order mark.
    :returns: The detection result, or ``None`` if the data is inconclusive.
    """
    bom_result = detect_bom(data)
    if bom_result is not None:
        return bom_result

    if heuristic is None:
        return None

    guessed = heuristic(data)
    if guessed is None:
        return None
    return DetectionResult(guessed, HEURISTIC_CONFIDENCE, 0, "heuristic")
