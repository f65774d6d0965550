"""Encoding detection stages and shared types."""

from __future__ import annotations

import dataclasses
from collections.abc import Callable

from textio.encoding import Encoding

#: Signature of a pluggable detection heuristic: it receives the first
#: buffer of a stream (BOM already ruled out) and returns its best guess,
#: or ``None`` when the data is inconclusive.
Heuristic = Callable[[bytes], Encoding | None]

#: Confidence reported for a byte order mark match.
BOM_CONFIDENCE: float = 1.0

#: Confidence reported for a heuristic guess.
HEURISTIC_CONFIDENCE: float = 0.95

#: Confidence reported when nothing was detected and a fallback was used.
FALLBACK_CONFIDENCE: float = 0.10


@dataclasses.dataclass(frozen=True, slots=True)
class DetectionResult:
    """How a reader's encoding was chosen.

    :param encoding: The encoding in effect.
    :param confidence: 1.0 for a BOM match, lower for guesses and fallbacks.
    :param bom_length: Number of leading bytes that are a byte order mark
        and must be skipped before decoding.
    :param method: ``"bom"``, ``"heuristic"``, ``"hint"``, ``"default"``
        or ``"explicit"``.
    """

    encoding: Encoding
    confidence: float
    bom_length: int = 0
    method: str = "default"

    def to_dict(self) -> dict[str, str | float | int]:
        """Convert this result to a plain dict.

        :returns: A dict with ``'encoding'``, ``'confidence'``,
            ``'bom_length'`` and ``'method'`` keys.
        """
        return {
            "encoding": self.encoding.name,
            "confidence": self.confidence,
            "bom_length": self.bom_length,
            "method": self.method,
        }
