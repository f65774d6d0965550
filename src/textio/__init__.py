"""Encoding-aware text reading and writing over byte streams."""

from __future__ import annotations

from os import PathLike

from textio._utils import DEFAULT_BUFFER_SIZE
from textio.detection import DetectionResult, Heuristic
from textio.detection.bom import detect_bom
from textio.detection.heuristic import detect_by_statistics
from textio.detection.orchestrator import detect_encoding
from textio.encoding import (
    BOMS,
    LEGACY,
    UTF8,
    UTF16,
    UTF16_BE,
    UTF16_LE,
    UTF16_REVERSED,
    Encoding,
    lookup,
)
from textio.enums import ByteOrder, EncodingKind
from textio.errors import (
    DecodeError,
    MalformedSequenceError,
    TextIOError,
    TruncatedSequenceError,
)
from textio.reader import StreamReader
from textio.writer import StreamWriter

__version__ = "1.0.0"
__all__ = [
    "BOMS",
    "LEGACY",
    "UTF8",
    "UTF16",
    "UTF16_BE",
    "UTF16_LE",
    "UTF16_REVERSED",
    "ByteOrder",
    "DecodeError",
    "DetectionResult",
    "Encoding",
    "EncodingKind",
    "MalformedSequenceError",
    "StreamReader",
    "StreamWriter",
    "TextIOError",
    "TruncatedSequenceError",
    "detect_bom",
    "detect_by_statistics",
    "detect_encoding",
    "lookup",
    "open_reader",
    "open_writer",
    "read_text",
    "write_text",
]


def _as_encoding(encoding: Encoding | str | None) -> Encoding | None:
    if isinstance(encoding, str):
        return lookup(encoding)
    return encoding


def open_reader(
    path: str | PathLike[str],
    encoding: Encoding | str | None = None,
    *,
    heuristic: Heuristic | None = detect_by_statistics,
    buffer_size: int = DEFAULT_BUFFER_SIZE,
) -> StreamReader:
    """Open *path* for reading text with encoding detection.

    *encoding* is a hint used when detection is inconclusive; it may be an
    :class:`Encoding` or a name accepted by :func:`lookup`.
    """
    return StreamReader.from_path(
        path, _as_encoding(encoding), heuristic=heuristic, buffer_size=buffer_size
    )


def open_writer(
    path: str | PathLike[str],
    encoding: Encoding | str = UTF8,
    *,
    newline: str = "\n",
) -> StreamWriter:
    """Create *path* for writing text in *encoding*."""
    return StreamWriter.from_path(path, _as_encoding(encoding), newline=newline)


def read_text(
    path: str | PathLike[str],
    encoding: Encoding | str | None = None,
) -> str:
    """Return the whole text of *path* with line terminators normalized to ``\\n``."""
    with open_reader(path, encoding) as reader:
        return reader.read_to_end()


def write_text(
    path: str | PathLike[str],
    text: str,
    encoding: Encoding | str = UTF8,
    *,
    newline: str = "\n",
) -> int:
    """Write *text* to *path* in *encoding*, replacing any existing file.

    :returns: The number of characters written.
    """
    with open_writer(path, encoding, newline=newline) as writer:
        return writer.write(text)
