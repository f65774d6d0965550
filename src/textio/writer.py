"""StreamWriter: encode text and write it to a binary stream."""

from __future__ import annotations

import logging
from os import PathLike
from pathlib import Path
from types import TracebackType
from typing import BinaryIO

from textio._utils import _validate_newline
from textio.encoding import Encoding

logger = logging.getLogger(__name__)


class StreamWriter:
    """Write text to a binary stream in a fixed encoding.

    The UTF-16 encodings get their byte order mark written as soon as the
    writer is created.  UTF-8 and legacy output carry no mark.

    Instances are not thread-safe.

    :param stream: A binary file-like object with ``write(data)``.
    :param encoding: Encoding for everything written.
    :param newline: Line terminator written for every ``"\\n"``, ``"\\r\\n"``
        or ``"\\r"`` in the text.
    :param close_stream: Close *stream* when the writer is closed.
    """

    def __init__(
        self,
        stream: BinaryIO,
        encoding: Encoding,
        *,
        newline: str = "\n",
        close_stream: bool = False,
    ) -> None:
        _validate_newline(newline)
        self._stream = stream
        self._close_stream = close_stream
        self._closed = False
        self.encoding = encoding
        self.newline = newline
        if encoding.byte_order is not None:
            stream.write(encoding.bom)
            logger.debug("wrote %s byte order mark", encoding.name)

    @classmethod
    def from_path(
        cls,
        path: str | PathLike[str],
        encoding: Encoding,
        *,
        newline: str = "\n",
    ) -> StreamWriter:
        """Create (or truncate) the file at *path*.  The writer owns the file.

        :raises OSError: If the file cannot be created.
        """
        stream = Path(path).open("wb")
        try:
            return cls(stream, encoding, newline=newline, close_stream=True)
        except BaseException:
            stream.close()
            raise

    @property
    def stream(self) -> BinaryIO:
        return self._stream

    @property
    def closed(self) -> bool:
        return self._closed

    def write(self, text: str) -> int:
        """Encode *text* and write it.

        Line terminators in *text* are all written as :attr:`newline`.

        :returns: The number of characters of *text* written.
        :raises MalformedSequenceError: If *text* cannot be encoded and the
            encoding's policy is ``"strict"``.  Nothing is written then.
        """
        self._check_open()
        translated = text.replace("\r\n", "\n").replace("\r", "\n")
        if self.newline != "\n":
            translated = translated.replace("\n", self.newline)
        self._stream.write(self.encoding.encode(translated))
        return len(text)

    def write_line(self, text: str = "") -> int:
        """Write *text* followed by a line terminator."""
        return self.write(text + "\n")

    def flush(self) -> None:
        self._check_open()
        flush = getattr(self._stream, "flush", None)
        if flush is not None:
            flush()

    def _check_open(self) -> None:
        if self._closed:
            msg = "I/O operation on closed writer"
            raise ValueError(msg)

    def close(self) -> None:
        """Flush, then close the stream if the writer owns it."""
        if self._closed:
            return
        try:
            self.flush()
        finally:
            self._closed = True
            if self._close_stream:
                self._stream.close()

    def __enter__(self) -> StreamWriter:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"<StreamWriter encoding={self.encoding.name!r}>"
