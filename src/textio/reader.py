"""StreamReader: buffered, encoding-aware reading of text from bytes."""

from __future__ import annotations

import logging
from collections.abc import Iterator, MutableSequence
from os import PathLike
from pathlib import Path
from types import TracebackType
from typing import BinaryIO

from textio._utils import DEFAULT_BUFFER_SIZE, _validate_buffer_size
from textio.detection import FALLBACK_CONFIDENCE, DetectionResult, Heuristic
from textio.detection.heuristic import detect_by_statistics
from textio.detection.orchestrator import detect_encoding
from textio.encoding import UTF8, Encoding
from textio.errors import TruncatedSequenceError

logger = logging.getLogger(__name__)


class StreamReader:
    """Read text from a binary stream, one character, line, or all at once.

    The encoding is settled once, at construction, from the first buffer of
    the stream:

    * ``StreamReader(stream)``: a byte order mark, else the *heuristic*'s
      guess, else UTF-8.
    * ``StreamReader(stream, encoding)``: detection still runs and its
      result wins; *encoding* is only used when detection is inconclusive.
    * ``StreamReader(stream, encoding, detect=False)``: *encoding* is used
      as is and no byte order mark is skipped.

    Instances are not thread-safe.  Do not share one between threads, and
    do not read the underlying stream directly while a reader owns it.

    :param stream: A binary file-like object.  ``read(size)`` may return
        fewer bytes than asked for; ``b""`` means end of stream.
    :param encoding: Encoding hint (or override, with ``detect=False``).
    :param detect: Whether to run encoding detection.
    :param heuristic: Strategy for streams without a byte order mark.
        ``None`` disables guessing.
    :param buffer_size: Bytes fetched from *stream* per refill.
    :param close_stream: Close *stream* when the reader is closed.
    """

    def __init__(
        self,
        stream: BinaryIO,
        encoding: Encoding | None = None,
        *,
        detect: bool = True,
        heuristic: Heuristic | None = detect_by_statistics,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
        close_stream: bool = False,
    ) -> None:
        _validate_buffer_size(buffer_size)
        if not detect and encoding is None:
            msg = "an encoding is required when detect is False"
            raise ValueError(msg)
        self._stream = stream
        self._buffer_size = buffer_size
        self._close_stream = close_stream
        self._closed = False
        self._buffer = b""
        self._cursor = 0
        self._exhausted = False
        # Decoded characters not yet handed out; filled by peek_char().
        self._pending = ""

        try:
            self._fill_buffer()
            self.detection = self._resolve_encoding(encoding, detect, heuristic)
            self._cursor = self.detection.bom_length
            self._decoder = self.encoding.incremental_decoder()
        except BaseException:
            if close_stream:
                stream.close()
            raise
        logger.debug(
            "reading %s (method=%s, bom_length=%d)",
            self.encoding.name,
            self.detection.method,
            self.detection.bom_length,
        )

    @classmethod
    def from_path(
        cls,
        path: str | PathLike[str],
        encoding: Encoding | None = None,
        *,
        detect: bool = True,
        heuristic: Heuristic | None = detect_by_statistics,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
    ) -> StreamReader:
        """Open the file at *path* for reading.  The reader owns the file.

        :raises OSError: If the file cannot be opened or read.
        """
        stream = Path(path).open("rb")
        try:
            return cls(
                stream,
                encoding,
                detect=detect,
                heuristic=heuristic,
                buffer_size=buffer_size,
                close_stream=True,
            )
        except BaseException:
            stream.close()
            raise

    def _resolve_encoding(
        self,
        hint: Encoding | None,
        detect: bool,
        heuristic: Heuristic | None,
    ) -> DetectionResult:
        if not detect and hint is not None:
            return DetectionResult(hint, 1.0, 0, "explicit")
        detected = detect_encoding(self._buffer, heuristic)
        if detected is not None:
            if hint is not None and detected.encoding != hint:
                logger.debug(
                    "detected %s overrides hint %s", detected.encoding, hint
                )
            return detected
        if hint is not None:
            return DetectionResult(hint, FALLBACK_CONFIDENCE, 0, "hint")
        return DetectionResult(UTF8, FALLBACK_CONFIDENCE, 0, "default")

    @property
    def encoding(self) -> Encoding:
        """The encoding used for the whole life of this reader."""
        return self.detection.encoding

    @property
    def stream(self) -> BinaryIO:
        return self._stream

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def at_end(self) -> bool:
        """True once every character has been read.

        May block on the stream to find out whether more data follows.
        """
        self._check_open()
        if self._pending or self._cursor < len(self._buffer):
            return False
        if self._exhausted:
            return True
        return not self._fill_buffer()

    # -- raw bytes ---------------------------------------------------------

    def _fill_buffer(self) -> bool:
        """Replace the buffer with the next chunk of the stream.

        :returns: False if the stream had no more data.
        """
        data = self._stream.read(self._buffer_size)
        self._cursor = 0
        if not data:
            self._buffer = b""
            self._exhausted = True
            return False
        self._buffer = bytes(data)
        return True

    def _read_byte(self) -> int | None:
        """Return the next raw byte, refilling as needed; None at end."""
        if self._cursor >= len(self._buffer):
            if self._exhausted or not self._fill_buffer():
                return None
        byte = self._buffer[self._cursor]
        self._cursor += 1
        return byte

    def _decode_next(self) -> str:
        """Feed raw bytes to the decoder until it produces output.

        Usually yields a single character.  With the ``"replace"`` policy a
        malformed sequence may yield U+FFFD plus the character that exposed
        it.  Returns ``""`` at end of stream.
        """
        while True:
            byte = self._read_byte()
            if byte is None:
                break
            text = self._decoder.decode(bytes((byte,)))
            if text:
                return text

        partial = self._decoder.getstate()[0]
        self._decoder.reset()
        if partial:
            msg = f"stream ends inside a {self.encoding.name} character"
            raise TruncatedSequenceError(msg, self.encoding, partial)
        return ""

    # -- characters --------------------------------------------------------

    def read_char(self) -> str:
        """Consume and return the next character, or ``""`` at end of stream.

        :raises TruncatedSequenceError: If the stream ends mid-character.
            The partial bytes are discarded.
        :raises MalformedSequenceError: On invalid bytes with the
            ``"strict"`` policy.
        """
        self._check_open()
        if not self._pending:
            self._pending = self._decode_next_checked()
        char = self._pending[:1]
        self._pending = self._pending[1:]
        return char

    def peek_char(self) -> str:
        """Return the next character without consuming it (``""`` at end)."""
        self._check_open()
        if not self._pending:
            self._pending = self._decode_next_checked()
        return self._pending[:1]

    def _decode_next_checked(self) -> str:
        try:
            return self._decode_next()
        except UnicodeDecodeError as e:
            self._decoder.reset()
            raise self.encoding.malformed_error(e) from e

    def _next_or_end(self) -> str:
        try:
            return self.read_char()
        except TruncatedSequenceError:
            return ""

    def _peek_or_end(self) -> str:
        try:
            return self.peek_char()
        except TruncatedSequenceError:
            return ""

    def _line_char(self) -> str:
        """Next character of the current line, or ``""`` once the line ends.

        Consumes the terminator (``\\r\\n`` counts as one).
        """
        char = self._next_or_end()
        if char == "\r":
            if self._peek_or_end() == "\n":
                self.read_char()
            return ""
        if char == "\n":
            return ""
        return char

    # -- lines -------------------------------------------------------------

    def read_line(self) -> str:
        """Read up to the next ``\\n``, ``\\r\\n`` or ``\\r``.

        The terminator is consumed but not returned.  At end of stream the
        characters read so far form the last line; a read that starts at
        end of stream returns ``""``.
        """
        chars: list[str] = []
        while True:
            char = self._line_char()
            if not char:
                break
            chars.append(char)
        return "".join(chars)

    def read_into(
        self, dest: MutableSequence[str], max_length: int | None = None
    ) -> int:
        """Copy at most *max_length* characters of the current line into *dest*.

        Characters are stored from ``dest[0]`` on.  A terminator ends the
        copy and is consumed; when *max_length* is reached first, the rest
        of the line stays unread.

        :param dest: Pre-sized mutable sequence, e.g. ``[""] * 80``.
        :param max_length: Upper bound, defaults to ``len(dest)``.
        :returns: The number of characters stored.
        """
        if max_length is None:
            max_length = len(dest)
        elif max_length < 0 or max_length > len(dest):
            msg = f"max_length must be between 0 and {len(dest)}, not {max_length}"
            raise ValueError(msg)
        count = 0
        while count < max_length:
            char = self._line_char()
            if not char:
                break
            dest[count] = char
            count += 1
        return count

    def read_to_end(self) -> str:
        """Read everything that is left, with line terminators normalized.

        ``\\r\\n`` and bare ``\\r`` become ``\\n``.  A character cut short by
        the end of the stream is dropped.
        """
        self._check_open()
        parts = [self._pending]
        self._pending = ""
        while True:
            if self._cursor < len(self._buffer):
                chunk = self._buffer[self._cursor :]
                self._cursor = len(self._buffer)
                try:
                    parts.append(self._decoder.decode(chunk))
                except UnicodeDecodeError as e:
                    self._decoder.reset()
                    raise self.encoding.malformed_error(e) from e
            if self._exhausted or not self._fill_buffer():
                break

        partial = self._decoder.getstate()[0]
        self._decoder.reset()
        if partial:
            logger.debug(
                "dropping %d trailing byte(s) of a truncated character", len(partial)
            )
        text = "".join(parts)
        return text.replace("\r\n", "\n").replace("\r", "\n")

    def readlines(self) -> list[str]:
        """Return every remaining line, terminators removed."""
        return list(self)

    def __iter__(self) -> Iterator[str]:
        while not self.at_end:
            yield self.read_line()

    # -- lifetime ----------------------------------------------------------

    def _check_open(self) -> None:
        if self._closed:
            msg = "I/O operation on closed reader"
            raise ValueError(msg)

    def close(self) -> None:
        """Close the reader, and the stream if the reader owns it."""
        if self._closed:
            return
        self._closed = True
        if self._close_stream:
            self._stream.close()

    def __enter__(self) -> StreamReader:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"<StreamReader encoding={self.encoding.name!r} "
            f"method={self.detection.method!r}>"
        )
