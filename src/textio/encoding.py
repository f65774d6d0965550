"""Text encodings supported by textio.

An :class:`Encoding` is a small immutable value: the variant
(:class:`~textio.enums.EncodingKind`), the codec backing the legacy variant,
and the policy for malformed input.  The module-level constants are shared
by every reader and writer; they hold no resources and need no teardown.
"""

from __future__ import annotations

import codecs
import dataclasses
import locale

from textio._utils import _validate_errors
from textio.enums import BYTE_ORDERS, ByteOrder, EncodingKind
from textio.errors import MalformedSequenceError, TruncatedSequenceError

#: Byte order mark of each Unicode variant.  Legacy encodings have none.
BOMS: dict[EncodingKind, bytes] = {
    EncodingKind.UTF8: b"\xef\xbb\xbf",
    EncodingKind.UTF16_LE: b"\xff\xfe",
    EncodingKind.UTF16_BE: b"\xfe\xff",
}

# Unicode codecs that cannot back the legacy variant.  The UTF-16 ones have
# kinds of their own; the others write a byte order mark per call or are not
# supported at all.
_FOREIGN_UNICODE_CODECS = frozenset(
    {
        "utf-7",
        "utf-8-sig",
        "utf-16",
        "utf-16-be",
        "utf-16-le",
        "utf-32",
        "utf-32-be",
        "utf-32-le",
    }
)


def _check_legacy_codec(codec: str) -> None:
    """Raise LookupError unless *codec* is a byte encoding of text.

    Rejects transforms such as ``base64`` or ``rot13`` as well as the
    Unicode codecs above.
    """
    info = codecs.lookup(codec)
    if not info._is_text_encoding:
        msg = f"{info.name!r} is not a text encoding"
        raise LookupError(msg)
    if info.name in _FOREIGN_UNICODE_CODECS:
        msg = f"{info.name!r} cannot be used as the legacy encoding"
        raise LookupError(msg)


@dataclasses.dataclass(frozen=True, slots=True)
class Encoding:
    """One of the four supported text encodings.

    :param kind: Which encoding this is.
    :param codec: Python codec used as the narrow/wide converter of the
        legacy encoding.  ``None`` means the locale's preferred encoding,
        looked up each time it is needed.  Must be ``None`` for the Unicode
        variants.
    :param errors: ``"replace"`` (the default) substitutes U+FFFD for
        undecodable bytes and ``?`` for unencodable characters;
        ``"strict"`` raises :class:`~textio.errors.MalformedSequenceError`.
    """

    kind: EncodingKind
    codec: str | None = None
    errors: str = "replace"

    def __post_init__(self) -> None:
        _validate_errors(self.errors)
        if self.codec is not None:
            if self.kind is not EncodingKind.LEGACY:
                msg = (
                    "codec may only be given for the legacy encoding, "
                    f"not {self.kind.value}"
                )
                raise ValueError(msg)
            _check_legacy_codec(self.codec)

    @property
    def python_codec(self) -> str:
        """Name of the Python codec that does the actual conversion."""
        if self.kind is not EncodingKind.LEGACY:
            return self.kind.value
        if self.codec is not None:
            return self.codec
        return locale.getpreferredencoding(False)

    @property
    def name(self) -> str:
        """Canonical name, e.g. ``"utf-16-le"`` or ``"cp1252"``."""
        if self.kind is not EncodingKind.LEGACY:
            return self.kind.value
        return codecs.lookup(self.python_codec).name

    @property
    def byte_order(self) -> ByteOrder | None:
        """Byte order of the UTF-16 variants, ``None`` for the others."""
        return BYTE_ORDERS.get(self.kind)

    @property
    def bom(self) -> bytes:
        """The byte order mark of this encoding (``b""`` if it has none)."""
        return BOMS.get(self.kind, b"")

    def with_errors(self, errors: str) -> Encoding:
        """Return a copy of this encoding using the *errors* policy."""
        return dataclasses.replace(self, errors=errors)

    def encode(self, text: str) -> bytes:
        """Convert *text* to bytes.

        :raises MalformedSequenceError: If a character cannot be encoded and
            the policy is ``"strict"``.
        """
        try:
            return text.encode(self.python_codec, self.errors)
        except UnicodeEncodeError as e:
            bad = text[e.start : e.end]
            msg = f"cannot encode {bad!r} as {self.name}"
            raise MalformedSequenceError(msg, self, bad) from e

    def decode(
        self, data: bytes | bytearray | memoryview, length: int | None = None
    ) -> str:
        """Convert exactly *length* bytes of *data* to text.

        :param data: The bytes to decode.
        :param length: How many leading bytes of *data* to decode.  Defaults
            to all of them.
        :raises TruncatedSequenceError: If the last character is cut short.
        :raises MalformedSequenceError: If the bytes are invalid and the
            policy is ``"strict"``.
        """
        if length is None:
            length = len(data)
        elif length < 0 or length > len(data):
            msg = f"length must be between 0 and {len(data)}, not {length}"
            raise ValueError(msg)
        chunk = bytes(data[:length])
        decoder = self.incremental_decoder()
        try:
            text = decoder.decode(chunk, final=False)
        except UnicodeDecodeError as e:
            raise self.malformed_error(e) from e
        pending = decoder.getstate()[0]
        if pending:
            msg = (
                f"{len(pending)} trailing byte(s) do not form "
                f"a complete {self.name} character"
            )
            raise TruncatedSequenceError(msg, self, pending)
        return text

    def incremental_decoder(self) -> codecs.IncrementalDecoder:
        """Return a fresh incremental decoder applying this encoding's policy."""
        return codecs.getincrementaldecoder(self.python_codec)(errors=self.errors)

    def malformed_error(self, error: UnicodeDecodeError) -> MalformedSequenceError:
        """Build the error reported for bytes this encoding cannot decode."""
        bad = error.object[error.start : error.end]
        msg = f"invalid {self.name} sequence {bytes(bad)!r}: {error.reason}"
        return MalformedSequenceError(msg, self, bytes(bad))

    def __str__(self) -> str:
        return self.name


UTF8 = Encoding(EncodingKind.UTF8)
UTF16_LE = Encoding(EncodingKind.UTF16_LE)
UTF16_BE = Encoding(EncodingKind.UTF16_BE)
LEGACY = Encoding(EncodingKind.LEGACY)

# The UTF-16 variant whose BOM reads as 0xFEFF in a little-endian 16-bit
# unit, and the variant with the swapped BOM.
UTF16 = UTF16_LE
UTF16_REVERSED = UTF16_BE

_ALIASES: dict[str, Encoding] = {
    "utf-8": UTF8,
    "utf8": UTF8,
    "u8": UTF8,
    "utf-8-sig": UTF8,
    "unicode": UTF8,
    "utf-16": UTF16,
    "utf16": UTF16,
    "utf-16-le": UTF16_LE,
    "utf-16le": UTF16_LE,
    "utf16le": UTF16_LE,
    "utf-16-be": UTF16_BE,
    "utf-16be": UTF16_BE,
    "utf16be": UTF16_BE,
    "utf-16-reversed": UTF16_REVERSED,
    "ansi": LEGACY,
    "legacy": LEGACY,
    "locale": LEGACY,
}


def lookup(name: str) -> Encoding:
    """Resolve an encoding name to an :class:`Encoding`.

    Names of the Unicode variants and the aliases ``ansi``, ``legacy`` and
    ``locale`` map to the shared constants.  Any other name Python knows
    becomes a legacy encoding backed by that codec.

    :raises LookupError: If Python has no codec called *name*, or the codec
        is not one a legacy encoding can use (binary transforms such as
        ``base64``, Unicode codecs such as ``utf-32``).
    """
    key = name.strip().lower().replace("_", "-")
    known = _ALIASES.get(key)
    if known is not None:
        return known
    canonical = codecs.lookup(key).name
    known = _ALIASES.get(canonical)
    if known is not None:
        return known
    return Encoding(EncodingKind.LEGACY, codec=canonical)
