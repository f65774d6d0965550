from __future__ import annotations

import io
from pathlib import Path

import pytest

from textio.detection import FALLBACK_CONFIDENCE
from textio.encoding import LEGACY, UTF8, UTF16_BE, UTF16_LE, Encoding
from textio.enums import EncodingKind
from textio.errors import MalformedSequenceError, TruncatedSequenceError
from textio.reader import StreamReader

CP1252 = Encoding(EncodingKind.LEGACY, codec="cp1252")


def reader_for(data: bytes, *args, **kwargs) -> StreamReader:
    return StreamReader(io.BytesIO(data), *args, **kwargs)


def read_all_chars(reader: StreamReader) -> str:
    chars = []
    while True:
        char = reader.read_char()
        if not char:
            return "".join(chars)
        chars.append(char)


# ---------------------------------------------------------------------------
# Encoding resolution
# ---------------------------------------------------------------------------


def test_defaults_to_utf8():
    reader = reader_for(b"plain text")
    assert reader.encoding == UTF8
    assert reader.detection.method == "default"
    assert reader.detection.confidence == FALLBACK_CONFIDENCE


def test_utf8_bom_is_skipped():
    reader = reader_for(b"\xef\xbb\xbfHello")
    assert reader.encoding == UTF8
    assert reader.detection.method == "bom"
    assert reader.read_char() == "H"


def test_utf16_le_bom_is_skipped():
    reader = reader_for(b"\xff\xfe" + "hi".encode("utf-16-le"))
    assert reader.encoding == UTF16_LE
    assert reader.read_char() == "h"
    assert reader.read_char() == "i"
    assert reader.read_char() == ""


def test_utf16_be_bom_is_skipped():
    reader = reader_for(b"\xfe\xff" + "hi".encode("utf-16-be"))
    assert reader.encoding == UTF16_BE
    assert read_all_chars(reader) == "hi"


def test_bom_only_stream_is_empty():
    reader = reader_for(b"\xef\xbb\xbf")
    assert reader.encoding == UTF8
    assert reader.at_end
    assert reader.read_char() == ""


def test_bom_overrides_hint():
    reader = reader_for(b"\xef\xbb\xbfabc", UTF16_LE)
    assert reader.encoding == UTF8
    assert reader.read_line() == "abc"


def test_heuristic_overrides_hint():
    reader = reader_for("Hello, world of text".encode("utf-16-be"), UTF8)
    assert reader.encoding == UTF16_BE
    assert reader.detection.method == "heuristic"
    assert reader.read_line() == "Hello, world of text"


def test_hint_used_when_detection_is_inconclusive():
    reader = reader_for(b"plain ascii", CP1252)
    assert reader.encoding == CP1252
    assert reader.detection.method == "hint"


def test_explicit_encoding_skips_detection():
    reader = reader_for(b"\xef\xbb\xbfabc", UTF8, detect=False)
    assert reader.detection.method == "explicit"
    assert reader.read_char() == "\ufeff"


def test_detect_false_requires_encoding():
    with pytest.raises(ValueError, match="encoding"):
        reader_for(b"abc", detect=False)


def test_no_heuristic_falls_back_to_utf8():
    data = "Hello, world of text".encode("utf-16-le")
    reader = reader_for(data, heuristic=None)
    assert reader.encoding == UTF8
    assert reader.detection.method == "default"
    assert reader.read_char() == "H"
    assert reader.read_char() == "\x00"


def test_injected_heuristic():
    reader = reader_for("Größe".encode("cp1252"), heuristic=lambda data: CP1252)
    assert reader.encoding == CP1252
    assert reader.read_to_end() == "Größe"


def test_statistics_heuristic_guesses_legacy():
    reader = reader_for("Größe und Gebäude".encode("cp1252"))
    assert reader.encoding == LEGACY
    assert reader.detection.method == "heuristic"


def test_heuristic_sees_first_buffer_only():
    seen: list[bytes] = []

    def heuristic(data: bytes):
        seen.append(data)

    reader_for(b"x" * 100, heuristic=heuristic, buffer_size=16)
    assert seen == [b"x" * 16]


@pytest.mark.parametrize("buffer_size", [0, -1, True, 1.5])
def test_invalid_buffer_size(buffer_size):
    with pytest.raises(ValueError, match="buffer_size"):
        reader_for(b"abc", buffer_size=buffer_size)


# ---------------------------------------------------------------------------
# Characters and refill boundaries
# ---------------------------------------------------------------------------


def test_peek_does_not_consume():
    reader = reader_for(b"ab")
    assert reader.peek_char() == "a"
    assert reader.peek_char() == "a"
    assert reader.read_char() == "a"
    assert reader.read_char() == "b"
    assert reader.peek_char() == ""
    assert reader.read_char() == ""


def test_multibyte_character_straddles_default_buffer():
    tail = "€y"
    data = b"x" * 4095 + tail.encode()
    reader = reader_for(data)
    assert reader.encoding == UTF8
    assert read_all_chars(reader) == "x" * 4095 + tail


def test_straddling_matches_unsplit_decode():
    char = "😀"
    for offset in range(1, 4):
        data = b"x" * (4096 - offset) + char.encode()
        text = read_all_chars(reader_for(data))
        assert text[-1] == char
        assert text[-1] == read_all_chars(reader_for(char.encode()))


@pytest.mark.parametrize("buffer_size", [1, 2, 3, 5, 4096])
def test_utf8_small_buffers(buffer_size: int):
    text = "héllo wörld 😀 €"
    reader = reader_for(text.encode(), UTF8, detect=False, buffer_size=buffer_size)
    assert read_all_chars(reader) == text


@pytest.mark.parametrize("buffer_size", [1, 3, 5, 4096])
def test_utf16_small_buffers(buffer_size: int):
    text = "héllo 😀 wörld"
    for encoding in (UTF16_LE, UTF16_BE):
        data = text.encode(encoding.python_codec)
        reader = reader_for(data, encoding, detect=False, buffer_size=buffer_size)
        assert read_all_chars(reader) == text


def test_short_reads_from_stream(short_reads):
    text = "naïve café 日本語 " * 50
    reader = StreamReader(short_reads(text.encode(), 7))
    assert read_all_chars(reader) == text


def test_truncated_utf8_at_end():
    reader = reader_for(b"a\xc3")
    assert reader.read_char() == "a"
    with pytest.raises(TruncatedSequenceError) as excinfo:
        reader.read_char()
    assert excinfo.value.data == b"\xc3"
    assert reader.read_char() == ""
    assert reader.at_end


def test_truncated_utf16_at_end():
    reader = reader_for(b"\xff\xfeA\x00B")
    assert reader.read_char() == "A"
    with pytest.raises(TruncatedSequenceError):
        reader.peek_char()
    assert reader.at_end


def test_malformed_bytes_are_replaced():
    reader = reader_for(b"a\xffb\xe4A", UTF8, detect=False)
    assert read_all_chars(reader) == "a\ufffdb\ufffdA"


def test_malformed_bytes_strict():
    reader = reader_for(b"a\xffb", UTF8.with_errors("strict"), detect=False)
    assert reader.read_char() == "a"
    with pytest.raises(MalformedSequenceError) as excinfo:
        reader.read_char()
    assert excinfo.value.data == b"\xff"
    assert reader.read_char() == "b"


def test_at_end():
    assert reader_for(b"").at_end
    reader = reader_for(b"a")
    assert not reader.at_end
    reader.read_char()
    assert reader.at_end


def test_at_end_false_while_peeked():
    reader = reader_for(b"a")
    reader.peek_char()
    assert not reader.at_end


# ---------------------------------------------------------------------------
# Stream failures and lifetime
# ---------------------------------------------------------------------------


def test_stream_failure_on_first_fill(failing_stream):
    with pytest.raises(OSError, match="unplugged"):
        StreamReader(failing_stream())


def test_owned_stream_closed_when_first_fill_fails(failing_stream):
    stream = failing_stream()
    with pytest.raises(OSError, match="unplugged"):
        StreamReader(stream, close_stream=True)
    assert stream.closed


def test_owned_stream_closed_when_detection_fails():
    stream = io.BytesIO(b"abc")

    def broken_heuristic(data: bytes):
        msg = "heuristic failed"
        raise RuntimeError(msg)

    with pytest.raises(RuntimeError, match="heuristic failed"):
        StreamReader(stream, heuristic=broken_heuristic, close_stream=True)
    assert stream.closed


def test_borrowed_stream_left_open_when_first_fill_fails(failing_stream):
    stream = failing_stream()
    with pytest.raises(OSError):
        StreamReader(stream)
    assert not stream.closed


def test_stream_failure_on_refill_propagates(failing_stream):
    reader = StreamReader(failing_stream(b"abc"))
    assert reader.read_char() == "a"
    with pytest.raises(OSError, match="unplugged"):
        reader.read_to_end()


def test_stream_failure_not_absorbed_by_read_line(failing_stream):
    reader = StreamReader(failing_stream(b"abc"))
    with pytest.raises(OSError):
        reader.read_line()


def test_borrowed_stream_stays_open():
    stream = io.BytesIO(b"abc")
    with StreamReader(stream) as reader:
        reader.read_char()
    assert reader.closed
    assert not stream.closed


def test_owned_stream_is_closed():
    stream = io.BytesIO(b"abc")
    with StreamReader(stream, close_stream=True):
        pass
    assert stream.closed


def test_close_is_idempotent():
    reader = reader_for(b"abc", close_stream=True)
    reader.close()
    reader.close()
    assert reader.closed


def test_closed_reader_rejects_reads():
    reader = reader_for(b"abc")
    reader.close()
    with pytest.raises(ValueError, match="closed"):
        reader.read_char()
    with pytest.raises(ValueError, match="closed"):
        reader.read_line()
    with pytest.raises(ValueError, match="closed"):
        reader.read_to_end()
    with pytest.raises(ValueError, match="closed"):
        _ = reader.at_end


def test_from_path(tmp_path: Path):
    f = tmp_path / "text.txt"
    f.write_bytes(b"\xff\xfe" + "line one\r\nline two".encode("utf-16-le"))
    with StreamReader.from_path(f) as reader:
        assert reader.encoding == UTF16_LE
        assert reader.read_line() == "line one"
        assert reader.read_line() == "line two"
    assert reader.stream.closed


def test_from_path_missing_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        StreamReader.from_path(tmp_path / "missing.txt")


def test_from_path_closes_file_when_construction_fails(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
):
    f = tmp_path / "text.txt"
    f.write_bytes(b"abc")
    opened = []
    real_open = Path.open

    def spy_open(self, *args, **kwargs):
        handle = real_open(self, *args, **kwargs)
        opened.append(handle)
        return handle

    def broken_heuristic(data: bytes):
        msg = "heuristic failed"
        raise RuntimeError(msg)

    monkeypatch.setattr(Path, "open", spy_open)
    with pytest.raises(RuntimeError, match="heuristic failed"):
        StreamReader.from_path(f, heuristic=broken_heuristic)
    assert len(opened) == 1
    assert opened[0].closed


def test_repr():
    assert "utf-8" in repr(reader_for(b"abc"))
