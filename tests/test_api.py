from __future__ import annotations

import io
import locale
from pathlib import Path

import pytest

import textio
from textio import UTF8, UTF16_BE, UTF16_LE, Encoding, StreamReader, StreamWriter

_TEXTS = [
    "",
    "Hello, world",
    "line one\nline two\n",
    "héllo wörld, ça va?",
    "日本語のテキスト",
    "emoji 😀 outside the BMP",
]


@pytest.mark.parametrize("text", _TEXTS)
@pytest.mark.parametrize("encoding", [UTF8, UTF16_LE, UTF16_BE], ids=str)
def test_round_trip_with_detection(encoding: Encoding, text: str):
    stream = io.BytesIO()
    StreamWriter(stream, encoding).write(text)
    stream.seek(0)
    reader = StreamReader(stream)
    assert reader.encoding == encoding
    assert reader.read_to_end() == text


def test_round_trip_through_files(tmp_path: Path):
    f = tmp_path / "text.txt"
    assert textio.write_text(f, "a\nb 😀\n", UTF16_BE) == 6
    assert f.read_bytes().startswith(b"\xfe\xff")
    assert textio.read_text(f) == "a\nb 😀\n"


def test_write_text_accepts_encoding_names(tmp_path: Path):
    f = tmp_path / "text.txt"
    textio.write_text(f, "café", "cp1252")
    assert f.read_bytes() == b"caf\xe9"
    textio.write_text(f, "hi", "utf-16-le")
    assert f.read_bytes() == b"\xff\xfeh\x00i\x00"


def test_write_text_newline(tmp_path: Path):
    f = tmp_path / "text.txt"
    textio.write_text(f, "a\nb\n", newline="\r\n")
    assert f.read_bytes() == b"a\r\nb\r\n"
    assert textio.read_text(f) == "a\nb\n"


def test_open_reader_with_hint_name(tmp_path: Path):
    f = tmp_path / "text.txt"
    f.write_bytes(b"plain")
    with textio.open_reader(f, "cp1252") as reader:
        assert reader.encoding.name == "cp1252"
        assert reader.detection.method == "hint"


def test_open_writer_default_is_utf8(tmp_path: Path):
    f = tmp_path / "text.txt"
    with textio.open_writer(f) as writer:
        assert writer.encoding == UTF8
        writer.write("é")
    assert f.read_bytes() == b"\xc3\xa9"


def test_detected_legacy_overrides_hint(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(locale, "getpreferredencoding", lambda do_setlocale=True: "cp1252")
    f = tmp_path / "text.txt"
    f.write_bytes("café au lait".encode("cp1252"))
    with textio.open_reader(f, "utf-8") as reader:
        assert reader.encoding == textio.LEGACY
        assert reader.read_to_end() == "café au lait"


def test_read_text_unknown_encoding(tmp_path: Path):
    f = tmp_path / "text.txt"
    f.write_bytes(b"x")
    with pytest.raises(LookupError):
        textio.read_text(f, "no-such-codec")


def test_public_names():
    for name in textio.__all__:
        assert hasattr(textio, name), name


def test_version():
    assert textio.__version__ == "1.0.0"
