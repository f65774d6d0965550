"""Command-line interface for textio."""

from __future__ import annotations

import argparse
import logging
import sys

import textio
from textio.detection import Heuristic
from textio.detection.heuristic import detect_by_statistics
from textio.encoding import Encoding
from textio.reader import StreamReader
from textio.writer import StreamWriter

_NEWLINES = {"lf": "\n", "crlf": "\r\n", "cr": "\r"}


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Detect the encoding of text files, or convert them."
    )
    parser.add_argument("files", nargs="*", help="Files to read (default: stdin)")
    parser.add_argument(
        "--minimal", action="store_true", help="Output only the encoding name"
    )
    parser.add_argument(
        "--bom-only",
        action="store_true",
        help="Trust byte order marks only, never guess",
    )
    parser.add_argument(
        "-t",
        "--convert-to",
        metavar="ENCODING",
        default=None,
        help="Re-encode the input (utf-8, utf-16-le, utf-16-be, ansi, ...)",
    )
    parser.add_argument(
        "-o", "--output", default=None, help="Output file for --convert-to"
    )
    parser.add_argument(
        "--newline",
        default="lf",
        choices=sorted(_NEWLINES),
        help="Line terminator for --convert-to output",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log detection details"
    )
    parser.add_argument(
        "--version", action="version", version=f"textio {textio.__version__}"
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Run the ``textio`` command-line tool.

    :param argv: Command-line arguments.  Defaults to ``sys.argv[1:]``.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    heuristic = None if args.bom_only else detect_by_statistics

    if args.convert_to is not None:
        try:
            target = textio.lookup(args.convert_to)
        except LookupError:
            parser.error(f"unknown or unsupported encoding: {args.convert_to}")
        if len(args.files) > 1:
            parser.error("--convert-to takes at most one input file")
        source = args.files[0] if args.files else None
        _convert(source, args.output, target, _NEWLINES[args.newline], heuristic)
        return

    if args.output is not None:
        parser.error("--output requires --convert-to")

    failed = False
    if args.files:
        for filepath in args.files:
            try:
                with StreamReader.from_path(filepath, heuristic=heuristic) as reader:
                    _report(filepath, reader, args.minimal)
            except OSError as e:
                print(f"textio: {filepath}: {e}", file=sys.stderr)
                failed = True
    else:
        with StreamReader(sys.stdin.buffer, heuristic=heuristic) as reader:
            _report("stdin", reader, args.minimal)

    if failed:
        sys.exit(1)


def _report(name: str, reader: StreamReader, minimal: bool) -> None:
    if minimal:
        print(reader.encoding.name)
    else:
        print(f"{name}: {reader.encoding.name} ({reader.detection.method})")


def _convert(
    source: str | None,
    output: str | None,
    target: Encoding,
    newline: str,
    heuristic: Heuristic | None,
) -> None:
    if source is None:
        with StreamReader(sys.stdin.buffer, heuristic=heuristic) as reader:
            text = reader.read_to_end()
    else:
        try:
            with StreamReader.from_path(source, heuristic=heuristic) as reader:
                text = reader.read_to_end()
        except OSError as e:
            print(f"textio: {source}: {e}", file=sys.stderr)
            sys.exit(1)

    if output is None:
        with StreamWriter(sys.stdout.buffer, target, newline=newline) as writer:
            writer.write(text)
    else:
        with StreamWriter.from_path(output, target, newline=newline) as writer:
            writer.write(text)


if __name__ == "__main__":
    main()
