"""Internal shared constants and argument validation for textio."""

from __future__ import annotations

#: Capacity of a reader's refill buffer.  A tuning knob only: characters
#: split across refills decode the same at any size.
DEFAULT_BUFFER_SIZE: int = 4096

#: Number of leading bytes the text-statistics heuristic examines.
HEURISTIC_SAMPLE_SIZE: int = 4096

#: Error policies accepted by :class:`textio.encoding.Encoding`.
ERROR_POLICIES: frozenset[str] = frozenset({"strict", "replace"})

#: Line terminators a writer may translate ``"\n"`` into.
NEWLINES: frozenset[str] = frozenset({"\n", "\r\n", "\r"})


def _validate_buffer_size(buffer_size: int) -> None:
    """Raise ValueError if *buffer_size* is not a positive integer."""
    if (
        isinstance(buffer_size, bool)
        or not isinstance(buffer_size, int)
        or buffer_size < 1
    ):
        msg = "buffer_size must be a positive integer"
        raise ValueError(msg)


def _validate_errors(errors: str) -> None:
    """Raise ValueError if *errors* is not a supported error policy."""
    if errors not in ERROR_POLICIES:
        msg = f"errors must be one of {sorted(ERROR_POLICIES)}, not {errors!r}"
        raise ValueError(msg)


def _validate_newline(newline: str) -> None:
    """Raise ValueError if *newline* is not a line terminator."""
    if newline not in NEWLINES:
        msg = f"newline must be one of {sorted(NEWLINES)!r}, not {newline!r}"
        raise ValueError(msg)
