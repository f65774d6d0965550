#!/usr/bin/env python
"""Benchmark textio reading: per-line vs whole-stream throughput.

Timings use ``time.perf_counter()`` over in-memory streams so disk I/O does
not affect the numbers.
"""

from __future__ import annotations

import argparse
import io
import statistics
import time

import textio

_SAMPLE_LINE = "Größe, naïve café, 日本語のテキスト, emoji 😀 and plain ASCII.\r\n"


def _time_reads(data: bytes, mode: str, repeat: int) -> list[float]:
    times: list[float] = []
    for _ in range(repeat):
        t0 = time.perf_counter()
        with textio.StreamReader(io.BytesIO(data)) as reader:
            if mode == "lines":
                for _line in reader:
                    pass
            else:
                reader.read_to_end()
        times.append(time.perf_counter() - t0)
    return times


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Benchmark textio read throughput per encoding.",
    )
    parser.add_argument(
        "--lines",
        type=int,
        default=5_000,
        help="Number of sample lines per stream (default: 5000)",
    )
    parser.add_argument(
        "--repeat",
        type=int,
        default=5,
        help="Timed runs per encoding and mode (default: 5)",
    )
    args = parser.parse_args()

    text = _SAMPLE_LINE * args.lines
    for encoding in (textio.UTF8, textio.UTF16_LE, textio.UTF16_BE):
        stream = io.BytesIO()
        textio.StreamWriter(stream, encoding).write(text)
        data = stream.getvalue()
        print(f"{encoding.name}: {len(data) / 1024:.0f} KiB")
        for mode in ("lines", "to_end"):
            times = _time_reads(data, mode, args.repeat)
            median = statistics.median(times)
            rate = len(data) / median / (1024 * 1024)
            print(f"  {mode:<7} median={median * 1000:.1f}ms  {rate:.2f} MiB/s")


if __name__ == "__main__":
    main()
