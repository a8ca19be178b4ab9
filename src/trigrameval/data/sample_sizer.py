from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class SampleSizingParameters:
    percentage: float
    total_lines: int
    min_lines_to_read: int
    max_lines_to_read: int
    lines_to_read: int


def compute_sample_sizing(percentage: float, total_lines: int) -> SampleSizingParameters:
    """
    Choose how many lines to read per chunk when sampling a file.

    Reading ceil(10 / p) lines per chunk yields about ten sampled lines per
    chunk. That is clamped into [ceil(total/100), ceil(total/10)] so small
    percentages don't degrade into tiny reads and large ones don't read most
    of the file at once. The result is fixed for the whole file.

    Files so small that the ceiling is 0 are read one line at a time.
    """
    if not 0 < percentage <= 100:
        raise ValueError(f"percentage must be in (0, 100], got {percentage}")
    if total_lines < 0:
        raise ValueError(f"total_lines must be non-negative, got {total_lines}")

    min_lines = math.ceil(total_lines / 100)
    max_lines = math.ceil(total_lines / 10)

    lines_to_read = math.ceil(10 / (percentage / 100))
    if lines_to_read > max_lines:
        lines_to_read = max_lines
    elif lines_to_read < min_lines:
        lines_to_read = min_lines

    return SampleSizingParameters(
        percentage=percentage,
        total_lines=total_lines,
        min_lines_to_read=min_lines,
        max_lines_to_read=max_lines,
        lines_to_read=max(lines_to_read, 1),
    )
