from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List, Optional

import numpy as np

from trigrameval.data.classifier import SAMPLED, check_partition, sample_lines
from trigrameval.data.line_counts import load_line_counts, lookup_line_count
from trigrameval.data.line_source import ChunkedLineSource
from trigrameval.data.sample_sizer import compute_sample_sizing
from trigrameval.utils.logger import get_logger
from trigrameval.utils.path_util import (
    file_prefix,
    get_line_counts_path,
    get_sampling_manifest_path,
    list_text_files,
)

logger = get_logger(__name__)


def sampling_suffix(percentage: float) -> str:
    """
    File-name-safe marker for a sampling percentage.

    >>> sampling_suffix(1.5)
    'Sample1p50'
    """
    return "Sample" + f"{percentage:.2f}".replace(".", "p")


def sample_text_file(
    input_file: Path,
    num_lines: Dict[str, int],
    percentage: float,
    output_file: Path,
    rng: Optional[np.random.Generator] = None,
    seed: Optional[int] = None,
    encoding: str = "utf-8",
) -> List[int]:
    """
    Write a random sample of input_file to output_file.

    Chunk size comes from compute_sample_sizing and stays fixed for the file;
    each line of a chunk is kept with probability percentage / 100.

    Returns:
        1-based line numbers (in input_file) of the lines written
    """
    total_num_lines = lookup_line_count(num_lines, input_file)
    sizing = compute_sample_sizing(percentage, total_num_lines)
    rng = rng if rng is not None else np.random.default_rng(seed)

    logger.info(
        f"Generating random sample of {input_file.name} "
        f"({sizing.lines_to_read} lines per chunk)"
    )

    sample_line_idx: List[int] = []
    output_file.parent.mkdir(parents=True, exist_ok=True)

    with ChunkedLineSource(input_file, encoding=encoding) as source, \
            output_file.open("w", encoding=encoding, newline="\n") as out:
        for chunk in source.iter_batches(sizing.lines_to_read):
            lines_before = source.lines_read - len(chunk)

            sampling = sample_lines(len(chunk), percentage, rng)
            check_partition(sampling, len(chunk))

            for line in sampling.select(chunk, SAMPLED):
                out.write(line + "\n")
            sample_line_idx.extend(lines_before + i for i in sampling[SAMPLED])

            logger.info(f"Lines read: {source.lines_read} (Out of {total_num_lines})")

    achieved = 100.0 * len(sample_line_idx) / total_num_lines if total_num_lines else 0.0
    logger.info(f"Requested sampling percentage: {percentage:.5f}")
    logger.info(f"Percentage of lines sampled: {achieved:.5f}")

    return sample_line_idx


def verify_sample(
    input_file: Path,
    output_file: Path,
    sample_line_idx: List[int],
    encoding: str = "utf-8",
) -> List[int]:
    """
    Check that output_file holds exactly the input lines listed in sample_line_idx.

    Returns:
        Line numbers whose output line differs from the input line
        (an empty list means the sample is faithful).
    """
    wanted = {n: i for i, n in enumerate(sample_line_idx)}
    expected: List[Optional[str]] = [None] * len(sample_line_idx)

    with ChunkedLineSource(input_file, encoding=encoding) as source:
        for chunk in source.iter_batches(10_000):
            start = source.lines_read - len(chunk)
            for offset, line in enumerate(chunk, start=1):
                pos = wanted.get(start + offset)
                if pos is not None:
                    expected[pos] = line

    with output_file.open("r", encoding=encoding, errors="replace", newline="\n") as f:
        actual = [line.rstrip("\n") for line in f]

    mismatches = []
    for pos, line_number in enumerate(sample_line_idx):
        got = actual[pos] if pos < len(actual) else None
        if got != expected[pos]:
            logger.warning(f"Line #{line_number} mismatch | input: {expected[pos]!r} | output: {got!r}")
            mismatches.append(line_number)
    if len(actual) > len(sample_line_idx):
        logger.warning(f"Sample has {len(actual) - len(sample_line_idx)} unexpected trailing lines")
    return mismatches


def apply_random_sampler(
    input_dir: Path,
    percentage: float,
    output_dir: Path,
    num_lines: Optional[Dict[str, int]] = None,
    pattern: str = r".*\.txt$",
    seed: Optional[int] = None,
) -> Dict[str, List[int]]:
    """
    Sample every corpus file in input_dir and record which lines were kept.

    Outputs <prefix>Sample<pct>.txt per file plus a manifest
    <input_dir_name>Sample<pct>Sampling.json mapping output file name to
    sampled line numbers. Line counts default to the NumLines manifest in
    output_dir.
    """
    if num_lines is None:
        num_lines = load_line_counts(get_line_counts_path(output_dir))

    suffix = sampling_suffix(percentage)
    rng = np.random.default_rng(seed)
    text_file_sampling: Dict[str, List[int]] = {}

    for text_file in list_text_files(input_dir, pattern):
        logger.info(f"Generating a {percentage:.2f}% random sample of {text_file.name}")

        output_name = f"{file_prefix(text_file)}{suffix}.txt"
        text_file_sampling[output_name] = sample_text_file(
            text_file,
            num_lines,
            percentage,
            output_dir / output_name,
            rng=rng,
        )

    manifest = get_sampling_manifest_path(input_dir, output_dir, suffix)
    with manifest.open("w", encoding="utf-8") as f:
        json.dump(text_file_sampling, f)
    logger.info(f"Sampling manifest written to {manifest}")

    return text_file_sampling
