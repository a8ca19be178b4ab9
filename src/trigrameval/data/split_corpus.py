from pathlib import Path
import math
from typing import Dict, Optional

import numpy as np

from trigrameval.data.classifier import (
    SPLIT_LABELS,
    check_partition,
    split_lines,
    split_percentages,
)
from trigrameval.data.line_counts import lookup_line_count
from trigrameval.data.line_source import ChunkedLineSource
from trigrameval.utils.logger import get_logger
from trigrameval.utils.path_util import get_split_paths, list_text_files

logger = get_logger(__name__)


def split_corpus(
    text_file: Path,
    output_dir: Path,
    num_lines: Dict[str, int],
    train_fraction: float = 0.6,
    test_fraction: float = 0.5,
    seed: Optional[int] = None,
    rng: Optional[np.random.Generator] = None,
    encoding: str = "utf-8",
) -> Dict[str, Dict]:
    """
    Split a corpus into training/test/validation sets, one chunk at a time.

    Steps:
    - Read ceil(total_lines / 100) lines per chunk
    - Assign each line of the chunk with independent Bernoulli draws
      (expected 60/20/20)
    - Append each class to its own output, preserving line order
    - Report cumulative progress against the known line count

    Args:
        text_file: Path to the corpus (one sample per line)
        output_dir: Directory for <prefix>_TrainingData.txt etc.
        num_lines: {file_name: total_line_count} metadata
        train_fraction: Bernoulli probability of a line going to training
        test_fraction: share of the non-training lines going to test
        seed: RNG seed for reproducibility (ignored when rng is given)
        rng: numpy Generator to draw from
        encoding: Text encoding

    Returns:
        Dictionary with stats per split:
        {
            "train":      {"path": str, "lines": int, "line_numbers": [int, ...]},
            "test":       {...},
            "validation": {...},
        }
    """
    if not text_file.exists():
        raise FileNotFoundError(f"Corpus not found: {text_file}")

    total_num_lines = lookup_line_count(num_lines, text_file)
    num_lines_to_read = max(1, math.ceil(total_num_lines / 100))
    rng = rng if rng is not None else np.random.default_rng(seed)

    output_dir.mkdir(parents=True, exist_ok=True)
    paths = get_split_paths(text_file, output_dir)
    line_numbers: Dict[str, list] = {split: [] for split in SPLIT_LABELS}

    logger.info(f"Splitting {text_file.name} ({total_num_lines} lines, {num_lines_to_read} per chunk)")

    # Outputs stay open for the whole file so later chunks append, never truncate
    handles = {}
    try:
        for split, path in paths.items():
            handles[split] = path.open("w", encoding=encoding, newline="\n")

        with ChunkedLineSource(text_file, encoding=encoding) as source:
            for chunk in source.iter_batches(num_lines_to_read):
                lines_before = source.lines_read - len(chunk)

                logger.info(f"Read {source.lines_read} lines (Out of {total_num_lines})")

                sampling = split_lines(len(chunk), rng, train_fraction, test_fraction)
                check_partition(sampling, len(chunk))

                pct = split_percentages(sampling)
                logger.info(
                    f"Training data: {pct['train']:.2f}% | "
                    f"Test data: {pct['test']:.2f}% | "
                    f"Validation data: {pct['validation']:.2f}%"
                )

                for split in SPLIT_LABELS:
                    for line in sampling.select(chunk, split):
                        handles[split].write(line + "\n")
                    line_numbers[split].extend(lines_before + i for i in sampling[split])
    finally:
        for handle in handles.values():
            handle.close()

    return {
        split: {
            "path": str(paths[split]),
            "lines": len(line_numbers[split]),
            "line_numbers": line_numbers[split],
        }
        for split in SPLIT_LABELS
    }


def split_corpus_files(
    input_dir: Path,
    output_dir: Path,
    num_lines: Dict[str, int],
    pattern: str = r".*\.txt$",
    train_fraction: float = 0.6,
    test_fraction: float = 0.5,
    seed: Optional[int] = None,
) -> Dict[str, Dict[str, Dict]]:
    """
    Split every corpus file in input_dir matching pattern.

    One Generator is shared across files so a seeded run is reproducible
    end to end. Returns {file_name: split stats}.
    """
    rng = np.random.default_rng(seed)
    results = {}
    for text_file in list_text_files(input_dir, pattern):
        results[text_file.name] = split_corpus(
            text_file,
            output_dir,
            num_lines,
            train_fraction=train_fraction,
            test_fraction=test_fraction,
            rng=rng,
        )
    return results
