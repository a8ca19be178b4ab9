"""
Probabilistic line classification for streamed corpus chunks.

Every line of a chunk gets its own independent Bernoulli draw, so class
proportions are only approximately the requested ones in any given chunk,
while each chunk is always partitioned exactly: every 1-based offset lands
in exactly one class.

Two policies:
- sampling:          sampled / unsampled, Bernoulli(percentage / 100)
- train/test/valid:  Bernoulli(0.6) marks training, the remainder is split
                     by Bernoulli(0.5) into test, validation is what is left
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

import numpy as np

from trigrameval.utils.logger import get_logger

logger = get_logger(__name__)

SAMPLED = "sampled"
UNSAMPLED = "unsampled"
TRAIN = "train"
TEST = "test"
VALIDATION = "validation"

SPLIT_LABELS = (TRAIN, TEST, VALIDATION)


class PartitionInvariantViolation(RuntimeError):
    """Classifier output does not partition the chunk it was given."""


class ClassificationResult(dict):
    """Mapping from class label to ordered 1-based line offsets within a batch."""

    def sizes(self) -> Dict[str, int]:
        return {label: len(offsets) for label, offsets in self.items()}

    def select(self, lines: Sequence[str], label: str) -> List[str]:
        """Lines of the batch assigned to label, in original order."""
        return [lines[offset - 1] for offset in self[label]]


def _as_rng(rng: Optional[np.random.Generator] = None, seed: Optional[int] = None) -> np.random.Generator:
    if rng is not None:
        return rng
    return np.random.default_rng(seed)


def _bernoulli_offsets(offsets: np.ndarray, p: float, rng: np.random.Generator):
    """Split offsets into (selected, rest) with one Bernoulli(p) draw each."""
    draws = rng.binomial(1, p, size=len(offsets)).astype(bool)
    return offsets[draws], offsets[~draws]


def sample_lines(
    n: int,
    percentage: float,
    rng: Optional[np.random.Generator] = None,
) -> ClassificationResult:
    """
    Binary sampling policy for a batch of n lines.

    Args:
        n: number of lines in the batch
        percentage: percentage of lines to sample, 0 < percentage <= 100
        rng: numpy Generator (a fresh unseeded one when omitted)

    Returns:
        ClassificationResult with "sampled" and "unsampled" offsets
    """
    if not 0 < percentage <= 100:
        raise ValueError(f"percentage must be in (0, 100], got {percentage}")

    offsets = np.arange(1, n + 1)
    sampled, unsampled = _bernoulli_offsets(offsets, percentage / 100, _as_rng(rng))
    return ClassificationResult(
        {SAMPLED: sampled.tolist(), UNSAMPLED: unsampled.tolist()}
    )


def split_lines(
    n: int,
    rng: Optional[np.random.Generator] = None,
    train_fraction: float = 0.6,
    test_fraction: float = 0.5,
) -> ClassificationResult:
    """
    Three-way train/test/validation policy for a batch of n lines.

    test_fraction is the share of the non-training lines that go to test,
    so the defaults give an expected 60/20/20 split.
    """
    rng = _as_rng(rng)
    offsets = np.arange(1, n + 1)

    train, remainder = _bernoulli_offsets(offsets, train_fraction, rng)
    test, validation = _bernoulli_offsets(remainder, test_fraction, rng)

    return ClassificationResult(
        {
            TRAIN: train.tolist(),
            TEST: test.tolist(),
            VALIDATION: validation.tolist(),
        }
    )


def check_partition(result: ClassificationResult, n: int) -> None:
    """
    Raise PartitionInvariantViolation unless result partitions 1..n exactly.
    """
    sizes = result.sizes()
    total = sum(sizes.values())
    if total != n:
        raise PartitionInvariantViolation(
            f"# of lines changed: classes {sizes} sum to {total}, expected {n}"
        )

    seen = set()
    for offsets in result.values():
        seen.update(offsets)
    if seen != set(range(1, n + 1)):
        raise PartitionInvariantViolation(
            f"Classes overlap or fall outside 1..{n}"
        )


def split_percentages(result: ClassificationResult) -> Dict[str, float]:
    sizes = result.sizes()
    total = sum(sizes.values())
    if total == 0:
        return {label: 0.0 for label in sizes}
    return {label: 100.0 * size / total for label, size in sizes.items()}


def validate_chunk_split(n: int, rng: Optional[np.random.Generator] = None) -> ClassificationResult:
    """
    Self-check of the three-way classifier on a batch of n lines.

    Fails fatally with PartitionInvariantViolation when the class sizes do not
    sum to n; otherwise logs the achieved percentages and returns the result.
    """
    result = split_lines(n, rng)
    check_partition(result, n)

    logger.info("# of samples match")
    pct = split_percentages(result)
    logger.info(f"Training data: {pct[TRAIN]:.2f}%")
    logger.info(f"Test data: {pct[TEST]:.2f}%")
    logger.info(f"Validation data: {pct[VALIDATION]:.2f}%")
    return result
