from __future__ import annotations

import re
from collections import Counter
from concurrent.futures import Executor, ProcessPoolExecutor
from functools import partial
from pathlib import Path
from typing import AbstractSet, Iterable, List, Optional, Sequence

from trigrameval.utils.logger import get_logger

logger = get_logger(__name__)

RE_NON_WORD = re.compile(r"\W+")

TRIGRAM_SIZE = 3


def normalize_line(line: str) -> str:
    """Collapse every run of non-word characters into a single space."""
    return RE_NON_WORD.sub(" ", line)


def tokenize(line: str, blacklist: AbstractSet[str] = frozenset()) -> List[str]:
    """Lowercase and split a line, dropping blacklisted tokens."""
    return [tok for tok in line.lower().split() if tok not in blacklist]


def line_trigrams(line: str, blacklist: AbstractSet[str] = frozenset()) -> List[str]:
    """
    Overlapping 3-token windows of a line, in order.

    The blacklist is applied before windows are formed, so no emitted
    trigram can contain a blacklisted token.
    """
    tokens = tokenize(line, blacklist)
    return [
        " ".join(tokens[i : i + TRIGRAM_SIZE])
        for i in range(len(tokens) - TRIGRAM_SIZE + 1)
    ]


def _lines_trigrams(lines: Sequence[str], blacklist: AbstractSet[str]) -> List[str]:
    out: List[str] = []
    for line in lines:
        out.extend(line_trigrams(line, blacklist))
    return out


def _slices(lines: Sequence[str], parts: int) -> List[Sequence[str]]:
    size = max(1, -(-len(lines) // parts))
    return [lines[i : i + size] for i in range(0, len(lines), size)]


def extract_trigrams(
    lines: Sequence[str],
    blacklist: Iterable[str] = (),
    workers: int = 1,
    executor: Optional[Executor] = None,
) -> Counter:
    """
    Count the trigrams of a chunk of lines.

    Keys are the literal "w1 w2 w3" phrases in order of first occurrence.
    With workers > 1 the lines are tokenized in contiguous slices on a
    process pool; executor.map keeps slice order, so the merged counts are
    identical to the serial result. Pass an open executor to reuse one pool
    across chunks; otherwise a pool is started for this call only.
    """
    blacklist = frozenset(blacklist)
    counts: Counter = Counter()

    if workers <= 1 or len(lines) < 2 * workers:
        counts.update(_lines_trigrams(lines, blacklist))
        return counts

    worker_fn = partial(_lines_trigrams, blacklist=blacklist)
    slices = _slices(list(lines), workers)
    if executor is not None:
        for part in executor.map(worker_fn, slices):
            counts.update(part)
    else:
        with ProcessPoolExecutor(max_workers=workers) as pool:
            for part in pool.map(worker_fn, slices):
                counts.update(part)

    logger.debug(f"Tokenized {len(lines)} lines on {workers} workers")
    return counts


def load_blacklist(path: Path) -> frozenset:
    """
    Read a blacklist file: one token per line, blank lines and # comments ignored.
    """
    if not path.exists():
        raise FileNotFoundError(f"Blacklist not found: {path}")

    words = set()
    with path.open("r", encoding="utf-8") as f:
        for line in f:
            word = line.strip().lower()
            if word and not word.startswith("#"):
                words.add(word)
    return frozenset(words)
