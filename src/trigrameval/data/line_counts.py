from __future__ import annotations

import json
from pathlib import Path
from typing import Dict

from trigrameval.utils.logger import get_logger
from trigrameval.utils.path_util import get_line_counts_path, list_text_files

logger = get_logger(__name__)

_BLOCK_SIZE = 1 << 20


def count_lines(path: Path) -> int:
    """
    Count lines of a file by streaming raw bytes.

    A final line without a trailing newline still counts as a line.
    """
    count = 0
    last = b"\n"
    with path.open("rb") as f:
        while True:
            block = f.read(_BLOCK_SIZE)
            if not block:
                break
            count += block.count(b"\n")
            last = block[-1:]
    if last != b"\n":
        count += 1
    return count


def build_line_counts(directory: Path, pattern: str = r".*\.txt$") -> Dict[str, int]:
    """Return {file_name: line_count} for every matching file in directory."""
    counts: Dict[str, int] = {}
    for path in list_text_files(directory, pattern):
        counts[path.name] = count_lines(path)
        logger.info(f"{path.name}: {counts[path.name]} lines")
    return counts


def save_line_counts(counts: Dict[str, int], path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(counts, f, indent=2, sort_keys=True)
    return path


def load_line_counts(path: Path) -> Dict[str, int]:
    """
    Load a line-count manifest. Accepts either the manifest file itself or
    the directory it describes (<dir>/<dir_name>NumLines.json).
    """
    if path.is_dir():
        path = get_line_counts_path(path)

    if not path.exists():
        raise FileNotFoundError(
            f"Line counts not found at: {path}\n"
            "Run `trigrameval count-lines` on the corpus directory first."
        )

    with path.open("r", encoding="utf-8") as f:
        return {name: int(n) for name, n in json.load(f).items()}


def lookup_line_count(num_lines: Dict[str, int], text_file: Path) -> int:
    """Known total line count of text_file, keyed by its base name."""
    try:
        return num_lines[text_file.name]
    except KeyError:
        raise KeyError(
            f"No line count for '{text_file.name}'; known files: {sorted(num_lines)}"
        ) from None
