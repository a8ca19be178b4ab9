## Path Utilities for trigrameval
# trigrameval/src/trigrameval/utils/path_util.py

from pathlib import Path
import os
import re
from typing import Dict, List

from .config_util import _meta

TEXT_SUFFIX = ".txt"

SPLIT_FILE_SUFFIXES = {
    "train": "_TrainingData.txt",
    "test": "_TestData.txt",
    "validation": "_ValidationData.txt",
}


# ---------------------------------------------------------------------
# 1. Global datasets directory helpers
# ---------------------------------------------------------------------
def get_global_datasets_dir() -> Path:
    """
    Return the base directory where all corpora are stored.

    Priority:
    1. $GLOBAL_DATASETS_DIR
    2. Fallback: ~/datasets
    """
    env_root = os.environ.get("GLOBAL_DATASETS_DIR")
    if env_root:
        return Path(env_root).expanduser()
    return Path.home() / "datasets"


def get_data_dir(project_config: dict) -> Path:
    """
    Base directory for this project's corpora.

    Uses:
    - GLOBAL_DATASETS_DIR as root
    - project_config["data_path"] as subfolder (e.g. "corpora/en_US")

    An absolute data_path is used as-is.
    """
    base = get_global_datasets_dir()
    meta = _meta(project_config)
    sub = meta.get("data_path", "")
    if sub:
        return base / sub
    return base


# ---------------------------------------------------------------------
# 2. Corpus file naming
# ---------------------------------------------------------------------
def file_prefix(file_name: str | Path) -> str:
    """Return a corpus file name without its .txt extension."""
    name = Path(file_name).name
    if name.endswith(TEXT_SUFFIX):
        return name[: -len(TEXT_SUFFIX)]
    return name


def list_text_files(directory: Path, pattern: str = r".*\.txt$") -> List[Path]:
    """Return files in directory whose name matches pattern, sorted by name."""
    if not directory.is_dir():
        raise FileNotFoundError(f"Directory not found: {directory}")

    regex = re.compile(pattern)
    return sorted(
        p for p in directory.iterdir() if p.is_file() and regex.search(p.name)
    )


def get_split_paths(text_file: Path, output_dir: Path) -> Dict[str, Path]:
    """
    Output paths for a train/test/validation split of text_file:
    <prefix>_TrainingData.txt, <prefix>_TestData.txt, <prefix>_ValidationData.txt
    """
    prefix = file_prefix(text_file)
    return {
        split: output_dir / f"{prefix}{suffix}"
        for split, suffix in SPLIT_FILE_SUFFIXES.items()
    }


def get_line_counts_path(directory: Path) -> Path:
    """Line-count manifest of a directory: <dir_name>NumLines.json"""
    return directory / f"{directory.name}NumLines.json"


def get_checkpoint_path(directory: Path, text_file: str | Path) -> Path:
    """Per-file evaluation snapshot: <prefix>Eval.json next to the corpus."""
    return directory / f"{file_prefix(text_file)}Eval.json"


def get_sampling_manifest_path(input_dir: Path, output_dir: Path, suffix: str) -> Path:
    """Sampling manifest: <input_dir_name><suffix>Sampling.json in output_dir."""
    return output_dir / f"{input_dir.name}{suffix}Sampling.json"


def short_path(p: Path, base: Path) -> str:
    try:
        return str(p.relative_to(base))
    except ValueError:
        return str(p)
