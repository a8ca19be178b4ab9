## Configuration Utilities for trigrameval
# trigrameval/src/trigrameval/utils/config_util.py

import json
from pathlib import Path

REQUIRED_SECTIONS = ("project_metadata",)
KNOWN_SECTIONS = (
    "project_metadata",
    "split_config",
    "sampling_config",
    "evaluation_config",
)

DEFAULT_SPLIT_CONFIG = {
    "train_fraction": 0.6,
    "test_fraction": 0.5,  # share of the non-training remainder
    "file_pattern": r".*\.txt$",
    "seed": None,
}

DEFAULT_SAMPLING_CONFIG = {
    "percentage": 1.0,
    "seed": None,
}

DEFAULT_EVALUATION_CONFIG = {
    "language": "english",
    "file_pattern": r".*\.txt$",
    "chunk_size": 2500,
    "top_k": 3,
    "workers": 1,
    "blacklist_file": None,
    "predictor_file": None,
    "append_incorrect": False,
}


def _meta(cfg: dict) -> dict:
    """Return project_metadata sub-dict if present, otherwise the whole dict."""
    return cfg.get("project_metadata", cfg)


def _section(cfg: dict, name: str, defaults: dict) -> dict:
    """Return a config section merged over its defaults."""
    merged = dict(defaults)
    merged.update(cfg.get(name, {}) or {})
    return merged


def split_cfg(cfg: dict) -> dict:
    return _section(cfg, "split_config", DEFAULT_SPLIT_CONFIG)


def sampling_cfg(cfg: dict) -> dict:
    return _section(cfg, "sampling_config", DEFAULT_SAMPLING_CONFIG)


def evaluation_cfg(cfg: dict) -> dict:
    return _section(cfg, "evaluation_config", DEFAULT_EVALUATION_CONFIG)


def load_config(config_path: Path | str) -> dict:
    """
    Load a JSON project configuration file.

    Raises FileNotFoundError when the file does not exist.
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"{config_path.name} not found at: {config_path}")

    with config_path.open("r", encoding="utf-8") as f:
        return json.load(f)


def validate_nested_config(cfg: dict, config_path: Path | str = "") -> None:
    """
    Validate that a config has the expected nested structure for CLI tools.

    Args:
        cfg: The configuration dictionary to validate
        config_path: Optional path for better error messages
    """
    path_info = f" in {config_path}" if config_path else ""

    for key in REQUIRED_SECTIONS:
        if key not in cfg:
            raise ValueError(f"Missing required key '{key}'{path_info}")

    unknown = [key for key in cfg if key not in KNOWN_SECTIONS]
    if unknown:
        raise ValueError(f"Unknown config section(s) {unknown}{path_info}")

    percentage = sampling_cfg(cfg)["percentage"]
    if not 0 < float(percentage) <= 100:
        raise ValueError(f"sampling_config.percentage must be in (0, 100], got {percentage}{path_info}")

    train_fraction = split_cfg(cfg)["train_fraction"]
    test_fraction = split_cfg(cfg)["test_fraction"]
    for name, value in (("train_fraction", train_fraction), ("test_fraction", test_fraction)):
        if not 0 <= float(value) <= 1:
            raise ValueError(f"split_config.{name} must be in [0, 1], got {value}{path_info}")

    eval_cfg = evaluation_cfg(cfg)
    for name in ("chunk_size", "top_k", "workers"):
        value = eval_cfg[name]
        if not isinstance(value, int) or value <= 0:
            raise ValueError(f"evaluation_config.{name} must be a positive integer, got {value}{path_info}")


def load_nested_config(config_path: Path | str) -> dict:
    """
    Load and validate a nested configuration file for CLI tools.
    Combines load_config and validate_nested_config for convenience.
    """
    cfg = load_config(config_path)
    validate_nested_config(cfg, config_path)
    return cfg
