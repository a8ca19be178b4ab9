#!/usr/bin/env python3
"""
TRIGRAMEVAL - Command Line Interface

Prepare corpora and measure a trigram next-word predictor against them.

Available commands:
- count-lines   Count the lines of every corpus file (writes <dir>NumLines.json)
- split         Split corpus files into training/test/validation sets (60/20/20)
- sample        Draw a random percentage of lines from every corpus file
- evaluate      Score a predictor on every matching corpus file, chunk by chunk

Usage:
    trigrameval <command> [options]

Examples:
    trigrameval count-lines data/en_US
    trigrameval split data/en_US data/en_US/split --seed 42
    trigrameval sample data/en_US data/en_US/sample --percentage 1.5
    trigrameval evaluate data/en_US/split --pattern ".*_TestData\\.txt$" \\
        --predictor models/trigram_table.json --blacklist blacklist.txt --resume
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional

from trigrameval.data.line_counts import (
    build_line_counts,
    load_line_counts,
    save_line_counts,
)
from trigrameval.data.sample_corpus import apply_random_sampler
from trigrameval.data.split_corpus import split_corpus_files
from trigrameval.evaluation.driver import (
    PredictorEvalParams,
    evaluate_text_files,
    write_evaluation_summary,
)
from trigrameval.evaluation.predictor import TrigramTablePredictor
from trigrameval.evaluation.trigrams import load_blacklist
from trigrameval.utils.config_util import (
    evaluation_cfg,
    load_nested_config,
    sampling_cfg,
    split_cfg,
)
from trigrameval.utils.logger import get_logger, set_verbosity
from trigrameval.utils.path_util import get_data_dir, get_line_counts_path, short_path

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_CONFIG_ERROR = 2
EXIT_PROCESSING_ERROR = 3


# ---------------------------------------------------------
# Utilities
# ---------------------------------------------------------
def _load_cfg(config_path: Optional[Path]) -> dict:
    if config_path is None:
        return {}
    return load_nested_config(config_path)


def _pick(cli_value, cfg_value):
    """CLI flags win over config values."""
    return cli_value if cli_value is not None else cfg_value


def _input_dir(args, cfg: dict) -> Path:
    if args.input_dir is not None:
        return args.input_dir
    if cfg:
        return get_data_dir(cfg)
    raise ValueError("No input directory given and no --config to take data_path from")


def _num_lines(input_dir: Path, output_dir: Optional[Path] = None) -> dict:
    """Line counts from the input directory, falling back to the output directory."""
    candidates = [get_line_counts_path(input_dir)]
    if output_dir is not None:
        candidates.append(get_line_counts_path(output_dir))
    for path in candidates:
        if path.exists():
            return load_line_counts(path)
    return load_line_counts(candidates[0])


# ---------------------------------------------------------
# Commands
# ---------------------------------------------------------
def cmd_count_lines(args, cfg: dict) -> int:
    input_dir = _input_dir(args, cfg)
    counts = build_line_counts(input_dir, args.pattern)
    out = save_line_counts(counts, get_line_counts_path(input_dir))
    logger.info(f"Counted {len(counts)} files -> {short_path(out, Path.cwd())}")
    return EXIT_OK


def cmd_split(args, cfg: dict) -> int:
    scfg = split_cfg(cfg)
    input_dir = _input_dir(args, cfg)
    results = split_corpus_files(
        input_dir,
        args.output_dir,
        _num_lines(input_dir, args.output_dir),
        pattern=_pick(args.pattern, scfg["file_pattern"]),
        train_fraction=scfg["train_fraction"],
        test_fraction=scfg["test_fraction"],
        seed=_pick(args.seed, scfg["seed"]),
    )
    split_counts = {}
    for name, stats in results.items():
        counts = ", ".join(f"{split}: {s['lines']}" for split, s in stats.items())
        logger.info(f"{name} -> {counts}")
        split_counts.update({Path(s["path"]).name: s["lines"] for s in stats.values()})

    # split outputs can be evaluated without a separate count-lines run
    manifest = get_line_counts_path(args.output_dir)
    existing = load_line_counts(manifest) if manifest.exists() else {}
    existing.update(split_counts)
    save_line_counts(existing, manifest)
    return EXIT_OK


def cmd_sample(args, cfg: dict) -> int:
    scfg = sampling_cfg(cfg)
    input_dir = _input_dir(args, cfg)
    percentage = float(_pick(args.percentage, scfg["percentage"]))
    sampling = apply_random_sampler(
        input_dir,
        percentage,
        args.output_dir,
        num_lines=_num_lines(input_dir, args.output_dir),
        pattern=args.pattern,
        seed=_pick(args.seed, scfg["seed"]),
    )
    logger.info(f"Sampled {len(sampling)} files at {percentage:.2f}%")
    return EXIT_OK


def cmd_evaluate(args, cfg: dict) -> int:
    ecfg = evaluation_cfg(cfg)
    input_dir = _input_dir(args, cfg)

    predictor_file = _pick(args.predictor, ecfg["predictor_file"])
    if predictor_file is None:
        raise ValueError("A predictor table is required (--predictor or evaluation_config.predictor_file)")
    predictor = TrigramTablePredictor.load(Path(predictor_file))

    blacklist_file = _pick(args.blacklist, ecfg["blacklist_file"])
    blacklist = load_blacklist(Path(blacklist_file)) if blacklist_file else frozenset()

    # line counts only feed progress messages here
    manifest = get_line_counts_path(input_dir)
    if manifest.exists():
        num_lines = load_line_counts(manifest)
    else:
        logger.warning(f"No line counts at {manifest}; progress will not show totals")
        num_lines = {}

    params = PredictorEvalParams(
        text_file_directory=input_dir,
        num_lines=num_lines,
        predictor=predictor,
        blacklist=blacklist,
        chunk_size=_pick(args.chunk_size, ecfg["chunk_size"]),
        top_k=_pick(args.top_k, ecfg["top_k"]),
    )

    results = evaluate_text_files(
        params,
        _pick(args.pattern, ecfg["file_pattern"]),
        language=_pick(args.language, ecfg["language"]),
        workers=_pick(args.workers, ecfg["workers"]),
        append_incorrect=args.append_incorrect or ecfg["append_incorrect"],
        resume=args.resume,
    )

    for name, acc in results.items():
        logger.info(
            f"{name}: {acc.num_correct_predictions}/{acc.common_trigram_count} correct "
            f"({100.0 * acc.accuracy:.2f}%), {acc.trigram_count} trigrams"
        )

    if args.summary is not None:
        write_evaluation_summary(results, args.summary)
    return EXIT_OK


# ---------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------
def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="trigrameval",
        description="Corpus preparation and trigram predictor evaluation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__.split("Examples:")[1] if __doc__ else None,
    )
    parser.add_argument("--config", "-c", type=Path, default=None, help="Path to project config JSON")
    parser.add_argument("--verbose", "-v", action="store_true", help="Show debug progress")
    parser.add_argument("--quiet", "-q", action="store_true", help="Only show warnings and errors")

    sub = parser.add_subparsers(dest="command")

    p = sub.add_parser("count-lines", help="Count lines of every corpus file")
    p.add_argument("input_dir", type=Path, nargs="?", default=None)
    p.add_argument("--pattern", default=r".*\.txt$", help="Regex selecting corpus files")
    p.set_defaults(func=cmd_count_lines)

    p = sub.add_parser("split", help="Split corpus files into training/test/validation sets")
    p.add_argument("input_dir", type=Path, nargs="?", default=None)
    p.add_argument("output_dir", type=Path)
    p.add_argument("--pattern", default=None, help="Regex selecting corpus files")
    p.add_argument("--seed", type=int, default=None, help="Random seed for reproducible splits")
    p.set_defaults(func=cmd_split)

    p = sub.add_parser("sample", help="Randomly sample a percentage of every corpus file")
    p.add_argument("input_dir", type=Path, nargs="?", default=None)
    p.add_argument("output_dir", type=Path)
    p.add_argument("--percentage", "-p", type=float, default=None, help="Percentage of lines to sample")
    p.add_argument("--pattern", default=r".*\.txt$", help="Regex selecting corpus files")
    p.add_argument("--seed", type=int, default=None, help="Random seed for reproducible samples")
    p.set_defaults(func=cmd_sample)

    p = sub.add_parser("evaluate", help="Evaluate a trigram predictor on corpus files")
    p.add_argument("input_dir", type=Path, nargs="?", default=None)
    p.add_argument("--predictor", type=Path, default=None, help="Trigram table JSON")
    p.add_argument("--pattern", default=None, help="Regex selecting corpus files")
    p.add_argument("--language", default=None, help="Language profile to keep (default: english)")
    p.add_argument("--blacklist", type=Path, default=None, help="File of tokens to drop")
    p.add_argument("--chunk-size", type=int, default=None, help="Lines per chunk (default: 2500)")
    p.add_argument("--top-k", type=int, default=None, help="Continuations per prefix (default: 3)")
    p.add_argument("--workers", type=int, default=None, help="Processes used to tokenize each chunk")
    p.add_argument("--resume", action="store_true", help="Continue from existing checkpoints")
    p.add_argument(
        "--append-incorrect",
        action="store_true",
        help="Keep incorrect predictions in an append-only log next to each checkpoint",
    )
    p.add_argument("--summary", type=Path, default=None, help="Write an aggregate JSON summary here")
    p.set_defaults(func=cmd_evaluate)

    return parser


def parse_args(argv: Optional[list[str]] = None):
    return build_parser().parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_OK

    set_verbosity(args.verbose, args.quiet)

    try:
        cfg = _load_cfg(args.config)
    except (OSError, ValueError) as e:
        logger.error(f"Could not load project config: {e}")
        return EXIT_CONFIG_ERROR

    try:
        return args.func(args, cfg)
    except (ValueError, KeyError) as e:
        logger.error(f"{args.command} failed: {e}")
        return EXIT_CONFIG_ERROR
    except OSError as e:
        logger.error(f"{args.command} failed: {e}")
        return EXIT_PROCESSING_ERROR


if __name__ == "__main__":
    sys.exit(main())
