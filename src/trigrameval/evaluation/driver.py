"""
Predictor evaluation over whole corpus files.

Per file, chunk by chunk and strictly in sequence:

    read chunk -> normalize -> language filter -> extract trigrams
               -> score against predictor -> accumulate -> checkpoint

Chunk k+1 is not read until chunk k has been checkpointed. A chunk that the
language filter empties ends the file's evaluation even if lines remain.
"""

from __future__ import annotations

import json
from concurrent.futures import ProcessPoolExecutor
from contextlib import ExitStack
from dataclasses import dataclass, field
from pathlib import Path
from typing import AbstractSet, Dict, Optional

from trigrameval.data.line_source import ChunkedLineSource
from trigrameval.evaluation.accumulator import EvaluationAccumulator
from trigrameval.evaluation.language import (
    FixedLanguageDetector,
    LanguageDetector,
    filter_language,
)
from trigrameval.evaluation.predictor import Predictor
from trigrameval.evaluation.scorer import score_trigrams
from trigrameval.evaluation.trigrams import extract_trigrams, normalize_line
from trigrameval.utils.checkpoint import EvaluationCheckpointer
from trigrameval.utils.logger import get_logger
from trigrameval.utils.path_util import file_prefix, list_text_files

logger = get_logger(__name__)

SEPARATOR = "-" * 57


@dataclass
class PredictorEvalParams:
    """
    Everything the evaluator needs besides the file to read.

    Attributes:
        text_file_directory: directory holding the corpus files
        num_lines: {file_name: total_line_count} (progress reporting)
        blacklist: tokens removed before trigrams are formed
        predictor: object with known_prefixes() and predict(prefix, k)
        chunk_size: lines read per chunk
        top_k: continuations requested per prefix
    """

    text_file_directory: Path
    num_lines: Dict[str, int]
    predictor: Predictor
    blacklist: AbstractSet[str] = field(default_factory=frozenset)
    chunk_size: int = 2500
    top_k: int = 3


def evaluate_text_file(
    params: PredictorEvalParams,
    text_file: str,
    language: str = "english",
    detector: Optional[LanguageDetector] = None,
    workers: int = 1,
    checkpointer: Optional[EvaluationCheckpointer] = None,
    resume: bool = False,
) -> EvaluationAccumulator:
    """
    Evaluate the predictor on one corpus file.

    Args:
        params: shared evaluation parameters
        text_file: file name inside params.text_file_directory
        language: keep lines whose detected profile starts with this name
        detector: language detector (all lines pass when omitted)
        workers: processes used to tokenize each chunk
        checkpointer: where snapshots go (<prefix>Eval.json by default)
        resume: continue from the existing checkpoint instead of starting over

    Returns:
        The final accumulator, identical to the last checkpoint written.
    """
    detector = detector or FixedLanguageDetector(language)
    checkpointer = checkpointer or EvaluationCheckpointer.for_text_file(
        params.text_file_directory, text_file
    )
    input_path = params.text_file_directory / text_file
    total_num_lines = params.num_lines.get(text_file)

    accumulator = EvaluationAccumulator(chunk_size=params.chunk_size)
    if resume:
        previous = checkpointer.load()
        if previous is not None:
            _check_chunk_size(previous, params.chunk_size, checkpointer)
            accumulator = previous
            accumulator.chunk_size = params.chunk_size
            if accumulator.completed:
                logger.info(f"{text_file} already evaluated; using checkpoint")
                return accumulator
            logger.info(
                f"Resuming {text_file} after {accumulator.chunks_processed} chunks "
                f"({accumulator.lines_read} lines)"
            )

    logger.info(SEPARATOR)
    logger.info(f"Analyzing {text_file}")

    with ExitStack() as stack:
        source = stack.enter_context(ChunkedLineSource(input_path))
        # one pool per file, reused by every chunk
        executor = (
            stack.enter_context(ProcessPoolExecutor(max_workers=workers))
            if workers > 1 else None
        )

        if accumulator.lines_read:
            source.skip(accumulator.lines_read)

        for chunk in source.iter_batches(params.chunk_size):
            logger.info(SEPARATOR)
            logger.info(f"Lines read: {source.lines_read} (Out of {total_num_lines})")

            normalized = [normalize_line(line) for line in chunk]
            filtered = filter_language(normalized, detector, language)

            if not filtered:
                logger.info(f"No {language} lines left in chunk; stopping {text_file}")
                break

            trigram_counts = extract_trigrams(filtered, params.blacklist, workers, executor)
            chunk_eval = score_trigrams(trigram_counts, params.predictor, params.top_k)

            accumulator.add_chunk(chunk_eval, source.lines_read)
            checkpointer.save(accumulator)

            logger.info(
                f"Trigrams: {accumulator.trigram_count} | "
                f"common: {accumulator.common_trigram_count} | "
                f"correct: {accumulator.num_correct_predictions} "
                f"({100.0 * accumulator.accuracy:.2f}%)"
            )

    accumulator.completed = True
    checkpointer.save(accumulator)
    return accumulator


def _check_chunk_size(
    previous: EvaluationAccumulator, chunk_size: int, checkpointer: EvaluationCheckpointer
) -> None:
    """
    Refuse to resume with a different chunk size: distinct trigrams are
    counted per chunk, so the totals would not match a single run.
    """
    if previous.chunk_size is None:
        logger.warning(f"{checkpointer.path} does not record a chunk size; assuming {chunk_size}")
    elif previous.chunk_size != chunk_size:
        raise ValueError(
            f"{checkpointer.path} was written with chunk_size={previous.chunk_size}, "
            f"not {chunk_size}; rerun without --resume or use the same chunk size"
        )


def evaluate_text_files(
    params: PredictorEvalParams,
    text_file_pattern: str,
    language: str = "english",
    detector: Optional[LanguageDetector] = None,
    workers: int = 1,
    append_incorrect: bool = False,
    resume: bool = False,
) -> Dict[str, EvaluationAccumulator]:
    """
    Evaluate the predictor on every file of the directory matching the pattern.

    Returns {file_prefix: accumulator}, file_prefix being the name without .txt.
    """
    predictor_eval: Dict[str, EvaluationAccumulator] = {}

    for path in list_text_files(params.text_file_directory, text_file_pattern):
        checkpointer = EvaluationCheckpointer.for_text_file(
            params.text_file_directory, path.name, append_incorrect=append_incorrect
        )
        predictor_eval[file_prefix(path)] = evaluate_text_file(
            params,
            path.name,
            language=language,
            detector=detector,
            workers=workers,
            checkpointer=checkpointer,
            resume=resume,
        )

    return predictor_eval


def summarize(results: Dict[str, EvaluationAccumulator]) -> dict:
    """Per-file and overall totals (incorrect trigram lists are left out)."""
    files = {}
    totals = {"trigram_count": 0, "common_trigram_count": 0, "num_correct_predictions": 0}

    for name, acc in results.items():
        files[name] = {
            "trigram_count": acc.trigram_count,
            "common_trigram_count": acc.common_trigram_count,
            "num_correct_predictions": acc.num_correct_predictions,
            "num_incorrect_predictions": len(acc.incorrect_predictions),
            "accuracy": acc.accuracy,
            "coverage": acc.coverage,
            "lines_read": acc.lines_read,
        }
        for key in totals:
            totals[key] += getattr(acc, key)

    common = totals["common_trigram_count"]
    totals["accuracy"] = totals["num_correct_predictions"] / common if common else 0.0
    return {"files": files, "total": totals}


def write_evaluation_summary(results: Dict[str, EvaluationAccumulator], path: Path) -> Path:
    """Write the per-directory aggregate manifest once, at the end of a run."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(summarize(results), f, indent=2, sort_keys=True)
    logger.info(f"Evaluation summary written to {path}")
    return path
