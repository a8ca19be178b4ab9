# src/trigrameval/__init__.py

__version__ = "0.1.0"

# Corpus preparation
from .data.line_source import ChunkedLineSource
from .data.classifier import (
    ClassificationResult,
    PartitionInvariantViolation,
    sample_lines,
    split_lines,
)
from .data.sample_sizer import SampleSizingParameters, compute_sample_sizing
from .data.split_corpus import split_corpus, split_corpus_files
from .data.sample_corpus import sample_text_file, apply_random_sampler

# Evaluation
from .evaluation.accumulator import EvaluationAccumulator
from .evaluation.predictor import Predictor, TrigramTablePredictor
from .evaluation.driver import (
    PredictorEvalParams,
    evaluate_text_file,
    evaluate_text_files,
)

# Utils
from .utils.checkpoint import EvaluationCheckpointer

__all__ = [
    # Corpus preparation
    "ChunkedLineSource",
    "ClassificationResult",
    "PartitionInvariantViolation",
    "sample_lines",
    "split_lines",
    "SampleSizingParameters",
    "compute_sample_sizing",
    "split_corpus",
    "split_corpus_files",
    "sample_text_file",
    "apply_random_sampler",

    # Evaluation
    "EvaluationAccumulator",
    "Predictor",
    "TrigramTablePredictor",
    "PredictorEvalParams",
    "evaluate_text_file",
    "evaluate_text_files",

    # Utils
    "EvaluationCheckpointer",
]
