from __future__ import annotations

from dataclasses import dataclass, field, asdict
from typing import List, Optional


@dataclass
class ChunkEvaluation:
    """Prediction tallies for a single chunk."""

    trigram_count: int = 0
    common_trigram_count: int = 0
    num_correct_predictions: int = 0
    incorrect_predictions: List[str] = field(default_factory=list)


@dataclass
class EvaluationAccumulator:
    """
    Running prediction tallies for one corpus file.

    Owned by the task evaluating that file; grows additively one chunk at a
    time and is checkpointed as a whole after every chunk. lines_read and
    chunks_processed let an interrupted run pick up where the last
    checkpoint left off; completed marks a file whose evaluation ended
    normally (end of file or a chunk with no usable lines). chunk_size is
    recorded because per-chunk distinct counts depend on it.
    """

    trigram_count: int = 0
    common_trigram_count: int = 0
    num_correct_predictions: int = 0
    incorrect_predictions: List[str] = field(default_factory=list)
    lines_read: int = 0
    chunks_processed: int = 0
    completed: bool = False
    chunk_size: Optional[int] = None

    def add_chunk(self, chunk: ChunkEvaluation, lines_read: int) -> None:
        self.trigram_count += chunk.trigram_count
        self.common_trigram_count += chunk.common_trigram_count
        self.num_correct_predictions += chunk.num_correct_predictions
        self.incorrect_predictions.extend(chunk.incorrect_predictions)
        self.lines_read = lines_read
        self.chunks_processed += 1

    @property
    def accuracy(self) -> float:
        """Share of common trigrams whose third word was in the top-k."""
        if self.common_trigram_count == 0:
            return 0.0
        return self.num_correct_predictions / self.common_trigram_count

    @property
    def coverage(self) -> float:
        """Share of trigrams whose prefix the predictor knows."""
        if self.trigram_count == 0:
            return 0.0
        return self.common_trigram_count / self.trigram_count

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "EvaluationAccumulator":
        return cls(
            trigram_count=int(data.get("trigram_count", 0)),
            common_trigram_count=int(data.get("common_trigram_count", 0)),
            num_correct_predictions=int(data.get("num_correct_predictions", 0)),
            incorrect_predictions=list(data.get("incorrect_predictions", [])),
            lines_read=int(data.get("lines_read", 0)),
            chunks_processed=int(data.get("chunks_processed", 0)),
            completed=bool(data.get("completed", False)),
            chunk_size=data.get("chunk_size"),
        )
