from __future__ import annotations

import heapq
import json
from pathlib import Path
from typing import Container, Dict, Mapping, Protocol, Sequence, runtime_checkable


@runtime_checkable
class Predictor(Protocol):
    """
    Next-word predictor as seen by the evaluator.

    known_prefixes() exposes the "w1 w2" prefixes the model has states for;
    predict(prefix, top_k) returns up to top_k {token: score} continuations.
    Any object with these two methods can be evaluated (n-gram table,
    neural model wrapper, cache-augmented model, ...).
    """

    def known_prefixes(self) -> Container[str]:
        ...

    def predict(self, prefix: Sequence[str], top_k: int) -> Mapping[str, float]:
        ...


class TrigramTablePredictor:
    """
    Read-only trigram Markov model backed by a lookup table:

        {"the cat": {"sat": 0.5, "ran": 0.3, "slept": 0.2}, ...}

    Scores are conditional probabilities (or counts); predict() returns the
    top_k highest scores, ties broken alphabetically so results are stable.
    """

    model_type = "trigram_table"

    def __init__(self, table: Mapping[str, Mapping[str, float]]):
        self.table: Dict[str, Dict[str, float]] = {
            prefix: dict(continuations) for prefix, continuations in table.items()
        }

    def known_prefixes(self) -> Container[str]:
        return self.table.keys()

    def predict(self, prefix: Sequence[str], top_k: int = 3) -> Dict[str, float]:
        continuations = self.table.get(" ".join(prefix))
        if not continuations:
            return {}
        best = heapq.nsmallest(
            top_k, continuations.items(), key=lambda item: (-item[1], item[0])
        )
        return dict(best)

    def to_dict(self) -> dict:
        return {"model_type": self.model_type, "table": self.table}

    @classmethod
    def from_dict(cls, data: dict) -> "TrigramTablePredictor":
        # accept either the wrapped form or a bare prefix table
        table = data.get("table", data) if data.get("model_type") else data
        return cls(table)

    @classmethod
    def load(cls, path: Path) -> "TrigramTablePredictor":
        if not path.exists():
            raise FileNotFoundError(f"Predictor table not found at: {path}")
        with path.open("r", encoding="utf-8") as f:
            return cls.from_dict(json.load(f))

    def save(self, path: Path) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)
        return path
