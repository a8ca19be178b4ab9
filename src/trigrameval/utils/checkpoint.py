## Checkpointing Utilities for trigrameval
# trigrameval/src/trigrameval/utils/checkpoint.py

from pathlib import Path
import json
import os
from typing import Optional

from trigrameval.evaluation.accumulator import EvaluationAccumulator
from trigrameval.utils.logger import get_logger
from trigrameval.utils.path_util import get_checkpoint_path

logger = get_logger(__name__)

SNAPSHOT_VERSION = 1


def _atomic_write_json(path: Path, data: dict) -> None:
    """Write JSON next to path, then rename over it; readers never see a partial file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(path.name + ".tmp")
    with tmp_path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, sort_keys=True)
        f.flush()
        os.fsync(f.fileno())
    os.replace(tmp_path, path)


class EvaluationCheckpointer:
    """
    Persist an EvaluationAccumulator after every chunk.

    Default mode overwrites one JSON snapshot holding every field,
    incorrect_predictions included.

    With append_incorrect=True the incorrect predictions go to an
    append-only sidecar log (<stem>.incorrect.log, one trigram per line)
    and the snapshot records how many log entries it covers. Each save then
    writes only the new entries instead of the whole growing list. Entries
    past the recorded count (a crash between log append and snapshot write)
    are ignored on load.
    """

    def __init__(self, path: Path, append_incorrect: bool = False):
        self.path = Path(path)
        self.append_incorrect = append_incorrect
        self.log_path = self.path.with_name(self.path.stem + ".incorrect.log")
        self._persisted: Optional[int] = None  # log entries written by this instance

    @classmethod
    def for_text_file(cls, directory: Path, text_file: str, append_incorrect: bool = False):
        return cls(get_checkpoint_path(directory, text_file), append_incorrect)

    def exists(self) -> bool:
        return self.path.exists()

    def save(self, accumulator: EvaluationAccumulator) -> Path:
        data = accumulator.to_dict()
        data["snapshot_version"] = SNAPSHOT_VERSION

        if self.append_incorrect:
            incorrect = data.pop("incorrect_predictions")
            self._append_log(incorrect)
            data["incorrect_count"] = len(incorrect)
            data["incorrect_log"] = self.log_path.name

        _atomic_write_json(self.path, data)
        return self.path

    def _append_log(self, incorrect: list) -> None:
        if self._persisted is None or self._persisted > len(incorrect):
            # first save of this run: rewrite so the log matches the accumulator
            with self.log_path.open("w", encoding="utf-8") as f:
                f.writelines(f"{trigram}\n" for trigram in incorrect)
        else:
            with self.log_path.open("a", encoding="utf-8") as f:
                f.writelines(f"{trigram}\n" for trigram in incorrect[self._persisted:])
        self._persisted = len(incorrect)

    def load(self) -> Optional[EvaluationAccumulator]:
        """Return the last persisted accumulator, or None when there is none."""
        if not self.path.exists():
            return None

        with self.path.open("r", encoding="utf-8") as f:
            data = json.load(f)

        if "incorrect_count" in data:
            count = int(data["incorrect_count"])
            log_path = self.path.with_name(data.get("incorrect_log", self.log_path.name))
            incorrect = []
            if count:
                if not log_path.exists():
                    raise FileNotFoundError(f"Incorrect-prediction log not found: {log_path}")
                with log_path.open("r", encoding="utf-8") as f:
                    for line in f:
                        if len(incorrect) == count:
                            break
                        incorrect.append(line.rstrip("\n"))
                if len(incorrect) < count:
                    raise ValueError(
                        f"{log_path} holds {len(incorrect)} entries, snapshot expects {count}"
                    )
            data["incorrect_predictions"] = incorrect

        logger.debug(f"Loaded checkpoint {self.path}")
        return EvaluationAccumulator.from_dict(data)

    def clear(self) -> None:
        for p in (self.path, self.log_path):
            if p.exists():
                p.unlink()
        self._persisted = None


def save_evaluation(accumulator: EvaluationAccumulator, path: Path) -> Path:
    """Write a one-off full snapshot of accumulator to path."""
    return EvaluationCheckpointer(path).save(accumulator)


def load_evaluation(path: Path) -> EvaluationAccumulator:
    """Load a snapshot written by save_evaluation or EvaluationCheckpointer."""
    accumulator = EvaluationCheckpointer(path).load()
    if accumulator is None:
        raise FileNotFoundError(f"Checkpoint not found: {path}")
    return accumulator
