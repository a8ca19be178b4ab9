from __future__ import annotations

from typing import List, Mapping

from trigrameval.evaluation.accumulator import ChunkEvaluation
from trigrameval.evaluation.predictor import Predictor
from trigrameval.utils.logger import get_logger

logger = get_logger(__name__)

PROGRESS_EVERY = 1000


def split_trigram(trigram: str) -> List[str]:
    words = trigram.split(" ")
    if len(words) != 3:
        raise ValueError(f"Not a trigram: {trigram!r}")
    return words


def common_trigrams(trigram_counts: Mapping[str, int], predictor: Predictor) -> List[str]:
    """
    Trigrams whose "w1 w2" prefix is a known state of the predictor, in
    the order they were first seen.
    """
    known = predictor.known_prefixes()
    return [
        trigram for trigram in trigram_counts
        if trigram.rsplit(" ", 1)[0] in known
    ]


def score_trigrams(
    trigram_counts: Mapping[str, int],
    predictor: Predictor,
    top_k: int = 3,
) -> ChunkEvaluation:
    """
    Score each distinct trigram of a chunk against the predictor.

    A common trigram is correct when its third word is among the predictor's
    top_k continuations of its prefix (rank inside the top_k is irrelevant),
    and is recorded in incorrect_predictions otherwise. Trigrams with an
    unknown prefix only count toward trigram_count.
    """
    chunk_eval = ChunkEvaluation(trigram_count=len(trigram_counts))

    trigrams = common_trigrams(trigram_counts, predictor)
    chunk_eval.common_trigram_count = len(trigrams)

    for idx, trigram in enumerate(trigrams, start=1):
        if idx % PROGRESS_EVERY == 0:
            logger.debug(f"    Processing trigram #{idx} (out of {len(trigrams)})")

        w1, w2, w3 = split_trigram(trigram)
        prediction = predictor.predict([w1, w2], top_k)

        if w3 in prediction:
            chunk_eval.num_correct_predictions += 1
        else:
            chunk_eval.incorrect_predictions.append(trigram)

    return chunk_eval
