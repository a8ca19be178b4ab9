## trigrameval/scripts/evaluation/sanity_trigram_predictor.py
## Sanity check for a saved trigram table.
## Loads the table and prints its top continuations for a few prefixes
## that should exist in the training data.

import os
from pathlib import Path

from trigrameval.evaluation.predictor import TrigramTablePredictor
from trigrameval.evaluation.trigrams import line_trigrams, normalize_line

# ------------------------------------------------
# 1) Load table
# ------------------------------------------------
global_path = os.environ["GLOBAL_MODELS_DIR"]
table_path = Path(global_path) / "ngram/en_US/trigram_table.json"

predictor = TrigramTablePredictor.load(table_path)
print("Known prefixes:", len(predictor.known_prefixes()))

# ------------------------------------------------
# 2) Pick text that EXISTS in training data
# ------------------------------------------------
TEXT = "Thanks for the follow! I can't wait to see you at the end of the week."

for trigram in line_trigrams(normalize_line(TEXT)):
    w1, w2, w3 = trigram.split(" ")
    prediction = predictor.predict([w1, w2], 3)
    mark = "OK " if w3 in prediction else "-- "
    print(mark, f"{w1} {w2} -> {w3!r:12}", list(prediction))
