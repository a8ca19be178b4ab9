## trigrameval/scripts/data/sanity_split_proportions.py
"""
Manual sanity check for the train/test/validation classifier.
Run directly, NOT via pytest.
"""
import numpy as np

from trigrameval.data.classifier import split_percentages, validate_chunk_split

rng = np.random.default_rng(2015)

# ------------------------------------------------
# 1) Small chunks drift far from 60/20/20
# ------------------------------------------------
for n in (10, 100, 1000):
    result = validate_chunk_split(n, rng)
    print(f"n={n:>7}  sizes={result.sizes()}")

# ------------------------------------------------
# 2) Large chunks converge
# ------------------------------------------------
result = validate_chunk_split(1_000_000, rng)
pct = split_percentages(result)
print("----")
print("TRAIN      :", f"{pct['train']:.3f}%")
print("TEST       :", f"{pct['test']:.3f}%")
print("VALIDATION :", f"{pct['validation']:.3f}%")
