## trigrameval/test/evaluation/test_trigrams.py
from concurrent.futures import ThreadPoolExecutor

import pytest

from trigrameval.evaluation.trigrams import (
    extract_trigrams,
    line_trigrams,
    load_blacklist,
    normalize_line,
    tokenize,
)


def test_normalize_collapses_non_word_runs():
    assert normalize_line("Hello,   world!! It's--fine.") == "Hello world It s fine "


def test_tokenize_lowercases_and_drops_blacklist():
    assert tokenize("The Cat SAT", frozenset({"cat"})) == ["the", "sat"]


def test_line_trigrams_in_order():
    assert line_trigrams("a b c d") == ["a b c", "b c d"]


@pytest.mark.parametrize("line", ["", "one", "one two"])
def test_short_lines_have_no_trigrams(line):
    assert line_trigrams(line) == []


def test_blacklist_applied_before_windows():
    # with "damn" removed, "oh" and "no" become adjacent
    trigrams = line_trigrams("oh damn no way", frozenset({"damn"}))
    assert trigrams == ["oh no way"]
    assert all("damn" not in t.split() for t in trigrams)


def test_extract_counts_and_first_seen_order():
    counts = extract_trigrams(["x y z x y z", "q r s", "x y z"])
    assert counts["x y z"] == 3
    assert counts["y z x"] == 1
    assert list(counts) == ["x y z", "y z x", "z x y", "q r s"]


def test_extract_accepts_any_iterable_blacklist():
    counts = extract_trigrams(["a b c d"], blacklist=["b"])
    assert dict(counts) == {"a c d": 1}


def test_parallel_matches_serial():
    lines = [f"w{i} w{i + 1} w{i + 2} w{i % 7} w{i % 5}" for i in range(200)]
    serial = extract_trigrams(lines, blacklist={"w3"})
    parallel = extract_trigrams(lines, blacklist={"w3"}, workers=2)

    assert parallel == serial
    assert list(parallel) == list(serial)


def test_load_blacklist(tmp_path):
    path = tmp_path / "blacklist.txt"
    path.write_text("# swear words\nDarn\n\n  heck  \n", encoding="utf-8")
    assert load_blacklist(path) == frozenset({"darn", "heck"})


def test_load_blacklist_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_blacklist(tmp_path / "missing.txt")


def test_shared_executor_matches_serial():
    lines = [f"a{i} b{i} c{i} d{i % 3}" for i in range(50)]
    with ThreadPoolExecutor(max_workers=2) as executor:
        first = extract_trigrams(lines[:25], workers=2, executor=executor)
        second = extract_trigrams(lines[25:], workers=2, executor=executor)

    assert first == extract_trigrams(lines[:25])
    assert second == extract_trigrams(lines[25:])
