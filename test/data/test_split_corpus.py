## trigrameval/test/data/test_split_corpus.py
from pathlib import Path

import numpy as np
import pytest

from trigrameval.data.line_counts import build_line_counts, count_lines
from trigrameval.data.split_corpus import split_corpus, split_corpus_files


def _write_corpus(path: Path, n: int) -> Path:
    path.write_text("".join(f"sentence number {i} of the corpus\n" for i in range(1, n + 1)), encoding="utf-8")
    return path


@pytest.fixture
def corpus(tmp_path):
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    return _write_corpus(data_dir / "en_US.blogs.txt", 1234)


def _read_lines(path: Path):
    return path.read_text(encoding="utf-8").splitlines()


def test_split_round_trip_reconstructs_input(corpus, tmp_path):
    out_dir = tmp_path / "split"
    stats = split_corpus(corpus, out_dir, {corpus.name: 1234}, seed=42)

    original = _read_lines(corpus)
    numbered = []
    for split, s in stats.items():
        lines = _read_lines(Path(s["path"]))
        assert len(lines) == s["lines"] == len(s["line_numbers"])
        numbered.extend(zip(s["line_numbers"], lines))

    numbered.sort()
    assert [n for n, _ in numbered] == list(range(1, 1235))
    assert [line for _, line in numbered] == original


def test_split_output_names(corpus, tmp_path):
    out_dir = tmp_path / "split"
    split_corpus(corpus, out_dir, {corpus.name: 1234}, seed=1)

    assert (out_dir / "en_US.blogs_TrainingData.txt").exists()
    assert (out_dir / "en_US.blogs_TestData.txt").exists()
    assert (out_dir / "en_US.blogs_ValidationData.txt").exists()


def test_split_preserves_order_within_partition(corpus, tmp_path):
    stats = split_corpus(corpus, tmp_path / "split", {corpus.name: 1234}, seed=3)
    for s in stats.values():
        assert s["line_numbers"] == sorted(s["line_numbers"])


def test_split_proportions_roughly_60_20_20(tmp_path):
    corpus = _write_corpus(tmp_path / "big.txt", 20_000)
    stats = split_corpus(corpus, tmp_path / "out", {corpus.name: 20_000}, rng=np.random.default_rng(5))

    assert stats["train"]["lines"] / 20_000 == pytest.approx(0.6, abs=0.03)
    assert stats["test"]["lines"] / 20_000 == pytest.approx(0.2, abs=0.03)
    assert stats["validation"]["lines"] / 20_000 == pytest.approx(0.2, abs=0.03)


def test_split_is_reproducible_with_seed(corpus, tmp_path):
    a = split_corpus(corpus, tmp_path / "a", {corpus.name: 1234}, seed=11)
    b = split_corpus(corpus, tmp_path / "b", {corpus.name: 1234}, seed=11)
    assert a["train"]["line_numbers"] == b["train"]["line_numbers"]


def test_missing_line_count(corpus, tmp_path):
    with pytest.raises(KeyError):
        split_corpus(corpus, tmp_path / "split", {}, seed=1)


def test_missing_corpus(tmp_path):
    with pytest.raises(FileNotFoundError):
        split_corpus(tmp_path / "nope.txt", tmp_path / "split", {"nope.txt": 10})


def test_split_corpus_files(tmp_path):
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    _write_corpus(data_dir / "a.txt", 300)
    _write_corpus(data_dir / "b.txt", 150)
    (data_dir / "notes.md").write_text("ignored\n", encoding="utf-8")

    results = split_corpus_files(data_dir, tmp_path / "out", build_line_counts(data_dir), seed=0)

    assert sorted(results) == ["a.txt", "b.txt"]
    assert sum(s["lines"] for s in results["a.txt"].values()) == 300
    assert sum(s["lines"] for s in results["b.txt"].values()) == 150


def test_carriage_returns_do_not_add_lines(tmp_path):
    corpus = tmp_path / "scraped.txt"
    raw = b"first line\rstill first\nsecond\r\nthird\na\rb\nc\r\n"
    corpus.write_bytes(raw)
    total = count_lines(corpus)
    assert total == 5

    stats = split_corpus(corpus, tmp_path / "split", {corpus.name: total}, seed=4)

    numbered = []
    for s in stats.values():
        lines = Path(s["path"]).read_bytes().split(b"\n")[:-1]
        assert len(lines) == s["lines"]
        numbered.extend(zip(s["line_numbers"], lines))

    numbered.sort()
    assert [n for n, _ in numbered] == list(range(1, total + 1))
    assert b"".join(line + b"\n" for _, line in numbered) == raw
