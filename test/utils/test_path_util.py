## trigrameval/test/utils/test_path_util.py
import pytest

from trigrameval.utils.path_util import (
    file_prefix,
    get_data_dir,
    get_line_counts_path,
    get_split_paths,
    list_text_files,
)


def test_file_prefix():
    assert file_prefix("en_US.blogs.txt") == "en_US.blogs"
    assert file_prefix("notes.md") == "notes.md"


def test_list_text_files_sorted_and_filtered(tmp_path):
    for name in ("b.txt", "a.txt", "c.json"):
        (tmp_path / name).write_text("x\n", encoding="utf-8")
    (tmp_path / "sub.txt").mkdir()

    assert [p.name for p in list_text_files(tmp_path)] == ["a.txt", "b.txt"]
    assert [p.name for p in list_text_files(tmp_path, r"^b")] == ["b.txt"]


def test_list_text_files_missing_dir(tmp_path):
    with pytest.raises(FileNotFoundError):
        list_text_files(tmp_path / "nope")


def test_split_and_manifest_names(tmp_path):
    paths = get_split_paths(tmp_path / "en_US.news.txt", tmp_path)
    assert paths["validation"].name == "en_US.news_ValidationData.txt"
    assert get_line_counts_path(tmp_path / "final").name == "finalNumLines.json"


def test_data_dir_from_env(tmp_path, monkeypatch):
    monkeypatch.setenv("GLOBAL_DATASETS_DIR", str(tmp_path))
    cfg = {"project_metadata": {"data_path": "corpora/en_US"}}
    assert get_data_dir(cfg) == tmp_path / "corpora" / "en_US"
