## trigrameval/test/test_cli.py
import json

import pytest

from trigrameval.cli.main_cli import (
    EXIT_CONFIG_ERROR,
    EXIT_OK,
    EXIT_PROCESSING_ERROR,
    main,
    parse_args,
)


@pytest.fixture
def data_dir(tmp_path):
    d = tmp_path / "en_US"
    d.mkdir()
    (d / "en_US.blogs.txt").write_text(
        "".join(f"the cat sat on mat {i}\n" for i in range(300)), encoding="utf-8"
    )
    return d


@pytest.fixture
def predictor_file(tmp_path):
    path = tmp_path / "table.json"
    table = {"the cat": {"sat": 1.0}, "cat sat": {"on": 1.0}, "sat on": {"rug": 1.0}}
    path.write_text(json.dumps({"model_type": "trigram_table", "table": table}), encoding="utf-8")
    return path


def test_parse_args_evaluate():
    args = parse_args(["evaluate", "corpus", "--top-k", "5", "--resume"])
    assert args.command == "evaluate"
    assert args.top_k == 5
    assert args.resume
    assert args.chunk_size is None


def test_no_command_prints_help(capsys):
    assert main([]) == EXIT_OK
    assert "trigrameval" in capsys.readouterr().out


def test_count_split_sample(data_dir, tmp_path):
    assert main(["count-lines", str(data_dir)]) == EXIT_OK
    counts = json.loads((data_dir / "en_USNumLines.json").read_text(encoding="utf-8"))
    assert counts == {"en_US.blogs.txt": 300}

    split_dir = tmp_path / "split"
    assert main(["split", str(data_dir), str(split_dir), "--seed", "1"]) == EXIT_OK
    total = sum(
        len((split_dir / f"en_US.blogs{suffix}").read_text(encoding="utf-8").splitlines())
        for suffix in ("_TrainingData.txt", "_TestData.txt", "_ValidationData.txt")
    )
    assert total == 300

    sample_dir = tmp_path / "sample"
    assert main(["sample", str(data_dir), str(sample_dir), "-p", "50", "--seed", "1"]) == EXIT_OK
    assert (sample_dir / "en_US.blogsSample50p00.txt").exists()
    assert (sample_dir / "en_USSample50p00Sampling.json").exists()


def test_evaluate_with_summary(data_dir, predictor_file, tmp_path):
    assert main(["count-lines", str(data_dir)]) == EXIT_OK

    summary = tmp_path / "summary.json"
    code = main([
        "evaluate", str(data_dir),
        "--predictor", str(predictor_file),
        "--chunk-size", "100",
        "--summary", str(summary),
    ])
    assert code == EXIT_OK

    result = json.loads(summary.read_text(encoding="utf-8"))["files"]["en_US.blogs"]
    # per chunk: "the cat sat" and "cat sat on" correct, "sat on mat" wrong
    assert result["num_correct_predictions"] == 6
    assert result["num_incorrect_predictions"] == 3
    assert (data_dir / "en_US.blogsEval.json").exists()


def test_evaluate_without_predictor_is_config_error(data_dir):
    main(["count-lines", str(data_dir)])
    assert main(["evaluate", str(data_dir)]) == EXIT_CONFIG_ERROR


def test_missing_line_counts_is_processing_error(data_dir, tmp_path):
    assert main(["split", str(data_dir), str(tmp_path / "out")]) == EXIT_PROCESSING_ERROR


def test_missing_input_dir(tmp_path):
    assert main(["count-lines", str(tmp_path / "nope")]) == EXIT_PROCESSING_ERROR


def test_bad_config(tmp_path, data_dir):
    cfg = tmp_path / "project_config.json"
    cfg.write_text(json.dumps({"project_metadata": {}, "sampling_config": {"percentage": 500}}), encoding="utf-8")
    assert main(["--config", str(cfg), "count-lines", str(data_dir)]) == EXIT_CONFIG_ERROR


def test_config_supplies_data_dir(tmp_path, data_dir, monkeypatch):
    monkeypatch.setenv("GLOBAL_DATASETS_DIR", str(tmp_path))
    cfg = tmp_path / "project_config.json"
    cfg.write_text(json.dumps({"project_metadata": {"data_path": "en_US"}}), encoding="utf-8")

    assert main(["--config", str(cfg), "count-lines"]) == EXIT_OK
    assert (data_dir / "en_USNumLines.json").exists()


def test_split_then_evaluate_split_dir(data_dir, predictor_file, tmp_path):
    assert main(["count-lines", str(data_dir)]) == EXIT_OK
    split_dir = tmp_path / "split"
    assert main(["split", str(data_dir), str(split_dir), "--seed", "3"]) == EXIT_OK

    counts = json.loads((split_dir / "splitNumLines.json").read_text(encoding="utf-8"))
    assert sorted(counts) == [
        "en_US.blogs_TestData.txt",
        "en_US.blogs_TrainingData.txt",
        "en_US.blogs_ValidationData.txt",
    ]
    assert sum(counts.values()) == 300

    code = main([
        "evaluate", str(split_dir),
        "--pattern", r".*_TestData\.txt$",
        "--predictor", str(predictor_file),
    ])
    assert code == EXIT_OK
    assert (split_dir / "en_US.blogs_TestDataEval.json").exists()


def test_evaluate_without_line_counts(data_dir, predictor_file):
    assert main(["evaluate", str(data_dir), "--predictor", str(predictor_file)]) == EXIT_OK
