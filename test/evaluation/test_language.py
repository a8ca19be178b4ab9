## trigrameval/test/evaluation/test_language.py
import pytest

from trigrameval.evaluation.language import (
    DEFAULT_PROFILES,
    FixedLanguageDetector,
    LanguageDetector,
    filter_language,
    language_pattern,
)


class MappingDetector:
    def __init__(self, labels):
        self.labels = labels

    def classify(self, lines):
        return [self.labels.get(line) for line in lines]


def test_fixed_detector_passes_everything():
    lines = ["one", "two", "three"]
    assert filter_language(lines, FixedLanguageDetector(), "english") == lines


def test_detectors_satisfy_protocol():
    assert isinstance(FixedLanguageDetector(), LanguageDetector)
    assert isinstance(MappingDetector({}), LanguageDetector)


def test_filter_keeps_matching_lines_in_order():
    detector = MappingDetector({"a": "english", "b": "french", "c": "english", "d": None})
    assert filter_language(["a", "b", "c", "d"], detector, "english") == ["a", "c"]


def test_encoding_variants_match_their_language():
    detector = MappingDetector({"x": "russian-koi8_r", "y": "russian-windows1251", "z": "english"})
    assert filter_language(["x", "y", "z"], detector, "russian") == ["x", "y"]


@pytest.mark.parametrize("label", ["english", "russian-iso8859_5"])
def test_default_profiles_match_themselves(label):
    assert label in DEFAULT_PROFILES
    assert language_pattern(label).match(label)


def test_pattern_is_anchored():
    assert not language_pattern("english").match("middle-english")
    assert not language_pattern("english").match("English")


def test_empty_chunk():
    assert filter_language([], FixedLanguageDetector(), "english") == []


def test_label_count_mismatch():
    class Broken:
        def classify(self, lines):
            return ["english"]

    with pytest.raises(ValueError):
        filter_language(["a", "b"], Broken(), "english")
