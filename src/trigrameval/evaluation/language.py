from __future__ import annotations

import re
from typing import List, Protocol, Sequence, runtime_checkable

# Profiles a detector is restricted to when classifying corpus lines
DEFAULT_PROFILES = (
    "english",
    "french",
    "finnish",
    "russian-iso8859_5",
    "russian-koi8_r",
    "russian-windows1251",
)


@runtime_checkable
class LanguageDetector(Protocol):
    """Anything that labels each line with a language/encoding profile name."""

    def classify(self, lines: Sequence[str]) -> Sequence[str]:
        ...


class FixedLanguageDetector:
    """Labels every line with the same profile; lets all lines through a filter."""

    def __init__(self, label: str = "english"):
        self.label = label

    def classify(self, lines: Sequence[str]) -> List[str]:
        return [self.label] * len(lines)


def language_pattern(language: str) -> re.Pattern:
    """Match a profile label for language, allowing encoding-variant suffixes."""
    return re.compile(rf"^{re.escape(language)}[a-z0-9_\-]*$")


def filter_language(
    lines: Sequence[str],
    detector: LanguageDetector,
    language: str,
) -> List[str]:
    """Keep the lines whose detected label belongs to language, in order."""
    if not lines:
        return []

    labels = detector.classify(lines)
    if len(labels) != len(lines):
        raise ValueError(
            f"Language detector returned {len(labels)} labels for {len(lines)} lines"
        )

    pattern = language_pattern(language)
    return [
        line for line, label in zip(lines, labels)
        if label is not None and pattern.match(label)
    ]
