"""Shared test fixtures for topic-classifier tests."""

from __future__ import annotations

from pathlib import Path

import pytest


def format_record(sentence_id: int, topics: list[str], tokens: list[str], tag: str = "s") -> str:
    """Render one header/body pair, with the junk character the format expects."""
    header = "\t".join([tag, str(sentence_id)] + topics)
    if topics:
        header += " "
    return header + "\n" + " ".join(tokens) + "\n"


def write_corpus(path: Path, records: list[tuple[int, list[str], list[str]]]) -> Path:
    """Write ``(sentence_id, topics, tokens)`` records as a corpus file."""
    text = "\n".join(format_record(*record) for record in records)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def make_corpus(tmp_path: Path):
    """Factory writing records to ``tmp_path / name``."""
    def _make(name: str, records: list[tuple[int, list[str], list[str]]]) -> Path:
        return write_corpus(tmp_path / name, records)
    return _make


@pytest.fixture
def finance_grocery_records() -> list[tuple[int, list[str], list[str]]]:
    """Two-sentence training set sharing the token ``buy``."""
    return [
        (1, ["finance"], ["buy", "stock"]),
        (2, ["grocery"], ["buy", "milk"]),
    ]


@pytest.fixture
def train_file(tmp_path: Path, finance_grocery_records) -> Path:
    return write_corpus(tmp_path / "train.txt", finance_grocery_records)


@pytest.fixture
def test_file(tmp_path: Path) -> Path:
    """Held-out set: one tied sentence and one clear grocery sentence."""
    return write_corpus(tmp_path / "test.txt", [
        (10, ["grocery"], ["buy"]),
        (11, ["grocery"], ["milk"]),
    ])


@pytest.fixture
def news_records() -> list[tuple[int, list[str], list[str]]]:
    """A slightly larger multi-label corpus."""
    return [
        (1, ["finance"], ["shares", "rose", "on", "the", "market"]),
        (2, ["finance", "politics"], ["the", "minister", "cut", "taxes", "on", "shares"]),
        (3, ["politics"], ["the", "minister", "won", "the", "vote"]),
        (4, ["sports"], ["the", "team", "won", "the", "match"]),
        (5, ["sports"], ["a", "late", "goal", "won", "the", "match"]),
        (6, ["finance"], ["market", "shares", "fell"]),
    ]


@pytest.fixture
def news_file(tmp_path: Path, news_records) -> Path:
    return write_corpus(tmp_path / "news.txt", news_records)
