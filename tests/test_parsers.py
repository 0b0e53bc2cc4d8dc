"""Tests for the corpus parser."""

from __future__ import annotations

from pathlib import Path

import pytest

from topic_classifier.models import (
    ClassifierConfig,
    CorpusFormatError,
    CorpusLoadError,
    Document,
)
from topic_classifier.parsers import (
    CorpusParser,
    ParsedCorpus,
    load_corpus,
    split_fields,
    strip_trailing_character,
)


# ---------------------------------------------------------------------------
# Field splitting helpers
# ---------------------------------------------------------------------------


class TestSplitFields:
    def test_drops_trailing_empty_fields(self) -> None:
        assert split_fields("a\tb\t\t", "\t") == ["a", "b"]

    def test_keeps_interior_and_leading_empty_fields(self) -> None:
        assert split_fields(" a  b", " ") == ["", "a", "", "b"]

    def test_only_delimiters(self) -> None:
        assert split_fields("   ", " ") == []

    def test_strip_trailing_character(self) -> None:
        assert strip_trailing_character("finance ") == "finance"
        assert strip_trailing_character("financeX") == "finance"
        assert strip_trailing_character("x") == ""


# ---------------------------------------------------------------------------
# CorpusParser
# ---------------------------------------------------------------------------


class TestCorpusParser:
    """Tests for parsing well-formed corpus files."""

    def test_parses_documents_in_order(self, train_file: Path) -> None:
        corpus = CorpusParser().parse(train_file)
        assert isinstance(corpus, ParsedCorpus)
        assert corpus.documents == [
            Document(tokens=("buy", "stock"), topics=("finance",), sentence_id=1),
            Document(tokens=("buy", "milk"), topics=("grocery",), sentence_id=2),
        ]
        assert corpus.document_count == 2
        assert corpus.source == str(train_file)

    def test_topic_counts(self, news_file: Path) -> None:
        corpus = load_corpus(news_file)
        assert corpus.topic_counts == {"finance": 3, "politics": 2, "sports": 2}
        # Multi-label documents count once per label, not once per document
        assert corpus.total_topic_occurrences == 7
        assert corpus.document_count == 6

    def test_blank_lines_do_not_break_pairing(self, tmp_path: Path) -> None:
        path = tmp_path / "blank.txt"
        path.write_text(
            "\n\ns\t7\tsports \n\n\nthe team won\n\n\ns\t8\tfinance \nshares fell\n\n",
            encoding="utf-8",
        )
        corpus = load_corpus(path)
        assert [d.sentence_id for d in corpus.documents] == [7, 8]
        assert corpus.documents[0].tokens == ("the", "team", "won")
        assert corpus.documents[1].topics == ("finance",)

    def test_only_last_topic_is_stripped(self, tmp_path: Path) -> None:
        path = tmp_path / "multi.txt"
        path.write_text("s\t3\tfinance\tpoliticsX\ntax cut\n", encoding="utf-8")
        doc = load_corpus(path).documents[0]
        assert doc.topics == ("finance", "politics")

    def test_strip_can_be_disabled(self, tmp_path: Path) -> None:
        path = tmp_path / "nostrip.txt"
        path.write_text("s\t3\tfinance\tpolitics\ntax cut\n", encoding="utf-8")
        config = ClassifierConfig(strip_trailing_character=False)
        doc = CorpusParser(config).parse(path).documents[0]
        assert doc.topics == ("finance", "politics")

    def test_crlf_line_endings(self, tmp_path: Path) -> None:
        path = tmp_path / "crlf.txt"
        path.write_bytes(b"s\t1\tfinance \r\nbuy stock\r\n")
        doc = load_corpus(path).documents[0]
        assert doc.topics == ("finance",)
        assert doc.tokens == ("buy", "stock")

    def test_duplicate_topics_collapse(self, tmp_path: Path) -> None:
        path = tmp_path / "dup.txt"
        path.write_text("s\t1\tfinance\tfinance \nbuy\n", encoding="utf-8")
        corpus = load_corpus(path)
        assert corpus.documents[0].topics == ("finance",)
        assert corpus.topic_counts == {"finance": 1}

    def test_header_without_topics(self, tmp_path: Path) -> None:
        path = tmp_path / "none.txt"
        path.write_text("s\t4\nsome words\n", encoding="utf-8")
        corpus = load_corpus(path)
        assert corpus.documents[0].topics == ()
        assert not corpus.topic_counts

    def test_repeated_tokens_preserved(self, tmp_path: Path) -> None:
        path = tmp_path / "rep.txt"
        path.write_text("s\t1\tx \na a  b\n", encoding="utf-8")
        assert load_corpus(path).documents[0].tokens == ("a", "a", "", "b")

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.txt"
        path.write_text("", encoding="utf-8")
        corpus = load_corpus(path)
        assert corpus.documents == []
        assert corpus.total_topic_occurrences == 0

    def test_parse_body(self) -> None:
        assert CorpusParser.parse_body("buy cheap stock") == ("buy", "cheap", "stock")


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class TestCorpusParserErrors:
    """Malformed or missing input surfaces typed errors."""

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(CorpusLoadError, match="not found"):
            load_corpus(tmp_path / "nope.txt")

    def test_load_error_is_os_error(self, tmp_path: Path) -> None:
        with pytest.raises(OSError):
            load_corpus(tmp_path / "nope.txt")

    def test_directory_is_load_error(self, tmp_path: Path) -> None:
        with pytest.raises(CorpusLoadError):
            load_corpus(tmp_path)

    def test_undecodable_file(self, tmp_path: Path) -> None:
        path = tmp_path / "latin.txt"
        path.write_bytes(b"s\t1\tcaf\xe9 \nbuy\n")
        with pytest.raises(CorpusLoadError, match="utf-8"):
            load_corpus(path)

    def test_header_with_single_field(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.txt"
        path.write_text("\nonlyonefield\nbuy stock\n", encoding="utf-8")
        with pytest.raises(CorpusFormatError) as exc_info:
            load_corpus(path)
        assert exc_info.value.line_number == 2
        assert "at least 2" in str(exc_info.value)

    def test_format_error_is_value_error(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.txt"
        path.write_text("onlyonefield\nbuy stock\n", encoding="utf-8")
        with pytest.raises(ValueError):
            load_corpus(path)

    def test_non_integer_sentence_id(self, tmp_path: Path) -> None:
        path = tmp_path / "bad_id.txt"
        path.write_text("s\tabc\tfinance \nbuy\n", encoding="utf-8")
        with pytest.raises(CorpusFormatError, match="not an integer"):
            load_corpus(path)

    def test_header_without_body(self, tmp_path: Path) -> None:
        path = tmp_path / "orphan.txt"
        path.write_text("s\t1\tfinance \nbuy\n\ns\t2\tgrocery \n\n", encoding="utf-8")
        with pytest.raises(CorpusFormatError, match="no following body") as exc_info:
            load_corpus(path)
        assert exc_info.value.line_number == 4
