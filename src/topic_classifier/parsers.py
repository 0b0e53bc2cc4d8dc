"""Corpus parser for the two-line-per-sentence topic format.

Each sentence occupies two non-empty lines::

    <tag>\\t<sentence id>\\t<topic>\\t<topic>...
    token token token ...

Blank lines between (or inside) records are ignored and do not affect the
header/body pairing. The last header field ends with one junk character
that is stripped before the topic is used.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path

from .models import ClassifierConfig, CorpusFormatError, CorpusLoadError, Document

logger = logging.getLogger(__name__)

HEADER_DELIMITER = "\t"
TOKEN_DELIMITER = " "


@dataclass
class ParsedCorpus:
    """Structured output from corpus parsing.

    ``topic_counts`` counts every topic label occurrence across the
    documents of this corpus only.
    """

    source: str
    documents: list[Document] = field(default_factory=list)
    topic_counts: Counter = field(default_factory=Counter)

    @property
    def document_count(self) -> int:
        return len(self.documents)

    @property
    def total_topic_occurrences(self) -> int:
        return sum(self.topic_counts.values())


def split_fields(line: str, delimiter: str) -> list[str]:
    """Split on a single delimiter, discarding trailing empty fields.

    Leading and interior empty fields are kept, so ``"a  b"`` split on a
    space gives ``["a", "", "b"]``.
    """
    fields = line.split(delimiter)
    while fields and fields[-1] == "":
        fields.pop()
    return fields


def strip_trailing_character(value: str) -> str:
    """Drop the final character of a header's last field."""
    return value[:-1]


class CorpusParser:
    """Parser turning a corpus file into ``Document`` records.

    Example::

        parser = CorpusParser()
        corpus = parser.parse("train.txt")
        print(len(corpus.documents), corpus.topic_counts.most_common(3))

    Args:
        config: Parsing options. Only ``strip_trailing_character`` and
            ``encoding`` are used here.
    """

    def __init__(self, config: ClassifierConfig | None = None) -> None:
        self._config = config or ClassifierConfig()

    def parse(self, path: str | Path) -> ParsedCorpus:
        """Parse a corpus file.

        Args:
            path: Path to the corpus file.

        Returns:
            ParsedCorpus with the documents in file order and the topic
            counts of this file.

        Raises:
            CorpusLoadError: If the file is missing or cannot be decoded.
            CorpusFormatError: If a header is malformed or lacks a body line.
        """
        path = Path(path)
        corpus = ParsedCorpus(source=str(path))

        try:
            with open(path, "r", encoding=self._config.encoding) as fh:
                self._parse_lines(fh, corpus)
        except FileNotFoundError as exc:
            raise CorpusLoadError(f"Corpus file not found: {path}") from exc
        except UnicodeDecodeError as exc:
            raise CorpusLoadError(
                f"Cannot read {path} as {self._config.encoding}: {exc}"
            ) from exc
        except OSError as exc:
            raise CorpusLoadError(f"Cannot read corpus file {path}: {exc}") from exc

        logger.info(
            "Loaded %d documents with %d distinct topics from %s",
            corpus.document_count, len(corpus.topic_counts), path,
        )
        return corpus

    def _parse_lines(self, lines, corpus: ParsedCorpus) -> None:
        header: tuple[int, tuple[str, ...]] | None = None
        header_line_number = 0
        parity = 0

        for line_number, raw_line in enumerate(lines, 1):
            line = raw_line.rstrip("\n")
            if not line:
                continue

            if parity % 2 == 0:
                header = self.parse_header(line, corpus.source, line_number)
                header_line_number = line_number
            else:
                sentence_id, topics = header
                tokens = self.parse_body(line)
                corpus.documents.append(
                    Document(tokens=tokens, topics=topics, sentence_id=sentence_id)
                )
                corpus.topic_counts.update(topics)
            parity += 1

        if parity % 2 == 1:
            raise CorpusFormatError(
                "header line has no following body line",
                source=corpus.source,
                line_number=header_line_number,
            )

    def parse_header(
        self,
        line: str,
        source: str | None = None,
        line_number: int | None = None,
    ) -> tuple[int, tuple[str, ...]]:
        """Parse a header line into its sentence id and topic labels.

        Raises:
            CorpusFormatError: If the line has fewer than two tab-separated
                fields or the sentence id is not an integer.
        """
        fields = split_fields(line, HEADER_DELIMITER)
        if len(fields) < 2:
            raise CorpusFormatError(
                f"expected at least 2 tab-separated header fields, got {len(fields)}",
                source=source,
                line_number=line_number,
            )

        try:
            sentence_id = int(fields[1])
        except ValueError:
            raise CorpusFormatError(
                f"sentence id {fields[1]!r} is not an integer",
                source=source,
                line_number=line_number,
            ) from None

        labels = fields[2:]
        if labels and self._config.strip_trailing_character:
            labels[-1] = strip_trailing_character(labels[-1])

        # Distinct labels, header order preserved
        topics = tuple(dict.fromkeys(labels))
        return sentence_id, topics

    @staticmethod
    def parse_body(line: str) -> tuple[str, ...]:
        """Split a body line into its tokens."""
        return tuple(split_fields(line, TOKEN_DELIMITER))


def load_corpus(path: str | Path, config: ClassifierConfig | None = None) -> ParsedCorpus:
    """Parse a corpus file with a default or given configuration."""
    return CorpusParser(config).parse(path)
