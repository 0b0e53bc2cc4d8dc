"""Data models, configuration, and errors for topic classification."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class TopicClassifierError(Exception):
    """Base class for all errors raised by topic_classifier."""


class CorpusLoadError(TopicClassifierError, OSError):
    """A corpus file is missing or cannot be read."""


class CorpusFormatError(TopicClassifierError, ValueError):
    """A corpus file does not follow the header/body line format."""

    def __init__(self, message: str, source: str | None = None, line_number: int | None = None) -> None:
        location = ""
        if source is not None:
            location = f"{source}:{line_number}: " if line_number is not None else f"{source}: "
        super().__init__(f"{location}{message}")
        self.source = source
        self.line_number = line_number


class ModelInvariantError(TopicClassifierError, RuntimeError):
    """The probability tables are internally inconsistent."""


class SizeMismatchError(TopicClassifierError, ValueError):
    """Predictions and documents have different lengths."""


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

@dataclass
class ClassifierConfig:
    """Tunable knobs for loading, estimation, and prediction.

    The defaults reproduce the reference behavior exactly.

    Attributes:
        smoothing: Constant added to each co-occurrence count before it is
            divided by the topic's total occurrence count.
        unseen_token_penalty: Factor applied for tokens never seen in training.
        log_space: Accumulate log-probabilities instead of raw products.
        strip_trailing_character: Drop the final character of the last
            header field.
        encoding: Text encoding of corpus files.
    """

    smoothing: float = 1.0
    unseen_token_penalty: float = 0.01
    log_space: bool = False
    strip_trailing_character: bool = True
    encoding: str = "utf-8"

    def __post_init__(self) -> None:
        if self.smoothing < 0.0:
            raise ValueError("smoothing must be non-negative")
        if not 0.0 < self.unseen_token_penalty <= 1.0:
            raise ValueError("unseen_token_penalty must be in (0.0, 1.0]")

    def to_dict(self) -> dict:
        return {
            "smoothing": self.smoothing,
            "unseen_token_penalty": self.unseen_token_penalty,
            "log_space": self.log_space,
            "strip_trailing_character": self.strip_trailing_character,
            "encoding": self.encoding,
        }


# ---------------------------------------------------------------------------
# Documents and tables
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Document:
    """A single labeled sentence from a corpus file.

    ``topics`` holds distinct labels in the order the header listed them.
    """

    tokens: tuple[str, ...]
    topics: tuple[str, ...]
    sentence_id: int

    def has_topic(self, topic: str) -> bool:
        return topic in self.topics

    def to_dict(self) -> dict:
        return {
            "sentence_id": self.sentence_id,
            "topics": list(self.topics),
            "tokens": list(self.tokens),
        }


@dataclass(frozen=True)
class ProbabilityTables:
    """Prior and likelihood tables estimated from a training corpus.

    Attributes:
        prior: P(topic) for every topic seen in training.
        likelihood: P(token | topic), keyed by token then topic. Topics that
            never co-occurred with a token are absent from its mapping.
        topic_counts: Topic occurrence counts the tables were built from.
    """

    prior: dict[str, float]
    likelihood: dict[str, dict[str, float]]
    topic_counts: Counter = field(default_factory=Counter)

    @property
    def topics(self) -> list[str]:
        """Known topics in canonical (lexicographic) order."""
        return sorted(self.prior)

    @property
    def vocabulary_size(self) -> int:
        return len(self.likelihood)
