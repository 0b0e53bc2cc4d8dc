"""Naive Bayes topic classification over tokenized sentences.

Provides the estimation, prediction, and evaluation stages of the pipeline:

- Prior P(topic) from topic occurrence counts
- Likelihood P(token | topic) from token/topic co-occurrence counts with
  additive smoothing
- Arg-max prediction under the naive independence assumption, with a
  fixed penalty for tokens never seen in training
- Multi-label accuracy, truncated to three decimals

Ties between equally scored topics go to the lexicographically smallest
topic label, so predictions are reproducible across runs and platforms.
"""

from __future__ import annotations

import logging
import math
from collections import Counter, defaultdict
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Optional

from .models import (
    ClassifierConfig,
    Document,
    ModelInvariantError,
    ProbabilityTables,
    SizeMismatchError,
)

logger = logging.getLogger(__name__)

DEFAULT_SMOOTHING = 1.0
DEFAULT_UNSEEN_TOKEN_PENALTY = 0.01


# ---------------------------------------------------------------------------
# Probability Estimation
# ---------------------------------------------------------------------------

@dataclass
class ProbabilityEstimator:
    """Estimates prior and likelihood tables from a training corpus.

    The likelihood of a token given a topic is::

        (co-occurrences(token, topic) + smoothing) / occurrences(topic)

    where a co-occurrence is counted once per token occurrence for every
    topic of the document containing it.

    Args:
        smoothing: Additive constant applied at normalization.
    """

    smoothing: float = DEFAULT_SMOOTHING

    def estimate(
        self,
        documents: Iterable[Document],
        topic_counts: Mapping[str, int],
    ) -> ProbabilityTables:
        """Build the prior and likelihood tables.

        Args:
            documents: Training documents.
            topic_counts: Topic occurrence counts of the same documents.

        Returns:
            ProbabilityTables ready for prediction.

        Raises:
            ModelInvariantError: If there are no topic occurrences, or a
                document carries a topic whose count is zero or missing.
        """
        prior = self._estimate_prior(topic_counts)
        raw_counts = self._count_cooccurrences(documents)
        likelihood = self._normalize(raw_counts, topic_counts)

        logger.info(
            "Estimated tables for %d topics over a vocabulary of %d tokens",
            len(prior), len(likelihood),
        )
        return ProbabilityTables(
            prior=prior,
            likelihood=likelihood,
            topic_counts=Counter(topic_counts),
        )

    @staticmethod
    def _estimate_prior(topic_counts: Mapping[str, int]) -> dict[str, float]:
        total = sum(topic_counts.values())
        if total <= 0:
            raise ModelInvariantError("training corpus has no topic occurrences")
        empty = sorted(topic for topic, count in topic_counts.items() if count <= 0)
        if empty:
            raise ModelInvariantError(f"topics with no occurrences: {empty}")
        return {topic: count / total for topic, count in topic_counts.items()}

    @staticmethod
    def _count_cooccurrences(documents: Iterable[Document]) -> dict[str, dict[str, float]]:
        raw: dict[str, dict[str, float]] = defaultdict(dict)
        for doc in documents:
            for token in doc.tokens:
                per_topic = raw[token]
                for topic in doc.topics:
                    if topic in per_topic:
                        per_topic[topic] += 1.0
                    else:
                        per_topic[topic] = 1.0
        return raw

    def _normalize(
        self,
        raw_counts: dict[str, dict[str, float]],
        topic_counts: Mapping[str, int],
    ) -> dict[str, dict[str, float]]:
        likelihood: dict[str, dict[str, float]] = {}
        for token, per_topic in raw_counts.items():
            probs: dict[str, float] = {}
            for topic, count in per_topic.items():
                total = topic_counts.get(topic, 0)
                if total <= 0:
                    raise ModelInvariantError(
                        f"topic {topic!r} co-occurs with {token!r} but has no occurrences"
                    )
                probs[topic] = (count + self.smoothing) / total
            likelihood[token] = probs
        return likelihood


def estimate_probabilities(
    documents: Iterable[Document],
    topic_counts: Mapping[str, int],
    smoothing: float = DEFAULT_SMOOTHING,
) -> ProbabilityTables:
    """Estimate probability tables in one call."""
    return ProbabilityEstimator(smoothing=smoothing).estimate(documents, topic_counts)


# ---------------------------------------------------------------------------
# Prediction
# ---------------------------------------------------------------------------

class NaiveBayesPredictor:
    """Scores topics for a document and picks the most probable one.

    For every known topic the score is the topic prior times one factor per
    token occurrence:

    - the token's likelihood under the topic, if they co-occurred in training;
    - ``1 / occurrences(topic)`` if the token is known but never appeared
      with the topic;
    - ``unseen_token_penalty`` if the token never appeared in training.

    Products of many small factors can underflow to zero on long documents,
    leaving every topic tied. ``log_space=True`` sums logarithms instead;
    the chosen topic is the same whenever the product does not underflow.

    Args:
        tables: Estimated probability tables.
        unseen_token_penalty: Factor for out-of-vocabulary tokens.
        log_space: Accumulate log-probabilities instead of products.

    Raises:
        ModelInvariantError: If a topic in the prior has a non-positive prior
            or no positive occurrence count.
    """

    def __init__(
        self,
        tables: ProbabilityTables,
        unseen_token_penalty: float = DEFAULT_UNSEEN_TOKEN_PENALTY,
        log_space: bool = False,
    ) -> None:
        for topic, probability in tables.prior.items():
            if probability <= 0.0 or tables.topic_counts.get(topic, 0) <= 0:
                raise ModelInvariantError(
                    f"topic {topic!r} has no occurrences in the probability tables"
                )
        self._tables = tables
        self._penalty = unseen_token_penalty
        self._log_space = log_space
        self._topics = tables.topics

    @property
    def tables(self) -> ProbabilityTables:
        return self._tables

    @property
    def topics(self) -> list[str]:
        """Known topics in the order ties are broken."""
        return list(self._topics)

    def token_factor(self, token: str, topic: str) -> float:
        """Return the multiplicative contribution of one token to a topic."""
        per_topic = self._tables.likelihood.get(token)
        if per_topic is None:
            return self._penalty
        if topic in per_topic:
            return per_topic[topic]
        return 1.0 / self._tables.topic_counts[topic]

    def score(self, tokens: Sequence[str]) -> dict[str, float]:
        """Compute the unnormalized score of every topic.

        Scores are products of probabilities, or sums of their logarithms
        when the predictor runs in log space.
        """
        scores: dict[str, float] = {}
        for topic in self._topics:
            if self._log_space:
                value = 0.0
                for token in tokens:
                    value += math.log(self.token_factor(token, topic))
                value += math.log(self._tables.prior[topic])
            else:
                value = 1.0
                for token in tokens:
                    value *= self.token_factor(token, topic)
                value *= self._tables.prior[topic]
            scores[topic] = value
        return scores

    def predict(self, document: Document) -> str:
        """Predict the most probable topic of a single document.

        Raises:
            ModelInvariantError: If the tables contain no topics.
        """
        return self.best_topic(self.score(document.tokens))

    def predict_many(self, documents: Iterable[Document]) -> list[str]:
        """Predict one topic per document, preserving input order."""
        return [self.predict(doc) for doc in documents]

    def best_topic(self, scores: dict[str, float]) -> str:
        """Pick the highest-scoring topic; ties go to the first topic in label order."""
        if not scores:
            raise ModelInvariantError("cannot predict without any known topics")
        winner: Optional[str] = None
        best_score = 0.0
        for topic in self._topics:
            if winner is None or scores[topic] > best_score:
                winner = topic
                best_score = scores[topic]
        return winner


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------

def truncate(value: float, digits: int = 3) -> float:
    """Truncate a non-negative value toward zero to ``digits`` decimals.

    >>> truncate(0.8336)
    0.833
    """
    scale = 10 ** digits
    return int(value * scale) / float(scale)


def compute_accuracy(predictions: Sequence[str], documents: Sequence[Document]) -> float:
    """Fraction of documents whose predicted topic is among their true topics.

    Args:
        predictions: One predicted topic per document.
        documents: Documents with their ground-truth topics.

    Returns:
        Accuracy truncated to three decimals; 0.0 for empty input.

    Raises:
        SizeMismatchError: If the sequences differ in length.
    """
    if len(predictions) != len(documents):
        raise SizeMismatchError(
            f"predictions ({len(predictions)}) and documents ({len(documents)}) "
            "must have same length"
        )
    if not documents:
        return 0.0

    correct = sum(1 for pred, doc in zip(predictions, documents) if doc.has_topic(pred))
    return truncate(correct / len(documents))


# ---------------------------------------------------------------------------
# Classification (High-Level API)
# ---------------------------------------------------------------------------

@dataclass
class ClassificationResult:
    """Result of classifying a single token sequence."""

    predicted_topic: str
    scores: dict[str, float] = field(default_factory=dict)
    log_space: bool = False

    def ranked(self, top_n: Optional[int] = None) -> list[tuple[str, float]]:
        """Topics sorted by score (descending), ties in label order."""
        ordered = sorted(self.scores.items(), key=lambda x: (-x[1], x[0]))
        return ordered if top_n is None else ordered[:top_n]

    def to_dict(self) -> dict:
        return {
            "predicted_topic": self.predicted_topic,
            "log_space": self.log_space,
            "scores": dict(self.ranked()),
        }


class TopicClassifier:
    """Train/predict wrapper around estimation and prediction.

    Example::

        classifier = TopicClassifier()
        classifier.train(corpus.documents, corpus.topic_counts)

        result = classifier.classify("buy cheap stock".split())
        print(result.predicted_topic)

    Args:
        config: Estimation and prediction options.
    """

    def __init__(self, config: Optional[ClassifierConfig] = None) -> None:
        self._config = config or ClassifierConfig()
        self._predictor: Optional[NaiveBayesPredictor] = None

    @property
    def is_trained(self) -> bool:
        return self._predictor is not None

    @property
    def topics(self) -> list[str]:
        if self._predictor:
            return self._predictor.topics
        return []

    @property
    def tables(self) -> ProbabilityTables:
        return self._require_predictor().tables

    def train(
        self,
        documents: Sequence[Document],
        topic_counts: Mapping[str, int],
    ) -> ProbabilityTables:
        """Estimate probability tables and prepare the predictor."""
        tables = ProbabilityEstimator(smoothing=self._config.smoothing).estimate(
            documents, topic_counts
        )
        self._predictor = NaiveBayesPredictor(
            tables,
            unseen_token_penalty=self._config.unseen_token_penalty,
            log_space=self._config.log_space,
        )
        return tables

    def predict(self, documents: Sequence[Document]) -> list[str]:
        return self._require_predictor().predict_many(documents)

    def classify(self, tokens: Sequence[str]) -> ClassificationResult:
        """Classify a raw token sequence."""
        predictor = self._require_predictor()
        scores = predictor.score(tokens)
        return ClassificationResult(
            predicted_topic=predictor.best_topic(scores),
            scores=scores,
            log_space=self._config.log_space,
        )

    def evaluate(self, documents: Sequence[Document]) -> float:
        """Predict and score a labeled document collection."""
        return compute_accuracy(self.predict(documents), documents)

    def most_likely_tokens(self, topic: str, top_n: int = 10) -> list[tuple[str, float]]:
        """Tokens with the highest likelihood under a topic.

        Raises:
            ValueError: If the topic is unknown.
        """
        tables = self.tables
        if topic not in tables.prior:
            raise ValueError(f"Unknown topic: {topic}. Known: {tables.topics}")
        pairs = [
            (token, per_topic[topic])
            for token, per_topic in tables.likelihood.items()
            if topic in per_topic
        ]
        pairs.sort(key=lambda x: (-x[1], x[0]))
        return pairs[:top_n]

    def _require_predictor(self) -> NaiveBayesPredictor:
        if self._predictor is None:
            raise RuntimeError("Classifier not trained. Call train() first.")
        return self._predictor
