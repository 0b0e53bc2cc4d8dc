"""End-to-end train/evaluate pipeline.

The ``TopicClassificationPipeline`` class is the primary entry point. It
loads a training corpus and a held-out corpus, estimates probability tables
from the training corpus only, predicts topics for both sets, and returns
an ``EvaluationReport`` with their accuracies.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from .classifier import TopicClassifier, compute_accuracy
from .models import ClassifierConfig
from .parsers import CorpusParser, ParsedCorpus

logger = logging.getLogger(__name__)


@dataclass
class EvaluationReport:
    """Accuracies and predictions for the training and held-out sets."""

    train_accuracy: float
    test_accuracy: float
    train_predictions: list[str] = field(default_factory=list)
    test_predictions: list[str] = field(default_factory=list)
    train_documents: int = 0
    test_documents: int = 0
    topics: list[str] = field(default_factory=list)
    vocabulary_size: int = 0
    output_path: str | None = None

    def summary(self) -> str:
        """Two-line plain-text summary."""
        return (
            f"Train Accuracy = {self.train_accuracy}\n"
            f"Test Accuracy = {self.test_accuracy}"
        )

    def to_dict(self) -> dict:
        return {
            "train_accuracy": self.train_accuracy,
            "test_accuracy": self.test_accuracy,
            "train_documents": self.train_documents,
            "test_documents": self.test_documents,
            "topics": self.topics,
            "vocabulary_size": self.vocabulary_size,
            "output_path": self.output_path,
        }


class TopicClassificationPipeline:
    """Load, train, predict, and evaluate in a single ``run()`` call.

    Example::

        pipeline = TopicClassificationPipeline()
        report = pipeline.run("train.txt", "test.txt")

        print(report.summary())

    Args:
        config: Options shared by the parser and the classifier.
        parser: Custom CorpusParser instance (optional).
    """

    def __init__(
        self,
        config: ClassifierConfig | None = None,
        parser: CorpusParser | None = None,
    ) -> None:
        self._config = config or ClassifierConfig()
        self._parser = parser or CorpusParser(self._config)
        self._classifier = TopicClassifier(self._config)

    @property
    def classifier(self) -> TopicClassifier:
        return self._classifier

    def load(self, path: str | Path) -> ParsedCorpus:
        return self._parser.parse(path)

    def train(self, path: str | Path) -> ParsedCorpus:
        """Load a training corpus and estimate the classifier from it."""
        corpus = self.load(path)
        self._classifier.train(corpus.documents, corpus.topic_counts)
        return corpus

    def run(
        self,
        train_path: str | Path,
        test_path: str | Path,
        output_path: str | Path | None = None,
    ) -> EvaluationReport:
        """Train on one corpus and evaluate on both.

        Only the training corpus contributes topic counts; topics that
        appear solely in the held-out corpus can never be predicted.

        Args:
            train_path: Training ("dev") corpus file.
            test_path: Held-out corpus file.
            output_path: Output designation, recorded in the report. Nothing
                is written to it.

        Returns:
            EvaluationReport with both accuracies and all predictions.

        Raises:
            CorpusLoadError: If either file cannot be read.
            CorpusFormatError: If either file is malformed.
            ModelInvariantError: If the training corpus has no topics.
        """
        train_corpus = self.load(train_path)
        test_corpus = self.load(test_path)

        tables = self._classifier.train(train_corpus.documents, train_corpus.topic_counts)

        train_predictions = self._classifier.predict(train_corpus.documents)
        test_predictions = self._classifier.predict(test_corpus.documents)

        train_accuracy = compute_accuracy(train_predictions, train_corpus.documents)
        test_accuracy = compute_accuracy(test_predictions, test_corpus.documents)

        unseen = set(test_corpus.topic_counts) - set(tables.prior)
        if unseen:
            logger.debug("Held-out topics absent from training: %s", sorted(unseen))
        if output_path is not None:
            logger.debug("Output designation %s is reserved and left untouched", output_path)

        logger.info("Train accuracy %.3f, test accuracy %.3f", train_accuracy, test_accuracy)

        return EvaluationReport(
            train_accuracy=train_accuracy,
            test_accuracy=test_accuracy,
            train_predictions=train_predictions,
            test_predictions=test_predictions,
            train_documents=train_corpus.document_count,
            test_documents=test_corpus.document_count,
            topics=tables.topics,
            vocabulary_size=tables.vocabulary_size,
            output_path=str(output_path) if output_path is not None else None,
        )


def run_pipeline(
    train_path: str | Path,
    test_path: str | Path,
    output_path: str | Path | None = None,
    config: ClassifierConfig | None = None,
) -> EvaluationReport:
    """Run the full pipeline with a default or given configuration."""
    return TopicClassificationPipeline(config).run(train_path, test_path, output_path)
