"""Topic Classifier -- multi-label Naive Bayes topic classification."""

__version__ = "0.1.0"

from .classifier import (
    ClassificationResult,
    NaiveBayesPredictor,
    ProbabilityEstimator,
    TopicClassifier,
    compute_accuracy,
    estimate_probabilities,
    truncate,
)
from .models import (
    ClassifierConfig,
    CorpusFormatError,
    CorpusLoadError,
    Document,
    ModelInvariantError,
    ProbabilityTables,
    SizeMismatchError,
    TopicClassifierError,
)
from .parsers import CorpusParser, ParsedCorpus, load_corpus
from .pipeline import EvaluationReport, TopicClassificationPipeline, run_pipeline

__all__ = [
    # Core
    "TopicClassificationPipeline",
    "EvaluationReport",
    "run_pipeline",
    # Data
    "Document",
    "ProbabilityTables",
    "ClassifierConfig",
    # Parsing
    "CorpusParser",
    "ParsedCorpus",
    "load_corpus",
    # Classification
    "ProbabilityEstimator",
    "NaiveBayesPredictor",
    "TopicClassifier",
    "ClassificationResult",
    "estimate_probabilities",
    "compute_accuracy",
    "truncate",
    # Errors
    "TopicClassifierError",
    "CorpusLoadError",
    "CorpusFormatError",
    "ModelInvariantError",
    "SizeMismatchError",
]
