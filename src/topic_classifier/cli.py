"""Command-line interface for topic-classifier.

Provides ``evaluate``, ``classify``, and ``inspect`` commands with rich
terminal output using the ``click`` and ``rich`` libraries.

Usage::

    topic-classifier evaluate train.txt test.txt
    topic-classifier classify train.txt "buy cheap stock" "fresh milk"
    topic-classifier inspect train.txt
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from .classifier import TopicClassifier
from .models import ClassifierConfig, TopicClassifierError
from .parsers import CorpusParser
from .pipeline import TopicClassificationPipeline

console = Console()
err_console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, rich_tracebacks=True)],
        force=True,
    )


def _fail(error: Exception) -> None:
    err_console.print(f"[bold red]Error:[/] {error}")
    sys.exit(1)


def _apply(func, options):
    for option in reversed(options):
        func = option(func)
    return func


def corpus_options(func):
    """Options for every command that loads a corpus and estimates tables."""
    return _apply(func, [
        click.option("--smoothing", type=float, default=1.0, show_default=True,
                     help="Additive constant applied to co-occurrence counts."),
        click.option("--no-strip-trailing", is_flag=True, default=False,
                     help="Keep the last character of each header's final topic."),
        click.option("--verbose", "-v", is_flag=True, default=False,
                     help="Log progress and diagnostics."),
    ])


def scoring_options(func):
    """Options for commands that predict topics."""
    return _apply(func, [
        click.option("--epsilon", type=float, default=0.01, show_default=True,
                     help="Factor applied for tokens never seen in training."),
        click.option("--log-space", is_flag=True, default=False,
                     help="Score in log space to avoid underflow on long sentences."),
    ])


def _build_config(smoothing: float, no_strip_trailing: bool, epsilon: float = 0.01,
                  log_space: bool = False) -> ClassifierConfig:
    try:
        return ClassifierConfig(
            smoothing=smoothing,
            unseen_token_penalty=epsilon,
            log_space=log_space,
            strip_trailing_character=not no_strip_trailing,
        )
    except ValueError as e:
        raise click.BadParameter(str(e)) from e


@click.group()
@click.version_option(package_name="topic-classifier")
def main() -> None:
    """Naive Bayes topic classifier for labeled sentences.

    Train on a corpus of tagged sentences, predict the most probable topic
    of new sentences, and report accuracy.
    """
    pass


@main.command()
@click.argument("train_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("test_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("output", required=False, type=click.Path(path_type=Path))
@click.option("--output-format", "-o", type=click.Choice(["rich", "plain", "json"]),
              default="rich", help="Output format.")
@corpus_options
@scoring_options
def evaluate(train_file: Path, test_file: Path, output: Path | None, output_format: str,
             smoothing: float, epsilon: float, log_space: bool, no_strip_trailing: bool,
             verbose: bool) -> None:
    """Train on TRAIN_FILE and report accuracy on it and on TEST_FILE.

    OUTPUT is accepted for compatibility and currently not written.

    Example: topic-classifier evaluate train.txt test.txt
    """
    _configure_logging(verbose)
    config = _build_config(smoothing, no_strip_trailing, epsilon, log_space)
    pipeline = TopicClassificationPipeline(config)

    try:
        report = pipeline.run(train_file, test_file, output)
    except TopicClassifierError as e:
        _fail(e)

    if output_format == "json":
        click.echo(json.dumps(report.to_dict(), indent=2))
    elif output_format == "plain":
        click.echo(report.summary())
    else:
        table = Table(title="Topic Classification Accuracy")
        table.add_column("Set", style="cyan")
        table.add_column("File", style="white")
        table.add_column("Documents", justify="right")
        table.add_column("Accuracy", justify="right", style="bold")
        table.add_row("Train", train_file.name, str(report.train_documents),
                      str(report.train_accuracy))
        table.add_row("Test", test_file.name, str(report.test_documents),
                      str(report.test_accuracy))
        console.print(table)
        console.print(
            f"[dim]{len(report.topics)} topics, vocabulary of {report.vocabulary_size} tokens[/]"
        )


@main.command()
@click.argument("train_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("sentences", nargs=-1, required=True)
@click.option("--top", "-n", type=int, default=3, show_default=True,
              help="Number of ranked topics to show per sentence.")
@click.option("--json", "as_json", is_flag=True, default=False, help="Emit JSON.")
@corpus_options
@scoring_options
def classify(train_file: Path, sentences: tuple[str, ...], top: int, as_json: bool,
             smoothing: float, epsilon: float, log_space: bool, no_strip_trailing: bool,
             verbose: bool) -> None:
    """Train on TRAIN_FILE and predict the topic of each SENTENCE.

    Example: topic-classifier classify train.txt "buy cheap stock"
    """
    _configure_logging(verbose)
    config = _build_config(smoothing, no_strip_trailing, epsilon, log_space)
    pipeline = TopicClassificationPipeline(config)

    try:
        pipeline.train(train_file)
        results = [
            pipeline.classifier.classify(CorpusParser.parse_body(sentence))
            for sentence in sentences
        ]
    except TopicClassifierError as e:
        _fail(e)

    if as_json:
        click.echo(json.dumps(
            [{"sentence": s, **r.to_dict()} for s, r in zip(sentences, results)],
            indent=2,
        ))
        return

    score_label = "Log score" if log_space else "Score"
    for sentence, result in zip(sentences, results):
        table = Table(show_header=True, box=None)
        table.add_column("Topic", style="cyan", no_wrap=True)
        table.add_column(score_label, justify="right")
        for topic, score in result.ranked(top):
            table.add_row(topic, f"{score:.4g}")
        console.print(Panel(
            table,
            title=f"{sentence!r} -> [bold green]{result.predicted_topic}[/]",
            border_style="blue",
        ))


@main.command()
@click.argument("train_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--tokens", "-t", type=int, default=5, show_default=True,
              help="Most likely tokens to list per topic.")
@corpus_options
def inspect(train_file: Path, tokens: int, smoothing: float, no_strip_trailing: bool,
            verbose: bool) -> None:
    """Show topic statistics learned from TRAIN_FILE.

    Example: topic-classifier inspect train.txt
    """
    _configure_logging(verbose)
    config = _build_config(smoothing, no_strip_trailing)
    pipeline = TopicClassificationPipeline(config)

    try:
        corpus = pipeline.train(train_file)
    except TopicClassifierError as e:
        _fail(e)

    classifier: TopicClassifier = pipeline.classifier
    tables = classifier.tables

    console.print(Panel(
        f"[bold]{train_file.name}[/]\n"
        f"Documents: {corpus.document_count} | "
        f"Topic occurrences: {corpus.total_topic_occurrences} | "
        f"Topics: {len(tables.topics)} | "
        f"Vocabulary: {tables.vocabulary_size}",
        title="Training Corpus",
        border_style="blue",
    ))

    table = Table(title="Topics", show_lines=False)
    table.add_column("Topic", style="cyan", no_wrap=True)
    table.add_column("Count", justify="right")
    table.add_column("Prior", justify="right")
    table.add_column("Most likely tokens", style="white")
    for topic in tables.topics:
        top_tokens = ", ".join(tok for tok, _ in classifier.most_likely_tokens(topic, tokens))
        table.add_row(
            topic,
            str(tables.topic_counts[topic]),
            f"{tables.prior[topic]:.4f}",
            top_tokens,
        )
    console.print(table)


if __name__ == "__main__":
    main()
