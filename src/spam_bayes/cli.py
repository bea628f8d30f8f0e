"""Command-line interface for SMS Spam Bayes.

Provides ``tune``, ``classify`` and ``inspect`` commands with rich terminal
output using the ``click`` and ``rich`` libraries. Input files are already
partitioned: one ``label<TAB>text`` record per line.

Usage::

    spam-bayes tune train.tsv validation.tsv --test test.tsv
    spam-bayes classify train.tsv "WINNER!! Claim your prize" "see you at 5"
    spam-bayes inspect train.tsv --label spam --top 15
"""

from __future__ import annotations

import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import NoReturn

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .classifier import ClassificationMetrics
from .config import EngineConfig, parse_alphas
from .errors import InvalidLabelError, SpamBayesError
from .models import ClassificationResult, Label, LabeledMessage, TuningResult
from .pipeline import SpamClassifier

console = Console()
logger = logging.getLogger(__name__)


def _get_label_style(label: Label) -> str:
    """Return a rich style string for a label."""
    return {
        Label.SPAM: "bold red",
        Label.HAM: "bold green",
    }.get(label, "")


def _setup_logging(level: int) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def load_messages(path: Path) -> list[LabeledMessage]:
    """Read ``label<TAB>text`` records from a UTF-8 file.

    Blank lines are skipped.

    Raises:
        InvalidLabelError: If a line has no tab or an unknown label; the
            message names the file and line.
    """
    messages: list[LabeledMessage] = []
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        for lineno, line in enumerate(f, 1):
            line = line.rstrip("\r\n")
            if not line.strip():
                continue
            label, sep, text = line.partition("\t")
            try:
                if not sep:
                    raise InvalidLabelError(label)
                messages.append(LabeledMessage.from_raw(label, text))
            except InvalidLabelError as exc:
                raise InvalidLabelError(exc.label, location=f"{path}:{lineno}") from exc

    logger.debug(f"Loaded {len(messages)} messages from {path}")
    return messages


def _train(train_file: Path, alpha: float) -> SpamClassifier:
    classifier = SpamClassifier()
    classifier.train(load_messages(train_file), alpha=alpha)
    return classifier


def _fail(exc: Exception) -> NoReturn:
    console.print(f"[bold red]Error:[/] {exc}")
    sys.exit(1)


@click.group()
@click.version_option(package_name="sms-spam-bayes")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """📨 SMS Spam Bayes: Naive Bayes spam/ham classification.

    Train on labeled messages, pick the smoothing constant on a held-out
    set, and classify new text.
    """
    try:
        config = EngineConfig.from_env()
    except ValueError as exc:
        raise click.UsageError(str(exc)) from exc

    _setup_logging(logging.DEBUG if verbose else config.log_level_number)
    ctx.obj = config


@main.command()
@click.argument("train_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("validation_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--test", "test_file", type=click.Path(exists=True, dir_okay=False, path_type=Path),
              default=None, help="Report metrics on this test set with the chosen alpha.")
@click.option("--alphas", default=None,
              help="Comma-separated smoothing candidates (default 0.1..1.0).")
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
              help="Output format.")
@click.pass_obj
def tune(
    config: EngineConfig,
    train_file: Path,
    validation_file: Path,
    test_file: Path | None,
    alphas: str | None,
    output: str,
) -> None:
    """Choose the smoothing constant by validation accuracy.

    Example: spam-bayes tune train.tsv validation.tsv --test test.tsv
    """
    try:
        if alphas is not None:
            config = replace(config, alphas=parse_alphas(alphas))
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--alphas") from exc

    with console.status("[bold blue]Tuning smoothing constant...", spinner="dots"):
        try:
            classifier = _train(train_file, config.default_alpha)
            result = classifier.tune(load_messages(validation_file), config.alphas)
            metrics = classifier.evaluate(load_messages(test_file)) if test_file else None
        except (SpamBayesError, OSError) as exc:
            _fail(exc)

    if output == "json":
        payload = result.to_dict()
        if metrics is not None:
            payload["test"] = metrics.to_dict()
        click.echo(json.dumps(payload, indent=2))
    else:
        _render_tuning(result)
        if metrics is not None:
            _render_metrics(metrics, test_file.name)


@main.command()
@click.argument("train_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("texts", nargs=-1, required=True)
@click.option("--alpha", "-a", type=float, default=None,
              help="Smoothing constant (default from config, 1.0).")
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
              help="Output format.")
@click.pass_obj
def classify(
    config: EngineConfig,
    train_file: Path,
    texts: tuple[str, ...],
    alpha: float | None,
    output: str,
) -> None:
    """Train on TRAIN_FILE and classify each TEXT.

    Example: spam-bayes classify train.tsv "Free entry! Text WIN now"
    """
    try:
        classifier = _train(train_file, config.default_alpha if alpha is None else alpha)
    except (SpamBayesError, OSError) as exc:
        _fail(exc)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--alpha") from exc

    results = classifier.classify_batch(list(texts))

    if output == "json":
        click.echo(json.dumps([r.to_dict() for r in results], indent=2))
    else:
        _render_results(results, classifier.alpha)


@main.command()
@click.argument("train_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--label", "-l", type=click.Choice(["spam", "ham"]), default="spam",
              help="Class whose indicative tokens are listed.")
@click.option("--top", "-n", "top_n", type=click.IntRange(min=1), default=20,
              help="Number of tokens to list.")
@click.option("--alpha", "-a", type=float, default=None,
              help="Smoothing constant (default from config, 1.0).")
@click.pass_obj
def inspect(
    config: EngineConfig,
    train_file: Path,
    label: str,
    top_n: int,
    alpha: float | None,
) -> None:
    """Show vocabulary statistics and the most indicative tokens."""
    try:
        classifier = _train(train_file, config.default_alpha if alpha is None else alpha)
    except (SpamBayesError, OSError) as exc:
        _fail(exc)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--alpha") from exc

    counts = classifier.word_counts
    table = classifier.table
    console.print(Panel(
        f"[bold]{train_file.name}[/]\n"
        f"Messages: {counts.total_messages} "
        f"(spam {counts.spam_messages}, ham {counts.ham_messages}) | "
        f"Vocabulary: {len(classifier.vocabulary)} | "
        f"Spam types: {counts.n_spam_types} | Ham types: {counts.n_ham_types}\n"
        f"P(spam) = {table.prior_spam:.4f} | P(ham) = {table.prior_ham:.4f} | "
        f"alpha = {table.alpha}",
        title="📨 Training corpus",
        border_style="blue",
    ))

    target = Label.parse(label)
    rows = Table(title=f"Most indicative {target.value} tokens", show_lines=False)
    rows.add_column("#", justify="right", width=4)
    rows.add_column("Token", style="cyan")
    rows.add_column("Log ratio", justify="right")
    rows.add_column("Count", justify="right")
    for i, (token, ratio) in enumerate(classifier.most_informative_tokens(target, top_n), 1):
        rows.add_row(str(i), token, f"{ratio:.3f}", str(counts.count(token, target)))
    console.print(rows)
    console.print()


# ------------------------------------------------------------------
# Rich rendering helpers
# ------------------------------------------------------------------

def _render_tuning(result: TuningResult) -> None:
    """Render the alpha sweep as a rich table."""
    table = Table(title="Validation accuracy by alpha", show_lines=False)
    table.add_column("Alpha", justify="right", width=8)
    table.add_column("Accuracy", justify="right", width=10)
    table.add_column("", width=8)

    for alpha, acc in result.accuracy_table:
        marker = Text("best", style="bold green") if alpha == result.best_alpha else Text("")
        table.add_row(f"{alpha:g}", f"{acc:.2%}", marker)

    console.print()
    console.print(table)
    console.print(
        f"Selected alpha: [bold green]{result.best_alpha:g}[/] "
        f"({result.best_accuracy:.2%} validation accuracy)"
    )
    console.print()


def _render_metrics(metrics: ClassificationMetrics, name: str) -> None:
    """Render test-set metrics and the confusion matrix."""
    cm = metrics.confusion_matrix
    table = Table(title=f"Confusion matrix ({name})")
    table.add_column("", style="bold")
    table.add_column("pred spam", justify="right")
    table.add_column("pred ham", justify="right")
    table.add_row("spam", str(cm["spam"]["spam"]), str(cm["spam"]["ham"]))
    table.add_row("ham", str(cm["ham"]["spam"]), str(cm["ham"]["ham"]))

    console.print(Panel(
        f"Accuracy: [bold]{metrics.accuracy:.2%}[/] over {metrics.total} messages\n"
        f"Precision: {metrics.precision:.4f} | Recall: {metrics.recall:.4f} | "
        f"F1: {metrics.f1:.4f}",
        title="🧪 Test set",
        border_style="blue",
    ))
    console.print(table)
    console.print()


def _render_results(results: list[ClassificationResult], alpha: float) -> None:
    """Render classification results as a rich table."""
    table = Table(title=f"Classification (alpha = {alpha:g})", show_lines=True)
    table.add_column("#", justify="right", width=4)
    table.add_column("Text", style="white", max_width=60)
    table.add_column("Label", justify="center", width=6)
    table.add_column("P(spam)", justify="right", width=8)
    table.add_column("Known", justify="right", width=6)

    for i, result in enumerate(results, 1):
        excerpt = result.text[:120].replace("\n", " ") + ("..." if len(result.text) > 120 else "")
        table.add_row(
            str(i),
            excerpt,
            Text(result.label.value.upper(), style=_get_label_style(result.label)),
            f"{result.spam_probability:.2%}",
            str(result.matched_tokens),
        )

    console.print(table)
    console.print()


if __name__ == "__main__":
    main()
