"""Multinomial Naive Bayes engine for spam/ham classification.

Pure functions over explicit inputs:

- :func:`build_vocabulary` tokenizes the training corpus once.
- :func:`count_words` turns per-class token lists into occurrence counts.
- :func:`estimate` derives a :class:`ParameterTable` for one smoothing
  constant from those counts, in time proportional to the vocabulary.
- :func:`classify` / :func:`score` apply a table to raw text in log space.
- :func:`compute_metrics` / :func:`evaluate` measure a table on labeled data.

Smoothed likelihoods follow Lidstone's rule::

    P(t|c) = (count(t, c) + alpha) / (n_types(c) + alpha * |V|)

where ``n_types(c)`` is the number of *distinct* tokens seen in class ``c``.
"""

from __future__ import annotations

import logging
import math
from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from .errors import EmptyCorpusError, EmptyVocabularyError
from .models import (
    ClassificationResult,
    Label,
    LabeledMessage,
    ParameterTable,
    TokenizedCorpus,
    Vocabulary,
    WordCounts,
)
from .preprocessing import normalize, normalize_corpus

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Vocabulary and counts
# ---------------------------------------------------------------------------

def build_vocabulary(
    corpus: Sequence[LabeledMessage],
) -> tuple[Vocabulary, TokenizedCorpus]:
    """Tokenize a training corpus and collect its vocabulary.

    Messages that normalize to no tokens are kept; they count towards the
    class priors but contribute no tokens.

    Args:
        corpus: Labeled training messages.

    Returns:
        The set of distinct training tokens and the per-class token lists.

    Raises:
        EmptyCorpusError: If the corpus has no messages.
    """
    if not corpus:
        raise EmptyCorpusError("Training corpus is empty; no model can be built")

    tokenized = TokenizedCorpus()
    for label, tokens in normalize_corpus(corpus):
        if label is Label.SPAM:
            tokenized.spam_messages += 1
            tokenized.spam_tokens.extend(tokens)
        else:
            tokenized.ham_messages += 1
            tokenized.ham_tokens.extend(tokens)

    vocabulary = frozenset(tokenized.spam_tokens) | frozenset(tokenized.ham_tokens)

    logger.info(
        f"Built vocabulary of {len(vocabulary)} tokens from "
        f"{tokenized.spam_messages} spam and {tokenized.ham_messages} ham messages"
    )
    return vocabulary, tokenized


def count_words(tokenized: TokenizedCorpus) -> WordCounts:
    """Count token occurrences per class in a single pass."""
    return WordCounts(
        spam=Counter(tokenized.spam_tokens),
        ham=Counter(tokenized.ham_tokens),
        spam_messages=tokenized.spam_messages,
        ham_messages=tokenized.ham_messages,
    )


# ---------------------------------------------------------------------------
# Parameter estimation
# ---------------------------------------------------------------------------

def _smoothed(count: int, n_types: int, alpha: float, vocab_size: int) -> float:
    denominator = n_types + alpha * vocab_size
    if denominator == 0:
        return 0.0
    return (count + alpha) / denominator


def estimate(
    word_counts: WordCounts,
    vocabulary: Vocabulary,
    n_spam_types: int,
    n_ham_types: int,
    alpha: float,
) -> ParameterTable:
    """Estimate priors and smoothed likelihoods for one smoothing constant.

    Args:
        word_counts: Per-class token counts from :func:`count_words`.
        vocabulary: Training vocabulary.
        n_spam_types: Distinct tokens seen in spam training messages.
        n_ham_types: Distinct tokens seen in ham training messages.
        alpha: Lidstone smoothing constant (1.0 = Laplace).

    Returns:
        A new ParameterTable covering every vocabulary token.

    Raises:
        ValueError: If alpha is negative or not finite.
        EmptyVocabularyError: If the vocabulary is empty.
        EmptyCorpusError: If either class has no training messages.
    """
    if not math.isfinite(alpha) or alpha < 0:
        raise ValueError(f"alpha must be finite and non-negative, got {alpha}")
    if not vocabulary:
        raise EmptyVocabularyError(
            "Vocabulary is empty after normalization; cannot estimate parameters"
        )
    if word_counts.spam_messages == 0 or word_counts.ham_messages == 0:
        missing = "spam" if word_counts.spam_messages == 0 else "ham"
        raise EmptyCorpusError(f"Training corpus has no {missing} messages")

    total = word_counts.total_messages
    vocab_size = len(vocabulary)

    likelihoods: dict[str, tuple[float, float]] = {}
    for token in vocabulary:
        likelihoods[token] = (
            _smoothed(word_counts.spam.get(token, 0), n_spam_types, alpha, vocab_size),
            _smoothed(word_counts.ham.get(token, 0), n_ham_types, alpha, vocab_size),
        )

    logger.debug(f"Estimated parameter table for alpha={alpha} over {vocab_size} tokens")
    return ParameterTable(
        alpha=alpha,
        prior_spam=word_counts.spam_messages / total,
        prior_ham=word_counts.ham_messages / total,
        likelihoods=likelihoods,
    )


def most_informative_tokens(
    table: ParameterTable,
    label: Label,
    top_n: int = 20,
) -> list[tuple[str, float]]:
    """Rank tokens by how much more likely they are under ``label``.

    Returns:
        (token, log_likelihood_ratio) pairs, strongest first. Ties are
        broken alphabetically so the ranking is stable.
    """
    ratios: list[tuple[str, float]] = []
    for token, (lp_spam, lp_ham) in table.log_likelihoods.items():
        ratio = lp_spam - lp_ham if label is Label.SPAM else lp_ham - lp_spam
        ratios.append((token, ratio))

    ratios.sort(key=lambda x: (-x[1], x[0]))
    return ratios[:top_n]


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------

def score(text: str, table: ParameterTable) -> ClassificationResult:
    """Score a raw message against a parameter table in log space.

    Tokens outside the table's vocabulary contribute a neutral factor of 1
    (0 in log space) to both classes. Ties go to SPAM.
    """
    spam_score = table.log_prior_spam
    ham_score = table.log_prior_ham
    matched = 0

    log_likelihoods = table.log_likelihoods
    for token in normalize(text):
        if token not in log_likelihoods:
            continue
        lp_spam, lp_ham = log_likelihoods[token]
        spam_score += lp_spam
        ham_score += lp_ham
        matched += 1

    label = Label.SPAM if spam_score >= ham_score else Label.HAM
    return ClassificationResult(
        label=label,
        text=text,
        spam_score=spam_score,
        ham_score=ham_score,
        matched_tokens=matched,
    )


def classify(text: str, table: ParameterTable) -> Label:
    """Predict SPAM or HAM for a raw message."""
    return score(text, table).label


# ---------------------------------------------------------------------------
# Evaluation Metrics
# ---------------------------------------------------------------------------

@dataclass
class ClassificationMetrics:
    """Evaluation metrics for spam/ham predictions, SPAM as positive class.

    Attributes:
        accuracy: Correct predictions over the size of the evaluated set.
        precision: Fraction of predicted spam that is spam.
        recall: Fraction of actual spam predicted as spam.
        f1: Harmonic mean of precision and recall.
        confusion_matrix: ``{true_label: {predicted_label: count}}``.
        support: Per-class sample counts in the true labels.
    """

    accuracy: float = 0.0
    precision: float = 0.0
    recall: float = 0.0
    f1: float = 0.0
    confusion_matrix: dict[str, dict[str, int]] = field(default_factory=dict)
    support: dict[str, int] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return sum(self.support.values())

    def to_dict(self) -> dict:
        return {
            "accuracy": round(self.accuracy, 4),
            "precision": round(self.precision, 4),
            "recall": round(self.recall, 4),
            "f1": round(self.f1, 4),
            "confusion_matrix": self.confusion_matrix,
            "support": self.support,
        }

    def summary(self) -> str:
        """Human-readable summary of metrics."""
        cm = self.confusion_matrix
        return "\n".join([
            f"Accuracy:  {self.accuracy:.2%} ({self.total} messages)",
            f"Precision: {self.precision:.4f}",
            f"Recall:    {self.recall:.4f}",
            f"F1:        {self.f1:.4f}",
            "",
            f"{'':<10} {'pred spam':>10} {'pred ham':>10}",
            f"{'spam':<10} {cm['spam']['spam']:>10} {cm['spam']['ham']:>10}",
            f"{'ham':<10} {cm['ham']['spam']:>10} {cm['ham']['ham']:>10}",
        ])


def compute_metrics(
    y_true: Sequence[Label],
    y_pred: Sequence[Label],
) -> ClassificationMetrics:
    """Compute binary classification metrics from true and predicted labels.

    Raises:
        ValueError: If the sequences differ in length.
        EmptyCorpusError: If there is nothing to evaluate.
    """
    if len(y_true) != len(y_pred):
        raise ValueError("y_true and y_pred must have the same length")
    if not y_true:
        raise EmptyCorpusError("Cannot compute metrics on an empty set")

    classes = [Label.SPAM.value, Label.HAM.value]
    cm: dict[str, dict[str, int]] = {c: {c2: 0 for c2 in classes} for c in classes}
    for true, pred in zip(y_true, y_pred):
        cm[Label(true).value][Label(pred).value] += 1

    tp = cm["spam"]["spam"]
    fp = cm["ham"]["spam"]
    fn = cm["spam"]["ham"]
    correct = tp + cm["ham"]["ham"]

    precision = tp / (tp + fp) if (tp + fp) > 0 else 0.0
    recall = tp / (tp + fn) if (tp + fn) > 0 else 0.0
    f1 = (
        2 * precision * recall / (precision + recall)
        if (precision + recall) > 0
        else 0.0
    )

    return ClassificationMetrics(
        accuracy=correct / len(y_true),
        precision=precision,
        recall=recall,
        f1=f1,
        confusion_matrix=cm,
        support={c: sum(row.values()) for c, row in cm.items()},
    )


def evaluate(
    messages: Sequence[LabeledMessage],
    table: ParameterTable,
) -> ClassificationMetrics:
    """Classify a labeled set and compute metrics over that same set."""
    predictions = [classify(m.text, table) for m in messages]
    return compute_metrics([m.label for m in messages], predictions)


def accuracy(messages: Iterable[LabeledMessage], table: ParameterTable) -> float:
    """Fraction of ``messages`` whose label ``table`` predicts correctly.

    Raises:
        EmptyCorpusError: If ``messages`` is empty.
    """
    total = 0
    correct = 0
    for message in messages:
        total += 1
        if classify(message.text, table) is message.label:
            correct += 1
    if total == 0:
        raise EmptyCorpusError("Cannot compute accuracy on an empty set")
    return correct / total
