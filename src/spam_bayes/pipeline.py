"""High-level spam classification pipeline.

Wraps vocabulary building, counting, estimation, tuning and classification
behind a train/tune/classify interface.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Optional

from .classifier import (
    ClassificationMetrics,
    build_vocabulary,
    count_words,
    estimate,
    evaluate,
    most_informative_tokens,
    score,
)
from .models import (
    ClassificationResult,
    Label,
    LabeledMessage,
    ParameterTable,
    TuningResult,
    Vocabulary,
    WordCounts,
)
from .tuning import DEFAULT_ALPHAS, tune

logger = logging.getLogger(__name__)


def _not_trained() -> RuntimeError:
    return RuntimeError("Classifier not trained. Call train() first.")


class SpamClassifier:
    """Naive Bayes spam/ham classifier with held-out alpha selection.

    Example::

        classifier = SpamClassifier()
        classifier.train(training_messages)
        result = classifier.tune(validation_messages)
        print(result.best_alpha)

        prediction = classifier.classify("WIN a free prize now")
        print(prediction.label)  # Label.SPAM

        metrics = classifier.evaluate(test_messages)
        print(metrics.accuracy)

    The vocabulary and word counts are fixed by :meth:`train`; tuning and
    classification never modify them.
    """

    def __init__(self) -> None:
        self._vocabulary: Vocabulary = frozenset()
        self._word_counts: Optional[WordCounts] = None
        self._table: Optional[ParameterTable] = None

    @property
    def is_trained(self) -> bool:
        return self._table is not None

    @property
    def vocabulary(self) -> Vocabulary:
        return self._vocabulary

    @property
    def word_counts(self) -> WordCounts:
        if self._word_counts is None:
            raise _not_trained()
        return self._word_counts

    @property
    def table(self) -> ParameterTable:
        if self._table is None:
            raise _not_trained()
        return self._table

    @property
    def alpha(self) -> float:
        return self.table.alpha

    def train(
        self,
        corpus: Sequence[LabeledMessage],
        alpha: float = 1.0,
    ) -> ParameterTable:
        """Build the vocabulary and counts from ``corpus`` and estimate a table.

        Raises:
            EmptyCorpusError: If the corpus is empty or lacks a class.
            EmptyVocabularyError: If no tokens survive normalization.
        """
        vocabulary, tokenized = build_vocabulary(corpus)
        word_counts = count_words(tokenized)
        table = estimate(
            word_counts,
            vocabulary,
            word_counts.n_spam_types,
            word_counts.n_ham_types,
            alpha,
        )

        self._vocabulary = vocabulary
        self._word_counts = word_counts
        self._table = table
        return table

    def set_alpha(self, alpha: float) -> ParameterTable:
        """Re-estimate the parameter table from stored counts."""
        counts = self.word_counts
        self._table = estimate(
            counts, self._vocabulary, counts.n_spam_types, counts.n_ham_types, alpha
        )
        return self._table

    def tune(
        self,
        validation: Sequence[LabeledMessage],
        alphas: Sequence[float] = DEFAULT_ALPHAS,
    ) -> TuningResult:
        """Sweep ``alphas`` on ``validation`` and adopt the best one."""
        counts = self.word_counts
        result = tune(
            counts,
            self._vocabulary,
            counts.n_spam_types,
            counts.n_ham_types,
            alphas,
            validation,
        )
        self.set_alpha(result.best_alpha)
        return result

    def classify(self, text: str) -> ClassificationResult:
        """Classify a single raw message."""
        return score(text, self.table)

    def classify_batch(self, texts: Sequence[str]) -> list[ClassificationResult]:
        table = self.table
        return [score(text, table) for text in texts]

    def evaluate(self, messages: Sequence[LabeledMessage]) -> ClassificationMetrics:
        """Metrics for ``messages``; accuracy is over ``len(messages)``."""
        metrics = evaluate(messages, self.table)
        logger.info(
            f"Evaluated {metrics.total} messages at alpha={self.alpha}: "
            f"accuracy {metrics.accuracy:.4f}"
        )
        return metrics

    def most_informative_tokens(
        self,
        label: Label | str = Label.SPAM,
        top_n: int = 20,
    ) -> list[tuple[str, float]]:
        return most_informative_tokens(self.table, Label.parse(label), top_n)
