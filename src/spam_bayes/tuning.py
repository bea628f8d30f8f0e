"""Held-out selection of the smoothing constant.

Word counts are computed once from the training corpus; each candidate alpha
only re-derives the parameter table from them, so a sweep costs
``O(len(alphas) * (|V| + validation tokens))`` and never re-tokenizes the
training data.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from .classifier import accuracy, estimate
from .errors import EmptyCorpusError
from .models import LabeledMessage, TuningResult, Vocabulary, WordCounts

logger = logging.getLogger(__name__)

#: 0.1 through 1.0 inclusive, step 0.1.
DEFAULT_ALPHAS: tuple[float, ...] = tuple(round(0.1 * i, 1) for i in range(1, 11))


def tune(
    word_counts: WordCounts,
    vocabulary: Vocabulary,
    n_spam_types: int,
    n_ham_types: int,
    candidate_alphas: Sequence[float],
    validation_set: Sequence[LabeledMessage],
) -> TuningResult:
    """Pick the smoothing constant with the best validation accuracy.

    Candidates are evaluated in the given order. On equal accuracy the
    earliest candidate wins.

    Args:
        word_counts: Per-class training counts.
        vocabulary: Training vocabulary.
        n_spam_types: Distinct tokens seen in spam training messages.
        n_ham_types: Distinct tokens seen in ham training messages.
        candidate_alphas: Smoothing constants to try.
        validation_set: Labeled messages disjoint from the training corpus.

    Returns:
        TuningResult with the chosen alpha and the (alpha, accuracy) table
        in candidate order.

    Raises:
        ValueError: If no candidates are given.
        EmptyCorpusError: If the validation set is empty.
    """
    if not candidate_alphas:
        raise ValueError("candidate_alphas must contain at least one value")
    if not validation_set:
        raise EmptyCorpusError("Validation set is empty; cannot measure accuracy")

    table_rows: list[tuple[float, float]] = []
    best_alpha = candidate_alphas[0]
    best_accuracy = -1.0

    for alpha in candidate_alphas:
        table = estimate(word_counts, vocabulary, n_spam_types, n_ham_types, alpha)
        acc = accuracy(validation_set, table)
        table_rows.append((alpha, acc))
        logger.debug(f"alpha={alpha}: validation accuracy {acc:.4f}")

        if acc > best_accuracy:
            best_alpha = alpha
            best_accuracy = acc

    logger.info(
        f"Selected alpha={best_alpha} with validation accuracy {best_accuracy:.4f} "
        f"over {len(validation_set)} messages"
    )
    return TuningResult(best_alpha=best_alpha, accuracy_table=table_rows)
