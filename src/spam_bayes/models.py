"""Data models for spam/ham classification."""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum

from .errors import InvalidLabelError

Vocabulary = frozenset[str]


class Label(str, Enum):
    """Binary message classes."""

    SPAM = "spam"
    HAM = "ham"

    @classmethod
    def parse(cls, value: object) -> "Label":
        """Normalize a raw label (any case, surrounding whitespace) to a Label.

        Raises:
            InvalidLabelError: If the value is neither spam nor ham.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise InvalidLabelError(value)


@dataclass(frozen=True)
class LabeledMessage:
    """A single labeled text message. Immutable once created."""

    label: Label
    text: str

    def __post_init__(self) -> None:
        if not isinstance(self.label, Label):
            object.__setattr__(self, "label", Label.parse(self.label))

    @classmethod
    def from_raw(cls, label: str, text: str) -> "LabeledMessage":
        return cls(label=Label.parse(label), text=text)

    @property
    def is_spam(self) -> bool:
        return self.label is Label.SPAM


@dataclass
class TokenizedCorpus:
    """Training corpus after normalization, split by class.

    Token lists keep duplicates; they are the multisets used for counting.
    """

    spam_tokens: list[str] = field(default_factory=list)
    ham_tokens: list[str] = field(default_factory=list)
    spam_messages: int = 0
    ham_messages: int = 0

    @property
    def total_messages(self) -> int:
        return self.spam_messages + self.ham_messages


@dataclass
class WordCounts:
    """Per-class token occurrence counts from a training corpus.

    Independent of the smoothing constant, so one instance serves every
    parameter table estimated during a sweep.

    Attributes:
        spam: Occurrences of each token across all spam messages.
        ham: Occurrences of each token across all ham messages.
        spam_messages: Number of spam training messages.
        ham_messages: Number of ham training messages.
    """

    spam: Counter[str] = field(default_factory=Counter)
    ham: Counter[str] = field(default_factory=Counter)
    spam_messages: int = 0
    ham_messages: int = 0

    @property
    def n_spam_types(self) -> int:
        """Distinct tokens seen in spam messages."""
        return len(self.spam)

    @property
    def n_ham_types(self) -> int:
        """Distinct tokens seen in ham messages."""
        return len(self.ham)

    @property
    def total_messages(self) -> int:
        return self.spam_messages + self.ham_messages

    def count(self, token: str, label: Label) -> int:
        counts = self.spam if label is Label.SPAM else self.ham
        return counts.get(token, 0)


def _safe_log(value: float) -> float:
    return math.log(value) if value > 0 else -math.inf


@dataclass
class ParameterTable:
    """Smoothed Naive Bayes parameters for one smoothing constant.

    Attributes:
        alpha: Smoothing constant the table was estimated with.
        prior_spam: P(SPAM) from training label frequencies.
        prior_ham: P(HAM) from training label frequencies.
        likelihoods: token -> (P(token|SPAM), P(token|HAM)) for every
            vocabulary token.
    """

    alpha: float
    prior_spam: float
    prior_ham: float
    likelihoods: dict[str, tuple[float, float]] = field(default_factory=dict)

    # Derived log-space parameters
    log_prior_spam: float = field(init=False, repr=False)
    log_prior_ham: float = field(init=False, repr=False)
    log_likelihoods: dict[str, tuple[float, float]] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.log_prior_spam = _safe_log(self.prior_spam)
        self.log_prior_ham = _safe_log(self.prior_ham)
        self.log_likelihoods = {
            token: (_safe_log(p_spam), _safe_log(p_ham))
            for token, (p_spam, p_ham) in self.likelihoods.items()
        }

    @property
    def vocabulary(self) -> Vocabulary:
        return frozenset(self.likelihoods)

    def __contains__(self, token: object) -> bool:
        return token in self.likelihoods

    def __len__(self) -> int:
        return len(self.likelihoods)

    def probability(self, token: str, label: Label) -> float:
        """Return P(token|label), or 1.0 (neutral) for an OOV token."""
        if token not in self.likelihoods:
            return 1.0
        p_spam, p_ham = self.likelihoods[token]
        return p_spam if label is Label.SPAM else p_ham

    def prior(self, label: Label) -> float:
        return self.prior_spam if label is Label.SPAM else self.prior_ham


@dataclass
class ClassificationResult:
    """Result of classifying a single message.

    ``spam_score`` and ``ham_score`` are unnormalized log posteriors.
    """

    label: Label
    text: str
    spam_score: float
    ham_score: float
    matched_tokens: int = 0

    @property
    def is_spam(self) -> bool:
        return self.label is Label.SPAM

    @property
    def spam_probability(self) -> float:
        """Normalized P(SPAM|text), computed with log-sum-exp."""
        top = max(self.spam_score, self.ham_score)
        if top == -math.inf:
            return 0.5
        spam = math.exp(self.spam_score - top)
        ham = math.exp(self.ham_score - top)
        return spam / (spam + ham)

    def to_dict(self) -> dict:
        return {
            "label": self.label.value,
            "text": self.text,
            "spam_score": self.spam_score,
            "ham_score": self.ham_score,
            "spam_probability": round(self.spam_probability, 4),
            "matched_tokens": self.matched_tokens,
        }


@dataclass
class TuningResult:
    """Outcome of a smoothing-constant sweep.

    Attributes:
        best_alpha: First candidate reaching the highest accuracy.
        accuracy_table: (alpha, accuracy) pairs in candidate order.
    """

    best_alpha: float
    accuracy_table: list[tuple[float, float]] = field(default_factory=list)

    @property
    def best_accuracy(self) -> float:
        return dict(self.accuracy_table)[self.best_alpha]

    def to_dict(self) -> dict:
        return {
            "best_alpha": self.best_alpha,
            "best_accuracy": round(self.best_accuracy, 4),
            "accuracy_table": [
                {"alpha": alpha, "accuracy": round(acc, 4)}
                for alpha, acc in self.accuracy_table
            ],
        }
