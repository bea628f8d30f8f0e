"""SMS Spam Bayes -- Naive Bayes spam/ham classification for short messages."""

__version__ = "0.1.0"

from .classifier import (
    ClassificationMetrics,
    accuracy,
    build_vocabulary,
    classify,
    compute_metrics,
    count_words,
    estimate,
    evaluate,
    most_informative_tokens,
    score,
)
from .config import EngineConfig
from .errors import (
    EmptyCorpusError,
    EmptyVocabularyError,
    InvalidLabelError,
    SpamBayesError,
)
from .models import (
    ClassificationResult,
    Label,
    LabeledMessage,
    ParameterTable,
    TokenizedCorpus,
    TuningResult,
    Vocabulary,
    WordCounts,
)
from .pipeline import SpamClassifier
from .preprocessing import normalize, normalize_corpus
from .tuning import DEFAULT_ALPHAS, tune

__all__ = [
    # Core
    "SpamClassifier",
    "EngineConfig",
    # Data model
    "Label",
    "LabeledMessage",
    "Vocabulary",
    "TokenizedCorpus",
    "WordCounts",
    "ParameterTable",
    "ClassificationResult",
    "TuningResult",
    # Errors
    "SpamBayesError",
    "EmptyCorpusError",
    "InvalidLabelError",
    "EmptyVocabularyError",
    # Preprocessing
    "normalize",
    "normalize_corpus",
    # Engine
    "build_vocabulary",
    "count_words",
    "estimate",
    "score",
    "classify",
    "most_informative_tokens",
    # Evaluation
    "ClassificationMetrics",
    "compute_metrics",
    "evaluate",
    "accuracy",
    # Tuning
    "DEFAULT_ALPHAS",
    "tune",
]
