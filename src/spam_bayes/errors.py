"""Exceptions raised by the spam classification engine."""

from __future__ import annotations

from typing import Optional


class SpamBayesError(ValueError):
    """Base class for all engine errors."""


class EmptyCorpusError(SpamBayesError):
    """A training, validation, or evaluation set has no usable messages."""


class InvalidLabelError(SpamBayesError):
    """A message label is neither ``spam`` nor ``ham``."""

    def __init__(self, label: object, location: Optional[str] = None) -> None:
        self.label = label
        self.location = location
        message = f"Invalid label {label!r}: expected 'spam' or 'ham'"
        if location:
            message = f"{location}: {message}"
        super().__init__(message)


class EmptyVocabularyError(SpamBayesError):
    """The training corpus produced no tokens after normalization."""
