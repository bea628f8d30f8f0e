"""Text normalization for spam classification.

Turns raw message text into the token sequence the model counts and scores.
The same :func:`normalize` runs on the training corpus and on every message
classified later, so both sides always see identical tokens.

Steps, in order:

1. Lowercase.
2. Strip ASCII punctuation.
3. Replace each digit with a space.
4. Replace the legacy smart quotes ``\\x92`` / ``\\x93``, newline and tab
   with a space.
5. Split on the literal space character and drop empty strings.
"""

from __future__ import annotations

import re
import string
from collections.abc import Iterable, Iterator

from .models import Label, LabeledMessage

_PUNCTUATION_TABLE = str.maketrans("", "", string.punctuation)

_DIGIT_RE = re.compile(r"[0-9]")

# Windows-1252 right single quote and left double quote as they appear in
# mis-decoded SMS exports, plus the control characters seen in the corpus.
SPACE_REPLACED_CHARS: tuple[str, ...] = ("\x92", "\x93", "\n", "\t")

_SPACE_REPLACED_RE = re.compile("|".join(re.escape(c) for c in SPACE_REPLACED_CHARS))


def normalize(text: str) -> list[str]:
    """Normalize raw text into a list of tokens.

    Args:
        text: Raw message text. Any string is accepted, including ``""``.

    Returns:
        Tokens in message order, duplicates kept.
    """
    text = text.lower()
    text = text.translate(_PUNCTUATION_TABLE)
    text = _DIGIT_RE.sub(" ", text)
    text = _SPACE_REPLACED_RE.sub(" ", text)
    return [token for token in text.split(" ") if token]


def normalize_corpus(
    messages: Iterable[LabeledMessage],
) -> Iterator[tuple[Label, list[str]]]:
    """Yield ``(label, tokens)`` for each message, in input order."""
    for message in messages:
        yield message.label, normalize(message.text)
