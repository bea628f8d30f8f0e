"""Shared test fixtures for sms-spam-bayes tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from spam_bayes.models import LabeledMessage

SPAM_MESSAGES = [
    "WINNER!! You have won a free prize. Call now to claim",
    "Free entry in a weekly competition, text WIN to claim your prize",
    "URGENT! Your mobile has won a cash prize, call to claim now",
    "Claim your free ringtone now, reply WIN",
]

HAM_MESSAGES = [
    "Are we still meeting for lunch tomorrow?",
    "I will call you when I get home tonight",
    "Can you pick up some milk on the way home",
    "See you at the office tomorrow morning",
    "Thanks for dinner last night, it was great",
]

VALIDATION = [
    ("spam", "Call now to claim your free prize"),
    ("ham", "See you for lunch tomorrow"),
    ("spam", "You have won a cash prize"),
    ("ham", "I will be home tonight"),
]

TEST = [
    ("spam", "Text WIN to get a free ringtone"),
    ("ham", "Thanks, see you at dinner"),
    ("ham", "Can you call me when you get home"),
]


def _messages(pairs: list[tuple[str, str]]) -> list[LabeledMessage]:
    return [LabeledMessage.from_raw(label, text) for label, text in pairs]


def _write_tsv(path: Path, pairs: list[tuple[str, str]]) -> Path:
    path.write_text("".join(f"{label}\t{text}\n" for label, text in pairs), encoding="utf-8")
    return path


@pytest.fixture
def tiny_corpus() -> list[LabeledMessage]:
    """Two-message corpus with disjoint spam and ham vocabularies."""
    return _messages([("spam", "win money now"), ("ham", "see you tomorrow")])


@pytest.fixture
def sms_corpus() -> list[LabeledMessage]:
    """Small SMS-style training corpus."""
    return _messages(
        [("spam", text) for text in SPAM_MESSAGES]
        + [("ham", text) for text in HAM_MESSAGES]
    )


@pytest.fixture
def validation_set() -> list[LabeledMessage]:
    return _messages(VALIDATION)


@pytest.fixture
def holdout_set() -> list[LabeledMessage]:
    return _messages(TEST)


@pytest.fixture
def data_files(tmp_path: Path) -> dict[str, Path]:
    """Train/validation/test TSV files in the ``label<TAB>text`` layout."""
    return {
        "train": _write_tsv(
            tmp_path / "train.tsv",
            [("spam", t) for t in SPAM_MESSAGES] + [("ham", t) for t in HAM_MESSAGES],
        ),
        "validation": _write_tsv(tmp_path / "validation.tsv", VALIDATION),
        "test": _write_tsv(tmp_path / "test.tsv", TEST),
    }


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep host SPAM_BAYES_* settings out of the tests.

    Setting before deleting makes monkeypatch remove anything a test loads
    from a .env file at teardown.
    """
    for name in ("SPAM_BAYES_ALPHAS", "SPAM_BAYES_ALPHA", "SPAM_BAYES_LOG_LEVEL"):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
