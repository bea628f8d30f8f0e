"""Tests for the spam-bayes command-line interface."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from spam_bayes.cli import load_messages, main
from spam_bayes.errors import InvalidLabelError
from spam_bayes.models import Label


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


class TestLoadMessages:
    """Tests for reading label<TAB>text files."""

    def test_reads_records(self, data_files):
        messages = load_messages(data_files["train"])
        assert len(messages) == 9
        assert messages[0].label is Label.SPAM
        assert messages[0].text.startswith("WINNER!!")

    def test_labels_case_insensitive_and_blank_lines_skipped(self, tmp_path):
        path = tmp_path / "mixed.tsv"
        path.write_text("SPAM\tWin now\n\nHam\tsee you\r\n", encoding="utf-8")
        messages = load_messages(path)
        assert [m.label for m in messages] == [Label.SPAM, Label.HAM]
        assert messages[1].text == "see you"

    def test_text_may_contain_tabs(self, tmp_path):
        path = tmp_path / "tabs.tsv"
        path.write_text("ham\tcol a\tcol b\n", encoding="utf-8")
        assert load_messages(path)[0].text == "col a\tcol b"

    def test_bad_label_names_line(self, tmp_path):
        path = tmp_path / "bad.tsv"
        path.write_text("spam\tok\njunk\tnope\n", encoding="utf-8")
        with pytest.raises(InvalidLabelError, match="bad.tsv:2") as excinfo:
            load_messages(path)
        assert excinfo.value.label == "junk"
        assert excinfo.value.location.endswith("bad.tsv:2")
        assert str(excinfo.value).endswith("Invalid label 'junk': expected 'spam' or 'ham'")

    def test_missing_tab_rejected(self, tmp_path):
        path = tmp_path / "notab.tsv"
        path.write_text("spam win money\n", encoding="utf-8")
        with pytest.raises(InvalidLabelError, match="notab.tsv:1"):
            load_messages(path)


class TestTuneCommand:
    """Tests for `spam-bayes tune`."""

    def test_json_output(self, runner, data_files):
        result = runner.invoke(main, [
            "tune", str(data_files["train"]), str(data_files["validation"]),
            "--test", str(data_files["test"]), "--output", "json",
        ])
        assert result.exit_code == 0, result.output
        payload = json.loads(result.output)
        assert payload["best_alpha"] == 0.1
        assert len(payload["accuracy_table"]) == 10
        assert payload["test"]["accuracy"] == 1.0
        assert sum(payload["test"]["support"].values()) == 3

    def test_custom_alphas(self, runner, data_files):
        result = runner.invoke(main, [
            "tune", str(data_files["train"]), str(data_files["validation"]),
            "--alphas", "0.5,0.2", "-o", "json",
        ])
        assert result.exit_code == 0, result.output
        payload = json.loads(result.output)
        assert [row["alpha"] for row in payload["accuracy_table"]] == [0.5, 0.2]
        assert payload["best_alpha"] == 0.5
        assert "test" not in payload

    def test_alphas_from_environment(self, runner, data_files, monkeypatch):
        monkeypatch.setenv("SPAM_BAYES_ALPHAS", "0.8,0.9")
        result = runner.invoke(main, [
            "tune", str(data_files["train"]), str(data_files["validation"]), "-o", "json",
        ])
        assert result.exit_code == 0, result.output
        payload = json.loads(result.output)
        assert [row["alpha"] for row in payload["accuracy_table"]] == [0.8, 0.9]

    def test_rich_output(self, runner, data_files):
        result = runner.invoke(main, [
            "tune", str(data_files["train"]), str(data_files["validation"]),
            "--test", str(data_files["test"]),
        ])
        assert result.exit_code == 0, result.output
        assert "Selected alpha" in result.output
        assert "Test set" in result.output

    def test_bad_alphas_option(self, runner, data_files):
        result = runner.invoke(main, [
            "tune", str(data_files["train"]), str(data_files["validation"]),
            "--alphas", "0.1,x",
        ])
        assert result.exit_code == 2

    @pytest.mark.parametrize("alphas", ["-0.5", ",", "0.1,nan"])
    def test_invalid_alphas_rejected(self, runner, data_files, alphas):
        result = runner.invoke(main, [
            "tune", str(data_files["train"]), str(data_files["validation"]),
            "--alphas", alphas,
        ])
        assert result.exit_code == 2, result.output
        assert "--alphas" in result.output
        assert not isinstance(result.exception, ValueError)

    def test_empty_validation_fails(self, runner, data_files, tmp_path):
        empty = tmp_path / "empty.tsv"
        empty.write_text("", encoding="utf-8")
        result = runner.invoke(main, ["tune", str(data_files["train"]), str(empty)])
        assert result.exit_code == 1
        assert "Validation set is empty" in result.output

    def test_bad_label_fails(self, runner, data_files, tmp_path):
        bad = tmp_path / "bad.tsv"
        bad.write_text("spam\twin\neggs\tbacon\n", encoding="utf-8")
        result = runner.invoke(main, ["tune", str(bad), str(data_files["validation"])])
        assert result.exit_code == 1
        assert "Error" in result.output


class TestClassifyCommand:
    """Tests for `spam-bayes classify`."""

    def test_json_output(self, runner, data_files):
        result = runner.invoke(main, [
            "classify", str(data_files["train"]),
            "Claim your FREE prize now!", "see you at home tomorrow",
            "-o", "json",
        ])
        assert result.exit_code == 0, result.output
        payload = json.loads(result.output)
        assert [r["label"] for r in payload] == ["spam", "ham"]

    def test_rich_output(self, runner, data_files):
        result = runner.invoke(main, [
            "classify", str(data_files["train"]), "--alpha", "0.5", "win a cash prize",
        ])
        assert result.exit_code == 0, result.output
        assert "SPAM" in result.output

    def test_requires_text(self, runner, data_files):
        result = runner.invoke(main, ["classify", str(data_files["train"])])
        assert result.exit_code == 2

    def test_negative_alpha_rejected(self, runner, data_files):
        result = runner.invoke(main, [
            "classify", str(data_files["train"]), "--alpha", "-1", "hello",
        ])
        assert result.exit_code == 2

    def test_single_class_training_fails(self, runner, tmp_path):
        train = tmp_path / "spam_only.tsv"
        train.write_text("spam\twin money\n", encoding="utf-8")
        result = runner.invoke(main, ["classify", str(train), "hello"])
        assert result.exit_code == 1
        assert "no ham messages" in result.output


class TestInspectCommand:
    """Tests for `spam-bayes inspect`."""

    def test_shows_statistics(self, runner, data_files):
        result = runner.invoke(main, ["inspect", str(data_files["train"]), "--top", "5"])
        assert result.exit_code == 0, result.output
        assert "Vocabulary: 56" in result.output
        assert "claim" in result.output

    def test_ham_label(self, runner, data_files):
        result = runner.invoke(main, ["inspect", str(data_files["train"]), "-l", "ham"])
        assert result.exit_code == 0, result.output
        assert "Most indicative ham tokens" in result.output
