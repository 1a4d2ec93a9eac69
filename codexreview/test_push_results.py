#!/usr/bin/env python3
"""Unit tests for ResultsPublisher and the push-results entry point."""

import json
import os
from unittest.mock import Mock, patch

import pytest

from codexreview.errors import ResultsNotFoundError
from codexreview.git_client import OUTCOME_ERROR, OUTCOME_SUCCESS, CommandOutcome
from codexreview.push_results import ResultsPublisher, main


@pytest.fixture
def results_dir(tmp_path):
    path = tmp_path / ".codex-results"
    path.mkdir()
    return path


def _publisher(results_dir, pr_number=None, comment_outcome=None):
    gh = Mock()
    gh.current_pr_number.return_value = pr_number
    gh.comment_from_file.return_value = comment_outcome or CommandOutcome(OUTCOME_SUCCESS)
    git = Mock()
    git.current_branch.return_value = "main"
    git.repository_slug.return_value = "owner/repo"
    return ResultsPublisher(results_dir, gh, git), gh


class TestGetLatestResults:
    def test_prefers_markdown(self, results_dir):
        (results_dir / "latest-review.md").write_text("# Report", encoding="utf-8")
        (results_dir / "latest-review.json").write_text("{}", encoding="utf-8")
        publisher, _ = _publisher(results_dir)

        assert publisher.get_latest_results() == ("markdown", "# Report")

    def test_falls_back_to_json(self, results_dir):
        data = {"timestamp": "t", "mode": "local", "files_reviewed": 1, "total_suggestions": 0,
                "results": [{"file": "a.py", "suggestions": [], "source": "mock"}]}
        (results_dir / "latest-review.json").write_text(json.dumps(data), encoding="utf-8")
        publisher, _ = _publisher(results_dir)

        result_format, content = publisher.get_latest_results()

        assert result_format == "json"
        assert "### 📄 a.py" in content

    def test_no_results(self, results_dir):
        publisher, _ = _publisher(results_dir)
        with pytest.raises(ResultsNotFoundError):
            publisher.get_latest_results()


class TestPushResults:
    def test_posts_and_removes_temp_file(self, results_dir, capsys):
        (results_dir / "latest-review.md").write_text("# Report", encoding="utf-8")
        publisher, gh = _publisher(results_dir)

        posted = {}

        def capture(pr, body_file):
            posted["body"] = body_file.read_text(encoding="utf-8")
            return CommandOutcome(OUTCOME_SUCCESS)

        gh.comment_from_file.side_effect = capture

        assert publisher.push_results(12) == 0
        assert posted["body"] == "# Report"
        assert not (results_dir / "comment.tmp").exists()
        out = capsys.readouterr().out
        assert "Results posted to PR #12" in out
        assert "https://github.com/owner/repo/pull/12" in out

    def test_auto_detects_pr(self, results_dir):
        (results_dir / "latest-review.md").write_text("# Report", encoding="utf-8")
        publisher, gh = _publisher(results_dir, pr_number=77)

        assert publisher.push_results() == 0
        assert gh.comment_from_file.call_args[0][0] == 77

    def test_no_pr_number(self, results_dir, capsys):
        publisher, gh = _publisher(results_dir)

        assert publisher.push_results() == 1
        assert "Could not determine PR number" in capsys.readouterr().out
        gh.comment_from_file.assert_not_called()

    def test_missing_results(self, results_dir, capsys):
        publisher, _ = _publisher(results_dir)

        assert publisher.push_results(3) == 1
        assert "No review results found" in capsys.readouterr().out

    def test_comment_failure(self, results_dir, capsys):
        (results_dir / "latest-review.md").write_text("# Report", encoding="utf-8")
        publisher, _ = _publisher(
            results_dir, comment_outcome=CommandOutcome(OUTCOME_ERROR, stderr="HTTP 404", returncode=1),
        )

        assert publisher.push_results(3) == 1
        assert "manually post it" in capsys.readouterr().out
        assert not (results_dir / "comment.tmp").exists()


class TestInteractivePush:
    def test_uses_default_on_empty_answer(self, results_dir):
        (results_dir / "latest-review.md").write_text("# Report", encoding="utf-8")
        publisher, gh = _publisher(results_dir, pr_number=5)
        questions = []

        def prompt(question):
            questions.append(question)
            return ""

        assert publisher.interactive_push(prompt) == 0
        assert questions == ["Enter PR number (default: 5): "]
        assert gh.comment_from_file.call_args[0][0] == 5

    def test_explicit_answer(self, results_dir):
        (results_dir / "latest-review.md").write_text("# Report", encoding="utf-8")
        publisher, gh = _publisher(results_dir, pr_number=5)

        assert publisher.interactive_push(lambda _: " 9 ") == 0
        assert gh.comment_from_file.call_args[0][0] == 9

    def test_required_without_default(self, results_dir, capsys):
        publisher, _ = _publisher(results_dir)

        assert publisher.interactive_push(lambda _: "") == 1
        assert "PR number is required" in capsys.readouterr().out

    def test_invalid_answer(self, results_dir, capsys):
        publisher, _ = _publisher(results_dir)

        assert publisher.interactive_push(lambda _: "abc") == 1
        assert "Invalid PR number" in capsys.readouterr().out


class TestMain:
    @patch("codexreview.push_results.ResultsPublisher")
    def test_explicit_pr_flag(self, mock_publisher_class, tmp_path):
        mock_publisher_class.return_value.push_results.return_value = 0

        with patch.dict(os.environ, {}, clear=True), patch("pathlib.Path.cwd", return_value=tmp_path):
            with pytest.raises(SystemExit) as exc_info:
                main(["--pr", "123"])

        assert exc_info.value.code == 0
        mock_publisher_class.return_value.push_results.assert_called_once_with(123)

    @patch("codexreview.push_results.ResultsPublisher")
    def test_interactive_flag(self, mock_publisher_class, tmp_path):
        mock_publisher_class.return_value.interactive_push.return_value = 1

        with patch.dict(os.environ, {}, clear=True), patch("pathlib.Path.cwd", return_value=tmp_path):
            with pytest.raises(SystemExit) as exc_info:
                main(["--interactive"])

        assert exc_info.value.code == 1

    def test_help(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--help"])

        assert exc_info.value.code == 0
        out = capsys.readouterr().out
        assert "--pr" in out
        assert "--interactive" in out
