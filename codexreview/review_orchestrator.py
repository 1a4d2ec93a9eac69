"""Local review orchestration over the changed files of a branch."""

import json
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from codexreview.config import ExecutionContext
from codexreview.constants import LATEST_REVIEW_JSON, LATEST_REVIEW_MARKDOWN, WEB_PREVIEW_CHARS
from codexreview.format_results import format_review_markdown, format_review_summary
from codexreview.git_client import OUTCOME_ERROR, OUTCOME_SUCCESS, GitClient
from codexreview.github_client import GhCli, changed_files
from codexreview.logger import get_logger
from codexreview.models import ReviewResult, Suggestion
from codexreview.review_runner import CodexRunner, ReviewOutcome
from codexreview.text_parser import parse_free_text_suggestions

logger = get_logger(__name__)

SOURCE_WEB = 'chatgpt-web'
SOURCE_SKIPPED = 'skipped'
SOURCE_MOCK = 'mock'

WEB_PROMPT_CHECKLIST = [
    "1. Code quality issues",
    "2. Performance improvements",
    "3. Security concerns",
    "4. Best practices",
]


def generate_mock_review(file_path: str) -> ReviewResult:
    """Synthetic review used for testing and when the review tool fails."""
    ext = os.path.splitext(file_path)[1]
    suggestions = []

    if ext in ('.js', '.ts'):
        suggestions.append(Suggestion(
            index=len(suggestions),
            type='refactoring',
            message='Consider using const instead of let for immutable variables',
            line=10,
            severity='info',
        ))

    if ext == '.py':
        suggestions.append(Suggestion(
            index=len(suggestions),
            type='style',
            message='Add type hints for better code documentation',
            severity='info',
        ))

    return ReviewResult(file=file_path, suggestions=suggestions, source=SOURCE_MOCK)


class LocalReviewOrchestrator:
    """Reviews changed files through the CLI, web paste and mock fallbacks."""

    def __init__(
        self,
        context: ExecutionContext,
        codex_runner: CodexRunner,
        gh: GhCli,
        git: GitClient,
        mock_mode: bool = False,
        prompt: Callable[[str], str] = input,
        output: Callable[[str], None] = print,
    ):
        self.context = context
        self.codex_runner = codex_runner
        self.gh = gh
        self.git = git
        self.mock_mode = mock_mode
        self.prompt = prompt
        self.output = output

    def _resolve(self, file_path: str) -> Path:
        return self.context.working_dir / file_path

    def supported_files(self, files: List[str]) -> List[str]:
        extensions = tuple(f".{ext}" for ext in self.context.extensions)
        return [f for f in files if f.endswith(extensions)]

    def _review_with_cli(self, file_path: str) -> ReviewOutcome:
        return self.codex_runner.review_file(file_path)

    def _review_with_web(self, file_path: str) -> ReviewOutcome:
        """Print a copy-paste prompt and wait for the pasted response.

        An empty answer or closed stdin is an explicit skip.
        """
        logger.warning(f"{self.codex_runner.command} CLI not found, using ChatGPT web fallback")
        try:
            content = self._resolve(file_path).read_text(encoding='utf-8')
        except (OSError, UnicodeError) as e:
            return ReviewOutcome(OUTCOME_ERROR, error=f"Failed to read {file_path}: {e}")

        line_count = len(content.split('\n'))
        rule = '=' * 60
        self.output(f"\n{rule}")
        self.output("📋 COPY THIS TO CHATGPT:")
        self.output(rule)
        self.output(f"Please review this {os.path.splitext(file_path)[1]} file for:")
        for item in WEB_PROMPT_CHECKLIST:
            self.output(item)
        self.output(f"\nFile: {file_path} ({line_count} lines)")
        self.output('-' * 40)
        self.output(content[:WEB_PREVIEW_CHARS])
        if len(content) > WEB_PREVIEW_CHARS:
            self.output(f"\n... ({len(content) - WEB_PREVIEW_CHARS} more characters)")
        self.output(rule)
        self.output("Then paste the response when prompted.\n")

        try:
            response = self.prompt("Paste ChatGPT response (or press Enter to skip): ")
        except EOFError:
            response = ''

        if not response.strip():
            return ReviewOutcome(OUTCOME_SUCCESS, ReviewResult(file=file_path, source=SOURCE_SKIPPED))

        return ReviewOutcome(OUTCOME_SUCCESS, ReviewResult(
            file=file_path,
            suggestions=parse_free_text_suggestions(response),
            source=SOURCE_WEB,
        ))

    def review_file(self, file_path: str) -> Optional[ReviewResult]:
        """Review one file, or return None when it does not exist.

        Mechanisms are tried in order until one succeeds. A mechanism that
        is unavailable passes to the next one; a mechanism that fails
        falls back to the mock review.
        """
        self.output(f"  📄 Reviewing: {file_path}")
        if not self._resolve(file_path).is_file():
            logger.warning(f"File not found, skipping: {file_path}")
            return None

        chain = [] if self.mock_mode else [self._review_with_cli, self._review_with_web]
        for reviewer in chain:
            outcome = reviewer(file_path)
            if outcome.status == OUTCOME_SUCCESS:
                return outcome.result
            if outcome.status == OUTCOME_ERROR:
                logger.warning(f"Review failed for {file_path}: {outcome.error}")
                break

        return generate_mock_review(file_path)

    def build_report(self, results: List[ReviewResult], timestamp: Optional[str] = None) -> Dict[str, Any]:
        serialized = [r.to_dict() for r in results]
        return {
            'timestamp': timestamp or datetime.now(timezone.utc).isoformat(),
            'mode': 'mock' if self.mock_mode else 'local',
            'files_reviewed': len(serialized),
            'total_suggestions': sum(len(r['suggestions']) for r in serialized),
            'results': serialized,
        }

    def save_results(self, report: Dict[str, Any]) -> Dict[str, Path]:
        """Write the JSON report and its Markdown rendering."""
        self.context.results_dir.mkdir(parents=True, exist_ok=True)

        json_path = self.context.results_dir / LATEST_REVIEW_JSON
        with open(json_path, 'w', encoding='utf-8') as f:
            json.dump(report, f, indent=2, ensure_ascii=False)

        md_path = self.context.results_dir / LATEST_REVIEW_MARKDOWN
        with open(md_path, 'w', encoding='utf-8') as f:
            f.write(format_review_markdown(report))

        logger.info(f"Saved review results to {json_path} and {md_path}")
        return {'json': json_path, 'markdown': md_path}

    def run(self) -> Optional[Dict[str, Any]]:
        """Review every supported changed file and save the report.

        Returns:
            The saved report, or None when there was nothing to review.
        """
        self.output("🔍 Local Codex Review\n")

        files = changed_files(self.gh, self.git, self.context.base_branch)
        supported = self.supported_files(files)
        if not supported:
            self.output("No supported files to review.")
            return None

        self.output(f"Found {len(supported)} files to review:\n")

        results = []
        for file_path in supported:
            result = self.review_file(file_path)
            if result is not None:
                results.append(result)

        report = self.build_report(results)
        paths = self.save_results(report)
        self.output("\n✅ Results saved to:")
        self.output(f"   JSON: {paths['json']}")
        self.output(f"   Markdown: {paths['markdown']}")
        self.output(format_review_summary(report['results']))
        return report
