"""Runner for the external Codex review command line tool."""

from dataclasses import dataclass
from typing import Optional, Tuple

from codexreview.constants import VERSION_CHECK_TIMEOUT
from codexreview.git_client import (
    OUTCOME_ERROR,
    OUTCOME_NOT_FOUND,
    OUTCOME_SUCCESS,
    CommandRunner,
)
from codexreview.json_parser import parse_json_with_fallbacks
from codexreview.logger import get_logger
from codexreview.models import ReviewResult, parse_suggestions

logger = get_logger(__name__)

SOURCE_CLI = 'codex-cli'


@dataclass
class ReviewOutcome:
    """Outcome of one review mechanism for one file."""

    status: str
    result: Optional[ReviewResult] = None
    error: str = ''


class CodexRunner:
    """Invokes ``<command> review --file <path> --format json``."""

    def __init__(self, runner: CommandRunner, command: str = 'codex'):
        self.runner = runner
        self.command = command
        self._available: Optional[bool] = None

    def validate_available(self) -> Tuple[bool, str]:
        """Probe the review tool with ``--version``."""
        outcome = self.runner.run([self.command, '--version'], timeout=VERSION_CHECK_TIMEOUT)
        if outcome.ok:
            return True, ""
        return False, outcome.error_message

    def is_available(self) -> bool:
        """Cached availability check for the duration of one run."""
        if self._available is None:
            self._available, error = self.validate_available()
            if not self._available:
                logger.debug(f"{self.command} unavailable: {error}")
        return self._available

    def review_file(self, file_path: str) -> ReviewOutcome:
        """Review one file.

        Returns:
            SUCCESS with a ReviewResult, NOT_FOUND when the tool is not
            installed, or ERROR when it ran but failed.
        """
        if not self.is_available():
            return ReviewOutcome(OUTCOME_NOT_FOUND, error=f"{self.command} is not available")

        outcome = self.runner.run([self.command, 'review', '--file', file_path, '--format', 'json'])
        if not outcome.ok:
            return ReviewOutcome(OUTCOME_ERROR, error=outcome.error_message)

        success, parsed = parse_json_with_fallbacks(outcome.stdout, f"{self.command} review output")
        if not success or not isinstance(parsed, dict):
            return ReviewOutcome(OUTCOME_ERROR, error="Failed to parse review output")

        return ReviewOutcome(OUTCOME_SUCCESS, ReviewResult(
            file=file_path,
            suggestions=parse_suggestions(parsed.get('suggestions') or []),
            source=SOURCE_CLI,
        ))
