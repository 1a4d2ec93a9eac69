"""Process execution and the git collaborator."""

import re
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from codexreview.constants import (
    BOT_USER_EMAIL,
    BOT_USER_NAME,
    SUBPROCESS_TIMEOUT,
)
from codexreview.logger import get_logger

logger = get_logger(__name__)

OUTCOME_SUCCESS = 'success'
OUTCOME_NOT_FOUND = 'not_found'
OUTCOME_ERROR = 'error'


@dataclass
class CommandOutcome:
    """Result of one external process call."""

    status: str
    stdout: str = ''
    stderr: str = ''
    returncode: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.status == OUTCOME_SUCCESS

    @property
    def error_message(self) -> str:
        if self.status == OUTCOME_NOT_FOUND:
            return self.stderr or 'command not found'
        details = (self.stderr or self.stdout).strip()
        if self.returncode is not None:
            return f"exit code {self.returncode}: {details}" if details else f"exit code {self.returncode}"
        return details


class CommandRunner:
    """Runs external commands, converting every failure into an outcome."""

    def __init__(self, cwd: Optional[Path] = None, timeout_seconds: int = SUBPROCESS_TIMEOUT):
        self.cwd = cwd
        self.timeout_seconds = timeout_seconds

    def run(self, cmd: Sequence[str], timeout: Optional[int] = None) -> CommandOutcome:
        try:
            result = subprocess.run(
                list(cmd),
                cwd=self.cwd,
                capture_output=True,
                text=True,
                encoding='utf-8',
                errors='replace',
                timeout=timeout or self.timeout_seconds
            )
        except FileNotFoundError:
            return CommandOutcome(OUTCOME_NOT_FOUND, stderr=f"{cmd[0]} is not installed or not in PATH")
        except subprocess.TimeoutExpired:
            return CommandOutcome(OUTCOME_ERROR, stderr=f"{cmd[0]} timed out after {timeout or self.timeout_seconds} seconds")
        except OSError as e:
            return CommandOutcome(OUTCOME_ERROR, stderr=str(e))

        if result.returncode != 0:
            return CommandOutcome(OUTCOME_ERROR, result.stdout, result.stderr, result.returncode)
        return CommandOutcome(OUTCOME_SUCCESS, result.stdout, result.stderr, result.returncode)


def split_name_only(output: str) -> List[str]:
    return [line.strip() for line in output.split('\n') if line.strip()]


class GitClient:
    """Version-control operations used by the three entry points."""

    def __init__(self, runner: CommandRunner):
        self.runner = runner

    def _git(self, *args: str) -> CommandOutcome:
        return self.runner.run(['git', *args])

    def stage_all(self) -> CommandOutcome:
        return self._git('add', '-A')

    def configure_identity(self, name: str = BOT_USER_NAME, email: str = BOT_USER_EMAIL) -> CommandOutcome:
        outcome = self._git('config', 'user.name', name)
        if not outcome.ok:
            return outcome
        return self._git('config', 'user.email', email)

    def commit(self, message: str) -> CommandOutcome:
        return self._git('commit', '-m', message)

    def push(self) -> CommandOutcome:
        return self._git('push')

    def head_sha(self) -> Optional[str]:
        outcome = self._git('rev-parse', 'HEAD')
        return outcome.stdout.strip() if outcome.ok and outcome.stdout.strip() else None

    def diff_names_against_branch(self, base_branch: str) -> CommandOutcome:
        return self._git('diff', f'{base_branch}...HEAD', '--name-only')

    def diff_names_previous_commit(self) -> CommandOutcome:
        return self._git('diff', 'HEAD~1', '--name-only')

    def current_branch(self) -> Optional[str]:
        outcome = self._git('branch', '--show-current')
        return outcome.stdout.strip() if outcome.ok and outcome.stdout.strip() else None

    def remote_url(self, remote: str = 'origin') -> Optional[str]:
        outcome = self._git('remote', 'get-url', remote)
        return outcome.stdout.strip() if outcome.ok and outcome.stdout.strip() else None

    def repository_slug(self) -> Optional[str]:
        """Return ``owner/repo`` parsed from the GitHub origin URL."""
        url = self.remote_url()
        if not url:
            return None
        match = re.search(r'github\.com[:/]([^/]+/[^/\s]+?)(?:\.git)?/?$', url)
        return match.group(1) if match else None

    def commit_all(self, message: str) -> Optional[str]:
        """Stage everything and commit it under the bot identity.

        Returns:
            The new commit SHA, or None when any step failed.
        """
        outcome = self.stage_all()
        if not outcome.ok:
            logger.warning(f"Failed to stage changes: {outcome.error_message}")
            return None

        outcome = self.configure_identity()
        if not outcome.ok:
            logger.warning(f"Failed to configure git identity: {outcome.error_message}")
            return None

        outcome = self.commit(message)
        if not outcome.ok:
            logger.warning(f"Failed to create commit: {outcome.error_message}")
            return None

        sha = self.head_sha()
        if sha:
            logger.info(f"Created commit: {sha}")
        else:
            logger.warning("Commit created but HEAD could not be resolved")
        return sha
