"""Pull-request host collaborators: the GitHub REST API and the gh CLI."""

import json
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import requests

from codexreview.git_client import CommandOutcome, CommandRunner, GitClient, split_name_only
from codexreview.logger import get_logger

logger = get_logger(__name__)

GITHUB_API_URL = "https://api.github.com"
PR_BRANCH_PATTERN = re.compile(r'pr[/-]?(\d+)', re.IGNORECASE)


class GitHubActionClient:
    """Minimal GitHub REST client for posting comments from an Action."""

    def __init__(self, github_token: str, api_url: str = GITHUB_API_URL):
        if not github_token:
            raise ValueError("GitHub token required")

        self.github_token = github_token
        self.api_url = api_url.rstrip('/')
        self.headers = {
            'Authorization': f'Bearer {self.github_token}',
            'Accept': 'application/vnd.github.v3+json',
            'X-GitHub-Api-Version': '2022-11-28'
        }

    def create_issue_comment(self, repo_name: str, issue_number: int, body: str) -> Dict[str, Any]:
        """Post a comment on an issue or pull request.

        Args:
            repo_name: Repository name in format "owner/repo"
            issue_number: Issue or pull request number
            body: Markdown comment body

        Returns:
            The created comment as returned by the API

        Raises:
            requests.RequestException: If the API call fails
        """
        url = f"{self.api_url}/repos/{repo_name}/issues/{issue_number}/comments"
        response = requests.post(url, headers=self.headers, json={'body': body}, timeout=30)
        response.raise_for_status()
        return response.json()


class GhCli:
    """Wrapper around the ``gh`` command line tool."""

    def __init__(self, runner: CommandRunner):
        self.runner = runner

    def pr_diff_names(self) -> CommandOutcome:
        return self.runner.run(['gh', 'pr', 'diff', '--name-only'])

    def current_pr_number(self) -> Optional[int]:
        outcome = self.runner.run(['gh', 'pr', 'view', '--json', 'number'])
        if not outcome.ok:
            logger.debug(f"gh pr view failed: {outcome.error_message}")
            return None
        try:
            number = json.loads(outcome.stdout).get('number')
            return int(number) if number is not None else None
        except (ValueError, TypeError, AttributeError):
            logger.debug(f"Unexpected gh pr view output: {outcome.stdout[:200]}")
            return None

    def comment_from_file(self, pr_number: int, body_file: Path) -> CommandOutcome:
        return self.runner.run(['gh', 'pr', 'comment', str(pr_number), '--body-file', str(body_file)])


def pr_number_from_branch(branch: Optional[str]) -> Optional[int]:
    """Extract a PR number from branch names like ``pr-123`` or ``PR/45``."""
    if not branch:
        return None
    match = PR_BRANCH_PATTERN.search(branch)
    return int(match.group(1)) if match else None


def detect_pr_number(gh: GhCli, git: GitClient) -> Optional[int]:
    """Find the current PR via gh, falling back to the branch name."""
    number = gh.current_pr_number()
    if number is not None:
        return number
    return pr_number_from_branch(git.current_branch())


def changed_files(gh: GhCli, git: GitClient, base_branch: str) -> List[str]:
    """List changed files, trying PR diff, branch diff, then previous commit.

    The first source that yields at least one file wins.
    """
    sources = [
        ('pull request diff', gh.pr_diff_names),
        (f'diff against {base_branch}', lambda: git.diff_names_against_branch(base_branch)),
        ('previous commit diff', git.diff_names_previous_commit),
    ]
    for name, source in sources:
        outcome = source()
        if not outcome.ok:
            logger.debug(f"Changed files from {name} unavailable: {outcome.error_message}")
            continue
        files = split_name_only(outcome.stdout)
        if files:
            logger.info(f"Found {len(files)} changed file(s) from {name}")
            return files
    return []


def pr_number_from_event(event_path: Optional[str]) -> Optional[int]:
    """Read the PR or issue number from a GitHub Actions event payload."""
    if not event_path or not Path(event_path).is_file():
        return None
    try:
        with open(event_path, 'r', encoding='utf-8') as f:
            event = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning(f"Failed to read event payload {event_path}: {e}")
        return None

    for key in ('pull_request', 'issue'):
        entry = event.get(key) if isinstance(event, dict) else None
        if isinstance(entry, dict) and entry.get('number') is not None:
            try:
                return int(entry['number'])
            except (TypeError, ValueError):
                return None
    return None
