#!/usr/bin/env python3
"""
Apply Codex suggestions in a GitHub Actions job.
Selects suggestions by allow-list or auto-apply policy, edits the files,
commits and pushes the result, and reports what happened.
"""

import json
import os
import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

import requests

from codexreview.config import ExecutionContext
from codexreview.constants import (
    DEFAULT_APPLICATION_RESULTS_FILE,
    EXIT_CONFIGURATION_ERROR,
    EXIT_GENERAL_ERROR,
    EXIT_SUCCESS,
)
from codexreview.errors import ConfigurationError
from codexreview.format_results import format_application_summary, format_commit_message
from codexreview.git_client import CommandRunner, GitClient
from codexreview.github_client import GitHubActionClient, pr_number_from_event
from codexreview.logger import get_logger
from codexreview.models import ApplicationOutcome, Suggestion, parse_suggestions
from codexreview.suggestion_applier import LocalFileSystem, SuggestionApplier
from codexreview.suggestion_filter import parse_apply_list, select_suggestions

logger = get_logger(__name__)


@dataclass
class ApplierInputs:
    """Inputs of the apply-suggestions step."""

    suggestions_file: Path
    github_token: str
    apply_list: List[str]
    auto_apply: bool
    results_file: Path


def get_environment_config(cwd: Path) -> ApplierInputs:
    """Get and validate the step inputs from the environment.

    Raises:
        ConfigurationError: If required inputs are missing
    """
    suggestions_file = (os.environ.get('SUGGESTIONS_FILE') or '').strip()
    github_token = (os.environ.get('GITHUB_TOKEN') or '').strip()

    if not suggestions_file:
        raise ConfigurationError('SUGGESTIONS_FILE environment variable required')

    if not github_token:
        raise ConfigurationError('GITHUB_TOKEN environment variable required')

    results_file = os.environ.get('RESULTS_FILE') or DEFAULT_APPLICATION_RESULTS_FILE

    return ApplierInputs(
        suggestions_file=cwd / suggestions_file,
        github_token=github_token,
        apply_list=parse_apply_list(os.environ.get('APPLY_LIST')),
        auto_apply=os.environ.get('AUTO_APPLY', 'false').strip().lower() == 'true',
        results_file=cwd / results_file,
    )


def load_suggestions(path: Path) -> List[Suggestion]:
    """Read the suggestions file.

    A missing file is logged and treated as an empty batch. Malformed JSON
    propagates to the caller.
    """
    if not path.exists():
        logger.warning(f"Suggestions file not found: {path}")
        return []

    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError(f'Suggestions file must contain a JSON object: {path}')

    return parse_suggestions(data.get('suggestions') or [])


def commit_and_push(git: GitClient, outcome: ApplicationOutcome) -> Optional[str]:
    """Commit applied suggestions and try to push; push failures only warn."""
    commit_sha = git.commit_all(format_commit_message(outcome.applied))
    if not commit_sha:
        return None

    push = git.push()
    if push.ok:
        logger.info("Pushed changes to remote")
    else:
        logger.warning(f"Failed to push: {push.error_message}")
    return commit_sha


def write_results(path: Path, outcome: ApplicationOutcome) -> None:
    timestamp = datetime.now(timezone.utc).isoformat()
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(outcome.to_dict(timestamp), f, indent=2)
    logger.info(f"Wrote results to {path}")


def set_outputs(outcome: ApplicationOutcome) -> None:
    """Expose step outputs through the GITHUB_OUTPUT file when present."""
    outputs = {
        'applied-count': len(outcome.applied),
        'failed-count': len(outcome.failed),
        'commit-sha': outcome.commit_sha or '',
    }
    output_file = os.environ.get('GITHUB_OUTPUT')
    if not output_file:
        return
    with open(output_file, 'a', encoding='utf-8') as f:
        for key, value in outputs.items():
            f.write(f"{key}={value}\n")


def post_summary(inputs: ApplierInputs, context: ExecutionContext, outcome: ApplicationOutcome) -> None:
    pr_number = context.pr_number or pr_number_from_event(os.environ.get('GITHUB_EVENT_PATH'))
    if not context.repository or not pr_number:
        logger.debug("No pull request context, skipping summary comment")
        return

    try:
        client = GitHubActionClient(inputs.github_token)
        client.create_issue_comment(context.repository, pr_number, format_application_summary(outcome))
        logger.info(f"Posted summary comment on #{pr_number}")
    except requests.RequestException as e:
        logger.warning(f"Failed to post summary comment: {e}")


def main():
    """Main execution function for the apply-suggestions step."""
    try:
        repo_path = os.environ.get('REPO_PATH')
        cwd = Path(repo_path) if repo_path else Path.cwd()

        try:
            inputs = get_environment_config(cwd)
            context = ExecutionContext.from_env(os.environ, cwd)
        except ConfigurationError as e:
            print(json.dumps({'error': str(e)}))
            sys.exit(EXIT_CONFIGURATION_ERROR)

        suggestions = load_suggestions(inputs.suggestions_file)
        logger.info(f"Processing {len(suggestions)} suggestions")

        to_apply = select_suggestions(suggestions, inputs.apply_list, inputs.auto_apply)
        logger.info(f"Will apply {len(to_apply)} suggestions")

        applier = SuggestionApplier(LocalFileSystem(cwd))
        outcome = applier.apply_all(to_apply)
        logger.info(f"Applied: {len(outcome.applied)}, Failed: {len(outcome.failed)}")

        if outcome.applied:
            git = GitClient(CommandRunner(cwd, context.timeout_seconds))
            outcome.commit_sha = commit_and_push(git, outcome)

        write_results(inputs.results_file, outcome)
        set_outputs(outcome)
        post_summary(inputs, context, outcome)

        print(json.dumps({
            'applied_count': len(outcome.applied),
            'failed_count': len(outcome.failed),
            'commit_sha': outcome.commit_sha or '',
        }, indent=2))
        sys.exit(EXIT_SUCCESS)

    except Exception as e:
        print(json.dumps({'error': f'Action failed: {str(e)}'}))
        sys.exit(EXIT_GENERAL_ERROR)


if __name__ == '__main__':
    main()
