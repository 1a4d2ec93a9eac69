#!/usr/bin/env python3
"""
Post local Codex review results as a comment on a GitHub pull request.
"""

import argparse
import json
import os
import sys
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from codexreview.config import ExecutionContext
from codexreview.constants import (
    COMMENT_TEMP_FILE,
    EXIT_CONFIGURATION_ERROR,
    EXIT_GENERAL_ERROR,
    EXIT_SUCCESS,
    LATEST_REVIEW_JSON,
    LATEST_REVIEW_MARKDOWN,
)
from codexreview.errors import ConfigurationError, ResultsNotFoundError
from codexreview.format_results import format_json_as_comment, format_pr_link
from codexreview.git_client import CommandRunner, GitClient
from codexreview.github_client import GhCli, detect_pr_number
from codexreview.logger import get_logger

logger = get_logger(__name__)

EPILOG = """\
Examples:
  codex-push-results
  codex-push-results --pr 123
  codex-push-results --interactive

This tool posts local Codex review results as a comment on the GitHub PR.
"""


class ResultsPublisher:
    """Loads the latest review artifact and posts it with ``gh``."""

    def __init__(self, results_dir: Path, gh: GhCli, git: GitClient):
        self.results_dir = results_dir
        self.gh = gh
        self.git = git

    def get_latest_results(self) -> Tuple[str, str]:
        """Return (format, comment body), preferring the Markdown report.

        Raises:
            ResultsNotFoundError: If neither artifact exists
        """
        md_path = self.results_dir / LATEST_REVIEW_MARKDOWN
        json_path = self.results_dir / LATEST_REVIEW_JSON

        if md_path.exists():
            return 'markdown', md_path.read_text(encoding='utf-8')

        if json_path.exists():
            with open(json_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            return 'json', format_json_as_comment(data)

        raise ResultsNotFoundError('No review results found. Run codex-local-review first.')

    def resolve_pr_number(self, explicit: Optional[int] = None) -> Optional[int]:
        if explicit is not None:
            return explicit
        return detect_pr_number(self.gh, self.git)

    def post(self, pr_number: int, body: str) -> Tuple[bool, str]:
        """Post the body through a temporary file, always removing it."""
        self.results_dir.mkdir(parents=True, exist_ok=True)
        temp_file = self.results_dir / COMMENT_TEMP_FILE
        temp_file.write_text(body, encoding='utf-8')
        try:
            outcome = self.gh.comment_from_file(pr_number, temp_file)
        finally:
            temp_file.unlink(missing_ok=True)

        if not outcome.ok:
            return False, outcome.error_message
        return True, ""

    def push_results(self, pr_number: Optional[int] = None) -> int:
        """Publish the latest results and return the process exit code."""
        print('📤 Pushing Codex results to GitHub...\n')

        pr = self.resolve_pr_number(pr_number)
        if not pr:
            print('❌ Could not determine PR number.')
            print('\nOptions:')
            print('  1. Run from a PR branch')
            print('  2. Specify PR number: codex-push-results --pr 123')
            print(f'  3. Manually post results from {self.results_dir / LATEST_REVIEW_MARKDOWN}')
            return EXIT_GENERAL_ERROR

        print(f'📌 Target PR: #{pr}')

        try:
            result_format, content = self.get_latest_results()
        except ResultsNotFoundError as e:
            print(f'❌ {e}')
            return EXIT_GENERAL_ERROR
        logger.debug(f"Loaded {result_format} results")

        success, error = self.post(pr, content)
        if not success:
            logger.warning(f"Failed to post comment: {error}")
            print(f'❌ Failed to post comment: {error}')
            print('\nAlternative: Copy the content from:')
            print(f'  {self.results_dir / LATEST_REVIEW_MARKDOWN}')
            print('And manually post it as a PR comment.')
            return EXIT_GENERAL_ERROR

        print(f'\n✅ Results posted to PR #{pr}')
        print(f'🔗 View at: {format_pr_link(self.git.repository_slug(), pr)}')
        return EXIT_SUCCESS

    def interactive_push(self, prompt: Callable[[str], str] = input) -> int:
        """Ask for the PR number, defaulting to the detected one."""
        current = self.resolve_pr_number()
        question = f'Enter PR number (default: {current}): ' if current else 'Enter PR number: '
        try:
            answer = prompt(question).strip()
        except EOFError:
            answer = ''

        if not answer:
            if not current:
                print('❌ PR number is required')
                return EXIT_GENERAL_ERROR
            return self.push_results(current)

        try:
            return self.push_results(int(answer))
        except ValueError:
            print(f'❌ Invalid PR number: {answer}')
            return EXIT_GENERAL_ERROR


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='codex-push-results',
        description='Push Codex Results to GitHub PR',
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('--pr', type=int, metavar='NUMBER', help='Specify PR number explicitly')
    parser.add_argument('--interactive', action='store_true', help='Ask for PR number interactively')
    return parser


def main(argv: Optional[List[str]] = None):
    """Main execution function for publishing review results."""
    args = build_parser().parse_args(argv)

    try:
        try:
            context = ExecutionContext.from_env(os.environ, Path.cwd())
        except ConfigurationError as e:
            print(json.dumps({'error': str(e)}))
            sys.exit(EXIT_CONFIGURATION_ERROR)

        runner = CommandRunner(context.working_dir, context.timeout_seconds)
        publisher = ResultsPublisher(context.results_dir, GhCli(runner), GitClient(runner))

        if args.pr is not None:
            exit_code = publisher.push_results(args.pr)
        elif args.interactive:
            exit_code = publisher.interactive_push()
        else:
            exit_code = publisher.push_results(context.pr_number)
        sys.exit(exit_code)

    except Exception as e:
        print(json.dumps({'error': f'Unexpected error: {str(e)}'}))
        sys.exit(EXIT_GENERAL_ERROR)


if __name__ == '__main__':
    main()
