#!/usr/bin/env python3
"""
Local Codex review of the current branch's changes.
Uses the Codex CLI when installed, otherwise guides a copy-paste review
through the ChatGPT web interface, and saves the results for publishing.
"""

import argparse
import json
import os
import sys
from pathlib import Path
from typing import List, Optional

from codexreview.config import ExecutionContext
from codexreview.constants import (
    EXIT_CONFIGURATION_ERROR,
    EXIT_GENERAL_ERROR,
    EXIT_SUCCESS,
    LATEST_REVIEW_MARKDOWN,
)
from codexreview.errors import ConfigurationError
from codexreview.git_client import CommandRunner, GitClient
from codexreview.github_client import GhCli
from codexreview.logger import get_logger
from codexreview.review_orchestrator import LocalReviewOrchestrator
from codexreview.review_runner import CodexRunner

logger = get_logger(__name__)

DESCRIPTION = """\
Local Codex Review - review code changes without API costs.

Reviews the files changed on the current branch with the Codex CLI if it is
installed, or guides you through the ChatGPT web interface otherwise.
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='codex-local-review',
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('--check', action='store_true', help='Check if the Codex CLI is available')
    parser.add_argument('--mock', action='store_true', help='Use mock data (for testing)')
    return parser


def check_availability(codex_runner: CodexRunner) -> None:
    available, error = codex_runner.validate_available()
    print(f"Codex CLI available: {'✅ Yes' if available else '❌ No'}")
    if not available:
        logger.debug(f"Availability check failed: {error}")
        print('\nTo install Codex CLI:')
        print('  npm install -g @openai/codex-cli')
        print('  codex auth login')


def main(argv: Optional[List[str]] = None):
    """Main execution function for the local review CLI."""
    args = build_parser().parse_args(argv)

    try:
        try:
            context = ExecutionContext.from_env(os.environ, Path.cwd())
        except ConfigurationError as e:
            print(json.dumps({'error': str(e)}))
            sys.exit(EXIT_CONFIGURATION_ERROR)

        runner = CommandRunner(context.working_dir, context.timeout_seconds)
        codex_runner = CodexRunner(runner, context.review_command)

        if args.check:
            check_availability(codex_runner)
            sys.exit(EXIT_SUCCESS)

        orchestrator = LocalReviewOrchestrator(
            context,
            codex_runner,
            GhCli(runner),
            GitClient(runner),
            mock_mode=args.mock,
        )
        orchestrator.run()

        print('\n✨ Review complete!')
        print('Next steps:')
        print(f"  1. Review suggestions in {context.results_dir / LATEST_REVIEW_MARKDOWN}")
        print('  2. Push results: codex-push-results')
        print('  3. Apply fixes as needed')
        sys.exit(EXIT_SUCCESS)

    except Exception as e:
        logger.error(f"Review failed: {e}")
        print(json.dumps({'error': f'Review failed: {str(e)}'}))
        sys.exit(EXIT_GENERAL_ERROR)


if __name__ == '__main__':
    main()
