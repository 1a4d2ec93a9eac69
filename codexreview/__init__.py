"""
codexreview - Codex suggestion tooling for pull requests

Applies AI-generated code suggestions in CI, runs local Codex reviews over
changed files, and publishes review results as PR comments.
"""

__version__ = "1.0.0"

# Import main components for easier access
from codexreview.models import ApplicationOutcome, ReviewResult, Suggestion
from codexreview.review_orchestrator import LocalReviewOrchestrator
from codexreview.suggestion_applier import LocalFileSystem, SuggestionApplier
from codexreview.suggestion_filter import select_suggestions, should_auto_apply
from codexreview.text_parser import parse_free_text_suggestions

__all__ = [
    "ApplicationOutcome",
    "LocalFileSystem",
    "LocalReviewOrchestrator",
    "ReviewResult",
    "Suggestion",
    "SuggestionApplier",
    "parse_free_text_suggestions",
    "select_suggestions",
    "should_auto_apply",
]
