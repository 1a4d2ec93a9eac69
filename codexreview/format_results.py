"""Markdown and text rendering of review and application results."""

from typing import Any, Dict, List, Optional

from codexreview.constants import COMMIT_HEADER, COMMIT_TRAILER
from codexreview.models import ApplicationOutcome, Suggestion

REVIEW_TITLE = "🖥️ Local Codex Review Results"
REVIEW_FOOTER = "*Generated locally with the Codex review tooling*"
COMMENT_FOOTER = "*Review performed locally and posted with codex-push-results*"


def format_commit_message(applied: List[Suggestion]) -> str:
    """Build the commit message listing every applied suggestion."""
    bullets = '\n'.join(f"- {s.label}" for s in applied)
    return (
        f"{COMMIT_HEADER}\n\n"
        f"Applied {len(applied)} suggestion(s):\n"
        f"{bullets}\n\n"
        f"{COMMIT_TRAILER}"
    )


def _format_suggestion_items(suggestions: List[Dict[str, Any]]) -> str:
    lines = []
    for i, s in enumerate(suggestions, 1):
        lines.append(f"{i}. **{s.get('message')}**")
        if s.get('line'):
            lines.append(f"   - Line: {s['line']}")
        lines.append(f"   - Severity: {s.get('severity')}")
        lines.append(f"   - Type: {s.get('type') or 'general'}")
        lines.append("")
    return '\n'.join(lines) + '\n'


def _format_file_sections(results: List[Dict[str, Any]], heading: str) -> str:
    sections = []
    for result in results:
        section = f"{heading} 📄 {result.get('file')}\n\n"
        suggestions = result.get('suggestions') or []
        if not suggestions:
            section += "✅ No issues found\n\n"
        else:
            section += _format_suggestion_items(suggestions)
        sections.append(section)
    return ''.join(sections)


def format_review_markdown(output: Dict[str, Any]) -> str:
    """Render a saved review report as the latest-review.md document.

    Args:
        output: Report dictionary as written to latest-review.json.

    Returns:
        Markdown with one H2 section per reviewed file.
    """
    md = f"# {REVIEW_TITLE}\n\n"
    md += f"**Date**: {output.get('timestamp')}\n"
    md += f"**Mode**: {output.get('mode')}\n"
    md += f"**Files Reviewed**: {output.get('files_reviewed')}\n"
    md += f"**Total Suggestions**: {output.get('total_suggestions')}\n\n"
    md += _format_file_sections(output.get('results') or [], '##')
    md += f"---\n{REVIEW_FOOTER}"
    return md


def format_json_as_comment(data: Dict[str, Any]) -> str:
    """Render review JSON as a PR comment when no Markdown report exists."""
    comment = f"## {REVIEW_TITLE}\n\n"
    comment += f"**Timestamp**: {data.get('timestamp')}\n"
    comment += f"**Mode**: {data.get('mode')}\n"
    comment += f"**Files Reviewed**: {data.get('files_reviewed')}\n"
    comment += f"**Total Suggestions**: {data.get('total_suggestions')}\n\n"
    comment += _format_file_sections(data.get('results') or [], '###')
    comment += f"\n---\n{COMMENT_FOOTER}"
    return comment


def format_application_summary(outcome: ApplicationOutcome) -> str:
    """Render the PR comment posted after applying suggestions."""
    parts = [
        "## 🤖 Codex Suggestions Applied",
        "",
        f"**Applied**: {len(outcome.applied)} suggestion(s)",
        f"**Failed**: {len(outcome.failed)} suggestion(s)",
    ]
    if outcome.commit_sha:
        parts.append(f"**Commit**: {outcome.commit_sha[:7]}")

    if outcome.applied:
        parts.extend(["", "### ✅ Successfully Applied:"])
        parts.extend(f"- {s.label}" for s in outcome.applied)

    if outcome.failed:
        parts.extend(["", "### ❌ Failed to Apply:"])
        parts.extend(f"- {s.label} ({reason})" for s, reason in outcome.failed)

    return '\n'.join(parts) + '\n'


def format_review_summary(results: List[Dict[str, Any]], width: int = 60) -> str:
    """Console summary of a review run."""
    lines = ['', '=' * width, '📊 REVIEW SUMMARY', '=' * width]
    total = 0
    for result in results:
        count = len(result.get('suggestions') or [])
        total += count
        lines.append(f"  {result.get('file')}: {count} suggestion(s) [{result.get('source')}]")
    lines.extend(['', '-' * width, f"Total: {total} suggestions across {len(results)} files", '=' * width])
    return '\n'.join(lines)


def format_pr_link(repository: Optional[str], pr_number: Any) -> str:
    return f"https://github.com/{repository or 'owner/repo'}/pull/{pr_number}"
