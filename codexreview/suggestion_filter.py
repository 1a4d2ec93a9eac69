"""Selection of the suggestions to apply in one run."""

from typing import Iterable, List, Optional, Sequence

from codexreview.constants import AUTO_APPLY_MIN_CONFIDENCE, AUTO_APPLY_RISK_LEVEL
from codexreview.models import Suggestion


def parse_apply_list(value: Optional[str]) -> List[str]:
    """Split a comma-separated list of suggestion ids."""
    if not value:
        return []
    return [item.strip() for item in value.split(',') if item.strip()]


def should_auto_apply(suggestion: Suggestion, auto_apply_enabled: bool) -> bool:
    """Return True for low-risk, high-confidence, non-breaking suggestions.

    A missing risk or confidence fails the gate; a missing
    ``breaking_change`` counts as not breaking.
    """
    if not auto_apply_enabled:
        return False

    is_low_risk = suggestion.risk == AUTO_APPLY_RISK_LEVEL
    is_high_confidence = (
        suggestion.confidence is not None
        and suggestion.confidence >= AUTO_APPLY_MIN_CONFIDENCE
    )
    is_not_breaking = suggestion.breaking_change is not True

    return is_low_risk and is_high_confidence and is_not_breaking


def select_suggestions(
    suggestions: Sequence[Suggestion],
    apply_list: Iterable[str],
    auto_apply: bool,
) -> List[Suggestion]:
    """Pick the ordered subset of suggestions to attempt.

    A non-empty allow-list selects by id and ignores the auto-apply flag.
    Allow-list entries that match nothing are ignored.
    """
    allowed = set(apply_list)
    if allowed:
        return [s for s in suggestions if s.suggestion_id in allowed]

    return [s for s in suggestions if should_auto_apply(s, auto_apply)]
