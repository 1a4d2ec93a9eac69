"""Record types for suggestions, review results and application outcomes."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from codexreview.logger import get_logger

logger = get_logger(__name__)


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def _optional_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _optional_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class Suggestion:
    """A proposed code change or remark, validated once when read."""

    index: int = 0
    id: Optional[str] = None
    file: Optional[str] = None
    line_start: Optional[int] = None
    line_end: Optional[int] = None
    line: Optional[int] = None
    original_code: Optional[str] = None
    suggested_code: Optional[str] = None
    message: Optional[str] = None
    type: Optional[str] = None
    severity: Optional[str] = None
    confidence: Optional[float] = None
    risk: Optional[str] = None
    breaking_change: Optional[bool] = None
    source: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any], index: int = 0) -> "Suggestion":
        impact = data.get('impact')
        risk = impact.get('risk') if isinstance(impact, dict) else None
        breaking = data.get('breaking_change')

        return cls(
            index=index,
            id=_optional_str(data.get('id')) or None,
            file=_optional_str(data.get('file')) or None,
            line_start=_optional_int(data.get('line_start')),
            line_end=_optional_int(data.get('line_end')),
            line=_optional_int(data.get('line')),
            original_code=_optional_str(data.get('original_code')) or None,
            suggested_code=_optional_str(data.get('suggested_code')) or None,
            message=_optional_str(data.get('message')),
            type=_optional_str(data.get('type')),
            severity=_optional_str(data.get('severity')),
            confidence=_optional_float(data.get('confidence')),
            risk=_optional_str(risk),
            breaking_change=breaking if isinstance(breaking, bool) else None,
            source=_optional_str(data.get('source')),
        )

    @property
    def suggestion_id(self) -> str:
        """Explicit id, or a positional id synthesized from the input order."""
        return self.id or f"suggestion-{self.index}"

    @property
    def has_line_range(self) -> bool:
        return (
            self.line_start is not None
            and self.line_end is not None
            and self.line_start >= 1
            and self.line_end >= self.line_start
        )

    @property
    def is_applicable(self) -> bool:
        if not self.file or not self.suggested_code:
            return False
        return self.has_line_range or bool(self.original_code)

    @property
    def label(self) -> str:
        return self.message or self.type or self.suggestion_id

    def to_dict(self) -> Dict[str, Any]:
        """Render back to the JSON record shape, omitting absent fields."""
        result: Dict[str, Any] = {}
        for key in ('id', 'file', 'line_start', 'line_end', 'line', 'original_code',
                    'suggested_code', 'message', 'type', 'severity', 'confidence',
                    'breaking_change', 'source'):
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.risk is not None:
            result['impact'] = {'risk': self.risk}
        return result


def parse_suggestions(raw: Any) -> List[Suggestion]:
    """Validate a raw ``suggestions`` array into Suggestion records.

    Entries that are not JSON objects are skipped, but still consume their
    position so synthesized ids match the input order.
    """
    if not isinstance(raw, list):
        if raw is not None:
            logger.warning(f"Expected a list of suggestions, got {type(raw).__name__}")
        return []

    suggestions = []
    for index, item in enumerate(raw):
        if not isinstance(item, dict):
            logger.warning(f"Skipping malformed suggestion at position {index}")
            continue
        suggestions.append(Suggestion.from_dict(item, index))
    return suggestions


@dataclass
class ReviewResult:
    """Suggestions produced for one file by one review mechanism."""

    file: str
    suggestions: List[Suggestion] = field(default_factory=list)
    source: str = 'unknown'

    def to_dict(self) -> Dict[str, Any]:
        return {
            'file': self.file,
            'suggestions': [s.to_dict() for s in self.suggestions],
            'source': self.source,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ReviewResult":
        return cls(
            file=str(data.get('file', '')),
            suggestions=parse_suggestions(data.get('suggestions', [])),
            source=str(data.get('source', 'unknown')),
        )


@dataclass
class ApplicationOutcome:
    """Partition of attempted suggestions into applied and failed."""

    applied: List[Suggestion] = field(default_factory=list)
    failed: List[Tuple[Suggestion, str]] = field(default_factory=list)
    commit_sha: Optional[str] = None

    def to_dict(self, timestamp: str) -> Dict[str, Any]:
        return {
            'timestamp': timestamp,
            'applied': [
                {'id': s.suggestion_id, 'message': s.message, 'file': s.file}
                for s in self.applied
            ],
            'failed': [
                {'id': s.suggestion_id, 'message': s.message, 'reason': reason}
                for s, reason in self.failed
            ],
            'commit_sha': self.commit_sha,
        }
