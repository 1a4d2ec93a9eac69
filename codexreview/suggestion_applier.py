"""Application of code suggestions to files on disk."""

from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from codexreview.logger import get_logger
from codexreview.models import ApplicationOutcome, Suggestion

logger = get_logger(__name__)

REASON_MISSING_FIELDS = 'missing file or suggested code'
REASON_FILE_NOT_FOUND = 'file not found'
REASON_ORIGINAL_NOT_FOUND = 'original code not found'
REASON_NO_STRATEGY = 'no line range or original code'
REASON_OVERLAP = 'overlaps another suggestion'


class FileSystem:
    """Minimal file capability used by the applier."""

    def exists(self, path: str) -> bool:
        raise NotImplementedError

    def read_text(self, path: str) -> str:
        raise NotImplementedError

    def write_text(self, path: str, content: str) -> None:
        raise NotImplementedError


class LocalFileSystem(FileSystem):
    """Reads and writes real files relative to a root directory."""

    def __init__(self, root: Optional[Path] = None):
        self.root = root or Path.cwd()

    def resolve(self, path: str) -> Path:
        return (self.root / path).resolve()

    def exists(self, path: str) -> bool:
        return self.resolve(path).is_file()

    def read_text(self, path: str) -> str:
        # newline='' keeps \r\n intact so only \n separates lines
        with open(self.resolve(path), 'r', encoding='utf-8', newline='') as f:
            return f.read()

    def write_text(self, path: str, content: str) -> None:
        with open(self.resolve(path), 'w', encoding='utf-8', newline='') as f:
            f.write(content)


def splice_lines(content: str, line_start: int, line_end: int, replacement: str) -> str:
    """Replace the 1-based inclusive line range with the replacement lines."""
    lines = content.split('\n')
    lines[line_start - 1:line_end] = replacement.split('\n')
    return '\n'.join(lines)


def replace_first(content: str, original: str, replacement: str) -> Optional[str]:
    """Replace the first exact occurrence of original, or None if absent."""
    if original not in content:
        return None
    return content.replace(original, replacement, 1)


class SuggestionApplier:
    """Applies suggestions in place; failures are reported, never raised."""

    def __init__(self, fs: FileSystem):
        self.fs = fs

    def apply(self, suggestion: Suggestion) -> Tuple[bool, str]:
        """Apply one suggestion to its target file.

        Returns:
            Tuple of (success, reason). reason is empty on success.
        """
        try:
            return self._apply(suggestion)
        except (OSError, UnicodeError) as e:
            logger.warning(f"Failed to apply suggestion {suggestion.suggestion_id}: {e}")
            return False, str(e)

    def _apply(self, suggestion: Suggestion) -> Tuple[bool, str]:
        if not suggestion.file or not suggestion.suggested_code:
            logger.warning(f"Skipping suggestion without file or code: {suggestion.suggestion_id}")
            return False, REASON_MISSING_FIELDS

        if not self.fs.exists(suggestion.file):
            logger.warning(f"File not found: {suggestion.file}")
            return False, REASON_FILE_NOT_FOUND

        if not suggestion.is_applicable:
            logger.warning(f"Cannot apply suggestion {suggestion.suggestion_id} without line numbers or original code")
            return False, REASON_NO_STRATEGY

        content = self.fs.read_text(suggestion.file)

        if suggestion.has_line_range:
            content = splice_lines(content, suggestion.line_start, suggestion.line_end, suggestion.suggested_code)
        else:
            replaced = replace_first(content, suggestion.original_code, suggestion.suggested_code)
            if replaced is None:
                logger.warning(f"Original code not found in {suggestion.file}")
                return False, REASON_ORIGINAL_NOT_FOUND
            content = replaced

        self.fs.write_text(suggestion.file, content)
        logger.info(f"Applied suggestion to {suggestion.file}")
        return True, ''

    def apply_all(self, suggestions: Sequence[Suggestion]) -> ApplicationOutcome:
        """Apply a batch of suggestions and partition the results.

        Line-ranged edits to one file are applied bottom-up so earlier
        splices do not shift later ranges; an edit overlapping a range
        already applied in this batch fails. Substring edits to the file
        run after its line-ranged edits. Results keep the input order.
        """
        results: Dict[int, Tuple[bool, str]] = {}

        for positions in self._group_by_file(suggestions).values():
            ranged = [p for p in positions if suggestions[p].has_line_range]
            others = [p for p in positions if not suggestions[p].has_line_range]
            ranged.sort(key=lambda p: suggestions[p].line_start, reverse=True)

            applied_ranges: List[Tuple[int, int]] = []
            for position in ranged:
                suggestion = suggestions[position]
                span = (suggestion.line_start, suggestion.line_end)
                if any(span[0] <= end and start <= span[1] for start, end in applied_ranges):
                    logger.warning(f"Suggestion {suggestion.suggestion_id} overlaps a range already applied to {suggestion.file}")
                    results[position] = (False, REASON_OVERLAP)
                    continue
                results[position] = self.apply(suggestion)
                if results[position][0]:
                    applied_ranges.append(span)

            for position in others:
                results[position] = self.apply(suggestions[position])

        outcome = ApplicationOutcome()
        for position, suggestion in enumerate(suggestions):
            success, reason = results[position]
            if success:
                outcome.applied.append(suggestion)
            else:
                outcome.failed.append((suggestion, reason))
        return outcome

    @staticmethod
    def _group_by_file(suggestions: Sequence[Suggestion]) -> Dict[str, List[int]]:
        groups: Dict[str, List[int]] = {}
        for position, suggestion in enumerate(suggestions):
            groups.setdefault(suggestion.file or '', []).append(position)
        return groups
