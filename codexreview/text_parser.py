"""Best-effort parsing of pasted chat responses into suggestions."""

import re
from typing import List, Optional

from codexreview.models import Suggestion

ITEM_MARKER = re.compile(r'^\d+\.|^[-*•]')


def parse_free_text_suggestions(text: str) -> List[Suggestion]:
    """Split numbered or bulleted free text into suggestion records.

    Each list item becomes one suggestion; continuation lines are folded into
    the open item's message. Text without any list marker yields no
    suggestions.
    """
    suggestions: List[Suggestion] = []
    current: Optional[List[str]] = None

    def close():
        if current is not None:
            suggestions.append(Suggestion(
                index=len(suggestions),
                type='suggestion',
                message=' '.join(current),
                severity='info',
                source='chatgpt',
            ))

    for raw_line in (text or '').split('\n'):
        line = raw_line.strip()
        if ITEM_MARKER.match(line):
            close()
            current = [ITEM_MARKER.sub('', line, count=1).strip()]
        elif current is not None and line:
            current.append(line)

    close()
    return suggestions
