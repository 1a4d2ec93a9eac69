"""Lenient JSON parsing for external tool output."""

import json
from typing import Any, Optional, Tuple

from codexreview.logger import get_logger

logger = get_logger(__name__)


def extract_json_from_text(text: str) -> Optional[Any]:
    """Return the first JSON object embedded in free text, if any."""
    if not text:
        return None

    decoder = json.JSONDecoder()
    start = text.find('{')
    while start != -1:
        try:
            value, _ = decoder.raw_decode(text, start)
            return value
        except json.JSONDecodeError:
            start = text.find('{', start + 1)
    return None


def parse_json_with_fallbacks(text: str, description: str = "output") -> Tuple[bool, Any]:
    """Parse JSON, falling back to extracting an embedded object.

    Args:
        text: Raw text, usually captured stdout.
        description: Human readable name for log messages.

    Returns:
        Tuple of (success, parsed_value). parsed_value is {} on failure.
    """
    if not text or not text.strip():
        logger.debug(f"Empty {description}")
        return False, {}

    try:
        return True, json.loads(text)
    except json.JSONDecodeError:
        pass

    extracted = extract_json_from_text(text)
    if extracted is not None:
        logger.debug(f"Extracted embedded JSON from {description}")
        return True, extracted

    logger.warning(f"Failed to parse {description} as JSON")
    return False, {}
