"""
HTML extraction from generative model replies.

The model is asked to answer with ``{"htmlres": "<complete HTML document>"}``
but replies are not reliable: they arrive wrapped in markdown code fences,
with unescaped quotes inside the HTML, with trailing chatter, or as bare HTML
with no JSON envelope at all.

Extraction runs an ordered list of strategies and returns the first hit:

1. ``json``: strict json.loads() of the fence-stripped reply
2. ``field_pattern``: regex match of ``"htmlres": "..."``
3. ``html_document``: the outermost ``<html>...</html>`` span

The order goes from trusted structure to loose guessing and must not change.
"""

import json
import logging
import re
from typing import Callable, Optional, Sequence, Tuple

from src.common.error_handling import ExtractionError
from src.resume_pipeline.types import ExtractionResult

logger = logging.getLogger(__name__)

# JSON keys that may carry the HTML document, in priority order
HTML_FIELDS: Tuple[str, ...] = ("htmlres", "html")

# ```json / ``` markers anywhere in the reply, with surrounding whitespace
_FENCE_PATTERN = re.compile(r"\s*```(?:json)?\s*", re.IGNORECASE)

_HTML_DOCUMENT_PATTERN = re.compile(r"<html\b[\s\S]*</html\s*>", re.IGNORECASE)

Strategy = Callable[[str, Sequence[str]], Optional[str]]


def strip_code_fences(text: str) -> str:
    """
    Remove markdown code fence markers and trim whitespace.

    Example:
        >>> strip_code_fences('```json\\n{"htmlres": "<html></html>"}\\n```')
        '{"htmlres": "<html></html>"}'
    """
    return _FENCE_PATTERN.sub("", text).strip()


def from_json_envelope(text: str, field_names: Sequence[str]) -> Optional[str]:
    """Strict JSON parse of the fence-stripped reply."""
    try:
        payload = json.loads(strip_code_fences(text))
    except (ValueError, RecursionError):
        logger.debug("Reply is not valid JSON")
        return None

    if not isinstance(payload, dict):
        return None

    for name in field_names:
        value = payload.get(name)
        if isinstance(value, str) and value.strip():
            return value
    return None


def _field_patterns(name: str) -> Tuple[re.Pattern, re.Pattern]:
    key = re.escape(name)
    # Value runs until a quote that closes the object. Tolerates unescaped
    # quotes inside the HTML.
    anchored = re.compile(r'"' + key + r'"\s*:\s*"([\s\S]*?)"\s*}')
    # Value runs until the first unescaped quote. Tolerates a missing brace.
    escaped = re.compile(r'"' + key + r'"\s*:\s*"((?:[^"\\]|\\.)*)"')
    return anchored, escaped


def from_field_pattern(text: str, field_names: Sequence[str]) -> Optional[str]:
    """Regex recovery of ``"<field>": "<value>"`` from almost-JSON."""
    for name in field_names:
        for pattern in _field_patterns(name):
            match = pattern.search(text)
            if match and match.group(1).strip():
                return match.group(1)
    return None


def from_html_document(text: str, field_names: Sequence[str]) -> Optional[str]:
    """Outermost ``<html>...</html>`` span, case-insensitive."""
    match = _HTML_DOCUMENT_PATTERN.search(text)
    if match:
        return match.group(0)
    return None


STRATEGIES: Tuple[Tuple[str, Strategy], ...] = (
    ("json", from_json_envelope),
    ("field_pattern", from_field_pattern),
    ("html_document", from_html_document),
)


def extract_html_with_strategy(
    raw: str,
    field_names: Sequence[str] = HTML_FIELDS,
) -> ExtractionResult:
    """
    Recover the HTML document from an AI reply.

    Args:
        raw: Full text of the model's reply
        field_names: JSON keys that may hold the HTML, in priority order

    Returns:
        ExtractionResult with the HTML (possibly still escaped) and the name
        of the strategy that produced it

    Raises:
        ExtractionError: If no strategy recovers any HTML
    """
    if not raw or not raw.strip():
        raise ExtractionError("no HTML content recoverable: empty reply")

    logger.info(f"Parsing AI response ({len(raw)} chars)")

    for name, strategy in STRATEGIES:
        html = strategy(raw, field_names)
        if html is not None:
            logger.info(f"Extracted HTML via {name} strategy ({len(html)} chars)")
            return ExtractionResult(html=html, strategy=name)
        logger.debug(f"Strategy {name} found no HTML")

    logger.error(f"No HTML recoverable from AI response (first 200 chars): {raw[:200]!r}")
    raise ExtractionError("no HTML content recoverable")


def extract_html(raw: str, field_names: Sequence[str] = HTML_FIELDS) -> str:
    """Recover the HTML document from an AI reply (see extract_html_with_strategy)."""
    return extract_html_with_strategy(raw, field_names).html
