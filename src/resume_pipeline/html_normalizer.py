"""
Decode escape sequences left in extracted HTML.

HTML recovered by the field-pattern strategy (or double-encoded by the model)
still carries JSON-style backslash escapes and a handful of HTML entities.
Chromium would print them literally, so they are resolved before rendering.
"""

import re
from typing import Dict, Optional

# Resolution order of backslash escapes. "\\" comes after the others so a
# backslash it produces is never read again as the start of "\n" etc.
BACKSLASH_ESCAPES: Dict[str, str] = {
    "\\n": "\n",
    '\\"': '"',
    "\\t": "\t",
    "\\r": "\r",
    "\\\\": "\\",
    "\\'": "'",
}

HTML_ENTITIES: Dict[str, str] = {
    "&quot;": '"',
    "&amp;": "&",
    "&lt;": "<",
    "&gt;": ">",
    "&#39;": "'",
}

# Single left-to-right scan: every escape is replaced exactly once and the
# replacement text is not scanned again.
_BACKSLASH_PATTERN = re.compile("|".join(re.escape(k) for k in BACKSLASH_ESCAPES))


def normalize_html(html: Optional[str]) -> str:
    """
    Resolve backslash escapes, then HTML entities in table order.

    Never raises; None or empty input gives an empty string.

    Example:
        >>> normalize_html('<p class=\\\\"x\\\\">a\\\\nb</p>')
        '<p class="x">a\\nb</p>'
    """
    if not html:
        return ""

    text = _BACKSLASH_PATTERN.sub(lambda m: BACKSLASH_ESCAPES[m.group(0)], html)

    # Entities are replaced one after another, so "&amp;lt;" ends up as "<"
    for entity, char in HTML_ENTITIES.items():
        text = text.replace(entity, char)
    return text
