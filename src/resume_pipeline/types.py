"""
Data types for the resume optimization pipeline.

These types represent the values passed between pipeline stages:
- ExtractionResult: HTML recovered from the AI reply plus the strategy used
- OverflowPolicy: what to do when the layout is taller than one page
- RenderOptions: Chromium and page.pdf() settings for the renderer
- PipelineResult: the final PDF with diagnostics for one request
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Tuple


# Chromium flags for container environments without a display or
# elevated privileges
DEFAULT_CHROMIUM_ARGS: Tuple[str, ...] = (
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-accelerated-2d-canvas",
    "--no-first-run",
    "--no-zygote",
    "--single-process",
    "--disable-gpu",
)


class OverflowPolicy(str, Enum):
    """Handling for HTML whose layout is longer than one page."""

    TRUNCATE = "truncate"  # emit page 1 only
    SHRINK = "shrink"      # scale the page down so the layout fits
    FAIL = "fail"          # raise RenderError


@dataclass(frozen=True)
class ExtractionResult:
    """HTML recovered from an AI reply."""

    html: str
    strategy: str  # "json", "field_pattern" or "html_document"


@dataclass(frozen=True)
class RenderOptions:
    """
    Settings for a single HTML to PDF render.

    Defaults give an A4 page with 0.5in margins, a 30 second content load
    timeout and page 1 only.
    """

    page_format: str = "A4"
    margin: str = "0.5in"
    load_timeout_ms: int = 30000
    headless: bool = True
    print_background: bool = True
    prefer_css_page_size: bool = True
    overflow_policy: OverflowPolicy = OverflowPolicy.TRUNCATE
    chromium_args: Tuple[str, ...] = DEFAULT_CHROMIUM_ARGS

    @property
    def margins(self) -> Dict[str, str]:
        """Margin dict in the shape page.pdf() expects."""
        return {
            "top": self.margin,
            "right": self.margin,
            "bottom": self.margin,
            "left": self.margin,
        }


@dataclass
class PipelineResult:
    """Output of one resume optimization request."""

    pdf_bytes: bytes
    html: str
    extraction_strategy: str
    raw_response_chars: int
    timings_ms: Dict[str, int] = field(default_factory=dict)

    @property
    def size_bytes(self) -> int:
        return len(self.pdf_bytes)
