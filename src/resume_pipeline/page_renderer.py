"""
HTML to one-page PDF rendering with Playwright/Chromium.

Each call launches its own headless Chromium, loads the HTML directly with
page.set_content(), prints it with page.pdf() and closes the browser on every
exit path. The HTML must be a complete document; nothing is wrapped around it.

The one-page guarantee comes from the overflow policy:
- truncate: page_ranges="1", anything past page 1 is dropped
- shrink: the page is scaled down until the layout fits one page
- fail: a layout taller than one page raises RenderError

Shrink and fail measure against the configured page format. A document that
declares its own @page size (honoured through prefer_css_page_size) is
truncated instead.
"""

import logging
import re
from typing import Any, Dict, Optional, Tuple

from src.common.error_handling import RenderError
from src.resume_pipeline.types import OverflowPolicy, RenderOptions

logger = logging.getLogger(__name__)

CSS_PX_PER_INCH = 96.0

# Paper sizes in inches (width, height)
PAGE_FORMATS: Dict[str, Tuple[float, float]] = {
    "a4": (210 / 25.4, 297 / 25.4),
    "letter": (8.5, 11.0),
}

_UNIT_TO_INCH = {
    "in": 1.0,
    "mm": 1 / 25.4,
    "cm": 1 / 2.54,
    "px": 1 / CSS_PX_PER_INCH,
}

_LENGTH_PATTERN = re.compile(r"^\s*([0-9]*\.?[0-9]+)\s*(in|mm|cm|px)?\s*$", re.IGNORECASE)

# Residual ```html / ``` markers the normalizer does not touch
_HTML_FENCE_PATTERN = re.compile(r"```html\s*|\s*```", re.IGNORECASE)

# Lower bound accepted by page.pdf(scale=...)
MIN_PDF_SCALE = 0.1

# @page { size: ... } in the document; with prefer_css_page_size it replaces
# the configured format, so height measurements against that format are void
_CSS_PAGE_SIZE_PATTERN = re.compile(r"@page\b[^{]*\{[^}]*\bsize\s*:", re.IGNORECASE)

_MEASURE_SCRIPT = (
    "() => Math.max(document.documentElement.scrollHeight, "
    "document.body ? document.body.scrollHeight : 0)"
)


def css_length_to_px(value: str) -> float:
    """
    Convert a CSS length ("0.5in", "12mm", "1cm", "48px") to CSS pixels.

    Raises:
        ValueError: For unsupported units or malformed values
    """
    match = _LENGTH_PATTERN.match(value)
    if not match:
        raise ValueError(f"Unsupported CSS length: {value!r}")
    number, unit = match.groups()
    return float(number) * _UNIT_TO_INCH[(unit or "px").lower()] * CSS_PX_PER_INCH


def printable_area_px(options: RenderOptions) -> Tuple[float, float]:
    """Width and height of the area inside the margins, in CSS pixels."""
    try:
        width_in, height_in = PAGE_FORMATS[options.page_format.lower()]
    except KeyError:
        raise ValueError(f"Unsupported page format: {options.page_format}")

    margin_px = css_length_to_px(options.margin)
    width = width_in * CSS_PX_PER_INCH - 2 * margin_px
    height = height_in * CSS_PX_PER_INCH - 2 * margin_px
    if width <= 0 or height <= 0:
        raise ValueError(f"Margin {options.margin} leaves no printable area")
    return width, height


def prepare_content(html: Optional[str]) -> str:
    """
    Trim the HTML and drop stray markdown fences.

    Raises:
        RenderError: If nothing is left to render
    """
    if not html or not html.strip():
        raise RenderError("empty content")

    content = _HTML_FENCE_PATTERN.sub("", html.strip()).strip()
    if not content:
        raise RenderError("empty content")
    return content


async def _measure_content_height(page, options: RenderOptions) -> float:
    """Layout height of the document at the printable width, in CSS pixels."""
    width, height = printable_area_px(options)
    await page.emulate_media(media="print")
    await page.set_viewport_size({"width": int(width), "height": int(height)})
    return float(await page.evaluate(_MEASURE_SCRIPT))


def declares_css_page_size(html: str) -> bool:
    """True when the document sets its own page size with an @page rule."""
    return bool(_CSS_PAGE_SIZE_PATTERN.search(html))


async def _build_pdf_kwargs(page, options: RenderOptions, html: str = "") -> Dict[str, Any]:
    pdf_kwargs: Dict[str, Any] = {
        "format": options.page_format,
        "print_background": options.print_background,
        "margin": options.margins,
        "prefer_css_page_size": options.prefer_css_page_size,
        "page_ranges": "1",
    }

    if options.overflow_policy == OverflowPolicy.TRUNCATE:
        return pdf_kwargs

    if options.prefer_css_page_size and declares_css_page_size(html):
        logger.warning(
            f"Document sets its own @page size; overflow policy "
            f"{options.overflow_policy.value} falls back to truncate"
        )
        return pdf_kwargs

    _, printable_height = printable_area_px(options)
    content_height = await _measure_content_height(page, options)
    overflows = content_height > printable_height + 1

    if options.overflow_policy == OverflowPolicy.FAIL and overflows:
        raise RenderError(
            f"content exceeds one page ({content_height:.0f}px of "
            f"{printable_height:.0f}px printable height)"
        )

    if options.overflow_policy == OverflowPolicy.SHRINK and overflows:
        scale = max(MIN_PDF_SCALE, printable_height / content_height)
        logger.info(f"Content overflows one page, scaling PDF to {scale:.2f}")
        pdf_kwargs["scale"] = round(scale, 3)

    return pdf_kwargs


async def render_pdf(html: str, options: Optional[RenderOptions] = None) -> bytes:
    """
    Render a complete HTML document to a single-page PDF.

    Args:
        html: Complete HTML document (doctype, head and body included)
        options: Page and browser settings (defaults: A4, 0.5in, page 1 only)

    Returns:
        PDF bytes

    Raises:
        RenderError: For empty content (raised before Chromium starts), launch
            failures, load timeouts, PDF generation failures, and overflow
            under the "fail" policy
    """
    options = options or RenderOptions()
    content = prepare_content(html)

    logger.info(
        f"Converting HTML to PDF ({len(content)} chars, format={options.page_format}, "
        f"overflow={options.overflow_policy.value})"
    )

    # Import here to avoid loading Playwright until a render is requested
    from playwright.async_api import async_playwright

    try:
        async with async_playwright() as p:
            browser = await p.chromium.launch(
                headless=options.headless,
                args=list(options.chromium_args),
            )
            try:
                page = await browser.new_page()
                await page.set_content(
                    content,
                    wait_until="networkidle",
                    timeout=options.load_timeout_ms,
                )
                pdf_kwargs = await _build_pdf_kwargs(page, options, content)
                pdf_bytes = await page.pdf(**pdf_kwargs)
            finally:
                await browser.close()

    except RenderError:
        raise
    except Exception as e:
        logger.error(f"HTML to PDF conversion failed: {e}")
        raise RenderError(f"render failed: {e}", cause=e) from e

    logger.info(f"HTML to PDF conversion successful ({len(pdf_bytes)} bytes)")
    return pdf_bytes
