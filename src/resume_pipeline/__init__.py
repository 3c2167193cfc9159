"""
Resume optimization pipeline: AI reply -> HTML -> one-page PDF.

Components:
- response_extractor: recovers HTML from unreliable model replies
- html_normalizer: resolves escape sequences and entities
- page_renderer: renders HTML to a one-page A4 PDF with Playwright
- orchestrator: runs the stages for one request
"""

from src.resume_pipeline.html_normalizer import normalize_html
from src.resume_pipeline.orchestrator import ResumeAIClient, ResumeOptimizationPipeline
from src.resume_pipeline.page_renderer import render_pdf
from src.resume_pipeline.response_extractor import (
    HTML_FIELDS,
    extract_html,
    extract_html_with_strategy,
)
from src.resume_pipeline.types import (
    ExtractionResult,
    OverflowPolicy,
    PipelineResult,
    RenderOptions,
)

__all__ = [
    "HTML_FIELDS",
    "ExtractionResult",
    "OverflowPolicy",
    "PipelineResult",
    "RenderOptions",
    "ResumeAIClient",
    "ResumeOptimizationPipeline",
    "extract_html",
    "extract_html_with_strategy",
    "normalize_html",
    "render_pdf",
]
