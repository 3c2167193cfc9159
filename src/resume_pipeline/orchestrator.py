"""
Resume optimization pipeline orchestrator.

Runs one request through four sequential stages:
1. AI call: resume PDF + job requirements -> raw model reply
2. Extract: raw reply -> HTML (see response_extractor)
3. Normalize: HTML with escapes -> clean HTML (see html_normalizer)
4. Render: clean HTML -> one-page PDF (see page_renderer)

Any stage failure aborts the request; there is no partial result and no
retry here. Temp files belong to the caller.
"""

import time
import uuid
from pathlib import Path
from typing import Optional, Protocol

from src.common.logger import get_logger
from src.resume_pipeline.html_normalizer import normalize_html
from src.resume_pipeline.page_renderer import render_pdf
from src.resume_pipeline.response_extractor import extract_html_with_strategy
from src.resume_pipeline.types import PipelineResult, RenderOptions


class ResumeAIClient(Protocol):
    """Anything that can turn a resume file and job text into a model reply."""

    async def generate_resume_html(self, resume_path: Path, job_requirements: str) -> str:
        ...


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


class ResumeOptimizationPipeline:
    """
    Stateless pipeline; one instance can serve concurrent requests.

    Each run() gets its own Chromium instance inside render_pdf().
    """

    def __init__(
        self,
        ai_client: ResumeAIClient,
        render_options: Optional[RenderOptions] = None,
    ):
        self.ai_client = ai_client
        self.render_options = render_options or RenderOptions()

    async def run(
        self,
        resume_path: Path,
        job_requirements: str,
        request_id: Optional[str] = None,
    ) -> PipelineResult:
        """
        Optimize a resume into a one-page PDF.

        Args:
            resume_path: Stored resume PDF
            job_requirements: Job requirements text
            request_id: Correlation id for logs (generated if omitted)

        Returns:
            PipelineResult with the PDF bytes and stage diagnostics

        Raises:
            AIServiceError: The model call failed
            ExtractionError: No HTML in the model reply
            RenderError: The HTML could not be rendered
        """
        request_id = request_id or uuid.uuid4().hex
        log = get_logger(__name__, request_id=request_id, stage="pipeline")
        timings = {}

        log.info(
            f"Optimizing resume {Path(resume_path).name} "
            f"(job requirements: {len(job_requirements)} chars)"
        )

        started = time.perf_counter()
        raw_reply = await self.ai_client.generate_resume_html(resume_path, job_requirements)
        timings["ai_call"] = _elapsed_ms(started)
        log.bind("ai_call").info(f"Reply received ({len(raw_reply)} chars) in {timings['ai_call']}ms")

        started = time.perf_counter()
        extraction = extract_html_with_strategy(raw_reply)
        html = normalize_html(extraction.html)
        timings["extract"] = _elapsed_ms(started)
        log.bind("extract").info(
            f"HTML extracted via {extraction.strategy} and decoded ({len(html)} chars)"
        )

        started = time.perf_counter()
        pdf_bytes = await render_pdf(html, self.render_options)
        timings["render"] = _elapsed_ms(started)
        log.bind("render").info(f"PDF rendered ({len(pdf_bytes)} bytes) in {timings['render']}ms")

        return PipelineResult(
            pdf_bytes=pdf_bytes,
            html=html,
            extraction_strategy=extraction.strategy,
            raw_response_chars=len(raw_reply),
            timings_ms=timings,
        )

    async def render_html(self, html: str) -> bytes:
        """Render caller-supplied HTML as-is (no extraction or normalization)."""
        return await render_pdf(html, self.render_options)
