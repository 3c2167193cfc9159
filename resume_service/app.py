"""
Resume Service - FastAPI application for one-page resume optimization.

Accepts a resume PDF and job requirements, asks Gemini for an optimized
HTML resume, extracts and decodes the HTML from the reply, and returns it
rendered as a one-page A4 PDF via Playwright/Chromium.
"""

import logging
import uuid
from datetime import datetime
from io import BytesIO
from pathlib import Path
from typing import Optional

from fastapi import Depends, FastAPI, File, Form, HTTPException, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse

from src.common.error_handling import ResumePipelineError
from src.common.logger import setup_logging
from src.resume_pipeline.orchestrator import ResumeOptimizationPipeline
from src.services.gemini_resume_service import GeminiResumeService
from version import __version__

from .config import get_settings, validate_config_on_startup
from .models import ErrorDetail, HealthResponse, RenderHTMLRequest, ServiceInfoResponse
from .uploads import UploadValidationError, stored_upload

settings = get_settings()
setup_logging(settings.log_level, settings.log_format)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Resume Optimizer API",
    version=__version__,
    description="Optimizes resumes for a job and renders them as one-page PDFs"
)

if settings.cors_origins_list:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

# Playwright readiness state
_playwright_ready = False
_playwright_error: Optional[str] = None


# ============================================================================
# Startup / Shutdown
# ============================================================================

@app.on_event("startup")
async def validate_environment_on_startup():
    """
    Validate configuration and Playwright/Chromium on startup.

    The health endpoint reports unhealthy if Chromium can't render a test
    page, so a broken image never receives traffic.
    """
    global _playwright_ready, _playwright_error

    validate_config_on_startup()
    Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)

    logger.info("Resume service starting - validating Playwright installation...")

    try:
        from playwright.async_api import async_playwright

        async with async_playwright() as p:
            browser = await p.chromium.launch(
                headless=settings.playwright_headless,
                args=list(settings.render_options().chromium_args),
            )
            try:
                page = await browser.new_page()
                await page.set_content("<html><body><h1>Test</h1></body></html>")
                test_pdf = await page.pdf(format="A4")
            finally:
                await browser.close()

        if test_pdf:
            _playwright_ready = True
            _playwright_error = None
            logger.info(f"Playwright validation successful - generated {len(test_pdf)} byte test PDF")
        else:
            _playwright_error = "Test PDF generation returned empty result"
            logger.error(f"Playwright validation failed: {_playwright_error}")

    except Exception as e:
        _playwright_error = str(e)
        logger.error(f"Playwright validation failed: {_playwright_error}")
        logger.error("PDF generation will not work until this is resolved.")


@app.on_event("shutdown")
async def log_shutdown():
    logger.info("Shutdown signal received, shutting down gracefully")


# ============================================================================
# Dependencies
# ============================================================================

def get_pipeline() -> ResumeOptimizationPipeline:
    """Build the pipeline from settings (overridden in tests)."""
    ai_client = GeminiResumeService(
        api_key=settings.google_ai_api_key or "",
        model=settings.gemini_model,
        max_attempts=settings.ai_max_attempts,
    )
    return ResumeOptimizationPipeline(ai_client, settings.render_options())


def _pdf_response(pdf_bytes: bytes, filename: str) -> StreamingResponse:
    return StreamingResponse(
        BytesIO(pdf_bytes),
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
            "Content-Length": str(len(pdf_bytes)),
        }
    )


def _pipeline_failure(error: str, exc: Exception) -> HTTPException:
    detail = ErrorDetail(
        error=error,
        message=str(exc),
        stage=exc.stage if isinstance(exc, ResumePipelineError) else None,
    )
    return HTTPException(status_code=500, detail=detail.model_dump())


# ============================================================================
# Endpoints
# ============================================================================

@app.get("/", response_model=ServiceInfoResponse)
async def service_info() -> ServiceInfoResponse:
    return ServiceInfoResponse(
        version=__version__,
        endpoints={
            "health": "/api/health",
            "optimize": "/api/optimize-resume",
            "test": "/api/test-html-to-pdf",
        },
    )


@app.get("/api/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Health check endpoint for container orchestration.

    Returns HTTP 503 if Playwright validation failed on startup.
    """
    if not _playwright_ready:
        raise HTTPException(
            status_code=503,
            detail={
                "status": "unhealthy",
                "timestamp": datetime.utcnow().isoformat(),
                "version": __version__,
                "playwright_ready": False,
                "playwright_error": _playwright_error,
                "message": "Resume service is unhealthy - Playwright/Chromium not available"
            }
        )

    return HealthResponse(
        timestamp=datetime.utcnow(),
        version=__version__,
        playwright_ready=True,
        playwright_error=None,
    )


@app.post("/api/optimize-resume")
async def optimize_resume(
    resume: Optional[UploadFile] = File(None),
    jobRequirements: Optional[str] = Form(None),
    pipeline: ResumeOptimizationPipeline = Depends(get_pipeline),
):
    """
    Optimize an uploaded resume PDF for the given job requirements.

    Returns:
        StreamingResponse with the one-page PDF

    Raises:
        HTTPException: 400 for invalid uploads, 500 for pipeline failures
    """
    if resume is None:
        raise HTTPException(status_code=400, detail="PDF resume file is required")
    if not jobRequirements or not jobRequirements.strip():
        raise HTTPException(status_code=400, detail="Job requirements are required")

    request_id = uuid.uuid4().hex
    logger.info(
        f"Received resume optimization request {request_id[:8]} "
        f"(file={resume.filename}, job requirements={len(jobRequirements)} chars)"
    )

    try:
        async with stored_upload(resume, Path(settings.upload_dir), settings.max_upload_bytes) as path:
            result = await pipeline.run(path, jobRequirements, request_id=request_id)
    except UploadValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ResumePipelineError as e:
        logger.error(f"Error processing PDF resume ({e.stage}): {e}")
        raise _pipeline_failure("Failed to process PDF resume", e)

    logger.info(f"Sending PDF response ({result.size_bytes} bytes, timings={result.timings_ms})")
    return _pdf_response(result.pdf_bytes, "optimized-resume.pdf")


@app.post("/api/test-html-to-pdf")
async def test_html_to_pdf(
    request: RenderHTMLRequest,
    pipeline: ResumeOptimizationPipeline = Depends(get_pipeline),
):
    """Render caller-supplied HTML with the same one-page settings."""
    if not request.html or not request.html.strip():
        raise HTTPException(status_code=400, detail="HTML content is required")

    logger.info("Testing HTML to PDF conversion...")

    try:
        pdf_bytes = await pipeline.render_html(request.html)
    except ResumePipelineError as e:
        logger.error(f"Error in test conversion: {e}")
        raise _pipeline_failure("Failed to convert HTML to PDF", e)

    return _pdf_response(pdf_bytes, "test-document.pdf")


@app.exception_handler(404)
async def not_found_handler(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": "Endpoint not found"})


def main() -> None:
    """Run the service with uvicorn (handles SIGINT/SIGTERM)."""
    import uvicorn

    logger.info(f"Server running on port {settings.port}")
    logger.info(f"Health check: http://localhost:{settings.port}/api/health")
    uvicorn.run(app, host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
