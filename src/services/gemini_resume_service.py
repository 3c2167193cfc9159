"""
Gemini-backed resume optimization call.

Sends the optimization prompt plus the resume PDF (inline bytes) to a Gemini
model and returns the reply text untouched. Parsing the reply is the
extractor's job.

Usage:
    from src.services.gemini_resume_service import GeminiResumeService

    service = GeminiResumeService(api_key=settings.google_ai_api_key)
    reply = await service.generate_resume_html(Path("resume.pdf"), job_text)
"""

import asyncio
import logging
from pathlib import Path
from typing import Any, Optional

from google import genai
from google.genai import types
from tenacity import AsyncRetrying, stop_after_attempt, wait_exponential

from src.common.error_handling import AIServiceError
from src.resume_pipeline.prompts import build_optimization_prompt

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"
PDF_MIME_TYPE = "application/pdf"


class GeminiResumeService:
    """Resume optimization through the google-genai SDK."""

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        max_attempts: int = 1,
        client: Optional[Any] = None,
    ) -> None:
        """
        Args:
            api_key: Google AI API key
            model: Gemini model name
            max_attempts: Attempts for the SDK call (1 = no retry)
            client: Pre-built genai.Client (tests inject a mock)
        """
        self.api_key = api_key
        self.model = model
        self.max_attempts = max(1, max_attempts)
        self._client = client

    @property
    def client(self) -> Any:
        """genai.Client, created on first use."""
        if self._client is None:
            if not self.api_key:
                raise AIServiceError("GOOGLE_AI_API_KEY is not configured")
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    def _build_contents(self, resume_path: Path, job_requirements: str) -> list:
        pdf_data = Path(resume_path).read_bytes()
        return [
            build_optimization_prompt(job_requirements),
            types.Part.from_bytes(data=pdf_data, mime_type=PDF_MIME_TYPE),
        ]

    async def generate_resume_html(self, resume_path: Path, job_requirements: str) -> str:
        """
        Ask the model for an optimized one-page resume.

        Args:
            resume_path: Path of the uploaded resume PDF
            job_requirements: Job requirements text

        Returns:
            Raw reply text (expected, not guaranteed, to be {"htmlres": "..."})

        Raises:
            AIServiceError: If the file cannot be read, the SDK call fails on
                every attempt, or the reply has no text
        """
        logger.info(f"Calling Gemini ({self.model}) with PDF {Path(resume_path).name}")

        try:
            client = self.client
            # File read and generate_content block; both run off the event loop
            contents = await asyncio.to_thread(self._build_contents, resume_path, job_requirements)

            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.max_attempts),
                wait=wait_exponential(multiplier=1, min=1, max=5),
                reraise=True,
            ):
                with attempt:
                    response = await asyncio.to_thread(
                        client.models.generate_content,
                        model=self.model,
                        contents=contents,
                    )
        except Exception as e:
            logger.error(f"Error calling Gemini: {e}")
            raise AIServiceError(f"Failed to get AI suggestions: {e}", cause=e) from e

        text = response.text
        if not text:
            raise AIServiceError("Failed to get AI suggestions: model returned no text")

        logger.info(f"AI response received ({len(text)} chars)")
        return text
