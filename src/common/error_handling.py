"""
Error taxonomy for the resume optimization pipeline.

Every stage fails fast with one of these exceptions. Nothing here retries or
returns a fallback value; the HTTP layer maps the errors to responses.
"""

from datetime import datetime
from typing import Any, Dict, Optional


class ResumePipelineError(Exception):
    """
    Base class for pipeline stage failures.

    Carries the stage name and a timestamp so the service layer can report
    where a request failed without parsing the message.
    """

    stage: str = "pipeline"

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.timestamp = datetime.utcnow().isoformat()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "stage": self.stage,
            "message": self.message,
            "timestamp": self.timestamp,
            "exception_type": type(self.cause).__name__ if self.cause else None,
        }


class ExtractionError(ResumePipelineError):
    """No HTML could be recovered from the AI reply."""

    stage = "extract"


class RenderError(ResumePipelineError):
    """HTML could not be rendered to a one-page PDF."""

    stage = "render"


class AIServiceError(ResumePipelineError):
    """The generative model call failed or returned nothing."""

    stage = "ai_call"
