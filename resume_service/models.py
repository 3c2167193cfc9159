"""
Request/response models for the resume service API.
"""

from datetime import datetime
from typing import Dict, Optional

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = "OK"
    message: str = "Resume optimizer API is running"
    timestamp: datetime
    version: str
    playwright_ready: bool = True
    playwright_error: Optional[str] = None


class ServiceInfoResponse(BaseModel):
    """Root endpoint response."""
    message: str = "Resume Optimizer API"
    status: str = "Running"
    version: str
    endpoints: Dict[str, str]


class RenderHTMLRequest(BaseModel):
    """HTML to PDF test request."""
    html: Optional[str] = Field(None, description="Complete HTML document to render")


class ErrorDetail(BaseModel):
    """Body of a failed pipeline request (under "detail")."""
    error: str
    message: str
    stage: Optional[str] = None
