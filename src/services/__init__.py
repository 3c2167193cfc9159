"""
External service clients used by the resume pipeline.
"""

from src.services.gemini_resume_service import GeminiResumeService

__all__ = ["GeminiResumeService"]
