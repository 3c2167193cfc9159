"""
Resume Service Configuration Module

Centralized configuration management with Pydantic validation.
All environment variables are validated at startup to catch misconfigurations early.
"""

import logging
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.resume_pipeline.types import OverflowPolicy, RenderOptions

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)


class ResumeServiceSettings(BaseSettings):
    """
    Resume service configuration with validation.

    All settings can be overridden via environment variables
    (GOOGLE_AI_API_KEY, PLAYWRIGHT_TIMEOUT, OVERFLOW_POLICY, ...).
    """

    model_config = SettingsConfigDict(
        env_prefix="",
        case_sensitive=False,
        extra="ignore",
    )

    # === Generative AI ===
    google_ai_api_key: Optional[str] = Field(
        default=None,
        description="Google AI (Gemini) API key"
    )
    gemini_model: str = Field(
        default="gemini-2.5-flash",
        description="Gemini model used for resume optimization"
    )
    ai_max_attempts: int = Field(
        default=1,
        ge=1,
        le=5,
        description="Attempts for the Gemini call (1 disables retries)"
    )

    # === Server ===
    port: int = Field(default=3001, ge=1, le=65535)
    environment: str = Field(
        default="development",
        description="Environment: development, staging, production"
    )
    cors_origins: str = Field(
        default="http://localhost:3000,http://localhost:3001",
        description="Comma-separated list of allowed CORS origins"
    )

    # === Uploads ===
    upload_dir: str = Field(default="uploads", description="Temp directory for uploaded resumes")
    max_upload_bytes: int = Field(
        default=10 * 1024 * 1024,
        ge=1024,
        description="Maximum resume upload size in bytes"
    )

    # === Rendering ===
    playwright_timeout: int = Field(
        default=30000,
        ge=1000,
        le=300000,
        description="Content load timeout in milliseconds"
    )
    playwright_headless: bool = Field(default=True)
    overflow_policy: OverflowPolicy = Field(
        default=OverflowPolicy.TRUNCATE,
        description="Layouts longer than one page: truncate, shrink or fail"
    )

    # === Logging ===
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="simple", description="simple or json")

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment is a known value."""
        allowed = {"development", "staging", "production"}
        v_lower = v.lower()
        if v_lower not in allowed:
            raise ValueError(f"environment must be one of: {', '.join(sorted(allowed))}")
        return v_lower

    @field_validator("overflow_policy", mode="before")
    @classmethod
    def lowercase_overflow_policy(cls, v):
        return v.lower() if isinstance(v, str) else v

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        if v.lower() not in {"simple", "json"}:
            raise ValueError("log_format must be 'simple' or 'json'")
        return v.lower()

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins into a list."""
        if not self.cors_origins:
            return []
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def render_options(self) -> RenderOptions:
        """Renderer settings derived from this configuration."""
        return RenderOptions(
            load_timeout_ms=self.playwright_timeout,
            headless=self.playwright_headless,
            overflow_policy=self.overflow_policy,
        )


@lru_cache()
def get_settings() -> ResumeServiceSettings:
    """
    Get cached settings instance.

    Settings are loaded once and cached; tests call get_settings.cache_clear().
    """
    return ResumeServiceSettings()


def validate_config_on_startup() -> ResumeServiceSettings:
    """
    Validate configuration at application startup.

    Raises ValueError with details if config is invalid.
    Logs warnings for non-critical issues.
    """
    try:
        settings = get_settings()
    except Exception as e:
        raise ValueError(f"Configuration validation failed: {e}")

    if not settings.google_ai_api_key:
        logger.warning("GOOGLE_AI_API_KEY not configured - /api/optimize-resume will fail")
    if settings.is_production and not settings.cors_origins_list:
        logger.warning("CORS_ORIGINS not configured")

    logger.info(f"Configuration loaded: environment={settings.environment}")
    logger.info(f"  gemini_model={settings.gemini_model}")
    logger.info(f"  google_ai_api_key={'*****' if settings.google_ai_api_key else 'missing'}")
    logger.info(f"  upload_dir={settings.upload_dir}")
    logger.info(f"  playwright_timeout={settings.playwright_timeout}ms")
    logger.info(f"  overflow_policy={settings.overflow_policy.value}")
    return settings
