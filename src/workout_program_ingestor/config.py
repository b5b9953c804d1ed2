"""Configuration settings for the workout program ingestor."""
import os
from dataclasses import replace
from typing import List, Literal, Optional

from workout_program_ingestor.parsers.thresholds import DEFAULT_THRESHOLDS, ParserThresholds


EnvironmentType = Literal["development", "staging", "production"]


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    try:
        return int(raw) if raw is not None else default
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    try:
        return float(raw) if raw is not None else default
    except ValueError:
        return default


class Settings:
    """Application settings."""

    # Feature flags
    USE_NAME_CANONICALIZER: bool = False
    NAME_CANONICALIZER_URL: Optional[str] = None

    # Environment
    ENVIRONMENT: EnvironmentType = "development"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # HTTP
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:3001"]
    MAX_UPLOAD_BYTES: int = 5 * 1024 * 1024

    # Parser overrides
    MIN_TEXT_LENGTH: int = DEFAULT_THRESHOLDS.min_text_length
    MIN_SECTION_LENGTH: int = DEFAULT_THRESHOLDS.min_section_length
    TABLE_LINE_THRESHOLD: int = DEFAULT_THRESHOLDS.table_line_threshold
    FALLBACK_CONFIDENCE_CAP: float = DEFAULT_THRESHOLDS.fallback_confidence_cap

    def __init__(self):
        # Environment
        env = os.getenv("ENVIRONMENT", "development").lower()
        if env in ("development", "staging", "production"):
            self.ENVIRONMENT = env  # type: ignore
        else:
            self.ENVIRONMENT = "development"

        # Feature flags
        self.USE_NAME_CANONICALIZER = os.getenv("USE_NAME_CANONICALIZER", "false").lower() == "true"
        self.NAME_CANONICALIZER_URL = os.getenv("NAME_CANONICALIZER_URL") or None

        # Server
        self.HOST = os.getenv("HOST", self.HOST)
        self.PORT = _env_int("PORT", self.PORT)

        # HTTP
        origins = os.getenv("CORS_ORIGINS")
        if origins:
            self.CORS_ORIGINS = [o.strip() for o in origins.split(",") if o.strip()]
        self.MAX_UPLOAD_BYTES = _env_int("MAX_UPLOAD_BYTES", self.MAX_UPLOAD_BYTES)

        # Parser overrides
        self.MIN_TEXT_LENGTH = _env_int("MIN_TEXT_LENGTH", self.MIN_TEXT_LENGTH)
        self.MIN_SECTION_LENGTH = _env_int("MIN_SECTION_LENGTH", self.MIN_SECTION_LENGTH)
        self.TABLE_LINE_THRESHOLD = _env_int("TABLE_LINE_THRESHOLD", self.TABLE_LINE_THRESHOLD)
        self.FALLBACK_CONFIDENCE_CAP = _env_float("FALLBACK_CONFIDENCE_CAP", self.FALLBACK_CONFIDENCE_CAP)

    def parser_thresholds(self) -> ParserThresholds:
        """Build parser thresholds with any environment overrides applied."""
        return replace(
            DEFAULT_THRESHOLDS,
            min_text_length=self.MIN_TEXT_LENGTH,
            min_section_length=self.MIN_SECTION_LENGTH,
            table_line_threshold=self.TABLE_LINE_THRESHOLD,
            fallback_confidence_cap=min(1.0, max(0.0, self.FALLBACK_CONFIDENCE_CAP)),
        )


settings = Settings()
