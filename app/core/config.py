"""
Service configuration.

Values come from environment variables prefixed with RESUME_PARSER_
(e.g. RESUME_PARSER_MIN_PDF_TEXT_CHARS=80) or from a local .env file.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="RESUME_PARSER_",
        env_file=".env",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: str = "Resume Structurer"
    log_level: str = "INFO"

    # Extraction thresholds
    min_pdf_text_chars: int = 50
    min_docx_text_chars: int = 20
    min_resume_text_chars: int = 20
    pdf_line_break_threshold: float = 5.0  # PDF units between baselines

    # Upload guard
    max_upload_bytes: int = 10 * 1024 * 1024


@lru_cache()
def get_settings() -> Settings:
    return Settings()
