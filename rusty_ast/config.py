"""
Application configuration management.
"""

from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from RUSTY_AST_* environment variables."""

    # Logging
    log_level: str = "WARNING"

    # Rendering defaults
    default_format: str = "text"
    indent: int = 2
    json_indent: Optional[int] = 2
    compact_json: bool = False

    # Front-end used for inline code and unknown file extensions
    default_language: str = "rust"

    # Batch rendering
    max_workers: int = 4

    class Config:
        env_prefix = "RUSTY_AST_"
        env_file = ".env"
        case_sensitive = False


# Global settings instance
settings = Settings()
