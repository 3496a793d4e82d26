"""
Configuration management for CV Hjelper.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # LLM providers
    openai_api_key: str = ""
    anthropic_api_key: str = ""
    deepseek_api_key: str = ""
    mistral_api_key: str = ""
    google_api_key: str = ""

    default_provider: str = "openai"
    default_model: str = "gpt-4o"

    # Generation
    llm_temperature: float = 0.2
    llm_timeout: float = 230.0

    # API
    cors_origins: str = "http://localhost:3000,http://localhost:5173"
    max_upload_size: int = 10 * 1024 * 1024  # 10 MB
    analysis_rate_limit: str = "10/minute"
    customization_rate_limit: str = "5/minute"

    # Logging
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"  # Ignore extra env vars


settings = Settings()
