"""Application configuration using Pydantic Settings."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "camgpt"
    debug: bool = False
    log_level: str = "INFO"
    default_prompt: str = "Describe what you see in this image"

    # LLM Configuration
    llm_provider: str = "openai"  # Options: "openai", "gemini"
    llm_timeout_seconds: float = 60.0

    # OpenAI Configuration
    openai_api_key: str = ""
    openai_model: str = "gpt-4o"
    openai_fast_model: str = "gpt-4o-mini"

    # Gemini Configuration
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.0-flash"
    gemini_fast_model: str = "gemini-2.0-flash-lite"

    # Web Search (Tavily)
    tavily_api_key: str = ""
    tavily_search_url: str = "https://api.tavily.com/search"
    search_timeout_seconds: float = 10.0
    search_max_results: int = 5
    search_query_max_chars: int = 400

    # Uploads
    max_upload_bytes: int = 10 * 1024 * 1024
    upload_dir: str = "uploads"
    upload_max_age_minutes: int = 30
    upload_sweep_interval_minutes: int = 15

    # Scheduler Configuration
    timezone: str = "UTC"

    @property
    def upload_path(self) -> Path:
        """Upload directory as a Path."""
        return Path(self.upload_dir)


settings = Settings()
