"""Application settings using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Supabase
    supabase_url: str = Field(alias="NEXT_PUBLIC_SUPABASE_URL")
    supabase_service_role_key: str = Field(alias="SUPABASE_SERVICE_ROLE_KEY")

    # Trigger authorization (Authorization: Bearer <secret>)
    cron_secret: str | None = Field(default=None, alias="CRON_SECRET")

    # Page fetching
    scraper_user_agent: str = Field(
        default="Mozilla/5.0 (compatible; Ibiza2026Bot/1.0; +https://ibiza-2026.vercel.app)",
        alias="SCRAPER_USER_AGENT",
    )
    fetch_timeout: float = Field(default=15.0, alias="FETCH_TIMEOUT")
    max_html_length: int = Field(default=40_000, alias="MAX_HTML_LENGTH")

    # Run policy
    target_year: int = Field(default=2026, alias="TARGET_YEAR")
    insert_batch_size: int = Field(default=50, gt=0, alias="INSERT_BATCH_SIZE")
    scrape_batch_size: int = Field(default=3, gt=0, alias="SCRAPE_BATCH_SIZE")
    scrape_strategy: Literal["batched", "paced"] = Field(default="batched", alias="SCRAPE_STRATEGY")
    venue_delay: float = Field(default=0.0, alias="VENUE_DELAY")  # Seconds between venues (paced)
    page_delay: float = Field(default=0.0, alias="PAGE_DELAY")  # Seconds between fallback URLs

    # Author identity for inserted rows
    bot_email: str = Field(default="bot@ibiza-scraper.internal", alias="BOT_EMAIL")
    bot_display_name: str = Field(default="Event Bot", alias="BOT_DISPLAY_NAME")

    # LLM extraction (Groq by default, Ollama via OpenAI-compatible API)
    groq_api_key: str | None = Field(default=None, alias="GROQ_API_KEY")
    groq_model: str = Field(default="llama-3.3-70b-versatile", alias="GROQ_MODEL")
    ollama_url: str | None = Field(default=None, alias="OLLAMA_URL")
    ollama_model: str = Field(default="qwen2.5:7b", alias="OLLAMA_MODEL")
    llm_provider: Literal["groq", "ollama"] = Field(default="groq", alias="LLM_PROVIDER")
    llm_max_tokens: int = Field(default=4096, alias="LLM_MAX_TOKENS")
    llm_request_timeout: float = Field(default=30.0, alias="LLM_REQUEST_TIMEOUT")

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", alias="LOG_LEVEL"
    )
    log_format: Literal["json", "console"] = Field(default="console", alias="LOG_FORMAT")
    log_file: str | None = Field(default=None, alias="LOG_FILE")

    # In-process scheduler (off by default, an external cron hits the trigger)
    scheduler_enabled: bool = Field(default=False, alias="SCHEDULER_ENABLED")
    scheduler_cron: str = Field(default="0 6 * * *", alias="SCHEDULER_CRON")
    scheduler_timezone: str = Field(default="Europe/Madrid", alias="SCHEDULER_TIMEZONE")

    # Scraper modes
    dry_run: bool = Field(default=False, alias="DRY_RUN")

    @property
    def extraction_configured(self) -> bool:
        """Check if the configured LLM provider has what it needs."""
        if self.llm_provider == "ollama":
            return bool(self.ollama_url)
        return bool(self.groq_api_key)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
