"""Application configuration using pydantic-settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="VOSESCOUT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Region
    timezone: str = "Atlantic/Canary"

    # HTTP scraping
    scrape_timeout: int = 30
    user_agent: str = (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )
    accept_language: str = "es-ES,es;q=0.9,en;q=0.8"

    # Headless browser
    browser_path: str | None = None
    browser_timeout: int = 60
    settle_seconds: float = 12.0
    second_settle_seconds: float = 3.0
    headless_isolated: bool = True
    headless_process_timeout: int = 180

    # Output
    calendar_output: str = "docs/index.html"
    log_level: str = "INFO"


# Global settings instance
settings = Settings()
