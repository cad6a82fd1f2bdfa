from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

APP_VERSION = "1.0.0"


class Settings(BaseSettings):
    """Service settings, read from ``WEBSPECS_*`` environment variables or ``.env``."""

    # ---------- Logging ----------
    log_level: str = "INFO"

    # ---------- Static fetch ----------
    fetch_timeout: float = 10.0  # seconds
    max_content_size: int = 10 * 1024 * 1024  # 10 MB
    max_redirects: int = 10

    # ---------- Headless browser ----------
    render_timeout_ms: int = 5_000

    # ---------- Rate limits (slowapi syntax) ----------
    static_rate_limit: str = "20/minute"
    render_rate_limit: str = "5/minute"

    model_config = SettingsConfigDict(
        env_prefix="WEBSPECS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
