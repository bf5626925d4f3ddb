"""Application settings using Pydantic Settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Generator configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="DYNAMIC_DOCX_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging
    log_level: str = "INFO"

    # Remote image fetching
    image_fetch_timeout: float = 30.0
    image_fetch_user_agent: str = "Mozilla/5.0 (compatible; DynamicDocx/1.0)"
    image_fetch_follow_redirects: bool = True

    # Relationship ids: random candidates tried before the counter fallback
    image_max_random_id_attempts: int = 5


# Global settings instance
settings = Settings()
