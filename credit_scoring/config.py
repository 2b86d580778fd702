"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "credit-scoring"
    log_level: str = "INFO"

    # Caller-side score cache
    score_cache_enabled: bool = True
    score_cache_max_entries: int = 1024


settings = Settings()
