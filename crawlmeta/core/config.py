from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="CRAWLMETA_", extra="ignore"
    )

    # SQLite
    db_path: str = "metadata.db"
    table_name: str = "metadata"

    # Logging
    log_level: str = "INFO"


settings = Settings()
