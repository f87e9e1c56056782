"""Application configuration using pydantic-settings."""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    debug: bool = False

    # Database
    database_url: str = "sqlite+aiosqlite:///./data/campaignforge.db"

    # Paths
    data_dir: Path = Path("./data")

    # Forge picklists are admin-curated and change rarely
    picklist_cache_ttl: int = Field(default=300, ge=0)  # seconds, 0 disables expiry

    # Seed the read-only CORE monster traits on startup
    seed_core_traits: bool = True

    # CORS
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.data_dir.mkdir(parents=True, exist_ok=True)


settings = Settings()
