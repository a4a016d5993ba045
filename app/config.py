"""
Application Configuration

Load settings from environment variables with validation.
"""

from functools import lru_cache
from typing import List, Optional
from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # Environment
    environment: str = "development"
    debug: bool = True
    log_level: Optional[str] = None

    # Firebase (auth + Firestore)
    firebase_credentials_path: str = "./service-account.json"

    # Redis (empty -> in-memory cache)
    redis_url: str = ""

    # TMDB
    tmdb_api_key: Optional[str] = None
    tmdb_base_url: str = "https://api.themoviedb.org/3"
    tmdb_timeout_seconds: float = 10.0
    default_language: str = "en-US"

    # Genre cache
    genre_cache_ttl_seconds: int = 86400  # 24 hours
    genre_degraded_ttl_seconds: int = 60  # a genre list failed to load

    # Rate Limiting
    rate_limit_enabled: bool = True
    rate_limit_per_minute: int = 60

    # Recommendations
    recommendation_limit: int = 20
    recommendation_top_genres: int = 3

    # CORS
    cors_origins: List[str] = ["http://localhost:3000"]

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )


@lru_cache()
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()
