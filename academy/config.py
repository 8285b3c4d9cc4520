"""
Configuration management using Pydantic Settings
"""
from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Database
    DATABASE_URL: str = "sqlite:///./academy.db"

    # Redis (empty string disables the read-through cache)
    REDIS_URL: str = ""
    CACHE_TTL: int = 300  # 5 minutes

    # Auth
    SECRET_KEY: str = "dev-secret-key-change-in-production"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # Application
    APP_NAME: str = "SDR Academy"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ALLOWED_ORIGINS: List[str] = ["http://localhost:5173", "http://localhost:3000"]

    # Rate Limiting
    RATE_LIMIT_PER_MINUTE: int = 120
    RATE_LIMIT_PER_HOUR: int = 3000

    # Training content
    DEFAULT_PASSING_SCORE: int = 80
    DEFAULT_LESSON_XP: int = 100
    LEADERBOARD_LIMIT: int = 20

    # Daily outbound targets used by the perfect_week badge
    DAILY_TARGET_CALLS: int = 10
    DAILY_TARGET_EMAILS: int = 10
    DAILY_TARGET_LINKEDIN: int = 5

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = True


# Global settings instance
settings = Settings()
