"""
Application Configuration
"""

from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Application settings"""

    # API Settings
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    DEBUG: bool = False

    # CORS
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173"
    ]

    LOG_LEVEL: str = "INFO"

    # Paths
    STAGING_PATH: str = "data/staging"
    PLANNERS_CONFIG: str = "config/planners.yaml"

    # Defaults
    DEFAULT_PLANNER: str = "lama"
    DEFAULT_TIMEOUT: float = 7.0
    KILL_GRACE_SECONDS: float = 5.0
    OUTPUT_CAPTURE_LIMIT: int = 10_000

    # Fast Downward search alias
    FD_ALIAS: str = "lama-first"

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
