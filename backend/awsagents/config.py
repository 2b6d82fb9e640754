"""Runtime configuration loaded from environment variables.

This module centralizes service settings such as database URL, default AWS
region, the agents config file location and API behavior defaults.
"""

import os
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Typed settings object used across the service."""

    env: str = os.getenv("ENV", "dev")
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./data/dev.db")
    aws_region: str = os.getenv("AWS_REGION", "us-east-1")
    agents_config_path: str = os.getenv("AGENTS_CONFIG_PATH", "")
    chat_history_limit: int = int(os.getenv("CHAT_HISTORY_LIMIT", "20"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()
    cors_origins: list[str] = [x.strip() for x in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",") if x.strip()]


settings = Settings()
