import os
import logging
from functools import lru_cache
from typing import List
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Load environment variables only for local development
if os.path.exists('.env'):
    load_dotenv()
    logger.info("Loading from .env file (local development)")


class Settings:
    """Runtime configuration read from the environment"""

    def __init__(self):
        self.app_name = os.getenv("APP_NAME", "String Analyzer Service")
        self.app_version = os.getenv("APP_VERSION", "1.0.0")
        self.host = os.getenv("HOST", "0.0.0.0")
        self.port = int(os.getenv("PORT", 8000))
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()

        # In-memory SQLite unless told otherwise; records live as long as the process
        self.database_url = os.getenv("DATABASE_URL", "sqlite://")

        self.cors_origins = self._split(os.getenv("CORS_ORIGINS", "*"))

    @staticmethod
    def _split(raw: str) -> List[str]:
        return [item.strip() for item in raw.split(",") if item.strip()]


@lru_cache()
def get_settings() -> Settings:
    return Settings()
