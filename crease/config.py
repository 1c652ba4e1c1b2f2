"""
Application configuration
"""
import os
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Settings from environment variables"""

    # Storage
    DATABASE_PATH: str = os.getenv("DATABASE_PATH", "crease.db")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Comma-separated extra CORS origins for the scoring UI
    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "")

    # Overs used by the CLI demo when none are given
    DEFAULT_TOTAL_OVERS: int = int(os.getenv("DEFAULT_TOTAL_OVERS", "20"))

    @property
    def database_url(self) -> str:
        return f"sqlite:///{self.DATABASE_PATH}"

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
