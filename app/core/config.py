from pathlib import Path
import os
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parents[2]  # repo root

ENV_FILE = os.getenv("ENV_FILE", str(BASE_DIR / ".env"))

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=ENV_FILE, extra="ignore")

    APP_ENV: str = "local"
    DATABASE_URL: str = "sqlite:///./dimensions360.db"
    CORS_ORIGINS: str = "*"  # Comma-separated list of allowed origins, or "*" for all
    LOG_LEVEL: str = "INFO"

    # Rating scale used for generated questions and the low-score threshold
    RATING_SCALE_MIN: int = 1
    RATING_SCALE_MAX: int = 5
    # Position on the scale below which a category is a development area (0.5 on 1-5 => 3.0)
    LOW_SCORE_THRESHOLD_RATIO: float = 0.5

    # OpenAI-compatible chat completions endpoint
    TEXT_GENERATION_URL: str | None = None
    TEXT_GENERATION_API_KEY: str | None = None
    TEXT_GENERATION_MODEL: str = "gpt-4"
    TEXT_GENERATION_TEMPERATURE: float = 0.7
    TEXT_GENERATION_MAX_TOKENS: int = 1000
    TEXT_GENERATION_TIMEOUT: float = 30.0

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS into a list, handling '*' for development"""
        if self.CORS_ORIGINS == "*":
            return ["*"]
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

settings = Settings()
