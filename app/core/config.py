from pathlib import Path
import os

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL

BASE_DIR = Path(__file__).resolve().parents[2]  # repo root

ENV_FILE = os.getenv("ENV_FILE", str(BASE_DIR / ".env"))


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=ENV_FILE, extra="ignore")

    APP_ENV: str = Field(default="development", validation_alias=AliasChoices("APP_ENV", "NODE_ENV"))
    PORT: int = 3000
    CORS_ORIGINS: str = "*"  # Comma-separated list of allowed origins, or "*" for all
    JWT_SECRET: str | None = None

    # Either a full URL, or assembled from the DB_* parts below
    DATABASE_URL: str | None = None
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_USER: str = Field(default="postgres", validation_alias=AliasChoices("DB_USER", "DB_USERNAME"))
    DB_PASSWORD: str = "password"
    DB_NAME: str = Field(default="employ_management", validation_alias=AliasChoices("DB_NAME", "DB_DATABASE"))

    DB_POOL_MAX: int = 10
    DB_POOL_MIN: int = 0
    DB_POOL_ACQUIRE_TIMEOUT: int = 30  # seconds
    DB_POOL_IDLE_TIMEOUT: int = 10  # seconds

    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379

    LOG_LEVEL: str = "info"
    LOG_DIR: str = str(BASE_DIR / "logs")

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return URL.create(
            "postgresql+psycopg2",
            username=self.DB_USER,
            password=self.DB_PASSWORD,
            host=self.DB_HOST,
            port=self.DB_PORT,
            database=self.DB_NAME,
        ).render_as_string(hide_password=False)

    @property
    def is_production(self) -> bool:
        return self.APP_ENV.lower() == "production"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS into a list, handling '*' for development"""
        if self.CORS_ORIGINS == "*":
            return ["*"]
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]


settings = Settings()
