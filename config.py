from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = Path(__file__).resolve().parent / ".env"


class Settings(BaseSettings):
    """Application settings, overridable through environment variables or .env"""

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    app_name: str = "Notes API"
    environment: str = "development"
    # include tracebacks in 500 responses
    debug: bool = False
    log_level: str = "INFO"
    api_prefix: str = "/api"

    # Database
    database_url: str = Field(
        "sqlite+aiosqlite:///./notes.db",
        validation_alias=AliasChoices("DATABASE_URL", "URL_DATABASE_POSTGRES"),
    )

    # Auth / JWT
    jwt_secret_key: str = "verysecretkatthatnobodyknows"
    jwt_algorithm: str = "HS256"
    jwt_expire_days: int = 7

    # CORS, comma separated list of origins
    frontend_url: str = "http://localhost:3000,http://localhost:3001"

    # Rate limiting
    rate_limit_max: int = 100
    rate_limit_window_minutes: int = 15
    rate_limit_storage_uri: str = "memory://"

    @property
    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.frontend_url.split(",") if origin.strip()]

    @property
    def rate_limit(self) -> str:
        return f"{self.rate_limit_max}/{self.rate_limit_window_minutes} minutes"


settings = Settings()
