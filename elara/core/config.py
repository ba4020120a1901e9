from pathlib import Path
from typing import List

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="ELARA_", env_file=".env", extra="ignore")

    APP_NAME: str = "Elara Media API"
    APP_VERSION: str = "0.1.0"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = Field(default=3000, validation_alias=AliasChoices("ELARA_PORT", "PORT"))
    ALLOWED_ORIGINS: List[str] = Field(
        default=["http://localhost:5173", "https://elara-frontend.vercel.app"],
        description="Origins allowed to call the API from a browser",
    )

    # Storage
    DB_PATH: Path = Field(default=Path("db.json"), description="JSON file holding plays and the scan cache")
    UPLOADS_DIR: Path = Field(default=Path("uploads"), description="Public directory for extracted cover art")
    MAX_UPLOAD_BYTES: int = 200 * 1024 * 1024

    LOG_LEVEL: str = "INFO"

    # Expense service
    EXPENSES_DATABASE_URL: str = "sqlite+aiosqlite:///./expenses.db"
    EXPENSES_PORT: int = 5000


settings = Settings()
