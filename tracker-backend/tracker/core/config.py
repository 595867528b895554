# File: tracker/core/config.py

import os
from functools import lru_cache
from typing import List

from pydantic import BaseModel, Field, field_validator


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str, default: str) -> List[str]:
    return [i.strip() for i in os.getenv(name, default).split(",") if i.strip()]


class Settings(BaseModel):
    # Basic app info
    PROJECT_NAME: str = "Project Tracker API"
    VERSION: str = "0.1.0"

    api_prefix: str = "/api"
    env: str = os.getenv("ENV", "dev")
    debug: bool = _env_bool("DEBUG", False)

    # CORS
    backend_cors_origins: List[str] = Field(
        default_factory=lambda: _env_list(
            "BACKEND_CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000"
        )
    )

    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./tracker.db")

    # Security / auth
    secret_key: str = os.getenv("SECRET_KEY", "CHANGE_ME_IN_PRODUCTION_use_a_32_byte_or_longer_key")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 60 * 24))  # 24h
    algorithm: str = os.getenv("ALGORITHM", "HS256")
    bcrypt_rounds: int = int(os.getenv("BCRYPT_ROUNDS", 12))

    # Attachment storage
    upload_dir: str = os.getenv("UPLOAD_DIR", "uploads")
    max_upload_files: int = int(os.getenv("MAX_UPLOAD_FILES", 5))
    max_upload_size_mb: int = int(os.getenv("MAX_UPLOAD_SIZE_MB", 10))

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_json: bool = _env_bool("LOG_JSON", False)

    @field_validator("backend_cors_origins", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v):
        if isinstance(v, str):
            return [i.strip() for i in v.split(",") if i.strip()]
        if isinstance(v, list):
            return v
        return []

    @property
    def max_upload_size_bytes(self) -> int:
        return self.max_upload_size_mb * 1024 * 1024


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
