"""
Application settings loaded from environment variables (and an optional `.env`).
"""
from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "User Directory API"
    APP_VERSION: str = "1.0.0"
    HOST: str = "0.0.0.0"
    PORT: int = 5000
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: list[str] = ["*"]

    # Storage
    DATABASE_PATH: str = "data/users.json"
    BCRYPT_ROUNDS: int = 10

    # Admin routes: "open" lets every request through, "credentials" requires
    # X-Admin-Email / X-Admin-Password headers matching an admin record.
    ADMIN_ACCESS_MODE: str = "open"

    # Cloudinary
    CLOUDINARY_CLOUD_NAME: str = ""
    CLOUDINARY_API_KEY: str = ""
    CLOUDINARY_API_SECRET: str = ""
    CLOUDINARY_FOLDER: str = "user-profiles"
    CLOUDINARY_API_BASE: str = "https://api.cloudinary.com/v1_1"
    CLOUDINARY_TIMEOUT_S: float = 30.0

    # Uploads
    MAX_UPLOAD_SIZE: int = 5 * 1024 * 1024
    ALLOWED_IMAGE_TYPES: list[str] = ["image/jpeg", "image/png", "image/gif"]
    ALLOWED_IMAGE_EXTENSIONS: list[str] = [".jpg", ".jpeg", ".png", ".gif"]
    IMAGE_MAX_WIDTH: int = 500
    IMAGE_MAX_HEIGHT: int = 500


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
