import os
from typing import List
from pydantic_settings import BaseSettings

MB = 1024 * 1024


class Settings(BaseSettings):
    PROJECT_NAME: str = "Document Manager"
    API_PREFIX: str = "/api"

    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        "postgresql+asyncpg://postgres:postgres@db:5432/documents"
    )
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10

    UPLOAD_DIR: str = os.getenv("UPLOAD_DIR", "uploads")
    UPLOADS_PUBLIC_PATH: str = "/uploads"
    MAX_UPLOAD_SIZE: int = 10 * MB
    # multipart boundaries and form fields on top of the file itself
    MULTIPART_OVERHEAD: int = 64 * 1024
    ALLOWED_MIME_TYPES: List[str] = [
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "text/plain",
        "image/jpeg",
        "image/jpg",
        "image/png",
        "image/gif",
        "application/vnd.ms-excel",
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ]

    CORS_ORIGINS: List[str] = ["*"]

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_TO_FILE: bool = False
    LOG_JSON: bool = False

    ENABLE_METRICS: bool = True

    class Config:
        env_file = ".env"

settings = Settings()
