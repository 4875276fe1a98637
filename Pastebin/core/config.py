from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    APP_NAME: str = "Pastebin"
    VERSION: str = "0.1.0"
    LOG_LEVEL: str = "INFO"
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Public URL that prefixes every returned key
    SERVER: str = "http://localhost:8000/"
    KEY_LENGTH: int = 6
    CLIENT_IP_HEADER: str = "CF-Connecting-IP"

    # Tiering thresholds (bytes)
    MAX_CONTENT_BYTES: int = 15 * 1024 * 1024
    LARGE_OBJECT_THRESHOLD_BYTES: int = int(1024 * 1024 * 0.99)

    # Database
    DB_URL: str = "sqlite+aiosqlite:///./pastebin.db"

    # MinIO
    USE_MINIO: bool = False
    MINIO_ENDPOINT: str = "localhost:9000"
    MINIO_ACCESS_KEY: str = "minioadmin"
    MINIO_SECRET_KEY: str = "minioadmin"
    MINIO_BUCKET: str = "pastebin"
    MINIO_SECURE: bool = False

    class Config:
        case_sensitive = True
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
