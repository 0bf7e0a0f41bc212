from typing import List, Optional, Union
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Application
    ENVIRONMENT: str = "development"
    NAME: str = "University Application Tracker"
    VERSION: str = "1.0.0"
    API_PREFIX: str = "/api/v1"
    LEGACY_API_PREFIX: str = "/api"
    """Pydantic v2 doesn't support parsing List[str] from a plain comma-separated string by default anymore."""
    ALLOWED_HOSTS: Union[str, List[str]] = "http://localhost:3000"
    # Overrides the level from logging_config.json when set
    LOG_LEVEL: Optional[str] = None

    # Database
    DATABASE_URL: str = "sqlite:///./university_tracker.db"
    DATABASE_ECHO: bool = False

    # Authentication & Security
    JWT_SECRET_KEY: str = "<your-jwt-secret-key>"
    JWT_ALGORITHM: str = "HS256"
    JWT_AUDIENCE: str = "authenticated"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    SERVICE_ROLE_KEY: str = "<your-service-role-key>"

    # MinIO Object Storage
    MINIO_ENDPOINT: str = "localhost:9000"
    MINIO_ACCESS_KEY: str = "<your-minio-access-key>"
    MINIO_SECRET_KEY: str = "<your-minio-secret-key>"
    MINIO_SECURE: bool = False
    MINIO_REGION: str = "us-east-1"
    STORAGE_BUCKET_NAME: str = "student-files"
    STORAGE_PUBLIC_BASE_URL: Optional[str] = None

    # Notifications
    NOTIFICATION_WINDOW_DAYS: int = 14

    # University search
    UNIVERSITY_SEARCH_DEFAULT_LIMIT: int = 20
    UNIVERSITY_SEARCH_MAX_LIMIT: int = 100

    @field_validator("ALLOWED_HOSTS", mode="before")
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> Union[List[str], str]:
        if not v:
            return []
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",")]
        return v

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


settings = Settings()
