"""
Configuration Settings

Centralized configuration management using Pydantic and environment variables.
"""
from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All sensitive values should be stored in .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Server settings
    host: str = "0.0.0.0"
    port: int = 5000

    # Database settings
    database_url: str = "sqlite:///./realty.db"
    database_pool_size: int = 20
    database_max_overflow: int = 10
    database_pool_timeout: int = 30
    database_pool_recycle: int = 3600
    database_echo: bool = False  # Set to True for SQL query logging

    # JWT settings
    jwt_secret: str = "realty-secret-key-change-in-production-use-env-var"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 7

    # CORS settings
    frontend_url: str = "http://localhost:3000"
    cors_origins: List[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    # Lead hand-off
    whatsapp_number: str = ""

    # ImageKit settings
    imagekit_private_key: Optional[str] = None
    imagekit_upload_url: str = "https://upload.imagekit.io/api/v1/files/upload"
    imagekit_api_url: str = "https://api.imagekit.io/v1"
    imagekit_timeout_seconds: int = 120
    media_folder: str = "solomon-realty"
    max_image_size_mb: int = 10
    max_video_size_mb: int = 100
    max_files_per_upload: int = 10

    # Redis settings (rate limit counters; in-process when unset)
    redis_url: Optional[str] = None

    # Rate limit settings
    rate_limit_enabled: bool = True
    api_rate_limit: int = 100
    api_rate_window_seconds: int = 15 * 60
    auth_rate_limit: int = 5
    auth_rate_window_seconds: int = 15 * 60
    lead_rate_limit: int = 10
    lead_rate_window_seconds: int = 60 * 60

    # Admin bootstrap (scripts/create_admin.py)
    admin_email: str = "admin@covnantreality.com"
    admin_password: Optional[str] = None
    admin_name: str = "Admin User"

    # Logging settings
    log_level: str = "INFO"
    log_format: str = "json"

    # Application settings
    environment: str = "development"
    debug: bool = False

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


# Singleton instance
settings = Settings()
