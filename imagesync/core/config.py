"""
Configuration module for the Image Store Sync service.

This module defines the settings and configuration parameters for the
consistency audit, the upload-notification relay and the HTTP trigger.
It uses Pydantic's Settings management to load configuration from environment variables.
"""

from enum import Enum
from pathlib import Path
from typing import Any, List, Optional

from pydantic import Field, PostgresDsn, SecretStr, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LogLevel(str, Enum):
    """Log level enumeration."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class Environment(str, Enum):
    """Environment enumeration."""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TEST = "test"


class StorageType(str, Enum):
    """Blob store backends."""
    S3 = "s3"
    GCS = "gcs"
    LOCAL = "local"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    This class defines all configuration parameters for the service,
    with appropriate defaults and validation.
    """
    # General settings
    PROJECT_NAME: str = "Image Store Sync"
    PROJECT_DESCRIPTION: str = "Catalog/blob-store consistency audit and upload notification relay"
    VERSION: str = "0.1.0"
    ENVIRONMENT: Environment = Environment.DEVELOPMENT
    DEBUG: bool = False
    LOG_LEVEL: LogLevel = LogLevel.INFO
    API_PREFIX: str = "/api/v1"
    SHOW_DOCS: bool = True
    PORT: int = 8000
    METRICS_ENABLED: bool = True

    # Catalog database settings
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: str = "5432"
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: SecretStr = Field(default=SecretStr("postgres"))
    POSTGRES_DB: str = "images"
    POSTGRES_URI: Optional[str] = None

    # Blob store settings
    STORAGE_TYPE: StorageType = StorageType.S3
    S3_BUCKET: Optional[str] = None
    S3_REGION: Optional[str] = None
    GCS_BUCKET: Optional[str] = None
    GCS_PROJECT_ID: Optional[str] = None
    LOCAL_STORAGE_PATH: Path = Path("./data")
    # Keys owned by the hosting application, never compared against the catalog.
    # Deployments that relied on the older bare "app" match set RESERVED_KEY_PREFIXES='["app"]'
    RESERVED_KEY_PREFIXES: List[str] = ["app/"]

    # Notification settings
    AWS_REGION: Optional[str] = None
    SQS_QUEUE_URL: Optional[str] = None
    SNS_TOPIC_ARN: Optional[str] = None

    # Relay settings
    RELAY_POLL_INTERVAL: float = 60.0
    RELAY_BATCH_SIZE: int = Field(default=10, ge=1, le=10)
    RELAY_WAIT_SECONDS: int = Field(default=5, ge=0, le=20)

    @field_validator("POSTGRES_URI", mode="before")
    def assemble_postgres_uri(cls, v: Optional[str], info: ValidationInfo) -> Any:
        """
        Assemble PostgreSQL URI from individual components.

        Args:
            v: The value to validate
            info: Validation context information

        Returns:
            Assembled PostgreSQL URI
        """
        if isinstance(v, str):
            return v

        data = info.data
        password = data.get("POSTGRES_PASSWORD")
        if isinstance(password, SecretStr):
            password = password.get_secret_value()

        return str(
            PostgresDsn.build(
                scheme="postgresql+asyncpg",
                username=data.get("POSTGRES_USER"),
                password=password,
                host=data.get("POSTGRES_HOST"),
                port=int(data.get("POSTGRES_PORT") or 5432),
                path=data.get("POSTGRES_DB") or "",
            )
        )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        use_enum_values=True,
        extra="ignore",
        validate_default=True,
    )


# Create global settings instance
settings = Settings()
