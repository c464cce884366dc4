"""
Application settings using Pydantic BaseSettings.
"""

from typing import List, Optional, Union

from pydantic import ValidationInfo, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # Application
    APP_NAME: str = "Interpreter Booking Engine"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "production"
    LOG_LEVEL: str = "INFO"
    AUDIT_LOG_LEVEL: str = "INFO"
    AUDIT_LOG_FILE: Optional[str] = None

    # API Configuration
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    API_PREFIX: str = "/api/v1"
    CORS_ORIGINS: Union[str, List[str]] = "*"

    # Database (components declared first so DATABASE_URL can be assembled)
    POSTGRES_USER: Optional[str] = None
    POSTGRES_PASSWORD: Optional[str] = None
    POSTGRES_SERVER: Optional[str] = None
    POSTGRES_DB: Optional[str] = None
    DATABASE_URL: Optional[str] = None
    DATABASE_POOL_SIZE: int = 10
    DATABASE_MAX_OVERFLOW: int = 20
    DATABASE_ECHO: bool = False
    DATABASE_POOL_TIMEOUT: int = 30
    DATABASE_POOL_RECYCLE: int = 3600

    # Redis / Queue
    REDIS_URL: str = "redis://localhost:6379/0"
    CELERY_BROKER_URL: str = "redis://localhost:6379/0"
    CELERY_RESULT_BACKEND: str = "redis://localhost:6379/0"
    CELERY_TASK_REJECT_ON_WORKER_LOST: bool = True
    CELERY_TASK_TIME_LIMIT: int = 300  # 5 minutes
    CELERY_TASK_SOFT_TIME_LIMIT: int = 240  # 4 minutes

    # Per-job locking ("memory" for a single process, "redis" for several workers)
    JOB_LOCK_BACKEND: str = "memory"
    JOB_LOCK_TIMEOUT_SECONDS: int = 10

    # Push notifications (OneSignal)
    ONESIGNAL_API_URL: str = "https://onesignal.com/api/v1/notifications"
    ONESIGNAL_APP_ID: Optional[str] = None
    ONESIGNAL_API_KEY: Optional[str] = None

    # SMS gateway
    SMS_GATEWAY_URL: Optional[str] = None
    SMS_GATEWAY_API_KEY: Optional[str] = None
    SMS_SENDER_NUMBER: str = "+46000000000"

    # Transactional mail API
    MAIL_API_URL: Optional[str] = None
    MAIL_API_KEY: Optional[str] = None
    MAIL_FROM_ADDRESS: str = "bookings@example.com"
    MAIL_FROM_NAME: str = "Interpreter Bookings"

    # External channels
    CHANNEL_REQUEST_TIMEOUT: int = 10
    MOCK_CHANNELS: bool = False

    # Booking rules
    IMMEDIATE_JOB_LEAD_MINUTES: int = 5
    CANCELLATION_WINDOW_HOURS: int = 24
    SESSION_REMINDER_LEAD_MINUTES: int = 60

    # Notification delivery window
    NOTIFICATION_NIGHT_START_HOUR: int = 22
    NOTIFICATION_NIGHT_END_HOUR: int = 7
    NOTIFICATION_TIMEZONE: str = "Europe/Stockholm"
    NOTIFICATION_LOCALE: str = "en"

    # Monitoring
    ENABLE_METRICS: bool = True
    PROMETHEUS_MULTIPROC_DIR: Optional[str] = None

    # Celery Beat Scheduler Configuration
    CELERY_EXPIRE_PENDING_JOBS_INTERVAL_SECONDS: int = 60
    CELERY_START_DUE_SESSIONS_INTERVAL_SECONDS: int = 60
    SWEEP_BATCH_SIZE: int = 100

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> List[str]:
        if isinstance(v, str):
            if v == "*":
                return ["*"]
            return [i.strip() for i in v.split(",")]
        elif isinstance(v, list):
            return v
        return ["*"]

    @field_validator("DATABASE_URL", mode="before")
    @classmethod
    def assemble_db_connection(cls, v: Optional[str], info: ValidationInfo) -> str:
        if isinstance(v, str):
            return v
        # Build from individual components if DATABASE_URL is not provided
        values = info.data
        user = values.get("POSTGRES_USER") or "booking_user"
        password = values.get("POSTGRES_PASSWORD") or "booking_pass"
        host = values.get("POSTGRES_SERVER") or "localhost"
        db = values.get("POSTGRES_DB") or "booking_engine"
        return f"postgresql+asyncpg://{user}:{password}@{host}:5432/{db}"

    @field_validator("ENVIRONMENT")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        if v not in ["development", "staging", "production", "test"]:
            raise ValueError(
                "Environment must be one of: development, staging, production, test"
            )
        return v

    @field_validator("LOG_LEVEL", "AUDIT_LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("JOB_LOCK_BACKEND")
    @classmethod
    def validate_lock_backend(cls, v: str) -> str:
        if v not in ["memory", "redis"]:
            raise ValueError("Job lock backend must be one of: memory, redis")
        return v

    @field_validator("NOTIFICATION_NIGHT_START_HOUR", "NOTIFICATION_NIGHT_END_HOUR")
    @classmethod
    def validate_hour(cls, v: int) -> int:
        if not 0 <= v <= 23:
            raise ValueError("Notification window hours must be between 0 and 23")
        return v

    model_config = {
        "env_file": ".env",
        "case_sensitive": True,
        "extra": "ignore",
        "validate_default": True,
    }


# Global settings instance
settings = Settings()
