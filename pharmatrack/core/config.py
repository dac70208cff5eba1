"""
Core configuration for PharmaTrack.
Manages environment variables and storage settings.
"""
import os
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables or .env file."""

    # API Configuration
    api_title: str = os.getenv("API_TITLE", "PharmaTrack API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")

    # Storage Configuration
    # Backend is one of: file, s3, memory
    storage_backend: str = os.getenv("STORAGE_BACKEND", "file")
    storage_key: str = os.getenv("STORAGE_KEY", "@pharmatrack_inventory")
    storage_dir: str = os.getenv("STORAGE_DIR", ".pharmatrack")

    # AWS Configuration (s3 backend only)
    aws_region: str = os.getenv("AWS_REGION", "us-east-1")
    s3_bucket_name: str = os.getenv("S3_BUCKET_NAME", "")

    # Inventory thresholds
    low_stock_threshold: int = int(os.getenv("LOW_STOCK_THRESHOLD", "5"))
    expiry_warning_days: int = int(os.getenv("EXPIRY_WARNING_DAYS", "30"))
    reference_timezone: str = os.getenv("REFERENCE_TIMEZONE", "UTC")

    # Environment
    environment: str = os.getenv("ENVIRONMENT", "dev")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    class Config:
        env_file = ".env"
        case_sensitive = False


# Global settings instance
settings = Settings()
