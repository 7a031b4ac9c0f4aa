# Standard library imports
import os
from typing import Final, List, Optional


def _getenv_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """
    Application settings loaded from environment variables.

    This class centralizes all configuration settings for the application.
    All settings are loaded from environment variables with sensible defaults.
    """

    def __init__(self) -> None:
        # Database Configuration
        self.mongo_uri: Final[str] = os.getenv("MONGO_URI", "mongodb://localhost:27017")
        self.mongo_database_name: Final[str] = os.getenv("MONGO_DB_NAME", "eventface")

        # AWS Configuration (object storage + face index service)
        self.aws_region: Final[str] = os.getenv("AWS_REGION", "us-east-1")
        self.aws_access_key_id: Final[str] = os.getenv("AWS_ACCESS_KEY_ID", "")
        self.aws_secret_access_key: Final[str] = os.getenv("AWS_SECRET_ACCESS_KEY", "")
        self.s3_bucket_name: Final[str] = os.getenv("AWS_S3_BUCKET", "")
        self.collection_prefix: Final[str] = os.getenv("COLLECTION_PREFIX", "event-")

        # Batch indexing
        self.batch_window_size: Final[int] = int(os.getenv("BATCH_WINDOW_SIZE", "10"))
        self.batch_window_pause: Final[float] = float(os.getenv("BATCH_WINDOW_PAUSE", "1.0"))
        self.index_max_retries: Final[int] = int(os.getenv("INDEX_MAX_RETRIES", "3"))
        self.retry_base_delay: Final[float] = float(os.getenv("RETRY_BASE_DELAY", "1.0"))
        self.retry_max_delay: Final[float] = float(os.getenv("RETRY_MAX_DELAY", "30.0"))
        self.retry_jitter: Final[float] = float(os.getenv("RETRY_JITTER", "1.0"))
        self.index_asset_timeout: Final[float] = float(os.getenv("INDEX_ASSET_TIMEOUT", "60"))
        self.duplicate_check_enabled: Final[bool] = _getenv_bool("DUPLICATE_CHECK_ENABLED", "true")
        self.duplicate_check_threshold: Final[float] = float(
            os.getenv("DUPLICATE_CHECK_THRESHOLD", "95")
        )

        # Search
        self.search_threshold: Final[float] = float(os.getenv("SEARCH_THRESHOLD", "70"))
        self.search_max_results: Final[int] = int(os.getenv("SEARCH_MAX_RESULTS", "50"))

        # Media
        self.video_frame_count: Final[int] = int(os.getenv("VIDEO_FRAME_COUNT", "10"))
        self.max_image_upload_mb: Final[int] = int(os.getenv("MAX_IMAGE_UPLOAD_MB", "50"))
        self.max_video_upload_mb: Final[int] = int(os.getenv("MAX_VIDEO_UPLOAD_MB", "500"))

        # Misc
        self.local_timezone: Final[str] = os.getenv("LOCAL_TIMEZONE", "UTC")
        self.log_level: Final[str] = os.getenv("LOG_LEVEL", "INFO")
        self.cors_origins: Final[List[str]] = [
            origin.strip()
            for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173,http://localhost:3000").split(",")
            if origin.strip()
        ]


# Global settings instance (singleton pattern)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get application settings (singleton pattern)

    Returns:
        Settings instance with all configuration values
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
