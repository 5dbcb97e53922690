"""Application settings."""

from enum import StrEnum

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from prepis.domain.transfer_types import MIB, MIN_CHUNK_SIZE_BYTES

_MIN_MULTIPART_PART_SIZE_MB = MIN_CHUNK_SIZE_BYTES // MIB


class ProgressMode(StrEnum):
    """Available upload progress displays."""

    AUTO = "auto"
    BAR = "bar"
    LOG = "log"
    NONE = "none"


class Settings(BaseSettings):
    """Runtime settings loaded from environment variables."""

    aws_region: str | None = None
    s3_key_prefix: str = "transcribe-temp"
    multipart_threshold_mb: int = 100
    multipart_part_size_mb: int = 16
    multipart_concurrency: int = 4
    max_object_size_mb: int = 2048
    poll_min_interval_seconds: float = 5.0
    poll_max_interval_seconds: float = 30.0
    poll_growth_factor: float = 1.5
    poll_max_attempts: int = 120
    language_code: str = "en-US"
    result_fetch_timeout_seconds: float = 30.0
    verify_credentials: bool = True
    strict_cleanup: bool = False
    progress_mode: ProgressMode = ProgressMode.AUTO
    progress_log_interval_seconds: float = 5.0

    @model_validator(mode="after")
    def validate_settings(self) -> "Settings":
        """Ensure transfer and polling settings are consistent."""

        if self.multipart_threshold_mb < 1:
            raise ValueError("PREPIS_MULTIPART_THRESHOLD_MB must be >= 1.")
        if self.multipart_part_size_mb < _MIN_MULTIPART_PART_SIZE_MB:
            raise ValueError(
                f"PREPIS_MULTIPART_PART_SIZE_MB must be >= {_MIN_MULTIPART_PART_SIZE_MB}."
            )
        if self.multipart_concurrency < 1:
            raise ValueError("PREPIS_MULTIPART_CONCURRENCY must be >= 1.")
        if self.max_object_size_mb < 1:
            raise ValueError("PREPIS_MAX_OBJECT_SIZE_MB must be >= 1.")
        if self.multipart_threshold_mb > self.max_object_size_mb:
            raise ValueError(
                "PREPIS_MULTIPART_THRESHOLD_MB must be <= PREPIS_MAX_OBJECT_SIZE_MB."
            )
        if self.poll_min_interval_seconds <= 0:
            raise ValueError("PREPIS_POLL_MIN_INTERVAL_SECONDS must be > 0.")
        if self.poll_max_interval_seconds < self.poll_min_interval_seconds:
            raise ValueError(
                "PREPIS_POLL_MAX_INTERVAL_SECONDS must be >= PREPIS_POLL_MIN_INTERVAL_SECONDS."
            )
        if self.poll_growth_factor < 1.0:
            raise ValueError("PREPIS_POLL_GROWTH_FACTOR must be >= 1.0.")
        if self.poll_max_attempts < 1:
            raise ValueError("PREPIS_POLL_MAX_ATTEMPTS must be >= 1.")
        if not self.language_code.strip():
            raise ValueError("PREPIS_LANGUAGE_CODE cannot be empty.")
        if self.result_fetch_timeout_seconds <= 0:
            raise ValueError("PREPIS_RESULT_FETCH_TIMEOUT_SECONDS must be > 0.")
        if self.progress_log_interval_seconds < 0:
            raise ValueError("PREPIS_PROGRESS_LOG_INTERVAL_SECONDS must be >= 0.")
        return self

    model_config = SettingsConfigDict(env_prefix="PREPIS_", extra="ignore")


__all__ = ["ProgressMode", "Settings"]
