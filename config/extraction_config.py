from __future__ import annotations

import os
from dataclasses import dataclass

from lib.errors import ConfigurationError

from .settings import (
    DEFAULT_AWS_REGION,
    DEFAULT_CONVERSION_TIMEOUT,
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_PDLA_TIMEOUT,
    DEFAULT_PDLA_URL,
    EXTRACTION_QUEUE,
    LIBREOFFICE_BIN,
    REDIS_HOST,
    REDIS_PORT,
    TEMP_DIR,
    extraction_workers,
)


def _read_int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from e
    if value < 1:
        raise ConfigurationError(f"{name} must be positive, got {value}")
    return value


@dataclass(frozen=True)
class ExtractionConfig:
    """Process-wide settings, loaded once at startup."""

    s3_bucket: str
    database_url: str
    s3_endpoint: str | None = None
    aws_region: str = DEFAULT_AWS_REGION
    redis_host: str = REDIS_HOST
    redis_port: int = REDIS_PORT
    extraction_queue: str = EXTRACTION_QUEUE
    extraction_queue_ocr: str | None = None
    pdla_url: str = DEFAULT_PDLA_URL
    pdla_timeout: int = DEFAULT_PDLA_TIMEOUT
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    temp_dir: str = TEMP_DIR
    libreoffice_bin: str = LIBREOFFICE_BIN
    conversion_timeout: int = DEFAULT_CONVERSION_TIMEOUT
    workers: int = extraction_workers

    @classmethod
    def from_env(cls) -> "ExtractionConfig":
        s3_bucket = os.getenv("S3_BUCKET")
        if not s3_bucket:
            raise ConfigurationError("S3_BUCKET is not configured")

        database_url = os.getenv("DATABASE_URL")
        if not database_url:
            raise ConfigurationError("DATABASE_URL is not configured")

        return cls(
            s3_bucket=s3_bucket,
            database_url=database_url,
            s3_endpoint=os.getenv("S3_ENDPOINT") or None,
            aws_region=os.getenv("AWS_REGION", DEFAULT_AWS_REGION),
            redis_host=os.getenv("REDIS_HOST", REDIS_HOST),
            redis_port=_read_int_env("REDIS_PORT", REDIS_PORT),
            extraction_queue=os.getenv("EXTRACTION_QUEUE", EXTRACTION_QUEUE),
            extraction_queue_ocr=os.getenv("EXTRACTION_QUEUE_OCR") or None,
            pdla_url=os.getenv("PDLA_URL", DEFAULT_PDLA_URL),
            pdla_timeout=_read_int_env("PDLA_TIMEOUT", DEFAULT_PDLA_TIMEOUT),
            max_attempts=_read_int_env("MAX_ATTEMPTS", DEFAULT_MAX_ATTEMPTS),
            temp_dir=os.getenv("TEMP_DIR", TEMP_DIR),
            libreoffice_bin=os.getenv("LIBREOFFICE_BIN", LIBREOFFICE_BIN),
            conversion_timeout=_read_int_env(
                "CONVERSION_TIMEOUT", DEFAULT_CONVERSION_TIMEOUT
            ),
            workers=_read_int_env("EXTRACTION_WORKERS", extraction_workers),
        )
