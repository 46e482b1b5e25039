"""
Configuration for the vodsync worker.

All settings live on a single SyncConfig value built once at startup
(usually from environment variables / .env) and handed to each component.
"""

import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv


class ConfigError(ValueError):
    """Raised when a required setting is missing or malformed."""


DEFAULT_SHARE_URL_TEMPLATE = "http://oneechan.moe/Watch?id={id}&set={label}"


def _parse_bool(value: Optional[str], default: bool = False) -> bool:
    if value is None or value.strip() == "":
        return default
    normalized = value.strip().lower()
    if normalized in ("1", "true", "yes", "on"):
        return True
    if normalized in ("0", "false", "no", "off"):
        return False
    raise ConfigError(f"Invalid boolean value: {value!r}")


def _parse_number(name: str, value: Optional[str], default, cast=int):
    if value is None or value.strip() == "":
        return default
    try:
        return cast(value)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {value!r}")


@dataclass
class SyncConfig:
    """Settings for the upload/reconcile worker"""

    # Local discovery
    download_folder: str = ""
    regex_pattern: str = ""

    # Relational store
    database_url: str = "sqlite:///data/vodsync.db"

    # Remote object store
    storage_backend: str = "cloud"  # "cloud" (S3-compatible) or "local"
    local_storage_root: str = "data/storage"
    bucket_name: Optional[str] = None
    bucket_endpoint: Optional[str] = None
    bucket_key_id: Optional[str] = None
    bucket_access_key: Optional[str] = None
    bucket_region: str = "ams3"
    upload_chunk_size: int = 1024 * 1024

    # Social sharing
    share_to_weibo: bool = False
    weibo_access_token: Optional[str] = None
    share_url_template: str = DEFAULT_SHARE_URL_TEMPLATE

    # Localized title lookup sources
    lookup_sites: tuple[Optional[str], Optional[str], Optional[str]] = field(
        default=(None, None, None)
    )

    # Scheduling and retry
    interval_seconds: float = 300.0
    retry_base_delay: float = 1.0
    retry_max_delay: float = 60.0

    log_dir: str = "logs"

    @classmethod
    def from_env(
        cls,
        env_file: Optional[str] = None,
        backend: Optional[str] = None,
        worker: bool = True,
    ) -> "SyncConfig":
        """
        Build a config from environment variables (and .env if present).

        Args:
            env_file: Explicit .env file to load.
            backend: Overrides STORAGE_BACKEND ("cloud" or "local").
            worker: Validate everything the sync worker needs. When False only
                the database settings are checked (init-db, status).
        """
        load_dotenv(env_file)
        config = cls(
            download_folder=os.getenv("DOWNLOAD_FOLDER", ""),
            regex_pattern=os.getenv("REGEX_PATTERN", ""),
            database_url=os.getenv("DATABASE_URL", cls.database_url),
            storage_backend=(
                backend or os.getenv("STORAGE_BACKEND", cls.storage_backend)
            ).lower(),
            local_storage_root=os.getenv(
                "LOCAL_STORAGE_ROOT", cls.local_storage_root
            ),
            bucket_name=os.getenv("BUCKET_NAME"),
            bucket_endpoint=os.getenv("BUCKET_ENDPOINT"),
            bucket_key_id=os.getenv("BUCKET_KEY_ID"),
            bucket_access_key=os.getenv("BUCKET_ACCESS_KEY"),
            bucket_region=os.getenv("BUCKET_REGION", cls.bucket_region),
            upload_chunk_size=_parse_number(
                "UPLOAD_CHUNK_SIZE",
                os.getenv("UPLOAD_CHUNK_SIZE"),
                cls.upload_chunk_size,
            ),
            share_to_weibo=_parse_bool(os.getenv("SHARE_TO_WEIBO")),
            weibo_access_token=os.getenv("WEIBO_ACCESS_TOKEN"),
            share_url_template=os.getenv(
                "SHARE_URL_TEMPLATE", DEFAULT_SHARE_URL_TEMPLATE
            ),
            lookup_sites=(
                os.getenv("EN_SITE"),
                os.getenv("ZH_SITE"),
                os.getenv("RU_SITE"),
            ),
            interval_seconds=_parse_number(
                "SYNC_INTERVAL_SECONDS",
                os.getenv("SYNC_INTERVAL_SECONDS"),
                cls.interval_seconds,
                float,
            ),
            retry_base_delay=_parse_number(
                "RETRY_BASE_DELAY",
                os.getenv("RETRY_BASE_DELAY"),
                cls.retry_base_delay,
                float,
            ),
            retry_max_delay=_parse_number(
                "RETRY_MAX_DELAY",
                os.getenv("RETRY_MAX_DELAY"),
                cls.retry_max_delay,
                float,
            ),
            log_dir=os.getenv("LOG_DIR", cls.log_dir),
        )
        if worker:
            config.validate()
        else:
            config.validate_database()
        return config

    def validate_database(self) -> None:
        if not self.database_url:
            raise ConfigError("DATABASE_URL is not set")

    def validate(self) -> None:
        """
        Check required settings.

        Raises:
            ConfigError: If a required value is missing or inconsistent.
        """
        self.validate_database()
        if not self.download_folder:
            raise ConfigError("DOWNLOAD_FOLDER is not set")
        if not self.regex_pattern:
            raise ConfigError("REGEX_PATTERN is not set")
        if self.storage_backend not in ("cloud", "local"):
            raise ConfigError(
                f"STORAGE_BACKEND must be 'cloud' or 'local', got {self.storage_backend!r}"
            )
        if self.storage_backend == "cloud" and not (
            self.bucket_name
            and self.bucket_endpoint
            and self.bucket_key_id
            and self.bucket_access_key
        ):
            raise ConfigError(
                "Cloud storage requires BUCKET_NAME, BUCKET_ENDPOINT, "
                "BUCKET_KEY_ID and BUCKET_ACCESS_KEY"
            )
        if self.share_to_weibo and not self.weibo_access_token:
            raise ConfigError("SHARE_TO_WEIBO is enabled but WEIBO_ACCESS_TOKEN is not set")
        if self.interval_seconds < 0:
            raise ConfigError("SYNC_INTERVAL_SECONDS must not be negative")
        if self.retry_base_delay < 0 or self.retry_max_delay < 0:
            raise ConfigError("Retry delays must not be negative")
