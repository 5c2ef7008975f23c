from __future__ import annotations

import os
from dataclasses import dataclass

from objectfs.logging_config import parse_bool

DEFAULT_PRESIGNED_URL_EXPIRY_SECONDS = 600


@dataclass(frozen=True)
class ClientConfig:
    """Settings shared by every object client.

    ``filesystem_class_name`` is what the host has deployed as its file
    system, ``configured_provider`` is what an administrator selected. The
    two must agree before a client is considered ready.
    """

    filesystem_class_name: str
    configured_provider: str
    max_upload_bytes: int = 0
    presigned_urls_enabled: bool = False
    presigned_min_file_size: int = 0
    presigned_url_expiry_seconds: int = DEFAULT_PRESIGNED_URL_EXPIRY_SECONDS

    def __post_init__(self):
        if self.max_upload_bytes < 0:
            raise ValueError("ClientConfig.max_upload_bytes must be >= 0 (0 means no limit).")
        if self.presigned_min_file_size < 0:
            raise ValueError("ClientConfig.presigned_min_file_size must be >= 0.")
        if self.presigned_url_expiry_seconds <= 0:
            raise ValueError("ClientConfig.presigned_url_expiry_seconds must be > 0.")


@dataclass(frozen=True)
class S3Settings:
    bucket_name: str
    endpoint: str | None = None
    access_key: str | None = None
    secret_key: str | None = None
    region: str | None = None
    key_prefix: str = ""

    def __post_init__(self):
        if not self.bucket_name or not self.bucket_name.strip():
            raise ValueError("S3Settings.bucket_name must be a non-empty string.")
        has_access = bool(self.access_key and self.access_key.strip())
        has_secret = bool(self.secret_key and self.secret_key.strip())
        if has_access != has_secret:
            raise ValueError(
                "S3Settings requires all-or-nothing credentials: "
                "set both access_key and secret_key, or neither (for IAM role/default chain)."
            )


def require_env(var_name: str) -> str:
    value = os.getenv(var_name)
    if value is None:
        raise ValueError(f"Environment variable '{var_name}' is required but not set.")
    return value


def _env_int(var_name: str, default: int) -> int:
    raw = os.getenv(var_name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise RuntimeError(f"{var_name} must be an integer, got: {raw!r}") from exc


def load_client_config() -> ClientConfig:
    return ClientConfig(
        filesystem_class_name=os.getenv("OBJECTFS_FILESYSTEM_CLASS", ""),
        configured_provider=os.getenv("OBJECTFS_PROVIDER", ""),
        max_upload_bytes=_env_int("OBJECTFS_MAX_UPLOAD_BYTES", 0),
        presigned_urls_enabled=parse_bool(os.getenv("OBJECTFS_PRESIGNED_URLS"), default=False),
        presigned_min_file_size=_env_int("OBJECTFS_PRESIGNED_MIN_FILE_SIZE", 0),
        presigned_url_expiry_seconds=_env_int("OBJECTFS_PRESIGNED_EXPIRY", DEFAULT_PRESIGNED_URL_EXPIRY_SECONDS),
    )


def load_s3_settings() -> S3Settings:
    return S3Settings(
        bucket_name=require_env("OBJECTFS_S3_BUCKET"),
        endpoint=os.getenv("OBJECTFS_S3_ENDPOINT") or None,
        access_key=os.getenv("OBJECTFS_S3_ACCESS_KEY") or None,
        secret_key=os.getenv("OBJECTFS_S3_SECRET_KEY") or None,
        region=os.getenv("AWS_REGION") or os.getenv("AWS_DEFAULT_REGION") or None,
        key_prefix=os.getenv("OBJECTFS_KEY_PREFIX", ""),
    )
