from __future__ import annotations
import json
from pathlib import Path
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from objectfs.config.client_config import DEFAULT_PRESIGNED_URL_EXPIRY_SECONDS, ClientConfig, S3Settings

# Admin settings as the host stores them, keyed by the host's own setting names.
class ObjectFsSettings(BaseModel):
    model_config = ConfigDict(extra='ignore', populate_by_name=True)
    provider: str = Field("", alias="filesystem", description="File system class selected by the administrator.")
    presigned_urls_enabled: bool = Field(False, alias="enablepresignedurls", description="Redirect downloads to presigned URLs.")
    presigned_min_file_size: int = Field(0, ge=0, alias="presignedminfilesize", description="Smallest file, in bytes, served through a presigned URL.")
    presigned_url_expiry_seconds: int = Field(DEFAULT_PRESIGNED_URL_EXPIRY_SECONDS, gt=0, alias="expirationtime", description="Lifetime of a presigned URL in seconds.")
    max_upload_bytes: int = Field(0, ge=0, alias="maxupload", description="Upload ceiling in bytes, 0 for the client default.")
    s3_bucket: Optional[str] = Field(None, description="Bucket holding the offloaded files.")
    s3_key: Optional[str] = Field(None, description="Access key id.")
    s3_secret: Optional[str] = Field(None, description="Secret access key.")
    s3_region: Optional[str] = Field(None, description="Bucket region.")
    s3_base_url: Optional[str] = Field(None, description="Custom endpoint for S3 compatible stores.")
    key_prefix: str = Field("", description="Prefix prepended to every object key.")

    def to_client_config(self, filesystem_class_name: str) -> ClientConfig:
        return ClientConfig(
            filesystem_class_name=filesystem_class_name,
            configured_provider=self.provider,
            max_upload_bytes=self.max_upload_bytes,
            presigned_urls_enabled=self.presigned_urls_enabled,
            presigned_min_file_size=self.presigned_min_file_size,
            presigned_url_expiry_seconds=self.presigned_url_expiry_seconds,
        )

    def to_s3_settings(self) -> S3Settings | None:
        if not self.s3_bucket:
            return None
        return S3Settings(
            bucket_name=self.s3_bucket,
            endpoint=self.s3_base_url or None,
            access_key=self.s3_key or None,
            secret_key=self.s3_secret or None,
            region=self.s3_region or None,
            key_prefix=self.key_prefix,
        )

def load_settings_file(settings_path: Path, filesystem_class_name: str) -> tuple[ClientConfig, S3Settings | None]:
    if not settings_path.exists():
        raise FileNotFoundError(f"Settings file not found at '{settings_path}'")
    raw_data = json.loads(settings_path.read_text())
    settings = ObjectFsSettings.model_validate(raw_data)
    return settings.to_client_config(filesystem_class_name), settings.to_s3_settings()
