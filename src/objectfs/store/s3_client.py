"""S3 compatible object client (AWS S3, MinIO).

The SDK is imported when first used rather than at module import, so a host
without boto3 can still load this module and get ``check_availability() is
False`` instead of an ImportError.
"""

from __future__ import annotations

import hashlib
from collections.abc import Mapping
from typing import TYPE_CHECKING

from objectfs.config.client_config import ClientConfig, S3Settings, load_s3_settings
from objectfs.logging_config import get_logger, with_context
from objectfs.store.object_client import (
    NOT_HANDLED,
    ConnectionResult,
    DefaultObjectClient,
    NotHandled,
    PermissionResult,
    RangeRequest,
    Severity,
    StoredFile,
    object_key_for_hash,
)

if TYPE_CHECKING:
    import requests

logger = get_logger(__name__)

# Largest object a single PUT accepts.
S3_MAX_UPLOAD_BYTES = 5 * 1024 ** 3
RANGE_REQUEST_TIMEOUT_SECONDS = 10

PERMISSIONS_CHECK_KEY = "permissions_check_file"
PERMISSIONS_CHECK_CONTENT = b"This is a test file for objectfs."
RANGE_CHECK_CONTENT = b"objectfs range request check"

SDK_MISSING = "S3 client SDK (boto3/botocore) is not installed."
WRITE_FAILURE = "Could not write object to the external object storage. "
READ_FAILURE = "Could not read object from the external object storage. "
DELETE_SUCCESS = (
    "Could delete object from the external object storage - "
    "It is not recommended for the user to have delete permissions. "
)
DELETE_ERROR = "Could not delete object from the external object storage. "
PERMISSION_CHECK_PASSED = "Permissions check passed."

# Request headers a presigned URL can override on the response.
PRESIGNED_RESPONSE_PARAMS = {
    "content-disposition": "ResponseContentDisposition",
    "content-type": "ResponseContentType",
    "content-language": "ResponseContentLanguage",
    "cache-control": "ResponseCacheControl",
    "expires": "ResponseExpires",
}


def create_range_session() -> requests.Session:
    import requests
    from requests.adapters import HTTPAdapter
    from urllib3.util.retry import Retry

    retries = Retry(
        total=3,
        backoff_factor=0.5,
        status_forcelist=[500, 502, 503, 504],
        allowed_methods=["GET"],
    )
    adapter = HTTPAdapter(max_retries=retries)
    session = requests.Session()
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


def _sdk_errors() -> tuple[type[Exception], ...]:
    from botocore.exceptions import BotoCoreError, ClientError

    return ClientError, BotoCoreError


def _error_code(error: Exception) -> str | None:
    # only botocore ClientError carries a parsed response
    response = getattr(error, "response", None) or {}
    return response.get("Error", {}).get("Code")


def _error_details(error: Exception) -> str:
    response = getattr(error, "response", None)
    if response:
        err = response.get("Error", {})
        return f"{err.get('Code', 'Unknown')}: {err.get('Message', '')}".strip()
    return str(error)


class S3Client(DefaultObjectClient):
    sdk_modules = ("boto3", "botocore")

    def __init__(
        self,
        config: ClientConfig,
        settings: S3Settings | None = None,
        session: requests.Session | None = None,
    ):
        super().__init__(config)
        self.settings = settings or load_s3_settings()
        self.bucket_name = self.settings.bucket_name
        self.key_prefix = self.settings.key_prefix
        self.log = with_context(logger, provider="s3", bucket=self.bucket_name)
        self._client = None
        self._session = session

    @property
    def client(self):
        if self._client is None:
            import boto3
            from botocore.client import Config

            client_kwargs = {
                "config": Config(signature_version="s3v4"),
                "region_name": self.settings.region or "us-east-1",
            }
            if self.settings.endpoint:
                client_kwargs["endpoint_url"] = self.settings.endpoint
            if self.settings.access_key:
                client_kwargs["aws_access_key_id"] = self.settings.access_key
            if self.settings.secret_key:
                client_kwargs["aws_secret_access_key"] = self.settings.secret_key
            self._client = boto3.client("s3", **client_kwargs)
        return self._client

    @property
    def session(self) -> requests.Session:
        if self._session is None:
            self._session = create_range_session()
        return self._session

    def object_key(self, content_hash: str) -> str:
        return object_key_for_hash(content_hash, prefix=self.key_prefix)

    def test_connection(self) -> ConnectionResult:
        if not self.check_availability():
            return ConnectionResult(success=False, details=SDK_MISSING)
        try:
            self.client.head_bucket(Bucket=self.bucket_name)
        except _sdk_errors() as e:
            self.log.debug("head_bucket failed", exc_info=True)
            return ConnectionResult(success=False, details=_error_details(e))
        return ConnectionResult(success=True, details=f"Bucket {self.bucket_name!r} is reachable.")

    def test_permissions(self, test_delete: bool) -> PermissionResult:
        """Write, read and optionally delete a probe object.

        Being able to delete is reported as a warning and fails the check:
        files are only ever added to the store by the host.
        """
        if not self.check_availability():
            return PermissionResult(success=False, messages={SDK_MISSING: Severity.ERROR})
        key = f"{self.key_prefix}{PERMISSIONS_CHECK_KEY}"
        messages: dict[str, Severity] = {}
        write_failed = False

        try:
            self.client.put_object(Bucket=self.bucket_name, Key=key, Body=PERMISSIONS_CHECK_CONTENT)
        except _sdk_errors() as e:
            messages[WRITE_FAILURE + _error_details(e)] = Severity.ERROR
            write_failed = True
        success = not write_failed

        try:
            response = self.client.get_object(Bucket=self.bucket_name, Key=key)
            response["Body"].read()
        except _sdk_errors() as e:
            # a missing object after a failed write says nothing new about read access
            if not (write_failed and _error_code(e) == "NoSuchKey"):
                messages[READ_FAILURE + _error_details(e)] = Severity.ERROR
            success = False

        if test_delete:
            try:
                self.client.delete_object(Bucket=self.bucket_name, Key=key)
                messages[DELETE_SUCCESS] = Severity.WARNING
                success = False
            except _sdk_errors() as e:
                if _error_code(e) != "AccessDenied":
                    messages[DELETE_ERROR + _error_details(e)] = Severity.ERROR
                    success = False

        if success:
            messages[PERMISSION_CHECK_PASSED] = Severity.SUCCESS
        else:
            self.log.debug("Permission check failed: %s", "; ".join(messages))
        return PermissionResult(success=success, messages=messages)

    def supports_presigned_urls(self) -> bool:
        return True

    def generate_presigned_url(self, content_hash: str, headers: Mapping[str, str] | None = None) -> str:
        params = {"Bucket": self.bucket_name, "Key": self.object_key(content_hash)}
        for name, value in (headers or {}).items():
            param = PRESIGNED_RESPONSE_PARAMS.get(name.lower())
            if param:
                params[param] = value
        return self.client.generate_presigned_url(
            "get_object",
            Params=params,
            ExpiresIn=self.config.presigned_url_expiry_seconds,
        )

    def max_upload_size(self) -> int:
        return self.config.max_upload_bytes or S3_MAX_UPLOAD_BYTES

    def proxy_range_request(self, file: StoredFile, byte_range: RangeRequest) -> bytes | NotHandled:
        if not self.check_availability():
            return NOT_HANDLED
        import requests

        log = with_context(
            logger, provider="s3", bucket=self.bucket_name, content_hash=file.content_hash, byte_range=byte_range.header_value()
        )
        try:
            url = self.generate_presigned_url(file.content_hash)
            response = self.session.get(
                url,
                headers={"Range": byte_range.header_value()},
                timeout=RANGE_REQUEST_TIMEOUT_SECONDS,
            )
        except (ValueError, requests.exceptions.RequestException, *_sdk_errors()):
            log.warning("Range request failed", exc_info=True)
            return NOT_HANDLED
        if response.status_code != 206:
            log.warning("Range request not served: status=%s", response.status_code)
            return NOT_HANDLED
        return response.content

    def test_range_request(self) -> bool:
        if not self.check_availability():
            return False
        content_hash = hashlib.sha1(RANGE_CHECK_CONTENT).hexdigest()
        try:
            self.client.put_object(Bucket=self.bucket_name, Key=self.object_key(content_hash), Body=RANGE_CHECK_CONTENT)
        except _sdk_errors():
            self.log.debug("Could not upload range check object", exc_info=True)
            return False
        probe = StoredFile(content_hash=content_hash, filesize=len(RANGE_CHECK_CONTENT))
        byte_range = RangeRequest.from_offsets(2, 9)
        content = self.proxy_range_request(probe, byte_range)
        return content == RANGE_CHECK_CONTENT[byte_range.start:byte_range.end + 1]
