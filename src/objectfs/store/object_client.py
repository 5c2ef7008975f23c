"""Contract shared by every object storage client, plus its default behavior."""

from __future__ import annotations

import enum
import importlib.util
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from objectfs.config.client_config import ClientConfig


class UnsupportedOperation(Exception):
    """Raised when a caller uses a feature the client does not implement."""


class Severity(str, enum.Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    SUCCESS = "success"


class NotHandled(enum.Enum):
    NOT_HANDLED = "not_handled"

    def __bool__(self) -> bool:
        return False


# Returned by proxy_range_request when the caller should serve the range itself.
NOT_HANDLED = NotHandled.NOT_HANDLED


@dataclass(frozen=True)
class ConnectionResult:
    success: bool
    details: str = ""


@dataclass(frozen=True)
class PermissionResult:
    success: bool
    messages: dict[str, Severity] = field(default_factory=dict)


@dataclass(frozen=True)
class RangeRequest:
    """Byte range of a file, ``start`` and ``end`` both inclusive."""

    start: int
    end: int
    length: int

    def __post_init__(self):
        if self.start < 0:
            raise ValueError(f"RangeRequest.start must be >= 0, got: {self.start}")
        if self.end < self.start:
            raise ValueError(f"RangeRequest.end must be >= start, got: start={self.start} end={self.end}")
        if self.length != self.end - self.start + 1:
            raise ValueError(
                f"RangeRequest.length must equal end - start + 1, got: "
                f"start={self.start} end={self.end} length={self.length}"
            )

    @classmethod
    def from_offsets(cls, start: int, end: int) -> RangeRequest:
        return cls(start=start, end=end, length=end - start + 1)

    def header_value(self) -> str:
        return f"bytes={self.start}-{self.end}"


@dataclass(frozen=True)
class StoredFile:
    content_hash: str
    filesize: int
    filename: str = ""
    mimetype: str = "application/octet-stream"


def object_key_for_hash(content_hash: str, prefix: str = "") -> str:
    """Content addressed key: ``<prefix>ab/cd/abcd...``."""
    content_hash = (content_hash or "").strip()
    if len(content_hash) < 4:
        raise ValueError(f"Content hash must be at least 4 characters, got: {content_hash!r}")
    return f"{prefix}{content_hash[0:2]}/{content_hash[2:4]}/{content_hash}"


@runtime_checkable
class ObjectClient(Protocol):
    config: ClientConfig

    def check_availability(self) -> bool: ...

    def test_connection(self) -> ConnectionResult: ...

    def test_permissions(self, test_delete: bool) -> PermissionResult: ...

    def supports_presigned_urls(self) -> bool: ...

    def generate_presigned_url(self, content_hash: str, headers: Mapping[str, str] | None = None) -> str: ...

    def max_upload_size(self) -> int: ...

    def proxy_range_request(self, file: StoredFile, byte_range: RangeRequest) -> bytes | NotHandled: ...

    def test_range_request(self) -> bool: ...


class DefaultObjectClient:
    """What an unconfigured client does. Provider clients override the parts they support."""

    # Modules the provider SDK needs; all of them must be importable.
    sdk_modules: tuple[str, ...] = ()

    def __init__(self, config: ClientConfig):
        self.config = config

    def check_availability(self) -> bool:
        if not self.sdk_modules:
            return False
        for module_name in self.sdk_modules:
            try:
                if importlib.util.find_spec(module_name) is None:
                    return False
            except (ImportError, ValueError):
                return False
        return True

    def test_connection(self) -> ConnectionResult:
        return ConnectionResult(success=False, details="")

    def test_permissions(self, test_delete: bool) -> PermissionResult:
        return PermissionResult(
            success=False,
            messages={"Permission checks are not implemented by this client.": Severity.ERROR},
        )

    def supports_presigned_urls(self) -> bool:
        return False

    def generate_presigned_url(self, content_hash: str, headers: Mapping[str, str] | None = None) -> str:
        raise UnsupportedOperation("Pre-signed URLs not supported")

    def presigned_url_allowed(self, file: StoredFile) -> bool:
        return (
            self.supports_presigned_urls()
            and self.config.presigned_urls_enabled
            and file.filesize >= self.config.presigned_min_file_size
        )

    def max_upload_size(self) -> int:
        return self.config.max_upload_bytes

    def proxy_range_request(self, file: StoredFile, byte_range: RangeRequest) -> bytes | NotHandled:
        return NOT_HANDLED

    def test_range_request(self) -> bool:
        return False
