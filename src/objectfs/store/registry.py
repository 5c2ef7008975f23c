from __future__ import annotations

import importlib

from objectfs.config.client_config import ClientConfig
from objectfs.store.object_client import DefaultObjectClient


class UnknownProviderError(LookupError):
    """No client class is registered under the requested provider name."""


# Provider name -> client class, or "module:Class" resolved on first lookup
# so a provider's SDK is only touched once that provider is selected.
_CLIENTS: dict[str, str | type[DefaultObjectClient]] = {
    "s3_file_system": "objectfs.store.s3_client:S3Client",
}


def register_client(provider: str, client_class: str | type[DefaultObjectClient]) -> None:
    if not provider or not provider.strip():
        raise ValueError("Provider name must be a non-empty string.")
    _CLIENTS[provider] = client_class


def _resolve(path: str) -> type[DefaultObjectClient]:
    module_name, _, class_name = path.partition(":")
    if not class_name:
        raise ValueError(f"Client path must look like 'package.module:ClassName', got: {path!r}")
    return getattr(importlib.import_module(module_name), class_name)


def get_client_class(provider: str) -> type[DefaultObjectClient]:
    try:
        client_class = _CLIENTS[provider]
    except KeyError:
        raise UnknownProviderError(
            f"No object client registered for provider {provider!r}; known: {available_providers()}"
        ) from None
    if isinstance(client_class, str):
        client_class = _resolve(client_class)
        _CLIENTS[provider] = client_class
    return client_class


def available_providers() -> list[str]:
    return sorted(_CLIENTS)


def create_client(config: ClientConfig, **options) -> DefaultObjectClient:
    """Instantiate the client for the administrator's selected provider."""
    return get_client_class(config.configured_provider)(config, **options)
