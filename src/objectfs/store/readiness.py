from __future__ import annotations

import logging

from objectfs.config.client_config import ClientConfig
from objectfs.logging_config import get_logger, with_context
from objectfs.store.object_client import ObjectClient

logger = get_logger(__name__)


def is_ready(client: ObjectClient, config: ClientConfig, log: logging.Logger | None = None) -> bool:
    """True when the client is fully configured, reachable and authorized.

    Checks run in a fixed order and stop at the first failure, so a missing
    file system class never triggers a network call. Each failure is logged
    at DEBUG with the provider and filesystem attached; nothing is raised.
    """
    log = with_context(
        log or logger,
        provider=config.configured_provider,
        filesystem=config.filesystem_class_name,
    )

    if not config.filesystem_class_name:
        log.debug("Objectfs is not ready: filesystem class is not set in the host configuration")
        return False

    if config.filesystem_class_name != config.configured_provider:
        log.debug(
            "Objectfs is not ready: host filesystem class %r does not match configured provider %r",
            config.filesystem_class_name,
            config.configured_provider,
        )
        return False

    if not client.check_availability():
        log.debug("Objectfs is not ready: client SDK is not installed or cannot be loaded")
        return False

    connection = client.test_connection()
    if not connection.success:
        log.debug("Objectfs is not ready: connection failed: %s", connection.details)
        return False

    permissions = client.test_permissions(test_delete=False)
    if not permissions.success:
        log.debug("Objectfs is not ready: permission check failed: %s", "; ".join(permissions.messages))
        return False

    return True
