"""Report whether the configured object store is usable.

Prints the connection and permission diagnostics followed by the readiness
verdict. Exit status: 0 ready, 1 not ready, 2 configuration error.
"""

from __future__ import annotations

import argparse
import os
import sys
from dataclasses import replace
from pathlib import Path

from objectfs.config.client_config import ClientConfig, load_client_config
from objectfs.config.settings_file import load_settings_file
from objectfs.logging_config import configure_logging, get_logger
from objectfs.store.diagnostics import format_report, render
from objectfs.store.readiness import is_ready
from objectfs.store.registry import UnknownProviderError, available_providers, create_client

EXIT_READY = 0
EXIT_NOT_READY = 1
EXIT_CONFIG_ERROR = 2

logger = get_logger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Test the connection to the external object store and report readiness."
    )
    parser.add_argument(
        "--settings",
        type=Path,
        default=None,
        help="JSON file with the admin settings. Environment variables are used when omitted.",
    )
    parser.add_argument(
        "--filesystem-class",
        default=None,
        help="File system class deployed by the host (default: $OBJECTFS_FILESYSTEM_CLASS).",
    )
    parser.add_argument(
        "--test-delete",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Also check that the credentials can NOT delete objects.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (default: $OBJECTFS_LOG_LEVEL or WARNING).",
    )
    return parser.parse_args(argv)


def _load_config(args: argparse.Namespace) -> tuple[ClientConfig, dict]:
    filesystem_class_name = args.filesystem_class
    if filesystem_class_name is None:
        filesystem_class_name = os.getenv("OBJECTFS_FILESYSTEM_CLASS", "")
    if args.settings is None:
        return replace(load_client_config(), filesystem_class_name=filesystem_class_name), {}
    config, s3_settings = load_settings_file(args.settings, filesystem_class_name)
    options = {"settings": s3_settings} if s3_settings is not None else {}
    return config, options


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_level, service="objectfs.check")
    try:
        config, options = _load_config(args)
        client = create_client(config, **options)
    except UnknownProviderError:
        logger.error("Unknown provider; available providers: %s", ", ".join(available_providers()))
        return EXIT_CONFIG_ERROR
    except (ValueError, RuntimeError, FileNotFoundError) as e:
        logger.error("Invalid objectfs configuration: %s", e)
        return EXIT_CONFIG_ERROR

    for line in format_report(render(client, test_delete=args.test_delete)):
        print(line)

    ready = is_ready(client, config)
    print(f"Ready: {'yes' if ready else 'no'}")
    return EXIT_READY if ready else EXIT_NOT_READY


if __name__ == "__main__":
    sys.exit(main())
