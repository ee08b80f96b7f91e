"""
Runtime settings for the CLI and the API server, read from the environment.

    GBX_LOG_LEVEL          CLI log level (default WARNING)
    GBX_MAX_UPLOAD_BYTES   largest accepted .gbx upload (default 20 MiB)
    GBX_INDENT             JSON indentation of pretty output, 0 = compact (default 2)

A ``.env`` file is honoured by the entry points (python-dotenv). A value
that is not an integer is ignored with a warning and the default is used.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_MAX_UPLOAD_BYTES = 20 * 1024 * 1024
DEFAULT_INDENT = 2


@dataclass(frozen=True)
class Settings:
    log_level: str = "WARNING"
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    indent: int | None = DEFAULT_INDENT


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r (not an integer), using %d", name, raw, default)
        return default


def get_settings() -> Settings:
    """Default settings with environment overrides."""
    indent = _env_int("GBX_INDENT", DEFAULT_INDENT)
    return Settings(
        log_level=os.environ.get("GBX_LOG_LEVEL", "WARNING").upper(),
        max_upload_bytes=_env_int("GBX_MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES),
        indent=indent if indent > 0 else None,
    )
