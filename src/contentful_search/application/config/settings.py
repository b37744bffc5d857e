"""
Settings - environment-backed configuration source.

The spaces configuration itself is delivered as a raw string on demand
(``load_spaces_config``); parsing and validation belong to ``parser``.

Environment Variables:
    CONTENTFUL_SPACES: JSON array of space configurations
    CONTENTFUL_SPACES_FILE: Path to a file holding the same JSON array
        (used only when CONTENTFUL_SPACES is unset)
    CONTENTFUL_API_HOST: Delivery API host (default: cdn.contentful.com)
    CONTENTFUL_WEB_APP_HOST: Host used in entry URLs (default: contentful.com)
    CONTENTFUL_TIMEOUT: Request timeout in seconds (default: 30)
    CONTENTFUL_DEBOUNCE_MS: Search debounce window (default: 300)
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

SPACES_ENV = "CONTENTFUL_SPACES"
SPACES_FILE_ENV = "CONTENTFUL_SPACES_FILE"

DEFAULT_API_HOST = "cdn.contentful.com"
DEFAULT_WEB_APP_HOST = "contentful.com"
DEFAULT_TIMEOUT = 30.0
DEFAULT_DEBOUNCE_MS = 300
DEFAULT_LATEST_LIMIT = 10


def load_spaces_config() -> str:
    """
    Return the raw spaces configuration string.

    Reads CONTENTFUL_SPACES first, then the file named by
    CONTENTFUL_SPACES_FILE. Returns "" when neither is set; the parser turns
    that into an EmptyConfigError.
    """
    raw = os.environ.get(SPACES_ENV)
    if raw is not None:
        return raw

    path = os.environ.get(SPACES_FILE_ENV)
    if path:
        logger.debug(f"Reading spaces configuration from {path}")
        try:
            return Path(path).expanduser().read_text(encoding="utf-8")
        except OSError as e:
            logger.warning(f"Cannot read spaces configuration file {path}: {e}")
            return ""

    return ""


def _env_float(name: str, default: float) -> float:
    value = os.environ.get(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning(f"Ignoring invalid {name}={value!r}, using {default}")
        return default


def load_settings() -> dict[str, Any]:
    """Collect settings for ``ApplicationContainer.config.from_dict``."""
    return {
        "api_host": os.environ.get("CONTENTFUL_API_HOST", DEFAULT_API_HOST),
        "web_app_host": os.environ.get("CONTENTFUL_WEB_APP_HOST", DEFAULT_WEB_APP_HOST),
        "timeout": _env_float("CONTENTFUL_TIMEOUT", DEFAULT_TIMEOUT),
        "debounce_ms": _env_float("CONTENTFUL_DEBOUNCE_MS", DEFAULT_DEBOUNCE_MS),
        "latest_limit": DEFAULT_LATEST_LIMIT,
    }
