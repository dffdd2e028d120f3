"""Environment-driven settings."""

from __future__ import annotations

import os

DEFAULT_FEED_URL = "https://www.assets.gnmotors.co.nz/gnmotors-vehicles/gnmotorsr.xml"
DEFAULT_IMAGE_BASE_URL = "https://www.assets.gnmotors.co.nz/brands"
DEFAULT_FEED_TIMEOUT = 20.0
DEFAULT_CACHE_TTL = 5 * 60
DEFAULT_LOG_LEVEL = "INFO"


def feed_url() -> str:
    return os.environ.get("FEED_URL", DEFAULT_FEED_URL)


def feed_timeout() -> float:
    return float(os.environ.get("FEED_TIMEOUT_SECONDS", DEFAULT_FEED_TIMEOUT))


def cache_ttl_seconds() -> float:
    return float(os.environ.get("FEED_CACHE_TTL_SECONDS", DEFAULT_CACHE_TTL))


def image_base_url() -> str:
    return os.environ.get("IMAGE_BASE_URL", DEFAULT_IMAGE_BASE_URL).rstrip("/")


def images_unoptimized() -> bool:
    """Whether generated image URLs should be served as-is, skipping optimization."""
    return os.environ.get("IMAGE_UNOPTIMIZED", "").strip().lower() == "true"


def webhook_secret() -> str:
    """Shared secret for the revalidation webhook; read on every request."""
    return os.environ.get("WEBHOOK_SECRET", "")


def log_level() -> str:
    return os.environ.get("LOG_LEVEL", DEFAULT_LOG_LEVEL)
