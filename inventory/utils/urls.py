"""Slug and image URL helpers."""

from __future__ import annotations

import re

from inventory.config import image_base_url

IMAGE_COUNT = 10

_WHITESPACE_RE = re.compile(r"\s+")
_UNSAFE_RE = re.compile(r"[^\w-]")


def create_slug(text: str) -> str:
    """Lowercase, dash-separated, URL-safe form of a display name."""
    slug = _WHITESPACE_RE.sub("-", text.lower())
    return _UNSAFE_RE.sub("", slug)


def model_path_segment(model: str) -> str:
    # Image folders only collapse whitespace; punctuation is kept as uploaded.
    return _WHITESPACE_RE.sub("-", model.lower())


def vehicle_image_urls(manufacturer: str, model: str, vehicle_id: str, *, base_url: str | None = None) -> tuple[str, ...]:
    base = (base_url or image_base_url()).rstrip("/")
    prefix = f"{base}/{manufacturer.lower()}/{model_path_segment(model)}/{vehicle_id}"
    return tuple(f"{prefix}/{index}.jpg" for index in range(1, IMAGE_COUNT + 1))
