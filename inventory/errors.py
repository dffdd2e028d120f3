"""Inventory error types."""

from __future__ import annotations

from typing import Any


class InventoryError(Exception):
    """Base error carrying a machine-readable code and an HTTP status."""

    code = "INVENTORY_ERROR"
    status_code = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)


class FetchError(InventoryError):
    """Upstream feed unreachable or answered with a non-success status."""

    code = "FETCH_ERROR"

    def __init__(self, message: str, *, status_code: int | None = None, url: str | None = None) -> None:
        details: dict[str, Any] = {}
        if status_code is not None:
            details["upstream_status"] = status_code
        if url:
            details["url"] = url
        super().__init__(message, details)
        self.upstream_status = status_code


class ParseError(InventoryError):
    """Feed payload is not the expected XML document."""

    code = "PARSE_ERROR"


class NotConfigured(InventoryError):
    code = "NOT_CONFIGURED"
    status_code = 500

    def __init__(self, message: str = "Webhook not configured") -> None:
        super().__init__(message)


class Unauthorized(InventoryError):
    code = "UNAUTHORIZED"
    status_code = 401

    def __init__(self, message: str = "Invalid secret") -> None:
        super().__init__(message)
