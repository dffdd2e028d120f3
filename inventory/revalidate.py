"""On-demand invalidation of the vehicle cache and dependent pages."""

from __future__ import annotations

import hmac
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Protocol

import pendulum

from inventory.cache import FeedCache
from inventory.config import webhook_secret
from inventory.errors import NotConfigured, Unauthorized
from inventory.utils.dates import isoformat, now_utc

logger = logging.getLogger(__name__)

# (route pattern, route type); ``None`` marks the literal listing path.
STALE_ROUTES: tuple[tuple[str, str | None], ...] = (
    ("/vehicles", None),
    ("/vehicles/[manufacturer]", "page"),
    ("/vehicles/[manufacturer]/[model]", "page"),
    ("/vehicles/[manufacturer]/[model]/[id]", "page"),
)


class PathRevalidator(Protocol):
    def revalidate_path(self, path: str, kind: str | None = None) -> None: ...


@dataclass(slots=True)
class StaleRouteRegistry:
    """Records route patterns the page layer should regenerate."""

    stale: dict[str, pendulum.DateTime] = field(default_factory=dict)

    def revalidate_path(self, path: str, kind: str | None = None) -> None:
        self.stale[path] = now_utc()
        logger.info("Marked %s stale (%s)", path, kind or "path")

    def pop_stale(self) -> list[str]:
        paths = list(self.stale)
        self.stale.clear()
        return paths


class InvalidationGateway:
    def __init__(
        self,
        cache: FeedCache,
        revalidator: PathRevalidator | None = None,
        *,
        secret_source: Callable[[], str] = webhook_secret,
    ) -> None:
        self.cache = cache
        self.revalidator = revalidator or StaleRouteRegistry()
        self._secret_source = secret_source

    def authorize(self, secret: Any) -> None:
        expected = self._secret_source()
        if not expected:
            logger.warning("WEBHOOK_SECRET not configured")
            raise NotConfigured()
        if not isinstance(secret, str) or not hmac.compare_digest(secret.encode(), expected.encode()):
            logger.warning("Invalid webhook secret received")
            raise Unauthorized()

    def revalidate(self, secret: Any) -> dict[str, Any]:
        self.authorize(secret)
        logger.info("Webhook received; starting revalidation")
        self.cache.clear_cache()
        for path, kind in STALE_ROUTES:
            self.revalidator.revalidate_path(path, kind)
        return {
            "revalidated": True,
            "message": "Vehicles cache cleared and pages marked for revalidation",
            "timestamp": isoformat(now_utc()),
        }
