"""Feed ingestion: HTTP client, XML parser and record models."""

from __future__ import annotations

from inventory.ingest.feed import FeedClient, load_vehicles, parse_feed
from inventory.ingest.models import InventorySnapshot, VehicleRecord

__all__ = ["FeedClient", "InventorySnapshot", "VehicleRecord", "load_vehicles", "parse_feed"]
