"""Dealer XML feed client and parser."""

from __future__ import annotations

import asyncio
import logging
import xml.etree.ElementTree as ET

import httpx

from inventory.config import feed_timeout, feed_url
from inventory.errors import FetchError, ParseError
from inventory.ingest.models import VehicleRecord
from inventory.utils.retry import retry_async
from inventory.utils.urls import vehicle_image_urls

logger = logging.getLogger(__name__)

USER_AGENT = "InventoryFeedBot/1.0"
ROOT_TAG = "vehicles"
ENTRY_TAG = "vehicle"

# Record attribute -> feed element. Missing or empty elements take the
# dataclass default.
FIELD_MAP = {
    "year": "vehicle_year",
    "body_style": "vehicle_body_style",
    "color": "vehicle_color",
    "transmission": "vehicle_transmission",
    "fuel_type": "vehicle_fuel_type",
    "engine_size": "vehicle_engine_size",
    "mileage": "vehicle_mileage",
    "dealership": "vehicle_dealership",
    "status": "vehicle_status",
    "description": "vehicle_description",
    "short_desc": "vehicle_short_description",
    "interior_color": "vehicle_interior_color",
    "seats": "vehicle_seats",
    "drive_system": "vehicle_wheel_drive",
    "exterior_features": "vehicle_exterior_features",
    "interior_features": "vehicle_interior_features",
    "variant": "vehicle_variant",
    "vin": "vehicle_vin",
    "reg_no": "vehicle_registration_number",
    "purchase_date": "vehicle_purchase_date",
    "turbo": "vehicle_turbo",
    "seat_material": "vehicle_seat_material",
    "airbags": "vehicle_airbags",
    "promotion_tag": "vehicle_promotion_tag",
    "active": "vehicle_active",
}


def _text(entry: ET.Element, tag: str) -> str:
    value = entry.findtext(tag)
    return value.strip() if value else ""


def parse_vehicle(entry: ET.Element, *, image_base_url: str | None = None) -> VehicleRecord:
    vehicle_id = _text(entry, "id")
    manufacturer = _text(entry, "brand_name")
    model = _text(entry, "model_name")
    fields = {attr: value for attr, tag in FIELD_MAP.items() if (value := _text(entry, tag))}
    price = _text(entry, "vehicle_special_price") or _text(entry, "vehicle_normal_price")
    if price:
        fields["price"] = price
    return VehicleRecord(
        id=vehicle_id,
        manufacturer=manufacturer,
        model=model,
        images=vehicle_image_urls(manufacturer, model, vehicle_id, base_url=image_base_url),
        **fields,
    )


def parse_feed(payload: str | bytes, *, image_base_url: str | None = None) -> list[VehicleRecord]:
    """Parse the feed document into records, in feed order."""
    try:
        root = ET.fromstring(payload)
    except ET.ParseError as exc:
        raise ParseError(f"Feed is not well-formed XML: {exc}") from exc
    if root.tag != ROOT_TAG:
        raise ParseError(f"Unexpected feed root <{root.tag}>, expected <{ROOT_TAG}>")
    return [parse_vehicle(entry, image_base_url=image_base_url) for entry in root.findall(ENTRY_TAG)]


class FeedClient:
    def __init__(
        self,
        url: str | None = None,
        *,
        session: httpx.AsyncClient | None = None,
        timeout: float | None = None,
        attempts: int = 3,
        retry_delay: float = 1.0,
    ) -> None:
        self.url = url or feed_url()
        self._session = session or httpx.AsyncClient(
            timeout=timeout or feed_timeout(), headers={"User-Agent": USER_AGENT}
        )
        self._attempts = attempts
        self._retry_delay = retry_delay

    async def close(self) -> None:
        await self._session.aclose()

    async def fetch_xml(self) -> bytes:
        get = retry_async(self._session.get, attempts=self._attempts, base_delay=self._retry_delay)
        try:
            response = await get(self.url)
        except (httpx.HTTPError, OSError) as exc:
            raise FetchError(f"Feed unreachable: {exc}", url=self.url) from exc
        if not response.is_success:
            raise FetchError(
                f"Feed returned HTTP {response.status_code}",
                status_code=response.status_code,
                url=self.url,
            )
        return response.content

    async def fetch_vehicles(self) -> list[VehicleRecord]:
        payload = await self.fetch_xml()
        records = await asyncio.get_running_loop().run_in_executor(None, parse_feed, payload)
        logger.info("Parsed %s vehicles from %s", len(records), self.url)
        return records


async def load_vehicles(url: str | None = None) -> list[VehicleRecord]:
    """Fetch and parse the feed with a short-lived client."""
    client = FeedClient(url)
    try:
        return await client.fetch_vehicles()
    finally:
        await client.close()
