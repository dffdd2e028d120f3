"""FastAPI application serving the vehicle inventory and the revalidation webhook."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, Literal

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, Header, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from inventory import __version__
from inventory.cache import FeedCache, default_cache
from inventory.config import image_base_url, images_unoptimized, log_level
from inventory.errors import InventoryError, NotConfigured, Unauthorized
from inventory.logging_config import configure_logging
from inventory.logic import catalog
from inventory.revalidate import InvalidationGateway, StaleRouteRegistry

logger = logging.getLogger(__name__)

stale_routes = StaleRouteRegistry()


@asynccontextmanager
async def lifespan(_: FastAPI):
    load_dotenv()
    configure_logging(log_level())
    yield


app = FastAPI(title="Vehicle Inventory API", version=__version__, lifespan=lifespan)


class RevalidateResponse(BaseModel):
    revalidated: bool
    message: str
    timestamp: str


class ManufacturerOut(BaseModel):
    name: str
    slug: str
    count: int


def get_cache() -> FeedCache:
    return default_cache()


def get_gateway(cache: FeedCache = Depends(get_cache)) -> InvalidationGateway:
    return InvalidationGateway(cache, stale_routes)


def _feed_failure() -> JSONResponse:
    return JSONResponse({"error": "Failed to fetch vehicles"}, status_code=500)


@app.get("/api/vehicles")
async def list_vehicles(
    manufacturer: str | None = None,
    model: str | None = None,
    q: str | None = None,
    sort: Literal["year", "mileage", "price"] | None = None,
    cache: FeedCache = Depends(get_cache),
) -> Any:
    if model and not manufacturer:
        raise HTTPException(status_code=400, detail="model filter requires manufacturer")
    try:
        vehicles = list(await cache.get_vehicles())
    except InventoryError:
        logger.exception("Vehicle listing failed")
        return _feed_failure()
    if manufacturer and model:
        vehicles = catalog.by_model(vehicles, manufacturer, model)
    elif manufacturer:
        vehicles = catalog.by_manufacturer(vehicles, manufacturer)
    if q:
        vehicles = catalog.match_terms(vehicles, q)
    if sort:
        vehicles = catalog.sort_vehicles(vehicles, sort)
    return [vehicle.to_dict() for vehicle in vehicles]


@app.get("/api/vehicles/{vehicle_id}")
async def get_vehicle(vehicle_id: str, cache: FeedCache = Depends(get_cache)) -> Any:
    try:
        vehicle = await cache.get_vehicle_by_id(vehicle_id)
    except InventoryError:
        logger.exception("Vehicle lookup failed for %s", vehicle_id)
        return _feed_failure()
    if vehicle is None:
        return JSONResponse({"error": "Vehicle not found"}, status_code=404)
    return vehicle.to_dict()


@app.get("/api/search")
async def search(q: str = "", cache: FeedCache = Depends(get_cache)) -> Any:
    try:
        results = await cache.search(q)
    except InventoryError:
        logger.exception("Vehicle search failed")
        return _feed_failure()
    return [vehicle.to_dict() for vehicle in results]


@app.get("/api/manufacturers", response_model=list[ManufacturerOut])
async def list_manufacturers(cache: FeedCache = Depends(get_cache)) -> Any:
    try:
        vehicles = await cache.get_vehicles()
    except InventoryError:
        logger.exception("Manufacturer listing failed")
        return _feed_failure()
    return [ManufacturerOut(name=m.name, slug=m.slug, count=m.count) for m in catalog.manufacturers(vehicles)]


@app.post("/api/revalidate", response_model=RevalidateResponse)
async def revalidate(request: Request, gateway: InvalidationGateway = Depends(get_gateway)) -> Any:
    # Body is read by hand so a malformed payload falls through to the 500 below.
    try:
        body = await request.json()
        secret = body.get("secret") if isinstance(body, dict) else None
        return gateway.revalidate(secret)
    except (NotConfigured, Unauthorized) as exc:
        return JSONResponse({"error": exc.message}, status_code=exc.status_code)
    except Exception:
        logger.exception("Revalidate endpoint error")
        return JSONResponse({"error": "Revalidation failed"}, status_code=500)


@app.get("/healthz")
async def healthz(cache: FeedCache = Depends(get_cache)) -> JSONResponse:
    snapshot = cache.snapshot
    return JSONResponse(
        {
            "status": "ok",
            "cachedVehicles": None if snapshot is None else len(snapshot.records),
            "snapshotAgeSeconds": cache.snapshot_age(),
            "imagesUnoptimized": images_unoptimized(),
        }
    )


@app.get("/api/stale-routes")
async def consume_stale_routes(
    x_webhook_secret: str | None = Header(default=None),
    gateway: InvalidationGateway = Depends(get_gateway),
) -> Any:
    """Hand the page layer the route patterns marked stale since its last call."""
    try:
        gateway.authorize(x_webhook_secret)
    except (NotConfigured, Unauthorized) as exc:
        return JSONResponse({"error": exc.message}, status_code=exc.status_code)
    return {"routes": stale_routes.pop_stale()}


@app.get("/api/config")
async def site_config() -> dict[str, Any]:
    return {"imageBaseUrl": image_base_url(), "imagesUnoptimized": images_unoptimized()}
