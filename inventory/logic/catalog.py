"""Listing helpers used by the vehicles endpoints."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Iterable, Sequence

from inventory.ingest.models import VehicleRecord
from inventory.utils.urls import create_slug

SORT_KEYS = ("year", "mileage", "price")


@dataclass(slots=True)
class ManufacturerSummary:
    name: str
    slug: str
    count: int


def _as_int(value: str) -> int:
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return 0


def _as_float(value: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def by_manufacturer(vehicles: Iterable[VehicleRecord], manufacturer_slug: str) -> list[VehicleRecord]:
    return [v for v in vehicles if create_slug(v.manufacturer) == manufacturer_slug]


def by_model(vehicles: Iterable[VehicleRecord], manufacturer_slug: str, model_slug: str) -> list[VehicleRecord]:
    return [
        v
        for v in vehicles
        if create_slug(v.manufacturer) == manufacturer_slug and create_slug(v.model) == model_slug
    ]


def match_terms(vehicles: Iterable[VehicleRecord], query: str) -> list[VehicleRecord]:
    """Every whitespace-separated term must appear in the manufacturer, model or year."""
    terms = query.lower().split()
    if not terms:
        return list(vehicles)
    return [
        v
        for v in vehicles
        if all(
            term in v.manufacturer.lower() or term in v.model.lower() or term in v.year
            for term in terms
        )
    ]


def sort_vehicles(vehicles: Sequence[VehicleRecord], sort_by: str = "year") -> list[VehicleRecord]:
    """Newest year first, lowest mileage first, or highest price first."""
    if sort_by == "year":
        return sorted(vehicles, key=lambda v: _as_int(v.year), reverse=True)
    if sort_by == "mileage":
        return sorted(vehicles, key=lambda v: _as_int(v.mileage))
    if sort_by == "price":
        return sorted(vehicles, key=lambda v: _as_float(v.price), reverse=True)
    raise ValueError(f"Unknown sort key: {sort_by}")


def manufacturers(vehicles: Iterable[VehicleRecord]) -> list[ManufacturerSummary]:
    counts = Counter(v.manufacturer for v in vehicles if v.manufacturer)
    return [
        ManufacturerSummary(name=name, slug=create_slug(name), count=count)
        for name, count in sorted(counts.items())
    ]
