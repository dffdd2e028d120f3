"""Inventory data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import pendulum

from inventory.utils.dates import now_utc


def _split_features(value: str) -> list[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


@dataclass(slots=True, frozen=True)
class VehicleRecord:
    id: str
    manufacturer: str = ""
    model: str = ""
    variant: str = ""
    year: str = ""
    body_style: str = ""
    color: str = ""
    transmission: str = ""
    fuel_type: str = ""
    engine_size: str = "0"
    mileage: str = "0"
    mileage_unit: str = "km"
    price: str = ""
    dealership: str = ""
    status: str = ""
    description: str = ""
    short_desc: str = ""
    interior_color: str = ""
    seats: str = ""
    drive_system: str = ""
    exterior_features: str = ""
    interior_features: str = ""
    vin: str = ""
    reg_no: str = ""
    purchase_date: str = ""
    turbo: str = ""
    seat_material: str = ""
    airbags: str = ""
    promotion_tag: str = ""
    active: str = "true"
    images: tuple[str, ...] = ()

    @property
    def stock_no(self) -> str:
        return self.id

    @property
    def thumbnail_image(self) -> str:
        return self.images[0] if self.images else ""

    @property
    def exterior_feature_list(self) -> list[str]:
        return _split_features(self.exterior_features)

    @property
    def interior_feature_list(self) -> list[str]:
        return _split_features(self.interior_features)

    def to_dict(self) -> dict[str, Any]:
        """JSON shape consumed by the website."""
        return {
            "id": self.id,
            "stockNo": self.stock_no,
            "manufacturer": self.manufacturer,
            "model": self.model,
            "variant": self.variant,
            "year": self.year,
            "bodyStyle": self.body_style,
            "color": self.color,
            "transmission": self.transmission,
            "fuelType": self.fuel_type,
            "engineSize": self.engine_size,
            "mileage": self.mileage,
            "mileageUnit": self.mileage_unit,
            "price": self.price,
            "dealership": self.dealership,
            "status": self.status,
            "description": self.description,
            "shortDesc": self.short_desc,
            "interiorColor": self.interior_color,
            "seats": self.seats,
            "driveSystem": self.drive_system,
            "exteriorFeatures": self.exterior_features,
            "interiorFeatures": self.interior_features,
            "vin": self.vin,
            "regNo": self.reg_no,
            "purchaseDate": self.purchase_date,
            "turbo": self.turbo,
            "seatMaterial": self.seat_material,
            "airbags": self.airbags,
            "promotionTag": self.promotion_tag,
            "active": self.active,
            "thumbnailImage": self.thumbnail_image,
            "images": list(self.images),
        }


@dataclass(slots=True, frozen=True)
class InventorySnapshot:
    records: tuple[VehicleRecord, ...]
    captured_at: float
    fetched_at: pendulum.DateTime = field(default_factory=now_utc)

    def age(self, now: float) -> float:
        return now - self.captured_at
