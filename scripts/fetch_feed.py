"""Fetch the dealer feed once and print an inventory summary."""

from __future__ import annotations

import asyncio
import sys

from dotenv import load_dotenv

from inventory.config import feed_url, log_level
from inventory.errors import InventoryError
from inventory.ingest.feed import load_vehicles
from inventory.logging_config import configure_logging
from inventory.logic.catalog import manufacturers
from inventory.utils.dates import now_in_tz


async def main() -> None:
    load_dotenv()
    configure_logging(log_level())
    url = sys.argv[1] if len(sys.argv) > 1 else feed_url()
    try:
        vehicles = await load_vehicles(url)
    except InventoryError as exc:
        raise SystemExit(f"Feed fetch failed: {exc.message}") from exc
    print(f"{len(vehicles)} vehicles in {url} as of {now_in_tz().to_datetime_string()}")
    for summary in manufacturers(vehicles):
        print(f"  {summary.name:<20} {summary.count:>4}  /vehicles/{summary.slug}")


if __name__ == "__main__":
    asyncio.run(main())
