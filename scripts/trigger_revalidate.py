"""Call the revalidation webhook of a running inventory API."""

from __future__ import annotations

import asyncio
import os
import sys

import httpx
from dotenv import load_dotenv

DEFAULT_API_URL = "http://localhost:8000"


async def main() -> None:
    load_dotenv()
    secret = os.environ.get("WEBHOOK_SECRET")
    if not secret:
        raise SystemExit("WEBHOOK_SECRET env var required")
    base_url = sys.argv[1] if len(sys.argv) > 1 else os.environ.get("INVENTORY_API_URL", DEFAULT_API_URL)
    async with httpx.AsyncClient(timeout=15.0) as client:
        response = await client.post(f"{base_url.rstrip('/')}/api/revalidate", json={"secret": secret})
    print(response.status_code, response.text)
    if not response.is_success:
        raise SystemExit(1)


if __name__ == "__main__":
    asyncio.run(main())
