"""Datetime helpers."""

from __future__ import annotations

import os

import pendulum

DEFAULT_TZ = "Pacific/Auckland"


def timezone_name() -> str:
    return os.environ.get("TIMEZONE", DEFAULT_TZ)


def now_in_tz() -> pendulum.DateTime:
    tz = pendulum.timezone(timezone_name())
    return pendulum.now(tz)


def now_utc() -> pendulum.DateTime:
    return pendulum.now("UTC")


def isoformat(value: pendulum.DateTime) -> str:
    return value.in_timezone("UTC").to_iso8601_string()
