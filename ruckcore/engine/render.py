"""Render builders — turn a SessionReading into display strings.

Missing values degrade to placeholders ("--:--", "--"); building never raises.
"""

from __future__ import annotations

import logging
from datetime import datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ruckcore.engine.models import RenderOutput
from ruckcore.engine.profiles import ProfileStore
from ruckcore.engine.session import SessionReading

logger = logging.getLogger(__name__)

PACE_PLACEHOLDER = "--:--"
HEART_RATE_PLACEHOLDER = "--"


def _zone(tz_name: str) -> ZoneInfo:
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown time zone %r, showing UTC", tz_name)
        return ZoneInfo("UTC")


def format_clock(now: int, tz_name: str, clock_24h: bool = True) -> str:
    fmt = "%H:%M" if clock_24h else "%I:%M"
    return datetime.fromtimestamp(now, tz=_zone(tz_name)).strftime(fmt)


def format_minutes_seconds(seconds: int) -> str:
    return f"{seconds // 60}:{seconds % 60:02d}"


def format_pace(pace_s: int | None) -> str:
    if pace_s is None or pace_s <= 0:
        return PACE_PLACEHOLDER
    return format_minutes_seconds(pace_s)


def format_distance(distance_mm: int, unit_mm: int, unit_label: str) -> str:
    """Two-decimal distance in the display unit, truncated (95160 mm → "0.09km")."""
    x100 = distance_mm * 100 // unit_mm
    return f"{x100 // 100}.{x100 % 100:02d}{unit_label}"


def format_heart_rate(heart_rate: int | None) -> str:
    if heart_rate is None or heart_rate <= 0:
        return HEART_RATE_PLACEHOLDER
    return str(heart_rate)


def build_render_output(
    reading: SessionReading,
    profiles: ProfileStore,
    now: int,
    tz_name: str,
    clock_24h: bool = True,
    heart_rate: int | None = None,
) -> RenderOutput:
    pace_value = format_pace(reading.pace_s)
    index = profiles.active_index()
    return RenderOutput(
        time_label=format_clock(now, tz_name, clock_24h),
        pace_label=f"{pace_value}/{reading.unit_label}",
        pace_value=pace_value,
        distance_label=format_distance(reading.distance_mm, reading.unit_mm, reading.unit_label),
        elapsed_label=format_minutes_seconds(reading.elapsed_s),
        steps=reading.steps,
        steps_day_total=reading.steps_day_total,
        kcal_per_hour=reading.kcal_per_hour,
        kcal_total=reading.kcal_total,
        walk_kcal_per_hour=reading.walk_kcal_per_hour,
        walk_kcal_total=reading.walk_kcal_total,
        heart_rate_label=format_heart_rate(heart_rate),
        profile_name=profiles.display_name(index),
        terrain_label=profiles.terrain_label(index),
    )
