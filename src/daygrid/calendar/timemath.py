# src/daygrid/calendar/timemath.py

"""
Time math and the time <-> pixel position mapper.

All minute arithmetic is elapsed time (computed from POSIX timestamps), so a
23h or 25h DST day maps consistently in both directions. Nothing here keeps
state; every function is safe to call from any context.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .calendar_models import CalendarEvent, EventPosition

MIN_EVENT_HEIGHT_PX = 20.0
MINUTES_PER_DAY = 24 * 60

_OFFSET_RE = re.compile(r"^([+-])(\d{2}):?(\d{2})$")


def resolve_tz(name: str | None) -> tzinfo:
    """Resolve a timezone name into a tzinfo.

    Supported forms:
      - None/"" / "local" / "system" -> the machine's local timezone
      - "UTC" / "Z" / "GMT"          -> timezone.utc
      - IANA names, e.g. "Europe/Bucharest"
      - fixed offsets: "+02:00", "+0200", "-05:00"

    Raises ValueError for invalid identifiers.
    """
    s = "" if name is None else str(name).strip()
    low = s.lower()

    if low in {"", "local", "system", "native"}:
        return datetime.now().astimezone().tzinfo or timezone.utc
    if low in {"utc", "z", "gmt"}:
        return timezone.utc

    m = _OFFSET_RE.match(s)
    if m:
        sign_s, hh_s, mm_s = m.groups()
        hh, mm = int(hh_s), int(mm_s)
        if hh > 23 or mm > 59:
            raise ValueError(f"Invalid timezone offset: {s!r}")
        sign = 1 if sign_s == "+" else -1
        return timezone(timedelta(minutes=sign * (hh * 60 + mm)))

    try:
        return ZoneInfo(s)
    except (ZoneInfoNotFoundError, ValueError) as ex:
        raise ValueError(f"Invalid timezone identifier: {s!r}") from ex


def start_of_day(day: date, tz: tzinfo) -> datetime:
    return datetime(day.year, day.month, day.day, tzinfo=tz)


def end_of_day(day: date, tz: tzinfo) -> datetime:
    """Exclusive end of `day`: the next local midnight."""
    nxt = day + timedelta(days=1)
    return datetime(nxt.year, nxt.month, nxt.day, tzinfo=tz)


def local_date(ts: datetime, tz: tzinfo) -> date:
    """Calendar day of `ts` as seen by a viewer in `tz`."""
    return ts.astimezone(tz).date()


def minutes_between(a: datetime, b: datetime) -> float:
    """Elapsed minutes from a to b (negative when b is earlier)."""
    return (b.timestamp() - a.timestamp()) / 60.0


def minutes_from_day_start(ts: datetime, day: date, tz: tzinfo) -> float:
    return minutes_between(start_of_day(day, tz), ts)


def add_minutes(ts: datetime, minutes: float, tz: tzinfo | None = None) -> datetime:
    """Shift by elapsed minutes; the result is expressed in `tz` (or ts's own zone)."""
    target = tz or ts.tzinfo or timezone.utc
    shifted = ts.astimezone(timezone.utc) + timedelta(minutes=minutes)
    return shifted.astimezone(target)


def round_to_resolution(ts: datetime, resolution_min: int = 1, tz: tzinfo | None = None) -> datetime:
    """
    Round to the nearest `resolution_min` grid line of the day `ts` falls on.

    Grid lines count from local midnight in `tz` (default: ts's own zone), so
    half-hour offsets like +05:30 still snap to whole local hours.
    """
    zone = tz or ts.tzinfo or timezone.utc
    step = max(1, int(resolution_min))
    origin = start_of_day(local_date(ts, zone), zone)
    offset = minutes_between(origin, ts)
    rounded = math.floor(offset / step + 0.5) * step
    return add_minutes(origin, rounded, zone)


def pixels_to_minutes(offset_px: float, hour_height_px: float) -> float:
    if hour_height_px <= 0:
        raise ValueError(f"hour_height_px must be positive; got {hour_height_px!r}")
    return offset_px / hour_height_px * 60.0


def minutes_to_pixels(minutes: float, hour_height_px: float) -> float:
    return minutes / 60.0 * hour_height_px


def time_at_offset(day: date, offset_px: float, hour_height_px: float, tz: tzinfo) -> datetime:
    """Inverse of the mapper: the instant drawn `offset_px` below the top of `day`'s grid."""
    return add_minutes(start_of_day(day, tz), pixels_to_minutes(offset_px, hour_height_px), tz)


def position_of(
        event: CalendarEvent,
        reference_day: date,
        hour_height_px: float,
        *,
        tz: tzinfo,
        min_height_px: float = MIN_EVENT_HEIGHT_PX,
) -> EventPosition:
    """
    Pixel geometry of `event` inside `reference_day`'s column.

    The event is clipped to [start_of_day, end_of_day); the height never drops
    below min_height_px so very short events stay clickable.
    """
    day_start = start_of_day(reference_day, tz)
    day_end = end_of_day(reference_day, tz)

    starts_before = event.start_time < day_start
    ends_after = event.end_time > day_end

    eff_start = day_start if starts_before else event.start_time
    eff_end = day_end if ends_after else event.end_time
    if eff_end < eff_start:
        eff_end = eff_start

    top = minutes_to_pixels(minutes_between(day_start, eff_start), hour_height_px)
    height = minutes_to_pixels(minutes_between(eff_start, eff_end), hour_height_px)

    return EventPosition(
        top=top,
        height=max(height, float(min_height_px)),
        starts_before_day=starts_before,
        ends_after_day=ends_after,
    )


def format_clock(ts: datetime, tz: tzinfo | None = None) -> str:
    """12h clock without a leading zero, e.g. '9:05 AM'."""
    local = ts.astimezone(tz) if tz is not None else ts
    hour12 = local.hour % 12 or 12
    suffix = "AM" if local.hour < 12 else "PM"
    return f"{hour12}:{local.minute:02d} {suffix}"


def format_time_range(start: datetime, end: datetime, tz: tzinfo | None = None) -> str:
    return f"{format_clock(start, tz)} - {format_clock(end, tz)}"


def format_duration(minutes: float) -> str:
    total = max(0, int(minutes))
    if total < 60:
        return f"{total} min"
    hours, mins = divmod(total, 60)
    return f"{hours}h {mins}m" if mins else f"{hours}h"
