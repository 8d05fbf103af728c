"""Utilities for turning DataForSEO responses into Vendor records."""

from __future__ import annotations

import logging
import math
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from wedding_directory.models import Location, Vendor

logger = logging.getLogger(__name__)

DEFAULT_RATING = 4.5
DEFAULT_REVIEW_COUNT = 0
DEFAULT_PRICE_RANGE = "$$"
PLACEHOLDER_IMAGE = "/placeholder.jpg"
DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def default_business_hours() -> Dict[str, str]:
    return {day: "9:00 AM - 5:00 PM" for day in DAY_NAMES[:5]}


@dataclass(slots=True)
class ProviderItem:
    """Every field DataForSEO may or may not send for a single business."""

    title: str
    place_id: Optional[str] = None
    rating: Optional[float] = None
    votes_count: Optional[int] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    address: Optional[str] = None
    description: Optional[str] = None
    photos: List[str] = field(default_factory=list)
    schedule: Optional[Dict[str, str]] = None
    price_level: Optional[str] = None

    @classmethod
    def from_raw(cls, raw: Any) -> Optional["ProviderItem"]:
        if not isinstance(raw, dict):
            return None
        title = _strip_or_none(raw.get("title") or raw.get("name"))
        if not title:
            return None

        rating_value: Any = None
        votes: Any = None
        rating = raw.get("rating")
        if isinstance(rating, dict):
            rating_value = rating.get("value")
            votes = rating.get("votes_count", rating.get("votes"))
        else:
            rating_value = rating

        photos = raw.get("photos")
        if isinstance(photos, list):
            photo_urls = [str(p) for p in photos if isinstance(p, str) and p.strip()]
        else:
            photo_urls = []
        main_image = _strip_or_none(raw.get("main_image"))
        if not photo_urls and main_image:
            photo_urls = [main_image]

        return cls(
            title=title,
            place_id=_strip_or_none(raw.get("place_id") or raw.get("cid")),
            rating=_safe_float(rating_value),
            votes_count=_safe_int(votes),
            phone=_strip_or_none(raw.get("phone")),
            website=_strip_or_none(raw.get("website") or raw.get("url")),
            address=_strip_or_none(raw.get("address")),
            description=_strip_or_none(raw.get("description") or raw.get("snippet")),
            photos=photo_urls,
            schedule=_parse_schedule(raw),
            price_level=_strip_or_none(raw.get("price_level")),
        )


def extract_items(payload: Any) -> List[Any]:
    """Walk tasks[0].result[0].items, tolerating any level being absent."""
    if not isinstance(payload, dict):
        return []
    tasks = payload.get("tasks")
    if not isinstance(tasks, list) or not tasks or not isinstance(tasks[0], dict):
        return []
    results = tasks[0].get("result")
    if not isinstance(results, list) or not results or not isinstance(results[0], dict):
        return []
    items = results[0].get("items")
    if not isinstance(items, list):
        return []
    return items


def parse_items(raw_items: Iterable[Any]) -> List[ProviderItem]:
    parsed: List[ProviderItem] = []
    for raw in raw_items or []:
        try:
            item = ProviderItem.from_raw(raw)
        except (TypeError, ValueError, OverflowError) as exc:
            logger.warning("Skipping unparseable provider item: %s (%s)", exc, str(raw)[:200])
            continue
        if item is None:
            logger.debug("Skipping provider item without a title: %s", str(raw)[:200])
            continue
        parsed.append(item)
    return parsed


def to_vendor(item: ProviderItem, category: str, location: Location, description: str) -> Vendor:
    rating = item.rating if item.rating is not None else DEFAULT_RATING
    return Vendor(
        id=item.place_id or str(uuid.uuid4()),
        name=item.title,
        category=category,
        location=location,
        rating=min(max(rating, 0.0), 5.0),
        review_count=max(item.votes_count or DEFAULT_REVIEW_COUNT, 0),
        phone=item.phone,
        website=item.website,
        address=item.address or f"{location.city}, {location.state_name}",
        description=item.description or description,
        images=list(item.photos) or [PLACEHOLDER_IMAGE],
        business_hours=item.schedule or default_business_hours(),
        price_range=item.price_level or DEFAULT_PRICE_RANGE,
    )


def _parse_schedule(raw: Dict[str, Any]) -> Optional[Dict[str, str]]:
    schedule = raw.get("schedule")
    if isinstance(schedule, dict):
        cleaned = {str(day): str(hours) for day, hours in schedule.items() if hours}
        return cleaned or None

    work_hours = raw.get("work_hours")
    timetable = work_hours.get("timetable") if isinstance(work_hours, dict) else None
    if not isinstance(timetable, dict):
        return None

    hours: Dict[str, str] = {}
    for day in DAY_NAMES:
        slots = timetable.get(day.lower())
        if not isinstance(slots, list):
            continue
        spans = [_format_slot(slot) for slot in slots]
        spans = [span for span in spans if span]
        if spans:
            hours[day] = ", ".join(spans)
    return hours or None


def _format_slot(slot: Any) -> Optional[str]:
    if not isinstance(slot, dict):
        return None
    opens = _format_clock(slot.get("open"))
    closes = _format_clock(slot.get("close"))
    if not opens or not closes:
        return None
    return f"{opens} - {closes}"


def _format_clock(value: Any) -> Optional[str]:
    if not isinstance(value, dict):
        return None
    hour = _safe_int(value.get("hour"))
    minute = _safe_int(value.get("minute")) or 0
    if hour is None:
        return None
    suffix = "AM" if hour % 24 < 12 else "PM"
    display_hour = hour % 12 or 12
    return f"{display_hour}:{minute:02d} {suffix}"


def _strip_or_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    value_str = str(value).strip()
    return value_str or None


def _safe_float(value: Any) -> Optional[float]:
    try:
        if value is None:
            return None
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _safe_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None

    if isinstance(value, str):
        digits = "".join(ch for ch in value if ch.isdigit())
        if digits:
            return int(digits)
    return None
