"""Vendor lookups backed by DataForSEO, with placeholder data when the provider is unavailable."""

from __future__ import annotations

import logging
import math
import random
from typing import List, Optional

from wedding_directory.etl.transform import (
    PLACEHOLDER_IMAGE,
    default_business_hours,
    extract_items,
    parse_items,
    to_vendor,
)
from wedding_directory.models import (
    SOURCE_FALLBACK,
    SOURCE_PROVIDER,
    Location,
    Vendor,
    VendorSearchResult,
)
from wedding_directory.vendors.dataforseo import MAX_DEPTH, DataForSEOClient

logger = logging.getLogger(__name__)

FALLBACK_VENDOR_COUNT = 6
DEFAULT_PROVIDER_KEYWORD = "wedding vendors"
DETAIL_CATEGORY = "Wedding Vendor"
DETAIL_DESCRIPTION = "A professional wedding vendor."
DEPTH_BLOCK = 100


def provider_location_name(location: Location) -> str:
    return f"{location.city}, {location.state_name}, United States"


def provider_depth(offset: int, limit: int) -> int:
    """Request whole blocks of results so the total reaches past the current page."""
    needed = offset + limit
    return min(math.ceil(needed / DEPTH_BLOCK) * DEPTH_BLOCK, MAX_DEPTH)


class VendorSearchClient:
    """Maps DataForSEO results onto Vendor records.

    Provider failures never reach the caller: searches degrade to synthetic
    vendors (``source == "fallback"``) and detail lookups degrade to ``None``.
    """

    def __init__(self, provider: DataForSEOClient, rng: Optional[random.Random] = None) -> None:
        self._provider = provider
        self._rng = rng or random.Random()

    def search_vendors(self, keyword: str, location: Location, limit: int = 20, offset: int = 0) -> VendorSearchResult:
        keyword = (keyword or "").strip()
        limit = max(int(limit), 1)
        offset = max(int(offset), 0)

        try:
            payload = self._provider.maps_search(
                keyword=keyword or DEFAULT_PROVIDER_KEYWORD,
                location_name=provider_location_name(location),
                depth=provider_depth(offset, limit),
            )
            items = parse_items(extract_items(payload))
        except Exception as exc:  # noqa: BLE001
            logger.warning("Vendor search failed for keyword=%r location=%s, serving placeholders: %s", keyword, location.display_name, exc)
            return self._fallback(keyword, location, limit)

        description = f"Professional {keyword.lower()} in {location.city}"
        vendors = [to_vendor(item, keyword, location, description) for item in items]
        logger.info("Provider returned %d vendors for keyword=%r location=%s", len(vendors), keyword, location.display_name)
        # the provider has no offset parameter, so page windows are cut here
        return VendorSearchResult(
            vendors=vendors[offset:offset + limit],
            total=len(vendors),
            source=SOURCE_PROVIDER,
        )

    def get_vendor_details(self, vendor_id: str, location: Location) -> Optional[Vendor]:
        try:
            payload = self._provider.business_info(vendor_id, provider_location_name(location))
            items = parse_items(extract_items(payload))
        except Exception as exc:  # noqa: BLE001
            logger.warning("Vendor detail lookup failed for id=%s: %s", vendor_id, exc)
            return None

        if not items:
            logger.info("No provider item for vendor id=%s", vendor_id)
            return None

        vendor = to_vendor(items[0], DETAIL_CATEGORY, location, DETAIL_DESCRIPTION)
        vendor.id = vendor_id
        return vendor

    def _fallback(self, keyword: str, location: Location, limit: int) -> VendorSearchResult:
        vendors = self.placeholder_vendors(keyword, location)
        return VendorSearchResult(vendors=vendors[:limit], total=len(vendors), source=SOURCE_FALLBACK)

    def placeholder_vendors(self, keyword: str, location: Location) -> List[Vendor]:
        return [
            Vendor(
                id=f"mock-{i}",
                name=f"{keyword} Business {i + 1}",
                category=keyword,
                location=location,
                rating=round(self._rng.uniform(4.5, 4.99), 2),
                review_count=self._rng.randrange(10, 60),
                phone="(555) 123-4567",
                website="https://example.com",
                address=f"{location.city}, {location.state_name}",
                description=f"Professional {keyword.lower()} in {location.city}",
                images=[PLACEHOLDER_IMAGE],
                business_hours=default_business_hours(),
                price_range="$$",
            )
            for i in range(FALLBACK_VENDOR_COUNT)
        ]
