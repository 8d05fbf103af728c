"""Search aggregation: folds query, category and pagination into one vendor page."""

import logging
from typing import Optional

from wedding_directory.models import SOURCE_ERROR, Location, SearchResult
from wedding_directory.vendors.search_client import VendorSearchClient

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20


def build_keyword(query: Optional[str], category: Optional[str] = None) -> str:
    parts = [(category or "").strip(), (query or "").strip()]
    return " ".join(part for part in parts if part)


class SearchAggregator:
    def __init__(self, client: VendorSearchClient) -> None:
        self._client = client

    def search_all_vendors(
        self,
        query: Optional[str],
        location: Location,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
        category: Optional[str] = None,
    ) -> SearchResult:
        """Return one page of vendors; internal failures yield an empty page, never an exception."""
        try:
            if page < 1 or limit < 1:
                raise ValueError(f"page and limit must be positive (page={page}, limit={limit})")

            keyword = build_keyword(query, category)
            offset = (page - 1) * limit
            found = self._client.search_vendors(keyword, location, limit=limit, offset=offset)
            return SearchResult(
                vendors=found.vendors[:limit],
                total=found.total,
                page=page,
                page_size=limit,
                source=found.source,
            )
        except Exception as exc:  # noqa: BLE001
            logger.exception("Search failed for query=%r category=%r: %s", query, category, exc)
            return SearchResult(vendors=[], total=0, page=page, page_size=limit, source=SOURCE_ERROR)

    def search_vendors_by_category(
        self,
        category: str,
        location: Location,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> SearchResult:
        return self.search_all_vendors("", location, page=page, limit=limit, category=category)
