"""Fixed location and category reference data."""

from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from wedding_directory.models import Location, VendorCategory, city_slug, slugify

logger = logging.getLogger(__name__)

DEFAULT_LOCATIONS_CSV = Path(__file__).resolve().parents[1] / "data" / "locations.csv"
MAJOR_CITY_POPULATION = 100000
POPULAR_LOCATION_LIMIT = 24

LOCATION_COLUMNS = (
    "city",
    "city_ascii",
    "state_id",
    "state_name",
    "county_name",
    "lat",
    "lng",
    "population",
    "density",
    "timezone",
    "zips",
)

CATEGORIES = (
    VendorCategory("Wedding Venue", "Find the perfect wedding venue for your special day. Browse beautiful ceremony and reception spaces."),
    VendorCategory("Wedding Catering", "Discover exceptional wedding caterers who will create an unforgettable dining experience."),
    VendorCategory("Wedding Planner", "Connect with experienced wedding planners who will bring your vision to life."),
    VendorCategory("Wedding Photographer", "Capture your special moments with professional wedding photographers."),
    VendorCategory("Wedding Videographer", "Document your wedding day with cinematic wedding videos."),
    VendorCategory("Florist", "Create stunning floral arrangements for your ceremony and reception."),
    VendorCategory("Entertainment", "Book amazing DJs and bands for your wedding celebration."),
    VendorCategory("Officiant", "Find the perfect officiant to perform your wedding ceremony."),
    VendorCategory("Wedding Attire", "Find your dream wedding dress and perfect tuxedo rentals."),
    VendorCategory("Beauty Services", "Look your best with professional hair and makeup services."),
    VendorCategory("Wedding Bakery", "Order your perfect wedding cake and delicious desserts."),
    VendorCategory("Stationery Design", "Create beautiful invitations and wedding stationery."),
    VendorCategory("Wedding Rentals", "Find everything you need to style your wedding."),
    VendorCategory("Transportation", "Book elegant transportation for your wedding day."),
    VendorCategory("Jeweler", "Find the perfect wedding rings and jewelry."),
    VendorCategory("Decor Services", "Transform your venue with professional wedding décor."),
    VendorCategory("Bar Services", "Professional bartending and beverage services."),
    VendorCategory("Invitations", "Design and order your wedding invitations and paper goods."),
    VendorCategory("Photo Booth", "Add fun photo booth entertainment to your reception."),
    VendorCategory("Lighting Services", "Create the perfect ambiance with professional lighting."),
    VendorCategory("Wedding Insurance", "Protect your special day with wedding insurance."),
    VendorCategory("Dance Lessons", "Prepare for your first dance with professional lessons."),
    VendorCategory("Hotel Blocks", "Arrange accommodations for your wedding guests."),
    VendorCategory("Travel Services", "Plan your honeymoon and guest travel arrangements."),
    VendorCategory("Wedding Favors", "Find unique wedding favors and gifts for your guests."),
)


class ReferenceDataError(ValueError):
    """Raised when the bundled reference dataset cannot be parsed."""


def major_locations(locations: Iterable[Location], min_population: int) -> List[Location]:
    return [location for location in locations if location.population > min_population]


def popular_locations_by_state(
    locations: Iterable[Location],
    limit: int = POPULAR_LOCATION_LIMIT,
    min_population: int = MAJOR_CITY_POPULATION,
) -> Dict[str, List[Location]]:
    """The `limit` most populous major cities, grouped by state name.

    States appear in the order of their largest city; cities within a state
    keep descending population order.
    """
    ranked = sorted(major_locations(locations, min_population), key=lambda location: location.population, reverse=True)
    grouped: Dict[str, List[Location]] = {}
    for location in ranked[:max(limit, 0)]:
        grouped.setdefault(location.state_name, []).append(location)
    return grouped


def parse_location_row(row: Dict[str, str], line_no: int) -> Location:
    missing = [column for column in LOCATION_COLUMNS if column not in row or row[column] is None]
    if missing:
        raise ReferenceDataError(f"line {line_no}: missing columns {', '.join(missing)}")

    try:
        return Location(
            city=row["city"].strip(),
            city_ascii=row["city_ascii"].strip(),
            state_id=row["state_id"].strip().upper(),
            state_name=row["state_name"].strip(),
            county_name=row["county_name"].strip(),
            lat=float(row["lat"]),
            lng=float(row["lng"]),
            population=int(float(row["population"])),
            density=float(row["density"] or 0),
            timezone=row["timezone"].strip(),
            zips=tuple(z for z in row["zips"].replace(",", " ").split() if z),
        )
    except ValueError as exc:
        raise ReferenceDataError(f"line {line_no}: {exc}") from exc


def read_locations_csv(path: Path) -> List[Location]:
    if not path.exists():
        raise ReferenceDataError(f"locations file not found: {path}")
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        # header is line 1
        return [parse_location_row(row, line_no) for line_no, row in enumerate(reader, start=2)]


class ReferenceDataProvider:
    """Loads locations once and serves them, plus categories, for the provider's lifetime."""

    def __init__(self, locations_path: Optional[Union[str, Path]] = None) -> None:
        self._locations_path = Path(locations_path) if locations_path else DEFAULT_LOCATIONS_CSV
        self._locations: Optional[List[Location]] = None
        self._categories: Optional[List[VendorCategory]] = None

    def get_locations(self) -> List[Location]:
        if self._locations is None:
            self._locations = read_locations_csv(self._locations_path)
            logger.info("Loaded %d locations from %s", len(self._locations), self._locations_path)
        return self._locations

    def get_categories(self) -> List[VendorCategory]:
        if self._categories is None:
            categories = list(CATEGORIES)
            slugs = [category.slug for category in categories]
            if len(set(slugs)) != len(slugs):
                raise ReferenceDataError("category slugs must be unique")
            self._categories = categories
        return self._categories

    def find_location(self, query: Optional[str]) -> Optional[Location]:
        """Resolve "City", "City, ST", "City, State Name" or a city slug."""
        if not query or not query.strip():
            return None

        city_part, _, state_part = query.partition(",")
        wanted_city = city_slug(city_part)
        wanted_state = state_part.strip().lower()

        for location in self.get_locations():
            if wanted_city not in (location.slug, city_slug(location.city)):
                continue
            if wanted_state and wanted_state not in (location.state_slug, location.state_name.lower()):
                continue
            return location
        return None

    def find_location_by_slug(self, state: str, city: str) -> Optional[Location]:
        wanted_city = city_slug(city)
        wanted_state = (state or "").strip().lower()
        for location in self.get_locations():
            if location.slug == wanted_city and location.state_slug == wanted_state:
                return location
        return None

    def find_category(self, value: Optional[str]) -> Optional[VendorCategory]:
        if not value:
            return None
        wanted = slugify(value)
        for category in self.get_categories():
            if category.slug == wanted:
                return category
        return None
