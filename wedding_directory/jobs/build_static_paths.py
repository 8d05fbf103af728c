"""CLI job that enumerates city and category pages for pre-rendering."""

import argparse
import json
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from wedding_directory.core.config import get_settings
from wedding_directory.core.reference_data import ReferenceDataProvider, major_locations
from wedding_directory.models import Location, VendorCategory

logger = logging.getLogger(__name__)


def city_paths(locations: Iterable[Location], min_population: int) -> List[Dict[str, str]]:
    return [
        {"state": location.state_slug, "city": location.slug}
        for location in major_locations(locations, min_population)
    ]


def category_paths(categories: Iterable[VendorCategory]) -> List[Dict[str, str]]:
    return [{"slug": category.slug} for category in categories]


def city_category_paths(
    locations: Iterable[Location],
    categories: Iterable[VendorCategory],
    min_population: int,
) -> List[Dict[str, str]]:
    categories = list(categories)
    return [
        {"state": location.state_slug, "city": location.slug, "category": category.slug}
        for location in major_locations(locations, min_population)
        for category in categories
    ]


def build_static_paths(
    provider: ReferenceDataProvider,
    site_url: str,
    min_population: int,
) -> Dict[str, List[Dict[str, str]]]:
    locations = provider.get_locations()
    categories = provider.get_categories()
    base = site_url.rstrip("/")

    cities = city_paths(locations, min_population)
    for entry in cities:
        entry["url"] = f"{base}/{entry['state']}/{entry['city']}"

    category_pages = category_paths(categories)
    for entry in category_pages:
        entry["url"] = f"{base}/categories/{entry['slug']}"

    combined = city_category_paths(locations, categories, min_population)
    for entry in combined:
        entry["url"] = f"{base}/{entry['state']}/{entry['city']}/{entry['category']}"

    return {"cities": cities, "categories": category_pages, "cityCategories": combined}


def write_static_paths(paths: Dict[str, List[Dict[str, str]]], output: Path) -> None:
    output.parent.mkdir(parents=True, exist_ok=True)
    with output.open("w", encoding="utf-8") as fh:
        json.dump(paths, fh, ensure_ascii=False, indent=2)


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Enumerate location and category pages for pre-rendering")
    parser.add_argument("--output", dest="output", default="static-paths.json", help="JSON file to write")
    parser.add_argument(
        "--min-population",
        dest="min_population",
        type=int,
        default=settings.major_city_population,
        help="Only cities with a population above this are enumerated",
    )
    parser.add_argument("--site-url", dest="site_url", default=settings.site_url, help="Base URL for absolute page links")
    parser.add_argument("--locations-csv", dest="locations_csv", default=settings.locations_csv, help="Override the bundled locations CSV")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    parser = build_parser()
    args = parser.parse_args(argv)

    provider = ReferenceDataProvider(args.locations_csv)
    paths = build_static_paths(provider, site_url=args.site_url, min_population=args.min_population)
    write_static_paths(paths, Path(args.output))
    logger.info(
        "Wrote %d city, %d category and %d city/category paths to %s",
        len(paths["cities"]),
        len(paths["categories"]),
        len(paths["cityCategories"]),
        args.output,
    )


if __name__ == "__main__":
    main()
