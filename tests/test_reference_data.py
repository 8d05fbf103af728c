import re

import pytest

from wedding_directory.core import reference_data
from wedding_directory.models import slugify

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")


def test_slugify():
    assert slugify("Wedding Venue") == "wedding-venue"
    assert slugify("  Bar & Beverage -- Services! ") == "bar-beverage-services"
    assert slugify("Décor Services") == "d-cor-services"


def test_category_slugs_unique_and_url_safe():
    provider = reference_data.ReferenceDataProvider()
    slugs = [category.slug for category in provider.get_categories()]

    assert len(slugs) == len(set(slugs))
    assert all(SLUG_PATTERN.match(slug) for slug in slugs)
    assert slugs == [category.slug for category in provider.get_categories()]


def test_get_locations_reads_source_once(monkeypatch):
    provider = reference_data.ReferenceDataProvider()
    calls = []
    real_reader = reference_data.read_locations_csv

    def counting_reader(path):
        calls.append(path)
        return real_reader(path)

    monkeypatch.setattr(reference_data, "read_locations_csv", counting_reader)

    first = provider.get_locations()
    second = provider.get_locations()

    assert first is second
    assert len(calls) == 1
    assert first[0].city == "New York"
    assert first[0].zips[0] == "10001"


def test_find_location_variants():
    provider = reference_data.ReferenceDataProvider()

    assert provider.find_location("New York, NY").state_id == "NY"
    assert provider.find_location("new york").city == "New York"
    assert provider.find_location("los-angeles").state_id == "CA"
    assert provider.find_location("San Diego, California").city == "San Diego"
    assert provider.find_location("New York, CA") is None
    assert provider.find_location("Atlantis") is None
    assert provider.find_location("") is None
    assert provider.find_location(None) is None


def test_find_location_by_slug():
    provider = reference_data.ReferenceDataProvider()
    assert provider.find_location_by_slug("tx", "san-antonio").city == "San Antonio"
    assert provider.find_location_by_slug("ca", "san-antonio") is None


def test_find_category():
    provider = reference_data.ReferenceDataProvider()
    assert provider.find_category("florist").name == "Florist"
    assert provider.find_category("Wedding Photographer").slug == "wedding-photographer"
    assert provider.find_category("plumber") is None


def test_malformed_csv_is_fatal(tmp_path):
    bad = tmp_path / "locations.csv"
    bad.write_text(
        "city,city_ascii,state_id,state_name,county_name,lat,lng,population,density,timezone,zips\n"
        "Springfield,Springfield,IL,Illinois,Sangamon County,39.8,-89.6,many,100,America/Chicago,62701\n",
        encoding="utf-8",
    )
    with pytest.raises(reference_data.ReferenceDataError):
        reference_data.ReferenceDataProvider(bad).get_locations()


def test_missing_column_is_fatal(tmp_path):
    bad = tmp_path / "locations.csv"
    bad.write_text("city,state_id\nSpringfield,IL\n", encoding="utf-8")
    with pytest.raises(reference_data.ReferenceDataError):
        reference_data.ReferenceDataProvider(bad).get_locations()


def test_popular_locations_grouped_by_state():
    locations = reference_data.ReferenceDataProvider().get_locations()
    grouped = reference_data.popular_locations_by_state(locations)

    assert list(grouped) == [
        "New York",
        "California",
        "Illinois",
        "Texas",
        "Arizona",
        "Tennessee",
        "South Carolina",
        "Georgia",
    ]
    assert [location.city for location in grouped["Texas"]] == ["Houston", "San Antonio", "Austin"]
    assert [location.city for location in grouped["California"]] == ["Los Angeles", "San Diego"]
    cities = [location.city for members in grouped.values() for location in members]
    assert "Napa" not in cities and "Aspen" not in cities


def test_popular_locations_respects_limit():
    locations = reference_data.ReferenceDataProvider().get_locations()
    grouped = reference_data.popular_locations_by_state(locations, limit=3)

    assert {state: [location.city for location in members] for state, members in grouped.items()} == {
        "New York": ["New York"],
        "California": ["Los Angeles"],
        "Illinois": ["Chicago"],
    }
    assert reference_data.popular_locations_by_state(locations, limit=0) == {}
