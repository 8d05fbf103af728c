from wedding_directory.etl import transform


def test_extract_items_tolerates_missing_levels():
    assert transform.extract_items(None) == []
    assert transform.extract_items({}) == []
    assert transform.extract_items({"tasks": None}) == []
    assert transform.extract_items({"tasks": []}) == []
    assert transform.extract_items({"tasks": [{"result": None}]}) == []
    assert transform.extract_items({"tasks": [{"result": [{}]}]}) == []
    assert transform.extract_items({"tasks": [{"result": [{"items": [{"title": "A"}]}]}]}) == [{"title": "A"}]


def test_provider_item_reads_heterogeneous_fields():
    item = transform.ProviderItem.from_raw(
        {
            "cid": "123",
            "title": " Bloom Studio ",
            "rating": {"value": "4.8", "votes": "1,204"},
            "url": "https://bloom.example.com",
            "snippet": "Florals for every season",
            "main_image": "https://img.example.com/1.jpg",
        }
    )

    assert item.title == "Bloom Studio"
    assert item.place_id == "123"
    assert item.rating == 4.8
    assert item.votes_count == 1204
    assert item.website == "https://bloom.example.com"
    assert item.description == "Florals for every season"
    assert item.photos == ["https://img.example.com/1.jpg"]


def test_provider_item_parses_work_hours_timetable():
    raw = {
        "title": "Cake Co",
        "work_hours": {
            "timetable": {
                "monday": [{"open": {"hour": 9, "minute": 0}, "close": {"hour": 17, "minute": 30}}],
                "sunday": None,
            }
        },
    }
    item = transform.ProviderItem.from_raw(raw)
    assert item.schedule == {"Monday": "9:00 AM - 5:30 PM"}


def test_parse_items_skips_untitled():
    items = transform.parse_items([{"title": ""}, "junk", {"title": "Real"}])
    assert [item.title for item in items] == ["Real"]


def test_to_vendor_applies_defaults(new_york):
    item = transform.ProviderItem(title="Bare Vendor")
    vendor = transform.to_vendor(item, "Florist", new_york, "Professional florist in New York")

    assert vendor.rating == 4.5
    assert vendor.review_count == 0
    assert vendor.price_range == "$$"
    assert vendor.images == ["/placeholder.jpg"]
    assert vendor.business_hours == transform.default_business_hours()
    assert vendor.address == "New York, New York"
    assert vendor.description == "Professional florist in New York"
    assert vendor.id


def test_to_vendor_prefers_provider_values(new_york):
    item = transform.ProviderItem(
        title="Full Vendor",
        place_id="pid",
        rating=4.1,
        votes_count=87,
        phone="+1 212 555 0100",
        address="1 Main St",
        photos=["a.jpg", "b.jpg"],
        schedule={"Saturday": "10:00 AM - 2:00 PM"},
        price_level="$$$",
    )
    vendor = transform.to_vendor(item, "Florist", new_york, "unused")

    assert vendor.id == "pid"
    assert vendor.rating == 4.1
    assert vendor.review_count == 87
    assert vendor.images == ["a.jpg", "b.jpg"]
    assert vendor.business_hours == {"Saturday": "10:00 AM - 2:00 PM"}
    assert vendor.price_range == "$$$"
    assert vendor.to_dict()["reviewCount"] == 87


def test_non_finite_numbers_fall_back_to_defaults(new_york):
    item = transform.ProviderItem.from_raw(
        {"title": "Odd", "rating": {"value": float("nan"), "votes_count": 1e400}}
    )
    assert item.rating is None
    assert item.votes_count is None

    vendor = transform.to_vendor(item, "Florist", new_york, "unused")
    assert vendor.rating == 4.5
    assert vendor.review_count == 0


def test_parse_items_keeps_good_items_when_one_is_bad(monkeypatch):
    real_from_raw = transform.ProviderItem.from_raw

    def flaky_from_raw(raw):
        if raw.get("title") == "Broken":
            raise OverflowError("cannot convert float infinity to integer")
        return real_from_raw(raw)

    monkeypatch.setattr(transform.ProviderItem, "from_raw", staticmethod(flaky_from_raw))

    items = transform.parse_items([{"title": "Good"}, {"title": "Broken"}, {"title": "Also Good"}])

    assert [item.title for item in items] == ["Good", "Also Good"]
