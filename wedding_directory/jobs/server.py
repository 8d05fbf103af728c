"""HTTP entrypoint for the wedding vendor directory API."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from flask import Blueprint, Flask, current_app, jsonify, request

from wedding_directory.core.config import Settings, get_settings
from wedding_directory.core.reference_data import POPULAR_LOCATION_LIMIT, ReferenceDataProvider, popular_locations_by_state
from wedding_directory.core.registration import RegistrationIntake, RegistrationStore
from wedding_directory.core.reviews import ReviewStore
from wedding_directory.core.search import DEFAULT_PAGE_SIZE, SearchAggregator
from wedding_directory.models import VendorReview
from wedding_directory.vendors.dataforseo import DataForSEOClient
from wedding_directory.vendors.search_client import VendorSearchClient

# ---------- Logging ----------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

EXTENSION_KEY = "wedding_directory"
MAX_UPLOAD_BYTES = 16 * 1024 * 1024


@dataclass
class Services:
    reference: ReferenceDataProvider
    client: VendorSearchClient
    aggregator: SearchAggregator
    reviews: ReviewStore
    intake: RegistrationIntake


def build_services(settings: Settings) -> Services:
    reference = ReferenceDataProvider(settings.locations_csv)
    provider = DataForSEOClient(
        settings.dataforseo_username,
        settings.dataforseo_password,
        base_url=settings.dataforseo_base_url,
        timeout=settings.provider_timeout,
    )
    client = VendorSearchClient(provider)
    return Services(
        reference=reference,
        client=client,
        aggregator=SearchAggregator(client),
        reviews=ReviewStore(),
        intake=RegistrationIntake(settings.upload_dir, RegistrationStore()),
    )


def create_app(settings: Optional[Settings] = None, services: Optional[Services] = None) -> Flask:
    settings = settings or get_settings()
    services = services or build_services(settings)

    # malformed reference data must fail at startup, not on first request
    services.reference.get_locations()
    services.reference.get_categories()

    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = MAX_UPLOAD_BYTES
    app.config["MAJOR_CITY_POPULATION"] = settings.major_city_population
    app.extensions[EXTENSION_KEY] = services
    app.register_blueprint(api)
    return app


def _services() -> Services:
    return current_app.extensions[EXTENSION_KEY]


def _positive_int(name: str, default: int) -> Tuple[Optional[int], Optional[str]]:
    raw = request.args.get(name)
    if raw is None or raw == "":
        return default, None
    try:
        value = int(raw)
    except ValueError:
        return None, f"{name} must be an integer"
    if value < 1:
        return None, f"{name} must be positive"
    return value, None


# ---------- Routes ----------

api = Blueprint("api", __name__)


@api.get("/")
def root() -> Any:
    return "ok", 200


@api.get("/healthz")
def healthcheck() -> Any:
    services = _services()
    return (
        jsonify(
            {
                "status": "ok",
                "locations": len(services.reference.get_locations()),
                "categories": len(services.reference.get_categories()),
                "revision": os.getenv("K_REVISION", "unknown"),
            }
        ),
        200,
    )


@api.get("/api/locations")
def list_locations() -> Any:
    """
    All reference locations, or with ?popular=1 the most populous major cities
    grouped by state (limit defaults to 24).
    """
    locations = _services().reference.get_locations()
    if request.args.get("popular") in ("1", "true", "yes"):
        limit, error = _positive_int("limit", POPULAR_LOCATION_LIMIT)
        if error:
            return jsonify({"error": error}), 400
        grouped = popular_locations_by_state(locations, limit, current_app.config["MAJOR_CITY_POPULATION"])
        return (
            jsonify(
                [
                    {"state": state, "locations": [location.to_dict() for location in members]}
                    for state, members in grouped.items()
                ]
            ),
            200,
        )
    return jsonify([location.to_dict() for location in locations]), 200


@api.get("/api/locations/<state>/<city>")
def get_location(state: str, city: str) -> Any:
    location = _services().reference.find_location_by_slug(state, city)
    if location is None:
        return jsonify({"error": "Location not found"}), 404
    return jsonify(location.to_dict()), 200


@api.get("/api/categories")
def list_categories() -> Any:
    categories = _services().reference.get_categories()
    return jsonify([category.to_dict() for category in categories]), 200


@api.get("/api/categories/<slug>")
def get_category(slug: str) -> Any:
    category = _services().reference.find_category(slug)
    if category is None:
        return jsonify({"error": "Category not found"}), 404
    return jsonify(category.to_dict()), 200


@api.get("/api/vendors")
@api.get("/api/vendors/search")
def search_vendors() -> Any:
    """
    Search vendors in a location.
    Query params: location (required), q, category (slug), page, limit
    """
    services = _services()

    page, error = _positive_int("page", 1)
    if error:
        return jsonify({"error": error}), 400
    limit, error = _positive_int("limit", DEFAULT_PAGE_SIZE)
    if error:
        return jsonify({"error": error}), 400

    query = request.args.get("q", "")
    try:
        location = services.reference.find_location(request.args.get("location"))
        if location is None:
            return jsonify({"error": "Location not found"}), 404

        category_name = None
        category_slug = request.args.get("category")
        if category_slug:
            category = services.reference.find_category(category_slug)
            if category is None:
                return jsonify({"error": "Category not found"}), 404
            category_name = category.name

        result = services.aggregator.search_all_vendors(
            query,
            location,
            page=page,
            limit=limit,
            category=category_name,
        )
    except Exception as exc:  # noqa: BLE001
        logger.exception("Vendor search request failed: %s", exc)
        return jsonify({"error": "Failed to search vendors"}), 500

    return jsonify(result.to_dict()), 200


@api.get("/api/vendors/<vendor_id>")
def get_vendor(vendor_id: str) -> Any:
    services = _services()
    try:
        location_query = request.args.get("location")
        if location_query:
            location = services.reference.find_location(location_query)
            if location is None:
                return jsonify({"error": "Location not found"}), 404
        else:
            location = services.reference.get_locations()[0]

        vendor = services.client.get_vendor_details(vendor_id, location)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Vendor lookup failed for %s: %s", vendor_id, exc)
        return jsonify({"error": "Failed to fetch vendor"}), 500

    if vendor is None:
        return jsonify({"error": "Vendor not found"}), 404
    vendor.reviews = services.reviews.list_reviews(vendor_id)
    return jsonify(vendor.to_dict()), 200


@api.get("/api/vendors/<vendor_id>/reviews")
def list_reviews(vendor_id: str) -> Any:
    reviews = _services().reviews.list_reviews(vendor_id)
    return jsonify([review.to_dict() for review in reviews]), 200


@api.post("/api/vendors/<vendor_id>/reviews")
def add_review(vendor_id: str) -> Any:
    payload: Dict[str, Any] = request.get_json(silent=True)
    try:
        review = VendorReview.from_dict(payload)
        stored = _services().reviews.add_review(vendor_id, review)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Error adding review for %s: %s", vendor_id, exc)
        return jsonify({"error": "Failed to add review"}), 500
    return jsonify(stored.to_dict()), 201


@api.post("/api/vendors/register")
def register_vendor() -> Any:
    """
    Accept a multipart vendor registration.
    Fields: businessName, category, description, address, city, state, zipCode,
    phone, email, website, businessHours (JSON), images (files)
    """
    try:
        images = [storage for storage in request.files.getlist("images") if storage and storage.filename]
        record = _services().intake.submit(request.form, images)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Registration failed: %s", exc)
        return jsonify({"success": False, "error": "Failed to process registration"}), 500

    return (
        jsonify({"success": True, "message": "Registration submitted successfully", "id": record.id}),
        201,
    )


def main() -> None:
    env_port = os.getenv("PORT")
    logger.info("[BOOT] ENV PORT=%s", env_port)

    port = int(env_port or 8080)
    logger.info("[BOOT] Binding on 0.0.0.0:%d", port)

    app = create_app()
    app.run(host="0.0.0.0", port=port, threaded=True)


if __name__ == "__main__":
    main()
