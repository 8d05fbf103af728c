"""Core data models shared by the directory services and the HTTP API."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

SOURCE_PROVIDER = "provider"
SOURCE_FALLBACK = "fallback"
SOURCE_ERROR = "error"

STATUS_PENDING = "pending"
STATUS_APPROVED = "approved"
STATUS_REJECTED = "rejected"
REGISTRATION_STATUSES = (STATUS_PENDING, STATUS_APPROVED, STATUS_REJECTED)

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_WHITESPACE = re.compile(r"\s+")


def slugify(name: str) -> str:
    """Lowercase, collapse non-alphanumeric runs to one hyphen, trim hyphens."""
    return _NON_ALNUM.sub("-", (name or "").lower()).strip("-")


def city_slug(city: str) -> str:
    return _WHITESPACE.sub("-", (city or "").strip().lower())


@dataclass(frozen=True)
class Location:
    """A US city from the bundled reference dataset."""

    city: str
    city_ascii: str
    state_id: str
    state_name: str
    county_name: str
    lat: float
    lng: float
    population: int
    density: float
    timezone: str
    zips: Tuple[str, ...] = ()

    @property
    def slug(self) -> str:
        return city_slug(self.city_ascii)

    @property
    def state_slug(self) -> str:
        return self.state_id.lower()

    @property
    def display_name(self) -> str:
        return f"{self.city}, {self.state_name}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "city": self.city,
            "city_ascii": self.city_ascii,
            "state_id": self.state_id,
            "state_name": self.state_name,
            "county_name": self.county_name,
            "lat": self.lat,
            "lng": self.lng,
            "population": self.population,
            "density": self.density,
            "timezone": self.timezone,
            "zips": list(self.zips),
        }


@dataclass(frozen=True)
class VendorCategory:
    name: str
    description: str = ""

    @property
    def slug(self) -> str:
        return slugify(self.name)

    def to_dict(self) -> Dict[str, Any]:
        return {"slug": self.slug, "name": self.name, "description": self.description}


MIN_REVIEW_RATING = 1
MAX_REVIEW_RATING = 5


def _review_rating(value: Any) -> int:
    """Whole stars only: 5, "5" and 5.0 are accepted, 4.7 and True are not."""
    if isinstance(value, bool):
        raise ValueError("rating must be a whole number")
    number = float(value)
    if not number.is_integer():
        raise ValueError(f"rating must be a whole number, got {value!r}")
    rating = int(number)
    if not MIN_REVIEW_RATING <= rating <= MAX_REVIEW_RATING:
        raise ValueError(f"rating must be between {MIN_REVIEW_RATING} and {MAX_REVIEW_RATING}, got {rating}")
    return rating


@dataclass(slots=True)
class VendorReview:
    rating: int
    text: str
    author: str
    date: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "VendorReview":
        """Build a review from a JSON body; raises KeyError/TypeError/ValueError when malformed."""
        if not isinstance(data, dict):
            raise TypeError("review payload must be a JSON object")
        return cls(
            rating=_review_rating(data["rating"]),
            text=str(data["text"]),
            author=str(data["author"]),
            date=str(data["date"]),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"rating": self.rating, "text": self.text, "author": self.author, "date": self.date}


@dataclass(slots=True)
class Vendor:
    """Normalized snapshot of a wedding business, rebuilt per request from provider data."""

    id: str
    name: str
    category: str
    location: Location
    rating: float
    review_count: int
    description: str
    images: List[str] = field(default_factory=list)
    phone: Optional[str] = None
    website: Optional[str] = None
    address: Optional[str] = None
    business_hours: Optional[Dict[str, str]] = None
    price_range: Optional[str] = None
    reviews: Optional[List[VendorReview]] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "location": self.location.to_dict(),
            "rating": self.rating,
            "reviewCount": self.review_count,
            "phone": self.phone,
            "website": self.website,
            "address": self.address,
            "description": self.description,
            "images": list(self.images),
            "businessHours": self.business_hours,
            "priceRange": self.price_range,
        }
        if self.reviews is not None:
            data["reviews"] = [review.to_dict() for review in self.reviews]
        return data


@dataclass(slots=True)
class VendorSearchResult:
    """What the search client hands back: a window of vendors and where they came from."""

    vendors: List[Vendor]
    total: int
    source: str = SOURCE_PROVIDER

    @property
    def is_fallback(self) -> bool:
        return self.source == SOURCE_FALLBACK


@dataclass(slots=True)
class SearchResult:
    vendors: List[Vendor]
    total: int
    page: int
    page_size: int
    source: str = SOURCE_PROVIDER

    @property
    def page_count(self) -> int:
        if self.page_size <= 0:
            return 0
        return math.ceil(self.total / self.page_size)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "vendors": [vendor.to_dict() for vendor in self.vendors],
            "total": self.total,
            "page": self.page,
            "pageSize": self.page_size,
            "pageCount": self.page_count,
            "source": self.source,
        }


@dataclass(slots=True)
class RegistrationRecord:
    id: str
    business_name: Optional[str]
    category: Optional[str]
    description: Optional[str]
    address: Optional[str]
    city: Optional[str]
    state: Optional[str]
    zip_code: Optional[str]
    phone: Optional[str]
    email: Optional[str]
    website: Optional[str]
    images: List[str]
    business_hours: Dict[str, Any]
    created_at: str
    status: str = STATUS_PENDING

    def __post_init__(self) -> None:
        if self.status not in REGISTRATION_STATUSES:
            raise ValueError(f"unknown registration status: {self.status!r}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "businessName": self.business_name,
            "category": self.category,
            "description": self.description,
            "address": self.address,
            "city": self.city,
            "state": self.state,
            "zipCode": self.zip_code,
            "phone": self.phone,
            "email": self.email,
            "website": self.website,
            "images": list(self.images),
            "businessHours": self.business_hours,
            "status": self.status,
            "createdAt": self.created_at,
        }
