"""Application configuration helpers."""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    dataforseo_username: str
    dataforseo_password: str
    dataforseo_base_url: str = "https://api.dataforseo.com/v3"
    provider_timeout: float = 5.0
    upload_dir: str = "public/uploads"
    locations_csv: Optional[str] = None
    site_url: str = "http://localhost:3000"
    major_city_population: int = 100000

    @property
    def has_provider_credentials(self) -> bool:
        return bool(self.dataforseo_username and self.dataforseo_password)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""
    load_dotenv()

    dataforseo_username = os.getenv("DATAFORSEO_USERNAME", "")
    dataforseo_password = os.getenv("DATAFORSEO_PASSWORD", "")
    dataforseo_base_url = os.getenv("DATAFORSEO_BASE_URL", "https://api.dataforseo.com/v3").rstrip("/")
    provider_timeout = float(os.getenv("PROVIDER_TIMEOUT_SECONDS", "5"))
    upload_dir = os.getenv("UPLOAD_DIR", "public/uploads")
    locations_csv = os.getenv("LOCATIONS_CSV") or None
    site_url = os.getenv("SITE_URL", "http://localhost:3000").rstrip("/")
    major_city_population = int(os.getenv("MAJOR_CITY_POPULATION", "100000"))

    if not dataforseo_username or not dataforseo_password:
        logger.warning("DATAFORSEO_USERNAME/DATAFORSEO_PASSWORD are not configured; vendor search will serve placeholder data.")

    return Settings(
        dataforseo_username=dataforseo_username,
        dataforseo_password=dataforseo_password,
        dataforseo_base_url=dataforseo_base_url,
        provider_timeout=provider_timeout,
        upload_dir=upload_dir,
        locations_csv=locations_csv,
        site_url=site_url,
        major_city_population=major_city_population,
    )
