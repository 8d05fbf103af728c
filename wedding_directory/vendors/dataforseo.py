"""Client utilities for the DataForSEO Google Maps and business-data APIs."""

import logging
from typing import Any, Dict, List, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

logger = logging.getLogger(__name__)

_OK_STATUS = 20000
MAX_DEPTH = 700


class DataForSEOError(RuntimeError):
    """Raised when DataForSEO returns a non-successful response."""


def build_session(retries: int = 2) -> requests.Session:
    session = requests.Session()
    retry = Retry(
        total=retries,
        backoff_factor=0.5,
        status_forcelist=(500, 502, 503, 504),
        allowed_methods=("POST", "GET"),
    )
    session.mount("http://", HTTPAdapter(max_retries=retry))
    session.mount("https://", HTTPAdapter(max_retries=retry))
    return session


class DataForSEOClient:
    """Thin wrapper around the two live endpoints the directory uses."""

    def __init__(
        self,
        username: str,
        password: str,
        base_url: str = "https://api.dataforseo.com/v3",
        timeout: float = 5.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._auth = (username, password)
        self._session = session or build_session()

    def maps_search(self, keyword: str, location_name: str, depth: int = 20, language_code: str = "en") -> Dict[str, Any]:
        task = {
            "keyword": keyword,
            "location_name": location_name,
            "language_code": language_code,
            "device": "desktop",
            "os": "windows",
            "depth": max(1, min(int(depth), MAX_DEPTH)),
        }
        return self._post("/serp/google/maps/live/advanced", [task])

    def business_info(self, place_id: str, location_name: str, language_code: str = "en") -> Dict[str, Any]:
        task = {
            "keyword": f"place_id:{place_id}",
            "location_name": location_name,
            "language_code": language_code,
        }
        return self._post("/business_data/google/my_business_info/live", [task])

    def _post(self, path: str, tasks: List[Dict[str, Any]]) -> Dict[str, Any]:
        if not all(self._auth):
            raise DataForSEOError("DataForSEO credentials are not configured")

        logger.info("Calling DataForSEO %s keyword=%s", path, tasks[0].get("keyword"))
        response = self._session.post(
            f"{self.base_url}{path}",
            json=tasks,
            auth=self._auth,
            timeout=self.timeout,
        )
        response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, dict):
            raise DataForSEOError("DataForSEO returned a non-object payload")

        status = payload.get("status_code")
        if status is not None and status != _OK_STATUS:
            logger.error("DataForSEO call failed: status=%s, message=%s", status, payload.get("status_message"))
            raise DataForSEOError(payload.get("status_message") or str(status))

        task_list = payload.get("tasks")
        if isinstance(task_list, list) and task_list and isinstance(task_list[0], dict):
            task_status = task_list[0].get("status_code")
            if task_status is not None and task_status != _OK_STATUS:
                logger.error("DataForSEO task failed: status=%s, message=%s", task_status, task_list[0].get("status_message"))
                raise DataForSEOError(task_list[0].get("status_message") or str(task_status))
        return payload
