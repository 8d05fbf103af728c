"""In-memory review store keyed by vendor id."""

import logging
import threading
from collections import defaultdict
from typing import Dict, List

from wedding_directory.models import VendorReview

logger = logging.getLogger(__name__)


class ReviewStore:
    def __init__(self) -> None:
        self._reviews: Dict[str, List[VendorReview]] = defaultdict(list)
        self._lock = threading.Lock()

    def list_reviews(self, vendor_id: str) -> List[VendorReview]:
        with self._lock:
            return list(self._reviews.get(vendor_id, ()))

    def add_review(self, vendor_id: str, review: VendorReview) -> VendorReview:
        with self._lock:
            self._reviews[vendor_id].append(review)
            count = len(self._reviews[vendor_id])
        logger.info("Stored review #%d for vendor %s", count, vendor_id)
        return review
