"""Vendor registration intake: image uploads plus a pending registration record."""

from __future__ import annotations

import json
import logging
import secrets
import string
import threading
import time
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, BinaryIO, Dict, Iterable, List, Mapping, Optional, Union

from wedding_directory.models import STATUS_PENDING, RegistrationRecord

logger = logging.getLogger(__name__)

PUBLIC_UPLOAD_PREFIX = "/uploads"
_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits


class RegistrationError(RuntimeError):
    """Raised when a registration cannot be parsed or its images cannot be stored."""


class RegistrationStore:
    def __init__(self) -> None:
        self._records: Dict[str, RegistrationRecord] = {}
        self._lock = threading.Lock()

    def add(self, record: RegistrationRecord) -> RegistrationRecord:
        with self._lock:
            self._records[record.id] = record
        return record

    def get(self, registration_id: str) -> Optional[RegistrationRecord]:
        with self._lock:
            return self._records.get(registration_id)

    def list(self) -> List[RegistrationRecord]:
        with self._lock:
            return list(self._records.values())


def parse_business_hours(raw: Optional[str]) -> Dict[str, Any]:
    if raw is None or not str(raw).strip():
        return {}
    try:
        hours = json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise RegistrationError("businessHours is not valid JSON") from exc
    if hours is None:
        return {}
    if not isinstance(hours, dict):
        raise RegistrationError("businessHours must be a JSON object")
    return hours


def upload_filename(registration_id: str) -> str:
    suffix = "".join(secrets.choice(_SUFFIX_ALPHABET) for _ in range(6))
    return f"{registration_id}-{int(time.time() * 1000)}-{suffix}.jpg"


class RegistrationIntake:
    """Turns a submitted form into a stored, pending RegistrationRecord.

    Images are written before the record is committed; if any write fails the
    files already written for that submission are removed and nothing is stored.
    """

    def __init__(self, upload_dir: Union[str, Path], store: RegistrationStore) -> None:
        self.upload_dir = Path(upload_dir)
        self.store = store

    def submit(self, form: Mapping[str, Any], images: Iterable[BinaryIO] = ()) -> RegistrationRecord:
        registration_id = str(uuid.uuid4())
        business_hours = parse_business_hours(form.get("businessHours"))

        written: List[Path] = []
        public_paths: List[str] = []
        try:
            self.upload_dir.mkdir(parents=True, exist_ok=True)
            for image in images:
                filename = upload_filename(registration_id)
                target = self.upload_dir / filename
                target.write_bytes(image.read())
                written.append(target)
                public_paths.append(f"{PUBLIC_UPLOAD_PREFIX}/{filename}")
        except (OSError, ValueError) as exc:
            self._discard(written)
            raise RegistrationError("failed to store uploaded images") from exc

        record = RegistrationRecord(
            id=registration_id,
            business_name=form.get("businessName"),
            category=form.get("category"),
            description=form.get("description"),
            address=form.get("address"),
            city=form.get("city"),
            state=form.get("state"),
            zip_code=form.get("zipCode"),
            phone=form.get("phone"),
            email=form.get("email"),
            website=form.get("website") or None,
            images=public_paths,
            business_hours=business_hours,
            status=STATUS_PENDING,
            created_at=datetime.now(timezone.utc).isoformat(),
        )
        self.store.add(record)
        logger.info("Registered %s (%s) with %d images", record.business_name, registration_id, len(public_paths))
        return record

    @staticmethod
    def _discard(paths: Iterable[Path]) -> None:
        for path in paths:
            try:
                path.unlink()
            except FileNotFoundError:
                continue
            except OSError as exc:
                logger.error("Could not remove partial upload %s: %s", path, exc)
