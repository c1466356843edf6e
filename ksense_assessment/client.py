"""HTTP access to the assessment API.

``fetch_page`` owns the per-page retry policy:

* 429 - back off for an increasing delay, then retry
* 5xx, or a page with no usable records - short fixed delay, then retry
* anything else - give up on the page immediately

All retries count against the attempt budget passed in by the caller.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)

# Shapes the /patients payload has been seen in
SHAPE_ARRAY = "array"  # {"data": [...]}
SHAPE_MAP = "map"  # {"data": {"k": {...}, ...}}
SHAPE_ALTERNATE = "alternate"  # {"patients": [...]}


class MalformedPageError(Exception):
    """The page came back but held no recognizable patient records."""


@dataclass
class Page:
    number: int
    records: List[Dict[str, Any]] = field(default_factory=list)
    has_next: Optional[bool] = None


def has_patient_id(record) -> bool:
    """IDs must be a non-empty string or a number; anything else is dropped."""
    if not isinstance(record, dict):
        return False
    pid = record.get("patient_id")
    if isinstance(pid, bool) or not isinstance(pid, (str, int, float)):
        return False
    return pid != ""


def detect_shape(payload) -> Optional[str]:
    if not isinstance(payload, dict):
        return None
    data = payload.get("data")
    if isinstance(data, list):
        return SHAPE_ARRAY
    if isinstance(data, dict):
        return SHAPE_MAP
    if isinstance(payload.get("patients"), list):
        return SHAPE_ALTERNATE
    return None


def normalize_records(payload) -> List[Any]:
    """Flatten any known payload shape into a plain list of records."""
    shape = detect_shape(payload)
    if shape == SHAPE_ARRAY:
        return list(payload["data"])
    if shape == SHAPE_MAP:
        return [p for p in payload["data"].values() if has_patient_id(p)]
    if shape == SHAPE_ALTERNATE:
        return list(payload["patients"])
    raise MalformedPageError("unrecognized response shape")


def read_has_next(payload) -> Optional[bool]:
    pagination = payload.get("pagination") if isinstance(payload, dict) else None
    if isinstance(pagination, dict) and isinstance(pagination.get("hasNext"), bool):
        return pagination["hasNext"]
    return None


class PatientApiClient:
    def __init__(self, settings, session=None, sleep=time.sleep):
        self.settings = settings
        self.session = session if session is not None else requests.Session()
        self.session.headers.update({"x-api-key": settings.api_key})
        self._sleep = sleep

    def _url(self, path):
        return f"{self.settings.base_url}{path}"

    def get_json(self, path, params=None):
        r = self.session.get(self._url(path), params=params, timeout=self.settings.timeout)
        r.raise_for_status()
        try:
            return r.json()
        except ValueError as e:
            raise MalformedPageError(f"response from {path} is not JSON") from e

    def _retry_delay(self, page, attempt, exc):
        """Seconds to wait before retrying, or None when the error is fatal."""
        if isinstance(exc, MalformedPageError):
            logger.warning("format issue on page %d (%s), retrying", page, exc)
            return self.settings.transient_delay
        if isinstance(exc, requests.HTTPError) and exc.response is not None:
            status = exc.response.status_code
            if status == 429:
                delay = self.settings.rate_limit_delay + self.settings.rate_limit_step * attempt
                logger.warning("rate limited on page %d, waiting %.1fs", page, delay)
                return delay
            if status >= 500:
                logger.warning("server error %d on page %d, retrying", status, page)
                return self.settings.transient_delay
        logger.error("unexpected error on page %d: %s", page, exc)
        return None

    def fetch_page(self, page: int, max_attempts: int) -> Optional[Page]:
        """Fetch one page, retrying per the policy above.

        Returns the page with at least one valid record, or None once the
        page is given up on.
        """
        params = {"page": page, "limit": self.settings.page_limit}
        for attempt in range(max_attempts):
            logger.debug("fetching page %d (attempt %d/%d)", page, attempt + 1, max_attempts)
            try:
                payload = self.get_json("/patients", params=params)
                valid = [p for p in normalize_records(payload) if has_patient_id(p)]
                if not valid:
                    raise MalformedPageError(f"page {page} contained no valid patient records")
            except (requests.RequestException, MalformedPageError) as e:
                delay = self._retry_delay(page, attempt, e)
                if delay is None:
                    return None
                if attempt + 1 < max_attempts:
                    self._sleep(delay)
                continue

            logger.info("extracted %d patients from page %d (%s)",
                        len(valid), page, detect_shape(payload))
            return Page(number=page, records=valid, has_next=read_has_next(payload))

        logger.error("page %d failed after %d attempts", page, max_attempts)
        return None

    def submit_report(self, payload: Dict[str, List[Any]]) -> Optional[Dict[str, Any]]:
        """POST the assessment once. Failures are logged and yield None."""
        try:
            r = self.session.post(
                self._url("/submit-assessment"),
                json=payload,
                headers={"Content-Type": "application/json"},
                timeout=self.settings.timeout,
            )
            r.raise_for_status()
        except requests.RequestException as e:
            detail = e.response.text if e.response is not None else str(e)
            logger.error("submission failed: %s", detail)
            return None
        try:
            return r.json()
        except ValueError:
            return {"status_code": r.status_code, "text": r.text}
