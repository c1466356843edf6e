"""Walk every page of the patient list and assemble one deduplicated set.

The sweep runs in two passes. The first fetches pages 1..N in order with
the baseline attempt budget; pages that still fail are re-fetched in a
recovery pass with the larger budget. A page lost in both passes is
logged and skipped, the run carries on with what it has.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

logger = logging.getLogger(__name__)


def dedupe_records(records, policy: str = "first") -> List[Dict[str, Any]]:
    """Drop repeated patient IDs, keeping the position of the first sighting.

    ``first`` keeps the first record seen for an ID; ``last`` keeps the
    contents of the most recent one.
    """
    if policy not in ("first", "last"):
        raise ValueError(f"unknown dedupe policy: {policy!r}")
    by_id: Dict[Any, Dict[str, Any]] = {}
    for record in records:
        key = record["patient_id"]
        if key in by_id and policy == "first":
            continue
        by_id[key] = record
    return list(by_id.values())


def collect_patients(client, settings) -> List[Dict[str, Any]]:
    collected: List[Dict[str, Any]] = []
    failed_pages: List[int] = []

    for page in range(1, settings.total_pages + 1):
        result = client.fetch_page(page, settings.first_pass_attempts)
        if result is None:
            failed_pages.append(page)
            continue
        collected.extend(result.records)
        if result.has_next is False:
            logger.info("page %d reports no further pages", page)
            break

    if failed_pages:
        logger.info("retrying failed pages: %s", ", ".join(str(p) for p in failed_pages))
        for page in failed_pages:
            result = client.fetch_page(page, settings.recovery_attempts)
            if result is None:
                logger.error("page %d permanently failed after retries", page)
                continue
            collected.extend(result.records)

    patients = dedupe_records(collected, settings.dedupe)
    if len(patients) != len(collected):
        logger.info("dropped %d duplicate patient records", len(collected) - len(patients))
    logger.info("final patient count: %d", len(patients))
    return patients
