"""Tolerant parsers for raw vital-sign fields.

Every parser returns a number or ``None`` when the value can't be used.
``None`` is the only "invalid" marker, so a legitimate ``0`` is never
mistaken for missing data.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, Optional, Tuple

_DIGITS = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class ParsedVitals:
    systolic: Optional[int]
    diastolic: Optional[int]
    temperature: Optional[float]
    age: Optional[int]

    @property
    def invalid_fields(self):
        return [name for name in ("systolic", "diastolic", "temperature", "age")
                if getattr(self, name) is None]


def _side(part):
    if _DIGITS.fullmatch(part):
        return int(part)
    return None


def parse_bp(bp_str: Any) -> Tuple[Optional[int], Optional[int]]:
    """Split ``"SYS/DIA"`` into two ints; each side is validated on its own."""
    if not isinstance(bp_str, str) or bp_str.count("/") != 1:
        return None, None
    s, d = bp_str.split("/")
    return _side(s), _side(d)


def _to_float(raw):
    # bools are ints in Python but never a reading
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, str):
        raw = raw.strip()
    elif not isinstance(raw, (int, float)):
        return None
    try:
        value = float(raw)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(value):
        return None
    return value


def parse_temp(temp: Any) -> Optional[float]:
    return _to_float(temp)


def parse_age(age: Any) -> Optional[int]:
    """Ages are truncated to whole years, so ``"45.9"`` parses as 45."""
    value = _to_float(age)
    if value is None:
        return None
    return int(value)


def parse_vitals(patient: dict) -> ParsedVitals:
    systolic, diastolic = parse_bp(patient.get("blood_pressure"))
    return ParsedVitals(
        systolic=systolic,
        diastolic=diastolic,
        temperature=parse_temp(patient.get("temperature")),
        age=parse_age(patient.get("age")),
    )
