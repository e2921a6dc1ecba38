from __future__ import annotations

import math
import numbers
from datetime import date, datetime, timedelta
from typing import Any

from ..catalog.models import DEFAULT_RELEASE_YEAR
from ..profile.models import YearPreference

MIN_RELEASE_YEAR = 1900
MAX_RELEASE_YEAR = 2100
# Excel stores dates as days since 1899-12-30.
EXCEL_EPOCH = date(1899, 12, 30)
EXCEL_SERIAL_RANGE = (25000, 50000)


def _valid_year(year: int) -> bool:
    return MIN_RELEASE_YEAR <= year <= MAX_RELEASE_YEAR


def _year_from_number(value: float) -> int | None:
    if not math.isfinite(value):
        return None
    if _valid_year(int(value)) and value == int(value):
        return int(value)
    low, high = EXCEL_SERIAL_RANGE
    if low < value < high:
        return (EXCEL_EPOCH + timedelta(days=float(value))).year
    return None


def _year_from_text(text: str) -> int | None:
    text = text.strip()
    if not text:
        return None
    if "/" in text:
        # DD/MM/YYYY and MM/DD/YYYY both end with the year.
        parts = text.split("/")
        if len(parts) == 3 and parts[2].strip().isdigit():
            year = int(parts[2].strip())
            if _valid_year(year):
                return year
    if "-" in text:
        head = text.split("-")[0].strip()
        if head.isdigit() and _valid_year(int(head)):
            return int(head)
    try:
        return _year_from_number(float(text))
    except ValueError:
        return None


def extract_release_year(value: Any, default: int = DEFAULT_RELEASE_YEAR) -> int:
    """Best-effort release year from a workbook cell. Falls back to *default*."""
    if value is None:
        return default
    if isinstance(value, (datetime, date)):
        return value.year
    if isinstance(value, bool):
        return default
    if isinstance(value, numbers.Real):
        year = _year_from_number(float(value))
    else:
        year = _year_from_text(str(value))
    return year if year is not None else default


def calculate_year_boost(track_year: int, year_preferences: YearPreference | None) -> float:
    """Year component of the second-stage track score."""
    if year_preferences is None or year_preferences.recency_weight == 0:
        return 1.0

    start, end = year_preferences.preferred_years
    weight = year_preferences.recency_weight

    if weight >= 0.4:
        if track_year >= 2020:
            return 1.0
        if track_year >= 2015:
            return 0.9
        if track_year >= 2010:
            return 0.7
        if track_year >= 2005:
            return 0.5
        return 0.2

    if weight <= -0.3:
        if track_year <= 1980:
            return 1.0
        if track_year <= 1995:
            return 0.9
        if track_year <= 2005:
            return 0.7
        if track_year <= 2015:
            return 0.4
        return 0.1

    if track_year >= end - 4:
        return 1.0
    if track_year >= end - 9:
        return 0.9
    if track_year >= start:
        return 0.7
    if track_year >= year_preferences.min_year:
        return 0.4
    return 0.1


def calculate_year_score(
    track_year: int,
    year_preferences: YearPreference | None,
    current_year: int | None = None,
) -> float:
    """Year component of the match-quality score."""
    if year_preferences is None or year_preferences.recency_weight == 0:
        return 1.0

    start, end = year_preferences.preferred_years

    if year_preferences.recency_weight > 0:
        if track_year >= end - 4:
            return 1.0
        if track_year >= end - 9:
            return 0.85
        if track_year >= start:
            return 0.7
        if track_year >= year_preferences.min_year:
            return 0.4
        return 0.1

    if current_year is None:
        current_year = date.today().year
    if track_year <= start + 10:
        return 1.0
    if track_year <= end:
        return 0.9
    if track_year <= current_year - 5:
        return 0.8
    return 0.7
