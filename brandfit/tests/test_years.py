from __future__ import annotations

from datetime import date, datetime

import numpy as np
import pytest

from brandfit.playlist.years import calculate_year_boost, calculate_year_score, extract_release_year
from brandfit.profile.cultural import detect_cultural_context
from brandfit.profile.models import YearPreference
from brandfit.profile.years import EraLean, classify_era, demographic_year_preference, resolve_year_preferences

MODERN = YearPreference(min_year=1995, preferred_years=(1995, 2020), recency_weight=0.4)
VINTAGE = YearPreference(min_year=1960, preferred_years=(1960, 1985), recency_weight=-0.4)
MIXED = YearPreference(min_year=1970, preferred_years=(1980, 2005), recency_weight=0.1)


# ── Demographics and vibes ───────────────────────────────────────────────


@pytest.mark.parametrize(
    "demographics, expected",
    [
        (["young_adults", "business_professionals"], 1995),
        (["seniors_mature", "young_adults"], 1960),
        (["seniors_mature", "locals_regulars"], 1955),
        ([], 1980),
        (["unknown_group"], 1980),
    ],
)
def test_demographic_min_year(demographics, expected):
    assert demographic_year_preference(demographics).min_year == expected


def test_demographic_weight_counts_known_groups():
    assert demographic_year_preference(["young_adults", "tourists_visitors"]).weight == pytest.approx(0.2)


@pytest.mark.parametrize(
    "vibe_words, vibe, expected",
    [
        (["youthful"], None, EraLean.modern),
        (["traditional"], None, EraLean.traditional),
        (["youthful", "traditional"], None, EraLean.mixed),
        ([], None, EraLean.mixed),
        ([], "international_modern", EraLean.modern),
        (["hip"], "european_sophisticated", EraLean.mixed),
    ],
)
def test_classify_era(vibe_words, vibe, expected):
    assert classify_era(vibe_words, vibe) is expected


def test_modern_vibe_raises_min_year():
    prefs, era, reasoning = resolve_year_preferences(["seniors_mature"], ["modern"])
    assert era is EraLean.modern
    assert prefs.min_year == 1995
    assert prefs.preferred_years == (1995, 2020)
    assert prefs.recency_weight == pytest.approx(0.4)
    assert reasoning


def test_traditional_vibe_prefers_vintage():
    prefs, era, _ = resolve_year_preferences(["locals_regulars"], ["authentic"])
    assert era is EraLean.traditional
    assert prefs.min_year == 1975
    assert prefs.recency_weight == pytest.approx(-0.4)


def test_heritage_culture_lowers_min_year_only():
    context = detect_cultural_context("Chez Marcel")
    prefs, _, reasoning = resolve_year_preferences(["young_adults"], ["hip"], cultural_context=context)
    assert prefs.min_year == 1980
    assert prefs.preferred_years == (2000, 2024)
    assert any("french heritage" in line for line in reasoning)


# ── Year boost and score ─────────────────────────────────────────────────


def test_year_boost_without_preferences():
    assert calculate_year_boost(1950, None) == 1.0
    no_weight = YearPreference(min_year=1980, preferred_years=(1980, 2005), recency_weight=0.0)
    assert calculate_year_boost(1950, no_weight) == 1.0


@pytest.mark.parametrize("year, expected", [(2021, 1.0), (2016, 0.9), (2012, 0.7), (2006, 0.5), (1999, 0.2)])
def test_year_boost_modern(year, expected):
    assert calculate_year_boost(year, MODERN) == expected


@pytest.mark.parametrize("year, expected", [(1975, 1.0), (1990, 0.9), (2003, 0.7), (2012, 0.4), (2022, 0.1)])
def test_year_boost_vintage(year, expected):
    assert calculate_year_boost(year, VINTAGE) == expected


@pytest.mark.parametrize("year, expected", [(2003, 1.0), (1997, 0.9), (1985, 0.7), (1975, 0.4), (1960, 0.1)])
def test_year_boost_moderate(year, expected):
    assert calculate_year_boost(year, MIXED) == expected


@pytest.mark.parametrize("year, expected", [(2018, 1.0), (2012, 0.85), (1999, 0.7), (1995, 0.7), (1990, 0.1)])
def test_year_score_recent(year, expected):
    assert calculate_year_score(year, MODERN) == expected


@pytest.mark.parametrize("year, expected", [(1965, 1.0), (1980, 0.9), (2010, 0.8), (2024, 0.7)])
def test_year_score_vintage(year, expected):
    assert calculate_year_score(year, VINTAGE, current_year=2026) == expected


# ── Release year extraction ──────────────────────────────────────────────


@pytest.mark.parametrize(
    "value, expected",
    [
        ("23/03/1956", 1956),
        ("03/23/1956", 1956),
        ("1956-03-23", 1956),
        ("1984", 1984),
        (2001, 2001),
        (2001.0, 2001),
        (np.int64(1999), 1999),
        (32874, 1990),
        ("32874", 1990),
        (datetime(1987, 5, 1), 1987),
        (date(1977, 1, 1), 1977),
    ],
)
def test_extract_release_year(value, expected):
    assert extract_release_year(value) == expected


@pytest.mark.parametrize("value", [None, "", "abc", float("nan"), True, 1234, 99999, "1850-01-01"])
def test_extract_release_year_falls_back(value):
    assert extract_release_year(value) == 2015


def test_extract_release_year_custom_default():
    assert extract_release_year("unknown", default=2000) == 2000
