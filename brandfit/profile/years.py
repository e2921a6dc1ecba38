from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .blender import round_half_up
from .cultural import HERITAGE_CULTURES
from .models import CulturalContext, YearPreference

DEFAULT_MIN_YEAR = 1980
LATEST_PREFERRED_YEAR = 2024
PREFERRED_SPAN = 25
MODERN_MIN_YEAR = 1995
HERITAGE_MAX_MIN_YEAR = 1980
SENIORS_CAP = 1960
SENIORS_LOCALS_CAP = 1955

DEMOGRAPHIC_YEARS: dict[str, int] = {
    "young_adults": 2000,
    "business_professionals": 1990,
    "families_groups": 1985,
    "locals_regulars": 1975,
    "seniors_mature": 1950,
    "tourists_visitors": 1985,
    "food_enthusiasts": 1975,
    "quick_convenience": 1995,
}


class EraLean(str, Enum):
    modern = "modern"
    traditional = "traditional"
    mixed = "mixed"


RECENCY_WEIGHTS: dict[EraLean, float] = {
    EraLean.modern: 0.4,
    EraLean.traditional: -0.4,
    EraLean.mixed: 0.1,
}

MODERN_VIBES = frozenset({"youthful", "modern", "hip", "energetic", "upbeat", "international_modern"})
TRADITIONAL_VIBES = frozenset({
    "traditional",
    "authentic",
    "luxurious",
    "classic_timeless",
    "european_sophisticated",
    "local_authentic",
})


@dataclass(frozen=True)
class DemographicYears:
    min_year: int
    weight: float


def demographic_year_preference(demographics: list[str]) -> DemographicYears:
    years = [DEMOGRAPHIC_YEARS[d] for d in demographics if d in DEMOGRAPHIC_YEARS]
    if not years:
        return DemographicYears(min_year=DEFAULT_MIN_YEAR, weight=0.0)

    avg_year = round_half_up(sum(years) / len(years))
    if "seniors_mature" in demographics:
        avg_year = min(avg_year, SENIORS_CAP)
        if "locals_regulars" in demographics:
            avg_year = min(avg_year, SENIORS_LOCALS_CAP)
    return DemographicYears(min_year=avg_year, weight=len(years) * 0.1)


def classify_era(vibe_words: list[str], vibe: str | None = None) -> EraLean:
    selected = set(vibe_words)
    if vibe:
        selected.add(vibe)
    modern = bool(selected & MODERN_VIBES)
    traditional = bool(selected & TRADITIONAL_VIBES)
    if modern and not traditional:
        return EraLean.modern
    if traditional and not modern:
        return EraLean.traditional
    return EraLean.mixed


def resolve_year_preferences(
    demographics: list[str],
    vibe_words: list[str],
    vibe: str | None = None,
    cultural_context: CulturalContext | None = None,
) -> tuple[YearPreference, EraLean, list[str]]:
    """Combine demographics and vibes into a minimum year and a recency weight."""
    reasoning: list[str] = []
    demographic = demographic_year_preference(demographics)
    era = classify_era(vibe_words, vibe)
    recency_weight = RECENCY_WEIGHTS[era]
    min_year = demographic.min_year

    if era is EraLean.modern:
        min_year = max(min_year, MODERN_MIN_YEAR)
        reasoning.append(f"Modern/youthful vibe + demographics -> {min_year}+ (recency: +{recency_weight})")
    elif era is EraLean.traditional:
        reasoning.append(f"Traditional vibe + demographics -> {min_year}+ (recency: {recency_weight})")
    else:
        reasoning.append(f"Balanced approach based on demographics -> {min_year}+")

    preferred_years = (min_year, min(min_year + PREFERRED_SPAN, LATEST_PREFERRED_YEAR))

    if cultural_context is not None and cultural_context.culture in HERITAGE_CULTURES:
        min_year = min(min_year, HERITAGE_MAX_MIN_YEAR)
        reasoning.append(f"Cultural adjustment: {cultural_context.culture} heritage allows older music")

    preference = YearPreference(
        min_year=min_year,
        preferred_years=preferred_years,
        recency_weight=recency_weight,
        description=f"Demographics + vibes ({min_year}+)",
        demographic_influence=", ".join(demographics) if demographics else None,
    )
    return preference, era, reasoning
