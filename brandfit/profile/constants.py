"""
Static lookup tables for the music-profile engine.

Everything here is defined once at import time and treated as read-only:
operational goal baselines, per-signal feature deltas, layer weights and
the goal/vibe conflict table.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

DEFAULT_GOAL = "balanced_operation"


@dataclass(frozen=True)
class OperationalGoalProfile:
    priority: str
    target_features: Mapping[str, float] = field(default_factory=dict)
    reasoning: str = ""


OPERATIONAL_GOALS: dict[str, OperationalGoalProfile] = {
    "high_revenue_per_customer": OperationalGoalProfile(
        priority="maximize_spending",
        target_features={
            "tempo": 70, "energy": 0.3, "valence": 0.6, "acousticness": 0.7,
            "danceability": 0.2, "instrumentalness": 0.7, "speechiness": 0.05,
        },
        reasoning="Milliman (1982): slow tempo increases dwell time by 38%, leading to higher per-customer spending",
    ),
    "high_table_turnover": OperationalGoalProfile(
        priority="maximize_throughput",
        target_features={
            "tempo": 115, "energy": 0.7, "valence": 0.8, "acousticness": 0.4,
            "danceability": 0.5, "instrumentalness": 0.4, "speechiness": 0.05,
        },
        reasoning="Fast tempo stimulates quick decision-making and movement, increasing table turnover",
    ),
    "balanced_operation": OperationalGoalProfile(
        priority="optimize_both",
        target_features={
            "tempo": 88, "energy": 0.5, "valence": 0.65, "acousticness": 0.6,
            "danceability": 0.3, "instrumentalness": 0.5, "speechiness": 0.05,
        },
        reasoning="Balanced tempo for moderate dwell time with reasonable turnover",
    ),
    "premium_experience": OperationalGoalProfile(
        priority="maximize_sophistication",
        target_features={
            "tempo": 65, "energy": 0.25, "valence": 0.5, "acousticness": 0.85,
            "danceability": 0.15, "instrumentalness": 0.8, "speechiness": 0.03,
        },
        reasoning="Very slow tempo for contemplative dining, high acousticness for sophistication",
    ),
}

# ---------------------------------------------------------------------------
# Layer weights
# ---------------------------------------------------------------------------

BASE_GOAL_WEIGHT = 0.40
CULTURAL_WEIGHT = 0.30
BUSINESS_TYPE_WEIGHT = 0.15
VIBE_ATMOSPHERE_WEIGHT = 0.12
TIME_OF_DAY_WEIGHT = 0.08
VIBE_WORDS_WEIGHT = 0.05
CONFLICT_VIBE_MULTIPLIER = 3.0

# ---------------------------------------------------------------------------
# Feature delta tables
# ---------------------------------------------------------------------------

BUSINESS_TYPE_ADJUSTMENTS: dict[str, dict[str, float]] = {
    "fine_dining": {"acousticness": 0.2, "instrumentalness": 0.15, "energy": -0.15},
    "brunch_breakfast": {"acousticness": 0.12, "valence": 0.08, "energy": 0.05},
    "coffee_shop": {"acousticness": 0.15, "instrumentalness": 0.1},
    "bar_lounge": {"energy": 0.1, "danceability": 0.08, "valence": 0.05},
    "casual_dining": {"valence": 0.05, "energy": 0.03},
    "quick_service": {"tempo": 15, "energy": 0.1},
    "retail_food": {},
}

BUSINESS_TYPE_NOTES: dict[str, str] = {
    "fine_dining": "Fine Dining: enhanced sophistication",
    "brunch_breakfast": "Brunch/Breakfast: welcoming morning atmosphere",
    "coffee_shop": "Coffee Shop: moderate acoustic enhancement",
    "bar_lounge": "Bar/Lounge: social energy boost",
    "casual_dining": "Casual Dining: comfortable energy",
    "quick_service": "Quick Service: tempo and energy boost",
    "retail_food": "Retail with Food: neutral adjustments",
}

VIBE_ATMOSPHERE_ADJUSTMENTS: dict[str, dict[str, float]] = {
    "european_sophisticated": {"acousticness": 0.2, "instrumentalness": 0.15, "tempo": -5},
    "local_authentic": {"acousticness": 0.1, "valence": 0.05},
    "international_modern": {"energy": 0.05, "danceability": 0.05},
    "classic_timeless": {"acousticness": 0.15, "instrumentalness": 0.1, "tempo": -3},
}

VIBE_ATMOSPHERE_NOTES: dict[str, str] = {
    "european_sophisticated": "European Sophisticated: refined elegance",
    "local_authentic": "Local Authentic: warm authenticity",
    "international_modern": "International Modern: contemporary energy",
    "classic_timeless": "Classic Timeless: sophisticated heritage",
}

TIME_OF_DAY_ADJUSTMENTS: dict[str, dict[str, float]] = {
    "morning_energetic": {"energy": 0.15, "tempo": 8, "valence": 0.1},
    "morning_rustig": {"energy": -0.1, "tempo": -5, "acousticness": 0.1},
    "morning_productief": {"instrumentalness": 0.15, "speechiness": -0.02},
    "middag_social": {"energy": 0.1, "valence": 0.1, "danceability": 0.1},
    "middag_professioneel": {"instrumentalness": 0.1, "speechiness": -0.02},
    "middag_ontspannen": {"energy": -0.05, "acousticness": 0.05},
    "avond_intiem": {"energy": -0.15, "tempo": -8, "instrumentalness": 0.1},
    "avond_levendig": {"energy": 0.1, "valence": 0.1},
    "avond_sophisticated": {"acousticness": 0.1, "instrumentalness": 0.1},
}

# Vibe words carry a small layer weight, so their deltas are large.
VIBE_WORD_ADJUSTMENTS: dict[str, dict[str, float]] = {
    "luxurious": {"acousticness": 0.6, "instrumentalness": 0.4, "energy": -0.4, "danceability": -0.3},
    "hip": {"energy": 0.3, "valence": 0.3, "danceability": 0.4, "acousticness": -0.2},
    "modern": {"energy": 0.2, "acousticness": -0.2, "danceability": 0.2},
    "traditional": {"acousticness": 0.4, "instrumentalness": 0.3, "tempo": -10},
    "rough": {"energy": 0.4, "acousticness": -0.4, "danceability": 0.3, "instrumentalness": -0.2},
    "happy": {"valence": 0.6, "energy": 0.3, "tempo": 12},
    "serious": {"energy": -0.3, "instrumentalness": 0.3, "valence": -0.2},
    "calm": {"energy": -0.5, "tempo": -15, "acousticness": 0.3},
    "upbeat": {"energy": 0.5, "tempo": 20, "valence": 0.3, "danceability": 0.2},
    "romantic": {"energy": -0.3, "tempo": -10, "instrumentalness": 0.2, "valence": 0.1},
    "authentic": {"acousticness": 0.3, "instrumentalness": 0.2},
    "energetic": {"energy": 0.6, "tempo": 25, "valence": 0.2, "danceability": 0.2},
    "youthful": {"energy": 0.3, "valence": 0.3, "tempo": 15, "danceability": 0.2},
}

GOAL_VIBE_CONFLICTS: dict[str, frozenset[str]] = {
    "high_table_turnover": frozenset({"calm", "romantic", "luxurious", "serious"}),
    "high_revenue_per_customer": frozenset({"energetic", "upbeat", "youthful", "hip"}),
    "premium_experience": frozenset({"rough", "happy"}),
}

# ---------------------------------------------------------------------------
# Answer vocabulary (served by /metadata)
# ---------------------------------------------------------------------------

DEMOGRAPHICS: tuple[str, ...] = (
    "locals_regulars",
    "families_groups",
    "business_professionals",
    "young_adults",
    "tourists_visitors",
    "seniors_mature",
    "food_enthusiasts",
    "quick_convenience",
)

TIME_SLOTS: dict[str, tuple[str, ...]] = {
    "morning": ("morning_energetic", "morning_rustig", "morning_productief"),
    "middag": ("middag_social", "middag_professioneel", "middag_ontspannen"),
    "avond": ("avond_intiem", "avond_levendig", "avond_sophisticated"),
}

EXCLUDABLE_GENRES: tuple[str, ...] = (
    "heavy_metal",
    "rap_hip_hop",
    "electronic_dance",
    "country",
    "classical",
    "punk_rock",
    "reggae",
    "folk",
)
