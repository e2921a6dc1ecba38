"""
Genre recommendation.

Builds a weighted genre map from the business type and layers vibe,
time-slot, cultural and curated "hint" nudges on top. A second pass for the
spend-maximizing goal favours background genres over attention-grabbing
ones. Excluded genres are removed last, then the weights are normalized.
"""
from __future__ import annotations

import logging
from collections import defaultdict

from .models import CulturalContext, GenreWeight

logger = logging.getLogger(__name__)

MAX_GENRES = 8
CULTURAL_GENRE_FACTOR = 0.4
GENRE_HINT_BOOST = 0.3
SPEND_GOAL = "high_revenue_per_customer"

BUSINESS_GENRES: dict[str, dict[str, float]] = {
    "fine_dining": {"jazz": 0.4, "classical": 0.3, "acoustic": 0.2, "ambient": 0.1},
    "casual_dining": {"pop": 0.3, "rock": 0.3, "acoustic": 0.2, "folk": 0.2},
    "brunch_breakfast": {"acoustic": 0.4, "folk": 0.3, "indie": 0.2, "jazz": 0.1},
    "coffee_shop": {"acoustic": 0.4, "folk": 0.3, "indie": 0.2, "jazz": 0.1},
    "bar_lounge": {"electronic": 0.3, "pop": 0.3, "rock": 0.2, "indie": 0.2},
    "retail_food": {"pop": 0.4, "indie": 0.3, "electronic": 0.2, "rock": 0.1},
    "quick_service": {"pop": 0.4, "electronic": 0.3, "rock": 0.2, "indie": 0.1},
}
DEFAULT_BUSINESS_GENRES: dict[str, float] = {"pop": 0.4, "rock": 0.3, "acoustic": 0.3}

VIBE_WORD_GENRES: dict[str, dict[str, float]] = {
    "energetic": {"pop": 0.3, "rock": 0.2, "electronic": 0.2},
    "calm": {"acoustic": 0.3, "ambient": 0.2, "jazz": 0.1},
    "happy": {"pop": 0.3, "folk": 0.2, "reggae": 0.1},
    "traditional": {"folk": 0.3, "country": 0.2, "classical": 0.1},
    "modern": {"indie": 0.3, "electronic": 0.2, "pop": 0.1},
    "rough": {"rock": 0.3, "alternative": 0.2, "grunge": 0.1},
    "romantic": {"acoustic": 0.2, "jazz": 0.2, "soul": 0.1},
    "upbeat": {"pop": 0.2, "rock": 0.2, "electronic": 0.1},
    "luxurious": {"jazz": 0.2, "classical": 0.1, "ambient": 0.1},
    "hip": {"indie": 0.2, "electronic": 0.1, "alternative": 0.1},
    "youthful": {"pop": 0.2, "indie": 0.1, "electronic": 0.1},
}

TIME_SLOT_GENRES: dict[str, dict[str, float]] = {
    "avond_levendig": {"pop": 0.1, "rock": 0.1},
    "avond_intiem": {"jazz": 0.1, "acoustic": 0.1},
    "morning_energetic": {"pop": 0.1, "electronic": 0.1},
    "middag_social": {"pop": 0.05, "indie": 0.05},
}

# (vibe word, business type) -> niche genres for extreme combinations.
# A business type of None applies to every business.
GENRE_HINTS: dict[tuple[str, str | None], tuple[str, ...]] = {
    ("rough", "fine_dining"): ("alternative", "indie rock", "post-rock", "art rock"),
    ("rough", "casual_dining"): ("rock", "alternative rock", "garage rock", "grunge"),
    ("rough", "bar_lounge"): ("industrial", "dark ambient", "post-punk"),
    ("luxurious", "fine_dining"): ("classical", "chamber music", "solo piano", "ambient"),
    ("luxurious", "casual_dining"): ("smooth jazz", "neo-soul", "acoustic"),
    ("luxurious", "bar_lounge"): ("lounge", "chillout", "downtempo", "nu jazz"),
    ("hip", "fine_dining"): ("nu jazz", "trip hop", "electronic", "experimental"),
    ("hip", "coffee_shop"): ("indie pop", "indie electronic", "chillwave"),
    ("hip", "bar_lounge"): ("deep house", "minimal techno", "electro-jazz"),
    ("energetic", "coffee_shop"): ("indie pop", "electro pop", "dance-punk"),
    ("energetic", "bar_lounge"): ("house", "disco", "funk"),
    ("youthful", None): ("indie pop", "electro pop", "bedroom pop", "indie dance"),
}
_HINT_VIBE_ORDER = ("rough", "luxurious", "hip", "energetic", "youthful")

SPEND_GOAL_BOOSTS: dict[str, float] = {
    "acoustic": 0.4,
    "instrumental": 0.3,
    "ambient": 0.2,
    "folk": 0.2,
    "classical": 0.2,
    "jazz": 0.15,
    "easy listening": 0.15,
}
# genre -> (penalty, floor)
SPEND_GOAL_PENALTIES: dict[str, tuple[float, float]] = {
    "pop": (0.5, 0.02),
    "rock": (0.5, 0.02),
    "alternative rock": (0.4, 0.02),
    "garage rock": (0.4, 0.01),
}

GENRE_EXCLUSIONS: dict[str, tuple[str, ...]] = {
    "heavy_metal": ("metal", "heavy metal", "death metal", "black metal"),
    "rap_hip_hop": ("hip hop", "rap", "trap"),
    "electronic_dance": ("electronic", "edm", "house", "techno", "dance"),
    "country": ("country", "country rock", "folk country"),
    "classical": ("classical", "opera", "baroque"),
    "punk_rock": ("punk", "punk rock", "hard rock", "alternative rock"),
    "reggae": ("reggae", "ska"),
    "folk": ("folk", "folk rock", "indie folk"),
}

CONTEMPORARY_GENRES: tuple[str, ...] = ("pop", "electronic", "indie pop", "alternative", "dance")


def exclusion_keywords(excluded_ids: list[str], table: dict[str, tuple[str, ...]] = GENRE_EXCLUSIONS) -> list[str]:
    """Expand exclusion ids to lowercase keywords. Unknown ids map to themselves."""
    keywords: list[str] = []
    for excluded_id in excluded_ids:
        mapped = table.get(excluded_id) or (excluded_id.replace("_", " ", 1),)
        keywords.extend(k.lower() for k in mapped)
    return keywords


def is_excluded_genre(genre: str, keywords: list[str]) -> bool:
    # Substring match in both directions. This over-matches on purpose
    # ("folk" also removes "indie-folk-rock").
    name = genre.lower()
    return any(k in name or name in k for k in keywords)


def genre_hints(vibe_words: list[str], business_type: str | None) -> list[str]:
    hints: list[str] = []
    for vibe in _HINT_VIBE_ORDER:
        if vibe not in vibe_words:
            continue
        hints.extend(GENRE_HINTS.get((vibe, business_type), ()))
        hints.extend(GENRE_HINTS.get((vibe, None), ()))
    if hints:
        logger.debug("Genre hints for %s + %s: %s", vibe_words, business_type, hints)
    return hints


def recommend_genres(
    business_type: str | None,
    vibe_words: list[str],
    time_atmosphere: dict[str, str],
    cultural_context: CulturalContext | None,
    operational_goal: str,
    excluded_genres: list[str],
) -> list[GenreWeight]:
    weights: defaultdict[str, float] = defaultdict(float)
    weights.update(BUSINESS_GENRES.get(business_type or "", DEFAULT_BUSINESS_GENRES))

    for vibe in vibe_words:
        for genre, nudge in VIBE_WORD_GENRES.get(vibe, {}).items():
            weights[genre] += nudge

    for choice in time_atmosphere.values():
        for genre, nudge in TIME_SLOT_GENRES.get(choice, {}).items():
            weights[genre] += nudge

    if cultural_context is not None:
        cultural_weight = CULTURAL_GENRE_FACTOR * cultural_context.score
        for genre in cultural_context.cultural_genres:
            weights[genre] += cultural_weight

    for hint in genre_hints(vibe_words, business_type):
        weights[hint] += GENRE_HINT_BOOST

    if operational_goal == SPEND_GOAL:
        for genre, boost in SPEND_GOAL_BOOSTS.items():
            weights[genre] += boost
        for genre, (penalty, floor) in SPEND_GOAL_PENALTIES.items():
            weights[genre] = max(floor, weights[genre] - penalty)

    if excluded_genres:
        keywords = exclusion_keywords(excluded_genres)
        for genre in [g for g in weights if is_excluded_genre(g, keywords)]:
            logger.debug("Removing %s from genre recommendations (excluded)", genre)
            del weights[genre]

    total = sum(weights.values()) or 1.0
    ranked = sorted(weights.items(), key=lambda item: item[1], reverse=True)
    return [
        GenreWeight(genre=genre, weight=round(weight / total, 2))
        for genre, weight in ranked[:MAX_GENRES]
    ]


def with_contemporary_genres(genres: list[GenreWeight], excluded_genres: list[str]) -> list[GenreWeight]:
    """Append contemporary genres (weight 0) that are neither present nor excluded."""
    keywords = exclusion_keywords(excluded_genres)
    present = {g.genre for g in genres}
    extra = [
        GenreWeight(genre=genre, weight=0.0)
        for genre in CONTEMPORARY_GENRES
        if genre not in present and not is_excluded_genre(genre, keywords)
    ]
    return genres + extra
