"""
Cultural context detection.

Scores each known culinary culture against the business name, the menu
items extracted upstream and the chosen atmosphere, and keeps the best
scoring culture when it clears ``MIN_CULTURAL_SCORE``.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from .models import Confidence, CulturalContext

logger = logging.getLogger(__name__)

MIN_CULTURAL_SCORE = 0.3
NAME_MATCH_SCORE = 0.3
MENU_MATCH_SCORE = 0.2
EUROPEAN_VIBE = "european_sophisticated"
EUROPEAN_VIBE_MULTIPLIER = 1.5


@dataclass(frozen=True)
class CulturalPattern:
    name_patterns: tuple[str, ...]
    menu_indicators: tuple[str, ...]
    audio_adjustments: dict[str, float]
    cultural_genres: tuple[str, ...]
    boost_multiplier: float
    european: bool = False


CULTURAL_PATTERNS: dict[str, CulturalPattern] = {
    "french": CulturalPattern(
        name_patterns=("café", "brasserie", "bistro", "le ", "la ", "chez", "maison", "auberge"),
        menu_indicators=(
            "croissant", "baguette", "coq au vin", "bouillabaisse", "ratatouille",
            "crème brûlée", "quiche", "escargot", "foie gras", "fromage",
        ),
        audio_adjustments={"acousticness": 0.2, "instrumentalness": 0.15, "tempo": -5, "valence": 0.05},
        cultural_genres=("chanson", "chanson québécoise", "french house", "french indie pop", "french jazz"),
        boost_multiplier=0.15,
        european=True,
    ),
    "spanish": CulturalPattern(
        name_patterns=("valencia", "casa", "el ", "la ", "tapas", "bodega", "mesón", "taberna"),
        menu_indicators=(
            "tapas", "paella", "jamón", "gazpacho", "tortilla", "sangria",
            "chorizo", "patatas bravas", "albondigas",
        ),
        audio_adjustments={"acousticness": 0.12, "valence": 0.1, "instrumentalness": 0.1, "tempo": -3},
        cultural_genres=("flamenco", "flamenco pop", "latin", "latin alternative", "latin afrobeats"),
        boost_multiplier=0.12,
        european=True,
    ),
    "italian": CulturalPattern(
        name_patterns=("trattoria", "osteria", "bella", "romano", "milano", "casa", "da ", "il ", "la "),
        menu_indicators=(
            "pasta", "risotto", "antipasti", "bruschetta", "osso buco", "tiramisu",
            "gelato", "prosciutto", "mozzarella", "chianti",
        ),
        audio_adjustments={"acousticness": 0.1, "valence": 0.08, "instrumentalness": 0.08, "tempo": -2},
        cultural_genres=("italian singer-songwriter", "folk", "folk pop", "acoustic pop"),
        boost_multiplier=0.1,
        european=True,
    ),
    "british": CulturalPattern(
        name_patterns=("the ", "pub", "arms", "crown", "red lion", "george", "royal", "old"),
        menu_indicators=(
            "fish and chips", "shepherd's pie", "bangers", "mash", "sunday roast",
            "ale", "cider", "scones",
        ),
        audio_adjustments={"acousticness": 0.08, "instrumentalness": 0.05, "tempo": 2},
        cultural_genres=("british invasion", "madchester", "indie rock", "britpop", "new wave"),
        boost_multiplier=0.08,
    ),
    "greek": CulturalPattern(
        name_patterns=("taverna", "opa", "mykonos", "santorini", "zeus", "apollo"),
        menu_indicators=("gyros", "souvlaki", "moussaka", "tzatziki", "feta", "ouzo", "baklava"),
        audio_adjustments={"acousticness": 0.1, "valence": 0.1, "instrumentalness": 0.08},
        cultural_genres=("folk", "world", "mediterranean folk"),
        boost_multiplier=0.09,
        european=True,
    ),
}

# Keywords searched in a track's genre text or artist name when boosting
# culturally relevant tracks during catalog search.
CULTURE_TRACK_KEYWORDS: dict[str, tuple[str, ...]] = {
    "french": ("french", "chanson", "cafe", "jazz manouche", "francais"),
    "spanish": ("spanish", "latin", "flamenco", "espanol", "latino"),
    "italian": ("italian", "italiano", "mediterranean"),
    "british": ("british", "uk", "english", "indie"),
    "greek": ("greek", "mediterranean"),
}

# Cultures whose heritage justifies reaching further back in time.
HERITAGE_CULTURES = frozenset({"french", "italian"})


def _confidence_for(score: float) -> Confidence:
    if score >= 0.6:
        return Confidence.high
    if score >= 0.4:
        return Confidence.medium
    return Confidence.low


def detect_cultural_context(
    restaurant_name: str | None,
    menu_items: list[str] | None = None,
    vibe: str | None = None,
) -> CulturalContext | None:
    """Return the strongest cultural match, or ``None`` below the threshold."""
    name = (restaurant_name or "").lower()
    menu_text = " ".join(menu_items or []).lower()

    best_culture: str | None = None
    best_score = 0.0
    best_reasons: list[str] = []

    for culture, pattern in CULTURAL_PATTERNS.items():
        score = 0.0
        reasons: list[str] = []

        name_matches = [p for p in pattern.name_patterns if p in name]
        if name_matches:
            score += NAME_MATCH_SCORE * len(name_matches)
            reasons.append(
                f'Name "{restaurant_name}" contains {culture} patterns: {", ".join(name_matches)}'
            )

        menu_matches = [m for m in pattern.menu_indicators if m in menu_text]
        if menu_matches:
            score += MENU_MATCH_SCORE * len(menu_matches)
            shown = ", ".join(menu_matches[:3])
            suffix = "..." if len(menu_matches) > 3 else ""
            reasons.append(f"Menu contains {culture} items: {shown}{suffix}")

        if vibe == EUROPEAN_VIBE and pattern.european:
            score *= EUROPEAN_VIBE_MULTIPLIER
            reasons.append(f'"European Sophisticated" vibe boosts {culture} cultural match')

        # Strictly greater: on a tie the first culture in table order wins.
        if score > best_score:
            best_culture, best_score, best_reasons = culture, score, reasons

    if best_culture is None or best_score < MIN_CULTURAL_SCORE:
        return None

    pattern = CULTURAL_PATTERNS[best_culture]
    capped = min(best_score, 1.0)
    logger.debug("Detected %s cultural context (score %.2f)", best_culture, best_score)
    return CulturalContext(
        culture=best_culture,
        score=capped,
        audio_adjustments=dict(pattern.audio_adjustments),
        cultural_genres=list(pattern.cultural_genres),
        boost_amount=pattern.boost_multiplier * capped,
        match_reasons=best_reasons,
        confidence=_confidence_for(best_score),
    )
