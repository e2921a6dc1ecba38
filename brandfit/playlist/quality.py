from __future__ import annotations

from typing import Sequence

from ..catalog.models import CatalogTrack
from ..profile.blender import round_half_up
from ..profile.models import FeatureVector, YearPreference
from .reference_chart import ChartEntry, chart_relevance
from .years import calculate_year_score

CHART_BOOST_MAX = 0.2
TEMPO_WEIGHT = 0.3
ENERGY_WEIGHT = 0.25
OTHER_FEATURE_WEIGHT = 0.1125
OTHER_FEATURES = ("acousticness", "danceability", "valence", "instrumentalness")


def _track_quality(
    track: CatalogTrack,
    target: FeatureVector,
    year_preferences: YearPreference | None,
    reference_chart: list[ChartEntry] | None,
    current_year: int | None,
) -> float:
    uses_year = year_preferences is not None and year_preferences.recency_weight != 0
    audio_weight = abs(1 - abs(year_preferences.recency_weight)) if uses_year else 1.0

    score = 0.0
    weight_sum = 0.0

    if track.tempo and target.tempo:
        weight = TEMPO_WEIGHT * audio_weight
        score += max(0.0, 1 - abs(track.tempo - target.tempo) / 100) * weight
        weight_sum += weight

    weight = ENERGY_WEIGHT * audio_weight
    score += max(0.0, 1 - abs(track.energy - target.energy)) * weight
    weight_sum += weight

    for feature in OTHER_FEATURES:
        weight = OTHER_FEATURE_WEIGHT * audio_weight
        score += max(0.0, 1 - abs(getattr(track, feature) - getattr(target, feature))) * weight
        weight_sum += weight

    if uses_year:
        year = track.year if track.year is not None else track.release_year
        weight = abs(year_preferences.recency_weight)
        score += calculate_year_score(year, year_preferences, current_year) * weight
        weight_sum += weight

    normalized = score / weight_sum if weight_sum > 0 else 0.0
    relevance = chart_relevance(track.artist, track.title, reference_chart)
    return normalized * (1 + CHART_BOOST_MAX * relevance)


def score_match_quality(
    tracks: Sequence[CatalogTrack],
    target_features: FeatureVector,
    year_preferences: YearPreference | None = None,
    reference_chart: list[ChartEntry] | None = None,
    current_year: int | None = None,
) -> int:
    """Mean per-track fit as a percentage, capped at 100."""
    if not tracks:
        return 0
    total = sum(
        _track_quality(t, target_features, year_preferences, reference_chart, current_year)
        for t in tracks
    )
    return min(100, round_half_up(total / len(tracks) * 100))
