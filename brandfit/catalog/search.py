"""
Single-pass feature search over the track catalog.

Steps, each logged with before/after counts:

1. genre pre-filter (genre text or feature-inferred genres)
2. genre exclusion
3. enrichment-data requirement
4. goal-adaptive tempo window
5. hospitality match score, dropping tracks below ``MIN_MATCH_SCORE``
6. operational-goal hard filters
7. sort and limit
"""
from __future__ import annotations

import functools
import logging
from dataclasses import dataclass
from typing import Sequence

from ..profile.genres import exclusion_keywords
from ..profile.models import FeatureVector
from .models import CatalogTrack

logger = logging.getLogger(__name__)

MIN_MATCH_SCORE = 0.50
SCORE_TIE_MARGIN = 0.05

# Exclusion id -> keywords matched against a track's genre text.
TRACK_GENRE_EXCLUSIONS: dict[str, tuple[str, ...]] = {
    "heavy_metal": ("metal", "heavy metal", "death metal", "black metal", "metalcore"),
    "country": ("country", "country rock", "folk country", "americana"),
    "rap_hip_hop": ("hip hop", "rap", "hip-hop", "trap", "gangsta rap"),
    "electronic_dance": ("electronic", "edm", "house", "techno", "dance", "dubstep", "trance"),
    "punk_rock": ("punk", "punk rock", "hard rock", "grunge", "hardcore"),
    "classical": ("classical", "orchestra", "symphony", "baroque", "romantic"),
    "reggae": ("reggae", "ska", "dub"),
    "folk": ("folk", "folk rock", "indie folk", "traditional folk"),
}


@dataclass(frozen=True)
class SearchOptions:
    limit: int = 100
    require_enrichment_data: bool = False
    operational_goal: str = "balanced_operation"
    genre_pre_filter: tuple[str, ...] = ()
    excluded_genres: tuple[str, ...] = ()


def smart_tempo_tolerance(target_tempo: float) -> float:
    """Relative tempo window; slower targets get a wider window."""
    if target_tempo < 70:
        return 0.45
    if target_tempo < 85:
        return 0.25
    if target_tempo < 110:
        return 0.20
    return 0.15


def inferred_genres(track: CatalogTrack) -> list[str]:
    genres: list[str] = []
    if track.acousticness > 0.7 and track.tempo < 100:
        genres += ["acoustic", "folk"]
    if track.acousticness > 0.6 and track.instrumentalness > 0.5 and track.tempo < 90:
        genres.append("jazz")
    if track.acousticness > 0.8 and track.instrumentalness > 0.7:
        genres.append("classical")
    if track.energy > 0.7 and track.danceability > 0.6:
        genres += ["pop", "rock"]
    return genres


def matches_any_genre(track: CatalogTrack, targets: Sequence[str]) -> bool:
    track_genres = [g.lower() for g in track.genres] + inferred_genres(track)
    return any(
        t in g or g in t
        for t in (target.lower() for target in targets)
        for g in track_genres
    )


def filter_excluded_genres(tracks: Sequence[CatalogTrack], excluded_genres: Sequence[str]) -> list[CatalogTrack]:
    """Drop every track whose genre text contains an excluded keyword."""
    if not excluded_genres:
        return list(tracks)
    keywords = exclusion_keywords(list(excluded_genres), TRACK_GENRE_EXCLUSIONS)
    kept: list[CatalogTrack] = []
    for track in tracks:
        text = track.genre_text
        hit = next((k for k in keywords if k in text), None)
        if hit is not None:
            logger.debug("Excluded %s by %s: contains %s", track.title, track.artist, hit)
            continue
        kept.append(track)
    return kept


def hospitality_match_score(track: CatalogTrack, target: FeatureVector) -> float:
    """Weighted closeness on acousticness, valence, energy and danceability."""
    score = 0.0

    score += max(0.0, 1 - abs(track.acousticness - target.acousticness)) * 0.35

    valence = 1 - abs(track.valence - target.valence)
    if track.valence > 0.6:
        valence += 0.1
    score += max(0.0, min(1.0, valence)) * 0.30

    score += max(0.0, 1 - abs(track.energy - target.energy)) * 0.20

    dance = 1 - abs(track.danceability - target.danceability)
    if track.danceability > 0.7:
        dance -= 0.2
    score += max(0.0, dance) * 0.10

    if track.speechiness > 0.08:
        score -= track.speechiness * 0.05

    # Weights above sum to 1.0 including the speechiness slot.
    return max(0.0, score)


def passes_goal_filter(track: CatalogTrack, operational_goal: str) -> bool:
    if operational_goal == "high_revenue_per_customer":
        return track.tempo <= 90 and track.danceability <= 0.4 and track.energy <= 0.6
    if operational_goal == "high_table_turnover":
        return 95 <= track.tempo <= 120 and track.energy >= 0.5
    if operational_goal == "premium_experience":
        return track.acousticness >= 0.3 and track.speechiness <= 0.08
    return True


def _ranking(operational_goal: str):
    # Premium venues prefer less-known tracks on near ties.
    popularity_sign = 1 if operational_goal == "premium_experience" else -1

    def compare(a: CatalogTrack, b: CatalogTrack) -> float:
        diff = (b.match_score or 0.0) - (a.match_score or 0.0)
        if abs(diff) > SCORE_TIE_MARGIN:
            return diff
        if a.has_enrichment_data != b.has_enrichment_data:
            return -1 if a.has_enrichment_data else 1
        return popularity_sign * (a.popularity - b.popularity)

    return functools.cmp_to_key(compare)


def search_tracks_by_features(
    tracks: Sequence[CatalogTrack],
    target: FeatureVector,
    options: SearchOptions | None = None,
) -> list[CatalogTrack]:
    """Filter, score and rank *tracks* against *target*. Returns scored copies."""
    options = options or SearchOptions()
    candidates = list(tracks)

    if options.genre_pre_filter:
        before = len(candidates)
        candidates = [t for t in candidates if matches_any_genre(t, options.genre_pre_filter)]
        logger.info("Genre pre-filter %s: %d -> %d", list(options.genre_pre_filter), before, len(candidates))

    if options.excluded_genres:
        before = len(candidates)
        candidates = filter_excluded_genres(candidates, options.excluded_genres)
        logger.info("Genre exclusion %s: %d -> %d", list(options.excluded_genres), before, len(candidates))

    candidates = [
        t for t in candidates
        if t.title and t.artist and (t.has_enrichment_data or not options.require_enrichment_data)
    ]

    if target.tempo and target.tempo > 0:
        tolerance = smart_tempo_tolerance(target.tempo)
        low, high = target.tempo * (1 - tolerance), target.tempo * (1 + tolerance)
        before = len(candidates)
        candidates = [t for t in candidates if low <= t.tempo <= high]
        logger.info(
            "Tempo window %s BPM +/-%d%% (%d-%d): %d -> %d",
            target.tempo, round(tolerance * 100), round(low), round(high), before, len(candidates),
        )

    scored = [
        t.model_copy(update={"match_score": hospitality_match_score(t, target)})
        for t in candidates
    ]
    matched = [t for t in scored if t.match_score >= MIN_MATCH_SCORE]
    goal_filtered = [t for t in matched if passes_goal_filter(t, options.operational_goal)]

    goal_filtered.sort(key=_ranking(options.operational_goal))
    result = goal_filtered[: options.limit]

    logger.info(
        "Feature search: %d total -> %d candidates -> %d matched -> %d goal filtered -> %d returned",
        len(tracks), len(candidates), len(matched), len(goal_filtered), len(result),
    )
    return result
