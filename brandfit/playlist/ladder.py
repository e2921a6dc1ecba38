"""
Strategy ladder for catalog playlist selection.

The catalog is first narrowed by release year, then searched with
progressively looser genre constraints until a strategy yields enough
tracks:

1. cultural genres (needs ``CULTURAL_MIN_TRACKS``)
2. secondary genres plus a cultural track boost (needs ``SECONDARY_MIN_TRACKS``)
3. pure feature matching (always accepted)

Every strategy re-scores on audio and year, applies popularity sorting with
hit redistribution and re-applies the genre exclusions.
"""
from __future__ import annotations

import logging
from typing import Sequence

from ..catalog.cache import CatalogCache, get_catalog_cache
from ..catalog.models import CatalogTrack
from ..catalog.search import SearchOptions, filter_excluded_genres, search_tracks_by_features
from ..profile.blender import round_half_up
from ..profile.cultural import CULTURE_TRACK_KEYWORDS
from ..profile.models import CulturalContext, FeatureVector, YearPreference
from .models import FinalStats, SearchDiagnostics, SearchResult, Strategy, StrategyStep
from .postprocess import apply_popularity_sorting
from .years import calculate_year_boost

logger = logging.getLogger(__name__)

MAX_TRACKS = 100
DEFAULT_LIMIT = 50
MIN_YEAR_FILTERED_TRACKS = 100
YEAR_RELAX_STEP = 10
CULTURAL_MIN_TRACKS = 15
SECONDARY_MIN_TRACKS = 10
CULTURAL_TRACK_BOOST = 0.15

AUDIO_ONLY = (1.0, 0.0)
AUDIO_AND_YEAR = (0.6, 0.4)
TEMPO_WEIGHT = 0.3
ENERGY_WEIGHT = 0.25
OTHER_FEATURES = ("acousticness", "danceability", "valence", "instrumentalness")


def apply_year_filter(
    tracks: Sequence[CatalogTrack],
    year_preferences: YearPreference | None,
    filtering_results: dict,
) -> list[CatalogTrack]:
    """Keep tracks released in or after ``min_year``, relaxing once if too few remain."""
    if year_preferences is None or not year_preferences.min_year:
        return list(tracks)

    min_year = year_preferences.min_year
    kept = [t for t in tracks if t.release_year >= min_year]
    summary = {
        "original_count": len(tracks),
        "after_filtering": len(kept),
        "removed": len(tracks) - len(kept),
    }
    logger.info("Year filter %d+: %d -> %d", min_year, len(tracks), len(kept))

    if len(kept) < MIN_YEAR_FILTERED_TRACKS:
        relaxed = min_year - YEAR_RELAX_STEP
        kept = [t for t in tracks if t.release_year >= relaxed]
        summary["relaxed_min_year"] = relaxed
        summary["after_relaxed"] = len(kept)
        logger.warning("Year filter left too few tracks, relaxed to %d+: %d tracks", relaxed, len(kept))

    filtering_results["year_filtering"] = summary
    return kept


def track_score(track: CatalogTrack, target: FeatureVector, year_preferences: YearPreference | None) -> float:
    """Second-stage score on audio closeness and release year."""
    uses_year = year_preferences is not None and year_preferences.recency_weight != 0
    audio_weight, year_weight = AUDIO_AND_YEAR if uses_year else AUDIO_ONLY

    score = 0.0
    weight_sum = 0.0

    if track.tempo and target.tempo:
        weight = TEMPO_WEIGHT * audio_weight
        score += max(0.0, 1 - abs(track.tempo - target.tempo) / 100) * weight
        weight_sum += weight

    weight = ENERGY_WEIGHT * audio_weight
    score += max(0.0, 1 - abs(track.energy - target.energy)) * weight
    weight_sum += weight

    feature_weight = 0.45 * audio_weight / len(OTHER_FEATURES)
    for feature in OTHER_FEATURES:
        score += max(0.0, 1 - abs(getattr(track, feature) - getattr(target, feature))) * feature_weight
        weight_sum += feature_weight

    if uses_year:
        score += calculate_year_boost(track.release_year, year_preferences) * year_weight
        weight_sum += year_weight

    return score / weight_sum if weight_sum > 0 else 0.0


def cultural_track_boost(track: CatalogTrack, cultural_context: CulturalContext | None) -> float:
    if cultural_context is None:
        return 0.0
    keywords = CULTURE_TRACK_KEYWORDS.get(cultural_context.culture, ())
    genre_text, artist = track.genre_text, track.artist.lower()
    if any(k in genre_text or k in artist for k in keywords):
        return CULTURAL_TRACK_BOOST * cultural_context.score
    return 0.0


def _rescore(
    tracks: Sequence[CatalogTrack],
    target: FeatureVector,
    year_preferences: YearPreference | None,
    cultural_context: CulturalContext | None = None,
) -> list[CatalogTrack]:
    rescored: list[CatalogTrack] = []
    for track in tracks:
        update = {
            "match_score": track_score(track, target, year_preferences),
            "year": track.release_year,
            "year_boost": calculate_year_boost(track.release_year, year_preferences),
        }
        boost = cultural_track_boost(track, cultural_context)
        if boost:
            update["match_score"] += boost
            update["cultural_match"] = True
        rescored.append(track.model_copy(update=update))
    return rescored


def final_stats(tracks: Sequence[CatalogTrack]) -> FinalStats:
    count = len(tracks)
    avg_score = sum(t.match_score or 0.0 for t in tracks) / count if count else 0.0
    avg_popularity = round_half_up(sum(t.popularity for t in tracks) / count) if count else None
    return FinalStats(
        total_selected=count,
        with_enrichment_data=sum(1 for t in tracks if t.has_enrichment_data),
        cultural_matches=sum(1 for t in tracks if t.cultural_match),
        recent_2020s=sum(1 for t in tracks if (t.year or t.release_year) >= 2020),
        recent_2010s=sum(1 for t in tracks if (t.year or t.release_year) >= 2010),
        average_popularity=avg_popularity,
        average_match_score=round_half_up(avg_score * 100),
    )


def _run_strategy(
    strategy: Strategy,
    catalog: Sequence[CatalogTrack],
    target: FeatureVector,
    options: SearchOptions,
    year_preferences: YearPreference | None,
    cultural_context: CulturalContext | None = None,
) -> list[CatalogTrack]:
    logger.info("Strategy %s: genres=%s", strategy.value, list(options.genre_pre_filter))
    found = search_tracks_by_features(catalog, target, options)
    tracks = _rescore(found, target, year_preferences, cultural_context)
    tracks = apply_popularity_sorting(tracks)
    return filter_excluded_genres(tracks, options.excluded_genres)


def search_catalog(
    target_features: FeatureVector,
    genre_preferences: list[str],
    operational_goal: str,
    cultural_genres: list[str],
    year_preferences: YearPreference | None,
    excluded_genres: list[str],
    cultural_context: CulturalContext | None = None,
    cache: CatalogCache | None = None,
    limit: int = DEFAULT_LIMIT,
) -> SearchResult:
    """
    Select up to ``MAX_TRACKS`` catalog tracks for a target profile.

    Never raises for catalog problems: a missing or unreadable catalog
    gives an empty result with ``diagnostics.error`` set.
    """
    diagnostics = SearchDiagnostics()
    cache = cache or get_catalog_cache()
    excluded = tuple(excluded_genres)

    try:
        snapshot = cache.get()
    except (OSError, ValueError) as exc:
        logger.exception("Catalog could not be loaded")
        diagnostics.error = str(exc)
        return SearchResult(tracks=[], diagnostics=diagnostics)

    diagnostics.catalog_stats = snapshot.stats
    catalog = apply_year_filter(snapshot.tracks, year_preferences, diagnostics.filtering_results)

    ladder: list[tuple[Strategy, SearchOptions, CulturalContext | None, int]] = []
    if cultural_genres:
        ladder.append((
            Strategy.cultural_genres,
            SearchOptions(
                limit=min(limit * 3, 300),
                operational_goal=operational_goal,
                genre_pre_filter=tuple(cultural_genres),
                excluded_genres=excluded,
            ),
            None,
            CULTURAL_MIN_TRACKS,
        ))
    if genre_preferences:
        ladder.append((
            Strategy.secondary_genres,
            SearchOptions(
                limit=min(limit * 3, 300),
                operational_goal=operational_goal,
                genre_pre_filter=tuple(genre_preferences),
                excluded_genres=excluded,
            ),
            cultural_context,
            SECONDARY_MIN_TRACKS,
        ))
    ladder.append((
        Strategy.pure_features,
        SearchOptions(limit=min(limit * 2, 200), operational_goal=operational_goal, excluded_genres=excluded),
        None,
        0,
    ))

    tracks: list[CatalogTrack] = []
    for strategy, options, context, min_tracks in ladder:
        tracks = _run_strategy(strategy, catalog, target_features, options, year_preferences, context)
        accepted = len(tracks) >= min_tracks
        diagnostics.filtering_results[strategy.value] = len(tracks)
        diagnostics.steps.append(StrategyStep(
            strategy=strategy,
            tracks_found=len(tracks),
            accepted=accepted,
            genres_used=list(options.genre_pre_filter),
            excluded_applied=bool(excluded),
        ))
        if accepted:
            diagnostics.success_strategy = strategy
            break
        logger.info("Strategy %s found %d tracks (< %d), falling through", strategy.value, len(tracks), min_tracks)

    selected = tracks[:MAX_TRACKS]
    diagnostics.final_stats = final_stats(selected)
    logger.info(
        "Selected %d tracks via %s",
        len(selected), diagnostics.success_strategy.value if diagnostics.success_strategy else None,
    )
    return SearchResult(tracks=selected, diagnostics=diagnostics)
