from __future__ import annotations

import logging
import time

from fastapi import Depends, FastAPI, HTTPException

from .analytics.aggregator import compute_analytics
from .analytics.store import get_events, record_profile_event, record_search_event
from .catalog.cache import CatalogCache, get_catalog_cache
from .catalog.models import CatalogStats
from .llm.menu_client import MenuAnalysis, MenuAnalysisRequest, analyze_menu
from .playlist.ladder import search_catalog
from .playlist.models import MatchQualityRequest, MatchQualityResponse, PlaylistResponse, SearchRequest
from .playlist.quality import score_match_quality
from .playlist.reference_chart import ChartEntry, get_reference_chart
from .profile.constants import (
    BUSINESS_TYPE_ADJUSTMENTS,
    DEMOGRAPHICS,
    EXCLUDABLE_GENRES,
    OPERATIONAL_GOALS,
    TIME_SLOTS,
    VIBE_ATMOSPHERE_ADJUSTMENTS,
    VIBE_WORD_ADJUSTMENTS,
)
from .profile.engine import compute_music_profile
from .profile.impact import estimate_roi, implementation_plan
from .profile.layers import detect_conflict
from .profile.models import ProfileRequest, ProfileResponse

logger = logging.getLogger(__name__)

app = FastAPI(title="Brand-Fit Music API", version="1.0.0")


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/metadata")
def metadata() -> dict:
    return {
        "operational_goals": sorted(OPERATIONAL_GOALS),
        "business_types": sorted(BUSINESS_TYPE_ADJUSTMENTS),
        "vibes": sorted(VIBE_ATMOSPHERE_ADJUSTMENTS),
        "vibe_words": sorted(VIBE_WORD_ADJUSTMENTS),
        "demographics": list(DEMOGRAPHICS),
        "time_slots": {slot: list(choices) for slot, choices in TIME_SLOTS.items()},
        "excludable_genres": list(EXCLUDABLE_GENRES),
    }


# ── Profile endpoints ────────────────────────────────────────────────────


@app.post("/profile", response_model=ProfileResponse)
def profile(body: ProfileRequest) -> ProfileResponse:
    music_profile = compute_music_profile(body.answers, body.external_signals)

    record_profile_event(
        operational_goal=music_profile.operational_goal,
        requested_goal=music_profile.requested_operational_goal,
        goal_conflict=bool(detect_conflict(body.answers.operational_goal, body.answers.vibe_words)),
        culture=music_profile.cultural_context.culture if music_profile.cultural_context else None,
        business_type=body.answers.business_type,
    )

    return ProfileResponse(
        profile=music_profile,
        roi=estimate_roi(music_profile, body.answers.vibe_words),
        implementation_plan=implementation_plan(music_profile),
    )


@app.post("/menu/analyze", response_model=MenuAnalysis)
def menu_analyze(body: MenuAnalysisRequest) -> MenuAnalysis:
    return analyze_menu(body)


# ── Playlist endpoints ───────────────────────────────────────────────────


@app.post("/playlist/search", response_model=PlaylistResponse)
def playlist_search(
    body: SearchRequest,
    cache: CatalogCache = Depends(get_catalog_cache),
    chart: list[ChartEntry] = Depends(get_reference_chart),
) -> PlaylistResponse:
    start_time = time.time()
    result = search_catalog(
        body.target_features,
        body.genre_preferences,
        body.operational_goal,
        body.cultural_genres,
        body.year_preferences,
        body.excluded_genres,
        cultural_context=body.cultural_context,
        cache=cache,
    )
    quality = score_match_quality(result.tracks, body.target_features, body.year_preferences, chart)
    elapsed_ms = round((time.time() - start_time) * 1000, 1)

    diagnostics = result.diagnostics
    record_search_event(
        operational_goal=body.operational_goal,
        strategy=diagnostics.success_strategy.value if diagnostics.success_strategy else None,
        track_count=len(result.tracks),
        match_quality=quality,
        response_time_ms=elapsed_ms,
        error=diagnostics.error,
    )

    return PlaylistResponse(tracks=result.tracks, diagnostics=diagnostics, match_quality=quality)


@app.post("/match-quality", response_model=MatchQualityResponse)
def match_quality(
    body: MatchQualityRequest,
    chart: list[ChartEntry] = Depends(get_reference_chart),
) -> MatchQualityResponse:
    quality = score_match_quality(body.tracks, body.target_features, body.year_preferences, chart)
    return MatchQualityResponse(match_quality=quality, track_count=len(body.tracks))


# ── Admin endpoints ──────────────────────────────────────────────────────


@app.get("/catalog/stats", response_model=CatalogStats)
def catalog_stats(cache: CatalogCache = Depends(get_catalog_cache)) -> CatalogStats:
    try:
        return cache.get().stats
    except (OSError, ValueError) as exc:
        logger.warning("Catalog stats unavailable: %s", exc)
        raise HTTPException(status_code=503, detail="Catalog unavailable")


@app.get("/cache/stats")
def cache_stats(cache: CatalogCache = Depends(get_catalog_cache)) -> dict:
    return cache.stats()


@app.get("/analytics")
def analytics() -> dict:
    return compute_analytics(get_events())
