from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from ..catalog.models import CatalogStats, CatalogTrack
from ..profile.constants import DEFAULT_GOAL
from ..profile.models import CulturalContext, FeatureVector, YearPreference


class Strategy(str, Enum):
    cultural_genres = "cultural_genres"
    secondary_genres = "secondary_genres"
    pure_features = "pure_features"


class StrategyStep(BaseModel):
    strategy: Strategy
    tracks_found: int
    accepted: bool
    genres_used: list[str] = Field(default_factory=list)
    excluded_applied: bool = False


class FinalStats(BaseModel):
    total_selected: int
    with_enrichment_data: int
    cultural_matches: int
    recent_2020s: int
    recent_2010s: int
    average_popularity: int | None
    average_match_score: int


class SearchDiagnostics(BaseModel):
    approach: str = "cultural_genres_then_secondary_genres_then_features"
    steps: list[StrategyStep] = Field(default_factory=list)
    filtering_results: dict[str, Any] = Field(default_factory=dict)
    catalog_stats: CatalogStats | None = None
    success_strategy: Strategy | None = None
    final_stats: FinalStats | None = None
    error: str | None = None


class SearchResult(BaseModel):
    tracks: list[CatalogTrack]
    diagnostics: SearchDiagnostics


class SearchRequest(BaseModel):
    target_features: FeatureVector
    genre_preferences: list[str] = Field(default_factory=list, description="Secondary genres, best first")
    operational_goal: str = DEFAULT_GOAL
    cultural_genres: list[str] = Field(default_factory=list)
    year_preferences: YearPreference | None = None
    excluded_genres: list[str] = Field(default_factory=list)
    cultural_context: CulturalContext | None = None


class PlaylistResponse(SearchResult):
    match_quality: int


class MatchQualityRequest(BaseModel):
    tracks: list[CatalogTrack]
    target_features: FeatureVector
    year_preferences: YearPreference | None = None


class MatchQualityResponse(BaseModel):
    match_quality: int = Field(..., ge=0)
    track_count: int
