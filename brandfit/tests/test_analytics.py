from __future__ import annotations

from fastapi.testclient import TestClient

from brandfit.analytics.aggregator import compute_analytics
from brandfit.analytics.store import (
    clear_events,
    get_events,
    record_event,
    record_profile_event,
    record_search_event,
)
from brandfit.app import app
from brandfit.catalog.cache import CatalogCache, get_catalog_cache
from brandfit.catalog.models import CatalogTrack
from brandfit.playlist.reference_chart import get_reference_chart

client = TestClient(app)

BALANCED = {
    "tempo": 88, "energy": 0.5, "valence": 0.65, "acousticness": 0.6,
    "danceability": 0.3, "instrumentalness": 0.5, "speechiness": 0.05,
}


def _use_catalog(count):
    tracks = [CatalogTrack(title=f"T{i}", artist="A", genres=["pop"], **BALANCED) for i in range(count)]
    cache = CatalogCache(loader=lambda: tracks, clock=lambda: 0.0)
    app.dependency_overrides[get_catalog_cache] = lambda: cache
    app.dependency_overrides[get_reference_chart] = lambda: []


def teardown_function():
    app.dependency_overrides.clear()


def test_analytics_returns_empty_initially():
    clear_events()
    resp = client.get("/analytics")
    assert resp.status_code == 200
    body = resp.json()
    assert body["total_searches"] == 0
    assert body["avg_response_time_ms"] == 0.0
    assert body["strategy_usage"] == {}


def test_analytics_tracks_searches():
    clear_events()
    _use_catalog(12)
    client.post("/playlist/search", json={"target_features": BALANCED})
    client.post("/playlist/search", json={"target_features": BALANCED, "operational_goal": "premium_experience"})
    body = client.get("/analytics").json()
    assert body["total_searches"] == 2
    assert body["strategy_usage"] == {"pure_features": 2}
    assert body["goal_usage"] == {"balanced_operation": 1, "premium_experience": 1}
    assert body["avg_match_quality"] == 100.0


def test_analytics_tracks_profiles_and_conflicts():
    clear_events()
    client.post("/profile", json={"answers": {"restaurant_name": "Chez Marcel"}})
    client.post("/profile", json={"answers": {"operational_goal": "high_table_turnover", "vibe_words": ["calm"]}})
    client.post("/profile", json={"answers": {"operational_goal": "no_such_goal"}})
    body = client.get("/analytics").json()
    assert body["total_profiles"] == 3
    assert body["goal_conflicts"] == 1
    assert body["top_cultures"] == [{"name": "french", "count": 1}]


def test_failed_searches_do_not_count_towards_quality():
    events = [
        {"type": "playlist_search", "track_count": 0, "match_quality": 0, "error": "missing", "response_time_ms": 2.0},
        {"type": "playlist_search", "track_count": 10, "match_quality": 80, "strategy": "pure_features",
         "response_time_ms": 4.0},
    ]
    summary = compute_analytics(events)
    assert summary["failed_searches"] == 1
    assert summary["avg_match_quality"] == 80.0
    assert summary["avg_response_time_ms"] == 3.0
    assert summary["strategy_usage"] == {"unknown": 1, "pure_features": 1}


def test_get_events_returns_copy():
    clear_events()
    record_event("profile", {"culture": "greek"})
    events = get_events()
    events.clear()
    assert len(get_events()) == 1


def test_typed_recorders_feed_aggregator():
    record_profile_event("balanced_operation", "high_table_turnover", True, "greek", "cafe")
    record_search_event("premium_experience", "cultural_genres", 25, 91, 12.0)
    record_search_event("premium_experience", None, 0, 0, 3.0, error="Catalog not found")
    summary = compute_analytics(get_events())
    assert summary["total_profiles"] == 1
    assert summary["goal_conflicts"] == 1
    assert summary["failed_searches"] == 1
    assert summary["avg_match_quality"] == 91.0
    assert summary["goal_usage"] == {"premium_experience": 2}
    assert summary["top_cultures"] == [{"name": "greek", "count": 1}]
