from __future__ import annotations

from unittest.mock import patch

from fastapi.testclient import TestClient

from brandfit.app import app
from brandfit.catalog.cache import CatalogCache, get_catalog_cache
from brandfit.catalog.models import CatalogTrack
from brandfit.llm.menu_client import MenuAnalysis
from brandfit.playlist.reference_chart import get_reference_chart

client = TestClient(app)

BALANCED = {
    "tempo": 88, "energy": 0.5, "valence": 0.65, "acousticness": 0.6,
    "danceability": 0.3, "instrumentalness": 0.5, "speechiness": 0.05,
}


def _catalog(count=30):
    return [
        CatalogTrack(title=f"Track {i}", artist="Trio", genres=["jazz"], release_year=2018, **BALANCED)
        for i in range(count)
    ]


def _use_catalog(tracks):
    cache = CatalogCache(loader=lambda: tracks, clock=lambda: 0.0)
    app.dependency_overrides[get_catalog_cache] = lambda: cache
    app.dependency_overrides[get_reference_chart] = lambda: []
    return cache


def _use_missing_catalog():
    def loader():
        raise FileNotFoundError("Catalog not found")

    app.dependency_overrides[get_catalog_cache] = lambda: CatalogCache(loader=loader)
    app.dependency_overrides[get_reference_chart] = lambda: []


def teardown_function():
    app.dependency_overrides.clear()


# ── Public endpoints ─────────────────────────────────────────────────────


def test_health():
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_metadata_lists_answer_choices():
    body = client.get("/metadata").json()
    assert "premium_experience" in body["operational_goals"]
    assert "avond_intiem" in body["time_slots"]["avond"]
    assert "heavy_metal" in body["excludable_genres"]


# ── Profile ──────────────────────────────────────────────────────────────


def test_profile_endpoint():
    resp = client.post("/profile", json={"answers": {"operational_goal": "premium_experience"}})
    assert resp.status_code == 200
    body = resp.json()
    assert body["profile"]["features"]["tempo"] == 65
    assert body["profile"]["operational_goal"] == "premium_experience"
    assert body["roi"]["revenue_increase"] == "50%"
    assert body["implementation_plan"]["immediate"]


def test_profile_with_external_signals():
    payload = {
        "answers": {"operational_goal": "premium_experience"},
        "external_signals": {"menu": {"energy_adjustment": 1.0, "confidence_score": 0.5}},
    }
    body = client.post("/profile", json=payload).json()
    assert abs(body["profile"]["features"]["energy"] - 0.28) < 1e-9


def test_profile_rejects_out_of_range_signal():
    payload = {
        "answers": {},
        "external_signals": {"website": {"confidence_score": 3}},
    }
    assert client.post("/profile", json=payload).status_code == 422


@patch("brandfit.app.analyze_menu")
def test_menu_analyze_endpoint(mock_analyze):
    mock_analyze.return_value = MenuAnalysis(menu_items=["Paella - €18"], llm_used=True)
    resp = client.post("/menu/analyze", json={"menu_text": "Paella 18", "restaurant_name": "Casa Pepe"})
    assert resp.status_code == 200
    assert resp.json()["menu_items"] == ["Paella - €18"]
    request = mock_analyze.call_args.args[0]
    assert request.restaurant_name == "Casa Pepe"


def test_menu_analyze_requires_text():
    assert client.post("/menu/analyze", json={"menu_text": ""}).status_code == 422


# ── Playlist ─────────────────────────────────────────────────────────────


def test_playlist_search():
    _use_catalog(_catalog())
    resp = client.post("/playlist/search", json={"target_features": BALANCED, "genre_preferences": ["jazz"]})
    assert resp.status_code == 200
    body = resp.json()
    assert len(body["tracks"]) == 30
    assert body["diagnostics"]["success_strategy"] == "secondary_genres"
    assert body["match_quality"] == 100


def test_playlist_search_without_catalog():
    _use_missing_catalog()
    resp = client.post("/playlist/search", json={"target_features": BALANCED})
    assert resp.status_code == 200
    body = resp.json()
    assert body["tracks"] == []
    assert body["match_quality"] == 0
    assert "Catalog not found" in body["diagnostics"]["error"]


def test_match_quality_endpoint():
    app.dependency_overrides[get_reference_chart] = lambda: []
    tracks = [t.model_dump() for t in _catalog(2)]
    resp = client.post("/match-quality", json={"tracks": tracks, "target_features": BALANCED})
    assert resp.status_code == 200
    assert resp.json() == {"match_quality": 100, "track_count": 2}


# ── Admin ────────────────────────────────────────────────────────────────


def test_catalog_stats_endpoint():
    _use_catalog(_catalog(4))
    resp = client.get("/catalog/stats")
    assert resp.status_code == 200
    body = resp.json()
    assert body["total_tracks"] == 4
    assert body["top_genres"] == [{"genre": "jazz", "count": 4}]


def test_catalog_stats_unavailable():
    _use_missing_catalog()
    assert client.get("/catalog/stats").status_code == 503


def test_cache_stats_endpoint():
    _use_catalog(_catalog(3))
    client.get("/catalog/stats")
    client.get("/catalog/stats")
    body = client.get("/cache/stats").json()
    assert body["size"] == 3
    assert body["hits"] == 1
    assert body["misses"] == 1
