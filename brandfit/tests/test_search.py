from __future__ import annotations

import pytest

from brandfit.catalog.search import (
    TRACK_GENRE_EXCLUSIONS,
    SearchOptions,
    filter_excluded_genres,
    hospitality_match_score,
    inferred_genres,
    matches_any_genre,
    passes_goal_filter,
    search_tracks_by_features,
    smart_tempo_tolerance,
)


# ── Tempo window ─────────────────────────────────────────────────────────


def test_tempo_tolerance_narrows_as_tempo_rises():
    tolerances = [smart_tempo_tolerance(t) for t in (60, 75, 95, 130)]
    assert tolerances == [0.45, 0.25, 0.20, 0.15]
    assert tolerances == sorted(tolerances, reverse=True)


def test_tempo_window_keeps_tracks_inside(make_track, balanced_target):
    target = balanced_target.model_copy(update={"tempo": 60})
    tracks = [make_track(title=f"T{tempo}", tempo=tempo) for tempo in (32, 34, 60, 86, 88)]
    result = search_tracks_by_features(tracks, target)
    assert sorted(t.tempo for t in result) == [34, 60, 86]


# ── Genre filters ────────────────────────────────────────────────────────


@pytest.mark.parametrize("excluded_id", sorted(TRACK_GENRE_EXCLUSIONS))
def test_exclusion_removes_every_keyword(make_track, excluded_id):
    tracks = [make_track(title=k, genres=["dutch", k]) for k in TRACK_GENRE_EXCLUSIONS[excluded_id]]
    tracks.append(make_track(title="keep", genres=["bossa nova"]))
    kept = filter_excluded_genres(tracks, [excluded_id])
    assert [t.title for t in kept] == ["keep"]


def test_track_exclusion_matches_keyword_inside_genre_text(make_track):
    tracks = [make_track(title="a", genres=["Indie-Folk-Rock"]), make_track(title="b", genres=["fo"])]
    kept = filter_excluded_genres(tracks, ["folk"])
    assert [t.title for t in kept] == ["b"]


def test_no_exclusions_keeps_everything(make_track):
    tracks = [make_track(genres=["metal"])]
    assert filter_excluded_genres(tracks, []) == tracks


def test_inferred_genres_from_features(make_track):
    track = make_track(genres=[], acousticness=0.85, instrumentalness=0.75, tempo=80)
    assert inferred_genres(track) == ["acoustic", "folk", "jazz", "classical"]
    assert matches_any_genre(track, ["Folk"])


def test_genre_match_is_substring_either_way(make_track):
    track = make_track(genres=["french indie pop"])
    assert matches_any_genre(track, ["indie"])
    assert matches_any_genre(track, ["french indie pop rock"])
    assert not matches_any_genre(track, ["techno"])


# ── Scoring ──────────────────────────────────────────────────────────────


def test_perfect_match_score(make_track, balanced_target):
    assert hospitality_match_score(make_track(), balanced_target) == pytest.approx(0.95)


def test_speechy_and_danceable_tracks_are_penalized(make_track, balanced_target):
    base = hospitality_match_score(make_track(), balanced_target)
    speechy = hospitality_match_score(make_track(speechiness=0.3), balanced_target)
    danceable = hospitality_match_score(make_track(danceability=0.75), balanced_target)
    assert speechy == pytest.approx(base - 0.015)
    assert danceable < base


def test_low_scores_are_dropped(make_track, balanced_target):
    poor = make_track(acousticness=0.0, valence=0.0, energy=1.0, danceability=1.0)
    assert search_tracks_by_features([poor], balanced_target) == []


@pytest.mark.parametrize(
    "goal, fields, expected",
    [
        ("high_revenue_per_customer", {"tempo": 85, "danceability": 0.3, "energy": 0.5}, True),
        ("high_revenue_per_customer", {"tempo": 95}, False),
        ("high_table_turnover", {"tempo": 110, "energy": 0.6}, True),
        ("high_table_turnover", {"tempo": 110, "energy": 0.4}, False),
        ("premium_experience", {"acousticness": 0.2}, False),
        ("premium_experience", {"speechiness": 0.09}, False),
        ("balanced_operation", {"tempo": 200}, True),
    ],
)
def test_goal_filter(make_track, goal, fields, expected):
    assert passes_goal_filter(make_track(**fields), goal) is expected


# ── Ranking ──────────────────────────────────────────────────────────────


def test_premium_prefers_less_popular_on_ties(make_track, balanced_target):
    tracks = [make_track(title="famous", popularity=80), make_track(title="niche", popularity=20)]
    premium = search_tracks_by_features(tracks, balanced_target, SearchOptions(operational_goal="premium_experience"))
    balanced = search_tracks_by_features(tracks, balanced_target)
    assert [t.title for t in premium] == ["niche", "famous"]
    assert [t.title for t in balanced] == ["famous", "niche"]


def test_enriched_tracks_rank_first_on_ties(make_track, balanced_target):
    tracks = [make_track(title="plain", popularity=90), make_track(title="enriched", has_enrichment_data=True)]
    result = search_tracks_by_features(tracks, balanced_target)
    assert [t.title for t in result] == ["enriched", "plain"]


def test_clear_score_difference_beats_popularity(make_track, balanced_target):
    tracks = [make_track(title="popular", popularity=100, acousticness=0.3), make_track(title="fit", popularity=0)]
    result = search_tracks_by_features(tracks, balanced_target)
    assert [t.title for t in result] == ["fit", "popular"]


def test_search_returns_scored_copies(make_track, balanced_target):
    track = make_track()
    [result] = search_tracks_by_features([track], balanced_target)
    assert result.match_score == pytest.approx(0.95)
    assert track.match_score is None


def test_search_options_limit_and_enrichment(make_track, balanced_target):
    tracks = [make_track(title=f"T{i}", has_enrichment_data=i % 2 == 0) for i in range(10)]
    assert len(search_tracks_by_features(tracks, balanced_target, SearchOptions(limit=3))) == 3
    enriched = search_tracks_by_features(tracks, balanced_target, SearchOptions(require_enrichment_data=True))
    assert len(enriched) == 5
    assert all(t.has_enrichment_data for t in enriched)


def test_genre_pre_filter(make_track, balanced_target):
    tracks = [make_track(title="jazz", genres=["jazz"]), make_track(title="pop", genres=["dance pop"])]
    result = search_tracks_by_features(tracks, balanced_target, SearchOptions(genre_pre_filter=("jazz",)))
    assert [t.title for t in result] == ["jazz"]
