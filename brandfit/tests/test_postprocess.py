from __future__ import annotations

from brandfit.catalog.models import CURRENT_HITS_SOURCE
from brandfit.playlist.postprocess import apply_popularity_sorting, boost_hits, redistribute_hits


def _playlist(make_track, size, hit_positions):
    return [
        make_track(title=f"T{i}", is_current_hit=i in hit_positions, match_score=0.9)
        for i in range(size)
    ]


def _hit_positions(tracks):
    return [i for i, t in enumerate(tracks) if t.is_hit]


def test_hits_are_spread_evenly(make_track):
    tracks = _playlist(make_track, 15, {12, 13, 14})
    result = redistribute_hits(tracks)
    assert _hit_positions(result) == [0, 5, 10]
    assert sorted(t.title for t in result) == sorted(t.title for t in tracks)


def test_hit_interval_uses_integer_division(make_track):
    result = redistribute_hits(_playlist(make_track, 10, {0, 1, 2}))
    assert _hit_positions(result) == [0, 3, 6]
    assert len(result) == 10


def test_relative_order_is_preserved(make_track):
    result = redistribute_hits(_playlist(make_track, 6, {4, 5}))
    assert [t.title for t in result] == ["T4", "T0", "T1", "T5", "T2", "T3"]


def test_redistribution_without_hits_or_without_others(make_track):
    no_hits = _playlist(make_track, 4, set())
    all_hits = _playlist(make_track, 4, {0, 1, 2, 3})
    assert redistribute_hits(no_hits) == no_hits
    assert redistribute_hits(all_hits) == all_hits
    assert redistribute_hits([]) == []


def test_source_marks_a_hit(make_track):
    assert make_track(source=CURRENT_HITS_SOURCE).is_hit
    assert not make_track().is_hit


def test_boost_hits_returns_copies(make_track):
    hit = make_track(is_current_hit=True, popularity=40)
    [boosted] = boost_hits([hit])
    assert boosted.popularity == 90
    assert hit.popularity == 40


def test_popularity_sorting_within_score_ties(make_track):
    tracks = [
        make_track(title="low", popularity=10, match_score=0.90),
        make_track(title="high", popularity=70, match_score=0.88),
        make_track(title="best", popularity=0, match_score=0.99),
    ]
    result = apply_popularity_sorting(tracks)
    assert [t.title for t in result] == ["best", "high", "low"]


def test_boosted_hit_leads_its_score_band(make_track):
    tracks = [
        make_track(title="popular", popularity=90, match_score=0.9),
        make_track(title="hit", popularity=60, is_current_hit=True, match_score=0.9),
    ]
    result = apply_popularity_sorting(tracks)
    assert [t.title for t in result] == ["hit", "popular"]
    assert result[0].popularity == 110
