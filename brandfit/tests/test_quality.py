from __future__ import annotations

import json

from brandfit.catalog.config import ChartConfig
from brandfit.playlist.quality import score_match_quality
from brandfit.playlist.reference_chart import ChartEntry, chart_relevance, load_reference_chart
from brandfit.profile.models import YearPreference

CHART = [
    ChartEntry(position=5, artist="Queen", title="Bohemian Rhapsody", year=1975),
    ChartEntry(position=750, artist="Ramses Shaffy & Liesbeth List", title="Pastorale", year=1969),
    ChartEntry(position=1999, artist="Boudewijn de Groot", title="Avond", year=1997),
]


def test_empty_playlist_scores_zero(balanced_target):
    assert score_match_quality([], balanced_target) == 0


def test_perfect_match_scores_hundred(make_track, balanced_target):
    assert score_match_quality([make_track()] * 3, balanced_target) == 100


def test_chart_classic_is_capped_at_hundred(make_track, balanced_target):
    track = make_track(artist="Queen", title="Bohemian Rhapsody")
    assert score_match_quality([track], balanced_target, reference_chart=CHART) == 100


def test_chart_classic_lifts_weaker_playlist(make_track, balanced_target):
    plain = make_track(tempo=50)
    classic = make_track(tempo=50, artist="Queen", title="Bohemian Rhapsody")
    # 0.886 fit, uplifted by 0.2 * 0.98
    assert score_match_quality([plain], balanced_target, reference_chart=CHART) == 89
    assert score_match_quality([classic], balanced_target, reference_chart=CHART) == 100


def test_year_weight_takes_audio_share(make_track, balanced_target):
    prefs = YearPreference(min_year=1995, preferred_years=(1995, 2020), recency_weight=0.4)
    track = make_track(release_year=1990)
    # audio 1.0 at 0.6, year score 0.1 at 0.4
    assert score_match_quality([track], balanced_target, prefs) == 64


def test_annotated_year_wins_over_release_year(make_track, balanced_target):
    prefs = YearPreference(min_year=1995, preferred_years=(1995, 2020), recency_weight=0.4)
    track = make_track(release_year=1990, year=2019)
    assert score_match_quality([track], balanced_target, prefs) == 100


def test_tempo_distance_lowers_quality(make_track, balanced_target):
    # tempo 38 BPM off: 0.62 at weight 0.3
    assert score_match_quality([make_track(tempo=50)], balanced_target) == 89


def test_chart_relevance_by_position():
    assert chart_relevance("queen", "bohemian rhapsody!", CHART) == 0.98
    assert chart_relevance("Ramses Shaffy", "Pastorale", CHART) == 0.65
    assert chart_relevance("Boudewijn de Groot", "Avond", CHART) == 0.35
    assert chart_relevance("Unknown", "Song", CHART) == 0.0


def test_chart_relevance_ignores_empty_strings():
    assert chart_relevance("", "", CHART) == 0.0
    assert chart_relevance("Queen", "", CHART) == 0.0
    assert chart_relevance("Queen", "Bohemian Rhapsody", []) == 0.0


def test_load_reference_chart(tmp_path):
    entries = [{"position": 1, "artist": "Queen", "title": "Bohemian Rhapsody", "year": 1975}]
    (tmp_path / "chart.json").write_text(json.dumps(entries), encoding="utf-8")
    chart = load_reference_chart(ChartConfig(data_dir=tmp_path, chart_filename="chart.json"))
    assert chart == [ChartEntry(position=1, artist="Queen", title="Bohemian Rhapsody", year=1975)]


def test_missing_or_broken_chart_is_empty(tmp_path, caplog):
    assert load_reference_chart(ChartConfig(data_dir=tmp_path, chart_filename="missing.json")) == []
    (tmp_path / "broken.json").write_text("{not json", encoding="utf-8")
    assert load_reference_chart(ChartConfig(data_dir=tmp_path, chart_filename="broken.json")) == []
    assert "could not be read" in caplog.text
