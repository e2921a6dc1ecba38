from __future__ import annotations

import pytest

from brandfit.analytics.store import clear_events
from brandfit.catalog.cache import CatalogCache
from brandfit.catalog.models import CatalogTrack
from brandfit.profile.models import FeatureVector

BALANCED_FEATURES = {
    "tempo": 88,
    "energy": 0.5,
    "valence": 0.65,
    "acousticness": 0.6,
    "danceability": 0.3,
    "instrumentalness": 0.5,
    "speechiness": 0.05,
}


def _track(**overrides) -> CatalogTrack:
    fields = {
        "title": "Track",
        "artist": "Artist",
        "release_year": 2015,
        "genres": ["acoustic pop"],
        **BALANCED_FEATURES,
        "speechiness": 0.04,
    }
    fields.update(overrides)
    return CatalogTrack(**fields)


@pytest.fixture
def make_track():
    return _track


@pytest.fixture
def balanced_target() -> FeatureVector:
    return FeatureVector(**BALANCED_FEATURES)


@pytest.fixture
def make_cache():
    def factory(tracks, clock=None) -> CatalogCache:
        return CatalogCache(loader=lambda: list(tracks), clock=clock or (lambda: 0.0))

    return factory


@pytest.fixture(autouse=True)
def _reset_events():
    clear_events()
    yield
    clear_events()
