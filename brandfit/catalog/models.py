from __future__ import annotations

from pydantic import BaseModel, Field

DEFAULT_RELEASE_YEAR = 2015
DEFAULT_SOURCE = "sortyourmusic database"
CURRENT_HITS_SOURCE = "Top 50 - Nederland"


class CatalogTrack(BaseModel):
    title: str
    artist: str
    release: str = Field(default="", description="Raw release value as found in the workbook")
    release_year: int = DEFAULT_RELEASE_YEAR

    tempo: float = 120.0
    energy: float = 0.0
    acousticness: float = 0.0
    danceability: float = 0.0
    valence: float = 0.0
    instrumentalness: float = 0.0
    speechiness: float = 0.0
    loudness: float = -10.0

    genres: list[str] = Field(default_factory=list)
    popularity: int = 50
    has_enrichment_data: bool = False
    source: str = DEFAULT_SOURCE
    is_current_hit: bool = False
    spotify_id: str = ""
    album_name: str = ""
    catalog_index: int = 0

    # Per-request annotations, only ever set on copies.
    # Cultural boost on the secondary-genre strategy can lift match_score above 1.0.
    match_score: float | None = None
    year: int | None = None
    year_boost: float | None = None
    cultural_match: bool = False

    @property
    def genre_text(self) -> str:
        return ", ".join(self.genres).lower()

    @property
    def is_hit(self) -> bool:
        return self.is_current_hit or self.source == CURRENT_HITS_SOURCE


class TempoBucket(BaseModel):
    label: str
    count: int


class GenreCount(BaseModel):
    genre: str
    count: int


class CatalogStats(BaseModel):
    total_tracks: int
    with_enrichment_data: int
    coverage_percentage: int
    top_genres: list[GenreCount]
    average_features: dict[str, float] | None
    tempo_distribution: list[TempoBucket]
    genres_found: int
