from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from ..playlist.years import extract_release_year
from .config import DEFAULT_CATALOG_CONFIG, CatalogConfig
from .models import CURRENT_HITS_SOURCE, DEFAULT_SOURCE, CatalogTrack

logger = logging.getLogger(__name__)

DEFAULT_TEMPO = 120.0
DEFAULT_LOUDNESS = -10.0
DEFAULT_POPULARITY = 50

# Workbook column -> feature, stored on a 1-100 scale.
SCALED_FEATURES: dict[str, str] = {
    "Energy": "energy",
    "Dance": "danceability",
    "Valence": "valence",
    "Acoustic": "acousticness",
}
GENRE_COLUMNS = ("Genre_1", "Genre_2", "Genre_3")


def resolve_catalog_path(config: CatalogConfig = DEFAULT_CATALOG_CONFIG) -> Path:
    """Prefer the enriched workbook, fall back to the raw input workbook."""
    if config.enriched_path.exists():
        return config.enriched_path
    if config.input_path.exists():
        logger.warning("Using non-enriched catalog %s", config.input_path)
        return config.input_path
    raise FileNotFoundError(
        f"Catalog not found. Expected {config.enriched_path} or {config.input_path}"
    )


def read_workbook(path: Path) -> pd.DataFrame:
    if path.suffix.lower() == ".csv":
        return pd.read_csv(path)
    return pd.read_excel(path, sheet_name=0, engine="openpyxl")


def estimate_instrumentalness(genre_text: str, acousticness: float) -> float:
    if "classical" in genre_text or "instrumental" in genre_text:
        return 0.8
    if "jazz" in genre_text and acousticness > 0.6:
        return 0.6
    if "ambient" in genre_text:
        return 0.7
    if acousticness > 0.8:
        return 0.6
    if acousticness > 0.6:
        return 0.3
    return 0.05


def estimate_speechiness(genre_text: str) -> float:
    if "rap" in genre_text or "hip hop" in genre_text:
        return 0.15
    if "spoken word" in genre_text:
        return 0.8
    return 0.04


def _text(raw: pd.DataFrame, column: str) -> pd.Series:
    if column not in raw:
        return pd.Series("", index=raw.index, dtype=object)
    return raw[column].fillna("").astype(str).str.strip()


def _numeric(raw: pd.DataFrame, column: str, default: float) -> pd.Series:
    """Numeric column where blanks, junk and zeros become *default*."""
    if column not in raw:
        return pd.Series(default, index=raw.index, dtype=float)
    values = pd.to_numeric(raw[column], errors="coerce")
    return values.where(values.notna() & (values != 0), default).astype(float)


def _merge_genres(primary: list[str], genres_all: str) -> list[str]:
    merged: list[str] = []
    seen: set[str] = set()
    for genre in primary + genres_all.split(","):
        genre = genre.strip()
        if genre and genre.lower() not in seen:
            seen.add(genre.lower())
            merged.append(genre)
    return merged


def _release_value(value: object) -> object:
    return None if pd.isna(value) else value


def normalize_catalog(raw: pd.DataFrame) -> pd.DataFrame:
    """Map workbook columns onto track fields and convert to the 0-1 scale."""
    df = pd.DataFrame(index=raw.index)
    df["catalog_index"] = range(1, len(raw) + 1)
    df["title"] = _text(raw, "Title")
    df["artist"] = _text(raw, "Artist")

    releases = [_release_value(v) for v in raw["Release"]] if "Release" in raw else [None] * len(raw)
    df["release"] = ["" if v is None else str(v) for v in releases]
    df["release_year"] = [extract_release_year(v) for v in releases]

    df["tempo"] = _numeric(raw, "BPM", DEFAULT_TEMPO)
    for column, feature in SCALED_FEATURES.items():
        df[feature] = _numeric(raw, column, 0.0) / 100
    df["loudness"] = _numeric(raw, "Loud", DEFAULT_LOUDNESS)
    df["popularity"] = _numeric(raw, "Pop.", DEFAULT_POPULARITY).round().astype(int)

    primary = list(zip(*(_text(raw, c) for c in GENRE_COLUMNS)))
    df["genres"] = [
        _merge_genres(list(p), g) for p, g in zip(primary, _text(raw, "Genres_All"))
    ]
    genre_text = df["genres"].apply(lambda genres: ", ".join(genres).lower())

    # Estimates need the converted acousticness, so they run after scaling.
    estimated = pd.Series(
        [estimate_instrumentalness(g, a) for g, a in zip(genre_text, df["acousticness"])],
        index=df.index,
    )
    given = _numeric(raw, "Instrumentalness", float("nan"))
    df["instrumentalness"] = given.where(given.notna(), estimated)

    estimated = pd.Series([estimate_speechiness(g) for g in genre_text], index=df.index)
    given = _numeric(raw, "Speechiness", float("nan"))
    df["speechiness"] = given.where(given.notna(), estimated)

    df["spotify_id"] = _text(raw, "Spotify_ID")
    df["album_name"] = _text(raw, "Album_Name")
    df["source"] = _text(raw, "Source").replace("", DEFAULT_SOURCE)
    df["has_enrichment_data"] = df["spotify_id"] != ""
    df["is_current_hit"] = df["source"] == CURRENT_HITS_SOURCE

    return df[(df["title"] != "") & (df["artist"] != "")]


def load_catalog(config: CatalogConfig = DEFAULT_CATALOG_CONFIG) -> list[CatalogTrack]:
    """Read the catalog workbook into validated tracks.

    Raises FileNotFoundError when neither workbook exists.
    """
    path = resolve_catalog_path(config)
    logger.info("Loading catalog from %s", path)
    df = normalize_catalog(read_workbook(path))
    tracks = [CatalogTrack(**record) for record in df.to_dict("records")]

    enriched = sum(1 for t in tracks if t.has_enrichment_data)
    logger.info(
        "Loaded %d tracks (%d with enrichment data, %d%%)",
        len(tracks), enriched, round(enriched / len(tracks) * 100) if tracks else 0,
    )
    return tracks
