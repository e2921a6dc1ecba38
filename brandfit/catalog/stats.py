from __future__ import annotations

import numpy as np
import pandas as pd

from .models import CatalogStats, CatalogTrack, GenreCount, TempoBucket

TOP_GENRES = 15
AVERAGED_FEATURES = ("tempo", "energy", "danceability", "acousticness", "valence", "popularity")

TEMPO_BINS = [-np.inf, 70, 90, 110, 130, np.inf]
TEMPO_LABELS = [
    "Very Slow (< 70 BPM)",
    "Slow (70-90 BPM)",
    "Moderate (90-110 BPM)",
    "Upbeat (110-130 BPM)",
    "Fast (> 130 BPM)",
]


def compute_catalog_stats(tracks: list[CatalogTrack] | tuple[CatalogTrack, ...]) -> CatalogStats:
    if not tracks:
        return CatalogStats(
            total_tracks=0,
            with_enrichment_data=0,
            coverage_percentage=0,
            top_genres=[],
            average_features=None,
            tempo_distribution=[TempoBucket(label=label, count=0) for label in TEMPO_LABELS],
            genres_found=0,
        )

    df = pd.DataFrame(
        [t.model_dump(include={"genres", "has_enrichment_data", *AVERAGED_FEATURES}) for t in tracks]
    )
    total = len(df)
    enriched = int(df["has_enrichment_data"].sum())

    genre_counts = df["genres"].explode().dropna().value_counts()
    top_genres = [
        GenreCount(genre=str(genre), count=int(count))
        for genre, count in genre_counts.head(TOP_GENRES).items()
    ]

    averages = {name: round(float(value), 3) for name, value in df[list(AVERAGED_FEATURES)].mean().items()}

    buckets = (
        pd.cut(df["tempo"], bins=TEMPO_BINS, labels=TEMPO_LABELS, right=False)
        .value_counts()
        .reindex(TEMPO_LABELS, fill_value=0)
    )

    return CatalogStats(
        total_tracks=total,
        with_enrichment_data=enriched,
        coverage_percentage=round(enriched / total * 100),
        top_genres=top_genres,
        average_features=averages,
        tempo_distribution=[TempoBucket(label=label, count=int(count)) for label, count in buckets.items()],
        genres_found=len(genre_counts),
    )
