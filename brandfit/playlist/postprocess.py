from __future__ import annotations

import functools
import logging
from typing import Sequence

from ..catalog.models import CatalogTrack

logger = logging.getLogger(__name__)

HIT_POPULARITY_BOOST = 50
SCORE_TIE_MARGIN = 0.05


def boost_hits(tracks: Sequence[CatalogTrack]) -> list[CatalogTrack]:
    """Copies of *tracks* with current hits lifted by ``HIT_POPULARITY_BOOST``."""
    boosted: list[CatalogTrack] = []
    for track in tracks:
        if track.is_hit:
            track = track.model_copy(update={"popularity": track.popularity + HIT_POPULARITY_BOOST})
            logger.debug("Hit boost: %s by %s -> %d", track.title, track.artist, track.popularity)
        boosted.append(track)
    return boosted


def _compare(a: CatalogTrack, b: CatalogTrack) -> float:
    diff = (b.match_score or 0.0) - (a.match_score or 0.0)
    if abs(diff) > SCORE_TIE_MARGIN:
        return diff
    return b.popularity - a.popularity


def redistribute_hits(tracks: Sequence[CatalogTrack]) -> list[CatalogTrack]:
    """Spread current hits evenly: one at every ``len(tracks) // hits`` positions.

    Returns a permutation of *tracks*. Order within hits and within
    non-hits is preserved.
    """
    hits = [t for t in tracks if t.is_hit]
    others = [t for t in tracks if not t.is_hit]
    if not hits or not others:
        return list(tracks)

    interval = len(tracks) // len(hits)
    result: list[CatalogTrack] = []
    hit_iter, other_iter = iter(hits), iter(others)
    placed_hits = placed_others = 0

    for position in range(len(tracks)):
        if position % interval == 0 and placed_hits < len(hits):
            result.append(next(hit_iter))
            placed_hits += 1
        elif placed_others < len(others):
            result.append(next(other_iter))
            placed_others += 1

    result.extend(hit_iter)
    result.extend(other_iter)
    logger.info("Redistributed %d hits among %d tracks (every %d)", len(hits), len(result), interval)
    return result


def apply_popularity_sorting(tracks: Sequence[CatalogTrack]) -> list[CatalogTrack]:
    """Boost hits, sort by match score then popularity, then spread the hits."""
    ranked = sorted(boost_hits(tracks), key=functools.cmp_to_key(_compare))
    return redistribute_hits(ranked)
