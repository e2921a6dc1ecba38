from __future__ import annotations

import json
import logging
import re

from pydantic import BaseModel, ValidationError

from ..catalog.config import DEFAULT_CHART_CONFIG, ChartConfig

logger = logging.getLogger(__name__)

_NON_WORD = re.compile(r"[^\w\s]")

# (max chart position, relevance)
POSITION_RELEVANCE: tuple[tuple[int, float], ...] = (
    (10, 0.98),
    (50, 0.95),
    (100, 0.9),
    (500, 0.8),
    (1000, 0.65),
    (1500, 0.5),
)
DEFAULT_RELEVANCE = 0.35


class ChartEntry(BaseModel):
    position: int
    artist: str
    title: str
    year: int | None = None


_chart: list[ChartEntry] | None = None


def load_reference_chart(config: ChartConfig = DEFAULT_CHART_CONFIG) -> list[ChartEntry]:
    """Read the all-time chart JSON. Missing or invalid files give an empty chart."""
    path = config.chart_path
    if not path.exists():
        logger.warning("Reference chart %s not found, chart relevance disabled", path)
        return []
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
        return [ChartEntry.model_validate(item) for item in raw]
    except (OSError, ValueError, TypeError, ValidationError):
        logger.warning("Reference chart %s could not be read", path, exc_info=True)
        return []


def get_reference_chart() -> list[ChartEntry]:
    """Return the reference chart, loading it on first call."""
    global _chart
    if _chart is None:
        _chart = load_reference_chart()
    return _chart


def _normalize(text: str) -> str:
    return _NON_WORD.sub("", (text or "").lower()).strip()


def chart_relevance(artist: str, title: str, chart: list[ChartEntry] | None) -> float:
    if not chart:
        return 0.0
    artist, title = _normalize(artist), _normalize(title)
    if not artist or not title:
        return 0.0
    match = next(
        (e for e in chart if artist in _normalize(e.artist) and title in _normalize(e.title)),
        None,
    )
    if match is None:
        return 0.0
    for max_position, relevance in POSITION_RELEVANCE:
        if match.position <= max_position:
            return relevance
    return DEFAULT_RELEVANCE
