from __future__ import annotations

import time
from typing import Any

PROFILE_EVENT = "profile"
SEARCH_EVENT = "playlist_search"

_events: list[dict[str, Any]] = []


def record_event(event_type: str, data: dict[str, Any]) -> None:
    _events.append({"type": event_type, "timestamp": time.time(), **data})


def record_profile_event(
    operational_goal: str,
    requested_goal: str | None,
    goal_conflict: bool,
    culture: str | None,
    business_type: str | None,
) -> None:
    record_event(PROFILE_EVENT, {
        "operational_goal": operational_goal,
        "requested_goal": requested_goal,
        "goal_conflict": goal_conflict,
        "culture": culture,
        "business_type": business_type,
    })


def record_search_event(
    operational_goal: str | None,
    strategy: str | None,
    track_count: int,
    match_quality: int,
    response_time_ms: float,
    error: str | None = None,
) -> None:
    """A failed search keeps its error so analytics can leave it out of quality averages."""
    record_event(SEARCH_EVENT, {
        "operational_goal": operational_goal,
        "strategy": strategy,
        "track_count": track_count,
        "match_quality": match_quality,
        "error": error,
        "response_time_ms": response_time_ms,
    })


def get_events() -> list[dict[str, Any]]:
    return list(_events)


def clear_events() -> None:
    _events.clear()
