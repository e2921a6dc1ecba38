from __future__ import annotations

from collections import Counter
from typing import Any

from .store import PROFILE_EVENT, SEARCH_EVENT


def _usage(events: list[dict[str, Any]], key: str) -> dict[str, int]:
    counter: Counter[str] = Counter()
    for e in events:
        counter[e.get(key) or "unknown"] += 1
    return dict(counter.most_common())


def compute_analytics(events: list[dict[str, Any]]) -> dict[str, Any]:
    searches = [e for e in events if e["type"] == SEARCH_EVENT]
    profiles = [e for e in events if e["type"] == PROFILE_EVENT]
    total = len(searches)

    # Average response time
    times = [s["response_time_ms"] for s in searches if "response_time_ms" in s]
    avg_time = round(sum(times) / len(times), 1) if times else 0.0

    # Average match quality, only for searches that returned tracks
    qualities = [s["match_quality"] for s in searches if s.get("track_count")]
    avg_quality = round(sum(qualities) / len(qualities), 1) if qualities else 0.0

    failures = sum(1 for s in searches if s.get("error"))

    # Conflicts: requested goal overridden by vibe words
    conflicts = sum(1 for p in profiles if p.get("goal_conflict"))

    culture_counter: Counter[str] = Counter(p["culture"] for p in profiles if p.get("culture"))

    return {
        "total_searches": total,
        "total_profiles": len(profiles),
        "avg_response_time_ms": avg_time,
        "avg_match_quality": avg_quality,
        "failed_searches": failures,
        "strategy_usage": _usage(searches, "strategy"),
        "goal_usage": _usage(searches, "operational_goal"),
        "goal_conflicts": conflicts,
        "top_cultures": [{"name": n, "count": c} for n, c in culture_counter.most_common(5)],
    }
