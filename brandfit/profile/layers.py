from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass

from .constants import (
    BUSINESS_TYPE_ADJUSTMENTS,
    BUSINESS_TYPE_NOTES,
    BUSINESS_TYPE_WEIGHT,
    CONFLICT_VIBE_MULTIPLIER,
    CULTURAL_WEIGHT,
    DEFAULT_GOAL,
    GOAL_VIBE_CONFLICTS,
    OPERATIONAL_GOALS,
    TIME_OF_DAY_ADJUSTMENTS,
    TIME_OF_DAY_WEIGHT,
    VIBE_ATMOSPHERE_ADJUSTMENTS,
    VIBE_ATMOSPHERE_NOTES,
    VIBE_ATMOSPHERE_WEIGHT,
    VIBE_WORD_ADJUSTMENTS,
    VIBE_WORDS_WEIGHT,
)
from .models import AdjustmentLayer, BrandAnswers, CulturalContext

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Conflict detection
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GoalResolution:
    requested: str | None
    resolved: str
    conflicting_words: tuple[str, ...] = ()
    vibe_multiplier: float = 1.0

    @property
    def conflict(self) -> bool:
        return bool(self.conflicting_words)


def detect_conflict(goal: str | None, vibe_words: list[str]) -> tuple[str, ...]:
    """Return the vibe words that contradict *goal*, in selection order."""
    conflicts = GOAL_VIBE_CONFLICTS.get(goal or "", frozenset())
    return tuple(w for w in vibe_words if w in conflicts)


def resolve_operational_goal(goal: str | None, vibe_words: list[str]) -> GoalResolution:
    """Switch to the neutral goal and triple the vibe-word weight on conflict."""
    conflicting = detect_conflict(goal, vibe_words)
    if conflicting:
        logger.info(
            "Operational goal %s conflicts with vibe words %s, using %s",
            goal, ", ".join(conflicting), DEFAULT_GOAL,
        )
        return GoalResolution(
            requested=goal,
            resolved=DEFAULT_GOAL,
            conflicting_words=conflicting,
            vibe_multiplier=CONFLICT_VIBE_MULTIPLIER,
        )
    resolved = goal if goal in OPERATIONAL_GOALS else DEFAULT_GOAL
    return GoalResolution(requested=goal, resolved=resolved)


# ---------------------------------------------------------------------------
# Layer builders
# ---------------------------------------------------------------------------


def _format_delta(feature: str, value: float) -> str:
    sign = "+" if value > 0 else ""
    if feature == "tempo":
        return f"{feature}:{sign}{value:g}BPM"
    return f"{feature}:{sign}{value * 100:.0f}"


def cultural_layer(context: CulturalContext | None) -> AdjustmentLayer | None:
    if context is None:
        return None
    return AdjustmentLayer(
        name="cultural_context",
        weight=CULTURAL_WEIGHT,
        deltas=dict(context.audio_adjustments),
    )


def business_type_layer(business_type: str | None) -> AdjustmentLayer | None:
    if not business_type:
        return None
    return AdjustmentLayer(
        name="business_type",
        weight=BUSINESS_TYPE_WEIGHT,
        deltas=dict(BUSINESS_TYPE_ADJUSTMENTS.get(business_type, {})),
    )


def vibe_atmosphere_layer(vibe: str | None) -> AdjustmentLayer | None:
    if not vibe:
        return None
    return AdjustmentLayer(
        name="vibe_atmosphere",
        weight=VIBE_ATMOSPHERE_WEIGHT,
        deltas=dict(VIBE_ATMOSPHERE_ADJUSTMENTS.get(vibe, {})),
    )


def time_of_day_layer(time_atmosphere: dict[str, str]) -> AdjustmentLayer | None:
    if not time_atmosphere:
        return None
    deltas: defaultdict[str, float] = defaultdict(float)
    for choice in time_atmosphere.values():
        for feature, delta in TIME_OF_DAY_ADJUSTMENTS.get(choice, {}).items():
            deltas[feature] += delta
    return AdjustmentLayer(name="time_of_day", weight=TIME_OF_DAY_WEIGHT, deltas=dict(deltas))


def vibe_words_layer(vibe_words: list[str], multiplier: float = 1.0) -> AdjustmentLayer | None:
    if not vibe_words:
        return None
    deltas: defaultdict[str, float] = defaultdict(float)
    for word in vibe_words:
        for feature, delta in VIBE_WORD_ADJUSTMENTS.get(word, {}).items():
            deltas[feature] += delta
    return AdjustmentLayer(
        name="vibe_words",
        weight=VIBE_WORDS_WEIGHT * multiplier,
        deltas=dict(deltas),
    )


def build_layers(
    answers: BrandAnswers,
    cultural_context: CulturalContext | None,
    resolution: GoalResolution,
) -> tuple[list[AdjustmentLayer], list[str]]:
    """Build every active adjustment layer in application order.

    Returns the layers together with the reasoning lines describing them.
    """
    layers: list[AdjustmentLayer] = []
    reasoning: list[str] = []

    layer = cultural_layer(cultural_context)
    if layer is not None:
        layers.append(layer)
        reasoning.append(
            f"Cultural context (30%): {cultural_context.culture} ({cultural_context.confidence.value})"
        )
        reasoning.append(f"Match: {'; '.join(cultural_context.match_reasons)}")

    layer = business_type_layer(answers.business_type)
    if layer is not None:
        layers.append(layer)
        note = BUSINESS_TYPE_NOTES.get(answers.business_type, answers.business_type)
        reasoning.append(f"{note} (15%)")

    layer = vibe_atmosphere_layer(answers.vibe)
    if layer is not None:
        layers.append(layer)
        note = VIBE_ATMOSPHERE_NOTES.get(answers.vibe, answers.vibe)
        reasoning.append(f"{note} (12%)")

    layer = time_of_day_layer(answers.time_atmosphere)
    if layer is not None:
        layers.append(layer)
        reasoning.append(f"Time-based (8%): optimized for {', '.join(answers.time_atmosphere)}")

    layer = vibe_words_layer(answers.vibe_words, resolution.vibe_multiplier)
    if layer is not None:
        layers.append(layer)
        share = f"{round(layer.weight * 100)}%"
        if resolution.conflict:
            share += " (conflict boosted)"
        reasoning.append(f"Vibe words ({share}): {', '.join(answers.vibe_words)}")
        if layer.deltas:
            impact = ", ".join(_format_delta(f, v) for f, v in layer.deltas.items())
            reasoning.append(f"Vibe impact: {impact}")

    return layers, reasoning
