from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Mapping

from .constants import BASE_GOAL_WEIGHT
from .models import SCORED_FEATURES, AdjustmentLayer, FeatureVector, SignalAdjustment

logger = logging.getLogger(__name__)

TEMPO_RANGE = (45, 160)
FEATURE_RANGE = (0.02, 0.98)
MIN_SIGNAL_CONFIDENCE = 0.3


@dataclass(frozen=True)
class SignalWindow:
    """How strongly an external analysis may nudge the blended profile."""

    label: str
    scale: float
    limit: float
    tempo_limit: float


WEBSITE_WINDOW = SignalWindow(label="Website analysis", scale=0.15, limit=0.05, tempo_limit=5)
MENU_WINDOW = SignalWindow(label="Menu analysis", scale=0.10, limit=0.03, tempo_limit=3)

# signal field -> feature it nudges
_SIGNAL_FIELDS: dict[str, str] = {
    "acousticness_boost": "acousticness",
    "energy_adjustment": "energy",
    "instrumentalness_boost": "instrumentalness",
    "tempo_adjustment": "tempo",
    "valence_adjustment": "valence",
}


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def normalized_weights(layers: list[AdjustmentLayer]) -> dict[str, float]:
    """Share of the blend taken by the base goal and by each layer. Sums to 1."""
    total = BASE_GOAL_WEIGHT + sum(layer.weight for layer in layers)
    weights = {"operational_goal": BASE_GOAL_WEIGHT / total}
    for layer in layers:
        weights[layer.name] = layer.weight / total
    return weights


def apply_layers(base: Mapping[str, float], layers: list[AdjustmentLayer]) -> dict[str, float]:
    features = dict(base)
    total = BASE_GOAL_WEIGHT + sum(layer.weight for layer in layers)
    for layer in layers:
        share = layer.weight / total
        for feature, delta in layer.deltas.items():
            if feature not in features:
                continue
            adjustment = delta * share
            features[feature] += adjustment
            if abs(adjustment) > (1 if feature == "tempo" else 0.02):
                logger.debug("%s: %s %+.3f", layer.name, feature, adjustment)
    return features


def apply_external_signal(
    features: dict[str, float],
    signal: SignalAdjustment | None,
    window: SignalWindow,
) -> bool:
    """Nudge *features* in place by a small clamped amount. Returns True if applied."""
    if signal is None:
        return False
    if signal.confidence_score < MIN_SIGNAL_CONFIDENCE:
        logger.debug(
            "%s ignored: confidence %.2f below %.2f",
            window.label, signal.confidence_score, MIN_SIGNAL_CONFIDENCE,
        )
        return False
    for field_name, feature in _SIGNAL_FIELDS.items():
        limit = window.tempo_limit if feature == "tempo" else window.limit
        nudge = _clamp(getattr(signal, field_name) * window.scale, -limit, limit)
        features[feature] = features.get(feature, 0.0) + nudge
    return True


def clamp_features(features: Mapping[str, float]) -> FeatureVector:
    clamped = dict(features)
    clamped["tempo"] = int(_clamp(round_half_up(clamped["tempo"]), *TEMPO_RANGE))
    for feature in SCORED_FEATURES:
        if feature in clamped:
            clamped[feature] = _clamp(clamped[feature], *FEATURE_RANGE)
    return FeatureVector(**clamped)


def blend_profile(
    base: Mapping[str, float],
    layers: list[AdjustmentLayer],
    website: SignalAdjustment | None = None,
    menu: SignalAdjustment | None = None,
) -> tuple[FeatureVector, list[str]]:
    """Apply weighted layers and tertiary signal nudges onto *base*, then clamp."""
    features = apply_layers(base, layers)
    reasoning: list[str] = []
    for signal, window in ((website, WEBSITE_WINDOW), (menu, MENU_WINDOW)):
        if apply_external_signal(features, signal, window):
            reasoning.append(f"{window.label}: integrated")
    return clamp_features(features), reasoning
