from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from .blender import blend_profile, normalized_weights
from .constants import OPERATIONAL_GOALS
from .cultural import detect_cultural_context
from .genres import recommend_genres, with_contemporary_genres
from .impact import predicted_impact
from .layers import build_layers, resolve_operational_goal
from .models import BrandAnswers, ExternalSignals, MusicProfile, SignalAdjustment
from .years import EraLean, resolve_year_preferences

logger = logging.getLogger(__name__)

MAX_REASONING_LINES = 12
MIN_REASONING_LINES = 8
GENERIC_REASONING = (
    "Tempo is the strongest lever on how long guests stay",
    "Acoustic and instrumental music keeps conversation comfortable",
    "Energy and valence set the perceived pace of service",
)


def _coerce_signal(value: Any, label: str) -> SignalAdjustment | None:
    if value is None or isinstance(value, SignalAdjustment):
        return value
    try:
        return SignalAdjustment.model_validate(value)
    except ValidationError:
        logger.warning("Ignoring malformed %s signal", label, exc_info=True)
        return None


def _coerce_signals(external_signals: ExternalSignals | dict | None) -> ExternalSignals:
    if external_signals is None:
        return ExternalSignals()
    if isinstance(external_signals, ExternalSignals):
        return external_signals
    if not isinstance(external_signals, dict):
        logger.warning("Ignoring malformed external signals: %r", external_signals)
        return ExternalSignals()
    # Validate each signal on its own so one bad payload does not drop the other.
    menu_items = external_signals.get("menu_items") or []
    if not isinstance(menu_items, list):
        logger.warning("Ignoring malformed menu_items: %r", menu_items)
        menu_items = []
    return ExternalSignals(
        website=_coerce_signal(external_signals.get("website"), "website"),
        menu=_coerce_signal(external_signals.get("menu"), "menu"),
        menu_items=[str(item) for item in menu_items],
    )


def compute_music_profile(
    answers: BrandAnswers | dict,
    external_signals: ExternalSignals | dict | None = None,
) -> MusicProfile:
    """
    Turn questionnaire answers into target audio features, genres and year preferences.

    The operational goal supplies the base features; cultural, business
    type, atmosphere, time-of-day and vibe-word layers are blended on top
    by normalized weight, followed by small nudges from website/menu analysis.
    """
    if not isinstance(answers, BrandAnswers):
        answers = BrandAnswers.model_validate(answers)
    signals = _coerce_signals(external_signals)

    resolution = resolve_operational_goal(answers.operational_goal, answers.vibe_words)
    goal = OPERATIONAL_GOALS[resolution.resolved]

    reasoning: list[str] = []
    if resolution.conflict:
        reasoning.append(
            f"Vibe conflict: {', '.join(resolution.conflicting_words)} contradicts "
            f"{resolution.requested}, switched to {resolution.resolved} and vibes take priority"
        )
    reasoning.append(f"Operational goal (40%): {goal.reasoning}")

    cultural_context = detect_cultural_context(answers.restaurant_name, signals.menu_items, answers.vibe)

    layers, layer_reasoning = build_layers(answers, cultural_context, resolution)
    reasoning.extend(layer_reasoning)

    features, signal_reasoning = blend_profile(goal.target_features, layers, signals.website, signals.menu)
    reasoning.extend(signal_reasoning)

    genres = recommend_genres(
        answers.business_type,
        answers.vibe_words,
        answers.time_atmosphere,
        cultural_context,
        resolution.resolved,
        answers.excluded_genres,
    )
    if answers.excluded_genres:
        reasoning.append(f"Excluded genres: {', '.join(answers.excluded_genres)}")

    year_preferences, era, year_reasoning = resolve_year_preferences(
        answers.demographics, answers.vibe_words, answers.vibe, cultural_context
    )
    reasoning.extend(year_reasoning)
    if era is EraLean.modern:
        genres = with_contemporary_genres(genres, answers.excluded_genres)

    reasoning.append(
        f"Final profile: {features.tempo} BPM, energy {features.energy:.2f}, "
        f"acousticness {features.acousticness:.2f}"
    )
    if answers.demographics:
        reasoning.append(f"Demographics: {', '.join(answers.demographics)}")

    if len(reasoning) < MIN_REASONING_LINES:
        reasoning.extend(GENERIC_REASONING)

    logger.info(
        "Computed profile goal=%s tempo=%s layers=%d culture=%s",
        resolution.resolved,
        features.tempo,
        len(layers),
        cultural_context.culture if cultural_context else None,
    )

    return MusicProfile(
        features=features,
        secondary_genres=genres,
        predicted_impact=predicted_impact(goal.priority, features),
        reasoning=reasoning[:MAX_REASONING_LINES],
        cultural_context=cultural_context,
        operational_goal=resolution.resolved,
        requested_operational_goal=answers.operational_goal,
        year_preferences=year_preferences,
        excluded_genres=list(answers.excluded_genres),
        demographics=list(answers.demographics),
        layers=layers,
        weight_distribution=normalized_weights(layers),
    )
