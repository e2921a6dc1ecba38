from __future__ import annotations

from .constants import VIBE_WORDS_WEIGHT
from .models import FeatureVector, ImplementationPlan, MusicProfile, RoiEstimate

DIFFERENTIATING_VIBES = ("luxurious", "rough", "energetic", "youthful")


def predicted_impact(priority: str, features: FeatureVector) -> dict[str, str]:
    """Expected business effect of *features* for the goal's priority."""
    if priority == "maximize_spending":
        tempo_score = 1.0 if features.tempo <= 80 else max(0.0, 1 - (features.tempo - 80) / 40)
        dwell = round(20 + tempo_score * 36)
        revenue = round(5 + tempo_score * 20)
        return {
            "dwell_time_increase": f"+{dwell}%",
            "revenue_per_customer": f"+{revenue}%",
            "table_turnover": f"{'-15%' if tempo_score < 0.5 else '-5%'} (trade-off)",
            "customer_satisfaction": "+25%",
        }
    if priority == "maximize_throughput":
        tempo_score = 1.0 if features.tempo >= 100 else max(0.0, (features.tempo - 60) / 40)
        turnover = round(10 + tempo_score * 25)
        return {
            "table_turnover": f"+{turnover}%",
            "service_speed": f"+{round(tempo_score * 20)}%",
            "revenue_per_customer": f"{'-10%' if tempo_score > 0.7 else '+5%'} (trade-off)",
            "customer_satisfaction": "+15%",
        }
    return {
        "balanced_performance": "+15% overall efficiency",
        "customer_satisfaction": "+20%",
        "revenue_increase": "+12%",
        "operational_efficiency": "+18%",
    }


def estimate_roi(profile: MusicProfile, vibe_words: list[str] | None = None) -> RoiEstimate:
    f = profile.features
    base = 5
    if f.acousticness > 0.7:
        base += 15
    if f.tempo < 80:
        base += 12
    if f.instrumentalness > 0.6:
        base += 8
    if f.energy < 0.4:
        base += 10

    context = profile.cultural_context
    if context is not None and context.score > 0.5:
        base += round(context.score * 10)

    # one point per targeted demographic
    base += len(profile.demographics)

    if any(v in DIFFERENTIATING_VIBES for v in vibe_words or []):
        base += 3

    return RoiEstimate(
        revenue_increase=f"{max(5, base)}%",
        dwell_time_increase="+56%" if f.tempo < 80 else "+25%",
        customer_satisfaction="+25%",
        monthly_impact=f"€{base * 50}",
        implementation_time="2-3 weeks",
    )


def _tempo_label(tempo: float) -> str:
    if tempo < 80:
        return "slow for longer stays"
    if tempo > 100:
        return "fast for turnover"
    return "balanced"


def implementation_plan(profile: MusicProfile) -> ImplementationPlan:
    f = profile.features
    immediate = [
        f"Target tempo: {f.tempo} BPM ({_tempo_label(f.tempo)})",
        f"Energy level: {f.energy * 10:.1f}/10",
        f"Acousticness: {f.acousticness * 10:.1f}/10",
        f"Instrumentalness: {f.instrumentalness * 10:.1f}/10",
    ]
    weekly = [
        "A/B test different tempo ranges during peak hours",
        "Monitor customer dwell time and satisfaction metrics",
        "Implement time-of-day adjustments based on atmosphere settings",
        "Track correlation between music features and sales data",
    ]
    monthly = [
        "Analyze revenue impact vs music feature data",
        "Seasonal adjustments to energy and valence levels",
        "Staff feedback collection and feature optimization",
        "Expand playlist based on successful feature combinations",
    ]

    if profile.cultural_context is not None:
        culture = profile.cultural_context.culture
        immediate.append(f"Cultural theme: {culture} music integration")
        weekly.append(f"Test {culture} genre performance during different time slots")

    if profile.demographics:
        immediate.append(
            f"Target demographics: {', '.join(profile.demographics)} - "
            f"optimized for {profile.year_preferences.description}"
        )
        weekly.append("Monitor demographic response to music selection and adjust year preferences if needed")

    if any(layer.name == "vibe_words" and layer.weight > VIBE_WORDS_WEIGHT for layer in profile.layers):
        immediate.append("Vibes took priority over the business goal - monitor guest response")
        weekly.append("Compare the auto-balanced goal against the original goal during quiet hours")

    if profile.excluded_genres:
        immediate.append(f"Genre exclusions: {len(profile.excluded_genres)} categories filtered out")
        weekly.append("Monitor if excluded genres accidentally appear and adjust filters")

    return ImplementationPlan(immediate=immediate, weekly=weekly, monthly=monthly)
