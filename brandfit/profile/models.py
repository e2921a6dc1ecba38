from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

# Dimensions that take part in blending and clamping. Loudness is carried
# through from catalog data but never adjusted or scored.
SCORED_FEATURES: tuple[str, ...] = (
    "energy",
    "acousticness",
    "danceability",
    "valence",
    "instrumentalness",
    "speechiness",
)


class FeatureVector(BaseModel):
    tempo: int | float = Field(..., description="Beats per minute")
    energy: float
    acousticness: float
    danceability: float
    valence: float
    instrumentalness: float
    speechiness: float
    loudness: float | None = Field(default=None, description="dB, not scored")


class AdjustmentLayer(BaseModel):
    name: str
    weight: float = Field(..., ge=0.0)
    deltas: dict[str, float] = Field(default_factory=dict)


class Confidence(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"


class CulturalContext(BaseModel):
    culture: str
    score: float = Field(..., ge=0.0, le=1.0)
    audio_adjustments: dict[str, float] = Field(default_factory=dict)
    cultural_genres: list[str] = Field(default_factory=list)
    boost_amount: float = 0.0
    match_reasons: list[str] = Field(default_factory=list)
    confidence: Confidence


class YearPreference(BaseModel):
    min_year: int
    preferred_years: tuple[int, int]
    recency_weight: float = Field(
        default=0.0, description="Positive favours recent music, negative vintage, 0 disables"
    )
    description: str = ""
    demographic_influence: str | None = None


class GenreWeight(BaseModel):
    genre: str
    weight: float


class SignalAdjustment(BaseModel):
    """Adjustment object produced by website/menu/image analysis."""

    acousticness_boost: float = 0.0
    energy_adjustment: float = 0.0
    instrumentalness_boost: float = 0.0
    tempo_adjustment: float = 0.0
    valence_adjustment: float = 0.0
    confidence_score: float = Field(default=0.0, ge=0.0, le=1.0)


class ExternalSignals(BaseModel):
    website: SignalAdjustment | None = None
    menu: SignalAdjustment | None = None
    menu_items: list[str] = Field(
        default_factory=list, description="Dish names extracted from a menu, used for cultural detection"
    )


class BrandAnswers(BaseModel):
    restaurant_name: str | None = None
    business_type: str | None = Field(default=None, description="e.g. fine_dining, coffee_shop")
    operational_goal: str | None = Field(default=None, description="e.g. high_revenue_per_customer")
    vibe: str | None = Field(default=None, description="Single atmosphere choice, e.g. local_authentic")
    demographics: list[str] = Field(default_factory=list)
    time_atmosphere: dict[str, str] = Field(
        default_factory=dict, description='Time slot -> choice, e.g. {"avond": "avond_intiem"}'
    )
    vibe_words: list[str] = Field(default_factory=list)
    excluded_genres: list[str] = Field(default_factory=list)


class MusicProfile(BaseModel):
    features: FeatureVector
    secondary_genres: list[GenreWeight]
    predicted_impact: dict[str, str]
    reasoning: list[str]
    cultural_context: CulturalContext | None = None
    operational_goal: str
    requested_operational_goal: str | None = None
    year_preferences: YearPreference
    excluded_genres: list[str] = Field(default_factory=list)
    demographics: list[str] = Field(default_factory=list)
    layers: list[AdjustmentLayer] = Field(default_factory=list)
    weight_distribution: dict[str, float] = Field(default_factory=dict)


class RoiEstimate(BaseModel):
    revenue_increase: str
    dwell_time_increase: str
    customer_satisfaction: str
    monthly_impact: str
    implementation_time: str


class ImplementationPlan(BaseModel):
    immediate: list[str]
    weekly: list[str]
    monthly: list[str]


class ProfileRequest(BaseModel):
    answers: BrandAnswers
    external_signals: ExternalSignals | None = None


class ProfileResponse(BaseModel):
    profile: MusicProfile
    roi: RoiEstimate
    implementation_plan: ImplementationPlan
