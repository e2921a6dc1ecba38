"""
Deterministic half of menu analysis.

Prices and upscale wording decide a pricing level within the venue's meal
type; that and the menu's sophistication become a SignalAdjustment for the
profile blender.
"""
from __future__ import annotations

import re
from dataclasses import dataclass

from pydantic import BaseModel, Field

from ..profile.models import CulturalContext, SignalAdjustment

PRICE_PATTERN = re.compile(r"[€$£¥](\d+(?:[.,]\d{2})?)")
UPSCALE_KEYWORDS = (
    "artisanal",
    "house-made",
    "house made",
    "handcrafted",
    "locally sourced",
    "organic",
    "farm-to-table",
    "seasonal",
    "chef's special",
    "signature",
    "premium",
)
UPSCALE_KEYWORD_THRESHOLD = 3
UPSCALE_BOOST = 0.2
DEFAULT_SOPHISTICATION = 0.7

BREAKFAST_INDICATORS = (
    "pancake", "waffle", "egg", "toast", "croissant", "yogurt", "granola", "bacon", "omelette", "coffee", "tea",
)
DINNER_INDICATORS = (
    "steak", "wine", "course", "lobster", "filet", "tasting menu", "dessert wine", "aperitif", "3-course", "4-course",
)
LUNCH_INDICATORS = ("sandwich", "salad", "soup", "wrap", "burger", "pasta", "pizza")


@dataclass(frozen=True)
class PriceThresholds:
    budget: float
    mid_low: float
    mid_high: float
    premium: float


PRICE_THRESHOLDS: dict[str, PriceThresholds] = {
    "breakfast": PriceThresholds(budget=8, mid_low=8, mid_high=12, premium=15),
    "brunch": PriceThresholds(budget=8, mid_low=8, mid_high=12, premium=15),
    "lunch": PriceThresholds(budget=12, mid_low=12, mid_high=18, premium=25),
    "dinner": PriceThresholds(budget=18, mid_low=18, mid_high=30, premium=40),
}


class MenuPricing(BaseModel):
    pricing_level: str = "mid-range"
    average_price: float = 0.0
    price_range: tuple[float, float] = (0.0, 0.0)
    meal_type: str = "lunch"
    upscale_keywords_found: int = 0
    upscale_boost: float = 0.0
    reasoning: list[str] = Field(default_factory=list)


def extract_prices(menu_items: list[str]) -> list[float]:
    prices: list[float] = []
    for item in menu_items:
        match = PRICE_PATTERN.search(item)
        if match:
            prices.append(float(match.group(1).replace(",", ".")))
    return prices


def detect_meal_type(menu_items: list[str], business_type: str | None, prices: list[float]) -> str:
    content = " ".join(menu_items).lower()
    if business_type == "brunch_breakfast":
        return "breakfast" if any(i in content for i in BREAKFAST_INDICATORS) else "brunch"

    dinner = any(i in content for i in DINNER_INDICATORS)
    lunch = any(i in content for i in LUNCH_INDICATORS)
    if dinner and not lunch:
        return "dinner"
    if lunch and not dinner:
        return "lunch"
    # Mixed or unclear menu: let the average price decide.
    if prices:
        return "dinner" if sum(prices) / len(prices) > 25 else "lunch"
    return "lunch"


def _pricing_level(average: float, thresholds: PriceThresholds) -> str:
    if average >= thresholds.premium:
        return "premium"
    if thresholds.mid_low <= average <= thresholds.mid_high:
        return "mid-range"
    if average < thresholds.budget:
        return "budget"
    return "upscale"


def analyze_menu_pricing(menu_items: list[str], business_type: str | None = None) -> MenuPricing:
    prices = extract_prices(menu_items)
    meal_type = detect_meal_type(menu_items, business_type, prices)

    if not prices:
        return MenuPricing(
            meal_type=meal_type,
            reasoning=["No prices detected in menu", f"Assumed meal type: {meal_type} based on business context"],
        )

    keyword_count = sum(1 for item in menu_items for k in UPSCALE_KEYWORDS if k in item.lower())
    average = sum(prices) / len(prices)
    thresholds = PRICE_THRESHOLDS[meal_type]
    level = _pricing_level(average, thresholds)

    boost = 0.0
    if keyword_count >= UPSCALE_KEYWORD_THRESHOLD:
        boost = UPSCALE_BOOST
        level = {"mid-range": "upscale", "budget": "mid-range"}.get(level, level)

    return MenuPricing(
        pricing_level=level,
        average_price=round(average, 2),
        price_range=(min(prices), max(prices)),
        meal_type=meal_type,
        upscale_keywords_found=keyword_count,
        upscale_boost=boost,
        reasoning=[
            f"Business type: {business_type or 'unknown'} -> meal type: {meal_type}",
            f"Average price: €{average:.2f} -> {level} {meal_type}",
            f"Upscale keywords found: {keyword_count}" + (" (pricing boost applied)" if boost else ""),
        ],
    )


def menu_signal_adjustment(
    sophistication: float,
    pricing: MenuPricing,
    cultural_context: CulturalContext | None,
    confidence: float,
) -> SignalAdjustment:
    cultural_boost = cultural_context.boost_amount if cultural_context else 0.0
    tempo = -8.0 if sophistication > 0.8 else 0.0
    if cultural_context is not None and cultural_context.score > 0.5:
        tempo -= 3
    return SignalAdjustment(
        acousticness_boost=sophistication * 0.15 + pricing.upscale_boost + cultural_boost,
        energy_adjustment=-0.1 if sophistication > 0.8 else 0.05,
        instrumentalness_boost=sophistication * 0.12 + pricing.upscale_boost * 0.5 + cultural_boost * 0.8,
        tempo_adjustment=tempo,
        valence_adjustment=0.05 if cultural_boost > 0 else 0.0,
        confidence_score=max(0.0, min(1.0, confidence)),
    )
