from __future__ import annotations

import json
import logging

from groq import Groq
from pydantic import BaseModel, Field

from ..profile.cultural import detect_cultural_context
from ..profile.models import CulturalContext, SignalAdjustment
from .config import DEFAULT_LLM_CONFIG, LLMConfig
from .menu_signals import DEFAULT_SOPHISTICATION, MenuPricing, analyze_menu_pricing, menu_signal_adjustment

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You analyze restaurant menus for background-music planning. "
    "Extract every menu item with its price and judge how sophisticated "
    "the menu is on a 0-1 scale.\n\n"
    "Return ONLY valid JSON in this exact format:\n"
    '{"menu_items": ["Truffle Risotto - €24.50"], "cuisine_type": "italian", '
    '"sophistication_level": 0.8, "price_tier": "upscale", "confidence_score": 0.9}\n'
    "Keep item names as written on the menu. "
    "Cultural cuisine markers (croissant, paella, risotto, fish and chips, moussaka) matter most."
)


class MenuAnalysisRequest(BaseModel):
    menu_text: str = Field(..., min_length=1, description="Menu text as pasted by the venue")
    restaurant_name: str | None = None
    business_type: str | None = None
    vibe: str | None = None


class MenuAnalysis(BaseModel):
    menu_items: list[str] = Field(default_factory=list)
    cuisine_type: str | None = None
    sophistication_level: float = 0.0
    pricing: MenuPricing | None = None
    cultural_context: CulturalContext | None = None
    adjustment: SignalAdjustment = Field(default_factory=SignalAdjustment)
    reasoning: list[str] = Field(default_factory=list)
    llm_used: bool = False


def _build_user_message(request: MenuAnalysisRequest) -> str:
    lines = ["## Venue"]
    if request.restaurant_name:
        lines.append(f"- Name: {request.restaurant_name}")
    if request.business_type:
        lines.append(f"- Business type: {request.business_type}")
    if request.vibe:
        lines.append(f"- Vibe: {request.vibe}")
    lines.append("\n## Menu")
    lines.append(request.menu_text.strip())
    return "\n".join(lines)


def _fallback(reason: str) -> MenuAnalysis:
    return MenuAnalysis(reasoning=[reason])


def _menu_items(value: object) -> list[str]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        return [str(item) for item in value if item]
    return []


def analyze_menu(request: MenuAnalysisRequest, config: LLMConfig = DEFAULT_LLM_CONFIG) -> MenuAnalysis:
    """
    Ask Groq to read the menu, then derive a menu adjustment from it.

    Returns a zero-effect analysis (confidence 0.0) on any failure
    (missing key, timeout, bad JSON, API error), which the blender ignores.
    """
    if not config.enabled or not config.api_key:
        return _fallback("Menu analysis unavailable")

    try:
        client = Groq(api_key=config.api_key, timeout=config.timeout)
        response = client.chat.completions.create(
            model=config.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": _build_user_message(request)},
            ],
            max_tokens=config.max_tokens,
            temperature=config.temperature,
            response_format={"type": "json_object"},
        )

        content = response.choices[0].message.content or ""
        parsed = json.loads(content)
        menu_items = _menu_items(parsed.get("menu_items"))
        sophistication = float(parsed.get("sophistication_level", DEFAULT_SOPHISTICATION))
        confidence = float(parsed.get("confidence_score", 0.0))
        cuisine_type = parsed.get("cuisine_type")

    except Exception:
        logger.warning("Groq menu analysis failed, using neutral menu signal", exc_info=True)
        return _fallback("Menu analysis failed")

    pricing = analyze_menu_pricing(menu_items, request.business_type)
    context = detect_cultural_context(request.restaurant_name, menu_items, request.vibe)
    adjustment = menu_signal_adjustment(sophistication, pricing, context, confidence)

    reasoning = [
        f"Menu sophistication ({sophistication * 10:.1f}/10) -> base adjustments",
        f"Pricing level: {pricing.pricing_level}" + (" (upscale boost)" if pricing.upscale_boost else ""),
    ]
    if context is not None:
        reasoning.append(f"Cultural: {context.culture} ({context.confidence.value})")
        reasoning.extend(context.match_reasons)
    else:
        reasoning.append("No cultural context")

    return MenuAnalysis(
        menu_items=menu_items,
        cuisine_type=str(cuisine_type) if cuisine_type else None,
        sophistication_level=sophistication,
        pricing=pricing,
        cultural_context=context,
        adjustment=adjustment,
        reasoning=reasoning[:6],
        llm_used=True,
    )
