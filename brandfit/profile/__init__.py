"""
Music-profile engine.

Responsibilities:
- Resolve the operational goal and detect goal/vibe conflicts.
- Detect a cultural context from the venue name, menu and vibe.
- Blend weighted adjustment layers and external signals onto the goal baseline.
- Recommend secondary genres and year preferences.
- Estimate business impact, ROI and an implementation plan.
"""
