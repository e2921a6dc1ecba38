"""
LLM integration layer.

Responsibilities:
- Manage Groq API configuration and credentials.
- Extract menu items and menu sophistication from pasted menu text.
- Map the menu analysis onto a small, confidence-weighted audio adjustment.
- Graceful fallback to a zero-effect adjustment when the LLM is unavailable.
"""
