"""
Playlist selection.

Responsibilities:
- Run the search strategy ladder (cultural, secondary genres, pure features).
- Score tracks on audio and release year.
- Sort by popularity and spread current hits through the result.
- Report an overall match-quality percentage.
"""
