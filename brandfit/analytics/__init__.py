"""
Search analytics.

Responsibilities:
- Record one event per profile computation and playlist search.
- Aggregate searches into usage and quality summaries for the admin view.
"""
