"""
Track catalog.

Responsibilities:
- Load the catalog workbook and convert its 1-100 scale to 0-1 features.
- Cache the loaded catalog with a TTL and an injectable clock.
- Summarise the catalog (coverage, genres, averages, tempo buckets).
- Run a single feature-based search pass with genre and goal filters.
"""
