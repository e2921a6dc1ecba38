"""
Brand-fit background music.

Turns a venue's brand questionnaire into target audio features and selects
matching tracks from a curated catalog.
"""
