"""
Configuration constants for Citation Watcher.

This module contains global constants used across the application
to avoid tight coupling between modules.
"""

# Confidence for citations created from an entity-name match in a sentence
NAME_MATCH_CONFIDENCE = 0.95

# Confidence for source URL records; the URL came straight from the answer's sources
SOURCE_URL_CONFIDENCE = 1.0

# citation text of a source URL record is "Source URL: <url>"
SOURCE_URL_TEXT_PREFIX = "Source URL: "

SENTIMENT_LABELS = ("positive", "neutral", "negative")

COMPETITIVE_CONTEXTS = (
    "competitor_better",
    "brand_better",
    "competitor_worse",
    "brand_worse",
    "similar",
    "mentioned_together",
)
