"""
Competitive-context classification for competitor citations.

Two independent judgements are made on a competitor's sentence:

- compared_with_brand: the sentence names the brand AND uses comparison
  language ("vs", "compared to", "instead of", ...).
- competitive_context: which pattern family frames the sentence, checked in
  precedence order better -> worse -> similar -> mentioned_together.

For the better/worse families the language is attributed to whichever name
appears first in the sentence. Name positions use str.find(), so a name
that is absent counts as position -1.
"""

from typing import Literal

from citation_watcher.config.loader import default_rules
from citation_watcher.config.schema import EngineRules

from .mention_detector import validate_entity_name

CompetitiveContext = Literal[
    "competitor_better",
    "brand_better",
    "competitor_worse",
    "brand_worse",
    "similar",
    "mentioned_together",
]


def _contains_any(lower_text: str, phrases: list[str]) -> bool:
    return any(phrase in lower_text for phrase in phrases)


def check_if_compared_with_brand(
    text: str, brand_name: str, rules: EngineRules | None = None
) -> bool:
    """
    Check whether a sentence compares something with the brand.

    Args:
        text: Competitor citation sentence
        brand_name: The tracked brand's name
        rules: Classification rules; bundled v1 rules if None

    Returns:
        True if the sentence contains the brand name and any comparison keyword

    Raises:
        InvalidInputError: If brand_name is empty, whitespace or not a string

    Examples:
        >>> check_if_compared_with_brand("Globex vs Acme", "Acme")
        True
        >>> check_if_compared_with_brand("Globex is fast", "Acme")
        False
    """
    validate_entity_name(brand_name)
    competitive_rules = (rules or default_rules()).competitive
    lower_text = text.lower()

    return _contains_any(
        lower_text, competitive_rules.comparison_keywords
    ) and brand_name.lower() in lower_text


def classify_competitive_context(
    text: str,
    brand_name: str,
    competitor_name: str,
    rules: EngineRules | None = None,
) -> CompetitiveContext:
    """
    Classify how a sentence frames a competitor relative to the brand.

    Args:
        text: Competitor citation sentence
        brand_name: The tracked brand's name
        competitor_name: The competitor this citation belongs to
        rules: Classification rules; bundled v1 rules if None

    Returns:
        One of competitor_better, brand_better, competitor_worse,
        brand_worse, similar, mentioned_together

    Raises:
        InvalidInputError: If either name is empty, whitespace or not a string

    Examples:
        >>> classify_competitive_context(
        ...     "Acme is better than Globex, though similar in pricing", "Acme", "Globex"
        ... )
        'brand_better'
        >>> classify_competitive_context("Globex and Acme both exist", "Acme", "Globex")
        'mentioned_together'
    """
    validate_entity_name(brand_name)
    validate_entity_name(competitor_name)
    competitive_rules = (rules or default_rules()).competitive
    lower_text = text.lower()

    competitor_first = lower_text.find(competitor_name.lower()) < lower_text.find(
        brand_name.lower()
    )

    if _contains_any(lower_text, competitive_rules.better_patterns):
        return "competitor_better" if competitor_first else "brand_better"

    if _contains_any(lower_text, competitive_rules.worse_patterns):
        return "competitor_worse" if competitor_first else "brand_worse"

    if _contains_any(lower_text, competitive_rules.similar_patterns):
        return "similar"

    return "mentioned_together"
