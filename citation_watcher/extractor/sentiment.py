"""
Lexicon-weighted sentiment scoring for citation sentences.

The scorer is deterministic and rule-based:
1. Lower-case the sentence and add the weight of every positive/negative
   lexicon phrase found as a substring (each phrase counts once).
2. Run the negation regexes against the original sentence; every pattern
   that matches adds a flat penalty (penalties stack).
3. Subtract the penalty from the positive score (floored at 0) and add it
   to the negative score.
4. A label wins only if it beats the other score AND reaches the threshold;
   ties and weak signals are neutral.

Phrases match as substrings: "good" also fires inside "goodwill".
Lexicons, patterns, penalty and threshold come from EngineRules.
"""

from dataclasses import dataclass
from typing import Literal

from citation_watcher.config.loader import default_rules
from citation_watcher.config.schema import EngineRules

Sentiment = Literal["positive", "neutral", "negative"]


@dataclass(frozen=True)
class SentimentScore:
    """
    Score breakdown behind a sentiment label.

    Attributes:
        positive: Positive score after the negation penalty was subtracted
        negative: Negative score after the negation penalty was added
        negation_penalty: Total penalty from matching negation patterns
        label: Resulting sentiment label
    """

    positive: int
    negative: int
    negation_penalty: int
    label: Sentiment


def _lexicon_score(lower_text: str, lexicon: dict[str, int]) -> int:
    return sum(weight for phrase, weight in lexicon.items() if phrase in lower_text)


def score_sentiment(text: str, rules: EngineRules | None = None) -> SentimentScore:
    """
    Score a sentence and return the full breakdown.

    Args:
        text: Sentence to score
        rules: Classification rules; bundled v1 rules if None

    Returns:
        SentimentScore with adjusted scores, penalty and label

    Example:
        >>> score = score_sentiment("This is not good.")
        >>> (score.positive, score.negative, score.negation_penalty, score.label)
        (0, 3, 2, 'negative')
    """
    sentiment_rules = (rules or default_rules()).sentiment

    if not text:
        return SentimentScore(positive=0, negative=0, negation_penalty=0, label="neutral")

    lower_text = text.lower()
    positive_score = _lexicon_score(lower_text, sentiment_rules.positive)
    negative_score = _lexicon_score(lower_text, sentiment_rules.negative)

    negation_penalty = sum(
        sentiment_rules.negation_penalty
        for pattern in sentiment_rules.compiled_negations
        if pattern.search(text)
    )

    positive_score = max(0, positive_score - negation_penalty)
    negative_score += negation_penalty

    threshold = sentiment_rules.threshold
    label: Sentiment = "neutral"
    if positive_score > negative_score and positive_score >= threshold:
        label = "positive"
    elif negative_score > positive_score and negative_score >= threshold:
        label = "negative"

    return SentimentScore(
        positive=positive_score,
        negative=negative_score,
        negation_penalty=negation_penalty,
        label=label,
    )


def analyze_sentiment(text: str, rules: EngineRules | None = None) -> Sentiment:
    """
    Classify a sentence as positive, neutral or negative.

    Args:
        text: Sentence to classify
        rules: Classification rules; bundled v1 rules if None

    Returns:
        "positive", "neutral" or "negative"

    Examples:
        >>> analyze_sentiment("Acme is an industry leader")
        'positive'
        >>> analyze_sentiment("Acme is a decent option")
        'neutral'
    """
    return score_sentiment(text, rules).label
