"""
Entity mention detection for Citation Watcher.

This module scans segmented answer sentences for an entity name and turns
every matching sentence into a CitationCandidate annotated with its
neighbouring sentences.

Key features:
- Case-insensitive substring matching ("acme" matches "ACME" and "ACMEcorp")
- One candidate per matching sentence, in sentence order
- Context windows are the literal previous/next sentence ("" at boundaries)
- Candidates are immutable value objects; later pipeline stages derive new
  copies with dataclasses.replace()

Matching is not word-boundary based, so short names also match inside longer
words ("Cats" inside "Catskills").
"""

from dataclasses import asdict, dataclass

from citation_watcher.config.constants import (
    COMPETITIVE_CONTEXTS,
    NAME_MATCH_CONFIDENCE,
    SENTIMENT_LABELS,
)
from citation_watcher.exceptions import InvalidInputError

from .segmenter import Sentence


@dataclass(frozen=True)
class CitationCandidate:
    """
    A sentence of an answer that mentions one entity.

    Attributes:
        text: The sentence containing the mention
        context_before: Previous sentence text, "" for the first sentence
        context_after: Next sentence text, "" for the last sentence
        position: Index of the sentence within the answer
        is_direct_mention: True for name matches
        confidence_score: 0.95 for name matches
        sentiment: "positive", "neutral", "negative", or None until scored
        cited_url: Source URL assigned to this mention, if any
        cited_domain: Bare domain of cited_url, if any
        compared_with_brand: Competitor citations only; brand named alongside
            comparison language
        competitive_context: Competitor citations only; framing relative to
            the brand (see competitive.classify_competitive_context)
    """

    text: str
    context_before: str
    context_after: str
    position: int
    is_direct_mention: bool = True
    confidence_score: float = NAME_MATCH_CONFIDENCE
    sentiment: str | None = None
    cited_url: str | None = None
    cited_domain: str | None = None
    compared_with_brand: bool = False
    competitive_context: str | None = None

    def __post_init__(self):
        """Validate sentiment and competitive_context are known values."""
        if self.sentiment is not None and self.sentiment not in SENTIMENT_LABELS:
            raise ValueError(
                f"sentiment must be one of {SENTIMENT_LABELS}, got: {self.sentiment}"
            )
        if (
            self.competitive_context is not None
            and self.competitive_context not in COMPETITIVE_CONTEXTS
        ):
            raise ValueError(
                f"competitive_context must be one of {COMPETITIVE_CONTEXTS}, "
                f"got: {self.competitive_context}"
            )

    def to_dict(self, competitive: bool = False) -> dict:
        """
        Serialize to a JSON-ready dict.

        Args:
            competitive: Include compared_with_brand and competitive_context
                (competitor citations only)
        """
        data = asdict(self)
        if not competitive:
            data.pop("compared_with_brand")
            data.pop("competitive_context")
        return data


def validate_entity_name(name: object) -> str:
    """
    Check an entity name is usable for matching.

    Raises:
        InvalidInputError: If name is not a string or is empty/whitespace
    """
    if not isinstance(name, str):
        raise InvalidInputError(
            f"Entity name must be a string, got: {type(name).__name__}"
        )
    if not name or name.isspace():
        raise InvalidInputError("Entity name cannot be empty or whitespace")
    return name


def detect_mentions(
    sentences: list[Sentence], entity_name: str
) -> list[CitationCandidate]:
    """
    Find every sentence that mentions entity_name.

    Args:
        sentences: Output of split_sentences() for one answer
        entity_name: Brand or competitor name to look for

    Returns:
        One CitationCandidate per matching sentence, in sentence order.
        URLs and sentiment are left unset.

    Raises:
        InvalidInputError: If entity_name is empty, whitespace or not a string

    Example:
        >>> from citation_watcher.extractor.segmenter import split_sentences
        >>> sentences = split_sentences("Intro. Acme rocks. Outro.")
        >>> [c.text for c in detect_mentions(sentences, "acme")]
        ['Acme rocks']
    """
    validate_entity_name(entity_name)
    needle = entity_name.lower()

    candidates: list[CitationCandidate] = []
    for i, sentence in enumerate(sentences):
        if needle not in sentence.text.lower():
            continue

        context_before = sentences[i - 1].text if i > 0 else ""
        context_after = sentences[i + 1].text if i + 1 < len(sentences) else ""

        candidates.append(
            CitationCandidate(
                text=sentence.text,
                context_before=context_before,
                context_after=context_after,
                position=sentence.index,
            )
        )

    return candidates
