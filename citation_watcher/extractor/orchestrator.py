"""
Citation extraction orchestrator for one AI-generated answer.

Composes the extraction pipeline for a brand and its competitors:

1. Validate inputs (fail fast with InvalidInputError)
2. Segment the answer once
3. Brand: detect mentions -> assign URLs -> score sentiment
4. Keep every source URL as its own SourceUrlRecord
5. Each active competitor: detect mentions -> assign URLs -> score
   sentiment -> add compared_with_brand and competitive_context

The whole pipeline is a pure function of (text, entities, urls, rules): it
performs no I/O, holds no state between calls and never partially emits.
Persisting the result is the caller's job.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field, replace

from citation_watcher.config.schema import EngineRules, ExtractionRequest
from citation_watcher.exceptions import InvalidInputError

from .competitive import check_if_compared_with_brand, classify_competitive_context
from .mention_detector import CitationCandidate, detect_mentions, validate_entity_name
from .segmenter import Sentence, split_sentences
from .sentiment import analyze_sentiment
from .url_assigner import (
    SourceUrlRecord,
    assign_urls,
    build_url_records,
    validate_citation_urls,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Brand:
    """The tracked brand. Exactly one per extraction."""

    name: str

    @property
    def kind(self) -> str:
        return "brand"


@dataclass(frozen=True)
class Competitor:
    """
    A competitor of the brand.

    Attributes:
        name: Name matched against answer sentences
        id: Optional registry identifier, carried into results
        is_active: Inactive competitors are skipped
    """

    name: str
    id: str | None = None
    is_active: bool = True

    @property
    def kind(self) -> str:
        return "competitor"


Entity = Brand | Competitor


@dataclass(frozen=True)
class CompetitorCitations:
    """Citations found for one competitor."""

    competitor: Competitor
    citations: list[CitationCandidate] = field(default_factory=list)


@dataclass(frozen=True)
class ExtractionResult:
    """
    Everything extracted from one answer.

    Attributes:
        brand: The brand the answer was analyzed for
        brand_citations: Brand mentions with sentiment and URLs
        url_records: One record per supplied source URL
        competitor_citations: Per active competitor, in input order
    """

    brand: Brand
    brand_citations: list[CitationCandidate]
    url_records: list[SourceUrlRecord]
    competitor_citations: list[CompetitorCitations]

    @property
    def total_citations(self) -> int:
        return len(self.brand_citations) + sum(
            len(group.citations) for group in self.competitor_citations
        )

    def to_dict(self) -> dict:
        return {
            "brand": self.brand.name,
            "brand_citations": [c.to_dict() for c in self.brand_citations],
            "url_records": [r.to_dict() for r in self.url_records],
            "competitor_citations": [
                {
                    "competitor": {
                        "name": group.competitor.name,
                        "id": group.competitor.id,
                    },
                    "citations": [
                        c.to_dict(competitive=True) for c in group.citations
                    ],
                }
                for group in self.competitor_citations
            ],
        }


def extract_citations(
    text: str,
    entity_name: str,
    citation_urls: Sequence[str] = (),
    sentences: list[Sentence] | None = None,
) -> list[CitationCandidate]:
    """
    Extract one entity's citations from an answer, with source URLs attached.

    Sentiment and competitive fields are left unset; process_response()
    fills them in.

    Args:
        text: Full answer text
        entity_name: Brand or competitor name
        citation_urls: Ordered source URLs of the answer (possibly empty)
        sentences: Pre-segmented sentences of text, to avoid re-segmenting
            when several entities are scanned

    Returns:
        CitationCandidates in sentence order

    Raises:
        InvalidInputError: If text is not a string, entity_name is empty or
            citation_urls is not a list of strings

    Example:
        >>> citations = extract_citations(
        ...     "Acme is fast. Globex is not.", "Acme", ["https://www.acme.com/x"]
        ... )
        >>> citations[0].cited_domain
        'acme.com'
    """
    if not isinstance(text, str):
        raise InvalidInputError(f"text must be a string, got: {type(text).__name__}")
    urls = validate_citation_urls(citation_urls)

    if sentences is None:
        sentences = split_sentences(text)

    candidates = detect_mentions(sentences, entity_name)
    return assign_urls(candidates, urls)


def _scored_citations(
    text: str,
    entity: Entity,
    urls: list[str],
    sentences: list[Sentence],
    rules: EngineRules | None,
) -> list[CitationCandidate]:
    citations = [
        replace(candidate, sentiment=analyze_sentiment(candidate.text, rules))
        for candidate in extract_citations(text, entity.name, urls, sentences)
    ]
    logger.debug(f"{entity.kind} '{entity.name}': {len(citations)} citations")
    return citations


def _normalize_competitors(competitors: Sequence[Competitor]) -> list[Competitor]:
    seen: set[str] = set()
    normalized = []
    for competitor in competitors:
        if not isinstance(competitor, Competitor):
            raise InvalidInputError(
                f"competitors must contain Competitor entries, "
                f"got: {type(competitor).__name__}"
            )
        validate_entity_name(competitor.name)
        key = competitor.name.lower()
        if key in seen:
            raise InvalidInputError(f"Duplicate competitor name: {competitor.name}")
        seen.add(key)
        normalized.append(competitor)
    return normalized


def process_response(
    text: str,
    brand: Brand | str,
    competitors: Sequence[Competitor] = (),
    citation_urls: Sequence[str] = (),
    rules: EngineRules | None = None,
) -> ExtractionResult:
    """
    Extract brand citations, source URL records and competitor citations.

    Args:
        text: Full answer text
        brand: The tracked brand (or its name)
        competitors: Competitors to scan; inactive ones are skipped
        citation_urls: Ordered source URLs of the answer
        rules: Classification rules; bundled v1 rules if None

    Returns:
        ExtractionResult

    Raises:
        InvalidInputError: For non-string text, empty entity names, duplicate
            competitor names or malformed citation_urls

    Example:
        >>> result = process_response(
        ...     "Acme is an industry leader. Globex is similar to Acme.",
        ...     Brand("Acme"),
        ...     [Competitor("Globex", id="c-1")],
        ... )
        >>> result.competitor_citations[0].citations[0].competitive_context
        'similar'
    """
    if isinstance(brand, str):
        brand = Brand(brand)
    if not isinstance(brand, Brand):
        raise InvalidInputError(f"brand must be a Brand, got: {type(brand).__name__}")
    validate_entity_name(brand.name)

    if not isinstance(text, str):
        raise InvalidInputError(f"text must be a string, got: {type(text).__name__}")

    urls = validate_citation_urls(citation_urls)
    all_competitors = _normalize_competitors(competitors)
    active_competitors = [c for c in all_competitors if c.is_active]

    sentences = split_sentences(text)

    brand_citations = _scored_citations(text, brand, urls, sentences, rules)

    url_records = build_url_records(urls)

    competitor_citations = []
    for competitor in active_competitors:
        citations = [
            replace(
                candidate,
                compared_with_brand=check_if_compared_with_brand(
                    candidate.text, brand.name, rules
                ),
                competitive_context=classify_competitive_context(
                    candidate.text, brand.name, competitor.name, rules
                ),
            )
            for candidate in _scored_citations(text, competitor, urls, sentences, rules)
        ]
        competitor_citations.append(
            CompetitorCitations(competitor=competitor, citations=citations)
        )

    result = ExtractionResult(
        brand=brand,
        brand_citations=brand_citations,
        url_records=url_records,
        competitor_citations=competitor_citations,
    )

    logger.debug(
        f"Extracted {len(brand_citations)} brand citations, "
        f"{len(url_records)} source URLs, "
        f"{len(active_competitors)}/{len(all_competitors)} active competitors "
        f"across {len(sentences)} sentences"
    )
    return result


def process_request(
    request: ExtractionRequest, rules: EngineRules | None = None
) -> ExtractionResult:
    """Run process_response() for a validated ExtractionRequest."""
    return process_response(
        text=request.text,
        brand=Brand(request.brand),
        competitors=[
            Competitor(name=c.name, id=c.id, is_active=c.is_active)
            for c in request.competitors
        ],
        citation_urls=request.citation_urls,
        rules=rules,
    )
