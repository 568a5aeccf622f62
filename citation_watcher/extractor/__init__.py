"""
Extractor module for turning AI answers into citation records.

This module provides the deterministic, rule-based citation engine: sentence
segmentation, entity mention detection, source URL assignment, sentiment
scoring and competitive-context classification.

Public API:
    - process_response: Full extraction for a brand and its competitors
    - extract_citations: Citations of one entity with source URLs attached
    - analyze_sentiment: Lexicon-weighted positive/neutral/negative label
    - check_if_compared_with_brand: Comparison language next to the brand
    - classify_competitive_context: better/worse/similar framing
    - extract_domain: URL to bare hostname
    - Brand, Competitor: Entity types
    - CitationCandidate, SourceUrlRecord, ExtractionResult: Result types
"""

from citation_watcher.extractor.competitive import (
    check_if_compared_with_brand,
    classify_competitive_context,
)
from citation_watcher.extractor.domain import extract_domain
from citation_watcher.extractor.mention_detector import (
    CitationCandidate,
    detect_mentions,
)
from citation_watcher.extractor.orchestrator import (
    Brand,
    Competitor,
    CompetitorCitations,
    ExtractionResult,
    extract_citations,
    process_request,
    process_response,
)
from citation_watcher.extractor.segmenter import Sentence, split_sentences
from citation_watcher.extractor.sentiment import (
    SentimentScore,
    analyze_sentiment,
    score_sentiment,
)
from citation_watcher.extractor.url_assigner import (
    SourceUrlRecord,
    assign_urls,
    build_url_records,
)

__all__ = [
    "Brand",
    "CitationCandidate",
    "Competitor",
    "CompetitorCitations",
    "ExtractionResult",
    "Sentence",
    "SentimentScore",
    "SourceUrlRecord",
    "analyze_sentiment",
    "assign_urls",
    "build_url_records",
    "check_if_compared_with_brand",
    "classify_competitive_context",
    "detect_mentions",
    "extract_citations",
    "extract_domain",
    "process_request",
    "process_response",
    "score_sentiment",
    "split_sentences",
]
