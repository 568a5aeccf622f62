"""
Source URL assignment for citation candidates.

Answers produced with web search come with an ordered list of source URLs
but no mapping from URL to sentence. URLs are handed out round-robin over
one entity's candidates: the n-th candidate gets urls[n % len(urls)]. This
stands in for proximity or markdown-link based attribution.

Every supplied URL is also preserved as its own SourceUrlRecord, whether or
not any entity matched.
"""

from dataclasses import asdict, dataclass, replace

from citation_watcher.config.constants import (
    SOURCE_URL_CONFIDENCE,
    SOURCE_URL_TEXT_PREFIX,
)
from citation_watcher.exceptions import InvalidInputError

from .domain import extract_domain
from .mention_detector import CitationCandidate


@dataclass(frozen=True)
class SourceUrlRecord:
    """
    A source URL of an answer, kept independently of entity matches.

    Attributes:
        text: "Source URL: <url>"
        cited_url: The URL as supplied
        cited_domain: Bare domain of the URL
        context_before: Always None (not tied to a sentence)
        context_after: Always None
        position: Always None
        is_direct_mention: Always False
        confidence_score: Always 1.0
        sentiment: Always None
    """

    text: str
    cited_url: str
    cited_domain: str
    context_before: None = None
    context_after: None = None
    position: None = None
    is_direct_mention: bool = False
    confidence_score: float = SOURCE_URL_CONFIDENCE
    sentiment: None = None

    def to_dict(self) -> dict:
        return asdict(self)


def validate_citation_urls(citation_urls: object) -> list[str]:
    """
    Check citation_urls is a sequence of strings and return it as a list.

    Raises:
        InvalidInputError: If citation_urls is a bare string, not a sequence,
            or contains non-string items
    """
    if isinstance(citation_urls, str) or not isinstance(citation_urls, list | tuple):
        raise InvalidInputError(
            f"citation_urls must be a list of strings, got: {type(citation_urls).__name__}"
        )
    for url in citation_urls:
        if not isinstance(url, str):
            raise InvalidInputError(
                f"citation_urls must contain strings, got: {type(url).__name__}"
            )
    return list(citation_urls)


def assign_urls(
    candidates: list[CitationCandidate], citation_urls: list[str]
) -> list[CitationCandidate]:
    """
    Assign source URLs round-robin to one entity's candidates.

    Args:
        candidates: Candidates of a single entity, in sentence order
        citation_urls: Ordered source URLs (possibly empty)

    Returns:
        New candidates with cited_url/cited_domain set. With no URLs the
        candidates are returned unchanged (both fields stay None).

    Example:
        Two URLs over five candidates yield cited_url sequence
        [url0, url1, url0, url1, url0].
    """
    if not citation_urls:
        return list(candidates)

    assigned = []
    for n, candidate in enumerate(candidates):
        url = citation_urls[n % len(citation_urls)]
        assigned.append(replace(candidate, cited_url=url, cited_domain=extract_domain(url)))
    return assigned


def build_url_records(citation_urls: list[str]) -> list[SourceUrlRecord]:
    """
    Build one SourceUrlRecord per supplied URL, in order.

    Duplicates are kept: each supplied URL yields one record.
    """
    return [
        SourceUrlRecord(
            text=f"{SOURCE_URL_TEXT_PREFIX}{url}",
            cited_url=url,
            cited_domain=extract_domain(url),
        )
        for url in citation_urls
    ]
