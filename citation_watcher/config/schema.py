"""
Configuration schema models for Citation Watcher.

This module defines Pydantic models for the versioned classification rules
(rules-v1.yaml) and for extraction request files consumed by the CLI. All
models use Pydantic v2 field validators so a broken rules file is rejected
before any text gets classified.

Models:
    SentimentRules: Weighted lexicons, negation regexes, penalty and threshold
    CompetitiveRules: Comparison keywords and better/worse/similar families
    EngineRules: Root rules model (validates entire rules YAML)
    CompetitorSpec: One competitor entry in an extraction request
    ExtractionRequest: Response text plus brand, competitors and source URLs
"""

import re

from pydantic import BaseModel, PrivateAttr, field_validator


def _validate_phrase_list(v: list[str], field_name: str) -> list[str]:
    if not v:
        raise ValueError(f"{field_name} cannot be empty")
    for phrase in v:
        if not phrase or phrase.isspace():
            raise ValueError(f"{field_name} cannot contain empty phrases")
        if phrase != phrase.lower():
            raise ValueError(f"{field_name} phrases must be lower-case, got: {phrase}")
    return v


class SentimentRules(BaseModel):
    """
    Lexicon-weighted sentiment rules.

    Attributes:
        threshold: Minimum winning score for a positive/negative label
        negation_penalty: Flat penalty added per matching negation pattern
        positive: Lower-case phrase -> weight (1..3)
        negative: Lower-case phrase -> weight (1..3)
        negation_patterns: Regex sources, compiled case-insensitive
    """

    threshold: int = 2
    negation_penalty: int = 2
    positive: dict[str, int]
    negative: dict[str, int]
    negation_patterns: list[str]

    _compiled_negations: list[re.Pattern] = PrivateAttr(default_factory=list)

    @field_validator("threshold", "negation_penalty")
    @classmethod
    def validate_positive_int(cls, v: int) -> int:
        """Validate threshold and penalty are positive."""
        if v <= 0:
            raise ValueError(f"must be positive, got: {v}")
        return v

    @field_validator("positive", "negative")
    @classmethod
    def validate_lexicon(cls, v: dict[str, int]) -> dict[str, int]:
        """Validate lexicon phrases are lower-case and weights are 1..3."""
        if not v:
            raise ValueError("lexicon cannot be empty")
        for phrase, weight in v.items():
            if not phrase or phrase.isspace():
                raise ValueError("lexicon cannot contain empty phrases")
            if phrase != phrase.lower():
                raise ValueError(f"lexicon phrases must be lower-case, got: {phrase}")
            if not 1 <= weight <= 3:
                raise ValueError(f"weight for '{phrase}' must be 1..3, got: {weight}")
        return v

    @field_validator("negation_patterns")
    @classmethod
    def validate_negation_patterns(cls, v: list[str]) -> list[str]:
        """Validate every negation pattern is a compilable regex."""
        if not v:
            raise ValueError("negation_patterns cannot be empty")
        for pattern in v:
            try:
                re.compile(pattern, re.IGNORECASE)
            except re.error as e:
                raise ValueError(f"invalid negation pattern '{pattern}': {e}") from e
        return v

    def model_post_init(self, __context) -> None:
        self._compiled_negations = [
            re.compile(pattern, re.IGNORECASE) for pattern in self.negation_patterns
        ]

    @property
    def compiled_negations(self) -> list[re.Pattern]:
        return self._compiled_negations


class CompetitiveRules(BaseModel):
    """
    Keyword families for comparison detection and competitive framing.

    Families are checked in the order better -> worse -> similar; the first
    family with a matching phrase decides the context.
    """

    comparison_keywords: list[str]
    better_patterns: list[str]
    worse_patterns: list[str]
    similar_patterns: list[str]

    @field_validator(
        "comparison_keywords", "better_patterns", "worse_patterns", "similar_patterns"
    )
    @classmethod
    def validate_phrases(cls, v: list[str], info) -> list[str]:
        """Validate keyword lists are non-empty and lower-case."""
        return _validate_phrase_list(v, info.field_name)


class EngineRules(BaseModel):
    """
    Root rules model for rules-v*.yaml.

    Treated as a versioned data asset: changing any phrase, weight or
    pattern changes classification output, so bump `version` with it.
    """

    version: str
    sentiment: SentimentRules
    competitive: CompetitiveRules

    @field_validator("version")
    @classmethod
    def validate_version(cls, v: str) -> str:
        """Validate version is non-empty."""
        if not v or v.isspace():
            raise ValueError("version cannot be empty")
        return v


class CompetitorSpec(BaseModel):
    """
    Competitor entry in an extraction request.

    Attributes:
        name: Competitor name matched against response sentences
        id: Optional registry identifier, carried through to results
        is_active: Inactive competitors are skipped during extraction
    """

    name: str
    id: str | None = None
    is_active: bool = True

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate name is non-empty."""
        if not v or v.isspace():
            raise ValueError("competitor name cannot be empty")
        return v


class ExtractionRequest(BaseModel):
    """
    Extraction request file consumed by `citation-watcher extract`.

    Example YAML:
        brand: "Acme"
        competitors:
          - name: "Globex"
            id: "comp-1"
        citation_urls:
          - "https://www.example.com/review"
        text: |
          Acme is an industry leader. Globex is similar to Acme.
    """

    text: str
    brand: str
    competitors: list[CompetitorSpec] = []
    citation_urls: list[str] = []

    @field_validator("brand")
    @classmethod
    def validate_brand(cls, v: str) -> str:
        """Validate brand is non-empty."""
        if not v or v.isspace():
            raise ValueError("brand cannot be empty")
        return v

    @field_validator("competitors")
    @classmethod
    def validate_unique_competitors(
        cls, v: list[CompetitorSpec]
    ) -> list[CompetitorSpec]:
        """Validate competitor names are unique (case-insensitive)."""
        seen: set[str] = set()
        for competitor in v:
            key = competitor.name.lower()
            if key in seen:
                raise ValueError(f"duplicate competitor name: {competitor.name}")
            seen.add(key)
        return v
