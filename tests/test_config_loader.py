"""
Tests for config.loader and config.schema modules.

This module tests rules and request loading:
- Bundled rules-v1.yaml loads with the expected lexicon sizes
- Pydantic schema validation (weights, lower-case phrases, regexes)
- Error handling for missing files, invalid YAML and empty files
- Extraction request files in YAML and JSON
"""

import json

import pytest
import yaml
from pydantic import ValidationError

from citation_watcher.config.loader import default_rules, load_request, load_rules
from citation_watcher.config.schema import (
    CompetitiveRules,
    CompetitorSpec,
    EngineRules,
    ExtractionRequest,
    SentimentRules,
)
from citation_watcher.exceptions import (
    ConfigFileNotFoundError,
    ConfigurationError,
    ConfigValidationError,
)

# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def rules_dict():
    """Return the bundled rules as a plain dict for mutation."""
    return default_rules().model_dump()


@pytest.fixture
def write_yaml(tmp_path):
    """Write a dict to a YAML file and return its path."""

    def _write(data, name="rules.yaml"):
        path = tmp_path / name
        with path.open("w", encoding="utf-8") as f:
            yaml.safe_dump(data, f)
        return path

    return _write


@pytest.fixture
def request_dict():
    return {
        "brand": "Acme",
        "competitors": [{"name": "Globex", "id": "comp-1"}, {"name": "Initech"}],
        "citation_urls": ["https://www.example.com/review"],
        "text": "Acme is an industry leader. Globex is similar to Acme.",
    }


# ============================================================================
# Bundled rules
# ============================================================================


class TestBundledRules:
    """The shipped rules-v1.yaml asset."""

    def test_version(self):
        assert load_rules().version == "1"

    def test_lexicon_sizes(self):
        rules = load_rules()

        assert len(rules.sentiment.positive) == 50
        assert len(rules.sentiment.negative) == 44
        assert len(rules.sentiment.negation_patterns) == 6

    def test_thresholds(self):
        rules = load_rules()

        assert rules.sentiment.threshold == 2
        assert rules.sentiment.negation_penalty == 2

    def test_sample_weights(self):
        rules = load_rules()

        assert rules.sentiment.positive["excellent"] == 3
        assert rules.sentiment.positive["industry leader"] == 2
        assert rules.sentiment.positive["nice"] == 1
        assert rules.sentiment.negative["terrible"] == 3
        assert rules.sentiment.negative["not good"] == 1

    def test_competitive_lists(self):
        competitive = load_rules().competitive

        assert len(competitive.comparison_keywords) == 12
        assert competitive.better_patterns == [
            "better", "superior", "outperforms", "leads", "ahead of",
        ]
        assert competitive.worse_patterns == ["inferior", "behind", "lacks", "falls short"]
        assert "comparable" in competitive.similar_patterns

    def test_negations_are_compiled_case_insensitive(self):
        patterns = load_rules().sentiment.compiled_negations

        assert len(patterns) == 6
        assert any(p.search("We CAN'T RECOMMEND it") for p in patterns)

    def test_default_rules_is_cached(self):
        assert default_rules() is default_rules()


# ============================================================================
# Schema validation
# ============================================================================


class TestSentimentRules:
    """Test suite for SentimentRules validators."""

    def base(self, **overrides):
        data = {
            "positive": {"good": 2},
            "negative": {"bad": 2},
            "negation_patterns": [r"\bnot\s+good"],
        }
        data.update(overrides)
        return data

    def test_valid(self):
        rules = SentimentRules(**self.base())

        assert rules.threshold == 2
        assert rules.negation_penalty == 2
        assert len(rules.compiled_negations) == 1

    @pytest.mark.parametrize("weight", [0, 4, -1])
    def test_rejects_out_of_range_weight(self, weight):
        with pytest.raises(ValidationError, match="must be 1..3"):
            SentimentRules(**self.base(positive={"good": weight}))

    def test_rejects_upper_case_phrase(self):
        with pytest.raises(ValidationError, match="lower-case"):
            SentimentRules(**self.base(negative={"Bad": 2}))

    def test_rejects_empty_lexicon(self):
        with pytest.raises(ValidationError, match="lexicon cannot be empty"):
            SentimentRules(**self.base(positive={}))

    def test_rejects_invalid_regex(self):
        with pytest.raises(ValidationError, match="invalid negation pattern"):
            SentimentRules(**self.base(negation_patterns=["(unclosed"]))

    def test_rejects_non_positive_threshold(self):
        with pytest.raises(ValidationError, match="must be positive"):
            SentimentRules(**self.base(threshold=0))


class TestCompetitiveRules:
    """Test suite for CompetitiveRules validators."""

    def base(self):
        return {
            "comparison_keywords": ["vs"],
            "better_patterns": ["better"],
            "worse_patterns": ["worse"],
            "similar_patterns": ["similar"],
        }

    def test_valid(self):
        assert CompetitiveRules(**self.base()).comparison_keywords == ["vs"]

    def test_rejects_empty_list(self):
        data = self.base()
        data["worse_patterns"] = []

        with pytest.raises(ValidationError, match="worse_patterns cannot be empty"):
            CompetitiveRules(**data)

    def test_rejects_upper_case(self):
        data = self.base()
        data["similar_patterns"] = ["Similar"]

        with pytest.raises(ValidationError, match="must be lower-case"):
            CompetitiveRules(**data)


class TestEngineRules:
    """Test suite for EngineRules."""

    def test_round_trips_bundled_rules(self, rules_dict):
        rules = EngineRules.model_validate(rules_dict)

        assert rules.version == "1"
        assert len(rules.sentiment.compiled_negations) == 6

    def test_rejects_empty_version(self, rules_dict):
        rules_dict["version"] = "  "

        with pytest.raises(ValidationError, match="version cannot be empty"):
            EngineRules.model_validate(rules_dict)


class TestExtractionRequest:
    """Test suite for ExtractionRequest and CompetitorSpec."""

    def test_valid(self, request_dict):
        request = ExtractionRequest.model_validate(request_dict)

        assert request.brand == "Acme"
        assert request.competitors[0] == CompetitorSpec(name="Globex", id="comp-1")
        assert request.competitors[1].is_active is True

    def test_defaults(self):
        request = ExtractionRequest(text="Acme.", brand="Acme")

        assert request.competitors == []
        assert request.citation_urls == []

    def test_rejects_empty_brand(self, request_dict):
        request_dict["brand"] = "   "

        with pytest.raises(ValidationError, match="brand cannot be empty"):
            ExtractionRequest.model_validate(request_dict)

    def test_rejects_empty_competitor_name(self):
        with pytest.raises(ValidationError, match="competitor name cannot be empty"):
            CompetitorSpec(name="")

    def test_rejects_duplicate_competitors(self, request_dict):
        request_dict["competitors"].append({"name": "GLOBEX"})

        with pytest.raises(ValidationError, match="duplicate competitor name"):
            ExtractionRequest.model_validate(request_dict)


# ============================================================================
# Loader
# ============================================================================


class TestLoadRules:
    """Test suite for load_rules()."""

    def test_loads_custom_rules(self, rules_dict, write_yaml):
        rules_dict["version"] = "2-test"
        rules_dict["sentiment"]["threshold"] = 3
        path = write_yaml(rules_dict)

        rules = load_rules(path)

        assert rules.version == "2-test"
        assert rules.sentiment.threshold == 3

    def test_accepts_string_path(self, rules_dict, write_yaml):
        path = write_yaml(rules_dict)

        assert load_rules(str(path)).version == "1"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigFileNotFoundError, match="Rules file not found"):
            load_rules(tmp_path / "nope.yaml")

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")

        with pytest.raises(ConfigValidationError, match="is empty"):
            load_rules(path)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("sentiment: [unclosed\n", encoding="utf-8")

        with pytest.raises(ConfigValidationError, match="Invalid YAML syntax"):
            load_rules(path)

    def test_validation_error_lists_field(self, rules_dict, write_yaml):
        rules_dict["sentiment"]["positive"]["great"] = 7
        path = write_yaml(rules_dict)

        with pytest.raises(ConfigValidationError) as exc_info:
            load_rules(path)

        message = str(exc_info.value)
        assert "Rules validation failed" in message
        assert "sentiment.positive" in message

    def test_errors_are_configuration_errors(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_rules(tmp_path / "missing.yaml")


class TestLoadRequest:
    """Test suite for load_request()."""

    def test_loads_yaml(self, request_dict, write_yaml):
        path = write_yaml(request_dict, name="request.yaml")

        request = load_request(path)

        assert request.brand == "Acme"
        assert len(request.competitors) == 2

    def test_loads_json(self, request_dict, tmp_path):
        path = tmp_path / "request.json"
        path.write_text(json.dumps(request_dict), encoding="utf-8")

        request = load_request(path)

        assert request.citation_urls == ["https://www.example.com/review"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigFileNotFoundError, match="Request file not found"):
            load_request(tmp_path / "request.yaml")

    def test_missing_text(self, request_dict, write_yaml):
        del request_dict["text"]
        path = write_yaml(request_dict, name="request.yaml")

        with pytest.raises(ConfigValidationError, match="text"):
            load_request(path)
