"""
Rules and request loader for Citation Watcher.

This module loads YAML files, validates them with Pydantic models and
returns typed objects the extraction engine can consume.

The classification rules ship with the package as a versioned data asset
(rules-v1.yaml). Callers can point at an alternative rules file to try out a
tuned lexicon without touching the classification code.

Functions:
    load_rules: Load and validate a rules YAML file (bundled v1 by default)
    default_rules: Cached bundled rules used when no rules are passed
    load_request: Load and validate an extraction request YAML/JSON file
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ValidationError

from citation_watcher.exceptions import ConfigFileNotFoundError, ConfigValidationError

from .schema import EngineRules, ExtractionRequest

logger = logging.getLogger(__name__)

DEFAULT_RULES_FILENAME = "rules-v1.yaml"


def _get_package_rules_path() -> Path:
    """Get the path of the bundled rules file."""
    return Path(__file__).parent / DEFAULT_RULES_FILENAME


def _read_yaml(path: Path, kind: str) -> Any:
    """
    Read a YAML document from disk.

    JSON is a subset of YAML, so request files may be written in either.

    Raises:
        ConfigFileNotFoundError: If the file does not exist
        ConfigValidationError: If the file is unreadable, not YAML, or empty
    """
    if not path.exists():
        raise ConfigFileNotFoundError(f"{kind} file not found: {path}")

    try:
        with path.open(encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigValidationError(f"Invalid YAML syntax in {path}: {e}") from e
    except OSError as e:
        raise ConfigValidationError(f"Failed to read {kind} file {path}: {e}") from e

    if raw is None:
        raise ConfigValidationError(f"{kind} file is empty: {path}")

    return raw


def _validate(model: type[BaseModel], raw: Any, path: Path, kind: str):
    """Validate raw data, formatting pydantic errors one field per line."""
    try:
        return model.model_validate(raw)
    except ValidationError as e:
        error_messages = []
        for error in e.errors():
            loc = ".".join(str(x) for x in error["loc"])
            msg = error["msg"]
            error_messages.append(f"  - {loc}: {msg}")

        raise ConfigValidationError(
            f"{kind} validation failed in {path}:\n" + "\n".join(error_messages)
        ) from e


def load_rules(rules_path: str | Path | None = None) -> EngineRules:
    """
    Load classification rules from YAML and validate them.

    Args:
        rules_path: Path to a rules YAML file. If None, the bundled
            rules-v1.yaml is loaded.

    Returns:
        Validated EngineRules with negation patterns compiled

    Raises:
        ConfigFileNotFoundError: If the rules file doesn't exist
        ConfigValidationError: If YAML is invalid or rules validation fails

    Example:
        >>> rules = load_rules()
        >>> rules.version
        '1'
        >>> rules.sentiment.positive["industry leader"]
        2
    """
    path = Path(rules_path) if rules_path is not None else _get_package_rules_path()

    raw = _read_yaml(path, "Rules")
    rules = _validate(EngineRules, raw, path, "Rules")

    logger.debug(
        f"Loaded rules v{rules.version} from {path}: "
        f"{len(rules.sentiment.positive)} positive, "
        f"{len(rules.sentiment.negative)} negative phrases"
    )
    return rules


@lru_cache(maxsize=1)
def default_rules() -> EngineRules:
    """
    Return the bundled rules, loaded once per process.

    EngineRules is never mutated by the engine, so sharing one instance
    across calls keeps every classification pure.
    """
    return load_rules()


def load_request(request_path: str | Path) -> ExtractionRequest:
    """
    Load an extraction request (text, brand, competitors, citation URLs).

    Args:
        request_path: Path to a YAML or JSON request file

    Returns:
        Validated ExtractionRequest

    Raises:
        ConfigFileNotFoundError: If the request file doesn't exist
        ConfigValidationError: If the file is malformed or fails validation
    """
    path = Path(request_path)
    raw = _read_yaml(path, "Request")
    return _validate(ExtractionRequest, raw, path, "Request")
