"""
Custom exceptions for Citation Watcher.

This module provides a hierarchy of exceptions that enable type-safe error
handling throughout the application. All exceptions inherit from the base
CitationWatcherError for consistent catching.

Exception Hierarchy:
    CitationWatcherError (base)
    ├── ConfigurationError
    │   ├── ConfigFileNotFoundError
    │   └── ConfigValidationError
    ├── ExtractionError
    │   └── InvalidInputError
    └── BatchError

Usage:
    from citation_watcher.exceptions import InvalidInputError

    try:
        result = process_response(text, brand, competitors)
    except InvalidInputError as e:
        logger.error(f"Rejected extraction input: {e}")
        sys.exit(1)
"""


class CitationWatcherError(Exception):
    """
    Base exception for all Citation Watcher errors.

    All custom exceptions in this application should inherit from this class.
    This enables catching all application-specific errors with a single except clause.
    """

    pass


# ============================================================================
# Configuration Errors
# ============================================================================


class ConfigurationError(CitationWatcherError):
    """
    Base class for configuration-related errors.

    Raised when a rules file or extraction request cannot be loaded, parsed
    or validated. Should result in exit code 1 (configuration error).
    """

    pass


class ConfigFileNotFoundError(ConfigurationError):
    """
    Configuration file does not exist at the specified path.

    Example:
        raise ConfigFileNotFoundError("/path/to/rules.yaml")
    """

    pass


class ConfigValidationError(ConfigurationError):
    """
    Configuration file is invalid (schema validation failed).

    Should include details about which field(s) failed validation.

    Example:
        raise ConfigValidationError("sentiment.positive.great: weight must be 1..3")
    """

    pass


# ============================================================================
# Extraction Errors
# ============================================================================


class ExtractionError(CitationWatcherError):
    """
    Base class for citation extraction errors.

    The extraction engine is total over well-typed input, so these only
    surface when a caller hands it something it cannot reason about.
    """

    pass


class InvalidInputError(ExtractionError):
    """
    Extraction input violates the engine's input contract.

    Raised instead of producing wrong data, e.g. for an empty entity name,
    a non-string response text or duplicate competitor names.

    Example:
        raise InvalidInputError("Entity name cannot be empty or whitespace")
    """

    pass


# ============================================================================
# Batch Errors
# ============================================================================


class BatchError(CitationWatcherError):
    """
    Batch driver failed before it could process any records.

    Per-record failures are counted in the batch summary instead.

    Example:
        raise BatchError("fetch_page failed at offset 2000")
    """

    pass
