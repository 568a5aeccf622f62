"""
CLI entrypoint for Citation Watcher.

Provides a dual-mode command-line interface with:
- Human-friendly output: Rich spinners, tables, colored panels
- Agent-friendly output: Structured JSON for AI automation
- Quiet mode: Tab-separated minimal output for shell scripts

Commands:
    extract: Extract brand/competitor citations from one answer
    sentiment: Score a piece of text and show the breakdown
    rescore: Recompute sentiment for a file of stored citations
    validate-rules: Validate a classification rules file

Exit codes:
    0: Success
    1: Configuration or input error (invalid YAML, bad rules, bad request)
    2: Extraction error
    3: Partial failure (some citations could not be rescored)

Examples:
    # Human-friendly tables
    citation-watcher extract --input request.yaml

    # Agent-friendly JSON output
    citation-watcher extract --input request.yaml --format json

    # Score a sentence
    citation-watcher sentiment "Acme is not good."
"""

import json
from collections import Counter
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.traceback import install as install_rich_traceback

from citation_watcher.batch.runner import BatchRunner, StoredCitation
from citation_watcher.config.loader import default_rules, load_request, load_rules
from citation_watcher.config.schema import EngineRules
from citation_watcher.exceptions import (
    BatchError,
    ConfigurationError,
    ExtractionError,
    InvalidInputError,
)
from citation_watcher.extractor.orchestrator import process_request
from citation_watcher.extractor.sentiment import score_sentiment
from citation_watcher.utils.console import (
    error,
    info,
    output_mode,
    print_banner,
    print_batch_summary,
    print_citation_tables,
    print_sentiment_breakdown,
    spinner,
    success,
    warning,
)
from citation_watcher.utils.logging import setup_logging

install_rich_traceback(show_locals=False)

# Exit codes
EXIT_SUCCESS = 0
EXIT_CONFIG_ERROR = 1  # Rules, request or input validation failed
EXIT_EXTRACTION_ERROR = 2  # Engine failed on otherwise valid input
EXIT_PARTIAL_FAILURE = 3  # Some citations failed to rescore

app = typer.Typer(
    name="citation-watcher",
    help="Extract brand and competitor citations from AI-generated answers",
    add_completion=False,
)


def _configure_output(format: str, quiet: bool, verbose: bool = False) -> None:
    if format not in ("text", "json"):
        raise typer.BadParameter(
            f"Invalid format: {format}. Must be 'text' or 'json'",
            param_hint="--format",
        )
    output_mode.format = format
    output_mode.quiet = quiet
    # JSON log lines would interleave with Rich output in human mode
    setup_logging(verbose=verbose, quiet_logs=output_mode.is_human() or quiet)


def _resolve_rules(rules: Path | None) -> EngineRules:
    if rules is None:
        return default_rules()
    return load_rules(rules)


def _fail(message: str, error_type: str, exit_code: int) -> typer.Exit:
    error(message)
    if output_mode.is_agent():
        output_mode.add_json("error_type", error_type)
        output_mode.flush_json()
    return typer.Exit(exit_code)


@app.command()
def extract(
    input: Path = typer.Option(
        ...,
        "--input",
        "-i",
        help="Path to extraction request (YAML or JSON)",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    rules: Path | None = typer.Option(
        None,
        "--rules",
        "-r",
        help="Path to rules YAML (defaults to bundled rules-v1.yaml)",
    ),
    format: str = typer.Option(
        "text",
        "--format",
        "-f",
        help="Output format: 'text' (human-friendly) or 'json' (machine-readable)",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Minimal output (tab-separated values)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging",
    ),
):
    """
    Extract brand and competitor citations from one AI answer.

    The request file holds the answer text, the brand name, the competitor
    list and the answer's source URLs:

      brand: Acme
      competitors:
        - name: Globex
          id: comp-1
      citation_urls:
        - https://www.example.com/review
      text: |
        Acme is an industry leader. Globex is similar to Acme.

    Exit codes:
      0: Extraction succeeded
      1: Request or rules file invalid
      2: Extraction failed
    """
    _configure_output(format, quiet, verbose)
    print_banner(_read_version())

    try:
        with spinner("Loading request..."):
            engine_rules = _resolve_rules(rules)
            request = load_request(input)
    except ConfigurationError as e:
        raise _fail(str(e), "configuration_error", EXIT_CONFIG_ERROR) from e

    try:
        with spinner("Extracting citations..."):
            result = process_request(request, rules=engine_rules)
    except InvalidInputError as e:
        raise _fail(f"Invalid input: {e}", "invalid_input", EXIT_CONFIG_ERROR) from e
    except ExtractionError as e:
        raise _fail(
            f"Extraction failed: {e}", "extraction_error", EXIT_EXTRACTION_ERROR
        ) from e

    print_citation_tables(result.to_dict())

    if not result.brand_citations:
        warning(f"Brand '{request.brand}' was not mentioned")
    info(
        f"{len(result.brand_citations)} brand citations, "
        f"{len(result.url_records)} source URLs, "
        f"{len(result.competitor_citations)} competitors scanned"
    )

    if output_mode.is_agent():
        output_mode.add_json("rules_version", engine_rules.version)
        output_mode.flush_json()


@app.command()
def sentiment(
    text: str = typer.Argument(..., help="Text to score"),
    rules: Path | None = typer.Option(
        None,
        "--rules",
        "-r",
        help="Path to rules YAML (defaults to bundled rules-v1.yaml)",
    ),
    format: str = typer.Option(
        "text",
        "--format",
        "-f",
        help="Output format: 'text' or 'json'",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Minimal output (tab-separated values)",
    ),
):
    """
    Score text with the sentiment lexicon and show the breakdown.

    Examples:
      citation-watcher sentiment "This is not good."
      citation-watcher sentiment "Acme is an industry leader" --format json
    """
    _configure_output(format, quiet)

    try:
        engine_rules = _resolve_rules(rules)
    except ConfigurationError as e:
        raise _fail(str(e), "configuration_error", EXIT_CONFIG_ERROR) from e

    score = score_sentiment(text, engine_rules)
    print_sentiment_breakdown(
        text,
        {
            "label": score.label,
            "positive": score.positive,
            "negative": score.negative,
            "negation_penalty": score.negation_penalty,
        },
    )

    if output_mode.is_agent():
        output_mode.flush_json()


@app.command()
def rescore(
    input: Path = typer.Option(
        ...,
        "--input",
        "-i",
        help="JSON array of stored citations: [{\"id\": ..., \"citation_text\": ...}]",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    output: Path = typer.Option(
        ...,
        "--output",
        "-o",
        help="Where to write [{\"id\": ..., \"sentiment\": ...}]",
    ),
    rules: Path | None = typer.Option(
        None,
        "--rules",
        "-r",
        help="Path to rules YAML (defaults to bundled rules-v1.yaml)",
    ),
    batch_size: int = typer.Option(
        50,
        "--batch-size",
        help="Citations rescored per batch",
        min=1,
    ),
    page_size: int = typer.Option(
        1000,
        "--page-size",
        help="Citations read per page",
        min=1,
    ),
    format: str = typer.Option(
        "text",
        "--format",
        "-f",
        help="Output format: 'text' or 'json'",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Minimal output (tab-separated values)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging",
    ),
):
    """
    Recompute sentiment for a file of stored citations.

    Use after changing the rules file to bring stored labels in line with
    the current lexicon. Citations without text are skipped.

    Exit codes:
      0: All citations rescored
      1: Input or rules file invalid
      3: Some citations could not be rescored
    """
    _configure_output(format, quiet, verbose)

    try:
        engine_rules = _resolve_rules(rules)
    except ConfigurationError as e:
        raise _fail(str(e), "configuration_error", EXIT_CONFIG_ERROR) from e

    try:
        with input.open(encoding="utf-8") as f:
            raw = json.load(f)
        if not isinstance(raw, list):
            raise ValueError("expected a JSON array of citations")
        citations = [StoredCitation.model_validate(item) for item in raw]
        counts = Counter(c.id for c in citations)
        duplicates = [cid for cid, n in counts.items() if n > 1]
        if duplicates:
            raise ValueError(f"duplicate citation ids: {', '.join(sorted(duplicates))}")
    except (OSError, ValueError, ValidationError) as e:
        raise _fail(
            f"Invalid citations file {input}: {e}", "invalid_input", EXIT_CONFIG_ERROR
        ) from e

    rescored: dict[str, str] = {}

    def fetch_page(offset: int, limit: int) -> list[StoredCitation]:
        return citations[offset : offset + limit]

    def update_sentiment(citation_id: str, label: str) -> None:
        rescored[citation_id] = label

    runner = BatchRunner(
        fetch_page=fetch_page,
        update_sentiment=update_sentiment,
        page_size=page_size,
        batch_size=batch_size,
        rules=engine_rules,
    )

    try:
        with spinner(f"Rescoring {len(citations)} citations..."):
            summary = runner.rescore_sentiment()
    except BatchError as e:
        raise _fail(str(e), "batch_error", EXIT_EXTRACTION_ERROR) from e

    output.parent.mkdir(parents=True, exist_ok=True)
    with output.open("w", encoding="utf-8") as f:
        json.dump(
            [
                {"id": citation.id, "sentiment": rescored[citation.id]}
                for citation in citations
                if citation.id in rescored
            ],
            f,
            indent=2,
        )

    print_batch_summary(
        {
            "batch_id": summary.batch_id,
            "total": summary.total,
            "updated": summary.updated,
            "skipped": summary.skipped,
            "failed": summary.failed,
            "sentiment_counts": summary.sentiment_counts,
        }
    )
    success(f"Wrote {len(rescored)} sentiments to {output}")

    if output_mode.is_agent():
        output_mode.add_json("output", str(output))
        output_mode.flush_json()

    if summary.failed:
        raise typer.Exit(EXIT_PARTIAL_FAILURE)


@app.command("validate-rules")
def validate_rules(
    rules: Path | None = typer.Option(
        None,
        "--rules",
        "-r",
        help="Path to rules YAML (defaults to bundled rules-v1.yaml)",
    ),
    format: str = typer.Option(
        "text",
        "--format",
        "-f",
        help="Output format: 'text' or 'json'",
    ),
):
    """
    Validate a classification rules file without extracting anything.

    Checks:
    - YAML syntax is valid
    - Lexicon weights are 1..3 and phrases are lower-case
    - Negation patterns compile
    - Comparison and pattern-family lists are non-empty

    Exit codes:
      0: Rules are valid
      1: Rules are invalid
    """
    _configure_output(format, quiet=False)

    try:
        with spinner("Validating rules..."):
            engine_rules = load_rules(rules)
    except ConfigurationError as e:
        if output_mode.is_agent():
            output_mode.add_json("valid", False)
        raise _fail(str(e), "validation_error", EXIT_CONFIG_ERROR) from e

    success(f"Rules v{engine_rules.version} are valid")
    info(f"Positive phrases: {len(engine_rules.sentiment.positive)}")
    info(f"Negative phrases: {len(engine_rules.sentiment.negative)}")
    info(f"Negation patterns: {len(engine_rules.sentiment.negation_patterns)}")

    if output_mode.is_agent():
        output_mode.add_json("valid", True)
        output_mode.add_json("version", engine_rules.version)
        output_mode.add_json("positive_count", len(engine_rules.sentiment.positive))
        output_mode.add_json("negative_count", len(engine_rules.sentiment.negative))
        output_mode.add_json(
            "negation_pattern_count", len(engine_rules.sentiment.negation_patterns)
        )
        output_mode.flush_json()


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
    ),
):
    """
    Citation Watcher - structured brand citations from AI answers.

    Finds where a brand and its competitors are mentioned in an
    AI-generated answer and annotates each mention with context,
    sentiment, source URL and competitive framing.

    Use 'citation-watcher COMMAND --help' for detailed command documentation.
    """
    if version:
        from rich.console import Console

        console = Console()
        console.print(
            f"[bold cyan]citation-watcher[/bold cyan] version {_read_version()}"
        )
        raise typer.Exit(EXIT_SUCCESS)

    if ctx.invoked_subcommand is None:
        from rich.console import Console

        console = Console()
        console.print("[yellow]Use --help to see available commands[/yellow]")
        console.print()
        console.print("Commands:")
        console.print("  extract         Extract citations from one answer")
        console.print("  sentiment       Score text with the sentiment lexicon")
        console.print("  rescore         Recompute sentiment for stored citations")
        console.print("  validate-rules  Validate a rules file")


def _read_version() -> str:
    """Read version from package metadata (pyproject.toml)."""
    try:
        from importlib.metadata import version

        return version("citation-watcher")
    except Exception:
        # Package metadata is missing when running from a source checkout
        return "0.1.0"


if __name__ == "__main__":
    app()
