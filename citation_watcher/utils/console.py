"""
Rich console utilities for dual-mode CLI output.

Provides readable terminal output for humans and structured JSON for AI agents.
All output functions automatically adapt based on the global output_mode setting.

This module provides:
- OutputMode: Class to manage output format (text/json/quiet)
- Context manager: spinner()
- Output functions: success(), error(), warning(), info()
- Display functions: print_banner(), print_citation_tables(),
  print_sentiment_breakdown(), print_batch_summary()

Human Mode (--format text):
    - Rich spinners, colored tables and panels

Agent Mode (--format json):
    - Structured JSON output to stdout
    - No ANSI codes or spinners

Quiet Mode (--quiet):
    - Tab-separated values, no decorations

Examples:
    >>> output_mode.format = "json"  # Agent mode
    >>> success("Rules loaded")  # Buffers to JSON
    >>> output_mode.flush_json()   # Outputs JSON to stdout
"""

from __future__ import annotations

import json
import sys
from contextlib import contextmanager
from typing import Any

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

SENTIMENT_STYLES = {"positive": "green", "neutral": "white", "negative": "red"}


class OutputMode:
    """
    Output mode configuration for dual-mode CLI.

    Attributes:
        format: Output format - "text" (human) or "json" (agent)
        quiet: If True, suppress non-essential output
        _json_buffer: Internal buffer for JSON output in agent mode
    """

    def __init__(self, format_type: str = "text", quiet: bool = False):
        """
        Initialize output mode.

        Raises:
            ValueError: If format_type is not "text" or "json"
        """
        if format_type not in ["text", "json"]:
            raise ValueError(f"Invalid format: {format_type}. Must be 'text' or 'json'")

        self.format = format_type
        self.quiet = quiet
        self._json_buffer: dict[str, Any] = {}

    def is_human(self) -> bool:
        return self.format == "text"

    def is_agent(self) -> bool:
        return self.format == "json"

    def add_json(self, key: str, value: Any) -> None:
        """
        Add key-value pair to JSON buffer.

        Used in agent mode to accumulate structured data
        before final output via flush_json().
        """
        self._json_buffer[key] = value

    def flush_json(self) -> None:
        """
        Output buffered JSON to stdout and clear buffer.

        Only outputs in agent mode. In human mode, this is a no-op.
        """
        if self.is_agent() and self._json_buffer:
            json.dump(self._json_buffer, sys.stdout, indent=2)
            sys.stdout.write("\n")
            sys.stdout.flush()
            self._json_buffer.clear()


# Global output mode instance (set by CLI flags)
output_mode = OutputMode()

# Global Rich console instances for human mode
console = Console()  # stdout
console_err = Console(stderr=True)  # stderr


@contextmanager
def spinner(message: str):
    """
    Context manager for showing a spinner during operations.

    Displays a Rich spinner with message in human mode.
    Silent in agent/quiet modes.
    """
    if output_mode.is_human() and not output_mode.quiet:
        with console.status(f"[bold blue]{message}", spinner="dots") as status:
            yield status
    else:
        yield None


def success(message: str) -> None:
    """
    Print a success message.

    Human mode: Green checkmark with message
    Agent mode: Buffer to JSON
    Quiet mode: Silent
    """
    if output_mode.is_agent():
        output_mode.add_json("status", "success")
        output_mode.add_json("message", message)
    elif not output_mode.quiet:
        console.print(f"[green]✓[/green] {message}")


def error(message: str) -> None:
    """
    Print an error message.

    Human mode: Red X with message to stderr
    Agent mode: Buffer to JSON
    Quiet mode: Plain message to stderr
    """
    if output_mode.is_agent():
        output_mode.add_json("status", "error")
        output_mode.add_json("error", message)
    elif output_mode.quiet:
        console_err.print(message, markup=False, highlight=False)
    else:
        console_err.print(f"[red]✗[/red] {message}", style="red")


def warning(message: str) -> None:
    """
    Print a warning message.

    Human mode: Yellow warning symbol with message
    Agent mode: Buffer to JSON
    """
    if output_mode.is_agent():
        output_mode.add_json("warning", message)
    elif not output_mode.quiet:
        console.print(f"[yellow]⚠[/yellow] {message}", style="yellow")


def info(message: str) -> None:
    """
    Print an info message.

    Human mode: Blue info symbol with message
    Agent/Quiet mode: Silent
    """
    if output_mode.is_human() and not output_mode.quiet:
        console.print(f"[blue]ℹ[/blue] {message}")


def print_banner(version: str) -> None:
    """Print a startup banner (human mode only)."""
    if not output_mode.is_human() or output_mode.quiet:
        return

    banner = f"""
[bold cyan]╔{"═" * 39}╗
║   Citation Watcher v{version:<17} ║
║   Brand citations in AI answers       ║
╚{"═" * 39}╝[/bold cyan]
"""

    console.print(banner)


def _sentiment_cell(sentiment: str | None) -> str:
    if sentiment is None:
        return "-"
    style = SENTIMENT_STYLES.get(sentiment, "white")
    return f"[{style}]{sentiment}[/{style}]"


def print_citation_tables(result: dict) -> None:
    """
    Display an extraction result.

    Human mode: One Rich table for brand citations, one per competitor,
        and one for source URLs
    Agent mode: Buffer the full result dict as JSON under "result"
    Quiet mode: Tab-separated rows: kind, entity, position, sentiment,
        competitive_context, cited_domain, text

    Args:
        result: ExtractionResult.to_dict() output
    """
    if output_mode.is_agent():
        output_mode.add_json("result", result)
        return

    if output_mode.quiet:
        for citation in result["brand_citations"]:
            print(
                f"brand\t{result['brand']}\t{citation['position']}\t"
                f"{citation['sentiment']}\t-\t{citation['cited_domain'] or '-'}\t"
                f"{citation['text']}"
            )
        for group in result["competitor_citations"]:
            for citation in group["citations"]:
                print(
                    f"competitor\t{group['competitor']['name']}\t"
                    f"{citation['position']}\t{citation['sentiment']}\t"
                    f"{citation['competitive_context']}\t"
                    f"{citation['cited_domain'] or '-'}\t{citation['text']}"
                )
        for record in result["url_records"]:
            print(f"source\t-\t-\t-\t-\t{record['cited_domain']}\t{record['cited_url']}")
        return

    brand_table = Table(title=f"Brand Citations: {result['brand']}", box=box.ROUNDED)
    brand_table.add_column("#", justify="right", style="cyan", no_wrap=True)
    brand_table.add_column("Sentence")
    brand_table.add_column("Sentiment", justify="center")
    brand_table.add_column("Domain", style="magenta")

    for citation in result["brand_citations"]:
        brand_table.add_row(
            str(citation["position"]),
            escape(citation["text"]),
            _sentiment_cell(citation["sentiment"]),
            citation["cited_domain"] or "-",
        )

    console.print(brand_table)

    for group in result["competitor_citations"]:
        table = Table(
            title=f"Competitor Citations: {group['competitor']['name']}",
            box=box.ROUNDED,
        )
        table.add_column("#", justify="right", style="cyan", no_wrap=True)
        table.add_column("Sentence")
        table.add_column("Sentiment", justify="center")
        table.add_column("Compared", justify="center")
        table.add_column("Context", style="yellow")
        table.add_column("Domain", style="magenta")

        for citation in group["citations"]:
            compared_symbol = (
                "[green]✓[/green]"
                if citation["compared_with_brand"]
                else "[dim]✗[/dim]"
            )
            table.add_row(
                str(citation["position"]),
                escape(citation["text"]),
                _sentiment_cell(citation["sentiment"]),
                compared_symbol,
                citation["competitive_context"],
                citation["cited_domain"] or "-",
            )

        console.print(table)

    if result["url_records"]:
        url_table = Table(title="Source URLs", box=box.ROUNDED)
        url_table.add_column("Domain", style="magenta")
        url_table.add_column("URL")
        for record in result["url_records"]:
            url_table.add_row(record["cited_domain"], escape(record["cited_url"]))
        console.print(url_table)


def print_sentiment_breakdown(text: str, score: dict) -> None:
    """
    Display a sentiment label with its score breakdown.

    Args:
        text: The scored text
        score: dict with positive, negative, negation_penalty, label
    """
    if output_mode.is_agent():
        output_mode.add_json("text", text)
        output_mode.add_json("sentiment", score)
        return

    if output_mode.quiet:
        print(
            f"{score['label']}\t{score['positive']}\t{score['negative']}\t"
            f"{score['negation_penalty']}"
        )
        return

    summary_text = f"""
[bold]Label:[/bold] {_sentiment_cell(score["label"])}
[bold]Positive score:[/bold] {score["positive"]}
[bold]Negative score:[/bold] {score["negative"]}
[bold]Negation penalty:[/bold] {score["negation_penalty"]}
"""

    console.print(
        Panel(
            summary_text.strip(),
            title="[bold]Sentiment[/bold]",
            border_style=SENTIMENT_STYLES.get(score["label"], "white"),
            box=box.ROUNDED,
        )
    )


def print_batch_summary(summary: dict) -> None:
    """
    Display batch rescore statistics.

    Human mode: Rich panel (green if nothing failed, yellow otherwise)
    Agent mode: Buffer the summary under "summary"
    Quiet mode: Tab-separated total, updated, skipped, failed

    Args:
        summary: BatchSummary fields as a dict
    """
    if output_mode.is_agent():
        output_mode.add_json("summary", summary)
        return

    if output_mode.quiet:
        print(
            f"{summary['total']}\t{summary['updated']}\t"
            f"{summary['skipped']}\t{summary['failed']}"
        )
        return

    counts = summary["sentiment_counts"]
    summary_text = f"""
[bold]Batch ID:[/bold] {summary["batch_id"]}
[bold]Citations:[/bold] {summary["total"]}
[bold]Updated:[/bold] {summary["updated"]}  [bold]Skipped:[/bold] {summary["skipped"]}  [bold]Failed:[/bold] {summary["failed"]}
[bold]Sentiment:[/bold] [green]{counts["positive"]} positive[/green], {counts["neutral"]} neutral, [red]{counts["negative"]} negative[/red]
"""

    if summary["failed"] == 0:
        border_style = "green"
        title = "[bold green]✓ Rescore Completed[/bold green]"
    else:
        border_style = "yellow"
        title = "[bold yellow]⚠ Rescore Completed with Failures[/bold yellow]"

    console.print(
        Panel(summary_text.strip(), title=title, border_style=border_style, box=box.ROUNDED)
    )
