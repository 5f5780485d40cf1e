"""Command-line interface for Subscout.

Provides commands for configuration validation, extraction from a file of
decoded messages, and printing mailbox search queries.

Usage:
    python -m subscout validate-config
    python -m subscout extract messages.jsonl --brand netflix --format json
    python -m subscout queries --days 365
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.table import Table

from subscout.config import load_config_or_default, validate_config_file
from subscout.config_schema import AppConfig
from subscout.core.errors import ConfigLoadError, ConfigValidationError, InvalidInputError
from subscout.core.logging import configure_logging

console = Console()

config_option = click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False, path_type=Path),
    default=None,
    help="Path to config file (default: config/config.yaml)",
)


def _load_config_or_exit(config_path: Path | None) -> AppConfig:
    try:
        return load_config_or_default(config_path)
    except (ConfigLoadError, ConfigValidationError) as e:
        console.print(f"[red]Config error:[/red] {e}")
        sys.exit(1)


def read_messages(path: Path) -> list[dict[str, Any]]:
    """Read message mappings from a JSON array or JSON-lines file.

    Raises:
        InvalidInputError: If the file is not valid JSON/JSON-lines
    """
    content = path.read_text(encoding="utf-8")
    if content.lstrip().startswith("["):
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise InvalidInputError(f"Invalid JSON in {path}: {e}") from e
        return data

    messages = []
    for line_no, line in enumerate(content.splitlines(), start=1):
        if not line.strip():
            continue
        try:
            messages.append(json.loads(line))
        except json.JSONDecodeError as e:
            raise InvalidInputError(f"Invalid JSON on line {line_no} of {path}: {e}") from e
    return messages


def _format_amount(amount: float | None, currency: str | None) -> str:
    if amount is None:
        return "-"
    return f"{amount:,.2f} {currency}"


def _print_candidates_table(candidates: list, message_count: int) -> None:
    console.print(
        f"\nFound [cyan]{len(candidates)}[/cyan] subscription(s) in {message_count} message(s)"
    )
    if not candidates:
        return

    table = Table(box=None, padding=(0, 2))
    table.add_column("Provider", style="cyan")
    table.add_column("Product")
    table.add_column("Amount", justify="right")
    table.add_column("Start")
    table.add_column("Next billing")
    table.add_column("Message", style="dim")

    for c in candidates:
        table.add_row(
            c.provider,
            c.product or "-",
            _format_amount(c.amount, c.currency),
            c.start_date.isoformat() if c.start_date else "-",
            c.next_billing_date.isoformat() if c.next_billing_date else "-",
            c.evidence.source_message_id,
        )
    console.print(table)


@click.group()
@click.option("--debug/--no-debug", default=False, help="Enable debug logging")
def cli(debug: bool) -> None:
    """Subscout - find subscriptions in your email."""
    log_level = "DEBUG" if debug else "WARNING"
    # Logs go to stderr so results printed on stdout can be piped
    configure_logging(log_level=log_level, json_output=False, stream=sys.stderr)


@cli.command("validate-config")
@config_option
def validate_config(config_path: Path | None) -> None:
    """Validate the configuration file.

    Checks that config.yaml exists and passes Pydantic schema validation.
    Reports specific errors for invalid fields.
    """
    if config_path:
        console.print(f"Validating config: [cyan]{config_path}[/cyan]")
    else:
        console.print("Validating config: [cyan]config/config.yaml[/cyan]")

    is_valid, message = validate_config_file(config_path)

    if is_valid:
        console.print(f"\n[green]✓[/green] {message}")
        sys.exit(0)
    else:
        console.print(f"\n[red]✗[/red] {message}")
        sys.exit(1)


@cli.command("extract")
@click.argument("messages_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@config_option
@click.option(
    "--brand",
    "-b",
    "extra_brands",
    multiple=True,
    help="Additional brand name (repeatable), added to the configured brands",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format",
)
@click.option(
    "--output",
    "-o",
    "output_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write JSON output to this file instead of stdout (requires --format json)",
)
def extract(
    messages_path: Path,
    config_path: Path | None,
    extra_brands: tuple[str, ...],
    output_format: str,
    output_path: Path | None,
) -> None:
    """Extract subscriptions from a file of decoded messages.

    MESSAGES_PATH is a JSON array or JSON-lines file; each entry has an
    "id", the message text (or subject/snippet/body parts) and headers.
    """
    from subscout.extractor import extract_subscriptions

    if output_path and output_format != "json":
        raise click.UsageError("--output requires --format json")

    config = _load_config_or_exit(config_path)
    brands = [*config.brands.names, *extra_brands]
    if not brands:
        console.print(
            "[yellow]Warning:[/yellow] No brands configured. Every message will be rejected.\n"
            "Add names under [cyan]brands.names[/cyan] in config.yaml or pass --brand."
        )

    try:
        messages = read_messages(messages_path)
        candidates = extract_subscriptions(messages, brands, config.extraction)
    except InvalidInputError as e:
        console.print(f"[red]Input error:[/red] {e}")
        sys.exit(1)

    if output_format == "table":
        _print_candidates_table(candidates, len(messages))
        return

    payload = json.dumps([c.to_dict() for c in candidates], indent=2, ensure_ascii=False)
    if output_path:
        output_path.write_text(payload + "\n", encoding="utf-8")
        console.print(f"Wrote {len(candidates)} candidate(s) to [cyan]{output_path}[/cyan]")
    else:
        click.echo(payload)


@cli.command("queries")
@config_option
@click.option(
    "--days",
    default=365,
    type=click.IntRange(min=1),
    help="Search window in days",
)
def queries(config_path: Path | None, days: int) -> None:
    """Print mailbox search queries for the configured brands."""
    from subscout.extractor.queries import build_search_queries, lookback_since

    config = _load_config_or_exit(config_path)
    for query in build_search_queries(config.brands.names, lookback_since(days)):
        click.echo(query)


def main() -> None:
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
