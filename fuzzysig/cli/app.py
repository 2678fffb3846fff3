"""CLI app entry point.

Provides the ``fuzzysig`` Typer app:

- validate: load and validate an engine configuration
- evaluate: score one instrument per OHLCV CSV file
- indicators: list the registered indicator types
"""

import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import pandas as pd
import typer
from rich.console import Console
from rich.table import Table

from fuzzysig import configure_logging, get_logger, set_debug_mode
from fuzzysig.config import get_settings, load_engine_config
from fuzzysig.data.provider import InMemorySeriesProvider, load_bars_csv
from fuzzysig.errors import ConfigurationError, FuzzysigError
from fuzzysig.indicators import INDICATOR_REGISTRY
from fuzzysig.signals import EvaluationResult, SignalAggregator

# Setup logging and console
logger = get_logger(__name__)
console = Console()
error_console = Console(stderr=True)

app = typer.Typer(
    name="fuzzysig",
    help="fuzzysig - fuzzy-logic trading signal engine.",
    add_completion=False,
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show debug output",
    ),
):
    """Configure logging before any command runs."""
    settings = get_settings()
    debug = verbose or settings.debug
    set_debug_mode(debug)
    configure_logging(
        log_dir=settings.log_dir,
        console_level=logging.DEBUG if debug else getattr(logging, settings.log_level),
    )


def _print_config_error(e: ConfigurationError) -> None:
    error_console.print(f"[bold red]Configuration error:[/bold red] {e.format_user_message()}")
    for detail in e.details.get("validation_errors", []):
        error_console.print(f"  - {detail['field']}: {detail['message']}")


@app.command("validate")
def validate_config(
    config_path: Path = typer.Argument(..., help="Engine configuration YAML file"),
):
    """
    Load and validate an engine configuration.

    Examples:
        fuzzysig validate config/signal_engine.yaml
    """
    try:
        config = load_engine_config(config_path)
        aggregator = SignalAggregator.from_config(config)
    except ConfigurationError as e:
        _print_config_error(e)
        sys.exit(1)

    console.print(f"[green]✓[/green] {config_path} is valid")
    console.print(
        f"  {len(config.indicators)} indicators "
        f"({len(aggregator.required_indicators)} used by rules), "
        f"{len(config.rules)} rules, window length {aggregator.window_length}"
    )


def _result_row(result: EvaluationResult) -> list[str]:
    if result.ok:
        output = result.output
        return [
            result.instrument_id,
            str(output.timestamp),
            f"{output.score:+.4f}",
            f"{output.confidence:.3f}",
            output.label,
            ", ".join(output.contributing_rule_ids) or "-",
            "yes" if output.stale else "",
        ]
    error = result.error
    return [
        result.instrument_id,
        str(result.as_of),
        "[red]error[/red]",
        "",
        f"[red]{error.error_code}[/red]",
        error.message,
        "",
    ]


def _result_dict(result: EvaluationResult) -> dict:
    if result.ok:
        return result.output.to_dict()
    return {
        "instrument_id": result.instrument_id,
        "timestamp": result.as_of.isoformat(),
        "error": result.error.to_dict(),
    }


@app.command("evaluate")
def evaluate(
    config_path: Path = typer.Argument(..., help="Engine configuration YAML file"),
    csv_files: list[Path] = typer.Argument(
        ..., help="OHLCV CSV files, one instrument each (instrument id = file name stem)"
    ),
    as_of: Optional[str] = typer.Option(
        None, "--as-of", help="Evaluation timestamp (default: last bar of each file)"
    ),
    workers: Optional[int] = typer.Option(
        None, "--workers", "-w", help="Thread pool size", min=1
    ),
    output_format: str = typer.Option(
        "table", "--format", "-f", help="Output format (table, json)"
    ),
):
    """
    Score instruments from CSV price files.

    Examples:
        fuzzysig evaluate config/signal_engine.yaml data/EURUSD.csv data/GBPUSD.csv
        fuzzysig evaluate config/signal_engine.yaml data/EURUSD.csv --as-of 2024-03-01T16:00
    """
    if output_format not in ("table", "json"):
        error_console.print(f"[bold red]Error:[/bold red] Unknown format '{output_format}'")
        sys.exit(2)

    try:
        config = load_engine_config(config_path)
        series = {csv_file.stem: load_bars_csv(csv_file) for csv_file in csv_files}
        provider = InMemorySeriesProvider(series)
        aggregator = SignalAggregator.from_config(config, provider)
    except ConfigurationError as e:
        _print_config_error(e)
        sys.exit(1)
    except (FuzzysigError, OSError, ValueError) as e:
        error_console.print(f"[bold red]Error:[/bold red] {e}")
        sys.exit(1)

    requests: list[tuple[str, datetime]] = []
    for instrument_id, bars in series.items():
        if as_of is not None:
            timestamp = pd.Timestamp(as_of).to_pydatetime()
        elif bars:
            timestamp = bars[-1].timestamp
        else:
            error_console.print(f"[yellow]Skipping {instrument_id}: no bars[/yellow]")
            continue
        requests.append((instrument_id, timestamp))

    results = aggregator.evaluate_many(
        requests, max_workers=workers or get_settings().max_workers
    )

    if output_format == "json":
        console.print_json(json.dumps([_result_dict(result) for result in results]))
    else:
        table = Table(title="Signals")
        for column in ("Instrument", "As of", "Score", "Confidence", "Label", "Rules", "Stale"):
            table.add_column(column)
        for result in results:
            table.add_row(*_result_row(result))
        console.print(table)

    if any(not result.ok for result in results):
        sys.exit(1)


@app.command("indicators")
def list_indicators():
    """List the registered indicator types."""
    table = Table(title="Indicator types")
    table.add_column("Type")
    table.add_column("Class")
    table.add_column("Family")
    table.add_column("Outputs")
    for name in INDICATOR_REGISTRY.list_types():
        indicator_class = INDICATOR_REGISTRY.get_or_raise(name)
        table.add_row(
            name,
            indicator_class.__name__,
            indicator_class.family,
            ", ".join(indicator_class.outputs),
        )
    console.print(table)


if __name__ == "__main__":
    app()
