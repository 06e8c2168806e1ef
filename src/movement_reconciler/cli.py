"""Command-line interface for the movement reconciler."""

import argparse
import json
import sys
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from movement_reconciler import __version__
from movement_reconciler.config import Config, ConfigError, load_config
from movement_reconciler.models.finding import FindingKind, Verdict
from movement_reconciler.output import json_default
from movement_reconciler.utils.logging_config import get_logger, setup_logging

# Load environment variables from .env file (if it exists)
load_dotenv()

console = Console()
logger = get_logger(__name__)

EXIT_ACCEPTED = 0
EXIT_REJECTED = 1
EXIT_INVALID_INPUT = 2


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser.

    Returns:
        Configured ArgumentParser.
    """
    parser = argparse.ArgumentParser(
        prog="movement-reconciler",
        description=(
            "Validate bank movements against balance control points: detect "
            "balance mismatches, duplicates, uncovered movements and "
            "out-of-order control points"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s -i request.json
  %(prog)s -i request.json -o verdict.json --csv ./findings
  %(prog)s --generate-dataset large.json --movements 50000 --balances 100
  %(prog)s --benchmark
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "-i", "--input",
        type=Path,
        default=None,
        help="Request JSON file with 'movements' and 'balances'",
    )

    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=None,
        help="Write the verdict JSON to this file",
    )

    parser.add_argument(
        "--csv",
        type=Path,
        default=None,
        metavar="DIR",
        help="Also export findings as CSV files into DIR",
    )

    parser.add_argument(
        "--group-reasons",
        action="store_true",
        help="Group findings by type in the verdict",
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to settings.yaml (default: config/settings.yaml)",
    )

    parser.add_argument(
        "--config-dir",
        type=Path,
        default=Path("config"),
        help="Base config directory (default: ./config)",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase output verbosity (-v, -vv)",
    )

    parser.add_argument(
        "--validate-only",
        action="store_true",
        help="Validate configuration files only",
    )

    data_group = parser.add_argument_group("Datasets and benchmarks")
    data_group.add_argument(
        "--generate-dataset",
        type=Path,
        default=None,
        metavar="FILE",
        help="Write a synthetic request to FILE",
    )
    data_group.add_argument(
        "--movements",
        type=int,
        default=10_000,
        help="Movements in the generated dataset (default: 10000)",
    )
    data_group.add_argument(
        "--balances",
        type=int,
        default=50,
        help="Balance control points in the generated dataset (default: 50)",
    )
    data_group.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for dataset generation",
    )
    data_group.add_argument(
        "--benchmark",
        action="store_true",
        help="Time the validator on generated datasets of several sizes",
    )

    return parser


def get_log_level(verbosity: int) -> str:
    """Convert verbosity count to log level.

    Args:
        verbosity: Number of -v flags.

    Returns:
        Log level string.
    """
    if verbosity >= 2:
        return "DEBUG"
    elif verbosity >= 1:
        return "INFO"
    else:
        return "WARNING"


def validate_config(args: argparse.Namespace) -> int:
    """Validate configuration files.

    Args:
        args: Parsed command-line arguments.

    Returns:
        0 if valid, 1 if errors found.
    """
    console.print("[bold]Validating configuration files...[/bold]\n")

    settings_path = args.config or (args.config_dir / "settings.yaml")
    if settings_path.exists():
        console.print(f"[green]✓[/green] Settings: {settings_path}")
    else:
        console.print(f"[yellow]Settings file not found: {settings_path} (defaults apply)[/yellow]")

    try:
        config = load_config(settings_path=args.config, config_dir=args.config_dir)
    except (ConfigError, FileNotFoundError) as e:
        console.print(f"\n[red]Errors:[/red]\n  - {e}")
        return 1

    console.print("\n[green]✓[/green] Configuration loaded successfully")
    console.print(f"  - group reasons: {config.validation.group_reasons}")
    console.print(f"  - future date grace: {config.validation.future_date_grace_days} day(s)")
    console.print(f"  - max date age: {config.validation.max_date_age_years} year(s)")
    console.print(f"  - log level: {config.logging.level}")
    console.print("\n[green]Configuration is valid.[/green]")
    return 0


def display_verdict(verdict: Verdict) -> None:
    """Print a verdict with one table row per finding.

    Args:
        verdict: Verdict to display.
    """
    if verdict.accepted:
        console.print("\n[bold green]Accepted[/bold green]")
        return

    console.print(
        f"\n[bold red]Validation failed[/bold red] ({len(verdict.findings)} finding(s))"
    )

    table = Table(show_header=True, header_style="bold")
    table.add_column("Type")
    table.add_column("Message")
    for finding in verdict.findings:
        table.add_row(finding.kind.value, escape(finding.message))
    console.print(table)

    for finding in verdict.findings_of(FindingKind.DUPLICATE_TRANSACTION):
        dup_table = Table(title="Duplicate movements", show_header=True)
        dup_table.add_column("ID", justify="right")
        dup_table.add_column("Date")
        dup_table.add_column("Amount", justify="right")
        dup_table.add_column("Label")
        dup_table.add_column("Type")
        for record in finding.details["duplicateMovements"]:
            dup_table.add_row(
                str(record.movement_id),
                record.date.isoformat(),
                str(record.amount),
                escape(record.label),
                record.duplicate_type.value,
            )
        console.print(dup_table)


def generate_dataset_command(args: argparse.Namespace) -> int:
    """Write a synthetic request file.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Exit code.
    """
    from movement_reconciler.benchmark import generate_dataset

    if args.movements < 0 or args.balances < 0:
        console.print("[red]Error: --movements and --balances must be non-negative[/red]")
        return EXIT_INVALID_INPUT

    with console.status("[bold green]Generating dataset..."):
        dataset = generate_dataset(args.movements, args.balances, seed=args.seed)

    output_path: Path = args.generate_dataset
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(dataset, f, indent=2, default=json_default)

    size_mb = output_path.stat().st_size / 1024 / 1024
    console.print(f"[green]Generated {output_path}[/green]")
    console.print(f"  - Movements: {args.movements:,}")
    console.print(f"  - Balances: {args.balances}")
    console.print(f"  - File size: {size_mb:.2f} MB")
    return 0


def benchmark_command(config: Config) -> int:
    """Run the benchmark and print a results table.

    Args:
        config: Application configuration.

    Returns:
        Exit code.
    """
    from movement_reconciler.benchmark import run_benchmark

    with console.status("[bold green]Running benchmark..."):
        results = run_benchmark(config=config)

    table = Table(title="Validation benchmark", show_header=True, header_style="bold")
    table.add_column("Dataset")
    table.add_column("Movements", justify="right")
    table.add_column("Balances", justify="right")
    table.add_column("Duration (ms)", justify="right")
    table.add_column("Movements/s", justify="right")
    table.add_column("Findings", justify="right")
    for result in results:
        table.add_row(
            result.name,
            f"{result.movements:,}",
            str(result.balances),
            f"{result.duration_ms:,.1f}",
            f"{result.throughput:,.0f}",
            str(result.findings),
        )
    console.print(table)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI.

    Args:
        argv: Arguments (defaults to sys.argv[1:]).

    Returns:
        0 when accepted, 1 when rejected, 2 on invalid input.
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.validate_only:
        setup_logging(level=get_log_level(args.verbose), console_output=args.verbose > 0)
        return validate_config(args)

    try:
        config = load_config(settings_path=args.config, config_dir=args.config_dir)
    except (ConfigError, FileNotFoundError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        console.print("Run with --validate-only to check configuration files.")
        return EXIT_INVALID_INPUT

    log_level = get_log_level(args.verbose) if args.verbose else config.logging.level
    setup_logging(
        level=log_level,
        log_file=config.logging.file,
        console_output=args.verbose > 0,
    )

    if args.group_reasons:
        config.validation.group_reasons = True

    if args.generate_dataset is not None:
        return generate_dataset_command(args)

    if args.benchmark:
        return benchmark_command(config)

    if args.input is None:
        console.print("[red]Error: --input is required[/red]")
        parser.print_usage()
        return EXIT_INVALID_INPUT

    from movement_reconciler.output import CSVExporter, JSONWriter
    from movement_reconciler.parsers import ParseError, RequestParser, RequestValidationError
    from movement_reconciler.processing import MovementValidator

    try:
        request = RequestParser(config).parse_file(args.input)
    except FileNotFoundError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return EXIT_INVALID_INPUT
    except RequestValidationError as e:
        console.print(f"[red]Invalid request ({len(e.errors)} error(s)):[/red]")
        for err in e.errors[:20]:
            console.print(f"  - {escape(err)}")
        if len(e.errors) > 20:
            console.print(f"  ... and {len(e.errors) - 20} more")
        return EXIT_INVALID_INPUT
    except ParseError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return EXIT_INVALID_INPUT

    console.print(
        f"Validating {len(request.movements)} movements against "
        f"{len(request.balances)} balance control points"
    )

    with console.status("[bold green]Validating movements..."):
        verdict = MovementValidator(config).validate_request(request)

    display_verdict(verdict)

    if args.output is not None:
        path = JSONWriter(config).write(args.output, verdict)
        console.print(f"[green]Verdict written to {path}[/green]")

    if args.csv is not None:
        paths = CSVExporter().export(args.csv, verdict)
        console.print(f"[green]CSV files written to {args.csv} ({len(paths)} file(s))[/green]")

    return EXIT_ACCEPTED if verdict.accepted else EXIT_REJECTED


if __name__ == "__main__":
    sys.exit(main())
