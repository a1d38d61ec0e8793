"""
Command-line interface for the domain grid system.

Subcommands:
- check: resolve every base name against every TLD and print the grid
- config: create, show or validate the JSON configuration
- self-test: probe the configured DoH providers
"""

import argparse
import asyncio
import json
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional, Sequence

from . import __version__
from .audit_logger import create_logger
from .config import (
    DEFAULT_CONFIG_PATH,
    SystemConfig,
    apply_env_overrides,
    create_default_config,
    load_config_from_file,
    save_config_to_file,
    validate_config,
)
from .domain_validator import parse_base_names, parse_tlds
from .exceptions import ConfigError, ValidationError
from .i18n import get_message
from .models import GridRow, RunSummary
from .orchestrator import CheckOrchestrator
from .self_test import run_self_test
from .view import (
    BASE_NAME_SORT_KEY,
    FilterOptions,
    SortConfig,
    filter_rows,
    next_sort_config,
    sort_rows,
)


def build_config(args: argparse.Namespace) -> SystemConfig:
    """
    Resolve the effective configuration for a command.

    Order of precedence: command-line flags, then DOMAIN_GRID_* environment
    variables, then the config file, then built-in defaults.

    Raises:
        ConfigError: If the config file cannot be loaded or the result is invalid
    """
    config = None
    config_path = getattr(args, "config", None)
    if config_path:
        config = load_config_from_file(Path(config_path))
        if config is None:
            raise ConfigError(
                code="missing_config",
                message=f"Could not load config from {config_path}",
                details={"path": config_path},
            )

    if config is None:
        config = create_default_config()

    config = apply_env_overrides(config)

    overrides: dict = {}
    if getattr(args, "dry_run", False):
        overrides["simulation_mode"] = True
    if getattr(args, "language", None):
        overrides["language"] = args.language
    if getattr(args, "max_concurrency", None) is not None:
        overrides["max_concurrent_checks"] = args.max_concurrency
    if getattr(args, "interval", None) is not None:
        overrides["flush_interval_seconds"] = args.interval
    config = replace(config, **overrides)

    errors = validate_config(config)
    if errors:
        raise ConfigError(
            code="invalid_config",
            message="; ".join(errors),
            details={"errors": errors},
        )
    return config


def render_grid(rows: Sequence[GridRow], tlds: Sequence[str], language: str = "en") -> str:
    """Render rows as a fixed-width text table with localized statuses."""
    header = [get_message("cli.base_name_header", language)] + [f".{tld}" for tld in tlds]
    table = [header]
    for row in rows:
        line = [row.base_name]
        for tld in tlds:
            cell = row.cell_for(tld)
            line.append(
                get_message(f"status.{cell.status.value.lower()}", language) if cell else "-"
            )
        table.append(line)

    widths = [max(len(line[i]) for line in table) for i in range(len(header))]
    return "\n".join(
        "  ".join(value.ljust(width) for value, width in zip(line, widths)).rstrip()
        for line in table
    )


def grid_to_dict(
    rows: Sequence[GridRow],
    tlds: Sequence[str],
    summary: RunSummary,
) -> dict:
    """Serialize a finished grid for JSON export."""
    return {
        "tlds": list(tlds),
        "summary": {
            "total": summary.total,
            "available": summary.available,
            "taken": summary.taken,
            "invalid": summary.invalid,
            "elapsed_seconds": summary.elapsed_seconds,
        },
        "rows": [
            {
                "base_name": row.base_name,
                "cells": [
                    {
                        "domain": f"{row.base_name}.{cell.tld}",
                        "tld": cell.tld,
                        "status": cell.status.value,
                        "reason": cell.reason,
                    }
                    for cell in row.cells
                ],
            }
            for row in rows
        ],
    }


def read_base_names(names: Optional[str], names_file: Optional[str]) -> str:
    """
    Combine --names text and the contents of --names-file into one blob.

    Lines in the file starting with '#' are ignored.

    Raises:
        OSError: If the file cannot be read
    """
    parts = [names or ""]
    if names_file:
        with open(names_file, "r", encoding="utf-8") as f:
            parts.extend(line for line in f if not line.lstrip().startswith("#"))
    return "\n".join(parts)


async def check_grid(
    base_names_text: str,
    tlds_text: str,
    config: SystemConfig,
    filters: FilterOptions,
    sort_config: Optional[SortConfig] = None,
    output_file: Optional[Path] = None,
    verbose: bool = False,
) -> int:
    """
    Check every base name against every TLD and print the results.

    Args:
        base_names_text: Free-text base names (newline/space/comma separated)
        tlds_text: Comma-separated TLDs
        config: System configuration
        filters: Row filters applied to the printed and exported grid
        sort_config: Optional sort applied after filtering
        output_file: Optional path to write the grid as JSON
        verbose: Enable debug logging

    Returns:
        Exit code (0 if any domain is available, 1 otherwise or on input error)
    """
    language = config.language

    if config.startup_self_test:
        self_test_result = await run_self_test(
            config=config,
            print_output=verbose,
            language=language,
        )
        if not self_test_result.success:
            print(get_message("selftest.failed", language), file=sys.stderr)
            return 1

    if config.simulation_mode:
        print(get_message("simulation.enabled", language))

    logger = create_logger(
        level="debug" if verbose else config.logging.level,
        output_format=config.logging.output_format,
    )

    base_names = parse_base_names(base_names_text)
    tlds = parse_tlds(tlds_text)

    async with CheckOrchestrator(config=config, logger=logger) as orchestrator:
        orchestrator.add_listener(lambda rows: print(orchestrator.summary_text()))

        try:
            context = orchestrator.start(base_names, tlds)
        except ValidationError as e:
            print(e.message, file=sys.stderr)
            return 1

        print(
            get_message(
                "cli.checking",
                language,
                total=len(context.combinations),
                names=len(context.grid),
                tlds=len(context.grid.tlds),
            )
        )
        summary = await orchestrator.wait()
        rows = sort_rows(filter_rows(orchestrator.rows, filters), sort_config)
        tld_columns = orchestrator.tlds

    print()
    if rows:
        print(render_grid(rows, tld_columns, language))
    elif filters.is_active:
        print(get_message("cli.no_results_match", language))

    if output_file:
        try:
            output_file.parent.mkdir(parents=True, exist_ok=True)
            with open(output_file, "w", encoding="utf-8") as f:
                json.dump(grid_to_dict(rows, tld_columns, summary), f, indent=2, ensure_ascii=False)
            print(get_message("cli.results_written", language, path=output_file))
        except OSError as e:
            print(f"Error writing results: {e}", file=sys.stderr)

    return 0 if summary.available > 0 else 1


def cmd_check(args: argparse.Namespace) -> int:
    """Handle the 'check' command."""
    try:
        config = build_config(args)
    except ConfigError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    try:
        base_names_text = read_base_names(args.names, args.names_file)
    except OSError as e:
        print(f"Error reading file: {e}", file=sys.stderr)
        return 1

    filters = FilterOptions(
        base_name_query=args.query or "",
        has_available=args.has_available,
        no_taken=args.no_taken,
        no_invalid=args.no_invalid,
        best_consonant=args.best_consonant,
    )

    sort_config = None
    if args.sort:
        sort_config = next_sort_config(None, args.sort)
        if args.descending:
            sort_config = next_sort_config(sort_config, args.sort)

    output_file = Path(args.output) if args.output else None

    return asyncio.run(check_grid(
        base_names_text=base_names_text,
        tlds_text=args.tlds or "",
        config=config,
        filters=filters,
        sort_config=sort_config,
        output_file=output_file,
        verbose=args.verbose,
    ))


def cmd_self_test(args: argparse.Namespace) -> int:
    """Handle the 'self-test' command."""
    try:
        config = build_config(args)
    except ConfigError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    result = asyncio.run(run_self_test(
        config=config,
        print_output=True,
        language=config.language,
    ))

    return 0 if result.success else 1


def cmd_config(args: argparse.Namespace) -> int:
    """Handle the 'config' command."""
    config_path = Path(args.path) if args.path else DEFAULT_CONFIG_PATH

    if args.action == "show":
        try:
            config = load_config_from_file(config_path)
        except ConfigError as e:
            print(f"Error: {e.message}", file=sys.stderr)
            return 1
        if config is None:
            print(f"No configuration found at: {config_path}")
            print("Use 'config init' to create a default configuration.")
            return 1

        print(f"Configuration from: {config_path}")
        print(f"  Language: {config.language}")
        print(f"  Simulation mode: {config.simulation_mode}")
        print(f"  Providers: {', '.join(p.name for p in config.providers)}")
        print(f"  Record types: {', '.join(config.record_types)}")
        print(f"  Max concurrent checks: {config.max_concurrent_checks}")
        print(f"  Flush interval: {config.flush_interval_seconds}s")
        print(f"  Log level: {config.logging.level}")
        return 0

    elif args.action == "init":
        if config_path.exists() and not args.force:
            print(f"Configuration already exists at: {config_path}")
            print("Use --force to overwrite.")
            return 1

        config = create_default_config(language=args.language or "en")
        try:
            save_config_to_file(config, config_path)
        except ConfigError as e:
            print(f"Error: {e.message}", file=sys.stderr)
            return 1
        print(f"Configuration created at: {config_path}")
        return 0

    elif args.action == "validate":
        try:
            config = load_config_from_file(config_path)
        except ConfigError as e:
            print(f"Error: {e.message}", file=sys.stderr)
            return 1
        if config is None:
            print(f"Error: Could not load config from {config_path}", file=sys.stderr)
            return 1

        errors = validate_config(config)
        if errors:
            print(f"Configuration at {config_path} is invalid:", file=sys.stderr)
            for error in errors:
                print(f"  - {error}", file=sys.stderr)
            return 1

        print(f"Configuration at {config_path} is valid.")
        return 0

    return 1


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config", "-c",
        help="Path to configuration file",
    )
    parser.add_argument(
        "--language", "-l",
        choices=["en", "de"],
        default=None,
        help="Output language (default: from config, else en)",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="domain-grid",
        description="Bulk domain availability grid over DNS-over-HTTPS",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # 'check' command
    check_parser = subparsers.add_parser(
        "check",
        help="Check base names against TLDs",
    )
    check_parser.add_argument(
        "--names",
        help="Base names separated by newlines, spaces or commas",
    )
    check_parser.add_argument(
        "--names-file",
        help="File with base names (one or more per line)",
    )
    check_parser.add_argument(
        "--tlds",
        help="Comma-separated TLDs (e.g., com,net,co.uk)",
    )
    _add_common_arguments(check_parser)
    check_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Simulation mode - no real network requests",
    )
    check_parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose output",
    )
    check_parser.add_argument(
        "--max-concurrency",
        type=int,
        default=None,
        help="Maximum checks in flight (0 = unbounded)",
    )
    check_parser.add_argument(
        "--interval",
        type=float,
        default=None,
        help="Flush interval in seconds",
    )
    check_parser.add_argument(
        "--output", "-o",
        help="Path to write results as JSON",
    )
    check_parser.add_argument(
        "--query",
        help="Only show base names containing this text",
    )
    check_parser.add_argument(
        "--has-available",
        action="store_true",
        help="Only show base names with at least one available TLD",
    )
    check_parser.add_argument(
        "--no-taken",
        action="store_true",
        help="Hide base names with any taken TLD",
    )
    check_parser.add_argument(
        "--no-invalid",
        action="store_true",
        help="Hide base names with any invalid TLD",
    )
    check_parser.add_argument(
        "--best-consonant",
        action="store_true",
        help="Only show names starting with a consonant and containing a vowel",
    )
    check_parser.add_argument(
        "--sort",
        help=f"Sort by '{BASE_NAME_SORT_KEY}' or by a TLD column (e.g., com)",
    )
    check_parser.add_argument(
        "--descending",
        action="store_true",
        help="Sort in descending order",
    )
    check_parser.set_defaults(func=cmd_check)

    # 'config' command
    config_parser = subparsers.add_parser(
        "config",
        help="Configuration management",
    )
    config_parser.add_argument(
        "action",
        choices=["show", "init", "validate"],
        help="Configuration action",
    )
    config_parser.add_argument(
        "--path", "-p",
        help="Path to configuration file",
    )
    config_parser.add_argument(
        "--force", "-f",
        action="store_true",
        help="Force overwrite existing configuration",
    )
    config_parser.add_argument(
        "--language", "-l",
        choices=["en", "de"],
        default=None,
        help="Default language for new configuration",
    )
    config_parser.set_defaults(func=cmd_config)

    # 'self-test' command
    self_test_parser = subparsers.add_parser(
        "self-test",
        help="Probe every configured DoH provider",
    )
    _add_common_arguments(self_test_parser)
    self_test_parser.set_defaults(func=cmd_self_test)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
