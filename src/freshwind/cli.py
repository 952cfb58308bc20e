"""Command-line interface for freshwind."""

from __future__ import annotations

import argparse
import asyncio
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from freshwind import __version__
from freshwind.config import ConfigError, LoggingConfig, load_config
from freshwind.logging import get_logger, setup_logging
from freshwind.watching import FilterConfigError

log = get_logger("cli")

# Exit status for unusable configuration
EXIT_CONFIG = 2


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="freshwind",
        description="Serve a directory and reload the browser when files change",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=None,
        help="Show debug output",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Only report errors",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Config file path (default: ./freshwind.yaml)",
    )
    parser.add_argument(
        "-d", "--dir",
        dest="root",
        type=Path,
        help="Directory to serve and watch (default: .)",
    )
    parser.add_argument(
        "--host",
        help="Address to bind (default: 127.0.0.1)",
    )
    parser.add_argument(
        "-p", "--port",
        type=int,
        help="Port to bind (default: 8000)",
    )
    parser.add_argument(
        "-t", "--interval",
        dest="interval_ms",
        type=int,
        help="Milliseconds between change checks (default: 1000)",
    )
    parser.add_argument(
        "-i", "--include",
        help="Comma-separated regexps; only matching file names are watched "
        "(default: every file)",
    )
    parser.add_argument(
        "-f", "--exclude",
        help="Comma-separated regexps of file names to ignore. Patterns are "
        "matched against the base name, so escape dots (\\.) to match a "
        "literal point (default: ^\\. which skips hidden files)",
    )
    parser.add_argument(
        "--reload-path",
        help="Path name of the reload WebSocket (default: __live_reload)",
    )
    parser.add_argument(
        "--log-file",
        help="Write logs to this file instead of stderr",
    )
    return parser


def _overrides(parsed: argparse.Namespace) -> dict[str, Any]:
    overrides: dict[str, Any] = {
        "root": parsed.root,
        "host": parsed.host,
        "port": parsed.port,
        "interval_ms": parsed.interval_ms,
        "include": parsed.include,
        "exclude": parsed.exclude,
        "reload_path": parsed.reload_path,
    }

    logging_overrides: dict[str, Any] = {}
    if parsed.quiet:
        logging_overrides["verbose"] = 0
    elif parsed.verbose is not None:
        logging_overrides["verbose"] = parsed.verbose
    if parsed.log_file:
        logging_overrides["file"] = parsed.log_file
    if logging_overrides:
        overrides["logging"] = logging_overrides

    return overrides


def run_cli(args: Sequence[str]) -> int:
    """Run the CLI with the given arguments."""
    parser = create_parser()
    parsed = parser.parse_args(args)

    try:
        config = load_config(config_path=parsed.config, overrides=_overrides(parsed))
    except ConfigError as e:
        setup_logging(LoggingConfig(file=parsed.log_file))
        log.error("%s", e)
        return EXIT_CONFIG

    setup_logging(config.logging)

    if not config.root.is_dir():
        log.error("Not a directory: %s", config.root)
        return EXIT_CONFIG

    from freshwind.server import serve

    try:
        asyncio.run(serve(config))
    except FilterConfigError as e:
        log.error("%s", e)
        return EXIT_CONFIG
    except KeyboardInterrupt:
        pass
    return 0
