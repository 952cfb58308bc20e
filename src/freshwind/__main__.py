"""CLI entry point for freshwind."""

import sys


def main() -> int:
    """Main entry point for freshwind CLI."""
    from freshwind.cli import run_cli

    return run_cli(sys.argv[1:])


if __name__ == "__main__":
    sys.exit(main())
