"""Model curator CLI entrypoint."""

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from modelcurator._internal.logging import configure_logging
from modelcurator.cli.commands.curate import cmd_curate
from modelcurator.cli.commands.snapshot import cmd_select, cmd_show


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="model-curator",
        description="Curate free and cheap default models from pricing and quality listings",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log discards and promotions")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # curate
    curate_parser = subparsers.add_parser("curate", help="Build a snapshot from local listings")
    curate_parser.add_argument("--pricing", type=Path, required=True, help="Pricing listing JSON")
    curate_parser.add_argument("--quality", type=Path, required=True, help="Quality listing JSON")
    curate_parser.add_argument("--aliases", type=Path, help="Alias dictionary JSON")
    curate_parser.add_argument("--config", type=Path, help="YAML file with a 'curator' section")
    curate_parser.add_argument("--out", type=Path, help="Write the snapshot here instead of stdout")
    curate_parser.add_argument(
        "--verbose", "-v", action="store_true", default=argparse.SUPPRESS, help="Log discards and promotions"
    )
    curate_parser.set_defaults(func=cmd_curate)

    # show
    show_parser = subparsers.add_parser("show", help="Print both tiers of a snapshot")
    show_parser.add_argument("snapshot", type=Path, help="Snapshot file")
    show_parser.set_defaults(func=cmd_show)

    # select
    select_parser = subparsers.add_parser("select", help="Print the model a preference selects")
    select_parser.add_argument("snapshot", type=Path, help="Snapshot file")
    select_parser.add_argument("--model", default="auto", help="'auto' or an explicit slug")
    select_parser.add_argument(
        "--free-only", action="store_true", help="Prefer the free tier for automatic selection"
    )
    select_parser.set_defaults(func=cmd_select)

    # Set default to help
    parser.set_defaults(func=None)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main CLI entry point.

    Returns:
        int: Exit code for the shell
            - 0: Success
            - 1: General error
            - 2: Incorrect usage (shows help)
            - 130: Interrupted by user (Ctrl+C)
    """
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        return int(e.code) if isinstance(e.code, int) else 0

    if args.func is None:
        parser.print_help()
        return 2

    configure_logging(verbose=args.verbose)

    try:
        ret = args.func(args)
        return int(ret)
    except KeyboardInterrupt:
        print("\nOperation cancelled.")
        return 130
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
