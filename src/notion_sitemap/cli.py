"""
Command-line interface for Notion Sitemap
"""

import argparse
import asyncio
import json
import logging
import sys

from .config import SitemapConfig
from .errors import ConfigurationError
from .sitemap import build_sitemap


def setup_logging(verbose: bool):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def validate_positive_int(value):
    """Validate that a value is a positive integer."""
    try:
        ivalue = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{value} is not a valid integer")
    if ivalue < 1:
        raise argparse.ArgumentTypeError(f"{value} must be a positive integer")
    return ivalue


def validate_non_negative_int(value):
    """Validate that a value is a non-negative integer."""
    try:
        ivalue = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{value} is not a valid integer")
    if ivalue < 0:
        raise argparse.ArgumentTypeError(f"{value} must not be negative")
    return ivalue


def validate_non_negative_float(value):
    """Validate that a value is a non-negative float."""
    try:
        fvalue = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{value} is not a valid number")
    if fvalue < 0:
        raise argparse.ArgumentTypeError(f"{value} must not be negative")
    return fvalue


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate a Markdown sitemap of a Notion page tree"
    )
    parser.add_argument(
        "root_id",
        nargs="?",
        help="Id of the root page (default: $SCRIPT_ID)",
    )
    parser.add_argument(
        "--token",
        help="Notion integration token (default: $NOTION_KEY)",
    )
    parser.add_argument(
        "-o",
        "--output",
        help="Write the sitemap to this file instead of stdout",
    )
    parser.add_argument(
        "--max-depth",
        type=validate_non_negative_int,
        default=None,
        help="Maximum nest level to recurse through (default: unlimited, 0 for no maximum)",
    )
    parser.add_argument(
        "--max-collection-members",
        type=validate_positive_int,
        default=None,
        help="Maximum number of database pages to recurse through (default: 5)",
    )
    parser.add_argument(
        "--no-suppress-over-limit",
        action="store_true",
        help="Keep the first database pages instead of ignoring databases above the maximum",
    )
    parser.add_argument(
        "--log-unsupported",
        action="store_true",
        help="Log pages that contain unsupported blocks",
    )
    parser.add_argument(
        "--collection-filter",
        type=str,
        help='Notion filter for database queries as JSON string (e.g., \'{"property": "Done", "checkbox": {"equals": true}}\')',
    )
    parser.add_argument(
        "--delay",
        type=validate_non_negative_float,
        default=None,
        help="Delay between expansion steps in seconds (default: 0)",
    )
    parser.add_argument(
        "--json-output",
        action="store_true",
        help="Output the resolved tree as JSON instead of a Markdown list",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose logging"
    )
    return parser


def config_from_args(args: argparse.Namespace) -> SitemapConfig:
    """Overlay command-line arguments on the environment configuration."""
    config = SitemapConfig.from_env()

    if args.root_id:
        config.root_id = args.root_id
    if args.token:
        config.token = args.token
    if args.max_depth is not None:
        config.max_depth = args.max_depth or None
    if args.max_collection_members is not None:
        config.max_collection_members = args.max_collection_members
    if args.no_suppress_over_limit:
        config.suppress_over_limit = False
    if args.log_unsupported:
        config.log_unsupported = True
    if args.delay is not None:
        config.delay = args.delay
    if args.collection_filter:
        try:
            config.collection_filter = json.loads(args.collection_filter)
        except json.JSONDecodeError:
            raise ConfigurationError("Invalid JSON format for collection filter")

    return config.validate()


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Setup logging
    setup_logging(args.verbose)

    try:
        config = config_from_args(args)
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    sitemap = asyncio.run(build_sitemap(config))

    if args.json_output:
        output = json.dumps(sitemap.to_dict(), indent=2, ensure_ascii=False) + "\n"
    else:
        output = sitemap.to_markdown()

    if args.output:
        try:
            with open(args.output, "w", encoding="utf-8") as f:
                f.write(output)
            print(f"Successfully wrote {len(sitemap)} pages to {args.output}")
        except OSError as e:
            print(f"Error writing to output file '{args.output}': {e}", file=sys.stderr)
            return 1
    else:
        print(output, end="")

    return 0


if __name__ == "__main__":
    sys.exit(main())
