# main.py

"""Entry point for the stockwatch catalog monitor."""

import argparse
import asyncio
import logging
import sys

from stockwatch.config.logging_config import setup_logging

logger = logging.getLogger("stockwatch.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="stockwatch",
        description=(
            "Scrape a rendered product catalog and report stock changes."
        ),
    )
    parser.add_argument(
        "-u",
        "--url",
        default=None,
        help="Catalog page to scrape (default: $SCRAPING_URL).",
    )
    parser.add_argument(
        "-m",
        "--mode",
        choices=["track", "forward", "collect"],
        default="track",
        help=(
            "track: diff, notify and persist; forward: POST the catalog "
            "to --push-url; collect: print the catalog (default: track)."
        ),
    )
    parser.add_argument(
        "--store",
        choices=["airtable", "sqlite"],
        default="airtable",
        dest="store_kind",
        help="Baseline store for track mode (default: airtable).",
    )
    parser.add_argument(
        "--push-url",
        default=None,
        help="Forward target for forward mode (default: $PUSH_URL).",
    )
    parser.add_argument(
        "--every",
        type=float,
        default=None,
        metavar="SECONDS",
        help="Repeat the cycle forever with this pause in between.",
    )
    parser.add_argument(
        "--seed",
        action="store_true",
        default=False,
        help="Scrape once and track every product in the sqlite store.",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="json",
        dest="output_format",
        help="Output format for collect mode (default: json).",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        default=None,
        help="Console log level (default: $LOG_CONSOLE_LEVEL or WARNING).",
    )
    return parser


def main() -> None:
    """Parse arguments and run the pipeline."""
    args = _build_parser().parse_args()

    log_file = setup_logging(args.log_level)
    logger.info("stockwatch starting, log file: %s", log_file)

    from stockwatch.cli.runner import cli_run

    try:
        exit_code = asyncio.run(
            cli_run(
                url=args.url,
                mode=args.mode,
                store_kind=args.store_kind,
                push_url=args.push_url,
                output_format=args.output_format,
                every=args.every,
                seed=args.seed,
            )
        )
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
        exit_code = 130
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
