"""
Command-line entry point.

    python -m print_request_pipeline [--limit N] [--max-pages N]

Without --limit the user is asked how many emails to process.
"""

import argparse
import asyncio
import logging
import sys
from typing import Callable, Optional

from dotenv import load_dotenv

from .config.settings import get_pipeline_config
from .core.pipeline_orchestrator import create_pipeline
from .errors import ConfigurationError

logger = logging.getLogger(__name__)

LIMIT_PROMPT = "How many emails would you like to scrape and analyze? press Enter to select all emails "


def is_valid_limit(text: str) -> bool:
    """True for empty input or a non-negative integer."""
    text = text.strip()
    return text == "" or text.isdecimal()


def parse_limit(text: str) -> Optional[int]:
    """Convert validated input to a limit; empty input means no limit."""
    text = text.strip()
    return int(text) if text else None


def prompt_for_limit(read: Callable[[str], str] = input) -> Optional[int]:
    """Ask until the user enters a non-negative integer or nothing."""
    while True:
        text = read(LIMIT_PROMPT)
        if is_valid_limit(text):
            return parse_limit(text)
        print("Please enter a valid positive integer.")


def _non_negative_int(value: str) -> int:
    if not value.isdecimal():
        raise argparse.ArgumentTypeError(f"expected a non-negative integer, got {value!r}")
    return int(value)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        prog="print_request_pipeline",
        description="Scrape printing request emails, extract fields with Gemini, and write them to Google Sheets."
    )
    parser.add_argument("--limit", type=_non_negative_int, default=None,
                        help="Maximum number of emails (prompted for if omitted)")
    parser.add_argument("--max-pages", type=_non_negative_int, default=None,
                        help="Override the listing page ceiling (0 disables it)")
    args = parser.parse_args(argv)

    load_dotenv()
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        config = get_pipeline_config()
        if args.max_pages is not None:
            config.scraper.max_pages = args.max_pages or None
        pipeline = create_pipeline(config)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    if args.limit is not None:
        limit = args.limit
    else:
        try:
            limit = prompt_for_limit()
        except EOFError:
            logger.error("No limit given and stdin is closed; pass --limit when running non-interactively")
            return 1

    result = asyncio.run(pipeline.run(limit))
    logger.info(
        f"Run finished with status {result.status}: {result.emails_scraped} scraped, "
        f"{result.emails_analyzed} analyzed, {result.emails_failed} without fields "
        f"in {result.duration_seconds:.1f}s"
    )
    return 1 if result.status == "failed" else 0


if __name__ == "__main__":
    sys.exit(main())
