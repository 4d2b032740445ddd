"""
Configuration settings for the Print Request Pipeline.

Uses dataclasses for configuration, populated from environment variables.
A local `.env` file is loaded by the entry point before this runs.
"""

import os
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from ..errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_ARCHIVE_BASE_URL = "https://wikileaks.org/clinton-emails/"
DEFAULT_CREDENTIALS_FILE = "credentials/credentials.json"


@dataclass
class ScraperConfig:
    """Archive scraping configuration."""
    base_url: str = DEFAULT_ARCHIVE_BASE_URL
    search_term: str = "printing"
    page_size: int = 50
    max_pages: Optional[int] = 200  # None disables the ceiling
    detail_concurrency: int = 5
    timeout: float = 30.0


@dataclass
class AnalyzerConfig:
    """Gemini configuration for field extraction."""
    api_key: Optional[str] = None
    model_name: Optional[str] = None
    max_concurrent_requests: int = 10
    temperature: float = 0.2
    max_output_tokens: int = 400


@dataclass
class SheetsConfig:
    """Google Sheets output configuration."""
    spreadsheet_id: Optional[str] = None
    credentials_file: str = DEFAULT_CREDENTIALS_FILE
    range_name: str = "Sheet1!A1"
    scopes: List[str] = field(default_factory=lambda: [
        'https://www.googleapis.com/auth/spreadsheets'
    ])


@dataclass
class PipelineConfig:
    """Main pipeline configuration."""
    scraper: ScraperConfig = field(default_factory=ScraperConfig)
    analyzer: AnalyzerConfig = field(default_factory=AnalyzerConfig)
    sheets: SheetsConfig = field(default_factory=SheetsConfig)


def _int_env(name: str, default: int, minimum: Optional[int] = None) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from None
    if minimum is not None and value < minimum:
        raise ConfigurationError(f"{name} must be at least {minimum}, got {value}")
    return value


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from None


def get_pipeline_config() -> PipelineConfig:
    """
    Create pipeline configuration from environment variables.

    Required:
        GEMINI_API_KEY: Gemini API key
        GEMINI_MODEL_NAME: Gemini model identifier
        SPREADSHEET_ID: Target Google Sheet

    Optional:
        GOOGLE_SHEETS_CREDENTIALS_FILE: Service account key file (default: credentials/credentials.json)
        SHEET_RANGE: Range overwritten on each run (default: Sheet1!A1)
        GEMINI_MAX_CONCURRENT: Maximum in-flight model calls (default: 10)
        GEMINI_TEMPERATURE: Generation temperature (default: 0.2)
        ARCHIVE_BASE_URL / ARCHIVE_SEARCH_TERM / ARCHIVE_PAGE_SIZE: Listing query
        ARCHIVE_MAX_PAGES: Pagination ceiling, 0 to disable (default: 200)
        ARCHIVE_DETAIL_CONCURRENCY: Detail fetches in flight per page (default: 5)
        ARCHIVE_TIMEOUT: HTTP timeout in seconds (default: 30)

    Raises:
        ConfigurationError: if a required variable is missing or a number is malformed or out of range.
    """
    required = {
        'GEMINI_API_KEY': os.getenv('GEMINI_API_KEY'),
        'GEMINI_MODEL_NAME': os.getenv('GEMINI_MODEL_NAME'),
        'SPREADSHEET_ID': os.getenv('SPREADSHEET_ID'),
    }
    missing = [name for name, value in required.items() if not value]
    if missing:
        raise ConfigurationError(
            f"{', '.join(missing)} not defined in environment or .env, please define and try again"
        )

    max_pages = _int_env('ARCHIVE_MAX_PAGES', 200, minimum=0)

    scraper_config = ScraperConfig(
        base_url=os.getenv('ARCHIVE_BASE_URL', DEFAULT_ARCHIVE_BASE_URL),
        search_term=os.getenv('ARCHIVE_SEARCH_TERM', 'printing'),
        page_size=_int_env('ARCHIVE_PAGE_SIZE', 50, minimum=1),
        max_pages=max_pages if max_pages > 0 else None,
        detail_concurrency=_int_env('ARCHIVE_DETAIL_CONCURRENCY', 5, minimum=1),
        timeout=_float_env('ARCHIVE_TIMEOUT', 30.0)
    )

    analyzer_config = AnalyzerConfig(
        api_key=required['GEMINI_API_KEY'],
        model_name=required['GEMINI_MODEL_NAME'],
        max_concurrent_requests=_int_env('GEMINI_MAX_CONCURRENT', 10, minimum=1),
        temperature=_float_env('GEMINI_TEMPERATURE', 0.2)
    )

    sheets_config = SheetsConfig(
        spreadsheet_id=required['SPREADSHEET_ID'],
        credentials_file=os.getenv('GOOGLE_SHEETS_CREDENTIALS_FILE', DEFAULT_CREDENTIALS_FILE),
        range_name=os.getenv('SHEET_RANGE', 'Sheet1!A1')
    )

    logger.info(f"Loaded pipeline config (model: {analyzer_config.model_name})")

    return PipelineConfig(
        scraper=scraper_config,
        analyzer=analyzer_config,
        sheets=sheets_config
    )
