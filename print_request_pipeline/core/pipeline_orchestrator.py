"""
Print Request Pipeline Orchestrator.

Runs the pipeline stages in order:
1. Scrape emails from the archive
2. Extract printing fields with Gemini
3. Overwrite the Google Sheet
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from ..config.settings import PipelineConfig
from .archive_scraper import ArchiveScraper
from .field_analyzer import FieldAnalyzer
from .sheet_writer import SheetWriter

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    """Result of a pipeline run."""
    status: str  # "success", "partial", "failed"
    emails_scraped: int = 0
    emails_analyzed: int = 0
    emails_failed: int = 0
    duration_seconds: float = 0.0
    error: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)


class PrintRequestPipeline:
    """
    Orchestrates scrape -> analyze -> write.

    A scrape failure aborts the run before anything is written.
    Per-email analysis failures only mark the run as partial.
    """

    def __init__(
        self,
        scraper: ArchiveScraper,
        analyzer: FieldAnalyzer,
        writer: SheetWriter
    ):
        self.scraper = scraper
        self.analyzer = analyzer
        self.writer = writer

    async def run(self, limit: Optional[int] = None) -> PipelineResult:
        """
        Run the pipeline once.

        Args:
            limit: Optional maximum number of emails to scrape

        Returns:
            PipelineResult with processing statistics
        """
        start_time = datetime.now()

        logger.info("Beginning page scrape")
        try:
            emails = await self.scraper.scrape_all(limit)
        except Exception as e:
            logger.error(f"Page scraping failed, aborting run: {e}")
            return PipelineResult(
                status="failed",
                error=str(e),
                duration_seconds=(datetime.now() - start_time).total_seconds()
            )
        finally:
            await self.scraper.close()
        logger.info(f"Page scraping completed: {len(emails)} emails")

        logger.info("Beginning email analysis")
        results = await self.analyzer.extract_batch(emails)
        analyzed = [result.to_record(email) for email, result in zip(emails, results)]
        failed = [result for result in results if not result.success]
        logger.info("Email analysis completed")

        logger.info("Writing to sheets")
        await asyncio.to_thread(self.writer.write, analyzed)
        logger.info("Writing to sheets completed")

        return PipelineResult(
            status="success" if not failed else "partial",
            emails_scraped=len(emails),
            emails_analyzed=len(results) - len(failed),
            emails_failed=len(failed),
            duration_seconds=(datetime.now() - start_time).total_seconds(),
            details={
                "stop_reason": self.scraper.last_stop_reason.value if self.scraper.last_stop_reason else None,
                "failures": [r.to_dict() for r in failed]
            }
        )


def create_pipeline(config: PipelineConfig) -> PrintRequestPipeline:
    """Create and configure the pipeline from configuration."""
    scraper = ArchiveScraper(
        base_url=config.scraper.base_url,
        search_term=config.scraper.search_term,
        page_size=config.scraper.page_size,
        max_pages=config.scraper.max_pages,
        detail_concurrency=config.scraper.detail_concurrency,
        timeout=config.scraper.timeout
    )

    analyzer = FieldAnalyzer(
        api_key=config.analyzer.api_key,
        model_name=config.analyzer.model_name,
        temperature=config.analyzer.temperature,
        max_output_tokens=config.analyzer.max_output_tokens,
        max_concurrent=config.analyzer.max_concurrent_requests
    )

    writer = SheetWriter(
        spreadsheet_id=config.sheets.spreadsheet_id,
        credentials_file=config.sheets.credentials_file,
        range_name=config.sheets.range_name,
        scopes=config.sheets.scopes
    )

    return PrintRequestPipeline(scraper, analyzer, writer)
