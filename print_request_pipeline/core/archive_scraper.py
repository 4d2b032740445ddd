"""
Email archive scraper.

Fetches the archive's search-result listing page by page, then fetches
each email's detail page for its body text.
"""

import asyncio
import logging
import re
from enum import Enum
from typing import List, Optional
from urllib.parse import urlencode, urljoin

import httpx
from bs4 import BeautifulSoup

from ..config.settings import DEFAULT_ARCHIVE_BASE_URL
from ..errors import ConfigurationError
from .models import EmailRecord

logger = logging.getLogger(__name__)

# Longest value a spreadsheet cell accepts is 50,000 characters
MAX_CONTENT_CHARS = 49999

LISTING_ROW_SELECTOR = ".table.table-striped.search-result tbody tr"
CONTENT_SELECTOR = "div.email-content#uniquer"

_WHITESPACE = re.compile(r"\s+")


class ScrapeStopReason(str, Enum):
    """Why pagination stopped."""
    EXHAUSTED = "exhausted"   # An empty page was returned
    LIMIT = "limit"           # Requested number of emails collected
    MAX_PAGES = "max_pages"   # Safety ceiling reached


def normalize_content(text: str) -> str:
    """Collapse whitespace runs to single spaces, trim, and cap the length."""
    return _WHITESPACE.sub(" ", text).strip()[:MAX_CONTENT_CHARS]


def extract_content(detail_html: str) -> str:
    """
    Extract the email body from a detail page.

    Returns an empty string when the content region is missing.
    """
    soup = BeautifulSoup(detail_html, "html.parser")
    region = soup.select_one(CONTENT_SELECTOR)
    if region is None:
        return ""
    return normalize_content(region.get_text())


def _cell_text(cells: list, index: int) -> Optional[str]:
    if index >= len(cells):
        return None
    return cells[index].get_text(" ", strip=True)


def parse_listing(listing_html: str) -> List[EmailRecord]:
    """
    Parse one listing page into email records (content not yet filled).

    Columns: id (linked to the detail page), date, subject, from, to.
    """
    soup = BeautifulSoup(listing_html, "html.parser")
    emails = []

    for row in soup.select(LISTING_ROW_SELECTOR):
        cells = row.find_all("td")
        if not cells:
            continue

        link = cells[0].find("a", href=True)
        email_id = _cell_text(cells, 0)
        if not email_id or link is None:
            logger.warning(f"Skipping listing row without id or link: {row.get_text(' ', strip=True)[:100]}")
            continue

        emails.append(EmailRecord(
            id=email_id,
            href=link["href"],
            date=_cell_text(cells, 1) or "",
            subject=_cell_text(cells, 2),
            sender=_cell_text(cells, 3),
            to=_cell_text(cells, 4)
        ))

    return emails


class ArchiveScraper:
    """
    Scraper for the archive's search results.

    Pages are visited in order starting at 1 until an empty page is
    returned, the limit is met, or the page ceiling is hit.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_ARCHIVE_BASE_URL,
        search_term: str = "printing",
        page_size: int = 50,
        max_pages: Optional[int] = 200,
        detail_concurrency: int = 5,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None
    ):
        """
        Initialize scraper.

        Args:
            base_url: Archive root; listing and detail links resolve against it
            search_term: Listing search query
            page_size: Results per listing page
            max_pages: Stop after this many pages (None for no ceiling)
            detail_concurrency: Maximum detail pages fetched at once
            timeout: HTTP timeout in seconds
            client: Optional pre-built HTTP client (not closed by this scraper)

        Raises:
            ConfigurationError: if detail_concurrency or page_size is below 1
        """
        if detail_concurrency < 1:
            raise ConfigurationError(f"detail_concurrency must be at least 1, got {detail_concurrency}")
        if page_size < 1:
            raise ConfigurationError(f"page_size must be at least 1, got {page_size}")
        self.base_url = base_url
        self.search_term = search_term
        self.page_size = page_size
        self.max_pages = max_pages
        self.detail_concurrency = detail_concurrency
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None
        self.last_stop_reason: Optional[ScrapeStopReason] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create async HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True
            )
            self._owns_client = True
        return self._client

    async def close(self):
        """Close the HTTP client if this scraper created it."""
        if self._owns_client and self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "ArchiveScraper":
        return self

    async def __aexit__(self, *exc_info):
        await self.close()

    def page_url(self, page_index: int) -> str:
        """Listing URL for a 1-based page index."""
        query = urlencode({"q": self.search_term, "count": self.page_size, "page": page_index})
        return f"{self.base_url}?{query}"

    async def _get_html(self, url: str) -> str:
        client = await self._get_client()
        response = await client.get(url)
        response.raise_for_status()
        return response.text

    async def _fill_content(self, email: EmailRecord, semaphore: asyncio.Semaphore):
        async with semaphore:
            detail_html = await self._get_html(urljoin(self.base_url, email.href))
        email.content = extract_content(detail_html)

    async def fetch_page(self, page_index: int) -> List[EmailRecord]:
        """
        Fetch one listing page and the detail content of each email on it.

        Args:
            page_index: 1-based page number

        Returns:
            Email records with content filled; empty list past the last page.

        Raises:
            httpx.HTTPError: if the listing or any detail fetch fails
        """
        if page_index < 1:
            raise ValueError(f"page_index must be a positive integer, got {page_index}")

        emails = parse_listing(await self._get_html(self.page_url(page_index)))
        if not emails:
            return []

        semaphore = asyncio.Semaphore(self.detail_concurrency)
        await asyncio.gather(*(self._fill_content(email, semaphore) for email in emails))

        logger.info(f"Scraped page {page_index}: {len(emails)} emails")
        return emails

    async def scrape_all(self, limit: Optional[int] = None) -> List[EmailRecord]:
        """
        Scrape pages until the results run out or ``limit`` emails are collected.

        A limit of 0 still fetches page 1 before returning an empty list.

        Args:
            limit: Optional maximum number of emails to return

        Returns:
            Emails in page order, then row order within each page.
        """
        if limit is not None and limit < 0:
            raise ValueError(f"limit must be non-negative, got {limit}")

        emails: List[EmailRecord] = []
        page_index = 1

        while True:
            page_emails = await self.fetch_page(page_index)

            if not page_emails:
                self.last_stop_reason = ScrapeStopReason.EXHAUSTED
                logger.info(f"Scraper reached last page: {page_index - 1}")
                break

            emails.extend(page_emails)

            if limit is not None and len(emails) >= limit:
                emails = emails[:limit]
                self.last_stop_reason = ScrapeStopReason.LIMIT
                logger.info(f"Scraper reached limit of {limit} emails at page {page_index}")
                break

            if self.max_pages is not None and page_index >= self.max_pages:
                self.last_stop_reason = ScrapeStopReason.MAX_PAGES
                logger.warning(
                    f"Scraper stopped at page ceiling ({self.max_pages}) with {len(emails)} emails; "
                    f"results may be incomplete"
                )
                break

            page_index += 1

        return emails
