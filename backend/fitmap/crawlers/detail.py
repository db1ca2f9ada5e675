"""
Gym detail page fetcher.

Fetches rendered HTML for gym pages one at a time through a page owned by
this fetcher. The page is recycled (closed and replaced) every
`session_recycle_threshold` requests to keep long crawls from growing
memory, and unconditionally after any failure.
"""

import asyncio
import random
from typing import Dict, Iterable, Optional
from playwright.async_api import Page
import logging

from runner.config import Settings, settings as default_settings
from .browser import SessionPool
from .retry import RetryPolicy

logger = logging.getLogger(__name__)


class DetailFetcher:
    """
    Sequential detail fetcher with a per-page request budget.

    Usage:
        fetcher = DetailFetcher(pool, settings)
        html_map = await fetcher.fetch_many(urls)
        await fetcher.close()
    """

    def __init__(self, pool: SessionPool, settings: Optional[Settings] = None):
        self.pool = pool
        self.settings = settings or default_settings
        self.max_requests_per_page = self.settings.session_recycle_threshold
        # Recycle the page between attempts, no backoff
        self.retry = RetryPolicy(max_attempts=self.settings.retry_max_attempts)
        self._page: Optional[Page] = None
        self.request_count = 0          # Requests on the current page
        self.recycle_count = 0          # Pages replaced so far
        self.total_requests = 0

    async def _get_page(self) -> Page:
        if self._page is None:
            self._page = await self.pool.new_page()
        return self._page

    async def recycle_page(self):
        """Close the current page and open a fresh one."""
        if self._page is not None:
            await self.pool.close_page(self._page)
            self._page = None
        self._page = await self.pool.new_page()
        self.request_count = 0
        self.recycle_count += 1
        logger.debug(f"Page recycled (#{self.recycle_count})")

    async def _on_failure(self, error: Exception):
        # Page state is suspect after any failure
        await self.recycle_page()

    async def _load(self, url: str) -> str:
        page = await self._get_page()
        await page.goto(
            url,
            wait_until='domcontentloaded',
            timeout=self.settings.navigation_timeout_ms,
        )
        await asyncio.sleep(self.settings.page_settle_seconds)
        return await page.content()

    async def fetch_detail(self, url: str) -> str:
        """
        Fetch the rendered HTML of one gym page.

        Args:
            url: Gym page URL

        Returns:
            HTML content, or '' if the fetch and its retry both failed
        """
        if self.request_count >= self.max_requests_per_page:
            logger.debug(f"Request budget reached ({self.request_count}), recycling page")
            try:
                await self.recycle_page()
            except Exception as e:
                logger.error(f"Failed to recycle page before {url}: {e}")
                return ''

        self.request_count += 1
        self.total_requests += 1
        logger.debug(f"Fetching detail ({self.request_count}/{self.max_requests_per_page}): {url}")

        try:
            html = await self.retry.run(
                lambda: self._load(url),
                on_retry=self._on_failure,
                description=url,
            )
        except Exception as e:
            logger.error(f"Retry also failed ({url}): {e}")
            return ''

        if self.total_requests % 3 == 0:
            stats = self.pool.stats()
            logger.debug(f"Resource stats: pages={stats['pages']}, contexts={stats['contexts']}")

        return html

    async def fetch_many(self, urls: Iterable[str]) -> Dict[str, str]:
        """
        Fetch gym pages sequentially with a random delay between items.

        Args:
            urls: Gym page URLs, fetched in order

        Returns:
            Dictionary mapping URL to HTML, only for successful fetches
        """
        urls = list(urls)
        results: Dict[str, str] = {}

        for idx, url in enumerate(urls, 1):
            if not url:
                continue

            logger.info(f"Fetching detail {idx}/{len(urls)}: {url}")
            html = await self.fetch_detail(url)
            if html:
                results[url] = html

            # Rate limiting between items
            await asyncio.sleep(random.uniform(
                self.settings.detail_delay_min,
                self.settings.detail_delay_max,
            ))

            if idx % 5 == 0:
                stats = self.pool.stats()
                logger.info(
                    f"Progress: {idx}/{len(urls)} done, {len(results)} fetched, "
                    f"resources: {stats['pages']} pages/{stats['contexts']} contexts"
                )

        return results

    async def close(self):
        """Close the page owned by this fetcher."""
        if self._page is not None:
            await self.pool.close_page(self._page)
            self._page = None
        self.request_count = 0
