"""
Region (area) crawler.

Collects every gym URL listed for one region by walking its area pages
until the pagination heuristic reports an empty page.

States per region:
    INIT -> FETCHING_FIRST_PAGE -> FETCHING_NEXT_PAGE (loop) -> DONE
"""

import asyncio
import random
from enum import Enum
from typing import List, Optional
from playwright.async_api import Page
import logging

from runner.config import Settings, settings as default_settings
from ..base import BaseSite, PageProbe
from ..config import get_region_name
from .browser import SessionPool
from .heuristics import PageDecision, classify_page
from .retry import RetryPolicy

logger = logging.getLogger(__name__)


class RegionState(Enum):
    INIT = "init"
    FETCHING_FIRST_PAGE = "fetching_first_page"
    FETCHING_NEXT_PAGE = "fetching_next_page"
    DONE = "done"


class RegionCrawler:
    """
    Walks a region's area pages on a page owned by this crawler.

    Failures never propagate: a first page that cannot be loaded after its
    retry yields an empty result, and any failure inside the pagination
    loop counts as an empty page. The page is replaced after every failure.
    """

    def __init__(self, pool: SessionPool, site: BaseSite, settings: Optional[Settings] = None):
        """
        Initialize the crawler.

        Args:
            pool: Shared session pool
            site: Site adapter for URLs and page inspection
            settings: Runtime settings (timeouts, delays, page limits)
        """
        self.pool = pool
        self.site = site
        self.settings = settings or default_settings
        self.first_page_retry = RetryPolicy(
            max_attempts=self.settings.retry_max_attempts,
            backoff_seconds=self.settings.retry_backoff_seconds,
        )
        # Pagination pages get a single attempt; a failure counts as an empty page
        self.pagination_retry = RetryPolicy(max_attempts=1)
        self._page: Optional[Page] = None

        # Per-region state, reset by fetch_region()
        self.state = RegionState.INIT
        self.current_page = 0
        self.empty_page_count = 0
        self.pages_visited: List[int] = []

    async def _get_page(self) -> Page:
        if self._page is None:
            self._page = await self.pool.new_page()
        return self._page

    async def _discard_page(self):
        if self._page is not None:
            await self.pool.close_page(self._page)
            self._page = None

    async def recycle_page(self):
        """Close the current page and open a fresh one."""
        await self._discard_page()
        self._page = await self.pool.new_page()
        logger.debug("Region page recycled")

    async def _on_failure(self, error: Exception):
        # Page state is suspect after any failure
        await self.recycle_page()

    async def _navigate(self, url: str) -> Page:
        page = await self._get_page()
        await page.goto(
            url,
            wait_until='domcontentloaded',
            timeout=self.settings.navigation_timeout_ms,
        )
        return page

    async def _load_first_page(self, url: str) -> List[str]:
        page = await self._navigate(url)
        # Give client-rendered cards time to appear
        await asyncio.sleep(self.settings.page_settle_seconds)
        return self.site.extract_listing_urls(await page.content())

    async def _load_next_page(self, url: str) -> PageProbe:
        page = await self._navigate(url)
        await asyncio.sleep(random.uniform(
            self.settings.pagination_settle_min,
            self.settings.pagination_settle_max,
        ))
        return self.site.probe_page(await page.content())

    def _reset(self):
        self.state = RegionState.INIT
        self.current_page = 0
        self.empty_page_count = 0
        self.pages_visited = []

    def _record_empty_page(self) -> bool:
        """Count an empty page; returns True when pagination should stop."""
        self.empty_page_count += 1
        return self.empty_page_count >= self.settings.empty_page_tolerance

    async def fetch_region(self, region_id: int) -> List[str]:
        """
        Collect gym URLs for one region.

        Args:
            region_id: FitMap area id

        Returns:
            Unique gym URLs in the order they were discovered
        """
        self._reset()
        base_url = self.site.region_url(region_id)
        label = f"region {region_id} ({get_region_name(region_id)})"
        max_pages = self.settings.page_limit
        urls: List[str] = []

        # Page 1
        self.state = RegionState.FETCHING_FIRST_PAGE
        self.current_page = 1
        self.pages_visited.append(self.current_page)
        logger.info(f"Fetching {label}: {base_url}")
        try:
            first_urls = await self.first_page_retry.run(
                lambda: self._load_first_page(base_url),
                on_retry=self._on_failure,
                description=f"{label} page 1",
            )
        except Exception as e:
            logger.error(f"Giving up on {label}: {e}")
            await self._discard_page()
            self.state = RegionState.DONE
            return []

        urls.extend(first_urls)
        logger.info(f"Found {len(first_urls)} gyms on page 1 of {label}")

        # Pages 2..max_pages
        self.state = RegionState.FETCHING_NEXT_PAGE
        while self.state == RegionState.FETCHING_NEXT_PAGE and self.current_page < max_pages:
            self.current_page += 1
            self.pages_visited.append(self.current_page)
            page_url = self.site.region_url(region_id, self.current_page)

            try:
                probe = await self.pagination_retry.run(
                    lambda: self._load_next_page(page_url),
                    description=f"{label} page {self.current_page}",
                )
            except Exception as e:
                logger.warning(f"Error on page {self.current_page} of {label}: {e}")
                await self._discard_page()
                if self._record_empty_page():
                    self.state = RegionState.DONE
                continue

            if self.settings.debug:
                logger.debug(f"Page {self.current_page} probe: {probe.describe()} title=\"{probe.page_title}\"")

            if classify_page(probe) == PageDecision.STOP:
                logger.info(
                    f"Page {self.current_page} of {label} is missing or empty "
                    f"({self.empty_page_count + 1}/{self.settings.empty_page_tolerance})"
                )
                logger.debug(f"Empty page signals: {probe.describe()}")
                if self._record_empty_page():
                    logger.info(f"End of pagination detected for {label}")
                    self.state = RegionState.DONE
                continue

            self.empty_page_count = 0
            urls.extend(probe.listing_urls)
            logger.info(f"Found {probe.listing_count} gyms on page {self.current_page} of {label}")

        if self.state != RegionState.DONE:
            logger.info(f"Reached page limit {max_pages} for {label}")
            self.state = RegionState.DONE

        unique_urls = list(dict.fromkeys(urls))
        logger.info(f"Total for {label}: {len(unique_urls)} gyms")
        return unique_urls

    async def close(self):
        """Close the page owned by this crawler."""
        await self._discard_page()
        self.state = RegionState.INIT
