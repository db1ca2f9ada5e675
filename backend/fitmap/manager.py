"""
Crawl Manager - orchestrates a full FitMap crawl.

Phases:
1. Area phase: collect gym URLs for every region, in region order
2. Detail phase: fetch, parse and classify each region's gyms
3. Export: write YAML per prefecture and log statistics

The area and detail phases each get a fresh browser context; the shared
context is always closed on exit, whether the run succeeded or not.
"""

import asyncio
from typing import Dict, List, Optional, Iterable, Type
from datetime import datetime, timezone
import logging

from runner.config import Settings, settings as default_settings
from .base import BaseSite, Colors, CrawlResult, Gym
from .config import REGION_IDS, get_region_name
from .crawlers import SessionPool, RegionCrawler, DetailFetcher
from .exporters import YamlExporter
from .pipeline import GymPipeline
from .sites.fitmap import FitMapSite

logger = logging.getLogger(__name__)


# Registry of implemented site adapters
SITE_REGISTRY: Dict[str, Type[BaseSite]] = {
    'fitmap': FitMapSite,
}


def get_site(site_key: str) -> BaseSite:
    """
    Get a site adapter instance.

    Raises:
        ValueError: If site_key is not registered
    """
    if site_key not in SITE_REGISTRY:
        valid_keys = ', '.join(sorted(SITE_REGISTRY.keys()))
        raise ValueError(f"Unknown site: '{site_key}'. Valid sites: {valid_keys}")
    return SITE_REGISTRY[site_key]()


def validate_regions(regions: Iterable[int]) -> List[int]:
    """
    Return region ids sorted ascending and deduplicated.

    Raises:
        ValueError: For ids outside the known range
    """
    region_ids = sorted(set(regions))
    unknown = [r for r in region_ids if r not in REGION_IDS]
    if unknown:
        raise ValueError(f"Unknown region ids: {unknown}. Valid range: {REGION_IDS.start}-{REGION_IDS.stop - 1}")
    return region_ids


def log_statistics(gyms_by_prefecture: Dict[str, List[Gym]]):
    """Log per-prefecture counts and the personal-gym share."""
    logger.info(f"\n{Colors.bold('=== Crawl statistics ===')}")

    total_gyms = 0
    total_personal = 0
    for prefecture, gyms in gyms_by_prefecture.items():
        personal = sum(1 for gym in gyms if gym.is_personal)
        total_gyms += len(gyms)
        total_personal += personal
        logger.info(f"{prefecture}: {len(gyms)} gyms (personal: {personal})")

    share = round(total_personal / total_gyms * 100) if total_gyms else 0
    logger.info(f"Total: {total_gyms} gyms")
    logger.info(f"Personal gyms: {total_personal} ({share}%)")
    logger.info(f"General gyms: {total_gyms - total_personal}")


class CrawlManager:
    """
    Runs the area and detail phases across regions.

    Usage:
        manager = CrawlManager(settings)
        result = await manager.run()

        # Subset of regions
        result = await CrawlManager(settings, regions=[1, 2]).run()
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        regions: Optional[Iterable[int]] = None,
        site_key: str = 'fitmap',
        pool: Optional[SessionPool] = None,
    ):
        """
        Initialize the crawl manager.

        Args:
            settings: Runtime settings
            regions: Region ids to crawl (defaults to all 47)
            site_key: Site adapter key
            pool: Session pool (created from settings if omitted)
        """
        self.settings = settings or default_settings
        self.regions = validate_regions(regions if regions is not None else REGION_IDS)
        self.site = get_site(site_key)
        self.pool = pool or SessionPool(self.settings)
        self.pipeline = GymPipeline(self.site)
        self.result = CrawlResult.start()

    async def collect_region_urls(self) -> Dict[int, List[str]]:
        """
        Area phase: gym URLs per region, regions in ascending order.

        A region that raises is recorded as an error and gets no URLs.
        """
        region_urls: Dict[int, List[str]] = {}
        crawler = RegionCrawler(self.pool, self.site, self.settings)

        try:
            for idx, region_id in enumerate(self.regions, 1):
                prefecture = get_region_name(region_id)
                logger.info(f"{Colors.cyan('❯❯❯')} [{idx}/{len(self.regions)}] Collecting gym URLs for {prefecture} (area {region_id})")

                try:
                    urls = await crawler.fetch_region(region_id)
                except Exception as e:
                    logger.error(f"   {Colors.red('[ERR]')} URL collection failed for {prefecture}: {e}")
                    self.result.record_error(region_id=region_id, phase='area', error=str(e))
                    urls = []

                region_urls[region_id] = urls
                logger.info(f"{prefecture}: {len(urls)} gyms")

                # Rate limiting between regions
                await asyncio.sleep(self.settings.region_delay_seconds)
        finally:
            await crawler.close()

        return region_urls

    async def collect_details(self, region_urls: Dict[int, List[str]]) -> List[Gym]:
        """
        Detail phase: fetch and process each region's gyms.

        A region that raises is recorded as an error and skipped.
        """
        gyms: List[Gym] = []
        limit = self.settings.listing_limit

        for region_id, urls in region_urls.items():
            if not urls:
                continue

            prefecture = get_region_name(region_id)
            selected = urls[:limit] if limit else urls
            logger.info(f"{Colors.cyan('❯❯❯')} Fetching details for {prefecture} {Colors.gray(f'({len(selected)} of {len(urls)} gyms)')}")

            fetcher = DetailFetcher(self.pool, self.settings)
            try:
                html_map = await fetcher.fetch_many(selected)
                self.result.details_fetched += len(html_map)

                region_gyms = self.pipeline.process(html_map, prefecture)
                gyms.extend(region_gyms)
                logger.info(f"{prefecture}: {Colors.green(len(region_gyms))} gyms processed")
            except Exception as e:
                logger.error(f"   {Colors.red('[ERR]')} Detail fetch failed for {prefecture}: {e}")
                self.result.record_error(region_id=region_id, phase='detail', error=str(e))
            finally:
                await fetcher.close()

            await asyncio.sleep(self.settings.region_delay_seconds)

        return gyms

    def export(self, gyms_by_prefecture: Dict[str, List[Gym]]):
        if not self.settings.export_enabled:
            logger.info("Export disabled, skipping YAML output")
            return
        YamlExporter.save_by_prefecture(gyms_by_prefecture, self.settings.output_dir)

    async def run(self) -> CrawlResult:
        """
        Main entry point - runs the full crawl.

        Returns:
            CrawlResult with counts, gyms and error details

        Raises:
            BrowserStartupError: If the browser cannot be started at all
        """
        self.result = CrawlResult.start()
        self.result.regions = len(self.regions)
        logger.info(f"Starting FitMap crawl for {len(self.regions)} regions")

        try:
            # Fails hard if the browser cannot start
            await self.pool.acquire_context()

            logger.info(f"{Colors.bold('Step 1')}: collecting gym URLs")
            region_urls = await self.collect_region_urls()
            self.result.regions_with_listings = sum(1 for urls in region_urls.values() if urls)
            self.result.listings_found = sum(len(urls) for urls in region_urls.values())
            logger.info(f"URL collection complete: {self.result.listings_found} gyms nationwide")

            # Release area-page resources before opening detail pages
            await self.pool.close_context()

            logger.info(f"{Colors.bold('Step 2')}: fetching gym details")
            self.result.gyms = await self.collect_details(region_urls)
            logger.info(f"Processed {len(self.result.gyms)} gyms")

            logger.info(f"{Colors.bold('Step 3')}: exporting")
            gyms_by_prefecture = self.result.gyms_by_prefecture()
            self.export(gyms_by_prefecture)
            log_statistics(gyms_by_prefecture)

            self.result.completed_at = datetime.now(timezone.utc)
            duration = self.result.duration_seconds or 0
            logger.info(
                f"✅ Crawl complete in {duration:.1f}s: {len(self.result.gyms)} gyms, "
                f"{Colors.yellow(f'{self.result.errors} errors')}"
            )
            return self.result

        except Exception as e:
            self.result.record_error(phase='run', error=str(e))
            self.result.completed_at = datetime.now(timezone.utc)
            logger.error(f"Crawl failed: {e}")
            raise

        finally:
            await self.pool.close_context()


# Convenience function for standalone usage

async def crawl(settings: Optional[Settings] = None, regions: Optional[Iterable[int]] = None) -> CrawlResult:
    """
    Crawl the given regions (all by default).

    Returns:
        CrawlResult
    """
    manager = CrawlManager(settings, regions=regions)
    return await manager.run()
