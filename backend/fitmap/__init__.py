"""
FitMap gym directory crawler.

This package provides:
- A shared Playwright session pool with resource blocking
- A region crawler with a multi-signal pagination heuristic
- A detail fetcher with bounded retry and page recycling
- Parsing, classification and YAML export of gym records
"""

from .base import BaseSite, SiteConfig, PageProbe, GymRaw, Gym, Price, CrawlResult
from .config import REGION_NAMES, get_region_name, list_regions
from .manager import CrawlManager, crawl

__all__ = [
    'BaseSite',
    'SiteConfig',
    'PageProbe',
    'GymRaw',
    'Gym',
    'Price',
    'CrawlResult',
    'REGION_NAMES',
    'get_region_name',
    'list_regions',
    'CrawlManager',
    'crawl',
]
