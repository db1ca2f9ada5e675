"""Crawler implementations for the area and detail phases."""

from .browser import SessionPool, BrowserStartupError
from .region import RegionCrawler, RegionState
from .detail import DetailFetcher
from .heuristics import PageDecision, classify_page
from .retry import RetryPolicy

__all__ = [
    'SessionPool',
    'BrowserStartupError',
    'RegionCrawler',
    'RegionState',
    'DetailFetcher',
    'PageDecision',
    'classify_page',
    'RetryPolicy',
]
