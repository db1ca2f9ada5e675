"""
Base classes for the FitMap crawl system.

This module defines the abstract site adapter and the data structures
shared by the crawlers, the processing pipeline and the exporter.
"""

from abc import ABC, abstractmethod
from typing import List, Dict, Optional, Any
from dataclasses import dataclass, field
from datetime import datetime, timezone
import logging


# ANSI color codes for terminal output
class Colors:
    """ANSI color codes for colorized logging."""
    RESET = '\033[0m'
    BOLD = '\033[1m'

    # Colors
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    RED = '\033[91m'
    CYAN = '\033[96m'
    GRAY = '\033[90m'

    @staticmethod
    def green(text):
        return f"{Colors.GREEN}{text}{Colors.RESET}"

    @staticmethod
    def yellow(text):
        return f"{Colors.YELLOW}{text}{Colors.RESET}"

    @staticmethod
    def red(text):
        return f"{Colors.RED}{text}{Colors.RESET}"

    @staticmethod
    def cyan(text):
        return f"{Colors.CYAN}{text}{Colors.RESET}"

    @staticmethod
    def gray(text):
        return f"{Colors.GRAY}{text}{Colors.RESET}"

    @staticmethod
    def bold(text):
        return f"{Colors.BOLD}{text}{Colors.RESET}"


@dataclass
class SiteConfig:
    """Configuration for a directory site."""
    name: str                           # Full display name
    short_name: str                     # Identifier used in logs
    base_url: str                       # Origin for resolving relative links
    area_url_template: str              # Region listing page, formatted with region_id
    listing_selector: str               # CSS selector for listing links

    def region_url(self, region_id: int, page: int = 1) -> str:
        """Build the listing URL for a region page (page 1 has no query)."""
        url = self.area_url_template.format(region_id=region_id)
        if page > 1:
            url = f"{url}?page={page}"
        return url

    def absolute_url(self, href: str) -> str:
        """Resolve a site-relative href."""
        if href.startswith('http'):
            return href
        return f"{self.base_url}{href}"


@dataclass
class PageProbe:
    """Signals read from one fetched listing page."""
    listing_urls: List[str] = field(default_factory=list)
    has_error_marker: bool = False
    has_valid_title: bool = True
    content_length: int = 0
    has_valid_content: bool = False
    has_domain_keywords: bool = False
    has_next_link: bool = False
    has_listing_section: bool = False
    page_title: str = ''

    @property
    def listing_count(self) -> int:
        return len(self.listing_urls)

    def describe(self) -> str:
        return (
            f"gymCount={self.listing_count}, hasError={self.has_error_marker}, "
            f"validTitle={self.has_valid_title}, validContent={self.has_valid_content}, "
            f"hasGymContent={self.has_domain_keywords}, contentLength={self.content_length}, "
            f"nextLink={self.has_next_link}"
        )


@dataclass
class GymRaw:
    """Gym data as parsed from a page, before normalization."""
    name: str
    url: Optional[str] = None
    area: Optional[str] = None
    address: Optional[str] = None
    price: Optional[str] = None
    features: List[str] = field(default_factory=list)
    description: Optional[str] = None


@dataclass
class Price:
    """A single fee parsed from the price text."""
    type: str
    amount: int
    period: str                         # 'monthly' | 'daily' | 'single'
    description: Optional[str] = None

    def to_dict(self) -> Dict:
        return {
            'type': self.type,
            'amount': self.amount,
            'period': self.period,
            'description': self.description,
        }


@dataclass
class Gym:
    """Standardized gym record after processing."""
    name: str
    area: str
    prefecture: str
    city: str
    address: str
    url: str
    prices: List[Price] = field(default_factory=list)
    features: List[str] = field(default_factory=list)
    description: Optional[str] = None
    is_personal: bool = False
    is_personal_reason: Optional[str] = None

    def to_dict(self) -> Dict:
        result = {
            'name': self.name,
            'area': self.area,
            'prefecture': self.prefecture,
            'city': self.city,
            'address': self.address,
            'prices': [p.to_dict() for p in self.prices],
            'url': self.url,
            'features': self.features,
            'isPersonal': self.is_personal,
        }
        if self.description is not None:
            result['description'] = self.description
        if self.is_personal_reason is not None:
            result['isPersonalReason'] = self.is_personal_reason
        return result


@dataclass
class CrawlResult:
    """Result of a full crawl run."""
    started_at: datetime
    completed_at: Optional[datetime] = None
    regions: int = 0
    regions_with_listings: int = 0
    listings_found: int = 0
    details_fetched: int = 0
    gyms: List[Gym] = field(default_factory=list)
    errors: int = 0
    error_details: List[Dict] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.errors == 0

    @property
    def duration_seconds(self) -> Optional[float]:
        if self.completed_at and self.started_at:
            return (self.completed_at - self.started_at).total_seconds()
        return None

    def record_error(self, **details: Any):
        self.errors += 1
        self.error_details.append(details)

    def gyms_by_prefecture(self) -> Dict[str, List[Gym]]:
        grouped: Dict[str, List[Gym]] = {}
        for gym in self.gyms:
            grouped.setdefault(gym.prefecture, []).append(gym)
        return grouped

    def to_dict(self) -> Dict:
        return {
            'started_at': self.started_at.isoformat(),
            'completed_at': self.completed_at.isoformat() if self.completed_at else None,
            'duration_seconds': self.duration_seconds,
            'regions': self.regions,
            'regions_with_listings': self.regions_with_listings,
            'listings_found': self.listings_found,
            'details_fetched': self.details_fetched,
            'gyms': len(self.gyms),
            'errors': self.errors,
            'error_details': self.error_details[:10],  # Limit error details
            'success': self.success,
        }

    @classmethod
    def start(cls) -> 'CrawlResult':
        return cls(started_at=datetime.now(timezone.utc))


class BaseSite(ABC):
    """
    Abstract base class for directory site adapters.

    The crawlers only see rendered HTML; everything that depends on the
    site's markup lives behind this interface.

    Subclasses must implement:
    - extract_listing_urls(): Listing links on an area page
    - probe_page(): Signals for the pagination heuristic
    - parse_detail(): Parse an individual gym page
    """

    def __init__(self, config: SiteConfig):
        self.config = config
        self.logger = logging.getLogger(f"fitmap.site.{config.short_name}")

    def region_url(self, region_id: int, page: int = 1) -> str:
        return self.config.region_url(region_id, page)

    @abstractmethod
    def extract_listing_urls(self, html: str) -> List[str]:
        """
        Extract listing URLs from a rendered area page.

        Returns:
            Absolute listing URLs in document order
        """
        pass

    @abstractmethod
    def probe_page(self, html: str) -> PageProbe:
        """
        Inspect a rendered area page for the pagination heuristic.

        Args:
            html: Page content

        Returns:
            PageProbe with the page's listing URLs and signals
        """
        pass

    @abstractmethod
    def parse_detail(self, url: str, html: str) -> Optional[GymRaw]:
        """
        Parse a gym detail page.

        Args:
            url: Listing URL the content was fetched from
            html: Page content

        Returns:
            GymRaw, or None when the page has no usable gym name
        """
        pass

    def parse_details(self, html_map: Dict[str, str]) -> Dict[str, GymRaw]:
        """Parse many detail pages, skipping ones that fail."""
        results = {}
        for url, html in html_map.items():
            try:
                raw = self.parse_detail(url, html)
            except Exception as e:
                self.logger.error(f"Failed to parse {url}: {e}")
                continue
            if raw is None:
                self.logger.warning(f"No gym name found: {url}")
                continue
            results[url] = raw
        return results
