"""
FitMap (fitmap.jp) site adapter.

Site structure:
- Area pages: `/area/{id}/?page=N`, gym cards are `a[href*="/gym/"]` links
- Out-of-range area pages still render (valid HTML, no gym cards)
- Gym pages: `og:title` for the name, `.post_adress` for the address,
  `.panel_ryokin` for fees, breadcrumb links back to `/area/`
"""

import re
from typing import List, Optional
from bs4 import BeautifulSoup

from ..base import BaseSite, GymRaw, PageProbe
from ..config import (
    FITMAP,
    ERROR_MARKER_SELECTORS,
    INVALID_TITLE_MARKERS,
    DOMAIN_KEYWORDS,
    LISTING_SECTION_SELECTORS,
    NEXT_PAGE_SELECTORS,
    MIN_CONTENT_LENGTH,
)
from ..utils.extractors import extract_text, extract_all_texts


# Detail page selectors, tried in order
ADDRESS_SELECTORS = [
    '.post_adress',
    '.gym-info .address',
    '.location-info .address',
    '.gym-detail .address',
    '.info-section .address',
    '[class*="address"]',
    '.gym-basic-info .address',
]

PRICE_SELECTORS = [
    '.panel_ryokin',
    '.gym-price',
    '.price-info',
    '.fee-info',
    '.cost-info',
    '.pricing',
    '[class*="price"]',
    '[class*="fee"]',
]

FEATURE_SELECTORS = [
    '.gym-tags .tag',
    '.gym-features .feature',
    '.gym-categories .category',
    '.badge-list .badge',
    '[class*="tag"]',
    '[class*="badge"]',
    '[class*="feature"]',
]

DESCRIPTION_SELECTORS = [
    '.gym-description',
    '.gym-intro',
    '.gym-about',
    '.description',
    '.about',
    '.intro',
]

# Area page card selectors, tried in order
CARD_SELECTORS = [
    '.gym-card',
    '.gym-item',
    '[data-gym-id]',
    'a[href*="/gym/"]',
]

# Site-wide titles that are not a gym name
SITE_TITLE_MARKERS = ['日本最大級']


def is_valid_gym_name(name: Optional[str]) -> bool:
    """Reject empty names and the site's own title."""
    if not name or name == 'FitMap':
        return False
    return not any(marker in name for marker in SITE_TITLE_MARKERS)


class FitMapSite(BaseSite):
    """Adapter for the FitMap gym directory."""

    def __init__(self):
        super().__init__(FITMAP)

    def _soup(self, html: str) -> BeautifulSoup:
        return BeautifulSoup(html or '', 'html.parser')

    def _listing_urls(self, soup: BeautifulSoup) -> List[str]:
        urls = []
        for link in soup.select(self.config.listing_selector):
            href = link.get('href')
            if href:
                urls.append(self.config.absolute_url(href))
        return urls

    def extract_listing_urls(self, html: str) -> List[str]:
        return self._listing_urls(self._soup(html))

    def probe_page(self, html: str) -> PageProbe:
        soup = self._soup(html)

        title = soup.title.get_text() if soup.title else ''
        body = soup.body if soup.body else soup
        body_text = body.get_text()
        content_length = len(body_text)

        return PageProbe(
            listing_urls=self._listing_urls(soup),
            has_error_marker=soup.select_one(ERROR_MARKER_SELECTORS) is not None,
            has_valid_title=not any(marker in title for marker in INVALID_TITLE_MARKERS),
            content_length=content_length,
            has_valid_content=content_length > MIN_CONTENT_LENGTH,
            has_domain_keywords=any(keyword in body_text for keyword in DOMAIN_KEYWORDS),
            has_next_link=soup.select_one(NEXT_PAGE_SELECTORS) is not None,
            has_listing_section=soup.select_one(LISTING_SECTION_SELECTORS) is not None,
            page_title=title[:100],
        )

    def parse_detail(self, url: str, html: str) -> Optional[GymRaw]:
        soup = self._soup(html)
        raw = GymRaw(name='', url=url)

        # Name: og:title, else <title> without the "| FitMap" suffix
        name = None
        og_title = soup.select_one('meta[property="og:title"]')
        if og_title and og_title.get('content'):
            name = og_title['content'].strip()
        if not name and soup.title:
            name = re.sub(r'\s*\|\s*.*$', '', soup.title.get_text()).strip()
        if not is_valid_gym_name(name):
            return None
        raw.name = name

        for selector in ADDRESS_SELECTORS:
            address = extract_text(soup, selector)
            if address and len(address) > 10:
                raw.address = address
                break

        prices = []
        for price_text in extract_all_texts(soup, PRICE_SELECTORS):
            if '円' in price_text or price_text.isdigit():
                formatted = f"{price_text}円" if price_text.isdigit() else price_text
                if formatted not in prices:
                    prices.append(formatted)
        if prices:
            raw.price = ', '.join(prices)

        features = list(raw.features)
        for feature in extract_all_texts(soup, FEATURE_SELECTORS):
            if len(feature) < 50 and feature not in features:
                features.append(feature)
        raw.features = features

        for selector in DESCRIPTION_SELECTORS:
            description = extract_text(soup, selector)
            if description and len(description) > 20:
                raw.description = description
                break

        # Prefecture from breadcrumbs
        for link in soup.select('.breadcrumb a, .breadcrumbs a, .nav a'):
            text = link.get_text(strip=True)
            href = link.get('href') or ''
            if '/area/' in href and any(suffix in text for suffix in ('県', '都', '府')):
                raw.area = text

        self.logger.debug(
            f"Parsed gym: name=\"{raw.name}\", address=\"{raw.address or 'none'}\", prices={len(prices)}"
        )
        return raw

    def parse_list(self, html: str) -> List[GymRaw]:
        """
        Parse gym cards on an area page.

        Returns:
            GymRaw per card that has both a name and a URL
        """
        soup = self._soup(html)

        cards = []
        for selector in CARD_SELECTORS:
            cards = soup.select(selector)
            if cards:
                self.logger.debug(f"Selector \"{selector}\" matched {len(cards)} gym cards")
                break

        if not cards:
            self.logger.warning("No gym cards found")
            return []

        gyms = []
        for card in cards:
            heading = card.select_one('h3, .gym-name, .title')
            name = heading.get_text(strip=True) if heading else ''
            if not name:
                inner_link = card.select_one('a')
                name = (inner_link.get('title') if inner_link else None) or card.get_text(strip=True)

            href = card.get('href')
            if not href:
                inner_link = card.select_one('a')
                href = inner_link.get('href') if inner_link else ''
            if not name or not href:
                continue

            gyms.append(GymRaw(
                name=name,
                url=self.config.absolute_url(href),
                address=extract_text(card, '.address, .location') or None,
                price=extract_text(card, '.price, .fee') or None,
                features=[t for t in (el.get_text(strip=True) for el in card.select('.tag, .feature, .badge')) if t],
            ))

        self.logger.info(f"Parsed {len(gyms)} gym cards")
        return gyms
