"""
Gym processing pipeline.

Turns fetched detail pages into Gym records: parse with the site adapter,
split the address, parse fees, classify personal-training gyms.
"""

from typing import Dict, List, Optional
import logging

from .base import BaseSite, Gym, GymRaw
from .utils.normalizers import parse_prices, split_address
from .utils.classifiers import judge_personal

logger = logging.getLogger(__name__)


class GymPipeline:
    """Parse, normalize and classify fetched gym pages."""

    def __init__(self, site: BaseSite):
        self.site = site

    def build_gym(self, raw: GymRaw, default_prefecture: str) -> Optional[Gym]:
        """
        Convert parsed gym data into a Gym record.

        Args:
            raw: Parsed gym data
            default_prefecture: Prefecture of the region the gym was listed under

        Returns:
            Gym, or None if name or URL is missing or processing fails
        """
        if not raw.name or not raw.url:
            return None

        try:
            parts = split_address(raw.address or '')
            prefecture = parts['prefecture'] or default_prefecture
            judgement = judge_personal(raw)

            return Gym(
                name=raw.name,
                area=raw.area or prefecture,
                prefecture=prefecture,
                city=parts['city'],
                address=raw.address or '',
                url=raw.url,
                prices=parse_prices(raw.price or ''),
                features=list(raw.features or []),
                description=raw.description,
                is_personal=judgement.flag,
                is_personal_reason=judgement.reason,
            )
        except Exception as e:
            logger.warning(f"Failed to process gym data for {raw.url}: {e}")
            return None

    def process(self, html_map: Dict[str, str], default_prefecture: str) -> List[Gym]:
        """
        Process a region's fetched pages.

        Args:
            html_map: URL -> HTML from the detail fetcher
            default_prefecture: Prefecture of the region

        Returns:
            Gym records in fetch order
        """
        gyms = []
        for raw in self.site.parse_details(html_map).values():
            gym = self.build_gym(raw, default_prefecture)
            if gym:
                gyms.append(gym)
        return gyms
