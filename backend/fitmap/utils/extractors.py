"""
Data extraction utilities for site adapters.

These functions pull trimmed text and numbers out of parsed HTML.
"""

import re
from typing import List, Optional, Iterable, Union
from bs4 import BeautifulSoup, Tag


def extract_text(soup: Union[BeautifulSoup, Tag], selector: str) -> Optional[str]:
    """
    Extract the trimmed text of the first element matching a selector.

    Args:
        soup: Parsed document or element
        selector: CSS selector

    Returns:
        Text, or None if nothing matches
    """
    element = soup.select_one(selector)
    if element is None:
        return None
    return element.get_text().strip()


def extract_all_texts(soup: Union[BeautifulSoup, Tag], selectors: Iterable[str]) -> List[str]:
    """
    Extract non-empty texts of every element matching any selector.

    Selectors are applied in order; an element matched by several selectors
    yields its text once per match, callers deduplicate.
    """
    texts = []
    for selector in selectors:
        for element in soup.select(selector):
            text = element.get_text().strip()
            if text:
                texts.append(text)
    return texts


def extract_amounts(text: str) -> List[int]:
    """
    Extract yen amounts from a price text.

    Only the first thousands separator is dropped, so "1,234" -> 1234.

    Examples:
        "月額 8,800円, 入会金 55,000円" -> [8800, 55000]
        "無料" -> []
    """
    if not text:
        return []
    return [int(match.replace(',', '', 1)) for match in re.findall(r'(\d+,?\d*)', text)]
