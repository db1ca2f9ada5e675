"""
Data normalization utilities.

These functions turn free-text fields from gym pages into structured values.
"""

import re
from typing import List, Dict

from ..base import Price
from ..config import PREFECTURES


# Ordered: monthly and daily fees first, then one-off fees ("円" not followed by "/")
PRICE_PATTERNS = [
    (re.compile(r'(\d+,?\d*)\s*円\s*/\s*月'), '月額', 'monthly'),
    (re.compile(r'(\d+,?\d*)\s*円\s*/\s*日'), '日額', 'daily'),
    (re.compile(r'(\d+,?\d*)\s*円(?!\s*/)'), '単発', 'single'),
]

CITY_PATTERNS = [
    re.compile(r'^([^市区町村]+[市区町村])'),
    re.compile(r'^([^郡]+郡[^町村]+[町村])'),
    re.compile(r'^([^区]+区)'),
    re.compile(r'^([^市]+市)'),
]


def parse_prices(price_text: str) -> List[Price]:
    """
    Parse a price text into Price entries.

    Examples:
        "8,800円/月" -> [Price('月額', 8800, 'monthly')]
        "2,200円/日, 1000円" -> [Price('日額', 2200, 'daily'), Price('単発', 1000, 'single')]
    """
    if not price_text:
        return []

    prices = []
    for pattern, label, period in PRICE_PATTERNS:
        for match in pattern.finditer(price_text):
            amount = int(match.group(1).replace(',', '', 1))
            prices.append(Price(type=label, amount=amount, period=period))
    return prices


def split_address(address: str) -> Dict[str, str]:
    """
    Split a Japanese address into prefecture, city and the rest.

    Examples:
        "東京都渋谷区道玄坂1-2-3" -> {'prefecture': '東京都', 'city': '渋谷区', 'address': '道玄坂1-2-3'}
        "" -> {'prefecture': '', 'city': '', 'address': ''}
    """
    if not address:
        return {'prefecture': '', 'city': '', 'address': ''}

    prefecture = ''
    remaining = address
    for name in PREFECTURES:
        index = address.find(name)
        if index != -1:
            prefecture = name
            remaining = address[index + len(name):]
            break

    city = ''
    for pattern in CITY_PATTERNS:
        match = pattern.match(remaining)
        if match and match.group(1):
            city = match.group(1)
            remaining = remaining[len(city):]
            break

    return {
        'prefecture': prefecture,
        'city': city,
        'address': remaining.strip(),
    }
