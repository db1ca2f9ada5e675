"""
Pagination termination heuristic.

FitMap serves syntactically valid pages for out-of-range page numbers, so
a missing "next" link is not a reliable end marker. A page counts as empty
if ANY of these hold:

- no listing links
- an error / not-found marker element
- an invalid title (404, error, not found)
- body text too short to be a content page
- no domain keywords AND body text below the larger threshold

The next-link signal is informational only.
"""

from enum import Enum

from ..base import PageProbe
from ..config import KEYWORDLESS_MIN_CONTENT_LENGTH


class PageDecision(Enum):
    CONTINUE = "continue"
    STOP = "stop"


def is_empty_page(probe: PageProbe) -> bool:
    return (
        probe.listing_count == 0
        or probe.has_error_marker
        or not probe.has_valid_title
        or not probe.has_valid_content
        or (not probe.has_domain_keywords and probe.content_length < KEYWORDLESS_MIN_CONTENT_LENGTH)
    )


def classify_page(probe: PageProbe) -> PageDecision:
    """Decide whether pagination continues after this page."""
    if is_empty_page(probe):
        return PageDecision.STOP
    return PageDecision.CONTINUE
