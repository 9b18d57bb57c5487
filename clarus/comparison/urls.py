"""
Shareable comparison URLs.

The compare page reads a single query parameter holding comma-separated
property slugs, in comparison order.
"""

from typing import Iterable, List
from urllib.parse import parse_qs, quote, urlsplit

import config.settings as settings
from clarus.models.comparison import ComparisonItem


def build_shareable_url(
    items: Iterable[ComparisonItem],
    base_path: str = settings.COMPARE_PAGE_PATH,
    param: str = settings.COMPARE_QUERY_PARAM
) -> str:
    """
    Build a compare page URL for items.

    Slugs are joined with commas and percent-encoded; the commas themselves
    stay literal so the parameter reads properties=a,b.
    """
    slugs = ",".join(item.property_slug for item in items)
    return f"{base_path}?{param}={quote(slugs, safe=',')}"


def parse_comparison_url(url: str, param: str = settings.COMPARE_QUERY_PARAM) -> List[str]:
    """
    Extract the ordered slug list from a compare URL or bare query string.

    Empty segments (leading, trailing or doubled commas) are dropped.
    """
    if not url:
        return []
    query = urlsplit(url).query if "?" in url else url.lstrip("?")
    values = parse_qs(query).get(param)
    if not values:
        return []
    return [slug for slug in values[0].split(",") if slug]
