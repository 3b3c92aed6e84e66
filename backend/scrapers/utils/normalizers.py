"""
Data normalization utilities for scrapers.

These functions standardize scraped data into consistent formats.
"""

from typing import List, Tuple


def split_location(location: str) -> List[str]:
    """
    Split a free-text location on commas, trimming each segment.

    Blank segments are kept so positions match the original text.

    Examples:
        "Paris, France" -> ["Paris", "France"]
        ", France"      -> ["", "France"]
    """
    if not location:
        return []
    return [part.strip() for part in location.split(',')]


def parse_hotel_location(location: str, query: str) -> Tuple[str, str]:
    """
    Parse a listing's location into (city, country).

    The city is the first non-empty segment, falling back to the query.
    The country is the last segment whenever there are at least two.

    Examples:
        ("Paris, France", "paris")              -> ("Paris", "France")
        ("Ubud, Bali, Indonesia", "bali")       -> ("Ubud", "Indonesia")
        ("Tokyo", "tokyo")                      -> ("Tokyo", "")
        ("", "luxury resorts")                  -> ("luxury resorts", "")

    Returns:
        Tuple of (city, country)
    """
    parts = split_location(location)
    city = next((part for part in parts if part), query)
    country = parts[-1] if len(parts) >= 2 else ''
    return (city, country)


def normalize_source_keys(sources_param: str) -> List[str]:
    """
    Parse a comma-separated source list from a request.

    Examples:
        "kiwi,michelin" -> ["kiwi", "michelin"]
        " kiwi , ,bogus" -> ["kiwi", "bogus"]
    """
    if not sources_param:
        return []
    return [key.strip() for key in sources_param.split(',') if key.strip()]
