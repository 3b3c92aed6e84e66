"""Shared utilities for scrapers."""

from .normalizers import (
    split_location,
    parse_hotel_location,
    normalize_source_keys,
)
from .extractors import (
    Selector,
    clean_text,
    first_match,
    select_cards,
    wait_selector,
)

__all__ = [
    'split_location',
    'parse_hotel_location',
    'normalize_source_keys',
    'Selector',
    'clean_text',
    'first_match',
    'select_cards',
    'wait_selector',
]
