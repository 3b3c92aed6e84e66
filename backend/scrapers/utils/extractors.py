"""
Data extraction utilities for scrapers.

Listing pages drift constantly, so nothing here trusts a single selector.
Every field is described by an ordered list of ``Selector`` tiers which are
tried in turn until one yields a non-empty value.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag


# Attributes whose values are URLs and get resolved against the page URL
URL_ATTRIBUTES = frozenset({'href', 'src', 'data-src', 'data-lazy-src', 'srcset'})


def clean_text(text: Optional[str]) -> str:
    """
    Trim surrounding whitespace.

    Examples:
        "  Le Bristol\\n  Paris " -> "Le Bristol\\n  Paris"
        None -> ""
    """
    if not text:
        return ''
    return text.strip()


@dataclass(frozen=True)
class Selector:
    """
    One extraction strategy: a CSS selector plus what to read from the match.

    ``attr=None`` reads the element's text, anything else reads that attribute.
    """
    css: str
    attr: Optional[str] = None

    def values(self, root: Tag, base_url: str = '') -> Iterable[str]:
        """Yield the cleaned value of every matching element, in document order."""
        for element in root.select(self.css):
            if self.attr is None:
                yield clean_text(element.get_text())
                continue

            raw = element.get(self.attr)
            if isinstance(raw, list):
                raw = ' '.join(raw)
            value = clean_text(raw)
            if not value:
                yield ''
                continue
            if self.attr == 'srcset':
                # "a.jpg 1x, b.jpg 2x" -> "a.jpg"
                value = value.split(',')[0].split()[0]
            if self.attr in URL_ATTRIBUTES and base_url:
                value = urljoin(base_url, value)
            yield value


def text(*css: str) -> List[Selector]:
    """Build text tiers: ``text('h2', 'h3')``."""
    return [Selector(c) for c in css]


def attr(name: str, *css: str) -> List[Selector]:
    """Build attribute tiers: ``attr('href', 'a[href]')``."""
    return [Selector(c, name) for c in css]


def first_match(root: Tag, tiers: Sequence[Selector], base_url: str = '') -> str:
    """
    Return the first non-empty value produced by the tiers, or ''.

    Tiers are tried in order; within a tier, matches are tried in document order.

    Args:
        root: Element to search beneath (a card)
        tiers: Ordered selector strategies for one field
        base_url: Page URL used to absolutize URL attributes

    Returns:
        The first non-empty value, or an empty string
    """
    for selector in tiers:
        for value in selector.values(root, base_url):
            if value:
                return value
    return ''


def select_cards(soup: BeautifulSoup, card_selectors: Sequence[str]) -> List[Tag]:
    """
    Locate listing cards matching any of the card selectors.

    Cards on one page may use different markup, so every selector
    contributes. Each element appears once, in document order.

    Returns:
        Card elements in document order, or an empty list
    """
    if not card_selectors:
        return []
    return soup.select(', '.join(card_selectors))


def wait_selector(signatures: Sequence[str]) -> str:
    """Join card signatures into one CSS group for a single wait call."""
    return ', '.join(signatures)
