"""Attribute naming for derived search metadata."""

import re

from searchsync.core.constants import HIGHLIGHT_PREFIX

_SEPARATORS = re.compile(r"[^0-9A-Za-z]+")


def camel_case(value: str) -> str:
    """Join alphanumeric segments of value in camelCase.

    Segments are split on any run of non-alphanumeric characters. The first
    segment is kept as-is; the rest are title-cased.

    >>> camel_case("highlighted_offer_price")
    'highlightedOfferPrice'
    """
    segments = [s for s in _SEPARATORS.split(value) if s]
    if not segments:
        return ""
    head, *tail = segments
    return head + "".join(s[:1].upper() + s[1:].lower() for s in tail)


def highlight_attribute_name(field: str) -> str:
    """Name of the derived attribute holding highlight fragments for field.

    >>> highlight_attribute_name("offer_price")
    'highlightedOfferPrice'
    >>> highlight_attribute_name("author.name")
    'highlightedAuthorName'
    """
    return camel_case(f"{HIGHLIGHT_PREFIX}_{field}")
