"""Tests for derived attribute naming (camel_case, highlight_attribute_name)."""

import pytest

from searchsync.shared.utils import camel_case, highlight_attribute_name


@pytest.mark.parametrize(
    ("field", "expected"),
    [
        ("offer_price", "highlightedOfferPrice"),
        ("title", "highlightedTitle"),
        ("author.name", "highlightedAuthorName"),
        ("SKU", "highlightedSku"),
        ("meta--tags", "highlightedMetaTags"),
    ],
)
def test_highlight_attribute_name(field: str, expected: str) -> None:
    assert highlight_attribute_name(field) == expected


def test_camel_case_keeps_first_segment() -> None:
    assert camel_case("Price_per_unit") == "PricePerUnit"
    assert camel_case("version2_label") == "version2Label"


def test_camel_case_of_separators_only_is_empty() -> None:
    assert camel_case("__") == ""
