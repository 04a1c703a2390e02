import logging

import pytest

from storefront.homepage.document import ANCHOR_ATTR, HomepageDocument
from storefront.homepage.fragments import el
from storefront.homepage.placement import BannerPlacementResolver


def node(section_id, section_type, name=""):
    return el("section", {
        "data-section-id": section_id,
        "data-section-type": section_type,
        "data-section-name": name or None,
    })


@pytest.fixture
def document():
    doc = HomepageDocument()
    doc.append(node("1", "heroSlider", "Main Hero"))
    doc.append(node("2", "categoryGrid", "Shop by Category"))
    doc.append(node("3", "productCarousel", "Lingerie Collection"))
    doc.append(node("4", "newsletterSocial", "Stay in touch"))
    return doc


@pytest.fixture
def resolver():
    return BannerPlacementResolver()


class TestFixedLocations:
    def test_top(self, resolver, document):
        assert resolver.place("top", document).index == 0

    @pytest.mark.parametrize("location", ["bottom", "before-footer"])
    def test_end(self, resolver, document, location):
        point = resolver.place(location, document)
        assert point.index == 4
        assert point.fallback is False

    def test_middle_goes_after_first_product_section(self, resolver, document):
        assert resolver.place("middle", document).index == 3

    def test_middle_without_products_falls_back(self, resolver, caplog):
        doc = HomepageDocument()
        doc.append(node("1", "heroSlider"))

        with caplog.at_level(logging.WARNING):
            point = resolver.place("middle", doc)

        assert point.index == 1
        assert point.fallback is True


class TestAfterLocations:
    def test_after_section_id(self, resolver, document):
        assert resolver.place("after-section-2", document).index == 2

    def test_missing_section_falls_back_to_end_with_warning(self, resolver, document, caplog):
        with caplog.at_level(logging.WARNING):
            point = resolver.place("after-section-42", document)

        assert point.index == 4
        assert point.fallback is True
        assert "after-section-42" in caplog.text

    @pytest.mark.parametrize("location, index", [
        ("after-hero", 1),
        ("after-slider", 1),
        ("after-categories", 2),
        ("after-products", 3),
    ])
    def test_type_aliases(self, resolver, document, location, index):
        assert resolver.place(location, document).index == index

    def test_bare_section_id(self, resolver, document):
        assert resolver.place("after-3", document).index == 3

    def test_name_substring_reads_hyphens_as_spaces(self, resolver, document):
        assert resolver.place("after-lingerie-collection", document).index == 3

    def test_unknown_location(self, resolver, document):
        point = resolver.place("sideways", document)
        assert point.index == 4
        assert point.fallback is True

    def test_empty_document(self, resolver):
        assert resolver.place("after-hero", HomepageDocument()).index == 0


class TestSameAnchor:
    def test_banners_on_one_anchor_keep_insertion_order(self, resolver, document):
        for banner_id in ("first", "second"):
            point = resolver.place("after-section-1", document)
            banner = el("section", {"data-banner-id": banner_id, ANCHOR_ATTR: point.anchor})
            document.insert(point.index, banner)

        assert [n.attrs.get("data-banner-id") for n in document.nodes[1:3]] == ["first", "second"]
        assert document.nodes[3].attrs["data-section-id"] == "2"
