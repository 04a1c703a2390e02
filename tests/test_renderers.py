import pytest

from storefront.homepage.html import to_html
from storefront.homepage.records import SectionRecord
from storefront.homepage.renderers import RendererRegistry, product_card
from storefront.homepage.video import detect_video_type, extract_youtube_id


def record(section_id, section_type, **extra):
    return SectionRecord.model_validate({"id": section_id, "name": section_id, "type": section_type, **extra})


@pytest.fixture
def registry():
    return RendererRegistry(fallback_image="https://cdn.test/fallback.jpg")


class TestProductCard:
    def test_discounted_price(self):
        card = product_card({"id": "p1", "name": "Serum", "price": 200, "discount": 25}, "fallback.jpg")

        assert card.find("product-card__price--current").text == "Rs. 150.00"
        assert card.find("product-card__price--old").text == "Rs. 200.00"
        assert card.find("product-card__badge--discount").text == "-25%"

    def test_sold_out_and_fallback_image(self):
        card = product_card({"id": "p1", "name": "Serum", "price": 10, "stockQuantity": 0}, "fallback.jpg")

        assert card.find("product-card__badge--soldout") is not None
        assert 'src="fallback.jpg"' in to_html(card)


class TestRegistry:
    def test_no_data_renders_nothing(self, registry):
        assert registry.render("heroSlider", record("h", "heroSlider"), None) is None

    def test_unknown_type(self, registry):
        with pytest.raises(KeyError):
            registry.render("mystery", record("m", "mystery"), {})

    def test_tabs_behavior_only_with_several_tabs(self, registry):
        section = record("tabs", "productTabs", title="Shop")
        one = registry.render("productTabs", section, {"tabs": [{"label": "New", "products": []}]})
        two = registry.render("productTabs", section, {"tabs": [
            {"label": "New", "products": []},
            {"label": "Hot", "products": [], "error": True},
        ]})

        assert one.behaviors == []
        assert [b.name for b in two.behaviors] == ["tabs"]
        assert "Error loading products" in two.text_content()

    def test_custom_html_is_emitted_verbatim(self, registry):
        section = record("raw", "customHTML")
        html = to_html(registry.render("customHTML", section, {"html": "<div class=\"promo\">Hi</div>"}))

        assert '<div class="promo">Hi</div>' in html
        assert 'data-section-id="raw"' in html

    def test_banner_uses_fallback_image(self, registry):
        section = record("b1", "bannerFullWidth")
        fragment = registry.render("bannerFullWidth", section, {"banner": {"id": "x", "link": "/sale"}})

        html = to_html(fragment)
        assert 'src="https://cdn.test/fallback.jpg"' in html
        assert 'href="/sale"' in html
        assert fragment.attrs["data-banner-id"] == "x"


class TestVideo:
    def test_youtube_id(self):
        assert extract_youtube_id("https://www.youtube.com/watch?v=dQw4w9WgXcQ") == "dQw4w9WgXcQ"
        assert extract_youtube_id("https://youtu.be/short") is None

    @pytest.mark.parametrize("url, kind", [
        ("https://youtu.be/dQw4w9WgXcQ", "youtube"),
        ("https://vimeo.com/76979871", "vimeo"),
        ("https://cdn.test/clip.mp4", "direct"),
        ("https://res.cloudinary.com/x/video/upload/clip", "file"),
        ("https://cdn.test/photo.jpg", None),
    ])
    def test_detect_video_type(self, url, kind):
        assert detect_video_type(url) == kind
