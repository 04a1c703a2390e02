import asyncio

from storefront.homepage.client import StorefrontAPIError
from storefront.homepage.records import SectionRecord
from storefront.homepage.resolver import DEPARTMENT_LIMIT, SectionDataResolver


def record(make_payload, section_id, section_type, **extra):
    return SectionRecord.model_validate(make_payload(section_id, section_type, **extra))


def resolve(source, section, viewport="desktop"):
    return asyncio.run(SectionDataResolver(source, viewport=viewport).resolve_data(section))


class TestHeroSlider:
    def test_only_configured_active_sliders_sorted_by_order(self, source, make_payload):
        source.sliders = [
            {"id": "s1", "order": 2, "isActive": True},
            {"id": "s2", "order": 1, "isActive": True},
            {"id": "s3", "order": 0, "isActive": False},
            {"id": "s4", "order": 0, "isActive": True},
        ]
        section = record(make_payload, "hero", "heroSlider", config={"sliderIds": ["s1", "s2", "s3"]})

        data = resolve(source, section)

        assert [s["id"] for s in data["sliders"]] == ["s2", "s1"]

    def test_no_slider_ids_resolves_to_nothing(self, source, make_payload):
        section = record(make_payload, "hero", "heroSlider")

        assert resolve(source, section) is None
        assert source.calls_to("list_sliders") == []


class TestCategories:
    def test_configured_ids_keep_their_order_and_skip_inactive(self, source, make_payload):
        source.categories = [
            {"id": "c1", "name": "Skin", "isActive": True},
            {"id": "c2", "name": "Hair", "isActive": False},
            {"id": "c3", "name": "Nails", "isActive": True},
        ]
        section = record(make_payload, "cats", "categoryGrid", config={"categoryIds": ["c3", "c2", "c1", "gone"]})

        data = resolve(source, section)

        assert [c["id"] for c in data["categories"]] == ["c3", "c1"]
        assert data["sectionBanner"] is None

    def test_no_ids_falls_back_to_featured(self, source, make_payload):
        source.categories = [
            {"id": "c1", "isActive": True, "isFeatured": False},
            {"id": "c2", "isActive": True, "isFeatured": True},
            {"id": "c3", "isActive": False, "isFeatured": True},
        ]
        section = record(make_payload, "cats", "categoryFeatured")

        assert [c["id"] for c in resolve(source, section)["categories"]] == ["c2"]

    def test_section_banner_is_attached(self, source, make_payload):
        source.categories = [{"id": "c1", "isActive": True, "isFeatured": True}]
        source.banners = [{"id": "sb", "image": "https://cdn.test/sb.jpg", "isActive": True}]
        section = record(make_payload, "cats", "categoryCircles", config={"sectionBannerId": "sb"})

        assert resolve(source, section)["sectionBanner"]["id"] == "sb"

    def test_nothing_active_resolves_to_nothing(self, source, make_payload):
        source.categories = [{"id": "c1", "isActive": False, "isFeatured": True}]
        section = record(make_payload, "cats", "categoryGrid")

        assert resolve(source, section) is None


class TestDepartmentGrid:
    def test_configured_ids_pick_active_departments(self, source, make_payload):
        source.departments = [
            {"id": "d1", "isActive": True},
            {"id": "d2", "isActive": False},
            {"id": "d3", "isActive": True},
            {"id": "d4", "isActive": True},
        ]
        section = record(make_payload, "deps", "departmentGrid", config={"departmentIds": ["d3", "d2", "d1"]})

        assert [d["id"] for d in resolve(source, section)["departments"]] == ["d1", "d3"]

    def test_no_ids_takes_the_first_active_ones_up_to_the_limit(self, source, make_payload):
        source.departments = [{"id": "off", "isActive": False}] + [
            {"id": f"d{i}", "isActive": True} for i in range(DEPARTMENT_LIMIT + 3)
        ]
        section = record(make_payload, "deps", "departmentGrid")

        departments = resolve(source, section)["departments"]

        assert len(departments) == DEPARTMENT_LIMIT
        assert [d["id"] for d in departments[:2]] == ["d0", "d1"]


class TestProductSections:
    def test_section_tag_beats_legacy_flags(self, source, make_payload):
        section = record(
            make_payload, "p1", "productCarousel",
            config={"section": "On Sale", "isFeatured": True, "collection": "Summer", "limit": 6},
        )

        params = SectionDataResolver(source).product_query(section)

        assert params["section"] == "On Sale"
        assert params["limit"] == 6
        assert "filter" not in params
        assert "collection" not in params

    def test_flags_map_to_filter_without_tag(self, source, make_payload):
        section = record(make_payload, "p1", "productCarousel", name="Picks", config={"isTrending": True})

        params = SectionDataResolver(source).product_query(section)

        assert params["filter"] == "trending"
        assert "section" not in params

    def test_type_implies_tag(self, source, make_payload):
        section = record(make_payload, "p1", "newArrivals")
        assert SectionDataResolver(source).product_query(section)["section"] == "New Arrivals"

    def test_name_implies_tag(self, source, make_payload):
        section = record(make_payload, "p1", "productCarousel", name="Our Lingerie Picks")
        assert SectionDataResolver(source).product_query(section)["section"] == "Lingerie Collection"

    def test_tagged_fetch_is_fresh_and_reverified(self, source, make_payload):
        source.products = [
            {"id": "a", "sections": ["Best Sellers"]},
            {"id": "b", "sections": ["On Sale"]},
            {"id": "c"},
        ]
        section = record(make_payload, "p1", "productCarousel", config={"section": "Best Sellers"})

        data = resolve(source, section)

        assert [p["id"] for p in data["products"]] == ["a"]
        assert data["section"] == "Best Sellers"
        assert source.calls_to("list_products")[0][2] == {"fresh": True}

    def test_no_products_resolves_to_nothing(self, source, make_payload):
        section = record(make_payload, "p1", "productCarousel", config={"section": "Best Sellers"})
        assert resolve(source, section) is None


class TestProductTabs:
    def test_each_tab_gets_its_own_query(self, source, make_payload):
        source.products = [{"id": "a", "sections": ["New Arrivals"]}]
        section = record(make_payload, "tabs", "productTabs", config={"tabs": [
            {"label": "New", "filter": "new", "limit": 8},
            {"label": "Hot", "filter": "trending"},
            {"label": "Picks", "filter": {"isFeatured": True}},
        ]})

        data = resolve(source, section)

        queries = [call[1][0] for call in source.calls_to("list_products")]
        assert queries[0]["section"] == "New Arrivals"
        assert queries[1]["filter"] == "trending"
        assert queries[2]["filter"] == "featured"
        assert [tab["label"] for tab in data["tabs"]] == ["New", "Hot", "Picks"]

    def test_mobile_caps_tab_limit(self, source, make_payload):
        section = record(make_payload, "tabs", "productTabs", config={"tabs": [{"label": "New", "limit": 12}]})

        resolve(source, section, viewport="mobile")

        assert source.calls_to("list_products")[0][1][0]["limit"] == 4

    def test_failed_tab_is_marked_not_fatal(self, source, make_payload):
        source.failures["list_products"] = StorefrontAPIError("boom", status_code=500)
        section = record(make_payload, "tabs", "productTabs", config={"tabs": [{"label": "New"}]})

        data = resolve(source, section)

        assert data["tabs"][0]["error"] is True
        assert data["tabs"][0]["products"] == []


class TestBanners:
    def test_config_image_url_skips_lookup(self, source, make_payload):
        section = record(
            make_payload, "b1", "bannerFullWidth",
            config={"imageUrl": "https://cdn.test/banner.jpg", "bannerId": "x", "link": "/sale"},
        )

        data = resolve(source, section)

        assert data["banner"]["image"] == "https://cdn.test/banner.jpg"
        assert data["banner"]["link"] == "/sale"
        assert source.calls_to("get_banner") == []

    def test_refused_detail_lookup_falls_back_to_list_scan(self, source, make_payload):
        source.banners = [{"id": "x", "image": "https://cdn.test/x.jpg", "isActive": True}]
        source.failures["get_banner"] = StorefrontAPIError("Unauthorized", status_code=401)
        section = record(make_payload, "b1", "bannerFullWidth", config={"bannerId": "x"})

        data = resolve(source, section)

        assert data["banner"]["id"] == "x"
        assert source.calls_to("list_banners")[0][2] == {"fresh": True}

    def test_server_error_is_not_retried_as_scan(self, source, make_payload):
        source.banners = [{"id": "x", "isActive": True}]
        source.failures["get_banner"] = StorefrontAPIError("Server error", status_code=500)
        section = record(make_payload, "b1", "bannerFullWidth", config={"bannerId": "x"})

        assert resolve(source, section) is None
        assert source.calls_to("list_banners") == []

    def test_inactive_banner_counts_as_missing(self, source, make_payload):
        source.banners = [{"id": "x", "isActive": False}]
        section = record(make_payload, "b1", "bannerFullWidth", config={"bannerId": "x"})

        assert resolve(source, section) is None


class TestOtherSections:
    def test_video_banner_falls_back_to_first(self, source, make_payload):
        source.video_banners = [
            {"id": "v1", "videoUrl": "https://youtu.be/dQw4w9WgXcQ"},
            {"id": "v2", "videoUrl": "https://vimeo.com/123"},
        ]
        section = record(make_payload, "vid", "videoBanner", config={"videoBannerId": "gone"})

        assert resolve(source, section)["videoBanner"]["id"] == "v1"

    def test_collection_links_are_featured_and_capped(self, source, make_payload):
        source.categories = [
            {"id": f"c{idx}", "isActive": True, "isFeatured": idx != 0} for idx in range(13)
        ]
        section = record(make_payload, "links", "collectionLinks")

        data = resolve(source, section)

        assert len(data["categories"]) == 10
        assert data["categories"][0]["id"] == "c1"

    def test_brands_fall_back_to_configured_logos(self, source, make_payload):
        source.failures["list_brands"] = StorefrontAPIError("down")
        section = record(make_payload, "brands", "brandMarquee", config={"logos": [
            {"name": "Acme", "image": "https://cdn.test/acme.png"},
            {"name": "No logo"},
        ]})

        data = resolve(source, section)

        assert [b["name"] for b in data["brands"]] == ["Acme"]

    def test_subcategory_grid_keeps_six_slots_and_all_buttons(self, source, make_payload):
        source.subcategories = [{"id": f"s{idx}", "isActive": True} for idx in range(8)]
        section = record(make_payload, "subs", "subcategoryGrid")

        data = resolve(source, section)

        assert len(data["subcategories"]) == 6
        assert len(data["buttons"]) == 8

    def test_newsletter_defaults(self, source, make_payload):
        section = record(make_payload, "news", "newsletterSocial", config={"socialLinks": {"instagram": "https://ig.test"}})

        data = resolve(source, section)

        assert data["title"] == "Subscribe to our newsletter"
        assert data["socialLinks"] == {"instagram": "https://ig.test"}

    def test_unknown_type_resolves_to_nothing(self, source, make_payload):
        section = record(make_payload, "odd", "somethingElse")
        assert resolve(source, section) is None
