from datetime import datetime, timedelta, timezone

import pytest

from storefront.extensions import db
from storefront.models.catalog import Banner, Category, Product, Subcategory

BASE_TIME = datetime(2024, 5, 1, tzinfo=timezone.utc)


@pytest.fixture
def add_product(app):
    def _add(name, minutes=0, **fields):
        product = Product(name=name, price=100, created_at=BASE_TIME + timedelta(minutes=minutes), **fields)
        db.session.add(product)
        db.session.commit()
        return product
    return _add


class TestProducts:
    def test_section_tag_wins_over_filter(self, client, add_product):
        tagged = add_product("Serum", sections=["New Arrivals"])
        add_product("Cream", is_featured=True)

        response = client.get("/api/v1/products", query_string={"section": "New Arrivals", "filter": "featured"})

        assert [p["id"] for p in response.get_json()] == [tagged.id]

    def test_flag_filter(self, client, add_product):
        add_product("Serum", sections=["New Arrivals"])
        featured = add_product("Cream", is_featured=True)

        response = client.get("/api/v1/products?filter=featured")

        assert [p["id"] for p in response.get_json()] == [featured.id]

    def test_tag_membership_is_checked_before_limit(self, client, add_product):
        tagged = add_product("Old but tagged", minutes=0, sections=["On Sale"])
        for idx in range(3):
            add_product(f"Newer {idx}", minutes=10 + idx)

        response = client.get("/api/v1/products", query_string={"section": "On Sale", "limit": 1})

        assert [p["id"] for p in response.get_json()] == [tagged.id]

    def test_newest_first_and_min_discount(self, client, add_product):
        add_product("No discount", minutes=0)
        older = add_product("Half off", minutes=1, discount=50)
        newer = add_product("Tenth off", minutes=2, discount=10)

        response = client.get("/api/v1/products?minDiscount=10")

        assert [p["id"] for p in response.get_json()] == [newer.id, older.id]

    def test_discounted_filter(self, client, add_product):
        add_product("Full price")
        sale = add_product("Sale", discount=15)

        response = client.get("/api/v1/products?filter=discounted")

        assert [p["id"] for p in response.get_json()] == [sale.id]

    @pytest.mark.parametrize("query", ["limit=abc", "limit=0", "minDiscount=lots", "filter=cheapest"])
    def test_bad_parameters(self, client, query):
        response = client.get(f"/api/v1/products?{query}")
        assert response.status_code == 400


class TestTaxonomy:
    def test_subcategories_by_category(self, client, app):
        face = Category(name="Face")
        bath = Category(name="Body")
        db.session.add_all([face, bath])
        db.session.flush()
        serums = Subcategory(name="Serums", category_id=face.id)
        db.session.add_all([serums, Subcategory(name="Lotions", category_id=bath.id)])
        db.session.commit()

        response = client.get(f"/api/v1/subcategories?categoryId={face.id}")

        body = response.get_json()
        assert [s["id"] for s in body] == [serums.id]
        assert body[0]["category"] == {"id": face.id, "name": "Face"}


class TestBanners:
    def test_list_only_has_active_banners(self, client, app):
        live = Banner(title="Live", image="https://cdn.test/a.jpg")
        db.session.add_all([live, Banner(title="Old", image="https://cdn.test/b.jpg", is_active=False)])
        db.session.commit()

        response = client.get("/api/v1/banners")

        assert [b["id"] for b in response.get_json()] == [live.id]
        assert response.get_json()[0]["position"] == "middle"

    def test_detail(self, client, app):
        banner = Banner(title="Live", image="https://cdn.test/a.jpg", link="/sale")
        db.session.add(banner)
        db.session.commit()

        response = client.get(f"/api/v1/banners/detail/{banner.id}")

        assert response.status_code == 200
        assert response.get_json()["link"] == "/sale"

    def test_detail_unknown_id(self, client):
        response = client.get("/api/v1/banners/detail/missing")
        assert response.status_code == 404
        assert response.get_json()["error"] == "NotFound"
