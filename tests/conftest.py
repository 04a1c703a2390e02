import pytest
from flask_jwt_extended import create_access_token

from storefront import create_app
from storefront.extensions import db
from storefront.homepage.client import StorefrontAPIError
from storefront.models.homepage_section import HomepageSection


@pytest.fixture
def app():
    app = create_app("testing")
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def _auth_headers(role):
    token = create_access_token(identity="admin-1", additional_claims={"role": role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(app):
    return _auth_headers("admin")


@pytest.fixture
def editor_headers(app):
    return _auth_headers("editor")


@pytest.fixture
def make_section(app):
    """Insert a HomepageSection straight into the store."""
    def _make(**fields):
        fields.setdefault("name", fields.get("type", "Section"))
        fields.setdefault("config", {})
        fields.setdefault("ordering", 0)
        fields.setdefault("is_active", True)
        fields.setdefault("is_published", True)
        section = HomepageSection(**fields)
        db.session.add(section)
        db.session.commit()
        return section
    return _make


class FakeCatalogSource:
    """
    In-memory catalog source.

    Returns whatever it holds without server-side filtering, records every
    call and raises the exception registered in ``failures`` for a method.
    """

    def __init__(self):
        self.sections = []
        self.sliders = []
        self.categories = []
        self.departments = []
        self.products = []
        self.subcategories = []
        self.banners = []
        self.video_banners = []
        self.brands = []
        self.failures = {}
        self.calls = []

    async def _call(self, name, *args, **kwargs):
        self.calls.append((name, args, kwargs))
        if name in self.failures:
            raise self.failures[name]

    def calls_to(self, name):
        return [call for call in self.calls if call[0] == name]

    async def list_public_sections(self):
        await self._call("list_public_sections")
        return list(self.sections)

    async def list_sliders(self):
        await self._call("list_sliders")
        return list(self.sliders)

    async def list_categories(self):
        await self._call("list_categories")
        return list(self.categories)

    async def list_departments(self):
        await self._call("list_departments")
        return list(self.departments)

    async def list_products(self, params, *, fresh=False):
        await self._call("list_products", dict(params), fresh=fresh)
        return list(self.products)[:params.get("limit") or 20]

    async def list_subcategories(self, category_id=None):
        await self._call("list_subcategories", category_id)
        return list(self.subcategories)

    async def get_banner(self, banner_id):
        await self._call("get_banner", banner_id)
        for banner in self.banners:
            if banner.get("id") == banner_id:
                return banner
        raise StorefrontAPIError("Banner not found", status_code=404)

    async def list_banners(self, *, fresh=False):
        await self._call("list_banners", fresh=fresh)
        return list(self.banners)

    async def list_video_banners(self):
        await self._call("list_video_banners")
        return list(self.video_banners)

    async def list_brands(self):
        await self._call("list_brands")
        return list(self.brands)


@pytest.fixture
def source():
    return FakeCatalogSource()


def section_payload(section_id, section_type, ordering=0, **extra):
    """Public wire shape of a section, as served by ``/sections/public``."""
    payload = {
        "id": section_id,
        "name": extra.pop("name", section_id),
        "type": section_type,
        "config": extra.pop("config", {}),
        "ordering": ordering,
        "isActive": extra.pop("isActive", True),
        "isPublished": extra.pop("isPublished", True),
        "createdAt": extra.pop("createdAt", "2024-01-01T00:00:00+00:00"),
    }
    payload.update(extra)
    return payload


@pytest.fixture
def make_payload():
    return section_payload
