# storefront/homepage/sources.py
"""
Catalog sources feed the resolver and the pipeline.

``HttpCatalogSource`` talks to the storefront REST API through the cached
client. ``ModelCatalogSource`` runs the same queries in-process and is
used by the section data endpoints and the tests.
"""
from typing import Any, Dict, List, Optional

from storefront.catalog import queries
from storefront.application.sections.list_sections import list_public_sections
from storefront.normalizers.section import normalize_section

from .client import StorefrontClient


def _as_list(payload, *keys) -> List[Dict[str, Any]]:
    """Accept a bare JSON array or an envelope such as ``{"products": [...]}``."""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in keys + ("data",):
            if isinstance(payload.get(key), list):
                return payload[key]
    return []


class HttpCatalogSource:
    def __init__(self, client: StorefrontClient):
        self.client = client

    async def list_public_sections(self) -> List[Dict[str, Any]]:
        payload = await self.client.get("/sections/public", bust=True)
        if not isinstance(payload, list):
            raise ValueError("Invalid sections response format")
        return payload

    async def list_sliders(self):
        return _as_list(await self.client.get("/sliders"), "sliders")

    async def list_categories(self):
        return _as_list(await self.client.get("/categories"), "categories")

    async def list_departments(self):
        return _as_list(await self.client.get("/departments"), "departments")

    async def list_products(self, params: Dict[str, Any], *, fresh: bool = False):
        return _as_list(await self.client.get("/products", params, bust=fresh), "products")

    async def list_subcategories(self, category_id: Optional[str] = None):
        params = {"categoryId": category_id} if category_id else None
        return _as_list(await self.client.get("/subcategories", params), "subcategories")

    async def get_banner(self, banner_id: str):
        return await self.client.get(f"/banners/detail/{banner_id}", bust=True)

    async def list_banners(self, *, fresh: bool = False):
        return _as_list(await self.client.get("/banners", bust=fresh), "banners")

    async def list_video_banners(self):
        return _as_list(await self.client.get("/video-banners/public"), "videoBanners")

    async def list_brands(self):
        return _as_list(await self.client.get("/brands/public"), "brands")


class ModelCatalogSource:
    """In-process source. Needs an active Flask app context."""

    async def list_public_sections(self):
        return [normalize_section(s) for s in list_public_sections()]

    async def list_sliders(self):
        return queries.list_sliders()

    async def list_categories(self):
        return queries.list_categories()

    async def list_departments(self):
        return queries.list_departments()

    async def list_products(self, params: Dict[str, Any], *, fresh: bool = False):
        return queries.list_products({k: v for k, v in params.items() if v is not None})

    async def list_subcategories(self, category_id: Optional[str] = None):
        return queries.list_subcategories(category_id)

    async def get_banner(self, banner_id: str):
        return queries.get_banner(banner_id)

    async def list_banners(self, *, fresh: bool = False):
        return queries.list_banners()

    async def list_video_banners(self):
        return queries.list_video_banners()

    async def list_brands(self):
        return queries.list_brands()
