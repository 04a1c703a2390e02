# storefront/homepage/resolver.py
"""
Section Data Resolver.

Turns one section record into the data its renderer needs by querying a
catalog source. Dispatch is on ``section.type`` only. Any failure while
resolving is logged and reported as "no data" so a single section can
never stop the rest of the homepage.
"""
import asyncio
import logging
from typing import Any, Dict, List, Optional

from storefront.domain.exceptions import ResolutionFailure
from storefront.domain.section_types import (
    CATEGORY_TYPES,
    DEFAULT_PRODUCT_SECTIONS,
    PRODUCT_TYPES,
    ProductListConfig,
    ProductTab,
    ProductTabsConfig,
)

from .client import StorefrontAPIError
from .records import SectionRecord

logger = logging.getLogger(__name__)

DEPARTMENT_LIMIT = 12
SUBCATEGORY_GRID_SLOTS = 6
COLLECTION_LINK_LIMIT = 10
MOBILE_TAB_LIMIT = 4

DEFAULT_NEWSLETTER_TITLE = "Subscribe to our newsletter"
DEFAULT_NEWSLETTER_DESC = "Get updates on new products and special offers"

# Tab ``filter`` strings that name a product section tag
TAB_FILTER_SECTIONS = {
    "new": "New Arrivals",
    "new-arrival": "New Arrivals",
    "newarrival": "New Arrivals",
    "best-selling": "Best Sellers",
    "bestseller": "Best Sellers",
    "best-seller": "Best Sellers",
    "discounted": "On Sale",
    "onsale": "On Sale",
    "on-sale": "On Sale",
}

# Legacy boolean flags -> ``filter`` query value, checked in this order
FLAG_FILTERS = (
    ("isFeatured", "featured"),
    ("isNewArrival", "new"),
    ("isTrending", "trending"),
    ("isDiscounted", "discounted"),
    ("isBestSelling", "best-selling"),
    ("isTopSelling", "top-selling"),
)

# Substring of a section's title/name -> product section tag
NAME_SECTION_HINTS = (
    (("lingerie",), "Lingerie Collection"),
    (("top selling",), "Top Selling Product"),
    (("new arrivals",), "New Arrivals"),
    (("best sellers",), "Best Sellers"),
    (("on sale",), "On Sale"),
    (("mega sale", "10.10"), "10.10 Mega Sale"),
)


def section_from_tab_filter(product_filter) -> Optional[str]:
    if isinstance(product_filter, str):
        return TAB_FILTER_SECTIONS.get(product_filter.lower())
    return None


def filter_from_flags(flags: Dict[str, Any]) -> Optional[str]:
    for flag, value in FLAG_FILTERS:
        if flags.get(flag):
            return value
    return None


def infer_product_section(section: SectionRecord) -> Optional[str]:
    """Product section tag implied by a section's title or name, if any."""
    extra = section.typed_config.model_extra or {}
    raw = (extra.get("title") or section.title or section.name or "").lower()
    for needles, tag in NAME_SECTION_HINTS:
        if any(needle in raw for needle in needles):
            return tag
    return None


def has_section_tag(product: Dict[str, Any], tag: str) -> bool:
    sections = product.get("sections")
    return isinstance(sections, list) and tag in sections


def _ids_equal(record: Dict[str, Any], record_id: str) -> bool:
    return record.get("id", record.get("_id")) == record_id


class SectionDataResolver:
    def __init__(self, source, viewport: str = "desktop"):
        self.source = source
        self.viewport = viewport
        self._handlers = {
            "heroSlider": self._hero_slider,
            "scrollingText": self._scrolling_text,
            "departmentGrid": self._department_grid,
            "productTabs": self._product_tabs,
            "featuredCollections": self._subcategories,
            "subcategoryGrid": self._subcategories,
            "bannerFullWidth": self._banner,
            "videoBanner": self._video_banner,
            "collectionLinks": self._collection_links,
            "newsletterSocial": self._newsletter_social,
            "brandMarquee": self._brands,
            "brandGrid": self._brands,
            "customHTML": self._custom_html,
        }
        for section_type in CATEGORY_TYPES:
            self._handlers[section_type] = self._categories
        for section_type in PRODUCT_TYPES - {"productTabs"}:
            self._handlers[section_type] = self._product_list

    @property
    def is_mobile(self) -> bool:
        return self.viewport == "mobile"

    async def resolve_data(self, section: SectionRecord) -> Optional[Dict[str, Any]]:
        """Resolved payload for ``section``, or None when there is nothing to show."""
        handler = self._handlers.get(section.type)
        if handler is None:
            logger.warning("No data resolver for section type %s (%s)", section.type, section.id)
            return None

        try:
            return await handler(section)
        except ResolutionFailure as exc:
            logger.warning("Section %s (%s) skipped: %s", section.id, section.type, exc)
            return None
        except Exception:
            logger.warning(
                "Could not resolve data for section %s (%s)", section.id, section.type, exc_info=True
            )
            return None

    # ------------------------
    # Media
    # ------------------------

    async def _hero_slider(self, section):
        slider_ids = section.typed_config.slider_ids
        if not slider_ids:
            raise ResolutionFailure("no slider ids configured")

        sliders = [
            s for s in await self.source.list_sliders()
            if s.get("id") in slider_ids and s.get("isActive")
        ]
        if not sliders:
            raise ResolutionFailure("no active sliders found")

        return {"sliders": sorted(sliders, key=lambda s: s.get("order") or 0)}

    async def _scrolling_text(self, section):
        items = [item for item in section.typed_config.items if item]
        if not items:
            raise ResolutionFailure("no items configured")
        return {"items": items}

    async def _banner(self, section):
        config = section.typed_config

        if config.image_url:
            return {
                "banner": {
                    "id": config.banner_id,
                    "title": section.title or "",
                    "description": "",
                    "image": config.image_url,
                    "imageAlt": config.alt,
                    "link": config.link or "#",
                    "size": config.size,
                    "bannerType": "image",
                    "isActive": True,
                }
            }

        if not config.banner_id:
            raise ResolutionFailure("neither imageUrl nor bannerId configured")

        banner = await self.find_banner(config.banner_id)
        if banner is None:
            return None
        return {"banner": banner}

    async def find_banner(self, banner_id: str) -> Optional[Dict[str, Any]]:
        """
        Look a banner up by id, falling back to a scan of all banners when the
        detail lookup is refused. Inactive banners count as missing.
        """
        try:
            banner = await self.source.get_banner(banner_id)
        except Exception as exc:
            status = getattr(exc, "status_code", None)
            if isinstance(exc, StorefrontAPIError) and status not in (None, 401, 404):
                raise
            logger.info("Banner %s detail lookup failed (%s), scanning banner list", banner_id, status)
            banners = await self.source.list_banners(fresh=True)
            banner = next((b for b in banners if _ids_equal(b, banner_id)), None)

        if not banner or not banner.get("isActive"):
            logger.warning("Banner %s is inactive or missing", banner_id)
            return None
        return banner

    async def _video_banner(self, section):
        videos = await self.source.list_video_banners()
        if not videos:
            return None

        wanted = section.typed_config.video_banner_id
        video = None
        if wanted:
            video = next((v for v in videos if _ids_equal(v, wanted)), None)
            if video is None:
                logger.warning("Video banner %s not found, using the first active one", wanted)
        video = video or videos[0]

        if not video.get("videoUrl"):
            return None
        return {"videoBanner": video}

    # ------------------------
    # Taxonomy
    # ------------------------

    async def _categories(self, section):
        config = section.typed_config
        categories = await self.source.list_categories()

        if config.category_ids:
            by_id = {c.get("id"): c for c in categories if c.get("isActive")}
            picked = [by_id[cid] for cid in config.category_ids if cid in by_id]
        else:
            picked = [c for c in categories if c.get("isActive") and c.get("isFeatured")]

        if not picked:
            return None

        payload = {"categories": picked, "sectionBanner": None}
        if config.section_banner_id:
            payload["sectionBanner"] = await self._optional_banner(config.section_banner_id)
        return payload

    async def _department_grid(self, section):
        department_ids = section.typed_config.department_ids
        departments = [d for d in await self.source.list_departments() if d.get("isActive")]

        if department_ids:
            departments = [d for d in departments if d.get("id") in department_ids]
        else:
            departments = departments[:DEPARTMENT_LIMIT]

        return {"departments": departments} if departments else None

    async def _subcategories(self, section):
        wanted = section.typed_config.subcategory_ids
        subcategories = [s for s in await self.source.list_subcategories() if s.get("isActive")]

        if wanted:
            by_id = {s.get("id"): s for s in subcategories}
            subcategories = [by_id[sid] for sid in wanted if sid in by_id]

        if not subcategories:
            return None

        return {
            "subcategories": subcategories[:SUBCATEGORY_GRID_SLOTS],
            "buttons": subcategories,
        }

    async def _collection_links(self, section):
        categories = [
            c for c in await self.source.list_categories()
            if c.get("isActive") and c.get("isFeatured")
        ]
        if not categories:
            return None
        return {"categories": categories[:COLLECTION_LINK_LIMIT]}

    # ------------------------
    # Products
    # ------------------------

    def _tab_query(self, config: ProductTabsConfig, tab: ProductTab) -> Dict[str, Any]:
        limit = tab.limit or 8
        if self.is_mobile:
            limit = min(limit, MOBILE_TAB_LIMIT)

        params: Dict[str, Any] = {
            "limit": limit,
            "categoryId": config.category_id or tab.category_id,
        }

        tag = tab.section or config.section or section_from_tab_filter(tab.filter)
        if tag:
            params["section"] = tag
        elif isinstance(tab.filter, str) and tab.filter:
            params["filter"] = tab.filter
        elif isinstance(tab.filter, dict):
            params["filter"] = filter_from_flags(tab.filter)

        params["collection"] = tab.collection or config.collection
        params["minDiscount"] = tab.min_discount or config.min_discount
        return params

    async def _load_tab(self, config, tab, index):
        label = tab.label or f"Tab {index + 1}"
        params = self._tab_query(config, tab)
        try:
            products = await self.source.list_products(params)
        except Exception:
            logger.warning("Failed to load products for tab %s", label, exc_info=True)
            return {"label": label, "section": params.get("section"), "products": [], "error": True}

        return {"label": label, "section": params.get("section"), "products": products, "error": False}

    async def _product_tabs(self, section):
        config: ProductTabsConfig = section.typed_config
        if not config.tabs:
            return None

        tabs = await asyncio.gather(
            *(self._load_tab(config, tab, idx) for idx, tab in enumerate(config.tabs))
        )

        payload = {"tabs": list(tabs), "sectionBanner": None}
        if config.section_banner_id:
            payload["sectionBanner"] = await self._optional_banner(config.section_banner_id)
        return payload

    def product_query(self, section: SectionRecord) -> Dict[str, Any]:
        """Query params for a single-list product section (carousel family)."""
        config: ProductListConfig = section.typed_config
        tag = (
            config.section
            or DEFAULT_PRODUCT_SECTIONS.get(section.type)
            or infer_product_section(section)
        )

        params: Dict[str, Any] = {
            "limit": config.limit or 10,
            "categoryId": config.category_id,
            "minDiscount": config.min_discount,
        }

        if tag:
            # The tag is authoritative: flags and collection are ignored
            params["section"] = tag
            return params

        params["filter"] = config.filter or filter_from_flags({
            "isFeatured": config.is_featured,
            "isNewArrival": config.is_new_arrival,
            "isTrending": config.is_trending,
            "isBestSelling": config.is_best_selling,
            "isTopSelling": config.is_top_selling,
        })
        params["collection"] = config.collection
        return params

    async def _product_list(self, section):
        params = self.product_query(section)
        tag = params.get("section")

        products = await self.source.list_products(params, fresh=bool(tag))

        if tag:
            kept = [p for p in products if has_section_tag(p, tag)]
            if len(kept) != len(products):
                logger.debug(
                    "Dropped %d products not tagged %r in section %s",
                    len(products) - len(kept), tag, section.id,
                )
            products = kept

        if not products:
            raise ResolutionFailure("no products found")

        return {"products": products, "section": tag}

    # ------------------------
    # Misc
    # ------------------------

    async def _newsletter_social(self, section):
        config = section.typed_config
        return {
            "title": config.newsletter_title or section.title or DEFAULT_NEWSLETTER_TITLE,
            "description": config.newsletter_desc or section.description or DEFAULT_NEWSLETTER_DESC,
            "socialLinks": dict(config.social_links),
        }

    async def _brands(self, section):
        brands: List[Dict[str, Any]] = []
        try:
            brands = await self.source.list_brands()
        except Exception:
            logger.warning("Failed to fetch brands, using configured logos", exc_info=True)

        if not brands:
            brands = list(section.typed_config.logos)

        brands = [b for b in brands if isinstance(b, dict) and (b.get("image") or b.get("logo"))]
        return {"brands": brands} if brands else None

    async def _custom_html(self, section):
        html = section.typed_config.html
        return {"html": html} if html else None

    async def _optional_banner(self, banner_id):
        try:
            return await self.find_banner(banner_id)
        except Exception:
            logger.warning("Section banner %s could not be loaded", banner_id, exc_info=True)
            return None
