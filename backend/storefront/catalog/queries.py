# storefront/catalog/queries.py
"""
Read-only catalog queries shared by the public REST endpoints and the
in-process catalog source used for server-side section data.

Every function returns wire dicts (see ``storefront.normalizers.catalog``).
"""
from typing import Any, Dict, List, Optional

from storefront.extensions import db
from storefront.domain.exceptions import NotFound, ValidationError
from storefront.models.catalog import (
    Banner,
    Brand,
    Category,
    Department,
    Product,
    Slider,
    Subcategory,
    VideoBanner,
)
from storefront.normalizers.catalog import (
    normalize_banner,
    normalize_brand,
    normalize_category,
    normalize_department,
    normalize_product,
    normalize_slider,
    normalize_subcategory,
    normalize_video_banner,
)

DEFAULT_PRODUCT_LIMIT = 20

# ``filter`` query values -> product flag column
PRODUCT_FILTER_FLAGS = {
    "featured": "is_featured",
    "new": "is_new_arrival",
    "trending": "is_trending",
    "best-selling": "is_best_selling",
    "top-selling": "is_top_selling",
}


def list_sliders() -> List[Dict[str, Any]]:
    sliders = Slider.query.filter_by(is_active=True).order_by(Slider.order.asc()).all()
    return [normalize_slider(s) for s in sliders]


def list_categories() -> List[Dict[str, Any]]:
    categories = (
        Category.query
        .filter_by(is_active=True)
        .order_by(Category.ordering.asc(), Category.name.asc())
        .all()
    )
    return [normalize_category(c) for c in categories]


def list_departments() -> List[Dict[str, Any]]:
    departments = Department.query.filter_by(is_active=True).order_by(Department.name.asc()).all()
    return [normalize_department(d) for d in departments]


def list_subcategories(category_id: Optional[str] = None) -> List[Dict[str, Any]]:
    query = Subcategory.query.filter_by(is_active=True)
    if category_id:
        query = query.filter_by(category_id=category_id)

    subcategories = query.order_by(Subcategory.ordering.asc(), Subcategory.name.asc()).all()
    return [normalize_subcategory(s) for s in subcategories]


def _parse_limit(raw) -> int:
    if raw in (None, ""):
        return DEFAULT_PRODUCT_LIMIT
    try:
        limit = int(raw)
    except (TypeError, ValueError):
        raise ValidationError("limit must be an integer", details={"limit": raw})
    if limit <= 0:
        raise ValidationError("limit must be greater than zero", details={"limit": raw})
    return limit


def _parse_discount(raw) -> Optional[float]:
    if raw in (None, ""):
        return None
    try:
        return float(raw)
    except (TypeError, ValueError):
        raise ValidationError("minDiscount must be a number", details={"minDiscount": raw})


def list_products(params: Dict[str, Any]) -> List[Dict[str, Any]]:
    """
    Active products, newest first.

    Params (all optional): categoryId, section, filter, limit,
    minDiscount, collection. A ``section`` tag takes precedence over
    ``filter``; tag membership is checked before the limit is applied.
    """
    limit = _parse_limit(params.get("limit"))
    min_discount = _parse_discount(params.get("minDiscount"))

    query = Product.query.filter_by(is_active=True)

    if params.get("categoryId"):
        query = query.filter_by(category_id=params["categoryId"])

    if params.get("collection"):
        query = query.filter_by(collection=params["collection"])

    if min_discount is not None:
        query = query.filter(Product.discount >= min_discount)

    section = params.get("section")
    product_filter = params.get("filter")

    if not section and product_filter:
        if product_filter == "discounted":
            query = query.filter(Product.discount > 0)
        elif product_filter in PRODUCT_FILTER_FLAGS:
            query = query.filter(getattr(Product, PRODUCT_FILTER_FLAGS[product_filter]).is_(True))
        else:
            raise ValidationError(
                f"Unknown product filter: {product_filter}",
                details={"filter": product_filter},
            )

    query = query.order_by(Product.created_at.desc(), Product.id.asc())

    if section:
        products = [p for p in query.all() if section in (p.sections or [])][:limit]
    else:
        products = query.limit(limit).all()

    return [normalize_product(p) for p in products]


def list_banners() -> List[Dict[str, Any]]:
    banners = Banner.query.filter_by(is_active=True).order_by(Banner.created_at.asc()).all()
    return [normalize_banner(b) for b in banners]


def get_banner(banner_id: str) -> Dict[str, Any]:
    banner = db.session.get(Banner, banner_id)
    if banner is None:
        raise NotFound("Banner not found")
    return normalize_banner(banner)


def list_video_banners() -> List[Dict[str, Any]]:
    videos = VideoBanner.query.filter_by(is_active=True).order_by(VideoBanner.created_at.desc()).all()
    return [normalize_video_banner(v) for v in videos]


def list_brands() -> List[Dict[str, Any]]:
    brands = Brand.query.filter_by(is_active=True).order_by(Brand.name.asc()).all()
    return [normalize_brand(b) for b in brands]
