# storefront/domain/section_types.py
"""
Typed configuration for every homepage section type.

Each section type owns one config model. Keys are camelCase on the wire
and snake_case in Python; unknown keys are kept so admins can stash extra
settings without a schema change.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class SectionConfig(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )


class HeroSliderConfig(SectionConfig):
    slider_ids: List[str] = Field(default_factory=list)
    autoplay: bool = True
    autoplay_speed: int = 3000
    show_arrows: bool = True
    show_dots: bool = True


class ScrollingTextConfig(SectionConfig):
    items: List[str] = Field(default_factory=list)
    scroll_speed: int = 20
    background_color: str = "#ffffff"
    text_color: str = "#d93939"


class CategoryConfig(SectionConfig):
    category_ids: List[str] = Field(default_factory=list)
    grid_columns: int = 4
    show_title: bool = True
    section_banner_id: Optional[str] = None


class DepartmentGridConfig(SectionConfig):
    department_ids: List[str] = Field(default_factory=list)
    grid_columns: int = 4
    show_titles: bool = True


class ProductTab(SectionConfig):
    label: Optional[str] = None
    section: Optional[str] = None
    filter: Optional[Union[str, Dict[str, bool]]] = None
    category_id: Optional[str] = None
    limit: int = 8
    collection: Optional[str] = None
    min_discount: Optional[float] = None


class ProductTabsConfig(SectionConfig):
    tabs: List[ProductTab] = Field(default_factory=list)
    section: Optional[str] = None
    category_id: Optional[str] = None
    collection: Optional[str] = None
    min_discount: Optional[float] = None
    section_banner_id: Optional[str] = None


class ProductListConfig(SectionConfig):
    """Shared by productCarousel, newArrivals and topSelling."""

    section: Optional[str] = None
    category_id: Optional[str] = None
    limit: int = 10
    filter: Optional[str] = None
    is_featured: bool = False
    is_new_arrival: bool = False
    is_trending: bool = False
    is_best_selling: bool = False
    is_top_selling: bool = False
    collection: Optional[str] = None
    min_discount: Optional[float] = None
    autoplay: bool = True


class SubcategoryConfig(SectionConfig):
    subcategory_ids: List[str] = Field(default_factory=list)


class BannerConfig(SectionConfig):
    banner_id: Optional[str] = None
    image_url: Optional[str] = None
    link: Optional[str] = None
    location: Optional[str] = None
    alt: Optional[str] = None
    size: str = "full-width"


class VideoBannerConfig(SectionConfig):
    video_banner_id: Optional[str] = None
    overlay_text: Optional[str] = None
    cta_text: Optional[str] = None
    cta_link: Optional[str] = None


class NewsletterSocialConfig(SectionConfig):
    newsletter_title: Optional[str] = None
    newsletter_desc: Optional[str] = None
    social_links: Dict[str, str] = Field(default_factory=dict)


class BrandConfig(SectionConfig):
    logos: List[Dict[str, Any]] = Field(default_factory=list)


class CustomHTMLConfig(SectionConfig):
    html: str = ""


CONFIG_MODELS: Dict[str, Type[SectionConfig]] = {
    "heroSlider": HeroSliderConfig,
    "scrollingText": ScrollingTextConfig,
    "categoryFeatured": CategoryConfig,
    "categoryGrid": CategoryConfig,
    "categoryCircles": CategoryConfig,
    "departmentGrid": DepartmentGridConfig,
    "productTabs": ProductTabsConfig,
    "productCarousel": ProductListConfig,
    "newArrivals": ProductListConfig,
    "topSelling": ProductListConfig,
    "featuredCollections": SubcategoryConfig,
    "subcategoryGrid": SubcategoryConfig,
    "bannerFullWidth": BannerConfig,
    "videoBanner": VideoBannerConfig,
    "collectionLinks": SectionConfig,
    "newsletterSocial": NewsletterSocialConfig,
    "brandMarquee": BrandConfig,
    "brandGrid": BrandConfig,
    "customHTML": CustomHTMLConfig,
}

ALLOWED_SECTION_TYPES = frozenset(CONFIG_MODELS)

BANNER_TYPES = frozenset({"bannerFullWidth"})
CRITICAL_TYPES = frozenset({"heroSlider", "scrollingText"})
CATEGORY_TYPES = frozenset({"categoryFeatured", "categoryGrid", "categoryCircles"})
PRODUCT_TYPES = frozenset({"productTabs", "productCarousel", "newArrivals", "topSelling"})

# Product "section" tag implied by a type when the config names none
DEFAULT_PRODUCT_SECTIONS = {
    "newArrivals": "New Arrivals",
    "topSelling": "Top Selling Product",
}


def parse_section_config(section_type: str, raw: Optional[Dict[str, Any]]) -> SectionConfig:
    """Validate a raw config bag against the model for ``section_type``.

    Unknown types fall back to the permissive base model. Raises
    ``pydantic.ValidationError`` when the bag does not fit the model.
    """
    model = CONFIG_MODELS.get(section_type, SectionConfig)
    return model.model_validate(raw or {})
