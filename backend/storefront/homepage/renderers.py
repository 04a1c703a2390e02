# storefront/homepage/renderers.py
"""
Section Renderer Registry.

A renderer is a pure function ``(section, data, fallback_image) -> Fragment | None``.
Returning None means "nothing to show" and is not an error. Renderers only
read their inputs; interactive parts are declared as behaviors and bound by
the document once the fragment has been inserted.
"""
from typing import Any, Callable, Dict, Optional

from .fragments import Behavior, Fragment, el, el_list
from .records import SectionRecord
from .video import (
    detect_video_type,
    extract_vimeo_id,
    extract_youtube_id,
    is_video_file,
    vimeo_embed_url,
    youtube_embed_url,
)

Renderer = Callable[[SectionRecord, Dict[str, Any], str], Optional[Fragment]]

DEFAULT_FALLBACK_IMAGE = (
    "https://images.unsplash.com/photo-1505577081107-4a4167cd81d0"
    "?auto=format&fit=crop&w=800&q=85"
)

GRID_COLUMN_CLASSES = {2: "col-md-6", 3: "col-md-4", 4: "col-md-3", 6: "col-md-2"}


def section_root(section: SectionRecord, css_class: str, *children, **extra_attrs) -> Fragment:
    attrs = {
        "class": f"{css_class} homepage-section",
        "data-section-type": section.type,
        "data-section-id": section.id,
    }
    if section.name:
        attrs["data-section-name"] = section.name
    attrs.update({k.replace("_", "-"): v for k, v in extra_attrs.items() if v is not None})
    return el("section", attrs, *children)


def section_header(section: SectionRecord, centered: bool = False) -> Optional[Fragment]:
    if not section.title:
        return None
    css = "section-header text-center mb-4" if centered else "section-header mb-4"
    return el(
        "div", {"class": css},
        el("h2", text=section.title),
        el("p", {"class": "text-muted"}, text=section.subtitle) if section.subtitle else None,
    )


def image_of(record: Dict[str, Any], fallback_image: str) -> str:
    return record.get("image") or fallback_image


def price_label(amount: float) -> str:
    return f"Rs. {amount:.2f}"


# ------------------------
# Shared pieces
# ------------------------

def product_card(product: Dict[str, Any], fallback_image: str) -> Fragment:
    price = float(product.get("price") or 0)
    discount = float(product.get("discount") or 0)
    final_price = price * (1 - discount / 100)
    sold_out = product.get("stockQuantity") == 0 or bool(product.get("isOutOfStock"))
    product_id = product.get("id") or product.get("_id")
    href = f"/product/{product_id}"

    return el(
        "div", {"class": "product-card"},
        el(
            "div", {"class": "product-card__image"},
            el(
                "a", {"href": href, "class": "product-card__link"},
                el("img", {
                    "src": image_of(product, fallback_image),
                    "alt": product.get("imageAlt") or product.get("name") or "",
                    "loading": "lazy",
                }),
            ),
            el("span", {"class": "product-card__badge product-card__badge--discount"},
               text=f"-{discount:g}%") if discount > 0 else None,
            el("span", {"class": "product-card__badge product-card__badge--soldout"},
               text="Sold Out") if sold_out else None,
        ),
        el(
            "div", {"class": "product-card__body"},
            el(
                "a", {"href": href, "class": "product-card__link"},
                el("h5", {"class": "product-card__title"}, text=product.get("name") or ""),
                el(
                    "div", {"class": "product-card__price"},
                    el("span", {"class": "product-card__price--old"},
                       text=price_label(price)) if discount > 0 else None,
                    el("span", {"class": "product-card__price--current"}, text=price_label(final_price)),
                ),
            ),
            el(
                "div", {"class": "product-card__actions"},
                el("button", {
                    "type": "button",
                    "class": "btn btn-primary btn-sm add-to-cart",
                    "data-product-id": product_id,
                }, text="Add to Cart"),
            ),
        ),
    )


def inline_banner(banner: Optional[Dict[str, Any]], fallback_image: str) -> Optional[Fragment]:
    """Banner strip shown above a category or tabs section."""
    if not banner:
        return None
    return el(
        "div", {"class": "container-fluid px-0 mb-4"},
        el(
            "a", {"href": banner.get("link") or "#", "class": "banner-full-width__link"},
            el("img", {
                "src": image_of(banner, fallback_image),
                "alt": banner.get("imageAlt") or banner.get("title") or "Banner",
                "class": "banner-full-width__image",
                "loading": "lazy",
            }),
        ),
    )


def banner_media(banner: Dict[str, Any], fallback_image: str, image_class: str) -> Fragment:
    url = image_of(banner, fallback_image)
    is_video = banner.get("bannerType") == "video"
    video_type = banner.get("videoType") or (detect_video_type(url) if is_video else None)
    alt = banner.get("imageAlt") or banner.get("title") or "Banner"

    embed = None
    if video_type == "youtube":
        video_id = extract_youtube_id(url)
        if video_id:
            embed = youtube_embed_url(video_id, controls=True)
    elif video_type == "vimeo":
        video_id = extract_vimeo_id(url)
        if video_id:
            embed = vimeo_embed_url(video_id, background=False)

    if embed:
        return el(
            "div", {"class": "banner-video-wrapper"},
            el("iframe", {"src": embed, "frameborder": "0", "allowfullscreen": True, "loading": "lazy"}),
        )

    if is_video and is_video_file(url):
        return el("video", {
            "src": url, "controls": True, "autoplay": True, "muted": True, "loop": True,
            "class": image_class.replace("__image", "__video"),
        })

    return el("img", {"src": url, "alt": alt, "class": image_class, "loading": "lazy"})


def banner_fragment(
    banner: Dict[str, Any],
    fallback_image: str,
    *,
    root_attrs: Dict[str, Any],
    css_prefix: str = "banner-full-width",
) -> Fragment:
    title = str(banner.get("title") or "").strip()
    description = str(banner.get("description") or "").strip()
    link = banner.get("link")
    media = banner_media(banner, fallback_image, f"{css_prefix}__image")

    if link and link != "#":
        media = el("a", {"href": link, "class": f"{css_prefix}__link"}, media)

    header = None
    if title:
        header = el(
            "div", {"class": "container"},
            el(
                "div", {"class": f"{css_prefix}__header"},
                el("h2", {"class": f"{css_prefix}__title"}, text=title),
                el("p", {"class": f"{css_prefix}__description"}, text=description) if description else None,
            ),
        )

    attrs = dict(root_attrs)
    if banner.get("id"):
        attrs["data-banner-id"] = banner["id"]
    return el("section", attrs, header, el("div", {"class": "container-fluid px-0"}, media))


# ------------------------
# Renderers
# ------------------------

def _slide_media(slider, idx, fallback_image):
    image = image_of(slider, fallback_image)
    mobile_image = slider.get("imageMobile") or image
    video_url = slider.get("videoUrl")
    video_type = slider.get("videoType") or detect_video_type(video_url)

    if video_url and video_type == "youtube":
        video_id = extract_youtube_id(video_url)
        if video_id:
            return el("div", {"class": "hero-slide-video-wrapper"},
                      el("iframe", {"src": youtube_embed_url(video_id), "frameborder": "0", "allowfullscreen": True}))
    elif video_url and video_type == "vimeo":
        video_id = extract_vimeo_id(video_url)
        if video_id:
            return el("div", {"class": "hero-slide-video-wrapper"},
                      el("iframe", {"src": vimeo_embed_url(video_id), "frameborder": "0", "allowfullscreen": True}))
    elif video_url and is_video_file(video_url):
        return el("video", {"autoplay": True, "muted": True, "loop": True, "playsinline": True},
                  el("source", {"src": video_url, "type": "video/mp4"}))

    return el(
        "picture", None,
        el("source", {"media": "(max-width: 767px)", "srcset": mobile_image}),
        el("img", {
            "src": image,
            "alt": slider.get("imageAlt") or slider.get("title") or "",
            "loading": "eager" if idx == 0 else "lazy",
        }),
    )


def render_hero_slider(section, data, fallback_image):
    sliders = data.get("sliders") or []
    if not sliders:
        return None

    config = section.typed_config
    slides = []
    for idx, slider in enumerate(sliders):
        has_button = slider.get("buttonText") and slider.get("buttonLink")
        slides.append(el(
            "div", {"class": "hero-carousel__slide active" if idx == 0 else "hero-carousel__slide",
                    "data-slide-index": idx},
            _slide_media(slider, idx, fallback_image),
            el(
                "div", {"class": "hero-carousel__content"},
                el("h1", {"class": "hero-slide-title"}, text=slider["title"]) if slider.get("title") else None,
                el("p", {"class": "hero-slide-description"},
                   text=slider["description"]) if slider.get("description") else None,
                el("a", {"href": slider.get("buttonLink"), "class": "btn btn-primary btn-lg hero-slide-button"},
                   text=slider.get("buttonText")) if has_button else None,
            ),
        ))

    dots = None
    if config.show_dots:
        dots = el_list("div", {"class": "hero-carousel__dots"}, [
            el("button", {"class": "dot active" if idx == 0 else "dot", "data-slide": idx,
                          "aria-label": f"Go to slide {idx + 1}"})
            for idx in range(len(sliders))
        ])

    arrows = []
    if config.show_arrows:
        arrows = [
            el("button", {"class": "hero-carousel__nav hero-carousel__nav--prev", "type": "button",
                          "aria-label": "Previous slide"}),
            el("button", {"class": "hero-carousel__nav hero-carousel__nav--next", "type": "button",
                          "aria-label": "Next slide"}),
        ]

    root = section_root(
        section, "hero-carousel position-relative",
        el("div", {"class": "hero-overlay"}),
        el("div", {"class": "hero-carousel__viewport"},
           el_list("div", {"class": "hero-carousel__track"}, slides), dots, *arrows),
    )
    root.behaviors.append(Behavior("hero-carousel", {
        "autoplay": config.autoplay,
        "autoplaySpeed": config.autoplay_speed,
        "showArrows": config.show_arrows,
        "showDots": config.show_dots,
    }))
    return root


def render_scrolling_text(section, data, fallback_image):
    items = data.get("items") or []
    if not items:
        return None

    config = section.typed_config
    entries = []
    # Four copies keep the marquee seamless
    for _ in range(4):
        for item in items:
            entries.append(el("span", {"class": "scrolling-text__item"}, text=item))
            entries.append(el("i", {"class": "la la-heart scrolling-text__icon", "aria-hidden": "true"}))

    return section_root(
        section, "scrolling-text",
        el("div", {"class": "scrolling-text__wrapper"},
           el("div", {"class": "scrolling-text__inner", "style": f"--scroll-speed: {config.scroll_speed}s;"},
              el_list("div", {"class": "scrolling-text__content"}, entries))),
        style=f"background-color: {config.background_color}; color: {config.text_color};",
        data_bg_color=config.background_color,
        data_text_color=config.text_color,
    )


def _category_tile(category, fallback_image, show_title):
    return el(
        "a", {"href": f"/category/{category.get('id')}", "class": "cat-grid-item hover-zoom"},
        el("div", {"class": "cat_grid_item__image-wrapper"},
           el("img", {"src": image_of(category, fallback_image),
                      "alt": category.get("imageAlt") or category.get("name") or "",
                      "class": "cat-grid-img", "loading": "lazy"})),
        el("h4", {"class": "cat-grid-title mt-3"}, text=category.get("name")) if show_title else None,
    )


def render_category_grid(section, data, fallback_image):
    categories = data.get("categories") or []
    if not categories:
        return None

    config = section.typed_config
    columns = config.grid_columns if config.grid_columns in (1, 2, 3, 4, 6, 12) else 4
    css = "category-featured" if section.type == "categoryFeatured" else "category-grid"

    return section_root(
        section, css,
        inline_banner(data.get("sectionBanner"), fallback_image),
        el("div", {"class": "container py-5"},
           section_header(section),
           el_list("div", {"class": "row g-4", "style": f"--grid-cols: {columns};"}, [
               el("div", {"class": f"col-lg-{12 // columns} col-md-6 col-sm-6"},
                  _category_tile(cat, fallback_image, config.show_title))
               for cat in categories
           ])),
    )


def render_category_circles(section, data, fallback_image):
    categories = data.get("categories") or []
    if not categories:
        return None

    return section_root(
        section, "category-circles",
        el("div", {"class": "container py-5"},
           section_header(section, centered=True),
           el_list("div", {"class": "category-circles__grid"}, [
               el("a", {"href": f"/category/{cat.get('id')}", "class": "category-circle-item"},
                  el("div", {"class": "category-circle__image"},
                     el("img", {"src": image_of(cat, fallback_image), "alt": cat.get("name") or "",
                                "loading": "lazy"})),
                  el("span", {"class": "category-circle__name"}, text=cat.get("name")))
               for cat in categories
           ])),
    )


def render_department_grid(section, data, fallback_image):
    departments = data.get("departments") or []
    if not departments:
        return None

    config = section.typed_config
    col_class = GRID_COLUMN_CLASSES.get(config.grid_columns, "col-md-3")

    cards = []
    for dept in departments:
        description = dept.get("description") or ""
        if len(description) > 80:
            description = description[:80] + "..."
        body = None
        if config.show_titles:
            body = el("div", {"class": "card-body text-center"},
                      el("h5", {"class": "card-title mb-0"}, text=dept.get("name")),
                      el("p", {"class": "card-text text-muted small mt-2"},
                         text=description) if description else None)
        cards.append(el(
            "div", {"class": f"{col_class} col-sm-6"},
            el("a", {"href": f"/department/{dept.get('id')}", "class": "department-grid-item text-decoration-none"},
               el("div", {"class": "card h-100 shadow-sm department-card"},
                  el("div", {"class": "department-media"},
                     el("img", {"src": image_of(dept, fallback_image), "alt": dept.get("name") or "",
                                "class": "card-img-top", "loading": "lazy"})),
                  body)),
        ))

    return section_root(
        section, "department-grid",
        el("div", {"class": "container py-5"},
           section_header(section, centered=True),
           el_list("div", {"class": "row g-4"}, cards)),
    )


def render_product_tabs(section, data, fallback_image):
    tabs = data.get("tabs") or []
    if not tabs:
        return None

    nav = None
    if len(tabs) > 1:
        nav = el_list("ul", {"class": "product-tabs__nav nav nav-tabs", "role": "tablist"}, [
            el("li", {"class": "nav-item", "role": "presentation"},
               el("button", {"class": "nav-link active" if idx == 0 else "nav-link", "type": "button",
                             "data-tab-index": idx}, text=tab["label"]))
            for idx, tab in enumerate(tabs)
        ])

    panes = []
    for idx, tab in enumerate(tabs):
        if tab.get("error"):
            body = [el("div", {"class": "col-12 text-center py-5"},
                       el("p", {"class": "text-danger"}, text="Error loading products. Please refresh the page."))]
        elif not tab.get("products"):
            body = [el("div", {"class": "col-12 text-center py-5"},
                       el("p", {"class": "text-muted"}, text="No products available for this tab"))]
        else:
            body = [el("div", {"class": "col-lg-3 col-md-4 col-sm-6"}, product_card(p, fallback_image))
                    for p in tab["products"]]
        panes.append(el(
            "div", {"class": "tab-pane fade show active" if idx == 0 else "tab-pane fade",
                    "role": "tabpanel", "data-tab-index": idx},
            el_list("div", {"class": "row g-4"}, body),
        ))

    root = section_root(
        section, "product-tabs",
        inline_banner(data.get("sectionBanner"), fallback_image),
        el("div", {"class": "container py-5"},
           el("div", {"class": "section-header mb-4"}, el("h2", text=section.title)) if section.title else None,
           el("div", {"class": "product-tabs__wrapper"}, nav,
              el_list("div", {"class": "tab-content"}, panes))),
    )
    if len(tabs) > 1:
        root.behaviors.append(Behavior("tabs", {"count": len(tabs)}))
    return root


def render_product_carousel(section, data, fallback_image):
    products = data.get("products") or []
    if not products:
        return None

    config = section.typed_config
    tag = data.get("section") or section.title or ""
    root = section_root(
        section, "product-carousel",
        el("div", {"class": "container py-5"},
           section_header(section),
           el("div", {"class": "product-carousel__wrapper"},
              el_list("div", {"class": "product-carousel__track", "data-autoplay": config.autoplay}, [
                  el("div", {"class": "product-carousel__slide"}, product_card(p, fallback_image))
                  for p in products
              ]),
              el("button", {"class": "product-carousel__nav product-carousel__nav--prev", "aria-label": "Previous"}),
              el("button", {"class": "product-carousel__nav product-carousel__nav--next", "aria-label": "Next"}))),
        data_section=tag or None,
        data_collection="Lingerie Collection" if "lingerie" in tag.lower() else None,
    )
    root.behaviors.append(Behavior("product-carousel", {"autoplay": config.autoplay}))
    return root


def render_subcategory_grid(section, data, fallback_image):
    grid = data.get("subcategories") or []
    if not grid:
        return None

    buttons = data.get("buttons") or []
    css = "featured-collections" if section.type == "featuredCollections" else "subcategory-grid"

    return section_root(
        section, css,
        el("div", {"class": "container py-5"},
           section_header(section, centered=True),
           el_list("div", {"class": "row g-4"}, [
               el("div", {"class": "col-lg-2 col-md-4 col-sm-6"},
                  el("a", {"href": f"/subcategory/{sub.get('id')}", "class": "subcategory-item"},
                     el("img", {"src": image_of(sub, fallback_image), "alt": sub.get("name") or "",
                                "loading": "lazy"}),
                     el("span", {"class": "subcategory-item__name"}, text=sub.get("name"))))
               for sub in grid
           ]),
           el_list("div", {"class": "subcategory-buttons"}, [
               el("a", {"href": f"/subcategory/{sub.get('id')}", "class": "btn btn-outline-dark subcategory-button"},
                  text=sub.get("name"))
               for sub in buttons
           ]) if buttons else None),
    )


def render_banner_full_width(section, data, fallback_image):
    banner = data.get("banner")
    if not banner:
        return None

    attrs = {
        "class": "banner-full-width homepage-section",
        "data-section-type": section.type,
        "data-section-id": section.id,
    }
    if section.name:
        attrs["data-section-name"] = section.name
    return banner_fragment(banner, fallback_image, root_attrs=attrs)


def render_video_banner(section, data, fallback_image):
    video = data.get("videoBanner")
    if not video or not video.get("videoUrl"):
        return None

    config = section.typed_config
    video_type = video.get("videoType") or "youtube"
    url = video["videoUrl"]
    options = {
        "autoplay": bool(video.get("autoplay")),
        "muted": bool(video.get("muted")),
        "loop": bool(video.get("loop")),
    }

    embed = url
    if video_type == "youtube":
        video_id = extract_youtube_id(url)
        if video_id:
            embed = youtube_embed_url(video_id, controls=bool(video.get("controls")), **options)
    elif video_type == "vimeo":
        video_id = extract_vimeo_id(url)
        if video_id:
            embed = vimeo_embed_url(video_id, **options)

    if video_type in ("youtube", "vimeo"):
        player = el("iframe", {"src": embed, "frameborder": "0", "allowfullscreen": True})
    else:
        player = el("video", {"class": "video-banner__video", "playsinline": True,
                              "poster": video.get("posterImage"), "controls": bool(video.get("controls")),
                              **options},
                    el("source", {"src": embed, "type": "video/mp4"}))

    overlay_text = video.get("title") or config.overlay_text or ""
    description = video.get("description") or ""
    cta_text = video.get("buttonText") or config.cta_text or ""
    cta_link = video.get("buttonLink") or config.cta_link or "#"

    overlay = None
    if overlay_text or description or cta_text:
        overlay = el(
            "div", {"class": "video-banner__overlay"},
            el("h2", {"class": "video-banner__title"}, text=overlay_text) if overlay_text else None,
            el("p", {"class": "video-banner__description"}, text=description) if description else None,
            el("span", {"class": "btn btn-primary btn-lg"}, text=cta_text) if cta_text else None,
        )

    body = el("div", {"class": "video-banner__wrapper"}, player, overlay)
    if cta_link != "#":
        body = el("a", {"href": cta_link, "class": "video-banner__link"}, body)
    return section_root(section, "video-banner", body)


def render_collection_links(section, data, fallback_image):
    categories = data.get("categories") or []
    if not categories:
        return None

    return section_root(
        section, "collection-links",
        el("div", {"class": "container py-4"},
           el_list("div", {"class": "collection-links__grid"}, [
               el("a", {"href": f"/category/{cat.get('id')}", "class": "collection-link-item"}, text=cat.get("name"))
               for cat in categories
           ])),
    )


def render_newsletter_social(section, data, fallback_image):
    social_links = data.get("socialLinks") or {}

    social = None
    if social_links:
        social = el("div", {"class": "col-lg-6 text-end"},
                    el_list("div", {"class": "social-links"}, [
                        el("a", {"href": url, "target": "_blank", "rel": "noopener", "class": "social-link"},
                           el("i", {"class": f"fab fa-{platform}"}))
                        for platform, url in social_links.items()
                    ]))

    return section_root(
        section, "newsletter-social",
        el("div", {"class": "container py-5"},
           el("div", {"class": "row align-items-center"},
              el("div", {"class": "col-lg-6"},
                 el("h3", text=data.get("title")),
                 el("p", text=data.get("description")),
                 el("form", {"class": "newsletter-form"},
                    el("div", {"class": "input-group"},
                       el("input", {"type": "email", "class": "form-control",
                                    "placeholder": "Enter your email", "required": True}),
                       el("button", {"class": "btn btn-primary", "type": "submit"}, text="Subscribe")))),
              social)),
    )


def render_brands(section, data, fallback_image):
    brands = data.get("brands") or []
    if not brands:
        return None

    css = "brand-marquee" if section.type == "brandMarquee" else "brand-grid"
    items = []
    for brand in brands:
        logo = brand.get("image") or brand.get("logo")
        if not logo:
            continue
        name = brand.get("name") or brand.get("alt") or "Brand"
        image = el("img", {"src": logo, "alt": brand.get("alt") or name, "loading": "lazy",
                           "class": "brand-logo-image", "data-brand-name": name})
        if brand.get("link"):
            image = el("a", {"href": brand["link"], "target": "_blank", "rel": "noopener"}, image)
        items.append(el("div", {"class": f"{css}__item"}, image))

    if not items:
        return None

    return section_root(
        section, css,
        el("div", {"class": "container py-5"},
           section_header(section, centered=True),
           el_list("div", {"class": f"{css}__inner"}, items)),
    )


def render_custom_html(section, data, fallback_image):
    html = data.get("html")
    if not html:
        return None
    root = section_root(section, "custom-html")
    root.children.append(Fragment(tag="", raw=html))
    return root


DEFAULT_RENDERERS: Dict[str, Renderer] = {
    "heroSlider": render_hero_slider,
    "scrollingText": render_scrolling_text,
    "categoryFeatured": render_category_grid,
    "categoryGrid": render_category_grid,
    "categoryCircles": render_category_circles,
    "departmentGrid": render_department_grid,
    "productTabs": render_product_tabs,
    "productCarousel": render_product_carousel,
    "newArrivals": render_product_carousel,
    "topSelling": render_product_carousel,
    "featuredCollections": render_subcategory_grid,
    "subcategoryGrid": render_subcategory_grid,
    "bannerFullWidth": render_banner_full_width,
    "videoBanner": render_video_banner,
    "collectionLinks": render_collection_links,
    "newsletterSocial": render_newsletter_social,
    "brandMarquee": render_brands,
    "brandGrid": render_brands,
    "customHTML": render_custom_html,
}


class RendererRegistry:
    def __init__(self, renderers: Optional[Dict[str, Renderer]] = None, fallback_image: str = DEFAULT_FALLBACK_IMAGE):
        self._renderers = dict(DEFAULT_RENDERERS if renderers is None else renderers)
        self.fallback_image = fallback_image

    def register(self, section_type: str, renderer: Renderer) -> None:
        self._renderers[section_type] = renderer

    def has(self, section_type: str) -> bool:
        return section_type in self._renderers

    def render(self, section_type: str, section: SectionRecord, data: Optional[Dict[str, Any]]) -> Optional[Fragment]:
        """
        Fragment for ``section``, or None to skip it.

        Raises ``KeyError`` for a type with no renderer; renderer errors
        propagate so the pipeline can show them in place.
        """
        renderer = self._renderers[section_type]
        if data is None:
            return None
        return renderer(section, data, self.fallback_image)
