# storefront/normalizers/catalog.py
"""Wire shapes for the read-only catalog records consumed by the homepage."""


def _ref(record):
    if record is None:
        return None
    return {"id": record.id, "name": record.name}


def normalize_slider(slider):
    return {
        "id": slider.id,
        "title": slider.title,
        "description": slider.description,
        "image": slider.image,
        "imageMobile": slider.image_mobile,
        "imageAlt": slider.image_alt,
        "videoUrl": slider.video_url,
        "videoType": slider.video_type,
        "buttonText": slider.button_text,
        "buttonLink": slider.button_link,
        "order": slider.order or 0,
        "isActive": bool(slider.is_active),
    }


def normalize_department(department):
    return {
        "id": department.id,
        "name": department.name,
        "description": department.description,
        "image": department.image,
        "isActive": bool(department.is_active),
    }


def normalize_category(category):
    return {
        "id": category.id,
        "name": category.name,
        "description": category.description,
        "image": category.image,
        "imageAlt": category.image_alt,
        "department": _ref(category.department),
        "isActive": bool(category.is_active),
        "isFeatured": bool(category.is_featured),
        "ordering": category.ordering or 0,
    }


def normalize_subcategory(subcategory):
    return {
        "id": subcategory.id,
        "name": subcategory.name,
        "description": subcategory.description,
        "image": subcategory.image,
        "category": _ref(subcategory.category),
        "isActive": bool(subcategory.is_active),
        "ordering": subcategory.ordering or 0,
    }


def normalize_product(product):
    return {
        "id": product.id,
        "name": product.name,
        "price": product.price,
        "discount": product.discount or 0,
        "image": product.image,
        "imageAlt": product.image_alt,
        "sections": list(product.sections or []),
        "collection": product.collection,
        "stockQuantity": product.stock_quantity or 0,
        "isActive": bool(product.is_active),
        "isFeatured": bool(product.is_featured),
        "isNewArrival": bool(product.is_new_arrival),
        "isTrending": bool(product.is_trending),
        "isBestSelling": bool(product.is_best_selling),
        "isTopSelling": bool(product.is_top_selling),
        "category": _ref(product.category),
        "department": _ref(product.department),
    }


def normalize_banner(banner):
    return {
        "id": banner.id,
        "title": banner.title or "",
        "description": banner.description or "",
        "image": banner.image,
        "imageAlt": banner.image_alt,
        "link": banner.link or "#",
        "position": banner.position,
        "size": banner.size,
        "bannerType": banner.banner_type,
        "videoType": banner.video_type,
        "isActive": bool(banner.is_active),
    }


def normalize_video_banner(video):
    return {
        "id": video.id,
        "title": video.title,
        "description": video.description,
        "videoUrl": video.video_url,
        "videoType": video.video_type,
        "posterImage": video.poster_image,
        "buttonText": video.button_text,
        "buttonLink": video.button_link,
        "autoplay": bool(video.autoplay),
        "loop": bool(video.loop),
        "muted": bool(video.muted),
        "controls": bool(video.controls),
        "isActive": bool(video.is_active),
    }


def normalize_brand(brand):
    return {
        "id": brand.id,
        "name": brand.name,
        "image": brand.image,
        "link": brand.link,
        "isActive": bool(brand.is_active),
    }
