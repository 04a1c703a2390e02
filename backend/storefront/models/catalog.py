# storefront/models/catalog.py
from storefront.extensions import db
from .base import BaseModel


class Department(BaseModel):
    __tablename__ = "departments"

    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    image = db.Column(db.String(512), nullable=True)
    is_active = db.Column(db.Boolean, default=True, index=True)


class Category(BaseModel):
    __tablename__ = "categories"

    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    image = db.Column(db.String(512), nullable=True)
    image_alt = db.Column(db.String(255), nullable=True)
    department_id = db.Column(db.String(36), db.ForeignKey("departments.id"), nullable=True)
    is_active = db.Column(db.Boolean, default=True, index=True)
    is_featured = db.Column(db.Boolean, default=False)
    ordering = db.Column(db.Integer, default=0, index=True)

    department = db.relationship("Department")


class Subcategory(BaseModel):
    __tablename__ = "subcategories"

    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    category_id = db.Column(db.String(36), db.ForeignKey("categories.id"), nullable=False)
    image = db.Column(db.String(512), nullable=True)
    is_active = db.Column(db.Boolean, default=True, index=True)
    ordering = db.Column(db.Integer, default=0, index=True)

    category = db.relationship("Category")


class Product(BaseModel):
    __tablename__ = "products"

    name = db.Column(db.String(255), nullable=False)
    price = db.Column(db.Float, nullable=False, default=0)
    discount = db.Column(db.Float, nullable=False, default=0)  # percent
    image = db.Column(db.String(512), nullable=True)
    image_alt = db.Column(db.String(255), nullable=True)
    sections = db.Column(db.JSON, default=list)  # e.g. ["New Arrivals", "On Sale"]
    collection = db.Column(db.String(200), nullable=True)
    stock_quantity = db.Column(db.Integer, default=0)

    is_active = db.Column(db.Boolean, default=True, index=True)
    is_featured = db.Column(db.Boolean, default=False)
    is_new_arrival = db.Column(db.Boolean, default=False)
    is_trending = db.Column(db.Boolean, default=False)
    is_best_selling = db.Column(db.Boolean, default=False)
    is_top_selling = db.Column(db.Boolean, default=False)

    category_id = db.Column(db.String(36), db.ForeignKey("categories.id"), nullable=True)
    department_id = db.Column(db.String(36), db.ForeignKey("departments.id"), nullable=True)

    category = db.relationship("Category")
    department = db.relationship("Department")


class Slider(BaseModel):
    __tablename__ = "sliders"

    title = db.Column(db.String(255), nullable=True)
    description = db.Column(db.Text, nullable=True)
    image = db.Column(db.String(512), nullable=True)
    image_mobile = db.Column(db.String(512), nullable=True)
    image_alt = db.Column(db.String(255), nullable=True)
    video_url = db.Column(db.String(512), nullable=True)
    video_type = db.Column(db.String(20), nullable=True)  # youtube | vimeo | direct | file
    button_text = db.Column(db.String(100), nullable=True)
    button_link = db.Column(db.String(512), nullable=True)
    order = db.Column(db.Integer, default=0)
    is_active = db.Column(db.Boolean, default=True, index=True)


class Banner(BaseModel):
    __tablename__ = "banners"

    title = db.Column(db.String(255), default="")
    description = db.Column(db.Text, default="")
    image = db.Column(db.String(512), nullable=True)
    image_alt = db.Column(db.String(255), nullable=True)
    link = db.Column(db.String(512), nullable=False, default="#")
    # Fixed keyword (top, middle, ...) or "after-section-{id}" / "after-<name>"
    position = db.Column(db.String(255), nullable=False, default="middle")
    size = db.Column(db.String(20), default="medium")  # small | medium | large | full-width | custom
    banner_type = db.Column(db.String(20), default="image")  # image | video
    video_type = db.Column(db.String(20), nullable=True)
    is_active = db.Column(db.Boolean, default=True, index=True)


class VideoBanner(BaseModel):
    __tablename__ = "video_banners"

    title = db.Column(db.String(255), nullable=True)
    description = db.Column(db.Text, nullable=True)
    video_url = db.Column(db.String(512), nullable=False)
    video_type = db.Column(db.String(20), default="youtube")
    poster_image = db.Column(db.String(512), nullable=True)
    button_text = db.Column(db.String(100), nullable=True)
    button_link = db.Column(db.String(512), nullable=True)
    autoplay = db.Column(db.Boolean, default=True)
    loop = db.Column(db.Boolean, default=True)
    muted = db.Column(db.Boolean, default=True)
    controls = db.Column(db.Boolean, default=False)
    is_active = db.Column(db.Boolean, default=True, index=True)


class Brand(BaseModel):
    __tablename__ = "brands"

    name = db.Column(db.String(200), nullable=False)
    image = db.Column(db.String(512), nullable=True)
    link = db.Column(db.String(512), nullable=True)
    is_active = db.Column(db.Boolean, default=True, index=True)
