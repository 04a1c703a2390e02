from storefront.extensions import db
from .base import BaseModel


def default_display_on():
    return {"desktop": True, "tablet": True, "mobile": True}


class HomepageSection(BaseModel):
    __tablename__ = "homepage_sections"

    __table_args__ = (
        db.Index("ix_homepage_sections_ordering", "ordering", "created_at"),
        db.Index("ix_homepage_sections_visibility", "is_active", "is_published"),
    )

    name = db.Column(db.String(200), nullable=False)
    type = db.Column(db.String(50), nullable=False, index=True)  # heroSlider, productCarousel, ...
    title = db.Column(db.String(255), nullable=True)
    subtitle = db.Column(db.String(255), nullable=True)
    description = db.Column(db.Text, nullable=True)
    config = db.Column(db.JSON, default=dict)
    ordering = db.Column(db.Integer, nullable=False, default=0)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    is_published = db.Column(db.Boolean, nullable=False, default=False)
    display_on = db.Column(db.JSON, default=default_display_on)

    created_by = db.Column(db.String(36), nullable=True)
    updated_by = db.Column(db.String(36), nullable=True)

    @property
    def is_public(self):
        return bool(self.is_active and self.is_published)
