from flask import current_app
from storefront.extensions import db
from storefront.models.homepage_section import HomepageSection
from storefront.domain.exceptions import NotFound
from storefront.utils.transaction import transactional


def delete_section(*, section_id: str) -> None:
    """Remove the composition entry only. Referenced catalog records stay."""

    section = db.session.get(HomepageSection, section_id)
    if not section:
        raise NotFound("Section not found")

    with transactional():
        db.session.delete(section)

    current_app.logger.info("Homepage section deleted: %s", section_id)
