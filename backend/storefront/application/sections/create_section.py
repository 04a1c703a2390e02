from typing import Any, Dict, Optional
from flask import current_app
from storefront.extensions import db
from storefront.models.homepage_section import HomepageSection, default_display_on
from storefront.domain.invariants.section import assert_section
from storefront.utils.order import next_ordering
from storefront.utils.transaction import transactional
from .fields import SECTION_FIELDS


def create_section(
    *,
    actor_id: Optional[str],
    data: Dict[str, Any],
) -> HomepageSection:
    """
    Create a homepage section.

    Edge cases handled:
    - Missing name/type or a type outside the closed set
    - Config that does not fit the type's config model
    - No ordering given: appended after the current last section
    """

    section = HomepageSection()
    section.config = {}
    section.is_active = True
    section.is_published = False
    section.display_on = default_display_on()

    for key, attr in SECTION_FIELDS.items():
        if key in data and data[key] is not None:
            setattr(section, attr, data[key])

    assert_section(section)

    with transactional():
        if section.ordering is None:
            section.ordering = next_ordering(HomepageSection)

        section.created_by = actor_id
        section.updated_by = actor_id

        db.session.add(section)
        db.session.flush()

        current_app.logger.info(
            "Homepage section created: %s (%s) at ordering %s",
            section.id, section.type, section.ordering,
        )

    return section
