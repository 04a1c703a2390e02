from typing import Any, Dict, Optional
from flask import current_app
from storefront.extensions import db
from storefront.models.homepage_section import HomepageSection
from storefront.domain.exceptions import NotFound
from storefront.domain.invariants.section import assert_section
from storefront.utils.transaction import transactional
from .fields import SECTION_FIELDS


def update_section(
    *,
    section_id: str,
    actor_id: Optional[str],
    data: Dict[str, Any],
) -> HomepageSection:
    """
    Overwrite only the fields present in ``data``.

    Keys sent as null are treated as absent. The whole record is
    revalidated, so switching ``type`` also revalidates ``config``.
    """

    section = db.session.get(HomepageSection, section_id)
    if not section:
        raise NotFound("Section not found")

    changed_fields: list[str] = []

    with transactional():
        for key, attr in SECTION_FIELDS.items():
            if key in data and data[key] is not None and getattr(section, attr) != data[key]:
                setattr(section, attr, data[key])
                changed_fields.append(key)

        assert_section(section)

        if changed_fields:
            section.updated_by = actor_id
            current_app.logger.info(
                "Homepage section %s updated: %s", section.id, ", ".join(changed_fields)
            )

    return section
