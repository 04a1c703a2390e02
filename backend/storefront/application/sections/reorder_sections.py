from typing import Any, Dict, Iterable
from flask import current_app
from sqlalchemy.exc import SQLAlchemyError
from storefront.extensions import db
from storefront.models.homepage_section import HomepageSection
from storefront.utils.transaction import transactional


def reorder_sections(
    *,
    items: Iterable[Dict[str, Any]],
    actor_id=None,
) -> int:
    """
    Apply ``[{id, ordering}]`` updates one by one.

    Best effort: every item commits on its own, so a bad item never
    rolls back the others. Items without an id, with an unknown id or
    with a non-integer ordering are skipped. Returns the number applied.
    """

    updated = 0

    for item in items:
        if not isinstance(item, dict) or not item.get("id"):
            continue

        ordering = item.get("ordering")
        if isinstance(ordering, bool) or not isinstance(ordering, int):
            current_app.logger.warning(
                "Reorder skipped section %s: invalid ordering %r", item["id"], ordering
            )
            continue

        try:
            with transactional():
                section = db.session.get(HomepageSection, item["id"])
                if section is None:
                    current_app.logger.warning("Reorder skipped unknown section %s", item["id"])
                    continue

                section.ordering = ordering
                section.updated_by = actor_id
        except SQLAlchemyError:
            current_app.logger.exception("Reorder failed for section %s", item["id"])
            continue

        updated += 1

    return updated
