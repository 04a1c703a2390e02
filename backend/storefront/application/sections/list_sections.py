from typing import List, Optional
from storefront.extensions import db
from storefront.models.homepage_section import HomepageSection
from storefront.domain.exceptions import NotFound, SectionNotPublic
from storefront.utils.order import section_sort_key


def list_sections(
    *,
    section_type: Optional[str] = None,
    is_active: Optional[bool] = None,
    is_published: Optional[bool] = None,
) -> List[HomepageSection]:
    query = HomepageSection.query

    if section_type:
        query = query.filter_by(type=section_type)
    if is_active is not None:
        query = query.filter_by(is_active=is_active)
    if is_published is not None:
        query = query.filter_by(is_published=is_published)

    sections = query.order_by(
        HomepageSection.ordering.asc(),
        HomepageSection.created_at.asc(),
    ).all()

    # SQLite drops tz info, keep the tie-break stable in Python too
    return sorted(sections, key=lambda s: section_sort_key(s.ordering, s.created_at))


def list_public_sections() -> List[HomepageSection]:
    return list_sections(is_active=True, is_published=True)


def get_section(section_id: str, *, public: bool = False) -> HomepageSection:
    section = db.session.get(HomepageSection, section_id)
    if not section:
        raise NotFound("Section not found")

    if public and not section.is_public:
        raise SectionNotPublic("Section is not available")

    return section
