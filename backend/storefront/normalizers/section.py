def _iso(ts):
    return ts.isoformat() if ts else None


def normalize_section(section, admin=False):
    data = {
        "id": section.id,
        "name": section.name,
        "type": section.type,
        "title": section.title,
        "subtitle": section.subtitle,
        "description": section.description,
        "config": section.config or {},
        "ordering": section.ordering,
        "isActive": bool(section.is_active),
        "isPublished": bool(section.is_published),
        "displayOn": section.display_on or {},
        "createdAt": _iso(section.created_at),
        "updatedAt": _iso(section.updated_at),
    }

    if admin:
        data["createdBy"] = section.created_by
        data["updatedBy"] = section.updated_by

    return data
