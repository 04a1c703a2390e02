from pydantic import ValidationError as ConfigValidationError

from storefront.domain.exceptions import ValidationError
from storefront.domain.section_types import ALLOWED_SECTION_TYPES, parse_section_config


def assert_section_type(section_type):
    if section_type not in ALLOWED_SECTION_TYPES:
        raise ValidationError(
            f"Invalid section type: {section_type}. "
            f"Valid types are: {', '.join(sorted(ALLOWED_SECTION_TYPES))}",
            details={"receivedType": section_type},
        )


def assert_section_config(section_type, config):
    if config is not None and not isinstance(config, dict):
        raise ValidationError("Section config must be an object")

    try:
        parse_section_config(section_type, config)
    except ConfigValidationError as exc:
        raise ValidationError(
            f"Invalid config for section type {section_type}",
            details={
                ".".join(str(part) for part in err["loc"]): err["msg"]
                for err in exc.errors()
            },
        ) from exc


def assert_section_flags(section):
    for field in ("is_active", "is_published"):
        value = getattr(section, field)
        if not isinstance(value, bool):
            raise ValidationError(f"{field} must be a boolean", details={field: value})

    if section.display_on is not None and not isinstance(section.display_on, dict):
        raise ValidationError("displayOn must be an object")


def assert_section(section):
    if not section.name or not section.type:
        raise ValidationError(
            "Name and type are required fields",
            details={"name": section.name, "type": section.type},
        )

    assert_section_type(section.type)
    assert_section_config(section.type, section.config)

    ordering = section.ordering
    if ordering is not None and (isinstance(ordering, bool) or not isinstance(ordering, int)):
        raise ValidationError("Ordering must be an integer", details={"ordering": ordering})

    assert_section_flags(section)
