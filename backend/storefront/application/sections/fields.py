# Wire key -> model attribute for writable section fields
SECTION_FIELDS = {
    "name": "name",
    "type": "type",
    "title": "title",
    "subtitle": "subtitle",
    "description": "description",
    "config": "config",
    "ordering": "ordering",
    "isActive": "is_active",
    "isPublished": "is_published",
    "displayOn": "display_on",
}
