# storefront/homepage/records.py
from __future__ import annotations

from datetime import datetime
from functools import cached_property
from typing import Any, Dict, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from storefront.domain.section_types import SectionConfig, parse_section_config
from storefront.utils.order import section_sort_key


class SectionRecord(BaseModel):
    """A homepage section as read from the section store (public wire shape)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
        ignored_types=(cached_property,),
    )

    id: str = Field(validation_alias=AliasChoices("id", "_id"))
    name: str = ""
    type: str
    title: Optional[str] = None
    subtitle: Optional[str] = None
    description: Optional[str] = None
    config: Optional[Dict[str, Any]] = Field(default_factory=dict)
    ordering: Optional[int] = 0
    is_active: bool = True
    is_published: bool = False
    created_at: Optional[datetime] = None

    @cached_property
    def typed_config(self) -> SectionConfig:
        return parse_section_config(self.type, self.config)

    @property
    def is_public(self) -> bool:
        return self.is_active and self.is_published

    @property
    def display_name(self) -> str:
        return self.name or self.title or ""

    def sort_key(self):
        return section_sort_key(self.ordering, self.created_at)
