# storefront/homepage/placement.py
"""
Banner Placement Resolver.

Maps a banner ``location`` string onto an index in the sections container.
It never raises and always returns a usable insertion point; anything it
cannot resolve goes to the end of the container with a logged warning.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from storefront.domain.exceptions import PlacementFallback
from storefront.domain.section_types import CATEGORY_TYPES, PRODUCT_TYPES

from .document import HomepageDocument

logger = logging.getLogger(__name__)

TOP = "top"
END_LOCATIONS = frozenset({"bottom", "before-footer"})
MIDDLE = "middle"
AFTER_SECTION_PREFIX = "after-section-"
AFTER_PREFIX = "after-"

# ``after-<alias>`` -> section types it stands for
TYPE_ALIASES = {
    "hero": frozenset({"heroSlider"}),
    "slider": frozenset({"heroSlider"}),
    "categories": CATEGORY_TYPES,
    "products": PRODUCT_TYPES,
}


@dataclass(frozen=True)
class InsertionPoint:
    index: int
    anchor: Optional[str] = None
    fallback: bool = False
    reason: Optional[str] = None


class BannerPlacementResolver:
    def place(self, location: Optional[str], document: HomepageDocument) -> InsertionPoint:
        """Where a banner declared at ``location`` goes in ``document``."""
        location = (location or "").strip()
        end = len(document)

        try:
            point = self._resolve(location, document)
        except PlacementFallback as exc:
            logger.warning("Banner location %r: %s, appending at the end", location, exc)
            return InsertionPoint(index=end, fallback=True, reason=str(exc))

        if point is None:
            return InsertionPoint(index=end)
        return point

    def _resolve(self, location, document):
        if location == TOP:
            return self._after(document, -1)

        if location in END_LOCATIONS:
            return None

        if location == MIDDLE:
            index = self._first_of_types(document, PRODUCT_TYPES)
            if index < 0:
                raise PlacementFallback("no product section for middle placement")
            return self._after(document, index)

        if location.startswith(AFTER_SECTION_PREFIX):
            section_id = location[len(AFTER_SECTION_PREFIX):]
            index = document.index_of_section(section_id)
            if index < 0:
                raise PlacementFallback(f"section {section_id} is not on the page")
            return self._after(document, index)

        if location.startswith(AFTER_PREFIX) and len(location) > len(AFTER_PREFIX):
            token = location[len(AFTER_PREFIX):]
            index = self._match_token(document, token)
            if index < 0:
                raise PlacementFallback(f"nothing on the page matches {token!r}")
            return self._after(document, index)

        raise PlacementFallback("unknown location")

    def _match_token(self, document, token):
        # 1. exact section id
        index = document.index_of_section(token)
        if index >= 0:
            return index

        # 2. keyword alias for a type family
        types = TYPE_ALIASES.get(token.lower())
        if types:
            index = self._first_of_types(document, types)
            if index >= 0:
                return index

        # 3. display name, case-insensitive, hyphens read as spaces
        needle = token.lower().replace("-", " ")
        for entry in document.entries():
            if any(needle in name.lower().replace("-", " ") for name in entry.names if name):
                return entry.index
        return -1

    @staticmethod
    def _first_of_types(document, types):
        for entry in document.entries():
            if any(t in types for t in entry.types):
                return entry.index
        return -1

    @staticmethod
    def _after(document, index):
        """
        Slot right after node ``index`` (-1 for the top), behind banners
        already placed on the same anchor so they keep their insertion order.
        """
        entries = document.entries()
        anchor = TOP
        if index >= 0:
            ids = entries[index].ids
            anchor = ids[-1] if ids else f"node-{index}"
        slot = index + 1
        while slot < len(entries) and entries[slot].anchor == anchor:
            slot += 1
        return InsertionPoint(index=slot, anchor=anchor)
