# storefront/homepage/pipeline.py
"""
Composition Pipeline.

Builds the homepage document from the public section list:

    FETCHING -> SORTED -> PARTITIONED -> CRITICAL_RENDERING
             -> LAZY_SCHEDULING -> BANNER_PLACEMENT -> DONE

or ends in NO_CONTENT when the section list cannot be fetched or is
empty. Per-section failures stay inside their own slot: a section that
resolves to nothing is dropped and one whose renderer blows up is
replaced by a small inline error notice.
"""
import asyncio
import enum
import logging
from collections import Counter, OrderedDict
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError as RecordValidationError

from storefront.domain.exceptions import PipelineAbort
from storefront.domain.section_types import BANNER_TYPES, CRITICAL_TYPES

from .cache import ResponseCache
from .client import StorefrontClient
from .document import ANCHOR_ATTR, HomepageDocument, placeholder_for
from .fragments import Fragment, el
from .placement import BannerPlacementResolver, InsertionPoint
from .records import SectionRecord
from .renderers import DEFAULT_FALLBACK_IMAGE, RendererRegistry, banner_fragment
from .resolver import SectionDataResolver
from .scheduler import DEFAULT_BATCH_SIZE, LazyLoadScheduler
from .sources import HttpCatalogSource

logger = logging.getLogger(__name__)

CRITICAL_BANNER_MAX_ORDERING = 2

# Legacy Banner records are placed position by position in this order
LEGACY_POSITION_ORDER = (
    "top",
    "after-hero",
    "after-categories",
    "middle",
    "after-trending",
    "after-discounted",
    "after-new-arrival",
    "after-top-selling",
    "after-lingerie-collection",
    "after-product-feature-collection",
    "before-footer",
    "bottom",
)


class PipelineState(enum.Enum):
    FETCHING = "fetching"
    SORTED = "sorted"
    PARTITIONED = "partitioned"
    CRITICAL_RENDERING = "critical_rendering"
    LAZY_SCHEDULING = "lazy_scheduling"
    BANNER_PLACEMENT = "banner_placement"
    DONE = "done"
    NO_CONTENT = "no_content"


@dataclass
class BannerUnit:
    """One banner section, or two adjacent ones rendered as a stack."""

    sections: Tuple[SectionRecord, ...]
    location: Optional[str] = None

    @property
    def lead(self) -> SectionRecord:
        return self.sections[0]

    @property
    def stacked(self) -> bool:
        return len(self.sections) > 1

    @property
    def critical(self) -> bool:
        return is_critical(self.lead)


@dataclass
class Partition:
    pre_header: Optional[SectionRecord] = None
    flow: List[SectionRecord] = field(default_factory=list)
    banners: List[BannerUnit] = field(default_factory=list)


def is_banner(section: SectionRecord) -> bool:
    return section.type in BANNER_TYPES


def is_critical(section: SectionRecord) -> bool:
    if is_banner(section):
        return (section.ordering or 0) <= CRITICAL_BANNER_MAX_ORDERING
    return section.type in CRITICAL_TYPES


def banner_config(section: SectionRecord):
    """Typed config of a banner section, or None when its config is invalid."""
    try:
        return section.typed_config
    except RecordValidationError as exc:
        logger.warning("Banner section %s has an invalid config: %s", section.id, exc)
        return None


def sort_sections(sections: List[SectionRecord]) -> List[SectionRecord]:
    """Public sections only, by (ordering, createdAt)."""
    return sorted((s for s in sections if s.is_public), key=lambda s: s.sort_key())


def partition_sections(sections: List[SectionRecord]) -> Partition:
    """
    Split sorted sections into the pre-header ticker, in-flow sections and
    banner units. Two banners adjacent in the sorted list share one unit.
    """
    partition = Partition()

    scrollers = [s for s in sections if s.type == "scrollingText"]
    if scrollers:
        partition.pre_header = scrollers[0]

    index = 0
    while index < len(sections):
        section = sections[index]
        if not is_banner(section):
            if section is not partition.pre_header:
                partition.flow.append(section)
            index += 1
            continue

        following = sections[index + 1] if index + 1 < len(sections) else None
        if following is not None and is_banner(following):
            partition.banners.append(BannerUnit((section, following)))
            index += 2
        else:
            partition.banners.append(BannerUnit((section,)))
            index += 1

    return partition


def error_fragment(section: SectionRecord, error: BaseException) -> Fragment:
    return el(
        "div", {
            "class": "alert alert-danger m-3",
            "data-section-id": section.id,
            "data-section-type": section.type,
            "data-section-name": section.name or None,
        },
        el("strong", text="Error rendering section:"),
        el("span", text=f" {section.display_name} ({section.type})"),
        el("br"),
        el("small", text=str(error) or type(error).__name__),
    )


def missing_renderer_fragment(section: SectionRecord) -> Fragment:
    return el(
        "div", {
            "class": "alert alert-warning m-3",
            "data-section-id": section.id,
            "data-section-type": section.type,
        },
        el("strong", text="No renderer:"),
        el("span", text=f" {section.display_name} ({section.type})"),
    )


def no_content_notice() -> Fragment:
    return el(
        "div", {"class": "alert alert-info text-center m-4"},
        el("p", None, el("strong", text="No sections available")),
        el("p", text="Please check that sections are both Active and Published in the admin panel."),
    )


def stack_fragment(top: Fragment, bottom: Fragment) -> Fragment:
    return el(
        "div", {"class": "banner-stack-container"},
        el("div", {"class": "banner-stack-item banner-stack-item--top"}, top),
        el("div", {"class": "banner-stack-item banner-stack-item--bottom"}, bottom),
    )


class CompositionPipeline:
    def __init__(
        self,
        source,
        *,
        resolver: Optional[SectionDataResolver] = None,
        registry: Optional[RendererRegistry] = None,
        placement: Optional[BannerPlacementResolver] = None,
        scheduler: Optional[LazyLoadScheduler] = None,
        viewport: str = "desktop",
        include_legacy_banners: bool = True,
    ):
        self.source = source
        self.resolver = resolver or SectionDataResolver(source, viewport=viewport)
        self.registry = registry or RendererRegistry()
        self.placement = placement or BannerPlacementResolver()
        self.scheduler = scheduler or LazyLoadScheduler()
        self.include_legacy_banners = include_legacy_banners

        self.state = PipelineState.FETCHING
        self.document = HomepageDocument()
        self.sections: List[SectionRecord] = []
        self.partition: Optional[Partition] = None
        self.attempts: Counter = Counter()
        self.placements: List[Tuple[str, InsertionPoint]] = []

    async def run(self) -> HomepageDocument:
        """Build the document and wait for every lazy load to finish."""
        await self.build()
        if self.state is PipelineState.NO_CONTENT:
            return self.document

        await self.scheduler.run()
        self.state = PipelineState.DONE
        logger.info(
            "Homepage composed: %d sections attempted, %d nodes",
            len(self.attempts), len(self.document),
        )
        return self.document

    async def build(self) -> HomepageDocument:
        """Run every stage up to banner placement. Lazy loads stay scheduled."""
        self.state = PipelineState.FETCHING
        try:
            records = await self._fetch()
        except PipelineAbort as exc:
            logger.error("Homepage build aborted: %s", exc)
            return self._no_content()

        self.sections = sort_sections(records)
        if not self.sections:
            logger.warning(
                "No homepage sections found. Sections must be both active and published."
            )
            return self._no_content()
        self.state = PipelineState.SORTED

        self.partition = partition_sections(self.sections)
        self.state = PipelineState.PARTITIONED

        self.state = PipelineState.CRITICAL_RENDERING
        placeholders = await self._render_flow(self.partition)

        self.state = PipelineState.LAZY_SCHEDULING
        for section, placeholder in placeholders:
            self._schedule(section, placeholder)

        self.state = PipelineState.BANNER_PLACEMENT
        for unit in self.partition.banners:
            config = banner_config(unit.lead)
            location = config.location if config is not None else None
            unit.location = location or self._default_location(unit.lead)
            await self._place_unit(unit)

        if self.include_legacy_banners:
            await self._place_legacy_banners()

        return self.document

    # ------------------------
    # Stages
    # ------------------------

    async def _fetch(self) -> List[SectionRecord]:
        try:
            payload = await self.source.list_public_sections()
        except Exception as exc:
            raise PipelineAbort(f"Failed to load homepage sections: {exc}") from exc

        if not isinstance(payload, list):
            raise PipelineAbort("Invalid sections response format")

        records = []
        for raw in payload:
            try:
                records.append(SectionRecord.model_validate(raw))
            except RecordValidationError as exc:
                logger.warning("Skipping malformed section record: %s", exc)
        return records

    def _no_content(self) -> HomepageDocument:
        self.state = PipelineState.NO_CONTENT
        self.document.show_notice(no_content_notice())
        return self.document

    async def _render_flow(self, partition: Partition):
        placeholders = []

        if partition.pre_header is not None:
            fragment = await self._render_section(partition.pre_header)
            if fragment is not None:
                self.document.add_pre_header(fragment)

        for section in partition.flow:
            if is_critical(section):
                # Sequential on purpose: document order must not depend on timing
                fragment = await self._render_section(section)
                if fragment is not None:
                    self.document.append(fragment)
            else:
                placeholder = placeholder_for(section)
                self.document.append(placeholder)
                placeholders.append((section, placeholder))

        return placeholders

    def _schedule(self, section: SectionRecord, placeholder: Fragment) -> None:
        async def load():
            fragment = await self._render_section(section)
            if fragment is None:
                self.document.remove(placeholder)
            else:
                self.document.replace(placeholder, fragment)

        self.scheduler.schedule(section.id, load)

    async def _render_section(self, section: SectionRecord) -> Optional[Fragment]:
        self.attempts[section.id] += 1

        if not self.registry.has(section.type):
            logger.warning("No renderer found for section type %s (%s)", section.type, section.id)
            return missing_renderer_fragment(section)

        data = await self.resolver.resolve_data(section)
        try:
            return self.registry.render(section.type, section, data)
        except Exception as exc:
            logger.exception("Error rendering section %s (%s)", section.name, section.type)
            return error_fragment(section, exc)

    # ------------------------
    # Banners
    # ------------------------

    def _default_location(self, banner: SectionRecord) -> str:
        """Right after the nearest preceding in-flow section still on the page."""
        position = self.sections.index(banner)
        for section in reversed(self.sections[:position]):
            if is_banner(section) or section is self.partition.pre_header:
                continue
            if self.document.index_of_section(section.id) >= 0:
                return f"after-section-{section.id}"
        return "top"

    def _insert(self, location: str, fragment: Fragment) -> InsertionPoint:
        point = self.placement.place(location, self.document)
        if point.anchor is not None:
            fragment.attrs[ANCHOR_ATTR] = point.anchor
        self.document.insert(point.index, fragment)
        self.placements.append((location, point))
        return point

    async def _place_unit(self, unit: BannerUnit) -> None:
        if unit.stacked:
            top, bottom = await asyncio.gather(*(self._render_section(s) for s in unit.sections))
            if top is not None and bottom is not None:
                self._insert(unit.location, stack_fragment(top, bottom))
            elif top is not None or bottom is not None:
                self._insert(unit.location, top if top is not None else bottom)
            return

        section = unit.lead
        if unit.critical:
            fragment = await self._render_section(section)
            if fragment is not None:
                self._insert(unit.location, fragment)
            return

        placeholder = placeholder_for(section)
        self._insert(unit.location, placeholder)
        self._schedule(section, placeholder)

    async def _place_legacy_banners(self) -> None:
        try:
            banners = await self.source.list_banners(fresh=True)
        except Exception:
            logger.warning("Failed to load banners", exc_info=True)
            return

        # Lazy banner sections have not rendered their banner id yet
        configs = [
            banner_config(section)
            for unit in self.partition.banners
            for section in unit.sections
        ]
        rendered = self.document.banner_ids() | {
            config.banner_id for config in configs if config is not None and config.banner_id
        }
        by_position: "OrderedDict[str, Dict[str, Any]]" = OrderedDict()
        for banner in banners:
            if not banner.get("isActive") or banner.get("id") in rendered:
                continue
            by_position.setdefault(banner.get("position") or "bottom", banner)

        ordered = [p for p in LEGACY_POSITION_ORDER if p in by_position]
        ordered += [p for p in by_position if p not in LEGACY_POSITION_ORDER]

        for position in ordered:
            banner = by_position[position]
            fragment = banner_fragment(
                banner,
                self.registry.fallback_image,
                root_attrs={
                    "class": f"banner-promo banner-promo--{banner.get('size') or 'medium'} homepage-banner",
                    "data-banner-position": position,
                },
                css_prefix="banner-promo",
            )
            self._insert(position, fragment)


async def compose_over_http(
    base_url: str,
    *,
    cache: Optional[ResponseCache] = None,
    viewport: str = "desktop",
    batch_size: int = DEFAULT_BATCH_SIZE,
    fallback_image: str = DEFAULT_FALLBACK_IMAGE,
    http=None,
) -> Tuple[HomepageDocument, CompositionPipeline]:
    """Compose the homepage against a running storefront API."""
    async with StorefrontClient(base_url, cache=cache, http=http) as client:
        pipeline = CompositionPipeline(
            HttpCatalogSource(client),
            registry=RendererRegistry(fallback_image=fallback_image),
            scheduler=LazyLoadScheduler(batch_size=batch_size),
            viewport=viewport,
        )
        document = await pipeline.run()
    return document, pipeline
