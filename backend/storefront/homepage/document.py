# storefront/homepage/document.py
"""
The homepage document assembled by one composition run.

Holds the pre-header slot (first scrolling ticker), the ordered list of
top-level nodes in the sections container, and the behaviors bound to
inserted fragments. Mutations happen on the event loop thread only.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from markupsafe import Markup

from .fragments import Fragment, el
from .html import to_html

PLACEHOLDER_CLASS = "homepage-section-placeholder"
ANCHOR_ATTR = "data-banner-anchor"


@dataclass(frozen=True)
class SectionEntry:
    """What the placement resolver can see of one top-level node."""

    index: int
    ids: Tuple[str, ...]
    types: Tuple[str, ...]
    names: Tuple[str, ...]
    anchor: Optional[str]


@dataclass(frozen=True)
class BoundBehavior:
    name: str
    section_id: Optional[str]
    options: Dict


def placeholder_for(section) -> Fragment:
    attrs = {
        "class": f"{PLACEHOLDER_CLASS} homepage-section",
        "data-section-id": section.id,
        "data-section-type": section.type,
        "data-placeholder": "true",
    }
    if section.name:
        attrs["data-section-name"] = section.name
    return el("div", attrs)


def _section_nodes(node: Fragment) -> List[Fragment]:
    if node.attrs.get("data-section-id"):
        return [node]
    return [n for n in node.walk() if n.attrs.get("data-section-id")]


class HomepageDocument:
    def __init__(self):
        self.pre_header: List[Fragment] = []
        self.nodes: List[Fragment] = []
        self.notice: Optional[Fragment] = None
        self.bindings: List[BoundBehavior] = []
        self._bound: Dict[int, Fragment] = {}

    def __len__(self):
        return len(self.nodes)

    # ------------------------
    # Queries
    # ------------------------

    def entries(self) -> List[SectionEntry]:
        result = []
        for index, node in enumerate(self.nodes):
            inner = _section_nodes(node)
            result.append(SectionEntry(
                index=index,
                ids=tuple(n.attrs["data-section-id"] for n in inner),
                types=tuple(n.attrs.get("data-section-type") or "" for n in inner),
                names=tuple(n.attrs.get("data-section-name") or "" for n in inner),
                anchor=node.attrs.get(ANCHOR_ATTR),
            ))
        return result

    def index_of_section(self, section_id: str) -> int:
        for entry in self.entries():
            if section_id in entry.ids:
                return entry.index
        return -1

    def section_ids(self) -> List[str]:
        """Section ids in document order, pre-header first."""
        ids = []
        for node in self.pre_header + self.nodes:
            ids.extend(n.attrs["data-section-id"] for n in _section_nodes(node))
        return ids

    def banner_ids(self) -> set:
        return {
            node.attrs["data-banner-id"]
            for root in self.nodes
            for node in root.walk()
            if node.attrs.get("data-banner-id")
        }

    def placeholders(self) -> List[Fragment]:
        return [node for node in self.nodes if node.has_class(PLACEHOLDER_CLASS)]

    # ------------------------
    # Mutations
    # ------------------------

    def add_pre_header(self, fragment: Fragment) -> None:
        self.pre_header.append(fragment)
        self._bind(fragment)

    def append(self, fragment: Fragment) -> None:
        self.nodes.append(fragment)
        self._bind(fragment)

    def insert(self, index: int, fragment: Fragment) -> None:
        self.nodes.insert(max(0, min(index, len(self.nodes))), fragment)
        self._bind(fragment)

    def replace(self, old: Fragment, new: Fragment) -> bool:
        """Swap ``old`` for ``new`` in place. False when ``old`` is not a top-level node."""
        for index, node in enumerate(self.nodes):
            if node is old:
                if ANCHOR_ATTR in old.attrs:
                    new.attrs.setdefault(ANCHOR_ATTR, old.attrs[ANCHOR_ATTR])
                self.nodes[index] = new
                self._bind(new)
                return True
        return False

    def remove(self, old: Fragment) -> bool:
        for index, node in enumerate(self.nodes):
            if node is old:
                del self.nodes[index]
                return True
        return False

    def show_notice(self, fragment: Fragment) -> None:
        self.notice = fragment

    def _bind(self, fragment: Fragment) -> None:
        """Bind declared behaviors once per fragment instance."""
        for node in fragment.walk():
            if not node.behaviors or id(node) in self._bound:
                continue
            self._bound[id(node)] = node
            for behavior in node.behaviors:
                self.bindings.append(BoundBehavior(
                    name=behavior.name,
                    section_id=node.attrs.get("data-section-id"),
                    options=dict(behavior.options),
                ))

    # ------------------------
    # Output
    # ------------------------

    def container_html(self) -> Markup:
        return Markup("").join(to_html(node) for node in self.nodes)

    def to_html(self, header: Markup = Markup('<header id="header"></header>')) -> Markup:
        pre_header = Markup("").join(to_html(node) for node in self.pre_header)
        body = self.container_html()
        notice = to_html(self.notice) if self.notice is not None else Markup("")
        return (
            pre_header
            + header
            + Markup('<main><div id="homepage-sections-container" class="homepage-sections-container">')
            + body
            + Markup("</div>")
            + notice
            + Markup("</main>")
        )
