# storefront/homepage/fragments.py
"""
Structured render output.

Renderers build ``Fragment`` trees instead of markup strings; turning a
tree into HTML is the job of ``storefront.homepage.html``.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


@dataclass
class Behavior:
    """Post-insertion behavior a fragment asks for (carousel, tabs, ...)."""

    name: str
    options: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Fragment:
    tag: str
    attrs: Dict[str, Any] = field(default_factory=dict)
    children: List["Fragment"] = field(default_factory=list)
    text: Optional[str] = None
    # Trusted markup emitted as-is (customHTML only)
    raw: Optional[str] = None
    behaviors: List[Behavior] = field(default_factory=list)

    @property
    def classes(self) -> Tuple[str, ...]:
        return tuple((self.attrs.get("class") or "").split())

    def has_class(self, name: str) -> bool:
        return name in self.classes

    def walk(self):
        """Depth-first iteration over this fragment and every descendant."""
        yield self
        for child in self.children:
            yield from child.walk()

    def find(self, class_name: str) -> Optional["Fragment"]:
        return next((node for node in self.walk() if node.has_class(class_name)), None)

    def text_content(self) -> str:
        parts = [node.text for node in self.walk() if node.text]
        return " ".join(parts)


def el(tag: str, attrs: Optional[Dict[str, Any]] = None, *children, text: Optional[str] = None) -> Fragment:
    """Shorthand builder. ``None`` children are dropped so conditionals stay inline."""
    return Fragment(
        tag=tag,
        attrs=dict(attrs or {}),
        children=[c for c in children if c is not None],
        text=text,
    )


def el_list(tag: str, attrs: Optional[Dict[str, Any]], children) -> Fragment:
    return el(tag, attrs, *children)
