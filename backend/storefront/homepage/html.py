# storefront/homepage/html.py
"""HTML materialization for Fragment trees."""
from markupsafe import Markup, escape

from .fragments import Fragment

VOID_TAGS = frozenset({"img", "input", "source", "br", "hr", "meta", "link"})


def render_attrs(attrs) -> str:
    parts = []
    for name, value in attrs.items():
        if value is None or value is False:
            continue
        if value is True:
            parts.append(f" {name}")
        else:
            parts.append(f' {name}="{escape(value)}"')
    return "".join(parts)


def to_html(fragment: Fragment) -> Markup:
    if fragment.raw is not None:
        # customHTML content is stored by admins and emitted verbatim
        return Markup(fragment.raw)

    if not fragment.tag:
        return Markup("").join(to_html(child) for child in fragment.children)

    opening = f"<{fragment.tag}{render_attrs(fragment.attrs)}>"
    if fragment.tag in VOID_TAGS:
        return Markup(opening)

    inner = escape(fragment.text) if fragment.text is not None else Markup("")
    inner += Markup("").join(to_html(child) for child in fragment.children)
    return Markup(f"{opening}{inner}</{fragment.tag}>")
