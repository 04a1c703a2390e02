import asyncio

import click
from flask import current_app
from flask.cli import AppGroup

from .application.sections.list_sections import list_sections
from .homepage.cache import ResponseCache
from .homepage.pipeline import PipelineState, compose_over_http

homepage_cli = AppGroup("homepage", help="Homepage section tools.")


@homepage_cli.command("check")
def check_sections():
    """Report which homepage sections are visible on the storefront."""
    sections = list_sections()

    click.echo(f"Total sections: {len(sections)}")
    for section in sections:
        click.echo(
            f"  [{section.ordering}] {section.name} ({section.type}) "
            f"active={section.is_active} published={section.is_published} id={section.id}"
        )

    visible = [s for s in sections if s.is_public]
    click.echo(f"\nVisible on homepage: {len(visible)}")
    for section in visible:
        click.echo(f"  {section.name} ({section.type})")

    hidden = [s for s in sections if not s.is_public]
    if hidden:
        click.echo("\nNot visible:")
        for section in hidden:
            reasons = []
            if not section.is_active:
                reasons.append("inactive")
            if not section.is_published:
                reasons.append("unpublished")
            click.echo(f"  {section.name} ({section.type}): {', '.join(reasons)}")


@homepage_cli.command("render")
@click.option("--base-url", default=None, help="Storefront API base URL.")
@click.option("--viewport", type=click.Choice(["desktop", "mobile"]), default=None)
@click.option("--container-only", is_flag=True, help="Print only the sections container.")
def render_homepage(base_url, viewport, container_only):
    """Compose the homepage against the storefront API and print the HTML."""
    config = current_app.config
    document, pipeline = asyncio.run(compose_over_http(
        base_url or config["HOMEPAGE_API_BASE_URL"],
        cache=ResponseCache(ttl=config["HOMEPAGE_CACHE_TTL"]),
        viewport=viewport or config["HOMEPAGE_VIEWPORT"],
        batch_size=config["HOMEPAGE_LAZY_BATCH_SIZE"],
        fallback_image=config["HOMEPAGE_FALLBACK_IMAGE"],
    ))

    if pipeline.state is PipelineState.NO_CONTENT:
        click.echo("No sections available.", err=True)

    click.echo(document.container_html() if container_only else document.to_html())
