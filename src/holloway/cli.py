"""CLI interface using typer."""

import asyncio
import json
import logging
import sys

import typer

from .config import settings
from .errors import NavigationError
from .resolver import Resolver, get_start_page, parse_input

app = typer.Typer(
    name="holloway",
    help="Fetch Gemini, Gopher and Finger pages as plain text",
    no_args_is_help=True,
)


def _configure_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _navigate(url: str) -> str:
    """Run one navigation, exiting with status 1 on failure."""
    resolver = Resolver.from_settings(settings)
    try:
        return asyncio.run(resolver.navigate(url))
    except NavigationError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1)


def _links(url: str, content: str) -> list[dict]:
    parsed = parse_input(url.strip())
    scheme = parsed[1].scheme.lower() if parsed else "gemini"

    if scheme == "gopher":
        from .parsers.gophermap import parse_menu

        return [
            {"url": item.url, "text": item.description}
            for item in parse_menu(content)
            if item.is_link
        ]

    if scheme == "finger":
        from .parsers.finger import parse_finger

        return [
            {"url": line.url, "text": line.content.strip()}
            for line in parse_finger(content)
            if line.url
        ]

    from .parsers.gemtext import extract_links, split_status_prefix

    _, _, body = split_status_prefix(content)
    base_url = parsed[0] if parsed else None
    return [{"url": link.url, "text": link.label} for link in extract_links(body, base_url)]


@app.command()
def fetch(
    url: str = typer.Argument(..., help="URL (or search terms) to fetch"),
    output: str = typer.Option(None, "-o", "--output", help="Output file (JSON)"),
    quiet: bool = typer.Option(False, "-q", "--quiet", help="Only output content"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Log protocol activity"),
):
    """Fetch a single URL."""
    _configure_logging(verbose)
    content = _navigate(url)

    if output:
        with open(output, "w") as f:
            json.dump({"url": url, "content": content}, f, indent=2, ensure_ascii=False)
        typer.echo(f"Saved to {output}")
    elif quiet:
        sys.stdout.write(content)
    else:
        typer.echo(f"URL: {url}")
        typer.echo(f"Length: {len(content)}")
        typer.echo("---")
        typer.echo(content)


@app.command()
def links(
    url: str = typer.Argument(..., help="URL to list links for"),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Log protocol activity"),
):
    """List the links found on a page."""
    _configure_logging(verbose)
    content = _navigate(url)

    found = _links(url, content)
    for i, link in enumerate(found, 1):
        typer.echo(f"{i}. {link['url']}")
        if link["text"] and link["text"] != link["url"]:
            typer.echo(f"    {link['text']}")
    typer.echo(f"\n{len(found)} links")


@app.command("start-page")
def start_page():
    """Show the default start page."""
    typer.echo(get_start_page())


@app.command()
def version():
    """Show version."""
    from . import __version__

    typer.echo(f"holloway {__version__}")


if __name__ == "__main__":
    app()
