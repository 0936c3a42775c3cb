"""CLI entry point for fontgate - Google Fonts catalog proxy and sample renderer."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click

from fontgate.config import DEFAULT_ENV_FILE, Settings, load_settings
from fontgate.errors import FontGateError


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def _load_settings_or_exit(env_file: str) -> Settings:
    try:
        return load_settings(env_file)
    except FontGateError as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)


def _load_gateway_or_exit(settings: Settings):
    from fontgate.catalog import fetch_catalog
    from fontgate.fetcher import FontFileFetcher
    from fontgate.gateway import FontGateway

    try:
        catalog = fetch_catalog(
            settings.api_key, url=settings.catalog_url, timeout=settings.fetch_timeout
        )
    except FontGateError as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)
    return FontGateway(catalog, fetch=FontFileFetcher(timeout=settings.fetch_timeout))


env_file_option = click.option(
    "--env-file",
    type=click.Path(dir_okay=False),
    default=DEFAULT_ENV_FILE,
    show_default=True,
    help="Environment file holding GOOGLE_FONTS_API_KEY",
)

# -- CLI group --------------------------------------------------------------------------


@click.group()
@click.version_option(version="0.1.0", prog_name="fontgate")
@click.option("-v", "--verbose", is_flag=True, help="Verbose (debug) logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool):
    """Proxy the Google Fonts catalog and render font name samples as PNG."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


# -- serve -----------------------------------------------------------------------------


@cli.command()
@env_file_option
@click.option("--host", default=None, help="Bind host (default: all interfaces)")
@click.option("--port", type=int, default=None, help="Bind port (default: 8080)")
@click.pass_context
def serve(ctx: click.Context, env_file, host, port):
    """Load the catalog and serve GET /fonts."""
    _setup_logging(ctx.obj["verbose"])
    settings = _load_settings_or_exit(env_file)
    gateway = _load_gateway_or_exit(settings)

    from fontgate.server import make_server, serve_forever

    bind_host = settings.host if host is None else host
    bind_port = settings.port if port is None else port
    try:
        server = make_server(gateway, bind_host, bind_port)
    except OSError as e:
        msg = f"Error: cannot listen on {bind_host or '*'}:{bind_port}: {e}"
        click.secho(msg, fg="red", err=True)
        sys.exit(1)
    serve_forever(server)


# -- catalog ---------------------------------------------------------------------------


@cli.command()
@env_file_option
@click.option("--families", is_flag=True, help="Print one family name per line")
@click.pass_context
def catalog(ctx: click.Context, env_file, families):
    """Fetch the font catalog and print it as JSON."""
    _setup_logging(ctx.obj["verbose"])
    settings = _load_settings_or_exit(env_file)
    gateway = _load_gateway_or_exit(settings)

    if families:
        for entry in gateway.catalog:
            click.echo(entry.family)
        return
    click.echo(json.dumps(gateway.list_catalog(), indent=2, ensure_ascii=False))


# -- render ----------------------------------------------------------------------------


@cli.command()
@click.argument("family")
@env_file_option
@click.option(
    "-o", "--output", type=click.Path(dir_okay=False), default=None, help="Output PNG path"
)
@click.pass_context
def render(ctx: click.Context, family, env_file, output):
    """Render FAMILY's name in its regular style to a PNG file."""
    _setup_logging(ctx.obj["verbose"])
    settings = _load_settings_or_exit(env_file)
    gateway = _load_gateway_or_exit(settings)

    try:
        png = gateway.render(family)
    except FontGateError as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)

    out = Path(output) if output else Path(f"{family.replace(' ', '_')}.png")
    out.write_bytes(png)
    click.secho(f"Wrote {out} ({len(png)} bytes)", fg="green")


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
