"""CLI interface for republish."""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from republish.config import RepublishConfig, load_config, merge_cli_overrides
from republish.content.store import ContentStore, StoreAttribution
from republish.content.urls import republish_url
from republish.errors import InvalidContentIdError
from republish.republication import (
    ContentFooter,
    ContentTransformer,
    NotFound,
    RedirectToCanonical,
    RepublishHooks,
    RewriteResolver,
)

app = typer.Typer(
    name="republish",
    help="Let readers republish your articles under a Creative Commons license.",
)

console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from republish import __version__

        console.print(f"republish {__version__}")
        raise typer.Exit()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        force=True,
    )


def _config(ctx: typer.Context) -> RepublishConfig:
    return ctx.obj["config"]


def _store(ctx: typer.Context) -> ContentStore:
    return ContentStore(_config(ctx).store_path)


@app.callback()
def main(
    ctx: typer.Context,
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Path to a .republish.toml file."),
    ] = None,
    store_dir: Annotated[
        Optional[Path],
        typer.Option("--store", help="Directory holding the content store."),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Enable debug logging."),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
) -> None:
    """Republish - serve and inspect republishable article snippets."""
    _setup_logging(verbose)
    config = load_config(config_path)
    config = merge_cli_overrides(
        config, store_directory=str(store_dir) if store_dir else None
    )
    ctx.obj = {"config": config}


@app.command()
def serve(
    ctx: typer.Context,
    host: Annotated[Optional[str], typer.Option("--host", help="Bind address.")] = None,
    port: Annotated[Optional[int], typer.Option("--port", "-p", help="Bind port.")] = None,
) -> None:
    """Run the republish web app."""
    import uvicorn

    from republish.web import create_app

    config = merge_cli_overrides(_config(ctx), server_host=host, server_port=port)
    console.print(
        f"Serving /{config.republish.endpoint}/ on "
        f"http://{config.server.host}:{config.server.port}"
    )
    uvicorn.run(create_app(config), host=config.server.host, port=config.server.port)


@app.command()
def snippet(
    ctx: typer.Context,
    item_id: Annotated[int, typer.Argument(help="Article id.")],
) -> None:
    """Print the republish snippet for an article."""
    config = _config(ctx)
    store = _store(ctx)
    attribution = StoreAttribution(store) if config.attribution.enabled else None
    transformer = ContentTransformer(
        store,
        config,
        attribution=attribution,
        hooks=RepublishHooks(),
        footer=ContentFooter(config),
    )
    try:
        markup = transformer.build_snippet(item_id)
    except InvalidContentIdError:
        console.print(f"[red]Error:[/red] Invalid post ID: {item_id}")
        raise typer.Exit(1)
    typer.echo(markup)


@app.command()
def resolve(
    ctx: typer.Context,
    path: Annotated[str, typer.Argument(help="Path or URL following the republish endpoint.")],
) -> None:
    """Show what a request for /<endpoint>/PATH would do."""
    outcome = RewriteResolver(_store(ctx), _config(ctx)).resolve(path)
    if isinstance(outcome, NotFound):
        console.print("[yellow]404[/yellow] not found")
        raise typer.Exit(1)
    if isinstance(outcome, RedirectToCanonical):
        console.print(f"[cyan]redirect[/cyan] {outcome.url}")
        return
    console.print(f"[green]render[/green] article {outcome.item_id} ({outcome.canonical_url})")


@app.command()
def link(
    ctx: typer.Context,
    item_id: Annotated[int, typer.Argument(help="Article id.")],
) -> None:
    """Print the public republish URL for an article."""
    config = _config(ctx)
    item = _store(ctx).get(item_id)
    if item is None:
        console.print(f"[red]Error:[/red] Invalid post ID: {item_id}")
        raise typer.Exit(1)
    typer.echo(republish_url(item, config.site.url, config.republish.endpoint))


@app.command("opt-out")
def opt_out(
    ctx: typer.Context,
    item_id: Annotated[int, typer.Argument(help="Article id.")],
    allow: Annotated[
        bool,
        typer.Option("--allow", help="Opt the article back into republication."),
    ] = False,
) -> None:
    """Hide an article from republication (or allow it again with --allow)."""
    store = _store(ctx)
    try:
        store.set_republish_disabled(item_id, not allow)
    except KeyError:
        console.print(f"[red]Error:[/red] Invalid post ID: {item_id}")
        raise typer.Exit(1)
    state = "allowed" if allow else "disabled"
    console.print(f"Republication {state} for article {item_id}")


@app.command()
def shares(
    ctx: typer.Context,
    item_id: Annotated[int, typer.Argument(help="Article id.")],
) -> None:
    """Show how often an article was republished, and where."""
    store = _store(ctx)
    if not store.exists(item_id):
        console.print(f"[red]Error:[/red] Invalid post ID: {item_id}")
        raise typer.Exit(1)
    record = store.get_shares(item_id)
    console.print(f"Article {item_id} republished {record.count} time(s)")
    if record.urls:
        table = Table("Republished at")
        for url in record.urls:
            table.add_row(url)
        console.print(table)
