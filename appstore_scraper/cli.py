"""App Store scraper CLI entry point."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, Callable

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.table import Table

import appstore_scraper as appstore
from appstore_scraper.config import ClientConfig, ConfigError, load_config
from appstore_scraper.constants import COLLECTIONS, DEVICES, SORTS, Collection, Device, Sort
from appstore_scraper.errors import AppStoreError
from appstore_scraper.schema import App, ListApp, Review, SimilarApp, Suggestion, VersionHistory
from appstore_scraper.utils.output_writer import to_jsonable, write_output

console = Console()

# model -> [(column header, value getter)]
_TABLE_COLUMNS: dict[type, list[tuple[str, Callable[[Any], Any]]]] = {
    App: [
        ("ID", lambda a: a.id),
        ("Title", lambda a: a.title),
        ("Developer", lambda a: a.developer),
        ("Price", lambda a: "free" if a.free else f"{a.price} {a.currency}"),
        ("Score", lambda a: f"{a.score:.2f}"),
    ],
    ListApp: [
        ("ID", lambda a: a.id),
        ("Title", lambda a: a.title),
        ("Developer", lambda a: a.developer),
        ("Price", lambda a: "free" if a.free else f"{a.price} {a.currency}"),
        ("Genre", lambda a: a.genre),
    ],
    Review: [
        ("Score", lambda r: "★" * r.score),
        ("User", lambda r: r.user_name),
        ("Version", lambda r: r.version),
        ("Title", lambda r: r.title),
    ],
    SimilarApp: [
        ("ID", lambda s: s.app.id),
        ("Title", lambda s: s.app.title),
        ("Section", lambda s: s.link_type),
    ],
    Suggestion: [("Term", lambda s: s.term)],
    VersionHistory: [
        ("Version", lambda v: v.version_display),
        ("Released", lambda v: v.release_date),
    ],
}


def _setup_logging(verbose: bool = False) -> None:
    fmt = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=fmt,
        handlers=[logging.StreamHandler(sys.stderr)],
    )
    # Silence noisy third-party loggers
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def _render_table(rows: list) -> bool:
    columns = _TABLE_COLUMNS.get(type(rows[0])) if rows else None
    if not columns:
        return False
    table = Table(title=f"{len(rows)} results")
    for header, _ in columns:
        table.add_column(header, style="bold cyan" if header == "ID" else None)
    for row in rows:
        table.add_row(*(str(getter(row)) for _, getter in columns))
    console.print(table)
    return True


def _emit(ctx: click.Context, result: Any, as_table: bool, output: str | None) -> None:
    cfg: ClientConfig = ctx.obj
    if output:
        dest = Path(output)
        if not dest.is_absolute():
            dest = Path(cfg.output_dir) / dest
        path = write_output(result, dest)
        console.print(f"[green]Wrote[/green] {path}", highlight=False, soft_wrap=True)
        return
    if as_table and isinstance(result, list) and _render_table(result):
        return
    console.print_json(data=to_jsonable(result))


def _run(ctx: click.Context, func: Callable[..., Any], as_table: bool, output: str | None, **kwargs) -> None:
    """Call an operation with the configured defaults and print its result."""
    cfg: ClientConfig = ctx.obj
    try:
        result = func(request_options=cfg.request_options(), **kwargs)
    except AppStoreError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}", highlight=False, soft_wrap=True)
        sys.exit(1)
    _emit(ctx, result, as_table, output)


def output_options(f):
    f = click.option("--output", "-o", default=None, help="Write JSON to this file (relative to output_dir)")(f)
    f = click.option("--table", "as_table", is_flag=True, default=False, help="Print list results as a table")(f)
    return f


@click.group()
@click.option("--config", "config_path", default="config.yaml", help="Path to config.yaml")
@click.option("--country", "-c", default=None, help="Two-letter storefront code (overrides config)")
@click.option("--lang", default=None, help="Language for localized fields, e.g. en-us")
@click.option("--timeout", type=float, default=None, help="Per-attempt timeout in seconds")
@click.option("--retries", type=int, default=None, help="Extra attempts on 429, 503 and network errors")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging")
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: str,
    country: str | None,
    lang: str | None,
    timeout: float | None,
    retries: int | None,
    verbose: bool,
) -> None:
    """Fetch app metadata, reviews and ratings from the Apple App Store."""
    load_dotenv()
    _setup_logging(verbose)

    try:
        raw = load_config(config_path)
        cfg = ClientConfig.from_raw(raw.get("global", {}))
    except ConfigError as exc:
        console.print(f"[red]Config error:[/red] {escape(str(exc))}", highlight=False, soft_wrap=True)
        sys.exit(1)

    if country:
        cfg.country = country.lower()
    if lang:
        cfg.lang = lang
    if timeout is not None:
        cfg.timeout = timeout
    if retries is not None:
        cfg.retries = retries
    ctx.obj = cfg


@cli.command("app")
@click.argument("app_id")
@click.option("--ratings", "with_ratings", is_flag=True, default=False, help="Attach the star histogram")
@output_options
@click.pass_context
def app_command(ctx: click.Context, app_id: str, with_ratings: bool, as_table: bool, output: str | None) -> None:
    """Show one app by numeric id or bundle id."""
    cfg: ClientConfig = ctx.obj
    key = {"id": int(app_id)} if app_id.isdigit() else {"app_id": app_id}
    _run(ctx, appstore.app, as_table, output, country=cfg.country, lang=cfg.lang, ratings=with_ratings, **key)


@cli.command("search")
@click.argument("term")
@click.option("--num", "-n", type=int, default=50, show_default=True)
@click.option("--page", type=int, default=1, show_default=True)
@click.option("--device", type=click.Choice(sorted(DEVICES)), default=Device.ALL, show_default=True)
@click.option("--ids-only", is_flag=True, default=False, help="Return track ids only")
@output_options
@click.pass_context
def search_command(
    ctx: click.Context,
    term: str,
    num: int,
    page: int,
    device: str,
    ids_only: bool,
    as_table: bool,
    output: str | None,
) -> None:
    """Search apps by term."""
    cfg: ClientConfig = ctx.obj
    _run(
        ctx,
        appstore.search,
        as_table,
        output,
        term=term,
        num=num,
        page=page,
        device=device,
        ids_only=ids_only,
        country=cfg.country,
        lang=cfg.lang,
    )


@cli.command("list")
@click.option(
    "--collection",
    type=click.Choice(sorted(COLLECTIONS)),
    default=Collection.TOP_FREE_IOS,
    show_default=True,
)
@click.option("--category", type=int, default=None, help="Genre id, e.g. 6014 for Games")
@click.option("--num", "-n", type=int, default=50, show_default=True)
@click.option("--full-detail", is_flag=True, default=False, help="Fetch full app records")
@output_options
@click.pass_context
def list_command(
    ctx: click.Context,
    collection: str,
    category: int | None,
    num: int,
    full_detail: bool,
    as_table: bool,
    output: str | None,
) -> None:
    """Top charts from the iTunes RSS feed."""
    cfg: ClientConfig = ctx.obj
    _run(
        ctx,
        appstore.list_apps,
        as_table,
        output,
        collection=collection,
        category=category,
        num=num,
        full_detail=full_detail,
        country=cfg.country,
        lang=cfg.lang,
    )


@cli.command("developer")
@click.argument("dev_id", type=int)
@output_options
@click.pass_context
def developer_command(ctx: click.Context, dev_id: int, as_table: bool, output: str | None) -> None:
    """All apps by one developer (artist id)."""
    cfg: ClientConfig = ctx.obj
    _run(ctx, appstore.developer, as_table, output, dev_id=dev_id, country=cfg.country, lang=cfg.lang)


@cli.command("reviews")
@click.argument("app_id")
@click.option("--page", type=int, default=1, show_default=True)
@click.option("--sort", type=click.Choice(sorted(SORTS)), default=Sort.RECENT, show_default=True)
@output_options
@click.pass_context
def reviews_command(
    ctx: click.Context,
    app_id: str,
    page: int,
    sort: str,
    as_table: bool,
    output: str | None,
) -> None:
    """One page of customer reviews."""
    cfg: ClientConfig = ctx.obj
    key = {"id": int(app_id)} if app_id.isdigit() else {"app_id": app_id}
    _run(ctx, appstore.reviews, as_table, output, page=page, sort=sort, country=cfg.country, **key)


@cli.command("ratings")
@click.argument("app_id", type=int)
@output_options
@click.pass_context
def ratings_command(ctx: click.Context, app_id: int, as_table: bool, output: str | None) -> None:
    """Total rating count and star histogram."""
    cfg: ClientConfig = ctx.obj
    _run(ctx, appstore.ratings, as_table, output, id=app_id, country=cfg.country)


@cli.command("similar")
@click.argument("app_id")
@click.option("--link-type", is_flag=True, default=False, help="Label each app with its page section")
@output_options
@click.pass_context
def similar_command(
    ctx: click.Context,
    app_id: str,
    link_type: bool,
    as_table: bool,
    output: str | None,
) -> None:
    """Apps linked from an app's page."""
    cfg: ClientConfig = ctx.obj
    key = {"id": int(app_id)} if app_id.isdigit() else {"app_id": app_id}
    _run(
        ctx,
        appstore.similar,
        as_table,
        output,
        include_link_type=link_type,
        country=cfg.country,
        lang=cfg.lang,
        **key,
    )


@cli.command("suggest")
@click.argument("term")
@output_options
@click.pass_context
def suggest_command(ctx: click.Context, term: str, as_table: bool, output: str | None) -> None:
    """Autocomplete suggestions for a search term."""
    _run(ctx, appstore.suggest, as_table, output, term=term)


@cli.command("privacy")
@click.argument("app_id", type=int)
@output_options
@click.pass_context
def privacy_command(ctx: click.Context, app_id: int, as_table: bool, output: str | None) -> None:
    """Privacy policy and data collection labels."""
    cfg: ClientConfig = ctx.obj
    _run(ctx, appstore.privacy, as_table, output, id=app_id, country=cfg.country)


@cli.command("version-history")
@click.argument("app_id", type=int)
@output_options
@click.pass_context
def version_history_command(ctx: click.Context, app_id: int, as_table: bool, output: str | None) -> None:
    """Release history from the app page."""
    cfg: ClientConfig = ctx.obj
    _run(ctx, appstore.version_history, as_table, output, id=app_id, country=cfg.country)


if __name__ == "__main__":
    cli()
