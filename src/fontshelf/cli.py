"""CLI entry point for fontshelf - index local fonts and browse them by family."""

from __future__ import annotations

import logging
import sys
import time
from pathlib import Path

import click

from fontshelf import __version__
from fontshelf.cli_helpers import (
    _emit_json,
    _print_families,
    _print_record_summary,
    _print_variants,
    _resolve_roots,
    default_db_path,
    depth_option,
    json_option,
    shared_index_options,
)
from fontshelf.config import DB_ENVVAR
from fontshelf.errors import IndexingError
from fontshelf.naming import FamilyPolicy


def _open_store(ctx: click.Context):
    from fontshelf.store import FontStore

    try:
        return FontStore(ctx.obj["db_path"])
    except IndexingError as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)


# -- CLI group --------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="fontshelf")
@click.option(
    "--db",
    "db_path",
    type=click.Path(dir_okay=False),
    envvar=DB_ENVVAR,
    default=None,
    help=f"Database file (env: {DB_ENVVAR}, default: per-user app directory)",
)
@click.option("-v", "--verbose", is_flag=True, help="Verbose output")
@click.pass_context
def cli(ctx: click.Context, db_path: str | None, verbose: bool):
    """Index local font files and browse them grouped by family."""
    if verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    ctx.ensure_object(dict)
    ctx.obj["db_path"] = Path(db_path) if db_path else default_db_path()


# -- scan ------------------------------------------------------------------------------


@cli.command()
@shared_index_options
@click.option("--prune/--no-prune", default=True, help="Drop rows whose files are gone")
@click.pass_context
def scan(ctx, roots, family_policy, workers, prune):
    """Scan font directories and index every font file found."""
    from fontshelf.indexer import FontIndexer

    root_paths = _resolve_roots(roots)
    click.echo(f"Scanning {len(root_paths)} director{'y' if len(root_paths) == 1 else 'ies'}...")

    def show_progress(count: int) -> None:
        click.echo(f"\r  Indexed {count} font(s)", nl=False)

    with _open_store(ctx) as store:
        indexer = FontIndexer(store, family_policy=FamilyPolicy(family_policy), workers=workers)
        report = indexer.scan_sync(root_paths, show_progress, prune=prune)
        families = len(store.list_families())

    if report.indexed_count:
        click.echo()
    click.secho(
        f"Done: {report.indexed_count} indexed, {report.failed_count} skipped, "
        f"{len(report.pruned)} pruned ({families} families).",
        fg="green",
    )
    if report.failed_count and not logging.getLogger().isEnabledFor(logging.INFO):
        click.secho("  Use -v to see skipped files.", fg="yellow")


# -- browse ----------------------------------------------------------------------------


@cli.command()
@click.option("--category", default=None, help="Only families in this category")
@json_option
@click.pass_context
def families(ctx, category, as_json):
    """List indexed font families."""
    with _open_store(ctx) as store:
        rows = store.list_families()
    if category:
        rows = [r for r in rows if (r.category or "").lower() == category.lower()]
    if as_json:
        _emit_json(rows)
    else:
        _print_families(rows)


@cli.command()
@click.argument("family")
@json_option
@click.pass_context
def variants(ctx, family, as_json):
    """List the variants (files) of one family, default variant first."""
    with _open_store(ctx) as store:
        rows = store.list_variants(family)
    if as_json:
        _emit_json(rows)
        return
    _print_variants(family, rows)
    if not rows:
        sys.exit(1)


@cli.command()
@click.argument("family")
@click.option("--off", is_flag=True, help="Remove the family from favorites")
@click.pass_context
def favorite(ctx, family, off):
    """Mark (or unmark) every variant of a family as favorite."""
    with _open_store(ctx) as store:
        changed = store.set_favorite(family, not off)
    if not changed:
        click.secho(f"No family named '{family}'", fg="yellow", err=True)
        sys.exit(1)
    state = "removed from" if off else "added to"
    click.secho(f"{family} {state} favorites ({changed} variant(s))", fg="green")


@cli.command()
@json_option
@click.pass_context
def favorites(ctx, as_json):
    """List favorite font families."""
    with _open_store(ctx) as store:
        rows = store.list_favorites()
    if as_json:
        _emit_json(rows)
    else:
        _print_families(rows)


@cli.command()
@click.option("--hours", type=click.IntRange(min=0), default=24, show_default=True)
@json_option
@click.pass_context
def recent(ctx, hours, as_json):
    """List font files indexed within the last HOURS hours."""
    since = int(time.time()) - hours * 3600
    with _open_store(ctx) as store:
        rows = store.list_recent(since)
    if as_json:
        _emit_json(rows)
        return
    for rec in rows:
        click.echo(f"{rec.family} {rec.subfamily}  {rec.path}")
    click.echo(f"\n{len(rows)} font file(s)")


# -- inspect ---------------------------------------------------------------------------


@cli.command()
@click.argument("font_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--family-policy",
    type=click.Choice([p.value for p in FamilyPolicy]),
    default=FamilyPolicy.LICENSE.value,
)
def inspect(font_path, family_policy):
    """Extract and categorize one font file without storing it."""
    from fontshelf.indexer import build_record

    click.echo(f"Inspecting: {font_path}\n")
    try:
        rec = build_record(font_path, FamilyPolicy(family_policy))
    except IndexingError as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)
    _print_record_summary(rec)


# -- watch -----------------------------------------------------------------------------


@cli.command()
@shared_index_options
@depth_option
@click.pass_context
def watch(ctx, roots, family_policy, workers, depth):
    """Watch font directories and re-index files as they change (Ctrl-C to stop)."""
    from fontshelf.indexer import FontIndexer
    from fontshelf.watcher import FontWatcher

    with _open_store(ctx) as store:
        indexer = FontIndexer(store, family_policy=FamilyPolicy(family_policy), workers=workers)
        watcher = FontWatcher(indexer, _resolve_roots(roots), max_depth=depth)
        watched = watcher.start()
        if not watched:
            watcher.stop()
            click.secho("No existing directories to watch.", fg="yellow", err=True)
            sys.exit(1)
        for root in watched:
            click.echo(f"Watching {root}")
        try:
            while True:
                time.sleep(1)
        except KeyboardInterrupt:
            click.echo("\nStopping watcher...")
        finally:
            watcher.stop()


# -- migrate ---------------------------------------------------------------------------


@cli.command()
@click.pass_context
def migrate(ctx):
    """Backfill categories for indexed fonts that have none."""
    from fontshelf.migration import migrate_categories

    with _open_store(ctx) as store:
        try:
            updated = migrate_categories(store)
        except IndexingError as e:
            click.secho(f"Error: {e}", fg="red", err=True)
            sys.exit(1)
    click.secho(f"Category migration complete: {updated} font(s) updated", fg="green")
