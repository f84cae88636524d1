"""CLI helper functions, decorators, and option definitions for fontshelf."""

from __future__ import annotations

import json
from pathlib import Path

import click

from fontshelf.config import APP_NAME, DB_FILENAME, DEFAULT_WATCH_DEPTH, DEFAULT_WORKERS
from fontshelf.naming import FamilyPolicy
from fontshelf.schema import FontFamily, FontRecord


def default_db_path() -> Path:
    """Per-user database location, e.g. ~/.config/fontshelf/fonts.db on Linux."""
    return Path(click.get_app_dir(APP_NAME)) / DB_FILENAME


def shared_index_options(func):
    """Decorator that adds the options shared by commands that index fonts."""
    options = [
        click.option(
            "--root",
            "roots",
            multiple=True,
            type=click.Path(file_okay=False),
            help="Font directory to index (repeatable, default: system font directories)",
        ),
        click.option(
            "--family-policy",
            type=click.Choice([p.value for p in FamilyPolicy]),
            default=FamilyPolicy.LICENSE.value,
            show_default=True,
            help="license: strip license qualifiers; style-words: also strip weight/style words",
        ),
        click.option(
            "--workers",
            type=click.IntRange(min=1),
            default=DEFAULT_WORKERS,
            show_default=True,
            help="Files indexed concurrently",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def depth_option(func):
    return click.option(
        "--depth",
        type=click.IntRange(min=0),
        default=DEFAULT_WATCH_DEPTH,
        show_default=True,
        help="Ignore events nested deeper than this below a root",
    )(func)


def json_option(func):
    return click.option("--json", "as_json", is_flag=True, help="Print JSON instead of a table")(func)


def _resolve_roots(roots: tuple[str, ...]) -> list[Path]:
    """Explicit --root values, or the platform's standard font directories."""
    if roots:
        return [Path(r) for r in roots]
    from fontshelf.directories import system_font_directories

    return system_font_directories()


def _emit_json(items: list[FontFamily] | list[FontRecord]) -> None:
    click.echo(json.dumps([item.model_dump(mode="json") for item in items], indent=2, ensure_ascii=False))


def _print_families(families: list[FontFamily]) -> None:
    """Print one line per family: name, variant count, category."""
    if not families:
        click.secho("No fonts indexed yet. Run 'fontshelf scan' first.", fg="yellow")
        return
    for fam in families:
        star = click.style("*", fg="yellow") if fam.is_favorite else " "
        category = f"{fam.category or '?'} / {fam.subcategory or '?'}"
        click.echo(f"{star} {fam.family}  ({fam.variant_count} variant(s))  [{category}]")
    click.echo(f"\n{len(families)} famil{'y' if len(families) == 1 else 'ies'}")


def _print_variants(family: str, variants: list[FontRecord]) -> None:
    if not variants:
        click.secho(f"No variants found for family '{family}'", fg="yellow")
        return
    click.echo(f"{family}:")
    for rec in variants:
        flags = [f"w{rec.weight}"]
        if rec.italic:
            flags.append("italic")
        if rec.monospace:
            flags.append("mono")
        click.echo(f"  {rec.subfamily or '(none)'}  ({', '.join(flags)})  {rec.path}")


def _print_record_summary(rec: FontRecord) -> None:
    """Print the extracted identity of one font file."""
    click.echo(f"  Family:     {rec.family or '(unknown)'}")
    click.echo(f"  Subfamily:  {rec.subfamily or '(unknown)'}")
    click.echo(f"  Full name:  {rec.full_name or '(unknown)'}")
    click.echo(f"  PostScript: {rec.postscript_name or '(unknown)'}")
    click.echo(f"  Weight:     {rec.weight}  Width: {rec.width}")
    click.echo(f"  Italic:     {'yes' if rec.italic else 'no'}  Monospace: {'yes' if rec.monospace else 'no'}")
    click.echo(f"  Category:   {rec.category} / {rec.subcategory}")
    click.echo(f"  Version:    {rec.version or '(unknown)'}")
    click.echo(f"  Glyphs:     {rec.metrics.glyph_count}  UPM: {rec.metrics.units_per_em or '?'}")
    click.echo(f"  Characters: {len(rec.metrics.character_set)}")
    features = ", ".join(rec.metrics.features) or "(none)"
    click.echo(f"  Features:   {features}")
    click.echo(f"  SHA-256:    {rec.file_hash}")
