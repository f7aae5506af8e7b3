"""CLI for the lookup history.

Commands:
- list: Show stored entries in storage order
- search: Hybrid search (source:/target: operators + fuzzy text)
- show: Print one entry as JSON
- add: Record a translation from a JSON file
- pin: Toggle the pin of an entry
- remove: Delete one or more entries
- clear: Delete the whole history
- stats: Source/target language distribution
- usage: Entry count and stored size
"""

import asyncio
from pathlib import Path
from typing import Optional

import click
import orjson
from rich.console import Console
from rich.table import Table

from lexhistory.config import get_settings
from lexhistory.core import HistoryEntry, LanguageStat
from lexhistory.errors import EntryNotFoundError, HistoryError
from lexhistory.observ import get_logger, set_context_id
from lexhistory.services import HistoryService, display_text

logger = get_logger(__name__)
console = Console()


def _service(ctx: click.Context) -> HistoryService:
    return ctx.obj["service"]


def _entries_table(entries: list[HistoryEntry], scores: Optional[list[float]] = None) -> Table:
    table = Table(show_lines=False)
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Pin")
    table.add_column("Languages")
    table.add_column("Text", style="bold")
    table.add_column("Detail")
    table.add_column("Saved")
    if scores is not None:
        table.add_column("Score", justify="right")

    for index, entry in enumerate(entries):
        primary, secondary = display_text(entry)
        translation = entry.translation
        row = [
            entry.id,
            "📌" if entry.is_pinned else "",
            f"{translation.source_language_code} → {translation.translated_language_code}",
            primary,
            secondary,
            entry.timestamp.strftime("%Y-%m-%d %H:%M"),
        ]
        if scores is not None:
            row.append(f"{scores[index]:.2f}")
        table.add_row(*row)
    return table


def _stats_table(title: str, stats: list[LanguageStat]) -> Table:
    table = Table(title=title)
    table.add_column("Code")
    table.add_column("Count", justify="right")
    table.add_column("Share", justify="right")
    for stat in stats:
        table.add_row(stat.code, str(stat.count), f"{stat.percentage:.1f}%")
    return table


@click.group()
@click.option('--backend', type=click.Choice(['memory', 'file', 'redis']), default=None,
              help='Override the configured storage backend')
@click.option('--data-dir', type=click.Path(file_okay=False, path_type=Path), default=None,
              help='Directory for the file backend')
@click.pass_context
def cli(ctx, backend, data_dir):
    """Translation lookup history"""
    set_context_id("cli")
    overrides = {}
    if backend:
        overrides["storage_backend"] = backend
    if data_dir:
        overrides["data_dir"] = data_dir
    settings = get_settings().model_copy(update=overrides)

    ctx.ensure_object(dict)
    ctx.obj["service"] = HistoryService.from_settings(settings)


@cli.command(name="list")
@click.pass_context
def list_entries(ctx):
    """Show all entries, pinned first."""
    entries = asyncio.run(_service(ctx).list_entries())
    if not entries:
        click.echo("History is empty.")
        return
    console.print(_entries_table(entries))


@cli.command()
@click.argument('query', nargs=-1)
@click.option('--scores', is_flag=True, help='Show similarity scores')
@click.pass_context
def search(ctx, query, scores):
    """Search the history, e.g. `search source:en target:vi run`."""
    text = " ".join(query)
    hits = asyncio.run(_service(ctx).search_scored(text))
    if not hits:
        click.echo("No matching entries.")
        return
    console.print(_entries_table(
        [hit.entry for hit in hits],
        [hit.score for hit in hits] if scores else None,
    ))


@cli.command()
@click.argument('entry_id')
@click.pass_context
def show(ctx, entry_id):
    """Print one entry as JSON."""
    entry = asyncio.run(_service(ctx).get(entry_id))
    if entry is None:
        raise click.ClickException(EntryNotFoundError(entry_id).message)
    click.echo(orjson.dumps(
        entry.model_dump(mode="json", exclude_none=True),
        option=orjson.OPT_INDENT_2,
    ).decode())


@cli.command()
@click.argument('translation_file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def add(ctx, translation_file):
    """Record a translation read from a JSON file."""
    try:
        payload = orjson.loads(translation_file.read_bytes())
        entry = asyncio.run(_service(ctx).save(payload))
    except orjson.JSONDecodeError as e:
        raise click.ClickException(f"{translation_file}: not valid JSON ({e})")
    except HistoryError as e:
        raise click.ClickException(e.message)

    if entry is None:
        raise click.ClickException("Could not write to history storage (see log).")
    click.echo(entry.id)


@cli.command()
@click.argument('entry_id')
@click.pass_context
def pin(ctx, entry_id):
    """Pin or unpin an entry."""
    service = _service(ctx)

    async def _toggle():
        entry = await service.toggle_pin(entry_id)
        if entry is None and await service.get(entry_id) is None:
            raise EntryNotFoundError(entry_id)
        return entry

    try:
        entry = asyncio.run(_toggle())
    except EntryNotFoundError as e:
        raise click.ClickException(e.message)
    if entry is None:
        raise click.ClickException("Could not write to history storage (see log).")

    state = "pinned" if entry.is_pinned else "unpinned"
    click.echo(f"{entry_id} {state}")


@cli.command()
@click.argument('entry_ids', nargs=-1, required=True)
@click.pass_context
def remove(ctx, entry_ids):
    """Delete entries by id."""
    asyncio.run(_service(ctx).remove_many(entry_ids))
    click.echo(f"Removed {len(set(entry_ids))} id(s).")


@cli.command()
@click.confirmation_option(prompt='Delete the whole history?')
@click.pass_context
def clear(ctx):
    """Delete the whole history."""
    asyncio.run(_service(ctx).clear())
    click.echo("History cleared.")


@cli.command()
@click.pass_context
def stats(ctx):
    """Show source/target language distribution."""
    analysis = asyncio.run(_service(ctx).analyze())
    if analysis.total_entries == 0:
        click.echo("History is empty.")
        return
    click.echo(f"Total entries: {analysis.total_entries}")
    console.print(_stats_table("Source languages", analysis.source_languages))
    console.print(_stats_table("Target languages", analysis.target_languages))


@cli.command()
@click.pass_context
def usage(ctx):
    """Show entry count and stored size."""
    report = asyncio.run(_service(ctx).usage())
    if report is None:
        click.echo("History is empty.")
        return
    click.echo(f"Entries: {report.entry_count}")
    click.echo(f"Size: {report.size_value} {report.size_unit} ({report.size_bytes} bytes)")
    click.echo(f"Stored: {report.stored_bytes} bytes")


if __name__ == '__main__':
    cli()
