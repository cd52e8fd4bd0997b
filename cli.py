#!/usr/bin/env python3
"""
Leaflet Notes CLI.

Primary entry point for working with the note store from a terminal.
Use --action to select the operation.

Usage:
    python cli.py --help
    python cli.py --action list --category important
    python cli.py --action show --id 3f2a...
    python cli.py --action save --title "Grocery List" --tag personal --tag shopping
    python cli.py --action save --id 3f2a... --content "Milk, eggs" --important
    python cli.py --action delete --id 3f2a...
    python cli.py --action search --query grocery
    python cli.py --action config
"""

import asyncio
import sys
from pathlib import Path

import click
import structlog
from rich.console import Console
from rich.table import Table

PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from leaflet.core.exceptions import ApplicationError
from leaflet.core.logging import get_logger, setup_logging
from leaflet.repositories.notes import NotesRepository
from leaflet.schemas.note import Note
from leaflet.services.filtering import NoteCategory, filter_notes


def validate_project_root() -> Path:
    """Validate that we're running from the project root."""
    if not (PROJECT_ROOT / ".project_root").exists():
        click.echo(
            click.style("Error: .project_root not found. Run from project root.", fg="red"),
            err=True,
        )
        sys.exit(1)
    return PROJECT_ROOT


@click.command()
@click.option(
    "--action", "-a",
    type=click.Choice(["list", "show", "save", "delete", "search", "config"]),
    default="list",
    help="Operation to perform.",
)
@click.option("--id", "note_id", default=None, help="Note ID (show, save, delete).")
@click.option("--title", default=None, help="Note title (save).")
@click.option("--content", default=None, help="Note content (save).")
@click.option("--tag", "tags", multiple=True, help="Tag to add; repeatable (save).")
@click.option("--important/--not-important", default=None, help="Important flag (save).")
@click.option("--archived/--not-archived", default=None, help="Archived flag (save).")
@click.option("--query", "-q", default="", help="Search text (search).")
@click.option(
    "--category",
    type=click.Choice([c.value for c in NoteCategory]),
    default=NoteCategory.ALL.value,
    help="Category filter (list).",
)
@click.option(
    "--database-url",
    default=None,
    help="Override the record store URL from database.yaml.",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable verbose output (INFO level logging).",
)
@click.option(
    "--debug", "-d",
    is_flag=True,
    help="Enable debug output (DEBUG level logging).",
)
def main(
    action: str,
    note_id: str | None,
    title: str | None,
    content: str | None,
    tags: tuple[str, ...],
    important: bool | None,
    archived: bool | None,
    query: str,
    category: str,
    database_url: str | None,
    verbose: bool,
    debug: bool,
) -> None:
    """
    Leaflet Notes CLI.

    Use --action to select the operation. save creates a note when --id
    is omitted or unknown, and edits the existing note otherwise.

    \b
    Examples:
        python cli.py --action list
        python cli.py --action list --category recent
        python cli.py --action show --id NOTE_ID
        python cli.py --action save --title "Meeting Notes" --tag work
        python cli.py --action save --id NOTE_ID --archived
        python cli.py --action delete --id NOTE_ID
        python cli.py --action search --query meeting
        python cli.py --action config
    """
    validate_project_root()

    if debug:
        log_level = "DEBUG"
    elif verbose:
        log_level = "INFO"
    else:
        log_level = "WARNING"

    setup_logging(level=log_level, format_type="console")

    structlog.contextvars.bind_contextvars(source="cli")

    logger = get_logger(__name__)

    logger.debug("CLI invoked", extra={"action": action, "log_level": log_level})

    if action == "config":
        show_config(logger)
        return

    if action in {"show", "delete"} and not note_id:
        raise click.UsageError(f"--id is required for --action {action}.")

    try:
        asyncio.run(
            _dispatch(
                logger,
                action,
                database_url=database_url,
                note_id=note_id,
                title=title,
                content=content,
                tags=tags,
                important=important,
                archived=archived,
                query=query,
                category=NoteCategory(category),
            )
        )
    except ApplicationError as e:
        logger.error("Command failed", extra={"action": action, "code": e.code, "error": e.message})
        raise click.ClickException(e.message) from e


async def _dispatch(logger, action: str, database_url: str | None, **options) -> None:
    """Open the record store, run one action against the repository, close the store."""
    from leaflet.core.database import (
        build_engine,
        dispose_engine,
        get_engine,
        init_database,
        make_session_factory,
    )
    from leaflet.core.dependencies import build_notes_repository

    engine = build_engine(database_url) if database_url else get_engine()
    try:
        await init_database(engine)
        repository = build_notes_repository(session_factory=make_session_factory(engine))

        if action == "list":
            await list_notes(repository, options["category"])
        elif action == "show":
            await show_note(repository, options["note_id"])
        elif action == "save":
            await save_note(logger, repository, **options)
        elif action == "delete":
            await delete_note(repository, options["note_id"])
        elif action == "search":
            await search_notes(repository, options["query"])
    finally:
        if database_url:
            await engine.dispose()
        else:
            await dispose_engine()


def _notes_table(title: str, notes: list[Note]) -> Table:
    table = Table(title=title)
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Title", style="cyan")
    table.add_column("Tags")
    table.add_column("Flags")
    table.add_column("Updated")

    for note in notes:
        flags = " ".join(
            flag for flag, on in (("important", note.is_important), ("archived", note.is_archived)) if on
        )
        table.add_row(
            note.id,
            note.title or "(untitled)",
            ", ".join(note.tags),
            flags,
            note.updated_at.strftime("%Y-%m-%d %H:%M"),
        )
    return table


async def list_notes(repository: NotesRepository, category: NoteCategory) -> None:
    """List notes in a category."""
    notes = filter_notes(await repository.fetch_notes(), category=category)
    if not notes:
        click.echo("No notes.")
        return
    Console().print(_notes_table(f"Notes ({category.value})", notes))


async def show_note(repository: NotesRepository, note_id: str) -> None:
    """Print a single note."""
    note = await repository.fetch_note(note_id)
    if note is None:
        raise click.ClickException(f"Note not found: {note_id}")

    click.echo(f"ID:        {note.id}")
    click.echo(f"Title:     {note.title}")
    click.echo(f"Tags:      {', '.join(note.tags) if note.tags else 'No tags'}")
    click.echo(f"Important: {'yes' if note.is_important else 'no'}")
    click.echo(f"Archived:  {'yes' if note.is_archived else 'no'}")
    click.echo(f"Created:   {note.created_at:%Y-%m-%d %H:%M}")
    click.echo(f"Updated:   {note.updated_at:%Y-%m-%d %H:%M}")
    click.echo(f"Words:     {note.word_count}")
    click.echo("")
    click.echo(note.content)


async def save_note(
    logger,
    repository: NotesRepository,
    note_id: str | None,
    title: str | None,
    content: str | None,
    tags: tuple[str, ...],
    important: bool | None,
    archived: bool | None,
    **_: object,
) -> None:
    """Create a note, or edit an existing one when its ID is known."""
    existing = await repository.fetch_note(note_id) if note_id else None

    changes: dict[str, object] = {}
    if title is not None:
        changes["title"] = title
    if content is not None:
        changes["content"] = content
    if important is not None:
        changes["is_important"] = important
    if archived is not None:
        changes["is_archived"] = archived

    if existing is None:
        fields = dict(changes)
        if note_id:
            fields["id"] = note_id
        note = Note.create(**fields)
    else:
        note = existing.touched(**changes)

    for tag in tags:
        if not note.is_valid_tag(tag):
            logger.warning("Skipping invalid tag", extra={"tag": tag})
            continue
        note = note.with_tag(tag)

    if not note.title.strip():
        raise click.ClickException("A note needs a non-empty --title.")

    saved = await repository.save_note(note)
    click.echo(f"Saved note {saved.id}")


async def delete_note(repository: NotesRepository, note_id: str) -> None:
    """Delete a note by ID."""
    if await repository.delete_note(note_id):
        click.echo(f"Deleted note {note_id}")
    else:
        click.echo(f"No note with ID {note_id}")


async def search_notes(repository: NotesRepository, query: str) -> None:
    """Search notes by title, content or tag."""
    notes = await repository.search_notes(query)
    if not notes:
        click.echo("No matching notes.")
        return
    Console().print(_notes_table(f"Search: {query!r}", notes))


def show_config(logger) -> None:
    """Display effective configuration from the YAML files."""
    from leaflet.core.config import get_app_config, get_database_url

    try:
        config = get_app_config()
    except (ApplicationError, FileNotFoundError) as e:
        logger.error("Failed to load configuration.", extra={"error": str(e)})
        raise click.ClickException(f"Could not load configuration: {e}") from e

    app = config.application
    console = Console()

    table = Table(title="Application Settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_row("Name", app.name)
    table.add_row("Version", app.version)
    table.add_row("Environment", app.environment)
    table.add_row("Database", get_database_url())
    table.add_row("Remote enabled", str(app.remote.enabled))
    table.add_row("Log level", config.logging.level)
    console.print(table)


if __name__ == "__main__":
    main()
