"""Command-line interface for FlickShelf."""

from __future__ import annotations

import asyncio
import locale
import sys
from pathlib import Path

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from flickshelf import __version__
from flickshelf.context import AppContext
from flickshelf.errors import FlickShelfError, get_friendly_message
from flickshelf.formatting import episode_code, format_duration, format_progress
from flickshelf.log import setup_logging
from flickshelf.ordering import ListType, Ordering, order
from flickshelf.playback import locate
from flickshelf.state.models import (
    BaseVideo,
    Episode,
    InProgress,
    MediaState,
    Movie,
    MovieLibrary,
    Played,
    Server,
    ShowLibrary,
)
from flickshelf.store import LoadStatus

# Load environment variables from .env file
load_dotenv()

console = Console()

ORDERING_CHOICES = [ordering.value for ordering in Ordering]


@click.group()
@click.version_option(version=__version__, prog_name="flickshelf")
@click.option(
    "--store",
    "store_path",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Store directory (default: from config or current directory)",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: search standard locations)",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output (only results)")
@click.pass_context
def main(
    ctx: click.Context,
    store_path: Path | None,
    config_path: Path | None,
    verbose: bool,
    quiet: bool,
) -> None:
    """FlickShelf - Browse a locally synced media library."""
    ctx.ensure_object(dict)
    try:
        # Title sorting collates with the user's locale
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error:
        pass
    ctx.obj["store_path"] = store_path
    ctx.obj["config_path"] = config_path
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet


def _get_context(ctx: click.Context) -> AppContext:
    """Build the application context and configure logging, once per run."""
    app = ctx.obj.get("app")
    if app is not None:
        return app

    try:
        app = AppContext.create(ctx.obj.get("config_path"), ctx.obj.get("store_path"))
    except ValueError as e:
        # pydantic.ValidationError is a ValueError
        console.print(f"[red]Invalid configuration:[/red] {e}")
        sys.exit(1)

    level = "ERROR" if ctx.obj.get("quiet") else app.config.logging.level
    setup_logging(
        verbose=ctx.obj.get("verbose", False),
        level=level,
        log_file=app.config.logging.file,
    )
    ctx.obj["app"] = app
    return app


def _load_library(ctx: click.Context) -> tuple[AppContext, MediaState]:
    """Load the library, exiting with a friendly message on failure."""
    app = _get_context(ctx)

    try:
        state = asyncio.run(app.load())
    except FlickShelfError as e:
        console.print(f"[red]Error:[/red] {get_friendly_message(e)}")
        sys.exit(1)

    if app.status == LoadStatus.FAILED:
        error = app.loader.error
        message = get_friendly_message(error) if error else "unknown error"
        console.print(f"[red]Could not load library:[/red] {message}")
        sys.exit(1)

    return app, state


def _get_server(state: MediaState, server_id: str) -> Server:
    server = state.server(server_id)
    if server is None:
        console.print(f"[red]Unknown server:[/red] {server_id}")
        sys.exit(1)
    return server


def _progress_text(video: BaseVideo) -> str:
    """Describe a video's playback state for a table cell."""
    state = video.playback_state
    if isinstance(state, Played):
        return "[green]watched[/green]"
    if isinstance(state, InProgress):
        return format_progress(state.position, video.total_duration)
    return ""


def _download_text(video: BaseVideo) -> str:
    downloaded = sum(1 for part in video.parts if part.is_downloaded)
    if downloaded == len(video.parts):
        return "[green]✓[/green]"
    return f"[yellow]{downloaded}/{len(video.parts)}[/yellow]"


def _video_table(videos: list, server: Server, show_codes: bool = False) -> Table:
    table = Table(show_header=True, header_style="dim", box=None, padding=(0, 2))
    if show_codes:
        table.add_column("Ep", style="cyan")
    table.add_column("Title")
    table.add_column("Aired", style="dim")
    table.add_column("Duration", justify="right")
    table.add_column("Progress")
    table.add_column("Local")

    for video in videos:
        row = []
        if show_codes:
            season = server.season_of(video) if isinstance(video, Episode) else None
            row.append(episode_code(season.index, video.index) if season else "")
        row.extend(
            [
                video.title,
                video.air_date or "",
                format_duration(video.total_duration),
                _progress_text(video),
                _download_text(video),
            ]
        )
        table.add_row(*row)
    return table


@main.command()
@click.pass_context
def servers(ctx: click.Context) -> None:
    """List the servers in the library."""
    _, state = _load_library(ctx)

    if state.is_empty:
        console.print("[dim]The library is empty.[/dim]")
        return

    table = Table(show_header=True, header_style="dim", box=None, padding=(0, 2))
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Libraries", justify="right")
    table.add_column("Playlists", justify="right")
    table.add_column("Duration", justify="right")

    for server in state.servers.values():
        table.add_row(
            server.id,
            server.name,
            str(len(server.libraries)),
            str(len(server.playlists)),
            format_duration(server.duration(server)),
        )
    console.print(table)


@main.command()
@click.argument("server_id")
@click.argument("library_id", required=False)
@click.option(
    "--ordering",
    "-o",
    type=click.Choice(ORDERING_CHOICES),
    default=None,
    help="Sort order (default: saved list setting)",
)
@click.pass_context
def browse(
    ctx: click.Context, server_id: str, library_id: str | None, ordering: str | None
) -> None:
    """Browse a server, or the contents of one of its libraries."""
    app, state = _load_library(ctx)
    server = _get_server(state, server_id)
    quiet = ctx.obj.get("quiet", False)

    if library_id is None:
        if not quiet:
            console.print(f"[bold blue]{server.name}[/bold blue]")
            console.print()
        table = Table(show_header=True, header_style="dim", box=None, padding=(0, 2))
        table.add_column("ID", style="cyan")
        table.add_column("Title")
        table.add_column("Kind")
        table.add_column("Items", justify="right")
        table.add_column("Duration", justify="right")
        for library in server.libraries:
            count = len(library.shows) if isinstance(library, ShowLibrary) else len(library.movies)
            table.add_row(
                library.id,
                library.title,
                library.kind,
                str(count),
                format_duration(server.duration(library)),
            )
        for playlist in server.playlists:
            table.add_row(
                playlist.id,
                playlist.title,
                "playlist",
                str(len(server.playlist_videos(playlist))),
                format_duration(server.duration(playlist)),
            )
        console.print(table)
        return

    library = server.library(library_id)
    if library is None:
        console.print(f"[red]Unknown library:[/red] {library_id}")
        sys.exit(1)

    list_type = ListType.SHOW if isinstance(library, ShowLibrary) else ListType.MOVIE
    setting = app.settings.setting_for(library.id, list_type)
    chosen = Ordering(ordering) if ordering else setting.ordering

    if not quiet:
        console.print(f"[bold blue]{library.title}[/bold blue] [dim]({chosen.value})[/dim]")
        console.print()

    if isinstance(library, MovieLibrary):
        console.print(_video_table(order(library.movies, chosen), server))
    else:
        table = Table(show_header=True, header_style="dim", box=None, padding=(0, 2))
        table.add_column("ID", style="cyan")
        table.add_column("Title")
        table.add_column("Seasons", justify="right")
        table.add_column("Episodes", justify="right")
        table.add_column("Duration", justify="right")
        for entry in order(library.shows, chosen):
            table.add_row(
                entry.id,
                entry.title,
                str(len(entry.seasons)),
                str(entry.episode_count),
                format_duration(server.duration(entry)),
            )
        console.print(table)

    if library.collections and not quiet:
        collection_setting = app.settings.setting_for(
            f"{library.id}.collections", ListType.COLLECTION
        )
        console.print()
        console.print("[bold]Collections:[/bold]")
        for collection in order(library.collections, collection_setting.ordering):
            contents = server.collection_contents(collection)
            console.print(
                f"  {collection.title} [dim]({len(contents)} items, "
                f"{format_duration(server.duration(collection))})[/dim]"
            )


@main.command()
@click.argument("server_id")
@click.argument("show_id")
@click.pass_context
def show(ctx: click.Context, server_id: str, show_id: str) -> None:
    """List the episodes of a show, season by season."""
    app, state = _load_library(ctx)
    server = _get_server(state, server_id)

    item = server.show(show_id)
    if item is None:
        console.print(f"[red]Unknown show:[/red] {show_id}")
        sys.exit(1)

    console.print(f"[bold blue]{item.title}[/bold blue]")
    for season in item.seasons:
        setting = app.settings.setting_for(season.id, ListType.EPISODE)
        console.print()
        console.print(
            f"[bold]{season.title}[/bold] "
            f"[dim]({len(season.episodes)} episodes, {format_duration(server.duration(season))})[/dim]"
        )
        console.print(_video_table(order(season.episodes, setting.ordering), server, True))


@main.command()
@click.argument("server_id")
@click.argument("playlist_id")
@click.pass_context
def playlist(ctx: click.Context, server_id: str, playlist_id: str) -> None:
    """List the videos in a playlist."""
    app, state = _load_library(ctx)
    server = _get_server(state, server_id)

    item = server.playlist(playlist_id)
    if item is None:
        console.print(f"[red]Unknown playlist:[/red] {playlist_id}")
        sys.exit(1)

    setting = app.settings.setting_for(item.id, ListType.PLAYLIST_ITEM)
    videos = server.playlist_videos(item)
    console.print(
        f"[bold blue]{item.title}[/bold blue] "
        f"[dim]({len(videos)} videos, {format_duration(server.duration(item))})[/dim]"
    )
    console.print(_video_table(order(videos, setting.ordering), server, True))


@main.command(name="locate")
@click.argument("server_id")
@click.argument("video_id")
@click.argument("position", type=int)
@click.pass_context
def locate_command(ctx: click.Context, server_id: str, video_id: str, position: int) -> None:
    """Find which part of a video holds POSITION (milliseconds)."""
    _, state = _load_library(ctx)
    server = _get_server(state, server_id)

    video = server.video(video_id)
    if video is None:
        console.print(f"[red]Unknown video:[/red] {video_id}")
        sys.exit(1)

    part_index, offset = locate(video.part_durations, position)
    part = video.parts[part_index]

    kind = "Movie" if isinstance(video, Movie) else "Episode"
    console.print(f"[bold]{kind}:[/bold] {video.title}")
    console.print(f"  Total: {format_duration(video.total_duration)} ({len(video.parts)} parts)")
    console.print(f"  Part: {part_index + 1}")
    console.print(f"  Offset: {offset} ms ({format_duration(offset)})")
    if part.is_downloaded:
        console.print("  [green]Downloaded[/green]")
    else:
        console.print("  [yellow]Not downloaded[/yellow]")


@main.command()
@click.pass_context
def verify(ctx: click.Context) -> None:
    """Check that downloaded files are present in the store."""
    from flickshelf.validation import print_verification, verify_store

    app, state = _load_library(ctx)
    result = verify_store(state, app.store)
    print_verification(result, console)
    if not result.all_ok:
        sys.exit(1)


@main.group()
def config() -> None:
    """Manage FlickShelf configuration."""
    pass


@config.command(name="show")
@click.pass_context
def config_show(ctx: click.Context) -> None:
    """Show current configuration."""
    app = _get_context(ctx)
    cfg = app.config

    console.print("[bold]Current Configuration[/bold]")
    console.print()

    if cfg.source:
        console.print(f"[dim]Config file:[/dim] {cfg.source}")
    else:
        console.print("[dim]Config file:[/dim] (none - using defaults)")
    console.print()

    console.print("[bold]Store:[/bold]")
    console.print(f"  Path: {app.store.root}")
    console.print(f"  State file: {cfg.store.state_file}")
    console.print()

    console.print("[bold]Playback:[/bold]")
    console.print(f"  Short skip: {cfg.playback.skip_short_ms} ms")
    console.print(f"  Long skip: {cfg.playback.skip_long_ms} ms")
    console.print(f"  Played threshold: {cfg.playback.played_threshold_ms} ms")
    console.print()

    console.print("[bold]Lists:[/bold]")
    if cfg.lists:
        for list_id, setting in cfg.lists.items():
            console.print(f"  {list_id}: {setting.display.value}, {setting.ordering.value}")
    else:
        console.print("  (none)")


@config.command(name="path")
def config_path() -> None:
    """Show configuration file paths."""
    from flickshelf.config import find_config_file, get_config_paths

    console.print("[bold]Configuration paths (in priority order):[/bold]")
    config_file = find_config_file()

    for path in get_config_paths():
        if path.exists():
            if path == config_file:
                console.print(f"  [green]{path}[/green] (active)")
            else:
                console.print(f"  {path} (exists)")
        else:
            console.print(f"  [dim]{path}[/dim]")

    console.print()
    console.print("[bold]Other paths:[/bold]")
    console.print(f"  .env file: {Path.cwd() / '.env'}")


@config.command(name="init")
@click.option("--force", is_flag=True, help="Overwrite existing config file")
@click.option(
    "--path",
    "target",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Where to write (default: ./flickshelf.ini)",
)
def config_init(force: bool, target: Path | None) -> None:
    """Create a default configuration file."""
    from flickshelf.config import save_default_config

    config_file = target or Path.cwd() / "flickshelf.ini"

    if config_file.exists() and not force:
        console.print(f"[yellow]Config file already exists:[/yellow] {config_file}")
        console.print("Use --force to overwrite.")
        sys.exit(1)

    save_default_config(config_file)
    console.print(f"[green]Created config file:[/green] {config_file}")
    console.print("Edit this file to customize your settings.")


if __name__ == "__main__":
    main()
