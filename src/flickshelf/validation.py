"""Verification of downloaded files in the store."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from rich.console import Console

from flickshelf.state.models import DownloadedThumbnail, MediaState
from flickshelf.store import SnapshotStore

logger = logging.getLogger(__name__)


@dataclass
class MissingFile:
    """A file the snapshot says is downloaded but the store lacks."""

    server_id: str
    item_id: str
    path: str
    kind: str  # "part" or "thumbnail"
    part_index: int | None = None
    reason: str = "missing"


@dataclass
class VerificationResult:
    """Result of checking the store against the snapshot."""

    checked_parts: int = 0
    checked_thumbnails: int = 0
    missing: list[MissingFile] = field(default_factory=list)

    @property
    def all_ok(self) -> bool:
        """Check if every downloaded file was found."""
        return not self.missing

    @property
    def missing_parts(self) -> list[MissingFile]:
        return [entry for entry in self.missing if entry.kind == "part"]

    @property
    def missing_thumbnails(self) -> list[MissingFile]:
        return [entry for entry in self.missing if entry.kind == "thumbnail"]


def _check_file(store: SnapshotStore, path: str) -> str | None:
    """Get the problem with a store file, or None if it is usable."""
    target = store.path(path)
    if not target.exists():
        return "missing"
    if not target.is_file():
        return "not a file"
    return None


def verify_store(state: MediaState, store: SnapshotStore) -> VerificationResult:
    """Check that every downloaded part and thumbnail exists in the store.

    The media state is not modified; callers decide what to do with files
    that have gone missing.

    Args:
        state: The decoded media state.
        store: The store the snapshot was read from.

    Returns:
        VerificationResult listing every problem found.
    """
    result = VerificationResult()

    for server in state.servers.values():
        thumbnailed: list[tuple[str, object]] = []
        for library in server.libraries:
            thumbnailed.extend((c.id, c.thumbnail) for c in library.collections)
        thumbnailed.extend((show.id, show.thumbnail) for show in server.shows())

        for video in server.videos():
            thumbnailed.append((video.id, video.thumbnail))
            for index, part in enumerate(video.parts):
                if part.path is None:
                    continue
                result.checked_parts += 1
                problem = _check_file(store, part.path)
                if problem:
                    result.missing.append(
                        MissingFile(server.id, video.id, part.path, "part", index, problem)
                    )

        for item_id, thumbnail in thumbnailed:
            if not isinstance(thumbnail, DownloadedThumbnail):
                continue
            result.checked_thumbnails += 1
            problem = _check_file(store, thumbnail.path)
            if problem:
                result.missing.append(
                    MissingFile(server.id, item_id, thumbnail.path, "thumbnail", reason=problem)
                )

    if result.missing:
        logger.warning("%d downloaded file(s) missing from %s", len(result.missing), store.root)
    return result


def print_verification(result: VerificationResult, console: Console | None = None) -> None:
    """Print a verification result with Rich console output."""
    console = console or Console()

    console.print("[bold]Verifying Store[/bold]")
    console.print()
    console.print(
        f"Checked {result.checked_parts} part(s) and {result.checked_thumbnails} thumbnail(s)"
    )

    if result.all_ok:
        console.print("[green]All downloaded files are present.[/green]")
        return

    for entry in result.missing:
        label = entry.item_id
        if entry.part_index is not None:
            label = f"{label} part {entry.part_index + 1}"
        console.print(f"  [red]✗[/red] {entry.server_id}/{label}: {entry.path} ({entry.reason})")

    console.print()
    console.print(f"[yellow]{len(result.missing)} file(s) need to be downloaded again.[/yellow]")
