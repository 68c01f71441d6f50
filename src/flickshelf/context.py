"""Application context shared by the CLI and embedding front ends.

Everything that used to be ambient state (configuration, the store, the
loaded library, list settings, the playback tracker) is held here and passed
around explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from flickshelf.config import AppConfig, load_config
from flickshelf.errors import StateNotLoadedError
from flickshelf.playback.session import PlaybackTransport, PlayerSession
from flickshelf.playback.tracker import PlaybackTracker
from flickshelf.settings import ListSettings
from flickshelf.state.models import BaseVideo, MediaState
from flickshelf.store import LibraryLoader, LoadStatus, SnapshotStore


@dataclass
class AppContext:
    """Explicit container for one session's collaborators."""

    config: AppConfig
    store: SnapshotStore
    loader: LibraryLoader
    settings: ListSettings
    tracker: PlaybackTracker = field(default_factory=PlaybackTracker)

    @classmethod
    def from_config(cls, config: AppConfig, store_path: Path | str | None = None) -> AppContext:
        """Build a context from a loaded configuration.

        Args:
            config: The application configuration.
            store_path: Overrides the configured store directory.
        """
        root = Path(store_path) if store_path else config.store_root
        store = SnapshotStore(root, config.store.state_file)
        return cls(
            config=config,
            store=store,
            loader=LibraryLoader(store),
            settings=ListSettings(config.lists),
            tracker=PlaybackTracker(config.playback.played_threshold_ms),
        )

    @classmethod
    def create(
        cls, config_path: Path | None = None, store_path: Path | str | None = None
    ) -> AppContext:
        """Load configuration from disk and build a context from it."""
        return cls.from_config(load_config(config_path), store_path)

    @property
    def status(self) -> LoadStatus:
        return self.loader.status

    @property
    def media_state(self) -> MediaState:
        """The loaded library.

        Raises:
            StateNotLoadedError: If the load has not resolved yet.
        """
        if self.loader.status == LoadStatus.PENDING:
            raise StateNotLoadedError("The library has not finished loading")
        return self.loader.state

    async def load(self) -> MediaState:
        """Load the library from the store."""
        return await self.loader.load()

    def player(self, video: BaseVideo, transport: PlaybackTransport) -> PlayerSession:
        """Create a player session using the configured skip distances."""
        return PlayerSession(
            video,
            transport,
            resolve=self.store.resolve,
            tracker=self.tracker,
            skip_short=self.config.playback.skip_short_ms,
            skip_long=self.config.playback.skip_long_ms,
        )
