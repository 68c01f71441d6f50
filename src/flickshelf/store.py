"""Access to the local store and asynchronous loading of its snapshot."""

from __future__ import annotations

import asyncio
import logging
from enum import Enum, auto
from pathlib import Path

from flickshelf.errors import DecodeError, StateNotLoadedError, StorePermissionError
from flickshelf.state import STATE_FILE, decode_bytes
from flickshelf.state.models import MediaState

logger = logging.getLogger(__name__)


class SnapshotStore:
    """A directory holding downloaded media and the snapshot file."""

    def __init__(self, root: Path | str, state_file: str = STATE_FILE) -> None:
        self.root = Path(root)
        self.state_file = state_file

    @property
    def state_path(self) -> Path:
        return self.root / self.state_file

    def path(self, relative: str) -> Path:
        """Get the filesystem path of a store-relative path."""
        return self.root / relative

    def resolve(self, relative: str) -> str:
        """Turn a store-relative path into an absolute locator for a player."""
        return str(self.path(relative).absolute())

    def read_bytes(self, relative: str | None = None) -> bytes:
        """Read a file from the store.

        Args:
            relative: Store-relative path. Defaults to the snapshot file.

        Returns:
            The file contents.

        Raises:
            StorePermissionError: If the store cannot be read.
            OSError: If the file is missing or cannot be read for another reason.
        """
        target = self.state_path if relative is None else self.path(relative)
        try:
            return target.read_bytes()
        except PermissionError as e:
            raise StorePermissionError(f"Cannot read {target}: {e.strerror or e}") from e

    def load(self) -> MediaState:
        """Read and decode the snapshot synchronously."""
        return decode_bytes(self.read_bytes())


class LoadStatus(Enum):
    """Progress of the initial library load."""

    PENDING = auto()
    LOADED = auto()
    FAILED = auto()


class LibraryLoader:
    """Loads the media state once per session without blocking the event loop.

    Until the load resolves the status is PENDING and asking for the state
    raises StateNotLoadedError. A failed load leaves an explicitly empty
    state together with the error that caused it.
    """

    def __init__(self, store: SnapshotStore) -> None:
        self.store = store
        self.status = LoadStatus.PENDING
        self.error: BaseException | None = None
        self._state: MediaState | None = None
        self._generation = 0
        self._task: asyncio.Task[MediaState | None] | None = None

    @property
    def state(self) -> MediaState:
        """The loaded media state.

        Raises:
            StateNotLoadedError: If the load has not finished.
        """
        if self.status == LoadStatus.PENDING or self._state is None:
            raise StateNotLoadedError("The library has not finished loading")
        return self._state

    def start(self) -> asyncio.Task[MediaState | None]:
        """Start loading, superseding any load already in flight.

        Must be called from a running event loop.

        Returns:
            The task performing the load.
        """
        self._generation += 1
        if self._task is not None and not self._task.done():
            logger.debug("Cancelling superseded load")
            self._task.cancel()

        self.status = LoadStatus.PENDING
        self.error = None
        self._state = None
        self._task = asyncio.create_task(self._load(self._generation))
        return self._task

    async def load(self) -> MediaState:
        """Start a load and wait for it to resolve.

        Raises:
            StorePermissionError: If the store cannot be read.
        """
        await self.start()
        return self.state

    async def _load(self, generation: int) -> MediaState | None:
        try:
            data = await asyncio.to_thread(self.store.read_bytes)
            state = decode_bytes(data)
        except StorePermissionError as e:
            if generation == self._generation:
                self._fail(e)
            raise
        except (DecodeError, OSError) as e:
            if generation != self._generation:
                return None
            self._fail(e)
            return self._state
        except Exception as e:
            if generation == self._generation:
                self._fail(e)
            raise

        if generation != self._generation:
            logger.debug("Discarding result of superseded load %d", generation)
            return None

        self.status = LoadStatus.LOADED
        self._state = state
        logger.info("Loaded %d server(s) from %s", len(state.servers), self.store.state_path)
        return state

    def _fail(self, error: BaseException) -> None:
        logger.error("Failed to load library from %s: %s", self.store.state_path, error)
        self.status = LoadStatus.FAILED
        self.error = error
        self._state = MediaState.empty()
