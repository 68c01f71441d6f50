"""Runtime aggregation over the media graph."""

from __future__ import annotations

from typing import TYPE_CHECKING

from flickshelf.state.models import (
    Episode,
    Movie,
    MovieCollection,
    MovieLibrary,
    Playlist,
    Season,
    Show,
    ShowCollection,
    ShowLibrary,
)

if TYPE_CHECKING:
    from flickshelf.state.models import Server


class DurationIndex:
    """Memoized total runtime for every node of one server.

    The graph never changes after decoding, so each node is computed at most
    once. A reload builds a new Server and with it a fresh index.
    """

    def __init__(self, server: Server) -> None:
        self._server = server
        # id -> (node, total); the node is kept so its id cannot be reused
        self._cache: dict[int, tuple[object, int]] = {}

    def __len__(self) -> int:
        return len(self._cache)

    def duration(self, item: object) -> int:
        """Get the total runtime of a node in milliseconds.

        Args:
            item: A video, season, show, collection, playlist, library or the
                server itself.

        Returns:
            Runtime in milliseconds. Dangling references contribute 0.

        Raises:
            TypeError: If the item is not part of the media graph.
        """
        cached = self._cache.get(id(item))
        if cached is not None and cached[0] is item:
            return cached[1]

        total = self._compute(item)
        self._cache[id(item)] = (item, total)
        return total

    def _compute(self, item: object) -> int:
        from flickshelf.state.models import Server

        server = self._server

        if isinstance(item, (Episode, Movie)):
            return item.total_duration
        if isinstance(item, Season):
            return sum(self.duration(episode) for episode in item.episodes)
        if isinstance(item, Show):
            return sum(self.duration(season) for season in item.seasons)
        if isinstance(item, (ShowCollection, MovieCollection)):
            return sum(self.duration(entry) for entry in server.collection_contents(item))
        if isinstance(item, Playlist):
            total = 0
            for video_id in item.video_ids:
                video = server.video(video_id)
                if video is not None:
                    total += self.duration(video)
            return total
        if isinstance(item, ShowLibrary):
            return sum(self.duration(show) for show in item.shows)
        if isinstance(item, MovieLibrary):
            return sum(self.duration(movie) for movie in item.movies)
        if isinstance(item, Server):
            return sum(self.duration(library) for library in item.libraries)

        raise TypeError(f"Cannot compute a duration for {type(item).__name__}")
