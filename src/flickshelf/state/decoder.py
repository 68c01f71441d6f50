"""Snapshot decoding.

Turns the raw JSON snapshot into a validated, cross-linked MediaState.
Decoding is all-or-nothing: any problem raises DecodeError and no partial
graph is returned.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import ValidationError

from flickshelf.errors import DecodeError
from flickshelf.state.models import (
    Episode,
    InProgress,
    MediaState,
    Movie,
    MovieCollection,
    MovieLibrary,
    Playlist,
    Season,
    Server,
    Show,
    ShowCollection,
    ShowLibrary,
)
from flickshelf.state.snapshot import (
    SNAPSHOT_ADAPTER,
    SnapshotEpisode,
    SnapshotLibrary,
    SnapshotMovie,
    SnapshotServer,
)

logger = logging.getLogger(__name__)


def decode(raw: Any) -> MediaState:
    """Decode a parsed snapshot into a MediaState.

    Args:
        raw: The JSON value read from the snapshot file.

    Returns:
        The fully resolved media state.

    Raises:
        DecodeError: If a field is missing or malformed, or a reference
            cannot be resolved.
    """
    if not isinstance(raw, dict):
        raise DecodeError("$", "expected an object mapping server ids to servers")

    try:
        wire = SNAPSHOT_ADAPTER.validate_python(raw)
    except ValidationError as e:
        raise _validation_to_decode_error(e) from e

    servers = {
        server_id: _ServerDecoder(server_id, wire_server).decode()
        for server_id, wire_server in wire.items()
    }
    logger.debug("Decoded snapshot with %d server(s)", len(servers))
    return MediaState(servers=servers)


def decode_bytes(data: bytes | str) -> MediaState:
    """Parse snapshot JSON and decode it.

    Raises:
        DecodeError: If the data is not valid JSON or does not decode.
    """
    try:
        raw = json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DecodeError("$", f"invalid JSON: {e}") from e
    except RecursionError as e:
        raise DecodeError("$", "nesting too deep") from e
    return decode(raw)


def _validation_to_decode_error(error: ValidationError) -> DecodeError:
    """Convert the first pydantic error into a DecodeError."""
    first = error.errors()[0]
    field = ".".join(str(part) for part in first["loc"]) or "$"
    return DecodeError(field, first["msg"])


class _ServerDecoder:
    """Builds one Server bottom-up from its wire description."""

    def __init__(self, server_id: str, wire: SnapshotServer) -> None:
        self.server_id = server_id
        self.wire = wire
        # content id -> owning library id
        self._owners: dict[str, str] = {}

    def decode(self) -> Server:
        episodes, movies = self._decode_videos()
        seasons = self._decode_seasons(episodes)
        self._assign_owners()
        shows = self._decode_shows(seasons)
        libraries = [
            self._decode_library(library_id, wire_library, shows, movies)
            for library_id, wire_library in self.wire.libraries.items()
        ]
        playlists = self._decode_playlists()

        server = Server(
            id=self.server_id,
            name=self.wire.name or self.server_id,
            libraries=libraries,
            playlists=playlists,
        )
        logger.debug(
            "Server %s: %d libraries, %d shows, %d videos, %d playlists",
            self.server_id,
            len(libraries),
            len(shows),
            len(self.wire.videos),
            len(playlists),
        )
        return server

    # Videos

    def _decode_videos(self) -> tuple[dict[str, Episode], dict[str, Movie]]:
        episodes: dict[str, Episode] = {}
        movies: dict[str, Movie] = {}

        for video_id, entry in self.wire.videos.items():
            common = {
                "id": video_id,
                "title": entry.title,
                "thumbnail": entry.thumbnail,
                "air_date": entry.air_date,
                "parts": entry.parts,
                "playback_state": entry.playback_state,
            }
            if isinstance(entry, SnapshotEpisode):
                video: Episode | Movie = Episode(
                    season_id=entry.season, index=entry.index, **common
                )
                episodes[video_id] = video
            else:
                video = Movie(year=entry.year, **common)
                movies[video_id] = video

            # Any stored total is ignored; the parts are the source of truth
            state = video.playback_state
            if isinstance(state, InProgress) and state.position >= video.total_duration:
                raise DecodeError(video_id, "position out of range")

        return episodes, movies

    # Shows

    def _decode_seasons(self, episodes: dict[str, Episode]) -> dict[str, Season]:
        by_season: dict[str, list[Episode]] = {}
        for episode in episodes.values():
            if episode.season_id not in self.wire.seasons:
                raise DecodeError(episode.season_id, "unresolved")
            by_season.setdefault(episode.season_id, []).append(episode)

        seasons: dict[str, Season] = {}
        for season_id, wire_season in self.wire.seasons.items():
            if wire_season.show not in self.wire.shows:
                raise DecodeError(wire_season.show, "unresolved")
            season_episodes = sorted(by_season.get(season_id, []), key=lambda e: e.index)
            seasons[season_id] = Season(
                id=season_id,
                index=wire_season.index,
                title=wire_season.title or f"Season {wire_season.index}",
                show_id=wire_season.show,
                episodes=season_episodes,
            )
        return seasons

    def _decode_shows(self, seasons: dict[str, Season]) -> dict[str, Show]:
        by_show: dict[str, list[Season]] = {}
        for season in seasons.values():
            show_seasons = by_show.setdefault(season.show_id, [])
            if any(other.index == season.index for other in show_seasons):
                raise DecodeError(season.id, "duplicate season index")
            show_seasons.append(season)

        shows: dict[str, Show] = {}
        for show_id, wire_show in self.wire.shows.items():
            shows[show_id] = Show(
                id=show_id,
                title=wire_show.title,
                library_id=self._owners[show_id],
                thumbnail=wire_show.thumbnail,
                seasons=sorted(by_show.get(show_id, []), key=lambda s: s.index),
            )
        return shows

    # Libraries

    def _assign_owners(self) -> None:
        """Record which library owns each show and movie."""
        for library_id, wire_library in self.wire.libraries.items():
            for content_id in wire_library.contents:
                self._check_kind(content_id, wire_library.kind)
                if content_id in self._owners:
                    raise DecodeError(content_id, "duplicate owner")
                self._owners[content_id] = library_id

        for show_id in self.wire.shows:
            if show_id not in self._owners:
                raise DecodeError(show_id, "unowned")
        for video_id, entry in self.wire.videos.items():
            if isinstance(entry, SnapshotMovie) and video_id not in self._owners:
                raise DecodeError(video_id, "unowned")

    def _check_kind(self, content_id: str, kind: str) -> None:
        """Check a referenced id exists and is a show or movie as required."""
        is_show = content_id in self.wire.shows
        is_movie = isinstance(self.wire.videos.get(content_id), SnapshotMovie)

        if not is_show and content_id not in self.wire.videos:
            raise DecodeError(content_id, "unresolved")
        if kind == "show" and not is_show:
            raise DecodeError(content_id, "expected show")
        if kind == "movie" and not is_movie:
            raise DecodeError(content_id, "expected movie")

    def _decode_library(
        self,
        library_id: str,
        wire_library: SnapshotLibrary,
        shows: dict[str, Show],
        movies: dict[str, Movie],
    ) -> ShowLibrary | MovieLibrary:
        title = wire_library.title or library_id

        if wire_library.kind == "show":
            show_collections = []
            for collection_id, wire_collection in wire_library.collections.items():
                for content_id in wire_collection.contents:
                    self._check_kind(content_id, "show")
                show_collections.append(
                    ShowCollection(
                        id=collection_id,
                        title=wire_collection.title,
                        library_id=library_id,
                        thumbnail=wire_collection.thumbnail,
                        content_ids=list(wire_collection.contents),
                    )
                )
            return ShowLibrary(
                id=library_id,
                title=title,
                shows=[shows[show_id] for show_id in wire_library.contents],
                collections=show_collections,
            )

        movie_collections = []
        for collection_id, wire_collection in wire_library.collections.items():
            for content_id in wire_collection.contents:
                self._check_kind(content_id, "movie")
            movie_collections.append(
                MovieCollection(
                    id=collection_id,
                    title=wire_collection.title,
                    library_id=library_id,
                    thumbnail=wire_collection.thumbnail,
                    content_ids=list(wire_collection.contents),
                )
            )
        return MovieLibrary(
            id=library_id,
            title=title,
            movies=[movies[movie_id] for movie_id in wire_library.contents],
            collections=movie_collections,
        )

    # Playlists

    def _decode_playlists(self) -> list[Playlist]:
        playlists = []
        for playlist_id, wire_playlist in self.wire.playlists.items():
            missing = [v for v in wire_playlist.videos if v not in self.wire.videos]
            if missing:
                logger.warning(
                    "Playlist %s references %d unknown video(s): %s",
                    playlist_id,
                    len(missing),
                    ", ".join(missing),
                )
            playlists.append(
                Playlist(
                    id=playlist_id,
                    title=wire_playlist.title,
                    video_ids=list(wire_playlist.videos),
                )
            )
        return playlists
