"""Snapshot encoding.

The inverse of the decoder: flattens a MediaState back into the snapshot
shape so playback state can be written back for the downloader.
"""

from __future__ import annotations

import json
from typing import Any

from flickshelf.state.models import Episode, MediaState, Movie, Server, ShowLibrary
from flickshelf.state.snapshot import (
    SnapshotCollection,
    SnapshotEpisode,
    SnapshotLibrary,
    SnapshotMovie,
    SnapshotPlaylist,
    SnapshotSeason,
    SnapshotServer,
    SnapshotShow,
)


def encode(state: MediaState) -> dict[str, Any]:
    """Encode a media state as a JSON-compatible snapshot.

    Args:
        state: The state to encode.

    Returns:
        Dict mapping server id to the server's snapshot object.
    """
    return {server_id: _encode_server(server) for server_id, server in state.servers.items()}


def encode_bytes(state: MediaState, indent: int | None = 2) -> bytes:
    """Encode a media state as UTF-8 JSON."""
    return json.dumps(encode(state), indent=indent).encode("utf-8")


def _encode_video(video: Episode | Movie) -> SnapshotEpisode | SnapshotMovie:
    common = {
        "title": video.title,
        "thumbnail": video.thumbnail,
        "air_date": video.air_date,
        "parts": video.parts,
        "playback_state": video.playback_state,
    }
    if isinstance(video, Episode):
        return SnapshotEpisode(season=video.season_id, index=video.index, **common)
    return SnapshotMovie(year=video.year, **common)


def _encode_server(server: Server) -> dict[str, Any]:
    wire = SnapshotServer(name=server.name)

    for library in server.libraries:
        if isinstance(library, ShowLibrary):
            contents = [show.id for show in library.shows]
            for show in library.shows:
                wire.shows[show.id] = SnapshotShow(title=show.title, thumbnail=show.thumbnail)
                for season in show.seasons:
                    wire.seasons[season.id] = SnapshotSeason(
                        show=show.id, index=season.index, title=season.title
                    )
                    for episode in season.episodes:
                        wire.videos[episode.id] = _encode_video(episode)
        else:
            contents = [movie.id for movie in library.movies]
            for movie in library.movies:
                wire.videos[movie.id] = _encode_video(movie)

        wire.libraries[library.id] = SnapshotLibrary(
            kind=library.kind,
            title=library.title,
            contents=contents,
            collections={
                collection.id: SnapshotCollection(
                    title=collection.title,
                    thumbnail=collection.thumbnail,
                    contents=list(collection.content_ids),
                )
                for collection in library.collections
            },
        )

    for playlist in server.playlists:
        wire.playlists[playlist.id] = SnapshotPlaylist(
            title=playlist.title, videos=list(playlist.video_ids)
        )

    return wire.model_dump(mode="json", by_alias=True, exclude_none=True)
