"""Wire schema of the snapshot file written by the downloader.

The snapshot is a flat, id-keyed description of each server. Field names are
camelCase and are an external contract with the snapshot producer, so these
models only describe shape; cross references are resolved by the decoder.

Example:
    ```json
    {
        "s1": {
            "name": "Home",
            "libraries": {
                "l1": {"title": "Movies", "kind": "movie", "contents": ["m1"]}
            },
            "videos": {
                "m1": {
                    "type": "movie",
                    "title": "Heat",
                    "parts": [{"duration": 3000, "download": {"state": "pending"}}]
                }
            }
        }
    }
    ```
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel

from flickshelf.state.models import (
    Part,
    PendingThumbnail,
    PlaybackState,
    Thumbnail,
    Unplayed,
)

# Name of the snapshot file inside a store
STATE_FILE = ".flicksync.state.json"


class SnapshotModel(BaseModel):
    """Base for wire models: camelCase aliases, unknown fields ignored."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class SnapshotVideo(SnapshotModel):
    """Fields shared by both kinds of video on the wire."""

    title: str
    thumbnail: Thumbnail = Field(default_factory=PendingThumbnail)
    air_date: str | None = None
    parts: list[Part] = Field(min_length=1)
    playback_state: PlaybackState = Field(default_factory=Unplayed)


class SnapshotMovie(SnapshotVideo):
    type: Literal["movie"] = "movie"
    year: int | None = None


class SnapshotEpisode(SnapshotVideo):
    type: Literal["episode"] = "episode"
    season: str
    index: int


SnapshotVideoEntry = Annotated[
    Union[SnapshotMovie, SnapshotEpisode],
    Field(discriminator="type"),
]


class SnapshotSeason(SnapshotModel):
    show: str
    index: int
    title: str | None = None


class SnapshotShow(SnapshotModel):
    title: str
    thumbnail: Thumbnail = Field(default_factory=PendingThumbnail)


class SnapshotCollection(SnapshotModel):
    title: str
    thumbnail: Thumbnail = Field(default_factory=PendingThumbnail)
    contents: list[str] = Field(default_factory=list)


class SnapshotLibrary(SnapshotModel):
    kind: Literal["show", "movie"]
    title: str | None = None
    contents: list[str] = Field(default_factory=list)
    collections: dict[str, SnapshotCollection] = Field(default_factory=dict)


class SnapshotPlaylist(SnapshotModel):
    title: str
    videos: list[str] = Field(default_factory=list)


class SnapshotServer(SnapshotModel):
    """Everything synced from one server."""

    name: str | None = None
    libraries: dict[str, SnapshotLibrary] = Field(default_factory=dict)
    shows: dict[str, SnapshotShow] = Field(default_factory=dict)
    seasons: dict[str, SnapshotSeason] = Field(default_factory=dict)
    videos: dict[str, SnapshotVideoEntry] = Field(default_factory=dict)
    playlists: dict[str, SnapshotPlaylist] = Field(default_factory=dict)


# Top level of the snapshot: server id -> server
SNAPSHOT_ADAPTER: TypeAdapter[dict[str, SnapshotServer]] = TypeAdapter(dict[str, SnapshotServer])
