"""Data models for the media state graph.

The graph is a tree of owned nodes (server -> library -> show -> season ->
episode, library -> movie) plus id-based cross references (collection
contents, playlist entries, season/episode back references). Cross references
are resolved against the owning Server and never participate in ownership.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING, Annotated, Literal, Union

from pydantic import BaseModel, Field, NonNegativeInt, PrivateAttr

if TYPE_CHECKING:
    from flickshelf.state.durations import DurationIndex


# ============================================================================
# Downloads and thumbnails
# ============================================================================


class PendingDownload(BaseModel):
    """A part that has not started downloading."""

    state: Literal["pending"] = "pending"


class ActiveDownload(BaseModel):
    """A part that is currently downloading."""

    state: Literal["downloading"] = "downloading"
    progress: float = Field(default=0.0, ge=0.0)


class CompletedDownload(BaseModel):
    """A part whose file is available in the store."""

    state: Literal["downloaded"] = "downloaded"
    path: str


class FailedDownload(BaseModel):
    """A part whose download failed."""

    state: Literal["failed"] = "failed"
    reason: str = ""


Download = Annotated[
    Union[PendingDownload, ActiveDownload, CompletedDownload, FailedDownload],
    Field(discriminator="state"),
]


class PendingThumbnail(BaseModel):
    """A thumbnail that has not been fetched."""

    state: Literal["pending"] = "pending"


class DownloadedThumbnail(BaseModel):
    """A thumbnail image available in the store."""

    state: Literal["downloaded"] = "downloaded"
    path: str


class FailedThumbnail(BaseModel):
    """A thumbnail that could not be fetched."""

    state: Literal["failed"] = "failed"
    reason: str = ""


Thumbnail = Annotated[
    Union[PendingThumbnail, DownloadedThumbnail, FailedThumbnail],
    Field(discriminator="state"),
]


# ============================================================================
# Playback state
# ============================================================================


class Unplayed(BaseModel):
    """The video has never been started."""

    state: Literal["unplayed"] = "unplayed"


class InProgress(BaseModel):
    """The video was stopped part way through."""

    state: Literal["inprogress"] = "inprogress"
    position: NonNegativeInt  # Milliseconds into the video's global timeline


class Played(BaseModel):
    """The video has been watched to the end."""

    state: Literal["played"] = "played"


PlaybackState = Annotated[
    Union[Unplayed, InProgress, Played],
    Field(discriminator="state"),
]


# ============================================================================
# Videos
# ============================================================================


class Part(BaseModel):
    """One independently downloaded segment of a video."""

    duration: NonNegativeInt  # Milliseconds
    download: Download = Field(default_factory=PendingDownload)

    @property
    def is_downloaded(self) -> bool:
        """Check if this part can be played."""
        return isinstance(self.download, CompletedDownload)

    @property
    def path(self) -> str | None:
        """Get the store-relative path of the downloaded file."""
        if isinstance(self.download, CompletedDownload):
            return self.download.path
        return None


class BaseVideo(BaseModel):
    """Fields shared by episodes and movies."""

    id: str
    title: str
    thumbnail: Thumbnail = Field(default_factory=PendingThumbnail)
    air_date: str | None = None  # ISO format, compares correctly as a string
    parts: list[Part] = Field(min_length=1)
    playback_state: PlaybackState = Field(default_factory=Unplayed)

    @property
    def part_durations(self) -> list[int]:
        """Get the duration of each part in order."""
        return [part.duration for part in self.parts]

    @property
    def total_duration(self) -> int:
        """Total runtime in milliseconds (always the sum of the parts)."""
        return sum(part.duration for part in self.parts)

    @property
    def is_playable(self) -> bool:
        """Check if every part has been downloaded."""
        return all(part.is_downloaded for part in self.parts)

    @property
    def play_position(self) -> int:
        """Get the current position in the global timeline."""
        state = self.playback_state
        if isinstance(state, InProgress):
            return state.position
        if isinstance(state, Played):
            return self.total_duration
        return 0

    @property
    def percent_complete(self) -> float:
        """Percentage of the video that has been watched."""
        total = self.total_duration
        if total == 0:
            return 100.0 if isinstance(self.playback_state, Played) else 0.0
        return (self.play_position / total) * 100


class Episode(BaseVideo):
    """A TV episode, owned by a season."""

    kind: Literal["episode"] = "episode"
    season_id: str
    index: int


class Movie(BaseVideo):
    """A movie, owned by a movie library."""

    kind: Literal["movie"] = "movie"
    year: int | None = None


Video = Annotated[Union[Episode, Movie], Field(discriminator="kind")]


# ============================================================================
# Shows
# ============================================================================


class Season(BaseModel):
    """A season of a show."""

    id: str
    index: int
    title: str
    show_id: str
    episodes: list[Episode] = Field(default_factory=list)


class Show(BaseModel):
    """A TV show, owned by a show library."""

    id: str
    title: str
    library_id: str
    thumbnail: Thumbnail = Field(default_factory=PendingThumbnail)
    seasons: list[Season] = Field(default_factory=list)

    @property
    def episode_count(self) -> int:
        """Total number of episodes across all seasons."""
        return sum(len(season.episodes) for season in self.seasons)


# ============================================================================
# Collections, libraries, playlists
# ============================================================================


class ShowCollection(BaseModel):
    """A collection of shows. Contents are references, not owned."""

    kind: Literal["show"] = "show"
    id: str
    title: str
    library_id: str
    thumbnail: Thumbnail = Field(default_factory=PendingThumbnail)
    content_ids: list[str] = Field(default_factory=list)


class MovieCollection(BaseModel):
    """A collection of movies. Contents are references, not owned."""

    kind: Literal["movie"] = "movie"
    id: str
    title: str
    library_id: str
    thumbnail: Thumbnail = Field(default_factory=PendingThumbnail)
    content_ids: list[str] = Field(default_factory=list)


Collection = Annotated[Union[ShowCollection, MovieCollection], Field(discriminator="kind")]


class ShowLibrary(BaseModel):
    """A library section containing shows."""

    kind: Literal["show"] = "show"
    id: str
    title: str
    shows: list[Show] = Field(default_factory=list)
    collections: list[ShowCollection] = Field(default_factory=list)


class MovieLibrary(BaseModel):
    """A library section containing movies."""

    kind: Literal["movie"] = "movie"
    id: str
    title: str
    movies: list[Movie] = Field(default_factory=list)
    collections: list[MovieCollection] = Field(default_factory=list)


Library = Annotated[Union[ShowLibrary, MovieLibrary], Field(discriminator="kind")]


class Playlist(BaseModel):
    """An ordered list of video references.

    Entries may point at videos that no longer exist; those are skipped.
    """

    id: str
    title: str
    video_ids: list[str] = Field(default_factory=list)


# Anything that can appear in a browsable list.
ListItem = Union[Episode, Movie, Show, Season, ShowCollection, MovieCollection, Playlist]


# ============================================================================
# Server and whole state
# ============================================================================


class Server(BaseModel):
    """A media server and everything synced from it."""

    id: str
    name: str
    libraries: list[Library] = Field(default_factory=list)
    playlists: list[Playlist] = Field(default_factory=list)

    _libraries: dict[str, ShowLibrary | MovieLibrary] = PrivateAttr(default_factory=dict)
    _shows: dict[str, Show] = PrivateAttr(default_factory=dict)
    _seasons: dict[str, Season] = PrivateAttr(default_factory=dict)
    _videos: dict[str, Episode | Movie] = PrivateAttr(default_factory=dict)
    _collections: dict[str, ShowCollection | MovieCollection] = PrivateAttr(
        default_factory=dict
    )
    _playlists: dict[str, Playlist] = PrivateAttr(default_factory=dict)
    _movie_libraries: dict[str, MovieLibrary] = PrivateAttr(default_factory=dict)
    _durations: DurationIndex | None = PrivateAttr(default=None)

    def model_post_init(self, __context: object) -> None:
        """Build the id lookup tables once the tree is constructed."""
        for library in self.libraries:
            self._libraries[library.id] = library
            for collection in library.collections:
                self._collections[collection.id] = collection
            if isinstance(library, ShowLibrary):
                for show in library.shows:
                    self._shows[show.id] = show
                    for season in show.seasons:
                        self._seasons[season.id] = season
                        for episode in season.episodes:
                            self._videos[episode.id] = episode
            else:
                for movie in library.movies:
                    self._videos[movie.id] = movie
                    self._movie_libraries[movie.id] = library
        for playlist in self.playlists:
            self._playlists[playlist.id] = playlist

    # Lookups by id. A missing id is absent, never an error.

    def library(self, library_id: str) -> ShowLibrary | MovieLibrary | None:
        return self._libraries.get(library_id)

    def show(self, show_id: str) -> Show | None:
        return self._shows.get(show_id)

    def season(self, season_id: str) -> Season | None:
        return self._seasons.get(season_id)

    def video(self, video_id: str) -> Episode | Movie | None:
        return self._videos.get(video_id)

    def collection(self, collection_id: str) -> ShowCollection | MovieCollection | None:
        return self._collections.get(collection_id)

    def playlist(self, playlist_id: str) -> Playlist | None:
        return self._playlists.get(playlist_id)

    # Back references

    def season_of(self, episode: Episode) -> Season | None:
        """Get the season that owns an episode."""
        return self._seasons.get(episode.season_id)

    def show_of(self, season: Season) -> Show | None:
        """Get the show that owns a season."""
        return self._shows.get(season.show_id)

    def library_of(
        self, item: Show | Movie | Episode | ShowCollection | MovieCollection
    ) -> ShowLibrary | MovieLibrary | None:
        """Get the library an item belongs to."""
        if isinstance(item, Episode):
            season = self.season_of(item)
            show = self.show_of(season) if season else None
            return self._libraries.get(show.library_id) if show else None
        if isinstance(item, Movie):
            return self._movie_libraries.get(item.id)
        return self._libraries.get(item.library_id)

    # Resolved cross references

    def collection_contents(self, collection: ShowCollection | MovieCollection) -> list:
        """Get the shows or movies in a collection, skipping dangling entries."""
        if isinstance(collection, ShowCollection):
            return [self._shows[i] for i in collection.content_ids if i in self._shows]
        movies = []
        for video_id in collection.content_ids:
            video = self._videos.get(video_id)
            if isinstance(video, Movie):
                movies.append(video)
        return movies

    def playlist_videos(self, playlist: Playlist) -> list[Episode | Movie]:
        """Get the videos in a playlist, skipping dangling entries."""
        return [self._videos[i] for i in playlist.video_ids if i in self._videos]

    def episodes(self, show: Show) -> list[Episode]:
        """Get every episode of a show in season then episode order."""
        return [episode for season in show.seasons for episode in season.episodes]

    def shows(self) -> list[Show]:
        """Get all shows across the server's libraries."""
        return list(self._shows.values())

    def movies(self) -> list[Movie]:
        """Get all movies across the server's libraries."""
        return [video for video in self._videos.values() if isinstance(video, Movie)]

    def videos(self) -> Iterator[Episode | Movie]:
        """Iterate over every video on the server."""
        return iter(self._videos.values())

    @property
    def durations(self) -> DurationIndex:
        """Get the memoized duration index for this server."""
        if self._durations is None:
            from flickshelf.state.durations import DurationIndex

            self._durations = DurationIndex(self)
        return self._durations

    def duration(self, item: ListItem | ShowLibrary | MovieLibrary | Server) -> int:
        """Get the total runtime of any node in milliseconds."""
        return self.durations.duration(item)


class MediaState(BaseModel):
    """The complete library graph decoded from a snapshot."""

    servers: dict[str, Server] = Field(default_factory=dict)

    @classmethod
    def empty(cls) -> MediaState:
        """Create a state with no servers."""
        return cls()

    @property
    def is_empty(self) -> bool:
        """Check if the state has no servers."""
        return not self.servers

    def server(self, server_id: str) -> Server | None:
        return self.servers.get(server_id)
