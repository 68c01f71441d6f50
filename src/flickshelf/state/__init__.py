"""Media state graph: models, snapshot decoding and encoding."""

from flickshelf.state.decoder import decode, decode_bytes
from flickshelf.state.durations import DurationIndex
from flickshelf.state.encoder import encode, encode_bytes
from flickshelf.state.models import (
    ActiveDownload,
    BaseVideo,
    CompletedDownload,
    DownloadedThumbnail,
    Episode,
    FailedDownload,
    FailedThumbnail,
    InProgress,
    MediaState,
    Movie,
    MovieCollection,
    MovieLibrary,
    Part,
    PendingDownload,
    PendingThumbnail,
    Played,
    Playlist,
    Season,
    Server,
    Show,
    ShowCollection,
    ShowLibrary,
    Unplayed,
)
from flickshelf.state.snapshot import STATE_FILE

__all__ = [
    # Decoding
    "decode",
    "decode_bytes",
    "encode",
    "encode_bytes",
    "STATE_FILE",
    "DurationIndex",
    # Graph
    "MediaState",
    "Server",
    "ShowLibrary",
    "MovieLibrary",
    "ShowCollection",
    "MovieCollection",
    "Show",
    "Season",
    "BaseVideo",
    "Episode",
    "Movie",
    "Part",
    "Playlist",
    # Tagged states
    "PendingDownload",
    "ActiveDownload",
    "CompletedDownload",
    "FailedDownload",
    "PendingThumbnail",
    "DownloadedThumbnail",
    "FailedThumbnail",
    "Unplayed",
    "InProgress",
    "Played",
]
