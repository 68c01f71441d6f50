"""Shared fixtures: a small but complete library snapshot."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from flickshelf.state import STATE_FILE, decode
from flickshelf.state.models import MediaState, Server


def _downloaded(path: str) -> dict[str, str]:
    return {"state": "downloaded", "path": path}


def build_snapshot() -> dict[str, Any]:
    """One server with a movie library, a show library and a playlist.

    Durations: movies 7000 + 5000 + 6000, season 1 3000, season 2 1500.
    """
    return {
        "s1": {
            "name": "Home",
            "libraries": {
                "movies": {
                    "title": "Movies",
                    "kind": "movie",
                    "contents": ["m1", "m2", "m3"],
                    "collections": {
                        "c1": {"title": "Heist Films", "contents": ["m1", "m3"]},
                    },
                },
                "tv": {"title": "TV", "kind": "show", "contents": ["sh1"]},
            },
            "shows": {
                "sh1": {"title": "The Wire", "thumbnail": _downloaded("thumbs/sh1.jpg")},
            },
            "seasons": {
                "se2": {"show": "sh1", "index": 2},
                "se1": {"show": "sh1", "index": 1, "title": "Season One"},
            },
            "videos": {
                "m1": {
                    "type": "movie",
                    "title": "Heat",
                    "year": 1995,
                    "airDate": "1995-12-15",
                    "thumbnail": _downloaded("thumbs/m1.jpg"),
                    "parts": [
                        {"duration": 3000, "download": _downloaded("movies/heat-1.mkv")},
                        {"duration": 4000, "download": _downloaded("movies/heat-2.mkv")},
                    ],
                    "playbackState": {"state": "inprogress", "position": 1200},
                },
                "m2": {
                    "type": "movie",
                    "title": "alien",
                    "parts": [{"duration": 5000, "download": {"state": "pending"}}],
                },
                "m3": {
                    "type": "movie",
                    "title": "Baby Driver",
                    "airDate": "2017-06-28",
                    "parts": [{"duration": 6000, "download": _downloaded("movies/baby.mkv")}],
                    "playbackState": {"state": "played"},
                },
                "e1": {
                    "type": "episode",
                    "title": "The Detail",
                    "season": "se1",
                    "index": 2,
                    "airDate": "2002-06-09",
                    "parts": [{"duration": 1000, "download": _downloaded("tv/e1.mkv")}],
                },
                "e2": {
                    "type": "episode",
                    "title": "The Target",
                    "season": "se1",
                    "index": 1,
                    "airDate": "2002-06-02",
                    "parts": [{"duration": 2000, "download": _downloaded("tv/e2.mkv")}],
                },
                "e3": {
                    "type": "episode",
                    "title": "Ebb Tide",
                    "season": "se2",
                    "index": 1,
                    "airDate": "2003-06-01",
                    "parts": [
                        {"duration": 1500, "download": {"state": "failed", "reason": "disk full"}}
                    ],
                },
            },
            "playlists": {
                "p1": {"title": "Queue", "videos": ["e3", "m1", "gone"]},
            },
        }
    }


STORE_FILES = [
    "movies/heat-1.mkv",
    "movies/heat-2.mkv",
    "movies/baby.mkv",
    "tv/e1.mkv",
    "tv/e2.mkv",
    "thumbs/sh1.jpg",
    "thumbs/m1.jpg",
]


@pytest.fixture
def snapshot() -> dict[str, Any]:
    """A fresh copy of the sample snapshot."""
    return build_snapshot()


@pytest.fixture
def state(snapshot: dict[str, Any]) -> MediaState:
    return decode(snapshot)


@pytest.fixture
def server(state: MediaState) -> Server:
    result = state.server("s1")
    assert result is not None
    return result


@pytest.fixture
def store_dir(tmp_path: Path, snapshot: dict[str, Any]) -> Path:
    """A store directory holding the snapshot and every downloaded file."""
    (tmp_path / STATE_FILE).write_text(json.dumps(snapshot), encoding="utf-8")
    for relative in STORE_FILES:
        target = tmp_path / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(b"\x00")
    return tmp_path
