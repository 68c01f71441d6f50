"""Tests for list ordering and default list settings."""

from __future__ import annotations

from flickshelf.ordering import (
    Display,
    ListSetting,
    ListType,
    Ordering,
    default_setting,
    order,
)
from flickshelf.settings import ListSettings
from flickshelf.state.models import CompletedDownload, Movie, Part, Playlist, Server, Show


def _movie(movie_id: str, title: str, air_date: str | None = None) -> Movie:
    return Movie(
        id=movie_id,
        title=title,
        air_date=air_date,
        parts=[Part(duration=1000, download=CompletedDownload(path=f"{movie_id}.mkv"))],
    )


def _ids(items: list) -> list[str]:
    return [item.id for item in items]


class TestOrder:
    """Tests for sorting sibling items."""

    def test_index_keeps_input_order(self) -> None:
        """Test index keeps input order."""
        items = [_movie("a", "Zulu"), _movie("b", "Alpha")]
        assert _ids(order(items, Ordering.INDEX)) == ["a", "b"]

    def test_title(self) -> None:
        """Test sorting by title ignores case."""
        items = [_movie("a", "Zulu"), _movie("b", "alpha"), _movie("c", "Mike")]
        assert _ids(order(items, Ordering.TITLE)) == ["b", "c", "a"]

    def test_title_is_stable(self) -> None:
        """Test title is stable."""
        items = [_movie("a", "Same"), _movie("b", "Other"), _movie("c", "Same")]
        assert _ids(order(items, Ordering.TITLE)) == ["b", "a", "c"]

    def test_air_date(self) -> None:
        """Test sorting by air date."""
        items = [
            _movie("a", "A", "2010-01-01"),
            _movie("b", "B", "1999-05-05"),
            _movie("c", "C", "2005-03-03"),
        ]
        assert _ids(order(items, Ordering.AIRDATE)) == ["b", "c", "a"]

    def test_air_date_falls_back_to_title(self) -> None:
        """Test air date falls back to title."""
        items = [_movie("a", "Zulu"), _movie("b", "Alpha")]
        assert _ids(order(items, Ordering.AIRDATE)) == ["b", "a"]

    def test_air_date_for_items_without_dates(self) -> None:
        """Test air date for items without dates."""
        items = [
            Show(id="s1", title="Wire", library_id="tv"),
            Show(id="s2", title="Bosch", library_id="tv"),
        ]
        assert _ids(order(items, Ordering.AIRDATE)) == ["s2", "s1"]

    def test_does_not_mutate_input(self) -> None:
        """Test does not mutate input."""
        items = [_movie("a", "Zulu"), _movie("b", "Alpha")]
        result = order(items, Ordering.TITLE)
        assert _ids(items) == ["a", "b"]
        assert result is not items

    def test_index_returns_copy(self) -> None:
        """Test index returns copy."""
        items = [_movie("a", "A")]
        assert order(items, Ordering.INDEX) is not items

    def test_empty(self) -> None:
        """Test ordering an empty list."""
        assert order([], Ordering.AIRDATE) == []

    def test_playlists_by_title(self) -> None:
        """Test playlists by title."""
        items = [Playlist(id="p2", title="Later"), Playlist(id="p1", title="Favourites")]
        assert _ids(order(items, Ordering.TITLE)) == ["p1", "p2"]

    def test_episodes_by_air_date(self, server: Server) -> None:
        """Test episodes by air date."""
        show = server.show("sh1")
        assert show is not None
        episodes = list(reversed(server.episodes(show)))
        assert _ids(order(episodes, Ordering.AIRDATE)) == ["e2", "e1", "e3"]

    def test_accented_titles(self) -> None:
        """Test accented titles sort with their unaccented letters."""
        movies = [_movie("z", "Zed"), _movie("em", "\u00c9mile"), _movie("ev", "Eve")]
        assert _ids(order(movies, Ordering.TITLE)) == ["em", "ev", "z"]


class TestDefaultSetting:
    """Tests for settings used when a list has none saved."""

    def test_episodes(self) -> None:
        """Test episodes default to a list in air date order."""
        assert default_setting(ListType.EPISODE) == ListSetting(
            display=Display.LIST, ordering=Ordering.AIRDATE
        )

    def test_playlist_items(self) -> None:
        """Test playlist items default to their own order."""
        assert default_setting(ListType.PLAYLIST_ITEM) == ListSetting(
            display=Display.LIST, ordering=Ordering.INDEX
        )

    def test_everything_else(self) -> None:
        """Test other lists default to a grid sorted by title."""
        for list_type in (ListType.COLLECTION, ListType.PLAYLIST, ListType.MOVIE, ListType.SHOW):
            setting = default_setting(list_type)
            assert setting.display == Display.GRID
            assert setting.ordering == Ordering.TITLE


class TestListSettings:
    """Tests for saved list settings."""

    def test_saved_setting_wins(self) -> None:
        """Test saved setting wins."""
        saved = ListSetting(display=Display.LIST, ordering=Ordering.INDEX)
        settings = ListSettings({"movies": saved})
        assert settings.setting_for("movies", ListType.MOVIE) == saved
        assert settings.get("movies") == saved

    def test_default_when_missing(self) -> None:
        """Test default when missing."""
        settings = ListSettings()
        assert settings.get("movies") is None
        assert settings.setting_for("se1", ListType.EPISODE).ordering == Ordering.AIRDATE
        assert len(settings) == 0
