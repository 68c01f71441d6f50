"""Display order for lists of sibling items.

Each browsable list has a persisted ListSetting (display mode plus ordering
key) supplied by the settings store. Only the ordering key matters here;
how a grid or list is drawn is up to the caller.
"""

from __future__ import annotations

import locale
import unicodedata
from collections.abc import Sequence
from enum import Enum, auto
from functools import cmp_to_key
from typing import TypeVar

from pydantic import BaseModel

from flickshelf.state.models import BaseVideo

T = TypeVar("T")


class Display(str, Enum):
    """How a list is presented."""

    GRID = "grid"
    LIST = "list"


class Ordering(str, Enum):
    """Sort key for a list."""

    INDEX = "index"
    TITLE = "title"
    AIRDATE = "airdate"


class ListType(Enum):
    """Kind of items a list shows, used to pick a default setting."""

    COLLECTION = auto()
    PLAYLIST = auto()
    MOVIE = auto()
    EPISODE = auto()
    SHOW = auto()
    PLAYLIST_ITEM = auto()


class ListSetting(BaseModel):
    """Persisted preference for one list."""

    display: Display
    ordering: Ordering


def default_setting(list_type: ListType) -> ListSetting:
    """Get the setting used when none has been saved for a list.

    Episodes read best as a list in broadcast order and playlists keep their
    own order; everything else is a poster grid sorted by title.
    """
    if list_type == ListType.EPISODE:
        return ListSetting(display=Display.LIST, ordering=Ordering.AIRDATE)
    if list_type == ListType.PLAYLIST_ITEM:
        return ListSetting(display=Display.LIST, ordering=Ordering.INDEX)
    return ListSetting(display=Display.GRID, ordering=Ordering.TITLE)


def _fold(title: str) -> str:
    """Case-fold a title and strip accents so "Émile" sorts beside "Eve"."""
    decomposed = unicodedata.normalize("NFKD", title.casefold())
    return "".join(c for c in decomposed if not unicodedata.combining(c))


def _title_key(item: object) -> str:
    return locale.strxfrm(_fold(getattr(item, "title")))


def _compare(a: object, b: object) -> int:
    return (a > b) - (a < b)  # type: ignore[operator]


def _compare_air_date(a: object, b: object) -> int:
    """Compare by air date when both items have one, otherwise by title."""
    a_date = a.air_date if isinstance(a, BaseVideo) else None
    b_date = b.air_date if isinstance(b, BaseVideo) else None
    if a_date is not None and b_date is not None:
        return _compare(a_date, b_date)
    return _compare(_title_key(a), _title_key(b))


def order(items: Sequence[T], ordering: Ordering) -> list[T]:
    """Sort a list of sibling items for display.

    Sorting is stable and the input is never modified.

    Args:
        items: Videos, shows, seasons, collections or playlists.
        ordering: The key to sort by.

    Returns:
        A new list in display order.
    """
    if ordering == Ordering.INDEX:
        return list(items)
    if ordering == Ordering.TITLE:
        return sorted(items, key=_title_key)
    if ordering == Ordering.AIRDATE:
        return sorted(items, key=cmp_to_key(_compare_air_date))
    raise ValueError(f"Unknown ordering: {ordering!r}")
